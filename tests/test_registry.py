"""Tests for the built-in registry and metadata parsing."""

import pytest

from collection_filter.errors import MetadataError
from collection_filter.schema import load_metadata
from collection_filter.schema import must_get
from collection_filter.schema import parse_metadata
from collection_filter.schema import registry

VALID_METADATA = """
collections:
  - name: k8s/core/v1/pods
    resource: {group: "", version: v1, kind: Pod, plural: pods}
  - name: istio/synthetic/pods
    resource: {kind: Pod}
transforms:
  - name: synth
    inputs: [k8s/core/v1/pods]
    outputs: [istio/synthetic/pods]
"""


class TestParseMetadata:
    def test_parses_collections_and_transforms(self):
        metadata = parse_metadata(VALID_METADATA)

        assert metadata.collections.collection_names() == ["istio/synthetic/pods", "k8s/core/v1/pods"]
        assert metadata.kube_collections().collection_names() == ["k8s/core/v1/pods"]
        assert len(metadata.transforms) == 1
        assert metadata.transforms.required_inputs_for(["istio/synthetic/pods"]) == {"k8s/core/v1/pods"}

    def test_empty_document(self):
        metadata = parse_metadata("")
        assert len(metadata.collections) == 0
        assert len(metadata.transforms) == 0

    def test_invalid_yaml(self):
        with pytest.raises(MetadataError):
            parse_metadata("collections: [unclosed")

    def test_top_level_must_be_mapping(self):
        with pytest.raises(MetadataError):
            parse_metadata("- just\n- a list\n")

    def test_missing_kind(self):
        with pytest.raises(MetadataError, match="entry #0"):
            parse_metadata("collections:\n  - name: k8s/core/v1/pods\n    resource: {group: ''}\n")

    def test_invalid_name(self):
        with pytest.raises(MetadataError, match="invalid collection name"):
            parse_metadata("collections:\n  - name: 'bad name'\n    resource: {kind: Pod}\n")

    def test_duplicate_name(self):
        text = (
            "collections:\n"
            "  - name: k8s/core/v1/pods\n    resource: {kind: Pod}\n"
            "  - name: k8s/core/v1/pods\n    resource: {kind: Pod}\n"
        )
        with pytest.raises(MetadataError, match="already exists"):
            parse_metadata(text)

    def test_transform_must_be_mapping(self):
        with pytest.raises(MetadataError, match="transform entry #0"):
            parse_metadata("transforms:\n  - not-a-mapping\n")

    def test_transform_inputs_must_be_list(self):
        text = (
            "collections:\n"
            "  - name: k8s/core/v1/pods\n    resource: {kind: Pod}\n"
            "transforms:\n"
            "  - inputs: k8s/core/v1/pods\n    outputs: [istio/out]\n"
        )
        with pytest.raises(MetadataError, match="transform entry #0"):
            parse_metadata(text)

    def test_transform_outputs_must_be_list(self):
        text = "transforms:\n  - inputs: [k8s/core/v1/pods]\n    outputs: {name: istio/out}\n"
        with pytest.raises(MetadataError, match="transform entry #0"):
            parse_metadata(text)

    def test_unknown_transform_collection_warns(self, caplog):
        text = "transforms:\n  - inputs: [k8s/core/v1/ghosts]\n    outputs: []\n"
        with caplog.at_level("WARNING"):
            parse_metadata(text)
        assert "k8s/core/v1/ghosts" in caplog.text


class TestLoadMetadata:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "metadata.yaml"
        path.write_text(VALID_METADATA)
        assert len(load_metadata(path).collections) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(MetadataError, match="Cannot read"):
            load_metadata(tmp_path / "missing.yaml")


class TestBuiltinRegistry:
    def test_must_get_is_cached(self):
        assert must_get() is must_get()

    def test_reset_cache_reloads(self):
        first = must_get()
        registry.reset_cache()
        assert must_get() is not first

    def test_builtin_contains_service_discovery_kinds(self):
        kube = must_get().kube_collections()
        for kind in ["Service", "Namespace", "Node", "Pod", "Secret"]:
            assert kube.find_by_group_kind("", kind) is not None

    def test_builtin_transforms_reference_known_collections(self):
        metadata = must_get()
        known = set(metadata.collections.collection_names())
        assert metadata.transforms.inputs() <= known
        assert metadata.transforms.outputs() <= known

    def test_describe(self):
        summary = registry.describe(must_get())
        assert summary["collections"] >= summary["kube_collections"] > 0
        assert summary["transforms"] > 0
