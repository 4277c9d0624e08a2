"""Tests for transformer providers and upstream input resolution."""

import pytest
from pydantic import ValidationError

from collection_filter.transformer import Provider
from collection_filter.transformer import Providers


def _provider(inputs, outputs, name=""):
    return Provider(inputs=frozenset(inputs), outputs=frozenset(outputs), name=name)


class TestProvider:
    def test_from_dict(self):
        p = Provider.from_dict({"name": "direct", "inputs": ["k8s/a"], "outputs": ["istio/a"]})
        assert p.inputs == frozenset({"k8s/a"})
        assert p.outputs == frozenset({"istio/a"})
        assert p.name == "direct"

    def test_from_dict_missing_lists(self):
        p = Provider.from_dict({})
        assert p.inputs == frozenset()
        assert p.outputs == frozenset()

    def test_from_dict_rejects_string_inputs(self):
        with pytest.raises(ValidationError):
            Provider.from_dict({"inputs": "k8s/core/v1/pods", "outputs": ["istio/out"]})

    def test_to_dict_sorts_names(self):
        p = _provider(["b", "a"], ["c"], name="x")
        assert p.to_dict() == {"inputs": ["a", "b"], "outputs": ["c"], "name": "x"}


class TestRequiredInputsFor:
    def test_direct_inputs(self):
        providers = Providers([_provider(["k8s/a"], ["istio/a"]), _provider(["k8s/b"], ["istio/b"])])
        assert providers.required_inputs_for(["istio/a"]) == {"k8s/a"}

    def test_transitive_inputs(self):
        providers = Providers(
            [
                _provider(["mid"], ["out"]),
                _provider(["k8s/a", "k8s/b"], ["mid"]),
                _provider(["k8s/c"], ["unrelated"]),
            ]
        )
        assert providers.required_inputs_for(["out"]) == {"mid", "k8s/a", "k8s/b"}

    def test_multiple_providers_for_one_output(self):
        providers = Providers([_provider(["k8s/a"], ["out"]), _provider(["k8s/b"], ["out"])])
        assert providers.required_inputs_for(["out"]) == {"k8s/a", "k8s/b"}

    def test_cycle_terminates(self):
        providers = Providers([_provider(["a"], ["b"]), _provider(["b"], ["a"])])
        assert providers.required_inputs_for(["a"]) == {"a", "b"}

    def test_unknown_output_contributes_nothing(self):
        providers = Providers([_provider(["k8s/a"], ["istio/a"])])
        assert providers.required_inputs_for(["istio/unknown"]) == set()

    def test_empty_and_none_request(self):
        providers = Providers([_provider(["k8s/a"], ["istio/a"])])
        assert providers.required_inputs_for([]) == set()
        assert providers.required_inputs_for(None) == set()

    def test_accepts_generator(self):
        providers = Providers([_provider(["k8s/a"], ["istio/a"])])
        assert providers.required_inputs_for(n for n in ["istio/a"]) == {"k8s/a"}

    def test_inputs_and_outputs(self):
        providers = Providers([_provider(["a"], ["b"]), _provider(["c"], ["d", "e"])])
        assert providers.inputs() == {"a", "c"}
        assert providers.outputs() == {"b", "d", "e"}
