"""collection-filter: decide which configuration collections to watch."""
