"""Catalog adapter registry."""

import os

_catalog_instance = None


def get_catalog():
    """Return the configured catalog adapter (singleton).

    Reads the marketplace's own articles by default. Configure via the
    CATALOG_ADAPTER environment variable.
    """
    global _catalog_instance
    if _catalog_instance is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "domain")
        if adapter == "domain":
            from marketplace.catalogue.lookup.domain_adapter import DomainCatalog

            _catalog_instance = DomainCatalog()
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _catalog_instance


def reset_catalog():
    """Reset the catalog singleton (useful for testing)."""
    global _catalog_instance
    _catalog_instance = None
