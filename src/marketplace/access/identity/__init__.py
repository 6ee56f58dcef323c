"""Identity provider registry."""

import os

_provider_instance = None


def get_identity_provider():
    """Return the configured identity provider (singleton).

    Uses the trusted-header adapter by default; select another one with the
    IDENTITY_PROVIDER environment variable.
    """
    global _provider_instance
    if _provider_instance is None:
        adapter = os.environ.get("IDENTITY_PROVIDER", "header")
        if adapter == "header":
            from marketplace.access.identity.header_adapter import TrustedHeaderIdentityProvider

            _provider_instance = TrustedHeaderIdentityProvider()
        else:
            raise ValueError(f"Unknown identity provider: {adapter}")
    return _provider_instance


def reset_identity_provider():
    """Reset the identity provider singleton (useful for testing)."""
    global _provider_instance
    _provider_instance = None
