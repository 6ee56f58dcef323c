"""Identity provider port: resolves the caller behind an incoming request.

Authentication itself happens elsewhere; adapters only translate what the
gateway forwards into a ``Caller``.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from marketplace.access.roles import Caller


class IdentityProvider(ABC):
    @abstractmethod
    def resolve(self, headers: Mapping[str, str]) -> Caller:
        """Return the authenticated caller or raise ``Unauthenticated``."""
        ...
