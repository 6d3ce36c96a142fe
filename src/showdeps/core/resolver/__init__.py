"""Package resolvers: where package identities and imports come from."""

from showdeps.core.resolver.base import PackageResolver
from showdeps.core.resolver.golist import GoListResolver
from showdeps.core.resolver.manifest import ManifestResolver

__all__ = [
    "GoListResolver",
    "ManifestResolver",
    "PackageResolver",
]
