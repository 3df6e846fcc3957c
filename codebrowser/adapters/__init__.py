"""Static registry of report adapters.

Usage:
    adapters = resolve(["checkstyle", "pmd"])   # raises UnknownAdapterError
    adapters = resolve()                        # every registered adapter
"""

from collections.abc import Iterable

from codebrowser.adapters.base import Adapter, ParseError, SchemaAdapter
from codebrowser.adapters.coverage import COVERAGE
from codebrowser.adapters.duplication import CPD
from codebrowser.adapters.lint import CHECKSTYLE, PADAWAN, PMD
from codebrowser.config import ConfigError

REGISTRY: dict[str, Adapter] = {
    adapter.name: adapter for adapter in (CHECKSTYLE, PMD, CPD, PADAWAN, COVERAGE)
}

DEFAULT_ADAPTERS: tuple[str, ...] = tuple(REGISTRY)

__all__ = [
    "Adapter",
    "DEFAULT_ADAPTERS",
    "ParseError",
    "REGISTRY",
    "SchemaAdapter",
    "UnknownAdapterError",
    "resolve",
]


class UnknownAdapterError(ConfigError):
    """Raised when an adapter name is not in the registry."""


def resolve(names: Iterable[str] | None = None) -> list[Adapter]:
    """Return registered adapters for *names*, in the given order.

    Every name is checked before any adapter is returned.
    """
    names = list(DEFAULT_ADAPTERS if names is None else names)
    unknown = [n for n in names if n not in REGISTRY]
    if unknown:
        available = ", ".join(REGISTRY)
        raise UnknownAdapterError(
            f"Unknown adapter(s): {', '.join(unknown)}. Available: {available}"
        )
    return [REGISTRY[n] for n in names]
