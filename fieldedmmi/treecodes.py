"""Treecode resolution from a hierarchy index.

The index is a pipe-delimited text file, one record per line, keyed by its
first field. The tree code is the second field::

    Fever|C23.888.119.344
    Fever|C23.888.119.344.100
    Headache|C10.597.617.470|C23.888.592.612.441

Lookup is relaxed: keys are matched case-insensitively with surrounding
whitespace stripped. Several records may share a key; their codes are
returned in file order. Blank lines are skipped; every other line is a
record, including lines that start with "#".

Typical usage:
    ```python
    resolver = init_resolver(IndexConfig(path=Path("mesh_treecodes.txt")))
    resolver.resolve("Fever")  # ['C23.888.119.344', 'C23.888.119.344.100']
    ```
"""

from collections import OrderedDict
from pathlib import Path

from fieldedmmi.config import IndexConfig
from fieldedmmi.errors import IndexUnavailableError
from fieldedmmi.logging import setup_logging
from fieldedmmi.pipeline.interfaces import TreecodeResolverInterface

logger = setup_logging()


def _normalize_key(term: str) -> str:
    return term.lower().strip()


class TreecodeIndex:
    """Pipe-delimited hierarchy index held in memory.

    The file is read on first lookup, or up front via load(). A file that
    cannot be read raises IndexUnavailableError every time it is consulted;
    the index never falls back to an empty table.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._records: dict[str, list[str]] | None = None

    @property
    def loaded(self) -> bool:
        return self._records is not None

    def load(self) -> None:
        records: dict[str, list[str]] = {}
        try:
            with open(self.path, encoding="utf-8") as f:
                for line in f:
                    line = line.rstrip("\r\n")
                    if not line.strip():
                        continue
                    key = _normalize_key(line.split("|", 1)[0])
                    records.setdefault(key, []).append(line)
        except (OSError, UnicodeDecodeError) as e:
            raise IndexUnavailableError(str(self.path), str(e)) from e
        self._records = records
        logger.debug(f"Loaded {len(records)} treecode index keys from {self.path}")

    def lookup(self, term: str) -> list[str]:
        """Return the raw records whose key matches ``term``."""
        if self._records is None:
            self.load()
        return list(self._records.get(_normalize_key(term), ()))  # type: ignore[union-attr]

    def __len__(self) -> int:
        if self._records is None:
            self.load()
        return len(self._records)  # type: ignore[arg-type]


class IndexTreecodeResolver(TreecodeResolverInterface):
    """Resolve tree codes by extracting the second field of each index hit."""

    def __init__(self, index: TreecodeIndex):
        self.index = index

    def resolve(self, name: str) -> list[str]:
        treecodes: list[str] = []
        for hit in self.index.lookup(name):
            fields = hit.split("|")
            if len(fields) < 2:
                logger.warning(f"Skipping malformed treecode record for {name!r}: {hit!r}")
                continue
            treecodes.append(fields[1])
        return treecodes


class NullTreecodeResolver(TreecodeResolverInterface):
    """Resolver for runs without a hierarchy index; every name has no tree codes."""

    def resolve(self, name: str) -> list[str]:
        return []


class CachedTreecodeResolver(TreecodeResolverInterface):
    """LRU cache in front of another resolver.

    Failed lookups are not cached, so a transient index failure is retried on
    the next call for the same name.
    """

    def __init__(self, base_resolver: TreecodeResolverInterface, max_size: int = 10000):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.base_resolver = base_resolver
        self.max_size = max_size
        self._cache: OrderedDict[str, tuple[str, ...]] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def resolve(self, name: str) -> list[str]:
        key = _normalize_key(name)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self._hits += 1
            return list(cached)

        self._misses += 1
        treecodes = self.base_resolver.resolve(name)
        self._cache[key] = tuple(treecodes)
        if len(self._cache) > self.max_size:
            self._cache.popitem(last=False)
            self._evictions += 1
        return list(treecodes)

    def clear(self) -> None:
        self._cache.clear()

    def get_stats(self) -> dict[str, int]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._cache),
            "evictions": self._evictions,
        }


def init_resolver(config: IndexConfig) -> TreecodeResolverInterface:
    """Build the treecode resolver described by ``config``.

    Call once before rendering and share the returned handle; nothing is
    stored globally.

    Raises:
        IndexUnavailableError: If ``config.preload`` is set and the index
            file cannot be read.
    """
    if config.path is None:
        logger.info("No treecode index configured; treecodes will be empty")
        return NullTreecodeResolver()

    index = TreecodeIndex(config.path)
    if config.preload:
        index.load()
    resolver: TreecodeResolverInterface = IndexTreecodeResolver(index)
    if config.cache_size > 0:
        resolver = CachedTreecodeResolver(resolver, max_size=config.cache_size)
    return resolver
