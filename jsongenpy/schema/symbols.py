"""Struct name -> definition hash map used to resolve nested struct fields."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Final

from jsongenpy.diagnostics import DuplicateNameError
from jsongenpy.schema.model import StructContainer

DEFAULT_BUCKET_COUNT: Final[int] = 128
DEFAULT_MAX_LOAD_FACTOR: Final[float] = 0.75

_HASH_SEED: Final[int] = 0xBC9F1D34
_HASH_MULTIPLIER: Final[int] = 0xC6A4A793
_MASK_32: Final[int] = 0xFFFFFFFF


def string_hash(name: str) -> int:
    """32-bit murmur-style hash of the UTF-8 bytes of `name`.

    Bit-compatible with json-gen-c's `hash()` on little-endian hosts.
    """
    data = name.encode("utf-8")
    length = len(data)
    h = (_HASH_SEED ^ (length * _HASH_MULTIPLIER)) & _MASK_32

    index = 0
    while index + 4 <= length:
        word = int.from_bytes(data[index : index + 4], "little")
        index += 4
        h = ((h + word) * _HASH_MULTIPLIER) & _MASK_32
        h ^= h >> 16

    remaining = length - index
    if remaining >= 3:
        h = (h + (data[index + 2] << 16)) & _MASK_32
    if remaining >= 2:
        h = (h + (data[index + 1] << 8)) & _MASK_32
    if remaining >= 1:
        h = ((h + data[index]) * _HASH_MULTIPLIER) & _MASK_32
        h ^= h >> 24
    return h


class SymbolTable:
    """Bucketed hash map with chaining from struct name to its container.

    Entries are never overwritten or removed. When `max_load_factor` is set
    the bucket array doubles once `size / bucket_count` would exceed it;
    with `max_load_factor=None` the bucket count stays fixed and chains
    grow linearly with the number of entries.
    """

    def __init__(
        self,
        bucket_count: int = DEFAULT_BUCKET_COUNT,
        *,
        max_load_factor: float | None = DEFAULT_MAX_LOAD_FACTOR,
        hash_func: Callable[[str], int] = string_hash,
    ) -> None:
        if bucket_count < 1:
            raise ValueError("bucket_count must be >= 1")
        if max_load_factor is not None and max_load_factor <= 0:
            raise ValueError("max_load_factor must be positive")
        self._buckets: list[list[tuple[str, StructContainer]]] = [[] for _ in range(bucket_count)]
        self._size = 0
        self._max_load_factor = max_load_factor
        self._hash_func = hash_func
        self._resize_count = 0

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    @property
    def load_factor(self) -> float:
        return self._size / len(self._buckets)

    @property
    def max_load_factor(self) -> float | None:
        return self._max_load_factor

    @property
    def resize_count(self) -> int:
        return self._resize_count

    @property
    def max_chain_length(self) -> int:
        return max(len(bucket) for bucket in self._buckets)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[str]:
        for name, _ in self.items():
            yield name

    def items(self) -> Iterator[tuple[str, StructContainer]]:
        """Entries in bucket order (not declaration order)."""
        for bucket in self._buckets:
            yield from bucket

    def insert(self, name: str, container: StructContainer) -> None:
        bucket = self._bucket_for(name)
        for existing, _ in bucket:
            if existing == name:
                raise DuplicateNameError(name)

        if self._should_grow():
            self._grow()
            bucket = self._bucket_for(name)

        bucket.append((name, container))
        self._size += 1

    def lookup(self, name: str) -> StructContainer | None:
        for existing, container in self._bucket_for(name):
            if existing == name:
                return container
        return None

    def _bucket_for(self, name: str) -> list[tuple[str, StructContainer]]:
        return self._buckets[self._hash_func(name) % len(self._buckets)]

    def _should_grow(self) -> bool:
        if self._max_load_factor is None:
            return False
        return (self._size + 1) / len(self._buckets) > self._max_load_factor

    def _grow(self) -> None:
        entries = list(self.items())
        self._buckets = [[] for _ in range(len(self._buckets) * 2)]
        for name, container in entries:
            self._bucket_for(name).append((name, container))
        self._resize_count += 1
