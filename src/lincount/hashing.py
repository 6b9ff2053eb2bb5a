"""MurmurHash3 mixing primitives used to map elements onto bitmap indices.

Two facilities live here:

* ``fmix32`` / ``fmix64``: the MurmurHash3 avalanche finalizers, applied once
  to fixed-width integers before they are reduced modulo the bitmap length.
* ``MurmurHash3``: an incremental block hash following the ``hashlib`` object
  protocol, backed by the ``mmh3`` hashers. A :class:`MurmurVariant` picks the
  x86_32, x86_128 or x64_128 construction.

Digests are the little-endian lanes ``h1 || h2 || ...`` on every host.
"""

from __future__ import annotations

import struct
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import mmh3

from .errors import HashFinalizedError

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

UUID_HASH_ADDEND = 0x9E3779B9


def fmix32(h: int) -> int:
    """Finalization mix for a 32-bit integer."""
    h &= MASK32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & MASK32
    h ^= h >> 16
    return h


def fmix64(k: int) -> int:
    """Finalization mix for a 64-bit integer."""
    k &= MASK64
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & MASK64
    k ^= k >> 33
    return k


@dataclass(frozen=True, slots=True)
class MurmurVariant:
    """Shape of a MurmurHash3 construction and the ``mmh3`` hasher computing it."""

    name: str
    word_bits: int
    lanes: int
    factory: Callable[..., Any] = field(repr=False, compare=False)

    @property
    def block_size(self) -> int:
        return self.word_bits // 8 * self.lanes

    @property
    def digest_size(self) -> int:
        return self.block_size


X86_32 = MurmurVariant(name="x86_32", word_bits=32, lanes=1, factory=mmh3.mmh3_32)
X86_128 = MurmurVariant(name="x86_128", word_bits=32, lanes=4, factory=mmh3.mmh3_x86_128)
X64_128 = MurmurVariant(name="x64_128", word_bits=64, lanes=2, factory=mmh3.mmh3_x64_128)

VARIANTS: dict[str, MurmurVariant] = {v.name: v for v in (X86_32, X86_128, X64_128)}


class MurmurHash3:
    """Incremental MurmurHash3 hasher.

    ``update`` may be called any number of times with chunks of any length.
    ``digest`` finalizes the state once and caches the result. Feeding more
    data after that raises :class:`HashFinalizedError`. Seeds are taken
    modulo 2^32.
    """

    def __init__(self, variant: MurmurVariant = X64_128, seed: int = 0) -> None:
        self.variant = variant
        self._hasher = variant.factory(seed=seed & MASK32)
        self._digest: bytes | None = None

    @property
    def name(self) -> str:
        return f"murmur3_{self.variant.name}"

    @property
    def digest_size(self) -> int:
        return self.variant.digest_size

    @property
    def block_size(self) -> int:
        return self.variant.block_size

    def update(self, data: bytes | bytearray | memoryview) -> None:
        if self._digest is not None:
            raise HashFinalizedError(f"{self.name} hasher already finalized")
        self._hasher.update(memoryview(data))

    def digest(self) -> bytes:
        if self._digest is None:
            self._digest = self._hasher.digest()
        return self._digest

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> MurmurHash3:
        clone = self.__class__.__new__(self.__class__)
        clone.variant = self.variant
        clone._hasher = self._hasher.copy()
        clone._digest = self._digest
        return clone


def murmurhash3(
    data: bytes | bytearray | memoryview,
    variant: MurmurVariant = X64_128,
    seed: int = 0,
) -> bytes:
    """One-shot MurmurHash3 digest of ``data``."""

    hasher = MurmurHash3(variant, seed)
    hasher.update(data)
    return hasher.digest()


def hash128_x64(data: bytes | bytearray | memoryview) -> tuple[int, int]:
    """Return the low and high 64-bit halves of the x64_128 digest."""

    low, high = struct.unpack("<2Q", murmurhash3(data, X64_128))
    return low, high


def uuid_hash(value: uuid.UUID) -> int:
    """64-bit hash of a UUID, combining its 16 bytes boost-style."""

    seed = 0
    for byte in value.bytes:
        seed ^= (byte + UUID_HASH_ADDEND + (seed << 6) + (seed >> 2)) & MASK64
    return seed
