"""Fixed-length bitmap packed into 64-bit words."""

from __future__ import annotations

import operator
from array import array

from .errors import SizeError, SizeMismatchError

WORD_BITS = 64
KIB_BYTES = 1024
KIB_BITS = 8 * KIB_BYTES


def _words_from_buffer(buffer: bytes) -> array:
    words = array("Q")
    words.frombytes(buffer)
    return words


class BitSet:
    """Bitmap whose length is a positive multiple of one KiB of storage.

    Bit ``i`` lives in word ``i >> 6`` at position ``i & 63``. Words are kept
    in native byte order, which is also the order of :meth:`as_bytes`; on
    little-endian hosts bit ``i`` is bit ``i % 8`` of byte ``i // 8``.
    """

    __slots__ = ("_words", "_length")

    def __init__(self, length: int) -> None:
        if length <= 0 or length % KIB_BITS:
            raise SizeError(
                f"BitSet length must be a positive multiple of {KIB_BITS} bits, got {length}"
            )
        self._length = length
        self._words = array("Q", bytes(length // 8))

    @classmethod
    def from_bytes(cls, buffer: bytes | bytearray | memoryview) -> BitSet:
        """Adopt ``buffer`` as the packed bit storage."""
        raw = bytes(buffer)
        if not raw or len(raw) % KIB_BYTES:
            raise SizeError(
                f"bitmap buffer must be a positive multiple of {KIB_BYTES} bytes, got {len(raw)}"
            )
        inst = cls.__new__(cls)
        inst._length = len(raw) * 8
        inst._words = _words_from_buffer(raw)
        return inst

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSet):
            return NotImplemented
        return self._length == other._length and self._words == other._words

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(length={self._length}, set={self.popcount()})"

    def get(self, index: int) -> bool:
        return bool((self._words[index >> 6] >> (index & 63)) & 1)

    def set(self, index: int) -> bool:
        """Set bit ``index``; return True when it flipped from 0 to 1."""
        word_idx = index >> 6
        mask = 1 << (index & 63)
        word = self._words[word_idx]
        if word & mask:
            return False
        self._words[word_idx] = word | mask
        return True

    def popcount(self) -> int:
        return int.from_bytes(self._words.tobytes(), "little").bit_count()

    def union_update(self, other: BitSet) -> None:
        """OR ``other`` into this bitmap in place."""
        if other._length != self._length:
            raise SizeMismatchError(
                f"cannot OR bitmaps of {self._length} and {other._length} bits"
            )
        self._words = array("Q", map(operator.or_, self._words, other._words))

    def as_bytes(self) -> bytes:
        return self._words.tobytes()

    def copy(self) -> BitSet:
        inst = self.__class__.__new__(self.__class__)
        inst._length = self._length
        inst._words = array("Q", self._words)
        return inst
