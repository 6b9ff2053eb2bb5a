"""Linear probabilistic counter and its union algebra."""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Iterable, Sequence

from .bitset import KIB_BITS, BitSet
from .errors import EmptyInputError, SizeError, SizeMismatchError
from .hashing import fmix32, fmix64, hash128_x64, uuid_hash

logger = logging.getLogger(__name__)


def _lround(value: float) -> int:
    # round half away from zero; the estimate is never negative
    return math.floor(value + 0.5)


class LPCounter:
    """Approximate distinct counter backed by a single bitmap.

    Every inserted element is hashed to one bit of an ``m``-bit map. With
    ``c`` bits set the cardinality estimate is ``-m * ln((m - c) / m)``.
    Once every bit is set the estimate degenerates to ``m``; callers that
    care can check :attr:`saturated` and allocate a bigger counter.
    """

    __slots__ = ("_map", "_set_count")

    def __init__(self, kilobytes: int) -> None:
        if kilobytes <= 0:
            raise SizeError(f"counter capacity must be a positive number of KiB, got {kilobytes}")
        self._map = BitSet(KIB_BITS * kilobytes)
        self._set_count = 0
        logger.debug("created %d KiB counter (%d bits)", kilobytes, self._map.length)

    @classmethod
    def _adopt(cls, bitmap: BitSet) -> LPCounter:
        inst = cls.__new__(cls)
        inst._map = bitmap
        inst._set_count = bitmap.popcount()
        return inst

    @classmethod
    def restore(cls, dump: bytes | bytearray | memoryview) -> LPCounter:
        """Rebuild a counter from the output of :meth:`dump`.

        The set-bit count is recomputed from the bitmap rather than trusted.
        """
        try:
            bitmap = BitSet.from_bytes(dump)
        except SizeError as exc:
            raise SizeError(f"LPCounter: dump is broken ({exc})") from exc
        inst = cls._adopt(bitmap)
        logger.debug(
            "restored %d KiB counter with %d bits set", inst.size, inst._set_count
        )
        return inst

    @property
    def size(self) -> int:
        """Capacity in KiB."""
        return self._map.length // KIB_BITS

    @property
    def bit_length(self) -> int:
        return self._map.length

    @property
    def set_count(self) -> int:
        return self._set_count

    @property
    def load_factor(self) -> float:
        return self._set_count / self._map.length

    @property
    def saturated(self) -> bool:
        return self._set_count >= self._map.length

    def _set(self, hashed: int) -> None:
        if self._map.set(hashed % self._map.length):
            self._set_count += 1

    def put_u32(self, value: int) -> None:
        self._set(fmix32(value))

    def put_u64(self, value: int) -> None:
        self._set(fmix64(value))

    def put_uuid(self, value: uuid.UUID) -> None:
        self._set(uuid_hash(value))

    def put_bytes(self, data: bytes | bytearray | memoryview | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        low, high = hash128_x64(data)
        self._set(low ^ high)

    def put(self, item: object) -> None:
        """Insert ``item``, choosing the hash path from its type.

        Integers take the 64-bit path; use :meth:`put_u32` for 32-bit values.
        """
        if isinstance(item, uuid.UUID):
            self.put_uuid(item)
        elif isinstance(item, (bytes, bytearray, memoryview, str)):
            self.put_bytes(item)
        elif isinstance(item, int) and not isinstance(item, bool):
            self.put_u64(item)
        else:
            raise TypeError(f"cannot count values of type {type(item).__name__}")

    def update(self, items: Iterable[object]) -> None:
        for item in items:
            self.put(item)

    def count(self) -> int:
        m = self._map.length
        c = self._set_count
        if c < m:
            return _lround(-m * math.log1p(-c / m))
        return m

    def dump(self) -> bytes:
        return self._map.as_bytes()

    def copy(self) -> LPCounter:
        inst = self.__class__.__new__(self.__class__)
        inst._map = self._map.copy()
        inst._set_count = self._set_count
        return inst

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(size={self.size} KiB, "
            f"set_count={self._set_count}, estimate={self.count()})"
        )


def _check_sizes(reference: LPCounter, counters: Sequence[LPCounter]) -> None:
    for counter in counters:
        if counter.bit_length != reference.bit_length:
            raise SizeMismatchError(
                f"cannot merge a {counter.size} KiB counter with a {reference.size} KiB counter"
            )


def merge(counters: Iterable[LPCounter]) -> LPCounter:
    """Return a new counter holding the union of ``counters``.

    The inputs are left untouched.
    """

    pending = list(counters)
    if not pending:
        raise EmptyInputError("merge requires at least one counter")
    first, rest = pending[0], pending[1:]
    _check_sizes(first, rest)
    bitmap = first._map.copy()
    for counter in rest:
        bitmap.union_update(counter._map)
    result = LPCounter._adopt(bitmap)
    logger.debug(
        "merged %d counters of %d KiB: %d bits set", len(pending), result.size, result.set_count
    )
    return result


def merge_into(target: LPCounter, counters: Iterable[LPCounter]) -> LPCounter:
    """OR every counter into ``target`` and return it.

    Sizes are validated before any bit changes, so a failed merge leaves
    ``target`` as it was.
    """

    pending = list(counters)
    _check_sizes(target, pending)
    for counter in pending:
        target._map.union_update(counter._map)
    target._set_count = target._map.popcount()
    logger.debug(
        "merged %d counters into %d KiB target: %d bits set",
        len(pending),
        target.size,
        target.set_count,
    )
    return target
