"""Linear probabilistic counting of distinct stream elements."""

from .bitset import BitSet
from .config import AppConfig
from .counter import LPCounter, merge, merge_into
from .errors import (
    EmptyInputError,
    HashFinalizedError,
    LincountError,
    SizeError,
    SizeMismatchError,
)
from .hashing import X64_128, X86_32, X86_128, MurmurHash3, fmix32, fmix64, murmurhash3

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "BitSet",
    "EmptyInputError",
    "HashFinalizedError",
    "LPCounter",
    "LincountError",
    "MurmurHash3",
    "SizeError",
    "SizeMismatchError",
    "X64_128",
    "X86_128",
    "X86_32",
    "fmix32",
    "fmix64",
    "merge",
    "merge_into",
    "murmurhash3",
]
