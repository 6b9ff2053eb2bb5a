import string
import uuid

import hypothesis.strategies as st
import mmh3
import pytest
from hypothesis import given, settings

from lincount.errors import HashFinalizedError
from lincount.hashing import (
    VARIANTS,
    X64_128,
    X86_32,
    X86_128,
    MurmurHash3,
    MurmurVariant,
    fmix32,
    fmix64,
    hash128_x64,
    murmurhash3,
    uuid_hash,
)

# Digests of the alphabet prefixes "", "a", "ab", ... "abcdefghijklmnopqrstuvwxyz".
X86_32_PREFIX_DIGESTS = (
    "00000000",
    "B269253C",
    "5FD7BF9B",
    "FA93DDB3",
    "6A67ED43",
    "F69A9BE8",
    "85C08161",
    "069B3C88",
    "C4CCDD49",
    "F0061442",
    "91779288",
    "DF253B5F",
    "273D6FA3",
    "1B1612F2",
    "F06D52F8",
    "D2F7099D",
    "ED9162E7",
    "4A5E65B6",
    "94A819C2",
    "C15BBF85",
    "9A711CBE",
    "ABE7195A",
    "C73CB670",
    "1C4D1EA5",
    "3939F9B0",
    "1A568338",
    "6D034EA3",
)

X86_128_PREFIX_DIGESTS = (
    "00000000000000000000000000000000",
    "3C9394A71BB056551BB056551BB05655",
    "DF5184151030BE251030BE251030BE25",
    "D1C6CD75A506B0A2A506B0A2A506B0A2",
    "AACCB6962EC6AF452EC6AF452EC6AF45",
    "FB2E40C5BCC5245D7701725A7701725A",
    "0AB97CE12127AFA1F9DFBEA9F9DFBEA9",
    "D941B590DE3A86092869774A2869774A",
    "3611F4AE8714B1AD92806CFA92806CFA",
    "1C8C05AD6F590622107DD2147C4194DD",
    "A72ED9F50E90379A2AAA92C77FF12F69",
    "DDC9C8A01E111FCA2DF1FE8257975EBD",
    "FE038573C02482F4ADDFD42753E58CD2",
    "15A23AC1ECA1AEDB66351CF470DE2CD9",
    "8E11EC75D71F5D60F4456F944D89D4F1",
    "691D6DEEAED51A4A5714CE84A861A7AD",
    "2776D29F5612B990218BCEE445BA93D1",
    "D3A445046F5C51642ADC6DD99D07111D",
    "AA5493A0DA291D966A9E7128585841D9",
    "281B6A4F9C45B9BFC3B77850930F2C20",
    "19342546A8216DB62873B49E545DCB1F",
    "A6C0F30D6C738620E7B9590D2E088D99",
    "A7D421D9095CDCEA393CBBA908342384",
    "C3A93D572B014949317BAD7EE809158F",
    "802381D77956833791F87149326E4801",
    "0AC619A5302315755A80D74ADEFAA842",
    "1306343E662F6F666E56F6172C3DE344",
)

X64_128_PREFIX_DIGESTS = (
    "00000000000000000000000000000000",
    "897859F6655555855A890E51483AB5E6",
    "2E1BED16EA118B93ADD4529B01A75EE6",
    "6778AD3F3F3F96B4522DCA264174A23B",
    "4FCD5646D6B77BB875E87360883E00F2",
    "B8BB96F491D036208CECCF4BA0EEC7C5",
    "55BFA3ACBF867DE45C842133990971B0",
    "99E49EC09F2FCDA6B6BB55B13AA23A1C",
    "028CEF37B00A8ACCA14069EB600D8948",
    "64793CF1CFC0470533E041B7F53DB579",
    "998C2F770D5BC1B6C91A658CDC854DA2",
    "029D78DFB8D095A871E75A45E2317CBB",
    "94E17AE6B19BF38E1C62FF7232309E1F",
    "73FAC0A78D2848167FCCE70DFF7B652E",
    "E075C3F5A794D09124336AD2276009EE",
    "FB2F0C895124BE8A612A969C2D8C546A",
    "23B74C22A33CCAC41AEB31B395D63343",
    "57A6BD887F746475E40D11A19D49DAEC",
    "508A7F90EC8CF0776BC7005A29A8D471",
    "886D9EDE23BC901574946FB62A4D8AA6",
    "F1E237F926370B314BD016572AF40996",
    "3CC9FF79E268D5C9FB3C9BE9C148CCD7",
    "56F8ABF430E388956DA9F4A8741FDB46",
    "8E234F9DBA0A4840FFE9541CEBB7BE83",
    "F72CDED40F96946408F22153A3CF0F79",
    "0F96072FA4CBE771DBBD9E398115EEED",
    "A94A6F517E9D9C7429D5A7B6899CADE9",
)

PREFIX_DIGESTS = {
    X86_32: X86_32_PREFIX_DIGESTS,
    X86_128: X86_128_PREFIX_DIGESTS,
    X64_128: X64_128_PREFIX_DIGESTS,
}

ALL_VARIANTS = pytest.mark.parametrize("variant", [X86_32, X86_128, X64_128], ids=lambda v: v.name)


def _alphabet_cases(variant: MurmurVariant) -> list[tuple[bytes, str]]:
    return [
        (string.ascii_lowercase[:length].encode(), expected.lower())
        for length, expected in enumerate(PREFIX_DIGESTS[variant])
    ]


def test_fmix_of_zero_is_zero() -> None:
    assert fmix32(0) == 0
    assert fmix64(0) == 0


def test_fmix_reduces_to_word_width() -> None:
    assert fmix32(-1) == fmix32(0xFFFFFFFF)
    assert fmix32(1 << 32 | 5) == fmix32(5)
    assert fmix64(-1) == fmix64(0xFFFFFFFFFFFFFFFF)
    assert 0 <= fmix64(12345) < 1 << 64


def test_fmix_avalanches_neighbouring_inputs() -> None:
    assert fmix32(100) != fmix32(101)
    assert bin(fmix64(100) ^ fmix64(101)).count("1") > 8


@given(seed=st.integers(min_value=0, max_value=0xFFFFFFFF))
@settings(max_examples=50)
def test_fmix32_matches_empty_x86_32_hash(seed: int) -> None:
    # x86_32 over no data is fmix32(seed)
    assert fmix32(seed) == mmh3.hash(b"", seed, signed=False)


@ALL_VARIANTS
def test_alphabet_prefix_vectors(variant: MurmurVariant) -> None:
    for data, expected in _alphabet_cases(variant):
        assert murmurhash3(data, variant).hex() == expected, data


@ALL_VARIANTS
def test_byte_at_a_time_matches_one_shot(variant: MurmurVariant) -> None:
    for data, expected in _alphabet_cases(variant):
        hasher = MurmurHash3(variant)
        for byte in data:
            hasher.update(bytes([byte]))
        assert hasher.hexdigest() == expected, data


@ALL_VARIANTS
def test_unaligned_slice_hashes_like_aligned_copy(variant: MurmurVariant) -> None:
    data = bytes([0xAC]) * 1025
    view = memoryview(data)
    assert murmurhash3(view[:-1], variant) == murmurhash3(view[1:], variant)


@ALL_VARIANTS
def test_digest_size_and_hasher_metadata(variant: MurmurVariant) -> None:
    hasher = MurmurHash3(variant)
    assert hasher.digest_size == variant.digest_size == len(hasher.digest())
    assert hasher.block_size == variant.block_size
    assert hasher.name == f"murmur3_{variant.name}"
    assert VARIANTS[variant.name] is variant


def test_block_sizes_per_variant() -> None:
    assert (X86_32.block_size, X86_128.block_size, X64_128.block_size) == (4, 16, 16)
    assert (X86_32.lanes, X86_128.lanes, X64_128.lanes) == (1, 4, 2)


def test_digest_is_cached_and_further_updates_fail() -> None:
    hasher = MurmurHash3()
    hasher.update(b"abc")
    first = hasher.digest()
    assert hasher.digest() == first
    with pytest.raises(HashFinalizedError):
        hasher.update(b"d")


def test_copy_forks_state() -> None:
    hasher = MurmurHash3(X64_128)
    hasher.update(b"abcdefghij")
    fork = hasher.copy()
    fork.update(b"klmnopqrstuvwxyz")
    hasher.update(b"k")
    assert fork.hexdigest() == X64_128_PREFIX_DIGESTS[26].lower()
    assert hasher.hexdigest() == X64_128_PREFIX_DIGESTS[11].lower()


def test_update_rejects_text() -> None:
    with pytest.raises(TypeError):
        MurmurHash3().update("abc")  # type: ignore[arg-type]


def test_hash128_x64_splits_digest_little_endian() -> None:
    low, high = hash128_x64(b"a")
    assert low == 0x85555565F6597889
    assert high == 0xE6B53A48510E895A


@given(data=st.binary(max_size=200), seed=st.integers(min_value=0, max_value=0xFFFFFFFF))
@settings(max_examples=100)
def test_x64_128_agrees_with_mmh3(data: bytes, seed: int) -> None:
    assert murmurhash3(data, X64_128, seed) == mmh3.hash_bytes(data, seed)


@given(data=st.binary(max_size=200), seed=st.integers(min_value=0, max_value=0xFFFFFFFF))
@settings(max_examples=100)
def test_x86_32_agrees_with_mmh3(data: bytes, seed: int) -> None:
    digest = murmurhash3(data, X86_32, seed)
    assert int.from_bytes(digest, "little") == mmh3.hash(data, seed, signed=False)


@given(
    data=st.binary(max_size=300),
    cuts=st.lists(st.integers(min_value=0, max_value=300), max_size=6),
    variant=st.sampled_from([X86_32, X86_128, X64_128]),
)
@settings(max_examples=100)
def test_chunked_updates_match_one_shot(
    data: bytes, cuts: list[int], variant: MurmurVariant
) -> None:
    hasher = MurmurHash3(variant)
    start = 0
    for cut in sorted(min(cut, len(data)) for cut in cuts):
        hasher.update(data[start:cut])
        start = cut
    hasher.update(data[start:])
    assert hasher.digest() == murmurhash3(data, variant)


def test_uuid_hash_is_deterministic_and_64_bit() -> None:
    value = uuid.UUID("8ab3060e-2cba-4f23-b74c-b52db3bdfb46")
    assert uuid_hash(value) == uuid_hash(uuid.UUID(str(value)))
    assert 0 <= uuid_hash(value) < 1 << 64
    assert uuid_hash(uuid.UUID(int=0)) != uuid_hash(uuid.UUID(int=1))


def test_uuid_hash_pinned_values() -> None:
    assert uuid_hash(uuid.UUID(int=0)) == 0xF3B95195C79F012F
    value = uuid.UUID("8ab3060e-2cba-4f23-b74c-b52db3bdfb46")
    assert uuid_hash(value) == 0xF8829A4FA49BD5D4


@pytest.mark.parametrize(
    ("variant", "factory"),
    [(X86_32, mmh3.mmh3_32), (X86_128, mmh3.mmh3_x86_128), (X64_128, mmh3.mmh3_x64_128)],
    ids=["x86_32", "x86_128", "x64_128"],
)
def test_chunked_stream_matches_mmh3_hasher(variant: MurmurVariant, factory) -> None:
    data = bytes((i * 131 + 7) & 0xFF for i in range(4099))
    ours = MurmurHash3(variant, seed=7)
    reference = factory(seed=7)
    for start in range(0, len(data), 13):
        ours.update(data[start : start + 13])
        reference.update(data[start : start + 13])
    assert ours.digest() == reference.digest()
    assert len(ours.digest()) == variant.digest_size


def test_seed_is_taken_modulo_2_32() -> None:
    assert murmurhash3(b"abc", X64_128, (1 << 32) + 5) == murmurhash3(b"abc", X64_128, 5)
