"""
tests/test_canonical.py

Canonicalization and addressing laws.

  ADDRESS
    Known vector: "Hello, World!" -> 3+1gIbsr1bCvZ2KQgJ7DpTGR3YHH9wpLKGiKNiGCmG8=
    "/" is replaced by "+", nothing else is remapped
    Addresses are 44 characters with one "=" of padding

  CANONICAL FORM (RFC 8785)
    Key order independent of insertion order
    Keys sorted by UTF-16 code units
    ES6 number formatting
    No insignificant whitespace, minimal escaping, raw UTF-8

  DETERMINISM
    address_of is stable across calls
    canonicalize(parse(canonicalize(v))) == canonicalize(v)

  ENCODING ERRORS
    NaN / Infinity / unsupported types raise EncodingError
    Integers outside +/-(2**53 - 1) raise EncodingError
"""

import base64
import hashlib
import json

import pytest

from jcsstore.core.canonical import (
    ADDRESS_LENGTH,
    MAX_SAFE_INTEGER,
    address_of,
    address_of_bytes,
    canonicalize,
    digest,
    encode_address,
    is_address,
)
from jcsstore.core.exceptions import EncodingError, JcsStoreError


def reference_address(data: bytes) -> str:
    """Address computed independently of the module under test."""
    return base64.b64encode(hashlib.sha256(data).digest()).decode().replace("/", "+")


SAMPLES = [
    {"Hello": "World!"},
    {"b": 2, "a": 1},
    [1, "two", None, True, False, 3.5],
    {"nested": {"z": [1, {"y": 2, "x": 1}], "a": None}},
    "plain string",
    42,
    None,
    {"unicode": "héllo € \U0001f600", "escape": "line\nbreak\t\"quoted\""},
    {},
    [],
]


class TestAddress:

    def test_known_vector(self):
        assert address_of_bytes(b"Hello, World!") == (
            "3+1gIbsr1bCvZ2KQgJ7DpTGR3YHH9wpLKGiKNiGCmG8="
        )

    def test_slash_replaced_plus_kept(self):
        # 0xfb 0xef 0xff encodes as "++//" in standard base64
        raw = bytes([0xFB, 0xEF, 0xFF] * 10) + b"\x00\x00"
        standard = base64.b64encode(raw).decode()
        assert "/" in standard and "+" in standard

        encoded = encode_address(raw)
        assert "/" not in encoded
        assert encoded == standard.replace("/", "+")
        assert encoded.count("+") == standard.count("+") + standard.count("/")

    def test_not_urlsafe_alphabet(self):
        raw = bytes([0xFB, 0xEF, 0xFF] * 10) + b"\x00\x00"
        assert encode_address(raw) != base64.urlsafe_b64encode(raw).decode()

    def test_digest_is_plain_sha256(self):
        assert digest(b"abc") == hashlib.sha256(b"abc").digest()
        assert len(digest(b"")) == 32

    @pytest.mark.parametrize("value", SAMPLES)
    def test_address_shape(self, value):
        address = address_of(value)
        assert len(address) == ADDRESS_LENGTH
        assert address.endswith("=")
        assert is_address(address)

    @pytest.mark.parametrize("value", SAMPLES)
    def test_address_matches_reference(self, value):
        assert address_of(value) == reference_address(canonicalize(value))

    def test_is_address_rejects_paths(self):
        assert not is_address("../etc/passwd")
        assert not is_address("a" * 43 + "/")
        assert not is_address(".tmp-abc")
        assert not is_address("")
        assert not is_address(None)
        assert not is_address("3/1gIbsr1bCvZ2KQgJ7DpTGR3YHH9wpLKGiKNiGCmG8=")


class TestCanonicalForm:

    def test_hello_world_is_already_minimal(self):
        assert canonicalize({"Hello": "World!"}) == b'{"Hello":"World!"}'

    def test_key_order_independent(self):
        assert canonicalize({"b": 2, "a": 1}) == b'{"a":1,"b":2}'
        assert canonicalize({"a": 1, "b": 2}) == b'{"a":1,"b":2}'
        assert address_of({"b": 2, "a": 1}) == address_of({"a": 1, "b": 2})
        assert address_of({"b": 2, "a": 1}) == reference_address(b'{"a":1,"b":2}')

    def test_whitespace_in_source_text_irrelevant(self):
        compact = json.loads('{"a":[1,2],"b":{"c":null}}')
        spaced  = json.loads('{\n  "b" : { "c" : null },\n  "a" : [ 1 , 2 ]\n}')
        assert canonicalize(compact) == canonicalize(spaced)

    def test_keys_sorted_by_utf16_code_units(self):
        # RFC 8785 section 3.2.3 sorting example
        value = {
            "€":     "Euro Sign",
            "\r":         "Carriage Return",
            "דּ":     "Hebrew Letter Dalet With Dagesh",
            "1":          "One",
            "\U0001f600": "Emoji: Grinning Face",
            "\u0080":     "Control",
            "ö":     "Latin Small Letter O With Diaeresis",
        }
        keys = list(json.loads(canonicalize(value).decode("utf-8")).keys())
        # U+1F600 is a surrogate pair (D83D DE00), so it sorts before U+FB33
        assert keys == [
            "\r", "1", "\u0080", "ö", "€", "\U0001f600", "דּ",
        ]

    @pytest.mark.parametrize("number, expected", [
        (1.0,     b"1"),
        (-0.0,    b"0"),
        (10,      b"10"),
        (0.5,     b"0.5"),
        (1e21,    b"1e+21"),
        (1e-7,    b"1e-7"),
        (123.456, b"123.456"),
    ])
    def test_number_formatting(self, number, expected):
        assert canonicalize(number) == expected

    def test_no_whitespace(self):
        out = canonicalize({"a": [1, 2, {"b": None}]})
        assert out == b'{"a":[1,2,{"b":null}]}'

    def test_non_ascii_is_raw_utf8(self):
        out = canonicalize({"k": "€"})
        assert out == b'{"k":"\xe2\x82\xac"}'

    def test_control_characters_escaped(self):
        assert canonicalize("\n\t\x0f") == b'"\\n\\t\\u000f"'

    def test_returns_bytes(self):
        assert isinstance(canonicalize({"a": 1}), bytes)


class TestDeterminism:

    @pytest.mark.parametrize("value", SAMPLES)
    def test_stable_across_calls(self, value):
        assert address_of(value) == address_of(value)
        assert canonicalize(value) == canonicalize(value)

    @pytest.mark.parametrize("value", SAMPLES)
    def test_canonicalization_idempotent(self, value):
        once  = canonicalize(value)
        twice = canonicalize(json.loads(once.decode("utf-8")))
        assert once == twice

    def test_fixed_address_for_fixed_document(self):
        # Pinned: must never change between releases
        assert address_of({"a": 1, "b": 2}) == reference_address(b'{"a":1,"b":2}')
        assert address_of("Hello, World!") == reference_address(b'"Hello, World!"')


class TestEncodingErrors:

    @pytest.mark.parametrize("value", [
        float("nan"),
        float("inf"),
        float("-inf"),
        {"a": [1, float("nan")]},
        [{"deep": {"deeper": float("inf")}}],
    ])
    def test_non_finite_numbers_rejected(self, value):
        with pytest.raises(EncodingError):
            canonicalize(value)

    @pytest.mark.parametrize("value", [
        {"a": object()},
        {"when": b"bytes"},
    ])
    def test_unsupported_values_rejected(self, value):
        with pytest.raises(EncodingError):
            canonicalize(value)

    @pytest.mark.parametrize("value", [
        2 ** 53,
        -(2 ** 53),
        2 ** 64,
        {"n": [2 ** 64]},
    ])
    def test_unsafe_integers_rejected(self, value):
        with pytest.raises(EncodingError):
            canonicalize(value)

    @pytest.mark.parametrize("value", [MAX_SAFE_INTEGER, -MAX_SAFE_INTEGER])
    def test_safe_integer_bounds_accepted(self, value):
        out = canonicalize(value)
        assert out == str(value).encode("ascii")
        assert json.loads(out) == value

    def test_bool_is_not_an_integer_here(self):
        assert canonicalize([True, False]) == b"[true,false]"

    def test_encoding_error_is_store_error(self):
        with pytest.raises(JcsStoreError):
            address_of(float("nan"))
