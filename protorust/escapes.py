"""Escaping and naming helpers used while generating field attributes."""

from __future__ import annotations

from google.protobuf.descriptor_pb2 import FieldDescriptorProto

_SIMPLE_ESCAPES = {
    ord("a"): 0x07,
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
    ord("v"): 0x0B,
    ord("\\"): 0x5C,
    ord("?"): 0x3F,
    ord("'"): 0x27,
    ord('"'): 0x22,
}

_OCTAL_DIGITS = frozenset(b"01234567")
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")

_PACKABLE_TYPES = frozenset(
    {
        FieldDescriptorProto.TYPE_FLOAT,
        FieldDescriptorProto.TYPE_DOUBLE,
        FieldDescriptorProto.TYPE_INT32,
        FieldDescriptorProto.TYPE_INT64,
        FieldDescriptorProto.TYPE_UINT32,
        FieldDescriptorProto.TYPE_UINT64,
        FieldDescriptorProto.TYPE_SINT32,
        FieldDescriptorProto.TYPE_SINT64,
        FieldDescriptorProto.TYPE_FIXED32,
        FieldDescriptorProto.TYPE_FIXED64,
        FieldDescriptorProto.TYPE_SFIXED32,
        FieldDescriptorProto.TYPE_SFIXED64,
        FieldDescriptorProto.TYPE_BOOL,
        FieldDescriptorProto.TYPE_ENUM,
    }
)


def unescape_c_escape_string(s: str) -> bytes:
    """Decode a C-escaped string, as protoc writes bytes default values."""
    src = s.encode("utf-8")
    end = len(src)
    dst = bytearray()
    p = 0

    def fail(reason: str, shown: str = s) -> ValueError:
        return ValueError(f"invalid c-escaped default binary value ({shown}): {reason}")

    while p < end:
        c = src[p]
        p += 1
        if c != ord("\\"):
            dst.append(c)
            continue
        if p == end:
            raise fail("ends with '\\'")

        c = src[p]
        if c in _SIMPLE_ESCAPES:
            dst.append(_SIMPLE_ESCAPES[c])
            p += 1
        elif c in _OCTAL_DIGITS:
            start = p
            while p < end and p - start < 3 and src[p] in _OCTAL_DIGITS:
                p += 1
            value = int(src[start:p], 8)
            if value > 0xFF:
                raise fail("octal value out of range")
            dst.append(value)
        elif c in b"xX":
            if p + 3 > end:
                raise fail("incomplete hex value")
            digits = src[p + 1 : p + 3]
            if not all(d in _HEX_DIGITS for d in digits):
                raise fail("invalid hex value", src[p : p + 3].decode("utf-8", "replace"))
            dst.append(int(digits, 16))
            p += 3
        else:
            raise fail("invalid escape")

    return bytes(dst)


def _ascii_escape(byte: int) -> str:
    special = {0x09: "\\t", 0x0D: "\\r", 0x0A: "\\n", 0x5C: "\\\\", 0x27: "\\'", 0x22: '\\"'}
    if byte in special:
        return special[byte]
    if 0x20 <= byte <= 0x7E:
        return chr(byte)
    return f"\\x{byte:02x}"


def _char_escape(c: str) -> str:
    if c in "\\'\"":
        return "\\" + c
    if c == "\t":
        return "\\t"
    if c == "\r":
        return "\\r"
    if c == "\n":
        return "\\n"
    if " " <= c <= "~":
        return c
    return f"\\u{{{ord(c):x}}}"


def escape_bytes_default(data: bytes) -> str:
    """Escape bytes for a byte string literal nested inside an attribute string."""
    return "".join(
        _char_escape(c) for byte in data for c in _ascii_escape(byte)
    )


def strip_enum_prefix(prefix: str, name: str) -> str:
    """Strip an enum type name from the front of an UpperCamel variant name.

    The name is kept whole when stripping would not leave an UpperCamel word,
    so "Foo" is not stripped from "Foobar" or "Foo1".
    """
    stripped = name[len(prefix):] if name.startswith(prefix) else name
    if stripped[:1].isupper():
        return stripped
    return name


def can_pack(field: FieldDescriptorProto) -> bool:
    """Return True if a repeated field of this type can be packed."""
    return field.type in _PACKABLE_TYPES