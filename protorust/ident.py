"""Helpers for turning Protobuf identifiers into Rust identifiers."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from enum import Enum, auto

_RAW_KEYWORDS = frozenset(
    {
        # 2015 strict keywords.
        "as", "break", "const", "continue", "else", "enum", "false", "fn", "for",
        "if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub",
        "ref", "return", "static", "struct", "trait", "true", "type", "unsafe",
        "use", "where", "while",
        # 2018 strict keywords.
        "dyn",
        # 2015 reserved keywords.
        "abstract", "become", "box", "do", "final", "macro", "override", "priv",
        "typeof", "unsized", "virtual", "yield",
        # 2018 reserved keywords.
        "async", "await", "try",
    }
)

# Keywords that cannot be raw identifiers, so they get an underscore suffix.
_SUFFIXED_KEYWORDS = frozenset({"self", "super", "extern", "crate"})


class _Mode(Enum):
    BOUNDARY = auto()
    LOWERCASE = auto()
    UPPERCASE = auto()


def _words(s: str) -> Iterator[str]:
    """Split an identifier into words on case changes and non-alphanumerics."""
    chunk: list[str] = []
    chunks: list[str] = []
    for c in s:
        if c.isalnum():
            chunk.append(c)
        else:
            chunks.append("".join(chunk))
            chunk = []
    chunks.append("".join(chunk))

    for word in chunks:
        init = 0
        mode = _Mode.BOUNDARY
        for i, c in enumerate(word):
            if i + 1 == len(word):
                yield word[init:]
                break
            nxt = word[i + 1]
            if c.islower():
                next_mode = _Mode.LOWERCASE
            elif c.isupper():
                next_mode = _Mode.UPPERCASE
            else:
                next_mode = mode
            if next_mode is _Mode.LOWERCASE and nxt.isupper():
                yield word[init : i + 1]
                init = i + 1
                mode = _Mode.BOUNDARY
            elif mode is _Mode.UPPERCASE and c.isupper() and nxt.islower():
                yield word[init:i]
                init = i
                mode = _Mode.BOUNDARY
            else:
                mode = next_mode


def _transform(s: str, with_word: Callable[[str], str], separator: str) -> str:
    return separator.join(with_word(word) for word in _words(s))


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_snake(s: str) -> str:
    """Convert a camelCase or SCREAMING_SNAKE_CASE name to a snake_case Rust field name."""
    ident = _transform(s, str.lower, "_")
    if ident in _RAW_KEYWORDS:
        return "r#" + ident
    if ident in _SUFFIXED_KEYWORDS:
        return ident + "_"
    return ident


def to_upper_camel(s: str) -> str:
    """Convert a snake_case name to an UpperCamel Rust type name."""
    ident = _transform(s, _capitalize, "")
    if ident == "Self":
        ident += "_"
    return ident


def match_ident(matcher: str, msg: str, field: str | None = None) -> bool:
    """Match a path matcher against a fully qualified message name and optional field."""
    if not msg.startswith("."):
        raise ValueError(f"message name must be fully qualified: {msg!r}")

    if not matcher:
        return False
    if matcher == ".":
        return True

    match_paths = matcher.split(".")
    field_paths = msg.split(".")
    if field is not None:
        field_paths.append(field)

    if len(match_paths) > len(field_paths):
        return False
    if matcher.startswith("."):
        return match_paths == field_paths[: len(match_paths)]
    return match_paths == field_paths[len(field_paths) - len(match_paths) :]