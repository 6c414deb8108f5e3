"""Mapping of externally provided Protobuf packages and types to Rust paths."""

from __future__ import annotations

from collections.abc import Iterable

from protorust.ident import to_snake, to_upper_camel

_WELL_KNOWN_TYPES = (
    (".google.protobuf", "::prost_types"),
    (".google.protobuf.BoolValue", "bool"),
    (".google.protobuf.BytesValue", "::std::vec::Vec<u8>"),
    (".google.protobuf.DoubleValue", "f64"),
    (".google.protobuf.Empty", "()"),
    (".google.protobuf.FloatValue", "f32"),
    (".google.protobuf.Int32Value", "i32"),
    (".google.protobuf.Int64Value", "i64"),
    (".google.protobuf.StringValue", "::std::string::String"),
    (".google.protobuf.UInt32Value", "u32"),
    (".google.protobuf.UInt64Value", "u64"),
)


def validate_proto_path(path: str) -> None:
    """Raise ValueError unless path is a well-formed fully qualified Protobuf path."""
    if not path.startswith("."):
        raise ValueError(
            "Protobuf paths must be fully qualified (begin with a leading '.'): " + path
        )
    if any(segment == "" for segment in path.split(".")[1:]):
        raise ValueError(f"invalid fully-qualified Protobuf path: {path}")


class ExternPaths:
    """Resolves Protobuf identifiers that are provided by external Rust crates."""

    def __init__(self, paths: Iterable[tuple[str, str]], prost_types: bool) -> None:
        self._paths: dict[str, str] = {}
        for proto_path, rust_path in paths:
            self._insert(proto_path, rust_path)
        if prost_types:
            for proto_path, rust_path in _WELL_KNOWN_TYPES:
                self._insert(proto_path, rust_path)

    def __repr__(self) -> str:
        return f"ExternPaths({self._paths!r})"

    def _insert(self, proto_path: str, rust_path: str) -> None:
        validate_proto_path(proto_path)
        if proto_path in self._paths:
            raise ValueError(f"duplicate extern Protobuf path: {proto_path}")
        self._paths[proto_path] = rust_path

    def resolve_ident(self, pb_ident: str) -> str | None:
        """Return the Rust path for a fully qualified Protobuf identifier, if external."""
        if not pb_ident.startswith("."):
            raise ValueError(f"Protobuf identifier must be fully qualified: {pb_ident!r}")

        exact = self._paths.get(pb_ident)
        if exact is not None:
            return exact

        idx = pb_ident.rfind(".")
        while idx >= 0:
            rust_path = self._paths.get(pb_ident[:idx])
            if rust_path is not None:
                *segments, ident_type = pb_ident[idx + 1 :].split(".")
                parts = [*rust_path.split("::"), *segments]
                converted = [
                    part if i == 0 and part == "crate" else to_snake(part)
                    for i, part in enumerate(parts)
                ]
                converted.append(to_upper_camel(ident_type))
                return "::".join(converted)
            idx = pb_ident.rfind(".", 0, idx)

        return None