"""Resolution of Protobuf types and identifiers into Rust types and attribute tags."""

from __future__ import annotations

from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from protorust.extern_paths import ExternPaths
from protorust.ident import to_snake, to_upper_camel

_F = FieldDescriptorProto

_SCALAR_TYPES = {
    _F.TYPE_FLOAT: "f32",
    _F.TYPE_DOUBLE: "f64",
    _F.TYPE_UINT32: "u32",
    _F.TYPE_FIXED32: "u32",
    _F.TYPE_UINT64: "u64",
    _F.TYPE_FIXED64: "u64",
    _F.TYPE_INT32: "i32",
    _F.TYPE_SFIXED32: "i32",
    _F.TYPE_SINT32: "i32",
    _F.TYPE_ENUM: "i32",
    _F.TYPE_INT64: "i64",
    _F.TYPE_SFIXED64: "i64",
    _F.TYPE_SINT64: "i64",
    _F.TYPE_BOOL: "bool",
    _F.TYPE_STRING: "std::string::String",
    _F.TYPE_BYTES: "std::vec::Vec<u8>",
}

_TYPE_TAGS = {
    _F.TYPE_FLOAT: "float",
    _F.TYPE_DOUBLE: "double",
    _F.TYPE_INT32: "int32",
    _F.TYPE_INT64: "int64",
    _F.TYPE_UINT32: "uint32",
    _F.TYPE_UINT64: "uint64",
    _F.TYPE_SINT32: "sint32",
    _F.TYPE_SINT64: "sint64",
    _F.TYPE_FIXED32: "fixed32",
    _F.TYPE_FIXED64: "fixed64",
    _F.TYPE_SFIXED32: "sfixed32",
    _F.TYPE_SFIXED64: "sfixed64",
    _F.TYPE_BOOL: "bool",
    _F.TYPE_STRING: "string",
    _F.TYPE_BYTES: "bytes",
    _F.TYPE_GROUP: "group",
    _F.TYPE_MESSAGE: "message",
}


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class TypeResolver:
    """Resolves Protobuf names relative to the package currently being generated.

    The package attribute may be changed as nested modules are entered and left.
    """

    def __init__(self, package: str, extern_paths: ExternPaths) -> None:
        self.package = package
        self.extern_paths = extern_paths

    def resolve_ident(self, pb_ident: str) -> str:
        """Return the Rust path of a fully qualified Protobuf identifier."""
        if not pb_ident.startswith("."):
            raise ValueError(f"Protobuf identifier must be fully qualified: {pb_ident!r}")

        external = self.extern_paths.resolve_ident(pb_ident)
        if external is not None:
            return external

        local_path = self.package.split(".")
        *ident_path, ident_type = pb_ident[1:].split(".")

        common = 0
        for local, ident in zip(local_path, ident_path):
            if local != ident:
                break
            common += 1

        parts = ["super"] * (len(local_path) - common)
        parts.extend(to_snake(segment) for segment in ident_path[common:])
        parts.append(to_upper_camel(ident_type))
        return "::".join(parts)

    def resolve_type(self, field: FieldDescriptorProto) -> str:
        """Return the Rust type used for a field's values."""
        if field.type in (_F.TYPE_GROUP, _F.TYPE_MESSAGE):
            return self.resolve_ident(field.type_name)
        try:
            return _SCALAR_TYPES[field.type]
        except KeyError:
            raise ValueError(f"unknown field type: {field.type}") from None

    def field_type_tag(self, field: FieldDescriptorProto) -> str:
        """Return the type part of a field's attribute."""
        if field.type == _F.TYPE_ENUM:
            return "enumeration=" + _quoted(self.resolve_ident(field.type_name))
        try:
            return _TYPE_TAGS[field.type]
        except KeyError:
            raise ValueError(f"unknown field type: {field.type}") from None

    def map_value_type_tag(self, field: FieldDescriptorProto) -> str:
        """Return the type part of a map value in a map field's attribute."""
        if field.type == _F.TYPE_ENUM:
            return f"enumeration({self.resolve_ident(field.type_name)})"
        return self.field_type_tag(field)