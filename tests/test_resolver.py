import pytest
from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from protorust.extern_paths import ExternPaths
from protorust.resolver import TypeResolver

F = FieldDescriptorProto


def make_resolver(package="foo.bar", prost_types=True, paths=()):
    return TypeResolver(package, ExternPaths(list(paths), prost_types))


def field(type_, type_name=None):
    f = F(name="f", number=1, type=type_)
    if type_name is not None:
        f.type_name = type_name
    return f


def test_same_package_ident_is_bare_type():
    assert make_resolver().resolve_ident(".foo.bar.Baz") == "Baz"


def test_parent_package_uses_super():
    assert make_resolver().resolve_ident(".foo.Baz") == "super::Baz"


def test_unrelated_package():
    resolver = make_resolver()
    assert resolver.resolve_ident(".other.pkg.MyMsg") == "super::super::other::pkg::MyMsg"


def test_well_known_types_are_external():
    resolver = make_resolver()
    assert resolver.resolve_ident(".google.protobuf.Duration") == "::prost_types::Duration"
    assert resolver.resolve_ident(".google.protobuf.Empty") == "()"


def test_extern_path_takes_priority():
    resolver = make_resolver(paths=[(".foo.bar", "::foo2")])
    assert resolver.resolve_ident(".foo.bar.Bar") == "::foo2::Bar"


def test_unqualified_ident_is_rejected():
    with pytest.raises(ValueError):
        make_resolver().resolve_ident("foo.Bar")


def test_package_change_is_respected():
    resolver = make_resolver()
    inside = resolver.resolve_ident(".foo.bar.Baz")
    resolver.package = "foo.bar.outer"
    moved = resolver.resolve_ident(".foo.bar.Baz")
    assert moved == "super::" + inside


@pytest.mark.parametrize(
    "type_, expected",
    [
        (F.TYPE_FLOAT, "f32"),
        (F.TYPE_DOUBLE, "f64"),
        (F.TYPE_UINT32, "u32"),
        (F.TYPE_FIXED32, "u32"),
        (F.TYPE_UINT64, "u64"),
        (F.TYPE_FIXED64, "u64"),
        (F.TYPE_INT32, "i32"),
        (F.TYPE_SINT32, "i32"),
        (F.TYPE_SFIXED32, "i32"),
        (F.TYPE_INT64, "i64"),
        (F.TYPE_SINT64, "i64"),
        (F.TYPE_SFIXED64, "i64"),
        (F.TYPE_BOOL, "bool"),
        (F.TYPE_STRING, "std::string::String"),
        (F.TYPE_BYTES, "std::vec::Vec<u8>"),
    ],
)
def test_resolve_scalar_type(type_, expected):
    assert make_resolver().resolve_type(field(type_)) == expected


def test_enum_resolves_to_i32():
    assert make_resolver().resolve_type(field(F.TYPE_ENUM, ".foo.bar.Color")) == "i32"


@pytest.mark.parametrize("type_", [F.TYPE_MESSAGE, F.TYPE_GROUP])
def test_message_type_resolves_to_ident(type_):
    resolver = make_resolver()
    f = field(type_, ".other.pkg.MyMsg")
    assert resolver.resolve_type(f) == resolver.resolve_ident(".other.pkg.MyMsg")


@pytest.mark.parametrize(
    "type_, expected",
    [
        (F.TYPE_FLOAT, "float"),
        (F.TYPE_DOUBLE, "double"),
        (F.TYPE_INT32, "int32"),
        (F.TYPE_INT64, "int64"),
        (F.TYPE_UINT32, "uint32"),
        (F.TYPE_UINT64, "uint64"),
        (F.TYPE_SINT32, "sint32"),
        (F.TYPE_SINT64, "sint64"),
        (F.TYPE_FIXED32, "fixed32"),
        (F.TYPE_FIXED64, "fixed64"),
        (F.TYPE_SFIXED32, "sfixed32"),
        (F.TYPE_SFIXED64, "sfixed64"),
        (F.TYPE_BOOL, "bool"),
        (F.TYPE_STRING, "string"),
        (F.TYPE_BYTES, "bytes"),
        (F.TYPE_GROUP, "group"),
        (F.TYPE_MESSAGE, "message"),
    ],
)
def test_field_type_tag(type_, expected):
    resolver = make_resolver()
    assert resolver.field_type_tag(field(type_, ".foo.bar.Baz")) == expected


def test_enum_field_type_tag_quotes_path():
    resolver = make_resolver()
    tag = resolver.field_type_tag(field(F.TYPE_ENUM, ".foo.Color"))
    assert tag == 'enumeration="super::Color"'


def test_map_value_enum_tag_uses_parentheses():
    resolver = make_resolver()
    ident = resolver.resolve_ident(".foo.Color")
    tag = resolver.map_value_type_tag(field(F.TYPE_ENUM, ".foo.Color"))
    assert tag.startswith("enumeration(")
    assert tag.endswith(")")
    assert ident in tag


@pytest.mark.parametrize("type_", [F.TYPE_STRING, F.TYPE_INT32, F.TYPE_MESSAGE, F.TYPE_BYTES])
def test_map_value_non_enum_matches_field_tag(type_):
    resolver = make_resolver()
    f = field(type_, ".foo.bar.Baz")
    assert resolver.map_value_type_tag(f) == resolver.field_type_tag(f)