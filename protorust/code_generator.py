"""Generation of Rust source from a single Protobuf file descriptor."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    EnumValueDescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
    MethodOptions,
    OneofDescriptorProto,
    ServiceDescriptorProto,
    ServiceOptions,
    SourceCodeInfo,
)

from protorust.ast import Comments, Method, Service
from protorust.config import Config
from protorust.escapes import (
    can_pack,
    escape_bytes_default,
    strip_enum_prefix,
    unescape_c_escape_string,
)
from protorust.extern_paths import ExternPaths
from protorust.ident import match_ident, to_snake, to_upper_camel
from protorust.message_graph import MessageGraph
from protorust.resolver import TypeResolver

_log = logging.getLogger(__name__)

_F = FieldDescriptorProto
_MESSAGE_TYPES = (_F.TYPE_MESSAGE, _F.TYPE_GROUP)
_INDENT = "    "

_FieldAt = tuple[FieldDescriptorProto, int]


class Syntax(Enum):
    """The Protobuf syntax a file is written in."""

    PROTO2 = "proto2"
    PROTO3 = "proto3"


class CodeGenerator:
    """Writes the Rust code for the messages, enums and services of one file."""

    def __init__(
        self,
        config: Config,
        file: FileDescriptorProto,
        message_graph: MessageGraph,
        extern_paths: ExternPaths,
    ) -> None:
        if not file.HasField("source_code_info"):
            raise ValueError("no source code info in request")
        if not file.HasField("package"):
            raise ValueError(f"file has no package: {file.name}")

        if not file.HasField("syntax") or file.syntax == "proto2":
            self._syntax = Syntax.PROTO2
        elif file.syntax == "proto3":
            self._syntax = Syntax.PROTO3
        else:
            raise ValueError(f"unknown syntax: {file.syntax}")

        self._locations: dict[tuple[int, ...], SourceCodeInfo.Location] = {}
        for location in file.source_code_info.location:
            path = tuple(location.path)
            if path and len(path) % 2 == 0:
                self._locations.setdefault(path, location)

        self._config = config
        self._message_graph = message_graph
        self._extern_paths = extern_paths
        self._resolver = TypeResolver(file.package, extern_paths)
        self._depth = 0
        self._path: list[int] = []
        self._out: list[str] = []

    @staticmethod
    def generate(
        config: Config,
        message_graph: MessageGraph,
        extern_paths: ExternPaths,
        file: FileDescriptorProto,
    ) -> str:
        """Return the Rust code generated for a file descriptor."""
        gen = CodeGenerator(config, file, message_graph, extern_paths)
        _log.debug("file: %r, package: %r", file.name, gen._package)

        for idx, message in enumerate(file.message_type):
            with gen._at(4, idx):
                gen._append_message(message)

        for idx, desc in enumerate(file.enum_type):
            with gen._at(5, idx):
                gen._append_enum(desc)

        generator = config.generator
        if generator is not None:
            for idx, service in enumerate(file.service):
                with gen._at(6, idx):
                    gen._push_service(service)
            gen._write(generator.finalize())

        return "".join(gen._out)

    @property
    def _package(self) -> str:
        return self._resolver.package

    @_package.setter
    def _package(self, value: str) -> None:
        self._resolver.package = value

    @contextmanager
    def _at(self, *indices: int) -> Iterator[None]:
        self._path.extend(indices)
        try:
            yield
        finally:
            del self._path[len(self._path) - len(indices) :]

    def _write(self, text: str) -> None:
        self._out.append(text)

    def _line(self, text: str) -> None:
        self._out.append(_INDENT * self._depth + text + "\n")

    def _location(self) -> SourceCodeInfo.Location:
        try:
            return self._locations[tuple(self._path)]
        except KeyError:
            raise ValueError(f"no source location for path {self._path}") from None

    def _append_doc(self) -> None:
        self._write(Comments.from_location(self._location()).format_with_indent(self._depth))

    def _append_type_attributes(self, msg_name: str) -> None:
        for matcher, attribute in self._config.type_attributes:
            if match_ident(matcher, msg_name, None):
                self._line(attribute)

    def _append_field_attributes(self, msg_name: str, field_name: str) -> None:
        for matcher, attribute in self._config.field_attributes:
            if match_ident(matcher, msg_name, field_name):
                self._line(attribute)

    def _append_message(self, message: DescriptorProto) -> None:
        _log.debug("  message: %r", message.name)
        message_name = message.name
        fq_message_name = f".{self._package}.{message_name}"

        if self._extern_paths.resolve_ident(fq_message_name) is not None:
            return

        nested_types: list[tuple[DescriptorProto, int]] = []
        map_types: dict[str, tuple[FieldDescriptorProto, FieldDescriptorProto]] = {}
        for idx, nested in enumerate(message.nested_type):
            if nested.options.map_entry:
                if len(nested.field) < 2:
                    raise ValueError(f"map entry {nested.name} lacks key and value fields")
                key, value = nested.field[0], nested.field[1]
                if key.name != "key" or value.name != "value":
                    raise ValueError(
                        f"map entry {nested.name} must have 'key' and 'value' fields"
                    )
                map_types[f"{fq_message_name}.{nested.name}"] = (key, value)
            else:
                nested_types.append((nested, idx))

        fields: list[_FieldAt] = []
        oneof_fields: dict[int, list[_FieldAt]] = {}
        for idx, fld in enumerate(message.field):
            if fld.HasField("oneof_index"):
                oneof_fields.setdefault(fld.oneof_index, []).append((fld, idx))
            else:
                fields.append((fld, idx))

        if len(oneof_fields) != len(message.oneof_decl):
            raise ValueError(f"oneof fields of {fq_message_name} do not match its oneofs")

        self._append_doc()
        self._line("#[derive(Clone, PartialEq, ::prost::Message)]")
        self._append_type_attributes(fq_message_name)
        self._line(f"pub struct {to_upper_camel(message_name)} {{")

        self._depth += 1
        for fld, idx in fields:
            with self._at(2, idx):
                entry = map_types.get(fld.type_name) if fld.HasField("type_name") else None
                if entry is not None:
                    self._append_map_field(fq_message_name, fld, *entry)
                else:
                    self._append_field(fq_message_name, fld)

        for idx, oneof in enumerate(message.oneof_decl):
            members = oneof_fields.get(idx)
            if members is None:
                raise ValueError(f"oneof {oneof.name} of {fq_message_name} has no fields")
            with self._at(8, idx):
                self._append_oneof_field(message_name, fq_message_name, oneof, members)
        self._depth -= 1
        self._line("}")

        if message.enum_type or nested_types or oneof_fields:
            self._push_mod(message_name)
            for nested, idx in nested_types:
                with self._at(3, idx):
                    self._append_message(nested)
            for idx, nested_enum in enumerate(message.enum_type):
                with self._at(4, idx):
                    self._append_enum(nested_enum)
            for idx, oneof in enumerate(message.oneof_decl):
                self._append_oneof(fq_message_name, oneof, idx, oneof_fields[idx])
            self._pop_mod()

    def _append_field(self, msg_name: str, fld: FieldDescriptorProto) -> None:
        type_ = fld.type
        repeated = fld.label == _F.LABEL_REPEATED
        optional = self._optional(fld)
        ty = self._resolver.resolve_type(fld)
        boxed = (
            not repeated
            and type_ in _MESSAGE_TYPES
            and self._message_graph.is_nested(fld.type_name, msg_name)
        )
        _log.debug("    field: %r, type: %r, boxed: %s", fld.name, ty, boxed)

        self._append_doc()
        attr = ["#[prost(", self._resolver.field_type_tag(fld)]

        if fld.label == _F.LABEL_OPTIONAL:
            if optional:
                attr.append(", optional")
        elif fld.label == _F.LABEL_REQUIRED:
            attr.append(", required")
        elif repeated:
            attr.append(", repeated")
            packed = (
                fld.options.packed
                if fld.HasField("options")
                else self._syntax is Syntax.PROTO3
            )
            if can_pack(fld) and not packed:
                attr.append(', packed="false"')

        if boxed:
            attr.append(", boxed")
        attr.append(f', tag="{fld.number}')

        if fld.HasField("default_value"):
            default = fld.default_value
            attr.append('", default="')
            if type_ == _F.TYPE_BYTES:
                attr.append('b\\"')
                attr.append(escape_bytes_default(unescape_c_escape_string(default)))
                attr.append('\\"')
            elif type_ == _F.TYPE_ENUM:
                if self._config.strip_enum_prefix:
                    enum_type = fld.type_name.split(".")[-1]
                    value = strip_enum_prefix(enum_type, to_upper_camel(default))
                else:
                    value = default
                attr.append(to_upper_camel(value))
            else:
                attr.append(default)

        attr.append('")]')
        self._line("".join(attr))
        self._append_field_attributes(msg_name, fld.name)

        if boxed:
            ty = f"::std::boxed::Box<{ty}>"
        if repeated:
            ty = f"::std::vec::Vec<{ty}>"
        elif optional:
            ty = f"::std::option::Option<{ty}>"
        self._line(f"pub {to_snake(fld.name)}: {ty},")

    def _append_map_field(
        self,
        msg_name: str,
        fld: FieldDescriptorProto,
        key: FieldDescriptorProto,
        value: FieldDescriptorProto,
    ) -> None:
        key_ty = self._resolver.resolve_type(key)
        value_ty = self._resolver.resolve_type(value)
        _log.debug(
            "    map field: %r, key type: %r, value type: %r", fld.name, key_ty, value_ty
        )

        self._append_doc()
        btree = any(
            match_ident(matcher, msg_name, fld.name)
            for matcher in self._config.btree_map_paths
        )
        annotation, rust_ty = ("btree_map", "BTreeMap") if btree else ("map", "HashMap")
        key_tag = self._resolver.field_type_tag(key)
        value_tag = self._resolver.map_value_type_tag(value)
        self._line(f'#[prost({annotation}="{key_tag}, {value_tag}", tag="{fld.number}")]')
        self._append_field_attributes(msg_name, fld.name)
        self._line(
            f"pub {to_snake(fld.name)}: ::std::collections::{rust_ty}<{key_ty}, {value_ty}>,"
        )

    def _append_oneof_field(
        self,
        message_name: str,
        fq_message_name: str,
        oneof: OneofDescriptorProto,
        fields: list[_FieldAt],
    ) -> None:
        name = f"{to_snake(message_name)}::{to_upper_camel(oneof.name)}"
        tags = ", ".join(str(fld.number) for fld, _ in fields)
        self._append_doc()
        self._line(f'#[prost(oneof="{name}", tags="{tags}")]')
        self._append_field_attributes(fq_message_name, oneof.name)
        self._line(f"pub {to_snake(oneof.name)}: ::std::option::Option<{name}>,")

    def _append_oneof(
        self,
        msg_name: str,
        oneof: OneofDescriptorProto,
        idx: int,
        fields: list[_FieldAt],
    ) -> None:
        with self._at(8, idx):
            self._append_doc()

        self._line("#[derive(Clone, PartialEq, ::prost::Oneof)]")
        oneof_name = f"{msg_name}.{oneof.name}"
        self._append_type_attributes(oneof_name)
        self._line(f"pub enum {to_upper_camel(oneof.name)} {{")

        self._depth += 1
        for fld, field_idx in fields:
            with self._at(2, field_idx):
                self._append_doc()
            tag = self._resolver.field_type_tag(fld)
            self._line(f'#[prost({tag}, tag="{fld.number}")]')
            self._append_field_attributes(oneof_name, fld.name)

            ty = self._resolver.resolve_type(fld)
            boxed = fld.type in _MESSAGE_TYPES and self._message_graph.is_nested(
                fld.type_name, msg_name
            )
            _log.debug("    oneof: %r, type: %r, boxed: %s", fld.name, ty, boxed)
            if boxed:
                ty = f"Box<{ty}>"
            self._line(f"{to_upper_camel(fld.name)}({ty}),")
        self._depth -= 1
        self._line("}")

    def _append_enum(self, desc: EnumDescriptorProto) -> None:
        _log.debug("  enum: %r", desc.name)
        enum_name = desc.name
        fq_enum_name = f".{self._package}.{enum_name}"
        if self._extern_paths.resolve_ident(fq_enum_name) is not None:
            return

        self._append_doc()
        self._line(
            "#[derive(Clone, Copy, Debug, PartialEq, Eq, Hash, PartialOrd, Ord, "
            "::prost::Enumeration)]"
        )
        self._line("#[repr(i32)]")
        self._append_type_attributes(fq_enum_name)
        self._line(f"pub enum {to_upper_camel(enum_name)} {{")

        prefix = to_upper_camel(enum_name) if self._config.strip_enum_prefix else None
        numbers: set[int] = set()
        self._depth += 1
        for idx, value in enumerate(desc.value):
            # Aliases (allow_alias) share a number; only the first is emitted.
            if value.number in numbers:
                continue
            numbers.add(value.number)
            with self._at(2, idx):
                self._append_enum_value(fq_enum_name, value, prefix)
        self._depth -= 1
        self._line("}")

    def _append_enum_value(
        self,
        fq_enum_name: str,
        value: EnumValueDescriptorProto,
        prefix: str | None,
    ) -> None:
        self._append_doc()
        self._append_field_attributes(fq_enum_name, value.name)
        name = to_upper_camel(value.name)
        if prefix is not None:
            name = strip_enum_prefix(prefix, name)
        self._line(f"{name} = {value.number},")

    def _push_service(self, service: ServiceDescriptorProto) -> None:
        name = service.name
        _log.debug("  service: %r", name)
        comments = Comments.from_location(self._location())

        methods = []
        for idx, method in enumerate(service.method):
            _log.debug("  method: %r", method.name)
            with self._at(2, idx):
                method_comments = Comments.from_location(self._location())
            for required in ("name", "input_type", "output_type"):
                if not method.HasField(required):
                    raise ValueError(f"method of service {name} has no {required}")
            options = MethodOptions()
            options.CopyFrom(method.options)
            methods.append(
                Method(
                    name=to_snake(method.name),
                    proto_name=method.name,
                    comments=method_comments,
                    input_type=self._resolver.resolve_ident(method.input_type),
                    output_type=self._resolver.resolve_ident(method.output_type),
                    input_proto_type=method.input_type,
                    output_proto_type=method.output_type,
                    options=options,
                    client_streaming=method.client_streaming,
                    server_streaming=method.server_streaming,
                )
            )

        service_options = ServiceOptions()
        service_options.CopyFrom(service.options)
        described = Service(
            name=to_upper_camel(name),
            proto_name=name,
            package=self._package,
            comments=comments,
            methods=methods,
            options=service_options,
        )
        generator = self._config.generator
        if generator is not None:
            self._write(generator.generate(described))

    def _push_mod(self, module: str) -> None:
        self._line(f"pub mod {to_snake(module)} {{")
        self._package = f"{self._package}.{module}"
        self._depth += 1

    def _pop_mod(self) -> None:
        self._depth -= 1
        self._package = self._package.rsplit(".", 1)[0]
        self._line("}")

    def _optional(self, fld: FieldDescriptorProto) -> bool:
        if fld.label != _F.LABEL_OPTIONAL:
            return False
        if fld.type == _F.TYPE_MESSAGE:
            return True
        return self._syntax is Syntax.PROTO2