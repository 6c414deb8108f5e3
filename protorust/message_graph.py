"""Graph of message types whose edges are non-repeated message fields."""

from __future__ import annotations

from collections.abc import Iterable

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
)


class MessageGraph:
    """Detects recursively nested message types so that fields can be boxed."""

    def __init__(self, files: Iterable[FileDescriptorProto]) -> None:
        self._edges: dict[str, set[str]] = {}
        for file in files:
            if not file.HasField("package"):
                name = file.name if file.HasField("name") else "(unknown)"
                raise ValueError(
                    "prost requires a package specifier in all .proto files; "
                    f"file with missing package specifier: {name}"
                )
            package = "." + file.package
            for msg in file.message_type:
                self._add_message(package, msg)

    def _node(self, msg_name: str) -> set[str]:
        if not msg_name.startswith("."):
            raise ValueError(f"message name must be fully qualified: {msg_name!r}")
        return self._edges.setdefault(msg_name, set())

    def _add_message(self, package: str, msg: DescriptorProto) -> None:
        msg_name = f"{package}.{msg.name}"
        edges = self._node(msg_name)
        for field in msg.field:
            if (
                field.type == FieldDescriptorProto.TYPE_MESSAGE
                and field.label != FieldDescriptorProto.LABEL_REPEATED
            ):
                if not field.HasField("type_name"):
                    raise ValueError(f"message field without a type name in {msg_name}")
                self._node(field.type_name)
                edges.add(field.type_name)
        for nested in msg.nested_type:
            self._add_message(msg_name, nested)

    def is_nested(self, outer: str, inner: str) -> bool:
        """Return True if message type inner is reachable from message type outer."""
        if outer not in self._edges or inner not in self._edges:
            return False
        seen = {outer}
        stack = [outer]
        while stack:
            node = stack.pop()
            if node == inner:
                return True
            for target in self._edges[node]:
                if target not in seen:
                    seen.add(target)
                    stack.append(target)
        return False