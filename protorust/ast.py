"""Descriptions of Protobuf items handed to service generators."""

from __future__ import annotations

from dataclasses import dataclass, field

from google.protobuf.descriptor_pb2 import MethodOptions, ServiceOptions, SourceCodeInfo

_INDENT = "    "


def _lines(text: str) -> list[str]:
    """Split text into lines, dropping a final empty line and trailing carriage returns."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


@dataclass
class Comments:
    """Comments attached to a Protobuf item."""

    leading_detached: list[list[str]] = field(default_factory=list)
    leading: list[str] = field(default_factory=list)
    trailing: list[str] = field(default_factory=list)

    @classmethod
    def from_location(cls, location: SourceCodeInfo.Location) -> Comments:
        """Build comments from a source code location."""
        return cls(
            leading_detached=[_lines(block) for block in location.leading_detached_comments],
            leading=(
                _lines(location.leading_comments)
                if location.HasField("leading_comments")
                else []
            ),
            trailing=(
                _lines(location.trailing_comments)
                if location.HasField("trailing_comments")
                else []
            ),
        )

    def format_with_indent(self, indent_level: int) -> str:
        """Render the comments, each indent level being four spaces."""
        indent = _INDENT * indent_level
        out: list[str] = []

        for block in self.leading_detached:
            out.extend(f"{indent}//{line}\n" for line in block)
            out.append("\n")

        out.extend(f"{indent}///{line}\n" for line in self.leading)

        if self.leading and self.trailing:
            out.append(f"{indent}///\n")

        out.extend(f"{indent}///{line}\n" for line in self.trailing)
        return "".join(out)


@dataclass
class Method:
    """A service method."""

    name: str
    proto_name: str
    comments: Comments
    input_type: str
    output_type: str
    input_proto_type: str
    output_proto_type: str
    options: MethodOptions = field(default_factory=MethodOptions)
    client_streaming: bool = False
    server_streaming: bool = False


@dataclass
class Service:
    """A service and its methods."""

    name: str
    proto_name: str
    package: str
    comments: Comments
    methods: list[Method] = field(default_factory=list)
    options: ServiceOptions = field(default_factory=ServiceOptions)