"""Options that control how Protobuf descriptors are turned into Rust code."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from protorust.service import ServiceGenerator


@dataclass
class Config:
    """Code generation options.

    Every setter returns the configuration itself, so calls can be chained.
    """

    generator: ServiceGenerator | None = None
    btree_map_paths: list[str] = field(default_factory=list)
    type_attributes: list[tuple[str, str]] = field(default_factory=list)
    field_attributes: list[tuple[str, str]] = field(default_factory=list)
    prost_types: bool = True
    strip_enum_prefix: bool = True
    output_dir: Path | None = None
    extern_paths: list[tuple[str, str]] = field(default_factory=list)

    def btree_map(self, paths: Iterable[str]) -> Config:
        """Generate BTreeMap instead of HashMap for map fields matched by any path."""
        self.btree_map_paths = [str(path) for path in paths]
        return self

    def field_attribute(self, path: str, attribute: str) -> Config:
        """Place an attribute before every field matched by path."""
        self.field_attributes.append((str(path), str(attribute)))
        return self

    def type_attribute(self, path: str, attribute: str) -> Config:
        """Place an attribute before every message, enum or oneof matched by path."""
        self.type_attributes.append((str(path), str(attribute)))
        return self

    def service_generator(self, service_generator: ServiceGenerator) -> Config:
        """Use the given generator for service definitions."""
        self.generator = service_generator
        return self

    def compile_well_known_types(self) -> Config:
        """Generate the well-known types instead of using the prost_types crate."""
        self.prost_types = False
        return self

    def extern_path(self, proto_path: str, rust_path: str) -> Config:
        """Declare a Protobuf package or type as provided by an external Rust path."""
        self.extern_paths.append((str(proto_path), str(rust_path)))
        return self

    def retain_enum_prefix(self) -> Config:
        """Keep the enum name prefix on variant names."""
        self.strip_enum_prefix = False
        return self

    def out_dir(self, path: str | os.PathLike[str]) -> Config:
        """Set the directory that generated files are written to."""
        self.output_dir = Path(path)
        return self