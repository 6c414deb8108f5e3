"""Compiling .proto files into Rust modules through protoc."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from collections.abc import Iterable
from pathlib import Path

from google.protobuf.descriptor_pb2 import FileDescriptorProto, FileDescriptorSet

from protorust.code_generator import CodeGenerator
from protorust.config import Config
from protorust.extern_paths import ExternPaths
from protorust.ident import to_snake
from protorust.locate import find_protoc, find_protoc_include
from protorust.message_graph import MessageGraph

_log = logging.getLogger(__name__)

Module = tuple[str, ...]


def protoc() -> Path:
    """Return the path to the protoc binary."""
    return find_protoc()


def protoc_include() -> Path:
    """Return the path to the Protobuf include directory."""
    return find_protoc_include()


def module_path(file: FileDescriptorProto) -> Module:
    """Return the Rust module path that a file's package is generated into."""
    return tuple(to_snake(segment) for segment in file.package.split(".") if segment)


def generate(config: Config, files: Iterable[FileDescriptorProto]) -> dict[Module, str]:
    """Generate Rust code for file descriptors, keyed by module path.

    Files sharing a package are generated into the same module. Raises
    ValueError if the descriptors or the extern paths are invalid.
    """
    files = list(files)
    message_graph = MessageGraph(files)
    extern_paths = ExternPaths(config.extern_paths, config.prost_types)

    modules: dict[Module, str] = {}
    packages: dict[Module, str] = {}
    for file in files:
        module = module_path(file)
        # Only packages that have services are finalized.
        if file.service:
            packages[module] = file.package
        code = CodeGenerator.generate(config, message_graph, extern_paths, file)
        modules[module] = modules.get(module, "") + code

    generator = config.generator
    if generator is not None:
        for module, package in packages.items():
            modules[module] += generator.finalize_package(package)

    return modules


def _target_dir(config: Config) -> Path:
    if config.output_dir is not None:
        return config.output_dir
    out_dir = os.environ.get("OUT_DIR")
    if out_dir is None:
        raise OSError("OUT_DIR environment variable is not set")
    return Path(out_dir)


def _run_protoc(
    protos: Iterable[str | os.PathLike[str]],
    includes: Iterable[str | os.PathLike[str]],
) -> FileDescriptorSet:
    with tempfile.TemporaryDirectory(prefix="prost-build") as tmp:
        descriptor_set = Path(tmp) / "prost-descriptor-set"
        cmd = [
            str(protoc()),
            "--include_imports",
            "--include_source_info",
            "-o",
            str(descriptor_set),
        ]
        for include in includes:
            cmd += ["-I", os.fspath(include)]
        # The built-in include comes last so user includes can override it.
        cmd += ["-I", str(protoc_include())]
        cmd.extend(os.fspath(proto) for proto in protos)

        result = subprocess.run(cmd, capture_output=True, check=False)
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", "replace")
            raise OSError(f"protoc failed: {stderr}")
        data = descriptor_set.read_bytes()
    return FileDescriptorSet.FromString(data)


def compile_protos(
    protos: Iterable[str | os.PathLike[str]],
    includes: Iterable[str | os.PathLike[str]],
    config: Config | None = None,
) -> None:
    """Compile .proto files into Rust files in the configured output directory.

    The output directory defaults to the OUT_DIR environment variable. Files
    whose content has not changed are left untouched.
    """
    if config is None:
        config = Config()
    target = _target_dir(config)
    descriptor_set = _run_protoc(list(protos), list(includes))

    for module, content in generate(config, descriptor_set.file).items():
        filename = ".".join(module) + ".rs"
        output_path = target / filename
        encoded = content.encode("utf-8")
        try:
            previous = output_path.read_bytes()
        except OSError:
            previous = None
        if previous == encoded:
            _log.debug("unchanged: %r", filename)
        else:
            _log.debug("writing: %r", filename)
            output_path.write_bytes(encoded)