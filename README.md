# protorust

`protorust` turns `.proto` files into Rust source modules for the prost
message library. It runs `protoc` to build a descriptor set that includes
imports and source info. It then walks the descriptors and writes one output
file per Protobuf package, named after the package: `package snazzy.items;`
becomes `snazzy.items.rs`.

What the generated code contains:

- Every message becomes a `pub struct` with `#[prost(...)]` field attributes.
- Every enum becomes an `Enumeration` with `#[repr(i32)]`. Aliased values that
  share a number are emitted once.
- Every `oneof` becomes an enum of its own, inside a module named after the
  enclosing message.
- Recursive message fields are boxed.
- Map fields become `HashMap`, or `BTreeMap` on request.
- Protobuf comments are carried over as doc comments.

## Compiling protos

```python
from protorust.config import Config
from protorust.compile import compile_protos

config = Config()
config.out_dir("generated")
compile_protos(["src/items.proto"], ["src/"], config)
```

The `config` argument is optional. If no output directory is configured, the
`OUT_DIR` environment variable is used. When neither is set, `OSError` is
raised, and a failing `protoc` run also raises `OSError` with its error output.
A file is rewritten only when its generated content has changed.

To generate code from descriptors you already have, use
`protorust.compile.generate(config, files)`. It takes an iterable of
`google.protobuf.descriptor_pb2.FileDescriptorProto` and returns a dict that
maps each module path (a tuple of snake_case package segments) to the
generated code. Every file must have a package and source code info, or
`ValueError` is raised. `protorust.compile.module_path(file)` gives the module
path of one file.

## Options

`Config` is a dataclass that holds the code generation options. Every setter
returns the config, so calls can be chained:

- `btree_map(paths)`: map fields matched by any of `paths` use `BTreeMap`.
  Each call replaces the previous list.
- `field_attribute(path, attribute)`: adds `attribute` before every matched
  field, enum value or oneof field. Calls accumulate.
- `type_attribute(path, attribute)`: adds `attribute` before every matched
  message, enum or oneof. Calls accumulate.
- `extern_path(proto_path, rust_path)`: refers to types of an external Rust
  path instead of generating them.
- `compile_well_known_types()`: generate the `google.protobuf` well-known
  types instead of using `::prost_types`.
- `retain_enum_prefix()`: keep the enum name prefix on variant names. By
  default `Size.SIZE_SMALL` becomes `Small`.
- `service_generator(generator)`: emit code for services through a
  `ServiceGenerator`.
- `out_dir(path)`: where the generated files are written.

Path matching works like this:

- Paths that start with `.` are fully qualified and match by prefix, for
  example `.my_messages.MyMessageType`.
- Paths without a leading `.` match by suffix, for example
  `MyMessageType.my_map_field`.
- `.` alone matches everything.

```python
config = (
    Config()
    .btree_map(["."])
    .type_attribute(".", "#[derive(Eq)]")
    .field_attribute("in", '#[serde(rename = "in")]')
    .extern_path(".uuid", "::uuid")
)
```

Extern paths must be fully qualified and must not repeat. If they do, `generate`
raises `ValueError`.

## Services

Services are emitted only when a service generator is configured. Subclass
`protorust.service.ServiceGenerator` and return the text to append. Each
`protorust.ast.Service` has a `name`, `proto_name`, `package`, `comments`,
`methods` and `options`. Each `protorust.ast.Method` also carries its resolved
`input_type` and `output_type` and its streaming flags.

```python
from protorust.service import ServiceGenerator


class TraitGenerator(ServiceGenerator):
    def generate(self, service):
        lines = [service.comments.format_with_indent(0), f"trait {service.name} {{\n"]
        for method in service.methods:
            lines.append(method.comments.format_with_indent(1))
            lines.append(
                f"    fn {method.name}({method.input_type}) -> {method.output_type};\n"
            )
        lines.append("}\n")
        return "".join(lines)

    def finalize(self):
        return "pub mod utils { }\n"
```

`finalize` runs once per `.proto` file. `finalize_package` runs once per
Protobuf package that defines services. Both return an empty string by
default.

## Locating protoc

`protorust.locate.find_protoc()` looks for `protoc` in this order:

1. the `PROTOC` environment variable,
2. a bundled binary under `./third-party/protobuf` for the current platform,
3. `protoc` on the `PATH`.

If none is found, it raises `FileNotFoundError`.

`find_protoc_include()` takes the include directory from `PROTOC_INCLUDE` and
falls back to `./third-party/protobuf/include`. If `PROTOC` or `PROTOC_INCLUDE`
points at something missing, the lookup raises `FileNotFoundError`. If
`PROTOC_INCLUDE` points at something that is not a directory, it raises
`NotADirectoryError`. `protorust.compile.protoc()` and
`protorust.compile.protoc_include()` return the paths that will be used.

## What it does not do

There is no command-line tool. Generation is driven from Python through
`compile_protos` or `generate`. The package does not parse `.proto` files
itself; it relies on an installed `protoc`. It produces only Rust source text
and does not encode or decode Protobuf messages.