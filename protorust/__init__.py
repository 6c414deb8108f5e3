"""Generate prost-style Rust type definitions from Protocol Buffers descriptors."""

__version__ = "0.6.1"