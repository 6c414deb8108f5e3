"""The interface for generating code from Protobuf service definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from protorust.ast import Service


class ServiceGenerator(ABC):
    """Turns service descriptions into Rust code.

    Every method returns the text to append to the generated module.
    """

    @abstractmethod
    def generate(self, service: Service) -> str:
        """Return code for one service."""

    def finalize(self) -> str:
        """Return code to append once per .proto file; nothing by default."""
        return ""

    def finalize_package(self, package: str) -> str:
        """Return code to append once per Protobuf package; nothing by default."""
        return ""