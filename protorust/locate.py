"""Locating the protoc binary and the Protobuf include directory.

protoc is looked for, in order, at the PROTOC environment variable, the
bundled binary for this host, and the PATH. The include directory is taken
from PROTOC_INCLUDE, falling back to the bundled one.
"""

from __future__ import annotations

import os
import platform
import shutil
from pathlib import Path

_BUNDLED_BINARIES = {
    ("linux", "x86"): "protoc-linux-x86_32",
    ("linux", "x86_64"): "protoc-linux-x86_64",
    ("linux", "aarch64"): "protoc-linux-aarch_64",
    ("macos", "x86_64"): "protoc-osx-x86_64",
}

_OS_NAMES = {"linux": "linux", "darwin": "macos", "windows": "windows"}

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x86": "x86",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def _host() -> tuple[str, str]:
    system = platform.system().lower()
    machine = platform.machine().lower()
    return _OS_NAMES.get(system, system), _ARCH_NAMES.get(machine, machine)


def bundle_path() -> Path:
    """Return the location of the bundled Protobuf artifacts."""
    return Path.cwd() / "third-party" / "protobuf"


def env_protoc() -> Path | None:
    """Return the protoc named by PROTOC, if set."""
    value = os.environ.get("PROTOC")
    if value is None:
        return None
    protoc = Path(value)
    if not protoc.exists():
        raise FileNotFoundError(
            f"PROTOC environment variable points to non-existent file ({protoc})"
        )
    return protoc


def bundled_protoc() -> Path | None:
    """Return the bundled protoc for this host, if there is one."""
    os_name, arch = _host()
    if os_name == "windows":
        name = "protoc-win32.exe"
    else:
        name = _BUNDLED_BINARIES.get((os_name, arch))
        if name is None:
            return None
    return bundle_path() / name


def path_protoc() -> Path | None:
    """Return the protoc found on the PATH, if any."""
    found = shutil.which("protoc")
    return Path(found) if found else None


def env_protoc_include() -> Path | None:
    """Return the include directory named by PROTOC_INCLUDE, if set."""
    value = os.environ.get("PROTOC_INCLUDE")
    if value is None:
        return None
    include = Path(value)
    if not include.exists():
        raise FileNotFoundError(
            f"PROTOC_INCLUDE environment variable points to non-existent directory ({include})"
        )
    if not include.is_dir():
        raise NotADirectoryError(
            f"PROTOC_INCLUDE environment variable points to a non-directory file ({include})"
        )
    return include


def bundled_protoc_include() -> Path:
    """Return the bundled Protobuf include directory."""
    return bundle_path() / "include"


def find_protoc() -> Path:
    """Return the protoc to use, raising FileNotFoundError if there is none."""
    for candidate in (env_protoc, bundled_protoc, path_protoc):
        found = candidate()
        if found is not None:
            return found
    raise FileNotFoundError(
        "Failed to find the protoc binary. The PROTOC environment variable is not set, "
        "there is no bundled protoc for this platform, and protoc is not in the PATH"
    )


def find_protoc_include() -> Path:
    """Return the Protobuf include directory to use."""
    return env_protoc_include() or bundled_protoc_include()