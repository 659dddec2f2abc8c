"""
file_paths.py

Responsibility: map logical component identifiers to paths inside the target project.

Paths are stored relative to the source root (`src/` when the project uses a
src directory, the project root otherwise) and formatted on demand either as
an import specifier under the path alias (`@/lib/trpc/Provider`) or as a
project-relative path (`src/lib/trpc/Provider.tsx`).
"""

from __future__ import annotations

import re
from typing import Literal

from kickstart.config import ProjectConfig

Prefix = Literal["alias", "root"]

_EXTENSION_RE = re.compile(r"\.(tsx|ts|jsx|js)$")

FILE_PATHS: dict[str, dict[str, str]] = {
    "shared": {
        "navbarComponent": "components/Navbar.tsx",
        "sidebarComponent": "components/Sidebar.tsx",
        "rootLayout": "app/layout.tsx",
    },
    "next-auth": {
        "authProviderComponent": "lib/auth/Provider.tsx",
    },
    "trpc": {
        "trpcProvider": "lib/trpc/Provider.tsx",
    },
}


class UnknownFilePathError(KeyError):
    pass


def get_file_path(identifier: str) -> str:
    """
    Resolve `<group>.<name>` (e.g. `trpc.trpcProvider`) to a source-root-relative path.
    """
    group, _, name = identifier.rpartition(".")
    try:
        return FILE_PATHS[group][name]
    except KeyError as e:
        raise UnknownFilePathError(f"Unknown file path identifier: {identifier}") from e


def format_file_path(
    file_path: str,
    config: ProjectConfig,
    *,
    prefix: Prefix = "root",
    remove_extension: bool = False,
) -> str:
    formatted = _EXTENSION_RE.sub("", file_path) if remove_extension else file_path
    if prefix == "alias":
        return f"{config.alias}/{formatted}"
    return f"src/{formatted}" if config.has_src else formatted


def import_path(identifier: str, config: ProjectConfig) -> str:
    """Alias-prefixed, extension-less import specifier for an identifier."""
    return format_file_path(get_file_path(identifier), config, prefix="alias", remove_extension=True)


def project_path(identifier: str, config: ProjectConfig) -> str:
    """Project-root-relative path (with extension) for an identifier."""
    return format_file_path(get_file_path(identifier), config, prefix="root")
