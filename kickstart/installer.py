"""
installer.py

Responsibility: Isolate all package-manager and shadcn-ui command execution.

This module must be the only place that:
- Knows the command-line syntax of npm / yarn / pnpm / bun
- Spawns installer subprocesses
- Interprets installer failures

Everything else (feature installers, pending lists, CLI) should go through these functions.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

# package manager -> (install verb, dev flag)
_INSTALL_SYNTAX: dict[str, tuple[str, str]] = {
    "npm": ("install", "-D"),
    "yarn": ("add", "-D"),
    "pnpm": ("add", "-D"),
    "bun": ("add", "-d"),
}

# package manager -> one-off package runner
_RUNNERS: dict[str, list[str]] = {
    "npm": ["npx"],
    "yarn": ["npx"],
    "pnpm": ["pnpm", "dlx"],
    "bun": ["bunx", "--bun"],
}

SHADCN_CLI = "shadcn-ui@latest"


class ExternalInstallError(RuntimeError):
    pass


def _run(cmd: list[str], *, cwd: Path) -> None:
    """
    Run a subprocess command, raising an ExternalInstallError on failure.
    """
    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        subprocess.run(cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
    except subprocess.CalledProcessError as e:
        raise ExternalInstallError(f"Command failed: {' '.join(cmd)}\n\n{e.stdout}") from e
    except FileNotFoundError as e:
        raise ExternalInstallError(f"Executable not found: {cmd[0]}") from e


def install_commands(regular: str, dev: str, package_manager: str) -> list[list[str]]:
    """
    Build the command lines for one batched install.

    `regular` and `dev` are space-separated package lists; an empty list yields no command.
    """
    try:
        verb, dev_flag = _INSTALL_SYNTAX[package_manager]
    except KeyError as e:
        raise ExternalInstallError(f"Unsupported package manager: {package_manager}") from e

    commands: list[list[str]] = []
    if regular.strip():
        commands.append([package_manager, verb, *regular.split()])
    if dev.strip():
        commands.append([package_manager, verb, dev_flag, *dev.split()])
    return commands


def install_packages(regular: str, dev: str, package_manager: str, *, cwd: str | Path = ".") -> None:
    for cmd in install_commands(regular, dev, package_manager):
        _run(cmd, cwd=Path(cwd))


def shadcn_command(components: list[str], package_manager: str) -> list[str]:
    runner = _RUNNERS.get(package_manager)
    if runner is None:
        raise ExternalInstallError(f"Unsupported package manager: {package_manager}")
    return [*runner, SHADCN_CLI, "add", "--yes", *components]


def install_shadcn_components(components: list[str], package_manager: str, *, cwd: str | Path = ".") -> None:
    if not components:
        return
    _run(shadcn_command(components, package_manager), cwd=Path(cwd))
