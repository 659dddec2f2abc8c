"""
pending.py

Responsibility: collect package and component install requests from every feature
installer, and execute them as one batch at the end of the run.

Both lists are owned by the `SetupContext` of a single run and flushed exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kickstart.installer import install_packages, install_shadcn_components

if TYPE_CHECKING:
    from kickstart.context import SetupContext

logger = logging.getLogger(__name__)


def dedupe(items: list[str]) -> list[str]:
    """Trimmed, first-seen-order unique entries. Blank entries are dropped."""
    seen: dict[str, None] = {}
    for item in items:
        name = item.strip()
        if name:
            seen.setdefault(name, None)
    return list(seen)


@dataclass
class InstallList:
    regular: list[str] = field(default_factory=list)
    dev: list[str] = field(default_factory=list)

    def add(self, regular: list[str] | None = None, dev: list[str] | None = None) -> None:
        self.regular.extend(regular or [])
        self.dev.extend(dev or [])

    def formatted(self) -> tuple[str, str]:
        """Space-separated (regular, dev) argument strings."""
        return " ".join(dedupe(self.regular)), " ".join(dedupe(self.dev))

    def flush(self, ctx: SetupContext) -> bool:
        """
        Install everything queued so far. Returns False when there was nothing to install.
        """
        regular, dev = self.formatted()
        if not regular and not dev:
            return False
        ctx.set_status("Installing Packages")
        logger.info("Installing packages: regular=[%s] dev=[%s]", regular, dev)
        install_packages(regular, dev, ctx.config.preferred_package_manager, cwd=ctx.root)
        return True


@dataclass
class ComponentList:
    components: list[str] = field(default_factory=list)

    def add(self, components: list[str]) -> None:
        self.components.extend(components)

    def flush(self, ctx: SetupContext) -> bool:
        names = dedupe(self.components)
        if not names:
            return False
        ctx.set_status("Installing ShadcnUI Components")
        logger.info("Installing shadcn-ui components: %s", ", ".join(names))
        install_shadcn_components(names, ctx.config.preferred_package_manager, cwd=ctx.root)
        return True
