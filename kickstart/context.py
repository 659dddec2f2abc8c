"""
context.py

Responsibility: hold the state of one setup run (project root, config, pending
install lists, progress indicator) and hand it to every setup step.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kickstart.config import ProjectConfig
from kickstart.pending import ComponentList, InstallList

logger = logging.getLogger(__name__)


@dataclass
class SetupContext:
    root: Path
    config: ProjectConfig
    install_list: InstallList = field(default_factory=InstallList)
    component_list: ComponentList = field(default_factory=ComponentList)
    # rich.status.Status while the CLI spinner is running
    status: Any = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def source_root(self) -> Path:
        return self.root / "src" if self.config.has_src else self.root

    def set_status(self, text: str) -> None:
        logger.info(text)
        if self.status is not None:
            self.status.update(text)

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    def flush(self) -> None:
        """Run the batched installs: packages first, then UI components."""
        self.install_list.flush(self)
        self.component_list.flush(self)
