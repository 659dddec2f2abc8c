"""
kickstart package

This package implements a CLI that bootstraps features into a Next.js app.

Key responsibilities are split across modules:
- `config.py`: read/write `kickstart.config.json` into a typed configuration
- `file_paths.py`: resolve logical component identifiers into project paths
- `renderer.py`: deterministic template rendering into the project, atomic file writes
- `installer.py`: isolated package-manager / shadcn-ui command execution
- `pending.py`: batched install and component lists, flushed once per run
- `layout.py`: idempotent provider patching of the root `app/layout.tsx`
- `features.py`: per-feature installers (templates, packages, providers)
- `summary.py`: post-setup "next steps" report
- `cli.py`: CLI entrypoint and orchestration (config -> features -> install -> summary)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
