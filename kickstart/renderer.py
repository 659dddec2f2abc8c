"""
renderer.py

Responsibility: Deterministically render/copy feature templates into the target project,
and perform whole-file writes for the patchers.

Rules:
- Walk template files in sorted order to ensure deterministic output.
- For UTF-8 text files, if Jinja2 markers are present, render with the provided context.
- Non-text/binary files are copied byte-for-byte.
- Existing project files are left untouched unless `overwrite` is set.

Templates target TSX/TS sources where `{{ ... }}` is ordinary JSX, so variables
use `{= name =}` instead of Jinja2's default delimiters. Blocks (`{% %}`) and
comments (`{# #}`) keep their defaults.

This module intentionally does NOT know about package managers or CLI parsing.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined

logger = logging.getLogger(__name__)

TEMPLATES_ROOT = Path(__file__).resolve().parent / "templates"

_MARKERS = ("{=", "{%", "{#")


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class RenderResult:
    rendered_files: int
    copied_files: int
    skipped_files: int = 0


def _environment() -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        variable_start_string="{=",
        variable_end_string="=}",
    )


def _is_binary_file(path: Path) -> bool:
    """
    Best-effort: treat a file as binary if it cannot be decoded as UTF-8.
    """
    try:
        path.read_text(encoding="utf-8")
        return False
    except UnicodeDecodeError:
        return True


def _iter_template_files(template_dir: Path) -> list[Path]:
    """
    Return all files under template_dir, in deterministic lexicographic order
    (relative path ordering).
    """
    files: list[Path] = []
    for root, _dirs, filenames in os.walk(template_dir):
        root_path = Path(root)
        for name in filenames:
            files.append(root_path / name)
    files.sort(key=lambda p: str(p.relative_to(template_dir)).replace(os.sep, "/"))
    return files


def render_text(text: str, context: dict[str, Any]) -> str:
    if not any(marker in text for marker in _MARKERS):
        return text
    return _environment().from_string(text).render(**context)


def render_template_dir(
    *,
    template_dir: str | Path,
    destination_dir: str | Path,
    context: dict[str, Any],
    overwrite: bool = False,
) -> RenderResult:
    """
    Render/copy a template directory into destination_dir.

    - Creates destination directories as needed.
    - Copies file permissions from template files.
    """
    tpl_dir = Path(template_dir).resolve()
    dst_dir = Path(destination_dir).resolve()

    if not tpl_dir.exists() or not tpl_dir.is_dir():
        raise RenderError(f"Template directory not found: {tpl_dir}")

    rendered = 0
    copied = 0
    skipped = 0

    for src_path in _iter_template_files(tpl_dir):
        rel = src_path.relative_to(tpl_dir)
        dst_path = dst_dir / rel
        if dst_path.exists() and not overwrite:
            logger.info("Skipping existing file: %s", dst_path)
            skipped += 1
            continue
        dst_path.parent.mkdir(parents=True, exist_ok=True)

        if _is_binary_file(src_path):
            shutil.copy2(src_path, dst_path)
            copied += 1
            continue

        text = src_path.read_text(encoding="utf-8")
        if any(marker in text for marker in _MARKERS):
            try:
                out = render_text(text, context)
            except Exception as e:  # noqa: BLE001 - surface as RenderError
                raise RenderError(f"Failed rendering template file: {rel}") from e
            dst_path.write_text(out, encoding="utf-8", newline="\n")
            shutil.copystat(src_path, dst_path)
            rendered += 1
        else:
            shutil.copy2(src_path, dst_path)
            copied += 1

    logger.debug("Rendered %s into %s (%d rendered, %d copied, %d skipped)", tpl_dir.name, dst_dir, rendered, copied, skipped)
    return RenderResult(rendered_files=rendered, copied_files=copied, skipped_files=skipped)


def replace_file(path: str | Path, content: str, *, newline: str = "\n") -> None:
    """
    Replace the content of `path` in one step.

    The new content goes to a temp file in the same directory which is then
    renamed over the target, so readers never observe a partial write.
    Each "\\n" in `content` is written as `newline`.
    """
    target = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline=newline) as fh:
            fh.write(content)
        if target.exists():
            shutil.copymode(target, tmp_name)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
