"""
cli.py

Responsibility: CLI entrypoint for kickstart.

High-level flow (`init` and `add`):
1) Resolve the project config (`init` writes it, `add` reads it)
2) Run every selected feature installer (templates, pending installs, layout providers)
3) Flush the batched package / component installs
4) Record the installed features in the config and print the next steps

This module should orchestrate behavior but keep concerns isolated:
- Config: `config.py`
- Features: `features.py`
- Package managers: `installer.py`
- Report: `summary.py`
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from rich.console import Console

from kickstart import __version__
from kickstart.config import (
    PACKAGE_MANAGERS,
    ConfigError,
    ProjectConfig,
    config_path,
    read_config,
    update_config,
    write_config,
)
from kickstart.context import SetupContext
from kickstart.features import FeatureError, run_features, selected_features
from kickstart.installer import ExternalInstallError
from kickstart.layout import MalformedTargetFileError, PatchAnchorNotFoundError
from kickstart.logging_config import resolve_level, setup_logging
from kickstart.packages import AUTH_PROVIDERS, DATABASES, DB_PROVIDERS, choices, database_for
from kickstart.pending import dedupe
from kickstart.renderer import RenderError
from kickstart.summary import Selections, build_and_show_summary

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


# Errors that abort the run with a message instead of a traceback.
_HANDLED_ERRORS: tuple[type[BaseException], ...] = (
    CLIError,
    ConfigError,
    FeatureError,
    RenderError,
    ExternalInstallError,
    MalformedTargetFileError,
    PatchAnchorNotFoundError,
    FileNotFoundError,
)


def _selections(args: argparse.Namespace, config: ProjectConfig | None = None) -> Selections:
    orm = args.orm or (config.orm if config else None)
    db_provider = args.db_provider or (config.provider if config else None)
    db = args.db or (config.driver if config else None) or database_for(db_provider)
    return Selections(
        orm=orm,
        db_provider=db_provider,
        db=db,
        auth=args.auth,
        auth_providers=tuple(dedupe(args.auth_providers or [])),
        misc_packages=tuple(dedupe(args.misc or [])),
        component_lib=args.component_lib,
    )


def _record(root: Path, config: ProjectConfig, selections: Selections, features: list[str]) -> ProjectConfig:
    return update_config(
        root,
        packages=tuple(dedupe([*config.packages, *features])),
        orm=selections.orm or config.orm,
        driver=selections.db or config.driver,
        provider=selections.db_provider or config.provider,
        auth=selections.auth or config.auth,
        component_lib=selections.component_lib or config.component_lib,
    )


def _installed(selections: Selections, features: list[str]) -> Selections:
    """
    Narrow `selections` to the features that ran in this invocation.

    The ORM that `add` takes from the config is reported only when it was set up in this run.
    """
    orm = selections.orm if selections.orm in features else None
    auth = selections.auth if selections.auth in features else None
    return dataclasses.replace(
        selections,
        orm=orm,
        db_provider=selections.db_provider if orm else None,
        db=selections.db if orm else None,
        auth=auth,
        auth_providers=selections.auth_providers if auth else (),
        misc_packages=tuple(p for p in selections.misc_packages if p in features),
        component_lib=selections.component_lib if selections.component_lib in features else None,
    )


def _setup(args: argparse.Namespace, *, root: Path, config: ProjectConfig, selections: Selections) -> int:
    console = Console()
    ctx = SetupContext(root=root, config=config)

    with console.status("Setting up", spinner="dots") as status:
        ctx.status = status
        features = run_features(ctx, selections, navbar=bool(args.navbar), skip=set(config.packages))
        if args.skip_install:
            logger.info("Skipping package installation")
        else:
            ctx.flush()
        ctx.status = None

    _record(root, config, selections, features)
    build_and_show_summary(_installed(selections, features), ctx.elapsed_ms(), config.preferred_package_manager, console)
    return 0


def _detect_src_dir(root: Path) -> bool:
    return (root / "src" / "app").is_dir()


def init_cmd(args: argparse.Namespace) -> int:
    root = Path(args.root).resolve()
    if not root.is_dir():
        raise CLIError(f"Project root does not exist: {root}")
    if config_path(root).exists() and not args.overwrite:
        raise CLIError(f"{config_path(root).name} already exists (use `kickstart add`, or --overwrite)")

    has_src = _detect_src_dir(root) if args.src_dir is None else bool(args.src_dir)
    config = ProjectConfig(
        has_src=has_src,
        alias=args.alias.rstrip("/") or "@",
        preferred_package_manager=args.package_manager,
    )
    selections = _selections(args)
    selected_features(selections, navbar=bool(args.navbar))
    write_config(root, config)
    return _setup(args, root=root, config=config, selections=selections)


def add_cmd(args: argparse.Namespace) -> int:
    root = Path(args.root).resolve()
    config = read_config(root)
    return _setup(args, root=root, config=config, selections=_selections(args, config))


def _add_feature_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--root", default=".", help="Next.js project root (default: current directory)")
    p.add_argument("--orm", choices=choices("orm"), default=None, help="ORM to set up")
    p.add_argument("--db", choices=DATABASES, default=None, help="Database engine (default: derived from --db-provider)")
    p.add_argument("--db-provider", choices=sorted(DB_PROVIDERS), default=None, help="Database driver for Drizzle")
    p.add_argument("--auth", choices=choices("auth"), default=None, help="Authentication package")
    p.add_argument(
        "--auth-provider",
        dest="auth_providers",
        action="append",
        choices=sorted(AUTH_PROVIDERS),
        default=None,
        help="Auth.js OAuth provider (repeatable)",
    )
    p.add_argument("--misc", action="append", choices=choices("misc"), default=None, help="Extra package (repeatable)")
    p.add_argument("--component-lib", choices=choices("componentLib"), default=None, help="UI component library")
    p.add_argument("--navbar", action="store_true", help="Add the sidebar/navbar shell to the root layout")
    p.add_argument("--skip-install", action="store_true", help="Queue packages but do not run the package manager")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kickstart", description="kickstart - add features to a Next.js app")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", dest="log_level", action="store_const", const="INFO", default=None)
    p.add_argument("--debug", dest="log_level", action="store_const", const="DEBUG")
    sub = p.add_subparsers(dest="command", required=True)

    i = sub.add_parser("init", help="Write kickstart.config.json and set up the selected features")
    _add_feature_arguments(i)
    i.add_argument("--package-manager", choices=PACKAGE_MANAGERS, default="npm", help="Package manager (default: npm)")
    i.add_argument("--alias", default="@", help="Import path alias (default: @)")
    i.add_argument("--src-dir", dest="src_dir", action="store_true", default=None, help="Project uses a src/ directory")
    i.add_argument("--no-src-dir", dest="src_dir", action="store_false", default=None, help="Project has no src/ directory")
    i.add_argument("--overwrite", action="store_true", help="Replace an existing kickstart.config.json")
    i.set_defaults(func=init_cmd)

    a = sub.add_parser("add", help="Set up more features in an initialized project")
    _add_feature_arguments(a)
    a.set_defaults(func=add_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(resolve_level(args.log_level))
    try:
        return int(args.func(args))
    except _HANDLED_ERRORS as e:
        logger.debug("Aborting", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
