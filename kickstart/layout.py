"""
layout.py

Responsibility: inject provider wrappers and their imports into the root `app/layout.tsx`.

Patching is plain text substitution, not a syntax-tree edit:
- the import goes right after the last import statement of the file,
- the root-children anchor (`{children}`, or the navigation block once the
  Navbar provider has been applied) is replaced by its wrapped form.

Applying a provider whose import statement is already present is a no-op, so
every provider can be applied any number of times. Providers wrap the anchor in
application order: a provider applied later ends up nested inside the ones
applied before it.
"""

from __future__ import annotations

import enum
import logging
import re
from pathlib import Path
from typing import Callable

from kickstart.config import ProjectConfig
from kickstart.context import SetupContext
from kickstart.file_paths import import_path, project_path
from kickstart.renderer import replace_file

logger = logging.getLogger(__name__)

CHILDREN_ANCHOR = "{children}"

NAVIGATION_MARKER = "<Navbar />"

NAVIGATION_BLOCK = (
    '<div className="flex">\n'
    "<Sidebar />\n"
    '<main className="flex-1 md:p-8 pt-2 p-8">\n'
    "<Navbar />\n"
    "{children}\n"
    "</main>\n"
    "</div>"
)

# An import statement, possibly spanning lines: `import x from "y";`, `import "./globals.css";`
# A dynamic `import("x")` call or `import.meta` at the start of a line is not one.
_IMPORT_RE = re.compile(r"""^[ \t]*import\b(?!\s*[(.])""", re.MULTILINE)
_IMPORT_STATEMENT_RE = re.compile(r"""import\b[^;'"]*?["'][^"'\n]*["'][ \t]*;?""", re.DOTALL)


class MalformedTargetFileError(ValueError):
    pass


class PatchAnchorNotFoundError(ValueError):
    pass


class Provider(enum.Enum):
    NEXT_AUTH_PROVIDER = "NextAuthProvider"
    TRPC_PROVIDER = "TrpcProvider"
    SHADCN_TOAST = "ShadcnToast"
    CLERK_PROVIDER = "ClerkProvider"
    NAVBAR = "Navbar"
    THEME_PROVIDER = "ThemeProvider"


def _next_auth_import(config: ProjectConfig) -> str:
    return f'import NextAuthProvider from "{import_path("next-auth.authProviderComponent", config)}";'


def _trpc_import(config: ProjectConfig) -> str:
    return (
        f'import TrpcProvider from "{import_path("trpc.trpcProvider", config)}";\n'
        'import { cookies } from "next/headers";'
    )


def _toast_import(config: ProjectConfig) -> str:
    return f'import {{ Toaster }} from "{config.alias}/components/ui/toaster";'


def _clerk_import(config: ProjectConfig) -> str:
    return 'import { ClerkProvider } from "@clerk/nextjs";'


def _navbar_import(config: ProjectConfig) -> str:
    return (
        f'import Navbar from "{import_path("shared.navbarComponent", config)}";\n'
        f'import Sidebar from "{import_path("shared.sidebarComponent", config)}";'
    )


def _theme_import(config: ProjectConfig) -> str:
    return f'import {{ ThemeProvider }} from "{config.alias}/components/ThemeProvider";'


def _wrap(element: str, attributes: str = "") -> Callable[[str], str]:
    opening = f"<{element} {attributes}>" if attributes else f"<{element}>"

    def replace(anchor: str) -> str:
        return f"\n{opening}{anchor}</{element}>\n"

    return replace


def _append_toaster(anchor: str) -> str:
    return f"{anchor}\n<Toaster />\n"


def _navigation(anchor: str) -> str:
    return NAVIGATION_BLOCK


_IMPORTS: dict[Provider, Callable[[ProjectConfig], str]] = {
    Provider.NEXT_AUTH_PROVIDER: _next_auth_import,
    Provider.TRPC_PROVIDER: _trpc_import,
    Provider.SHADCN_TOAST: _toast_import,
    Provider.CLERK_PROVIDER: _clerk_import,
    Provider.NAVBAR: _navbar_import,
    Provider.THEME_PROVIDER: _theme_import,
}

_REPLACEMENTS: dict[Provider, Callable[[str], str]] = {
    Provider.NEXT_AUTH_PROVIDER: _wrap("NextAuthProvider"),
    Provider.TRPC_PROVIDER: _wrap("TrpcProvider", "cookies={cookies().toString()}"),
    Provider.SHADCN_TOAST: _append_toaster,
    Provider.CLERK_PROVIDER: _wrap("ClerkProvider"),
    Provider.NAVBAR: _navigation,
    Provider.THEME_PROVIDER: _wrap(
        "ThemeProvider", 'attribute="class" defaultTheme="system" enableSystem disableTransitionOnChange'
    ),
}

_UNHANDLED = (set(Provider) ^ set(_IMPORTS)) | (set(Provider) ^ set(_REPLACEMENTS))
if _UNHANDLED:
    raise RuntimeError(f"Providers without import or replacement handler: {sorted(p.value for p in _UNHANDLED)}")


def import_statement(provider: Provider, config: ProjectConfig) -> str:
    return _IMPORTS[provider](config)


def import_insertion_point(document: str) -> int:
    """
    Offset of the line following the last import statement.

    Returns len(document) when that statement ends the file without a newline.
    """
    matches = list(_IMPORT_RE.finditer(document))
    if not matches:
        raise MalformedTargetFileError("No import statement found; cannot place the provider import.")

    start = matches[-1].end() - len("import")
    statement = _IMPORT_STATEMENT_RE.match(document, start)
    end = statement.end() if statement else start

    newline = document.find("\n", end)
    if newline == -1:
        return len(document)
    return newline + 1


def current_anchor(document: str) -> str:
    return NAVIGATION_BLOCK if NAVIGATION_MARKER in document else CHILDREN_ANCHOR


def patch_layout(document: str, provider: Provider, statement: str) -> str:
    """
    Return `document` with `provider` applied. Unchanged when `statement` is already present.
    """
    if statement in document:
        return document

    insert_at = import_insertion_point(document)
    before, after = document[:insert_at], document[insert_at:]
    if before and not before.endswith("\n"):
        before += "\n"
    updated = f"{before}{statement}\n{after}"

    anchor = current_anchor(document)
    if anchor not in updated:
        raise PatchAnchorNotFoundError(f"Could not find {anchor!r} to apply {provider.value}.")

    return updated.replace(anchor, _REPLACEMENTS[provider](anchor), 1)


def layout_path(ctx: SetupContext) -> Path:
    return ctx.root / project_path("shared.rootLayout", ctx.config)


def apply_layout_provider(ctx: SetupContext, provider: Provider) -> bool:
    """
    Apply `provider` to the project's root layout. Returns False if it was already applied.

    Raises FileNotFoundError, MalformedTargetFileError or PatchAnchorNotFoundError.
    """
    path = layout_path(ctx)
    if not path.is_file():
        raise FileNotFoundError(f"Root layout not found: {path}")

    # Patch with LF newlines; write back whatever the file used.
    with path.open(encoding="utf-8", newline="") as fh:
        raw = fh.read()
    newline = "\r\n" if "\r\n" in raw else "\n"
    document = raw.replace("\r\n", "\n")
    statement = import_statement(provider, ctx.config)
    patched = patch_layout(document, provider, statement)
    if patched == document:
        logger.info("%s already present in %s", provider.value, path.name)
        return False

    replace_file(path, patched, newline=newline)
    logger.info("Added %s to %s", provider.value, path)
    return True
