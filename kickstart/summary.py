"""
summary.py

Responsibility: build and print the post-setup report (installed features, next steps, notes).

`build_next_steps` is pure; `show_next_steps` is the only place that prints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from kickstart.packages import AUTH_PROVIDERS, database_for

ISSUES_NOTE = "If you had any problems, please open an issue on the project's GitHub issue tracker"


@dataclass(frozen=True)
class Selections:
    """The user's final feature choices for one run."""

    orm: str | None = None
    db_provider: str | None = None
    db: str | None = None
    auth: str | None = None
    auth_providers: tuple[str, ...] = ()
    misc_packages: tuple[str, ...] = ()
    component_lib: str | None = None

    @property
    def database(self) -> str | None:
        return self.db or database_for(self.db_provider)


@dataclass(frozen=True)
class NextStepsSummary:
    installed: tuple[str, ...]
    next_steps: tuple[str, ...]
    notes: tuple[str, ...]
    duration_ms: int


def _auth_js_label(s: Selections) -> str:
    return f"Authentication: Auth.js (with {', '.join(s.auth_providers)} providers)"


# Evaluated in order; every matching entry contributes one label.
INSTALLED_LABELS: tuple[tuple[Callable[[Selections], bool], Callable[[Selections], str]], ...] = (
    (lambda s: s.orm == "drizzle", lambda s: f"ORM: Drizzle (using {s.db_provider})"),
    (lambda s: s.orm == "prisma", lambda s: "ORM: Prisma"),
    (lambda s: s.auth == "next-auth", _auth_js_label),
    (lambda s: s.auth == "clerk", lambda s: "Authentication: Clerk"),
    (lambda s: s.auth == "lucia", lambda s: "Authentication: Lucia"),
    (lambda s: s.auth == "kinde", lambda s: "Authentication: Kinde"),
    (lambda s: "stripe" in s.misc_packages, lambda s: "Payments: Stripe"),
    (lambda s: "resend" in s.misc_packages, lambda s: "Email: Resend"),
    (lambda s: "trpc" in s.misc_packages, lambda s: "RPC: tRPC"),
    (lambda s: s.component_lib == "shadcn-ui", lambda s: "Component Library: ShadcnUI"),
)

ENV_STEP = "Add Environment Variables to your .env"
FINAL_STEP = "Build something awesome!"


def installed_labels(selections: Selections) -> list[str]:
    return [label(selections) for matches, label in INSTALLED_LABELS if matches(selections)]


def needs_secrets(s: Selections) -> bool:
    return bool(s.orm or s.auth or "resend" in s.misc_packages or "stripe" in s.misc_packages)


def needs_migration(s: Selections) -> bool:
    return bool(s.orm or s.auth in ("lucia", "next-auth") or "stripe" in s.misc_packages)


def migration_steps(s: Selections, package_manager: str) -> list[str]:
    return [
        f"Run '{package_manager} run db:generate'",
        f"Run '{package_manager} run db:{'migrate' if s.database == 'pg' else 'push'}'",
        f"Run '{package_manager} run dev'",
        "Open localhost:3000/ in your browser",
    ]


def auth_provider_note(slug: str) -> str:
    provider = AUTH_PROVIDERS.get(slug)
    website = provider.website if provider else "your provider's developer console"
    return f"{slug} auth: create credentials at {website}\n  (redirect URI: /api/auth/callback/{slug})"


def build_next_steps(selections: Selections, duration_ms: int, package_manager: str = "npm") -> NextStepsSummary:
    steps: list[str] = []
    if needs_secrets(selections):
        steps.append(ENV_STEP)
    if needs_migration(selections):
        steps.extend(migration_steps(selections, package_manager))
    steps.append(FINAL_STEP)

    notes = [auth_provider_note(p) for p in selections.auth_providers]
    notes.append(ISSUES_NOTE)

    return NextStepsSummary(
        installed=tuple(installed_labels(selections)),
        next_steps=tuple(steps),
        notes=tuple(notes),
        duration_ms=duration_ms,
    )


def _styled_label(label: str) -> str:
    category, sep, detail = label.partition(": ")
    if not sep:
        return escape(label)
    return f"[underline]{escape(category)}[/underline]: {escape(detail)}"


def render_next_steps(summary: NextStepsSummary) -> str:
    """Rich-markup text of the report."""
    installed = "\n- ".join(_styled_label(label) for label in summary.installed)
    steps = "\n".join(f"{i}. {escape(step)}" for i, step in enumerate(summary.next_steps, start=1))
    lines = [
        "🚀 Thanks for using kickstart to set up your Next.js app!",
        "",
        "The following packages are now installed and configured:",
        f"- {installed}" if summary.installed else "- (nothing new)",
        "",
        f"[black on green]\\[installed and configured in just {summary.duration_ms / 1000:g} seconds][/black on green]",
        "",
        "[bold underline]Next Steps[/bold underline]",
        steps,
    ]
    if summary.notes:
        notes = "\n".join(f"- {escape(note)}" for note in summary.notes)
        lines += ["", "[bold underline]Notes[/bold underline]", notes]
    return "\n".join(lines)


def show_next_steps(summary: NextStepsSummary, console: Console | None = None) -> None:
    (console or Console()).print(Panel(render_next_steps(summary), expand=False))


def build_and_show_summary(
    selections: Selections,
    duration_ms: int,
    package_manager: str = "npm",
    console: Console | None = None,
) -> NextStepsSummary:
    summary = build_next_steps(selections, duration_ms, package_manager)
    show_next_steps(summary, console)
    return summary
