"""
features.py

Responsibility: one installer per selectable feature.

A feature installer:
1) renders its template directory into the project,
2) queues its npm packages (and shadcn-ui components) on the run's pending lists,
3) applies its providers to the root layout, in declaration order.

Installers never run package managers themselves; `SetupContext.flush` does that once
after every selected feature has been set up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from kickstart.context import SetupContext
from kickstart.layout import Provider, apply_layout_provider
from kickstart.packages import AUTH_PROVIDERS, AUTH_SUB_TYPES
from kickstart.renderer import TEMPLATES_ROOT, render_template_dir
from kickstart.summary import Selections

logger = logging.getLogger(__name__)

# Template sub-directories: rendered into the project root / the source root.
PROJECT_DIR = "project"
SOURCE_DIR = "source"

# Drizzle driver -> (regular, dev) packages
DRIZZLE_DRIVERS: dict[str, tuple[list[str], list[str]]] = {
    "postgresjs": (["postgres"], []),
    "node-postgres": (["pg"], ["@types/pg"]),
    "neon": (["@neondatabase/serverless"], []),
    "vercel-pg": (["@vercel/postgres"], []),
    "supabase": (["postgres"], []),
    "planetscale": (["@planetscale/database"], []),
    "mysql-2": (["mysql2"], []),
    "better-sqlite3": (["better-sqlite3"], ["@types/better-sqlite3"]),
}

AUTH_ADAPTERS: dict[str, str] = {
    "drizzle": "@auth/drizzle-adapter",
    "prisma": "@auth/prisma-adapter",
}

LUCIA_ADAPTERS: dict[str, str] = {
    "drizzle": "@lucia-auth/adapter-drizzle",
    "prisma": "@lucia-auth/adapter-prisma",
}


class FeatureError(ValueError):
    pass


@dataclass(frozen=True)
class Feature:
    key: str
    regular: tuple[str, ...] = ()
    dev: tuple[str, ...] = ()
    components: tuple[str, ...] = ()
    providers: tuple[Provider, ...] = ()
    # Selection-dependent packages on top of the static ones.
    extra_packages: Callable[[Selections], tuple[list[str], list[str]]] | None = None


def _drizzle_driver(selections: Selections) -> tuple[list[str], list[str]]:
    if selections.db_provider is None:
        raise FeatureError("Drizzle needs a database driver (use --db-provider).")
    try:
        return DRIZZLE_DRIVERS[selections.db_provider]
    except KeyError as e:
        raise FeatureError(f"Unknown Drizzle driver: {selections.db_provider}") from e


def _auth_adapter(selections: Selections) -> tuple[list[str], list[str]]:
    adapter = AUTH_ADAPTERS.get(selections.orm or "")
    return ([adapter] if adapter else []), []


def _lucia_adapter(selections: Selections) -> tuple[list[str], list[str]]:
    return [LUCIA_ADAPTERS.get(selections.orm or "", LUCIA_ADAPTERS["drizzle"])], []


FEATURES: dict[str, Feature] = {
    "shadcn-ui": Feature(
        key="shadcn-ui",
        regular=(
            "next-themes",
            "class-variance-authority",
            "clsx",
            "tailwind-merge",
            "lucide-react",
            "tailwindcss-animate",
        ),
        components=("button", "toast", "dropdown-menu"),
        providers=(Provider.THEME_PROVIDER, Provider.SHADCN_TOAST),
    ),
    "drizzle": Feature(
        key="drizzle",
        regular=("drizzle-orm", "drizzle-zod", "zod", "@t3-oss/env-nextjs"),
        dev=("drizzle-kit", "tsx", "dotenv"),
        extra_packages=_drizzle_driver,
    ),
    "prisma": Feature(
        key="prisma",
        regular=("@prisma/client", "zod", "@t3-oss/env-nextjs"),
        dev=("prisma", "zod-prisma"),
    ),
    "next-auth": Feature(
        key="next-auth",
        regular=("next-auth",),
        providers=(Provider.NEXT_AUTH_PROVIDER,),
        extra_packages=_auth_adapter,
    ),
    "clerk": Feature(
        key="clerk",
        regular=("@clerk/nextjs",),
        providers=(Provider.CLERK_PROVIDER,),
    ),
    "lucia": Feature(
        key="lucia",
        regular=("lucia", "oslo"),
        extra_packages=_lucia_adapter,
    ),
    "kinde": Feature(
        key="kinde",
        regular=("@kinde-oss/kinde-auth-nextjs",),
    ),
    "trpc": Feature(
        key="trpc",
        regular=("@trpc/client", "@trpc/react-query", "@trpc/server", "@tanstack/react-query", "superjson", "zod"),
        providers=(Provider.TRPC_PROVIDER,),
    ),
    "stripe": Feature(
        key="stripe",
        regular=("stripe", "@stripe/stripe-js"),
    ),
    "resend": Feature(
        key="resend",
        regular=("resend", "@react-email/components"),
    ),
    "navbar": Feature(
        key="navbar",
        providers=(Provider.NAVBAR,),
    ),
}


def selected_features(selections: Selections, *, navbar: bool = False) -> list[Feature]:
    """
    Features to set up, in run order: component library, ORM, auth, misc, navigation.

    Navigation goes last so that it replaces the children slot inside every other wrapper.
    """
    keys: list[str] = []
    if selections.component_lib:
        keys.append(selections.component_lib)
    if selections.orm:
        keys.append(selections.orm)
    if selections.auth:
        keys.append(selections.auth)
    keys.extend(p for p in ("trpc", "stripe", "resend") if p in selections.misc_packages)
    if navbar:
        keys.append("navbar")

    unknown = [k for k in keys if k not in FEATURES]
    if unknown:
        raise FeatureError(f"Unknown feature(s): {', '.join(unknown)}")
    if AUTH_SUB_TYPES.get(selections.auth or "") == "self-hosted" and not selections.orm:
        raise FeatureError(f"{selections.auth} stores sessions in your database and needs an ORM (use --orm).")
    return [FEATURES[k] for k in keys]


def _template_context(ctx: SetupContext, selections: Selections) -> dict[str, Any]:
    config = ctx.config
    return {
        "alias": config.alias,
        "src_prefix": "src/" if config.has_src else "",
        "orm": selections.orm or "",
        "db_provider": selections.db_provider or "",
        "database": selections.database or "",
        "auth_providers": [AUTH_PROVIDERS[p] for p in selections.auth_providers if p in AUTH_PROVIDERS],
    }


def _render(ctx: SetupContext, feature: Feature, context: dict[str, Any]) -> None:
    base = TEMPLATES_ROOT / feature.key
    for sub, destination in ((PROJECT_DIR, ctx.root), (SOURCE_DIR, ctx.source_root)):
        template_dir = base / sub
        if template_dir.is_dir():
            render_template_dir(template_dir=template_dir, destination_dir=destination, context=context)


def run_feature(ctx: SetupContext, feature: Feature, selections: Selections) -> None:
    ctx.set_status(f"Setting up {feature.key}")
    _render(ctx, feature, _template_context(ctx, selections))

    regular, dev = list(feature.regular), list(feature.dev)
    if feature.extra_packages is not None:
        extra_regular, extra_dev = feature.extra_packages(selections)
        regular += extra_regular
        dev += extra_dev
    ctx.install_list.add(regular, dev)

    if feature.components:
        ctx.component_list.add(list(feature.components))

    for provider in feature.providers:
        apply_layout_provider(ctx, provider)
    logger.debug("Feature %s set up", feature.key)


def run_features(
    ctx: SetupContext,
    selections: Selections,
    *,
    navbar: bool = False,
    skip: set[str] | None = None,
) -> list[str]:
    """
    Set up every selected feature except those in `skip` (already installed).

    Returns the keys of the features that ran.
    """
    features = [f for f in selected_features(selections, navbar=navbar) if f.key not in (skip or set())]
    for feature in features:
        run_feature(ctx, feature, selections)
    return [f.key for f in features]
