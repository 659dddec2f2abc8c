"""
packages.py

Responsibility: the closed catalog of selectable features and the static facts about them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageChoice:
    name: str
    value: str
    disabled: bool = False


PACKAGES: dict[str, tuple[PackageChoice, ...]] = {
    "orm": (
        PackageChoice("Drizzle", "drizzle"),
        PackageChoice("Prisma", "prisma"),
    ),
    "auth": (
        PackageChoice("Auth.js (NextAuth)", "next-auth"),
        PackageChoice("Clerk", "clerk"),
        PackageChoice("Lucia", "lucia"),
        PackageChoice("Kinde", "kinde"),
    ),
    "misc": (
        PackageChoice("TRPC", "trpc"),
        PackageChoice("Stripe", "stripe"),
        PackageChoice("Resend", "resend"),
    ),
    "componentLib": (PackageChoice("Shadcn UI (with next-themes)", "shadcn-ui"),),
}

# Whether the auth solution is hosted by a third party or lives in the app's database.
AUTH_SUB_TYPES: dict[str, str] = {
    "clerk": "managed",
    "kinde": "managed",
    "next-auth": "self-hosted",
    "lucia": "managed",
}

DATABASES = ("pg", "mysql", "sqlite")

# Drizzle driver -> database engine
DB_PROVIDERS: dict[str, str] = {
    "postgresjs": "pg",
    "node-postgres": "pg",
    "neon": "pg",
    "vercel-pg": "pg",
    "supabase": "pg",
    "planetscale": "mysql",
    "mysql-2": "mysql",
    "better-sqlite3": "sqlite",
}


@dataclass(frozen=True)
class AuthProvider:
    slug: str
    name: str
    website: str


AUTH_PROVIDERS: dict[str, AuthProvider] = {
    "discord": AuthProvider("discord", "Discord", "https://discord.com/developers/applications"),
    "google": AuthProvider("google", "Google", "https://console.cloud.google.com/apis/credentials"),
    "github": AuthProvider("github", "Github", "https://github.com/settings/apps"),
    "apple": AuthProvider("apple", "Apple", "https://developer.apple.com/account/resources/identifiers/list/serviceId"),
    "auth0": AuthProvider("auth0", "Auth0", "https://manage.auth0.com/dashboard"),
}


def choices(kind: str) -> list[str]:
    return [c.value for c in PACKAGES[kind] if not c.disabled]


def database_for(db_provider: str | None) -> str | None:
    if db_provider is None:
        return None
    return DB_PROVIDERS.get(db_provider, db_provider)
