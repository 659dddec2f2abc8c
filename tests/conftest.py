"""
Shared fixtures: a minimal Next.js project with a root layout.
"""

import textwrap
from pathlib import Path

import pytest

from kickstart.config import ProjectConfig, write_config
from kickstart.context import SetupContext

LAYOUT = textwrap.dedent("""\
    import type { Metadata } from "next";
    import { Inter } from "next/font/google";
    import "./globals.css";

    const inter = Inter({ subsets: ["latin"] });

    export const metadata: Metadata = {
      title: "Create Next App",
    };

    export default function RootLayout({
      children,
    }: {
      children: React.ReactNode;
    }) {
      return (
        <html lang="en">
          <body className={inter.className}>{children}</body>
        </html>
      );
    }
""")


@pytest.fixture
def config() -> ProjectConfig:
    return ProjectConfig(has_src=False, alias="@", preferred_package_manager="npm")


@pytest.fixture
def project(tmp_path: Path, config: ProjectConfig) -> Path:
    """A project root containing app/layout.tsx and kickstart.config.json."""
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "layout.tsx").write_text(LAYOUT)
    write_config(tmp_path, config)
    return tmp_path


@pytest.fixture
def ctx(project: Path, config: ProjectConfig) -> SetupContext:
    return SetupContext(root=project, config=config)


@pytest.fixture
def layout_file(project: Path) -> Path:
    return project / "app" / "layout.tsx"
