"""
Tests for the feature installers: templates, queued packages and layout providers.
"""

import pytest

from kickstart.config import ProjectConfig
from kickstart.context import SetupContext
from kickstart.features import FEATURES, FeatureError, run_features, selected_features
from kickstart.layout import NAVIGATION_BLOCK
from kickstart.summary import Selections

from tests.conftest import LAYOUT


class TestSelectedFeatures:
    def test_run_order(self):
        s = Selections(
            orm="drizzle",
            db_provider="pg",
            auth="next-auth",
            misc_packages=("resend", "trpc"),
            component_lib="shadcn-ui",
        )
        keys = [f.key for f in selected_features(s, navbar=True)]
        assert keys == ["shadcn-ui", "drizzle", "next-auth", "trpc", "resend", "navbar"]

    def test_self_hosted_auth_needs_orm(self):
        with pytest.raises(FeatureError, match="ORM"):
            selected_features(Selections(auth="next-auth"))

    def test_managed_auth_alone(self):
        assert [f.key for f in selected_features(Selections(auth="clerk"))] == ["clerk"]

    def test_every_feature_installs_something(self):
        for feature in FEATURES.values():
            assert feature.regular or feature.providers


class TestRunFeatures:
    def test_shadcn_and_trpc(self, ctx, project, layout_file):
        s = Selections(misc_packages=("trpc",), component_lib="shadcn-ui")
        ran = run_features(ctx, s)

        assert ran == ["shadcn-ui", "trpc"]
        assert (project / "components.json").is_file()
        assert '"utils": "@/lib/utils"' in (project / "components.json").read_text()
        assert (project / "components" / "ThemeProvider.tsx").is_file()
        assert (project / "lib" / "trpc" / "Provider.tsx").is_file()
        assert 'from "@/lib/server/routers/_app"' in (project / "lib" / "trpc" / "client.ts").read_text()

        regular, dev = ctx.install_list.formatted()
        assert "next-themes" in regular.split()
        assert "@trpc/server" in regular.split()
        assert dev == ""
        assert ctx.component_list.components == ["button", "toast", "dropdown-menu"]

        layout = layout_file.read_text()
        assert layout.index("<ThemeProvider ") < layout.index("<TrpcProvider ")
        assert "<Toaster />" in layout

    def test_drizzle_driver_packages(self, ctx, project):
        run_features(ctx, Selections(orm="drizzle", db_provider="node-postgres"))

        regular, dev = ctx.install_list.formatted()
        assert "pg" in regular.split()
        assert "@types/pg" in dev.split()
        assert 'driver: "pg"' in (project / "drizzle.config.ts").read_text()
        assert "drizzle-orm/node-postgres" in (project / "lib" / "db" / "index.ts").read_text()

    def test_drizzle_requires_driver(self, ctx):
        with pytest.raises(FeatureError, match="driver"):
            run_features(ctx, Selections(orm="drizzle"))

    def test_next_auth_providers_rendered(self, ctx, project, layout_file):
        s = Selections(orm="prisma", auth="next-auth", auth_providers=("google", "github"))
        run_features(ctx, s)

        utils = (project / "lib" / "auth" / "utils.ts").read_text()
        assert 'import GoogleProvider from "next-auth/providers/google";' in utils
        assert "GITHUB_CLIENT_SECRET" in utils
        assert "PrismaAdapter(db)" in utils
        assert "@auth/prisma-adapter" in ctx.install_list.formatted()[0].split()
        assert (project / "prisma" / "schema.prisma").is_file()
        assert "<NextAuthProvider>{children}</NextAuthProvider>" in layout_file.read_text()

    def test_navbar_goes_inside_other_wrappers(self, ctx, project, layout_file):
        run_features(ctx, Selections(auth="clerk"), navbar=True)

        layout = layout_file.read_text()
        assert f"<ClerkProvider>{NAVIGATION_BLOCK}</ClerkProvider>" in layout
        assert (project / "components" / "Navbar.tsx").is_file()
        assert (project / "middleware.ts").is_file()

    def test_src_dir_project(self, tmp_path):
        (tmp_path / "src" / "app").mkdir(parents=True)
        (tmp_path / "src" / "app" / "layout.tsx").write_text(LAYOUT)
        ctx = SetupContext(root=tmp_path, config=ProjectConfig(has_src=True))

        run_features(ctx, Selections(component_lib="shadcn-ui"))
        assert (tmp_path / "components.json").is_file()
        assert '"css": "src/app/globals.css"' in (tmp_path / "components.json").read_text()
        assert (tmp_path / "src" / "lib" / "utils.ts").is_file()

    def test_skip_already_installed(self, ctx, layout_file):
        before = layout_file.read_text()
        ran = run_features(ctx, Selections(auth="clerk"), skip={"clerk"})
        assert ran == []
        assert layout_file.read_text() == before
        assert ctx.install_list.formatted() == ("", "")

    def test_rerun_does_not_duplicate_wrappers(self, ctx, layout_file):
        s = Selections(component_lib="shadcn-ui")
        run_features(ctx, s)
        once = layout_file.read_text()
        run_features(ctx, s)
        assert layout_file.read_text() == once
