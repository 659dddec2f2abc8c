"""
Tests for the batched install and component lists.
"""

import pytest

from kickstart import pending
from kickstart.config import ProjectConfig
from kickstart.context import SetupContext
from kickstart.pending import ComponentList, InstallList, dedupe


class FakeStatus:
    def __init__(self):
        self.texts = []

    def update(self, text):
        self.texts.append(text)


@pytest.fixture
def calls(monkeypatch):
    recorded = {"packages": [], "components": []}

    def fake_install_packages(regular, dev, package_manager, *, cwd="."):
        recorded["packages"].append((regular, dev, package_manager))

    def fake_install_components(components, package_manager, *, cwd="."):
        recorded["components"].append((list(components), package_manager))

    monkeypatch.setattr(pending, "install_packages", fake_install_packages)
    monkeypatch.setattr(pending, "install_shadcn_components", fake_install_components)
    return recorded


@pytest.fixture
def run_ctx(tmp_path):
    ctx = SetupContext(root=tmp_path, config=ProjectConfig(preferred_package_manager="pnpm"))
    ctx.status = FakeStatus()
    return ctx


class TestDedupe:
    def test_first_seen_order(self):
        assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_trims_and_drops_blank(self):
        assert dedupe([" zod ", "zod", "", "  "]) == ["zod"]


class TestInstallList:
    def test_flush_dedupes_each_collection(self, run_ctx, calls):
        run_ctx.install_list.add(["next-auth", "zod"], ["prisma"])
        run_ctx.install_list.add(["zod", "superjson"], ["prisma", "tsx"])
        run_ctx.install_list.add(["next-auth"], [])

        assert run_ctx.install_list.flush(run_ctx) is True
        assert calls["packages"] == [("next-auth zod superjson", "prisma tsx", "pnpm")]

    def test_regular_and_dev_are_independent(self, run_ctx, calls):
        run_ctx.install_list.add(["zod"], ["zod"])
        run_ctx.install_list.flush(run_ctx)
        assert calls["packages"] == [("zod", "zod", "pnpm")]

    def test_dev_only(self, run_ctx, calls):
        run_ctx.install_list.add([], ["drizzle-kit"])
        run_ctx.install_list.flush(run_ctx)
        assert calls["packages"] == [("", "drizzle-kit", "pnpm")]

    def test_empty_flush_is_noop(self, run_ctx, calls):
        assert run_ctx.install_list.flush(run_ctx) is False
        assert calls["packages"] == []
        assert run_ctx.status.texts == []

    def test_whitespace_only_entries_count_as_empty(self, run_ctx, calls):
        run_ctx.install_list.add(["  "], [""])
        assert run_ctx.install_list.flush(run_ctx) is False
        assert calls["packages"] == []

    def test_status_updated_before_install(self, run_ctx, calls):
        run_ctx.install_list.add(["zod"])
        run_ctx.install_list.flush(run_ctx)
        assert run_ctx.status.texts == ["Installing Packages"]

    def test_formatted(self):
        install_list = InstallList()
        install_list.add([" a ", "b", "a"], ["c"])
        assert install_list.formatted() == ("a b", "c")


class TestComponentList:
    def test_flush_dedupes(self, run_ctx, calls):
        run_ctx.component_list.add(["button", "toast"])
        run_ctx.component_list.add(["toast", "dropdown-menu", "button"])

        assert run_ctx.component_list.flush(run_ctx) is True
        assert calls["components"] == [(["button", "toast", "dropdown-menu"], "pnpm")]
        assert run_ctx.status.texts == ["Installing ShadcnUI Components"]

    def test_empty_flush_is_noop(self, run_ctx, calls):
        assert ComponentList().flush(run_ctx) is False
        assert calls["components"] == []


class TestContextFlush:
    def test_packages_then_components(self, run_ctx, calls):
        run_ctx.install_list.add(["next-themes"])
        run_ctx.component_list.add(["button"])
        run_ctx.flush()
        assert calls["packages"] == [("next-themes", "", "pnpm")]
        assert calls["components"] == [(["button"], "pnpm")]
        assert run_ctx.status.texts == ["Installing Packages", "Installing ShadcnUI Components"]
