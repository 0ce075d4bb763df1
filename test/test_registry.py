from __future__ import annotations

import json
from pathlib import Path

import pytest

from dependents.graph import DependentsGraph
from dependents.models import Dependency, Package
from dependents.registry import InMemoryPackageRegistry


class TestResolve:
    def test_bare_names(self, make_registry) -> None:
        registry = make_registry({"zlib": [], "tools/zlib": [], "tools/only": [], "a/dup": [], "b/dup": []})
        assert registry.resolve("zlib").full_name == "zlib"
        assert registry.resolve("only").full_name == "tools/only"
        assert registry.resolve("dup") is None
        assert registry.resolve("unknown") is None

    def test_qualified_names(self, make_registry) -> None:
        registry = make_registry({"zlib": [], "tools/zlib": []})
        assert registry.resolve("tools/zlib").full_name == "tools/zlib"
        assert registry.resolve("core/zlib").full_name == "zlib"
        assert registry.resolve("elsewhere/zlib") is None
        assert registry.resolve_qualified_name("core/zlib") == "zlib"
        assert registry.resolve_qualified_name("elsewhere/tap/zlib") is None

    def test_matching_packages(self, make_registry) -> None:
        registry = make_registry({"zlib": [], "tools/zlib": []})
        assert {p.full_name for p in registry.matching_packages(Dependency("zlib"))} == {"zlib", "tools/zlib"}
        assert [p.full_name for p in registry.matching_packages(Dependency("tools/zlib"))] == ["tools/zlib"]
        assert registry.matching_packages(Dependency("elsewhere/zlib")) == []


class TestInMemoryPackageRegistry:
    def test_add_replaces(self) -> None:
        registry = InMemoryPackageRegistry([Package("zlib"), Package("curl", dependencies=[Dependency("zlib")])])
        registry.add(Package("curl"))
        assert len(registry) == 2
        assert registry.get("curl").dependencies == ()
        assert registry.packages_named("curl") == [Package("curl")]

    def test_installed_packages(self, make_registry) -> None:
        registry = make_registry({"zlib": [], "curl": ["zlib"]}, installed=["zlib"])
        assert list(registry.installed_packages()) == [Package("zlib")]

    def test_reverse_dependents(self, make_registry) -> None:
        registry = make_registry(
            {"zlib": [], "curl": ["zlib"], "git": ["zlib:recommended"], "python": ["zlib:build"], "sqlite": ["zlib"]},
            installed=["zlib", "curl", "git", "python"],
        )
        assert {p.full_name for p in registry.reverse_dependents(registry.get("zlib"))} == {"curl", "git"}
        registry.add(Package("ruby", dependencies=[Dependency("zlib")], installed_versions=["3.2"]))
        assert {p.full_name for p in registry.reverse_dependents(registry.get("zlib"))} == {"curl", "git", "ruby"}

    def test_from_json(self, tmp_path: Path) -> None:
        path = tmp_path / "packages.json"
        path.write_text(
            json.dumps(
                {
                    "packages": [
                        {"name": "openssl", "installed": ["3.1.0"]},
                        {"name": "curl", "dependencies": [{"name": "openssl"}]},
                        {"name": "tool", "namespace": "someuser/tools", "dependencies": ["core/curl"]},
                    ]
                }
            )
        )
        registry = InMemoryPackageRegistry.from_json(path)
        assert sorted(p.full_name for p in registry) == ["curl", "openssl", "someuser/tools/tool"]
        assert registry.get("openssl").any_version_installed

    def test_from_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "packages.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="not a valid registry file"):
            InMemoryPackageRegistry.from_json(path)
        path.write_text(json.dumps({"formulae": []}))
        with pytest.raises(ValueError, match="packages"):
            InMemoryPackageRegistry.from_json(path)


class TestDependentsGraph:
    def test_edges(self, make_registry) -> None:
        registry = make_registry({"zlib": [], "tools/zlib": [], "curl": ["zlib", "ghost"], "tool": ["tools/zlib"]})
        graph = DependentsGraph.from_packages(registry, registry)
        assert graph.dependents_of(registry.get("zlib")) == {registry.get("curl")}
        assert graph.dependents_of(registry.get("tools/zlib")) == {registry.get("curl"), registry.get("tool")}
        assert graph.dependents_of(Package("unknown")) == frozenset()
