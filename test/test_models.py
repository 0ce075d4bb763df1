from __future__ import annotations

import json

import pytest

from dependents.models import Dependency, DependencyKind, Package, Placeholder, version_sort_key


class TestDependency:
    def test_from_string(self) -> None:
        assert Dependency.from_string("zlib") == Dependency("zlib", DependencyKind.required)
        assert Dependency.from_string("pkg-config:build") == Dependency("pkg-config", "build")
        dep = Dependency.from_string("someuser/tools/libfoo:optional")
        assert dep.is_qualified
        assert dep.namespace == "someuser/tools"
        assert dep.name == "libfoo"
        assert dep.kind is DependencyKind.optional
        assert str(dep) == "someuser/tools/libfoo:optional"

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Can not parse"):
            Dependency.from_string("zlib:sometimes")
        with pytest.raises(ValueError, match="Can not parse"):
            Dependency.from_string("tools/")


class TestPackage:
    def test_full_name(self) -> None:
        assert Package("zlib").full_name == "zlib"
        assert Package("libfoo", namespace="someuser/tools").full_name == "someuser/tools/libfoo"
        assert Package("zlib", namespace="core") == Package("zlib")

    def test_installed(self) -> None:
        assert not Package("zlib").any_version_installed
        assert Package("zlib", installed_versions=["1.3"]).any_version_installed

    def test_from_obj(self) -> None:
        package = Package.from_obj(
            {
                "name": "curl",
                "namespace": "tools",
                "dependencies": [{"name": "openssl"}, {"name": "pkg-config", "kind": "build"}, "zlib:recommended"],
                "installed": ["8.4.0"],
            }
        )
        assert package.full_name == "tools/curl"
        assert [str(dep) for dep in package.dependencies] == ["openssl", "pkg-config:build", "zlib:recommended"]
        assert package.any_version_installed
        mapping = Package.from_obj({"name": "git", "dependencies": {"curl": "required", "pcre2": "optional"}})
        assert [str(dep) for dep in mapping.dependencies] == ["curl", "pcre2:optional"]

    def test_from_invalid_obj(self) -> None:
        with pytest.raises(ValueError, match="Invalid package description"):
            Package.from_obj({"dependencies": []})
        with pytest.raises(ValueError, match="Invalid package description"):
            Package.from_obj({"name": "git", "dependencies": [{"name": "curl", "kind": "eventually"}]})

    def test_placeholder(self) -> None:
        placeholder = Placeholder("ghost")
        assert placeholder.full_name == "ghost"
        assert placeholder != Package("ghost")

    def test_to_obj(self) -> None:
        package = Package(
            "curl",
            namespace="tools",
            dependencies=[Dependency("openssl"), Dependency("pkg-config", "build")],
            installed_versions=["8.4.0"],
        )
        assert package.to_obj() == {
            "name": "curl",
            "namespace": "tools",
            "dependencies": [{"name": "openssl", "kind": "required"}, {"name": "pkg-config", "kind": "build"}],
            "installed": ["8.4.0"],
        }
        assert Package.from_obj(json.loads(package.dumps())).dependencies == package.dependencies

    def test_installed_versions_kept_verbatim(self) -> None:
        obj = {"name": "openssl", "installed": ["HEAD-abc1234", "1.1.1w", "3.9.0_1", "r123", "latest"]}
        package = Package.from_obj(obj)
        assert package.any_version_installed
        assert package.to_obj()["installed"] == obj["installed"]
        with pytest.raises(ValueError, match="Invalid package description"):
            Package.from_obj({"name": "openssl", "installed": "1.1.1w"})

    def test_version_sort_key(self) -> None:
        versions = ["latest", "3.10.0", "HEAD-abc1234", "3.9.0_1", "1.1.1w"]
        assert sorted(versions, key=version_sort_key) == ["1.1.1w", "3.9.0_1", "3.10.0", "HEAD-abc1234", "latest"]
