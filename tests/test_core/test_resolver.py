from __future__ import annotations

import logging

import pytest

from conftest import MemoryDatabase, local_pkg, sync_pkg
from pacjump.core.resolver import ClosureResolver, dependency_names
from pacjump.exceptions import UnknownPackage
from pacjump.models.record import PackageRecord


@pytest.mark.unit
class TestDependencyNames:
    """Tests for dependency_names."""

    def test_strips_version_constraints(self) -> None:
        record = PackageRecord("foo", depends=("bar>=1.0", "baz"))

        assert dependency_names(record) == ["bar", "baz"]

    def test_optional_appended_after_mandatory(self) -> None:
        record = PackageRecord(
            "foo",
            depends=("bar",),
            optional_depends=("qux: extra feature",),
        )

        assert dependency_names(record) == ["bar"]
        assert dependency_names(record, include_optional=True) == ["bar", "qux"]

    def test_malformed_specifier_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        record = PackageRecord("foo", depends=(">=1.0", "bar"))

        with caplog.at_level(logging.WARNING, logger="pacjump"):
            names = dependency_names(record)

        assert names == ["bar"]
        assert "Skipping dependency of foo" in caplog.text


@pytest.mark.unit
class TestClosureResolver:
    """Tests for ClosureResolver."""

    def test_breadth_first_order(self, texstudio_db: MemoryDatabase) -> None:
        names = ClosureResolver(texstudio_db).resolve("texstudio")

        assert names == ["texstudio", "poppler-qt5", "texlive-core", "poppler"]

    def test_optional_dependencies(self, texstudio_db: MemoryDatabase) -> None:
        names = ClosureResolver(texstudio_db).resolve("texstudio", include_optional=True)

        assert names == ["texstudio", "poppler-qt5", "texlive-core", "hunspell", "poppler"]

    def test_depth_is_recorded(self, texstudio_db: MemoryDatabase) -> None:
        closure = ClosureResolver(texstudio_db).resolve_closure("texstudio")

        assert closure.depth == {
            "texstudio": 0,
            "poppler-qt5": 1,
            "texlive-core": 1,
            "poppler": 2,
        }
        assert len(closure) == 4
        assert "poppler" in closure
        assert "hunspell" not in closure

    def test_each_name_looked_up_once(self, texstudio_db: MemoryDatabase) -> None:
        ClosureResolver(texstudio_db).resolve("texstudio")

        assert sorted(texstudio_db.lookups) == sorted(
            ["texstudio", "poppler-qt5", "texlive-core", "poppler"]
        )

    def test_cycle_terminates(self) -> None:
        database = MemoryDatabase(
            [local_pkg("a", depends=("b",)), local_pkg("b", depends=("a>=1",))]
        )

        assert ClosureResolver(database).resolve("a") == ["a", "b"]

    def test_optional_self_loop(self) -> None:
        database = MemoryDatabase(
            [local_pkg("bar", optional_depends=("bar: plugins",))]
        )

        assert ClosureResolver(database).resolve("bar", include_optional=True) == ["bar"]

    def test_shared_dependency_listed_once(self) -> None:
        database = MemoryDatabase(
            [
                local_pkg("app", depends=("left", "right")),
                local_pkg("left", depends=("base",)),
                local_pkg("right", depends=("base",)),
                local_pkg("base"),
            ]
        )

        assert ClosureResolver(database).resolve("app") == ["app", "left", "right", "base"]

    def test_unknown_root(self, texstudio_db: MemoryDatabase) -> None:
        with pytest.raises(UnknownPackage) as exc_info:
            ClosureResolver(texstudio_db).resolve("does-not-exist")

        assert exc_info.value.name == "does-not-exist"

    def test_sync_only_root(self, texstudio_db: MemoryDatabase) -> None:
        assert ClosureResolver(texstudio_db).resolve("hunspell") == ["hunspell"]

    def test_dependencies_read_from_sync_when_not_installed(self) -> None:
        database = MemoryDatabase(
            sync={"extra": [sync_pkg("viewer", depends=("libview",)), sync_pkg("libview")]}
        )

        assert ClosureResolver(database).resolve("viewer") == ["viewer", "libview"]

    def test_local_record_wins_for_edges(self) -> None:
        database = MemoryDatabase(
            [local_pkg("tool", depends=("old-lib",)), local_pkg("old-lib")],
            {"extra": [sync_pkg("tool", depends=("new-lib",)), sync_pkg("new-lib")]},
        )

        assert ClosureResolver(database).resolve("tool") == ["tool", "old-lib"]

    def test_unresolved_dependency_is_a_leaf(self) -> None:
        database = MemoryDatabase([local_pkg("foo", depends=("missing", "bar")), local_pkg("bar")])

        closure = ClosureResolver(database).resolve_closure("foo")

        assert closure.names == ["foo", "missing", "bar"]
        assert closure.unresolved == ["missing"]

    def test_malformed_dependency_does_not_abort(self) -> None:
        database = MemoryDatabase([local_pkg("foo", depends=("<=2", "bar")), local_pkg("bar")])

        assert ClosureResolver(database).resolve("foo") == ["foo", "bar"]


@pytest.fixture
def provides_db() -> MemoryDatabase:
    return MemoryDatabase(
        [
            local_pkg("app", explicit=True, depends=("sh", "libfoo.so=1-64")),
            local_pkg("bash", provides=("sh",), depends=("readline",)),
            local_pkg("readline"),
        ],
        {"extra": [sync_pkg("foo", provides=("libfoo.so=1-64",))]},
    )


@pytest.mark.unit
class TestProviderResolution:
    """Tests for dependencies met through ``provides``."""

    def test_virtual_names_resolve_to_providers(self, provides_db: MemoryDatabase) -> None:
        closure = ClosureResolver(provides_db).resolve_closure("app")

        assert closure.names == ["app", "bash", "foo", "readline"]
        assert closure.unresolved == []
        assert "sh" not in closure
        assert "libfoo.so" not in closure

    def test_satisfiers_are_recorded(self, provides_db: MemoryDatabase) -> None:
        closure = ClosureResolver(provides_db).resolve_closure("app")

        assert closure.satisfiers == {"sh": "bash", "libfoo.so=1-64": "foo"}
        assert closure.depth["readline"] == 2

    def test_provider_version_must_match(self) -> None:
        database = MemoryDatabase(
            [local_pkg("app", depends=("libfoo.so=1-64",))],
            {"extra": [sync_pkg("foo32", provides=("libfoo.so=1-32",))]},
        )

        closure = ClosureResolver(database).resolve_closure("app")

        assert closure.names == ["app", "libfoo.so"]
        assert closure.unresolved == ["libfoo.so"]

    def test_exact_name_wins_over_provider(self) -> None:
        database = MemoryDatabase(
            [
                local_pkg("app", depends=("sh",)),
                local_pkg("sh"),
                local_pkg("bash", provides=("sh",)),
            ]
        )

        closure = ClosureResolver(database).resolve_closure("app")

        assert closure.names == ["app", "sh"]
        assert closure.satisfiers == {}

    def test_provider_shared_by_two_requirements(self) -> None:
        database = MemoryDatabase(
            [
                local_pkg("app", depends=("sh", "bash")),
                local_pkg("bash", provides=("sh",)),
            ]
        )

        assert ClosureResolver(database).resolve("app") == ["app", "bash"]

    def test_provider_found_once_per_requirement(self) -> None:
        database = MemoryDatabase(
            [
                local_pkg("app", depends=("left", "right")),
                local_pkg("left", depends=("sh",)),
                local_pkg("right", depends=("sh",)),
                local_pkg("bash", provides=("sh",)),
            ]
        )

        closure = ClosureResolver(database).resolve_closure("app")

        assert closure.names == ["app", "left", "right", "bash"]
        assert closure.satisfiers == {"sh": "bash"}
