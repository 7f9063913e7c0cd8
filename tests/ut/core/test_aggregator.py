"""aggregator.py 元数据聚合单元测试"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vbuilder_composer.core.aggregator import MetadataAggregator
from vbuilder_composer.core.models import Package, RootPackage


def _aggregator(base: Path) -> MetadataAggregator:
    def install_path(pkg: Package) -> str:
        if isinstance(pkg, RootPackage):
            return str(base)
        return str(base / "vendor" / pkg.name)
    return MetadataAggregator(install_path)


def _pkg(name: str, **vbuilder: object) -> Package:
    return Package(name=name, extra={"vbuilder": vbuilder} if vbuilder else {})


class TestParameters:
    def test_top_level_keys_sorted(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate(
            [_pkg("x/one"), _pkg("y/two"), _pkg("a/three")],
        )
        assert list(result.parameters["pkg"]) == ["a", "x", "y"]

    def test_sub_maps_keep_insertion_order(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate([_pkg("v/zeta"), _pkg("v/alpha")])
        assert list(result.parameters["pkg"]["v"]) == ["zeta", "alpha"]

    def test_two_segment_and_single_segment_names(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate([_pkg("foo/bar"), _pkg("standalone")])
        pkg = result.parameters["pkg"]
        assert pkg["foo"]["bar"] == {"dir": str(tmp_path / "vendor" / "foo/bar")}
        assert pkg["standalone"] == {"dir": str(tmp_path / "vendor" / "standalone")}

    def test_more_than_two_segments_is_flat(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate([_pkg("a/b/c")])
        assert result.parameters["pkg"] == {"a": {"dir": str(tmp_path / "vendor" / "a/b/c")}}

    def test_root_package_dir(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate([RootPackage(name="acme/app")])
        assert result.parameters["pkg"]["acme"]["app"]["dir"] == str(tmp_path)

    def test_fresh_result_per_call(self, tmp_path: Path) -> None:
        agg = _aggregator(tmp_path)
        agg.aggregate([_pkg("x/one", extensions={"a": "A"})])
        result = agg.aggregate([_pkg("y/two")])
        assert list(result.parameters["pkg"]) == ["y"]
        assert result.extensions == {}


class TestConfigFiles:
    def test_only_direct_config_neon(self, tmp_path: Path) -> None:
        for name in ("x/with", "x/nested", "x/other", "x/dir"):
            (tmp_path / "vendor" / name).mkdir(parents=True)
        (tmp_path / "vendor/x/with/config.neon").write_text("")
        (tmp_path / "vendor/x/nested/conf").mkdir()
        (tmp_path / "vendor/x/nested/conf/config.neon").write_text("")
        (tmp_path / "vendor/x/other/config.yml").write_text("")
        (tmp_path / "vendor/x/dir/config.neon").mkdir()

        result = _aggregator(tmp_path).aggregate(
            [_pkg("x/with"), _pkg("x/nested"), _pkg("x/other"), _pkg("x/dir")],
        )
        assert result.config_files == [f"{tmp_path}/vendor/x/with/config.neon"]

    def test_iteration_order(self, tmp_path: Path) -> None:
        for name in ("z/last", "a/first"):
            d = tmp_path / "vendor" / name
            d.mkdir(parents=True)
            (d / "config.neon").write_text("")
        result = _aggregator(tmp_path).aggregate([_pkg("z/last"), _pkg("a/first")])
        assert result.config_files == [
            f"{tmp_path}/vendor/z/last/config.neon",
            f"{tmp_path}/vendor/a/first/config.neon",
        ]


class TestExtensions:
    def test_later_package_wins(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate([
            _pkg("x/one", extensions={"cache": "One\\CacheExtension", "db": "One\\Db"}),
            _pkg("x/two", extensions={"cache": "Two\\CacheExtension"}),
        ])
        assert result.extensions == {"cache": "Two\\CacheExtension", "db": "One\\Db"}

    def test_list_form(self, tmp_path: Path) -> None:
        result = _aggregator(tmp_path).aggregate([_pkg("x/one", extensions=["A\\Ext"])])
        assert result.extensions == {0: "A\\Ext"}

    def test_custom_namespace(self, tmp_path: Path) -> None:
        agg = MetadataAggregator(lambda p: str(tmp_path), namespace="acme")
        pkg = Package(name="x/one", extra={"acme": {"extensions": {"a": "B"}}})
        assert agg.aggregate([pkg]).extensions == {"a": "B"}


class TestFakeAutoloadRequests:
    def test_scalar_and_list(self, tmp_path: Path) -> None:
        one = _pkg("x/one", **{"fake-autoloader-files": "tests/autoload.php"})
        two = _pkg("x/two", **{"fake-autoloader-files": ["a/autoload.php", "b/autoload.php"]})
        result = _aggregator(tmp_path).aggregate([one, two])
        assert [(r.package.name, r.target_path) for r in result.fake_autoload_requests] == [
            ("x/one", "tests/autoload.php"),
            ("x/two", "a/autoload.php"),
            ("x/two", "b/autoload.php"),
        ]


class TestMalformedMetadata:
    @pytest.mark.parametrize("extra", [
        "garbage",
        ["list"],
        {"vbuilder": 42},
        {"vbuilder": {"extensions": "Not\\AMap", "fake-autoloader-files": {"x": 1}}},
        {"vbuilder": {"fake-autoloader-files": [""]}},
        {"vbuilder": {"fake-autoloader-files": "tests/"}},
        {"vbuilder": {"fake-autoloader-files": ["tests/.", "a/.."]}},
    ])
    def test_tolerated(self, tmp_path: Path, extra: object, caplog: pytest.LogCaptureFixture) -> None:
        bad = Package(name="bad/pkg", extra=extra)
        good = _pkg("good/pkg", extensions={"ok": "Good\\Ext"})
        with caplog.at_level(logging.WARNING):
            result = _aggregator(tmp_path).aggregate([bad, good])
        assert result.extensions == {"ok": "Good\\Ext"}
        assert result.fake_autoload_requests == []
        assert "bad" in result.parameters["pkg"]
        assert caplog.records
