"""
Unit tests for the per-architecture consolidated archives.
"""

import os

import pytest

from boostios.build_scripts.errors import PreconditionError
from boostios.build_scripts.uber_archive import (
    fuse_uber_archives,
    link_uber_archives,
    scrunch_all_libs_together,
    split_fat_archives,
)
from boostios.build_scripts.targets import ALL_ARCHS
from conftest import FakeRunner, make_boost_checkout, read_archive


@pytest.fixture
def two_libraries(config):
    """Libraries A and B with distinct objects, already built by bjam."""
    config = config.with_overrides(libraries="liba libb")
    runner = FakeRunner(config, objects={"liba": ["a1.o", "a2.o"], "libb": ["b1.o"]})
    make_boost_checkout(config.boost_src)
    runner.run(["./bjam", "architecture=arm", "install"])
    runner.run(["./bjam", "architecture=x86", "stage"])
    runner.calls.clear()
    return config, runner


class TestSplitFatArchives:
    """Test suite for split_fat_archives()."""

    def test_thin_slices(self, two_libraries, paths):
        config, runner = two_libraries
        split_fat_archives(config, runner)

        for arch in ALL_ARCHS:
            archs = read_archive(paths.thin_archive("liba", arch))
            assert list(archs) == [arch]
            assert os.path.isdir(paths.obj_dir(arch))

    def test_simulator_archive_copied_verbatim(self, two_libraries, paths):
        config, runner = two_libraries
        split_fat_archives(config, runner)

        thin = [cmd for cmd in runner.commands("lipo") if "-thin" in cmd]
        assert sorted(cmd[3] for cmd in thin) == ["armv6", "armv6", "armv7", "armv7", "armv7s", "armv7s"]
        assert not any("i386" in cmd for cmd in thin)

    def test_missing_archive(self, two_libraries):
        config, runner = two_libraries
        with pytest.raises(PreconditionError):
            split_fat_archives(config.with_overrides(libraries="liba libc"), runner)


class TestScrunchAllLibsTogether:
    """Test suite for scrunch_all_libs_together()."""

    def test_union_of_objects_per_arch(self, two_libraries, paths):
        config, runner = two_libraries
        archives = scrunch_all_libs_together(config, runner)

        assert archives == [paths.consolidated_archive(a) for a in ALL_ARCHS]
        for arch in ALL_ARCHS:
            assert sorted(os.listdir(paths.obj_dir(arch))) == ["a1.o", "a2.o", "b1.o"]
            assert read_archive(paths.consolidated_archive(arch)) == {
                arch: ["a1.o", "a2.o", "b1.o"]
            }

    def test_objects_stay_in_their_arch(self, two_libraries, paths):
        config, runner = two_libraries
        scrunch_all_libs_together(config, runner)

        for name in os.listdir(paths.obj_dir("armv7")):
            with open(os.path.join(paths.obj_dir("armv7"), name)) as f:
                assert f.read() == "armv7"

    def test_object_name_collision_is_flattened(self, config, paths):
        config = config.with_overrides(libraries="liba libb")
        runner = FakeRunner(config, objects={"liba": ["shared.o"], "libb": ["shared.o", "b.o"]})
        make_boost_checkout(config.boost_src)
        runner.run(["./bjam", "architecture=arm", "install"])
        runner.run(["./bjam", "architecture=x86", "stage"])

        scrunch_all_libs_together(config, runner)

        assert read_archive(paths.consolidated_archive("i386")) == {"i386": ["b.o", "shared.o"]}

    def test_stale_consolidated_archive_replaced(self, two_libraries, paths):
        config, runner = two_libraries
        scrunch_all_libs_together(config, runner)
        os.remove(os.path.join(paths.obj_dir("armv6"), "b1.o"))

        link_uber_archives(config, runner)

        assert read_archive(paths.consolidated_archive("armv6")) == {"armv6": ["a1.o", "a2.o"]}

    def test_extracts_inside_each_obj_dir(self, two_libraries, paths):
        config, runner = two_libraries
        scrunch_all_libs_together(config, runner)

        extract_dirs = {cwd for cmd, cwd in runner.calls if cmd[1:2] == ["-x"]}
        assert extract_dirs == {paths.obj_dir(a) for a in ALL_ARCHS}


class TestFuseUberArchives:
    """Test suite for fuse_uber_archives()."""

    def test_fuses_all_archs(self, two_libraries, tmp_path):
        config, runner = two_libraries
        scrunch_all_libs_together(config, runner)
        output = str(tmp_path / "out" / "boost")

        assert fuse_uber_archives(config, runner, output) == output
        archs = read_archive(output)
        assert sorted(archs) == sorted(ALL_ARCHS)
        assert archs["armv7s"] == ["a1.o", "a2.o", "b1.o"]

    def test_nothing_to_fuse(self, config, fake_runner, tmp_path):
        output = str(tmp_path / "boost")
        assert fuse_uber_archives(config, fake_runner, output) is None
        assert not os.path.exists(output)
        assert fake_runner.calls == []
