"""
Unit tests for the framework packager.
"""

import os
import plistlib

import pytest

from boostios.build_scripts.errors import PreconditionError
from boostios.build_scripts.framework import (
    build_framework,
    info_plist,
    make_framework_layout,
)
from boostios.build_scripts.uber_archive import scrunch_all_libs_together
from conftest import read_archive


class TestFrameworkLayout:
    """Test suite for make_framework_layout()."""

    def test_versioned_directories(self, config, paths):
        bundle = make_framework_layout(config)

        assert bundle == paths.framework_bundle
        for name in ("Headers", "Resources", "Documentation"):
            assert os.path.isdir(os.path.join(paths.framework_version_dir, name))

    def test_symlinks(self, config, paths):
        bundle = make_framework_layout(config)

        current = os.path.join(bundle, "Versions", "Current")
        assert os.readlink(current) == "A"
        assert os.path.realpath(current) == os.path.realpath(paths.framework_version_dir)
        for name in ("Headers", "Resources", "Documentation", "boost"):
            link = os.path.join(bundle, name)
            assert os.readlink(link) == f"Versions/Current/{name}"
        for name in ("Headers", "Resources", "Documentation"):
            assert os.path.realpath(os.path.join(bundle, name)) == os.path.realpath(
                os.path.join(paths.framework_version_dir, name)
            )

    def test_rebuilt_from_scratch(self, config, paths):
        make_framework_layout(config)
        leftover = os.path.join(paths.framework_version_dir, "Headers", "old.hpp")
        open(leftover, "w").close()

        make_framework_layout(config)

        assert not os.path.exists(leftover)


class TestInfoPlist:
    """Test suite for the bundle manifest."""

    def test_fields(self, config):
        plist = info_plist(config, "1_52_0")

        assert plist == {
            "CFBundleDevelopmentRegion": "English",
            "CFBundleExecutable": "boost",
            "CFBundleIdentifier": "org.boost",
            "CFBundleInfoDictionaryVersion": "6.0",
            "CFBundlePackageType": "FMWK",
            "CFBundleSignature": "????",
            "CFBundleVersion": "1_52_0",
        }


class TestBuildFramework:
    """Test suite for build_framework()."""

    def test_complete_bundle(self, config, paths, staged_archives):
        scrunch_all_libs_together(config, staged_archives)
        bundle = build_framework(config, staged_archives, "1_52_0")

        binary = os.path.join(bundle, "boost")
        assert sorted(read_archive(binary)) == ["armv6", "armv7", "armv7s", "i386"]
        assert os.path.isfile(os.path.join(bundle, "Headers", "version.hpp"))
        assert os.path.isfile(os.path.join(bundle, "Headers", "thread", "thread.hpp"))
        with open(os.path.join(bundle, "Resources", "Info.plist"), "rb") as f:
            assert plistlib.load(f)["CFBundleVersion"] == "1_52_0"

    def test_missing_installed_headers(self, config, fake_runner):
        with pytest.raises(PreconditionError, match="Installed Boost headers"):
            build_framework(config, fake_runner, "1_52_0")
