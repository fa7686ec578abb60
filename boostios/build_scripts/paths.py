#!/usr/bin/env python3
# -- coding: utf-8 --
#
# paths.py
# boostios
#
# Copyright 2024 boostios Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Path conventions of the pipeline.

Every file or directory a stage reads or writes is named here, so the
Boost.Build staging layout and the framework layout are defined once.

Build directory layout:
    {build}/{arch}/libboost_{lib}.a   thin per-library archive
    {build}/{arch}/obj/*.o            exploded objects of all libraries
    {build}/{arch}/libboost.a         consolidated archive for {arch}

Framework layout:
    {framework}/{name}.framework/Versions/{version}/{Headers,Resources,Documentation,{name}}
"""

import os
import shutil

from boostios.build_scripts.errors import PreconditionError
from boostios.build_scripts.targets import DEVICE, SIMULATOR


class BuildPaths:
    """
    Path builder for one BuildConfig.

    Args:
        config: The resolved BuildConfig
    """

    def __init__(self, config):
        self.config = config

    # Source tree

    @property
    def boost_src(self) -> str:
        return self.config.boost_src

    @property
    def user_config_jam(self) -> str:
        return os.path.join(self.boost_src, self.config.user_config)

    def staged_archive(self, library: str, platform) -> str:
        """
        Archive produced by Boost.Build for a library and platform.

        The nesting mirrors Boost.Build's property path for
        toolset=darwin link=static release threading=multi.
        """
        sdk = self.config.sdk_version
        return os.path.join(
            self.boost_src,
            "bin.v2",
            "libs",
            library,
            "build",
            f"darwin-{platform.toolset(sdk)}",
            "release",
            f"architecture-{platform.architecture}",
            "link-static",
            f"macosx-version-{platform.macosx_version(sdk)}",
            "target-os-iphone",
            "threading-multi",
            archive_name(library),
        )

    # Build directory

    def arch_dir(self, arch: str) -> str:
        return os.path.join(self.config.build_dir, arch)

    def obj_dir(self, arch: str) -> str:
        return os.path.join(self.arch_dir(arch), "obj")

    def thin_archive(self, library: str, arch: str) -> str:
        return os.path.join(self.arch_dir(arch), archive_name(library))

    def consolidated_archive(self, arch: str) -> str:
        return os.path.join(self.arch_dir(arch), "libboost.a")

    # Prefix directory

    @property
    def prefix_lib_dir(self) -> str:
        return os.path.join(self.config.prefix_dir, "lib")

    @property
    def prefix_headers(self) -> str:
        return os.path.join(self.config.prefix_dir, "include", "boost")

    def universal_archive(self, library: str) -> str:
        return os.path.join(self.prefix_lib_dir, archive_name(library))

    # Framework bundle

    @property
    def framework_bundle(self) -> str:
        return os.path.join(
            self.config.framework_dir, f"{self.config.framework_name}.framework"
        )

    @property
    def framework_version_dir(self) -> str:
        return os.path.join(
            self.framework_bundle, "Versions", self.config.framework_version
        )

    @property
    def framework_binary(self) -> str:
        return os.path.join(self.framework_version_dir, self.config.framework_name)

    # Xcode

    def platform_developer_dir(self, platform) -> str:
        return os.path.join(
            self.config.xcode_root, "Platforms", platform.sdk_dir, "Developer"
        )

    def sdk_include_dir(self, platform) -> str:
        return os.path.join(
            self.platform_developer_dir(platform),
            "SDKs",
            f"{platform.sdk_name}{self.config.sdk_version}.sdk",
            "usr",
            "include",
        )

    @property
    def compiler_path(self) -> str:
        return os.path.join(
            self.config.xcode_root,
            "Toolchains",
            "XcodeDefault.xctoolchain",
            "usr",
            "bin",
            self.config.compiler,
        )

    def tool(self, name: str, platform=DEVICE) -> str:
        """
        Locate a platform developer tool such as lipo or ar.

        Newer Xcode releases no longer ship per-platform copies, in which
        case the tool found on PATH is used.
        """
        candidate = os.path.join(self.platform_developer_dir(platform), "usr", "bin", name)
        if os.path.isfile(candidate):
            return candidate
        return shutil.which(name) or name

    def lipo(self) -> str:
        return self.tool("lipo", DEVICE)

    def ar(self, target) -> str:
        return self.tool("ar", SIMULATOR if target.is_simulator else DEVICE)


def archive_name(library: str) -> str:
    return f"libboost_{library}.a"


def require(path: str, what: str, library=None) -> str:
    """
    Check that an expected artifact exists.

    Args:
        path: Path that must exist
        what: Human readable name of the artifact for the error message
        library: Library the artifact belongs to, if any

    Returns:
        str: path, unchanged

    Raises:
        PreconditionError: If path does not exist
    """
    if not os.path.exists(path):
        raise PreconditionError(f"{what} not found: {path}", path=path, library=library)
    return path
