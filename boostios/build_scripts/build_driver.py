#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_driver.py
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
Boost.Build invocation.

Bootstraps Boost.Build for the requested libraries, then runs it twice:
- device toolset (armv6/armv7/armv7s), installed into the prefix directory
  so the public headers are staged as well
- simulator toolset (i386), staged only

Both runs are static, release and multi-threaded; the archives land in the
bin.v2 tree at the paths BuildPaths.staged_archive() describes.
"""

import os

from boostios.build_scripts.paths import BuildPaths, require
from boostios.build_scripts.targets import DEVICE, SIMULATOR


def bootstrap_boost(config, runner):
    """Run bootstrap.sh restricted to the configured libraries."""
    paths = BuildPaths(config)
    libs = ",".join(config.libraries)
    print(f"Bootstrapping (with libs {libs})")
    require(os.path.join(paths.boost_src, "bootstrap.sh"), "Boost bootstrap script")
    runner.run(["./bootstrap.sh", f"--with-libraries={libs}"], cwd=paths.boost_src)


def build_command(config, platform):
    """
    Boost.Build command line for one platform.

    Args:
        config: BuildConfig
        platform: DEVICE or SIMULATOR

    Returns:
        list: Argument list, relative to the Boost source root
    """
    cmd = [f"./{config.build_tool}", f"-j{config.jobs}"]
    if platform.build_target == "install":
        cmd.append(f"--prefix={config.prefix_dir}")
    cmd += [
        "toolset=darwin",
        f"architecture={platform.architecture}",
        "target-os=iphone",
        f"macosx-version={platform.macosx_version(config.sdk_version)}",
    ]
    if platform == DEVICE:
        cmd.append("define=_LITTLE_ENDIAN")
    cmd += ["link=static", platform.build_target]
    return cmd


def build_boost_for_iphone(config, runner):
    """
    Build the libraries for the device and the simulator, in that order.

    A failing invocation raises ToolError right away; the simulator build
    is not attempted after a failed device build.
    """
    paths = BuildPaths(config)
    for platform in (DEVICE, SIMULATOR):
        print(f"Building boost for {platform.name} ({', '.join(platform.archs)})")
        runner.run(build_command(config, platform), cwd=paths.boost_src)
