#!/usr/bin/env python3
# -- coding: utf-8 --
#
# uber_archive.py
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
Consolidation of all libraries into one archive.

The iOS linkers of this Xcode generation do not reliably resolve symbols
across several fat archives, so all libraries are merged at the object file
level into a single link unit:

1. Split: thin each library's device archive into armv6, armv7 and armv7s
   slices under {build}/{arch}/; copy the simulator archive to {build}/i386/
2. Decompose: extract every thin archive into {build}/{arch}/obj/. Objects
   of all libraries share that directory, so a file name used by two
   libraries is overwritten by the later one.
3. Link: archive {build}/{arch}/obj/*.o into {build}/{arch}/libboost.a
4. Fuse: lipo the per-architecture archives into one universal archive
"""

import os
import shutil

from boostios.build_scripts.lipo import (
    ar_create,
    ar_extract,
    lipo_libs,
    lipo_thin_lib,
    verify_archs,
)
from boostios.build_scripts.paths import BuildPaths, archive_name, require
from boostios.build_scripts.targets import TARGETS


def split_fat_archives(config, runner):
    """Stage one thin archive per (library, architecture)."""
    paths = BuildPaths(config)
    for target in TARGETS:
        os.makedirs(paths.obj_dir(target.arch), exist_ok=True)

    print("Splitting all existing fat binaries...")
    for library in config.libraries:
        for target in TARGETS:
            src = require(
                paths.staged_archive(library, target.platform),
                f"{target.platform.name} archive",
                library=library,
            )
            dst = paths.thin_archive(library, target.arch)
            if target.is_simulator:
                shutil.copy(src, dst)
            else:
                lipo_thin_lib(runner, paths.lipo(), src, dst, target.arch)


def decompose_archives(config, runner):
    """Explode every staged thin archive into its architecture's obj dir."""
    paths = BuildPaths(config)
    print("Decomposing each architecture's .a files")
    for library in config.libraries:
        print(f"Decomposing {archive_name(library)}...")
        for target in TARGETS:
            ar_extract(
                runner,
                paths.ar(target),
                paths.thin_archive(library, target.arch),
                paths.obj_dir(target.arch),
            )


def link_uber_archives(config, runner):
    """
    Re-archive each architecture's objects into libboost.a.

    Returns:
        list: Consolidated archives, one per architecture that has objects
    """
    paths = BuildPaths(config)
    print(f"Linking each architecture into an uberlib ({' '.join(config.libraries)} => libboost.a)")
    archives = []
    for target in TARGETS:
        print(f"...{target.arch}")
        archive = ar_create(
            runner,
            paths.ar(target),
            paths.consolidated_archive(target.arch),
            paths.obj_dir(target.arch),
        )
        if archive:
            archives.append(archive)
    return archives


def scrunch_all_libs_together(config, runner):
    """Run split, decompose and link. Returns the consolidated archives."""
    split_fat_archives(config, runner)
    decompose_archives(config, runner)
    return link_uber_archives(config, runner)


def fuse_uber_archives(config, runner, output):
    """
    Fuse the per-architecture consolidated archives into one universal archive.

    Args:
        config: BuildConfig
        runner: ToolRunner
        output: Path of the universal archive to write

    Returns:
        str: output, or None when no architecture produced an archive
            (an empty library list)
    """
    paths = BuildPaths(config)
    archives = [
        paths.consolidated_archive(t.arch)
        for t in TARGETS
        if os.path.exists(paths.consolidated_archive(t.arch))
    ]
    if not archives:
        print("No libraries were built, skipping the universal archive")
        return None
    print(f"Lipoing library into {output}...")
    lipo_libs(runner, paths.lipo(), archives, output)
    verify_archs(runner, paths.lipo(), output, [t.arch for t in TARGETS])
    return output
