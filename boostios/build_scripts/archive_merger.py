#!/usr/bin/env python3
# -- coding: utf-8 --
#
# archive_merger.py
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
Per-library universal archives.

For every requested library the device archive (armv6/armv7/armv7s) and the
simulator archive (i386) are fused into {prefix}/lib/libboost_{lib}.a.
"""

import os

from boostios.build_scripts.errors import BuildError, PreconditionError
from boostios.build_scripts.lipo import lipo_libs, verify_archs
from boostios.build_scripts.paths import BuildPaths, require
from boostios.build_scripts.targets import ALL_ARCHS, PLATFORMS


def lipoficate(config, runner, library):
    """
    Create the universal archive of one library.

    Args:
        config: BuildConfig
        runner: ToolRunner
        library: Library name, e.g. "thread"

    Returns:
        str: Path of the universal archive

    Raises:
        PreconditionError: If a per-platform archive is missing; nothing is
            written for the library in that case
        ToolError: If lipo fails
        BuildError: If the universal archive lacks an architecture; the
            archive is removed again
    """
    paths = BuildPaths(config)
    print(f"lipoficate: {library}")
    inputs = []
    for platform in PLATFORMS:
        archive = paths.staged_archive(library, platform)
        try:
            require(archive, f"{platform.name} archive", library=library)
        except PreconditionError as e:
            raise PreconditionError(
                f"Lipo {library} failed: {e}", path=e.path, library=library
            ) from e
        inputs.append(archive)

    output = lipo_libs(runner, paths.lipo(), inputs, paths.universal_archive(library))
    try:
        verify_archs(runner, paths.lipo(), output, ALL_ARCHS)
    except BuildError:
        # prefix/lib only ever holds verified archives
        if os.path.lexists(output):
            os.remove(output)
        raise
    return output


def lipo_all_boost_libraries(config, runner):
    """Create the universal archive of every configured library."""
    return [lipoficate(config, runner, library) for library in config.libraries]
