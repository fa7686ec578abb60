#!/usr/bin/env python3
# -- coding: utf-8 --
#
# lipo.py
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
Wrappers around lipo and ar for universal (fat) static archives.
"""

import glob
import os

from boostios.build_scripts.errors import BuildError


def lipo_libs(runner, lipo, src_libs, dst_lib):
    """
    Create a universal archive from single or multi architecture archives.

    Example:
        lipo_libs(runner, "lipo", ["libfoo.arm.a", "libfoo.x86.a"], "libfoo.a")
    """
    os.makedirs(os.path.dirname(dst_lib), exist_ok=True)
    runner.run([lipo, "-create", *src_libs, "-output", dst_lib])
    return dst_lib


def lipo_thin_lib(runner, lipo, src_lib, dst_lib, arch):
    """Extract the slice of one architecture from a universal archive."""
    os.makedirs(os.path.dirname(dst_lib), exist_ok=True)
    runner.run([lipo, src_lib, "-thin", arch, "-output", dst_lib])
    return dst_lib


def parse_lipo_info(output):
    """
    Parse 'lipo -info' output into a list of architectures.

    Handles both forms:
        Architectures in the fat file: libfoo.a are: armv7 armv7s
        Non-fat file: libfoo.a is architecture: i386
    """
    for line in output.splitlines():
        line = line.strip()
        if line.startswith("Architectures in the fat file:"):
            return line.rsplit(" are: ", 1)[-1].split()
        if line.startswith("Non-fat file:"):
            return line.rsplit(" is architecture: ", 1)[-1].split()
    return []


def lipo_archs(runner, lipo, lib):
    return parse_lipo_info(runner.run([lipo, "-info", lib], capture=True))


def verify_archs(runner, lipo, lib, expected):
    """
    Check a universal archive contains every expected architecture.

    Raises:
        BuildError: Naming the missing architectures
    """
    found = lipo_archs(runner, lipo, lib)
    missing = [a for a in expected if a not in found]
    if missing:
        raise BuildError(
            f"{os.path.basename(lib)} is missing architectures {', '.join(missing)} "
            f"(found: {' '.join(found) or 'none'})"
        )
    print(f"  {os.path.basename(lib)}: {' '.join(found)}")
    return found


def ar_extract(runner, ar, lib, obj_dir):
    """Explode an archive into its object files inside obj_dir."""
    os.makedirs(obj_dir, exist_ok=True)
    runner.run([ar, "-x", os.path.relpath(lib, obj_dir)], cwd=obj_dir)


def ar_create(runner, ar, dst_lib, obj_dir):
    """
    Archive every object file of obj_dir into dst_lib.

    ar only appends, so an existing dst_lib is removed first.

    Returns:
        str: dst_lib, or None when obj_dir holds no object files
    """
    if os.path.exists(dst_lib):
        os.remove(dst_lib)
    objects = sorted(glob.glob(os.path.join(obj_dir, "*.o")))
    if not objects:
        return None
    cwd = os.path.dirname(dst_lib)
    runner.run(
        [ar, "crus", os.path.basename(dst_lib)]
        + [os.path.relpath(o, cwd) for o in objects],
        cwd=cwd,
    )
    return dst_lib
