#!/usr/bin/env python3
# -- coding: utf-8 --
#
# framework.py
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
Framework bundle packaging.

Produces {framework}/{name}.framework with the versioned layout Xcode
expects:

    boost.framework/
        Versions/
            A/
                Headers/
                Resources/Info.plist
                Documentation/
                boost                  universal static archive
            Current -> A
        Headers -> Versions/Current/Headers
        Resources -> Versions/Current/Resources
        Documentation -> Versions/Current/Documentation
        boost -> Versions/Current/boost
"""

import os
import plistlib
import shutil

from boostios.build_scripts.paths import BuildPaths, require
from boostios.build_scripts.uber_archive import fuse_uber_archives

BUNDLE_DIRS = ("Headers", "Resources", "Documentation")


def info_plist(config, version):
    """Contents of Resources/Info.plist."""
    return {
        "CFBundleDevelopmentRegion": "English",
        "CFBundleExecutable": config.framework_name,
        "CFBundleIdentifier": config.bundle_identifier,
        "CFBundleInfoDictionaryVersion": "6.0",
        "CFBundlePackageType": "FMWK",
        "CFBundleSignature": "????",
        "CFBundleVersion": version,
    }


def make_framework_layout(config):
    """
    Recreate the empty bundle directories and symlinks.

    Returns:
        str: The bundle path
    """
    paths = BuildPaths(config)
    bundle = paths.framework_bundle
    version_dir = paths.framework_version_dir

    if os.path.lexists(bundle):
        shutil.rmtree(bundle)

    print("Framework: Setting up directories...")
    for name in BUNDLE_DIRS:
        os.makedirs(os.path.join(version_dir, name))

    print("Framework: Creating symlinks...")
    os.symlink(config.framework_version, os.path.join(bundle, "Versions", "Current"))
    for name in BUNDLE_DIRS + (config.framework_name,):
        os.symlink(f"Versions/Current/{name}", os.path.join(bundle, name))
    return bundle


def copy_headers(config):
    """Copy the installed boost/ header tree into Headers/."""
    paths = BuildPaths(config)
    print("Framework: Copying includes...")
    src = require(paths.prefix_headers, "Installed Boost headers")
    dst = os.path.join(paths.framework_version_dir, "Headers")
    for entry in sorted(os.listdir(src)):
        src_path = os.path.join(src, entry)
        if os.path.isdir(src_path):
            shutil.copytree(src_path, os.path.join(dst, entry), symlinks=True)
        else:
            shutil.copy2(src_path, dst)


def write_info_plist(config, version):
    paths = BuildPaths(config)
    print("Framework: Creating plist...")
    plist_path = os.path.join(paths.framework_version_dir, "Resources", "Info.plist")
    with open(plist_path, "wb") as f:
        plistlib.dump(info_plist(config, version), f)
    return plist_path


def build_framework(config, runner, version):
    """
    Assemble the framework bundle from scratch.

    Args:
        config: BuildConfig
        runner: ToolRunner
        version: Boost version for CFBundleVersion, e.g. "1_52_0"

    Returns:
        str: The bundle path
    """
    paths = BuildPaths(config)
    bundle = make_framework_layout(config)
    fuse_uber_archives(config, runner, paths.framework_binary)
    copy_headers(config)
    write_info_plist(config, version)
    return bundle
