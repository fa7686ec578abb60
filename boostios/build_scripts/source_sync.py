#!/usr/bin/env python3
# -- coding: utf-8 --
#
# source_sync.py
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
Boost source synchronization.

Keeps {src}/boost at the latest Boost release:
- An existing checkout is cleaned of untracked/ignored files and updated
- A missing checkout is created from the newest tag in the release namespace

It also appends the iPhone and iPhone simulator toolset definitions to
Boost.Build's user-config.jam, unless the file already carries local
modifications (which means a previous run patched it).

Two version-control backends are supported: svn (the historical Boost
repository) and git (boostorg/boost on GitHub).
"""

import os
import re
import shutil

from boostios.build_scripts.errors import BuildError
from boostios.build_scripts.paths import BuildPaths
from boostios.build_scripts.targets import DEVICE, SIMULATOR


USER_CONFIG_TEMPLATE = """using darwin : {toolset}
   : {compiler} {arch_flags} -fvisibility=hidden -fvisibility-inlines-hidden {extra_cppflags}
   : <striper> <root>{developer_dir}
   : <architecture>{architecture} <target-os>iphone
   ;
"""


class SvnClient:
    """Subversion operations used by the synchronizer."""

    name = "svn"

    def __init__(self, runner, repository):
        self.runner = runner
        # Release tags live directly below this URL
        self.repository = repository.rstrip("/") + "/"

    def clean_untracked(self, path):
        output = self.runner.run(["svn", "st", "--no-ignore", path], capture=True)
        for line in output.splitlines():
            # "?" unversioned, "I" ignored; the path follows 7 status columns
            if line[:1] in ("?", "I") and len(line) > 7:
                remove_path(line[7:].strip())

    def update(self, path):
        self.runner.run(["svn", "update", path])

    def list_releases(self):
        output = self.runner.run(["svn", "ls", self.repository], capture=True)
        return [x.strip().rstrip("/") for x in output.splitlines() if x.strip()]

    def checkout(self, release, path):
        self.runner.run(["svn", "co", self.repository + release, path])

    def is_modified(self, path):
        output = self.runner.run(["svn", "st", path], capture=True)
        return any(line.startswith("M") for line in output.splitlines())

    def version(self, path):
        output = self.runner.run(["svn", "info", path], capture=True)
        for line in output.splitlines():
            if line.startswith("URL"):
                match = re.search(r"/Boost_([^/]*)$", line.strip())
                if match:
                    return match.group(1)
        raise BuildError(f"Cannot determine Boost version from svn info of {path}")


class GitClient:
    """Git operations used by the synchronizer."""

    name = "git"
    TAG_PREFIX = "boost-"

    def __init__(self, runner, repository):
        self.runner = runner
        self.repository = repository

    def clean_untracked(self, path):
        self.runner.run(["git", "clean", "-fdx"], cwd=path)
        self.runner.run(
            ["git", "submodule", "foreach", "--recursive", "git clean -fdx"], cwd=path
        )

    def update(self, path):
        self.runner.run(["git", "pull", "--ff-only"], cwd=path)
        self.runner.run(["git", "submodule", "update", "--init", "--recursive"], cwd=path)

    def list_releases(self):
        output = self.runner.run(
            ["git", "ls-remote", "--tags", self.repository], capture=True
        )
        tags = []
        for line in output.splitlines():
            if "refs/tags/" not in line:
                continue
            tag = line.split("refs/tags/")[-1]
            # Skip peeled tags (^{})
            if tag.endswith("^{}") or not tag.startswith(self.TAG_PREFIX):
                continue
            # Only final releases, no beta/rc tags
            if re.match(r"^boost-\d+\.\d+\.\d+$", tag):
                tags.append(tag)
        return tags

    def checkout(self, release, path):
        self.runner.run(
            [
                "git", "clone", "--recursive", "--depth", "1",
                "--branch", release, self.repository, path,
            ]
        )

    def is_modified(self, path):
        # Modified, added and untracked all count as a local change
        cwd = os.path.dirname(os.path.abspath(path))
        while not os.path.isdir(cwd):
            cwd = os.path.dirname(cwd)
        output = self.runner.run(
            ["git", "status", "--porcelain", "--", os.path.relpath(path, cwd)],
            cwd=cwd,
            capture=True,
        )
        return any(line.strip() for line in output.splitlines())

    def version(self, path):
        output = self.runner.run(
            ["git", "describe", "--tags", "--exact-match"], cwd=path, capture=True
        )
        tag = output.strip()
        if not tag.startswith(self.TAG_PREFIX):
            raise BuildError(f"Cannot determine Boost version from git tag '{tag}'")
        return tag[len(self.TAG_PREFIX):]


def make_vcs_client(config, runner):
    if config.vcs == "git":
        return GitClient(runner, config.repository)
    return SvnClient(runner, config.repository)


def remove_path(path):
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.remove(path)


def latest_release(releases):
    """
    Pick the most recent release from a tag listing.

    Tag names sort chronologically by name (Boost_1_51_0 < Boost_1_52_0), so
    the last one in sorted order wins.
    """
    if not releases:
        raise BuildError("No releases found in the release tag namespace")
    return sorted(releases)[-1]


def render_user_config(config, paths: BuildPaths) -> str:
    """Toolset definitions for the device and the simulator."""
    blocks = []
    for platform in (DEVICE, SIMULATOR):
        blocks.append(
            USER_CONFIG_TEMPLATE.format(
                toolset=platform.toolset(config.sdk_version),
                compiler=paths.compiler_path,
                arch_flags=" ".join(f"-arch {a}" for a in platform.archs),
                extra_cppflags=config.extra_cppflags,
                developer_dir=paths.platform_developer_dir(platform),
                architecture=platform.architecture,
            )
        )
    return "".join(blocks)


def has_toolset(config, jam):
    """True if jam already defines the iPhone device toolset."""
    if not os.path.isfile(jam):
        return False
    marker = f"using darwin : {DEVICE.toolset(config.sdk_version)}\n"
    with open(jam) as f:
        return any(line == marker for line in f)


def patch_user_config(config, paths: BuildPaths, vcs) -> bool:
    """
    Append the iPhone toolsets to user-config.jam once.

    Returns:
        bool: True if the file was patched, False if it was already modified
            or already carries the toolset definitions
    """
    jam = paths.user_config_jam
    if vcs.is_modified(jam) or has_toolset(config, jam):
        print(f"{jam} already patched, leaving it alone")
        return False
    os.makedirs(os.path.dirname(jam), exist_ok=True)
    with open(jam, "a") as f:
        f.write(render_user_config(config, paths))
    print(f"Patched {jam}")
    return True


def update_boost(config, runner, update=True, vcs=None):
    """
    Bring the Boost checkout up to date and patch its toolset config.

    Args:
        config: BuildConfig
        runner: ToolRunner used for the version-control commands
        update: When False an existing checkout is used as is
        vcs: Version-control client (default: chosen from config.vcs)

    Returns:
        str: The Boost version of the checkout, e.g. "1_52_0"

    Raises:
        ToolError: If a version-control command fails
        BuildError: If no release can be found or the version is unknown
    """
    paths = BuildPaths(config)
    vcs = vcs or make_vcs_client(config, runner)
    boost_src = paths.boost_src
    print(f"Updating boost into {boost_src}...")

    if os.path.isdir(boost_src):
        if update:
            vcs.clean_untracked(boost_src)
            vcs.update(boost_src)
        else:
            print("Skipping update, using the existing checkout")
    else:
        release = latest_release(vcs.list_releases())
        print(f"Checking out release {release}")
        vcs.checkout(release, boost_src)

    patch_user_config(config, paths, vcs)
    return vcs.version(boost_src)
