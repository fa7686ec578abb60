#!/usr/bin/env python3
# -- coding: utf-8 --
#
# pipeline.py
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
Boost iOS framework build pipeline.

Runs the stages strictly in sequence, each consuming what the previous one
left on disk:

1. Clean the build, prefix and framework outputs
2. Synchronize the Boost source tree and patch user-config.jam
3. Copy headers missing from the iPhoneOS SDK
4. Bootstrap and build Boost for device and simulator
5. Create one universal archive per library in {prefix}/lib
6. Merge all libraries into one archive per architecture
7. Package boost.framework

Any BuildError stops the run; partial outputs are left on disk and removed
by the clean stage of the next run.
"""

import os
import shutil
import time

from boostios.build_scripts.archive_merger import lipo_all_boost_libraries
from boostios.build_scripts.build_driver import bootstrap_boost, build_boost_for_iphone
from boostios.build_scripts.errors import BuildError
from boostios.build_scripts.framework import build_framework
from boostios.build_scripts.headers import invent_missing_headers
from boostios.build_scripts.paths import BuildPaths
from boostios.build_scripts.source_sync import update_boost
from boostios.build_scripts.uber_archive import scrunch_all_libs_together
from boostios.utils.cmd.cmd_util import ToolRunner
from boostios.utils.context.result import BuildResult


def done_section():
    print()
    print("    =================================================================")
    print("    Done")
    print()


def clean_outputs(config, dry_run=False):
    """
    Remove the build dir, the prefix dir and the framework bundle.

    Returns:
        list: The paths that were (or with dry_run would be) removed
    """
    paths = BuildPaths(config)
    print("Cleaning everything before we start to build...")
    removed = []
    for path in (config.build_dir, config.prefix_dir, paths.framework_bundle):
        if not os.path.lexists(path):
            continue
        removed.append(path)
        if dry_run:
            print(f"  [dry-run] would remove {path}")
            continue
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
        print(f"  removed {path}")
    return removed


def print_summary(config, version):
    print(f"{'BOOST_VERSION:':<19}{version}")
    for key, value in config.summary().items():
        print(f"{key + ':':<19}{value}")
    print()


class BoostFrameworkBuilder:
    """
    Drives the full pipeline for one configuration.

    Example usage:
        builder = BoostFrameworkBuilder(load_config())
        result = builder.run()
        if not result.ok:
            print(result.error)

    Args:
        config: BuildConfig
        runner: ToolRunner for every external command (default: ToolRunner())
        update: Update an existing Boost checkout before building
    """

    def __init__(self, config, runner=None, update=True):
        self.config = config
        self.runner = runner or ToolRunner()
        self.update = update
        self.version = None

    def build(self):
        """
        Run every stage.

        Returns:
            str: Path of the framework bundle

        Raises:
            BuildError: From the first failing stage
        """
        config = self.config
        clean_outputs(config)
        os.makedirs(config.build_dir, exist_ok=True)
        done_section()

        version = self.version = update_boost(config, self.runner, update=self.update)
        done_section()

        print_summary(config, version)

        invent_missing_headers(config)
        done_section()

        bootstrap_boost(config, self.runner)
        done_section()

        build_boost_for_iphone(config, self.runner)
        done_section()

        lipo_all_boost_libraries(config, self.runner)
        done_section()

        scrunch_all_libs_together(config, self.runner)
        done_section()

        bundle = build_framework(config, self.runner, version)
        done_section()
        return bundle

    def run(self) -> BuildResult:
        """Like build(), but reports failure as a BuildResult error."""
        before_time = time.time()
        try:
            bundle = self.build()
        except BuildError as e:
            return BuildResult(version=self.version, elapsed=time.time() - before_time, error=e)
        elapsed = time.time() - before_time
        print("==================Output========================")
        print(bundle)
        print(f"use time: {int(elapsed)} s")
        print("Completed successfully")
        return BuildResult(bundle=bundle, version=self.version, elapsed=elapsed)
