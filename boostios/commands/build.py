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

import argparse

from boostios.build_scripts.config import load_config
from boostios.build_scripts.errors import BuildError
from boostios.build_scripts.pipeline import BoostFrameworkBuilder
from boostios.utils.cmd.cmd_util import ToolRunner
from boostios.utils.context.command import CliCommand
from boostios.utils.context.context import CliContext
from boostios.utils.context.namespace import CliNameSpace


class Build(CliCommand):
    def description(self) -> str:
        return """Build the universal Boost framework for iOS.

Fetches (or updates) the Boost sources, builds the selected libraries for
iOS devices (armv6, armv7, armv7s) and the simulator (i386), and packages
them as boost.framework.

OUTPUT:
    ios/prefix/lib/libboost_<lib>.a     universal archive per library
    ios/framework/boost.framework       framework with every library

CONFIGURATION (environment, or boostios.toml):
    BOOST_LIBS          libraries to build
    IPHONE_SDKVERSION   iPhone SDK version (e.g. 6.0)
    XCODE_ROOT          Xcode developer directory
    EXTRA_CPPFLAGS      extra compiler flags
    COMPILER            compiler binary name
    SRCDIR, BUILDDIR, PREFIXDIR, FRAMEWORKDIR

EXAMPLES:
    boostios build
    boostios build --libs thread,system --sdk-version 6.1
    boostios build --no-update -j 8
"""

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="boostios build",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--libs",
            action="store",
            default=None,
            help="libraries to build, separated by ',' or spaces (overrides BOOST_LIBS)",
        )
        parser.add_argument(
            "--sdk-version",
            action="store",
            default=None,
            help="iPhone SDK version (overrides IPHONE_SDKVERSION)",
        )
        parser.add_argument(
            "-j", "--jobs",
            type=int,
            default=None,
            help="parallel jobs passed to Boost.Build (default: 16)",
        )
        parser.add_argument(
            "--config",
            action="store",
            default=None,
            help="path of the config file (default: ./boostios.toml if present)",
        )
        parser.add_argument(
            "--no-update",
            action="store_true",
            help="use the existing Boost checkout without updating it",
        )
        args, unknown = parser.parse_known_args(self.module_argv(__file__, argv))
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            config = load_config(
                context.project_dir,
                env=context.env,
                config_file=args.config,
                libraries=args.libs,
                sdk_version=args.sdk_version,
                jobs=args.jobs,
            )
        except BuildError as e:
            self.abort(e)

        builder = BoostFrameworkBuilder(config, runner=ToolRunner(), update=not args.no_update)
        result = builder.run()
        if not result.ok:
            self.abort(result.error)
        return result.bundle
