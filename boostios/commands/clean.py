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
from boostios.build_scripts.pipeline import clean_outputs
from boostios.utils.context.command import CliCommand
from boostios.utils.context.context import CliContext
from boostios.utils.context.namespace import CliNameSpace


class Clean(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to clean build artifacts.

        Removes the following (paths follow the configuration):
        - ios/build/                    # per-architecture staging
        - ios/prefix/                   # installed headers and per-library archives
        - ios/framework/boost.framework # the framework bundle

        The Boost checkout itself is kept.

        Examples:
            boostios clean              # Clean all build artifacts
            boostios clean --dry-run    # Preview what will be cleaned
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="boostios clean",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be cleaned without actually deleting",
        )
        parser.add_argument(
            "--config",
            action="store",
            default=None,
            help="path of the config file (default: ./boostios.toml if present)",
        )
        args, unknown = parser.parse_known_args(self.module_argv(__file__, argv))
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            config = load_config(context.project_dir, env=context.env, config_file=args.config)
        except BuildError as e:
            self.abort(e)
        removed = clean_outputs(config, dry_run=args.dry_run)
        if not removed:
            print("Nothing to clean")
        return removed
