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
from boostios.build_scripts.source_sync import update_boost
from boostios.utils.cmd.cmd_util import ToolRunner
from boostios.utils.context.command import CliCommand
from boostios.utils.context.context import CliContext
from boostios.utils.context.namespace import CliNameSpace


class Sync(CliCommand):
    def description(self) -> str:
        return """
        Check out or update the Boost sources without building.

        A missing checkout is created from the newest release tag, an existing
        one is cleaned of unversioned files and updated. The iPhone toolsets
        are appended to user-config.jam unless it is already modified.

        Examples:
            boostios sync
            boostios sync --config boostios.toml
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="boostios sync",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
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
            version = update_boost(config, ToolRunner())
        except BuildError as e:
            self.abort(e)
        print(f"BOOST_VERSION: {version}")
        return version
