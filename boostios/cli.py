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

import os
import sys
import importlib
import argparse

from boostios.utils.context.namespace import CliNameSpace
from boostios.utils.context.context import CliContext
from boostios.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """boostios - Boost framework builder for iOS

Builds the Boost C++ libraries as universal static archives for iOS devices
and the iOS simulator, and packages them as boost.framework.

USAGE:
    boostios <command> [options]

COMMANDS:
    build       Sync, build and package boost.framework
    sync        Check out or update the Boost sources only
    clean       Remove build, prefix and framework outputs

EXAMPLES:
    boostios build                          # Build with the defaults
    BOOST_LIBS="thread system" boostios build
    boostios clean --dry-run

For more information on a specific command:
    boostios <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def make_parser(self, add_help=True) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="boostios",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs="?",
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        argv = sys.argv[1:] if argv is None else list(argv)
        # Help for the root command only, "boostios build --help" goes to build
        if len(argv) == 1 and argv[0] in ["--help", "-h"]:
            self.make_parser().print_help()
            sys.exit(0)

        # parse only known args - this will NOT consume --help if present
        args, unknown = self.make_parser(add_help=False).parse_known_args(argv[:1])
        args.argv = argv[1:]
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self.make_parser().print_help()
            sys.exit(1)

        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        return sub_cmd.exec(context, sub_cmd.cli(args.argv))


def main(argv=None):
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli(argv))


if __name__ == "__main__":
    main()
