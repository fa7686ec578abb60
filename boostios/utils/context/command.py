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

from .context import CliContext
from .namespace import CliNameSpace


# Base class of every command, the root cli and the sub-commands
class CliCommand:
    def description(self) -> str:
        raise NotImplementedError

    def cli(self, argv=None) -> CliNameSpace:
        raise NotImplementedError

    def exec(self, context: CliContext, args: CliNameSpace):
        raise NotImplementedError

    def abort(self, error):
        """Report a fatal error and exit with the error's status."""
        print()
        print(f"Aborted: {error}")
        sys.exit(getattr(error, "exit_code", 1))

    def module_argv(self, module_file, argv=None) -> list:
        """Command line of a sub-command, without the sub-command name itself."""
        if argv is not None:
            return list(argv)
        module_name = os.path.splitext(os.path.basename(module_file))[0]
        input_argv = sys.argv[1:]
        if input_argv and input_argv[0] == module_name:
            input_argv = input_argv[1:]
        return input_argv
