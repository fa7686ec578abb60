#!/usr/bin/env python3
# -- coding: utf-8 --
#
# errors.py
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
Error types raised by the build pipeline.

Every stage raises a subclass of BuildError; the commands turn it into an
"Aborted: ..." message and a process exit status.
"""


class BuildError(Exception):
    """Fatal pipeline failure. Exit status 1 unless a subclass says otherwise."""

    exit_code = 1


class ConfigError(BuildError):
    """Raised when the configuration file or an override cannot be used."""


class PreconditionError(BuildError):
    """Raised when an artifact a stage depends on is absent."""

    def __init__(self, message, path=None, library=None):
        super().__init__(message)
        self.path = path
        self.library = library


class ToolError(BuildError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, command, returncode, output=""):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"{self.command[0]} exited with status {returncode}: {' '.join(self.command)}"
        )

    @property
    def exit_code(self):
        # Signals come back negative from subprocess
        return self.returncode if self.returncode > 0 else 1
