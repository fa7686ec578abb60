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

import shlex
import subprocess
import time
from threading import Timer

from boostios.build_scripts.errors import ToolError

DEFAULT_TIMEOUT_SECOND = 10


def decode_bytes(input: bytes) -> str:
    if input is None:
        return ""
    try:
        return bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        return bytes.decode(input, "latin-1")


def format_command(command) -> str:
    return " ".join(shlex.quote(str(x)) for x in command)


def exec_command(command, cwd=None):
    # timeout is 3 hours
    return exec_command_with_timeout_second(command, 3 * 3600, cwd=cwd)


def exec_command_with_timeout_second(
    command,
    timeout_second=DEFAULT_TIMEOUT_SECOND,
    cwd=None,
    stdout=subprocess.PIPE,
    stderr=subprocess.STDOUT,
):
    start_mills = int(time.time() * 1000)
    # default timeout is 10 second
    popen = subprocess.Popen(
        [str(x) for x in command],
        cwd=cwd,
        stdout=stdout,
        stderr=stderr,
    )
    timer = Timer(timeout_second, lambda process: process.kill(), [popen])
    try:
        timer.start()
        out, err = popen.communicate()
    finally:
        timer.cancel()
    err_code = popen.returncode
    err_msg = decode_bytes(out)
    if err_code == -9:
        if not err_msg:
            if err:
                err_msg = decode_bytes(err)
            if not err_msg:
                use_time = int(time.time() * 1000) - start_mills
                err_msg = f"Failed for timeout({err_code}), use_time: {use_time}ms"
    return err_code, err_msg


class ToolRunner:
    """
    Runs external tools for the pipeline stages.

    Every invocation is echoed before it runs. A non-zero exit status is
    turned into a ToolError carrying that status, so callers never have to
    check return codes themselves.

    Args:
        echo: Print each command line before running it
        timeout_second: Kill captured commands after this many seconds
    """

    def __init__(self, echo=True, timeout_second=3 * 3600):
        self.echo = echo
        self.timeout_second = timeout_second

    def run(self, command, cwd=None, capture=False) -> str:
        """
        Run a command and return its output.

        Args:
            command: Argument list, first item is the executable
            cwd: Working directory for the command
            capture: Capture and return combined stdout/stderr instead of
                streaming it to the terminal

        Returns:
            str: Captured output, or "" when not capturing

        Raises:
            ToolError: If the command exits non-zero or cannot be started
        """
        command = [str(x) for x in command]
        if self.echo:
            prefix = f"(cd {cwd}; " if cwd else ""
            suffix = ")" if cwd else ""
            print(f"{prefix}{format_command(command)}{suffix}")

        try:
            if capture:
                code, output = exec_command_with_timeout_second(
                    command, self.timeout_second, cwd=cwd
                )
            else:
                code = subprocess.call(command, cwd=cwd)
                output = ""
        except OSError as e:
            # 127 is what a shell reports for a missing executable
            raise ToolError(command, 127, str(e)) from e

        if code != 0:
            if output:
                print(output)
            raise ToolError(command, code, output)
        return output
