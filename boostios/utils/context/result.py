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


# Outcome of a pipeline run, either a framework bundle or the error that stopped it
class BuildResult:
    def __init__(self, bundle=None, version=None, elapsed=0.0, error=None):
        self.bundle = bundle
        self.version = version
        self.elapsed = elapsed
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        if self.ok:
            return 0
        return getattr(self.error, "exit_code", 1)

    def __repr__(self):
        if self.ok:
            return f"BuildResult(bundle={self.bundle!r}, version={self.version!r})"
        return f"BuildResult(error={self.error!r})"
