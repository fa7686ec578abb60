#!/usr/bin/env python3
# -- coding: utf-8 --
#
# headers.py
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

import os
import shutil

from boostios.build_scripts.paths import BuildPaths, require
from boostios.build_scripts.targets import SIMULATOR


def invent_missing_headers(config):
    """
    Copy headers the iPhoneOS SDK lacks from the simulator SDK.

    crt_externs.h and bzlib.h are missing from the device SDK but present in
    the simulator SDK. The APIs they declare are available on the device, so
    they are copied into the Boost source root where both builds find them.

    Args:
        config: BuildConfig

    Returns:
        list: Paths of the copied headers

    Raises:
        PreconditionError: If a header is absent from the simulator SDK
    """
    paths = BuildPaths(config)
    print("Invent missing headers")
    sdk_include = paths.sdk_include_dir(SIMULATOR)
    copied = []
    for header in config.missing_headers:
        src = require(os.path.join(sdk_include, header), "Simulator SDK header")
        dst = os.path.join(paths.boost_src, header)
        shutil.copy(src, dst)
        copied.append(dst)
    return copied
