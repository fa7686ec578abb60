#!/usr/bin/env python3
# -- coding: utf-8 --
#
# targets.py
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
The fixed set of platforms and architectures the framework is built for.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Platform:
    """An SDK platform: iOS devices or the iOS simulator."""
    name: str  # macosx-version prefix and toolset suffix, e.g. "iphone"
    architecture: str  # Boost.Build architecture feature, "arm" or "x86"
    sdk_dir: str  # Directory under $XCODE_ROOT/Platforms
    sdk_name: str  # SDK bundle prefix, e.g. "iPhoneOS"
    archs: Tuple[str, ...]  # -arch flags passed to the compiler
    build_target: str  # "install" or "stage"

    def toolset(self, sdk_version: str) -> str:
        """Boost.Build toolset version, e.g. '6.0~iphone'."""
        return f"{sdk_version}~{self.name}"

    def macosx_version(self, sdk_version: str) -> str:
        return f"{self.name}-{sdk_version}"


@dataclass(frozen=True)
class Target:
    """One architecture slice of the final universal archive."""
    arch: str
    platform: Platform

    @property
    def is_simulator(self) -> bool:
        return self.platform == SIMULATOR


DEVICE = Platform(
    name="iphone",
    architecture="arm",
    sdk_dir="iPhoneOS.platform",
    sdk_name="iPhoneOS",
    archs=("armv6", "armv7", "armv7s"),
    build_target="install",
)

SIMULATOR = Platform(
    name="iphonesim",
    architecture="x86",
    sdk_dir="iPhoneSimulator.platform",
    sdk_name="iPhoneSimulator",
    archs=("i386",),
    build_target="stage",
)

PLATFORMS = (DEVICE, SIMULATOR)

TARGETS = tuple(Target(arch, p) for p in PLATFORMS for arch in p.archs)

ALL_ARCHS = tuple(t.arch for t in TARGETS)


def target_for_arch(arch: str) -> Target:
    for target in TARGETS:
        if target.arch == arch:
            return target
    raise KeyError(f"unknown architecture: {arch}")
