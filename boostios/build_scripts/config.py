#!/usr/bin/env python3
# -- coding: utf-8 --
#
# config.py
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
Build configuration for the Boost iOS framework pipeline.

The configuration is resolved once at startup into an immutable BuildConfig
and handed to every stage. Values come from, lowest precedence first:

- Built-in defaults
- boostios.toml in the project directory
- Environment variables (BOOST_LIBS, IPHONE_SDKVERSION, XCODE_ROOT, ...)
- Command-line overrides

Example boostios.toml:

    [boost]
    libs = ["thread", "system"]
    vcs = "svn"

    [ios]
    sdk_version = "6.1"

    [paths]
    build = "out/build"
"""

import os
import re
import subprocess
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from boostios.build_scripts.errors import ConfigError

CONFIG_FILE_NAME = "boostios.toml"

DEFAULT_LIBS = "thread signals filesystem regex program_options system"
DEFAULT_SDK_VERSION = "6.0"
DEFAULT_XCODE_ROOT = "/Applications/Xcode.app/Contents/Developer"
# Forces the pthread based atomics in shared_ptr. Without them an ARM
# compare-and-swap that is not thread safe ends up in the use count.
DEFAULT_EXTRA_CPPFLAGS = (
    "-DBOOST_AC_USE_PTHREADS -DBOOST_SP_USE_PTHREADS -std=c++11 -stdlib=libc++"
)
DEFAULT_COMPILER = "clang++"
DEFAULT_JOBS = 16

SVN_RELEASE_URL = "http://svn.boost.org/svn/boost/tags/release/"
GIT_REPOSITORY_URL = "https://github.com/boostorg/boost.git"

SUPPORTED_VCS = ("svn", "git")

# Environment variable -> BuildConfig field
ENV_FIELDS = {
    "BOOST_LIBS": "libraries",
    "IPHONE_SDKVERSION": "sdk_version",
    "XCODE_ROOT": "xcode_root",
    "EXTRA_CPPFLAGS": "extra_cppflags",
    "COMPILER": "compiler",
    "SRCDIR": "src_dir",
    "BUILDDIR": "build_dir",
    "PREFIXDIR": "prefix_dir",
    "FRAMEWORKDIR": "framework_dir",
}

# (table, key) in boostios.toml -> BuildConfig field
TOML_FIELDS = {
    ("boost", "libs"): "libraries",
    ("boost", "vcs"): "vcs",
    ("boost", "repository"): "repository",
    ("boost", "user_config"): "user_config",
    ("boost", "build_tool"): "build_tool",
    ("boost", "jobs"): "jobs",
    ("ios", "sdk_version"): "sdk_version",
    ("ios", "xcode_root"): "xcode_root",
    ("ios", "compiler"): "compiler",
    ("ios", "extra_cppflags"): "extra_cppflags",
    ("ios", "missing_headers"): "missing_headers",
    ("paths", "src"): "src_dir",
    ("paths", "build"): "build_dir",
    ("paths", "prefix"): "prefix_dir",
    ("paths", "framework"): "framework_dir",
    ("framework", "name"): "framework_name",
    ("framework", "version"): "framework_version",
    ("framework", "identifier"): "bundle_identifier",
}

PATH_FIELDS = ("src_dir", "build_dir", "prefix_dir", "framework_dir")


def split_list(value) -> Tuple[str, ...]:
    """Split a whitespace or comma separated list, or normalize a sequence."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(x for x in re.split(r"[\s,]+", value) if x)
    return tuple(str(x).strip() for x in value if str(x).strip())


def discover_xcode_root() -> str:
    """
    Ask xcode-select for the active developer directory.

    Falls back to the default Xcode location when xcode-select is not
    available (e.g. when not running on macOS).
    """
    try:
        out = subprocess.run(
            ["xcode-select", "-print-path"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired):
        return DEFAULT_XCODE_ROOT
    if out.returncode != 0 or not out.stdout.strip():
        return DEFAULT_XCODE_ROOT
    return out.stdout.strip()


@dataclass(frozen=True)
class BuildConfig:
    """Resolved settings shared by every pipeline stage."""
    libraries: Tuple[str, ...]
    sdk_version: str
    xcode_root: str
    src_dir: str
    build_dir: str
    prefix_dir: str
    framework_dir: str
    extra_cppflags: str = DEFAULT_EXTRA_CPPFLAGS
    compiler: str = DEFAULT_COMPILER
    jobs: int = DEFAULT_JOBS
    vcs: str = "svn"
    repository: str = SVN_RELEASE_URL
    user_config: str = "tools/build/v2/user-config.jam"
    build_tool: str = "bjam"
    missing_headers: Tuple[str, ...] = ("crt_externs.h", "bzlib.h")
    framework_name: str = "boost"
    framework_version: str = "A"
    bundle_identifier: str = "org.boost"
    config_file: Optional[str] = field(default=None, compare=False)

    @property
    def boost_src(self) -> str:
        return os.path.join(self.src_dir, "boost")

    def with_overrides(self, **overrides) -> "BuildConfig":
        """Return a copy with the non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "libraries" in values:
            values["libraries"] = split_list(values["libraries"])
        if "jobs" in values:
            values["jobs"] = _as_jobs(values["jobs"])
        return replace(self, **values)

    def summary(self) -> Dict[str, str]:
        """Settings as printed at the start of a build."""
        return {
            "BOOST_LIBS": " ".join(self.libraries),
            "BOOST_SRC": self.boost_src,
            "BUILDDIR": self.build_dir,
            "PREFIXDIR": self.prefix_dir,
            "FRAMEWORKDIR": self.framework_dir,
            "IPHONE_SDKVERSION": self.sdk_version,
            "XCODE_ROOT": self.xcode_root,
            "COMPILER": self.compiler,
        }


def _as_jobs(value) -> int:
    try:
        jobs = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"jobs must be an integer, got {value!r}")
    if jobs <= 0:
        raise ConfigError(f"jobs must be positive, got {jobs}")
    return jobs


def read_config_file(config_file) -> Dict[str, object]:
    """
    Read boostios.toml into a flat {field: value} dict.

    Args:
        config_file: Path of the TOML file

    Returns:
        dict: BuildConfig field values found in the file

    Raises:
        ConfigError: If the file is not valid TOML or has an unknown vcs
    """
    try:
        with open(config_file, "rb") as f:
            toml_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Error reading {config_file}: {e}") from e

    values = {}
    for (table, key), name in TOML_FIELDS.items():
        section = toml_data.get(table, {})
        if isinstance(section, dict) and key in section:
            values[name] = section[key]
    return values


def load_config(project_dir=None, env=None, config_file=None, **overrides) -> BuildConfig:
    """
    Resolve the build configuration.

    Args:
        project_dir: Directory relative paths and the default source
            directory are resolved against (default: cwd)
        env: Environment mapping (default: os.environ)
        config_file: Explicit TOML file; defaults to boostios.toml in
            project_dir when present
        **overrides: Command-line values, None means "not given"

    Returns:
        BuildConfig: The immutable configuration

    Raises:
        ConfigError: On unreadable config file or invalid values
    """
    project_dir = os.path.abspath(project_dir or os.getcwd())
    env = os.environ if env is None else env

    values = {
        "libraries": DEFAULT_LIBS,
        "sdk_version": DEFAULT_SDK_VERSION,
        "src_dir": project_dir,
        "build_dir": os.path.join(project_dir, "ios", "build"),
        "prefix_dir": os.path.join(project_dir, "ios", "prefix"),
        "framework_dir": os.path.join(project_dir, "ios", "framework"),
    }

    if config_file is None:
        candidate = os.path.join(project_dir, CONFIG_FILE_NAME)
        if os.path.isfile(candidate):
            config_file = candidate
    elif not os.path.isfile(config_file):
        raise ConfigError(f"Config file not found: {config_file}")
    if config_file:
        values.update(read_config_file(config_file))

    for env_name, name in ENV_FIELDS.items():
        if env.get(env_name):
            values[name] = env[env_name]

    values.update({k: v for k, v in overrides.items() if v is not None})

    if not values.get("xcode_root"):
        values["xcode_root"] = discover_xcode_root()

    for name in PATH_FIELDS:
        values[name] = os.path.join(project_dir, os.path.expanduser(str(values[name])))

    values["libraries"] = split_list(values["libraries"])
    if "missing_headers" in values:
        values["missing_headers"] = split_list(values["missing_headers"])
    if "jobs" in values:
        values["jobs"] = _as_jobs(values["jobs"])

    vcs = values.get("vcs", "svn")
    if vcs not in SUPPORTED_VCS:
        raise ConfigError(f"Unsupported vcs '{vcs}', expected one of {SUPPORTED_VCS}")
    if vcs == "git" and "repository" not in values:
        values["repository"] = GIT_REPOSITORY_URL

    values["sdk_version"] = str(values["sdk_version"])
    return BuildConfig(config_file=config_file, **values)
