"""
Pytest configuration for the boostios test suite.

The pipeline only talks to the outside world through a ToolRunner. The
FakeRunner below stands in for lipo, ar, svn, bootstrap.sh and bjam so the
whole build runs on any machine. Archives are JSON files of the form
{"archs": {"<arch>": ["member.o", ...]}}; extracted object files contain
the name of their architecture.
"""

import json
import os

import pytest

from boostios.build_scripts.config import load_config
from boostios.build_scripts.errors import ToolError
from boostios.build_scripts.paths import BuildPaths
from boostios.build_scripts.targets import DEVICE, SIMULATOR

DEFAULT_OBJECTS = {
    "thread": ["thread.o", "once.o"],
    "system": ["error_code.o"],
    "filesystem": ["operations.o", "path.o"],
}

SVN_RELEASES = "Boost_1_50_0/\nBoost_1_52_0/\nBoost_1_51_0/\n"

GIT_TAGS = (
    "aaa\trefs/tags/boost-1.51.0\n"
    "bbb\trefs/tags/boost-1.52.0\n"
    "ccc\trefs/tags/boost-1.52.0^{}\n"
)


def write_archive(path, archs):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        json.dump({"archs": archs}, f, sort_keys=True)


def read_archive(path):
    with open(path) as f:
        return json.load(f)["archs"]


class FakeRunner:
    """
    Records every command and emulates its effect on the filesystem.

    Args:
        config: BuildConfig the staged archive paths are derived from
        objects: {library: [object file names]}
        skip_archives: {(library, platform name)} bjam "forgets" to produce
        fail_on: Tool names (basename of argv[0]) that exit with status 1
        modified: Paths "svn st" and "git status" report as locally modified
        untracked: Paths "svn st --no-ignore" reports as unversioned
        tracked: Paths git knows about; any other existing file is untracked
    """

    def __init__(self, config, objects=None, skip_archives=(), fail_on=(),
                 modified=(), untracked=(), tracked=()):
        self.config = config
        self.paths = BuildPaths(config)
        self.objects = dict(DEFAULT_OBJECTS if objects is None else objects)
        self.skip_archives = set(skip_archives)
        self.fail_on = set(fail_on)
        self.modified = set(modified)
        self.untracked = list(untracked)
        self.tracked = {os.path.normpath(p) for p in tracked}
        self.calls = []

    def tools(self):
        return [os.path.basename(cmd[0]) for cmd, cwd in self.calls]

    def commands(self, tool):
        return [cmd for cmd, cwd in self.calls if os.path.basename(cmd[0]) == tool]

    def run(self, command, cwd=None, capture=False):
        command = [str(x) for x in command]
        self.calls.append((command, cwd))
        tool = os.path.basename(command[0])
        if tool in self.fail_on:
            raise ToolError(command, 1)
        handler = getattr(self, "_" + tool.lstrip("./").replace(".", "_"), None)
        output = handler(command, cwd) if handler else ""
        return output if capture else ""

    def _lipo(self, command, cwd):
        if "-create" in command:
            out = command[command.index("-output") + 1]
            merged = {}
            for src in command[2:command.index("-output")]:
                merged.update(read_archive(src))
            write_archive(out, merged)
        elif "-thin" in command:
            src, arch, out = command[1], command[3], command[5]
            archs = read_archive(src)
            if arch not in archs:
                raise ToolError(command, 1)
            write_archive(out, {arch: archs[arch]})
        elif "-info" in command:
            lib = command[2]
            archs = sorted(read_archive(lib))
            if len(archs) == 1:
                return f"Non-fat file: {lib} is architecture: {archs[0]}\n"
            return f"Architectures in the fat file: {lib} are: {' '.join(archs)}\n"
        return ""

    def _ar(self, command, cwd):
        if command[1] == "-x":
            archs = read_archive(os.path.join(cwd, command[2]))
            assert len(archs) == 1, "ar cannot extract a fat archive"
            (arch, members), = archs.items()
            for member in members:
                with open(os.path.join(cwd, member), "w") as f:
                    f.write(arch)
        elif command[1] == "crus":
            members = {}
            for obj in command[3:]:
                with open(os.path.join(cwd, obj)) as f:
                    members.setdefault(f.read(), []).append(os.path.basename(obj))
            assert len(members) == 1, "objects of several architectures"
            write_archive(os.path.join(cwd, command[2]), members)
        return ""

    def _svn(self, command, cwd):
        sub = command[1]
        if sub == "st":
            if "--no-ignore" in command:
                return "".join(f"?       {p}\n" for p in self.untracked)
            return "".join(f"M       {p}\n" for p in self.modified if p == command[-1])
        if sub == "ls":
            return SVN_RELEASES
        if sub == "co":
            make_boost_checkout(command[3])
        if sub == "info":
            return (
                f"Path: {command[2]}\n"
                f"URL: {self.config.repository}Boost_1_52_0\n"
                "Revision: 81000\n"
            )
        return ""

    def _git(self, command, cwd):
        sub = command[1]
        if sub == "status":
            name = command[-1]
            path = os.path.normpath(os.path.join(cwd, name))
            if path in {os.path.normpath(p) for p in self.modified}:
                return f" M {name}\n"
            if os.path.exists(path) and path not in self.tracked:
                return f"?? {name}\n"
            return ""
        if sub == "ls-remote":
            return GIT_TAGS
        if sub == "clone":
            make_boost_checkout(command[-1])
        if sub == "describe":
            return "boost-1.52.0\n"
        return ""

    def _bootstrap_sh(self, command, cwd):
        return ""

    def _bjam(self, command, cwd):
        platform = DEVICE if "architecture=arm" in command else SIMULATOR
        for library in self.config.libraries:
            if (library, platform.name) in self.skip_archives:
                continue
            members = self.objects.get(library, [f"{library}.o"])
            write_archive(
                self.paths.staged_archive(library, platform),
                {arch: list(members) for arch in platform.archs},
            )
        if "install" in command:
            headers = self.paths.prefix_headers
            os.makedirs(os.path.join(headers, "thread"), exist_ok=True)
            with open(os.path.join(headers, "version.hpp"), "w") as f:
                f.write('#define BOOST_LIB_VERSION "1_52"\n')
            with open(os.path.join(headers, "thread", "thread.hpp"), "w") as f:
                f.write("// thread\n")
        return ""


def make_boost_checkout(boost_src):
    os.makedirs(os.path.join(boost_src, "tools", "build", "v2"), exist_ok=True)
    with open(os.path.join(boost_src, "bootstrap.sh"), "w") as f:
        f.write("#!/bin/sh\n")
    with open(os.path.join(boost_src, "tools", "build", "v2", "user-config.jam"), "w") as f:
        f.write("# Boost.Build user configuration\n")


def make_simulator_sdk(xcode_root, sdk_version="6.0"):
    include = os.path.join(
        xcode_root, "Platforms", "iPhoneSimulator.platform", "Developer", "SDKs",
        f"iPhoneSimulator{sdk_version}.sdk", "usr", "include",
    )
    os.makedirs(include, exist_ok=True)
    for header in ("crt_externs.h", "bzlib.h"):
        with open(os.path.join(include, header), "w") as f:
            f.write(f"/* {header} */\n")
    return include


@pytest.fixture
def project_env(tmp_path):
    """Environment of a project rooted at tmp_path with a fake Xcode."""
    xcode_root = str(tmp_path / "Xcode")
    make_simulator_sdk(xcode_root)
    return {"XCODE_ROOT": xcode_root, "BOOST_LIBS": "thread system"}


@pytest.fixture
def config(tmp_path, project_env):
    return load_config(str(tmp_path), env=project_env)


@pytest.fixture
def paths(config):
    return BuildPaths(config)


@pytest.fixture
def fake_runner(config):
    return FakeRunner(config)


@pytest.fixture
def staged_archives(config, fake_runner):
    """Boost checkout with bjam output for both platforms already in place."""
    make_boost_checkout(config.boost_src)
    fake_runner.run(["./bjam", "architecture=arm", "install"])
    fake_runner.run(["./bjam", "architecture=x86", "stage"])
    fake_runner.calls.clear()
    return fake_runner
