"""
Tests for toolchain PATH setup and discovery.
"""

import os

import pytest

from pibuild.config import BuildConfig
from pibuild.toolchain import REQUIRED_TOOLS, ToolchainError, build_environment, check_tools


class TestBuildEnvironment:
    def test_unchanged_without_dirs(self):
        config = BuildConfig.create()
        env = build_environment(config, {"PATH": "/usr/bin", "HOME": "/root"})
        assert env == {"PATH": "/usr/bin", "HOME": "/root"}

    def test_prepend_order(self):
        config = BuildConfig.create(arm_eabi_bin="/opt/arm/bin", aarch64_bin="/opt/a64/bin")
        env = build_environment(config, {"PATH": "/usr/bin"})
        assert env["PATH"].split(os.pathsep) == ["/opt/a64/bin", "/opt/arm/bin", "/usr/bin"]

    def test_empty_path(self):
        config = BuildConfig.create(arm_eabi_bin="/opt/arm/bin")
        env = build_environment(config, {})
        assert env["PATH"] == "/opt/arm/bin"

    def test_base_env_not_modified(self):
        base = {"PATH": "/usr/bin"}
        build_environment(BuildConfig.create(aarch64_bin="/x"), base)
        assert base == {"PATH": "/usr/bin"}


class TestCheckTools:
    def test_all_found(self, tools_dir):
        found = check_tools({"PATH": str(tools_dir)})
        assert set(found) == set(REQUIRED_TOOLS)
        assert found["aarch64-none-elf-g++"] == str(tools_dir / "aarch64-none-elf-g++")

    def test_missing_tool(self, tools_dir):
        (tools_dir / "aarch64-none-elf-gcc").unlink()
        with pytest.raises(ToolchainError, match="aarch64-none-elf-gcc"):
            check_tools({"PATH": str(tools_dir)})

    def test_not_executable(self, tools_dir):
        (tools_dir / "arm-none-eabi-g++").chmod(0o644)
        with pytest.raises(ToolchainError, match="arm-none-eabi-g\\+\\+"):
            check_tools({"PATH": str(tools_dir)})

    def test_split_across_dirs(self, tmp_path, tools_dir):
        arm = tmp_path / "arm"
        arm.mkdir()
        for tool in ("arm-none-eabi-gcc", "arm-none-eabi-g++"):
            (tools_dir / tool).rename(arm / tool)

        config = BuildConfig.create(arm_eabi_bin=arm, aarch64_bin=tools_dir)
        env = build_environment(config, {"PATH": ""})
        assert len(check_tools(env)) == 4
