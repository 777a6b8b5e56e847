"""
Unit tests for the Singularity command translator.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import pytest

from singularity_driver.core.config import ContainerSpec, HostConfig
from singularity_driver.core.errors import ConfigurationError
from singularity_driver.core.translator import (
    build_exec_args,
    build_pull_args,
    format_command,
    resolve_binds,
    validate_host_config,
)


def _minimal_spec(**host_config):
    spec = ContainerSpec().with_image("img.sif").with_program("true")
    if host_config:
        spec = spec.with_host_config(HostConfig(**host_config))
    return spec


class TestBuildPullArgs:
    """Test pull argument construction."""

    def test_pull_args_verbatim(self):
        assert build_pull_args("docker://ubuntu:latest", "/images/ubuntu.sif") == [
            "pull",
            "/images/ubuntu.sif",
            "docker://ubuntu:latest",
        ]

    def test_pull_args_keep_spaces_in_one_element(self):
        args = build_pull_args("library://a b", "/my images/x.sif")

        assert args == ["pull", "/my images/x.sif", "library://a b"]


class TestBuildExecArgs:
    """Test exec argument construction and ordering."""

    def test_default_host_config_scenario(self, ubuntu_spec):
        argv = build_exec_args(ubuntu_spec)

        assert argv == [
            "exec",
            "--cpus=1",
            "--memory-reservation=2147483648",
            "--containall",
            "ubuntu:latest",
            "echo",
            "hi",
        ]
        assert argv.index("--cpus=1") < argv.index("--memory-reservation=2147483648")
        assert argv.index("--memory-reservation=2147483648") < argv.index("--containall")

    def test_no_host_config_emits_no_policy_flags(self):
        argv = build_exec_args(_minimal_spec())

        assert argv == ["exec", "img.sif", "true"]

    def test_flag_omission(self):
        argv = build_exec_args(
            _minimal_spec(cpus=None, memory_reservation=None, contain_all=False)
        )

        assert argv == ["exec", "img.sif", "true"]

    def test_all_resource_flags_in_order(self):
        argv = build_exec_args(
            _minimal_spec(cpu_shares=512, cpus=4, memory=1024, memory_reservation=512)
        )

        assert argv[1:5] == [
            "--cpu-shares=512",
            "--cpus=4",
            "--memory=1024",
            "--memory-reservation=512",
        ]

    def test_full_emission_order(self):
        spec = (
            ContainerSpec()
            .with_image("ubuntu:latest")
            .with_program("sh")
            .with_args(["-c", "echo $FOO"])
            .with_env("FOO", "bar baz")
            .with_work_dir("/work dir")
            .with_host_config(HostConfig(binds=[("/host", "/container")], memory=100))
        )

        argv = build_exec_args(spec, extra_args=["--nv", "--cleanenv"])

        assert argv == [
            "exec",
            "--bind=/host:/container",
            "--cpus=1",
            "--memory=100",
            "--memory-reservation=2147483648",
            "--env=FOO=bar baz",
            "--workdir=/work dir",
            "--containall",
            "--nv",
            "--cleanenv",
            "ubuntu:latest",
            "sh",
            "-c",
            "echo $FOO",
        ]

    def test_env_order_preserved_after_overwrite(self):
        spec = (
            _minimal_spec()
            .with_envs([("a", "1"), ("b", "2")])
            .with_env("a", "3")
        )

        env_flags = [arg for arg in build_exec_args(spec) if arg.startswith("--env=")]

        assert env_flags == ["--env=a=3", "--env=b=2"]

    def test_host_config_binds_take_precedence(self):
        spec = _minimal_spec(binds=[("h1", "c1")])

        argv = build_exec_args(spec, binds=[("h2", "c2")])

        assert "--bind=h1:c1" in argv
        assert "--bind=h2:c2" not in argv

    def test_caller_binds_used_without_host_config_binds(self):
        spec = _minimal_spec(cpus=2)

        argv = build_exec_args(spec, binds=[("h2", "c2"), ("h3", "c3")])

        assert [a for a in argv if a.startswith("--bind=")] == [
            "--bind=h2:c2",
            "--bind=h3:c3",
        ]

    def test_caller_binds_used_without_host_config(self):
        argv = build_exec_args(_minimal_spec(), binds=[("h2", "c2")])

        assert argv == ["exec", "--bind=h2:c2", "img.sif", "true"]

    def test_empty_host_config_binds_suppress_caller_binds(self):
        argv = build_exec_args(_minimal_spec(binds=[]), binds=[("h2", "c2")])

        assert not any(a.startswith("--bind") for a in argv)

    def test_binds_and_containall_co_occur(self):
        argv = build_exec_args(_minimal_spec(binds=[("/data", "/data")]))

        assert "--bind=/data:/data" in argv
        assert "--containall" in argv

    def test_positional_invariant(self):
        spec = (
            ContainerSpec()
            .with_image("ubuntu:latest")
            .with_program("ls")
            .with_args(["-la", "--color=never"])
            .with_env("X", "1")
            .with_work_dir("/")
            .with_host_config(HostConfig(cpu_shares=2, binds=[("/a", "/b")]))
        )

        argv = build_exec_args(spec, extra_args=["--writable-tmpfs"])
        image_index = argv.index("ubuntu:latest")

        assert argv[image_index + 1] == "ls"
        assert all(arg.startswith("--") for arg in argv[1:image_index])
        assert argv[image_index + 2:] == ["-la", "--color=never"]

    def test_metacharacters_stay_in_single_element(self):
        spec = (
            _minimal_spec()
            .with_env("CMD", "a; rm -rf / && echo 'x'")
            .with_args(["$(whoami)", "two words"])
        )

        argv = build_exec_args(spec)

        assert "--env=CMD=a; rm -rf / && echo 'x'" in argv
        assert argv[-2:] == ["$(whoami)", "two words"]

    def test_deterministic(self, ubuntu_spec):
        assert build_exec_args(ubuntu_spec) == build_exec_args(ubuntu_spec)

    @pytest.mark.parametrize("field", ["image", "program"])
    def test_missing_image_or_program_raises(self, field):
        spec = ContainerSpec().with_image("img").with_program("prog")
        spec = spec.with_image("") if field == "image" else spec.with_program("")

        with pytest.raises(ConfigurationError, match=field):
            build_exec_args(spec)

    @pytest.mark.parametrize("field", ["cpu_shares", "cpus", "memory", "memory_reservation"])
    @pytest.mark.parametrize("value", [0, -1, True, 1.5])
    def test_invalid_numeric_limits_raise(self, field, value):
        with pytest.raises(ConfigurationError, match=field):
            build_exec_args(_minimal_spec(**{field: value}))

    def test_empty_bind_path_raises(self):
        with pytest.raises(ConfigurationError, match="bind"):
            build_exec_args(_minimal_spec(), binds=[("", "/c")])


class TestHelpers:
    """Test translator helpers."""

    def test_resolve_binds_none_host_config(self):
        assert resolve_binds(None, [("a", "b")]) == [("a", "b")]

    def test_validate_host_config_defaults_ok(self):
        validate_host_config(HostConfig())

    def test_format_command_quotes_arguments(self):
        assert (
            format_command("singularity", ["exec", "--env=A=b c", "img"])
            == "singularity exec '--env=A=b c' img"
        )
