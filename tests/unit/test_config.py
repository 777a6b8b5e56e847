"""
Unit tests for the configuration model.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import dataclasses
from types import MappingProxyType

import pytest

from singularity_driver.core.config import (
    DEFAULT_MEMORY_RESERVATION,
    ContainerSpec,
    HostConfig,
)


class TestHostConfig:
    """Test HostConfig defaults."""

    def test_defaults(self):
        host_config = HostConfig()

        assert host_config.cpu_shares is None
        assert host_config.cpus == 1
        assert host_config.memory is None
        assert host_config.memory_reservation == 2 * 1024 ** 3
        assert host_config.memory_reservation == DEFAULT_MEMORY_RESERVATION
        assert host_config.binds is None
        assert host_config.contain_all is True

    def test_binds_stored_as_tuple(self):
        host_config = HostConfig(binds=[["/data", "/mnt/data"], ("/tmp", "/tmp")])

        assert host_config.binds == (("/data", "/mnt/data"), ("/tmp", "/tmp"))

    def test_frozen(self):
        host_config = HostConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            host_config.cpus = 4


class TestContainerSpecBuilder:
    """Test the ContainerSpec builder steps."""

    def test_empty_spec(self):
        spec = ContainerSpec()

        assert spec.image == ""
        assert spec.program == ""
        assert spec.args == ()
        assert spec.env == {}
        assert spec.work_dir is None
        assert spec.attach_stdout is False
        assert spec.attach_stderr is False
        assert spec.host_config is None

    def test_chained_configuration(self):
        host_config = HostConfig(cpus=2)
        spec = (
            ContainerSpec()
            .with_image("ubuntu:latest")
            .with_program("python")
            .arg("-c")
            .with_args(["print(1)", "--flag"])
            .with_work_dir("/work")
            .with_attach_stdout()
            .with_attach_stderr()
            .with_host_config(host_config)
        )

        assert spec.image == "ubuntu:latest"
        assert spec.program == "python"
        assert spec.args == ("-c", "print(1)", "--flag")
        assert spec.work_dir == "/work"
        assert spec.attach_stdout is True
        assert spec.attach_stderr is True
        assert spec.host_config is host_config

    def test_steps_do_not_mutate_receiver(self):
        base = ContainerSpec().with_image("alpine").with_env("A", "1")

        derived = base.with_env("B", "2").arg("x").with_program("ls")

        assert base.env == {"A": "1"}
        assert base.args == ()
        assert base.program == ""
        assert derived.env == {"A": "1", "B": "2"}

    def test_env_overwrite_keeps_first_position(self):
        spec = ContainerSpec().with_env("a", "1").with_env("b", "2").with_env("a", "3")

        assert list(spec.env.items()) == [("a", "3"), ("b", "2")]

    def test_envs_accepts_mapping_and_pairs(self):
        spec = (
            ContainerSpec()
            .with_env("a", "1")
            .with_envs({"b": "2", "a": "4"})
            .with_envs([("c", "3"), ("b", "5")])
        )

        assert list(spec.env.items()) == [("a", "4"), ("b", "5"), ("c", "3")]

    def test_builder_accepts_empty_values(self):
        # validation happens at translation time, not here
        spec = ContainerSpec().with_image("").with_program("")

        assert spec.image == ""
        assert spec.program == ""

    def test_derived_specs_do_not_share_env(self):
        base = ContainerSpec().with_env("A", "1")
        derived = base.with_image("img").with_program("ls").arg("-l")

        assert isinstance(derived.env, MappingProxyType)
        with pytest.raises(TypeError):
            derived.env["A"] = "changed"
        assert base.env["A"] == "1"
        assert derived.with_env("A", "2").env["A"] == "2"
        assert base.env["A"] == "1"

    def test_constructor_copies_env(self):
        env = {"A": "1"}
        spec = ContainerSpec(env=env)

        env["A"] = "2"
        env["B"] = "3"

        assert dict(spec.env) == {"A": "1"}

    def test_constructor_accepts_list_args(self):
        args = ["x"]
        spec = ContainerSpec(image="i", program="p", args=args).arg("y")

        args.append("z")

        assert spec.args == ("x", "y")

    def test_with_args_string_is_split_into_characters(self):
        spec = ContainerSpec().with_args("ab")

        assert spec.args == ("a", "b")
