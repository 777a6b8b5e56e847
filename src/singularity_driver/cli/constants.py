#!/usr/bin/env python3
"""
Constants and configuration for singularity-driver CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""


# Exit codes
class ExitCode:
    """Exit codes for CLI commands."""

    SUCCESS = 0
    FAILURE = 1
    PULL_FAILURE = 2
    RUN_FAILURE = 3
    INVALID_ARGS = 4
