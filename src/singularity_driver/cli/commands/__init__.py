#!/usr/bin/env python3
"""
CLI Commands Package for singularity-driver

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .pull import pull
from .run import run
from .version import version

__all__ = ["pull", "run", "version"]
