"""
singularity-driver

Translate container configurations into Singularity command lines and run
them as external processes.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

__version__ = "0.1.0"
