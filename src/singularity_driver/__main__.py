"""Allow ``python -m singularity_driver``."""

from singularity_driver.cli import cli_main

cli_main()
