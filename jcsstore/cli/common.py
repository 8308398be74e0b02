"""
Shared plumbing for jcsstore commands: config loading, logging, store open.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from jcsstore.core.config import StoreConfig
from jcsstore.core.exceptions import JcsStoreError
from jcsstore.store import Store


# Exit codes (shell-scriptable)
EXIT_OK        = 0
EXIT_INVALID   = 1
EXIT_ERROR     = 2


root_option = click.option(
    "--root",
    type=click.Path(file_okay=True, dir_okay=True),
    default=None,
    metavar="PATH",
    help="Store directory. Overrides JCSSTORE_ROOT and the config file.",
)

config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    metavar="FILE",
    help="YAML config file (root, fsync, log_level).",
)


def load_config(root: Optional[str], config_file: Optional[str]) -> StoreConfig:
    try:
        config = StoreConfig.load(Path(config_file) if config_file else None)
    except (OSError, ValueError) as exc:
        fail(f"Invalid config: {exc}")
    if root:
        config = replace(config, root=Path(root))
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


def open_store(config: StoreConfig) -> Store:
    try:
        return Store.from_config(config)
    except JcsStoreError as exc:
        fail(str(exc))


def fail(msg: str, code: int = EXIT_ERROR) -> None:
    """Print an error to stderr and exit. Never returns."""
    click.echo(f"error: {msg}", err=True)
    sys.exit(code)
