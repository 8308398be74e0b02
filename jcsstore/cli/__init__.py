"""
jcsstore/cli/__init__.py

jcsstore CLI — root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    jcsstore = "jcsstore.cli:cli"

Adding a new command:
    1. Create jcsstore/cli/your_command.py with a @click.command()
    2. Import it here
    3. cli.add_command(your_command)
"""

import click

from jcsstore.cli.get import get_command
from jcsstore.cli.put import put_command
from jcsstore.cli.verify import verify_command


@click.group()
@click.version_option(package_name="jcsstore")
def cli() -> None:
    """
    jcsstore — content-addressed store for canonical JSON.

    \b
    Commands:
      put       Store a JSON document, print its address.
      get       Print a document after verifying its address.
      verify    Check every entry in a store.
    """
    pass


cli.add_command(put_command)
cli.add_command(get_command)
cli.add_command(verify_command)
