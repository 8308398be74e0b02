"""
jcsstore put — store a JSON document, print its address.

Usage:
    jcsstore put doc.json
    echo '{"b":2,"a":1}' | jcsstore put
"""

import json

import click

from jcsstore.cli.common import config_option, fail, load_config, open_store, root_option
from jcsstore.core.exceptions import EncodingError, FilesystemError


@click.command(name="put")
@click.argument("source", type=click.File("rb"), default="-")
@root_option
@config_option
def put_command(source, root, config_file) -> None:
    """
    Store the JSON document in SOURCE (default: stdin).

    Prints the content address. Storing the same document twice is a no-op.
    """
    config = load_config(root, config_file)
    store  = open_store(config)

    try:
        value = json.loads(source.read().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        fail(f"Input is not JSON: {exc}")

    try:
        entry = store.put_value(value)
    except (EncodingError, FilesystemError) as exc:
        fail(str(exc))

    click.echo(entry.address)
