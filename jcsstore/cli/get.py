"""
jcsstore get — print a stored document after verifying its address.

Exit codes:
    0  Document found and verified
    1  Integrity failure (content does not match address)
    2  Not found, unparsable, or filesystem error
"""

import json

import click

from jcsstore.cli.common import (
    EXIT_INVALID,
    config_option,
    fail,
    load_config,
    open_store,
    root_option,
)
from jcsstore.core.exceptions import (
    FilesystemError,
    IntegrityError,
    NotFoundError,
    ParseError,
)


@click.command(name="get")
@click.argument("address")
@click.option(
    "--raw",
    is_flag=True,
    default=False,
    help="Print the stored canonical bytes instead of pretty JSON.",
)
@root_option
@config_option
def get_command(address, raw, root, config_file) -> None:
    """Print the document stored at ADDRESS."""
    config = load_config(root, config_file)
    store  = open_store(config)

    try:
        entry = store.get_raw(address)
        value = entry.to_value()
    except IntegrityError as exc:
        fail(str(exc), EXIT_INVALID)
    except (NotFoundError, ParseError, FilesystemError) as exc:
        fail(str(exc))

    if raw:
        click.echo(entry.json_text)
    else:
        click.echo(json.dumps(value, indent=2, ensure_ascii=False))
