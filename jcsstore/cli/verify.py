"""
jcsstore verify — integrity sweep over a whole store.

Every entry is re-hashed, parsed, and checked for canonical form.
Nothing is repaired or removed.

Exit codes:
    0  Store fully valid
    1  Store has violations
    2  Error (bad config, path conflict, filesystem error)
"""

import json
import sys

import click

from jcsstore.cli.common import (
    EXIT_INVALID,
    EXIT_OK,
    config_option,
    fail,
    load_config,
    open_store,
    root_option,
)
from jcsstore.core.exceptions import FilesystemError


@click.command(name="verify")
@click.option(
    "--format", "fmt",
    type=click.Choice(["human", "json"], case_sensitive=False),
    default="human",
    show_default=True,
    help="Output format: human (default) or json (CI/automation).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress all output. Use exit code only (0=valid, 1=invalid, 2=error).",
)
@root_option
@config_option
def verify_command(fmt, quiet, root, config_file) -> None:
    """
    Verify every entry in the store.

    \b
    Examples:
      jcsstore verify --root ./store
      jcsstore verify --format json
      jcsstore verify --quiet && echo "clean"
    """
    config = load_config(root, config_file)
    store  = open_store(config)

    try:
        summary = store.verify()
    except FilesystemError as exc:
        fail(str(exc))

    code = EXIT_OK if summary.is_valid else EXIT_INVALID

    if quiet:
        sys.exit(code)

    if fmt == "json":
        click.echo(json.dumps({"jcsstore_verify": summary.to_dict()}, indent=2))
        sys.exit(code)

    click.echo(f"Store     {summary.root}")
    click.echo(f"Entries   {summary.total_entries:,}")
    click.echo(f"Valid     {summary.valid_entries:,}")
    for v in summary.violations:
        click.echo(f"  {v.violation_type:<14} {v.address}  {v.detail}")
    if summary.is_valid:
        click.echo("VALID  ·  0 violations")
    else:
        click.echo(f"INVALID  ·  {len(summary.violations)} violation(s)")
    sys.exit(code)
