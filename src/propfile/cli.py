"""CLI entry point for inspecting and editing .properties files."""

import logging
from pathlib import Path

import click

from . import __version__
from .config import MissingKeyAction, Options, UTF_8
from .core import PropertyFile
from .diff import DiffDetector, ChangeType
from .entry import PropertyEntry


@click.group()
@click.version_option(version=__version__)
@click.option('--encoding', '-e', default=UTF_8, help='Character encoding of the files')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx: click.Context, encoding: str, verbose: bool):
    """Format-preserving editing of .properties files."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = Options(encoding=encoding)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def show(options: Options, file: Path):
    """Show the entries of a .properties file.

    FILE is the path to the .properties file to parse.
    """
    document = PropertyFile.from_file(file, options)

    if not document.entries_size():
        click.secho("No entries found.", fg='yellow')
        return

    click.echo(
        f"Entries ({document.entries_size()} total, "
        f"{document.properties_size()} properties):\n"
    )

    for entry in document:
        if isinstance(entry, PropertyEntry):
            click.echo(f"{entry.key} = {entry.value!r}")
        else:
            click.secho(entry.text.rstrip("\r\n"), dim=True)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('key')
@click.pass_obj
def get(options: Options, file: Path, key: str):
    """Print the value of KEY."""
    value = PropertyFile.from_file(file, options).get(key)
    if value is None:
        click.secho(f"Key not found: {key}", fg='red', err=True)
        raise SystemExit(1)
    click.echo(value)


@cli.command(name='set')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('key')
@click.argument('value')
@click.pass_obj
def set_(options: Options, file: Path, key: str, value: str):
    """Set KEY to VALUE, keeping the rest of the file unchanged."""
    document = PropertyFile.from_file(file, options)
    existed = document.contains_key(key)
    document.set_value(key, value)
    document.save_to(file, options)

    if existed:
        click.secho(f"  ~ {key}", fg='yellow')
    else:
        click.secho(f"  + {key}", fg='green')


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('key')
@click.pass_obj
def remove(options: Options, file: Path, key: str):
    """Remove every occurrence of KEY."""
    document = PropertyFile.from_file(file, options)
    if not document.contains_key(key):
        click.secho(f"Key not found: {key}", fg='yellow')
        return

    occurrences = len(document.get_property_entries(key))
    document.remove(key)
    document.save_to(file, options)
    click.secho(f"  - {key} ({occurrences} occurrence(s))", fg='red')


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def keys(options: Options, file: Path):
    """List the keys of a .properties file in document order."""
    for key in PropertyFile.from_file(file, options).keys():
        click.echo(key)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def check(options: Options, file: Path):
    """Check that FILE is reproduced byte for byte after parsing."""
    original = file.read_bytes()
    written = PropertyFile.from_bytes(original, options).to_bytes(options)

    if written == original:
        click.secho("Round-trip OK.", fg='green')
        return

    mismatch = next(
        (i for i, (a, b) in enumerate(zip(original, written)) if a != b),
        min(len(original), len(written))
    )
    click.secho(f"Round-trip differs at byte {mismatch}.", fg='red')
    raise SystemExit(1)


@cli.command()
@click.argument('file', type=click.Path(exists=True, path_type=Path))
@click.option('--base', default='HEAD~1', help='Base git reference to compare against')
@click.pass_obj
def diff(options: Options, file: Path, base: str):
    """Show changes in a .properties file compared to a git reference.

    FILE is the path to the .properties file to analyze.
    """
    detector = DiffDetector(options=options)
    changes = detector.detect_changes_from_working_tree(file, base_ref=base)

    if not changes:
        click.secho("No changes detected.", fg='yellow')
        return

    click.echo(f"Changes detected ({len(changes)} total):\n")

    added = [c for c in changes if c.change_type == ChangeType.ADDED]
    modified = [c for c in changes if c.change_type == ChangeType.MODIFIED]
    removed = [c for c in changes if c.change_type == ChangeType.REMOVED]

    if added:
        click.secho(f"Added ({len(added)}):", fg='green', bold=True)
        for change in added:
            click.echo(f"  + {change.key}")
            click.echo(f"    \"{change.new_value}\"")
        click.echo()

    if modified:
        click.secho(f"Modified ({len(modified)}):", fg='yellow', bold=True)
        for change in modified:
            click.echo(f"  ~ {change.key}")
            click.echo(f"    - \"{change.old_value}\"")
            click.echo(f"    + \"{change.new_value}\"")
        click.echo()

    if removed:
        click.secho(f"Removed ({len(removed)}):", fg='red', bold=True)
        for change in removed:
            click.echo(f"  - {change.key}")
            click.echo(f"    \"{change.old_value}\"")


@cli.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('target', type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    '--missing',
    type=click.Choice([a.value for a in MissingKeyAction]),
    default=MissingKeyAction.NOTHING.value,
    help='What to do with keys that only exist in TARGET'
)
@click.pass_obj
def update(options: Options, source: Path, target: Path, missing: str):
    """Write the values of SOURCE into TARGET, keeping TARGET's formatting."""
    options = options.with_(missing_key_action=MissingKeyAction(missing))
    document = PropertyFile.from_file(source, options)
    result = document.update(target, options)

    click.echo(f"Updated {target}: {result.properties_size()} properties")


if __name__ == '__main__':
    cli()
