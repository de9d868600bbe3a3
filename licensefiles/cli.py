"""CLI entry point: license-files.

Subcommands:
    license-files collect SRC TODIR                 # copy licenses + write manifest.xml
    license-files collect SRC TODIR --max-depth 2 --config licenses.toml
    license-files externals SRC [--json]            # show parsed svn:externals
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from licensefiles.collector import LicenseCollector, load_declarations
from licensefiles.config import build_settings
from licensefiles.core.logging import setup_logging
from licensefiles.exceptions import LicenseFilesError

_path = click.Path(path_type=Path)
_existing_file = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Collect third-party license files declared through svn:externals."""
    try:
        setup_logging("DEBUG" if verbose else None)
    except LicenseFilesError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.argument("src", type=_path)
@click.argument("to_dir", metavar="TODIR", type=_path)
@click.option("--max-depth", type=int, default=None, help="Search depth per external (default: 1)")
@click.option(
    "-c", "--config", "config_files", multiple=True, type=_existing_file,
    help="TOML config file (repeatable)",
)
@click.option("--externals-file", type=_existing_file, default=None,
              help="Read svn:externals text from a file instead of running svn")
@click.option("--xsl", default=None, help="Stylesheet referenced from manifest.xml")
@click.option("--format", "fmt", type=click.Choice(["xml", "json"]), default=None,
              help="Manifest format (default: xml)")
@click.option("--matcher", default=None, help="License matcher name (default: filename)")
def collect(
    src: Path,
    to_dir: Path,
    max_depth: int | None,
    config_files: tuple[Path, ...],
    externals_file: Path | None,
    xsl: str | None,
    fmt: str | None,
    matcher: str | None,
) -> None:
    """Copy license files of every external in SRC into TODIR and write a manifest."""
    try:
        settings = build_settings(
            src,
            to_dir,
            config_files,
            max_depth=max_depth,
            externals_file=externals_file,
            xsl=xsl,
            format=fmt,
            matcher=matcher,
        )
        manifest = LicenseCollector(settings).run()
    except LicenseFilesError as e:
        raise click.ClickException(str(e)) from e

    click.echo(manifest.render())
    if manifest.collisions:
        for dest, sources in sorted(manifest.collisions.items()):
            click.echo(
                f"warning: {dest} written by {len(sources)} files, last one kept", err=True
            )
    for item in manifest.rejected:
        click.echo(
            f"warning: {item.source_file} not copied, unsafe destination {item.destination_filename!r}",
            err=True,
        )
    click.echo(f"Manifest written to {settings.manifest_path}")


@main.command()
@click.argument("src", type=_path)
@click.option("--externals-file", type=_existing_file, default=None,
              help="Read svn:externals text from a file instead of running svn")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def externals(src: Path, externals_file: Path | None, as_json: bool) -> None:
    """List the externals of SRC with the versions extracted from them."""
    try:
        declarations = load_declarations(src, externals_file)
    except LicenseFilesError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        rows = [{"name": d.name, "version": d.version} for d in declarations]
        click.echo(json.dumps(rows, indent=2))
        return

    if not declarations:
        click.echo("No externals found.")
        return
    for d in declarations:
        click.echo(f"{d.name}  {d.version}")


if __name__ == "__main__":
    main()
