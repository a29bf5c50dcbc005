"""
kfxview - RAMView Project Command-Line Interface
================================================

This module implements the command-line tool for legacy RAMView projects.

Commands
--------
- **import**: Import a project into a Datapool and print the import report
- **lists**: Show the variable lists of a project
- **check**: Verify the checksums of .def and .ram files
- **stamp**: Recalculate and write the checksums of .def and .ram files

Usage Examples
--------------
Import the RAM lists of a project:
    $ kfxview import demo.def

Import the EEPROM lists as JSON:
    $ kfxview import demo.def --kind nvm --json

Show the lists of a project:
    $ kfxview lists demo.def

Verify checksums after editing:
    $ kfxview check demo.def settings.ram
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from kefex_legacy import __version__
from kefex_legacy.cli.errors import ExitCode, handle_cli_exception
from kefex_legacy.config import ImportConfig
from kefex_legacy.files.defproject import load_def_project
from kefex_legacy.files.inifile import ChecksummedIniFile
from kefex_legacy.imports.datapool import DatapoolKind
from kefex_legacy.imports.ramview import RamViewImporter
from kefex_legacy.variables.lists import ListKind


# =============================================================================
# Shared Context
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the verbosity and the import configuration.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: ImportConfig = ImportConfig.from_env()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Datapool Kind Parameter Type
# =============================================================================

class KindChoice(click.ParamType):
    """
    Click parameter type for the Datapool kind.

    Accepts: diag, nvm (case-insensitive)
    """
    name = "kind"

    KIND_MAP = {
        "diag": DatapoolKind.DIAG,
        "nvm": DatapoolKind.NVM,
    }

    def convert(self, value: str, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> DatapoolKind:
        """Convert string to DatapoolKind."""
        if isinstance(value, DatapoolKind):
            return value

        key = value.lower()
        if key not in self.KIND_MAP:
            self.fail(
                f"Invalid Datapool kind '{value}'. "
                f"Choose from: {', '.join(self.KIND_MAP.keys())}",
                param, ctx
            )
        return self.KIND_MAP[key]


KIND = KindChoice()


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="kfxview")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    RAMView project tool.

    Import legacy KEFEX RAMView projects (.def/.ram/.rec/.dat) into
    Datapools and maintain their file checksums.

    \b
    Commands:
      import    Import a project into a Datapool
      lists     Show the variable lists of a project
      check     Verify checksums of .def/.ram files
      stamp     Recalculate checksums of .def/.ram files

    \b
    Examples:
      kfxview import demo.def --kind nvm
      kfxview lists demo.def
      kfxview check demo.def settings.ram
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Import Command
# =============================================================================

@main.command("import")
@click.argument(
    "project",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-k", "--kind",
    type=KIND,
    default="diag",
    help="Datapool kind: diag (RAM lists) or nvm (EEPROM lists) (default: diag)",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the Datapool and the report as JSON",
)
@pass_context
def cmd_import(ctx: Context, project: Path, kind: DatapoolKind, as_json: bool) -> None:
    """
    Import a RAMView project into a Datapool.

    PROJECT is the .def file of the project. The .ram, .rec and .dat
    files are searched in the same directory.

    \b
    Examples:
      kfxview import demo.def
      kfxview import demo.def --kind nvm --json
    """
    try:
        datapool, report = RamViewImporter(ctx.config).import_project(project, kind)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Import")

    if as_json:
        click.echo(json.dumps({"datapool": datapool.to_dict(), "report": report}, indent=2))
        return

    version = ".".join(str(v) for v in datapool.version)
    click.echo(f"Datapool {datapool.name} ({datapool.kind.name}, version {version})")
    if datapool.kind == DatapoolKind.NVM:
        click.echo(f"  NVM size: {datapool.nvm_size} bytes")
    for datapool_list in datapool.lists:
        data_sets = ", ".join(data_set.name for data_set in datapool_list.data_sets)
        click.echo(f"  {datapool_list.name:<32} {len(datapool_list.elements):>4} elements"
                   f"  [{data_sets}]")

    if report:
        click.echo()
        click.echo("Import report:")
        for line in report:
            click.echo(f"  - {line}")


# =============================================================================
# Lists Command
# =============================================================================

@main.command("lists")
@click.argument(
    "project",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_lists(ctx: Context, project: Path) -> None:
    """
    Show the variable lists of a RAMView project.

    \b
    Example:
      kfxview lists demo.def

    \b
    Output format:
      Idx  Name                  Kind    Vars  Defaults  CRC
      0    Settings              RAM        12         2  No
    """
    try:
        loaded = load_def_project(project, ctx.config)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)

    click.echo(f"Device: {loaded.options.device_name}")
    click.echo(f"{'Idx':<4} {'Name':<32} {'Kind':<7} {'Vars':>5} {'Defaults':>9}  CRC")
    click.echo("-" * 66)
    for index, variable_list in enumerate(loaded.lists):
        kind = ListKind(variable_list.kind).name if variable_list.kind in (0, 1) else "?"
        crc = f"0x{variable_list.checksum_address:X}" if variable_list.checksummed else "No"
        click.echo(f"{index:<4} {variable_list.name:<32} {kind:<7} {len(variable_list):>5} "
                   f"{variable_list.num_defaults:>9}  {crc}")
    for warning in loaded.warnings:
        click.echo(f"Warning: {warning}", err=True)


# =============================================================================
# Check Command
# =============================================================================

@main.command("check")
@click.argument(
    "files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
)
@pass_context
def cmd_check(ctx: Context, files: tuple[Path, ...]) -> None:
    """
    Verify the checksums of .def and .ram files.

    Exits with a non-zero code if any checksum does not verify.

    \b
    Example:
      kfxview check demo.def settings.ram
    """
    failed = 0
    for path in files:
        try:
            ok = ChecksummedIniFile.from_file(path, ctx.config.text_encoding).check_checksum()
        except Exception as e:
            handle_cli_exception(e, verbose=ctx.verbose)
        click.echo(f"{'OK' if ok else 'FAIL':<5} {path}")
        if not ok:
            failed += 1

    if failed:
        click.echo(f"{failed} of {len(files)} files have an incorrect checksum", err=True)
        sys.exit(ExitCode.CHECK_FAILED)


# =============================================================================
# Stamp Command
# =============================================================================

@main.command("stamp")
@click.argument(
    "files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
)
@pass_context
def cmd_stamp(ctx: Context, files: tuple[Path, ...]) -> None:
    """
    Recalculate and write the checksums of .def and .ram files.

    Use this after editing project files manually. Comment lines are
    kept; blank lines are not.

    \b
    Example:
      kfxview stamp settings.ram
    """
    for path in files:
        try:
            ini = ChecksummedIniFile.from_file(path, ctx.config.text_encoding)
            ini.save()
        except Exception as e:
            handle_cli_exception(e, verbose=ctx.verbose)
        click.echo(f"Stamped {path}")


if __name__ == "__main__":
    main()
