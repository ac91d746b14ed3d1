"""
vessel: CLI entrypoint.

Usage:
    vessel init
    vessel install
    vessel sources
    vessel verify --version 0.10.0
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from vessel import __version__
from vessel.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="vessel")
@click.option("--verbose", "-v", is_flag=True, help="Show progress messages.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--package-set",
    "package_set",
    type=click.Path(dir_okay=False),
    default=None,
    help="Package set file, relative to the project root (default: package-set.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    package_set: str | None,
) -> None:
    """Simple package management for Motoko."""
    ctx.ensure_object(dict)
    ctx.obj["package_set"] = Path(package_set) if package_set else None
    ctx.obj.setdefault("registry", None)
    ctx.obj.setdefault("settings", None)

    if debug:
        flag_level = "DEBUG"
    elif verbose:
        flag_level = "INFO"
    elif quiet:
        flag_level = "ERROR"
    else:
        flag_level = None

    setup_logging(
        level=resolve_level(flag_level),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
    )


def _fail(error: str) -> None:
    click.secho(f"❌ {error}", fg="red", err=True)
    sys.exit(1)


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create vessel.yml and package-set.yml in the current directory."""
    from vessel.core.use_cases.init import run_init

    result = run_init(settings=ctx.obj["settings"], registry=ctx.obj["registry"])
    if result.error:
        _fail(result.error)

    click.secho(f"✅ Created {result.manifest_path.name} and {result.package_set_path.name}",
                fg="green")
    if result.used_fallback:
        click.secho("⚠️  Could not reach the package set releases, pinned a known release",
                    fg="yellow")


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Re-download packages that are already cached.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, force: bool, as_json: bool) -> None:
    """Install the packages vessel.yml depends on."""
    from vessel.core.use_cases.install import run_install

    result = run_install(
        force=force,
        package_set=ctx.obj["package_set"],
        settings=ctx.obj["settings"],
        registry=ctx.obj["registry"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
    if result.error:
        _fail(result.error)

    for name, path in result.packages:
        click.echo(f"   • {name}  → {path}")


@cli.command("upgrade-set")
@click.argument("tag", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def upgrade_set(ctx: click.Context, tag: str | None, as_json: bool) -> None:
    """Print the upstream pin for the latest (or TAG) package set release."""
    from vessel.core.use_cases.upgrade_set import run_upgrade_set

    result = run_upgrade_set(tag, settings=ctx.obj["settings"], registry=ctx.obj["registry"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
    if result.error:
        _fail(result.error)

    click.echo(result.snippet, nl=False)


@cli.command()
@click.pass_context
def sources(ctx: click.Context) -> None:
    """Install packages and print the compiler flags that use them."""
    from vessel.core.use_cases.install import run_sources

    result = run_sources(
        package_set=ctx.obj["package_set"],
        settings=ctx.obj["settings"],
        registry=ctx.obj["registry"],
    )
    if result.error:
        _fail(result.error)

    click.echo(result.flags, nl=False)


@cli.command("bin")
@click.pass_context
def bin_(ctx: click.Context) -> None:
    """Install the compiler pinned in vessel.yml and print its directory."""
    from vessel.core.use_cases.toolchain import run_install_toolchain

    result = run_install_toolchain(
        package_set=ctx.obj["package_set"],
        settings=ctx.obj["settings"],
        registry=ctx.obj["registry"],
    )
    if result.error:
        _fail(result.error)

    click.echo(str(result.path), nl=False)


@cli.command()
@click.argument("package", required=False)
@click.option("--version", "version", default=None, help="Compiler version to verify with.")
@click.option("--moc", "moc", default=None, help="Path of the compiler binary to verify with.")
@click.option("--moc-args", "moc_args", default=None, help="Extra arguments for the compiler.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(
    ctx: click.Context,
    package: str | None,
    version: str | None,
    moc: str | None,
    moc_args: str | None,
    as_json: bool,
) -> None:
    """Verify PACKAGE, or every package in the package set, compiles."""
    from vessel.core.use_cases.verify import run_verify

    result = run_verify(
        package=package,
        version=version,
        moc=moc,
        moc_args=moc_args,
        package_set=ctx.obj["package_set"],
        settings=ctx.obj["settings"],
        registry=ctx.obj["registry"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
    if result.error:
        _fail(result.error)

    click.secho(f"✅ Verified {len(result.checked)} package(s)", fg="green", err=True)


if __name__ == "__main__":
    cli()
