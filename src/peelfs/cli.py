"""Command line interface for peelfs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, NoReturn

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from peelfs.config import ConfigError, ConfigLoader, PeelConfig, parse_override
from peelfs.discovery import DirectoryScanner, EntryKind
from peelfs.filesystem import CapabilityCache, FilesystemCapability
from peelfs.logging_setup import configure_logging
from peelfs.unpacking import FormatSniffer, UnpackDriver
from peelfs.unpacking import FormatSniffer, UnpackDriver

console = Console()

_CAPABILITY_STYLES = {
    FilesystemCapability.RESTRICTED_NAMING: "yellow",
    FilesystemCapability.NOT_RESTRICTED: "green",
    FilesystemCapability.PROBE_FAILED: "red",
}


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON flows.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original

def _loader(ctx: click.Context) -> ConfigLoader:
    obj = ctx.find_root().ensure_object(dict)
    return ConfigLoader(obj.get("config_path"))


def _load_config(ctx: click.Context, *, json_output: bool = False) -> PeelConfig:
    """Load the effective configuration and configure logging from it."""
    overrides = ctx.find_root().ensure_object(dict).get("overrides", {})
    try:
        config = _loader(ctx).load(overrides)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)

    configure_logging(config.logging)
    return config


def _resolve_quiet(ctx: click.Context, quiet: bool, config: PeelConfig) -> bool:
    if ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE:
        return quiet
    return config.cli.quiet_default


def _collect_files(
    paths: Iterable[str], scanner: DirectoryScanner, pattern: str
) -> list[Path]:
    """Expand directories in `paths` into the files they directly contain."""
    files: list[Path] = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_dir():
            files.extend(scanner.scan(path, EntryKind.FILES, pattern))
        else:
            files.append(path)
    return files


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="peelfs")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to read instead of ~/.peelfs/config.yaml.",
)
@click.option(
    "-s",
    "--set",
    "overrides",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a configuration value, e.g. unpacking.chunk_size=4096 (repeatable).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, overrides: tuple[str, ...]) -> None:
    """peelfs unpacks nested zip/gzip files in place and probes filesystem naming limits."""
    obj = ctx.ensure_object(dict)
    obj["config_path"] = config_path
    try:
        obj["overrides"] = dict(parse_override(item) for item in overrides)
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="--set") from exc


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=str))
@click.option("--pattern", type=str, help="Glob applied to directory contents.")
@click.option("--json", "json_output", is_flag=True, help="Emit detected types as JSON.")
@click.pass_context
def sniff(
    ctx: click.Context, paths: tuple[str, ...], pattern: str | None, json_output: bool
) -> None:
    """Report the detected container format of each file in PATHS."""
    config = _load_config(ctx, json_output=json_output)
    scanner = DirectoryScanner(include_hidden=config.discovery.include_hidden)
    sniffer = FormatSniffer()
    files = _collect_files(paths, scanner, pattern or config.discovery.pattern)

    results = {str(path): sniffer.sniff(path).value for path in files}
    if json_output:
        console.print_json(data={"files": results})
        return

    table = Table("File", "Type")
    for name, file_type in results.items():
        table.add_row(name, file_type)
    console.print(table)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=str))
@click.option(
    "-m",
    "--member",
    "members",
    multiple=True,
    help="Zip member to extract (repeatable; defaults to configuration).",
)
@click.option("--pattern", type=str, help="Glob applied to directory contents.")
@click.option("--json", "json_output", is_flag=True, help="Emit unpack outcomes as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def unpack(
    ctx: click.Context,
    paths: tuple[str, ...],
    members: tuple[str, ...],
    pattern: str | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """Unpack each file in PATHS in place until no archive layer remains.

    Directories are expanded to the files they directly contain.
    """
    config = _load_config(ctx, json_output=json_output)
    quiet_enabled = _resolve_quiet(ctx, quiet, config)
    if json_output and quiet:
        raise click.ClickException("--json cannot be combined with --quiet.")

    scanner = DirectoryScanner(include_hidden=config.discovery.include_hidden)
    driver = UnpackDriver.from_settings(config.unpacking)
    candidates = list(members) if members else None
    files = _collect_files(paths, scanner, pattern or config.discovery.pattern)

    outcomes: dict[str, dict[str, Any]] = {}
    for path in files:
        outcome = driver.unpack(path, candidates)
        outcomes[str(path)] = {"unpacked": outcome.succeeded, "type": outcome.file_type.value}

    unpacked_count = sum(1 for item in outcomes.values() if item["unpacked"])
    if json_output:
        console.print_json(
            data={"files": outcomes, "counts": {"files": len(outcomes), "unpacked": unpacked_count}}
        )
        return
    if quiet_enabled:
        return

    for name, item in outcomes.items():
        status = "[green]unpacked[/green]" if item["unpacked"] else "[dim]unchanged[/dim]"
        console.print(f"{name}: {status} ({item['type']})")
    console.print(
        f"[green]unpack summary: files={len(outcomes)}, unpacked={unpacked_count}.[/green]"
    )


@cli.command()
@click.argument(
    "directories",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=str),
)
@click.option(
    "--provider",
    type=click.Choice(["auto", "probe", "restricted"]),
    help="Override the configured capability provider.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit capabilities as JSON.")
@click.pass_context
def probe(
    ctx: click.Context, directories: tuple[str, ...], provider: str | None, json_output: bool
) -> None:
    """Report whether each directory's filesystem restricts file names like FAT32."""
    config = _load_config(ctx, json_output=json_output)
    settings = config.filesystem
    if provider:
        settings = settings.model_copy(update={"capability_provider": provider})
    cache = CapabilityCache.from_settings(settings)

    results = {directory: cache.check(directory) for directory in directories}
    if json_output:
        console.print_json(data={"directories": {k: v.value for k, v in results.items()}})
        return

    table = Table("Directory", "Capability")
    for directory, capability in results.items():
        style = _CAPABILITY_STYLES[capability]
        table.add_row(directory, f"[{style}]{capability.value}[/{style}]")
    console.print(table)


@cli.group()
def config() -> None:
    """Inspect and initialise the peelfs configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.pass_context
def config_view(ctx: click.Context, no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    overrides = ctx.find_root().ensure_object(dict).get("overrides", {})
    try:
        effective = _loader(ctx).load(overrides, include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("init")
@click.pass_context
def config_init(ctx: click.Context) -> None:
    """Write a configuration file populated with default values."""
    loader = _loader(ctx)
    try:
        created = loader.write_defaults()
    except OSError as exc:
        raise click.ClickException(f"Cannot write {loader.path}: {exc}") from exc

    if created:
        console.print(f"[green]Wrote default configuration to {loader.path}.[/green]")
    else:
        console.print(f"[yellow]{loader.path} already exists; left unchanged.[/yellow]")


def main() -> None:
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
