"""Command line interface for gamebox packages."""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import typer
from loguru import logger

from .config import AppConfig
from .config.inspector import check_config, explain_config
from .documentation import ConflictBehaviour
from .errors import GameboxError
from .identity import IdentifierKind
from .package import Gamebox
from .scanner import VolumeKind

_LOG_HANDLER_ID: int | None = None


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    log_level: str | None = None
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            if self.config_path.exists():
                logger.debug("Loading configuration from {}", self.config_path)
                result, exit_code, config = check_config(self.config_path)
                if config is None:
                    _log_config_error(result)
                    raise typer.Exit(exit_code)
                self._config = config
            else:
                logger.debug("No configuration at {}; using defaults", self.config_path)
                self._config = AppConfig()
            if self.log_level is None:
                _configure_logging(self._config.logging_level)
        return self._config


app = typer.Typer(help="Inspect and maintain gamebox packages")
config_app = typer.Typer(help="Validate and document configuration files")
app.add_typer(config_app, name="config")
launchers_app = typer.Typer(help="Manage launcher shortcuts")
app.add_typer(launchers_app, name="launchers")
docs_app = typer.Typer(help="Manage the documentation folder")
app.add_typer(docs_app, name="docs")


def _default_config_path() -> Path:
    return Path(typer.get_app_dir("gamebox")) / "config.toml"


def _normalize_format(value: str) -> str:
    return value.lower()


def _configure_logging(level: str) -> None:
    global _LOG_HANDLER_ID
    if _LOG_HANDLER_ID is None:
        # drop loguru's default sink, leave any others alone
        with suppress(ValueError):
            logger.remove(0)
    else:
        logger.remove(_LOG_HANDLER_ID)
    _LOG_HANDLER_ID = logger.add(sys.stderr, level=level.upper(), format="{level: <8} | {message}")


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - defensive guard
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _log_config_error(result: dict[str, Any]) -> None:
    error: dict[str, Any] = result["error"]
    logger.error(
        "Configuration error ({}) for {}: {}",
        error["type"],
        result["config_path"],
        error["message"],
    )
    for detail in error.get("details", []):
        location = detail["loc"] or "<root>"
        logger.error("  - {}: {} ({})", location, detail["message"], detail["type"])


def _open_gamebox(ctx: typer.Context, path: Path) -> Gamebox:
    state = _get_state(ctx)
    config = state.ensure_config()
    try:
        return Gamebox.open(path, config=config)
    except (FileNotFoundError, NotADirectoryError) as exc:
        logger.error("{}", exc)
        raise typer.Exit(2) from exc


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except GameboxError as exc:
        logger.error("{} error ({}): {}", exc.domain, exc.code.value, exc)
        _exit(1)


def _relative(gamebox: Gamebox, path: Path) -> str:
    try:
        return path.relative_to(gamebox.path).as_posix()
    except ValueError:
        resolved_root = gamebox.path.resolve()
        if path.is_relative_to(resolved_root):
            return path.relative_to(resolved_root).as_posix()
        return str(path)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file (defaults apply when it does not exist)",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level",
    ),
) -> None:
    """Initialise CLI state."""

    _configure_logging(log_level or "INFO")
    ctx.obj = CLIState(config_path=config.expanduser().resolve(), log_level=log_level)

    if ctx.invoked_subcommand is None:
        logger.warning("No command provided. Try 'gamebox info PATH'.")
        _exit(0)


@app.command(help="Summarise a gamebox")
def info(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text", "--format", case_sensitive=False, callback=_normalize_format, help="Output format"
    ),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        identifier = gamebox.identifier
        gamebox.save()
        target = gamebox.target_path
        default = gamebox.launchers.default_launcher
        payload = {
            "name": gamebox.name,
            "path": str(gamebox.path),
            "identifier": identifier.value,
            "identifier_kind": identifier.kind.value,
            "target_program": _relative(gamebox, target) if target else None,
            "close_on_exit": gamebox.close_on_exit,
            "configuration_file": str(gamebox.configuration_file) if gamebox.configuration_file else None,
            "executables": len(gamebox.executables),
            "volumes": {kind.value: len(gamebox.resources.volumes(kind)) for kind in VolumeKind},
            "launchers": len(gamebox.launchers),
            "default_launcher": default.title if default else None,
            "has_documentation_folder": gamebox.documentation.has_folder,
        }

    if format == "json":
        _emit_json(payload)
        return
    for key, value in payload.items():
        typer.echo(f"{key}: {value}")


@app.command(help="List executables, volumes and documentation found in a gamebox")
def scan(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text", "--format", case_sensitive=False, callback=_normalize_format, help="Output format"
    ),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    result = gamebox.scan
    payload = {
        "executables": [_relative(gamebox, p) for p in result.resources.executables],
        "hdd_volumes": [_relative(gamebox, p) for p in result.resources.hdd_volumes],
        "cd_volumes": [_relative(gamebox, p) for p in result.resources.cd_volumes],
        "floppy_volumes": [_relative(gamebox, p) for p in result.resources.floppy_volumes],
        "documentation": [_relative(gamebox, p) for p in result.documentation],
    }
    if result.skipped:
        logger.warning("{} entries could not be read during the scan", len(result.skipped))

    if format == "json":
        _emit_json(payload)
        return
    for section, entries in payload.items():
        typer.echo(f"{section} ({len(entries)}):")
        for entry in entries:
            typer.echo(f"  {entry}")


@app.command(help="Show or assign the gamebox identifier")
def identifier(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    set_value: str | None = typer.Option(None, "--set", help="Assign an explicit identifier"),
    kind: IdentifierKind = typer.Option(
        IdentifierKind.USER_SPECIFIED,
        "--kind",
        help="Kind of an assigned identifier (user-specified or reverse-dns)",
    ),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        if set_value is not None:
            resolved = gamebox.set_identifier(set_value, kind)
        else:
            resolved = gamebox.identifier
        gamebox.save()
    typer.echo(f"{resolved.value} ({resolved.kind.value})")


@app.command(help="Show or change the target program")
def target(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    set_value: Path | None = typer.Option(None, "--set", help="Program path (relative to the gamebox or absolute)"),
    clear: bool = typer.Option(False, "--clear", help="Remove the target program"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        if clear:
            gamebox.set_target_path(None)
        elif set_value is not None:
            gamebox.set_target_path(set_value)
        gamebox.save()

    current = gamebox.target_path
    typer.echo(_relative(gamebox, current) if current else "(none)")


@launchers_app.command("list", help="List launchers in display order")
def launchers_list(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text", "--format", case_sensitive=False, callback=_normalize_format, help="Output format"
    ),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    registry = gamebox.launchers

    if format == "json":
        _emit_json([launcher.model_dump() for launcher in registry])
        return
    if not len(registry):
        typer.echo("(no launchers)")
    for index, launcher in enumerate(registry):
        marker = "*" if launcher.is_default else " "
        arguments = f" {launcher.arguments}" if launcher.arguments else ""
        typer.echo(f"{marker} {index}: {launcher.title} -> {launcher.path}{arguments}")


@launchers_app.command("add", help="Add a launcher")
def launchers_add(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    title: str = typer.Option(..., "--title", help="Launcher title"),
    program: Path = typer.Option(..., "--program", help="Program path inside the gamebox"),
    arguments: str = typer.Option("", "--args", help="Launch arguments"),
    default: bool = typer.Option(False, "--default", help="Make this the default launcher"),
    index: int | None = typer.Option(None, "--index", help="Insert position (defaults to the end)"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        relative = gamebox.validate_target_path(program)
        gamebox.launchers.add(title, relative.as_posix(), arguments, is_default=default, index=index)
        gamebox.save()
    logger.info("Added launcher '{}'", title)


@launchers_app.command("remove", help="Remove the launcher at INDEX")
def launchers_remove(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    index: int = typer.Argument(..., help="Launcher position"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        removed = gamebox.launchers.remove_at(index)
        gamebox.save()
    logger.info("Removed launcher '{}'", removed.title)


@launchers_app.command("default", help="Show or change the default launcher")
def launchers_default(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    index: int | None = typer.Argument(None, help="Position of the new default launcher"),
    clear: bool = typer.Option(False, "--clear", help="Leave the gamebox without a default launcher"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    registry = gamebox.launchers
    with _reporting_errors():
        if clear:
            registry.set_default_index(None)
        elif index is not None:
            registry.set_default_index(index)
        gamebox.save()

    default = registry.default_launcher
    if default is None:
        typer.echo("(none)")
    else:
        typer.echo(f"{registry.default_index}: {default.title}")


@docs_app.command("list", help="List documentation")
def docs_list(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    for entry in gamebox.documentation.documentation_urls():
        typer.echo(_relative(gamebox, entry))


@docs_app.command("populate", help="Link discovered documentation into the documentation folder")
def docs_populate(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    create: bool = typer.Option(False, "--create", help="Create the documentation folder if it is missing"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        if create:
            gamebox.documentation.ensure_folder(create_if_missing=True, populate=False)
        report = gamebox.documentation.populate()

    if report.folder is None:
        logger.warning("{} has no documentation folder; use --create to make one", gamebox.path)
        _exit(1)
    for added in report.added:
        typer.echo(_relative(gamebox, added))


@docs_app.command("import", help="Copy or link a file into the documentation folder")
def docs_import(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    source: Path = typer.Argument(..., help="File to import"),
    title: str | None = typer.Option(None, "--title", help="Name to give the imported file"),
    symlink: bool = typer.Option(False, "--symlink", help="Link to the file instead of copying it"),
    on_conflict: ConflictBehaviour | None = typer.Option(
        None,
        "--on-conflict",
        help="Rename or replace when the name is taken (defaults to the configured behaviour)",
    ),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        if symlink:
            destination = gamebox.documentation.import_symlink(source, title, on_conflict)
        else:
            destination = gamebox.documentation.import_file(source, title, on_conflict)
    typer.echo(_relative(gamebox, destination))


@docs_app.command("trash", help="Move a documentation entry to the trash")
def docs_trash(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Gamebox directory"),
    entry: Path = typer.Argument(..., help="Entry inside the documentation folder"),
) -> None:
    gamebox = _open_gamebox(ctx, path)
    with _reporting_errors():
        destination = gamebox.documentation.trash(entry)
    if destination is not None:
        typer.echo(str(destination))


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.config_path)

    if format == "json":
        _emit_json(result)
        _exit(exit_code)

    if result["status"] == "ok":
        logger.info("Configuration OK: {}", result["config_path"])
        for warning in result["warnings"]:
            logger.warning(warning)
    else:
        _log_config_error(result)

    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        _emit_json({"fields": fields})
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for field in fields:
        default_value = field["default"]
        if isinstance(default_value, (dict, list)):
            default_repr = json.dumps(default_value, ensure_ascii=False, default=str)
        elif default_value is None:
            default_repr = "None"
        else:
            default_repr = str(default_value)
        logger.info(
            "  - {name}: type={type}, required={required}, default={default}, description={description}",
            name=field["name"],
            type=field["type"],
            required="yes" if field["required"] else "no",
            default=default_repr,
            description=field["description"] or "(no description)",
        )


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
