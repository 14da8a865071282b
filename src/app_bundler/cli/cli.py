#!/usr/bin/env python3
"""
app_bundler.cli.cli

Typer-based CLI for building platform-native bundles from a project manifest.

Examples
--------
Bundle a macOS app from a Cargo-style manifest:

    app-bundler build Cargo.toml --platform osx --binary target/release/foobar

Render a Windows icon from two source images:

    app-bundler icon icon.png icon@2x.png --format ico --output foobar.ico
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import typer

from app_bundler.errors import BundlerError
from app_bundler.logging_utils import configure_logging
from app_bundler.types import PLATFORMS

app = typer.Typer(
    name="app-bundler",
    help="Build OS-native application bundles (macOS .app, Debian, WiX/MSI).",
    no_args_is_help=True,
)

ICON_FORMATS = ("icns", "ico", "png")
WORKERS_ENV = "APP_BUNDLER_MAX_WORKERS"


def _print_bundle_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly bundling error.

    Parameters
    ----------
    exc : Exception
        Exception raised while bundling.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _validate_choice(value: str, choices: tuple[str, ...], label: str) -> str:
    if value not in choices:
        raise typer.BadParameter(
            f"Unknown {label} '{value}'. Choose one of: {', '.join(choices)}."
        )
    return value


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show debug logs and full tracebacks."),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug logging and error output.
    """
    configure_logging(logging.DEBUG if debug else logging.INFO)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("build")
def build_cmd(
    ctx: typer.Context,
    manifest_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the TOML manifest (Cargo.toml or bundle.toml).",
    ),
    platform: str = typer.Option(
        ..., "--platform", "-p", help=f"Target platform: {', '.join(PLATFORMS)}."
    ),
    binary: Path | None = typer.Option(
        None,
        "--binary",
        exists=True,
        dir_okay=False,
        help="Compiled executable to place in the bundle.",
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Directory the bundle is written under."
    ),
    strict_icons: bool = typer.Option(
        False,
        "--strict-icons",
        help="Fail when any icon file cannot be decoded instead of skipping it.",
    ),
    workers: int = typer.Option(
        4,
        "--workers",
        min=1,
        envvar=WORKERS_ENV,
        help="Threads used for icon decoding and file copying.",
    ),
) -> None:
    """Build a bundle for one platform.

    Notes
    -----
    - The bundle directory is removed and recreated on every run.
    - If a build fails, anything left in the bundle directory is partial.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    _validate_choice(platform, PLATFORMS, "platform")

    try:
        from app_bundler.api import bundle_manifest_file

        result = bundle_manifest_file(
            manifest_path,
            platform,
            binary=binary,
            output_dir=output_dir,
            strict_icons=strict_icons,
            max_workers=workers,
        )
    except BundlerError as exc:
        raise typer.Exit(code=_print_bundle_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_bundle_error(exc, debug))

    for warning in result.warnings:
        typer.echo(f"! {warning}", err=True)
    typer.echo(f"✓ Bundled: {result.artifact.root}")


@app.command("icon")
def icon_cmd(
    ctx: typer.Context,
    sources: list[Path] = typer.Argument(
        ..., exists=True, dir_okay=False, help="Source images or icon containers."
    ),
    output_path: Path = typer.Option(..., "--output", "-o", help="Container file to write."),
    icon_format: str = typer.Option("icns", "--format", "-f", help="icns, ico or png."),
    strict: bool = typer.Option(
        False, "--strict", help="Fail on any undecodable source image."
    ),
) -> None:
    """Render an icon container from source images."""
    debug: bool = bool(ctx.obj.get("debug", False))
    _validate_choice(icon_format, ICON_FORMATS, "icon format")

    try:
        from app_bundler.api import render_icon_file

        out = render_icon_file(sources, output_path, icon_format, strict=strict)  # type: ignore[arg-type]
    except BundlerError as exc:
        raise typer.Exit(code=_print_bundle_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_bundle_error(exc, debug))
    typer.echo(f"✓ Saved: {out}")


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed library versions and available backends."""
    import importlib.metadata as metadata

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("pillow", "numpy", "pydantic", "typer"):
        try:
            typer.echo(f"{module}: {metadata.version(module)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    from app_bundler.backends.registry import create_default_registry

    typer.echo(f"backends: {', '.join(create_default_registry().names())}")


if __name__ == "__main__":
    app()
