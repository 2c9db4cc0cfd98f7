"""
forkpatch — CLI entrypoint.

Usage:
    forkpatch              Apply patches to managed files
    forkpatch --apply      Same as above (explicit)
    forkpatch --generate   Generate patches from current local changes
    forkpatch --status     Show patch status and managed file state
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from forkpatch import __version__
from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    project_root,
)
from forkpatch.core.models.patchset import PatchConfig
from forkpatch.core.observability.logging_config import setup_logging
from forkpatch.core.services.patch_ops import FileState

PROG_NAME = "forkpatch"

_STATE_LABELS = {
    FileState.NOT_FOUND: ("[NOT FOUND]", "red"),
    FileState.MODIFIED: ("[MODIFIED]", "yellow"),
    FileState.CLEAN: ("[CLEAN]", "green"),
}


@click.command(
    context_settings={"ignore_unknown_options": True},
    add_help_option=False,
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--apply", "mode", flag_value="apply", help="Reset managed files and apply patches.")
@click.option("--generate", "mode", flag_value="generate", help="Generate patches from local changes.")
@click.option("--status", "mode", flag_value="status", help="Show patch status.")
@click.option("--help", "-h", "show_help", is_flag=True, help="Show usage and managed files.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output status as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to forkpatch.yml (default: auto-detect).",
)
@click.argument("extra", nargs=-1, type=click.UNPROCESSED)
def cli(
    mode: str | None,
    show_help: bool,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    extra: tuple[str, ...],
) -> None:
    """Maintain a fork's local customizations as patches over upstream."""
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("FORKPATCH_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("FORKPATCH_LOG_FILE"),
        log_file_level=os.environ.get("FORKPATCH_LOG_FILE_LEVEL"),
    )

    explicit = Path(config_path) if config_path else None

    if extra:
        click.secho(f"Unknown option: {extra[0]}", fg="red")
        _usage(_try_load(explicit))
        sys.exit(1)

    if show_help:
        _usage(_try_load(explicit))
        return

    cfg_file = explicit or find_config_file()
    try:
        config = load_config(cfg_file)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    vcs = _make_vcs(project_root(cfg_file))
    if not vcs.is_available():
        click.secho(f"❌ {vcs.name} is not available. Install it and make sure it is on PATH.",
                    fg="red")
        sys.exit(1)

    if mode == "status":
        _status(config, vcs, as_json)
    elif mode == "generate":
        _generate(config, vcs)
    else:
        _apply(config, vcs)


def _make_vcs(root: Path) -> VcsAdapter:
    from forkpatch.adapters.vcs.git import GitAdapter

    return GitAdapter(root)


def _try_load(path: Path | None) -> PatchConfig | None:
    """Config for the usage listing; usage still prints without one."""
    try:
        return load_config(path)
    except ConfigError:
        return None


def _usage(config: PatchConfig | None) -> None:
    click.echo(f"Usage: {PROG_NAME} [--apply|--generate|--status] [OPTIONS]")
    click.echo()
    click.echo("Commands:")
    click.echo("  (no args)    Apply patches to managed files (same as --apply)")
    click.echo("  --apply      Reset managed files to upstream and apply patches")
    click.echo("  --generate   Generate patches from current local changes")
    click.echo("  --status     Show patch status and managed file state")
    click.echo()
    click.echo("Options:")
    click.echo("  -c, --config PATH  Path to forkpatch.yml (default: auto-detect)")
    click.echo("  --json             Output status as JSON")
    click.echo("  -v, --verbose      Enable verbose output")
    click.echo("  -q, --quiet        Suppress non-essential output")
    click.echo("  --debug            Enable debug logging")
    click.echo("  --version          Show the version and exit")
    click.echo("  -h, --help         Show this message and exit")

    if config is None:
        return

    click.echo()
    click.echo("Managed files:")
    for f in config.managed_files:
        click.echo(f"  - {f}")
    click.echo()
    click.echo("Binary assets (copied separately):")
    for asset in config.assets:
        click.echo(f"  - {asset.name}")


def _header(text: str) -> None:
    click.secho(text, fg="blue", bold=True)


def _tag(label: str, color: str, text: str) -> None:
    click.echo("  ", nl=False)
    click.secho(label, fg=color, nl=False)
    click.echo(f" {text}")


# ── Status ──────────────────────────────────────────────────────


def _status(config: PatchConfig, vcs: VcsAdapter, as_json: bool) -> None:
    from forkpatch.core.use_cases.status import get_status

    result = get_status(config, vcs)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _header("=== Patch Status ===")
    click.echo()

    _header("Patch files:")
    for p in result.patch_files:
        if p.exists:
            _tag("[EXISTS]", "green", p.file)
        else:
            _tag("[MISSING]", "red", p.file)
    click.echo()

    _header("Binary assets:")
    for name, exists in result.assets:
        if exists:
            _tag("[EXISTS]", "green", name)
        else:
            _tag("[MISSING]", "red", name)
    click.echo()

    _header("Managed files:")
    for m in result.managed_files:
        label, color = _STATE_LABELS[m.state]
        _tag(label, color, m.path)
    click.echo()

    _header("Patch applicability (dry-run):")
    for a in result.applicability:
        if a.applies:
            _tag("[OK]", "green", a.file)
        else:
            _tag("[CONFLICT]", "yellow", f"{a.file} (may already be applied)")


# ── Generate ────────────────────────────────────────────────────


def _generate(config: PatchConfig, vcs: VcsAdapter) -> None:
    from forkpatch.core.use_cases.generate import generate_patches

    _header("=== Generating Patches ===")
    click.echo()

    result = generate_patches(config, vcs)

    for g in result.groups:
        _header(f"Generating {g.file}...")
        if g.status == "created":
            _tag("Created", "green", g.file)
        elif g.status == "error":
            _tag("Warning", "yellow", f"could not diff {g.label} files: {g.error}")
        else:
            _tag("No changes", "yellow", f"in {g.label} files")

    click.echo()
    _header("Copying binary assets...")
    for a in result.assets:
        if a.copied:
            _tag("Copied", "green", a.name)
        elif a.error:
            _tag("Failed", "yellow", f"{a.name}: {a.error}")
        else:
            _tag("Not found", "yellow", a.destination)

    click.echo()
    click.secho("Patch generation complete!", fg="green", bold=True)
    click.echo()
    click.echo("To commit patches:")
    click.echo(f"  git add {config.patches_dir}/")
    click.echo(f'  git commit -m "Update {config.name} patches"')


# ── Apply ───────────────────────────────────────────────────────


def _apply(config: PatchConfig, vcs: VcsAdapter) -> None:
    from forkpatch.core.use_cases.apply import apply_patches

    _header(f"=== Applying {config.name} Patches ===")
    click.echo()

    result = apply_patches(config, vcs, prog_name=PROG_NAME)

    if result.error:
        click.secho(result.error, fg="yellow")
        sys.exit(1)

    _header(f"Resetting managed files to upstream state ({result.upstream_ref})...")
    for r in result.reset:
        if r.ref is None:
            _tag("Warning", "yellow", f"could not reset {r.path} (left as-is): {r.error}")
        elif r.ref != result.upstream_ref:
            _tag("Reset", "green", f"{r.path} (from {r.ref})")
        else:
            _tag("Reset", "green", r.path)
    click.echo()

    _header("Applying patches...")
    for name in result.applied:
        _tag("Applied", "green", name)
    if result.failed_patch:
        _tag("Failed", "red", result.failed_patch)
        if result.failed_error:
            for line in result.failed_error.splitlines()[:5]:
                click.echo(f"     │ {line}")
        sys.exit(1)
    click.echo()

    _header("Copying binary assets...")
    for a in result.assets:
        if a.copied:
            _tag("Copied", "green", f"{a.name} -> {a.destination}")
        elif a.error:
            _tag("Failed", "yellow", f"{a.name}: {a.error}")
        else:
            _tag("Not found", "yellow", f"{a.name} in {config.patches_dir}/{config.assets_dir}/")

    click.echo()
    click.secho("Patches applied successfully!", fg="green", bold=True)


if __name__ == "__main__":
    cli()
