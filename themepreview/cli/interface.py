# themepreview/cli/interface.py
import sys
import json
import functools
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import click
from click_option_group import optgroup, RequiredAnyOptionGroup
import structlog

from themepreview import __version__ as app_version
from themepreview.config.loader import build_config
from themepreview.config.settings import CacheBackendKind, PreviewConfig
from themepreview.logging_setup import configure_logging
from themepreview.core.cache import MemoryCacheBackend, RenderCache, SqliteCacheBackend
from themepreview.core.output import write_to_stdout, write_to_file
from themepreview.core.pipeline import RenderPipeline, run_batch
from themepreview.core.source import LibrarySource
from themepreview.cli.console_output import print_batch_summary, print_cache_stats, print_render_summary
from themepreview.exceptions import ThemePreviewError, ConfigError

log = structlog.get_logger(__name__)


def build_render_cache(config: PreviewConfig) -> RenderCache:
    if config.cache_backend == CacheBackendKind.SQLITE:
        return RenderCache(SqliteCacheBackend(config.cache_path))
    return RenderCache(MemoryCacheBackend())


def build_pipeline(config: PreviewConfig) -> RenderPipeline:
    log.debug("building_render_pipeline", library=str(config.library_dir), cache_backend=config.cache_backend.value)
    return RenderPipeline(LibrarySource(config.library_dir), build_render_cache(config), config=config)


def parse_setting_overrides(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """KEY=VALUE pairs; values are read as JSON when they parse, else kept as text."""
    overrides: Dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--set")
        key, raw_value = pair.split("=", 1)
        try:
            overrides[key.strip()] = json.loads(raw_value)
        except json.JSONDecodeError:
            overrides[key.strip()] = raw_value
    return overrides


def handle_cli_errors(func: Callable) -> Callable:
    # maps application errors to a red message and exit code 1.
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.exceptions.Exit:
            raise
        except click.ClickException:
            raise
        except ThemePreviewError as e:
            log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)
        except Exception as e:
            log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
            click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
            sys.exit(1)
    return wrapper


def _config(ctx: click.Context) -> PreviewConfig:
    return ctx.obj["config"]


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@optgroup.group("Component Library", help="Where schemas, presets and templates are read from.")
@optgroup.option("-l", "--library", "library_dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Component library directory. Default: current directory.")
@optgroup.group("Render Cache", help="Where rendered previews are cached.")
@optgroup.option("--cache-backend", "cache_backend", type=click.Choice([k.value for k in CacheBackendKind]), default=None, help="Cache storage. Default: memory.")
@optgroup.option("--cache-path", "cache_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="SQLite database file for the sqlite backend.")
@optgroup.option("--cache-ttl", "cache_ttl_minutes", type=click.IntRange(min=1), default=None, help="Minutes a cached preview stays valid. Default: 60.")
@optgroup.group("Application Behavior", help="Configuration profiles and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="themepreview", prog_name="themepreview", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, **cli_params: Any):
    """themepreview: render storefront theme sections against mock data
    generated from their schemas, with a shared render cache."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params={k: str(v) for k, v in cli_params.items() if v is not None})

    overrides = {
        "library_dir": cli_params.get("library_dir"),
        "cache_backend": cli_params.get("cache_backend"),
        "cache_path": cli_params.get("cache_path"),
        "cache_ttl_minutes": cli_params.get("cache_ttl_minutes"),
    }
    try:
        config = build_config(overrides, profile=cli_params.get("active_config_profile_name"))
    except ConfigError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj = {"config": config}


@main_cli_group.command("render")
@click.argument("component_slug")
@click.option("-p", "--preset", "preset_slug", default=None, help="Style preset slug to apply.")
@click.option("--set", "setting_pairs", multiple=True, metavar="KEY=VALUE", help="Override a section setting (repeatable).")
@click.option("--no-cache", "skip_cache", is_flag=True, default=False, help="Bypass the render cache for this render.")
@click.option("-F", "--format", "output_format", type=click.Choice(["html", "json"]), default="html", help="Output format. Default: html.")
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the output to.")
@click.pass_context
@handle_cli_errors
def render_command(ctx: click.Context, component_slug: str, preset_slug: Optional[str], setting_pairs: Tuple[str, ...],
                   skip_cache: bool, output_format: str, output_file: Optional[Path]):
    """Render one component preview."""
    overrides = parse_setting_overrides(setting_pairs)
    pipeline = build_pipeline(_config(ctx))
    result = pipeline.render(component_slug, preset_slug, overrides or None, skip_cache=skip_cache)

    if output_format == "json":
        output_to_write = json.dumps(result.to_dict(), indent=2) + "\n"
    else:
        output_to_write = f"<style>{result.css}</style>\n{result.html}\n" if result.css else f"{result.html}\n"

    if output_file:
        write_to_file(output_file, output_to_write)
        click.echo(f"Info: Output written to: {output_file}", err=True)
    else:
        write_to_stdout(output_to_write)

    print_render_summary(component_slug, result)
    if not result.success:
        sys.exit(1)


@main_cli_group.command("batch")
@click.argument("component_slugs", nargs=-1)
@click.option("-p", "--preset", "preset_slug", default=None, help="Style preset slug to apply to every component.")
@click.option("-F", "--format", "output_format", type=click.Choice(["table", "json"]), default="table", help="Output format. Default: table.")
@click.pass_context
@handle_cli_errors
def batch_command(ctx: click.Context, component_slugs: Tuple[str, ...], preset_slug: Optional[str], output_format: str):
    """Render several component previews concurrently."""
    pipeline = build_pipeline(_config(ctx))
    report = run_batch(pipeline, component_slugs, preset_slug)

    if output_format == "json":
        write_to_stdout(json.dumps(report.to_dict(), indent=2) + "\n")
    if not report.success:
        click.secho(f"Error: {report.error}", fg="red", err=True)
        sys.exit(1)
    if output_format == "table":
        print_batch_summary(report)


@main_cli_group.group("cache")
def cache_group():
    """Inspect and maintain the render cache."""


@cache_group.command("stats")
@click.pass_context
@handle_cli_errors
def cache_stats_command(ctx: click.Context):
    """Show entry counts and approximate size."""
    cache = build_render_cache(_config(ctx))
    print_cache_stats(cache.stats())


@cache_group.command("sweep")
@click.pass_context
@handle_cli_errors
def cache_sweep_command(ctx: click.Context):
    """Delete expired entries."""
    removed = build_render_cache(_config(ctx)).sweep_expired()
    click.echo(f"Removed {removed} expired entr{'y' if removed == 1 else 'ies'}.")


@cache_group.command("invalidate")
@optgroup.group("Invalidation Target", cls=RequiredAnyOptionGroup, help="Which cached previews to drop.")
@optgroup.option("--component", "component_slug", default=None, help="Drop every entry for this component.")
@optgroup.option("--preset", "preset_slug", default=None, help="Drop every entry rendered with this preset.")
@click.pass_context
@handle_cli_errors
def cache_invalidate_command(ctx: click.Context, component_slug: Optional[str], preset_slug: Optional[str]):
    """Drop cached previews for a component and/or a preset."""
    cache = build_render_cache(_config(ctx))
    removed = 0
    if component_slug:
        removed += cache.invalidate_by_component(component_slug)
    if preset_slug:
        removed += cache.invalidate_by_preset(preset_slug)
    click.echo(f"Invalidated {removed} cached preview{'' if removed == 1 else 's'}.")
