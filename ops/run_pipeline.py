#!/usr/bin/env python3
"""
Incident Tracker Pipeline with Click CLI

Loads the incident CSV and district boundaries once, then produces the
table, the choropleth and the summary outputs. Configuration values can be
overridden on the command line instead of editing config.yaml.

Usage:
    mob-tracker summary
    mob-tracker table --year 2023 --page 2
    mob-tracker map --year 2025 --output html/incidents_2025.html
    mob-tracker build

    # Override config values:
    mob-tracker --config table.page_size=25 table
    mob-tracker --config sources.incidents=https://example.org/mob.csv summary

    # Verbose logging:
    mob-tracker --verbose build
"""

from pathlib import Path
from typing import Any, Optional, Tuple

import click
from loguru import logger

from analysis.map_incidents import create_incident_choropleth
from analysis.pagination import ELLIPSIS
from analysis.plot_summary import create_summary_chart
from analysis.session import IncidentSession
from analysis.summary import spontaneity_by_year, summary_text
from analysis.table_html import render_table_document

from .config_loader import Config
from .logging_setup import setup_logging


class ConfigOverride(click.ParamType):
    """Custom parameter type for config overrides."""

    name = "config_override"

    def convert(self, value, param, ctx) -> Tuple[str, Any]:
        if "=" not in value:
            self.fail(f"Invalid format: {value}. Use KEY=VALUE", param, ctx)

        key, val = value.split("=", 1)

        if val.lower() in ("true", "false"):
            parsed_val: Any = val.lower() == "true"
        elif val.isdigit():
            parsed_val = int(val)
        elif "." in val and val.replace(".", "", 1).isdigit():
            parsed_val = float(val)
        else:
            parsed_val = val

        return key, parsed_val


def load_session(ctx: click.Context, include_map: bool = True) -> IncidentSession:
    """Bootstrap the session stored on the click context."""
    session = IncidentSession(ctx.obj["config"]).bootstrap(include_map=include_map)
    if session.table_status:
        logger.critical(session.table_status)
        ctx.exit(1)
    return session


def format_tokens(tokens, current: int) -> str:
    return " ".join(
        token if token == ELLIPSIS else (f"[{token}]" if token == current else str(token))
        for token in tokens
    )


@click.group()
@click.option(
    "--config",
    "config_overrides",
    multiple=True,
    type=ConfigOverride(),
    help="Set config values using dot notation (e.g., table.page_size=25)",
)
@click.option("--config-file", type=click.Path(exists=True, dir_okay=False), help="Config YAML to load")
@click.option("-v", "--verbose", is_flag=True, help="Enable DEBUG level logging")
@click.option("--trace", is_flag=True, help="Enable TRACE level logging for deep debugging")
@click.option("--log-file", type=str, help="Also log to specified file")
@click.pass_context
def cli(ctx, config_overrides, config_file, verbose, trace, log_file):
    """
    Mob Violence Incident Tracker

    Builds the incident table, the district choropleth and the summary chart
    from the configured CSV and boundary sources.
    """
    setup_logging(verbose=verbose, enable_trace=trace, log_file=log_file)

    try:
        config = Config(config_file)
    except Exception as e:
        logger.critical(f"Configuration error: {e}")
        ctx.exit(1)

    for key, value in config_overrides:
        config.set_override(key, value)

    logger.debug(f"📋 Project: {config.get('project_name')}")
    config.print_config_summary()
    ctx.obj = {"config": config}


@cli.command()
@click.pass_context
def summary(ctx):
    """Print counts per year and the spontaneity breakdown."""
    session = load_session(ctx, include_map=False)
    click.echo(summary_text(session.records))

    table = spontaneity_by_year(session.records)
    if not table.empty:
        click.echo("")
        click.echo(table.to_string())


@cli.command()
@click.option("--year", default="all", show_default=True, help="Year filter (e.g., all, 2023, 2025)")
@click.option("--page", default=1, show_default=True, type=int, help="Page number")
@click.pass_context
def table(ctx, year, page):
    """Print one page of the incident table."""
    session = load_session(ctx, include_map=False)
    if not session.set_filter(year) and year != session.view.active_filter:
        logger.warning(f"⚠️ Unknown year filter '{year}', showing '{session.view.active_filter}'")
    if page != session.view.current_page and not session.set_page(page):
        logger.warning(f"⚠️ Page {page} is out of range, showing page {session.view.current_page}")

    view = session.view
    if not view.filtered_records:
        click.echo("No rows found for this filter.")
        return

    for offset, record in enumerate(view.visible_window, start=view.window_start + 1):
        click.echo(
            f"{offset:>4}. {record.date} | {record.name} | {record.age} | "
            f"{record.accused_of} | {record.cause_of_death} | {record.district or '-'}"
        )
    click.echo("")
    click.echo(f"Page {view.current_page} of {view.total_pages}: {format_tokens(view.page_tokens, view.current_page)}")


@cli.command(name="map")
@click.option("--year", default=None, help="Year-scope to map (default: map.default_year)")
@click.option("--output", type=click.Path(dir_okay=False), help="Output HTML path")
@click.pass_context
def map_command(ctx, year, output):
    """Write the district choropleth to HTML."""
    session = load_session(ctx)
    config = ctx.obj["config"]
    year = year or str(config.get("map.default_year", "all"))
    output_path = Path(output) if output else config.get_output_dir() / f"incidents_map_{year}.html"

    if not create_incident_choropleth(session, output_path, year):
        click.echo(session.map_status or "Map generation failed", err=True)
        ctx.exit(1)
    click.echo(str(output_path))


@cli.command()
@click.option("--year", default=None, help="Year-scope for the map (default: map.default_year)")
@click.pass_context
def build(ctx, year: Optional[str]):
    """Write table HTML, map HTML and summary chart into the output directory."""
    session = load_session(ctx)
    config = ctx.obj["config"]
    output_dir = config.get_output_dir()
    year = year or str(config.get("map.default_year", "all"))

    table_path = output_dir / "incidents_table.html"
    table_path.write_text(render_table_document(session, config.get("project_name")), encoding="utf-8")
    logger.success(f"  ✅ Table saved: {table_path}")

    map_ok = create_incident_choropleth(session, output_dir / f"incidents_map_{year}.html", year)
    if not map_ok:
        logger.warning("⚠️ Map generation failed, continuing...")

    chart_ok = create_summary_chart(
        session.records,
        output_dir / "summary.png",
        baseline=int(config.get("summary.baseline", 38)),
        total=int(config.get("summary.total", 139)),
    )
    if not chart_ok:
        logger.warning("⚠️ Summary chart failed, continuing...")

    click.echo(summary_text(session.records))
    logger.info(f"📁 Outputs written to {output_dir}")


if __name__ == "__main__":
    cli()
