#!/usr/bin/env python3
"""
Turnout / Search Interest Pipeline with Click CLI

Loads the voter roll and the search interest export, joins them by county,
computes per-candidate correlations and renders the dashboard charts.

Usage:
    turnout-trends [OPTIONS]

    # Different inputs:
    turnout-trends --voter-csv data/presence_now.csv --trends-csv data/geoMap.csv

    # Only one chart, for one candidate, within a turnout range:
    turnout-trends --view scatter --candidate george_simion --min-turnout 20

    # Just the correlation table and narrative:
    turnout-trends summary

    # Verbose logging:
    turnout-trends --verbose
"""

import os
import sys
from typing import Any, Dict, Optional, Tuple

import click
from loguru import logger

from analysis.dashboard import VIEWS, format_correlation, format_row, render_dashboard, summarize
from processing.data_utils import export_results, load_sources, process_data
from processing.errors import IngestionError
from processing.models import CANDIDATES, PipelineResult

from .config_loader import Config


class ConfigOverride(click.ParamType):
    """Custom parameter type for config overrides."""

    name = "config_override"

    def convert(self, value, param, ctx) -> Tuple[str, Any]:
        if "=" not in value:
            self.fail(f"Invalid format: {value}. Use KEY=VALUE", param, ctx)

        key, val = value.split("=", 1)

        # Auto-parse value type
        if val.lower() in ("true", "false"):
            parsed_val: Any = val.lower() == "true"
        elif val.isdigit():
            parsed_val = int(val)
        elif "." in val and val.replace(".", "", 1).isdigit():
            parsed_val = float(val)
        else:
            parsed_val = val

        return key, parsed_val


class PipelineContext:
    """Click context object carrying config and processed options."""

    def __init__(self, config: Config, options: Dict[str, Any]):
        self.config = config
        self.options = options
        self._result: Optional[PipelineResult] = None

    def run(self) -> PipelineResult:
        """Load both sources and process them once per invocation."""
        if self._result is None:
            voter_source = self.config.get_input_path("voter_csv")
            trends_source = self.config.get_input_path("trends_csv")
            timeout = float(self.config.get_system_setting("request_timeout"))

            voter_text, trends_text = load_sources(voter_source, trends_source, timeout=timeout)
            self._result = process_data(voter_text, trends_text, columns=self.config.get_columns())
        return self._result


@click.group(invoke_without_command=True)
@click.option("--voter-csv", help="Override voter roll CSV path or URL")
@click.option("--trends-csv", help="Override search interest export path or URL")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Override output directory")
@click.option(
    "--candidate",
    type=click.Choice(CANDIDATES),
    help="Active candidate for the scatter view",
)
@click.option(
    "--view",
    type=click.Choice(VIEWS + ("all",)),
    default="all",
    show_default=True,
    help="Which chart(s) to render",
)
@click.option("--min-turnout", type=float, help="Only chart counties at or above this turnout %")
@click.option("--max-turnout", type=float, help="Only chart counties at or below this turnout %")
@click.option(
    "--county",
    "counties",
    multiple=True,
    help="Only chart this county (display name or code); repeatable",
)
@click.option("--config-file", type=click.Path(dir_okay=False), help="Path to config.yaml")
@click.option(
    "--config",
    "config_overrides",
    multiple=True,
    type=ConfigOverride(),
    help="Set config values using dot notation (e.g., visualization.dpi=300)",
)
@click.option("--dry-run", is_flag=True, help="Show what would be run without executing")
@click.option("-v", "--verbose", is_flag=True, help="Enable DEBUG level logging")
@click.option("--trace", is_flag=True, help="Enable TRACE level logging for deep debugging")
@click.option("--log-file", type=str, help="Also log to specified file")
@click.pass_context
def cli(ctx, **kwargs):
    """
    Turnout vs. Search Interest Correlation Pipeline

    \b
    Examples:
      turnout-trends                                   # Full pipeline, all charts
      turnout-trends --view correlations               # Only the coefficient bar chart
      turnout-trends --candidate nicusor_dan           # Scatter for another candidate
      turnout-trends --county CJ --county B            # Chart only the listed counties
      turnout-trends --config visualization.dpi=300    # Override any config value
      turnout-trends summary                           # Correlations and narrative only
    """
    setup_logging(verbose=kwargs["verbose"], enable_trace=kwargs["trace"])

    if kwargs["log_file"]:
        log_level = "TRACE" if kwargs["trace"] else ("DEBUG" if kwargs["verbose"] else "INFO")
        logger.add(
            kwargs["log_file"],
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
            rotation="10 MB",
            retention="7 days",
        )
        logger.info(f"📄 Also logging to file: {kwargs['log_file']}")

    logger.info("🗳️ Turnout vs. Search Interest Pipeline")
    logger.debug(f"🔧 CLI arguments received: {kwargs}")

    overrides: Dict[str, Any] = {}
    if kwargs["voter_csv"]:
        overrides["input_files.voter_csv"] = kwargs["voter_csv"]
    if kwargs["trends_csv"]:
        overrides["input_files.trends_csv"] = kwargs["trends_csv"]
    if kwargs["output_dir"]:
        overrides["directories.output"] = kwargs["output_dir"]
        overrides["directories.charts"] = os.path.join(kwargs["output_dir"], "charts")
    for key, value in kwargs["config_overrides"]:
        overrides[key] = value

    try:
        config = Config(kwargs["config_file"], overrides=overrides)
        logger.info(f"📋 Project: {config.get('project_name')}")
    except (FileNotFoundError, ValueError) as e:
        logger.critical(f"Configuration error: {e}")
        logger.info("💡 Make sure config.yaml exists and is valid")
        ctx.exit(1)

    ctx.obj = PipelineContext(config, kwargs)

    if ctx.invoked_subcommand is None:
        ctx.invoke(run_pipeline)


@cli.command(name="run")
@click.pass_context
def run_pipeline(ctx):
    """Run the full pipeline: load, correlate, export and render charts."""
    pipeline: PipelineContext = ctx.obj
    config = pipeline.config
    options = pipeline.options

    if options["dry_run"]:
        try:
            show_dry_run_info(config, options)
        except ValueError as e:
            handle_critical_error(e, "dry run")
            ctx.exit(1)
        return

    try:
        result = pipeline.run()
    except (IngestionError, ValueError) as e:
        handle_critical_error(e, "loading sources")
        ctx.exit(1)

    candidate = options["candidate"] or config.get_visualization_setting("default_candidate")
    log_correlations(result, config, candidate)

    output_dir = config.get_output_dir("output")
    export_results(result, output_dir)

    charts = render_dashboard(
        result,
        config.get_output_dir("charts"),
        view=options["view"],
        candidate=candidate,
        min_turnout=options["min_turnout"],
        max_turnout=options["max_turnout"],
        counties=options["counties"],
        settings=config.get("visualization", {}),
    )

    if result.is_empty:
        logger.warning("⚠️ Nu s-au putut corela datele. Verifică formatul fișierelor CSV.")
    else:
        logger.success(f"🎉 Pipeline finished: {len(result.rows)} counties, {len(charts)} charts")


@cli.command()
@click.pass_context
def summary(ctx):
    """Log the correlation table and narrative without rendering charts."""
    pipeline: PipelineContext = ctx.obj
    try:
        result = pipeline.run()
    except (IngestionError, ValueError) as e:
        handle_critical_error(e, "loading sources")
        ctx.exit(1)

    config = pipeline.config
    candidate = pipeline.options["candidate"] or config.get_visualization_setting("default_candidate")
    log_correlations(result, config, candidate)


def log_correlations(
    result: PipelineResult, config: Config, candidate: Optional[str] = None
) -> None:
    """Log one line per candidate plus the narrative summary.

    With a candidate, each joined county is also logged at DEBUG level.
    """
    threshold = float(config.get_visualization_setting("strength_threshold"))

    logger.info(f"📊 Correlations over {len(result.rows)} counties:")
    for name in CANDIDATES:
        logger.info(f"  • {name}: {format_correlation(result.correlations[name])}")

    logger.info("📝 Analiză:")
    for line in summarize(result.correlations, threshold):
        logger.info(f"  {line}")

    if candidate:
        logger.debug(f"🏙️ Counties for {candidate}:")
        for row in result.rows:
            logger.debug(f"  {format_row(row, candidate)}")


def show_dry_run_info(config: Config, options: Dict[str, Any]) -> None:
    """Show what would be run."""
    logger.info("🔍 DRY RUN - showing what would be executed:")
    config.print_config_summary()
    logger.info(f"  📄 Voter roll: {config.get_input_path('voter_csv')}")
    logger.info(f"  📄 Search interest: {config.get_input_path('trends_csv')}")
    logger.info(f"  💾 Output: {config.get_output_dir('output')}")
    logger.info(f"  🎨 Charts ({options['view']}): {config.get_output_dir('charts')}")
    for source, exists in config.validate_input_files().items():
        logger.info(f"  {'✅' if exists else '❌'} {source}")


def setup_logging(verbose: bool = False, enable_trace: bool = False) -> None:
    """
    Configure loguru logging with appropriate levels.

    Args:
        verbose: If True, set log level to DEBUG
        enable_trace: If True, enable TRACE level logging for deep debugging
    """
    logger.remove()

    if enable_trace:
        log_level = "TRACE"
    elif verbose:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    if enable_trace or verbose:
        log_format = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
    else:
        log_format = (
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
        )

    logger.add(
        sys.stderr,
        format=log_format,
        level=log_level,
        colorize=True,
        backtrace=enable_trace,
        diagnose=enable_trace,
    )

    os.environ["LOGURU_LEVEL"] = log_level

    if verbose:
        logger.debug("🔧 Verbose logging enabled (DEBUG level)")
    if enable_trace:
        logger.trace("🔍 Trace logging enabled - maximum detail mode")


def handle_critical_error(error: Exception, context: str = "") -> None:
    """Log a terminal error; the traceback only in TRACE mode."""
    if os.environ.get("LOGURU_LEVEL", "INFO") == "TRACE":
        logger.opt(exception=error).trace(f"Error context: {context}")

    logger.critical(f"💥 CRITICAL ERROR: {context}")
    logger.critical(f"Exception: {type(error).__name__}: {error}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
