from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from rich.console import Console

from render_monitor.channel import EventChannel
from render_monitor.config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    ConfigError,
    RunnerOptions,
    load_config,
)
from render_monitor.display.renderer import ProgressRenderer
from render_monitor.display.screen import Dashboard, DashboardScreen
from render_monitor.events import Failure, RunOutcome
from render_monitor.log_setup import setup_logging
from render_monitor.render_job import RenderJob

logger = logging.getLogger(__name__)


def _frame_number(value: str) -> int:
    """argparse type for a non-negative frame index."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid frame number: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"frame number must not be negative: {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a Blender animation headlessly with a live progress dashboard",
    )
    parser.add_argument("-i", "--input", required=True, metavar="FILENAME",
                        help="input .blend file")
    parser.add_argument("-o", "--output", required=True, metavar="DIRNAME",
                        help="output directory for rendered frames")
    parser.add_argument("-s", "--frame-start", required=True, type=_frame_number,
                        metavar="NUMBER", help="first frame to render")
    parser.add_argument("-e", "--frame-end", required=True, type=_frame_number,
                        metavar="NUMBER", help="last frame to render")
    parser.add_argument("--config", default=None,
                        help=f"Path to YAML config file (default: {DEFAULT_CONFIG_PATH} if present)")
    parser.add_argument("--blender", default=None, metavar="PATH",
                        help="Blender executable, overrides blender.command from the config")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug mode (verbose logging)")
    parser.add_argument("--trace", action="store_true",
                        help="Enable trace mode (writes trace file to debug/)")
    parser.add_argument("--verbose", action="store_true",
                        help="With --trace, also send trace output to terminal")
    return parser


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.frame_end < args.frame_start:
        parser.error(
            f"--frame-end ({args.frame_end}) must not be before --frame-start ({args.frame_start})"
        )
    return args


def _load_app_config(args: argparse.Namespace) -> AppConfig:
    """Load the YAML config named on the command line, or the default one if it exists."""
    if args.config is not None:
        config = load_config(args.config)
    elif os.path.exists(DEFAULT_CONFIG_PATH):
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = AppConfig()

    if args.blender:
        config.blender.command = args.blender
    if args.debug:
        config.debug.enabled = True
    if args.trace:
        config.debug.trace = True
    if args.verbose:
        config.debug.verbose = True
    return config


async def run_monitor(
    options: RunnerOptions,
    config: AppConfig,
    console: Console | None = None,
    dashboard: Dashboard | None = None,
) -> RunOutcome:
    """Run the render job and the dashboard side by side until both finish.

    The job produces events onto a shared channel; the renderer consumes
    them. Neither shares any other mutable state.

    Returns:
        The run outcome as reported by the job.
    """
    console = console or Console()
    if dashboard is None:
        dashboard = DashboardScreen(console, bar_width=config.display.bar_width)
    channel = EventChannel()
    job = RenderJob(
        options,
        command=config.blender.command,
        strict_correlation=config.render.strict_correlation,
    )
    renderer = ProgressRenderer(
        options,
        dashboard,
        grace_period_seconds=config.display.grace_period_seconds,
        console=console,
    )
    job_result, render_result = await asyncio.gather(
        job.run(channel), renderer.run(channel), return_exceptions=True,
    )
    for result in (job_result, render_result):
        if isinstance(result, BaseException):
            raise result
    return job_result


async def main(argv: list[str] | None = None) -> int:
    """Entry point: parse arguments, run the monitor, map the outcome to an exit status."""
    args = _parse_args(argv)
    try:
        config = _load_app_config(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    setup_logging(
        debug=config.debug.enabled,
        trace=config.debug.trace,
        verbose=config.debug.verbose,
    )

    options = RunnerOptions(
        input_file=args.input,
        output_dir=args.output,
        frame_start=args.frame_start,
        frame_end=args.frame_end,
    )
    logger.info(
        "Rendering %s frames %d-%d into %s",
        options.input_file, options.frame_start, options.frame_end, options.output_dir,
    )
    outcome = await run_monitor(options, config)
    if isinstance(outcome, Failure):
        logger.error("Render failed: %s", outcome.reason)
        return 1
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
