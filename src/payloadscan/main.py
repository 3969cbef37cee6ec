#!/usr/bin/env python3
"""payloadscan - Entry point."""
import logging
from dataclasses import replace
from pathlib import Path

import click
from colorama import Fore, Style, init

from payloadscan import __version__
from payloadscan.cli.report import ReportPrinter
from payloadscan.config import EXCLUSION_MODES, app_config
from payloadscan.exporter.json_exporter import JsonExporter
from payloadscan.introspection import EndpointAnalyzer
from payloadscan.parser.parser_factory import HostFactory

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}payloadscan {__version__}{Fore.CYAN}                     ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}API payload field extraction{Fore.CYAN}         ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def build_analyzer(source: str, exclusion_mode=None, refresh: bool = False) -> EndpointAnalyzer:
    """Create the host model for ``source`` and an analyzer over it."""
    try:
        host = HostFactory.create_host(source, app_config.source, force_refresh=refresh)
    except (ValueError, RuntimeError, OSError, ImportError) as e:
        raise click.ClickException(f"{Fore.RED}{e}{Style.RESET_ALL}")

    scan_config = app_config.scan
    if exclusion_mode:
        scan_config = replace(scan_config, exclusion_mode=exclusion_mode)
    return EndpointAnalyzer(host, scan_config)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
def cli(verbose):
    """payloadscan - Flatten the payload fields of API interface methods."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, app_config.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("source")
@click.option("--method", "method_name", help="Only report methods with this name")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report as JSON",
)
@click.option(
    "--exclusion-mode",
    type=click.Choice(EXCLUSION_MODES),
    help="How Unit/Void return types are recognised",
)
@click.option("--refresh", is_flag=True, help="Bypass the snapshot cache")
def scan(source, method_name, output, exclusion_mode, refresh):
    """Report return and body payload fields of every endpoint in SOURCE.

    SOURCE is a snapshot JSON file, a snapshot URL or a Python module name.
    """
    print_banner()

    analyzer = build_analyzer(source, exclusion_mode, refresh)
    reports = analyzer.scan()
    if method_name:
        reports = [r for r in reports if r.method == method_name]

    ReportPrinter().print_reports(reports)

    if output:
        JsonExporter().export(output, reports, source)
        click.echo(f"{Fore.GREEN}Report written to {output}")


@cli.command()
@click.argument("source")
def methods(source):
    """List endpoint methods found in SOURCE."""
    analyzer = build_analyzer(source)
    ReportPrinter().print_methods(analyzer.scan())


if __name__ == "__main__":
    cli()
