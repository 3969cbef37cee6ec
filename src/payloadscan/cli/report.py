"""Terminal rendering of endpoint scan results."""
from typing import List

import click
from colorama import Fore, Style

from payloadscan.schema.models import EndpointReport, FieldRecord


class ReportPrinter:
    """Prints endpoint reports."""

    # Fields listed per payload before truncating
    MAX_FIELDS = 50

    def __init__(self, max_fields: int = MAX_FIELDS):
        self.max_fields = max_fields

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}")
        click.echo(f"{Fore.CYAN}{title}")
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def print_reports(self, reports: List[EndpointReport]):
        """Print every report, grouped by interface."""
        if not reports:
            click.echo(f"{Fore.YELLOW}No endpoint methods found")
            return

        owner = None
        for report in reports:
            if report.owner != owner:
                owner = report.owner
                self.print_header(owner)
            self.print_report(report)

        click.echo(f"{Fore.GREEN}✅ {len(reports)} endpoint methods scanned")

    def print_report(self, report: EndpointReport):
        """Print one endpoint."""
        verbs = ", ".join(report.annotations)
        suspend = " (suspend)" if report.suspending else ""
        click.echo(f"📍 {Fore.WHITE}{report.method}{Style.RESET_ALL} [{verbs}]{suspend}")

        if report.effective_type is None:
            source = report.return_type.render() if report.return_type else "-"
            click.echo(f"  Returns: {source} {Fore.YELLOW}(no payload){Style.RESET_ALL}")
        else:
            click.echo(
                f"  Returns: {report.effective_type.render()} "
                f"| Fields: {len(report.return_fields)}"
            )
            self._print_fields(report.return_fields)

        if report.body_type is not None:
            click.echo(
                f"  Body: {report.body_type.render()} | Fields: {len(report.body_fields)}"
            )
            self._print_fields(report.body_fields)
        click.echo()

    def print_methods(self, reports: List[EndpointReport]):
        """Print only the names of endpoint methods."""
        for report in reports:
            verbs = ", ".join(report.annotations)
            click.echo(f"{report.qualified_name} [{verbs}]")

    def _print_fields(self, fields: List[FieldRecord]):
        shown = fields[:self.max_fields]
        for index, record in enumerate(shown):
            prefix = "    └─ " if index == len(shown) - 1 else "    ├─ "
            owner = record.owner.rsplit(".", 1)[-1]
            click.echo(f"{prefix}{owner}.{record.name}: {record.type.render()}")
        if len(fields) > self.max_fields:
            click.echo(f"    ... +{len(fields) - self.max_fields} more")
