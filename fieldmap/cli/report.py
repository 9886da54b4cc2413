"""Colored console output for validation results."""
from typing import Iterable, List

import click
from colorama import Fore, Style

from fieldmap.compatibility.type_compatibility import CompatibilityLevel, TypeCompatibilityResult
from fieldmap.schema.models import Field
from fieldmap.validator.results import (
    ValidationResult,
    ValidationStatus,
    ValidationSummary,
    sort_by_priority,
)

STATUS_COLORS = {
    ValidationStatus.VALID: Fore.GREEN,
    ValidationStatus.WARNING: Fore.YELLOW,
    ValidationStatus.ERROR: Fore.RED,
}

STATUS_ICONS = {
    ValidationStatus.VALID: "✅",
    ValidationStatus.WARNING: "⚠️ ",
    ValidationStatus.ERROR: "❌",
}

LEVEL_STATUS = {
    CompatibilityLevel.COMPATIBLE: ValidationStatus.VALID,
    CompatibilityLevel.WARNING: ValidationStatus.WARNING,
    CompatibilityLevel.ERROR: ValidationStatus.ERROR,
}


class ReportPrinter:
    """Prints validation output the same way for every command."""

    def __init__(self, max_suggestions: int = 5):
        """Initialize printer."""
        self.max_suggestions = max_suggestions

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}")
        click.echo(f"{Fore.CYAN}{title}")
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def print_compatibility(self, source_type: str, target_type: str, result: TypeCompatibilityResult):
        """Print a resolver verdict."""
        status = LEVEL_STATUS[result.level]
        color = STATUS_COLORS[status]
        click.echo(f"{color}{STATUS_ICONS[status]} {source_type} → {target_type}: {result.level.value}")
        click.echo(f"   {result.message}")
        self._print_suggestions(result.suggestions)

    def print_result(self, result: ValidationResult, label: str = ""):
        """Print a single mapping result."""
        status = result.status
        color = STATUS_COLORS[status]
        click.echo(f"{color}{STATUS_ICONS[status]} {label or result.mapping_id} (score {result.score})")

        for error in result.errors:
            click.echo(f"{Fore.RED}   ✗ {error}")
        for warning in result.warnings:
            click.echo(f"{Fore.YELLOW}   ! {warning}")

    def print_results(self, results: Iterable[ValidationResult]):
        """Print results, errors first."""
        for result in sort_by_priority(results):
            self.print_result(result)

    def print_summary(self, summary: ValidationSummary):
        """Print the configuration summary."""
        color = STATUS_COLORS[summary.status]
        click.echo(f"\n{color}Status: {summary.status.value.upper()}  Score: {summary.overall_score}/100")
        click.echo(
            f"   Mappings: {summary.total_mappings} "
            f"(valid {summary.valid_mappings}, warnings {summary.warning_mappings}, "
            f"errors {summary.error_mappings})"
        )

        if summary.critical_issues:
            click.echo(f"\n{Fore.RED}Critical issues:")
            for issue in summary.critical_issues:
                click.echo(f"   • {issue}")

        if summary.fixable_issues:
            click.echo(f"\n{Fore.YELLOW}Fixable issues:")
            for issue in summary.fixable_issues:
                click.echo(f"   • {issue}")

        if summary.total_mappings == 0:
            for warning in summary.warnings:
                click.echo(f"{Fore.YELLOW}   ! {warning}")

        self._print_suggestions(_unique(summary.suggestions))

        if summary.can_run:
            click.echo(f"\n{Fore.GREEN}Configuration can be saved.")
        else:
            click.echo(f"\n{Fore.RED}Fix the errors above before saving.")

    def print_columns(self, fields: List[Field]):
        """Print DDL columns grouped by table."""
        current_table = None
        for column in fields:
            qualified_table = f"{column.schema}.{column.table}" if column.schema else column.table
            if qualified_table != current_table:
                current_table = qualified_table
                click.echo(f"\n{Fore.CYAN}{qualified_table}")

            constraints = ", ".join(c.value for c in column.constraints)
            nullable = "NULL" if column.nullable else ""
            flags = " ".join(part for part in (constraints, nullable) if part)
            click.echo(f"   • {column.name} {Fore.WHITE}{column.type}{Style.RESET_ALL} {flags}".rstrip())

    def _print_suggestions(self, suggestions: List[str]):
        if not suggestions:
            return
        click.echo(f"{Fore.CYAN}   Suggestions:")
        for suggestion in suggestions[: self.max_suggestions]:
            click.echo(f"   - {suggestion}")
        if len(suggestions) > self.max_suggestions:
            click.echo(f"   ... and {len(suggestions) - self.max_suggestions} more")


def _unique(items: List[str]) -> List[str]:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen
