#!/usr/bin/env python3
"""Field Mapping Validator - Entry point."""
import logging
import time
from pathlib import Path
from typing import List, Optional

import click
from colorama import Fore, Style, init

from config import AppConfig
from fieldmap.cli.report import ReportPrinter
from fieldmap.compatibility.type_compatibility import resolve_compatibility
from fieldmap.exporter.json_exporter import JsonExporter
from fieldmap.mapper.mapping import Mapping, MappingSet
from fieldmap.parser.mapping_parser import MappingFileParser
from fieldmap.parser.sql_parser import SqlParser
from fieldmap.validator.aggregator import evaluate_all, summarize_results
from fieldmap.validator.live import observe
from fieldmap.validator.results import ValidationStatus

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Field Mapping Validator{Fore.CYAN}              ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}API → Database Compatibility Check{Fore.CYAN}   ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def load_mappings(mapping_file: str, ddl_file: Optional[str] = None) -> List[Mapping]:
    """Load mappings, resolving column references against DDL when given."""
    columns = SqlParser().parse_file(ddl_file) if ddl_file else []
    return MappingFileParser(columns).parse_file(mapping_file)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--log-level",
    default=None,
    help="Logging level (defaults to FIELDMAP_LOG_LEVEL or WARNING)",
)
@click.pass_context
def cli(ctx, log_level):
    """Field Mapping Validator - Check API field → database column mappings."""
    app_config = AppConfig.from_env()
    if log_level:
        app_config.log_level = log_level

    logging.basicConfig(
        level=getattr(logging, app_config.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = app_config


@cli.command("check-type")
@click.argument("source_type")
@click.argument("target_type")
def check_type(source_type, target_type):
    """Classify a single SOURCE_TYPE → TARGET_TYPE conversion."""
    result = resolve_compatibility(source_type, target_type)
    ReportPrinter().print_compatibility(source_type, target_type, result)


@cli.command()
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--ddl", type=click.Path(exists=True, dir_okay=False), help="CREATE TABLE script for column references")
@click.option("--output", type=click.Path(dir_okay=False), help="Write a JSON report to this file")
@click.option("--fail-on-warning", is_flag=True, help="Exit with code 1 on warnings too")
@click.pass_context
def validate(ctx, mapping_file, ddl, output, fail_on_warning):
    """Validate the mappings in MAPPING_FILE."""
    app_config: AppConfig = ctx.obj
    printer = ReportPrinter()
    print_banner()

    try:
        mappings = load_mappings(mapping_file, ddl)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"{Fore.RED}❌ {e}")
        ctx.exit(2)

    active = [m for m in mappings if m.is_active]
    printer.print_header(f"Validating {len(active)} mapping(s)")

    results = evaluate_all(active, app_config.validation)
    summary = summarize_results(results)

    printer.print_results(results)
    printer.print_summary(summary)

    if output:
        output_file = Path(output)
        # Bare file names go to the configured output directory
        if not output_file.is_absolute() and output_file.parent == Path("."):
            output_file = Path(app_config.output_dir) / output_file
        JsonExporter().export(output_file, summary, results, mapping_file)
        click.echo(f"{Fore.GREEN}Report saved to {output_file}")

    if summary.status == ValidationStatus.ERROR:
        ctx.exit(1)
    if fail_on_warning and summary.status == ValidationStatus.WARNING:
        ctx.exit(1)


@cli.command()
@click.argument("ddl_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def columns(ctx, ddl_file):
    """List the columns declared in DDL_FILE."""
    parser = SqlParser()
    try:
        fields = parser.parse_file(ddl_file)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"{Fore.RED}❌ {e}")
        ctx.exit(2)

    click.echo(f"Dialect: {parser.dialect}  Columns: {len(fields)}")
    ReportPrinter().print_columns(fields)


@cli.command()
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--ddl", type=click.Path(exists=True, dir_okay=False), help="CREATE TABLE script for column references")
@click.option("--interval", type=float, default=1.0, show_default=True, help="Polling interval in seconds")
@click.option("--debounce", type=float, default=None, help="Quiet period before re-validating (seconds)")
@click.option("--max-polls", type=int, default=None, hidden=True)
@click.pass_context
def watch(ctx, mapping_file, ddl, interval, debounce, max_polls):
    """Re-validate MAPPING_FILE every time it changes."""
    app_config: AppConfig = ctx.obj
    printer = ReportPrinter()
    store = MappingSet()
    path = Path(mapping_file)

    def on_change(snapshot):
        printer.print_header(f"Validated at {snapshot.validated_at:%H:%M:%S}")
        printer.print_results(snapshot.results)
        printer.print_summary(snapshot.summary)

    def reload():
        try:
            mappings = load_mappings(mapping_file, ddl)
        except (FileNotFoundError, ValueError) as e:
            click.echo(f"{Fore.RED}❌ {e}")
            return
        store.replace_all([m for m in mappings if m.is_active])

    reload()
    unsubscribe = observe(store, on_change, app_config.validation, debounce)
    click.echo(f"{Fore.CYAN}Watching {mapping_file} (Ctrl+C to stop)")

    last_mtime = path.stat().st_mtime
    polls = 0
    try:
        while max_polls is None or polls < max_polls:
            time.sleep(interval)
            polls += 1
            if not path.exists():
                continue
            mtime = path.stat().st_mtime
            if mtime != last_mtime:
                last_mtime = mtime
                logger.info(f"{mapping_file} changed, reloading")
                reload()
    except KeyboardInterrupt:
        click.echo(f"\n{Fore.YELLOW}Stopped watching.")
    finally:
        unsubscribe()


if __name__ == "__main__":
    cli()
