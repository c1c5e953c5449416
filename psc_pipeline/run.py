"""Main pipeline runner — validates the PSC export, answers questions, builds reports."""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from psc_pipeline.config import PipelineConfig, load_pipeline_config
from psc_pipeline.domains import deficiencies
from psc_pipeline.domains.deficiencies.chat import DATA_UNAVAILABLE_MESSAGE, answer_query
from psc_pipeline.domains.deficiencies.ingest import IngestionError
from psc_pipeline.domains.deficiencies.report import build_deficiency_report, save_report
from psc_pipeline.utils.types import PipelineStatus

type DomainResult = dict[str, bool | str | int]

console = Console()


def load_run_file(path: Path) -> dict:
    """Read per-run settings from a YAML file, e.g. ``psc.yaml``."""
    import yaml
    with open(path) as f:
        return yaml.safe_load(f) or {}


def build_config(args: argparse.Namespace) -> PipelineConfig:
    overrides = None
    if args.config:
        overrides = load_run_file(Path(args.config)).get("psc") or {}
    config = load_pipeline_config(args.env, overrides=overrides)
    if args.source:
        config = replace(config, source=replace(config.source, path=args.source))
    return config


def validate_source(config: PipelineConfig) -> DomainResult:
    match deficiencies.validate(config):
        case {"status": "ok", **rest}:
            return {"domain": "deficiencies", "valid": True, **rest}
        case {"status": "error", "message": msg, **rest}:
            return {"domain": "deficiencies", "valid": False, "error": msg, **rest}
        case _:
            return {"domain": "deficiencies", "valid": False, "error": "Unknown validation result"}


def _print_validation(result: DomainResult) -> None:
    table = Table(title="Validation Results")
    table.add_column("Domain")
    table.add_column("Valid")
    table.add_column("Rows", justify="right")
    table.add_column("Quality")
    table.add_column("Details")

    status = "[green]✓[/green]" if result["valid"] else "[red]✗[/red]"
    table.add_row(
        str(result["domain"]),
        status,
        str(result.get("row_count", "-")),
        str(result.get("quality", "-")),
        escape(str(result.get("error", "OK"))),
    )
    console.print(table)


def main(argv: list[str] | None = None) -> PipelineStatus:
    parser = argparse.ArgumentParser(description="PSC deficiency analytics")
    parser.add_argument("--env", default="production", help="Config environment")
    parser.add_argument("--config", type=str, help="YAML run file with a 'psc' section")
    parser.add_argument("--source", type=str, help="Override the PSC export path or URL")
    parser.add_argument("--validate", action="store_true", help="Only validate the source file")
    parser.add_argument("--ask", type=str, help="Answer a chat question against the data")
    parser.add_argument("--report", action="store_true", help="Print the deficiencies report")
    parser.add_argument("--format", default="table", choices=["table", "json", "summary"])
    parser.add_argument("--save", action="store_true", help="Save the report under report_dir")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        config = build_config(args)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return PipelineStatus.FAILED

    if args.validate:
        result = validate_source(config)
        _print_validation(result)
        return PipelineStatus.SUCCESS if result["valid"] else PipelineStatus.FAILED

    if not (args.ask or args.report):
        console.print("[yellow]Nothing to do: pass --validate, --ask or --report[/yellow]")
        return PipelineStatus.SKIPPED

    try:
        analyzer = deficiencies.run(config)
    except IngestionError as exc:
        console.print(f"[red]Ingestion failed: {escape(str(exc))}[/red]")
        if args.ask:
            console.print(DATA_UNAVAILABLE_MESSAGE)
        return PipelineStatus.FAILED

    if args.ask:
        console.print(answer_query(analyzer, args.ask, config.analytics), markup=False)

    if args.report:
        report = build_deficiency_report(analyzer, config.analytics, output_format=args.format)
        console.print(report, markup=False, highlight=False)
        if args.save:
            save_report(report, config.report_dir, fmt=args.format)

    return PipelineStatus.SUCCESS


def cli() -> None:
    status = main()
    sys.exit(0 if status != PipelineStatus.FAILED else 1)


if __name__ == "__main__":
    cli()
