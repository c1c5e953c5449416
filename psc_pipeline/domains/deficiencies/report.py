"""PSC deficiencies report: text tables, JSON, or a short summary.

Converts the analyzer views into report sections for printing, saving, or
handing to a document renderer.
"""

import json
from collections import Counter
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from psc_pipeline.config import AnalyticsConfig
from psc_pipeline.domains.deficiencies.analytics import DeficiencyAnalyzer
from psc_pipeline.domains.deficiencies.criticality import severity_of
from psc_pipeline.domains.deficiencies.records import PortSummary
from psc_pipeline.utils.io import write_text_output

type ReportFormat = str  # "table" | "json" | "summary"
type ReportSection = dict[str, str | list[str] | list[list[str]]]

REPORT_TITLE = "PSC Deficiencies Report"
NUMERIC_COLUMNS = {"#", "Occurrences", "Cases", "Deficiencies", "Detentions"}


def rank_ports(ports: dict[str, PortSummary], top: int) -> list[tuple[str, PortSummary]]:
    """Ports ordered by deficiency count, highest first; ties keep input order."""
    ranked = sorted(ports.items(), key=lambda item: item[1].count, reverse=True)
    return ranked[: max(top, 0)]


def _common_section(analyzer: DeficiencyAnalyzer, config: AnalyticsConfig) -> ReportSection:
    rows = [
        [str(i), nature, str(count)]
        for i, (nature, count) in enumerate(analyzer.common_deficiencies(limit=config.common_limit), 1)
    ]
    return {"title": "Most Common Deficiencies", "columns": ["#", "Deficiency", "Occurrences"], "rows": rows}


def _criticality_section(analyzer: DeficiencyAnalyzer) -> ReportSection:
    counts = analyzer.deficiencies_by_criticality()
    rows = [
        [label, str(count)]
        for label, count in sorted(counts.items(), key=lambda item: item[1], reverse=True)
    ]

    tiers: Counter[str] = Counter()
    for label, count in counts.items():
        severity = severity_of(label)
        tiers[str(severity) if severity else label] += count
    notes = [f"{tier}: {count}" for tier, count in tiers.most_common()]

    return {
        "title": "Deficiencies by Criticality",
        "columns": ["Criticality", "Cases"],
        "rows": rows,
        "notes": notes,
    }


def _port_section(analyzer: DeficiencyAnalyzer, config: AnalyticsConfig) -> ReportSection:
    ranked = rank_ports(analyzer.deficiencies_by_port(), top=config.port_ranking)
    rows = [
        [port, summary.country, str(summary.count), str(summary.detentions)]
        for port, summary in ranked
    ]
    return {
        "title": "Top Ports with Deficiencies",
        "columns": ["Port", "Country", "Deficiencies", "Detentions"],
        "rows": rows,
    }


def _detention_section(analyzer: DeficiencyAnalyzer, config: AnalyticsConfig) -> ReportSection:
    cases = analyzer.detention_analysis()
    rows = [
        [d.port, d.country, d.date, d.vessel_type, d.deficiency]
        for d in cases[: config.detention_preview]
    ]
    return {
        "title": "Detention Cases",
        "columns": ["Port", "Country", "Date", "Vessel Type", "Reason"],
        "rows": rows,
        "notes": [f"{len(cases)} detentions in total"],
    }


def build_sections(analyzer: DeficiencyAnalyzer, config: AnalyticsConfig) -> list[ReportSection]:
    return [
        _common_section(analyzer, config),
        _criticality_section(analyzer),
        _port_section(analyzer, config),
        _detention_section(analyzer, config),
    ]


def build_deficiency_report(
    analyzer: DeficiencyAnalyzer,
    config: AnalyticsConfig | None = None,
    output_format: ReportFormat = "table",
) -> str:
    """Assemble the report sections and render them in ``output_format``."""
    sections = build_sections(analyzer, config or AnalyticsConfig())

    match output_format:
        case "json":
            return _to_json(analyzer, sections)
        case "summary":
            return _to_summary(analyzer, sections)
        case "table":
            return _to_table(analyzer, sections)
        case other:
            raise ValueError(f"Unsupported report format: {other}")


def _to_json(analyzer: DeficiencyAnalyzer, sections: list[ReportSection]) -> str:
    report = {
        "title": REPORT_TITLE,
        "timestamp": datetime.now().isoformat(),
        "total_records": len(analyzer),
        "criticality": analyzer.deficiencies_by_criticality(),
        "ports": {port: asdict(summary) for port, summary in analyzer.deficiencies_by_port().items()},
        "sections": sections,
    }
    return json.dumps(report, indent=2)


def _to_summary(analyzer: DeficiencyAnalyzer, sections: list[ReportSection]) -> str:
    lines = [f"[{REPORT_TITLE}] {len(analyzer)} deficiency records"]
    for section in sections:
        lines.append(f"  {section['title']}: {len(section['rows'])} rows")
        for note in section.get("notes", []):
            lines.append(f"    {note}")
    return "\n".join(lines)


def _to_table(analyzer: DeficiencyAnalyzer, sections: list[ReportSection]) -> str:
    buf = Console(file=None, force_terminal=False, width=120)
    with buf.capture() as capture:
        buf.print(f"[bold]{REPORT_TITLE}[/bold] ({len(analyzer)} records)")
        for section in sections:
            table = Table(title=section["title"])
            for column in section["columns"]:
                table.add_column(column, justify="right" if column in NUMERIC_COLUMNS else "left")
            for row in section["rows"]:
                table.add_row(*(escape(cell) for cell in row))
            buf.print(table)
            for note in section.get("notes", []):
                buf.print(f"  {escape(note)}")
    return capture.get()


def save_report(report: str, output_dir: Path, fmt: ReportFormat = "json") -> Path:
    """Persist a rendered report under a timestamped file name."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    suffix = "json" if fmt == "json" else "txt"
    return write_text_output(report, Path(output_dir) / f"psc_deficiencies_{timestamp}.{suffix}")
