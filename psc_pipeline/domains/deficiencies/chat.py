"""Keyword-routed answers for the PSC deficiency chat assistant.

The router lower-cases the question and walks ``ROUTES`` in order; the first
route whose trigger phrase appears in the question answers it. Questions
matching nothing get the help text.
"""

from collections.abc import Callable
from dataclasses import dataclass

from psc_pipeline.config import AnalyticsConfig
from psc_pipeline.domains.deficiencies.analytics import DeficiencyAnalyzer
from psc_pipeline.domains.deficiencies.report import rank_ports

type Handler = Callable[[DeficiencyAnalyzer, str, AnalyticsConfig], str]

DATA_UNAVAILABLE_MESSAGE = "PSC data is not available yet. Please try again once the data has loaded."

HELP_MESSAGE = "\n".join([
    "I can help you with PSC deficiencies analysis. Try asking:",
    "",
    "• Show common deficiencies",
    "• Show detention cases",
    "• Show deficiencies by criticality",
    "• Show port-wise analysis",
    "• Search [term] for specific deficiencies",
    "",
    "You can also generate a defects report with --report.",
])


@dataclass(frozen=True)
class QueryRoute:
    name: str
    trigger: str
    handler: Handler

    def matches(self, query: str) -> bool:
        return self.trigger in query


def _answer_common(analyzer: DeficiencyAnalyzer, query: str, config: AnalyticsConfig) -> str:
    common = analyzer.common_deficiencies(limit=config.common_limit)
    lines = [f"{i}. {nature}\n   Occurrences: {count}" for i, (nature, count) in enumerate(common, 1)]
    return "Most common PSC deficiencies:\n\n" + "\n\n".join(lines)


def _answer_detention(analyzer: DeficiencyAnalyzer, query: str, config: AnalyticsConfig) -> str:
    cases = analyzer.detention_analysis()[: config.detention_preview]
    blocks = [
        f"Port: {d.port}, {d.country}\n"
        f"Date: {d.date}\n"
        f"Vessel Type: {d.vessel_type}\n"
        f"Reason: {d.deficiency}"
        for d in cases
    ]
    return "Recent Detention Cases:\n\n" + "\n\n".join(blocks)


def _answer_criticality(analyzer: DeficiencyAnalyzer, query: str, config: AnalyticsConfig) -> str:
    counts = analyzer.deficiencies_by_criticality()
    lines = [f"{level}: {count} cases" for level, count in counts.items()]
    return "Deficiencies by Criticality Level:\n\n" + "\n\n".join(lines)


def _answer_ports(analyzer: DeficiencyAnalyzer, query: str, config: AnalyticsConfig) -> str:
    ranked = rank_ports(analyzer.deficiencies_by_port(), top=config.port_ranking)
    blocks = [
        f"{port}, {summary.country}\n"
        f"Total deficiencies: {summary.count}\n"
        f"Detentions: {summary.detentions}"
        for port, summary in ranked
    ]
    return "Top Ports with Deficiencies:\n\n" + "\n\n".join(blocks)


def _answer_search(analyzer: DeficiencyAnalyzer, query: str, config: AnalyticsConfig) -> str:
    term = extract_search_term(query)
    results = analyzer.search_deficiencies(term, limit=config.search_limit)
    lines = [
        f"{i}. {r.nature_of_deficiency}\n   Criticality: {r.criticality}"
        for i, r in enumerate(results, 1)
    ]
    return f'Search results for "{term}":\n\n' + "\n\n".join(lines)


ROUTES: tuple[QueryRoute, ...] = (
    QueryRoute("common_deficiencies", "common deficiencies", _answer_common),
    QueryRoute("detention", "detention", _answer_detention),
    QueryRoute("criticality", "criticality", _answer_criticality),
    QueryRoute("port", "port", _answer_ports),
    QueryRoute("search", "search", _answer_search),
)


def extract_search_term(query: str) -> str:
    """Text after the first ``search`` keyword, trimmed and lower-cased."""
    return query.lower().replace("search", "", 1).strip()


def route_query(query: str) -> QueryRoute | None:
    lowered = query.lower()
    for route in ROUTES:
        if route.matches(lowered):
            return route
    return None


def answer_query(
    analyzer: DeficiencyAnalyzer | None,
    query: str,
    config: AnalyticsConfig | None = None,
) -> str:
    """Render a chat answer for ``query``.

    ``analyzer`` is ``None`` while the data is loading or after ingestion
    failed; that case is reported as unavailable, never as an empty answer.
    """
    if analyzer is None:
        return DATA_UNAVAILABLE_MESSAGE

    route = route_query(query)
    if route is None:
        return HELP_MESSAGE
    return route.handler(analyzer, query.lower(), config or AnalyticsConfig())
