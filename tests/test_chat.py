"""Unit tests for the keyword query router and chat answers."""

from __future__ import annotations

import pytest

from psc_pipeline.config import AnalyticsConfig
from psc_pipeline.domains.deficiencies.analytics import DeficiencyAnalyzer
from psc_pipeline.domains.deficiencies.chat import (
    DATA_UNAVAILABLE_MESSAGE,
    HELP_MESSAGE,
    ROUTES,
    answer_query,
    extract_search_term,
    route_query,
)


class TestRouting:
    def test_route_order_is_fixed(self) -> None:
        assert [r.name for r in ROUTES] == [
            "common_deficiencies",
            "detention",
            "criticality",
            "port",
            "search",
        ]

    @pytest.mark.parametrize(
        "query, expected",
        [
            ("Show COMMON deficiencies", "common_deficiencies"),
            ("show detention cases", "detention"),
            ("deficiencies by criticality", "criticality"),
            ("port-wise analysis", "port"),
            ("search fire", "search"),
        ],
    )
    def test_routes_by_keyword(self, query: str, expected: str) -> None:
        route = route_query(query)
        assert route is not None
        assert route.name == expected

    def test_first_match_wins(self) -> None:
        assert route_query("detention by port").name == "detention"
        assert route_query("search port state").name == "port"
        assert route_query("common deficiencies with detention").name == "common_deficiencies"

    def test_no_match(self) -> None:
        assert route_query("hello there") is None
        assert route_query("") is None

    @pytest.mark.parametrize(
        "query, term",
        [
            ("search fire doors", "fire doors"),
            ("Search   Charts  ", "charts"),
            ("please search lifeboat search", "please  lifeboat search"),
            ("search", ""),
        ],
    )
    def test_extract_search_term(self, query: str, term: str) -> None:
        assert extract_search_term(query) == term


class TestAnswers:
    def test_unavailable_when_not_loaded(self) -> None:
        assert answer_query(None, "common deficiencies") == DATA_UNAVAILABLE_MESSAGE

    def test_help_on_unknown_question(self, fleet_analyzer: DeficiencyAnalyzer) -> None:
        assert answer_query(fleet_analyzer, "what is the weather") == HELP_MESSAGE

    def test_common_deficiencies(self, scenario_analyzer: DeficiencyAnalyzer) -> None:
        assert answer_query(scenario_analyzer, "Show common deficiencies") == (
            "Most common PSC deficiencies:\n\n"
            "1. Fire doors\n   Occurrences: 2\n\n"
            "2. Charts\n   Occurrences: 1"
        )

    def test_detention_preview_is_capped(self, fleet_analyzer: DeficiencyAnalyzer) -> None:
        text = answer_query(fleet_analyzer, "detention cases", AnalyticsConfig(detention_preview=2))
        assert text.startswith("Recent Detention Cases:")
        assert "Port: Rotterdam, NL" in text
        assert "Port: Antwerp, BE" in text
        assert "Houston" not in text
        assert "Vessel Type: Bulk Carrier" in text

    def test_criticality(self, scenario_analyzer: DeficiencyAnalyzer) -> None:
        text = answer_query(scenario_analyzer, "criticality")
        assert "Critical - Detention: 1 cases" in text
        assert "Low - Deficiency Rectified: 1 cases" in text

    def test_top_ports(self, fleet_analyzer: DeficiencyAnalyzer) -> None:
        text = answer_query(fleet_analyzer, "which port", AnalyticsConfig(port_ranking=2))
        assert text == (
            "Top Ports with Deficiencies:\n\n"
            "Houston, US\nTotal deficiencies: 3\nDetentions: 1\n\n"
            "Rotterdam, NL\nTotal deficiencies: 3\nDetentions: 1"
        )

    def test_search(self, fleet_analyzer: DeficiencyAnalyzer) -> None:
        text = answer_query(fleet_analyzer, "Search FIRE")
        assert text.startswith('Search results for "fire":')
        assert "1. Fire doors\n   Criticality: Critical - Detention" in text
        assert "3. FIRE DETECTION system" in text

    def test_search_without_matches(self, fleet_analyzer: DeficiencyAnalyzer) -> None:
        assert answer_query(fleet_analyzer, "search ballast") == 'Search results for "ballast":\n\n'
