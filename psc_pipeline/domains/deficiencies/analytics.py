"""Aggregate views over a classified PSC deficiency snapshot.

The analyzer is built once from the classified records and every query runs
over the full snapshot. Results are fresh Python objects on each call, so
nothing a caller does with them can leak into the next query.
"""

import logging
from collections.abc import Iterable

import pandas as pd

from psc_pipeline.domains.deficiencies.criticality import is_detention
from psc_pipeline.domains.deficiencies.records import (
    DeficiencyRecord,
    DetentionCase,
    PortSummary,
)

type DeficiencyCount = tuple[str, int]

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10

_FRAME_COLUMNS = [
    "nature",
    "code",
    "port",
    "country",
    "date",
    "vessel_type",
    "criticality",
    "detained",
]


def _build_frame(records: list[DeficiencyRecord]) -> pd.DataFrame:
    """Flatten records into a string-only frame; absent values become ``""``."""
    rows = [
        {
            "nature": r.nature_of_deficiency or "",
            "code": r.reference_code or "",
            "port": r.port_name or "",
            "country": r.country or "",
            "date": r.inspection_date or "",
            "vessel_type": r.vessel_type or "",
            "criticality": r.criticality,
            "detained": is_detention(r.reference_code),
        }
        for r in records
    ]
    frame = pd.DataFrame(rows, columns=_FRAME_COLUMNS)
    frame["detained"] = frame["detained"].astype(bool)
    return frame


class DeficiencyAnalyzer:
    """Read-only analytics over a fixed set of ``DeficiencyRecord``."""

    def __init__(self, records: Iterable[DeficiencyRecord]):
        self._records: tuple[DeficiencyRecord, ...] = tuple(records)
        self._frame = _build_frame(list(self._records))
        logger.info(f"Analyzer ready with {len(self._records)} records")

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[DeficiencyRecord, ...]:
        return self._records

    def common_deficiencies(self, limit: int = DEFAULT_LIMIT) -> list[DeficiencyCount]:
        """Most frequent deficiency descriptions, highest count first.

        Blank descriptions are not counted. Equal counts keep the order in
        which the description was first seen.
        """
        described = self._frame.loc[self._frame["nature"] != "", "nature"]
        counts = (
            described.groupby(described, sort=False)
            .size()
            .sort_values(ascending=False, kind="stable")
        )
        return [(str(nature), int(n)) for nature, n in counts.head(max(limit, 0)).items()]

    def deficiencies_by_criticality(self) -> dict[str, int]:
        counts = self._frame.groupby("criticality", sort=False).size()
        return {str(label): int(n) for label, n in counts.items()}

    def detention_analysis(self) -> list[DetentionCase]:
        """Every detention record in dataset order."""
        detained = self._frame[self._frame["detained"]]
        return [
            DetentionCase(
                port=row.port,
                country=row.country,
                date=row.date,
                deficiency=row.nature,
                vessel_type=row.vessel_type,
            )
            for row in detained.itertuples(index=False)
        ]

    def deficiencies_by_port(self) -> dict[str, PortSummary]:
        """Deficiency and detention counts per port.

        Records without a port are grouped under ``""``. The country is the
        one on the first record seen for the port.
        """
        if self._frame.empty:
            return {}

        grouped = self._frame.groupby("port", sort=False).agg(
            count=("detained", "size"),
            country=("country", "first"),
            detentions=("detained", "sum"),
        )
        return {
            str(port): PortSummary(
                count=int(row["count"]),
                country=str(row["country"]),
                detentions=int(row["detentions"]),
            )
            for port, row in grouped.to_dict(orient="index").items()
        }

    def search_deficiencies(self, term: str, limit: int = DEFAULT_LIMIT) -> list[DeficiencyRecord]:
        """Records whose description contains ``term``, ignoring case.

        An empty term matches every record that has a description.
        """
        if self._frame.empty:
            return []

        nature = self._frame["nature"]
        hits = (nature != "") & nature.str.lower().str.contains(term.lower(), regex=False, na=False)
        positions = hits.to_numpy().nonzero()[0][: max(limit, 0)]
        return [self._records[i] for i in positions]
