"""Normalize raw PSC inspection rows and attach their criticality label."""

import logging
from collections import Counter
from collections.abc import Iterable

from psc_pipeline.domains.deficiencies.criticality import UNKNOWN_CRITICALITY, criticality_for
from psc_pipeline.domains.deficiencies.records import (
    COUNTRY,
    INSPECTION_FROM_DATE,
    NATURE_OF_DEFICIENCY,
    PORT_NAME,
    REFERENCE_CODE,
    VESSEL_TYPE,
    DeficiencyRecord,
    RawRecord,
)

logger = logging.getLogger(__name__)


def _to_record(raw: RawRecord) -> DeficiencyRecord:
    code = raw.get(REFERENCE_CODE)
    return DeficiencyRecord(
        nature_of_deficiency=raw.get(NATURE_OF_DEFICIENCY),
        reference_code=code,
        port_name=raw.get(PORT_NAME),
        country=raw.get(COUNTRY),
        inspection_date=raw.get(INSPECTION_FROM_DATE),
        vessel_type=raw.get(VESSEL_TYPE),
        criticality=criticality_for(code),
    )


def classify(raw_records: Iterable[RawRecord]) -> list[DeficiencyRecord]:
    """Map raw rows onto ``DeficiencyRecord`` in input order.

    No row is dropped here: blank lines are filtered during ingestion, and
    missing columns simply come through as ``None``.
    """
    records = [_to_record(raw) for raw in raw_records]

    unmapped = Counter(
        r.reference_code for r in records if r.criticality == UNKNOWN_CRITICALITY
    )
    if unmapped:
        logger.warning(
            f"{sum(unmapped.values())} records have unmapped action codes: "
            f"{sorted(str(code) for code in unmapped)}"
        )

    logger.info(f"Classified {len(records)} deficiency records")
    return records
