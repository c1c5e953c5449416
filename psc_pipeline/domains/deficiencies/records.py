"""Typed views of PSC inspection records and of the analytics results."""

from collections.abc import Mapping
from dataclasses import dataclass

# Header names as they appear in the consolidated PSC export
NATURE_OF_DEFICIENCY = "Nature of deficiency"
REFERENCE_CODE = "Reference Code1"
PORT_NAME = "Port Name"
COUNTRY = "Country"
INSPECTION_FROM_DATE = "Inspection - From Date"
VESSEL_TYPE = "Vessel Type"

RECORD_COLUMNS: tuple[str, ...] = (
    NATURE_OF_DEFICIENCY,
    REFERENCE_CODE,
    PORT_NAME,
    COUNTRY,
    INSPECTION_FROM_DATE,
    VESSEL_TYPE,
)

type RawRecord = Mapping[str, str]


@dataclass(frozen=True)
class DeficiencyRecord:
    """A single classified deficiency line.

    Only the columns read by the analytics are kept; any other column of the
    source file stays with the raw table.
    """

    nature_of_deficiency: str | None = None
    reference_code: str | None = None
    port_name: str | None = None
    country: str | None = None
    inspection_date: str | None = None
    vessel_type: str | None = None
    criticality: str = "Unknown"


@dataclass(frozen=True)
class DetentionCase:
    port: str
    country: str
    date: str
    deficiency: str
    vessel_type: str


@dataclass(frozen=True)
class PortSummary:
    count: int
    country: str
    detentions: int
