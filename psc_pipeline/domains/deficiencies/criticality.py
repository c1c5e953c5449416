"""PSC action-code criticality table.

Each ``Reference Code1`` value identifies the action taken by the port state
inspector. The table maps it to a severity tier plus the action description,
e.g. ``"30"`` -> ``"Critical - Detention"``.
"""

from enum import StrEnum
from types import MappingProxyType

type ActionCode = str
type CriticalityLabel = str

DETENTION_CODE: ActionCode = "30"
UNKNOWN_CRITICALITY: CriticalityLabel = "Unknown"


class Severity(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


_ACTION_CODES: dict[ActionCode, tuple[Severity, str]] = {
    "10": (Severity.LOW, "Deficiency Rectified"),
    "15": (Severity.MEDIUM, "Rectify at Next Port"),
    "16": (Severity.MEDIUM, "Rectify Within 14 Days"),
    "18": (Severity.MEDIUM, "Rectify Within 3 Months"),
    "26": (Severity.MEDIUM, "Security Authority Informed"),
    "40": (Severity.MEDIUM, "Next Port Informed"),
    "50": (Severity.MEDIUM, "Flag State/Consul Informed"),
    "55": (Severity.MEDIUM, "Flag State Consulted"),
    "70": (Severity.MEDIUM, "Recognized Organization Informed"),
    "99": (Severity.MEDIUM, "Other"),
    "17": (Severity.HIGH, "Rectify Before Departure"),
    "19": (Severity.HIGH, "Safety Management Audit Required"),
    "21": (Severity.HIGH, "ISM System Correction Required"),
    "45": (Severity.HIGH, "Rectify Detainable Deficiency"),
    "85": (Severity.HIGH, "MARPOL Violation Investigation"),
    DETENTION_CODE: (Severity.CRITICAL, "Detention"),
}

CRITICALITY_LABELS: MappingProxyType[ActionCode, CriticalityLabel] = MappingProxyType({
    code: f"{severity} - {action}" for code, (severity, action) in _ACTION_CODES.items()
})

DETENTION_LABEL: CriticalityLabel = CRITICALITY_LABELS[DETENTION_CODE]


def criticality_for(code: ActionCode | None) -> CriticalityLabel:
    """Resolve an action code to its criticality label, ``"Unknown"`` if unmapped."""
    if code is None:
        return UNKNOWN_CRITICALITY
    return CRITICALITY_LABELS.get(code, UNKNOWN_CRITICALITY)


def severity_of(label: CriticalityLabel) -> Severity | None:
    """Extract the severity tier from a criticality label."""
    match label.partition(" - "):
        case (tier, " - ", _) if tier in Severity:
            return Severity(tier)
        case _:
            return None


def is_detention(code: ActionCode | None) -> bool:
    return code == DETENTION_CODE
