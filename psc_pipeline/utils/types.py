"""Shared type definitions for the pipeline."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

type ValidationOutcome = dict[str, bool | str | int | list[str]]


class PipelineStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class DataQuality(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DatasetMetadata:
    name: str
    row_count: int
    column_count: int
    quality: DataQuality
    loaded_at: datetime


def classify_quality(completeness: float, accuracy: float) -> DataQuality:
    match (completeness, accuracy):
        case (c, a) if c > 0.95 and a > 0.95:
            return DataQuality.HIGH
        case (c, a) if c > 0.80 and a > 0.80:
            return DataQuality.MEDIUM
        case (c, a) if c > 0.50 or a > 0.50:
            return DataQuality.LOW
        case _:
            return DataQuality.UNKNOWN
