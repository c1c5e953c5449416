"""Deficiencies domain — PSC inspection findings, detentions, and port rankings."""

import logging
from datetime import datetime

from psc_pipeline.config import PipelineConfig, load_pipeline_config
from psc_pipeline.domains.deficiencies.analytics import DeficiencyAnalyzer
from psc_pipeline.domains.deficiencies.ingest import (
    IngestionError,
    read_deficiency_table,
    to_raw_records,
)
from psc_pipeline.domains.deficiencies.models import RawDeficiencySchema
from psc_pipeline.domains.deficiencies.records import RECORD_COLUMNS
from psc_pipeline.domains.deficiencies.transform import classify
from psc_pipeline.utils.transforms import count_populated_fields
from psc_pipeline.utils.types import DatasetMetadata, ValidationOutcome, classify_quality
from psc_pipeline.utils.validators import validate_dataframe, validate_required_columns

logger = logging.getLogger(__name__)


def _describe(df, name: str, schema_result: dict) -> DatasetMetadata:
    present = [col for col in RECORD_COLUMNS if col in df.columns]
    if df.empty or not present:
        completeness = 0.0
    else:
        completeness = float(count_populated_fields(df[present]).sum()) / (len(df) * len(RECORD_COLUMNS))
    accuracy = 1.0 if schema_result["valid"] else 0.0
    return DatasetMetadata(
        name=name,
        row_count=len(df),
        column_count=len(df.columns),
        quality=classify_quality(completeness, accuracy),
        loaded_at=datetime.now(),
    )


def validate(config: PipelineConfig | None = None) -> ValidationOutcome:
    """Check the configured PSC export against the raw schema."""
    config = config or load_pipeline_config()
    try:
        df = read_deficiency_table(
            config.source.path,
            delimiter=config.source.delimiter,
            encoding=config.source.encoding,
        )
    except IngestionError as exc:
        return {"status": "error", "message": str(exc)}

    columns = validate_required_columns(df, RECORD_COLUMNS)
    schema = validate_dataframe(df, RawDeficiencySchema)
    errors = [*columns["errors"], *schema["errors"]]
    metadata = _describe(df, config.source.path, schema)

    if errors:
        return {
            "status": "error",
            "message": f"{len(errors)} issues; first: {errors[0]}",
            "errors": errors,
            "row_count": metadata.row_count,
            "quality": str(metadata.quality),
        }
    return {"status": "ok", "row_count": metadata.row_count, "quality": str(metadata.quality)}


def run(config: PipelineConfig | None = None) -> DeficiencyAnalyzer:
    """Load, classify, and build the analyzer for the configured PSC export.

    Raises ``IngestionError`` when the source cannot be read. Schema issues
    are logged and do not stop the run.
    """
    config = config or load_pipeline_config()
    df = read_deficiency_table(
        config.source.path,
        delimiter=config.source.delimiter,
        encoding=config.source.encoding,
    )

    outcome = validate_dataframe(df, RawDeficiencySchema)
    if not outcome["valid"]:
        logger.warning(f"PSC data quality issues: {outcome['errors'][:5]}")

    return DeficiencyAnalyzer(classify(to_raw_records(df)))
