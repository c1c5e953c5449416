"""Shared utilities for the data pipeline."""

from psc_pipeline.utils.io import read_delimited_table, write_text_output
from psc_pipeline.utils.transforms import normalize_columns, drop_sparse_rows
from psc_pipeline.utils.validators import validate_dataframe, validate_required_columns
from psc_pipeline.utils.types import DataQuality, PipelineStatus, ValidationOutcome
