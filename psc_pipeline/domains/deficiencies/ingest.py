"""Ingest the consolidated PSC inspection export."""

import logging
from collections.abc import Callable

import pandas as pd

from psc_pipeline.domains.deficiencies.records import RawRecord
from psc_pipeline.utils.io import FilePath, read_delimited_table
from psc_pipeline.utils.transforms import drop_sparse_rows, normalize_columns

logger = logging.getLogger(__name__)

MIN_POPULATED_FIELDS = 2

# Header spellings seen in older exports
LEGACY_HEADER_MAP: dict[str, str] = {
    "Reference Code 1": "Reference Code1",
    "Nature of Deficiency": "Nature of deficiency",
    "Inspection From Date": "Inspection - From Date",
}


class IngestionError(RuntimeError):
    """The PSC source could not be read. Distinct from an empty dataset."""


def _trim_to_header(width: int) -> Callable[[list[str]], list[str]]:
    """Keep rows longer than the header, dropping the surplus trailing cells."""

    def _trim(cells: list[str]) -> list[str]:
        logger.warning(f"Row with {len(cells)} cells exceeds the {width}-column header; extra cells dropped")
        return cells[:width]

    return _trim


def read_deficiency_table(
    source: FilePath,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> pd.DataFrame:
    """Read the PSC export and drop blank or malformed lines.

    A row survives when at least two of its cells are populated. Short rows
    are padded with ``""`` and long rows are cut to the header width. A file
    with a header and no data rows yields an empty frame; anything that
    prevents reading the file raises ``IngestionError``.
    """
    logger.info(f"Reading PSC deficiency export from {source}")
    try:
        header = read_delimited_table(source, delimiter=delimiter, encoding=encoding, nrows=0)
        raw = read_delimited_table(
            source,
            delimiter=delimiter,
            encoding=encoding,
            on_bad_lines=_trim_to_header(len(header.columns)),
        )
    except pd.errors.EmptyDataError as exc:
        logger.error(f"PSC source {source} has no header row")
        raise IngestionError(f"No columns to parse in {source}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        logger.error(f"Malformed PSC source {source}: {exc}")
        raise IngestionError(f"Could not parse {source}: {exc}") from exc
    except OSError as exc:
        logger.error(f"Could not open PSC source {source}: {exc}")
        raise IngestionError(f"Could not read {source}: {exc}") from exc

    df = normalize_columns(raw, LEGACY_HEADER_MAP)
    cleaned = drop_sparse_rows(df, min_fields=MIN_POPULATED_FIELDS)

    dropped = len(df) - len(cleaned)
    if dropped:
        logger.warning(f"Dropped {dropped} rows with fewer than {MIN_POPULATED_FIELDS} populated fields")

    logger.info(f"Ingested {len(cleaned)} PSC deficiency rows")
    return cleaned


def to_raw_records(df: pd.DataFrame) -> list[RawRecord]:
    """One header-keyed mapping per data row."""
    return [{str(k): v for k, v in row.items()} for row in df.to_dict(orient="records")]


def load_raw_records(
    source: FilePath,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> list[RawRecord]:
    return to_raw_records(read_deficiency_table(source, delimiter=delimiter, encoding=encoding))
