"""Common data transformation utilities."""

import pandas as pd

type ColumnMapping = dict[str, str]


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Strip stray whitespace from header names and apply an optional rename mapping."""
    df.columns = [str(col).strip() for col in df.columns]

    if mapping:
        df = df.rename(columns={k: v for k, v in mapping.items() if k in df.columns})

    return df


def count_populated_fields(df: pd.DataFrame) -> pd.Series:
    """Number of non-empty cells in each row of a text frame."""
    if df.empty:
        return pd.Series(0, index=df.index, dtype=int)
    return (df.fillna("").astype(str).apply(lambda col: col.str.strip()) != "").sum(axis=1)


def drop_sparse_rows(df: pd.DataFrame, min_fields: int = 2) -> pd.DataFrame:
    """Remove rows with fewer than ``min_fields`` populated cells."""
    keep = count_populated_fields(df) >= min_fields
    return df[keep].reset_index(drop=True)
