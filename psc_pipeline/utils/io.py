"""File I/O utilities for reading source tables and writing reports."""

import tomllib
from collections.abc import Callable
from pathlib import Path

import pandas as pd
from rich.console import Console

type FilePath = str | Path

console = Console()


def read_delimited_table(
    source: FilePath,
    delimiter: str = ",",
    encoding: str = "utf-8",
    nrows: int | None = None,
    on_bad_lines: Callable[[list[str]], list[str] | None] | None = None,
) -> pd.DataFrame:
    """Read a delimited text file with a header row, keeping every value as text.

    Empty cells come back as ``""`` rather than NaN so that codes such as
    ``"030"`` or ``"NA"`` are never reinterpreted. Cells missing from short
    rows are filled with ``""`` as well. ``on_bad_lines`` receives the cells
    of any row longer than the header and returns the cells to keep.
    """
    options = {
        "sep": delimiter,
        "encoding": encoding,
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "nrows": nrows,
    }
    if on_bad_lines is not None:
        options.update(engine="python", index_col=False, on_bad_lines=on_bad_lines)

    return pd.read_csv(source, **options).fillna("")


def write_text_output(content: str, path: FilePath) -> Path:
    """Write rendered text to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    console.print(f"  Wrote {len(content)} characters to {path}")
    return path


def load_toml_config(path: FilePath) -> dict:
    """Load a TOML configuration file using Python 3.11+ stdlib."""
    with open(path, "rb") as f:
        return tomllib.load(f)
