from __future__ import annotations

from pathlib import Path

import pandas as pd


def read_dataframe(path: str | Path) -> pd.DataFrame:
    """
    Read CSV or Parquet into a pandas DataFrame.
    Parquet needs the `parquet` extra (pyarrow).
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"data file not found: {p}")
    if p.suffix.lower() in {".parquet", ".pq"}:
        return pd.read_parquet(p)
    # default to CSV; let pandas infer
    return pd.read_csv(p)


def load_series(path: str | Path, column: str = "x") -> list[float]:
    """
    One column of a CSV/Parquet file, in file order, as plain floats.
    Blank cells come back as NaN and are rejected later at ingestion, not here.
    """
    df = read_dataframe(path)
    if column not in df.columns:
        raise KeyError(f"Missing required column '{column}' in {path}, got columns: {list(df.columns)}")
    return [float(v) for v in pd.to_numeric(df[column], errors="raise").tolist()]
