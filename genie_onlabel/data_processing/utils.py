import logging
import os

import numpy as np
import pandas as pd

from ..errors import MissingInputError, SchemaMismatchError

logger = logging.getLogger(__name__)


def load_tsv(path: str, skiprows: int = 0, **kwargs) -> pd.DataFrame:
    """
    Read a tab-delimited file, handling a UTF-8 BOM if present.

    Every cell is read as a string and blank cells stay as empty strings, so
    that callers decide what counts as missing.
    """
    if not os.path.isfile(path):
        logger.error(f"File not found: {path}")
        raise MissingInputError(path)
    try:
        df = pd.read_csv(
            path,
            sep='\t',
            skiprows=skiprows,
            dtype=str,
            keep_default_na=False,
            encoding='utf-8-sig',
            **kwargs
        )
    except pd.errors.EmptyDataError:
        # no header at all; column checks downstream report what is missing
        logger.warning(f"No columns to parse in {path}")
        return pd.DataFrame()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error loading {path}: {e}")
        raise MissingInputError(path) from e
    logger.info(f"Loaded {path} with shape {df.shape}")
    return df


def lowercase_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of `df` with all column names lower-cased and stripped."""
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df


def require_columns(df: pd.DataFrame, columns, source: str) -> None:
    """Raise SchemaMismatchError if any of `columns` is absent from `df`."""
    missing_cols = [col for col in columns if col not in df.columns]
    if missing_cols:
        logger.error(f"{source} is missing required columns: {missing_cols}")
        raise SchemaMismatchError(source, missing_cols)


def blank_to_missing(df: pd.DataFrame) -> pd.DataFrame:
    """Replace empty or whitespace-only string cells with NaN."""
    return df.replace(r'^\s*$', np.nan, regex=True)


def to_categorical(df: pd.DataFrame, columns) -> pd.DataFrame:
    """Convert the named columns to pandas categoricals."""
    df = df.copy()
    for col in columns:
        df[col] = df[col].astype('category')
    return df


def save_results(df, filename, output_dir, index=False):
    """
    Save a DataFrame to a CSV file in the output directory.

    Args:
        df (pd.DataFrame): DataFrame to save.
        filename (str): Name of the output file.
        output_dir (str): Directory to save the file.
        index (bool): Whether to write the index.

    Returns:
        str: Path of the written file.
    """
    os.makedirs(output_dir, exist_ok=True)
    output_file = os.path.join(output_dir, filename)
    df.to_csv(output_file, index=index)
    logger.info(f"Saved results to {output_file}")
    return output_file
