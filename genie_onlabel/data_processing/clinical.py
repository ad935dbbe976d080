import logging

import numpy as np
import pandas as pd

from ..config import AGE_MISSING_SENTINELS, CENTER_NAMES, CLINICAL_CATEGORICAL_COLUMNS, CLINICAL_REQUIRED_COLUMNS
from .utils import blank_to_missing, load_tsv, lowercase_columns, require_columns, to_categorical

logger = logging.getLogger(__name__)


def convert_age(age):
    """
    Convert an age-at-sequencing value to a float.

    Blank and censored values ('<18', '>89') become NaN. Values that are
    neither finite numbers nor a known sentinel ("nan", "inf", "unknown")
    also become NaN and are logged.
    """
    if age is None or (isinstance(age, float) and np.isnan(age)):
        return np.nan
    text = str(age).strip()
    if text in AGE_MISSING_SENTINELS:
        return np.nan
    try:
        value = float(text)
    except ValueError:
        value = np.nan
    if np.isfinite(value):
        return value
    logger.warning(f"Unrecognized age value {age!r}; treating as missing")
    return np.nan


def map_center_names(centers: pd.Series, lookup=None) -> pd.Series:
    """
    Map raw center codes to institution names through an explicit lookup.

    The result is categorical over the lookup's names; codes that are not in
    the lookup become missing.
    """
    lookup = CENTER_NAMES if lookup is None else lookup
    raw = centers.astype('object')
    unknown = sorted(set(raw.dropna()) - set(lookup) - {''})
    if unknown:
        logger.warning(f"Unknown center codes treated as missing: {unknown}")
    names = raw.map(lookup)
    return pd.Series(
        pd.Categorical(names, categories=list(lookup.values())),
        index=centers.index,
        name=centers.name,
    )


def load_clinical_table(path: str, center_lookup=None) -> pd.DataFrame:
    """
    Load the tab-delimited clinical sample table, normalize column names to
    lowercase, and coerce age and categorical columns.

    No rows are dropped.
    """
    df = lowercase_columns(load_tsv(path))
    require_columns(df, CLINICAL_REQUIRED_COLUMNS, source=path)

    df['age_at_seq_report'] = df['age_at_seq_report'].apply(convert_age).astype(float)

    categorical = [c for c in CLINICAL_CATEGORICAL_COLUMNS if c != 'center']
    df[categorical] = blank_to_missing(df[categorical])
    df = to_categorical(df, categorical)
    df['center'] = map_center_names(df['center'], lookup=center_lookup)

    logger.info(
        f"Clinical table: {len(df)} samples, "
        f"{df['age_at_seq_report'].isna().sum()} with missing age"
    )
    return df
