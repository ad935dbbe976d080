import logging

import pandas as pd

from ..config import MUTATION_CATEGORICAL_COLUMNS, MUTATION_COLUMNS
from .utils import blank_to_missing, load_tsv, lowercase_columns, require_columns, to_categorical

logger = logging.getLogger(__name__)

POSITION_COLUMNS = ['start_position', 'end_position']


def load_mutation_table(path: str, header_lines: int = 1) -> pd.DataFrame:
    """
    Load a MAF mutation table, skipping the leading version line(s).

    The table is projected to the eleven analysis columns. If the leading line
    was missing, the first data row is consumed as the header and the column
    check below fails rather than silently producing a misaligned table.
    Blank cells become NaN, and gene, center, build, chromosome, variant and
    clinical-significance columns become categoricals.
    """
    df = lowercase_columns(load_tsv(path, skiprows=header_lines))
    require_columns(df, MUTATION_COLUMNS, source=path)

    df = blank_to_missing(df[MUTATION_COLUMNS])
    for col in POSITION_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce').astype('Int64')
    df = to_categorical(df, MUTATION_CATEGORICAL_COLUMNS)

    logger.info(
        f"Mutation table: {len(df)} variants across "
        f"{df['tumor_sample_barcode'].nunique()} samples, "
        f"{df['clin_sig'].notna().sum()} with clinical significance"
    )
    return df
