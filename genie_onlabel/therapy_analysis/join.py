import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

PATHOGENIC_TERM = 'pathogenic'


def join_mutations_clinical(mutations: pd.DataFrame, clinical: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join mutation rows to clinical samples on the sample identifier.

    Every mutation row is kept exactly once; rows whose sample is not in the
    clinical table carry missing clinical fields. Clinical columns that clash
    with mutation columns get a '_clinical' suffix.
    """
    duplicated = clinical['sample_id'].duplicated()
    if duplicated.any():
        logger.warning(
            f"Dropping {duplicated.sum()} duplicate clinical rows for sample ids "
            f"{sorted(clinical.loc[duplicated, 'sample_id'].unique())[:10]}"
        )
        clinical = clinical.loc[~duplicated]

    joined = mutations.merge(
        clinical,
        how='left',
        left_on='tumor_sample_barcode',
        right_on='sample_id',
        suffixes=('', '_clinical'),
        validate='many_to_one',
    )
    unmatched = joined['sample_id'].isna().sum()
    logger.info(
        f"Joined {len(mutations)} mutations to {len(clinical)} samples; "
        f"{unmatched} mutations have no clinical record"
    )
    return joined


def filter_pathogenic(joined: pd.DataFrame, column: str = 'clin_sig'):
    """
    Restrict to rows whose clinical-significance text contains 'pathogenic'.

    Rows with no annotation are removed first. The match is a case-sensitive
    substring test, so 'likely_pathogenic' is kept as well.

    Returns:
        tuple: (annotated rows, pathogenic rows)
    """
    annotated = joined[joined[column].notna()]
    is_pathogenic = annotated[column].astype(str).str.contains(PATHOGENIC_TERM, regex=False, na=False)
    pathogenic = annotated[is_pathogenic.astype(bool)]
    logger.info(f"{len(annotated)} annotated mutations, {len(pathogenic)} pathogenic")
    return annotated, pathogenic


def _ratio(numerator, denominator):
    return numerator / denominator if denominator else np.nan


def pathogenic_ratios(joined: pd.DataFrame, annotated: pd.DataFrame, pathogenic: pd.DataFrame) -> dict:
    """
    Share of pathogenic rows among all joined rows and among annotated rows,
    using the two frames returned by `filter_pathogenic`.
    """
    ratios = {
        'total': len(joined),
        'annotated': len(annotated),
        'pathogenic': len(pathogenic),
        'pathogenic_of_total': _ratio(len(pathogenic), len(joined)),
        'pathogenic_of_annotated': _ratio(len(pathogenic), len(annotated)),
    }
    logger.info(
        f"Pathogenic share: {ratios['pathogenic_of_total']:.4f} of all mutations, "
        f"{ratios['pathogenic_of_annotated']:.4f} of annotated mutations"
    )
    return ratios
