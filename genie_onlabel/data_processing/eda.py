"""
Descriptive Statistics
======================
Summaries of the clinical and mutation tables:
- Age at sequencing distribution
- Sample counts by center, demographics, sample type and cancer type
- Variant counts by classification, type and clinical significance
"""

import logging

import pandas as pd

from .utils import save_results

logger = logging.getLogger(__name__)

CLINICAL_COUNT_COLUMNS = ['center', 'sex', 'primary_race', 'ethnicity', 'sample_type']
MUTATION_COUNT_COLUMNS = ['variant_classification', 'variant_type', 'clin_sig']


def value_counts_table(series: pd.Series, top=None) -> pd.DataFrame:
    """Counts and proportions of each value, including missing, largest first."""
    counts = series.value_counts(dropna=False)
    counts = counts[counts > 0]
    table = pd.DataFrame({
        series.name: counts.index.astype(object),
        'count': counts.values,
        'proportion': counts.values / counts.sum() if counts.sum() else counts.values,
    })
    if top is not None:
        table = table.head(top)
    return table.reset_index(drop=True)


def describe_clinical(clinical: pd.DataFrame, top_cancer_types: int = 20) -> dict:
    """Return a dict of summary tables for the clinical sample table."""
    summaries = {
        'age_summary': clinical['age_at_seq_report'].describe().to_frame().reset_index()
            .rename(columns={'index': 'statistic'}),
    }
    for col in CLINICAL_COUNT_COLUMNS:
        if col in clinical.columns:
            summaries[f'{col}_counts'] = value_counts_table(clinical[col])
    summaries['cancer_type_counts'] = value_counts_table(clinical['cancer_type'], top=top_cancer_types)
    logger.info(
        f"Clinical summary: {len(clinical)} samples, "
        f"median age {clinical['age_at_seq_report'].median()}"
    )
    return summaries


def describe_mutations(mutations: pd.DataFrame) -> dict:
    """Return a dict of summary tables for the mutation table."""
    summaries = {
        'mutation_overview': pd.DataFrame({
            'statistic': ['variants', 'samples', 'genes', 'annotated_variants'],
            'value': [
                len(mutations),
                mutations['tumor_sample_barcode'].nunique(),
                mutations['hugo_symbol'].nunique(),
                int(mutations['clin_sig'].notna().sum()),
            ],
        }),
    }
    for col in MUTATION_COUNT_COLUMNS:
        summaries[f'{col}_counts'] = value_counts_table(mutations[col])
    logger.info(
        f"Mutation summary: {len(mutations)} variants in "
        f"{mutations['hugo_symbol'].nunique()} genes"
    )
    return summaries


def generate_reports(summaries: dict, reports_dir: str) -> list:
    """Write each summary table to `<reports_dir>/<name>.csv`."""
    if not summaries:
        logger.warning("No summaries to write.")
        return []
    return [save_results(table, f'{name}.csv', reports_dir) for name, table in summaries.items()]
