"""
On-Label Cross-Reference
========================
Counts pathogenic mutations per (gene, cancer type) and splits each gene of
interest into on-label cancer types, those an approved therapy targeting the
gene is indicated for, and off-label ones.
"""

import logging

import numpy as np
import pandas as pd
from statsmodels.stats.proportion import proportion_confint

from ..config import APPROVED_INDICATIONS, GENES_OF_INTEREST
from ..data_processing.utils import load_tsv, require_columns

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    'gene', 'on_label', 'off_label', 'total',
    'pct_on_label', 'pct_off_label', 'ci_lower', 'ci_upper',
]


def gene_count_per_indication(pathogenic: pd.DataFrame,
                              gene_col: str = 'hugo_symbol',
                              cancer_col: str = 'cancer_type') -> pd.DataFrame:
    """
    Count pathogenic rows for every (gene, cancer type) pair.

    All pairs are tabulated, zero cells included, and the zero cells are then
    dropped. Rows with no cancer type (no clinical match) are not counted.
    """
    counts = (
        pathogenic
        .groupby([gene_col, cancer_col], observed=False)
        .size()
        .reset_index(name='count')
    )
    counts[gene_col] = counts[gene_col].astype(str)
    counts[cancer_col] = counts[cancer_col].astype(str)
    counts = counts[counts['count'] > 0]
    return counts.sort_values([gene_col, 'count'], ascending=[True, False]).reset_index(drop=True)


def load_indication_map(path: str) -> dict:
    """
    Read a curated gene -> approved cancer type table.

    The file is tab-delimited with 'gene' and 'cancer_type' columns, one row
    per accepted pair.
    """
    df = load_tsv(path)
    df.columns = [c.strip().lower() for c in df.columns]
    require_columns(df, ['gene', 'cancer_type'], source=path)
    mapping = {}
    for gene, cancer_type in zip(df['gene'].str.strip(), df['cancer_type'].str.strip()):
        if gene and cancer_type:
            mapping.setdefault(gene, set()).add(cancer_type)
    logger.info(f"Loaded approved indications for {len(mapping)} genes from {path}")
    return mapping


def label_gene_counts(gene_counts: pd.DataFrame, gene: str, indications,
                      gene_col: str = 'hugo_symbol',
                      cancer_col: str = 'cancer_type') -> pd.DataFrame:
    """Rows of `gene_counts` for one gene, with an 'on_label' flag per cancer type."""
    subset = gene_counts[gene_counts[gene_col] == gene].copy()
    subset['on_label'] = subset[cancer_col].isin(set(indications))
    return subset


def on_label_by_cancer_type(gene_counts: pd.DataFrame,
                            genes=None,
                            approved_indications=None,
                            gene_col: str = 'hugo_symbol',
                            cancer_col: str = 'cancer_type') -> pd.DataFrame:
    """Per-gene cancer-type counts for the genes of interest, each flagged on- or off-label."""
    genes = GENES_OF_INTEREST if genes is None else genes
    approved_indications = APPROVED_INDICATIONS if approved_indications is None else approved_indications
    frames = [
        label_gene_counts(gene_counts, gene, approved_indications.get(gene, set()),
                          gene_col=gene_col, cancer_col=cancer_col)
        for gene in genes
    ]
    if not frames:
        return pd.DataFrame(columns=[gene_col, cancer_col, 'count', 'on_label'])
    return pd.concat(frames, ignore_index=True)


def on_label_summary(gene_counts: pd.DataFrame,
                     genes=None,
                     approved_indications=None,
                     alpha: float = 0.05,
                     gene_col: str = 'hugo_symbol',
                     cancer_col: str = 'cancer_type') -> pd.DataFrame:
    """
    Summarize on-label and off-label pathogenic counts per gene.

    Percentages are fractions of the gene's total; they and the Wilson
    confidence interval on the on-label fraction are NaN when the gene has no
    pathogenic rows.
    """
    genes = GENES_OF_INTEREST if genes is None else genes
    approved_indications = APPROVED_INDICATIONS if approved_indications is None else approved_indications

    results = []
    for gene in genes:
        indications = approved_indications.get(gene, set())
        if not indications:
            logger.warning(f"No approved indications configured for {gene}; all counts are off-label")
        labelled = label_gene_counts(gene_counts, gene, indications, gene_col=gene_col, cancer_col=cancer_col)
        on = int(labelled.loc[labelled['on_label'], 'count'].sum())
        off = int(labelled.loc[~labelled['on_label'], 'count'].sum())
        total = on + off
        if total:
            ci_lower, ci_upper = proportion_confint(on, total, alpha=alpha, method='wilson')
        else:
            ci_lower, ci_upper = np.nan, np.nan
        results.append({
            'gene': gene,
            'on_label': on,
            'off_label': off,
            'total': total,
            'pct_on_label': on / total if total else np.nan,
            'pct_off_label': off / total if total else np.nan,
            'ci_lower': ci_lower,
            'ci_upper': ci_upper,
        })
        logger.info(f"{gene}: {on} on-label, {off} off-label of {total} pathogenic mutations")
    return pd.DataFrame(results, columns=SUMMARY_COLUMNS)


def on_label_long(summary: pd.DataFrame) -> pd.DataFrame:
    """Reshape the summary to one row per (gene, label) for plotting."""
    long = summary.melt(
        id_vars='gene',
        value_vars=['on_label', 'off_label'],
        var_name='label',
        value_name='count',
    )
    long['label'] = long['label'].map({'on_label': 'On-label', 'off_label': 'Off-label'})
    return long


def indications_for_gene(therapies: pd.DataFrame, gene: str) -> pd.DataFrame:
    """
    Agents and raw indication text from the therapy table for one target gene.

    The indication text is not in the clinical cancer-type vocabulary; this
    listing is what the curated approved-indication table is reviewed against.
    """
    subset = therapies[therapies['target'].str.upper() == gene.upper()]
    return subset[['agent', 'indication']].drop_duplicates().reset_index(drop=True)
