"""
Therapy cross-reference package: mutation/clinical join, pathogenicity
filter, on-label aggregation and plots.
"""

from .join import filter_pathogenic, join_mutations_clinical, pathogenic_ratios
from .on_label import (
    gene_count_per_indication,
    indications_for_gene,
    load_indication_map,
    on_label_by_cancer_type,
    on_label_long,
    on_label_summary,
)
from .plots import plot_on_label
