"""
Configuration for the on-label analysis: input file locations, output layout,
and the curated reference tables the pipeline relies on.
"""

import os

# Configuration dictionary for file paths and output layout
CONFIG = {
    'base_path': os.getcwd(),
    'data_dir': 'data',
    'clinical_file': 'data_clinical.txt',
    'mutation_file': 'data_mutations_extended.txt',
    'therapy_html': 'targeted_therapies.html',
    'output_dir': 'output/onlabel_analysis',
    'therapy_cache': 'therapies_tidy.tsv',
    'plots_dir': 'plots',
    'reports_dir': 'reports',
    'log_file': 'processing_log.txt',
}

# Explicit center code -> institution lookup, keyed by the literal raw code
CENTER_NAMES = {
    'DFCI': 'Dana-Farber Cancer Institute',
    'GRCC': 'Gustave Roussy Cancer Campus',
    'JHU': 'Johns Hopkins Sidney Kimmel Comprehensive Cancer Center',
    'MDA': 'MD Anderson Cancer Center',
    'MSK': 'Memorial Sloan Kettering Cancer Center',
    'NKI': 'Netherlands Cancer Institute',
    'UHN': 'Princess Margaret Cancer Centre',
    'VICC': 'Vanderbilt-Ingram Cancer Center',
}

# Age values that are censored or blank in the clinical release
AGE_MISSING_SENTINELS = {'', '<18', '>89'}

CLINICAL_CATEGORICAL_COLUMNS = [
    'center',
    'sex',
    'primary_race',
    'ethnicity',
    'cancer_type',
    'cancer_type_detailed',
    'sample_type',
    'seq_assay_id',
]
CLINICAL_REQUIRED_COLUMNS = ['sample_id', 'age_at_seq_report'] + CLINICAL_CATEGORICAL_COLUMNS

MUTATION_COLUMNS = [
    'hugo_symbol',
    'entrez_gene_id',
    'center',
    'ncbi_build',
    'chromosome',
    'start_position',
    'end_position',
    'variant_classification',
    'variant_type',
    'tumor_sample_barcode',
    'clin_sig',
]
MUTATION_CATEGORICAL_COLUMNS = [
    'hugo_symbol',
    'center',
    'ncbi_build',
    'chromosome',
    'variant_classification',
    'variant_type',
    'clin_sig',
]

# Characters the therapy page is known to carry in a broken or non-ASCII form.
# No replacement contains a key, so substitution is idempotent.
MISENCODED_CHARACTERS = {
    '\u03b1': 'A',   # Greek alpha, e.g. PDGFR-alpha
    '\u03b2': 'B',   # Greek beta
    '\u2019': "'",   # right single quotation mark
    '\u00a0': ' ',   # non-breaking space
}

GENES_OF_INTEREST = [
    'ALK', 'BRAF', 'EGFR', 'ERBB2', 'IDH1',
    'KIT', 'MET', 'PDGFRA', 'PIK3CA', 'ROS1',
]

# Gene -> cancer types (clinical vocabulary) covered by an approved therapy
# targeting that gene. Curated by reading the therapy table per gene.
APPROVED_INDICATIONS = {
    'ALK': {'Non-Small Cell Lung Cancer'},
    'BRAF': {'Melanoma', 'Non-Small Cell Lung Cancer', 'Thyroid Cancer', 'Colorectal Cancer'},
    'EGFR': {'Non-Small Cell Lung Cancer', 'Colorectal Cancer', 'Pancreatic Cancer', 'Head and Neck Cancer'},
    'ERBB2': {'Breast Cancer', 'Esophagogastric Cancer'},
    'IDH1': {'Leukemia', 'Cholangiocarcinoma'},
    'KIT': {'Gastrointestinal Stromal Tumor', 'Leukemia', 'Mastocytosis'},
    'MET': {'Renal Cell Carcinoma', 'Non-Small Cell Lung Cancer'},
    'PDGFRA': {'Gastrointestinal Stromal Tumor'},
    'PIK3CA': {'Breast Cancer'},
    'ROS1': {'Non-Small Cell Lung Cancer'},
}
