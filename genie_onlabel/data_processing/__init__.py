"""
Data Processing module for clinical, mutation, and targeted-therapy tables.

This package provides utilities for:
- Clinical sample table loading and normalization
- MAF mutation table loading and projection
- Targeted therapy page parsing, tidying and caching
- Descriptive statistics over the loaded tables
"""

# Version information
__version__ = "1.0.0"

# Make key functions available at package level
from .utils import load_tsv, save_results
from .clinical import convert_age, load_clinical_table, map_center_names
from .mutations import load_mutation_table
from .therapies import (
    clean_therapy_text,
    explode_therapies,
    load_therapy_table,
    parse_therapy_html,
    tidy_therapies,
)
from .eda import describe_clinical, describe_mutations, generate_reports
