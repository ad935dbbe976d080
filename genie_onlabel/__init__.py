"""
Source code for the GENIE on-label therapy analysis.

This package contains modules for loading, cleaning, and joining clinical,
mutation, and targeted-therapy tables, and for estimating how often patients
with pathogenic mutations have a cancer type matching an approved indication.
"""
