"""
On-Label Therapy Analysis Pipeline
==================================
Runs the full analysis:
- Loading the clinical, mutation and targeted-therapy tables
- Writing descriptive statistics
- Joining mutations to samples and keeping pathogenic variants
- Counting pathogenic mutations per gene and cancer type
- Splitting genes of interest into on-label and off-label counts
- Plotting the on/off-label split
"""

import argparse
import logging
import os
import sys

import pandas as pd

from .config import APPROVED_INDICATIONS, CONFIG, GENES_OF_INTEREST
from .data_processing import (
    describe_clinical,
    describe_mutations,
    generate_reports,
    load_clinical_table,
    load_mutation_table,
    load_therapy_table,
    save_results,
)
from .errors import GenieAnalysisError
from .therapy_analysis import (
    filter_pathogenic,
    gene_count_per_indication,
    indications_for_gene,
    join_mutations_clinical,
    load_indication_map,
    on_label_by_cancer_type,
    on_label_summary,
    pathogenic_ratios,
    plot_on_label,
)

logger = logging.getLogger(__name__)


def setup_logging(output_dir, level=logging.INFO):
    """Log to the console and to `<output_dir>/processing_log.txt`."""
    os.makedirs(output_dir, exist_ok=True)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(os.path.join(output_dir, CONFIG['log_file'])),
        ],
        force=True,
    )


def run_analysis(clinical_file, mutation_file, therapy_html, output_dir,
                 approved_indications=None, genes=None,
                 refresh_therapies=False, make_plots=True):
    """
    Run every stage and write reports and plots under `output_dir`.

    Returns:
        dict: The intermediate and final tables, keyed by stage name.
    """
    approved_indications = APPROVED_INDICATIONS if approved_indications is None else approved_indications
    genes = GENES_OF_INTEREST if genes is None else genes
    reports_dir = os.path.join(output_dir, CONFIG['reports_dir'])
    plots_dir = os.path.join(output_dir, CONFIG['plots_dir'])

    clinical = load_clinical_table(clinical_file)
    mutations = load_mutation_table(mutation_file)
    therapies = load_therapy_table(
        therapy_html,
        os.path.join(output_dir, CONFIG['therapy_cache']),
        refresh=refresh_therapies,
    )

    generate_reports(describe_clinical(clinical), reports_dir)
    generate_reports(describe_mutations(mutations), reports_dir)

    joined = join_mutations_clinical(mutations, clinical)
    annotated, pathogenic = filter_pathogenic(joined)
    ratios = pathogenic_ratios(joined, annotated, pathogenic)
    save_results(pd.DataFrame([ratios]), 'pathogenic_ratios.csv', reports_dir)
    print(
        f"Pathogenic mutations: {ratios['pathogenic']} "
        f"({ratios['pathogenic_of_total']:.4f} of all, "
        f"{ratios['pathogenic_of_annotated']:.4f} of annotated)"
    )

    gene_counts = gene_count_per_indication(pathogenic)
    save_results(gene_counts, 'gene_count_per_indication.csv', reports_dir)

    for gene in genes:
        listed = indications_for_gene(therapies, gene)
        logger.info(
            f"{gene}: {len(listed)} therapy indications listed; "
            f"curated as {sorted(approved_indications.get(gene, set()))}"
        )

    by_cancer_type = on_label_by_cancer_type(gene_counts, genes=genes, approved_indications=approved_indications)
    save_results(by_cancer_type, 'on_label_by_cancer_type.csv', reports_dir)

    summary = on_label_summary(gene_counts, genes=genes, approved_indications=approved_indications)
    save_results(summary, 'on_label_summary.csv', reports_dir)
    print(summary.to_string(index=False))

    if make_plots:
        plot_on_label(summary, plots_dir)

    return {
        'clinical': clinical,
        'mutations': mutations,
        'therapies': therapies,
        'joined': joined,
        'ratios': ratios,
        'pathogenic': pathogenic,
        'gene_counts': gene_counts,
        'by_cancer_type': by_cancer_type,
        'summary': summary,
    }


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Estimate on-label rates for pathogenic mutations")
    parser.add_argument("--base-path", default=CONFIG['base_path'])
    parser.add_argument("--output-dir", default=CONFIG['output_dir'],
                        help="Output directory, relative to --base-path unless absolute")
    parser.add_argument("--clinical-file", help="Override the clinical table path")
    parser.add_argument("--mutation-file", help="Override the MAF mutation table path")
    parser.add_argument("--therapy-html", help="Override the saved therapy page path")
    parser.add_argument("--indication-map",
                        help="Tab-delimited gene/cancer_type file replacing the curated indications")
    parser.add_argument("--refresh-therapies", action='store_true',
                        help="Parse the therapy page again even if a cached table exists")
    parser.add_argument("--no-plots", action='store_true', help="Skip the bar charts")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    data_dir = os.path.join(args.base_path, CONFIG['data_dir'])
    output_dir = os.path.join(args.base_path, args.output_dir)
    setup_logging(output_dir)
    logger.info("Logging setup complete. Starting processing...")

    try:
        approved = load_indication_map(args.indication_map) if args.indication_map else None
        run_analysis(
            args.clinical_file or os.path.join(data_dir, CONFIG['clinical_file']),
            args.mutation_file or os.path.join(data_dir, CONFIG['mutation_file']),
            args.therapy_html or os.path.join(data_dir, CONFIG['therapy_html']),
            output_dir,
            approved_indications=approved,
            refresh_therapies=args.refresh_therapies,
            make_plots=not args.no_plots,
        )
    except GenieAnalysisError as e:
        logger.error(f"Analysis aborted: {e}")
        return 1
    logger.info(f"Results saved to {output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
