import logging
import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

from .on_label import on_label_long

logger = logging.getLogger(__name__)

LABEL_COLORS = {'On-label': '#1b9e77', 'Off-label': '#d95f02'}


def plot_on_label_dodged(summary, output_file):
    """Side-by-side bars of on-label and off-label counts per gene."""
    long = on_label_long(summary)
    plt.figure(figsize=(10, 6))
    sns.barplot(data=long, x='gene', y='count', hue='label', palette=LABEL_COLORS)
    plt.title('Pathogenic Mutations by Label Status per Gene')
    plt.xlabel('Gene')
    plt.ylabel('Pathogenic mutations')
    plt.xticks(rotation=45)
    plt.legend(title='')
    plt.tight_layout()
    plt.savefig(output_file, dpi=300)
    plt.close()
    logger.info(f"Saved dodged bar chart to {output_file}")
    return output_file


def plot_on_label_stacked(summary, output_file):
    """Stacked bars of on-label and off-label counts per gene."""
    table = summary.set_index('gene')[['on_label', 'off_label']].rename(
        columns={'on_label': 'On-label', 'off_label': 'Off-label'}
    )
    fig, ax = plt.subplots(figsize=(10, 6))
    table.plot(kind='bar', stacked=True, ax=ax,
               color=[LABEL_COLORS['On-label'], LABEL_COLORS['Off-label']])
    ax.set_title('Pathogenic Mutations by Label Status per Gene (stacked)')
    ax.set_xlabel('Gene')
    ax.set_ylabel('Pathogenic mutations')
    plt.xticks(rotation=45)
    plt.tight_layout()
    fig.savefig(output_file, dpi=300)
    plt.close(fig)
    logger.info(f"Saved stacked bar chart to {output_file}")
    return output_file


def plot_on_label(summary, plots_dir):
    """Write both on/off-label charts to `plots_dir`."""
    if summary.empty:
        logger.warning("No on-label summary to plot.")
        return []
    os.makedirs(plots_dir, exist_ok=True)
    return [
        plot_on_label_dodged(summary, os.path.join(plots_dir, 'on_label_dodged.png')),
        plot_on_label_stacked(summary, os.path.join(plots_dir, 'on_label_stacked.png')),
    ]
