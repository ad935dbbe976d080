"""
Targeted Therapy Table
======================
Turns the saved HTML page listing targeted cancer therapies into a tidy table
with one row per (agent, target, indication), and caches the result so later
runs can skip parsing the page.
"""

import logging
import os
import re

import pandas as pd
from bs4 import BeautifulSoup

from ..config import MISENCODED_CHARACTERS
from ..errors import MissingInputError, SchemaMismatchError
from .utils import load_tsv, require_columns

logger = logging.getLogger(__name__)

THERAPY_COLUMNS = ['agent', 'target', 'indication']

# Header keyword -> raw column name
HEADER_KEYWORDS = {
    'agent': 'agent',
    'target': 'targets',
    'indication': 'indications',
}

_WHITESPACE = re.compile(r'[ \t\r\n]+')


def _cell_lines(cell):
    """Split a table cell into its lines: list items, <br>-separated runs or paragraphs."""
    items = cell.find_all('li')
    if items:
        lines = [li.get_text(' ') for li in items]
    else:
        for br in cell.find_all('br'):
            br.replace_with('\n')
        blocks = cell.find_all('p') or [cell]
        lines = [line for block in blocks for line in block.get_text().split('\n')]
    lines = [_WHITESPACE.sub(' ', line).strip() for line in lines]
    return [line for line in lines if line]


def _cell_text(cell):
    return _WHITESPACE.sub(' ', cell.get_text(' ')).strip()


def parse_therapy_html(html: str) -> pd.DataFrame:
    """
    Parse the first table of the therapy page.

    Returns one row per agent with columns 'agent', 'targets' (comma-joined)
    and 'indications' (newline-joined).
    """
    soup = BeautifulSoup(html, 'html.parser')
    table = soup.find('table')
    if table is None:
        raise SchemaMismatchError('therapy page', ['<table>'])

    rows = table.find_all('tr')
    header = [_cell_text(c).lower() for c in rows[0].find_all(['th', 'td'])] if rows else []
    positions = {}
    for keyword, column in HEADER_KEYWORDS.items():
        idx = next((i for i, name in enumerate(header) if keyword in name), None)
        if idx is not None:
            positions[column] = idx
    missing = [column for column in HEADER_KEYWORDS.values() if column not in positions]
    if missing:
        raise SchemaMismatchError('therapy table', missing)

    records = []
    for row in rows[1:]:
        cells = row.find_all(['th', 'td'])
        if len(cells) <= max(positions.values()):
            continue
        records.append({
            'agent': _cell_text(cells[positions['agent']]),
            'targets': ', '.join(_cell_lines(cells[positions['targets']])),
            'indications': '\n'.join(_cell_lines(cells[positions['indications']])),
        })
    logger.info(f"Parsed {len(records)} agents from the therapy table")
    return pd.DataFrame(records, columns=['agent', 'targets', 'indications'])


def explode_therapies(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Expand each agent row into every (target, indication) combination.

    Targets are split on commas and indications on newlines; the two splits
    are exploded one after the other, which yields the full cross product.
    """
    df = raw.copy()
    df['target'] = df['targets'].fillna('').str.split(',')
    df = df.explode('target')
    df['indication'] = df['indications'].fillna('').str.split('\n')
    df = df.explode('indication')
    return df[THERAPY_COLUMNS].reset_index(drop=True)


def clean_therapy_text(values: pd.Series) -> pd.Series:
    """Substitute known mis-encoded characters with ASCII equivalents."""
    values = values.astype(str)
    for bad, good in MISENCODED_CHARACTERS.items():
        values = values.str.replace(bad, good, regex=False)
    return values


def tidy_therapies(raw: pd.DataFrame) -> pd.DataFrame:
    """Explode, clean and trim the raw therapy rows into TherapyRecord rows."""
    df = explode_therapies(raw)
    for col in THERAPY_COLUMNS:
        df[col] = clean_therapy_text(df[col]).str.strip()
    df = df[(df['target'] != '') & (df['indication'] != '')]
    df = df.drop_duplicates().reset_index(drop=True)
    logger.info(
        f"Tidy therapy table: {len(df)} rows, {df['agent'].nunique()} agents, "
        f"{df['target'].nunique()} targets"
    )
    return df


def scrape_therapy_table(html_path: str) -> pd.DataFrame:
    """Read the saved HTML page and return the tidy therapy table."""
    if not os.path.isfile(html_path):
        logger.error(f"Therapy page not found: {html_path}")
        raise MissingInputError(html_path)
    try:
        with open(html_path, 'r', encoding='utf-8') as f:
            html = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading therapy page {html_path}: {e}")
        raise MissingInputError(html_path) from e
    return tidy_therapies(parse_therapy_html(html))


def load_therapy_table(html_path: str, cache_path: str, refresh: bool = False) -> pd.DataFrame:
    """
    Return the tidy therapy table, reading `cache_path` when it exists.

    With `refresh`, or when there is no cache yet, the HTML page is parsed
    again and the cache is rewritten.
    """
    if not refresh and os.path.isfile(cache_path):
        df = load_tsv(cache_path)
        require_columns(df, THERAPY_COLUMNS, source=cache_path)
        logger.info(f"Using cached therapy table {cache_path}")
        return df[THERAPY_COLUMNS]

    df = scrape_therapy_table(html_path)
    cache_dir = os.path.dirname(cache_path)
    if cache_dir:
        os.makedirs(cache_dir, exist_ok=True)
    df.to_csv(cache_path, sep='\t', index=False)
    logger.info(f"Cached therapy table to {cache_path}")
    return df
