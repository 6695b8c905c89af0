"""
Projection of VEP records into the table drawn by a waterfall (mutation landscape) plot: one consequence per
sample and gene
"""
from typing import Dict, Optional, Sequence, Union

import pandas as pd

from .constants import COLUMNS, MEGABASE, WATERFALL_COLUMNS
from .hierarchy import consequence_ranks, resolve_consequence
from .util import logger, narrator
from .vep.records import VepRecords

_RANK = '_rank'
_ORDER = '_order'


def check_label_column(
    records: VepRecords, label_column: Optional[Union[str, Sequence[str]]]
) -> Optional[str]:
    """
    Returns:
        the meta column to use as the label or None if no valid column was given
    """
    if label_column is None:
        return None
    if not isinstance(label_column, str):
        candidates = list(label_column)
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.warning(
                f'more than one label column given ({", ".join([str(c) for c in candidates])}), using {candidates[0]}'
            )
        label_column = candidates[0]
    if label_column not in records.meta.columns:
        logger.warning(
            f'label column ({label_column}) was not found in the meta columns, no label will be added'
        )
        return None
    return label_column


def to_waterfall(
    records: VepRecords,
    hierarchy: pd.DataFrame,
    label_column: Optional[Union[str, Sequence[str]]] = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Select the most severe consequence for each sample and gene

    Args:
        records: the annotation records
        hierarchy: the mutation hierarchy (see set_mutation_hierarchy)
        label_column: name of a meta column to carry through as the label
        verbose: report progress

    Returns:
        table with the columns sample, gene, mutation and (when a valid label column is given) label. Compound
        consequences which are not hierarchy entries are reported as their most severe component
    """
    narrate = narrator(verbose)
    label_column = check_label_column(records, label_column)

    df = pd.DataFrame(
        {
            COLUMNS.sample: records.sample[COLUMNS.sample],
            COLUMNS.gene: records.meta[COLUMNS.symbol],
            COLUMNS.mutation: records.mutation[COLUMNS.consequence],
        }
    )
    if label_column:
        df[COLUMNS.label] = records.meta[label_column]

    narrate('resolving consequences with the mutation hierarchy')
    ranks = consequence_ranks(hierarchy, records.version)
    resolved = {
        term: resolve_consequence(term, ranks)
        for term in pd.unique(df[COLUMNS.mutation])
        if isinstance(term, str)
    }
    unresolved_rank = max(ranks.values(), default=-1) + 1
    df[_RANK] = df[COLUMNS.mutation].map(lambda t: resolved[t][1] if t in resolved else unresolved_rank)
    df[COLUMNS.mutation] = df[COLUMNS.mutation].map(lambda t: resolved[t][0] if t in resolved else t)
    df[_ORDER] = range(len(df))

    missing_gene = df[COLUMNS.gene].isna()
    if missing_gene.any():
        logger.warning(
            f'dropping {missing_gene.sum()} annotation record(s) without a gene symbol ({COLUMNS.symbol})'
        )
        df = df[~missing_gene]

    narrate('removing all but the most severe consequence for each sample/gene')
    df = (
        df.sort_values([_RANK, _ORDER], kind='mergesort')
        .drop_duplicates([COLUMNS.sample, COLUMNS.gene], keep='first')
        .sort_values(_ORDER, kind='mergesort')
    )
    columns = WATERFALL_COLUMNS + ([COLUMNS.label] if label_column else [])
    narrate(f'{len(df)} sample/gene rows in the waterfall table')
    return df[columns].reset_index(drop=True)


def calc_mutation_burden(
    waterfall: pd.DataFrame, coverage: Optional[Union[int, float, Dict[str, float]]] = None
) -> pd.DataFrame:
    """
    Count the mutations of each sample

    Args:
        waterfall: the waterfall table
        coverage: the number of bases covered (for all samples or by sample). When given, the burden is also
            reported as mutations per megabase

    Returns:
        table with the columns sample, mutation_total and (when coverage is given) mutation_burden
    """
    counts = (
        waterfall.groupby(COLUMNS.sample, sort=False)
        .size()
        .reset_index(name=COLUMNS.mutation_total)
    )
    if coverage is None:
        return counts
    if isinstance(coverage, dict):
        missing = [s for s in counts[COLUMNS.sample] if s not in coverage]
        if missing:
            raise KeyError('coverage was not given for the samples', missing)
        bases = counts[COLUMNS.sample].map(coverage).astype(float)
    else:
        bases = float(coverage)
    counts[COLUMNS.mutation_burden] = counts[COLUMNS.mutation_total] / bases * MEGABASE
    return counts


def calc_gene_frequency(waterfall: pd.DataFrame) -> pd.DataFrame:
    """
    Count the samples mutated in each gene, most frequently mutated genes first

    Returns:
        table with the columns gene, sample_count and frequency (fraction of the samples in the table)
    """
    total_samples = waterfall[COLUMNS.sample].nunique()
    genes = (
        waterfall.groupby(COLUMNS.gene, sort=False)[COLUMNS.sample]
        .nunique()
        .reset_index(name=COLUMNS.sample_count)
    )
    genes[COLUMNS.frequency] = genes[COLUMNS.sample_count] / total_samples if total_samples else 0.0
    genes = genes.sort_values(COLUMNS.sample_count, ascending=False, kind='mergesort')
    return genes.reset_index(drop=True)
