"""
Ranking of VEP consequence terms. The hierarchy decides which consequence is reported when a sample has more
than one annotation for the same gene

The hierarchy is a table with the columns

- mutation: a consequence term (or a comma delimited compound term given explicitly by the user)
- color: the color used for the term in plots
- label: a rank marker which orders the rows, rebuilt every time the hierarchy is set

where the row order is the priority, highest first.
"""
from typing import Dict, List, Tuple

import pandas as pd
from colour import Color

from .constants import COLUMNS, GREY_GRADIENT, HIERARCHY_COLUMNS
from .error import HierarchyFormatError
from .util import logger, narrator
from .vep.constants import CONSEQUENCE_DELIM, CONSEQUENCE_HIERARCHY
from .vep.records import VepRecords


def default_hierarchy(version: int) -> pd.DataFrame:
    """
    Returns:
        a new table of the default (mutation, color) ranking for a VEP version
    """
    return pd.DataFrame(
        [list(row) for row in CONSEQUENCE_HIERARCHY[version]],
        columns=[COLUMNS.mutation, COLUMNS.color],
    )


def split_consequence(term: str) -> List[str]:
    """
    Example:
        >>> split_consequence('missense_variant,splice_region_variant')
        ['missense_variant', 'splice_region_variant']
    """
    return [t.strip() for t in term.split(CONSEQUENCE_DELIM) if t.strip()]


def rank_labels(count: int) -> List[str]:
    """
    zero-padded labels which sort in the same order as the hierarchy rows

    Example:
        >>> rank_labels(3)
        ['1', '2', '3']
        >>> rank_labels(10)[:2]
        ['01', '02']
    """
    width = len(str(count))
    return [str(i).zfill(width) for i in range(1, count + 1)]


def synthesize_colors(count: int) -> List[str]:
    """
    colors for consequence terms which do not have a default color, a gradient of greys
    """
    if count <= 0:
        return []
    if count == 1:
        return [Color(GREY_GRADIENT[0]).hex_l]
    return [c.hex_l for c in Color(GREY_GRADIENT[0]).range_to(Color(GREY_GRADIENT[1]), count)]


def _check_user_hierarchy(mutation_hierarchy, narrate) -> pd.DataFrame:
    if not isinstance(mutation_hierarchy, pd.DataFrame):
        logger.warning(
            f'mutation hierarchy is of type {type(mutation_hierarchy).__name__}, converting to a pandas DataFrame'
        )
        mutation_hierarchy = pd.DataFrame(mutation_hierarchy)

    if mutation_hierarchy.shape[1] == 0:
        narrate('the mutation hierarchy given is empty')
        return pd.DataFrame({COLUMNS.mutation: [], COLUMNS.color: []}, dtype=object)

    missing_columns = [
        c for c in [COLUMNS.mutation, COLUMNS.color] if c not in mutation_hierarchy.columns
    ]
    if missing_columns:
        raise HierarchyFormatError(
            f'the mutation hierarchy must have the columns {COLUMNS.mutation} and {COLUMNS.color}. '
            f'Found: {", ".join([str(c) for c in mutation_hierarchy.columns])}'
        )
    hierarchy = mutation_hierarchy[[COLUMNS.mutation, COLUMNS.color]].reset_index(drop=True)
    terms = hierarchy[COLUMNS.mutation].where(hierarchy[COLUMNS.mutation].notna(), '')
    hierarchy = hierarchy.assign(**{COLUMNS.mutation: terms.astype(str).str.strip()})

    blank = hierarchy[COLUMNS.mutation] == ''
    if blank.any():
        logger.warning(
            f'removing {blank.sum()} mutation hierarchy row(s) without a mutation term: rows '
            + ', '.join([str(i) for i in hierarchy.index[blank]])
        )
        hierarchy = hierarchy[~blank].reset_index(drop=True)

    duplicated = hierarchy[COLUMNS.mutation].duplicated(keep='first')
    if duplicated.any():
        dups = pd.unique(hierarchy.loc[duplicated, COLUMNS.mutation])
        logger.warning(
            f'removing duplicate entries from the mutation hierarchy (keeping the first): {", ".join(dups)}'
        )
        hierarchy = hierarchy[~duplicated].reset_index(drop=True)
    return hierarchy


def set_mutation_hierarchy(
    records: VepRecords, mutation_hierarchy=None, verbose: bool = False
) -> pd.DataFrame:
    """
    Build the hierarchy of consequence terms for a set of VEP records

    Args:
        records: the annotation records the hierarchy must cover
        mutation_hierarchy: a table with the columns mutation and color, highest priority first. The default VEP
            ranking is used when not given
        verbose: report progress

    Returns:
        table with the columns mutation, color and label. Every consequence term in the records is either an
        entry or is a compound term whose component terms are all entries

    Raises:
        HierarchyFormatError: the mutation hierarchy given does not have the expected columns
    """
    narrate = narrator(verbose)
    default = CONSEQUENCE_HIERARCHY[records.version]
    default_order = {term: i for i, (term, _) in enumerate(default)}
    default_colors = dict(default)

    if mutation_hierarchy is None:
        narrate(f'no mutation hierarchy given, using the default ranking for VEP v{records.version}')
        hierarchy = default_hierarchy(records.version)
    else:
        narrate('checking the mutation hierarchy given')
        hierarchy = _check_user_hierarchy(mutation_hierarchy, narrate)

    # compound terms given verbatim are kept whole, any others only need their components to be ranked
    known = set(hierarchy[COLUMNS.mutation])
    missing: List[str] = []
    for term in records.consequences():
        if term in known:
            continue
        for component in split_consequence(term):
            if component not in known and component not in missing:
                missing.append(component)

    if missing:
        ranked = sorted([t for t in missing if t in default_order], key=lambda t: default_order[t])
        unranked = [t for t in missing if t not in default_order]
        logger.warning(
            'the following mutations were not in the mutation hierarchy and were added with the lowest priority: '
            + ', '.join(ranked + unranked)
        )
        appended = pd.DataFrame(
            {
                COLUMNS.mutation: ranked + unranked,
                COLUMNS.color: [default_colors[t] for t in ranked] + synthesize_colors(len(unranked)),
            }
        )
        hierarchy = pd.concat([hierarchy, appended], ignore_index=True)

    hierarchy = hierarchy.assign(**{COLUMNS.label: rank_labels(len(hierarchy))})
    narrate(f'mutation hierarchy set with {len(hierarchy)} entries')
    return hierarchy[HIERARCHY_COLUMNS].reset_index(drop=True)


def consequence_ranks(hierarchy: pd.DataFrame, version: int) -> Dict[str, int]:
    """
    rank (lower is more severe) of each term in the hierarchy. Terms of the default ranking which are not in the
    hierarchy are ranked after all hierarchy terms, in their default order
    """
    ranks = {term: i for i, term in enumerate(hierarchy[COLUMNS.mutation])}
    offset = len(ranks)
    for i, (term, _) in enumerate(CONSEQUENCE_HIERARCHY[version]):
        ranks.setdefault(term, offset + i)
    return ranks


def resolve_consequence(term: str, ranks: Dict[str, int]) -> Tuple[str, int]:
    """
    Resolve a consequence to a single ranked term. Terms in the ranking are used as is, other terms are split
    into their components and the most severe component is used

    Example:
        >>> resolve_consequence('missense_variant,splice_region_variant', {'missense_variant': 10, 'splice_region_variant': 12})
        ('missense_variant', 10)
    """
    if term in ranks:
        return term, ranks[term]
    unknown_rank = max(ranks.values(), default=-1) + 1
    best = None
    for component in split_consequence(term):
        rank = ranks.get(component, unknown_rank)
        if best is None or rank < best[1]:
            best = (component, rank)
    if best is None:
        return term, unknown_rank
    return best
