"""
Projection of VEP records into the single nucleotide substitution table used for mutation spectrum plots
"""
from typing import List

import pandas as pd

from .constants import (
    BASE_CHANGES,
    COLUMNS,
    DNA_BASES,
    PURINES,
    SPECTRA_COLUMNS,
    SPECTRA_UNIQUE,
    TRANS_TRANV,
    TRANSITIONS,
    normalize_build,
    reverse_complement,
)
from .error import MissingReferenceError
from .reference import ReferenceSequence
from .schemas import DEFAULTS
from .util import logger, narrator
from .vep.constants import LOCATION_PATTERN
from .vep.records import VepRecords


def parse_locations(locations: pd.Series) -> pd.DataFrame:
    """
    split VEP locations into their parts

    Returns:
        table with the columns chromosome, start and end. end is missing for single positions and all three are
        missing where the location could not be parsed
    """
    return locations.astype(str).str.extract(LOCATION_PATTERN.pattern)


def check_build(records: VepRecords, reference: ReferenceSequence):
    """
    warn when the assembly declared by the VEP header and the build of the reference do not agree
    """
    assembly = normalize_build(records.assembly)
    build = normalize_build(getattr(reference, 'build', None))
    if assembly and build and assembly != build:
        logger.warning(
            f'the VEP records were annotated against {records.assembly} but the reference is {reference.build}'
        )


def to_mut_spectra(
    records: VepRecords,
    reference: ReferenceSequence,
    verbose: bool = False,
    unique_on: str = DEFAULTS['spectra.unique_on'],
) -> pd.DataFrame:
    """
    Build the table of single nucleotide substitutions with their reference base

    Args:
        records: the annotation records
        reference: the reference genome the records were annotated against
        verbose: report progress
        unique_on: how duplicates are collapsed. row (identical spectrum rows), event (sample, locus and variant
            allele) or record (identical annotation records)

    Returns:
        table with the columns sample, chromosome, start, stop, refAllele and variantAllele. The build of the
        reference is stored in the genome_build attribute of the table

    Raises:
        MissingReferenceError: no reference was given
    """
    if reference is None:
        raise MissingReferenceError('a reference genome is required to build the mutation spectrum')
    unique_on = SPECTRA_UNIQUE.enforce(unique_on)
    narrate = narrator(verbose)
    check_build(records, reference)

    location = records.position[COLUMNS.location]
    loci = parse_locations(location)
    unparsed = loci['chromosome'].isna() & location.notna()
    if unparsed.any():
        examples = pd.unique(location[unparsed])
        logger.warning(
            f'dropping {unparsed.sum()} annotation record(s) with unrecognized locations: '
            + ', '.join([str(e) for e in examples[:10]])
        )

    allele = records.mutation[COLUMNS.allele].where(records.mutation[COLUMNS.allele].notna(), '')
    allele = allele.astype(str).str.upper()
    is_snv = (
        loci['chromosome'].notna()
        & (loci['end'].isna() | (loci['end'] == loci['start']))
        & allele.isin(DNA_BASES)
    )
    narrate(f'{is_snv.sum()} of {len(records)} annotation records are single nucleotide variants')

    df = pd.DataFrame(
        {
            COLUMNS.sample: records.sample[COLUMNS.sample],
            COLUMNS.chromosome: loci['chromosome'],
            COLUMNS.start: loci['start'],
            COLUMNS.variant_allele: allele,
        }
    )[is_snv].copy()
    df[COLUMNS.start] = df[COLUMNS.start].astype(int)
    df[COLUMNS.stop] = df[COLUMNS.start]

    if unique_on == SPECTRA_UNIQUE.RECORD:
        duplicated = records.to_dataframe()[is_snv.values].duplicated(keep='first')
        df = df[~duplicated.values]
    elif unique_on == SPECTRA_UNIQUE.EVENT:
        df = df.drop_duplicates(
            [COLUMNS.sample, COLUMNS.chromosome, COLUMNS.start, COLUMNS.variant_allele], keep='first'
        )

    pieces: List[pd.DataFrame] = []
    missing_chr: List[str] = []
    for chrom, group in df.groupby(COLUMNS.chromosome, sort=False):
        name = reference.resolve_chromosome(chrom)
        if name is None:
            missing_chr.append(chrom)
            continue
        narrate(f'fetching {len(group)} reference base(s) from {name}')
        bases = reference.fetch_bases(name, group[COLUMNS.start].tolist())
        pieces.append(group.assign(**{COLUMNS.chromosome: name, COLUMNS.ref_allele: bases}))

    if missing_chr:
        dropped = df[COLUMNS.chromosome].isin(missing_chr).sum()
        logger.warning(
            f'dropping {dropped} substitution(s) on chromosomes not in the reference ({reference.build}): '
            + ', '.join(missing_chr)
        )

    if pieces:
        result = pd.concat(pieces).sort_index()[SPECTRA_COLUMNS]
        if unique_on == SPECTRA_UNIQUE.ROW:
            result = result.drop_duplicates(keep='first')
        result = result.reset_index(drop=True)
    else:
        result = pd.DataFrame({c: [] for c in SPECTRA_COLUMNS}, dtype=object)
        result[COLUMNS.start] = result[COLUMNS.start].astype(int)
        result[COLUMNS.stop] = result[COLUMNS.stop].astype(int)
    narrate(f'{len(result)} substitutions remain after removing duplicates (unique on {unique_on})')
    result.attrs['genome_build'] = reference.build
    return result


def annotate_spectra(spectra: pd.DataFrame) -> pd.DataFrame:
    """
    Classify the substitutions of a spectrum table

    Adds the columns base_change (the substitution on the strand where the reference base is a pyrimidine,
    ex. G>A is reported as C>T) and trans_tranv (transition or transversion). Rows where the reference and variant
    bases are the same are removed
    """
    df = spectra.copy()
    same = df[COLUMNS.ref_allele] == df[COLUMNS.variant_allele]
    if same.any():
        loci = [
            f'{row[COLUMNS.sample]}:{row[COLUMNS.chromosome]}:{row[COLUMNS.start]}'
            for _, row in df[same].iterrows()
        ]
        logger.warning(
            f'removing {same.sum()} substitution(s) where the reference and variant alleles are the same: '
            + ', '.join(loci[:10])
        )
        df = df[~same].copy()

    ref = df[COLUMNS.ref_allele]
    var = df[COLUMNS.variant_allele]
    flip = ref.isin(PURINES)
    ref_strand = ref.where(~flip, ref.map(reverse_complement))
    var_strand = var.where(~flip, var.map(reverse_complement))
    df[COLUMNS.base_change] = ref_strand + '>' + var_strand
    df[COLUMNS.trans_tranv] = [
        TRANS_TRANV.TRANSITION if frozenset([r, v]) in TRANSITIONS else TRANS_TRANV.TRANSVERSION
        for r, v in zip(ref, var)
    ]
    df = df.reset_index(drop=True)
    df.attrs = dict(spectra.attrs)
    return df


def calc_spectra_frequency(annotated: pd.DataFrame) -> pd.DataFrame:
    """
    Count each substitution class per sample

    Args:
        annotated: a spectrum table. Classified with annotate_spectra first when it has no base_change column

    Returns:
        table with the columns sample, base_change, count and proportion. Every sample has a row for each of the
        six substitution classes
    """
    if COLUMNS.base_change not in annotated.columns:
        annotated = annotate_spectra(annotated)
    samples = pd.unique(annotated[COLUMNS.sample])
    index = pd.MultiIndex.from_product(
        [samples, BASE_CHANGES], names=[COLUMNS.sample, COLUMNS.base_change]
    )
    counts = (
        annotated.groupby([COLUMNS.sample, COLUMNS.base_change])
        .size()
        .reindex(index, fill_value=0)
        .reset_index(name=COLUMNS.count)
    )
    totals = counts.groupby(COLUMNS.sample)[COLUMNS.count].transform('sum')
    counts[COLUMNS.proportion] = (counts[COLUMNS.count] / totals.where(totals > 0)).fillna(0.0)
    return counts
