"""
module responsible for small utility functions and constants used throughout the vepvis package
"""
import re
from typing import List, Optional

from Bio.Seq import Seq

PROGNAME: str = 'vepvis'
EXIT_OK: int = 0


class VepvisNamespace:
    """
    Namespace to hold module constants. Members are the public class attributes

    Example:
        >>> class THING(VepvisNamespace):
        ...     ONE = 1
        ...     TWO = 2
        >>> THING.values()
        [1, 2]
    """

    @classmethod
    def keys(cls) -> List[str]:
        return [
            k
            for k, v in cls.__dict__.items()
            if not k.startswith('_')
            and not callable(v)
            and not isinstance(v, (classmethod, staticmethod))
        ]

    @classmethod
    def values(cls) -> List:
        return [getattr(cls, k) for k in cls.keys()]

    @classmethod
    def enforce(cls, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> SPECTRA_UNIQUE.enforce('event')
            'event'
            >>> SPECTRA_UNIQUE.enforce('other')
            Traceback (most recent call last):
            ....
        """
        if value not in cls.values():
            raise KeyError(f'value {repr(value)} is not a valid member of {cls.__name__}', cls.values())
        return value


class COLUMNS(VepvisNamespace):
    """
    Column names for the tables produced and consumed throughout the package
    """

    location: str = 'Location'
    allele: str = 'Allele'
    consequence: str = 'Consequence'
    extra: str = 'Extra'
    symbol: str = 'SYMBOL'
    sample: str = 'sample'
    gene: str = 'gene'
    mutation: str = 'mutation'
    color: str = 'color'
    label: str = 'label'
    chromosome: str = 'chromosome'
    start: str = 'start'
    stop: str = 'stop'
    ref_allele: str = 'refAllele'
    variant_allele: str = 'variantAllele'
    base_change: str = 'base_change'
    trans_tranv: str = 'trans_tranv'
    count: str = 'count'
    proportion: str = 'proportion'
    mutation_total: str = 'mutation_total'
    mutation_burden: str = 'mutation_burden'
    sample_count: str = 'sample_count'
    frequency: str = 'frequency'


HIERARCHY_COLUMNS = [COLUMNS.mutation, COLUMNS.color, COLUMNS.label]
WATERFALL_COLUMNS = [COLUMNS.sample, COLUMNS.gene, COLUMNS.mutation]
SPECTRA_COLUMNS = [
    COLUMNS.sample,
    COLUMNS.chromosome,
    COLUMNS.start,
    COLUMNS.stop,
    COLUMNS.ref_allele,
    COLUMNS.variant_allele,
]


class SPECTRA_UNIQUE(VepvisNamespace):
    """
    controlled vocabulary for how duplicate substitutions are collapsed in the spectrum

    Attributes:
        EVENT: one row per sample, locus and variant allele
        ROW: one row per identical spectrum row
        RECORD: one row per identical annotation record
    """

    EVENT: str = 'event'
    ROW: str = 'row'
    RECORD: str = 'record'


class TRANS_TRANV(VepvisNamespace):
    TRANSITION: str = 'transition'
    TRANSVERSION: str = 'transversion'


class SUBCOMMAND(VepvisNamespace):
    HIERARCHY: str = 'hierarchy'
    WATERFALL: str = 'waterfall'
    SPECTRA: str = 'spectra'


DNA_BASES = ['A', 'C', 'G', 'T']
PURINES = {'A', 'G'}

BASE_CHANGES = ['C>A', 'C>G', 'C>T', 'T>A', 'T>C', 'T>G']
"""list: substitution classes after collapsing to the pyrimidine reference strand"""

TRANSITIONS = {frozenset(['A', 'G']), frozenset(['C', 'T'])}

MEGABASE: int = 1000000

GREY_GRADIENT = ('#bdbdbd', '#252525')
"""tuple: start and end colors of the gradient used for consequence terms without a default color"""

GENOME_BUILD_ALIASES = {
    'hg19': 'GRCh37',
    'grch37': 'GRCh37',
    'b37': 'GRCh37',
    'hs37d5': 'GRCh37',
    'hg38': 'GRCh38',
    'grch38': 'GRCh38',
}


def normalize_build(build: Optional[str]) -> Optional[str]:
    """
    Map a genome build name to its GRC equivalent so builds from different sources can be compared

    Example:
        >>> normalize_build('hg19')
        'GRCh37'
        >>> normalize_build('GRCh37.p13')
        'GRCh37'
    """
    if not build:
        return None
    name = re.sub(r'\.p\d+$', '', str(build).strip())
    return GENOME_BUILD_ALIASES.get(name.lower(), name)


def reverse_complement(s: str) -> str:
    """
    wrapper for the Bio.Seq reverse_complement method

    Args:
        s: the input DNA sequence

    Returns:
        str: the reverse complement of the input sequence

    Example:
        >>> reverse_complement('ATCCGGT')
        'ACCGGAT'
    """
    input_string = str(s)
    if not re.match('^[A-Za-z]*$', input_string):
        raise ValueError('unexpected sequence format. cannot reverse complement', input_string)
    return str(Seq(input_string).reverse_complement())
