"""
module which holds the reference genome sequence providers used to look up the reference base at a locus
"""
import os
import re
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pysam
from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from .util import logger

DEFAULT_FETCH_WINDOW: int = 100000
"""int: maximum span of positions fetched from an indexed fasta in a single query"""

FASTA_SUFFIX = re.compile(r'\.(fa|fasta|fna)(\.gz)?$', re.IGNORECASE)


def chromosome_aliases(name: str) -> List[str]:
    """
    Example:
        >>> chromosome_aliases('chr1')
        ['chr1', '1']
        >>> chromosome_aliases('X')
        ['X', 'chrX']
    """
    name = str(name)
    if name.startswith('chr'):
        return [name, re.sub('^chr', '', name)]
    return [name, 'chr' + name]


def position_windows(positions: Iterable[int], size: int) -> List[List[int]]:
    """
    group sorted distinct positions into windows spanning less than size bases

    Example:
        >>> position_windows([5, 1, 3, 250], 100)
        [[1, 3, 5], [250]]
    """
    windows: List[List[int]] = []
    for pos in sorted(set(positions)):
        if windows and pos - windows[-1][0] < size:
            windows[-1].append(pos)
        else:
            windows.append([pos])
    return windows


class ReferenceSequence:
    """
    A reference genome which can report the base at a given locus

    Attributes:
        build: name of the genome build (ex. GRCh37)
    """

    build: Optional[str] = None

    def chromosomes(self) -> List[str]:
        raise NotImplementedError('abstract method')

    def chromosome_length(self, chromosome: str) -> int:
        raise NotImplementedError('abstract method')

    def _fetch_window(self, chromosome: str, start: int, end: int) -> str:
        """
        sequence from start to end (1-based inclusive) of a chromosome named as it is in the reference
        """
        raise NotImplementedError('abstract method')

    def resolve_chromosome(self, chromosome: str) -> Optional[str]:
        """
        Returns:
            the name of the chromosome in the reference (allowing for the chr prefix) or None if it is not present
        """
        names = set(self.chromosomes())
        for name in chromosome_aliases(chromosome):
            if name in names:
                return name
        return None

    def fetch_bases(self, chromosome: str, positions: Iterable[int], window: int = DEFAULT_FETCH_WINDOW) -> List[str]:
        """
        look up the reference base at each position of a chromosome

        Args:
            chromosome: the chromosome name (with or without the chr prefix)
            positions: 1-based positions

        Returns:
            the uppercase reference base at each position, in the order given

        Raises:
            KeyError: the chromosome is not in the reference
            IndexError: a position is outside the chromosome
        """
        name = self.resolve_chromosome(chromosome)
        if name is None:
            raise KeyError('chromosome is not in the reference', chromosome, self.build)
        positions = [int(p) for p in positions]
        length = self.chromosome_length(name)
        for pos in positions:
            if pos < 1 or pos > length:
                raise IndexError(f'position {name}:{pos} is outside the reference (length={length})')
        bases: Dict[int, str] = {}
        for batch in position_windows(positions, window):
            seq = self._fetch_window(name, batch[0], batch[-1]).upper()
            for pos in batch:
                bases[pos] = seq[pos - batch[0]]
        return [bases[pos] for pos in positions]


class FastaReference(ReferenceSequence):
    """
    indexed fasta file read with pysam. Positions are fetched with one range query per window
    """

    def __init__(self, filename: str, build: Optional[str] = None, window: int = DEFAULT_FETCH_WINDOW):
        """
        Args:
            filename: path to the fasta file. An index (.fai) is created by pysam when missing
            build: the genome build. Defaults to the name of the file
            window: maximum span of a single range query
        """
        if not os.path.exists(filename):
            raise FileNotFoundError('Missing file', filename)
        self.filename = filename
        self.build = build or FASTA_SUFFIX.sub('', os.path.basename(filename))
        self.window = window
        self._fasta = pysam.FastaFile(filename)

    def __repr__(self):
        return f'{self.__class__.__name__}(filename={self.filename}, build={self.build})'

    def chromosomes(self) -> List[str]:
        return list(self._fasta.references)

    def chromosome_length(self, chromosome: str) -> int:
        return self._fasta.get_reference_length(chromosome)

    def _fetch_window(self, chromosome: str, start: int, end: int) -> str:
        return self._fasta.fetch(chromosome, start - 1, end)

    def fetch_bases(self, chromosome: str, positions: Iterable[int], window: Optional[int] = None) -> List[str]:
        return super().fetch_bases(chromosome, positions, window or self.window)

    def close(self):
        self._fasta.close()

    def __enter__(self):
        return self

    def __exit__(self, *pos):
        self.close()


class SequenceReference(ReferenceSequence):
    """
    reference genome held in memory as a mapping of sequences by chromosome name
    """

    def __init__(self, sequences: Mapping[str, Union[str, Seq, SeqRecord]], build: Optional[str] = None):
        self.sequences: Dict[str, str] = {}
        for name, seq in sequences.items():
            if isinstance(seq, SeqRecord):
                seq = seq.seq
            self.sequences[name] = str(seq).upper()
        self.build = build

    def __repr__(self):
        return f'{self.__class__.__name__}(chromosomes={len(self.sequences)}, build={self.build})'

    def chromosomes(self) -> List[str]:
        return list(self.sequences)

    def chromosome_length(self, chromosome: str) -> int:
        return len(self.sequences[chromosome])

    def _fetch_window(self, chromosome: str, start: int, end: int) -> str:
        return self.sequences[chromosome][start - 1 : end]


def load_reference_genome(*filepaths: str) -> Dict[str, SeqRecord]:
    """
    Args:
        filepaths: the paths to the files containing the input fasta genomes

    Returns:
        a dictionary representing the sequences in the fasta file

    Raises:
        KeyError: a chromosome is defined more than once (with or without the chr prefix)
    """
    reference_genome: Dict[str, SeqRecord] = {}
    for filename in filepaths:
        logger.info(f'loading: {filename}')
        with open(filename, 'r') as fh:
            for chrom, seq in SeqIO.to_dict(SeqIO.parse(fh, 'fasta')).items():
                if chrom in reference_genome:
                    raise KeyError('Duplicate chromosome name', chrom, filename)
                reference_genome[chrom] = seq

    # to fix hg38 issues
    for template_name in reference_genome:
        alias = chromosome_aliases(template_name)[1]
        if alias in reference_genome:
            raise KeyError(
                f'template names {template_name} and {alias} are considered equal but both have been defined in the reference loaded'
            )
    return reference_genome
