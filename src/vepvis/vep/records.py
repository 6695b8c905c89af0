import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..constants import COLUMNS
from ..error import ConfigurationError, InputNotFoundError, UnsupportedVersionError
from ..util import bash_expands, logger
from .constants import CORE_COLUMNS, CONSEQUENCE_DELIM, SUPPORTED_VERSIONS
from .file_io import detect_assembly, detect_versions, parse_descriptions, read_vep_file, split_meta

VersionInput = Optional[Union[int, str, Sequence[Union[int, str]]]]


@dataclass(frozen=True, eq=False)
class VepRecords:
    """
    VEP annotation records split into four row-aligned tables

    Attributes:
        position: the Location column
        mutation: the Allele and Consequence columns
        sample: the sample column
        meta: all other standard columns and the split Extra fields of the version schema
        version: the VEP version of the records
        header: the verbatim header lines of the source files (column 'line')
        description: the field descriptions (columns 'name' and 'description')
        paths: the source files the records were read from
    """

    position: pd.DataFrame
    mutation: pd.DataFrame
    sample: pd.DataFrame
    meta: pd.DataFrame
    version: int
    header: pd.DataFrame = field(default_factory=lambda: pd.DataFrame({'line': []}), repr=False)
    description: pd.DataFrame = field(
        default_factory=lambda: pd.DataFrame({'name': [], 'description': []}), repr=False
    )
    paths: Tuple[str, ...] = ()

    def __post_init__(self):
        lengths = {len(self.position), len(self.mutation), len(self.sample), len(self.meta)}
        if len(lengths) > 1:
            raise ValueError(
                'position, mutation, sample and meta tables must have the same number of rows',
                len(self.position),
                len(self.mutation),
                len(self.sample),
                len(self.meta),
            )

    def __len__(self):
        return len(self.position)

    def get_position(self) -> pd.DataFrame:
        return self.position.copy()

    def get_mutation(self) -> pd.DataFrame:
        return self.mutation.copy()

    def get_sample(self) -> pd.DataFrame:
        return self.sample.copy()

    def get_meta(self) -> pd.DataFrame:
        return self.meta.copy()

    def get_version(self) -> int:
        return self.version

    def get_header(self) -> pd.DataFrame:
        return self.header.copy()

    def get_description(self) -> pd.DataFrame:
        return self.description.copy()

    def get_path(self) -> List[str]:
        return list(self.paths)

    @property
    def assembly(self) -> Optional[str]:
        """the genome assembly declared in the header, if any"""
        return detect_assembly(list(self.header['line']))

    def consequences(self) -> List[str]:
        """
        Returns:
            the distinct consequence values in order of first appearance
        """
        return [c for c in pd.unique(self.mutation[COLUMNS.consequence]) if isinstance(c, str)]

    def take(self, rows: Iterable[int]) -> 'VepRecords':
        """
        select rows (by position) from all four tables together

        Returns:
            a new set of records, re-indexed from 0
        """
        rows = list(rows)

        def _take(df):
            return df.iloc[rows].reset_index(drop=True)

        return VepRecords(
            position=_take(self.position),
            mutation=_take(self.mutation),
            sample=_take(self.sample),
            meta=_take(self.meta),
            version=self.version,
            header=self.header,
            description=self.description,
            paths=self.paths,
        )

    def filter(self, mask) -> 'VepRecords':
        """
        keep the rows where the boolean mask is true
        """
        return self.take(np.flatnonzero(np.asarray(mask, dtype=bool)))

    def to_dataframe(self) -> pd.DataFrame:
        """
        join the four tables back into a single table
        """
        return pd.concat([self.sample, self.position, self.mutation, self.meta], axis=1)


def resolve_version(version: VersionInput = None, detected: Sequence[int] = ()) -> int:
    """
    Decide on the VEP version to use given the user input and the versions detected from file headers

    Raises:
        UnsupportedVersionError: the version cannot be determined or is not supported
    """
    if version is None:
        candidates = list(detected)
    elif isinstance(version, (list, tuple, set, np.ndarray, pd.Series)):
        candidates = list(version)
    else:
        candidates = [version]

    if not candidates:
        raise UnsupportedVersionError(
            'unable to determine the VEP version from the file header. Please specify the version'
        )
    if len(candidates) > 1:
        logger.warning(
            f'more than one VEP version was found ({", ".join([str(c) for c in candidates])}), using {candidates[0]}'
        )
    try:
        chosen = int(candidates[0])
    except (TypeError, ValueError):
        raise UnsupportedVersionError('invalid VEP version', candidates[0])
    if chosen not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(
            f'VEP version {chosen} is not supported. Supported versions: {", ".join([str(v) for v in SUPPORTED_VERSIONS])}'
        )
    if version is not None and detected and chosen not in detected:
        logger.warning(
            f'using VEP version {chosen} although the file header declares {", ".join([str(v) for v in detected])}'
        )
    return chosen


def sample_name_from_path(filename: str) -> str:
    """
    Example:
        >>> sample_name_from_path('/path/to/FLX0070Naive.vep')
        'FLX0070Naive'
        >>> sample_name_from_path('/path/to/FLX0070Naive.vep.gz')
        'FLX0070Naive'
    """
    name = os.path.basename(filename)
    if name.endswith('.gz'):
        name = name[: -len('.gz')]
    return os.path.splitext(name)[0]


def _build_records(
    df: pd.DataFrame,
    version: int,
    header_lines: List[str],
    paths: Sequence[str] = (),
) -> VepRecords:
    df = df.reset_index(drop=True)
    for col in CORE_COLUMNS + [COLUMNS.sample]:
        if col not in df.columns:
            raise KeyError(f'missing required column ({col})')
    consequence = df[COLUMNS.consequence].apply(
        lambda c: CONSEQUENCE_DELIM.join([t.strip() for t in c.split(CONSEQUENCE_DELIM)])
        if isinstance(c, str)
        else c
    )
    return VepRecords(
        position=df[[COLUMNS.location]].copy(),
        mutation=pd.DataFrame({COLUMNS.allele: df[COLUMNS.allele], COLUMNS.consequence: consequence}),
        sample=df[[COLUMNS.sample]].astype(str),
        meta=split_meta(df, version),
        version=version,
        header=pd.DataFrame({'line': header_lines}, dtype=object),
        description=parse_descriptions(header_lines, version),
        paths=tuple(paths),
    )


def vep_from_data(data, version: VersionInput) -> VepRecords:
    """
    Build the annotation records from a table already loaded in memory

    Args:
        data: the VEP records (a DataFrame or anything the DataFrame constructor accepts). Must include a sample column
        version: the VEP version of the records
    """
    if not isinstance(data, pd.DataFrame):
        logger.warning(
            f'input data is of type {type(data).__name__}, converting to a pandas DataFrame'
        )
        data = pd.DataFrame(data)
    if version is None:
        raise UnsupportedVersionError('the VEP version must be given for data already in memory')
    version = resolve_version(version)
    data = data.copy()
    if len(data.columns):
        data = data.rename(columns={data.columns[0]: str(data.columns[0]).replace('#', '')})
    return _build_records(data, version, [])


def load_vep(*paths: str, data=None, version: VersionInput = None) -> VepRecords:
    """
    Load VEP annotation records from files (glob and brace expressions allowed) or from data already in memory

    Args:
        paths: the VEP files to read
        data: a table of VEP records, used instead of paths
        version: the VEP version (or candidate versions). Detected from the file header when not given

    Raises:
        InputNotFoundError: no files match the paths given
        UnsupportedVersionError: the version cannot be determined or is not supported
    """
    if data is not None:
        if paths:
            raise ConfigurationError('specify either paths or data but not both')
        return vep_from_data(data, version)
    if not paths:
        raise InputNotFoundError('no input files were given')

    filenames = bash_expands(*paths)
    frames = []
    header_lines: List[str] = []
    detected: List[int] = []

    for filename in filenames:
        logger.info(f'loading: {filename}')
        header, df = read_vep_file(filename)
        if COLUMNS.sample not in df.columns:
            df[COLUMNS.sample] = sample_name_from_path(filename)
        for found in detect_versions(header):
            if found not in detected:
                detected.append(found)
        header_lines.extend(header)
        frames.append(df)

    version = resolve_version(version, detected)
    df = pd.concat(frames, ignore_index=True, sort=False)
    records = _build_records(df, version, header_lines, filenames)
    logger.info(f'loaded {len(records)} annotation records from {len(filenames)} file(s)')
    return records
