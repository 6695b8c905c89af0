"""
module which holds all functions relating to reading VEP output files
"""
import gzip
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ..constants import COLUMNS
from ..util import logger
from .constants import (
    ASSEMBLY_PATTERN,
    CORE_COLUMNS,
    DESCRIPTION_PATTERN,
    EXTRA_DELIM,
    EXTRA_KEY_DELIM,
    EXTRA_KEYS,
    HEADER_PREFIX,
    MISSING_VALUE,
    VERSION_PATTERN,
    field_descriptions,
    meta_columns,
)

GZIP_MAGIC = b'\x1f\x8b'
ENCODING = 'utf-8'


def _read_header_lines(fh) -> List[str]:
    header_lines = []
    line = fh.readline()
    while line.startswith(HEADER_PREFIX):
        header_lines.append(line.rstrip('\r\n'))
        line = fh.readline()
    return header_lines


def read_vep_file(input_file: str) -> Tuple[List[str], pd.DataFrame]:
    """
    Read a tab-delimited VEP output file into a pandas dataframe

    Returns:
        the verbatim header lines and the table of annotation records. All columns are read as strings
    """
    with open(input_file, 'rb') as fh:
        compression = 'gzip' if fh.read(len(GZIP_MAGIC)) == GZIP_MAGIC else None
    if compression:
        with gzip.open(input_file, 'rt', encoding=ENCODING) as fh:
            header_lines = _read_header_lines(fh)
    else:
        with open(input_file, 'r', encoding=ENCODING) as fh:
            header_lines = _read_header_lines(fh)

    df = pd.read_csv(
        input_file,
        sep='\t',
        skiprows=len(header_lines),
        dtype=str,
        keep_default_na=False,
        compression=compression,
        encoding=ENCODING,
    )
    df = df.rename(columns={df.columns[0]: df.columns[0].replace('#', '')})
    for col in CORE_COLUMNS:
        if col not in df.columns:
            raise KeyError(f'Missing required column: {col}', input_file)
    return header_lines, df


def detect_versions(header_lines: List[str]) -> List[int]:
    """
    Returns:
        the VEP versions declared in the header, in the order they appear
    """
    versions = []
    for line in header_lines:
        match = VERSION_PATTERN.match(line)
        if match and int(match.group('version')) not in versions:
            versions.append(int(match.group('version')))
    return versions


def detect_assembly(header_lines: List[str]) -> Optional[str]:
    for line in header_lines:
        match = ASSEMBLY_PATTERN.match(line)
        if match:
            return match.group('assembly')
    return None


def parse_descriptions(header_lines: List[str], version: int) -> pd.DataFrame:
    """
    Build the table of field descriptions from the '## NAME : description' header lines. Fields of the
    version schema not described in the header use the built-in description

    Returns:
        dataframe with the columns name and description
    """
    descriptions: Dict[str, str] = {}
    for line in header_lines:
        match = DESCRIPTION_PATTERN.match(line)
        if match:
            descriptions.setdefault(match.group('name'), match.group('description').strip())
    for name, desc in field_descriptions(version).items():
        descriptions.setdefault(name, desc)
    return pd.DataFrame(
        {'name': list(descriptions.keys()), 'description': list(descriptions.values())}
    )


def parse_extra(extra: str) -> Dict[str, str]:
    """
    parse a single Extra column value into its key/value pairs

    Example:
        >>> parse_extra('IMPACT=MODERATE;SYMBOL=TP53;STRAND=-1')
        {'IMPACT': 'MODERATE', 'SYMBOL': 'TP53', 'STRAND': '-1'}
    """
    result = {}
    if not isinstance(extra, str) or extra in {'', MISSING_VALUE}:
        return result
    for pair in extra.split(EXTRA_DELIM):
        if not pair:
            continue
        key, sep, value = pair.partition(EXTRA_KEY_DELIM)
        result[key] = value if sep else key
    return result


def split_meta(df: pd.DataFrame, version: int) -> pd.DataFrame:
    """
    Build the meta table for a set of annotation records. The Extra column (if present) is split into one column
    per key of the version schema

    Returns:
        dataframe with exactly the meta columns of the version, in schema order. VEP missing values ('-') are
        replaced by None
    """
    columns = meta_columns(version)
    meta = pd.DataFrame(index=df.index)

    extra_keys = EXTRA_KEYS[version]
    if COLUMNS.extra in df.columns:
        parsed = df[COLUMNS.extra].apply(parse_extra)
        found = set()
        for pairs in parsed:
            found.update(pairs.keys())
        unknown = sorted(found - set(extra_keys))
        if unknown:
            logger.warning(
                f'dropping Extra keys not defined for VEP version {version}: {", ".join(unknown)}'
            )
        extra = pd.DataFrame.from_records(
            list(parsed), index=df.index, columns=list(extra_keys)
        )
    else:
        extra = pd.DataFrame(index=df.index)

    # already split input carries the extra fields as their own columns
    for col in columns:
        if col in extra.columns and extra[col].notna().any():
            meta[col] = extra[col]
        elif col in df.columns:
            meta[col] = df[col]
        else:
            meta[col] = None
    meta = meta[columns].replace({MISSING_VALUE: None, '': None})
    return meta.astype(object).where(meta.notna(), None)
