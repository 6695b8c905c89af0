import errno
import logging
import os
from glob import glob
from typing import List

import pandas as pd
from braceexpand import braceexpand

from .error import InputNotFoundError

logger = logging.getLogger('vepvis')


def bash_expands(*expressions: str) -> List[str]:
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        a list of absolute file paths, in the order the expressions were given

    Raises:
        InputNotFoundError: an expression does not match any files

    Example:
        >>> bash_expands('./{tests,docs}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(str(expression)):
            eresult.extend(sorted(glob(name)))
        if not eresult:
            raise InputNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    else:
        if len(file_list) > 1:
            raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg}= {repr(val)}')
        else:
            logger.info(f'{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def output_tabbed_file(df: pd.DataFrame, filename: str):
    if os.path.dirname(filename):
        mkdirp(os.path.dirname(filename))
    logger.info(f'writing: {filename}')
    df.to_csv(filename, index=False, sep='\t', na_rep='None')


def narrator(verbose: bool):
    """
    Returns the logging function used to report progress. Progress is reported at INFO when verbose and at DEBUG otherwise
    """
    return logger.info if verbose else logger.debug
