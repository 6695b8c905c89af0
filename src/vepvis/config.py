import argparse
import json
from typing import Dict, Optional

import pandas as pd
from jsonschema.exceptions import ValidationError

from .error import ConfigurationError
from .schemas import DefaultValidatingValidator, load_schema
from .util import filepath, logger


def validate_config(config: Dict) -> Dict:
    """
    Check the config against the schema and fill in the defaults for any options which are not given

    Raises:
        ConfigurationError: the config does not conform to the schema
    """
    try:
        DefaultValidatingValidator(load_schema()).validate(config)
    except ValidationError as err:
        raise ConfigurationError(f'invalid configuration ({".".join([str(p) for p in err.path])}): {err.message}')
    return config


def load_config(filename: Optional[str] = None) -> Dict:
    """
    Read and validate a JSON config file. Returns the defaults when no file is given
    """
    config: Dict = {}
    if filename:
        logger.info(f'loading: {filename}')
        with open(filename, 'r') as fh:
            config = json.load(fh)
        if not isinstance(config, dict):
            raise ConfigurationError('the config file must hold a JSON object', filename)
    return validate_config(config)


def read_hierarchy_file(filename: str) -> pd.DataFrame:
    """
    read a tab-delimited mutation hierarchy (columns mutation and color, highest priority first)
    """
    logger.info(f'loading: {filename}')
    return pd.read_csv(filename, sep='\t', dtype=str, keep_default_na=False)


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type == bool:
        return '{True,False}'
    elif arg_type == float:
        return 'FLOAT'
    elif arg_type == int:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    return None
