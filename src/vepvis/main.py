#!python
import argparse
import logging
import platform
import sys
import time
from typing import Dict, List, Optional

import pandas as pd

from . import __version__
from . import config as _config
from . import util as _util
from .constants import EXIT_OK, PROGNAME, SPECTRA_UNIQUE, SUBCOMMAND
from .hierarchy import set_mutation_hierarchy
from .reference import FastaReference
from .schemas import get_by_prefix
from .spectra import annotate_spectra, to_mut_spectra
from .vep import load_vep
from .vep.constants import SUPPORTED_VERSIONS
from .waterfall import to_waterfall

OPTION_CONFIG_KEYS = {
    'vep_version': 'vep.version',
    'hierarchy': 'hierarchy.file',
    'label_column': 'waterfall.label_column',
    'reference': 'reference.fasta',
    'genome_build': 'reference.genome_build',
    'unique_on': 'spectra.unique_on',
    'annotate': 'spectra.annotate',
}
"""dict: command line option and the config key it overrides"""


def create_parser(argv):
    parser = argparse.ArgumentParser(prog=PROGNAME, formatter_class=_config.CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which table to build')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False
        )
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument(
            '-h', '--help', action='help', help='show this help message and exit'
        )
        optional[command].add_argument(
            '-v',
            '--version',
            action='version',
            version='%(prog)s version ' + __version__,
            help='Outputs the version number',
        )
        optional[command].add_argument('--log', help='redirect stdout to a log file', default=None)
        optional[command].add_argument(
            '--log_level',
            help='level of logging to output',
            choices=['INFO', 'DEBUG'],
            default='INFO',
        )
        optional[command].add_argument(
            '--verbose', action='store_true', default=False, help='report the progress of each step'
        )
        optional[command].add_argument(
            '--config', '-c', help='path to the JSON config file', type=_util.filepath, default=None
        )
        required[command].add_argument(
            '-n',
            '--inputs',
            nargs='+',
            help='path to the VEP files (glob and brace expressions allowed)',
            required=True,
            metavar='FILEPATH',
        )
        required[command].add_argument(
            '-o', '--output', help='path to the output table', required=True, metavar='FILEPATH'
        )
        optional[command].add_argument(
            '--vep_version',
            type=int,
            choices=SUPPORTED_VERSIONS,
            default=None,
            help='VEP version of the inputs. Read from the file header when not given',
        )

    for command in [SUBCOMMAND.HIERARCHY, SUBCOMMAND.WATERFALL]:
        optional[command].add_argument(
            '--hierarchy',
            type=_util.filepath,
            default=None,
            help='tab-delimited mutation hierarchy with the columns mutation and color',
        )

    optional[SUBCOMMAND.WATERFALL].add_argument(
        '--label_column', default=None, help='meta column to carry through as the label'
    )

    optional[SUBCOMMAND.SPECTRA].add_argument(
        '--reference',
        type=_util.filepath,
        default=None,
        help='path to the reference genome fasta. May also be given in the config',
    )
    optional[SUBCOMMAND.SPECTRA].add_argument(
        '--genome_build', default=None, help='name of the reference genome build'
    )
    optional[SUBCOMMAND.SPECTRA].add_argument(
        '--annotate',
        action='store_true',
        default=None,
        help='add the base_change and trans_tranv columns',
    )
    optional[SUBCOMMAND.SPECTRA].add_argument(
        '--unique_on',
        choices=SPECTRA_UNIQUE.values(),
        default=None,
        help='how duplicate substitutions are collapsed',
    )

    return parser, parser.parse_args(argv)


def merge_config(config: Dict, args) -> Dict:
    """
    override the config with any options given on the command line
    """
    merged = dict(config)
    for option, key in OPTION_CONFIG_KEYS.items():
        value = getattr(args, option, None)
        if value is not None:
            merged[key] = value
    return _config.validate_config(merged)


def read_user_hierarchy(config: Dict) -> Optional[pd.DataFrame]:
    if config['hierarchy.file']:
        return _config.read_hierarchy_file(config['hierarchy.file'])
    return None


def hierarchy_main(inputs: List[str], output: str, config: Dict, verbose: bool = False):
    records = load_vep(*inputs, version=config['vep.version'])
    hierarchy = set_mutation_hierarchy(records, read_user_hierarchy(config), verbose=verbose)
    _util.output_tabbed_file(hierarchy, output)


def waterfall_main(inputs: List[str], output: str, config: Dict, verbose: bool = False):
    records = load_vep(*inputs, version=config['vep.version'])
    hierarchy = set_mutation_hierarchy(records, read_user_hierarchy(config), verbose=verbose)
    waterfall = to_waterfall(
        records, hierarchy, label_column=config['waterfall.label_column'], verbose=verbose
    )
    _util.output_tabbed_file(waterfall, output)


def spectra_main(inputs: List[str], output: str, config: Dict, verbose: bool = False):
    records = load_vep(*inputs, version=config['vep.version'])
    reference_options = get_by_prefix(config, 'reference.')
    spectra_options = get_by_prefix(config, 'spectra.')
    with FastaReference(
        reference_options['fasta'], build=reference_options['genome_build']
    ) as reference:
        spectra = to_mut_spectra(
            records, reference, verbose=verbose, unique_on=spectra_options['unique_on']
        )
    if spectra_options['annotate']:
        spectra = annotate_spectra(spectra)
    _util.output_tabbed_file(spectra, output)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    loads the config and redirects into subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    try:
        _util.logger.info(f'{PROGNAME}: {__version__}')
        _util.logger.info(f'hostname: {platform.node()}')
        _util.log_arguments(args)

        config = merge_config(_config.load_config(args.config), args)

        # try checking the input files exist
        try:
            args.inputs = _util.bash_expands(*args.inputs)
        except FileNotFoundError:
            parser.error('--inputs file(s) for {} {} do not exist'.format(args.command, args.inputs))

        command = args.command
        if command == SUBCOMMAND.HIERARCHY:
            hierarchy_main(args.inputs, args.output, config, verbose=args.verbose)
        elif command == SUBCOMMAND.WATERFALL:
            waterfall_main(args.inputs, args.output, config, verbose=args.verbose)
        else:
            if not config['reference.fasta']:
                parser.error('a reference fasta (--reference or reference.fasta in the config) is required')
            spectra_main(args.inputs, args.output, config, verbose=args.verbose)

        duration = int(time.time()) - start_time
        hours = duration - duration % 3600
        minutes = duration - hours - (duration - hours) % 60
        seconds = duration - hours - minutes
        _util.logger.info(
            'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)
        )
        _util.logger.info(f'run time (s): {duration}')
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
            handler.close()
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)
    return EXIT_OK


if __name__ == '__main__':
    main()
