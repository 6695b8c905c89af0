import json
import sys
from unittest.mock import patch

import pandas as pd
import pytest
from vepvis.constants import SUBCOMMAND
from vepvis.error import ConfigurationError
from vepvis.main import main

from ..util import get_data, indexed_reference

ARGERROR_EXIT_CODE = 2


def run_main(args, exit_status=0):
    with patch.object(sys, 'argv', ['vepvis'] + [str(a) for a in args]):
        try:
            return_code = main()
        except SystemExit as ex:
            return_code = ex.code
    assert return_code == exit_status


def read_output(filename):
    return pd.read_csv(filename, sep='\t', dtype=str, keep_default_na=False)


class TestHierarchy:
    def test_default(self, tmp_path):
        output = tmp_path / 'hierarchy.tsv'
        run_main([SUBCOMMAND.HIERARCHY, '-n', get_data('FLX00*Naive.vep'), '-o', output])
        df = read_output(output)
        assert list(df.columns) == ['mutation', 'color', 'label']
        assert df['label'].tolist()[0] == '01'
        assert df['mutation'].tolist()[0] == 'transcript_ablation'

    def test_user_hierarchy(self, tmp_path):
        output = tmp_path / 'hierarchy.tsv'
        run_main(
            [
                SUBCOMMAND.HIERARCHY,
                '-n',
                get_data('FLX0070Naive.vep'),
                '-o',
                output,
                '--hierarchy',
                get_data('mock_hierarchy.tsv'),
            ]
        )
        df = read_output(output)
        assert df['mutation'].tolist()[:3] == [
            'missense_variant,splice_region_variant',
            'stop_gained',
            'missense_variant',
        ]

    def test_missing_inputs(self, tmp_path):
        run_main(
            [SUBCOMMAND.HIERARCHY, '-n', get_data('*.missing'), '-o', tmp_path / 'hierarchy.tsv'],
            ARGERROR_EXIT_CODE,
        )


class TestWaterfall:
    def test_waterfall(self, tmp_path):
        output = tmp_path / 'waterfall.tsv'
        run_main([SUBCOMMAND.WATERFALL, '-n', get_data('FLX00*Naive.vep'), '-o', output])
        df = read_output(output)
        assert list(df.columns) == ['sample', 'gene', 'mutation']
        assert df.shape[0] == 6

    def test_label_column(self, tmp_path):
        output = tmp_path / 'waterfall.tsv'
        run_main(
            [
                SUBCOMMAND.WATERFALL,
                '-n',
                get_data('FLX00*Naive.vep'),
                '-o',
                output,
                '--label_column',
                'IMPACT',
            ]
        )
        df = read_output(output)
        assert list(df.columns) == ['sample', 'gene', 'mutation', 'label']
        assert df['label'].tolist()[:2] == ['MODERATE', 'HIGH']

    def test_config_hierarchy(self, tmp_path):
        config = tmp_path / 'config.json'
        config.write_text(json.dumps({'hierarchy.file': get_data('mock_hierarchy.tsv')}))
        output = tmp_path / 'waterfall.tsv'
        run_main(
            [SUBCOMMAND.WATERFALL, '-n', get_data('FLX0070Naive.vep'), '-o', output, '--config', config]
        )
        df = read_output(output)
        assert 'missense_variant,splice_region_variant' in df['mutation'].tolist()

    def test_bad_config(self, tmp_path):
        config = tmp_path / 'config.json'
        config.write_text(json.dumps({'vep.version': 87}))
        with pytest.raises(ConfigurationError):
            main(
                [
                    SUBCOMMAND.WATERFALL,
                    '-n',
                    get_data('FLX0070Naive.vep'),
                    '-o',
                    str(tmp_path / 'waterfall.tsv'),
                    '--config',
                    str(config),
                ]
            )


class TestSpectra:
    def test_spectra(self, tmp_path):
        output = tmp_path / 'spectra.tsv'
        run_main(
            [
                SUBCOMMAND.SPECTRA,
                '-n',
                get_data('FLX00*Naive.vep'),
                '-o',
                output,
                '--reference',
                indexed_reference(tmp_path),
                '--genome_build',
                'GRCh37',
            ]
        )
        df = read_output(output)
        assert list(df.columns) == ['sample', 'chromosome', 'start', 'stop', 'refAllele', 'variantAllele']
        assert df.shape[0] == 8
        assert not df.duplicated().any()

    def test_annotate_unique_on_event(self, tmp_path):
        output = tmp_path / 'spectra.tsv'
        run_main(
            [
                SUBCOMMAND.SPECTRA,
                '-n',
                get_data('FLX00*Naive.vep'),
                '-o',
                output,
                '--reference',
                indexed_reference(tmp_path),
                '--annotate',
                '--unique_on',
                'event',
            ]
        )
        df = read_output(output)
        assert 'base_change' in df.columns
        assert 'trans_tranv' in df.columns
        assert df.shape[0] == 7

    def test_missing_reference(self, tmp_path):
        run_main(
            [SUBCOMMAND.SPECTRA, '-n', get_data('FLX00*Naive.vep'), '-o', tmp_path / 'spectra.tsv'],
            ARGERROR_EXIT_CODE,
        )

    def test_log_file(self, tmp_path):
        log = tmp_path / 'vepvis.log'
        run_main(
            [
                SUBCOMMAND.SPECTRA,
                '-n',
                get_data('FLX0070Naive.vep'),
                '-o',
                tmp_path / 'spectra.tsv',
                '--reference',
                indexed_reference(tmp_path),
                '--log',
                log,
                '--verbose',
            ]
        )
        text = log.read_text()
        assert 'single nucleotide variants' in text
        assert 'run time' in text
