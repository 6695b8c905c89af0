import json

import pytest
from vepvis.config import get_metavar, load_config, read_hierarchy_file, validate_config
from vepvis.error import ConfigurationError
from vepvis.schemas import DEFAULTS, get_by_prefix
from vepvis.util import filepath

from ..util import get_data


class TestDefaults:
    def test_defaults(self):
        assert DEFAULTS['spectra.unique_on'] == 'row'
        assert DEFAULTS['spectra.annotate'] is False
        assert DEFAULTS['vep.version'] is None

    def test_immutable(self):
        with pytest.raises(TypeError):
            DEFAULTS['spectra.unique_on'] = 'event'

    def test_get_by_prefix(self):
        assert get_by_prefix(DEFAULTS, 'spectra.') == {'unique_on': 'row', 'annotate': False}


class TestLoadConfig:
    def test_no_file(self):
        assert load_config() == dict(DEFAULTS)

    def test_fills_defaults(self, tmp_path):
        filename = tmp_path / 'config.json'
        filename.write_text(json.dumps({'spectra.unique_on': 'event', 'vep.version': 89}))
        config = load_config(str(filename))
        assert config['spectra.unique_on'] == 'event'
        assert config['vep.version'] == 89
        assert config['spectra.annotate'] is False

    def test_bad_value(self, tmp_path):
        filename = tmp_path / 'config.json'
        filename.write_text(json.dumps({'spectra.unique_on': 'locus'}))
        with pytest.raises(ConfigurationError):
            load_config(str(filename))

    def test_unsupported_version(self):
        with pytest.raises(ConfigurationError):
            validate_config({'vep.version': 87})

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError):
            validate_config({'spectra.unknown': 1})

    def test_not_an_object(self, tmp_path):
        filename = tmp_path / 'config.json'
        filename.write_text('[]')
        with pytest.raises(ConfigurationError):
            load_config(str(filename))


class TestReadHierarchyFile:
    def test_read(self):
        df = read_hierarchy_file(get_data('mock_hierarchy.tsv'))
        assert list(df.columns) == ['mutation', 'color']
        assert df['mutation'].tolist()[0] == 'missense_variant,splice_region_variant'


class TestGetMetavar:
    def test_types(self):
        assert get_metavar(bool) == '{True,False}'
        assert get_metavar(int) == 'INT'
        assert get_metavar(float) == 'FLOAT'
        assert get_metavar(filepath) == 'FILEPATH'
        assert get_metavar(str) is None
