import logging

import pandas as pd
import pytest
from vepvis.constants import HIERARCHY_COLUMNS
from vepvis.error import HierarchyFormatError
from vepvis.hierarchy import (
    consequence_ranks,
    default_hierarchy,
    rank_labels,
    resolve_consequence,
    set_mutation_hierarchy,
    split_consequence,
    synthesize_colors,
)
from vepvis.vep import CONSEQUENCE_HIERARCHY, load_vep, vep_from_data

from ..util import get_data, mock_vep_row


@pytest.fixture(scope='module')
def records():
    return load_vep(get_data('FLX00*Naive.vep'))


@pytest.fixture
def user_hierarchy():
    return pd.read_csv(get_data('mock_hierarchy.tsv'), sep='\t')


class TestDefaultHierarchy:
    def test_default(self, records):
        hierarchy = set_mutation_hierarchy(records)
        assert list(hierarchy.columns) == HIERARCHY_COLUMNS
        assert len(hierarchy) == len(CONSEQUENCE_HIERARCHY[88])
        assert hierarchy['mutation'].tolist()[0] == 'transcript_ablation'
        assert hierarchy['label'].tolist()[:2] == ['01', '02']
        assert hierarchy['label'].tolist()[-1] == str(len(hierarchy))
        assert not hierarchy['mutation'].str.contains(',').any()

    def test_default_table_is_new(self):
        first = default_hierarchy(88)
        first.loc[0, 'mutation'] = 'changed'
        assert default_hierarchy(88).loc[0, 'mutation'] == 'transcript_ablation'

    def test_verbose_same_output(self, records, caplog):
        caplog.set_level(logging.INFO, logger='vepvis')
        quiet = set_mutation_hierarchy(records)
        loud = set_mutation_hierarchy(records, verbose=True)
        pd.testing.assert_frame_equal(quiet, loud)
        assert 'using the default ranking' in caplog.text


class TestUserHierarchy:
    def test_compound_kept_verbatim(self, records, user_hierarchy, caplog):
        hierarchy = set_mutation_hierarchy(records, user_hierarchy)
        assert hierarchy['mutation'].tolist() == [
            'missense_variant,splice_region_variant',
            'stop_gained',
            'missense_variant',
            'frameshift_variant',
            'inframe_insertion',
            'splice_region_variant',
            'synonymous_variant',
            '3_prime_UTR_variant',
            'intron_variant',
            'intergenic_variant',
        ]
        assert hierarchy['label'].tolist() == rank_labels(10)
        assert 'frameshift_variant' in caplog.text

    def test_appended_colors(self, records, user_hierarchy):
        hierarchy = set_mutation_hierarchy(records, user_hierarchy).set_index('mutation')
        assert hierarchy.loc['frameshift_variant', 'color'] == dict(CONSEQUENCE_HIERARCHY[88])['frameshift_variant']
        assert hierarchy.loc['stop_gained', 'color'] == '#000000'

    def test_only_store_compounds_never_appended(self, records):
        hierarchy = set_mutation_hierarchy(records, pd.DataFrame({'mutation': ['stop_gained'], 'color': ['#000000']}))
        assert not hierarchy['mutation'].str.contains(',').any()

    def test_wrong_columns(self, records):
        with pytest.raises(HierarchyFormatError):
            set_mutation_hierarchy(records, pd.DataFrame({'wrong': ['a'], 'columns': ['b']}))

    def test_missing_color(self, records):
        with pytest.raises(HierarchyFormatError):
            set_mutation_hierarchy(records, pd.DataFrame({'mutation': ['stop_gained']}))

    def test_coerce_dict(self, records, caplog):
        hierarchy = set_mutation_hierarchy(records, {'mutation': ['stop_gained'], 'color': ['#000000']})
        assert hierarchy['mutation'].tolist()[0] == 'stop_gained'
        assert 'converting to a pandas DataFrame' in caplog.text

    def test_duplicates(self, records, caplog):
        hierarchy = set_mutation_hierarchy(
            records,
            pd.DataFrame({'mutation': ['stop_gained', 'stop_gained'], 'color': ['#000000', '#ffffff']}),
        )
        assert hierarchy['mutation'].tolist().count('stop_gained') == 1
        assert hierarchy.loc[0, 'color'] == '#000000'
        assert 'duplicate' in caplog.text

    def test_blank_terms_removed(self, records, caplog):
        hierarchy = set_mutation_hierarchy(
            records,
            pd.DataFrame({'mutation': ['stop_gained', None, '  '], 'color': ['#000000', '#ffffff', '#ff0000']}),
        )
        assert 'nan' not in hierarchy['mutation'].tolist()
        assert '' not in hierarchy['mutation'].tolist()
        assert hierarchy['mutation'].tolist()[0] == 'stop_gained'
        assert 'removing 2 mutation hierarchy row(s) without a mutation term: rows 1, 2' in caplog.text

    def test_empty(self, records):
        hierarchy = set_mutation_hierarchy(records, pd.DataFrame())
        assert hierarchy['mutation'].tolist()[:2] == ['stop_gained', 'frameshift_variant']
        assert hierarchy['label'].tolist()[0] == '01'

    def test_unknown_term(self):
        records = vep_from_data(
            pd.DataFrame(
                [
                    mock_vep_row(Consequence='novel_variant'),
                    mock_vep_row(Consequence='other_novel_variant,missense_variant'),
                ]
            ),
            88,
        )
        hierarchy = set_mutation_hierarchy(
            records, pd.DataFrame({'mutation': ['stop_gained'], 'color': ['#000000']})
        )
        assert hierarchy['mutation'].tolist() == [
            'stop_gained',
            'missense_variant',
            'novel_variant',
            'other_novel_variant',
        ]
        assert hierarchy['color'].tolist()[2:] == synthesize_colors(2)


class TestHelpers:
    def test_split_consequence(self):
        assert split_consequence('missense_variant, splice_region_variant') == [
            'missense_variant',
            'splice_region_variant',
        ]

    def test_rank_labels(self):
        assert rank_labels(0) == []
        assert rank_labels(9)[-1] == '9'
        assert rank_labels(100)[0] == '001'

    def test_synthesize_colors(self):
        assert synthesize_colors(0) == []
        assert synthesize_colors(1) == ['#bdbdbd']
        colors = synthesize_colors(3)
        assert len(colors) == 3
        assert colors[0] == '#bdbdbd'
        assert colors[-1] == '#252525'

    def test_consequence_ranks(self):
        ranks = consequence_ranks(pd.DataFrame({'mutation': ['stop_gained'], 'color': ['#000000']}), 88)
        assert ranks['stop_gained'] == 0
        assert ranks['transcript_ablation'] == 1
        assert ranks['missense_variant'] == 11

    def test_resolve_verbatim(self):
        assert resolve_consequence('a,b', {'a,b': 0, 'a': 1}) == ('a,b', 0)

    def test_resolve_compound(self):
        ranks = consequence_ranks(default_hierarchy(88), 88)
        assert resolve_consequence('splice_region_variant,missense_variant', ranks) == ('missense_variant', 10)

    def test_resolve_unknown(self):
        assert resolve_consequence('unknown_variant', {'a': 0, 'b': 1}) == ('unknown_variant', 2)
