import os
import shutil

import pysam

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def package_relative_file(*paths):
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..', *paths))


def get_data(*paths):
    return os.path.join(DATA_DIR, *paths)


def indexed_reference(dirname, name='mock_reference_genome.fa'):
    """
    copy the mock reference to a temporary directory and index it there
    """
    filename = os.path.join(str(dirname), name)
    shutil.copyfile(get_data('mock_reference_genome.fa'), filename)
    pysam.faidx(filename)
    return filename


def mock_vep_row(**kwargs):
    """
    a single VEP record as it would be read from a file, with the defaults for any field not given
    """
    row = {
        'Uploaded_variation': 'var1',
        'Location': '1:10',
        'Allele': 'A',
        'Gene': 'ENSG00000000002',
        'Feature': 'ENST00000000021',
        'Feature_type': 'Transcript',
        'Consequence': 'missense_variant',
        'cDNA_position': '-',
        'CDS_position': '-',
        'Protein_position': '-',
        'Amino_acids': '-',
        'Codons': '-',
        'Existing_variation': '-',
        'Extra': 'IMPACT=MODERATE;SYMBOL=GENEB',
        'sample': 'sample1',
    }
    row.update(kwargs)
    return row
