import os

from setuptools import find_packages, setup

VERSION = '0.3.1'


def parse_md_readme():
    """
    the long description shown on pypi, taken from the markdown readme
    """
    try:
        with open(os.path.join(os.path.dirname(__file__), 'README.md'), 'r') as fh:
            return fh.read()
    except OSError:
        return ''


# HSTLIB is a dependency for pysam.
# The cram file libraries fail for some OS versions and vepvis does not use cram files so we disable these options
os.environ['HTSLIB_CONFIGURE_OPTIONS'] = '--disable-lzma --disable-bz2 --disable-libcurl'


TEST_REQS = [
    'coverage>=4.2',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'biopython>=1.79',
    'braceexpand>=0.1.2',
    'colour',
    'jsonschema>=3.2.0',
    'numpy>=1.13.1',
    'pandas>=1.1.0',
    'pysam>=0.16',
]

DEPLOY_REQS = ['twine', 'wheel']


setup(
    name='vepvis',
    version='{}'.format(VERSION),
    package_dir={'': 'src'},
    packages=find_packages('src', exclude=['tests']),
    package_data={'vepvis.schemas': ['config.json']},
    include_package_data=True,
    description='Normalization of VEP annotations into waterfall and mutation spectrum tables',
    long_description=parse_md_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS + DEPLOY_REQS,
        'deploy': DEPLOY_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.7',
    test_suite='tests',
    entry_points={'console_scripts': ['vepvis = vepvis.main:main']},
)
