"""
hand-enumerated schemas of the VEP tab-delimited output format for each supported release
"""
import re
from typing import Dict, List, Tuple

from ..constants import COLUMNS

SUPPORTED_VERSIONS: Tuple[int, ...] = (88, 89, 90)

VERSION_PATTERN = re.compile(r'^##\s*ENSEMBL VARIANT EFFECT PREDICTOR v(?P<version>\d+)(\.\d+)*')
ASSEMBLY_PATTERN = re.compile(r'^##\s*assembly version\s+(?P<assembly>\S+)')
DESCRIPTION_PATTERN = re.compile(r'^##\s*(?P<name>[A-Za-z0-9_]+)\s+:\s+(?P<description>.*)$')
LOCATION_PATTERN = re.compile(r'^(?P<chromosome>[^:]+):(?P<start>\d+)(?:-(?P<end>\d+))?$')

HEADER_PREFIX = '##'
EXTRA_DELIM = ';'
EXTRA_KEY_DELIM = '='
CONSEQUENCE_DELIM = ','
MISSING_VALUE = '-'

CORE_COLUMNS = [COLUMNS.location, COLUMNS.allele, COLUMNS.consequence]
"""list: columns that are split out of the meta table into the position and mutation tables"""

STANDARD_COLUMN_DESCRIPTIONS: Dict[str, str] = {
    'Uploaded_variation': 'Identifier of uploaded variant',
    'Location': 'Location of variant in standard coordinate format (chr:start or chr:start-end)',
    'Allele': 'The variant allele used to calculate the consequence',
    'Gene': 'Stable ID of affected gene',
    'Feature': 'Stable ID of feature',
    'Feature_type': 'Type of feature - Transcript, RegulatoryFeature or MotifFeature',
    'Consequence': 'Consequence type',
    'cDNA_position': 'Relative position of base pair in cDNA sequence',
    'CDS_position': 'Relative position of base pair in coding sequence',
    'Protein_position': 'Relative position of amino acid in protein',
    'Amino_acids': 'Reference and variant amino acids',
    'Codons': 'Reference and variant codon sequence',
    'Existing_variation': 'Identifier(s) of co-located known variants',
}

STANDARD_META_COLUMNS = [
    c for c in STANDARD_COLUMN_DESCRIPTIONS if c not in CORE_COLUMNS
]

_EXTRA_V88: Dict[str, str] = {
    'IMPACT': 'Subjective impact classification of consequence type',
    'DISTANCE': 'Shortest distance from variant to transcript',
    'STRAND': 'Strand of the feature (1/-1)',
    'FLAGS': 'Transcript quality flags',
    'VARIANT_CLASS': 'SO variant class',
    'SYMBOL': 'Gene symbol (e.g. HGNC)',
    'SYMBOL_SOURCE': 'Source of gene symbol',
    'HGNC_ID': 'Stable identifer of HGNC gene symbol',
    'BIOTYPE': 'Biotype of transcript or regulatory feature',
    'CANONICAL': 'Indicates if transcript is canonical for this gene',
    'TSL': 'Transcript support level',
    'APPRIS': 'Annotates alternatively spliced transcripts as primary or alternate based on a range of computational methods',
    'CCDS': 'Indicates if transcript is a CCDS transcript',
    'ENSP': 'Protein identifer',
    'SWISSPROT': 'UniProtKB/Swiss-Prot accession',
    'TREMBL': 'UniProtKB/TrEMBL accession',
    'UNIPARC': 'UniParc accession',
    'GENE_PHENO': 'Indicates if gene is associated with a phenotype, disease or trait',
    'SIFT': 'SIFT prediction and/or score',
    'PolyPhen': 'PolyPhen prediction and/or score',
    'EXON': 'Exon number(s) / total',
    'INTRON': 'Intron number(s) / total',
    'DOMAINS': 'The source and identifer of any overlapping protein domains',
    'HGVSc': 'HGVS coding sequence name',
    'HGVSp': 'HGVS protein sequence name',
    'HGVS_OFFSET': 'Indicates by how many bases the HGVS notations for this variant have been shifted',
    'AF': 'Frequency of existing variant in 1000 Genomes',
    'AFR_AF': 'Frequency of existing variant in 1000 Genomes combined African population',
    'AMR_AF': 'Frequency of existing variant in 1000 Genomes combined American population',
    'EAS_AF': 'Frequency of existing variant in 1000 Genomes combined East Asian population',
    'EUR_AF': 'Frequency of existing variant in 1000 Genomes combined European population',
    'SAS_AF': 'Frequency of existing variant in 1000 Genomes combined South Asian population',
    'AA_AF': 'Frequency of existing variant in NHLBI-ESP African American population',
    'EA_AF': 'Frequency of existing variant in NHLBI-ESP European American population',
    'gnomAD_AF': 'Frequency of existing variant in gnomAD exomes combined population',
    'gnomAD_AFR_AF': 'Frequency of existing variant in gnomAD exomes African/American population',
    'gnomAD_AMR_AF': 'Frequency of existing variant in gnomAD exomes American population',
    'gnomAD_ASJ_AF': 'Frequency of existing variant in gnomAD exomes Ashkenazi Jewish population',
    'gnomAD_EAS_AF': 'Frequency of existing variant in gnomAD exomes East Asian population',
    'gnomAD_FIN_AF': 'Frequency of existing variant in gnomAD exomes Finnish population',
    'gnomAD_NFE_AF': 'Frequency of existing variant in gnomAD exomes Non-Finnish European population',
    'gnomAD_OTH_AF': 'Frequency of existing variant in gnomAD exomes combined other combined populations',
    'gnomAD_SAS_AF': 'Frequency of existing variant in gnomAD exomes South Asian population',
    'MAX_AF': 'Maximum observed allele frequency in 1000 Genomes, ESP and gnomAD',
    'MAX_AF_POPS': 'Populations in which maximum allele frequency was observed',
    'CLIN_SIG': 'ClinVar clinical significance of the dbSNP variant',
    'SOMATIC': 'Somatic status of existing variant',
    'PHENO': 'Indicates if existing variant(s) is associated with a phenotype, disease or trait',
    'PUBMED': 'Pubmed ID(s) of publications that cite existing variant',
    'MOTIF_NAME': 'The source and identifier of a transcription factor binding profile aligned at this position',
    'MOTIF_POS': 'The relative position of the variation in the aligned TFBP',
    'HIGH_INF_POS': 'A flag indicating if the variant falls in a high information position of a transcription factor binding profile (TFBP)',
    'MOTIF_SCORE_CHANGE': 'The difference in motif score of the reference and variant sequences for the TFBP',
}

_EXTRA_V89: Dict[str, str] = dict(_EXTRA_V88)
_EXTRA_V89['REFSEQ_MATCH'] = 'RefSeq transcript match status'

_EXTRA_V90: Dict[str, str] = dict(_EXTRA_V89)
_EXTRA_V90['HGVSg'] = 'HGVS genomic sequence name'

EXTRA_KEYS: Dict[int, Dict[str, str]] = {88: _EXTRA_V88, 89: _EXTRA_V89, 90: _EXTRA_V90}
"""dict: Extra column keys (and their descriptions) by VEP version, in output order"""


def meta_columns(version: int) -> List[str]:
    """
    the full, ordered list of meta columns for a given VEP version
    """
    return STANDARD_META_COLUMNS + list(EXTRA_KEYS[version])


def field_descriptions(version: int) -> Dict[str, str]:
    result = dict(STANDARD_COLUMN_DESCRIPTIONS)
    result.update(EXTRA_KEYS[version])
    return result


_CONSEQUENCE_HIERARCHY_V88: Tuple[Tuple[str, str], ...] = (
    ('transcript_ablation', '#023858'),
    ('splice_acceptor_variant', '#045a8d'),
    ('splice_donor_variant', '#0570b0'),
    ('stop_gained', '#e31a1c'),
    ('frameshift_variant', '#b10026'),
    ('stop_lost', '#fc4e2a'),
    ('start_lost', '#fd8d3c'),
    ('transcript_amplification', '#3690c0'),
    ('inframe_insertion', '#6a51a3'),
    ('inframe_deletion', '#807dba'),
    ('missense_variant', '#238b45'),
    ('protein_altering_variant', '#41ab5d'),
    ('splice_region_variant', '#74a9cf'),
    ('incomplete_terminal_codon_variant', '#9e9ac8'),
    ('start_retained_variant', '#fed976'),
    ('stop_retained_variant', '#feb24c'),
    ('synonymous_variant', '#a1d99b'),
    ('coding_sequence_variant', '#c7e9c0'),
    ('mature_miRNA_variant', '#dadaeb'),
    ('5_prime_UTR_variant', '#fa9fb5'),
    ('3_prime_UTR_variant', '#f768a1'),
    ('non_coding_transcript_exon_variant', '#dd3497'),
    ('intron_variant', '#ae017e'),
    ('NMD_transcript_variant', '#7a0177'),
    ('non_coding_transcript_variant', '#49006a'),
    ('upstream_gene_variant', '#8c6bb1'),
    ('downstream_gene_variant', '#88419d'),
    ('TFBS_ablation', '#662506'),
    ('TFBS_amplification', '#993404'),
    ('TF_binding_site_variant', '#cc4c02'),
    ('regulatory_region_ablation', '#ec7014'),
    ('regulatory_region_amplification', '#fe9929'),
    ('feature_elongation', '#fec44f'),
    ('regulatory_region_variant', '#fee391'),
    ('feature_truncation', '#ffeda0'),
    ('intergenic_variant', '#d9d9d9'),
)

CONSEQUENCE_HIERARCHY: Dict[int, Tuple[Tuple[str, str], ...]] = {
    88: _CONSEQUENCE_HIERARCHY_V88,
    89: _CONSEQUENCE_HIERARCHY_V88,
    90: _CONSEQUENCE_HIERARCHY_V88,
}
"""dict: (consequence term, color) pairs by VEP version, most to least severe"""
