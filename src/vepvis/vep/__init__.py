from .constants import CONSEQUENCE_HIERARCHY, SUPPORTED_VERSIONS
from .records import VepRecords, load_vep, resolve_version, vep_from_data
