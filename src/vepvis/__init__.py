"""
holds submodules related to normalizing VEP annotations for waterfall and mutation spectrum plots
"""

__version__ = '0.3.1'
