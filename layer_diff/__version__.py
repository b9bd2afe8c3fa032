"""
Version and package metadata.
"""

__title__ = 'layer-diff'
__description__ = 'Content-addressed diff of container image layers.'
__version__ = '0.1.0'
__author__ = 'layer-diff contributors'
__license__ = 'MIT'
