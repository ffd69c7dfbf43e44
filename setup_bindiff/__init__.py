"""
setup-bindiff: install and configure BinDiff on CI runners.
"""

__version__ = "0.1.0"
