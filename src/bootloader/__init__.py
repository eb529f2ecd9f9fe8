"""
Bootloader: provision and tear down BOSH director environments.
"""

__version__ = "0.1.0"
