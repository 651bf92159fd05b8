"""
fantastical-cli - command-line front end for the Fantastical calendar app.
"""

from .version import __version__

__all__ = ['__version__']
