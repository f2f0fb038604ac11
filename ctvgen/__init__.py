"""Randomized BIP-119 template hash test vector generator"""

from ctvgen.version import __version__

__all__ = ('__version__',)
