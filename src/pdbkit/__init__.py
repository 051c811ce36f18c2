# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This is the top-level package of *pdbkit*.
It provides the file utilities shared by the
:mod:`pdbkit.structure` subpackage, which contains the actual data
model and the reader for the legacy PDB format.
"""

__version__ = "0.3.0"
__name__ = "pdbkit"
__author__ = "The pdbkit developers"

from .file import *
