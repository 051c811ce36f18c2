# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
A subpackage for reading structure files.

Currently the legacy PDB format is supported via the
:mod:`pdbkit.structure.io.pdb` subpackage.
"""

__name__ = "pdbkit.structure.io"
__author__ = "The pdbkit developers"

from .pdb import read_pdb, read_pdb_file, read_pdb_string
