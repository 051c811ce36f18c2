# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage is used for reading a :class:`Structure` from the
legacy PDB format.

The reader is lenient: it accepts truncated records, lower case record
names and nonstandard numbering like *hybrid-36* residue numbers,
while it rejects records that cannot be interpreted consistently,
like an *ANISOU* record without preceding atom.
Metadata from the header records is stored in :attr:`Structure.info`
using the corresponding PDBx/mmCIF tags.
"""

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"

from .fields import *
from .linesource import *
from .entity import *
from .connect import *
from .file import *
