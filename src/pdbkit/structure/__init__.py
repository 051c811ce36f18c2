# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
A subpackage for handling macromolecular structures.

A :class:`Structure` is a hierarchy of :class:`Model`, :class:`Chain`,
:class:`Residue` and :class:`Atom` objects.
Besides the models, a structure holds the metadata of the file it was
read from, the :class:`Entity` objects shared by its chains, the
:class:`UnitCell` of the crystal and the non-crystallographic symmetry
operations (:class:`NcsOp`).

The coordinates of an :class:`Atom` are a `NumPy` float
:class:`ndarray` of length 3.
The :class:`UnitCell` converts between orthogonal and fractional
coordinates and finds the nearest symmetry image of a position.

Reading structures from files is the task of the
:mod:`pdbkit.structure.io` subpackage.
"""

__name__ = "pdbkit.structure"
__author__ = "The pdbkit developers"

from .error import *
from .element import *
from .unitcell import *
from .model import *
