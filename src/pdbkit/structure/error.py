# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains all possible errors of the `structure` subpackage.
"""

__name__ = "pdbkit.structure"
__author__ = "The pdbkit developers"
__all__ = [
    "BadStructureError",
    "ImpossibleAngleError",
    "PDBParseError",
    "ShortLineError",
    "OrphanAnisouError",
    "OrphanAtomError",
    "DuplicateModelError",
    "ModelWithoutEndmdlError",
    "MalformedChargeError",
    "CellParseError",
    "IncompleteStructureWarning",
    "UnexpectedStructureWarning",
]

from pdbkit.file import InvalidFileError


class BadStructureError(Exception):
    """
    Indicates that a structure is not suitable for a certain operation.
    """

    pass


class ImpossibleAngleError(BadStructureError, ValueError):
    """
    Indicates that a unit cell angle is a multiple of 180°.
    """

    pass


class PDBParseError(InvalidFileError):
    """
    Base class for errors raised while reading a PDB file.

    Parameters
    ----------
    message : str
        The description of the problem.
    line_number : int, optional
        The one-based number of the offending line.
        If given, the message is prefixed with the line number.
    line : str, optional
        The content of the offending line.

    Attributes
    ----------
    line_number : int or None
        The one-based number of the offending line.
    line : str or None
        The content of the offending line.
    """

    def __init__(self, message, line_number=None, line=None):
        if line_number is not None:
            message = f"Problem in line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class ShortLineError(PDBParseError):
    """
    Indicates an *ATOM* or *HETATM* record that is too short to contain
    all mandatory columns.
    """

    pass


class OrphanAnisouError(PDBParseError):
    """
    Indicates an *ANISOU* record that does not directly follow the
    *ATOM*/*HETATM* record it refers to.
    """

    pass


class OrphanAtomError(PDBParseError):
    """
    Indicates an *ATOM*/*HETATM* record between *ENDMDL* and the next
    *MODEL* record.
    """

    pass


class DuplicateModelError(PDBParseError):
    """
    Indicates a *MODEL* number that was already used.
    """

    pass


class ModelWithoutEndmdlError(PDBParseError):
    """
    Indicates a *MODEL* record inside another model.
    """

    pass


class MalformedChargeError(PDBParseError):
    """
    Indicates a charge field that is neither in the ``2+`` nor in the
    ``+2`` layout.
    """

    pass


class CellParseError(PDBParseError):
    """
    Indicates a *CRYST1* record describing an impossible unit cell.
    """

    pass


class IncompleteStructureWarning(Warning):
    """
    Indicates that a structure is not complete.
    """

    pass


class UnexpectedStructureWarning(Warning):
    """
    Indicates that a structure was not expected.
    """

    pass
