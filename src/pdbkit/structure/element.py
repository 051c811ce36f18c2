# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Chemical elements as read from the element columns of PDB records.
"""

__name__ = "pdbkit.structure"
__author__ = "The pdbkit developers"
__all__ = ["Element", "element_symbols"]

# Index in this list is the atomic number, 'X' is an unknown element
_elements = [
    "X",
    "H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar", "K", "Ca",
    "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr", "Rb", "Sr", "Y", "Zr",
    "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd", "In", "Sn",
    "Sb", "Te", "I", "Xe", "Cs", "Ba", "La", "Ce", "Pr", "Nd",
    "Pm", "Sm", "Eu", "Gd", "Tb", "Dy", "Ho", "Er", "Tm", "Yb",
    "Lu", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt", "Au", "Hg",
    "Tl", "Pb", "Bi", "Po", "At", "Rn", "Fr", "Ra", "Ac", "Th",
    "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf", "Es", "Fm",
    "Md", "No", "Lr", "Rf", "Db", "Sg", "Bh", "Hs", "Mt", "Ds",
    "Rg", "Cn", "Nh", "Fl", "Mc", "Lv", "Ts", "Og",
]  # fmt: skip
_symbol_to_number = {elem.upper(): i for i, elem in enumerate(_elements)}
# Deuterium is written as 'D' in neutron diffraction entries
_symbol_to_number["D"] = 1


def element_symbols():
    """
    Get the symbols of all known elements.

    Returns
    -------
    symbols : tuple of str
        The element symbols, ordered by atomic number.
        The first entry is ``'X'``, the symbol for an unknown element.
    """
    return tuple(_elements)


class Element:
    """
    A chemical element.

    The element is looked up case-insensitively from its symbol.
    Surrounding whitespace is ignored, so that both the right-justified
    (``' C'``) and the left-justified (``'C '``) form of the PDB element
    columns are accepted.
    Unknown symbols give the unknown element ``'X'``.

    Parameters
    ----------
    symbol : str
        The element symbol.

    Attributes
    ----------
    symbol : str
        The canonical symbol, e.g. ``'Fe'``.
        ``'D'`` is kept for deuterium.
    atomic_number : int
        The atomic number, 0 for the unknown element.

    Examples
    --------

    >>> print(Element(" FE").symbol)
    Fe
    >>> print(Element("se").atomic_number)
    34
    """

    def __init__(self, symbol=""):
        key = symbol.strip().upper()
        number = _symbol_to_number.get(key, 0)
        self.atomic_number = number
        if key == "D":
            self.symbol = "D"
        else:
            self.symbol = _elements[number]

    def is_hydrogen(self):
        return self.atomic_number == 1

    def __eq__(self, item):
        if isinstance(item, str):
            item = Element(item)
        if not isinstance(item, Element):
            return False
        return self.symbol == item.symbol

    def __hash__(self):
        return hash(self.symbol)

    def __repr__(self):
        return f'Element("{self.symbol}")'

    def __str__(self):
        return self.symbol
