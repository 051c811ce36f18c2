# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Scanners for the fixed-column fields of PDB records.

All scanners take the field as string, usually obtained by slicing the
record line (e.g. ``line[30:38]``).
Since slicing never fails, a record that is shorter than expected
simply gives a shorter (or empty) field, which is read as if the
missing columns were blank.
"""

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"
__all__ = [
    "read_int",
    "read_double",
    "read_string",
    "read_base36",
    "read_snic",
    "read_charge",
    "is_record_type",
    "record_key",
    "rtrimmed",
]

from pdbkit.structure.error import MalformedChargeError
from pdbkit.structure.io.pdb.hybrid36 import decode_hybrid36

# Equivalent to 'isspace()' of the C locale
_WHITESPACE = " \t\n\r\f\v"
_DIGITS = "0123456789"
_BASE36_VALUES = {
    char: i for i, char in enumerate("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ")
}
# Characters that are treated like a blank in the record name
_BLANK_LIKE = " \0\r\n"


def _skip_sign(field, i):
    sign = 1
    if i < len(field):
        if field[i] == "-":
            return -1, i + 1
        elif field[i] == "+":
            return 1, i + 1
    return sign, i


def _skip_whitespace(field):
    i = 0
    while i < len(field) and field[i] in _WHITESPACE:
        i += 1
    return i


def read_int(field):
    """
    Read a signed decimal integer.

    Leading whitespace and an optional sign are accepted.
    Reading stops at the first character that is not a digit.

    Parameters
    ----------
    field : str
        The field to be read.

    Returns
    -------
    number : int
        The integer, 0 if the field contains no digits.

    Examples
    --------

    >>> print(read_int("  -42 "))
    -42
    >>> print(read_int("    "))
    0
    """
    i = _skip_whitespace(field)
    sign, i = _skip_sign(field, i)
    number = 0
    while i < len(field) and field[i] in _DIGITS:
        number = number * 10 + (ord(field[i]) - 48)
        i += 1
    return sign * number


def read_double(field):
    """
    Read a signed decimal floating point number.

    The exponent notation is not supported:
    reading stops at the first character, that does not fit into
    the ``[sign]digits[.digits]`` pattern.

    Parameters
    ----------
    field : str
        The field to be read.

    Returns
    -------
    number : float
        The number, 0 if the field contains no digits.
    """
    i = _skip_whitespace(field)
    sign, i = _skip_sign(field, i)
    number = 0.0
    while i < len(field) and field[i] in _DIGITS:
        number = number * 10 + (ord(field[i]) - 48)
        i += 1
    if i < len(field) and field[i] == ".":
        mult = 0.1
        i += 1
        while i < len(field) and field[i] in _DIGITS:
            number += mult * (ord(field[i]) - 48)
            mult *= 0.1
            i += 1
    return sign * number


def read_string(field):
    """
    Read a string field.

    The string is trimmed on both sides and ends at the first line
    break or NUL character.

    Parameters
    ----------
    field : str
        The field to be read.

    Returns
    -------
    string : str
        The trimmed string.
    """
    field = field.lstrip(_WHITESPACE)
    for i, char in enumerate(field):
        if char in "\n\r\0":
            field = field[:i]
            break
    return field.rstrip(_WHITESPACE)


def rtrimmed(text):
    return text.rstrip(_WHITESPACE)


def read_base36(field):
    """
    Read an unsigned base-36 number (digits and letters, the case is
    ignored).

    Reading stops at the first character that is not a base-36 digit.

    Parameters
    ----------
    field : str
        The field to be read.

    Returns
    -------
    number : int
        The number.
    """
    i = _skip_whitespace(field)
    sign, i = _skip_sign(field, i)
    number = 0
    while i < len(field):
        value = _BASE36_VALUES.get(field[i].upper())
        if value is None:
            break
        number = number * 36 + value
        i += 1
    return sign * number


def read_snic(field):
    """
    Read the residue sequence number and insertion code.

    The sequence number in the first four columns may be written in
    *hybrid-36* notation for numbers above 9999.
    The insertion code is the fifth column.

    Parameters
    ----------
    field : str
        The five columns containing sequence number and insertion code,
        e.g. ``line[22:27]`` of an *ATOM* record.

    Returns
    -------
    seqnum : int
        The residue sequence number.
    icode : str
        The insertion code, an empty string if the column is blank.

    Examples
    --------

    >>> print(read_snic("  42A"))
    (42, 'A')
    >>> print(read_snic("A000 "))
    (10000, '')
    """
    number_field = field[:4].ljust(4)
    if number_field[0] < "A":
        seqnum = read_int(number_field)
    else:
        try:
            seqnum = decode_hybrid36(number_field)
        except ValueError:
            # Partially readable number, like 'strtol()'
            seqnum = read_base36(number_field) - 466560 + 10000
    icode = field[4:5]
    if icode in _WHITESPACE or icode == "\0":
        icode = ""
    return seqnum, icode


def read_charge(digit, sign):
    """
    Read the formal charge from the two charge columns.

    Both the standard layout (``'2+'``) and the swapped layout
    (``'+2'``) are accepted.
    A missing sign is read as positive charge.

    Parameters
    ----------
    digit, sign : str
        The two charge columns in the order of the record.
        An empty string is read as blank.

    Returns
    -------
    charge : int
        The charge.

    Raises
    ------
    MalformedChargeError
        If the columns contain a digit, but the other column is neither
        a sign nor blank.

    Examples
    --------

    >>> print(read_charge("2", "-"))
    -2
    >>> print(read_charge("+", "2"))
    2
    """
    digit = digit or "\0"
    sign = sign or "\0"
    if digit == " " and sign == " ":
        return 0
    if sign in _DIGITS:
        digit, sign = sign, digit
    if digit in _DIGITS:
        if sign not in "+-\0" and sign not in _WHITESPACE:
            raise MalformedChargeError(
                f"Wrong format for charge: {digit}{sign}"
            )
        charge = ord(digit) - 48
        return -charge if sign == "-" else charge
    return 0


def is_record_type(line, record):
    """
    Check whether a line is of the given record type.

    Only the first four characters are compared, ignoring the case.
    Blanks, NUL and line break characters are equivalent in the line,
    so that ``'END'`` matches both ``'END   '`` and ``'END\\n'``.

    Parameters
    ----------
    line : str
        The record line.
    record : str
        The upper case record name, e.g. ``'ATOM'`` or ``'MTRIXn'``.

    Returns
    -------
    is_record_type : bool
        True, if the line is of the given record type.
    """
    return record_key(line) == record[:4].ljust(4, "\0")


def record_key(line):
    """
    Get the normalized record name of a line.

    The first four characters are converted to upper case, blanks,
    NUL and line break characters are converted to NUL and missing
    characters are filled with NUL.

    Parameters
    ----------
    line : str
        The record line.

    Returns
    -------
    key : str
        The normalized record name, e.g. ``'ATOM'`` or ``'END\\0'``.
    """
    key = []
    for char in line[:4].ljust(4, "\0"):
        if char in _BLANK_LIKE:
            key.append("\0")
        else:
            # Clearing the case bit maps lower to upper case letters
            key.append(chr(ord(char) & ~0x20))
    return "".join(key)
