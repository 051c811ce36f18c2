# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Encoding and decoding of the *hybrid-36* number format.

Numbers that fit into the field are written in decimal notation.
Larger numbers continue with an upper-case base-36 notation starting
at ``'A000'``, and finally with a lower-case base-36 notation starting
at ``'a000'`` (for a field length of 4).
"""

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"
__all__ = ["encode_hybrid36", "decode_hybrid36", "max_hybrid36_number"]

_DIGITS_UPPER = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_DIGITS_LOWER = _DIGITS_UPPER.lower()
_UPPER_VALUES = {digit: i for i, digit in enumerate(_DIGITS_UPPER)}
_LOWER_VALUES = {digit: i for i, digit in enumerate(_DIGITS_LOWER)}


def encode_hybrid36(number, length):
    """
    Encode an integer value into a hybrid-36 string representation.

    Parameters
    ----------
    number : int
        A positive integer to be converted into a string.
    length : int
        The desired length of the string representation.
        The resulting hybrid-36 string depends on the length the string
        should have.

    Returns
    -------
    hybrid36 : str
        The hybrid-36 string representation.

    Examples
    --------

    >>> print(encode_hybrid36(9999, 4))
    9999
    >>> print(encode_hybrid36(10000, 4))
    A000
    """
    if number < 0:
        raise ValueError(
            "Only positive integers can be converted into hybrid-36 notation"
        )
    if number < 10**length:
        return str(number).rjust(length)
    number -= 10**length
    block = 26 * 36 ** (length - 1)
    if number < block:
        return _encode_base36(number + 10 * 36 ** (length - 1), _DIGITS_UPPER)
    number -= block
    if number < block:
        return _encode_base36(number + 10 * 36 ** (length - 1), _DIGITS_LOWER)
    raise ValueError(
        f"Value {number + 10**length + block} is too large for hybrid-36 "
        f"encoding at a length of {length}"
    )


def decode_hybrid36(string):
    """
    Convert a hybrid-36 string into an integer value.

    Parameters
    ----------
    string : str
        A hybrid-36 string representation.
        Leading and trailing whitespace is ignored for decimal numbers.

    Returns
    -------
    number : int
        The integer value represented by the hybrid-36 string.

    Examples
    --------

    >>> print(decode_hybrid36("A000"))
    10000
    >>> print(decode_hybrid36("zzzz"))
    2436111
    """
    length = len(string)
    if length == 0:
        raise ValueError("An empty string cannot be decoded")
    first = string[0]
    if first == "-" or first == " " or first.isdigit():
        try:
            return int(string)
        except ValueError:
            if string.strip() == "":
                return 0
            raise ValueError(f"Invalid hybrid-36 literal '{string}'")
    elif first in _UPPER_VALUES:
        values = _UPPER_VALUES
        offset = -10 * 36 ** (length - 1) + 10**length
    elif first in _LOWER_VALUES:
        values = _LOWER_VALUES
        offset = 16 * 36 ** (length - 1) + 10**length
    else:
        raise ValueError(f"Invalid hybrid-36 literal '{string}'")
    number = 0
    for char in string:
        try:
            number = number * 36 + values[char]
        except KeyError:
            raise ValueError(f"Invalid hybrid-36 literal '{string}'")
    return number + offset


def max_hybrid36_number(length):
    """
    Give the maximum integer value that can be represented by a
    hybrid-36 string of the given length.

    Parameters
    ----------
    length : int
        The length of a hybrid-36 string.

    Returns
    -------
    max_number : int
        The maximum integer value that can be represented by a hybrid-36
        string of the given `length`.
    """
    return 10**length - 1 + 2 * (26 * 36 ** (length - 1))


def _encode_base36(number, digits):
    chars = []
    while number != 0:
        number, rest = divmod(number, 36)
        chars.append(digits[rest])
    return "".join(reversed(chars))
