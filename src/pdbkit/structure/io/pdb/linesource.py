# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"
__all__ = ["LineSource", "MAX_LINE_CAP"]

import os
import re

# 80 significant columns, the line break and one spare character
MAX_LINE_CAP = 82
_CHUNK_SIZE = 65536
_LINE_BREAK = re.compile(r"\r\n?|\n")


class LineSource:
    """
    A pull-based reader that yields one record line of a text stream at
    a time.

    Each line is limited to ``cap - 1`` characters, the remainder of
    longer lines is discarded up to and including the next line break.
    The line break is kept if it fits into the limit, like for
    ``fgets()``.
    Binary streams are decoded as *Latin-1*, so that each byte maps to
    exactly one character.

    Parameters
    ----------
    file : file-like object
        A file opened in text or binary mode, e.g. a regular file,
        ``sys.stdin`` or a decompressing file object.
    name : str, optional
        The name of the source, e.g. the file path.
        By default the ``name`` attribute of `file` is used, if present.
    cap : int, optional
        The line buffer size.
    owns_file : bool, optional
        If true, the file is closed when the line source is closed.

    Attributes
    ----------
    name : str
        The name of the source.
    line_number : int
        The number of lines read so far.

    Examples
    --------

    >>> import io
    >>> source = LineSource(io.StringIO("HEADER\\nEND\\n"))
    >>> print(repr(source.next_line()))
    'HEADER\\n'
    >>> print([line for line in source])
    ['END\\n']
    """

    def __init__(self, file, name=None, cap=MAX_LINE_CAP, owns_file=False):
        if cap < 2:
            raise ValueError("The line buffer must hold at least 2 characters")
        self._file = file
        if name is None:
            name = getattr(file, "name", "")
            if not isinstance(name, str):
                name = ""
        self.name = name
        self.cap = cap
        self.line_number = 0
        self._owns_file = owns_file
        self._buffer = ""
        self._pos = 0
        self._eof = False

    @staticmethod
    def open(path, cap=MAX_LINE_CAP):
        """
        Open a file as line source.

        Parameters
        ----------
        path : str or PathLike
            The path of the file.
        cap : int, optional
            The line buffer size.

        Returns
        -------
        source : LineSource
            The line source, that owns the opened file.
        """
        path = os.fspath(path)
        return LineSource(open(path, "rb"), name=path, cap=cap, owns_file=True)

    def next_line(self, cap=None):
        """
        Read the next line.

        *LF*, *CRLF* and a lone *CR* terminate a line.

        Parameters
        ----------
        cap : int, optional
            The line buffer size for this call.
            By default the size given in the constructor.

        Returns
        -------
        line : str
            The line including the line break, if it fits into the
            buffer.
            An empty string indicates the end of the stream.
        """
        if cap is None:
            cap = self.cap
        line = self._read_full_line()
        if len(line) == 0:
            return ""
        self.line_number += 1
        # The remainder of an over-long line is dropped
        return line[: cap - 1]

    def _read_full_line(self):
        while True:
            match = _LINE_BREAK.search(self._buffer, self._pos)
            # A CR at the end of the buffer may be followed by a LF
            if match is not None and (
                self._eof
                or match.group() != "\r"
                or match.end() < len(self._buffer)
            ):
                line = self._buffer[self._pos : match.end()]
                self._pos = match.end()
                return line
            if self._eof:
                line = self._buffer[self._pos :]
                self._buffer = ""
                self._pos = 0
                return line
            self._fill_buffer()

    def _fill_buffer(self):
        chunk = self._decode(self._file.read(_CHUNK_SIZE))
        if len(chunk) == 0:
            self._eof = True
        self._buffer = self._buffer[self._pos :] + chunk
        self._pos = 0

    def _decode(self, data):
        if isinstance(data, bytes):
            return data.decode("latin-1")
        return data

    def close(self):
        if self._owns_file:
            self._file.close()

    def __iter__(self):
        while True:
            line = self.next_line()
            if len(line) == 0:
                return
            yield line

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
