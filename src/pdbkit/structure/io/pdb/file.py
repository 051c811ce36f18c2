# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"
__all__ = ["read_pdb", "read_pdb_file", "read_pdb_string"]

import io
import os
import sys
import warnings
import numpy as np
from pdbkit.file import is_binary, is_open_compatible, is_text
from pdbkit.structure.element import Element
from pdbkit.structure.error import (
    CellParseError,
    DuplicateModelError,
    ImpossibleAngleError,
    IncompleteStructureWarning,
    MalformedChargeError,
    ModelWithoutEndmdlError,
    OrphanAnisouError,
    OrphanAtomError,
    ShortLineError,
    UnexpectedStructureWarning,
)
from pdbkit.structure.io.pdb.connect import process_conn
from pdbkit.structure.io.pdb.entity import EntitySetter
from pdbkit.structure.io.pdb.fields import (
    read_charge,
    read_double,
    read_int,
    read_snic,
    read_string,
    record_key,
    rtrimmed,
)
from pdbkit.structure.io.pdb.linesource import LineSource
from pdbkit.structure.model import Atom, EntityType, NcsOp, ResidueId, Structure
from pdbkit.structure.unitcell import Transform

# ATOM/HETATM
_atom_name = slice(12, 16)
_alt_loc = 16
_res_name = slice(17, 20)
_chain_id = slice(20, 22)
_snic = slice(22, 27)
_coord_x = slice(30, 38)
_coord_y = slice(38, 46)
_coord_z = slice(46, 54)
_occupancy = slice(54, 60)
_temp_f = slice(60, 66)
_segment = slice(72, 76)
_element = slice(76, 78)
_charge_digit = slice(78, 79)
_charge_sign = slice(79, 80)
# TITLE/KEYWDS/EXPDTA
_text = slice(10, None)
# ANISOU
_anisou = [slice(28 + 7 * i, 35 + 7 * i) for i in range(6)]
# HEADER
_keywords = slice(10, 50)
_date = slice(50, 59)
_entry_id = slice(62, 66)
# CRYST1
_cell_params = [
    slice(6, 15),
    slice(15, 24),
    slice(24, 33),
    slice(33, 40),
    slice(40, 47),
    slice(47, 54),
]
_space_group = slice(55, 66)
_z_number = slice(66, 70)
# MTRIXn/SCALEn/ORIGXn
_matrix_row = 5
_matrix_columns = [slice(10, 20), slice(20, 30), slice(30, 40)]
_matrix_vector = slice(45, 55)
_mtrix_serial = slice(7, 10)
_mtrix_given = slice(59, 60)
# MODEL
_model_serial = slice(10, 14)
# SEQRES
_seqres_chain_id = slice(10, 12)
_seqres_monomers = [slice(i, i + 3) for i in range(19, 68, 4)]

# Minimum number of columns of the respective records
_MIN_ATOM_LENGTH = 76
_MIN_CHARGE_LENGTH = 78
_MIN_KEYWORDS_LENGTH = 10
_MIN_DATE_LENGTH = 59
_MIN_ENTRY_ID_LENGTH = 66
_MIN_TEXT_LENGTH = 10
_MIN_CELL_LENGTH = 54
_MIN_SPACE_GROUP_LENGTH = 56
_MIN_Z_LENGTH = 67
_MIN_MATRIX_LENGTH = 45
_MIN_SSBOND_LENGTH = 34
_MIN_CISPEP_LENGTH = 21

_months = {
    "JAN": "01",
    "FEB": "02",
    "MAR": "03",
    "APR": "04",
    "MAY": "05",
    "JUN": "06",
    "JUL": "07",
    "AUG": "08",
    "SEP": "09",
    "OCT": "10",
    "NOV": "11",
    "DEC": "12",
}


def read_pdb_file(path):
    """
    Read a structure from a PDB file.

    Parameters
    ----------
    path : str or PathLike
        The path of the file.

    Returns
    -------
    structure : Structure
        The structure, named after the base name of the file.

    Raises
    ------
    PDBParseError
        If the file is malformed.
    OSError
        If the file cannot be opened.
    """
    with LineSource.open(path) as source:
        return _PDBReader(source, os.fspath(path)).read()


def read_pdb_string(text, name=""):
    """
    Read a structure from PDB formatted text.

    Parameters
    ----------
    text : str
        The content of a PDB file.
    name : str, optional
        The name of the structure.

    Returns
    -------
    structure : Structure
        The structure.

    Examples
    --------

    >>> structure = read_pdb_string(
    ...     "ATOM      1  N   ALA A   1      11.104   6.134  -6.504"
    ...     "  1.00  0.00           N\\n"
    ... )
    >>> print(structure.models[0].chains[0].residues[0])
    ALA 1
    """
    return _PDBReader(LineSource(io.StringIO(text), name=name), name).read()


def read_pdb(source):
    """
    Read a structure from a PDB file, a file-like object or a stream
    provider.

    Parameters
    ----------
    source : str or PathLike or file-like object or LineSource or object
        The source of the records.
        A path of ``'-'`` denotes the standard input.
        Any other object must provide the methods ``is_stdin()`` and
        ``path()`` and may provide ``get_line_stream()``, which returns a
        file-like object or a :class:`LineSource`, e.g. for a
        decompressing reader.
        If ``get_line_stream()`` is missing or returns ``None``, the file
        at ``path()`` is read.

    Returns
    -------
    structure : Structure
        The structure.

    Raises
    ------
    PDBParseError
        If the records are malformed.
    TypeError
        If the type of `source` is not supported.
    """
    if is_open_compatible(source):
        path = os.fsdecode(source)
        if path == "-":
            return _read_stdin()
        return read_pdb_file(path)
    if isinstance(source, LineSource):
        return _PDBReader(source, source.name).read()
    if is_text(source) or is_binary(source) or hasattr(source, "read"):
        line_source = LineSource(source)
        return _PDBReader(line_source, line_source.name).read()
    if hasattr(source, "is_stdin") and hasattr(source, "path"):
        if source.is_stdin():
            return _read_stdin()
        stream = None
        if hasattr(source, "get_line_stream"):
            stream = source.get_line_stream()
        if stream is None:
            return read_pdb_file(source.path())
        if not isinstance(stream, LineSource):
            stream = LineSource(stream, name=source.path())
        return _PDBReader(stream, source.path()).read()
    raise TypeError(f"Unsupported source type '{type(source).__name__}'")


def _read_stdin():
    stdin = getattr(sys.stdin, "buffer", sys.stdin)
    return _PDBReader(LineSource(stdin, name="stdin"), "stdin").read()


class _PDBReader:
    """
    The state of reading one PDB stream.
    """

    def __init__(self, source, path):
        self._source = source
        self._structure = Structure(name=os.path.basename(path or ""))
        self._entity_setter = EntitySetter(self._structure)
        # Chains closed by a TER record, as 'model/chain'
        self._has_ter = set()
        self._conn_records = []
        self._matrix = np.identity(4)
        self._model = self._structure.find_or_add_model("1")
        self._model_opened = False
        self._chain = None
        self._residue = None
        self._line = ""
        self._handlers = {
            "ATOM": self._read_atom,
            "HETA": self._read_atom,
            "ANIS": self._read_anisou,
            "SEQR": self._read_seqres,
            "HEAD": self._read_header,
            "TITL": self._read_title,
            "KEYW": self._read_keywds,
            "EXPD": self._read_expdta,
            "CRYS": self._read_cryst1,
            "MTRI": self._read_mtrix,
            "SCAL": self._read_scale,
            "ORIG": self._read_origx,
            "MODE": self._read_model,
            "ENDM": self._read_endmdl,
            "TER\0": self._read_ter,
            "SSBO": self._read_ssbond,
            "CISP": self._read_cispep,
        }

    def read(self):
        for line in self._source:
            # The line break is not part of any field
            line = line.rstrip("\r\n")
            self._line = line
            key = record_key(line)
            if key == "END\0":
                break
            handler = self._handlers.get(key)
            # REMARK, CONECT and unknown records are skipped
            if handler is not None:
                handler(line)
        if self._model_opened:
            warnings.warn(
                f"MODEL {self._model.name} is not terminated by ENDMDL",
                IncompleteStructureWarning,
            )
        return self._finalize()

    def _fail(self, error_class, message):
        raise error_class(message, self._source.line_number, self._line)

    def _finalize(self):
        structure = self._structure
        self._entity_setter.finalize()
        for model in structure.models:
            for chain in model.chains:
                if f"{model.name}/{chain.name}" in self._has_ter:
                    chain.entity.entity_type = EntityType.POLYMER
        structure.finish()
        process_conn(structure, self._conn_records)
        return structure

    def _read_atom(self, line):
        if len(line) < _MIN_ATOM_LENGTH:
            self._fail(
                ShortLineError, "The line is too short to be correct:\n" + line
            )
        chain_name = read_string(line[_chain_id])
        if self._chain is None or self._chain.auth_name != chain_name:
            if self._model is None:
                self._fail(OrphanAtomError, "ATOM/HETATM between models")
            # A chain, that continues after TER, contains the ligands
            # and waters, that follow the polymer
            name = chain_name
            if f"{self._model.name}/{chain_name}" in self._has_ter:
                name += "_H"
            self._chain = self._model.find_or_add_chain(name)
            self._chain.auth_name = chain_name
            self._residue = None

        seqnum, icode = read_snic(line[_snic])
        rid = ResidueId(
            seqnum, icode, read_string(line[_res_name]), read_string(line[_segment])
        )
        if self._residue is None or not self._residue.matches(rid):
            self._residue = self._chain.find_or_add_residue(rid)

        atom = Atom(
            read_string(line[_atom_name]),
            (
                read_double(line[_coord_x]),
                read_double(line[_coord_y]),
                read_double(line[_coord_z]),
            ),
        )
        atom.group = chr(ord(line[0]) & ~0x20)
        altloc = line[_alt_loc]
        atom.altloc = "" if altloc in " \0" else altloc
        atom.occ = read_double(line[_occupancy])
        atom.b_iso = read_double(line[_temp_f])
        atom.element = Element(line[_element])
        if len(line) >= _MIN_CHARGE_LENGTH:
            try:
                atom.charge = read_charge(line[_charge_digit], line[_charge_sign])
            except MalformedChargeError as e:
                self._fail(MalformedChargeError, str(e))
        self._residue.atoms.append(atom)

    def _read_anisou(self, line):
        if (
            self._model is None
            or self._chain is None
            or self._residue is None
            or len(self._residue.atoms) == 0
        ):
            self._fail(
                OrphanAnisouError, "ANISOU record not directly after ATOM/HETATM."
            )
        atom = self._residue.atoms[-1]
        if atom.u11 != 0:
            self._fail(
                OrphanAnisouError,
                "Duplicated ANISOU record or not directly after ATOM/HETATM.",
            )
        # Stored as integers in units of 1e-4 Å²
        atom.u11, atom.u22, atom.u33, atom.u12, atom.u13, atom.u23 = [
            read_int(line[field]) * 1e-4 for field in _anisou
        ]

    def _read_seqres(self, line):
        entity = self._entity_setter.set_for_chain(
            read_string(line[_seqres_chain_id]), EntityType.POLYMER
        )
        for field in _seqres_monomers:
            res_name = read_string(line[field])
            if len(res_name) > 0:
                entity.sequence.append(res_name)

    def _read_header(self, line):
        info = self._structure.info
        if len(line) >= _MIN_KEYWORDS_LENGTH:
            info["_struct_keywords.pdbx_keywords"] = rtrimmed(line[_keywords])
        if len(line) >= _MIN_DATE_LENGTH:
            date = line[_date]
            if date.strip() != "":
                info["_pdbx_database_status.recvd_initial_deposition_date"] = (
                    self._convert_date(date)
                )
        if len(line) >= _MIN_ENTRY_ID_LENGTH:
            entry_id = read_string(line[_entry_id])
            if len(entry_id) > 0:
                info["_entry.id"] = entry_id

    def _convert_date(self, date):
        """
        Convert a date from *DD-MMM-YY* into *YYYY-MM-DD* format.
        """
        century = "19" if date[7] in "789" else "20"
        month = _months.get(date[3:6].upper())
        if month is None:
            warnings.warn(
                f"Unknown month '{date[3:6]}' in HEADER date",
                UnexpectedStructureWarning,
            )
            month = "??"
        return f"{century}{date[7:9]}-{month}-{date[0:2]}"

    def _append_text(self, tag, line):
        if len(line) >= _MIN_TEXT_LENGTH:
            info = self._structure.info
            info[tag] = info.get(tag, "") + rtrimmed(line[_text])

    def _read_title(self, line):
        self._append_text("_struct.title", line)

    def _read_keywds(self, line):
        self._append_text("_struct_keywords.text", line)

    def _read_expdta(self, line):
        self._append_text("_exptl.method", line)

    def _read_cryst1(self, line):
        if len(line) >= _MIN_CELL_LENGTH:
            try:
                self._structure.cell.set(
                    *[read_double(line[field]) for field in _cell_params]
                )
            except ImpossibleAngleError as e:
                self._fail(CellParseError, str(e))
        if len(line) >= _MIN_SPACE_GROUP_LENGTH:
            self._structure.sg_hm = read_string(line[_space_group])
        if len(line) >= _MIN_Z_LENGTH:
            z = read_string(line[_z_number])
            if len(z) > 0:
                self._structure.info["_cell.Z_PDB"] = z

    def _read_matrix_row(self, line):
        """
        Put the row of a *MTRIXn*, *SCALEn* or *ORIGXn* record into the
        matrix accumulator.

        Returns
        -------
        row : int
            The row number *n* (1-3), 0 if the record is too short or
            has an invalid row number.
        """
        if len(line) < _MIN_MATRIX_LENGTH:
            return 0
        row = ord(line[_matrix_row]) - ord("0")
        if row < 1 or row > 3:
            return 0
        for j, field in enumerate(_matrix_columns):
            self._matrix[row - 1, j] = read_double(line[field])
        self._matrix[row - 1, 3] = read_double(line[_matrix_vector])
        return row

    def _take_matrix(self):
        transform = Transform.from_matrix(self._matrix)
        self._matrix = np.identity(4)
        return transform

    def _read_mtrix(self, line):
        if self._read_matrix_row(line) != 3:
            return
        transform = self._take_matrix()
        if not transform.is_identity():
            self._structure.ncs.append(
                NcsOp(
                    read_string(line[_mtrix_serial]),
                    line[_mtrix_given] == "1",
                    transform,
                )
            )

    def _read_scale(self, line):
        if self._read_matrix_row(line) == 3:
            self._structure.cell.set_matrices_from_fract(self._take_matrix())

    def _read_origx(self, line):
        if self._read_matrix_row(line) == 3:
            self._structure.origx = self._take_matrix()

    def _read_model(self, line):
        if self._model is not None and self._chain is not None:
            self._fail(ModelWithoutEndmdlError, "MODEL without ENDMDL?")
        name = str(read_int(line[_model_serial]))
        self._model = self._structure.find_or_add_model(name)
        if len(self._model.chains) != 0:
            self._fail(DuplicateModelError, "duplicate MODEL number: " + name)
        self._model_opened = True
        self._chain = None
        self._residue = None

    def _read_endmdl(self, line):
        self._model = None
        self._model_opened = False
        self._chain = None
        self._residue = None

    def _read_ter(self, line):
        # The chain ends here, the next ATOM/HETATM opens a new chain
        if self._chain is not None:
            self._has_ter.add(f"{self._model.name}/{self._chain.name}")
        self._chain = None

    def _read_ssbond(self, line):
        if len(line) >= _MIN_SSBOND_LENGTH:
            self._conn_records.append(line)

    def _read_cispep(self, line):
        if len(line) >= _MIN_CISPEP_LENGTH:
            self._conn_records.append(line)
