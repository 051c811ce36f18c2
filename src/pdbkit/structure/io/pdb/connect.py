# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"
__all__ = ["process_conn"]

from pdbkit.structure.io.pdb.fields import is_record_type, read_snic, read_string
from pdbkit.structure.model import Connection, ConnectionType, ResidueId

# SSBOND/CISPEP, first residue
_res_name_1 = slice(11, 14)
_chain_id_1 = slice(14, 16)
_snic_1 = slice(17, 22)
# SSBOND, second residue
_res_name_2 = slice(25, 28)
_chain_id_2 = slice(28, 30)
_snic_2 = slice(31, 36)


def process_conn(structure, records):
    """
    Resolve the buffered *SSBOND* and *CISPEP* records against the
    complete structure.

    For each *SSBOND* record a :class:`Connection` is added to every
    model containing both residues.
    For each *CISPEP* record the first residue is marked as *cis* in
    every model containing it.
    References to residues that do not exist in a model are ignored,
    but still consume a connection id if both chains exist.

    Parameters
    ----------
    structure : Structure
        The structure, that is modified in-place.
    records : iterable of str
        The *SSBOND* and *CISPEP* record lines.
    """
    disulf_count = 0
    for record in records:
        seqnum, icode = read_snic(record[_snic_1])
        rid = ResidueId(seqnum, icode, read_string(record[_res_name_1]))
        if is_record_type(record, "SSBO"):
            seqnum, icode = read_snic(record[_snic_2])
            rid2 = ResidueId(seqnum, icode, read_string(record[_res_name_2]))
            for model in structure.models:
                chain1 = model.find_chain(read_string(record[_chain_id_1]))
                chain2 = model.find_chain(read_string(record[_chain_id_2]))
                if chain1 is None or chain2 is None:
                    continue
                # An id is consumed even if a residue is missing
                disulf_count += 1
                res1 = chain1.find_residue(rid)
                res2 = chain2.find_residue(rid2)
                if res1 is None or res2 is None:
                    continue
                connection = Connection(
                    f"disulf{disulf_count}", ConnectionType.DISULF, res1, res2
                )
                res1.conn.append("1 " + connection.id)
                res2.conn.append("2 " + connection.id)
                model.connections.append(connection)
        elif is_record_type(record, "CISP"):
            for model in structure.models:
                chain = model.find_chain(read_string(record[_chain_id_1]))
                if chain is None:
                    continue
                residue = chain.find_residue(rid)
                if residue is not None:
                    residue.is_cis = True
