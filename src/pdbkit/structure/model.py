# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains the hierarchical data model of a macromolecular
structure:
a :class:`Structure` contains :class:`Model` objects, which contain
:class:`Chain` objects, which contain :class:`Residue` objects, which
finally contain :class:`Atom` objects.
"""

__name__ = "pdbkit.structure"
__author__ = "The pdbkit developers"
__all__ = [
    "EntityType",
    "PolymerType",
    "ConnectionType",
    "ResidueId",
    "Atom",
    "Residue",
    "Chain",
    "Model",
    "Entity",
    "Connection",
    "NcsOp",
    "Structure",
]

from enum import Enum
import numpy as np
from pdbkit.structure.element import Element
from pdbkit.structure.unitcell import Transform, UnitCell

_canonical_aa_list = [
    "ALA", "ARG", "ASN", "ASP", "CYS", "GLN", "GLU", "GLY", "HIS", "ILE",
    "LEU", "LYS", "MET", "PHE", "PRO", "PYL", "SER", "THR", "TRP", "TYR",
    "VAL", "SEC", "MSE", "UNK",
]  # fmt: skip
_dna_list = ["DA", "DC", "DG", "DT", "DI", "DU", "DN"]
_rna_list = ["A", "C", "G", "U", "I", "N"]
_solvent_list = ["HOH", "WAT", "DOD", "H2O", "SOL"]


class EntityType(Enum):
    """
    The type of an :class:`Entity`, following the ``_entity.type``
    values of PDBx/mmCIF.
    """

    UNKNOWN = 0
    POLYMER = 1
    NON_POLYMER = 2
    WATER = 3


class PolymerType(Enum):
    """
    The polymer type of an :class:`Entity`.
    ``NA`` (not applicable) is used for non-polymer entities.
    """

    NA = 0
    PEPTIDE_L = 1
    DNA = 2
    RNA = 3
    UNKNOWN = 4


class ConnectionType(Enum):
    """
    The type of a :class:`Connection` between two residues.
    """

    UNKNOWN = 0
    DISULF = 1
    COVALE = 2
    METAL_COORD = 3


class ResidueId:
    """
    The identifier of a residue within a chain.

    Parameters
    ----------
    seqnum : int
        The residue sequence number.
    icode : str
        The insertion code, an empty string if there is none.
    name : str
        The residue name.
    segment : str, optional
        The segment identifier.

    Attributes
    ----------
    seqnum, icode, name, segment
        Same as the parameters.
    snic : tuple(int, str)
        The sequence number and insertion code.

    Examples
    --------

    >>> rid = ResidueId(10, "A", "CYS")
    >>> print(rid)
    CYS 10A
    >>> print(rid.snic)
    (10, 'A')
    """

    def __init__(self, seqnum, icode, name, segment=""):
        self.seqnum = seqnum
        self.icode = icode
        self.name = name
        self.segment = segment

    @property
    def snic(self):
        return (self.seqnum, self.icode)

    def _key(self):
        return (self.seqnum, self.icode, self.segment, self.name)

    def __eq__(self, item):
        if not isinstance(item, ResidueId):
            return False
        return self._key() == item._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return (
            f"ResidueId({self.seqnum!r}, {self.icode!r}, {self.name!r}, "
            f"{self.segment!r})"
        )

    def __str__(self):
        return f"{self.name} {self.seqnum}{self.icode}"


class Atom:
    """
    A single atom.

    Parameters
    ----------
    name : str, optional
        The atom name.
    pos : array-like, shape=(3,), dtype=float, optional
        The orthogonal coordinates in Å.
    kwargs
        Further attributes, see below.

    Attributes
    ----------
    name : str
        The atom name.
    altloc : str
        The alternate location indicator, an empty string if there is
        none.
    group : str
        ``'A'`` for *ATOM* and ``'H'`` for *HETATM* records.
    element : Element
        The chemical element.
    charge : int
        The formal charge.
    pos : ndarray, shape=(3,), dtype=float
        The orthogonal coordinates in Å.
    occ : float
        The occupancy.
    b_iso : float
        The isotropic temperature factor.
    u11, u22, u33, u12, u13, u23 : float
        The anisotropic displacement parameters in Å², 0 if not given.
    """

    _anisou_names = ("u11", "u22", "u33", "u12", "u13", "u23")

    def __init__(self, name="", pos=(0.0, 0.0, 0.0), **kwargs):
        self.name = name
        self.altloc = ""
        self.group = "A"
        self.element = Element()
        self.charge = 0
        self.occ = 1.0
        self.b_iso = 0.0
        for u_name in Atom._anisou_names:
            setattr(self, u_name, 0.0)
        pos = np.array(pos, dtype=np.float64)
        if pos.shape != (3,):
            raise ValueError("Position must be ndarray with shape (3,)")
        self.pos = pos
        for attr, value in kwargs.items():
            if not hasattr(self, attr):
                raise TypeError(f"'{attr}' is not an attribute of an atom")
            setattr(self, attr, value)

    def is_hetatm(self):
        return self.group == "H"

    def has_anisou(self):
        return any(getattr(self, u_name) != 0 for u_name in Atom._anisou_names)

    def anisou(self):
        """
        Get the anisotropic displacement parameters.

        Returns
        -------
        u : tuple of float
            *(u11, u22, u33, u12, u13, u23)*.
        """
        return tuple(getattr(self, u_name) for u_name in Atom._anisou_names)

    def copy(self):
        clone = Atom(
            self.name,
            self.pos,
            altloc=self.altloc,
            group=self.group,
            element=self.element,
            charge=self.charge,
            occ=self.occ,
            b_iso=self.b_iso,
        )
        for u_name in Atom._anisou_names:
            setattr(clone, u_name, getattr(self, u_name))
        return clone

    def __str__(self):
        record = "HETATM" if self.is_hetatm() else "ATOM"
        return (
            f"{record:6} {self.name:4}{self.altloc:1} {str(self.element):2} "
            f"{self.pos[0]:8.3f} {self.pos[1]:8.3f} {self.pos[2]:8.3f}"
        )


class Residue:
    """
    A residue, i.e. a monomer of a polymer or a small molecule.

    Parameters
    ----------
    rid : ResidueId
        The identifier of the residue.

    Attributes
    ----------
    rid : ResidueId
        The identifier of the residue.
    seqnum, icode, name, segment
        Shortcuts for the attributes of `rid`.
    atoms : list of Atom
        The atoms of the residue in file order.
    conn : list of str
        Tags of the connections this residue takes part in,
        e.g. ``'1 disulf1'`` for the first partner of the connection
        ``'disulf1'``.
    is_cis : bool
        True, if the residue is part of a *cis* peptide.
    label_seq : int or None
        The position of the residue in its polymer chain,
        starting at 1.
        Set by :meth:`Structure.finish()`; ``None`` for residues of
        non-polymer chains.
    """

    def __init__(self, rid):
        self.rid = rid
        self.atoms = []
        self.conn = []
        self.is_cis = False
        self.label_seq = None

    @property
    def seqnum(self):
        return self.rid.seqnum

    @property
    def icode(self):
        return self.rid.icode

    @property
    def name(self):
        return self.rid.name

    @property
    def segment(self):
        return self.rid.segment

    def matches(self, rid):
        return self.rid == rid

    def find_atom(self, name, altloc=None):
        """
        Find an atom by its name.

        Parameters
        ----------
        name : str
            The atom name.
        altloc : str, optional
            If given, the alternate location must match as well.

        Returns
        -------
        atom : Atom or None
            The first matching atom.
        """
        for atom in self.atoms:
            if atom.name == name and (altloc is None or atom.altloc == altloc):
                return atom
        return None

    def is_water(self):
        return self.rid.name in _solvent_list

    def __len__(self):
        return len(self.atoms)

    def __iter__(self):
        return iter(self.atoms)

    def __getitem__(self, index):
        return self.atoms[index]

    def copy(self):
        """
        Copy the residue together with its atoms.

        The residue identifier is immutable and hence shared.

        Returns
        -------
        copy : Residue
            A copy of this residue.
        """
        clone = Residue(self.rid)
        clone.atoms = [atom.copy() for atom in self.atoms]
        clone.conn = list(self.conn)
        clone.is_cis = self.is_cis
        clone.label_seq = self.label_seq
        return clone

    def __str__(self):
        return str(self.rid)


class Chain:
    """
    A chain of residues.

    Parameters
    ----------
    name : str
        The name of the chain.

    Attributes
    ----------
    name : str
        The unique name of the chain within its model.
        A chain that continues after its *TER* record gets the suffix
        ``'_H'``.
    auth_name : str
        The chain name as given in the file.
    entity : Entity or None
        The entity of the chain.
        This is a reference to an entity owned by the
        :class:`Structure`.
    residues : list of Residue
        The residues in file order.
    """

    def __init__(self, name):
        self.name = name
        self.auth_name = name
        self.entity = None
        self.residues = []
        # Lookup table for 'find_or_add_residue()'
        self._residue_index = {}
        self._indexed_residues = self.residues
        self._indexed_count = 0

    def find_residue(self, rid):
        """
        Find a residue by its identifier.

        Parameters
        ----------
        rid : ResidueId
            The residue identifier.
            The segment is ignored if it is empty.

        Returns
        -------
        residue : Residue or None
            The first matching residue.
        """
        for residue in self.residues:
            if (
                residue.rid.snic == rid.snic
                and residue.rid.name == rid.name
                and (not rid.segment or residue.rid.segment == rid.segment)
            ):
                return residue
        return None

    def find_or_add_residue(self, rid):
        """
        Get the residue with the given identifier, or append a new one.

        A residue identifier, that appears again after other residues,
        refers to the earlier residue.

        Parameters
        ----------
        rid : ResidueId
            The residue identifier.

        Returns
        -------
        residue : Residue
            The existing or the appended residue.
        """
        if (
            self._indexed_residues is not self.residues
            or self._indexed_count != len(self.residues)
        ):
            self._update_residue_index()
        residue = self._residue_index.get(rid)
        if residue is None:
            residue = Residue(rid)
            self.residues.append(residue)
            self._residue_index[rid] = residue
            self._indexed_count += 1
        return residue

    def _update_residue_index(self):
        # The residue list was modified without this method
        self._residue_index = {}
        for residue in self.residues:
            # The first of several equal residues wins
            self._residue_index.setdefault(residue.rid, residue)
        self._indexed_residues = self.residues
        self._indexed_count = len(self.residues)

    def is_polymer(self):
        return self.entity is not None and self.entity.entity_type == EntityType.POLYMER

    def count_atoms(self):
        return sum(len(residue) for residue in self.residues)

    def __len__(self):
        return len(self.residues)

    def __iter__(self):
        return iter(self.residues)

    def __getitem__(self, index):
        return self.residues[index]

    def copy(self):
        """
        Copy the chain together with its residues.

        The copy refers to the same :class:`Entity` as this chain.

        Returns
        -------
        copy : Chain
            A copy of this chain.
        """
        clone = Chain(self.name)
        clone.auth_name = self.auth_name
        clone.entity = self.entity
        clone.residues = [residue.copy() for residue in self.residues]
        return clone


class Connection:
    """
    A connection (e.g. a disulfide bridge) between two residues.

    Parameters
    ----------
    id : str
        The identifier, e.g. ``'disulf1'``.
    conn_type : ConnectionType
        The type of connection.
    res1, res2 : Residue
        The connected residues.
        These are references into the structure, that stay valid as
        long as the structure is not modified.
    """

    def __init__(self, id, conn_type, res1, res2):
        self.id = id
        self.conn_type = conn_type
        self.res1 = res1
        self.res2 = res2

    def __repr__(self):
        return (
            f"Connection({self.id!r}, {self.conn_type}, "
            f"{self.res1.rid!r}, {self.res2.rid!r})"
        )


class Model:
    """
    A model, i.e. one set of coordinates for the structure.

    Parameters
    ----------
    name : str
        The name of the model, usually its number.

    Attributes
    ----------
    name : str
        The name of the model.
    chains : list of Chain
        The chains of the model.
    connections : list of Connection
        The connections between residues of this model.
    """

    def __init__(self, name):
        self.name = name
        self.chains = []
        self.connections = []

    def find_chain(self, name):
        for chain in self.chains:
            if chain.name == name:
                return chain
        return None

    def find_or_add_chain(self, name):
        chain = self.find_chain(name)
        if chain is None:
            chain = Chain(name)
            self.chains.append(chain)
        return chain

    def count_atoms(self):
        return sum(chain.count_atoms() for chain in self.chains)

    def __len__(self):
        return len(self.chains)

    def __iter__(self):
        return iter(self.chains)

    def __getitem__(self, index):
        return self.chains[index]

    def copy(self):
        """
        Copy the model together with its chains.

        The connections of the copy refer to the copied residues.

        Returns
        -------
        copy : Model
            A copy of this model.
        """
        clone = Model(self.name)
        clone.chains = [chain.copy() for chain in self.chains]
        # Connections point into the original residues,
        # hence they are relinked to the copied ones
        index = {}
        for chain_i, chain in enumerate(self.chains):
            for res_i, residue in enumerate(chain.residues):
                index[id(residue)] = clone.chains[chain_i].residues[res_i]
        clone.connections = [
            Connection(
                conn.id, conn.conn_type, index[id(conn.res1)], index[id(conn.res2)]
            )
            for conn in self.connections
        ]
        return clone


class Entity:
    """
    A distinct molecular species of a structure.

    Parameters
    ----------
    entity_type : EntityType
        The type of the entity.
    id : str, optional
        The identifier.
        It is assigned when the structure is read.

    Attributes
    ----------
    id : str
        The identifier.
    entity_type : EntityType
        The type of the entity.
    polymer_type : PolymerType
        The type of the polymer, if the entity is a polymer.
    sequence : list of str
        The monomer names of the declared sequence (*SEQRES*).
    """

    def __init__(self, entity_type=EntityType.UNKNOWN, id=""):
        self.id = id
        self.entity_type = entity_type
        self.polymer_type = PolymerType.NA
        self.sequence = []

    def __repr__(self):
        return (
            f"<Entity {self.id!r} {self.entity_type.name} "
            f"{self.polymer_type.name} ({len(self.sequence)} monomers)>"
        )


class NcsOp:
    """
    A non-crystallographic symmetry operation (*MTRIXn* records).

    Parameters
    ----------
    id : str
        The serial number of the operation.
    given : bool
        True, if the coordinates of the image are already contained in
        the file.
    transform : Transform
        The transformation.
    """

    def __init__(self, id, given, transform):
        self.id = id
        self.given = given
        self.transform = transform

    def apply(self, coord):
        return self.transform.apply(coord)

    def __repr__(self):
        return f"NcsOp({self.id!r}, {self.given!r}, {self.transform!r})"


class Structure:
    """
    A complete macromolecular structure.

    Parameters
    ----------
    name : str, optional
        The name of the structure, e.g. the base name of the file it
        was read from.

    Attributes
    ----------
    name : str
        The name of the structure.
    info : dict of (str -> str)
        Metadata, using PDBx/mmCIF tags as keys,
        e.g. ``'_entry.id'``.
    cell : UnitCell
        The unit cell.
    sg_hm : str
        The *Hermann-Mauguin* symbol of the space group.
    origx : Transform
        The transformation from orthogonal coordinates to the
        submitted coordinates (*ORIGXn* records).
    ncs : list of NcsOp
        Non-crystallographic symmetry operations.
    models : list of Model
        The models.
    entities : list of Entity
        The entities.
    """

    def __init__(self, name=""):
        self.name = name
        self.info = {}
        self.cell = UnitCell()
        self.sg_hm = ""
        self.origx = Transform()
        self.ncs = []
        self.models = []
        self.entities = []

    def find_model(self, name):
        for model in self.models:
            if model.name == name:
                return model
        return None

    def find_or_add_model(self, name):
        model = self.find_model(name)
        if model is None:
            model = Model(name)
            self.models.append(model)
        return model

    def get_entity(self, id):
        for entity in self.entities:
            if entity.id == id:
                return entity
        return None

    def finish(self):
        """
        Complete the structure after all records were read.

        The following post-conditions hold afterwards:

            - Entities of unknown type are typed from the residues of
              their chains (water, non-polymer or polymer).
            - Polymer entities have a polymer type inferred from their
              sequence, or from the residues if there is no sequence.
            - The residues of polymer chains are numbered consecutively
              via :attr:`Residue.label_seq`.
        """
        chains_of_entity = {}
        for model in self.models:
            for chain in model.chains:
                if chain.entity is not None:
                    chains_of_entity.setdefault(id(chain.entity), []).append(chain)

        for entity in self.entities:
            chains = chains_of_entity.get(id(entity), [])
            residues = [residue for chain in chains for residue in chain.residues]
            if entity.entity_type == EntityType.UNKNOWN:
                entity.entity_type = _infer_entity_type(chains, residues)
            if entity.entity_type == EntityType.POLYMER:
                if entity.polymer_type == PolymerType.NA:
                    names = entity.sequence or [res.name for res in residues]
                    entity.polymer_type = _infer_polymer_type(names)
            else:
                entity.polymer_type = PolymerType.NA

        for model in self.models:
            for chain in model.chains:
                polymer = chain.is_polymer()
                for i, residue in enumerate(chain.residues, start=1):
                    residue.label_seq = i if polymer else None

    def __len__(self):
        return len(self.models)

    def __iter__(self):
        return iter(self.models)

    def __getitem__(self, index):
        return self.models[index]

    def copy(self):
        """
        Create a deep copy of the structure.

        The chains of the copy refer to the copied entities and the
        connections refer to the copied residues, so that the copy
        can be modified independently of this structure.

        Returns
        -------
        copy : Structure
            A copy of this structure.
        """
        clone = Structure(self.name)
        clone.info = dict(self.info)
        clone.cell = self.cell.copy()
        clone.sg_hm = self.sg_hm
        clone.origx = self.origx.copy()
        clone.ncs = [
            NcsOp(op.id, op.given, op.transform.copy()) for op in self.ncs
        ]
        clone.entities = []
        entity_map = {}
        for entity in self.entities:
            new_entity = Entity(entity.entity_type, entity.id)
            new_entity.polymer_type = entity.polymer_type
            new_entity.sequence = list(entity.sequence)
            clone.entities.append(new_entity)
            entity_map[id(entity)] = new_entity
        clone.models = [model.copy() for model in self.models]
        for model in clone.models:
            for chain in model.chains:
                if chain.entity is not None:
                    chain.entity = entity_map[id(chain.entity)]
        return clone


def _infer_entity_type(chains, residues):
    if len(residues) == 0:
        return EntityType.UNKNOWN
    if all(residue.is_water() for residue in residues):
        return EntityType.WATER
    if all(len(chain.residues) <= 1 for chain in chains):
        return EntityType.NON_POLYMER
    if all(
        all(atom.is_hetatm() for atom in residue.atoms) for residue in residues
    ):
        return EntityType.NON_POLYMER
    return EntityType.POLYMER


def _infer_polymer_type(names):
    names = [name for name in names if name not in _solvent_list]
    if len(names) == 0:
        return PolymerType.UNKNOWN
    if all(name in _canonical_aa_list for name in names):
        return PolymerType.PEPTIDE_L
    if all(name in _dna_list for name in names):
        return PolymerType.DNA
    if all(name in _rna_list for name in names):
        return PolymerType.RNA
    return PolymerType.UNKNOWN
