# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pdbkit.structure as struc
import pdbkit.structure.io.pdb as pdb


def _structure(chain_names):
    structure = struc.Structure()
    model = structure.find_or_add_model("1")
    for name in chain_names:
        model.find_or_add_chain(name)
    return structure


def test_same_chain_same_entity():
    structure = _structure([])
    setter = pdb.EntitySetter(structure)
    entity = setter.set_for_chain("A", struc.EntityType.POLYMER)
    assert setter.set_for_chain("A", struc.EntityType.UNKNOWN) is entity
    assert entity.entity_type == struc.EntityType.POLYMER
    assert structure.entities == [entity]


def test_merge_identical_sequences():
    structure = _structure(["A", "B", "C"])
    setter = pdb.EntitySetter(structure)
    for chain_name, sequence in [
        ("A", ["ALA", "GLY"]),
        ("B", ["DA", "DT"]),
        ("C", ["ALA", "GLY"]),
    ]:
        setter.set_for_chain(chain_name, struc.EntityType.POLYMER).sequence.extend(
            sequence
        )
    setter.finalize()

    assert [entity.id for entity in structure.entities] == ["1", "2"]
    chain_a, chain_b, chain_c = structure.models[0].chains
    assert chain_a.entity is chain_c.entity
    assert chain_a.entity is not chain_b.entity
    assert chain_b.entity.id == "2"


def test_empty_sequences_are_not_merged():
    structure = _structure(["A", "B"])
    setter = pdb.EntitySetter(structure)
    setter.finalize()
    chain_a, chain_b = structure.models[0].chains
    assert chain_a.entity is not chain_b.entity
    assert chain_a.entity.entity_type == struc.EntityType.UNKNOWN
    assert [entity.id for entity in structure.entities] == ["1", "2"]


def test_seqres_without_atoms():
    """
    An entity is kept, even if no chain with this name has atoms.
    """
    structure = _structure(["A"])
    setter = pdb.EntitySetter(structure)
    setter.set_for_chain("X", struc.EntityType.POLYMER).sequence.append("ALA")
    setter.finalize()
    assert len(structure.entities) == 2
    assert structure.models[0].chains[0].entity is structure.entities[1]
