# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "pdbkit.structure.io.pdb"
__author__ = "The pdbkit developers"
__all__ = ["EntitySetter"]

from pdbkit.structure.model import Entity, EntityType


class EntitySetter:
    """
    Reconstructs the entities of a structure read from a PDB file.

    The PDB format has no equivalent of the PDBx/mmCIF entity.
    Here chains with identical *SEQRES* sequences are assumed to belong
    to the same entity.

    Parameters
    ----------
    structure : Structure
        The structure, whose :attr:`Structure.entities` are filled.
    """

    def __init__(self, structure):
        self._structure = structure
        self._chain_to_entity = {}

    def set_for_chain(self, chain_name, entity_type):
        """
        Get the entity of a chain, creating it if the chain name was not
        seen before.

        Parameters
        ----------
        chain_name : str
            The chain name.
        entity_type : EntityType
            The type of a newly created entity.
            Ignored if the chain has already an entity.

        Returns
        -------
        entity : Entity
            The entity of the chain.
        """
        entity = self._chain_to_entity.get(chain_name)
        if entity is not None:
            return entity
        entity = Entity(entity_type)
        self._structure.entities.append(entity)
        self._chain_to_entity[chain_name] = entity
        return entity

    def finalize(self):
        """
        Merge entities with identical sequences, attach an entity to
        every chain and assign the entity IDs.
        """
        entities = self._structure.entities
        i = 0
        while i < len(entities):
            j = i + 1
            while j < len(entities):
                if _same_entity(entities[i].sequence, entities[j].sequence):
                    duplicate = entities.pop(j)
                    for chain_name, entity in self._chain_to_entity.items():
                        if entity is duplicate:
                            self._chain_to_entity[chain_name] = entities[i]
                else:
                    j += 1
            i += 1

        for model in self._structure.models:
            for chain in model.chains:
                chain.entity = self.set_for_chain(chain.name, EntityType.UNKNOWN)

        for serial, entity in enumerate(entities, start=1):
            entity.id = str(serial)


def _same_entity(seq1, seq2):
    # Empty sequences never match, so that chains without SEQRES keep
    # separate entities
    return len(seq1) != 0 and seq1 == seq2
