"""
Pathway Translator - Level 3 Builder

Level 3 places entities directly into interactions and keeps chemical
data of small molecules in a separate SmallMoleculeReference.
"""

from typing import Dict, List, Optional

from pathway_translator.biopax import elements_l3 as l3
from pathway_translator.biopax.builders import (
    COMPLEX,
    DNA,
    PATHWAY,
    PROTEIN,
    RNA,
    SMALL_MOLECULE,
    EntityBuilder,
)
from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel
from pathway_translator.domain.models import Entry, Pathway, Reaction, ReactionComponent, Relation
from pathway_translator.xrefs.identifiers import IdentifierDatabase


_ENTITY_CLASSES = {
    SMALL_MOLECULE: l3.SmallMolecule,
    PROTEIN: l3.Protein,
    RNA: l3.Rna,
    DNA: l3.Dna,
    COMPLEX: l3.Complex,
    PATHWAY: l3.Pathway,
}


class Level3Builder(EntityBuilder):
    level = BioPAXLevel.L3
    
    def _new_container(self, pathway: Pathway) -> BioPAXElement:
        return self.model.add_new(l3.Pathway, self.uri(pathway.name))
    
    def _set_organism(self, element: BioPAXElement, organism: BioPAXElement) -> None:
        element.organism = organism
    
    def _new_data_source(self, rdf_id: str, name: str, comment: Optional[str]) -> BioPAXElement:
        provenance = self.model.add_new(l3.Provenance, rdf_id)
        provenance.set_primary_name(name)
        if comment:
            provenance.add_comment(comment)
        return provenance
    
    def _new_bio_source(self, name: str, taxonomy_xref: Optional[BioPAXElement]) -> BioPAXElement:
        bio_source = self.model.add_new(l3.BioSource, self.unique_uri(f"{name}_BioSource"))
        bio_source.set_primary_name(name)
        if taxonomy_xref is not None:
            bio_source.add_xref(taxonomy_xref)
        return bio_source
    
    def _new_entity(self, entry: Entry, kind: str, rdf_id: str) -> BioPAXElement:
        return self.model.add_new(_ENTITY_CLASSES.get(kind, l3.PhysicalEntity), rdf_id)
    
    def _add_complex_component(self, complex_element: BioPAXElement, member: BioPAXElement) -> None:
        if isinstance(complex_element, l3.Complex) and isinstance(member, l3.PhysicalEntity):
            complex_element.add_component(member)
    
    def _set_small_molecule_data(
        self,
        element: BioPAXElement,
        formula: Optional[str],
        weight: Optional[float],
        ids: Dict[IdentifierDatabase, List[str]],
    ) -> None:
        if not isinstance(element, l3.SmallMolecule):
            return
        reference = element.entity_reference
        if reference is None:
            reference = self.model.add_new(l3.SmallMoleculeReference, f"{element.rdf_id}_reference")
            if element.standard_name:
                reference.set_primary_name(element.standard_name)
            element.entity_reference = reference
        if formula:
            reference.chemical_formula = formula
        if weight:
            reference.molecular_weight = weight
        # the reference carries the identity of the molecule
        self._attach_xrefs(reference, ids, "small_molecule")
    
    def _new_reaction(self, reaction: Reaction, rdf_id: str) -> BioPAXElement:
        element = self.model.add_new(l3.BiochemicalReaction, rdf_id)
        element.conversion_direction = "REVERSIBLE" if reaction.is_reversible else "LEFT-TO-RIGHT"
        return element
    
    def _add_reaction_participant(
        self, reaction_element: BioPAXElement, entity: BioPAXElement, component: ReactionComponent, left: bool
    ) -> None:
        side = reaction_element.left if left else reaction_element.right
        if all(e is not entity for e in side):
            side.append(entity)
        reaction_element.add_participant(entity)
    
    def _new_catalysis(
        self, reaction_element: BioPAXElement, enzyme: BioPAXElement, reaction: Reaction
    ) -> BioPAXElement:
        catalysis = self.model.add_new(
            l3.Catalysis, self.unique_uri(f"{reaction.name}_catalysis_{enzyme.rdf_id}")
        )
        catalysis.control_type = "ACTIVATION"
        catalysis.controller.append(enzyme)
        catalysis.controlled.append(reaction_element)
        catalysis.add_participant(enzyme)
        catalysis.add_participant(reaction_element)
        return catalysis
    
    def _new_relation(
        self,
        relation: Relation,
        rdf_id: str,
        source: BioPAXElement,
        target: BioPAXElement,
        control: Optional[str],
    ) -> BioPAXElement:
        if control is not None:
            element = self.model.add_new(l3.Control, rdf_id)
            element.control_type = control
            element.controller.append(source)
            element.controlled.append(target)
        else:
            element = self.model.add_new(l3.MolecularInteraction, rdf_id)
        element.add_participant(source)
        element.add_participant(target)
        return element
    
    def _new_vocabulary(self, rdf_id: str, term: str) -> BioPAXElement:
        vocabulary = self.model.add_new(l3.InteractionVocabulary, rdf_id)
        vocabulary.add_term(term)
        return vocabulary
