"""
Pathway Translator - Level 2 Builder

Level 2 wraps every physical entity in a physicalEntityParticipant
before it can take part in an interaction or a complex, and stores
formula and weight on the small molecule itself.
"""

from typing import Dict, List, Optional

from pathway_translator.biopax import elements_l2 as l2
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
    SMALL_MOLECULE: l2.smallMolecule,
    PROTEIN: l2.protein,
    RNA: l2.rna,
    DNA: l2.dna,
    COMPLEX: l2.complex,
    PATHWAY: l2.pathway,
}


class Level2Builder(EntityBuilder):
    level = BioPAXLevel.L2
    kegg_data_source_name = "KEGG Data"
    
    def _participant(self, entity: BioPAXElement, coefficient: Optional[float] = None) -> l2.physicalEntityParticipant:
        """New participant wrapper around a physical entity."""
        participant = self.model.add_new(
            l2.physicalEntityParticipant, self.unique_uri(f"{entity.rdf_id.lstrip('#')}_participant")
        )
        participant.PHYSICAL_ENTITY = entity
        participant.STOICHIOMETRIC_COEFFICIENT = coefficient
        return participant
    
    def _new_container(self, pathway: Pathway) -> BioPAXElement:
        return self.model.add_new(l2.pathway, self.uri(pathway.name))
    
    def _set_organism(self, element: BioPAXElement, organism: BioPAXElement) -> None:
        element.ORGANISM = organism
    
    def _new_data_source(self, rdf_id: str, name: str, comment: Optional[str]) -> BioPAXElement:
        data_source = self.model.add_new(l2.dataSource, rdf_id)
        data_source.set_primary_name(name)
        if comment:
            data_source.add_comment(comment)
        return data_source
    
    def _new_bio_source(self, name: str, taxonomy_xref: Optional[BioPAXElement]) -> BioPAXElement:
        bio_source = self.model.add_new(l2.bioSource, self.unique_uri(f"{name}_BioSource"))
        bio_source.set_primary_name(name)
        if isinstance(taxonomy_xref, l2.unificationXref):
            bio_source.TAXON_XREF = taxonomy_xref
        return bio_source
    
    def _new_entity(self, entry: Entry, kind: str, rdf_id: str) -> BioPAXElement:
        element = self.model.add_new(_ENTITY_CLASSES.get(kind, l2.physicalEntity), rdf_id)
        if kind in (PROTEIN, RNA, DNA, COMPLEX) and self._bio_source is not None:
            element.ORGANISM = self._bio_source
        return element
    
    def _add_complex_component(self, complex_element: BioPAXElement, member: BioPAXElement) -> None:
        if not isinstance(complex_element, l2.complex) or not isinstance(member, l2.physicalEntity):
            return
        if any(p.PHYSICAL_ENTITY is member for p in complex_element.COMPONENTS):
            return
        complex_element.COMPONENTS.append(self._participant(member))
    
    def _set_small_molecule_data(
        self,
        element: BioPAXElement,
        formula: Optional[str],
        weight: Optional[float],
        ids: Dict[IdentifierDatabase, List[str]],
    ) -> None:
        if not isinstance(element, l2.smallMolecule):
            return
        if formula:
            element.CHEMICAL_FORMULA = formula
        if weight:
            element.MOLECULAR_WEIGHT = weight
    
    def _new_reaction(self, reaction: Reaction, rdf_id: str) -> BioPAXElement:
        element = self.model.add_new(l2.biochemicalReaction, rdf_id)
        if reaction.is_reversible:
            element.add_comment("reversible")
        return element
    
    def _add_reaction_participant(
        self, reaction_element: BioPAXElement, entity: BioPAXElement, component: ReactionComponent, left: bool
    ) -> None:
        side = reaction_element.LEFT if left else reaction_element.RIGHT
        if any(p.PHYSICAL_ENTITY is entity for p in side):
            return
        participant = self._participant(entity, float(component.stoichiometry))
        side.append(participant)
        reaction_element.add_participant(participant)
    
    def _new_catalysis(
        self, reaction_element: BioPAXElement, enzyme: BioPAXElement, reaction: Reaction
    ) -> BioPAXElement:
        catalysis = self.model.add_new(
            l2.catalysis, self.unique_uri(f"{reaction.name}_catalysis_{enzyme.rdf_id.lstrip('#')}")
        )
        catalysis.CONTROL_TYPE = "ACTIVATION"
        catalysis.DIRECTION = "REVERSIBLE" if reaction.is_reversible else "PHYSIOL-LEFT-TO-RIGHT"
        controller = self._participant(enzyme)
        catalysis.CONTROLLER.append(controller)
        catalysis.CONTROLLED.append(reaction_element)
        catalysis.add_participant(controller)
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
        if control is not None and not isinstance(source, l2.physicalEntity):
            # only physical entities can be wrapped as controller
            self.log.debug("Controller is not a physical entity, writing an interaction", relation=relation.key())
            control = None
        if control is not None:
            element = self.model.add_new(l2.control, rdf_id)
            element.CONTROL_TYPE = control
            controller = self._participant(source)
            element.CONTROLLER.append(controller)
            element.CONTROLLED.append(target)
            element.add_participant(controller)
            element.add_participant(target)
            return element
        
        element = self.model.add_new(l2.physicalInteraction, rdf_id)
        for entity in (source, target):
            if isinstance(entity, l2.physicalEntity):
                element.add_participant(self._participant(entity))
            else:
                element.add_participant(entity)
        return element
    
    def _new_vocabulary(self, rdf_id: str, term: str) -> BioPAXElement:
        vocabulary = self.model.add_new(l2.openControlledVocabulary, rdf_id)
        vocabulary.add_term(term)
        return vocabulary
