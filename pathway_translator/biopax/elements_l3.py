"""
BioPAX Level 3 elements.

Only the classes and properties the translator produces are modelled.
Python attributes are snake_case; the aliases carry the ontology
property names used by the writer.
"""

from typing import ClassVar, Dict, List, Optional, Type

from pydantic import Field

from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel, ReferenceKind


class Level3Element(BioPAXElement):
    level: ClassVar[BioPAXLevel] = BioPAXLevel.L3
    rdf_type: ClassVar[str] = "Level3Element"
    
    comment: List[str] = Field(default_factory=list)
    
    def add_comment(self, text: str) -> None:
        if text and text not in self.comment:
            self.comment.append(text)
    
    def get_comments(self) -> List[str]:
        return list(self.comment)


# =============================================================================
# Cross-References
# =============================================================================

class Xref(Level3Element):
    rdf_type: ClassVar[str] = "Xref"
    
    db: Optional[str] = None
    id: Optional[str] = None
    
    def set_reference(self, db: str, identifier: str) -> None:
        self.db = db
        self.id = identifier


class UnificationXref(Xref):
    rdf_type: ClassVar[str] = "UnificationXref"


class RelationshipXref(Xref):
    rdf_type: ClassVar[str] = "RelationshipXref"


class PublicationXref(Xref):
    rdf_type: ClassVar[str] = "PublicationXref"
    
    title: Optional[str] = None
    year: Optional[int] = None
    url: List[str] = Field(default_factory=list)
    author: List[str] = Field(default_factory=list)
    source: List[str] = Field(default_factory=list)
    
    def set_citation(self, title: str, year: int, url: str, authors: List[str], source: str) -> None:
        self.title = title
        self.year = year
        self.url.append(url)
        self.author.extend(authors)
        self.source.append(source)


XREF_CLASSES: Dict[ReferenceKind, Type[Xref]] = {
    ReferenceKind.UNIFICATION: UnificationXref,
    ReferenceKind.RELATIONSHIP: RelationshipXref,
    ReferenceKind.PUBLICATION: PublicationXref,
}


class XReferrable(Level3Element):
    rdf_type: ClassVar[str] = "XReferrable"
    
    xref: List[Xref] = Field(default_factory=list)
    
    def add_xref(self, xref: Xref) -> None:
        # One object per URI, so identity is enough to dedupe
        if xref is not None and all(x is not xref for x in self.xref):
            self.xref.append(xref)


class Named(XReferrable):
    rdf_type: ClassVar[str] = "Named"
    
    name: List[str] = Field(default_factory=list)
    standard_name: Optional[str] = Field(default=None, alias="standardName")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    
    def add_name(self, name: str) -> None:
        if name and name not in self.name:
            self.name.append(name)
    
    # Level 3 has no separate synonym property
    add_synonym = add_name
    
    def set_primary_name(self, name: str) -> None:
        self.standard_name = name
        self.display_name = name
        self.add_name(name)


# =============================================================================
# Utility Classes
# =============================================================================

class Provenance(Named):
    rdf_type: ClassVar[str] = "Provenance"


class BioSource(Named):
    rdf_type: ClassVar[str] = "BioSource"


class ControlledVocabulary(XReferrable):
    rdf_type: ClassVar[str] = "ControlledVocabulary"
    
    term: List[str] = Field(default_factory=list)
    
    def add_term(self, term: str) -> None:
        if term not in self.term:
            self.term.append(term)


class InteractionVocabulary(ControlledVocabulary):
    rdf_type: ClassVar[str] = "InteractionVocabulary"


class SmallMoleculeReference(Named):
    rdf_type: ClassVar[str] = "SmallMoleculeReference"
    
    chemical_formula: Optional[str] = Field(default=None, alias="chemicalFormula")
    molecular_weight: Optional[float] = Field(default=None, alias="molecularWeight")


# =============================================================================
# Entities
# =============================================================================

class Entity(Named):
    rdf_type: ClassVar[str] = "Entity"
    
    data_source: List[Provenance] = Field(default_factory=list, alias="dataSource")
    
    def add_data_source(self, provenance: Provenance) -> None:
        if all(p is not provenance for p in self.data_source):
            self.data_source.append(provenance)


class PhysicalEntity(Entity):
    rdf_type: ClassVar[str] = "PhysicalEntity"


class Protein(PhysicalEntity):
    rdf_type: ClassVar[str] = "Protein"


class Rna(PhysicalEntity):
    rdf_type: ClassVar[str] = "Rna"


class Dna(PhysicalEntity):
    rdf_type: ClassVar[str] = "Dna"


class SmallMolecule(PhysicalEntity):
    rdf_type: ClassVar[str] = "SmallMolecule"
    
    entity_reference: Optional[SmallMoleculeReference] = Field(default=None, alias="entityReference")


class Complex(PhysicalEntity):
    rdf_type: ClassVar[str] = "Complex"
    
    component: List[PhysicalEntity] = Field(default_factory=list)
    
    def add_component(self, entity: PhysicalEntity) -> None:
        if all(c is not entity for c in self.component):
            self.component.append(entity)


# =============================================================================
# Processes
# =============================================================================

class Interaction(Entity):
    rdf_type: ClassVar[str] = "Interaction"
    
    participant: List[Entity] = Field(default_factory=list)
    interaction_type: List[InteractionVocabulary] = Field(default_factory=list, alias="interactionType")
    
    @property
    def is_process(self) -> bool:
        return True
    
    def add_participant(self, entity: Entity) -> None:
        if all(p is not entity for p in self.participant):
            self.participant.append(entity)
    
    def add_interaction_type(self, vocabulary: InteractionVocabulary) -> None:
        if all(v is not vocabulary for v in self.interaction_type):
            self.interaction_type.append(vocabulary)


class MolecularInteraction(Interaction):
    rdf_type: ClassVar[str] = "MolecularInteraction"


class Conversion(Interaction):
    rdf_type: ClassVar[str] = "Conversion"
    
    left: List[PhysicalEntity] = Field(default_factory=list)
    right: List[PhysicalEntity] = Field(default_factory=list)
    conversion_direction: Optional[str] = Field(default=None, alias="conversionDirection")


class BiochemicalReaction(Conversion):
    rdf_type: ClassVar[str] = "BiochemicalReaction"
    
    ec_number: List[str] = Field(default_factory=list, alias="eCNumber")
    
    def add_ec_number(self, ec: str) -> None:
        if ec and ec not in self.ec_number:
            self.ec_number.append(ec)


class Control(Interaction):
    rdf_type: ClassVar[str] = "Control"
    
    controller: List[Entity] = Field(default_factory=list)
    controlled: List[Entity] = Field(default_factory=list)
    control_type: Optional[str] = Field(default=None, alias="controlType")


class Catalysis(Control):
    rdf_type: ClassVar[str] = "Catalysis"


class Pathway(Entity):
    rdf_type: ClassVar[str] = "Pathway"
    
    pathway_component: List[Entity] = Field(default_factory=list, alias="pathwayComponent")
    organism: Optional[BioSource] = None
    
    @property
    def is_process(self) -> bool:
        return True
    
    def add_pathway_component(self, process: Entity) -> None:
        if process is not self and all(c is not process for c in self.pathway_component):
            self.pathway_component.append(process)
