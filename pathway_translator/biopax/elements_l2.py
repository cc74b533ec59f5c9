"""
BioPAX Level 2 elements.

Level 2 property names are upper case (NAME, SYNONYMS, XREF, ...).
Attributes use those names directly; hyphenated ones get an alias.

Structural differences to level 3:
- names: one NAME plus a SYNONYMS set instead of a name list
- interactions reference physicalEntityParticipant wrappers, not entities
- small molecules carry formula and weight themselves
- provenance is modelled as dataSource
"""

from typing import ClassVar, Dict, List, Optional, Type

from pydantic import Field

from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel, ReferenceKind


class Level2Element(BioPAXElement):
    level: ClassVar[BioPAXLevel] = BioPAXLevel.L2
    rdf_type: ClassVar[str] = "level2Element"
    
    COMMENT: List[str] = Field(default_factory=list)
    
    def add_comment(self, text: str) -> None:
        if text and text not in self.COMMENT:
            self.COMMENT.append(text)
    
    def get_comments(self) -> List[str]:
        return list(self.COMMENT)


# =============================================================================
# Cross-References
# =============================================================================

class xref(Level2Element):
    rdf_type: ClassVar[str] = "xref"
    
    DB: Optional[str] = None
    ID: Optional[str] = None
    
    def set_reference(self, db: str, identifier: str) -> None:
        self.DB = db
        self.ID = identifier


class unificationXref(xref):
    rdf_type: ClassVar[str] = "unificationXref"


class relationshipXref(xref):
    rdf_type: ClassVar[str] = "relationshipXref"


class publicationXref(xref):
    rdf_type: ClassVar[str] = "publicationXref"
    
    TITLE: Optional[str] = None
    YEAR: Optional[int] = None
    URL: List[str] = Field(default_factory=list)
    AUTHORS: List[str] = Field(default_factory=list)
    SOURCE: List[str] = Field(default_factory=list)
    
    def set_citation(self, title: str, year: int, url: str, authors: List[str], source: str) -> None:
        self.TITLE = title
        self.YEAR = year
        self.URL.append(url)
        # Level 2 keeps the author list in one string
        self.AUTHORS.append(", ".join(authors))
        self.SOURCE.append(source)


XREF_CLASSES: Dict[ReferenceKind, Type[xref]] = {
    ReferenceKind.UNIFICATION: unificationXref,
    ReferenceKind.RELATIONSHIP: relationshipXref,
    ReferenceKind.PUBLICATION: publicationXref,
}


class XReferrable(Level2Element):
    rdf_type: ClassVar[str] = "XReferrable"
    
    XREF: List[xref] = Field(default_factory=list)
    
    def add_xref(self, reference: xref) -> None:
        if reference is not None and all(x is not reference for x in self.XREF):
            self.XREF.append(reference)


# =============================================================================
# Utility Classes
# =============================================================================

class dataSource(XReferrable):
    rdf_type: ClassVar[str] = "dataSource"
    
    NAME: List[str] = Field(default_factory=list)
    
    def add_name(self, name: str) -> None:
        if name and name not in self.NAME:
            self.NAME.append(name)
    
    def set_primary_name(self, name: str) -> None:
        self.add_name(name)


class bioSource(Level2Element):
    rdf_type: ClassVar[str] = "bioSource"
    
    NAME: Optional[str] = None
    TAXON_XREF: Optional[unificationXref] = Field(default=None, alias="TAXON-XREF")
    
    def set_primary_name(self, name: str) -> None:
        self.NAME = name


class openControlledVocabulary(XReferrable):
    rdf_type: ClassVar[str] = "openControlledVocabulary"
    
    TERM: List[str] = Field(default_factory=list)
    
    def add_term(self, term: str) -> None:
        if term not in self.TERM:
            self.TERM.append(term)


# =============================================================================
# Entities
# =============================================================================

class entity(XReferrable):
    rdf_type: ClassVar[str] = "entity"
    
    NAME: Optional[str] = None
    SHORT_NAME: Optional[str] = Field(default=None, alias="SHORT-NAME")
    SYNONYMS: List[str] = Field(default_factory=list)
    DATA_SOURCE: List[dataSource] = Field(default_factory=list, alias="DATA-SOURCE")
    
    def set_primary_name(self, name: str) -> None:
        self.NAME = name
        self.SHORT_NAME = name
    
    def add_name(self, name: str) -> None:
        if not name:
            return
        if self.NAME is None:
            self.NAME = name
        elif name != self.NAME:
            self.add_synonym(name)
    
    def add_synonym(self, name: str) -> None:
        if name and name not in self.SYNONYMS:
            self.SYNONYMS.append(name)
    
    def add_data_source(self, source: dataSource) -> None:
        if all(s is not source for s in self.DATA_SOURCE):
            self.DATA_SOURCE.append(source)


class physicalEntity(entity):
    rdf_type: ClassVar[str] = "physicalEntity"


class protein(physicalEntity):
    rdf_type: ClassVar[str] = "protein"
    
    ORGANISM: Optional[bioSource] = None


class rna(physicalEntity):
    rdf_type: ClassVar[str] = "rna"
    
    ORGANISM: Optional[bioSource] = None


class dna(physicalEntity):
    rdf_type: ClassVar[str] = "dna"
    
    ORGANISM: Optional[bioSource] = None


class smallMolecule(physicalEntity):
    rdf_type: ClassVar[str] = "smallMolecule"
    
    CHEMICAL_FORMULA: Optional[str] = Field(default=None, alias="CHEMICAL-FORMULA")
    MOLECULAR_WEIGHT: Optional[float] = Field(default=None, alias="MOLECULAR-WEIGHT")


class physicalEntityParticipant(Level2Element):
    """Wrapper that places a physical entity into an interaction."""
    rdf_type: ClassVar[str] = "physicalEntityParticipant"
    
    PHYSICAL_ENTITY: Optional[physicalEntity] = Field(default=None, alias="PHYSICAL-ENTITY")
    STOICHIOMETRIC_COEFFICIENT: Optional[float] = Field(default=None, alias="STOICHIOMETRIC-COEFFICIENT")


class complex(physicalEntity):
    rdf_type: ClassVar[str] = "complex"
    
    COMPONENTS: List[physicalEntityParticipant] = Field(default_factory=list)
    ORGANISM: Optional[bioSource] = None


# =============================================================================
# Processes
# =============================================================================

class interaction(entity):
    rdf_type: ClassVar[str] = "interaction"
    
    PARTICIPANTS: List[Level2Element] = Field(default_factory=list)
    
    @property
    def is_process(self) -> bool:
        return True
    
    def add_participant(self, participant: Level2Element) -> None:
        if all(p is not participant for p in self.PARTICIPANTS):
            self.PARTICIPANTS.append(participant)


class physicalInteraction(interaction):
    rdf_type: ClassVar[str] = "physicalInteraction"
    
    INTERACTION_TYPE: List[openControlledVocabulary] = Field(default_factory=list, alias="INTERACTION-TYPE")
    
    def add_interaction_type(self, vocabulary: openControlledVocabulary) -> None:
        if all(v is not vocabulary for v in self.INTERACTION_TYPE):
            self.INTERACTION_TYPE.append(vocabulary)


class conversion(interaction):
    rdf_type: ClassVar[str] = "conversion"
    
    LEFT: List[physicalEntityParticipant] = Field(default_factory=list)
    RIGHT: List[physicalEntityParticipant] = Field(default_factory=list)
    SPONTANEOUS: Optional[str] = None


class biochemicalReaction(conversion):
    rdf_type: ClassVar[str] = "biochemicalReaction"
    
    EC_NUMBER: List[str] = Field(default_factory=list, alias="EC-NUMBER")
    
    def add_ec_number(self, ec: str) -> None:
        if ec and ec not in self.EC_NUMBER:
            self.EC_NUMBER.append(ec)


class control(physicalInteraction):
    rdf_type: ClassVar[str] = "control"
    
    CONTROLLER: List[physicalEntityParticipant] = Field(default_factory=list)
    CONTROLLED: List[entity] = Field(default_factory=list)
    CONTROL_TYPE: Optional[str] = Field(default=None, alias="CONTROL-TYPE")


class catalysis(control):
    rdf_type: ClassVar[str] = "catalysis"
    
    DIRECTION: Optional[str] = None


class pathway(entity):
    rdf_type: ClassVar[str] = "pathway"
    
    PATHWAY_COMPONENTS: List[entity] = Field(default_factory=list, alias="PATHWAY-COMPONENTS")
    ORGANISM: Optional[bioSource] = None
    
    @property
    def is_process(self) -> bool:
        return True
    
    def add_pathway_component(self, process: entity) -> None:
        if process is not self and all(c is not process for c in self.PATHWAY_COMPONENTS):
            self.PATHWAY_COMPONENTS.append(process)
