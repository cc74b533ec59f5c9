"""
Pathway Translator - Domain Models

Parsed KEGG pathway (entries, reactions, relations) as produced by an
external KGML parser. The translator treats these objects as read-only,
with one exception: Entry.custom, the handle of the target element an
entry was translated to.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class EntryType(str, Enum):
    """KGML entry types."""
    ORTHOLOG = "ortholog"
    ENZYME = "enzyme"
    REACTION = "reaction"
    GENE = "gene"
    GENES = "genes"
    GROUP = "group"
    COMPOUND = "compound"
    MAP = "map"
    BRITE = "brite"
    OTHER = "other"


class RelationType(str, Enum):
    """KGML relation types."""
    ECREL = "ECrel"
    PPREL = "PPrel"
    GEREL = "GErel"
    PCREL = "PCrel"
    MAPLINK = "maplink"
    OTHER = "other"


class ReactionType(str, Enum):
    REVERSIBLE = "reversible"
    IRREVERSIBLE = "irreversible"


# =============================================================================
# Pathway Elements
# =============================================================================

class Graphics(BaseModel):
    """Drawing hints of an entry (only used for the graph representation)."""
    name: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fgcolor: Optional[str] = None
    bgcolor: Optional[str] = None


class SubType(BaseModel):
    """Qualifier of a relation, e.g. activation, inhibition or binding."""
    name: str
    value: Optional[str] = None
    
    class Config:
        frozen = True


class ReactionComponent(BaseModel):
    """Substrate or product of a reaction, referencing an entry by id."""
    id: Optional[int] = None
    name: str
    stoichiometry: int = Field(default=1, ge=1)


class Entry(BaseModel):
    """
    A single pathway element (gene, compound, group, reaction-reference, ...).
    
    The name holds one or more space-separated identifiers, e.g.
    "hsa:3098 hsa:3099" or "cpd:C00031". Entries without a real
    identifier are called "undefined".
    """
    id: int
    name: str
    type: EntryType = EntryType.OTHER
    link: Optional[str] = None
    reactions: List[str] = Field(default_factory=list)
    components: List[int] = Field(default_factory=list, description="Member entry ids of a group")
    real_type: Optional[str] = Field(default=None, description="e.g. protein, complex, RNA, DNA, small_molecule")
    graphics: Optional[Graphics] = None
    
    # Handle (URI) of the target element this entry was translated to
    custom: Optional[str] = None
    
    @field_validator("reactions")
    @classmethod
    def split_reaction_tokens(cls, v: List[str]) -> List[str]:
        """KGML lists several reactions in one attribute, e.g. "rn:R00299 rn:R01786"."""
        return [token for value in v for token in value.split()]
    
    @property
    def ids(self) -> List[str]:
        """Identifier tokens of this entry."""
        return [t for t in self.name.split(" ") if t.strip()]
    
    @property
    def has_real_identifier(self) -> bool:
        """True if the name carries at least one database-prefixed identifier."""
        return ":" in self.name
    
    @property
    def label(self) -> str:
        if self.graphics and self.graphics.name:
            return self.graphics.name
        return self.name
    
    def link_to(self, handle: str) -> None:
        """
        Set the custom back-reference. Can only be set once.
        
        Raises:
            ValueError: if the entry already points to a different element
        """
        if self.custom is not None and self.custom != handle:
            raise ValueError(
                f"Entry {self.id} is already linked to {self.custom}, refusing {handle}"
            )
        self.custom = handle


class Reaction(BaseModel):
    """A KGML reaction. The name may hold multiple space-separated reaction ids."""
    name: str
    type: ReactionType = ReactionType.IRREVERSIBLE
    substrates: List[ReactionComponent] = Field(default_factory=list)
    products: List[ReactionComponent] = Field(default_factory=list)
    
    @property
    def is_reversible(self) -> bool:
        return self.type == ReactionType.REVERSIBLE
    
    @property
    def ids(self) -> List[str]:
        return [t for t in self.name.split(" ") if t.strip()]


class Relation(BaseModel):
    """A directed relation between two entries, qualified by subtypes."""
    entry1: int
    entry2: int
    type: RelationType = RelationType.OTHER
    subtypes: List[SubType] = Field(default_factory=list)
    
    def key(self) -> str:
        """Stable string used to skip relations listed twice."""
        subtypes = ",".join(f"{s.name}={s.value or ''}" for s in self.subtypes)
        return f"{self.entry1}->{self.entry2}:{self.type.value}[{subtypes}]"
    
    def subtype_names(self) -> List[str]:
        return [s.name for s in self.subtypes]


class Pathway(BaseModel):
    """
    A parsed KEGG pathway.
    
    Owned by the caller; the translator only reads it (apart from
    setting Entry.custom during a run).
    """
    name: str = Field(..., description="e.g. path:hsa00010")
    org: Optional[str] = Field(default=None, description="KEGG organism code, e.g. hsa")
    number: Optional[str] = None
    title: Optional[str] = None
    link: Optional[str] = None
    image: Optional[str] = None
    origin_format_name: Optional[str] = Field(default="kgml")
    
    entries: List[Entry] = Field(default_factory=list)
    reactions: List[Reaction] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)
    
    @property
    def display_name(self) -> str:
        return self.title or self.name or "Unknown"
    
    def get_entry_for_id(self, entry_id: int) -> Optional[Entry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None
    
    def get_entries_for_name(self, name: str) -> List[Entry]:
        """All entries with exactly this name, in document order."""
        return [e for e in self.entries if e.name == name]
    
    def get_reactions_for_entry(self, entry: Entry) -> List[Reaction]:
        """Reactions that use the entry as substrate or product, or that the entry catalyzes."""
        result = []
        for reaction in self.reactions:
            component_ids = [c.id for c in reaction.substrates + reaction.products]
            if entry.id in component_ids or any(r in entry.reactions for r in reaction.ids):
                result.append(reaction)
        return result
    
    def get_relations_for_entry(self, entry: Entry) -> List[Relation]:
        return [r for r in self.relations if entry.id in (r.entry1, r.entry2)]
    
    def entries_by_id(self) -> Dict[int, Entry]:
        return {e.id: e for e in self.entries}
    
    def resolve_component(self, component: ReactionComponent) -> Optional[Entry]:
        """Find the entry behind a reaction substrate or product."""
        if component.id is not None:
            entry = self.get_entry_for_id(component.id)
            if entry is not None:
                return entry
        candidates = self.get_entries_for_name(component.name)
        return candidates[0] if candidates else None
