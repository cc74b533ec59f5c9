"""
Pathway Translator - BioPAX Target Model

Level-independent parts of the output model:
- BioPAXLevel: the two mutually exclusive ontology levels
- BioPAXElement: base of every element of both levels
- TargetModel: container owning all elements of one translation run

Level specific element classes live in elements_l2 and elements_l3.
They differ in class names and property names but expose the same small
method interface (add_comment, add_xref, add_name, ...) so the shared
translation code never branches on the level.
"""

from enum import Enum
from typing import ClassVar, Dict, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field

from pathway_translator.exceptions import UnsupportedLevel


class BioPAXLevel(str, Enum):
    """Target ontology level."""
    L2 = "L2"
    L3 = "L3"
    
    @property
    def namespace(self) -> str:
        if self == BioPAXLevel.L2:
            return "http://www.biopax.org/release/biopax-level2.owl#"
        return "http://www.biopax.org/release/biopax-level3.owl#"
    
    def uri_for(self, sid: str) -> str:
        """Element URI for a synthesized id (level 2 uses local fragment ids)."""
        if self == BioPAXLevel.L2:
            return sid if sid.startswith("#") else "#" + sid
        return sid.lstrip("#")


class ReferenceKind(str, Enum):
    """Semantic kind of a cross-reference."""
    UNIFICATION = "unification"  # identity (IS)
    RELATIONSHIP = "relationship"  # associative
    PUBLICATION = "publication"  # bibliographic


class BioPAXElement(BaseModel):
    """
    Base class of all BioPAX elements.
    
    Elements are compared and hashed by identity: two elements are the
    same only if they are the same object (the model guarantees one
    object per URI).
    """
    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
    
    rdf_id: str = Field(..., description="URI of the element within its model")
    
    level: ClassVar[Optional[BioPAXLevel]] = None
    rdf_type: ClassVar[str] = "BioPAXElement"
    
    def __eq__(self, other) -> bool:
        return self is other
    
    def __hash__(self) -> int:
        return id(self)
    
    def __repr__(self) -> str:
        return f"{self.rdf_type}({self.rdf_id!r})"
    
    # Shared interface, implemented with level specific property names
    
    def add_comment(self, text: str) -> None:
        raise UnsupportedLevel(self.level)
    
    def get_comments(self) -> List[str]:
        return []
    
    @property
    def is_process(self) -> bool:
        """True for elements that may be listed as pathway components."""
        return False


E = TypeVar("E", bound=BioPAXElement)


class TargetModel:
    """
    Level specific output container.
    
    Owns every element created during one translation run. Elements are
    keyed by URI; there is never more than one element per URI.
    """
    
    def __init__(self, level: BioPAXLevel, xml_base: Optional[str] = None):
        self.level = level
        self.xml_base = xml_base
        self._elements: Dict[str, BioPAXElement] = {}
    
    def add_new(self, element_class: Type[E], rdf_id: str) -> E:
        """
        Create an element of the given class and register it.
        
        Raises:
            UnsupportedLevel: if the class belongs to the other level
            ValueError: if the URI is already taken
        """
        if element_class.level != self.level:
            raise UnsupportedLevel(element_class.level)
        if rdf_id in self._elements:
            raise ValueError(f"Element {rdf_id!r} already exists in this model")
        element = element_class(rdf_id=rdf_id)
        self._elements[rdf_id] = element
        return element
    
    def get_by_id(self, rdf_id: str) -> Optional[BioPAXElement]:
        return self._elements.get(rdf_id)
    
    def contains(self, rdf_id: str) -> bool:
        return rdf_id in self._elements
    
    def remove(self, element: BioPAXElement) -> None:
        self._elements.pop(element.rdf_id, None)
    
    def objects(self) -> List[BioPAXElement]:
        return list(self._elements.values())
    
    def objects_of(self, element_class: Type[E]) -> List[E]:
        """All elements that are instances of the class (subclasses included)."""
        return [e for e in self._elements.values() if isinstance(e, element_class)]
    
    def __iter__(self) -> Iterator[BioPAXElement]:
        return iter(list(self._elements.values()))
    
    def __len__(self) -> int:
        return len(self._elements)
    
    def __contains__(self, element: BioPAXElement) -> bool:
        return self._elements.get(element.rdf_id) is element
