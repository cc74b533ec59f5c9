"""
Pathway Translator - Cross-Reference Cache

Creates typed cross-reference elements keyed by a canonical URI.

Two requests for the same (database, identifier) pair always yield the
same element object, so the target model never holds duplicates and an
entity's xref list can be deduplicated by identity.
"""

from typing import Callable, Dict, Optional, Type

import structlog

from pathway_translator.biopax import elements_l2, elements_l3
from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel, ReferenceKind, TargetModel
from pathway_translator.exceptions import InvalidIdentifier, UnsupportedLevel
from pathway_translator.utils.text import name_to_sid
from pathway_translator.xrefs.identifiers import (
    DatabaseContent,
    IdentifierDatabase,
    Qualifier,
    infer_qualifier,
    miriam_uri,
    validate_identifier,
)


_XREF_CLASSES: Dict[BioPAXLevel, Dict[ReferenceKind, Type[BioPAXElement]]] = {
    BioPAXLevel.L2: elements_l2.XREF_CLASSES,
    BioPAXLevel.L3: elements_l3.XREF_CLASSES,
}

_IDENTITY_QUALIFIERS = (Qualifier.IS, Qualifier.HAS_VERSION)


def classify(db: IdentifierDatabase, identifier: str, context: Optional[str]) -> ReferenceKind:
    """
    Kind of reference an identifier forms from the given point of view.
    
    - Bibliographic databases -> PUBLICATION, regardless of context
    - IS / HAS_VERSION qualifier -> UNIFICATION
    - everything else -> RELATIONSHIP
    """
    if db.content == DatabaseContent.PUBLICATION:
        return ReferenceKind.PUBLICATION
    if infer_qualifier(db, context, identifier) in _IDENTITY_QUALIFIERS:
        return ReferenceKind.UNIFICATION
    return ReferenceKind.RELATIONSHIP


class CrossReferenceCache:
    """
    Run-scoped factory for cross-reference elements of one target model.
    
    Usage:
        cache = CrossReferenceCache(model, on_created=builder.component_created)
        xr = cache.get_or_create(IdentifierDatabase.PUBMED, "21700675", ReferenceKind.PUBLICATION)
    """
    
    def __init__(
        self,
        model: TargetModel,
        on_created: Optional[Callable[[BioPAXElement], None]] = None,
        logger=None,
    ):
        if model.level not in _XREF_CLASSES:
            raise UnsupportedLevel(model.level)
        self.model = model
        self._on_created = on_created
        self.log = logger or structlog.get_logger(__name__)
        self.created = 0
        self.reused = 0
    
    def canonical_uri(self, db: IdentifierDatabase, formatted_id: str) -> str:
        """MIRIAM URN if the database defines one, else a sanitized db_id token."""
        uri = miriam_uri(db, formatted_id)
        if not uri:
            uri = self.model.level.uri_for(name_to_sid(f"{db.value}_{formatted_id}"))
        return uri
    
    def get_or_create(
        self,
        db: IdentifierDatabase,
        identifier: str,
        kind: ReferenceKind = ReferenceKind.RELATIONSHIP,
    ) -> Optional[BioPAXElement]:
        """
        Existing reference for the (db, identifier) pair, or a new one.
        
        Returns None (and logs) if the identifier is invalid for the database.
        """
        if identifier is None:
            return None
        try:
            formatted = validate_identifier(db, identifier)
        except InvalidIdentifier as e:
            self.log.warning("Skipping invalid database entry", db=db.value, identifier=identifier, error=str(e))
            return None
        
        uri = self.canonical_uri(db, formatted)
        existing = self.model.get_by_id(uri)
        if existing is not None:
            self.reused += 1
            return existing
        
        xref_class = _XREF_CLASSES[self.model.level].get(kind)
        if xref_class is None:
            # the generic xref class is abstract in both levels
            xref_class = _XREF_CLASSES[self.model.level][ReferenceKind.RELATIONSHIP]
        
        xref = self.model.add_new(xref_class, uri)
        xref.set_reference(db.official_name, formatted)
        self.created += 1
        if self._on_created is not None:
            self._on_created(xref)
        return xref
    
    def get_or_create_classified(
        self,
        db: IdentifierDatabase,
        identifier: str,
        context: Optional[str],
    ) -> Optional[BioPAXElement]:
        """get_or_create() with the kind inferred by classify()."""
        return self.get_or_create(db, identifier, classify(db, identifier, context))
    
    classify = staticmethod(classify)
