"""
Pathway Translator - Annotation Source

Interface to per-identifier annotation text (definition, synonyms,
formula, mass, pathways, enzyme codes, database links).

The translator never talks to a remote service directly: it asks an
AnnotationSource, which must answer success=False for unresolvable
identifiers instead of raising. CachingAnnotationSource makes sure each
identifier is queried at most once per run.
"""

from typing import Dict, Iterable, List, Optional, Protocol

import structlog
from pydantic import BaseModel, Field

from pathway_translator.exceptions import AnnotationLookupFailed
from pathway_translator.xrefs.identifiers import (
    DBLINK_DATABASES,
    IdentifierDatabase,
    kegg_database_for,
)


# =============================================================================
# Schemas
# =============================================================================

class AnnotationRecord(BaseModel):
    """Everything the annotation source knows about one identifier."""
    identifier: str
    success: bool = False
    
    definition: Optional[str] = None
    names: Optional[str] = Field(default=None, description="Synonyms separated by ';' or ', '")
    equation: Optional[str] = None
    formula: Optional[str] = None
    mass: Optional[str] = Field(default=None, description="e.g. '180.0634'")
    molecular_weight: Optional[str] = None
    enzymes: List[str] = Field(default_factory=list, description="EC numbers")
    pathway_ids: List[str] = Field(default_factory=list, description="e.g. map00010")
    pathway_descriptions: Optional[str] = None
    reaction_ids: List[str] = Field(default_factory=list, description="e.g. R00014")
    taxonomy: Optional[str] = Field(default=None, description="NCBI taxonomy id")
    dblinks: Dict[str, List[str]] = Field(default_factory=dict, description="KEGG DBLINKS label -> ids")
    
    @classmethod
    def not_found(cls, identifier: str) -> "AnnotationRecord":
        return cls(identifier=identifier, success=False)
    
    def database_identifiers(self) -> Dict[IdentifierDatabase, List[str]]:
        """
        All identifiers this record links to, grouped by database.
        
        Includes the queried KEGG identifier itself, even if the query failed.
        """
        ids: Dict[IdentifierDatabase, List[str]] = {}
        
        own = kegg_database_for(self.identifier)
        if own is not None:
            ids.setdefault(own[0], []).append(own[1])
        
        if not self.success:
            return ids
        
        for label, values in self.dblinks.items():
            db = DBLINK_DATABASES.get(label)
            if db is None:
                continue
            for value in values:
                if value not in ids.setdefault(db, []):
                    ids[db].append(value)
        
        if self.pathway_ids:
            pathway_ids = ids.setdefault(IdentifierDatabase.KEGG_PATHWAY, [])
            for pid in self.pathway_ids:
                if pid not in pathway_ids:
                    pathway_ids.append(pid)
        
        if self.enzymes:
            ec_ids = ids.setdefault(IdentifierDatabase.EC_NUMBER, [])
            for ec in self.enzymes:
                if ec not in ec_ids:
                    ec_ids.append(ec)
        
        return ids


# =============================================================================
# Sources
# =============================================================================

class AnnotationSource(Protocol):
    """Anything that can resolve an identifier to an AnnotationRecord."""
    
    def lookup(self, identifier: str) -> AnnotationRecord:
        ...


class InMemoryAnnotationSource:
    """Annotation source backed by a dict. Useful offline and in tests."""
    
    def __init__(self, records: Optional[Iterable[AnnotationRecord]] = None):
        self._records: Dict[str, AnnotationRecord] = {}
        for record in records or []:
            self.add(record)
        self.queries = 0
    
    def add(self, record: AnnotationRecord) -> None:
        self._records[record.identifier.lower()] = record
    
    def lookup(self, identifier: str) -> AnnotationRecord:
        self.queries += 1
        record = self._records.get(identifier.lower())
        if record is None:
            return AnnotationRecord.not_found(identifier)
        return record


class CachingAnnotationSource:
    """
    Run-scoped cache in front of another annotation source.
    
    Every identifier is forwarded at most once. Call precache() with all
    identifiers of a pathway before bulk use, so batch-capable sources can
    resolve them in few round trips.
    """
    
    def __init__(self, source: AnnotationSource, logger=None):
        self.source = source
        self.log = logger or structlog.get_logger(__name__)
        self._cache: Dict[str, AnnotationRecord] = {}
    
    def _fetch(self, identifier: str) -> AnnotationRecord:
        try:
            record = self.source.lookup(identifier)
        except AnnotationLookupFailed as e:
            self.log.debug("Annotation lookup failed", identifier=identifier, reason=e.reason)
            record = None
        if record is None:
            record = AnnotationRecord.not_found(identifier)
        return record
    
    def lookup(self, identifier: str) -> AnnotationRecord:
        key = identifier.strip().lower()
        record = self._cache.get(key)
        if record is None:
            record = self._fetch(identifier.strip())
            self._cache[key] = record
        return record
    
    def precache(self, identifiers: Iterable[str]) -> int:
        """
        Resolve all identifiers not cached yet.
        
        Returns:
            Number of identifiers that were newly resolved
        """
        pending = []
        seen = set()
        for identifier in identifiers:
            key = identifier.strip().lower()
            if not key or key == "undefined" or key in self._cache or key in seen:
                continue
            seen.add(key)
            pending.append(identifier.strip())
        
        if not pending:
            return 0
        
        lookup_many = getattr(self.source, "lookup_many", None)
        if lookup_many is not None:
            try:
                for record in lookup_many(pending):
                    self._cache[record.identifier.lower()] = record
            except AnnotationLookupFailed as e:
                self.log.debug("Batch annotation lookup failed", reason=e.reason, count=len(pending))
        
        for identifier in pending:
            if identifier.lower() not in self._cache:
                self._cache[identifier.lower()] = self._fetch(identifier)
        
        return len(pending)
    
    def is_cached(self, identifier: str) -> bool:
        return identifier.strip().lower() in self._cache
    
    def clear(self) -> None:
        self._cache.clear()
