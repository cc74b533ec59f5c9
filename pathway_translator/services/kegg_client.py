"""
Pathway Translator - KEGG REST Client

Annotation source backed by the KEGG REST API (https://rest.kegg.jp).

Responsibilities:
- Fetch flat-file records for KEGG identifiers (batched, 10 per request)
- Enforce a minimum delay between requests
- Parse the fields the translator needs into AnnotationRecords

Unresolvable identifiers and HTTP failures yield success=False records;
this client never raises into a translation run.
"""

import re
import time
from typing import Dict, Iterable, List, Optional

import httpx
import structlog

from pathway_translator.config import Settings, settings as default_settings
from pathway_translator.services.annotation import AnnotationRecord


logger = structlog.get_logger(__name__)

# KEGG flat files: field name in the first 12 columns, value after
_FIELD_WIDTH = 12
_BATCH_SIZE = 10  # KEGG "get" accepts at most 10 entries per request


def parse_flat_file(identifier: str, text: str) -> AnnotationRecord:
    """Parse one KEGG flat-file entry into an AnnotationRecord."""
    fields: Dict[str, List[str]] = {}
    current = None
    for line in text.splitlines():
        if line.startswith("///"):
            break
        if not line.strip():
            continue
        key = line[:_FIELD_WIDTH].strip()
        value = line[_FIELD_WIDTH:].strip()
        if key:
            # sub-fields like "  ORGANISM" belong to their own key
            current = key
        if current is not None:
            fields.setdefault(current, []).append(value)
    
    if not fields:
        return AnnotationRecord.not_found(identifier)
    
    def joined(name: str, sep: str = " ") -> Optional[str]:
        values = fields.get(name)
        return sep.join(values).strip() if values else None
    
    record = AnnotationRecord(identifier=identifier, success=True)
    record.names = joined("NAME", " ")
    record.definition = joined("DEFINITION")
    record.equation = joined("EQUATION")
    record.formula = joined("FORMULA")
    record.mass = joined("EXACT_MASS") or joined("MASS")
    record.molecular_weight = joined("MOL_WEIGHT")
    
    if "ENZYME" in fields:
        record.enzymes = " ".join(fields["ENZYME"]).split()
    
    if "PATHWAY" in fields:
        descriptions = []
        for line in fields["PATHWAY"]:
            parts = line.split(None, 1)
            if not parts:
                continue
            record.pathway_ids.append(parts[0])
            if len(parts) > 1:
                descriptions.append(parts[1])
        if descriptions:
            record.pathway_descriptions = ", ".join(descriptions)
    
    if "REACTION" in fields:
        record.reaction_ids = re.findall(r"R\d{5}", " ".join(fields["REACTION"]))
    
    for line in fields.get("DBLINKS", []):
        if ":" not in line:
            continue
        label, values = line.split(":", 1)
        record.dblinks.setdefault(label.strip(), []).extend(values.split())
    
    taxonomy = joined("TAXONOMY")
    if taxonomy:
        # "TAX:9606" or "9606 ..." -> "9606"
        record.taxonomy = taxonomy.replace("TAX:", "").strip().split()[0]
    
    return record


def split_entries(text: str) -> List[str]:
    return [chunk.strip("\n") for chunk in text.split("///") if chunk.strip()]


class KeggRestAnnotationSource:
    """
    Client for the KEGG REST "get" operation.
    
    Usage:
        with KeggRestAnnotationSource() as kegg:
            record = kegg.lookup("cpd:C00031")
    """
    
    def __init__(self, config: Optional[Settings] = None, client: Optional[httpx.Client] = None):
        config = config or default_settings
        self.base_url = config.KEGG_API_URL.rstrip("/")
        self._timeout = config.KEGG_API_TIMEOUT
        self._delay = config.KEGG_REQUEST_DELAY
        self._client = client
        self._last_request_time = 0.0
    
    def _ensure_client(self) -> httpx.Client:
        """Ensure we have an open client, recreating if necessary."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client
    
    def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            self._client.close()
    
    def __enter__(self) -> "KeggRestAnnotationSource":
        return self
    
    def __exit__(self, *exc) -> None:
        self.close()
    
    def _rate_limit(self) -> None:
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self._delay:
            time.sleep(self._delay - elapsed)
        self._last_request_time = time.monotonic()
    
    def _get(self, query: str) -> Optional[str]:
        self._rate_limit()
        try:
            response = self._ensure_client().get(f"{self.base_url}/get/{query}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.text
        except httpx.HTTPError as e:
            logger.warning("KEGG request failed", query=query, error=str(e))
            return None
    
    def lookup(self, identifier: str) -> AnnotationRecord:
        text = self._get(identifier)
        if not text:
            return AnnotationRecord.not_found(identifier)
        return parse_flat_file(identifier, text)
    
    def lookup_many(self, identifiers: Iterable[str]) -> List[AnnotationRecord]:
        """
        Resolve identifiers in batches of 10.
        
        KEGG answers in request order but silently drops unknown ids,
        so results are matched back via their ENTRY line.
        """
        identifiers = list(identifiers)
        records: List[AnnotationRecord] = []
        
        # genome entries answer with their T number, they cannot be matched in a batch
        genomes = [i for i in identifiers if i.lower().startswith("gn:")]
        identifiers = [i for i in identifiers if not i.lower().startswith("gn:")]
        records.extend(self.lookup(g) for g in genomes)
        
        for i in range(0, len(identifiers), _BATCH_SIZE):
            batch = identifiers[i:i + _BATCH_SIZE]
            text = self._get("+".join(batch))
            found: Dict[str, AnnotationRecord] = {}
            
            if text:
                for chunk in split_entries(text):
                    entry_id = _entry_id(chunk)
                    for identifier in batch:
                        if entry_id and _matches(identifier, entry_id):
                            found[identifier] = parse_flat_file(identifier, chunk)
                            break
            
            for identifier in batch:
                records.append(found.get(identifier) or AnnotationRecord.not_found(identifier))
        
        return records


def _entry_id(chunk: str) -> Optional[str]:
    for line in chunk.splitlines():
        if line.startswith("ENTRY"):
            parts = line[_FIELD_WIDTH:].split()
            return parts[0] if parts else None
    return None


def _matches(identifier: str, entry_id: str) -> bool:
    """'cpd:C00031' matches ENTRY 'C00031'; 'hsa:3098' matches '3098'."""
    local = identifier.split(":", 1)[-1]
    return local.lower() == entry_id.lower()
