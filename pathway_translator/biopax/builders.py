"""
Pathway Translator - Entity Builder

Maps pathway entries, reactions and relations onto BioPAX elements.

EntityBuilder implements the level-independent semantics once:
- deduplication of entries that carry the same real identifier
- annotation enrichment from the annotation source
- cross-reference creation and classification
- provenance, organism and vocabulary handling

Level2Builder and Level3Builder only decide which concrete classes to
instantiate and how to wire them (see level2.py and level3.py).
"""

import html
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Iterable, List, Optional

from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel, ReferenceKind, TargetModel
from pathway_translator.biopax.vocabulary import control_type, get_go_term, get_sbo_term
from pathway_translator.domain.models import (
    Entry,
    EntryType,
    Pathway,
    Reaction,
    ReactionComponent,
    Relation,
    SubType,
)
from pathway_translator.exceptions import UnsupportedLevel
from pathway_translator.context import TranslationContext
from pathway_translator.utils.text import (
    format_text_for_html_notes,
    name_to_sid,
    parse_leading_number,
    split_synonyms,
    unique,
)
from pathway_translator.xrefs.cache import CrossReferenceCache
from pathway_translator.xrefs.identifiers import IdentifierDatabase


# =============================================================================
# Constants
# =============================================================================

UNDEFINED = "undefined"

# KEGGtranslator publication, cited by the tool provenance record
TOOL_PUBMED_ID = "21700675"
TOOL_CITATION = {
    "title": "KEGGtranslator: visualizing and converting the KEGG PATHWAY database to various formats",
    "year": 2011,
    "url": "http://www.ncbi.nlm.nih.gov/pubmed/21700675",
    "authors": ["Andreas Zell", "Andreas Dräger", "Clemens Wrzodek"],
    "source": "Bioinformatics 2011, 27(16), 2314-2315",
}

KEGG_DATA_SOURCE_ID = "KEGG_DataSource"
KEGG_URL = "http://www.genome.jp/kegg/"

# Entity kinds shared by both levels
SMALL_MOLECULE = "small_molecule"
PROTEIN = "protein"
RNA = "rna"
DNA = "dna"
COMPLEX = "complex"
PATHWAY = "pathway"
GENERIC = "generic"


def entity_kind(entry: Entry) -> str:
    """Which kind of physical entity (or pathway reference) an entry becomes."""
    real_type = (entry.real_type or "").strip().lower()
    if real_type in ("rna", "mirna"):
        return RNA
    if real_type == "dna":
        return DNA
    if real_type in ("small_molecule", "compound"):
        return SMALL_MOLECULE
    if real_type == "complex":
        return COMPLEX
    
    if entry.type == EntryType.COMPOUND:
        return SMALL_MOLECULE
    if entry.type in (EntryType.GENE, EntryType.GENES, EntryType.ORTHOLOG, EntryType.ENZYME):
        return PROTEIN
    if entry.type == EntryType.GROUP:
        return COMPLEX
    if entry.type == EntryType.MAP:
        return PATHWAY
    return GENERIC


def point_of_view(entry: Entry) -> str:
    """Context used to classify the cross-references of an entry."""
    if entry.type == EntryType.REACTION:
        return "reaction"
    if entry.type == EntryType.MAP:
        return "pathway"
    if entry.type == EntryType.ORTHOLOG and not entry.real_type:
        return "ortholog"
    kind = entity_kind(entry)
    if kind == SMALL_MOLECULE:
        return "small_molecule"
    return entry.real_type or "protein"


def concat_reaction_ids(reactions: Iterable[Reaction], extra_ids: Iterable[str]) -> List[str]:
    """Reaction ids of the given reactions plus extra ids, without 'rn:' prefix, unique."""
    ids = []
    for reaction in reactions:
        ids.extend(reaction.ids)
    ids.extend(extra_ids or [])
    cleaned = []
    for rid in ids:
        for token in rid.split():
            token = token.strip()
            if token.lower().startswith("rn:"):
                token = token[3:]
            cleaned.append(token.upper())
    return unique(cleaned)


# =============================================================================
# Builder
# =============================================================================

class EntityBuilder(ABC):
    """
    Creates the elements of one target model.
    
    One builder serves exactly one translation run: it remembers the
    container, provenance records and organism it created, and which
    entry names it already processed.
    """
    
    level: ClassVar[BioPAXLevel]
    kegg_data_source_name: ClassVar[str] = "KEGG database"
    
    def __init__(self, context: TranslationContext, model: TargetModel):
        if model.level != self.level:
            raise UnsupportedLevel(model.level)
        self.context = context
        self.model = model
        self.log = context.log
        self.xrefs = CrossReferenceCache(model, on_created=self.component_created, logger=context.log)
        
        self.container: Optional[BioPAXElement] = None
        self.data_sources: List[BioPAXElement] = []
        self._bio_source: Optional[BioPAXElement] = None
        self._bio_source_created = False
        # entry names with a real identifier that were already translated
        self._processed_names: set = set()
        self._relation_counter = 0
        self._citation_set = False
    
    @property
    def annotations(self):
        return self.context.annotations
    
    def uri(self, name: str) -> str:
        return self.level.uri_for(name_to_sid(name))
    
    def unique_uri(self, name: str) -> str:
        """URI for the name, suffixed with a counter if it is already taken."""
        base = self.uri(name)
        uri, n = base, 1
        while self.model.contains(uri):
            n += 1
            uri = f"{base}_{n}"
        return uri
    
    # -------------------------------------------------------------------------
    # Level specific construction
    # -------------------------------------------------------------------------
    
    @abstractmethod
    def _new_container(self, pathway: Pathway) -> BioPAXElement:
        """Create the element representing the whole pathway."""
    
    @abstractmethod
    def _set_organism(self, element: BioPAXElement, organism: BioPAXElement) -> None:
        """Attach the organism record to the container."""
    
    @abstractmethod
    def _new_data_source(self, rdf_id: str, name: str, comment: Optional[str]) -> BioPAXElement:
        """Create a provenance record."""
    
    @abstractmethod
    def _new_bio_source(self, name: str, taxonomy_xref: Optional[BioPAXElement]) -> BioPAXElement:
        """Create the organism record."""
    
    @abstractmethod
    def _new_entity(self, entry: Entry, kind: str, rdf_id: str) -> BioPAXElement:
        """Create the physical entity (or pathway reference) for an entry."""
    
    @abstractmethod
    def _add_complex_component(self, complex_element: BioPAXElement, member: BioPAXElement) -> None:
        """Add a member to a complex."""
    
    @abstractmethod
    def _new_reaction(self, reaction: Reaction, rdf_id: str) -> BioPAXElement:
        """Create a biochemical reaction (without participants)."""
    
    @abstractmethod
    def _add_reaction_participant(
        self, reaction_element: BioPAXElement, entity: BioPAXElement, component: ReactionComponent, left: bool
    ) -> None:
        """Add a substrate (left) or product (right) to a reaction."""
    
    @abstractmethod
    def _new_catalysis(
        self, reaction_element: BioPAXElement, enzyme: BioPAXElement, reaction: Reaction
    ) -> BioPAXElement:
        """Create a catalysis of the reaction by the enzyme."""
    
    @abstractmethod
    def _new_relation(
        self,
        relation: Relation,
        rdf_id: str,
        source: BioPAXElement,
        target: BioPAXElement,
        control: Optional[str],
    ) -> BioPAXElement:
        """Create a control (if control is set) or a plain molecular interaction."""
    
    @abstractmethod
    def _new_vocabulary(self, rdf_id: str, term: str) -> BioPAXElement:
        """Create an interaction vocabulary term."""
    
    @abstractmethod
    def _set_small_molecule_data(
        self,
        element: BioPAXElement,
        formula: Optional[str],
        weight: Optional[float],
        ids: Dict[IdentifierDatabase, List[str]],
    ) -> None:
        """Store formula and molecular weight of a small molecule."""
    
    # -------------------------------------------------------------------------
    # Component tracking
    # -------------------------------------------------------------------------
    
    def component_created(self, element: Optional[BioPAXElement]) -> None:
        """Called for every created element; processes become pathway components."""
        if element is None or self.container is None:
            return
        if element.is_process and element is not self.container:
            self.container.add_pathway_component(element)
    
    def _attach_common(self, element: BioPAXElement) -> None:
        """Data sources for every entity."""
        add = getattr(element, "add_data_source", None)
        if add is None:
            return
        for source in self.data_sources:
            add(source)
    
    # -------------------------------------------------------------------------
    # Container, provenance, organism
    # -------------------------------------------------------------------------
    
    def create_container(self, pathway: Pathway) -> BioPAXElement:
        """
        Create the pathway element. Only the first call creates it;
        later calls return the stored container.
        """
        if self.container is not None:
            return self.container
        
        container = self._new_container(pathway)
        container.set_primary_name(pathway.display_name)
        if pathway.link:
            container.add_comment(pathway.link)
        self.container = container
        
        for source in self.create_provenance_records(pathway):
            container.add_data_source(source)
        
        organism = self.create_bio_source(pathway)
        if organism is not None:
            self._set_organism(container, organism)
        
        own = self.xrefs.get_or_create_classified(IdentifierDatabase.KEGG_PATHWAY, pathway.name, "pathway")
        container.add_xref(own)
        return container
    
    def create_provenance_records(self, pathway: Optional[Pathway]) -> List[BioPAXElement]:
        """
        Provenance of the translated model: the tool, the KEGG database and,
        if the pathway was not imported from the canonical format, its origin.
        """
        if self.data_sources:
            return list(self.data_sources)
        
        config = self.context.settings
        records = []
        
        tool = self._new_data_source(
            self.uri(f"{config.APP_NAME}_DataSource"), config.APP_NAME, config.APP_URL
        )
        citation = self.get_publication_xref()
        if citation is not None:
            tool.add_xref(citation)
        records.append(tool)
        
        records.append(self._new_data_source(self.uri(KEGG_DATA_SOURCE_ID), self.kegg_data_source_name, KEGG_URL))
        
        origin = (pathway.origin_format_name or "").strip() if pathway is not None else ""
        if origin and origin.lower() != config.CANONICAL_IMPORT_FORMAT.lower():
            records.append(self._new_data_source(self.uri(f"{origin}_DataSource"), f"{origin} Data", None))
        
        for record in records:
            self.component_created(record)
        self.data_sources = records
        return list(records)
    
    def get_publication_xref(self) -> Optional[BioPAXElement]:
        """Publication reference of the tool itself."""
        xref = self.xrefs.get_or_create(IdentifierDatabase.PUBMED, TOOL_PUBMED_ID, ReferenceKind.PUBLICATION)
        if xref is not None and not self._citation_set:
            xref.set_citation(**TOOL_CITATION)
            self._citation_set = True
        return xref
    
    def create_bio_source(self, pathway: Pathway) -> Optional[BioPAXElement]:
        """
        Organism of the pathway. Created once per run; later calls return it.
        
        The annotation source is asked first ("gn:<org>"), the offline
        species table second. Without both, the name is "Unknown".
        """
        if self._bio_source_created:
            return self._bio_source
        self._bio_source_created = True
        
        species_name = "Unknown"
        taxonomy_id = ""
        
        if pathway.org:
            record = self.annotations.lookup(f"gn:{pathway.org}")
            if record.success and record.definition:
                species_name = record.definition
                taxonomy_id = (record.taxonomy or "").strip().split(" ")[0]
            else:
                species_name = pathway.org
                species = self.context.species.lookup(pathway.org)
                if species is not None:
                    if species.scientific_name:
                        species_name = species.scientific_name
                    if species.taxonomy_id:
                        taxonomy_id = str(species.taxonomy_id)
        
        taxonomy_xref = None
        if taxonomy_id:
            taxonomy_xref = self.xrefs.get_or_create(
                IdentifierDatabase.NCBI_TAXONOMY, taxonomy_id, ReferenceKind.UNIFICATION
            )
        
        self._bio_source = self._new_bio_source(species_name, taxonomy_xref)
        self.component_created(self._bio_source)
        return self._bio_source
    
    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------
    
    def create_entity(self, entry: Entry, pathway: Pathway) -> Optional[BioPAXElement]:
        """
        Element for an entry, shared with earlier entries of the same name.
        
        KEGG lists some entries several times (e.g. DUSP14 in the MAPK
        signalling pathway). Entries whose name carries a real identifier
        (contains ":") are translated once; later duplicates link to the
        first translated sibling. Entries without identifier ("undefined"
        groups) are always translated on their own.
        """
        if entry.custom is not None:
            return self.model.get_by_id(entry.custom)
        
        if entry.has_real_identifier:
            if entry.name in self._processed_names:
                shared = self._find_translated_sibling(entry, pathway)
                if shared is not None:
                    entry.link_to(shared.rdf_id)
                    return shared
            self._processed_names.add(entry.name)
        
        try:
            element = self._build_entity(entry, pathway)
        except UnsupportedLevel as e:
            self.log.critical(str(e), entry=entry.id)
            return None
        
        entry.link_to(element.rdf_id)
        return element
    
    def _find_translated_sibling(self, entry: Entry, pathway: Pathway) -> Optional[BioPAXElement]:
        # Document order: the first translated sibling wins
        for sibling in pathway.get_entries_for_name(entry.name):
            if sibling is not entry and sibling.custom is not None:
                element = self.model.get_by_id(sibling.custom)
                if element is not None:
                    return element
        return None
    
    def _build_entity(self, entry: Entry, pathway: Pathway) -> BioPAXElement:
        kind = entity_kind(entry)
        first_id = entry.ids[0] if entry.ids else UNDEFINED
        rdf_id = self.unique_uri(f"{first_id}_{entry.id}")
        
        element = self._new_entity(entry, kind, rdf_id)
        element.set_primary_name(entry.label.split(",")[0].strip() or first_id)
        self._attach_common(element)
        self.component_created(element)
        
        self.annotate_entry(entry, element, pathway)
        return element
    
    def link_group_components(self, pathway: Pathway) -> None:
        """Wire translated group members into their complexes."""
        for entry in pathway.entries:
            if not entry.components or entry.custom is None:
                continue
            complex_element = self.model.get_by_id(entry.custom)
            if complex_element is None:
                continue
            for member_id in entry.components:
                member = pathway.get_entry_for_id(member_id)
                if member is None or member.custom is None:
                    self.log.warning("Group member was not translated", group=entry.id, member=member_id)
                    continue
                member_element = self.model.get_by_id(member.custom)
                if member_element is not None and member_element is not complex_element:
                    self._add_complex_component(complex_element, member_element)
    
    # -------------------------------------------------------------------------
    # Annotation enrichment
    # -------------------------------------------------------------------------
    
    def _merge_record_text(self, element: BioPAXElement, record, definition_prefix: str = "") -> None:
        for synonym in split_synonyms(record.names):
            element.add_synonym(synonym)
        if record.definition:
            element.add_comment(definition_prefix + format_text_for_html_notes(record.definition))
        if record.equation:
            element.add_comment(f"Equation: {html.escape(record.equation)}")
        if record.pathway_descriptions:
            element.add_comment(f"Occurs in: {html.escape(record.pathway_descriptions)}")
    
    def _attach_xrefs(
        self,
        element: BioPAXElement,
        ids: Dict[IdentifierDatabase, List[str]],
        context: str,
    ) -> None:
        for db, values in ids.items():
            for value in values:
                xref = self.xrefs.get_or_create_classified(db, value, context)
                if xref is not None:
                    element.add_xref(xref)
    
    def annotate_entry(self, entry: Entry, element: BioPAXElement, pathway: Pathway) -> None:
        """
        Enrich an entity with everything the annotation source knows
        about the identifiers in the entry's name.
        """
        ids: Dict[IdentifierDatabase, List[str]] = {}
        small_molecule = entity_kind(entry) == SMALL_MOLECULE
        formula = None
        weight = None
        
        for token in entry.ids:
            if token.strip().lower() == UNDEFINED:
                continue
            
            record = self.annotations.lookup(token)
            
            reaction_ids = concat_reaction_ids(
                pathway.get_reactions_for_entry(entry),
                list(entry.reactions) + list(record.reaction_ids),
            )
            if reaction_ids:
                bucket = ids.setdefault(IdentifierDatabase.KEGG_REACTION, [])
                bucket.extend(r for r in reaction_ids if r not in bucket)
            
            for db, values in record.database_identifiers().items():
                bucket = ids.setdefault(db, [])
                bucket.extend(v for v in values if v not in bucket)
            
            if not record.success:
                self.log.debug("Annotation lookup failed", identifier=token)
                continue
            
            self._merge_record_text(element, record)
            
            if small_molecule:
                if record.formula and formula is None:
                    formula = record.formula
                if weight is None:
                    if record.molecular_weight is not None:
                        weight = parse_leading_number(record.molecular_weight)
                    elif record.mass is not None:
                        weight = parse_leading_number(record.mass)
        
        if small_molecule and (formula is not None or weight is not None):
            self._set_small_molecule_data(element, formula, weight, ids)
        
        self._attach_xrefs(element, ids, point_of_view(entry))
    
    def annotate_reaction(self, reaction: Reaction, element: BioPAXElement) -> None:
        """Add ids, EC numbers, definition, equation and pathways of a reaction."""
        for rid in reaction.ids:
            ids: Dict[IdentifierDatabase, List[str]] = {IdentifierDatabase.KEGG_REACTION: [rid]}
            
            record = self.annotations.lookup(rid)
            if record.success:
                for ec in record.enzymes:
                    element.add_ec_number(ec)
                
                local_id = rid.split(":", 1)[-1].upper()
                self._merge_record_text(element, record, definition_prefix=f"Definition of {local_id}: ")
                
                for db, values in record.database_identifiers().items():
                    bucket = ids.setdefault(db, [])
                    bucket.extend(v for v in values if v not in bucket)
            else:
                self.log.debug("Annotation lookup failed", identifier=rid)
            
            self._attach_xrefs(element, ids, "reaction")
    
    # -------------------------------------------------------------------------
    # Reactions
    # -------------------------------------------------------------------------
    
    def _element_for_entry(self, entry: Optional[Entry]) -> Optional[BioPAXElement]:
        if entry is None or entry.custom is None:
            return None
        return self.model.get_by_id(entry.custom)
    
    def create_reaction(self, reaction: Reaction, pathway: Pathway) -> Optional[BioPAXElement]:
        """Biochemical reaction with participants, catalyses and annotations."""
        try:
            element = self._new_reaction(reaction, self.unique_uri(reaction.name))
        except UnsupportedLevel as e:
            self.log.critical(str(e), reaction=reaction.name)
            return None
        
        element.set_primary_name(reaction.name)
        self._attach_common(element)
        
        for components, left in ((reaction.substrates, True), (reaction.products, False)):
            for component in components:
                entity = self._element_for_entry(pathway.resolve_component(component))
                if entity is None:
                    self.log.warning(
                        "Reaction participant was not translated",
                        reaction=reaction.name,
                        participant=component.name,
                    )
                    continue
                self._add_reaction_participant(element, entity, component, left)
        
        self.component_created(element)
        self.annotate_reaction(reaction, element)
        
        # every enzyme entry that lists this reaction catalyzes it
        reaction_ids = set(reaction.ids)
        seen = set()
        for entry in pathway.entries:
            if entry.type not in (EntryType.GENE, EntryType.GENES, EntryType.ORTHOLOG, EntryType.ENZYME, EntryType.GROUP):
                continue
            if not reaction_ids.intersection(entry.reactions):
                continue
            enzyme = self._element_for_entry(entry)
            if enzyme is None or id(enzyme) in seen:
                continue
            seen.add(id(enzyme))
            catalysis = self._new_catalysis(element, enzyme, reaction)
            self._attach_common(catalysis)
            self.component_created(catalysis)
        
        return element
    
    # -------------------------------------------------------------------------
    # Relations
    # -------------------------------------------------------------------------
    
    def create_relation(self, relation: Relation, pathway: Pathway) -> Optional[BioPAXElement]:
        """Control or molecular interaction between two translated entries."""
        source = self._element_for_entry(pathway.get_entry_for_id(relation.entry1))
        target = self._element_for_entry(pathway.get_entry_for_id(relation.entry2))
        if source is None or target is None:
            self.log.warning("Relation endpoint was not translated", relation=relation.key())
            return None
        
        self._relation_counter += 1
        rdf_id = self.unique_uri(f"relation_{relation.entry1}_{relation.entry2}_{self._relation_counter}")
        try:
            element = self._new_relation(
                relation, rdf_id, source, target, control_type(relation.subtype_names())
            )
        except UnsupportedLevel as e:
            self.log.critical(str(e), relation=relation.key())
            return None
        
        names = relation.subtype_names() or [relation.type.value]
        element.set_primary_name(" / ".join(names))
        self._attach_common(element)
        
        for subtype in relation.subtypes:
            vocabulary = self.get_or_create_interaction_vocabulary(subtype)
            if vocabulary is not None:
                element.add_interaction_type(vocabulary)
        
        self.component_created(element)
        return element
    
    def get_or_create_interaction_vocabulary(self, subtype: SubType) -> Optional[BioPAXElement]:
        """
        One vocabulary term per subtype name, with SBO and GO
        references attached on first creation.
        """
        rdf_id = self.uri(f"relation_subtype_{subtype.name}")
        existing = self.model.get_by_id(rdf_id)
        if existing is not None:
            return existing
        
        vocabulary = self._new_vocabulary(rdf_id, subtype.name)
        self.component_created(vocabulary)
        
        sbo = get_sbo_term(subtype.name)
        if sbo > 0:
            self._add_vocabulary_xref(vocabulary, IdentifierDatabase.SBO, sbo, subtype.name)
        go = get_go_term(subtype.name)
        if go > 0:
            self._add_vocabulary_xref(vocabulary, IdentifierDatabase.GENE_ONTOLOGY, go, subtype.name)
        
        return vocabulary
    
    def _add_vocabulary_xref(self, vocabulary: BioPAXElement, db: IdentifierDatabase, code: int, term: str) -> None:
        xref = self.xrefs.get_or_create(db, str(code), ReferenceKind.UNIFICATION)
        if xref is not None:
            xref.add_comment(term)
            vocabulary.add_xref(xref)
