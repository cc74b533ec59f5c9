"""
Pathway Translator - Translation Driver

Runs one translation of a parsed pathway into a BioPAX target model.

Phases (the order matters, later phases resolve entries through the
handles set by earlier ones):
1. Container: pathway element, provenance records, organism
2. Entities: one physical entity per unique entry
3. Reactions: biochemical reactions with atom balance comments
4. Relations: controls and molecular interactions

Cancellation is checked between phases only; a cancelled run raises
TranslationCancelled and leaves no partially filled model behind.
"""

from typing import Iterable, List, Optional, Set

from pathway_translator.biopax.builders import EntityBuilder
from pathway_translator.biopax.level2 import Level2Builder
from pathway_translator.biopax.level3 import Level3Builder
from pathway_translator.biopax.model import BioPAXLevel, TargetModel
from pathway_translator.config import Settings, settings as default_settings
from pathway_translator.context import CancelCheck, ProgressSink, TranslationContext
from pathway_translator.domain.models import EntryType, Pathway, Reaction
from pathway_translator.exceptions import UnsupportedLevel
from pathway_translator.graph.attribute_graph import AttributeGraph
from pathway_translator.graph.builder import build_pathway_graph
from pathway_translator.services.annotation import AnnotationSource
from pathway_translator.services.species import SpeciesTable
from pathway_translator.translation.atom_balance import atom_balance_comment, check_atom_balance


_BUILDERS = {
    BioPAXLevel.L2: Level2Builder,
    BioPAXLevel.L3: Level3Builder,
}

PHASE_CONTAINER = "container"
PHASE_ENTITIES = "entities"
PHASE_REACTIONS = "reactions"
PHASE_RELATIONS = "relations"


def resolve_level(level) -> BioPAXLevel:
    """
    Accept BioPAXLevel members, "L2"/"L3" and the plain numbers 2 and 3.
    
    Raises:
        UnsupportedLevel: for anything else
    """
    if isinstance(level, BioPAXLevel):
        return level
    if isinstance(level, int) and not isinstance(level, bool):
        level = f"L{level}"
    try:
        return BioPAXLevel(str(level).upper())
    except ValueError:
        raise UnsupportedLevel(level)


def create_builder(level, context: TranslationContext, model: Optional[TargetModel] = None) -> EntityBuilder:
    """Builder for the level, with a fresh target model unless one is passed."""
    level = resolve_level(level)
    if model is None:
        model = TargetModel(level, xml_base=context.settings.XML_BASE)
    return _BUILDERS[level](context, model)


def pathway_identifiers(pathway: Pathway) -> List[str]:
    """Every identifier token the translation will look up, in document order."""
    ids = []
    if pathway.org:
        ids.append(f"gn:{pathway.org}")
    for entry in pathway.entries:
        ids.extend(entry.ids)
    for reaction in pathway.reactions:
        ids.extend(reaction.ids)
    return ids


class TranslationDriver:
    """
    Translates parsed pathways into BioPAX models of one level.
    
    A driver may run many translations one after another; every run gets
    its own TranslationContext, builder and target model.
    
    Usage:
        driver = TranslationDriver(BioPAXLevel.L3, annotation_source=source)
        model = driver.translate(pathway)
    """
    
    def __init__(
        self,
        level=BioPAXLevel.L3,
        annotation_source: Optional[AnnotationSource] = None,
        species_table: Optional[SpeciesTable] = None,
        settings: Optional[Settings] = None,
        progress: Optional[ProgressSink] = None,
        logger=None,
    ):
        self.level = resolve_level(level)
        self.annotation_source = annotation_source
        self.species_table = species_table
        self.settings = settings or default_settings
        self.progress = progress
        self.logger = logger
        
        # Context of the last run, kept for inspection
        self.last_context: Optional[TranslationContext] = None
    
    def _new_context(self, pathway: Pathway, cancel_check: Optional[CancelCheck]) -> TranslationContext:
        context = TranslationContext(
            annotation_source=self.annotation_source,
            species_table=self.species_table,
            settings=self.settings,
            progress=self.progress,
            cancel_check=cancel_check,
            logger=self.logger,
        )
        context.bind(pathway=pathway.name, level=self.level.value)
        return context
    
    # =========================================================================
    # Entry point
    # =========================================================================
    
    def translate(self, pathway: Pathway, cancel_check: Optional[CancelCheck] = None) -> TargetModel:
        """
        Translate a pathway into a new target model.
        
        Args:
            pathway: Parsed pathway; only Entry.custom is written
            cancel_check: Returns True to stop the run before the next phase
        
        Returns:
            The completed target model
        
        Raises:
            TranslationCancelled: if cancel_check asked to stop
        """
        context = self._new_context(pathway, cancel_check)
        self.last_context = context
        builder = create_builder(self.level, context)
        log = context.log
        
        log.info("Translation started", entries=len(pathway.entries),
                 reactions=len(pathway.reactions), relations=len(pathway.relations))
        
        # handles of an earlier run point into another model
        for entry in pathway.entries:
            entry.custom = None
        
        context.annotations.precache(pathway_identifiers(pathway))
        
        context.check_cancelled(PHASE_CONTAINER)
        builder.create_container(pathway)
        context.report_progress(PHASE_CONTAINER, 1, 1)
        
        context.check_cancelled(PHASE_ENTITIES)
        self.create_physical_entities(pathway, builder)
        
        if self.settings.CONSIDER_REACTIONS:
            context.check_cancelled(PHASE_REACTIONS)
            self.create_reactions(pathway, builder)
        
        if self.settings.CONSIDER_RELATIONS:
            context.check_cancelled(PHASE_RELATIONS)
            self.create_relations(pathway, builder)
        
        log.info("Translation finished", elements=len(builder.model),
                 xrefs_created=builder.xrefs.created, xrefs_reused=builder.xrefs.reused)
        return builder.model
    
    def translate_to_graph(self, pathway: Pathway) -> AttributeGraph:
        """Attributed graph representation of the pathway."""
        return build_pathway_graph(pathway, logger=self.logger)
    
    # =========================================================================
    # Phases
    # =========================================================================
    
    def create_physical_entities(self, pathway: Pathway, builder: EntityBuilder) -> None:
        """
        One element per entry, shared between entries with the same real
        identifier. Reaction entries are linked later, in the reaction phase.
        """
        total = len(pathway.entries)
        for done, entry in enumerate(pathway.entries, start=1):
            if entry.type != EntryType.REACTION:
                builder.create_entity(entry, pathway)
            builder.context.report_progress(PHASE_ENTITIES, done, total)
        builder.link_group_components(pathway)
    
    def create_reactions(self, pathway: Pathway, builder: EntityBuilder) -> None:
        """
        Translate reactions. KGML documents list some reactions twice
        (e.g. R00014 in hsa00010); each reaction name is translated once.
        """
        log = builder.context.log
        check_balance = self.settings.AUTOCOMPLETE_REACTIONS and self.settings.CHECK_ATOM_BALANCE
        processed: Set[str] = set()
        total = len(pathway.reactions)
        
        for done, reaction in enumerate(pathway.reactions, start=1):
            builder.context.report_progress(PHASE_REACTIONS, done, total)
            
            if not self.has_substrate_and_product(reaction, pathway):
                log.debug("Skipping reaction without substrate or product", reaction=reaction.name)
                continue
            if reaction.name in processed:
                continue
            processed.add(reaction.name)
            
            element = builder.create_reaction(reaction, pathway)
            if element is None:
                continue
            
            if check_balance:
                result = check_atom_balance(reaction, pathway, builder.annotations)
                element.add_comment(atom_balance_comment(result))
            
            self.link_reaction_entries(pathway, reaction, element.rdf_id)
        
        if not pathway.reactions and not self.settings.CONSIDER_RELATIONS:
            log.info("Pathway does not contain any reactions")
    
    def create_relations(self, pathway: Pathway, builder: EntityBuilder) -> None:
        """Translate relations, skipping relations listed twice."""
        processed: Set[str] = set()
        total = len(pathway.relations)
        
        for done, relation in enumerate(pathway.relations, start=1):
            builder.context.report_progress(PHASE_RELATIONS, done, total)
            key = relation.key()
            if key in processed:
                continue
            processed.add(key)
            builder.create_relation(relation, pathway)
        
        if not pathway.relations and not self.settings.CONSIDER_REACTIONS:
            builder.context.log.info("Pathway does not contain any relations")
    
    # =========================================================================
    # Helpers
    # =========================================================================
    
    @staticmethod
    def has_substrate_and_product(reaction: Reaction, pathway: Pathway) -> bool:
        """True if at least one substrate and one product resolve to entries."""
        def resolves(components: Iterable) -> bool:
            return any(pathway.resolve_component(c) is not None for c in components)
        return resolves(reaction.substrates) and resolves(reaction.products)
    
    @staticmethod
    def link_reaction_entries(pathway: Pathway, reaction: Reaction, handle: str) -> int:
        """
        Point unlinked reaction entries that name this reaction to its element,
        so relations between reactions can be resolved.
        
        Returns:
            Number of entries linked
        """
        linked = 0
        for entry in pathway.entries:
            if entry.type == EntryType.REACTION and entry.custom is None and reaction.name in entry.name:
                entry.link_to(handle)
                linked += 1
        return linked
    
