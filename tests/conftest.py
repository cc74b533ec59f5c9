"""
Pathway Translator - Test Configuration

Pytest fixtures: a small glycolysis-like pathway with duplicate entries,
duplicate reactions and duplicate relations, and an offline annotation
source that knows its identifiers.
"""

import pytest

from pathway_translator.biopax.model import BioPAXLevel, TargetModel
from pathway_translator.config import Settings
from pathway_translator.context import TranslationContext
from pathway_translator.domain.models import (
    Entry,
    EntryType,
    Graphics,
    Pathway,
    Reaction,
    ReactionComponent,
    ReactionType,
    Relation,
    RelationType,
    SubType,
)
from pathway_translator.services.annotation import AnnotationRecord, InMemoryAnnotationSource
from pathway_translator.services.species import OfflineSpeciesTable


# =============================================================================
# Input
# =============================================================================

def make_pathway(origin: str = "kgml", org: str = "hsa") -> Pathway:
    """
    Entries:
        1, 4  hexokinase genes (same name, listed twice)
        2, 3  glucose and glucose-6-phosphate
        5, 6  two different "undefined" groups
        7, 8  the same ortholog, listed twice
        9     reaction entry for R00299
    """
    return Pathway(
        name="path:hsa00010",
        org=org,
        number="00010",
        title="Glycolysis / Gluconeogenesis",
        link="http://www.kegg.jp/kegg-bin/show_pathway?hsa00010",
        origin_format_name=origin,
        entries=[
            Entry(id=1, name="hsa:3098 hsa:3099", type=EntryType.GENE, reactions=["rn:R00299"],
                  graphics=Graphics(name="HK1, HK2", x=100, y=50, width=46, height=17)),
            Entry(id=2, name="cpd:C00031", type=EntryType.COMPOUND, graphics=Graphics(name="C00031")),
            Entry(id=3, name="cpd:C00092", type=EntryType.COMPOUND),
            Entry(id=4, name="hsa:3098 hsa:3099", type=EntryType.GENE, reactions=["rn:R00299"]),
            Entry(id=5, name="undefined", type=EntryType.GROUP, components=[1]),
            Entry(id=6, name="undefined", type=EntryType.GROUP, components=[7]),
            Entry(id=7, name="ko:K00844", type=EntryType.ORTHOLOG),
            Entry(id=8, name="ko:K00844", type=EntryType.ORTHOLOG),
            Entry(id=9, name="rn:R00299", type=EntryType.REACTION),
        ],
        reactions=[
            Reaction(
                name="rn:R00299",
                type=ReactionType.IRREVERSIBLE,
                substrates=[ReactionComponent(id=2, name="cpd:C00031")],
                products=[ReactionComponent(id=3, name="cpd:C00092")],
            ),
            # listed twice, as in the real hsa00010 document
            Reaction(
                name="rn:R00299",
                type=ReactionType.IRREVERSIBLE,
                substrates=[ReactionComponent(id=2, name="cpd:C00031")],
                products=[ReactionComponent(id=3, name="cpd:C00092")],
            ),
            # no product
            Reaction(
                name="rn:R01786",
                substrates=[ReactionComponent(id=2, name="cpd:C00031")],
            ),
        ],
        relations=[
            Relation(entry1=1, entry2=7, type=RelationType.PPREL,
                     subtypes=[SubType(name="activation", value="-->")]),
            Relation(entry1=1, entry2=7, type=RelationType.PPREL,
                     subtypes=[SubType(name="activation", value="-->")]),
            Relation(entry1=7, entry2=1, type=RelationType.PPREL,
                     subtypes=[SubType(name="binding/association", value="---")]),
            # entry 99 does not exist
            Relation(entry1=1, entry2=99, type=RelationType.PPREL),
        ],
    )


@pytest.fixture
def pathway() -> Pathway:
    return make_pathway()


# =============================================================================
# Collaborators
# =============================================================================

def make_annotation_source() -> InMemoryAnnotationSource:
    return InMemoryAnnotationSource([
        AnnotationRecord(
            identifier="cpd:C00031",
            success=True,
            names="D-Glucose; Grape sugar; Dextrose",
            formula="C6H12O6",
            mass="180.0634",
            molecular_weight="180.1559",
            dblinks={"ChEBI": ["4167"], "PubChem": ["3333"]},
        ),
        AnnotationRecord(
            identifier="cpd:C00092",
            success=True,
            names="D-Glucose 6-phosphate",
            formula="C6H13O9P",
            mass="260.0297",
        ),
        AnnotationRecord(
            identifier="hsa:3098",
            success=True,
            names="HK1, HK1-tb",
            definition="hexokinase 1",
            dblinks={"NCBI-GeneID": ["3098"], "UniProt": ["P19367"]},
        ),
        AnnotationRecord(
            identifier="rn:R00299",
            success=True,
            names="ATP:D-glucose 6-phosphotransferase",
            definition="ATP + D-Glucose <=> ADP + D-Glucose 6-phosphate",
            equation="C00002 + C00031 <=> C00008 + C00092",
            enzymes=["2.7.1.1"],
            pathway_ids=["rn00010"],
        ),
        AnnotationRecord(
            identifier="gn:hsa",
            success=True,
            definition="Homo sapiens (human)",
            taxonomy="9606",
        ),
    ])


@pytest.fixture
def annotation_source() -> InMemoryAnnotationSource:
    return make_annotation_source()


@pytest.fixture
def species_table() -> OfflineSpeciesTable:
    return OfflineSpeciesTable()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(KEGG_REQUEST_DELAY=0.0)


@pytest.fixture
def context(annotation_source, species_table, test_settings) -> TranslationContext:
    return TranslationContext(
        annotation_source=annotation_source,
        species_table=species_table,
        settings=test_settings,
    )


@pytest.fixture(params=[BioPAXLevel.L2, BioPAXLevel.L3], ids=["L2", "L3"])
def level(request) -> BioPAXLevel:
    return request.param


@pytest.fixture
def l3_model() -> TargetModel:
    return TargetModel(BioPAXLevel.L3)


@pytest.fixture
def l2_model() -> TargetModel:
    return TargetModel(BioPAXLevel.L2)


@pytest.fixture
def pathway_factory():
    """Build fresh pathways with a different origin format or organism."""
    return make_pathway
