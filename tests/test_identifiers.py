"""
Pathway Translator - Identifier and Cross-Reference Tests

Identifier grammar, classification and the cross-reference cache.
"""

import pytest

from pathway_translator.biopax import elements_l2 as l2
from pathway_translator.biopax import elements_l3 as l3
from pathway_translator.biopax.model import BioPAXLevel, ReferenceKind, TargetModel
from pathway_translator.exceptions import InvalidIdentifier
from pathway_translator.utils.text import (
    format_text_for_html_notes,
    name_to_sid,
    parse_leading_number,
    split_synonyms,
)
from pathway_translator.xrefs.cache import CrossReferenceCache, classify
from pathway_translator.xrefs.identifiers import (
    IdentifierDatabase,
    Qualifier,
    check_identifier,
    format_identifier,
    infer_qualifier,
    kegg_database_for,
    miriam_uri,
    validate_identifier,
)


# =============================================================================
# Text Helpers
# =============================================================================

class TestParseLeadingNumber:
    """Tests for parse_leading_number()."""

    @pytest.mark.parametrize("text,expected", [
        ("123.456 mol", 123.456),
        ("mol", 0.0),
        ("12..3", 12.0),
        ("180.0634", 180.0634),
        ("", 0.0),
        ("12\u00b2 mol", 12.0),
    ])
    def test_values(self, text, expected):
        assert parse_leading_number(text) == pytest.approx(expected)


class TestTextHelpers:
    """Tests for id and notes helpers."""

    def test_name_to_sid(self):
        assert name_to_sid("hsa:3098") == "hsa_3098"
        assert name_to_sid("2.7.1.1") == "_2_7_1_1"
        assert name_to_sid("") == "_"

    def test_html_notes(self):
        assert format_text_for_html_notes("a < b\nc") == "a &lt; b<br/>c"

    def test_split_synonyms(self):
        assert split_synonyms("D-Glucose; Grape sugar, Dextrose") == ["D-Glucose", "Grape sugar", "Dextrose"]
        assert split_synonyms("1,3-Bisphosphoglycerate") == ["1,3-Bisphosphoglycerate"]


# =============================================================================
# Identifier Databases
# =============================================================================

class TestIdentifierFormatting:
    """Tests for formatting and validation."""

    def test_kegg_prefix_is_removed(self):
        assert format_identifier(IdentifierDatabase.KEGG_COMPOUND, "cpd:c00031") == "C00031"
        assert check_identifier(IdentifierDatabase.KEGG_COMPOUND, "C00031")

    def test_ontology_padding(self):
        assert format_identifier(IdentifierDatabase.GENE_ONTOLOGY, "5488") == "GO:0005488"
        assert format_identifier(IdentifierDatabase.SBO, "170") == "SBO:0000170"

    def test_invalid_identifier(self):
        with pytest.raises(InvalidIdentifier):
            validate_identifier(IdentifierDatabase.KEGG_COMPOUND, "glucose")

    def test_ec_number(self):
        assert validate_identifier(IdentifierDatabase.EC_NUMBER, "ec:2.7.1.1") == "2.7.1.1"
        assert check_identifier(IdentifierDatabase.EC_NUMBER, "2.7.1.-")

    def test_miriam_uri(self):
        assert miriam_uri(IdentifierDatabase.KEGG_COMPOUND, "C00031") == "urn:miriam:kegg.compound:C00031"

    def test_kegg_database_for(self):
        assert kegg_database_for("cpd:C00031") == (IdentifierDatabase.KEGG_COMPOUND, "cpd:C00031")
        assert kegg_database_for("hsa:3098")[0] == IdentifierDatabase.KEGG_GENES
        assert kegg_database_for("undefined") is None


class TestClassification:
    """Tests for qualifier inference and reference classification."""

    def test_same_content_is_identity(self):
        assert infer_qualifier(IdentifierDatabase.KEGG_COMPOUND, "small_molecule", "C00031") == Qualifier.IS
        assert classify(IdentifierDatabase.CHEBI, "4167", "compound") == ReferenceKind.UNIFICATION

    def test_ortholog_versions(self):
        """Genes of an ortholog group are versions of it."""
        assert infer_qualifier(IdentifierDatabase.KEGG_GENES, "ortholog", "hsa:3098") == Qualifier.HAS_VERSION
        assert classify(IdentifierDatabase.KEGG_GENES, "hsa:3098", "ortholog") == ReferenceKind.UNIFICATION

    def test_reaction_of_compound_is_relationship(self):
        assert classify(IdentifierDatabase.KEGG_REACTION, "R00299", "small_molecule") == ReferenceKind.RELATIONSHIP

    def test_publications_regardless_of_context(self):
        for context in ("protein", "reaction", None):
            assert classify(IdentifierDatabase.PUBMED, "21700675", context) == ReferenceKind.PUBLICATION


# =============================================================================
# Cross-Reference Cache
# =============================================================================

class TestCrossReferenceCache:
    """Tests for CrossReferenceCache."""

    def test_same_pair_yields_same_element(self, l3_model):
        """Requesting one (db, id) pair twice creates exactly one record."""
        cache = CrossReferenceCache(l3_model)
        first = cache.get_or_create(IdentifierDatabase.KEGG_COMPOUND, "cpd:C00031", ReferenceKind.UNIFICATION)
        second = cache.get_or_create(IdentifierDatabase.KEGG_COMPOUND, "C00031", ReferenceKind.UNIFICATION)
        assert first is second
        assert len(l3_model.objects_of(l3.Xref)) == 1
        assert cache.created == 1
        assert cache.reused == 1

    def test_reference_fields(self, l3_model):
        cache = CrossReferenceCache(l3_model)
        xref = cache.get_or_create(IdentifierDatabase.KEGG_COMPOUND, "cpd:C00031", ReferenceKind.UNIFICATION)
        assert isinstance(xref, l3.UnificationXref)
        assert xref.db == "KEGG Compound"
        assert xref.id == "C00031"
        assert xref.rdf_id == "urn:miriam:kegg.compound:C00031"

    def test_level2_classes(self, l2_model):
        cache = CrossReferenceCache(l2_model)
        xref = cache.get_or_create(IdentifierDatabase.PUBMED, "21700675", ReferenceKind.PUBLICATION)
        assert isinstance(xref, l2.publicationXref)
        assert xref.DB == "PubMed"

    @pytest.mark.parametrize("level,expected", [
        (BioPAXLevel.L3, "_3DMET_B00123"),
        (BioPAXLevel.L2, "#_3DMET_B00123"),
    ])
    def test_synthesized_uri_without_registry_scheme(self, level, expected):
        """Databases without a MIRIAM scheme get an id built from database and identifier."""
        assert miriam_uri(IdentifierDatabase.THREEDMET, "B00123") is None
        cache = CrossReferenceCache(TargetModel(level))
        xref = cache.get_or_create(IdentifierDatabase.THREEDMET, "B00123", ReferenceKind.UNIFICATION)
        assert xref.rdf_id == expected
        assert cache.get_or_create(IdentifierDatabase.THREEDMET, "B00123", ReferenceKind.UNIFICATION) is xref

    def test_invalid_identifier_yields_none(self, l3_model):
        cache = CrossReferenceCache(l3_model)
        assert cache.get_or_create(IdentifierDatabase.KEGG_COMPOUND, "glucose") is None
        assert len(l3_model) == 0

    def test_created_hook(self, l3_model):
        created = []
        cache = CrossReferenceCache(l3_model, on_created=created.append)
        xref = cache.get_or_create_classified(IdentifierDatabase.CHEBI, "4167", "small_molecule")
        cache.get_or_create_classified(IdentifierDatabase.CHEBI, "CHEBI:4167", "small_molecule")
        assert created == [xref]
