"""
Pathway Translator - Service Tests

Annotation sources (in-memory, caching, KEGG REST) and the species table.
"""

import httpx
import pytest
from unittest.mock import MagicMock

from pathway_translator.config import Settings
from pathway_translator.exceptions import AnnotationLookupFailed
from pathway_translator.services.annotation import (
    AnnotationRecord,
    CachingAnnotationSource,
    InMemoryAnnotationSource,
)
from pathway_translator.services.kegg_client import KeggRestAnnotationSource, parse_flat_file, split_entries
from pathway_translator.services.species import OfflineSpeciesTable, SpeciesInfo
from pathway_translator.xrefs.identifiers import IdentifierDatabase


GLUCOSE_FLAT_FILE = """ENTRY       C00031                      Compound
NAME        D-Glucose;
            Grape sugar;
            Dextrose
FORMULA     C6H12O6
EXACT_MASS  180.0634
MOL_WEIGHT  180.1559
REACTION    R00010 R00026 R00028
            R00299
ENZYME      2.4.1.1         2.7.1.1
PATHWAY     map00010  Glycolysis / Gluconeogenesis
            map00500  Starch and sucrose metabolism
DBLINKS     CAS: 50-99-7
            PubChem: 3333
            ChEBI: 4167 17634
///
"""

GENE_FLAT_FILE = """ENTRY       3098              CDS       T01001
NAME        HK1, HK1-ta, HK1-tb
DEFINITION  (RefSeq) hexokinase 1
DBLINKS     NCBI-GeneID: 3098
            UniProt: P19367
///
"""


# =============================================================================
# Annotation Records
# =============================================================================

class TestAnnotationRecord:
    """Tests for AnnotationRecord.database_identifiers()."""

    def test_failed_record_keeps_own_identifier(self):
        ids = AnnotationRecord.not_found("cpd:C00031").database_identifiers()
        assert ids == {IdentifierDatabase.KEGG_COMPOUND: ["cpd:C00031"]}

    def test_dblinks_and_enzymes(self):
        record = AnnotationRecord(
            identifier="rn:R00299",
            success=True,
            enzymes=["2.7.1.1"],
            pathway_ids=["rn00010"],
            dblinks={"UniProt": ["P19367"], "Unknown DB": ["1"]},
        )
        ids = record.database_identifiers()
        assert ids[IdentifierDatabase.KEGG_REACTION] == ["rn:R00299"]
        assert ids[IdentifierDatabase.EC_NUMBER] == ["2.7.1.1"]
        assert ids[IdentifierDatabase.KEGG_PATHWAY] == ["rn00010"]
        assert ids[IdentifierDatabase.UNIPROT] == ["P19367"]
        assert len(ids) == 4


class TestCachingAnnotationSource:
    """Tests for the run-scoped annotation cache."""

    def test_each_identifier_is_queried_once(self, annotation_source):
        cache = CachingAnnotationSource(annotation_source)
        cache.lookup("cpd:C00031")
        cache.lookup("CPD:C00031")
        cache.lookup("cpd:C00031 ")
        assert annotation_source.queries == 1
        assert cache.is_cached("cpd:c00031")

    def test_precache_uses_batches(self):
        source = MagicMock()
        source.lookup_many.return_value = [
            AnnotationRecord(identifier="cpd:C00031", success=True),
        ]
        cache = CachingAnnotationSource(source)

        resolved = cache.precache(["cpd:C00031", "cpd:C00092", "undefined", "cpd:C00031"])

        assert resolved == 2
        source.lookup_many.assert_called_once_with(["cpd:C00031", "cpd:C00092"])
        # not part of the batch answer -> single lookup
        source.lookup.assert_called_once_with("cpd:C00092")
        assert cache.lookup("cpd:C00031").success

    def test_lookup_failure_becomes_not_found(self):
        source = MagicMock()
        source.lookup.side_effect = AnnotationLookupFailed("cpd:C99999", "timeout")
        del source.lookup_many
        cache = CachingAnnotationSource(source)
        record = cache.lookup("cpd:C99999")
        assert record.success is False
        assert cache.precache(["cpd:C99999"]) == 0

    def test_in_memory_source_unknown(self):
        source = InMemoryAnnotationSource()
        assert source.lookup("hsa:1").success is False


# =============================================================================
# KEGG REST
# =============================================================================

class TestFlatFileParsing:
    """Tests for parse_flat_file()."""

    def test_compound_fields(self):
        record = parse_flat_file("cpd:C00031", GLUCOSE_FLAT_FILE)
        assert record.success
        assert record.formula == "C6H12O6"
        assert record.mass == "180.0634"
        assert record.molecular_weight == "180.1559"
        assert record.names == "D-Glucose; Grape sugar; Dextrose"
        assert record.enzymes == ["2.4.1.1", "2.7.1.1"]
        assert record.reaction_ids == ["R00010", "R00026", "R00028", "R00299"]
        assert record.pathway_ids == ["map00010", "map00500"]
        assert record.pathway_descriptions == "Glycolysis / Gluconeogenesis, Starch and sucrose metabolism"
        assert record.dblinks["ChEBI"] == ["4167", "17634"]

    def test_empty_text(self):
        assert parse_flat_file("cpd:C00031", "").success is False

    def test_split_entries(self):
        assert len(split_entries(GLUCOSE_FLAT_FILE + GENE_FLAT_FILE)) == 2


class TestKeggRestAnnotationSource:
    """Tests for the httpx based KEGG client."""

    @staticmethod
    def _client(handler) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    def test_lookup(self):
        requested = []

        def handler(request):
            requested.append(request.url.path)
            return httpx.Response(200, text=GLUCOSE_FLAT_FILE)

        source = KeggRestAnnotationSource(Settings(KEGG_REQUEST_DELAY=0.0), client=self._client(handler))
        record = source.lookup("cpd:C00031")
        assert record.success
        assert requested == ["/get/cpd:C00031"]

    def test_not_found(self):
        source = KeggRestAnnotationSource(
            Settings(KEGG_REQUEST_DELAY=0.0),
            client=self._client(lambda request: httpx.Response(404)),
        )
        assert source.lookup("cpd:C99999").success is False

    def test_server_error_is_not_raised(self):
        source = KeggRestAnnotationSource(
            Settings(KEGG_REQUEST_DELAY=0.0),
            client=self._client(lambda request: httpx.Response(500)),
        )
        assert source.lookup("cpd:C00031").success is False

    def test_lookup_many_matches_entries(self):
        """Unknown ids are dropped by KEGG; results are matched by ENTRY."""
        def handler(request):
            return httpx.Response(200, text=GLUCOSE_FLAT_FILE + GENE_FLAT_FILE)

        with KeggRestAnnotationSource(Settings(KEGG_REQUEST_DELAY=0.0), client=self._client(handler)) as source:
            records = source.lookup_many(["hsa:3098", "cpd:C99999", "cpd:C00031"])

        by_id = {r.identifier: r for r in records}
        assert by_id["hsa:3098"].success
        assert by_id["hsa:3098"].definition == "(RefSeq) hexokinase 1"
        assert by_id["cpd:C00031"].formula == "C6H12O6"
        assert by_id["cpd:C99999"].success is False


# =============================================================================
# Species
# =============================================================================

class TestOfflineSpeciesTable:
    """Tests for the built-in species list."""

    def test_known_species(self, species_table):
        human = species_table.lookup("HSA")
        assert human.scientific_name == "Homo sapiens"
        assert human.taxonomy_id == 9606

    def test_unknown_species(self, species_table):
        assert species_table.lookup("xyz") is None
        assert species_table.lookup("") is None

    def test_extra_species(self):
        table = OfflineSpeciesTable(extra={
            "ECJ": SpeciesInfo(kegg_abbreviation="ecj", scientific_name="Escherichia coli W3110", taxonomy_id=316407),
        })
        assert table.lookup("ecj").taxonomy_id == 316407
