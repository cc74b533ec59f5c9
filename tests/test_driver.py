"""
Pathway Translator - Translation Driver Tests

End-to-end translation of the fixture pathway into both levels.

Run with: pytest tests/test_driver.py -v
"""

import pytest
from unittest.mock import MagicMock

from pathway_translator.biopax import elements_l2 as l2
from pathway_translator.biopax import elements_l3 as l3
from pathway_translator.biopax.model import BioPAXLevel
from pathway_translator.config import Settings
from pathway_translator.domain.models import Entry, EntryType, Relation, RelationType, SubType
from pathway_translator.exceptions import TranslationCancelled, UnsupportedLevel
from pathway_translator.translation.atom_balance import MISSING_ATOMS
from pathway_translator.translation.driver import TranslationDriver, pathway_identifiers


def _exact(model, cls):
    """Elements of exactly this class (no subclasses)."""
    return [e for e in model if type(e) is cls]


@pytest.fixture
def driver(annotation_source, species_table, test_settings):
    def make(level=BioPAXLevel.L3, **kwargs):
        return TranslationDriver(
            level,
            annotation_source=annotation_source,
            species_table=species_table,
            settings=test_settings,
            **kwargs,
        )
    return make


# =============================================================================
# Level 3
# =============================================================================

class TestLevel3Translation:
    """End-to-end tests for BioPAX Level 3."""

    def test_duplicate_reaction_translated_once(self, driver, pathway):
        """R00299 is listed twice but yields one reaction; R01786 has no product."""
        model = driver().translate(pathway)
        reactions = model.objects_of(l3.BiochemicalReaction)
        assert len(reactions) == 1
        assert reactions[0].display_name == "rn:R00299"

    def test_reaction_participants(self, driver, pathway):
        model = driver().translate(pathway)
        (reaction,) = model.objects_of(l3.BiochemicalReaction)
        glucose = model.get_by_id(pathway.entries[1].custom)
        g6p = model.get_by_id(pathway.entries[2].custom)
        assert reaction.left == [glucose]
        assert reaction.right == [g6p]
        assert reaction.conversion_direction == "LEFT-TO-RIGHT"
        assert reaction.ec_number == ["2.7.1.1"]

    def test_reaction_annotations(self, driver, pathway):
        model = driver().translate(pathway)
        (reaction,) = model.objects_of(l3.BiochemicalReaction)
        assert any(c.startswith("Definition of R00299: ") for c in reaction.comment)
        assert any(c.startswith("Equation: ") for c in reaction.comment)
        assert {"KEGG Reaction", "Enzyme Nomenclature", "KEGG Pathway"} <= {x.db for x in reaction.xref}

    def test_atom_balance_comment(self, driver, pathway):
        """Glucose -> glucose-6-phosphate misses H, O and P on the substrate side."""
        model = driver().translate(pathway)
        (reaction,) = model.objects_of(l3.BiochemicalReaction)
        assert MISSING_ATOMS + "{H=1, O=3, P=1}" in reaction.comment

    def test_atom_balance_can_be_disabled(self, annotation_source, pathway):
        settings = Settings(KEGG_REQUEST_DELAY=0.0, CHECK_ATOM_BALANCE=False)
        model = TranslationDriver(BioPAXLevel.L3, annotation_source, settings=settings).translate(pathway)
        (reaction,) = model.objects_of(l3.BiochemicalReaction)
        assert not any("atom" in c for c in reaction.comment)

    def test_single_catalysis_for_duplicate_enzymes(self, driver, pathway):
        model = driver().translate(pathway)
        (catalysis,) = model.objects_of(l3.Catalysis)
        hexokinase = model.get_by_id(pathway.entries[0].custom)
        assert catalysis.controller == [hexokinase]
        assert catalysis.controlled == model.objects_of(l3.BiochemicalReaction)

    def test_catalysis_for_space_separated_reactions(self, driver, pathway):
        """An enzyme listing several reactions in one attribute still catalyzes each."""
        for index in (0, 3):
            old = pathway.entries[index]
            pathway.entries[index] = Entry(
                id=old.id, name=old.name, type=old.type, graphics=old.graphics,
                reactions=["rn:R00299 rn:R01786"],
            )
        assert pathway.entries[0].reactions == ["rn:R00299", "rn:R01786"]

        model = driver().translate(pathway)
        (catalysis,) = model.objects_of(l3.Catalysis)
        assert catalysis.controller == [model.get_by_id(pathway.entries[0].custom)]
        assert pathway.get_reactions_for_entry(pathway.entries[0])[0].name == "rn:R00299"

    def test_reaction_entry_linked(self, driver, pathway):
        """Reaction entries point to the translated reaction."""
        model = driver().translate(pathway)
        reaction_entry = pathway.entries[8]
        assert reaction_entry.type == EntryType.REACTION
        assert isinstance(model.get_by_id(reaction_entry.custom), l3.BiochemicalReaction)

    def test_relations_deduplicated(self, driver, pathway):
        """Duplicate relation is translated once; relation to a missing entry is skipped."""
        model = driver().translate(pathway)
        (control,) = _exact(model, l3.Control)
        (interaction,) = model.objects_of(l3.MolecularInteraction)
        assert control.control_type == "ACTIVATION"
        assert [v.term for v in control.interaction_type] == [["activation"]]
        assert [v.term for v in interaction.interaction_type] == [["binding/association"]]

    def test_processes_are_pathway_components(self, driver, pathway):
        model = driver().translate(pathway)
        (container,) = [p for p in model.objects_of(l3.Pathway) if p.rdf_id == "path_hsa00010"]
        kinds = sorted(type(c).__name__ for c in container.pathway_component)
        assert kinds == ["BiochemicalReaction", "Catalysis", "Control", "MolecularInteraction"]

    def test_entity_counts(self, driver, pathway):
        model = driver().translate(pathway)
        assert len(model.objects_of(l3.Protein)) == 2
        assert len(model.objects_of(l3.SmallMolecule)) == 2
        assert len(model.objects_of(l3.Complex)) == 2

    def test_provenance_records(self, driver, pathway, pathway_factory):
        translator = driver()
        assert len(translator.translate(pathway).objects_of(l3.Provenance)) == 2
        other = translator.translate(pathway_factory(origin="BioPAX"))
        assert len(other.objects_of(l3.Provenance)) == 3

    def test_xrefs_are_unique(self, driver, pathway):
        model = driver().translate(pathway)
        keys = [(x.db, x.id) for x in model.objects_of(l3.Xref)]
        assert len(keys) == len(set(keys))

    def test_repeated_translation(self, driver, pathway):
        """Translating the same pathway twice yields two complete models."""
        translator = driver()
        first = translator.translate(pathway)
        second = translator.translate(pathway)
        assert first is not second
        assert len(first) == len(second)
        assert second.get_by_id(pathway.entries[0].custom) is not None


# =============================================================================
# Level 2
# =============================================================================

class TestLevel2Translation:
    """End-to-end tests for BioPAX Level 2."""

    def test_reaction_uses_participants(self, driver, pathway):
        model = driver(BioPAXLevel.L2).translate(pathway)
        (reaction,) = model.objects_of(l2.biochemicalReaction)
        (left,) = reaction.LEFT
        assert isinstance(left, l2.physicalEntityParticipant)
        assert left.PHYSICAL_ENTITY is model.get_by_id(pathway.entries[1].custom)
        assert left.STOICHIOMETRIC_COEFFICIENT == 1.0

    def test_relations(self, driver, pathway):
        model = driver(BioPAXLevel.L2).translate(pathway)
        (control,) = _exact(model, l2.control)
        assert control.CONTROL_TYPE == "ACTIVATION"
        assert len(_exact(model, l2.physicalInteraction)) == 1
        assert len(model.objects_of(l2.catalysis)) == 1

    def test_reaction_controller_becomes_interaction(self, driver, pathway):
        """Only physical entities are wrapped in participants; a reaction cannot control."""
        pathway.relations.append(
            Relation(entry1=9, entry2=1, type=RelationType.PPREL, subtypes=[SubType(name="activation")])
        )
        model = driver(BioPAXLevel.L2).translate(pathway)

        reaction = model.get_by_id(pathway.entries[8].custom)
        assert isinstance(reaction, l2.biochemicalReaction)
        assert all(
            isinstance(p.PHYSICAL_ENTITY, l2.physicalEntity)
            for p in model.objects_of(l2.physicalEntityParticipant)
        )
        assert len(_exact(model, l2.control)) == 1
        (interaction,) = [i for i in _exact(model, l2.physicalInteraction) if reaction in i.PARTICIPANTS]
        assert [v.TERM for v in interaction.INTERACTION_TYPE] == [["activation"]]

    def test_ids_are_local(self, driver, pathway):
        model = driver(BioPAXLevel.L2).translate(pathway)
        entities = model.objects_of(l2.entity)
        assert entities
        assert all(e.rdf_id.startswith("#") for e in entities)

    def test_provenance(self, driver, pathway):
        model = driver(BioPAXLevel.L2).translate(pathway)
        names = sorted(d.NAME[0] for d in model.objects_of(l2.dataSource))
        assert names == ["KEGG Data", "KEGGtranslator"]


# =============================================================================
# Driver Behaviour
# =============================================================================

class TestDriverBehaviour:
    """Tests for phases, progress and cancellation."""

    def test_unsupported_level(self):
        with pytest.raises(UnsupportedLevel):
            TranslationDriver("L1")

    def test_progress_reported_per_phase(self, driver, pathway):
        progress = MagicMock()
        driver(progress=progress).translate(pathway)
        phases = [c.args[0] for c in progress.call_args_list]
        assert phases[0] == "container"
        assert phases.count("entities") == len(pathway.entries)
        assert phases.count("reactions") == len(pathway.reactions)
        assert phases.count("relations") == len(pathway.relations)
        progress.assert_any_call("entities", len(pathway.entries), len(pathway.entries))

    def test_failing_progress_sink_does_not_stop_run(self, driver, pathway):
        progress = MagicMock(side_effect=RuntimeError("display closed"))
        model = driver(progress=progress).translate(pathway)
        assert len(model.objects_of(l3.BiochemicalReaction)) == 1

    def test_cancellation_between_phases(self, driver, pathway):
        checks = []

        def cancel_check():
            checks.append(True)
            # container and entities run, reactions are cancelled
            return len(checks) > 2

        with pytest.raises(TranslationCancelled):
            driver().translate(pathway, cancel_check=cancel_check)
        assert len(checks) == 3

    def test_phases_can_be_disabled(self, annotation_source, pathway):
        settings = Settings(KEGG_REQUEST_DELAY=0.0, CONSIDER_REACTIONS=False, CONSIDER_RELATIONS=False)
        model = TranslationDriver(BioPAXLevel.L3, annotation_source, settings=settings).translate(pathway)
        assert model.objects_of(l3.Interaction) == []
        assert model.objects_of(l3.Protein)

    def test_annotations_queried_once_per_identifier(self, driver, annotation_source, pathway):
        driver().translate(pathway)
        unique_ids = {i.lower() for i in pathway_identifiers(pathway) if i != "undefined"}
        assert annotation_source.queries == len(unique_ids)

    def test_translate_to_graph(self, driver, pathway):
        graph = driver().translate_to_graph(pathway)
        assert graph.node_count == len(pathway.entries)
