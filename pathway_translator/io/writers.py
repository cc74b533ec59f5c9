"""
Pathway Translator - Output Writers

BioPAXWriter serializes a target model as RDF/XML (OWL) through an
rdflib graph, SIFWriter writes the simple interaction format
(source, interaction, target).
"""

import io
import os
import re
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple, Union

import structlog
from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import OWL, RDF, XSD

from pathway_translator.biopax import elements_l2 as l2
from pathway_translator.biopax import elements_l3 as l3
from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel, TargetModel
from pathway_translator.config import settings as default_settings


Target = Union[str, Path, IO]

# "urn:miriam:...", "http://..." are absolute, element ids are not
_ABSOLUTE_URI = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def _is_path(target: Target) -> bool:
    return isinstance(target, (str, Path))


# =============================================================================
# BioPAX (OWL)
# =============================================================================

class BioPAXWriter:
    """
    RDF/XML writer for both BioPAX levels.
    
    Every element becomes one typed resource; element valued properties
    point to other resources, literals carry their XSD type. Element ids
    are resolved against the model's xml:base.
    """
    
    def __init__(self, logger=None):
        self.log = logger or structlog.get_logger(__name__)
        self.last_file_was_overwritten = False
    
    @staticmethod
    def base_of(model: TargetModel) -> str:
        return model.xml_base or default_settings.XML_BASE
    
    @staticmethod
    def resource(base: str, element: BioPAXElement) -> URIRef:
        """Absolute URI of an element."""
        if _ABSOLUTE_URI.match(element.rdf_id):
            return URIRef(element.rdf_id)
        return URIRef(base + element.rdf_id)
    
    @staticmethod
    def _literal(value) -> Literal:
        if isinstance(value, bool):
            return Literal(value, datatype=XSD.boolean)
        if isinstance(value, int):
            return Literal(value, datatype=XSD.int)
        if isinstance(value, float):
            return Literal(value, datatype=XSD.double)
        return Literal(str(value), datatype=XSD.string)
    
    def to_graph(self, model: TargetModel) -> Graph:
        """Build the RDF graph of a model."""
        base = self.base_of(model)
        bp = Namespace(model.level.namespace)
        
        graph = Graph()
        graph.bind("bp", bp)
        graph.bind("owl", OWL)
        graph.bind("xsd", XSD)
        
        ontology = URIRef(base)
        graph.add((ontology, RDF.type, OWL.Ontology))
        graph.add((ontology, OWL.imports, URIRef(model.level.namespace.rstrip("#"))))
        
        for element in model:
            subject = self.resource(base, element)
            graph.add((subject, RDF.type, bp[element.rdf_type]))
            for name, field in type(element).model_fields.items():
                if name == "rdf_id":
                    continue
                value = getattr(element, name)
                if value is None or value == []:
                    continue
                predicate = bp[field.alias or name]
                for item in value if isinstance(value, list) else [value]:
                    if isinstance(item, BioPAXElement):
                        graph.add((subject, predicate, self.resource(base, item)))
                    elif item is not None:
                        graph.add((subject, predicate, self._literal(item)))
        return graph
    
    def serialize(self, model: TargetModel) -> str:
        """RDF/XML text of a model."""
        return self.to_graph(model).serialize(format="xml", base=self.base_of(model))
    
    def write(self, model: TargetModel, target: Target) -> bool:
        """
        Write the model to a path or an open stream.
        
        Returns:
            True on success, False if writing failed (the cause is logged)
        """
        self.last_file_was_overwritten = _is_path(target) and os.path.exists(target)
        serialized = self.serialize(model)
        try:
            if _is_path(target):
                with open(target, "w", encoding="utf-8") as handle:
                    handle.write(serialized)
            elif isinstance(target, io.TextIOBase):
                target.write(serialized)
            else:
                target.write(serialized.encode("utf-8"))
        except (OSError, TypeError, ValueError) as e:
            self.log.error("Could not write BioPAX model", target=str(target), error=str(e))
            return False
        
        self.log.info("BioPAX model written", target=str(target), elements=len(model))
        return True


# =============================================================================
# SIF
# =============================================================================

def _entity(element: BioPAXElement) -> BioPAXElement:
    """Unwrap level 2 participants."""
    if isinstance(element, l2.physicalEntityParticipant) and element.PHYSICAL_ENTITY is not None:
        return element.PHYSICAL_ENTITY
    return element


def element_label(element: BioPAXElement) -> str:
    """Human readable name of an element, falling back to its id."""
    element = _entity(element)
    for attribute in ("display_name", "standard_name", "NAME"):
        value = getattr(element, attribute, None)
        if isinstance(value, list):
            value = value[0] if value else None
        if value:
            return value
    return element.rdf_id.lstrip("#")


def _control_label(control_type: Optional[str]) -> str:
    if control_type == "ACTIVATION":
        return "activates"
    if control_type == "INHIBITION":
        return "inhibits"
    return "controls"


def interaction_triples(model: TargetModel) -> Iterator[Tuple[str, str, str]]:
    """(source, interaction, target) for every binary interaction of a model."""
    if model.level == BioPAXLevel.L3:
        for element in model.objects_of(l3.Interaction):
            if isinstance(element, l3.Conversion):
                for left in element.left:
                    for right in element.right:
                        yield element_label(left), "reacts-with", element_label(right)
            elif isinstance(element, l3.Control):
                label = "catalyzes" if isinstance(element, l3.Catalysis) else _control_label(element.control_type)
                for source in element.controller:
                    for target in element.controlled:
                        yield element_label(source), label, element_label(target)
            elif len(element.participant) == 2:
                yield element_label(element.participant[0]), "interacts-with", element_label(element.participant[1])
    else:
        for element in model.objects_of(l2.interaction):
            if isinstance(element, l2.conversion):
                for left in element.LEFT:
                    for right in element.RIGHT:
                        yield element_label(left), "reacts-with", element_label(right)
            elif isinstance(element, l2.control):
                label = "catalyzes" if isinstance(element, l2.catalysis) else _control_label(element.CONTROL_TYPE)
                for source in element.CONTROLLER:
                    for target in element.CONTROLLED:
                        yield element_label(source), label, element_label(target)
            elif len(element.PARTICIPANTS) == 2:
                yield element_label(element.PARTICIPANTS[0]), "interacts-with", element_label(element.PARTICIPANTS[1])


class SIFWriter:
    """Simple interaction format: one tab separated triple per line."""
    
    def __init__(self, logger=None):
        self.log = logger or structlog.get_logger(__name__)
        self.last_file_was_overwritten = False
    
    def lines(self, model: TargetModel) -> List[str]:
        seen = set()
        result = []
        for triple in interaction_triples(model):
            if triple not in seen:
                seen.add(triple)
                result.append("\t".join(triple))
        return result
    
    def write(self, model: TargetModel, target: Target) -> bool:
        text = "".join(line + "\n" for line in self.lines(model))
        self.last_file_was_overwritten = _is_path(target) and os.path.exists(target)
        try:
            if _is_path(target):
                with open(target, "w", encoding="utf-8") as handle:
                    handle.write(text)
            else:
                target.write(text)
        except OSError as e:
            self.log.error("Could not write SIF file", target=str(target), error=str(e))
            return False
        return True
