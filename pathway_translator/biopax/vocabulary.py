"""
Relation subtype vocabulary.

Maps KEGG relation subtype names to Systems Biology Ontology (SBO) and
Gene Ontology (GO) codes, and to BioPAX control types.
"""

from typing import Iterable, Optional


# subtype name -> SBO term (without the SBO: prefix)
SBO_TERMS = {
    "compound": 177,
    "hidden compound": 177,
    "activation": 170,
    "inhibition": 169,
    "expression": 170,
    "repression": 169,
    "indirect effect": 344,
    "state change": 168,
    "binding/association": 177,
    "binding": 177,
    "association": 177,
    "dissociation": 180,
    "missing interaction": 396,
    "phosphorylation": 216,
    "dephosphorylation": 330,
    "glycosylation": 217,
    "ubiquitination": 224,
    "ubiquitylation": 224,
    "methylation": 214,
}

# subtype name -> GO term (without the GO: prefix)
GO_TERMS = {
    "binding/association": 5488,
    "binding": 5488,
    "association": 5488,
    "expression": 10467,
    "repression": 10629,
    "phosphorylation": 16310,
    "dephosphorylation": 16311,
    "glycosylation": 70085,
    "ubiquitination": 16567,
    "ubiquitylation": 16567,
    "methylation": 32259,
}

ACTIVATING_SUBTYPES = {"activation", "expression"}
INHIBITING_SUBTYPES = {"inhibition", "repression"}


def _key(subtype_name: str) -> str:
    return (subtype_name or "").strip().lower()


def get_sbo_term(subtype_name: str) -> int:
    """SBO code for a subtype, or -1 if there is none."""
    return SBO_TERMS.get(_key(subtype_name), -1)


def get_go_term(subtype_name: str) -> int:
    """GO code for a subtype, or -1 if there is none."""
    return GO_TERMS.get(_key(subtype_name), -1)


def control_type(subtype_names: Iterable[str]) -> Optional[str]:
    """ACTIVATION or INHIBITION if any subtype implies control, else None."""
    names = {_key(n) for n in subtype_names}
    if names & INHIBITING_SUBTYPES:
        return "INHIBITION"
    if names & ACTIVATING_SUBTYPES:
        return "ACTIVATION"
    return None
