"""
Pathway Translator - Atom Balance

Compares the atoms on both sides of a reaction using the chemical
formulas of its compounds.
"""

import re
from collections import Counter
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field

from pathway_translator.domain.models import Pathway, Reaction, ReactionComponent


MISSING_ATOMS = (
    "There are missing atoms in this reaction. Values lower than zero indicate missing "
    "atoms on the substrate side, whereas positive values indicate missing atoms on the "
    "product side: "
)
CANNOT_CHECK = "Could not check the atom balance of this reaction."
BALANCED = "There are no missing atoms in this reaction."

_TOKEN = re.compile(r"([A-Z][a-z]?)|(\()|(\))|(\d+)|(n)")
_HYDRATE_PART = re.compile(r"^(\d*)(.*)$")


class AtomCheckResult(BaseModel):
    """Per-element defects of one reaction: product count minus substrate count."""
    reaction: str
    defects: Dict[str, int] = Field(default_factory=dict)
    
    @property
    def has_missing_atoms(self) -> bool:
        return bool(self.defects)
    
    def format_defects(self) -> str:
        return "{" + ", ".join(f"{k}={v}" for k, v in sorted(self.defects.items())) + "}"
    
    def comment(self) -> str:
        if self.has_missing_atoms:
            return MISSING_ATOMS + self.format_defects()
        return BALANCED


def parse_formula(formula: str) -> Optional[Counter]:
    """
    Atom counts of a chemical formula.
    
    Supports element symbols with counts, nested parentheses with a
    multiplier and hydrate notation ("CuSO4.5H2O"). Returns None for
    formulas with repeat units ("(C6H10O5)n") or unknown characters.
    """
    if not formula:
        return None
    
    total = Counter()
    for part in formula.replace(" ", "").split("."):
        factor, group = _HYDRATE_PART.match(part).groups()
        atoms = _parse_group(group)
        if atoms is None:
            return None
        for element, count in atoms.items():
            total[element] += count * int(factor or 1)
    return total


def _parse_group(text: str) -> Optional[Counter]:
    if not text:
        return None
    
    stack = [Counter()]
    # what a following count multiplies: an element symbol or a closed group
    last = None
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            return None
        pos = match.end()
        symbol, opening, closing, number, repeat = match.groups()
        
        if repeat:
            return None
        if symbol:
            stack[-1][symbol] += 1
            last = Counter({symbol: 1})
        elif opening:
            stack.append(Counter())
            last = None
        elif closing:
            if len(stack) < 2:
                return None
            group = stack.pop()
            stack[-1].update(group)
            last = group
        else:
            if last is None:
                return None
            for element, count in last.items():
                stack[-1][element] += count * (int(number) - 1)
            last = None
    
    if len(stack) != 1:
        return None
    return stack[0]


def _side_atoms(components: Iterable[ReactionComponent], pathway: Pathway, annotations) -> Optional[Counter]:
    total = Counter()
    for component in components:
        entry = pathway.resolve_component(component)
        identifier = entry.ids[0] if entry is not None and entry.ids else component.name
        record = annotations.lookup(identifier)
        if not record.success:
            return None
        atoms = parse_formula(record.formula)
        if atoms is None:
            return None
        for element, count in atoms.items():
            total[element] += count * component.stoichiometry
    return total


def check_atom_balance(reaction: Reaction, pathway: Pathway, annotations) -> Optional[AtomCheckResult]:
    """
    Atom defects of a reaction, or None if any formula is unavailable.
    
    Args:
        reaction: The reaction to check
        pathway: Pathway used to resolve substrate and product entries
        annotations: Annotation source providing compound formulas
    """
    if not reaction.substrates or not reaction.products:
        return None
    
    left = _side_atoms(reaction.substrates, pathway, annotations)
    if left is None:
        return None
    right = _side_atoms(reaction.products, pathway, annotations)
    if right is None:
        return None
    
    defects = {}
    for element in set(left) | set(right):
        diff = right[element] - left[element]
        if diff != 0:
            defects[element] = diff
    return AtomCheckResult(reaction=reaction.name, defects=defects)


def atom_balance_comment(result: Optional[AtomCheckResult]) -> str:
    if result is None:
        return CANNOT_CHECK
    return result.comment()
