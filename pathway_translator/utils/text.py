"""
Text helpers shared by the builders and writers.

- name_to_sid: turn arbitrary names into valid element identifiers
- format_text_for_html_notes: escape annotation text for comment fields
- parse_leading_number: read the numeric prefix of strings like "123.456 mol"
"""

import html
import re
from typing import Iterable, List


_INVALID_SID_CHARS = re.compile(r"[^A-Za-z0-9_]")

# Synonyms are separated by ";" or ", "
SYNONYM_SEPARATOR = re.compile(r";|,\s")


def name_to_sid(name: str) -> str:
    """
    Convert a name into a string usable as element identifier.
    
    Every character other than letters, digits and "_" becomes "_".
    Identifiers must not start with a digit, so those get a "_" prefix.
    """
    if not name:
        return "_"
    sid = _INVALID_SID_CHARS.sub("_", name.strip())
    if not sid or sid[0].isdigit():
        sid = "_" + sid
    return sid


def format_text_for_html_notes(text: str) -> str:
    """HTML-escape annotation text and keep its line breaks."""
    if text is None:
        return ""
    escaped = html.escape(text.strip(), quote=True)
    return escaped.replace("\n", "<br/>")


def split_synonyms(names: str) -> List[str]:
    """Split a KEGG NAME field into stripped, non-empty synonyms."""
    if not names:
        return []
    return [s.strip() for s in SYNONYM_SEPARATOR.split(names) if s.strip()]


def split_tokens(value: str) -> List[str]:
    """Split a comma or whitespace delimited value into non-empty tokens."""
    if value is None:
        return []
    return [t for t in re.split(r"[,\s]+", str(value)) if t]


def parse_leading_number(value: str) -> float:
    """
    Parse the numeric prefix of a string.
    
    Parsing stops at the first character that is neither a digit nor
    the first decimal point.
    
    Examples:
        "123.456 mol" -> 123.456
        "mol" -> 0.0
        "12..3" -> 12.0
    """
    if value is None:
        return 0.0
    value = value.strip()
    
    point_seen = False
    end = 0
    for char in value:
        if "0" <= char <= "9":
            end += 1
        elif char == "." and not point_seen:
            point_seen = True
            end += 1
        else:
            break
    
    prefix = value[:end].rstrip(".")
    if not any(c.isdigit() for c in prefix):
        return 0.0
    return float(prefix)


def unique(values: Iterable[str]) -> List[str]:
    """Drop duplicates and empty values, keeping first-seen order."""
    seen = set()
    result = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            result.append(v)
    return result
