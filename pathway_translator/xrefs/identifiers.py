"""
Pathway Translator - Identifier Databases

Registry of the external databases the translator can reference:
official name, content type, identifier grammar, formatting rules and
the stable MIRIAM URN scheme.

Also implements the qualifier inference used to decide whether an
identifier denotes the annotated element itself (IS / HAS_VERSION) or
something merely associated with it.
"""

import re
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

from pathway_translator.exceptions import InvalidIdentifier


# =============================================================================
# Enums
# =============================================================================

class DatabaseContent(str, Enum):
    """What kind of thing a database describes."""
    GENE = "gene"
    PROTEIN = "protein"
    RNA = "rna"
    SMALL_MOLECULE = "small_molecule"
    REACTION = "reaction"
    ENZYME = "enzyme"
    ORTHOLOG = "ortholog"
    PATHWAY = "pathway"
    PUBLICATION = "publication"
    TAXONOMY = "taxonomy"
    ONTOLOGY = "ontology"
    DESCRIPTION = "description"


class Qualifier(str, Enum):
    """Biological qualifiers relating an element to an identifier."""
    IS = "BQB_IS"
    HAS_VERSION = "BQB_HAS_VERSION"
    IS_VERSION_OF = "BQB_IS_VERSION_OF"
    IS_ENCODED_BY = "BQB_IS_ENCODED_BY"
    ENCODES = "BQB_ENCODES"
    HAS_PART = "BQB_HAS_PART"
    IS_PART_OF = "BQB_IS_PART_OF"
    HAS_PROPERTY = "BQB_HAS_PROPERTY"
    OCCURS_IN = "BQB_OCCURS_IN"
    IS_DESCRIBED_BY = "BQB_IS_DESCRIBED_BY"


# =============================================================================
# Formatting helpers
# =============================================================================

def _strip_prefix(*prefixes: str) -> Callable[[str], str]:
    def fmt(identifier: str) -> str:
        lower = identifier.lower()
        for prefix in prefixes:
            if lower.startswith(prefix):
                return identifier[len(prefix):]
        return identifier
    return fmt


def _upper_after(*prefixes: str) -> Callable[[str], str]:
    strip = _strip_prefix(*prefixes)
    return lambda identifier: strip(identifier).upper()


def _padded(prefix: str, width: int) -> Callable[[str], str]:
    """"GO:5737", "5737" and "GO:0005737" all become "GO:0005737"."""
    def fmt(identifier: str) -> str:
        value = identifier
        if value.upper().startswith(prefix.upper() + ":"):
            value = value[len(prefix) + 1:]
        if value.isdigit():
            return f"{prefix}:{value.zfill(width)}"
        return identifier
    return fmt


def _prefixed(prefix: str) -> Callable[[str], str]:
    """"15422" and "CHEBI:15422" both become "CHEBI:15422"."""
    def fmt(identifier: str) -> str:
        if identifier.upper().startswith(prefix.upper() + ":"):
            return prefix + identifier[len(prefix):]
        return f"{prefix}:{identifier}"
    return fmt


def _kegg_genes(identifier: str) -> str:
    # organism code is lower case, gene part is kept as is
    if ":" in identifier:
        org, gene = identifier.split(":", 1)
        return f"{org.lower()}:{gene}"
    return identifier


class _Database:
    """Static description of one identifier database."""
    
    def __init__(
        self,
        official_name: str,
        content: DatabaseContent,
        pattern: str,
        miriam_namespace: Optional[str] = None,
        formatter: Optional[Callable[[str], str]] = None,
    ):
        self.official_name = official_name
        self.content = content
        self.pattern = re.compile(pattern)
        self.miriam_namespace = miriam_namespace
        self.formatter = formatter or (lambda identifier: identifier)


# =============================================================================
# Databases
# =============================================================================

class IdentifierDatabase(str, Enum):
    """External databases that cross-references can point to."""
    KEGG_COMPOUND = "KEGG_Compound"
    KEGG_GLYCAN = "KEGG_Glycan"
    KEGG_DRUG = "KEGG_Drug"
    KEGG_REACTION = "KEGG_Reaction"
    KEGG_PATHWAY = "KEGG_Pathway"
    KEGG_ORTHOLOGY = "KEGG_Orthology"
    KEGG_GENES = "KEGG_Genes"
    EC_NUMBER = "ECNumber"
    ENTREZ_GENE = "EntrezGene"
    UNIPROT = "UniProt_AC"
    ENSEMBL = "Ensembl"
    HGNC = "HGNC"
    OMIM = "OMIM"
    CHEBI = "ChEBI"
    PUBCHEM_COMPOUND = "PubChem_compound"
    PUBCHEM_SUBSTANCE = "PubChem_substance"
    CAS = "CAS"
    LIPID_MAPS = "LIPID_MAPS"
    THREEDMET = "3DMET"
    PUBMED = "PubMed"
    NCBI_TAXONOMY = "NCBI_Taxonomy"
    GENE_ONTOLOGY = "GeneOntology"
    SBO = "SBO"
    
    @property
    def info(self) -> _Database:
        return _DATABASES[self]
    
    @property
    def official_name(self) -> str:
        return self.info.official_name
    
    @property
    def content(self) -> DatabaseContent:
        return self.info.content


_DATABASES: Dict[IdentifierDatabase, _Database] = {
    IdentifierDatabase.KEGG_COMPOUND: _Database(
        "KEGG Compound", DatabaseContent.SMALL_MOLECULE, r"^C\d{5}$",
        "kegg.compound", _upper_after("cpd:")),
    IdentifierDatabase.KEGG_GLYCAN: _Database(
        "KEGG Glycan", DatabaseContent.SMALL_MOLECULE, r"^G\d{5}$",
        "kegg.glycan", _upper_after("gl:")),
    IdentifierDatabase.KEGG_DRUG: _Database(
        "KEGG Drug", DatabaseContent.SMALL_MOLECULE, r"^D\d{5}$",
        "kegg.drug", _upper_after("dr:")),
    IdentifierDatabase.KEGG_REACTION: _Database(
        "KEGG Reaction", DatabaseContent.REACTION, r"^R\d{5}$",
        "kegg.reaction", _upper_after("rn:")),
    IdentifierDatabase.KEGG_PATHWAY: _Database(
        "KEGG Pathway", DatabaseContent.PATHWAY, r"^\w{2,4}\d{5}$",
        "kegg.pathway", _strip_prefix("path:")),
    IdentifierDatabase.KEGG_ORTHOLOGY: _Database(
        "KEGG Orthology", DatabaseContent.ORTHOLOG, r"^K\d{5}$",
        "kegg.orthology", _upper_after("ko:")),
    IdentifierDatabase.KEGG_GENES: _Database(
        "KEGG Genes", DatabaseContent.GENE, r"^\w+:[\w\d\.-]*$",
        "kegg.genes", _kegg_genes),
    IdentifierDatabase.EC_NUMBER: _Database(
        "Enzyme Nomenclature", DatabaseContent.ENZYME,
        r"^(\d+\.-\.-\.-|\d+\.\d+\.-\.-|\d+\.\d+\.\d+\.-|\d+\.\d+\.\d+\.(n)?\d+)$",
        "ec-code", _strip_prefix("ec:")),
    IdentifierDatabase.ENTREZ_GENE: _Database(
        "Entrez Gene", DatabaseContent.GENE, r"^\d+$", "ncbigene"),
    IdentifierDatabase.UNIPROT: _Database(
        "UniProt Knowledgebase", DatabaseContent.PROTEIN,
        r"^(([A-N,R-Z][0-9][A-Z][A-Z, 0-9][A-Z, 0-9][0-9])|([O,P,Q][0-9][A-Z, 0-9][A-Z, 0-9][A-Z, 0-9][0-9]))(\.\d+)?$",
        "uniprot", _strip_prefix("up:", "uniprot:")),
    IdentifierDatabase.ENSEMBL: _Database(
        "Ensembl", DatabaseContent.GENE, r"^ENS[A-Z]*[FPTG]\d{11}(\.\d+)?$", "ensembl"),
    IdentifierDatabase.HGNC: _Database(
        "HUGO Gene Nomenclature Committee", DatabaseContent.GENE, r"^\d{1,5}$",
        "hgnc", _strip_prefix("hgnc:")),
    IdentifierDatabase.OMIM: _Database(
        "OMIM", DatabaseContent.DESCRIPTION, r"^[*#+%^]?\d{6}$", "omim"),
    IdentifierDatabase.CHEBI: _Database(
        "ChEBI", DatabaseContent.SMALL_MOLECULE, r"^CHEBI:\d+$",
        "obo.chebi", _prefixed("CHEBI")),
    IdentifierDatabase.PUBCHEM_COMPOUND: _Database(
        "PubChem-compound", DatabaseContent.SMALL_MOLECULE, r"^\d+$", "pubchem.compound"),
    IdentifierDatabase.PUBCHEM_SUBSTANCE: _Database(
        "PubChem-substance", DatabaseContent.SMALL_MOLECULE, r"^\d+$", "pubchem.substance"),
    IdentifierDatabase.CAS: _Database(
        "Chemical Abstracts Service", DatabaseContent.SMALL_MOLECULE, r"^\d{1,7}\-\d{2}\-\d$", "cas"),
    IdentifierDatabase.LIPID_MAPS: _Database(
        "LIPID MAPS", DatabaseContent.SMALL_MOLECULE, r"^LM(FA|GL|GP|SP|ST|PR|SL|PK)[0-9]{4}([0-9a-zA-Z]{4,6})?$",
        "lipidmaps"),
    IdentifierDatabase.THREEDMET: _Database(
        # no registry scheme, xrefs get a synthesized id
        "3DMET", DatabaseContent.SMALL_MOLECULE, r"^B\d{5}$"),
    IdentifierDatabase.PUBMED: _Database(
        "PubMed", DatabaseContent.PUBLICATION, r"^\d+$", "pubmed"),
    IdentifierDatabase.NCBI_TAXONOMY: _Database(
        "NCBI Taxonomy", DatabaseContent.TAXONOMY, r"^\d+$", "taxonomy"),
    IdentifierDatabase.GENE_ONTOLOGY: _Database(
        "Gene Ontology", DatabaseContent.ONTOLOGY, r"^GO:\d{7}$",
        "obo.go", _padded("GO", 7)),
    IdentifierDatabase.SBO: _Database(
        "Systems Biology Ontology", DatabaseContent.ONTOLOGY, r"^SBO:\d{7}$",
        "biomodels.sbo", _padded("SBO", 7)),
}


# KEGG DBLINKS labels -> databases
DBLINK_DATABASES: Dict[str, IdentifierDatabase] = {
    "NCBI-GeneID": IdentifierDatabase.ENTREZ_GENE,
    "UniProt": IdentifierDatabase.UNIPROT,
    "Ensembl": IdentifierDatabase.ENSEMBL,
    "HGNC": IdentifierDatabase.HGNC,
    "OMIM": IdentifierDatabase.OMIM,
    "ChEBI": IdentifierDatabase.CHEBI,
    "PubChem": IdentifierDatabase.PUBCHEM_SUBSTANCE,
    "CAS": IdentifierDatabase.CAS,
    "LIPIDMAPS": IdentifierDatabase.LIPID_MAPS,
    "3DMET": IdentifierDatabase.THREEDMET,
    "GO": IdentifierDatabase.GENE_ONTOLOGY,
}

# KEGG identifier prefixes -> databases. Anything else with a colon is a gene.
KEGG_PREFIX_DATABASES: Dict[str, IdentifierDatabase] = {
    "cpd": IdentifierDatabase.KEGG_COMPOUND,
    "gl": IdentifierDatabase.KEGG_GLYCAN,
    "dr": IdentifierDatabase.KEGG_DRUG,
    "rn": IdentifierDatabase.KEGG_REACTION,
    "path": IdentifierDatabase.KEGG_PATHWAY,
    "ko": IdentifierDatabase.KEGG_ORTHOLOGY,
    "ec": IdentifierDatabase.EC_NUMBER,
}


# =============================================================================
# Functions
# =============================================================================

def format_identifier(db: IdentifierDatabase, identifier: str) -> str:
    """Bring an identifier into the canonical form of its database."""
    if identifier is None:
        return identifier
    return db.info.formatter(identifier.strip())


def check_identifier(db: IdentifierDatabase, identifier: str) -> bool:
    """True if the identifier matches the database's id grammar."""
    if not identifier:
        return False
    return db.info.pattern.match(identifier) is not None


def validate_identifier(db: IdentifierDatabase, identifier: str) -> str:
    """
    Format and validate an identifier.
    
    Returns:
        The formatted identifier
    
    Raises:
        InvalidIdentifier: if the formatted identifier fails validation
    """
    formatted = format_identifier(db, identifier)
    if not check_identifier(db, formatted):
        raise InvalidIdentifier(db.value, identifier)
    return formatted or identifier


def miriam_uri(db: IdentifierDatabase, formatted_id: str) -> Optional[str]:
    """Stable MIRIAM URN for an identifier, or None if the database has no scheme."""
    namespace = db.info.miriam_namespace
    if not namespace or not formatted_id:
        return None
    return f"urn:miriam:{namespace}:{quote(formatted_id, safe='')}"


def kegg_database_for(kegg_id: str) -> Optional[Tuple[IdentifierDatabase, str]]:
    """
    Database and raw identifier of a KEGG identifier token.
    
    Examples:
        "cpd:C00031" -> (KEGG_COMPOUND, "cpd:C00031")
        "hsa:3098"   -> (KEGG_GENES, "hsa:3098")
        "undefined"  -> None
    """
    if not kegg_id or ":" not in kegg_id:
        return None
    prefix = kegg_id.split(":", 1)[0].lower()
    return KEGG_PREFIX_DATABASES.get(prefix, IdentifierDatabase.KEGG_GENES), kegg_id


_GENE_PRODUCTS = {
    DatabaseContent.GENE,
    DatabaseContent.PROTEIN,
    DatabaseContent.RNA,
}


def _normalize_point_of_view(point_of_view: Optional[str]) -> str:
    pov = (point_of_view or "protein").strip().lower()
    if pov in ("complex", "gene", "genes", "protein", "enzyme"):
        # complexes are multiple proteins; KEGG gene nodes denote gene products
        return "protein"
    if pov in ("rna", "mirna", "dna"):
        return "rna"
    if pov in ("compound", "small_molecule", "smallmolecule", "glycan", "drug"):
        return "small_molecule"
    return pov


def infer_qualifier(db: IdentifierDatabase, point_of_view: Optional[str], identifier: str) -> Qualifier:
    """
    Relation between an element seen as `point_of_view` and an identifier of `db`.
    
    point_of_view is the element's real type, e.g. "protein",
    "small_molecule", "reaction", "ortholog" or "pathway".
    """
    content = db.content
    pov = _normalize_point_of_view(point_of_view)
    
    if content == DatabaseContent.PUBLICATION:
        return Qualifier.IS_DESCRIBED_BY
    if content == DatabaseContent.TAXONOMY:
        return Qualifier.OCCURS_IN
    
    if pov == "ortholog":
        if content == DatabaseContent.ORTHOLOG:
            return Qualifier.IS
        if content in _GENE_PRODUCTS:
            return Qualifier.HAS_VERSION
        return Qualifier.HAS_PROPERTY
    
    if pov in ("protein", "rna"):
        if content in _GENE_PRODUCTS:
            if pov == "protein" and content == DatabaseContent.GENE and db == IdentifierDatabase.ENSEMBL:
                return Qualifier.IS_ENCODED_BY
            return Qualifier.IS
        if content in (DatabaseContent.ORTHOLOG, DatabaseContent.ENZYME):
            return Qualifier.IS_VERSION_OF
        if content == DatabaseContent.REACTION:
            return Qualifier.IS_PART_OF
        if content == DatabaseContent.PATHWAY:
            return Qualifier.OCCURS_IN
        return Qualifier.HAS_PROPERTY
    
    if pov == "small_molecule":
        if content == DatabaseContent.SMALL_MOLECULE:
            return Qualifier.IS
        if content == DatabaseContent.REACTION:
            return Qualifier.IS_PART_OF
        if content == DatabaseContent.PATHWAY:
            return Qualifier.OCCURS_IN
        return Qualifier.HAS_PROPERTY
    
    if pov == "reaction":
        if content == DatabaseContent.REACTION:
            return Qualifier.IS
        if content == DatabaseContent.ENZYME:
            return Qualifier.IS_VERSION_OF
        if content == DatabaseContent.PATHWAY:
            return Qualifier.IS_PART_OF
        return Qualifier.HAS_PROPERTY
    
    if pov == "pathway":
        if content == DatabaseContent.PATHWAY:
            return Qualifier.IS
        return Qualifier.HAS_PART
    
    return Qualifier.HAS_PROPERTY


def databases_with_content(content: DatabaseContent) -> List[IdentifierDatabase]:
    return [db for db in IdentifierDatabase if db.content == content]
