"""
Pathway Translator - Species Table

Offline lookup of organism names and NCBI taxonomy ids by KEGG organism
code. Used when the annotation source cannot resolve an organism.
"""

from typing import Dict, Optional, Protocol

from pydantic import BaseModel


class SpeciesInfo(BaseModel):
    """Organism metadata for one KEGG organism code."""
    kegg_abbreviation: str
    scientific_name: Optional[str] = None
    common_name: Optional[str] = None
    taxonomy_id: Optional[int] = None
    
    class Config:
        frozen = True


class SpeciesTable(Protocol):
    def lookup(self, organism_code: str) -> Optional[SpeciesInfo]:
        ...


# KEGG organism code -> (scientific name, common name, NCBI taxonomy id)
_BUILTIN_SPECIES = {
    "hsa": ("Homo sapiens", "human", 9606),
    "mmu": ("Mus musculus", "mouse", 10090),
    "rno": ("Rattus norvegicus", "rat", 10116),
    "bta": ("Bos taurus", "cow", 9913),
    "ssc": ("Sus scrofa", "pig", 9823),
    "cfa": ("Canis lupus familiaris", "dog", 9615),
    "gga": ("Gallus gallus", "chicken", 9031),
    "xla": ("Xenopus laevis", "African clawed frog", 8355),
    "dre": ("Danio rerio", "zebrafish", 7955),
    "dme": ("Drosophila melanogaster", "fruit fly", 7227),
    "cel": ("Caenorhabditis elegans", "nematode", 6239),
    "ath": ("Arabidopsis thaliana", "thale cress", 3702),
    "osa": ("Oryza sativa japonica", "Japanese rice", 39947),
    "sce": ("Saccharomyces cerevisiae", "budding yeast", 4932),
    "spo": ("Schizosaccharomyces pombe", "fission yeast", 4896),
    "eco": ("Escherichia coli K-12 MG1655", None, 511145),
    "bsu": ("Bacillus subtilis subsp. subtilis 168", None, 224308),
    "mtu": ("Mycobacterium tuberculosis H37Rv", None, 83332),
    "pfa": ("Plasmodium falciparum 3D7", "malaria parasite", 36329),
}


class OfflineSpeciesTable:
    """Species table backed by a built-in list of common KEGG organisms."""
    
    def __init__(self, extra: Optional[Dict[str, SpeciesInfo]] = None):
        self._species: Dict[str, SpeciesInfo] = {
            code: SpeciesInfo(
                kegg_abbreviation=code,
                scientific_name=name,
                common_name=common,
                taxonomy_id=tax_id,
            )
            for code, (name, common, tax_id) in _BUILTIN_SPECIES.items()
        }
        if extra:
            self._species.update({code.lower(): info for code, info in extra.items()})
    
    def lookup(self, organism_code: str) -> Optional[SpeciesInfo]:
        if not organism_code:
            return None
        return self._species.get(organism_code.strip().lower())
