"""
Pathway Translator - Configuration Management

Centralized configuration using Pydantic Settings.
Values are loaded from environment variables or a local .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Translator settings loaded from environment variables.
    
    Attributes:
        APP_NAME: Tool name written to the tool provenance record
        APP_URL: Homepage written as comment on the tool provenance record
        XML_BASE: xml:base of written BioPAX documents
        CANONICAL_IMPORT_FORMAT: Origin format that needs no extra provenance
        KEGG_API_URL: Base URL of the KEGG REST service
        CONSIDER_REACTIONS: Translate the reactions of a pathway
        CONSIDER_RELATIONS: Translate the relations of a pathway
        CHECK_ATOM_BALANCE: Annotate reactions with an atom balance comment
    """
    
    # Tool provenance
    APP_NAME: str = "KEGGtranslator"
    APP_URL: str = "http://www.cogsys.cs.uni-tuebingen.de/software/KEGGtranslator/"
    XML_BASE: str = "http://www.ra.cs.uni-tuebingen.de/software/KEGGtranslator/"
    CANONICAL_IMPORT_FORMAT: str = "kgml"
    
    # KEGG REST API (annotation source)
    KEGG_API_URL: str = "https://rest.kegg.jp"
    KEGG_API_TIMEOUT: float = 30.0
    KEGG_REQUEST_DELAY: float = 0.35  # KEGG allows ~3 requests per second
    
    # Translation phases
    CONSIDER_REACTIONS: bool = True
    CONSIDER_RELATIONS: bool = True
    AUTOCOMPLETE_REACTIONS: bool = True
    CHECK_ATOM_BALANCE: bool = True
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # console or json
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
