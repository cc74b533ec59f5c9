"""
Pathway Translator - Translation Context

Explicit per-run state handed to the driver and the builders:
settings, a bound logger, the progress sink, the cancellation check and
the run-scoped annotation cache. Nothing here outlives one run.
"""

from typing import Callable, Optional

import structlog

from pathway_translator.config import Settings, settings as default_settings
from pathway_translator.exceptions import TranslationCancelled
from pathway_translator.services.annotation import (
    AnnotationSource,
    CachingAnnotationSource,
    InMemoryAnnotationSource,
)
from pathway_translator.services.species import OfflineSpeciesTable, SpeciesTable


# (phase, done, total) -> None
ProgressSink = Callable[[str, int, int], None]
CancelCheck = Callable[[], bool]


class TranslationContext:
    """
    Everything one translation run needs besides the pathway itself.
    
    Attributes:
        settings: Translator settings
        log: structlog logger bound to the run
        annotations: Run-scoped caching annotation source
        species: Offline species table
    """
    
    def __init__(
        self,
        annotation_source: Optional[AnnotationSource] = None,
        species_table: Optional[SpeciesTable] = None,
        settings: Optional[Settings] = None,
        progress: Optional[ProgressSink] = None,
        cancel_check: Optional[CancelCheck] = None,
        logger=None,
    ):
        self.settings = settings or default_settings
        self.log = logger or structlog.get_logger("pathway_translator")
        self.annotations = CachingAnnotationSource(
            annotation_source or InMemoryAnnotationSource(),
            logger=self.log,
        )
        self.species = species_table or OfflineSpeciesTable()
        self._progress = progress
        self._cancel_check = cancel_check
    
    def bind(self, **values) -> None:
        """Add key/values to every log line of this run."""
        self.log = self.log.bind(**values)
        self.annotations.log = self.log
    
    def report_progress(self, phase: str, done: int, total: int) -> None:
        """One-way progress notification; sink errors never stop a run."""
        if self._progress is None:
            return
        try:
            self._progress(phase, done, total)
        except Exception as e:
            self.log.debug("Progress sink failed", phase=phase, error=str(e))
    
    def check_cancelled(self, next_phase: str) -> None:
        """
        Raise if cancellation was requested. Called between phases only.
        
        Raises:
            TranslationCancelled
        """
        if self._cancel_check is not None and self._cancel_check():
            self.log.info("Translation cancelled", before_phase=next_phase)
            raise TranslationCancelled(f"Cancelled before phase '{next_phase}'")
