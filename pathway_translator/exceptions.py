"""
Pathway Translator - Errors

Exception hierarchy shared by the graph, cross-reference and translation layers.

Only UnsupportedLevel (at driver level) and TranslationCancelled abort a run.
Everything else is logged by the component that hit it and the element
is skipped or translated without the failing annotation.
"""


class TranslatorError(Exception):
    """Base exception for translator errors."""
    pass


class MissingMapping(TranslatorError):
    """Raised when a required attribute map is not registered in a graph."""
    
    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        super().__init__(f"mapping not found for {descriptor}")


class InvalidIdentifier(TranslatorError):
    """Raised when an identifier does not match its database's id grammar."""
    
    def __init__(self, database, identifier: str):
        self.database = database
        self.identifier = identifier
        super().__init__(f"Invalid {database} identifier: {identifier!r}")


class AnnotationLookupFailed(TranslatorError):
    """Raised when the annotation source cannot resolve an identifier."""
    
    def __init__(self, identifier: str, reason: str = "not found"):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Annotation lookup for {identifier!r} failed: {reason}")


class UnsupportedLevel(TranslatorError):
    """Raised when an operation is invoked against a target level it does not implement."""
    
    def __init__(self, level):
        self.level = level
        super().__init__(f"Level {level} not supported.")


class NumberFormatFailure(TranslatorError, ValueError):
    """Raised when a token or stored attribute cannot be parsed as a number."""
    
    def __init__(self, value, expected: str = "number"):
        self.value = value
        super().__init__(f"Could not parse {value!r} as {expected}")


class TranslationCancelled(TranslatorError):
    """Raised between translation phases when cancellation was requested."""
    pass
