from __future__ import annotations


class HydraMorphError(Exception):
    """Base error for the hydramorph library."""


class ParseError(HydraMorphError):
    """Raised when sketch text is not syntactically valid source."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(f"Failed to parse sketch: {message}")
        self.message = message
        self.source = source


class InvalidInputError(HydraMorphError):
    """Raised when a transformation is asked to work on unusable input."""


class CatalogError(HydraMorphError):
    """Raised when a function catalog feed cannot be loaded."""


class GenerationError(HydraMorphError):
    """Raised when an AST cannot be rendered back to source text."""


class GenerationValidationError(GenerationError):
    """Raised when generated source text fails to re-parse."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"Generated invalid sketch ({reason}): {code}")
        self.code = code
        self.reason = reason


class MutationExhaustedError(HydraMorphError):
    """Raised when every mutation attempt failed to produce valid source."""
