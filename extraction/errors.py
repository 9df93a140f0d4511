"""Exceptions raised by the extraction pipeline."""


class ExtractionError(Exception):
    """Raised when extraction fails."""
    pass


class InvalidStoryInputError(ExtractionError):
    """Raised when the story input is missing or blank."""
    pass


class EnrichmentError(ExtractionError):
    """Raised when the LLM enrichment call fails after retries."""
    pass
