class BraindumpError(Exception):
    """Base class for errors raised by the extraction pipeline."""


class InputValidationError(BraindumpError, ValueError):
    """Input text or options were rejected before any processing started."""


class CleanerFailure(BraindumpError):
    """The external cleaner raised or returned unusable output.

    Recovered inside the pipeline: the rule-cleaned text is kept.
    """


class DateParseFailure(BraindumpError):
    """A recognized temporal expression could not be turned into a datetime."""
