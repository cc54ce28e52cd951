"""
Errors raised by the turnout/trends processing pipeline.

Only hard failures are modelled here. Soft failures (missing trends header,
malformed rows, unmatched counties) degrade to empty or partial output
instead of raising.
"""


class IngestionError(Exception):
    """A source could not be loaded or its header is unusable.

    Terminal for the current run: no partial results are produced.
    """

    def __init__(self, message: str, source: str = ""):
        self.source = source
        if source:
            message = f"{message} (source: {source})"
        super().__init__(message)
