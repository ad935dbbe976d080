"""
Exceptions raised by the loaders and the pipeline driver.
"""


class GenieAnalysisError(Exception):
    """Base class for errors that abort an analysis run."""


class SchemaMismatchError(GenieAnalysisError, ValueError):
    """A table is missing columns the pipeline needs."""

    def __init__(self, source, missing_columns):
        self.source = source
        self.missing_columns = list(missing_columns)
        super().__init__(f"{source} is missing required columns: {self.missing_columns}")


class MissingInputError(GenieAnalysisError, FileNotFoundError):
    """An input file does not exist or cannot be read."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Input file not found or unreadable: {self.path}")
