"""Exceptions raised while loading models and generating documents."""


class MetamodelError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(MetamodelError):
    """A builder was asked to build without a mandatory setting."""


class ModelError(MetamodelError):
    """The model description can't be turned into a model."""


class OutputError(MetamodelError):
    """A document couldn't be assembled or written."""


class GenerationError(MetamodelError):
    """Generation finished but reported one or more errors."""

    def __init__(self, errors: int):
        self.errors = errors
        if errors > 1:
            message = f"there were {errors} errors"
        else:
            message = "there was 1 error"
        super().__init__(message)
