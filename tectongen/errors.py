"""Exceptions raised by the generation pipeline."""


class TectonError(Exception):
    """Base class for tecton generation failures."""


class MissingCollaboratorError(TectonError, RuntimeError):
    """A required collaborator (template, factory, noise field) is absent.

    Raised before any element is produced, so a failed run leaves no
    partial output behind.
    """


class ConfigLoadError(TectonError, ValueError):
    """A config file could not be parsed into a GenerationConfig."""
