from __future__ import annotations


class RastrixError(Exception):
    """Base class for errors raised by the rastrix packages."""


class MissingCollaboratorError(RastrixError):
    """A drawable or overlay was used without a required collaborator (e.g. no viewport)."""
