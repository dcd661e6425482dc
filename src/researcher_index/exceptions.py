"""Exceptions raised by the researcher index core."""


class ResearcherIndexError(Exception):
    """Base class for researcher index errors."""


class EmptyNameError(ResearcherIndexError, ValueError):
    """Raised when a record has no name left after normalization."""


class DuplicateIdentifierError(ResearcherIndexError, ValueError):
    """Raised when a suggested id is already owned by a different entity."""

    def __init__(self, entity_id: int, owner_name: str) -> None:
        super().__init__(f"Identifier {entity_id} is already assigned to {owner_name!r}")
        self.entity_id = entity_id
        self.owner_name = owner_name


class UnknownEntityError(ResearcherIndexError, KeyError):
    """Raised when an entity is missing from an external model's output."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown entity"


class RankedListClosedError(ResearcherIndexError, RuntimeError):
    """Raised when offering to a ranked list whose results were already read."""
