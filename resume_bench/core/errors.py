from typing import Iterable, List


class ResumeParseError(Exception):
    """Base class for failures that stop a document/profile pair from parsing."""


class InputUnreadable(ResumeParseError):
    """The source document could not be turned into text."""


class UnsupportedDocument(InputUnreadable):
    """The document format is not one we can extract text from."""

    def __init__(self, content_type: str):
        super().__init__(f"Unsupported content type: {content_type or 'unknown'}")
        self.content_type = content_type


class ProfileNotFound(ResumeParseError):
    """A caller asked for an extractor profile that is not registered."""

    def __init__(self, profile_id: str, available: Iterable[str]):
        self.profile_id = profile_id
        self.available: List[str] = list(available)
        super().__init__(
            f"Parser profile '{profile_id}' not found. Available: {', '.join(self.available)}"
        )
