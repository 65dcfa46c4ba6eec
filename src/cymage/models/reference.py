"""Source file references harvested from test plans."""

from pydantic import BaseModel, ConfigDict, Field


class FileReference(BaseModel):
    """Path-like token found in a plan, optionally resolved to a real file.

    Unresolved references are kept: their ``path`` is the raw candidate and
    reading them later simply reports "not found".

    Attributes:
        candidate: Token as written in the plan (e.g. ``members/memberentry.pl``).
        resolved: Path relative to the project root, when a file was located.
    """

    model_config = ConfigDict(frozen=True)

    candidate: str = Field(description="Raw token from the plan text")
    resolved: str | None = Field(default=None, description="Root-relative path if found")

    @property
    def path(self) -> str:
        """Path used downstream: the resolved path, else the raw candidate."""
        return self.resolved if self.resolved is not None else self.candidate

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None
