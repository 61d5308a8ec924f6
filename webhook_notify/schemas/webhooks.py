"""Pydantic models for GitHub webhook payloads.

Only the fields the notifier renders are declared; everything else in the
payload is ignored.
"""

from pydantic import BaseModel, Field, field_validator


class RepositoryRef(BaseModel):
    """Repository identity carried by repository-scoped events."""

    full_name: str


class EarlyParse(BaseModel):
    """First-pass view of any event, used to pick the repository secret."""

    repository: RepositoryRef | None = None

    @property
    def full_name(self) -> str:
        return self.repository.full_name if self.repository else ""


class PingEvent(BaseModel):
    """GitHub ``ping`` event sent when a webhook is created.

    Reference: https://docs.github.com/en/webhooks/webhook-events-and-payloads#ping
    """

    zen: str
    hook_id: int | None = None
    repository: RepositoryRef | None = None


class Commit(BaseModel):
    """A single commit within a GitHub push event."""

    id: str
    message: str
    url: str

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def title(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


class PushEvent(BaseModel):
    """GitHub push webhook event payload.

    Reference: https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
    """

    ref: str
    before: str
    after: str
    compare: str
    repository: RepositoryRef
    commits: list[Commit] = Field(default_factory=list)

    @field_validator("ref")
    @classmethod
    def _ref_has_separator(cls, value: str) -> str:
        if "/" not in value:
            msg = f"ref {value!r} has no path separator"
            raise ValueError(msg)
        return value

    @property
    def branch_name(self) -> str:
        return self.ref.rsplit("/", 1)[-1]


GitHubEvent = PingEvent | PushEvent
