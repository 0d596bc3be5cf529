"""
Pydantic models for broker users.

This module contains the records passed between Burrow's layers:
- ManagedUser: declared/observed state of one user (what the host persists)
- UserDiff: explicit before/after change set used by updates
- UserSettings / BrokerUser: management API request and response bodies
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer, field_validator

logger = logging.getLogger(__name__)


# =============================================================================
# Declared State
# =============================================================================

class ManagedUser(BaseModel):
    """A broker user as declared by configuration and refreshed from the broker.

    Attributes:
        id: Resource identity; None until the user is created or imported
        name: Username, immutable once created
        password: Write-only password, never read back from the broker
        tags: Ordered permission tags (e.g. ["administrator", "monitoring"])

    Example:
        >>> ManagedUser(name="svc-user", password="p1", tags=["management"])
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str | None = None
    name: str = Field(min_length=1)
    password: SecretStr = SecretStr("")
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _drop_non_string_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            kept = [tag for tag in value if isinstance(tag, str)]
            if len(kept) != len(value):
                logger.debug(f"Dropped {len(value) - len(kept)} non-string tag(s)")
            return kept
        return value

    def to_state(self) -> dict[str, Any]:
        """Record persisted by the host: identity, name and tags only."""
        return {"id": self.id, "name": self.name, "tags": list(self.tags)}


class UserDiff(BaseModel):
    """Change set between the last applied state and the declared state."""

    before: ManagedUser
    after: ManagedUser

    @property
    def name_changed(self) -> bool:
        return self.before.name != self.after.name

    @property
    def password_changed(self) -> bool:
        return self.before.password.get_secret_value() != self.after.password.get_secret_value()

    @property
    def tags_changed(self) -> bool:
        return self.before.tags != self.after.tags

    @property
    def changed_fields(self) -> list[str]:
        changed = []
        if self.name_changed:
            changed.append("name")
        if self.password_changed:
            changed.append("password")
        if self.tags_changed:
            changed.append("tags")
        return changed

    @property
    def requires_replacement(self) -> bool:
        """A renamed user is a different user on the broker."""
        return self.name_changed


# =============================================================================
# Management API Bodies
# =============================================================================

class UserSettings(BaseModel):
    """Body of ``PUT /api/users/{name}``.

    An unset or empty password is left out of the request, which the broker
    treats as "keep the current password".
    """

    password: SecretStr | None = None
    tags: str = ""

    @field_serializer("password", when_used="json")
    def _reveal_password(self, value: SecretStr | None) -> str | None:
        return value.get_secret_value() if value is not None else None

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        if not payload.get("password"):
            payload.pop("password", None)
        return payload


class BrokerUser(BaseModel):
    """Body of ``GET /api/users/{name}``."""

    model_config = ConfigDict(extra="ignore")

    name: str
    tags: str = ""
    password_hash: str | None = None
    hashing_algorithm: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _join_tag_list(cls, value: Any) -> Any:
        # RabbitMQ 3.9+ reports tags as a JSON list instead of a string
        if value is None:
            return ""
        if isinstance(value, list):
            return ",".join(str(tag) for tag in value)
        return value
