"""Reconcile declared broker users against the RabbitMQ management API.

UserResource implements the create/read/update/delete lifecycle for a single
user. Every operation works on a ManagedUser record in place and strictly
sequences its remote calls: an update's password call completes before its
tags call, and both complete before the trailing read.
"""

import logging
from collections.abc import Iterable

import httpx

from .client import BrokerAdminClient, status_line
from .errors import BrokerAPIError, NotFoundError, RetryTimeoutError, UserCreationError
from .models import ManagedUser, UserDiff, UserSettings
from .retry import RetryPolicy
from .settings import BurrowSettings

logger = logging.getLogger(__name__)


def encode_tags(tags: Iterable[object]) -> str:
    """Join tags into the broker's comma-separated form.

    Non-string entries are skipped. Commas inside a tag are not escaped, so
    such a tag comes back split in two on the next read.
    """
    return ",".join(tag for tag in tags if isinstance(tag, str))


def decode_tags(value: str) -> list[str]:
    """Split the broker's comma-separated tags string."""
    return value.split(",")


class UserResource:
    """Create, read, update and delete one broker user.

    Args:
        client: Management API client, shared across resources
        create_policy: Retry policy for user creation (default: 20 minutes,
            2 second fixed interval)
    """

    def __init__(self, client: BrokerAdminClient, create_policy: RetryPolicy | None = None):
        self.client = client
        self.create_policy = create_policy or RetryPolicy(timeout=1200.0, interval=2.0)

    @classmethod
    def from_settings(cls, client: BrokerAdminClient, settings: BurrowSettings) -> "UserResource":
        policy = RetryPolicy(timeout=settings.create_timeout, interval=settings.retry_interval)
        return cls(client, create_policy=policy)

    def create(self, user: ManagedUser) -> ManagedUser:
        """Create the user, retrying until the create policy times out.

        On success the record's identity is set and it is refreshed from the
        broker. Errors from that refresh are not retried.

        Raises:
            ValueError: If the password is empty
            UserCreationError: If no attempt succeeded before the timeout
        """
        if not user.password.get_secret_value():
            raise ValueError(f"User {user.name} needs a non-empty password")

        name = user.name
        settings = UserSettings(password=user.password, tags=encode_tags(user.tags))

        logger.debug(f"Attempting to create user {name}")

        def put_once() -> httpx.Response:
            response = self.client.put_user(name, settings)
            if not response.is_success:
                raise BrokerAPIError(
                    f"Error creating RabbitMQ user: {status_line(response)}",
                    response.status_code,
                    response.reason_phrase,
                )
            return response

        try:
            self.create_policy.call(put_once, description=f"Create user {name}")
        except RetryTimeoutError as e:
            raise UserCreationError(
                f"expected user {name} to be created but received error: {e.last_error}"
            ) from e.last_error

        user.id = name
        logger.info(f"Created user {name}")
        return self.read(user)

    def read(self, user: ManagedUser) -> ManagedUser:
        """Refresh the record from the broker.

        A user missing on the broker clears the identity instead of raising.
        Tags are only overwritten when the broker reports a non-empty tags
        string; an empty string leaves the local tags as they are.
        """
        name = user.id
        if name is None:
            raise ValueError("Cannot read a user that has no identity")

        try:
            remote = self.client.get_user(name)
        except NotFoundError:
            logger.info(f"User {name} not found on the broker, removing from state")
            user.id = None
            return user

        logger.debug(f"User retrieved: {remote.name} (tags: {remote.tags!r})")

        user.name = remote.name
        if remote.tags:
            user.tags = decode_tags(remote.tags)
        return user

    def update(self, diff: UserDiff) -> ManagedUser:
        """Push changed fields to the broker, then refresh.

        A password change resends the full tags string alongside the new
        password; a tags change sends the tags alone. There is no retry and no
        rollback: if the tags call fails after the password call succeeded,
        the new password stays in place.

        Raises:
            BrokerAPIError: On a status of 400 or above from either call
        """
        user = diff.after
        name = diff.before.id
        if name is None:
            raise ValueError("Cannot update a user that has no identity")

        if diff.password_changed:
            logger.debug(f"Attempting to update password for {name}")
            response = self.client.put_user(
                name, UserSettings(password=user.password, tags=encode_tags(user.tags))
            )
            self._raise_for_status(response, "updating")

        if diff.tags_changed:
            logger.debug(f"Attempting to update tags for {name}")
            response = self.client.put_user(name, UserSettings(tags=encode_tags(user.tags)))
            self._raise_for_status(response, "updating")

        user.id = name
        return self.read(user)

    def delete(self, user: ManagedUser) -> None:
        """Delete the user. A user that is already gone counts as deleted.

        Raises:
            BrokerAPIError: On any other status of 400 or above
        """
        name = user.id or user.name
        logger.debug(f"Attempting to delete user {name}")

        response = self.client.delete_user(name)
        if response.status_code == 404:
            logger.debug(f"User {name} was already deleted")
            return
        self._raise_for_status(response, "deleting")
        logger.info(f"Deleted user {name}")

    def import_state(self, name: str) -> ManagedUser:
        """Seed a record from an existing user's name; read() fills in the rest."""
        return ManagedUser(id=name, name=name)

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.status_code >= 400:
            raise BrokerAPIError(
                f"Error {action} RabbitMQ user: {status_line(response)}",
                response.status_code,
                response.reason_phrase,
            )
