"""Pulumi dynamic provider for RabbitMQ users.

This module exposes UserResource to the Pulumi engine. The provider runs in
Pulumi's dynamic provider process and builds its management API client from
BurrowSettings there, so connection details come from that process's
environment (BURROW_* or RABBITMQ_* variables).
"""

from typing import Any

import pulumi
from pulumi import Input, Output
from pulumi.dynamic import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    ResourceProvider,
    UpdateResult,
)

from burrow.client import BrokerAdminClient
from burrow.models import ManagedUser, UserDiff
from burrow.settings import get_settings
from burrow.users import UserResource


def _user_from_props(props: dict[str, Any], id: str | None = None) -> ManagedUser:
    """Build a ManagedUser from provider properties.

    Args:
        props: Resource properties (name, password, tags)
        id: Resource ID, if the resource already exists

    Returns:
        ManagedUser record
    """
    return ManagedUser(
        id=id,
        name=props.get("name") or id,
        password=props.get("password") or "",
        tags=props.get("tags") or [],
    )


def _outs(user: ManagedUser) -> dict[str, Any]:
    """Outputs stored by Pulumi; the password is the declared value."""
    return {
        "name": user.name,
        "password": user.password.get_secret_value(),
        "tags": list(user.tags),
    }


class RabbitMQUserInputs:
    """Input properties for RabbitMQUser resource.

    Attributes:
        name: Username on the broker
        password: User password (stored as a Pulumi secret)
        tags: Permission tags (e.g. ["administrator"])
    """

    def __init__(
        self,
        name: Input[str],
        password: Input[str],
        tags: Input[list[str]] | None = None,
    ):
        """Initialize RabbitMQUserInputs.

        Args:
            name: Username on the broker
            password: User password
            tags: Permission tags (optional)
        """
        self.name = name
        self.password = password
        self.tags = tags or []


class RabbitMQUserProvider(ResourceProvider):
    """Pulumi dynamic provider for RabbitMQ users.

    This provider manages users through the RabbitMQ management API. It
    supports check, create, read (refresh and import), update, delete, and
    diff operations.
    """

    def _resource(self) -> tuple[BrokerAdminClient, UserResource]:
        settings = get_settings()
        client = BrokerAdminClient.from_settings(settings)
        return client, UserResource.from_settings(client, settings)

    def check(self, olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        """Validate inputs before any remote call.

        Args:
            olds: Previous inputs
            news: New inputs

        Returns:
            CheckResult with normalized inputs and any failures
        """
        failures = []
        if not news.get("name"):
            failures.append(CheckFailure("name", "name must be a non-empty string"))
        if not news.get("password"):
            failures.append(CheckFailure("password", "password must be a non-empty string"))

        inputs = dict(news)
        tags = news.get("tags") or []
        if isinstance(tags, (list, tuple)):
            inputs["tags"] = [tag for tag in tags if isinstance(tag, str)]
        else:
            failures.append(CheckFailure("tags", "tags must be a list of strings"))
        return CheckResult(inputs, failures)

    def create(self, props: dict[str, Any]) -> CreateResult:
        """Create a user.

        Args:
            props: Resource properties

        Returns:
            CreateResult with the username as ID
        """
        client, resource = self._resource()
        with client:
            user = resource.create(_user_from_props(props))
        return CreateResult(id_=user.id, outs=_outs(user))

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        """Refresh a user from the broker.

        Also serves imports, where props is empty and only the ID is known.

        Args:
            id: Resource ID (username)
            props: Last known properties

        Returns:
            ReadResult; an empty ID tells Pulumi the user is gone
        """
        client, resource = self._resource()
        user = resource.import_state(id) if not props else _user_from_props(props, id)
        with client:
            resource.read(user)
        if user.id is None:
            return ReadResult(id_=None, outs={})
        return ReadResult(id_=user.id, outs=_outs(user))

    def update(
        self, id: str, old_props: dict[str, Any], new_props: dict[str, Any]
    ) -> UpdateResult:
        """Update a user's password and/or tags.

        Args:
            id: Resource ID (username)
            old_props: Old resource properties
            new_props: New resource properties

        Returns:
            UpdateResult with refreshed outputs
        """
        diff = UserDiff(
            before=_user_from_props(old_props, id),
            after=_user_from_props(new_props),
        )
        client, resource = self._resource()
        with client:
            user = resource.update(diff)
        return UpdateResult(outs=_outs(user))

    def delete(self, id: str, props: dict[str, Any]) -> None:
        """Delete a user.

        Args:
            id: Resource ID (username)
            props: Resource properties
        """
        client, resource = self._resource()
        with client:
            resource.delete(_user_from_props(props, id))

    def diff(
        self, id: str, old_props: dict[str, Any], new_props: dict[str, Any]
    ) -> DiffResult:
        """Check what changed between old and new properties.

        Args:
            id: Resource ID (username)
            old_props: Old resource properties
            new_props: New resource properties

        Returns:
            DiffResult; a new name replaces the user
        """
        diff = UserDiff(
            before=_user_from_props(old_props, id),
            after=_user_from_props(new_props),
        )

        return DiffResult(
            changes=bool(diff.changed_fields),
            replaces=["name"] if diff.requires_replacement else [],
            stables=[],
            delete_before_replace=True,
        )


class RabbitMQUser(pulumi.dynamic.Resource):
    """Pulumi resource for managing RabbitMQ users.

    Attributes:
        name: Username on the broker
        password: User password (secret)
        tags: Permission tags

    Example:
        >>> RabbitMQUser(
        ...     "svc-user",
        ...     RabbitMQUserInputs(name="svc-user", password=pw, tags=["management"]),
        ... )

        Adopting an existing user:
        >>> RabbitMQUser(
        ...     "guest",
        ...     RabbitMQUserInputs(name="guest", password=pw),
        ...     opts=pulumi.ResourceOptions(import_="guest"),
        ... )
    """

    name: Output[str]
    password: Output[str]
    tags: Output[list[str]]

    def __init__(
        self,
        resource_name: str,
        inputs: RabbitMQUserInputs,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """Initialize RabbitMQUser resource.

        Args:
            resource_name: Pulumi resource name
            inputs: User input properties
            opts: Pulumi resource options
        """
        props = {
            "name": inputs.name,
            "password": inputs.password,
            "tags": inputs.tags,
        }

        opts = pulumi.ResourceOptions.merge(
            opts, pulumi.ResourceOptions(additional_secret_outputs=["password"])
        )

        super().__init__(
            RabbitMQUserProvider(),
            resource_name,
            props,
            opts,
        )
