"""Pulumi dynamic providers for Burrow resources."""

from .user import RabbitMQUser, RabbitMQUserInputs, RabbitMQUserProvider

__all__ = [
    "RabbitMQUser",
    "RabbitMQUserInputs",
    "RabbitMQUserProvider",
]
