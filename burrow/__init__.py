"""
Burrow - Declarative RabbitMQ user management.

Reconciles declared broker users (name, password, permission tags) against the
RabbitMQ management API: create when missing, update when changed, refresh from
the broker, delete on removal. Usable directly, from the command line, or as a
Pulumi dynamic provider (burrow.pulumi_providers, needs the "pulumi" extra).
"""

from .client import BrokerAdminClient
from .models import ManagedUser, UserDiff
from .retry import RetryPolicy
from .settings import BurrowSettings, get_settings, reload_settings
from .users import UserResource, decode_tags, encode_tags

__version__ = "0.1.0"
__all__ = [
    "BrokerAdminClient",
    "BurrowSettings",
    "ManagedUser",
    "RetryPolicy",
    "UserDiff",
    "UserResource",
    "decode_tags",
    "encode_tags",
    "get_settings",
    "reload_settings",
]
