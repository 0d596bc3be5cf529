"""
RabbitMQ Users Example - Declare broker users with Pulumi.

The dynamic provider reads its connection settings from the environment:

    export RABBITMQ_ENDPOINT=http://localhost:15672
    export RABBITMQ_USERNAME=guest RABBITMQ_PASSWORD=guest
    pulumi config set --secret monitoringPassword ...
    pulumi up
"""

import pulumi

from burrow.pulumi_providers import RabbitMQUser, RabbitMQUserInputs

config = pulumi.Config()

# Service account with management UI access
svc_user = RabbitMQUser(
    "svc-user",
    RabbitMQUserInputs(
        name="svc-user",
        password=config.require_secret("svcPassword"),
        tags=["management"],
    ),
)

# Read-only monitoring account
monitoring = RabbitMQUser(
    "monitoring",
    RabbitMQUserInputs(
        name="monitoring",
        password=config.require_secret("monitoringPassword"),
        tags=["monitoring"],
    ),
)

# Adopt the default admin user instead of creating it
admin = RabbitMQUser(
    "admin",
    RabbitMQUserInputs(
        name="guest",
        password=config.require_secret("guestPassword"),
        tags=["administrator"],
    ),
    opts=pulumi.ResourceOptions(import_="guest"),
)

pulumi.export("users", [svc_user.name, monitoring.name, admin.name])
