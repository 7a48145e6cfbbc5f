"""
Default settings for tfbackend.

These are the values used when no override file is supplied.
"""

DEFAULT_SETTINGS = {
    "version": "1.0.0",

    # Azure CLI binary, resolved on PATH at run time
    "cli_binary": "az",

    # Seconds to wait for a single az command; None waits forever
    "command_timeout": None,

    # Allowed short name length (inclusive)
    "short_name": {
        "min": 6,
        "max": 13,
    },

    "container_name": "tstate",
    "secret_name": "terraform-backend-key",

    "storage": {
        "sku": "Standard_LRS",
        "encryption_services": "blob",
    },

    # Telemetry tag exported as AZURE_HTTP_USER_AGENT
    "user_agent": {
        "action_name": "AzureTerraformSetup",
    },

    # Written to the optional -backend-config file
    "backend": {
        "state_key": "terraform.tfstate",
    },

    "logging": {
        "level": "INFO",
        "file": False,
    },
}
