"""
Core provisioning functionality for tfbackend.

This module provides the business logic of a run:
- Executing Azure CLI commands
- Provisioning the backend resources
- Building the telemetry user agent
- Writing the Terraform backend config file
"""

from .az_runner import AzCliRunner, CommandResult
from .backend_config import BackendConfigHandler
from .provisioner import Provisioner, ProvisionResult, ResourceNames, build_export_command
from .user_agent import build_user_agent

__all__ = [
    "AzCliRunner",
    "CommandResult",
    "BackendConfigHandler",
    "Provisioner",
    "ProvisionResult",
    "ResourceNames",
    "build_export_command",
    "build_user_agent",
]
