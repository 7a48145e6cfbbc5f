"""
User agent tag exported for Azure CLI telemetry.
"""

import hashlib
from typing import Optional

USER_AGENT_ENV_VAR = "AZURE_HTTP_USER_AGENT"
DEFAULT_ACTION_NAME = "AzureTerraformSetup"


def hash_repository(repository: Optional[str]) -> str:
    """Return the sha256 hex digest of a repository id ("undefined" when unset)."""
    value = repository if repository else "undefined"
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def build_user_agent(
    repository: Optional[str],
    existing_prefix: Optional[str] = "",
    action_name: str = DEFAULT_ACTION_NAME,
) -> str:
    """
    Build the AZURE_HTTP_USER_AGENT value for this run.

    The repository id is hashed so the tag identifies a repository
    without revealing it. An existing user agent is kept as a prefix.

    Args:
        repository: Repository identifier, e.g. "owner/name"
        existing_prefix: Current AZURE_HTTP_USER_AGENT value, if any
        action_name: Name embedded in the tag

    Returns:
        "[<prefix>+]GITHUBACTIONS_<action_name>_<sha256 hex>"
    """
    prefix = f"{existing_prefix}+" if existing_prefix else ""
    return f"{prefix}GITHUBACTIONS_{action_name}_{hash_repository(repository)}"
