"""
Handler for Terraform backend config files.

Writes the azurerm settings produced by a run to a file usable with
`terraform init -backend-config=<file>`, and reads an existing one
back so changes can be reported before it is overwritten.
"""

import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)


class BackendConfigHandler:
    """Parse and write azurerm -backend-config files."""

    @staticmethod
    def build_values(names, state_key: str = "terraform.tfstate") -> Dict[str, str]:
        """
        Map provisioned resource names to azurerm backend settings.

        The access key is deliberately absent: consumers export
        ARM_ACCESS_KEY from the key vault instead.

        Args:
            names: ResourceNames of the provisioned backend
            state_key: Blob name of the state file

        Returns:
            Dict of backend setting name to value
        """
        return {
            "resource_group_name": names.resource_group,
            "storage_account_name": names.storage_account,
            "container_name": names.container,
            "key": state_key,
        }

    @staticmethod
    def parse_backend_config(file_path: str) -> Dict[str, Any]:
        """
        Parse a backend config file.

        Uses hcl2 for parsing. Single-element lists and surrounding
        quotes are removed (both depend on the hcl2 version).

        Raises:
            FileNotFoundError: If file does not exist.
            ValueError: If file cannot be parsed.
        """
        import hcl2

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                parsed = hcl2.load(f)
        except FileNotFoundError:
            raise
        except Exception as e:
            raise ValueError(f"Failed to parse backend config file: {e}")

        return {key: BackendConfigHandler._unwrap(value) for key, value in parsed.items()}

    @staticmethod
    def write_backend_config(file_path: str, values: Dict[str, Any]) -> None:
        """
        Write backend settings to a file in HCL format, one per line.

        Args:
            file_path: Path to write.
            values: Dict of backend setting name to value.
        """
        lines = []
        for name, value in sorted(values.items()):
            lines.append(f'{name} = {BackendConfigHandler._format_value(value)}')

        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))
            if lines:
                f.write("\n")

    @staticmethod
    def update_backend_config(file_path: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Write backend settings, logging any value that changes.

        An unreadable existing file is replaced.

        Returns:
            Dict of changed setting name to its previous value
        """
        changed: Dict[str, Any] = {}

        if os.path.exists(file_path):
            try:
                existing = BackendConfigHandler.parse_backend_config(file_path)
            except ValueError as e:
                logger.warning(f"Replacing unreadable backend config {file_path}: {e}")
                existing = {}

            for name, value in sorted(values.items()):
                previous = existing.get(name)
                if previous is not None and str(previous) != str(value):
                    changed[name] = previous
                    logger.warning(
                        f"Backend config {file_path}: {name} changes from "
                        f"'{previous}' to '{value}'"
                    )

        BackendConfigHandler.write_backend_config(file_path, values)
        logger.info(f"Wrote backend config: {file_path}")
        return changed

    @staticmethod
    def _unwrap(value: Any) -> Any:
        if isinstance(value, list) and len(value) == 1:
            value = value[0]
        if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        return value

    @staticmethod
    def _format_value(value: Any) -> str:
        """Format a Python value as an HCL literal."""
        if isinstance(value, bool):
            return "true" if value else "false"
        elif isinstance(value, (int, float)):
            return str(value)
        escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
