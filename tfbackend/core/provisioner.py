"""
Provisioning of an Azure remote state backend for Terraform.

The run is strictly sequential: every az command completes before the
next one starts, and the first failure ends the run. Nothing that was
already created is rolled back.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import Settings
from ..errors import CommandError, ErrorKind, PostconditionError, ProvisioningError
from ..pipeline import WorkflowContext
from ..security import InputSanitizer, OutputRedactor, SecureString
from ..utils import resolve_cli_path
from .az_runner import AzCliRunner
from .backend_config import BackendConfigHandler
from .user_agent import USER_AGENT_ENV_VAR, build_user_agent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceNames:
    """Names of the Azure resources that make up the backend."""
    resource_group: str
    storage_account: str
    key_vault: str
    container: str = "tstate"

    @classmethod
    def from_short_name(cls, short_name: str, container: str = "tstate") -> "ResourceNames":
        return cls(
            resource_group=f"rg-terraform-{short_name}",
            storage_account=f"stterraform{short_name}",
            key_vault=f"kv-tf-{short_name}",
            container=container,
        )


@dataclass
class ProvisionResult:
    """Outcome of a provisioning run."""
    success: bool
    outputs: Dict[str, str] = field(default_factory=dict)
    error: Optional[ProvisioningError] = None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None


def build_export_command(secret_name: str, key_vault_name: str) -> str:
    """
    Shell command that exports ARM_ACCESS_KEY from the key vault.

    The secret is read when the command runs, so the key itself never
    appears in the command text.
    """
    return (
        f"export ARM_ACCESS_KEY=$(az keyvault secret show --name '{secret_name}' "
        f"--vault-name '{key_vault_name}' --query value -o tsv)"
    )


class Provisioner:
    """
    Creates the resource group, storage account, container and key vault
    backing a Terraform azurerm backend, then publishes their names.

    Example:
        >>> result = Provisioner("myproj01", "westeurope").run()
        >>> result.outputs["storageAccount"]
        'stterraformmyproj01'
    """

    def __init__(
        self,
        short_name: str,
        location: str,
        context: Optional[WorkflowContext] = None,
        settings: Optional[Settings] = None,
        runner: Optional[AzCliRunner] = None,
        backend_config_file: Optional[str] = None,
    ):
        """
        Args:
            short_name: Identifier all resource names are derived from
            location: Azure region, passed through unvalidated
            context: Pipeline step I/O (defaults to the process environment)
            settings: Run settings (defaults only when omitted)
            runner: Command runner; created from the resolved az path when omitted
            backend_config_file: Optional path for a -backend-config file
        """
        self.short_name = short_name
        self.location = location
        self.context = context or WorkflowContext()
        self.settings = settings or Settings(environ={})
        self.backend_config_file = backend_config_file or None
        self.runner = runner
        self.redactor = getattr(runner, "redactor", None) or OutputRedactor()

    def run(self) -> ProvisionResult:
        """
        Execute the whole run and report its status to the pipeline.

        Never raises: every failure is reported through set_failed() and
        returned in the result.
        """
        try:
            self._provision()
        except ProvisioningError as e:
            self.context.set_failed(e.message)
            return ProvisionResult(False, dict(self.context.outputs), e)
        except Exception as e:  # noqa: BLE001 - every failure must reach the pipeline
            logger.debug("Unexpected error during provisioning", exc_info=True)
            error = ProvisioningError(self.redactor.redact(str(e)) or type(e).__name__)
            self.context.set_failed(error.message)
            return ProvisionResult(False, dict(self.context.outputs), error)

        return ProvisionResult(True, dict(self.context.outputs))

    def tag_identity(self) -> str:
        """Export the telemetry user agent before any az call."""
        user_agent = build_user_agent(
            self.context.repository,
            self.context.environ.get(USER_AGENT_ENV_VAR, ""),
            self.settings.get("user_agent.action_name", "AzureTerraformSetup"),
        )
        self.context.export_variable(USER_AGENT_ENV_VAR, user_agent)
        return user_agent

    def _get_runner(self) -> AzCliRunner:
        if self.runner is None:
            cli_path = resolve_cli_path(self.settings.get("cli_binary", "az"))
            self.runner = AzCliRunner(
                cli_path,
                redactor=self.redactor,
                env=dict(self.context.environ),
                timeout=self.settings.get("command_timeout"),
            )
        return self.runner

    def _provision(self):
        self.tag_identity()
        runner = self._get_runner()

        runner.run(["--version"])
        runner.run(["account", "show"])
        subscription_id = runner.capture(["account", "show", "--query", "id", "-o", "tsv"])
        logger.info(f"subscriptionId: {subscription_id}")

        logger.info(f"shortName: {self.short_name}")
        short_name = InputSanitizer.sanitize_short_name(
            self.short_name,
            self.settings.get("short_name.min", InputSanitizer.SHORT_NAME_MIN_LENGTH),
            self.settings.get("short_name.max", InputSanitizer.SHORT_NAME_MAX_LENGTH),
        )
        logger.info(f"location: {self.location}")

        names = ResourceNames.from_short_name(
            short_name, self.settings.get("container_name", "tstate")
        )
        logger.info(f"resourceGroupName: {names.resource_group}")
        logger.info(f"storageAccountName: {names.storage_account}")
        logger.info(f"keyVaultName: {names.key_vault}")

        self.create_resource_group(names, subscription_id)
        storage_key = self.create_storage_account(names)
        try:
            self.create_container(names, storage_key)
            self.create_key_vault(names)
            self.store_backend_key(names, storage_key)
        finally:
            storage_key.clear()

        secret_name = self.settings.get("secret_name", "terraform-backend-key")
        export_arm_access_key = build_export_command(secret_name, names.key_vault)
        logger.info(f"exportArmAccessKey: {export_arm_access_key}")

        self.context.set_output("exportArmAccessKey", export_arm_access_key)
        self.context.set_output("storageAccount", names.storage_account)
        self.context.set_output("container", names.container)
        self.context.set_output("keyVault", names.key_vault)
        self.context.set_output("resourceGroup", names.resource_group)

        if self.backend_config_file:
            BackendConfigHandler.update_backend_config(
                self.backend_config_file,
                BackendConfigHandler.build_values(
                    names, self.settings.get("backend.state_key", "terraform.tfstate")
                ),
            )
            self.context.set_output("backendConfigFile", self.backend_config_file)

    def create_resource_group(self, names: ResourceNames, subscription_id: str):
        logger.info(
            f"==== Creating Resource Group: {names.resource_group} "
            f"in Location: {self.location} ===="
        )
        self.runner.run(
            ["group", "create", "--name", names.resource_group, "--location", self.location]
        )
        exists = self._check_exists(
            ["group", "exists", "-n", names.resource_group, "--subscription", subscription_id]
        )
        if not exists:
            raise PostconditionError(
                f'resourceGroupName:"{names.resource_group}" create failed!',
                resource=names.resource_group,
            )

    def create_storage_account(self, names: ResourceNames) -> SecureString:
        """Create the storage account and return its primary key."""
        logger.info(
            f"==== Creating Storage Account: {names.storage_account} "
            f"in Location: {self.location} ===="
        )
        self.runner.run([
            "storage", "account", "create",
            "--name", names.storage_account,
            "--resource-group", names.resource_group,
            "--location", self.location,
            "--encryption-services", self.settings.get("storage.encryption_services", "blob"),
            "--sku", self.settings.get("storage.sku", "Standard_LRS"),
        ])

        logger.info(
            f"==== Fetch Storage Account Key: {names.storage_account} "
            f"in Location: {self.location} ===="
        )
        value = self.runner.capture(
            [
                "storage", "account", "keys", "list",
                "--resource-group", names.resource_group,
                "--account-name", names.storage_account,
                "--query", "[0].value",
                "-o", "tsv",
            ],
            silent=True,
        )
        if not value:
            raise CommandError(
                f"No access key returned for storage account {names.storage_account}"
            )

        storage_key = SecureString(value)
        self.redactor.add_sensitive_values({"storage_account_key": storage_key})
        self.context.set_secret(value)
        return storage_key

    def create_container(self, names: ResourceNames, storage_key: SecureString):
        logger.info(
            f"==== Creating Container: {names.container} in Storage Account: "
            f"{names.storage_account} in Location: {self.location} ===="
        )
        self.runner.run([
            "storage", "container", "create",
            "--name", names.container,
            "--account-name", names.storage_account,
            "--account-key", storage_key.get_value(),
        ])
        exists = self._check_exists([
            "storage", "container", "exists",
            "--account-name", names.storage_account,
            "--account-key", storage_key.get_value(),
            "--name", names.container,
            "--query", "exists",
            "-o", "tsv",
        ])
        if not exists:
            raise PostconditionError(
                f'container:"{names.container}" create failed!',
                resource=names.container,
            )

    def create_key_vault(self, names: ResourceNames):
        logger.info(
            f"==== Creating KeyVault: {names.key_vault} in Location: {self.location} ===="
        )
        self.runner.run([
            "keyvault", "create",
            "--name", names.key_vault,
            "--resource-group", names.resource_group,
            "--location", self.location,
        ])

    def store_backend_key(self, names: ResourceNames, storage_key: SecureString) -> Optional[str]:
        """Store the storage key as a key vault secret and return the secret id."""
        secret_name = self.settings.get("secret_name", "terraform-backend-key")
        # The response contains the secret value
        response = self.runner.capture(
            [
                "keyvault", "secret", "set",
                "-n", secret_name,
                "--value", storage_key.get_value(),
                "--vault-name", names.key_vault,
            ],
            silent=True,
        )
        try:
            secret = json.loads(response)
        except json.JSONDecodeError as e:
            raise CommandError(f"Unexpected response from keyvault secret set: {e}")

        secret_id = secret.get("id") if isinstance(secret, dict) else None
        logger.info(f"secretId: {secret_id}")
        return secret_id

    def _check_exists(self, args) -> bool:
        """Run an existence query; only a "true" response counts."""
        response = self.runner.capture(args, silent=True)
        return response.strip().lower() == "true"
