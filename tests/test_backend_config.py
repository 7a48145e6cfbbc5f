"""Tests for BackendConfigHandler: azurerm -backend-config files."""

import logging

import pytest

from tfbackend.core.backend_config import BackendConfigHandler
from tfbackend.core.provisioner import ResourceNames


@pytest.fixture
def values():
    return BackendConfigHandler.build_values(ResourceNames.from_short_name("myproj01"))


def test_build_values(values):
    assert values == {
        "resource_group_name": "rg-terraform-myproj01",
        "storage_account_name": "stterraformmyproj01",
        "container_name": "tstate",
        "key": "terraform.tfstate",
    }


def test_build_values_custom_state_key():
    names = ResourceNames.from_short_name("myproj01")
    assert BackendConfigHandler.build_values(names, "env/prod.tfstate")["key"] == "env/prod.tfstate"


def test_write_backend_config(tmp_path, values):
    path = tmp_path / "backend.hcl"
    BackendConfigHandler.write_backend_config(str(path), values)
    assert path.read_text() == (
        'container_name = "tstate"\n'
        'key = "terraform.tfstate"\n'
        'resource_group_name = "rg-terraform-myproj01"\n'
        'storage_account_name = "stterraformmyproj01"\n'
    )


def test_write_creates_parent_directory(tmp_path, values):
    path = tmp_path / "infra" / "backend.hcl"
    BackendConfigHandler.write_backend_config(str(path), values)
    assert path.exists()


def test_parse_backend_config(tmp_path, values):
    path = tmp_path / "backend.hcl"
    BackendConfigHandler.write_backend_config(str(path), values)
    assert BackendConfigHandler.parse_backend_config(str(path)) == values


def test_parse_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BackendConfigHandler.parse_backend_config(str(tmp_path / "absent.hcl"))


def test_parse_invalid_file(tmp_path):
    path = tmp_path / "backend.hcl"
    path.write_text("this is { not hcl")
    with pytest.raises(ValueError):
        BackendConfigHandler.parse_backend_config(str(path))


def test_update_reports_changed_values(tmp_path, values, caplog):
    caplog.set_level(logging.WARNING)
    path = tmp_path / "backend.hcl"
    old = dict(values, storage_account_name="stterraformoldname")
    BackendConfigHandler.write_backend_config(str(path), old)

    changed = BackendConfigHandler.update_backend_config(str(path), values)

    assert changed == {"storage_account_name": "stterraformoldname"}
    assert "stterraformoldname" in caplog.text
    assert BackendConfigHandler.parse_backend_config(str(path)) == values


def test_update_replaces_unreadable_file(tmp_path, values):
    path = tmp_path / "backend.hcl"
    path.write_text("this is { not hcl")
    assert BackendConfigHandler.update_backend_config(str(path), values) == {}
    assert 'container_name = "tstate"' in path.read_text()
