"""Tests for WorkflowContext: pipeline inputs, outputs and status."""

import io

import pytest

from tfbackend.errors import ValidationError
from tfbackend.pipeline import WorkflowContext
from tfbackend.pipeline.workflow import escape_data, escape_property


def _context(environ=None):
    return WorkflowContext(environ=dict(environ or {}), stream=io.StringIO())


def _read_file_commands(path):
    """Parse name<<delimiter entries written to GITHUB_OUTPUT / GITHUB_ENV."""
    entries = {}
    lines = path.read_text().splitlines()
    i = 0
    while i < len(lines):
        name, delimiter = lines[i].split("<<", 1)
        end = lines.index(delimiter, i + 1)
        entries[name] = "\n".join(lines[i + 1:end])
        i = end + 1
    return entries


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class TestInputs:
    def test_get_input(self):
        ctx = _context({"INPUT_SHORTNAME": "  myproj01 "})
        assert ctx.get_input("shortName") == "myproj01"

    def test_get_input_with_spaces(self):
        ctx = _context({"INPUT_BACKEND_FILE": "backend.hcl"})
        assert ctx.get_input("backend file") == "backend.hcl"

    def test_missing_input_is_empty(self):
        assert _context().get_input("location") == ""

    def test_required_input_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            _context().get_input("location", required=True)
        assert exc_info.value.message == "Input required and not supplied: location"

    def test_repository_and_debug(self):
        ctx = _context({"GITHUB_REPOSITORY": "owner/repo", "RUNNER_DEBUG": "1"})
        assert ctx.repository == "owner/repo"
        assert ctx.is_debug is True
        assert _context().is_debug is False
        assert _context({"ACTIONS_STEP_DEBUG": "true"}).is_debug is True


# ---------------------------------------------------------------------------
# Outputs and exported variables
# ---------------------------------------------------------------------------

class TestOutputs:
    def test_set_output_to_file(self, tmp_path):
        output_file = tmp_path / "output"
        output_file.touch()
        ctx = _context({"GITHUB_OUTPUT": str(output_file)})
        ctx.set_output("storageAccount", "stterraformmyproj01")
        ctx.set_output("exportArmAccessKey", "export ARM_ACCESS_KEY=$(az ...)")
        entries = _read_file_commands(output_file)
        assert entries == {
            "storageAccount": "stterraformmyproj01",
            "exportArmAccessKey": "export ARM_ACCESS_KEY=$(az ...)",
        }
        assert ctx.outputs["storageAccount"] == "stterraformmyproj01"
        assert ctx.stream.getvalue() == ""

    def test_set_output_without_file(self):
        ctx = _context()
        ctx.set_output("keyVault", "kv-tf-myproj01")
        assert ctx.stream.getvalue() == "::set-output name=keyVault::kv-tf-myproj01\n"

    def test_export_variable(self, tmp_path):
        env_file = tmp_path / "env"
        env_file.touch()
        ctx = _context({"GITHUB_ENV": str(env_file)})
        ctx.export_variable("AZURE_HTTP_USER_AGENT", "GITHUBACTIONS_x")
        assert ctx.environ["AZURE_HTTP_USER_AGENT"] == "GITHUBACTIONS_x"
        assert _read_file_commands(env_file) == {"AZURE_HTTP_USER_AGENT": "GITHUBACTIONS_x"}

    def test_export_variable_without_file(self):
        ctx = _context()
        ctx.export_variable("NAME", "value")
        assert ctx.environ["NAME"] == "value"
        assert "::set-env name=NAME::value" in ctx.stream.getvalue()


# ---------------------------------------------------------------------------
# Status and masking
# ---------------------------------------------------------------------------

class TestStatus:
    def test_set_failed(self):
        ctx = _context()
        assert ctx.exit_code == 0
        ctx.set_failed('container:"tstate" create failed!')
        assert ctx.exit_code == 1
        assert ctx.stream.getvalue() == '::error::container:"tstate" create failed!\n'

    def test_set_failed_escapes_multiline(self):
        ctx = _context()
        ctx.set_failed("line one\nline two 100%")
        assert ctx.stream.getvalue() == "::error::line one%0Aline two 100%25\n"

    def test_set_secret(self):
        ctx = _context()
        ctx.set_secret("key-abc")
        assert ctx.stream.getvalue() == "::add-mask::key-abc\n"

    def test_set_secret_ignores_empty(self):
        ctx = _context()
        ctx.set_secret("")
        assert ctx.stream.getvalue() == ""


def test_escaping():
    assert escape_data("a\r\nb%") == "a%0D%0Ab%25"
    assert escape_property("a:b,c") == "a%3Ab%2Cc"
