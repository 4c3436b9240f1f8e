"""Tests for the ``item`` command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from attrstore.cli import cli
from tests.conftest import KeyFiles


@pytest.fixture
def domain(cli_runner: CliRunner) -> str:
    result = cli_runner.invoke(cli, ["domain", "create", "settings"])
    assert result.exit_code == 0, result.output
    return "settings"


@pytest.mark.usefixtures("_isolated_root")
class TestItemCommands:
    def test_set_then_get(self, cli_runner: CliRunner, domain: str) -> None:
        assert cli_runner.invoke(cli, ["item", "set", domain, "web", "port", "80"]).exit_code == 0
        cli_runner.invoke(cli, ["item", "set", domain, "web", "port", "8080"])
        result = cli_runner.invoke(cli, ["--json", "item", "get", domain, "web", "port"])
        data = json.loads(result.stdout)["data"]
        assert data["value"] == "8080"
        assert data["decrypted"] is False

    def test_get_absent_is_success(self, cli_runner: CliRunner, domain: str) -> None:
        result = cli_runner.invoke(cli, ["-q", "item", "get", domain, "web", "nothing"])
        assert result.exit_code == 0
        assert result.stdout.strip() == ""
        rich = cli_runner.invoke(cli, ["item", "get", domain, "web", "nothing"])
        assert "(absent)" in rich.stdout

    def test_set_on_missing_domain(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["item", "set", "absent", "web", "port", "80"])
        assert result.exit_code == 1
        assert "DOMAIN_NOT_FOUND" in result.stderr

    def test_json_export(self, cli_runner: CliRunner, domain: str) -> None:
        cli_runner.invoke(cli, ["item", "set", domain, "web", "test_key_1", "test_value_1"])
        cli_runner.invoke(cli, ["item", "set", domain, "web", "test_key_4", "test_value_4"])
        result = cli_runner.invoke(cli, ["item", "json", domain, "web"])
        assert result.exit_code == 0
        assert result.stdout.strip() == (
            '[{"name":"test_key_4","value":"test_value_4"},'
            '{"name":"test_key_1","value":"test_value_1"}]'
        )

    def test_json_absent_item(self, cli_runner: CliRunner, domain: str) -> None:
        result = cli_runner.invoke(cli, ["item", "json", domain, "nobody"])
        assert result.stdout.strip() == "null"
        structured = cli_runner.invoke(cli, ["--json", "item", "json", domain, "nobody"])
        assert json.loads(structured.stdout)["data"]["json"] is None

    def test_destroy(self, cli_runner: CliRunner, domain: str) -> None:
        cli_runner.invoke(cli, ["item", "set", domain, "web", "port", "80"])
        assert cli_runner.invoke(cli, ["item", "destroy", domain, "web"]).exit_code == 0
        items = cli_runner.invoke(cli, ["-q", "domain", "items", domain])
        assert items.stdout.strip() == ""

    def test_encrypt_without_keys(self, cli_runner: CliRunner, domain: str) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "item", "set", "--encrypt", domain, "web", "pw", "x"]
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NO_PUBLIC_KEY"


@pytest.mark.usefixtures("_isolated_root")
class TestEncryptedItems:
    @pytest.fixture(autouse=True)
    def _keys(self, tmp_path: Path, key_files: KeyFiles) -> None:
        (tmp_path / "attrstore.toml").write_text(
            f'[keys]\nprivate_key = "{key_files.private_key.as_posix()}"\n'
        )

    def test_round_trip(self, cli_runner: CliRunner, domain: str) -> None:
        set_result = cli_runner.invoke(
            cli, ["item", "set", "--encrypt", domain, "web", "pw", "hunter2"]
        )
        assert set_result.exit_code == 0, set_result.output
        plain = cli_runner.invoke(cli, ["-q", "item", "get", domain, "web", "pw"])
        assert plain.stdout.strip() not in ("", "hunter2")
        decrypted = cli_runner.invoke(cli, ["-q", "item", "get", "--decrypt", domain, "web", "pw"])
        assert decrypted.stdout.strip() == "hunter2"

    def test_decrypting_plain_value_fails(self, cli_runner: CliRunner, domain: str) -> None:
        cli_runner.invoke(cli, ["item", "set", domain, "web", "pw", "plain"])
        result = cli_runner.invoke(cli, ["item", "get", "--decrypt", domain, "web", "pw"])
        assert result.exit_code == 1
        assert "DECRYPTION_FAILED" in result.stderr

    def test_missing_key_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "attrstore.toml").write_text('[keys]\nprivate_key = "nope.pem"\n')
        result = cli_runner.invoke(cli, ["domain", "create", "settings"])
        assert result.exit_code == 1
        assert "Cannot open store" in result.stderr
