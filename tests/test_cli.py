"""Tests for the restheader CLI."""

import json
from datetime import datetime

import pytest
from click.testing import CliRunner

from restheader.cli import cli
from restheader.common.signing import create_signature


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_demo(runner):
    result = runner.invoke(cli, ["demo"])

    assert result.exit_code == 0
    headers = json.loads(result.stdout)
    assert headers["api-version"] == "1"
    assert headers["Authorization"].startswith("Bearer ")
    assert len(headers["Authorization"]) == len("Bearer ") + 36


def test_build_defaults(runner):
    result = runner.invoke(cli, ["build"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "Cache-Control": "no-store no-cache",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def test_build_api_version_from_env(runner, monkeypatch):
    monkeypatch.setenv("RESTHEADER_API_VERSION", "7")

    result = runner.invoke(cli, ["build"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["api-version"] == "7"


def test_build_all_options(runner):
    result = runner.invoke(
        cli,
        [
            "build",
            "--api-version", "2",
            "--accept-scim",
            "--form",
            "--client-id", "id",
            "--client-secret", "secret",
            "--product-key", "pk",
            "--custom-header", "ch",
            "--etag", "e1",
            "--shared-key", "shared",
            "--secret-key", "secret",
        ],
    )

    assert result.exit_code == 0
    headers = json.loads(result.stdout)
    assert headers["api-version"] == "2"
    assert headers["Accept"] == "application/scim+json"
    assert headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert headers["Authorization"] == "Basic aWQ6c2VjcmV0"
    assert headers["x-product-key"] == "pk"
    assert headers["x-custom-header"] == "ch"
    assert headers["If-Match"] == "e1"
    assert headers["api-signature"].startswith("HmacSHA256;Credential:shared;")
    assert "signedDate" in headers


def test_build_conflicting_auth(runner):
    result = runner.invoke(cli, ["build", "--bearer", "a", "--plain", "b"])
    assert result.exit_code == 1


def test_build_partial_signature_keys(runner):
    result = runner.invoke(cli, ["build", "--shared-key", "shared"])
    assert result.exit_code == 1


def test_build_table(runner):
    result = runner.invoke(cli, ["build", "--bearer", "tok", "--table"])

    assert result.exit_code == 0
    assert "Request Headers" in result.stdout
    assert "Bearer tok" in result.stdout


def test_sign(runner):
    result = runner.invoke(cli, ["sign", "shared", "secret"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["api-signature"].startswith("HmacSHA256;Credential:shared;")
    assert payload["signedDate"].endswith("Z")


def test_verify_valid(runner):
    signature = create_signature("shared", "secret")

    result = runner.invoke(cli, ["verify", signature.sig_header, signature.signed_date, "secret"])

    assert result.exit_code == 0
    assert "valid" in result.stdout


def test_verify_wrong_secret(runner):
    signature = create_signature("shared", "secret")

    result = runner.invoke(cli, ["verify", signature.sig_header, signature.signed_date, "nope"])

    assert result.exit_code == 1


def test_verify_expired(runner):
    old = create_signature("shared", "secret", clock=lambda: datetime(2020, 1, 1))

    result = runner.invoke(cli, ["verify", old.sig_header, old.signed_date, "secret"])
    assert result.exit_code == 1

    result = runner.invoke(
        cli, ["verify", old.sig_header, old.signed_date, "secret", "--no-max-age"]
    )
    assert result.exit_code == 0


def test_invalid_log_level(runner):
    result = runner.invoke(cli, ["--log-level", "LOUD", "build"])
    assert result.exit_code == 2


def test_lowercase_log_level_from_env(runner, monkeypatch):
    monkeypatch.setenv("RESTHEADER_LOG_LEVEL", "debug")

    result = runner.invoke(cli, ["build"])

    assert result.exit_code == 0


def test_invalid_env_settings(runner, monkeypatch):
    monkeypatch.setenv("RESTHEADER_LOG_FORMAT", "xml")

    result = runner.invoke(cli, ["build"])

    assert result.exit_code == 1
    assert "Invalid RESTHEADER_* configuration" in result.output


def test_verify_max_age_conflict(runner):
    signature = create_signature("shared", "secret")

    result = runner.invoke(
        cli,
        [
            "verify",
            signature.sig_header,
            signature.signed_date,
            "secret",
            "--max-age", "60",
            "--no-max-age",
        ],
    )

    assert result.exit_code == 2
    assert "mutually exclusive" in result.output
