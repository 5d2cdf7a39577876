"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from linear_reflect.cli import cli
from linear_reflect.common import compute_hmac_sha256

REQUIRED = {
    "WEBHOOK_SECRET": "cli-secret",
    "ACCESS_TOKEN": "cli-token",
    "GRAPH_ID": "cli-graph",
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "payload.json"
    path.write_bytes(b'{"action":"create"}')
    return path


@pytest.fixture
def env(monkeypatch):
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)


@pytest.fixture
def no_env(monkeypatch):
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)


def test_sign_with_explicit_secret(runner, payload_file, no_env):
    result = runner.invoke(cli, ["sign", str(payload_file), "--secret", "abc"])

    assert result.exit_code == 0
    assert result.output.strip() == compute_hmac_sha256(payload_file.read_bytes(), "abc")


def test_sign_uses_environment_secret(runner, payload_file, env):
    result = runner.invoke(cli, ["sign", str(payload_file)])

    assert result.exit_code == 0
    assert result.output.strip() == compute_hmac_sha256(payload_file.read_bytes(), "cli-secret")


def test_config_shows_masked_values(runner, env):
    result = runner.invoke(cli, ["config"])

    assert result.exit_code == 0
    assert "cli-graph" in result.output
    assert "cli-secret" not in result.output
    assert "cli-token" not in result.output


def test_config_fails_without_environment(runner, no_env):
    result = runner.invoke(cli, ["config"])

    assert result.exit_code == 1
    assert "WEBHOOK_SECRET" in result.output


def test_serve_fails_fast_without_environment(runner, no_env, monkeypatch):
    started = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: started.append(args))

    result = runner.invoke(cli, ["serve"])

    assert result.exit_code == 1
    assert started == []


def test_serve_runs_uvicorn(runner, env, monkeypatch, tmp_path, restore_logging):
    monkeypatch.setenv("LINEAR_REFLECT_LOG_DIR", str(tmp_path))
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

    result = runner.invoke(cli, ["serve", "--port", "9999"])

    assert result.exit_code == 0
    [(app, kwargs)] = calls
    assert app.state.config.graph_id == "cli-graph"
    assert kwargs["port"] == 9999
    assert kwargs["host"] == "0.0.0.0"


def test_send_signs_payload(runner, payload_file, no_env, monkeypatch):
    calls = []

    class Response:
        status_code = 200
        text = '{"status":"Ok."}'

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        return Response()

    monkeypatch.setattr("linear_reflect.cli.requests.post", fake_post)

    result = runner.invoke(cli, ["send", str(payload_file), "--secret", "abc", "--url", "http://relay.test/"])

    assert result.exit_code == 0
    assert "Response status: 200" in result.output
    [(url, kwargs)] = calls
    assert url == "http://relay.test/"
    assert kwargs["data"] == payload_file.read_bytes()
    assert kwargs["headers"]["linear-signature"] == compute_hmac_sha256(payload_file.read_bytes(), "abc")


def test_send_reports_connection_error(runner, payload_file, no_env, monkeypatch):
    import requests

    def refuse(url, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr("linear_reflect.cli.requests.post", refuse)

    result = runner.invoke(cli, ["send", str(payload_file), "--secret", "abc"])

    assert result.exit_code == 1
    assert "Could not connect" in result.output


def test_sign_needs_only_webhook_secret(runner, payload_file, no_env, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "only-secret")

    result = runner.invoke(cli, ["sign", str(payload_file)])

    assert result.exit_code == 0
    assert result.output.strip() == compute_hmac_sha256(payload_file.read_bytes(), "only-secret")


def test_sign_fails_without_any_secret(runner, payload_file, no_env):
    result = runner.invoke(cli, ["sign", str(payload_file)])

    assert result.exit_code == 1
    assert "WEBHOOK_SECRET" in result.output


def test_send_fails_without_any_secret(runner, payload_file, no_env, monkeypatch):
    calls = []
    monkeypatch.setattr("linear_reflect.cli.requests.post", lambda url, **kwargs: calls.append(url))

    result = runner.invoke(cli, ["send", str(payload_file)])

    assert result.exit_code == 1
    assert calls == []


def test_serve_honours_explicit_port_zero(runner, env, monkeypatch, tmp_path, restore_logging):
    monkeypatch.setenv("LINEAR_REFLECT_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LINEAR_REFLECT_PORT", "8123")
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append(kwargs))

    result = runner.invoke(cli, ["serve", "--port", "0", "--host", ""])

    assert result.exit_code == 0
    [kwargs] = calls
    assert kwargs["port"] == 0
    assert kwargs["host"] == ""
