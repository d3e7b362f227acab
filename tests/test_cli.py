"""Developer console scripts."""
from app import cli

TEMPLATE = (
    "ENV=local\n"
    "REGISTRATION_API_KEY=change-me\n"
    "LEGACY_JWT_ENABLED=True\n"
    "SECRET_KEY=change-me-too\n"
)


def _parse(text):
    return dict(line.split("=", 1) for line in text.splitlines() if line and not line.startswith("#"))


def test_render_env_replaces_placeholder_secrets():
    values = _parse(cli.render_env(TEMPLATE))

    assert values["ENV"] == "local"
    assert values["LEGACY_JWT_ENABLED"] == "True"
    assert values["REGISTRATION_API_KEY"] not in ("", "change-me")
    assert values["SECRET_KEY"] not in ("", "change-me-too")
    assert values["REGISTRATION_API_KEY"] != values["SECRET_KEY"]
    assert len(values["REGISTRATION_API_KEY"]) >= 43


def test_render_env_appends_missing_secrets():
    values = _parse(cli.render_env("ENV=local\n"))
    assert set(cli.GENERATED_SECRETS) <= set(values)


def test_render_env_is_fresh_each_time():
    assert _parse(cli.render_env(TEMPLATE))["SECRET_KEY"] != _parse(cli.render_env(TEMPLATE))["SECRET_KEY"]


def test_init_env_writes_once(tmp_path, monkeypatch):
    (tmp_path / ".env.example").write_text(TEMPLATE)
    monkeypatch.setattr(cli, "ROOT", tmp_path)

    cli.init_env()
    written = (tmp_path / ".env").read_text()
    assert "change-me" not in written

    cli.init_env()
    assert (tmp_path / ".env").read_text() == written


def test_run_tests_forces_test_environment(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.subprocess, "run", lambda cmd, **kwargs: calls.append((cmd, kwargs)))
    monkeypatch.setattr(cli.sys, "argv", ["run-tests", "-k", "session"])
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("DEBUG", "True")

    cli.run_tests()

    cmd, kwargs = calls[0]
    assert cmd[-3:] == ["pytest", "-k", "session"]
    assert kwargs["env"]["ENV"] == "test"
    assert "DEBUG" not in kwargs["env"]
