"""Tests for alexa_smartplug.core.config and session construction."""

import pytest
from pydantic import ValidationError

from alexa_smartplug.core.config import (
    DEFAULT_USER_AGENT,
    AppSettings,
    Session,
    TargetIdentifier,
    write_env_vars,
)
from alexa_smartplug.core.errors import NoAmazonDomainError, UnauthenticatedError
from alexa_smartplug.core.services.controller import build_session


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.cookie is None
        assert settings.amazon_domain is None
        assert settings.enable_log is False
        assert settings.user_agent == DEFAULT_USER_AGENT
        assert settings.set_state_target is TargetIdentifier.ENTITY
        assert settings.get_state_target is TargetIdentifier.APPLIANCE

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("ALEXA_SMARTPLUG_COOKIE", "abc=1")
        monkeypatch.setenv("ALEXA_SMARTPLUG_AMAZON_DOMAIN", "amazon.de")
        settings = AppSettings()
        assert settings.cookie.get_secret_value() == "abc=1"
        assert settings.amazon_domain == "amazon.de"

    @pytest.mark.parametrize("raw,expected", [
        ("1", True),
        ("yes", True),
        ("anything", True),
        ("0", False),
        ("false", False),
        ("OFF", False),
    ])
    def test_enable_log_is_a_presence_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("ALEXA_SMARTPLUG_ENABLE_LOG", raw)
        assert AppSettings().enable_log is expected

    def test_blank_cookie_is_missing(self, monkeypatch):
        monkeypatch.setenv("ALEXA_SMARTPLUG_COOKIE", "   ")
        assert AppSettings().cookie is None

    def test_invalid_alexa_ip_rejected(self, monkeypatch):
        monkeypatch.setenv("ALEXA_SMARTPLUG_ALEXA_IP", "not-an-ip")
        with pytest.raises(ValidationError):
            AppSettings()

    def test_reads_dotenv_in_cwd(self, tmp_path):
        (tmp_path / ".env").write_text("ALEXA_SMARTPLUG_AMAZON_DOMAIN=amazon.fr\n", encoding="utf-8")
        assert AppSettings().amazon_domain == "amazon.fr"


class TestSession:
    def test_url_expansion(self):
        session = Session(cookie="c", amazon_domain="amazon.co.jp")
        assert session.url("BEHAVIORS_ENTITIES") == (
            "https://alexa.amazon.co.jp/api/behaviors/entities?skillId=amzn1.ask.1p.smarthome"
        )
        assert session.url("PHOENIX") == "https://alexa.amazon.co.jp/api/phoenix?includeRelationships=true"
        assert session.url("PHOENIX_STATE") == "https://alexa.amazon.co.jp/api/phoenix/state"
        assert session.alexa_host == "alexa.amazon.co.jp"

    def test_is_immutable(self):
        session = Session(cookie="c", amazon_domain="amazon.com")
        with pytest.raises(ValidationError):
            session.amazon_domain = "amazon.de"

    def test_cookie_hidden_in_repr(self):
        session = Session(cookie="top-secret", amazon_domain="amazon.com")
        assert "top-secret" not in repr(session)


class TestBuildSession:
    def test_explicit_arguments(self):
        session = build_session("c=1", "amazon.com", AppSettings())
        assert session.cookie.get_secret_value() == "c=1"
        assert session.amazon_domain == "amazon.com"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("ALEXA_SMARTPLUG_COOKIE", "env-cookie")
        monkeypatch.setenv("ALEXA_SMARTPLUG_AMAZON_DOMAIN", "amazon.co.uk")
        session = build_session(None, None, AppSettings())
        assert session.cookie.get_secret_value() == "env-cookie"
        assert session.amazon_domain == "amazon.co.uk"

    def test_explicit_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("ALEXA_SMARTPLUG_AMAZON_DOMAIN", "amazon.co.uk")
        session = build_session("c", "amazon.de", AppSettings())
        assert session.amazon_domain == "amazon.de"

    def test_missing_cookie(self):
        with pytest.raises(UnauthenticatedError, match="No cookie provided"):
            build_session(None, "amazon.com", AppSettings())

    def test_missing_domain(self):
        with pytest.raises(NoAmazonDomainError, match="No amazon domain provided"):
            build_session("c", None, AppSettings())


class TestWriteEnvVars:
    def test_creates_and_updates(self, tmp_path):
        path = tmp_path / "conf" / ".env"
        write_env_vars({"ALEXA_SMARTPLUG_AMAZON_DOMAIN": "amazon.com"}, path)
        write_env_vars({"ALEXA_SMARTPLUG_COOKIE": "a=1; b=2", "IGNORED": None}, path)

        text = path.read_text(encoding="utf-8")
        assert "ALEXA_SMARTPLUG_AMAZON_DOMAIN=amazon.com" in text
        assert "ALEXA_SMARTPLUG_COOKIE='a=1; b=2'" in text
        assert "IGNORED" not in text

    def test_written_file_is_readable_by_settings(self, tmp_path):
        write_env_vars(
            {"ALEXA_SMARTPLUG_COOKIE": "a=1; b=2", "ALEXA_SMARTPLUG_AMAZON_DOMAIN": "amazon.it"},
            tmp_path / ".env",
        )
        settings = AppSettings()
        assert settings.cookie.get_secret_value() == "a=1; b=2"
        assert settings.amazon_domain == "amazon.it"
