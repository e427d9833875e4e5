from __future__ import annotations

import pytest

from liftlog.cli.main import build_parser, load_config, main
from liftlog.core.config import AppConfig, ConfigError


def test_from_env_reads_supabase_and_site_settings() -> None:
    config = AppConfig.from_env(
        {
            "SUPABASE_URL": " https://project.supabase.co ",
            "SUPABASE_ANON_KEY": "anon",
            "LIFTLOG_SITE_URL": "https://liftlog.example/",
            "LIFTLOG_LOG_LEVEL": "debug",
        }
    )

    assert config.supabase_url == "https://project.supabase.co"
    assert config.has_supabase
    assert config.site_url == "https://liftlog.example"
    assert config.callback_url == "https://liftlog.example/auth/callback"
    assert config.log_level == "DEBUG"
    config.validate()


def test_missing_supabase_requires_simulated_auth() -> None:
    config = AppConfig.from_env({})

    assert not config.has_supabase
    with pytest.raises(ConfigError):
        config.validate()
    config.with_overrides(simulate_auth=True).validate()


def test_invalid_port_and_log_level_are_rejected() -> None:
    base = AppConfig(simulate_auth=True)

    with pytest.raises(ConfigError):
        base.with_overrides(port=70000).validate()
    with pytest.raises(ConfigError):
        base.with_overrides(log_level="CHATTY").validate()


def test_cli_flags_override_environment() -> None:
    args = build_parser().parse_args(
        ["--host", "0.0.0.0", "--port", "9000", "--log-level", "warning", "--debug-sim-auth"]
    )

    config = load_config(args, environ={"LIFTLOG_SITE_URL": "http://box:9000"})

    assert config.host == "0.0.0.0"
    assert config.port == 9000
    assert config.log_level == "WARNING"
    assert config.simulate_auth is True
    assert config.site_url == "http://box:9000"


def test_cli_without_flags_keeps_environment_values() -> None:
    args = build_parser().parse_args([])

    config = load_config(args, environ={"SUPABASE_URL": "u", "SUPABASE_ANON_KEY": "k"})

    assert config.port == 8080
    assert config.simulate_auth is False
    assert config.has_supabase


def test_main_reports_configuration_error(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

    assert main([]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_main_configures_logging_before_validating(monkeypatch: pytest.MonkeyPatch) -> None:
    import liftlog.cli.main as cli_main

    events: list[str] = []
    original_validate = AppConfig.validate

    def fake_configure_logging(level: str) -> None:
        events.append(f"logging:{level}")

    def recording_validate(self: AppConfig) -> None:
        events.append("validate")
        original_validate(self)

    monkeypatch.setattr(cli_main, "configure_logging", fake_configure_logging)
    monkeypatch.setattr(AppConfig, "validate", recording_validate)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

    assert main(["--log-level", "debug"]) == 2
    assert events == ["logging:DEBUG", "validate"]


def test_main_rejects_unknown_log_level(capsys) -> None:
    assert main(["--log-level", "chatty", "--debug-sim-auth"]) == 2
    assert "Configuration error" in capsys.readouterr().err
