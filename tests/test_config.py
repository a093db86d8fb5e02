from decimal import Decimal
from pathlib import Path

from nav_sentinel.config import DEFAULT_MODEL, load_settings
from nav_sentinel.infrastructure.reasoning.client import AnthropicReasoningService, build_reasoning_service


def test_defaults_without_environment():
    settings = load_settings(environ={})

    assert settings.nav_tolerance_pct == Decimal("0.01")
    assert settings.min_monetary_values == 4
    assert settings.reasoning_model == DEFAULT_MODEL
    assert settings.reasoning_enabled is False
    assert settings.enable_history is True
    assert build_reasoning_service(settings) is None


def test_environment_overrides(tmp_path: Path):
    settings = load_settings(
        environ={
            "ANTHROPIC_API_KEY": "sk-test",
            "NAV_SENTINEL_MODEL": "claude-test",
            "NAV_SENTINEL_TIMEOUT_SECONDS": "not-a-number",
            "NAV_SENTINEL_MAX_TOKENS": "800",
            "NAV_SENTINEL_HISTORY": "off",
            "NAV_SENTINEL_HISTORY_DIR": str(tmp_path),
            "NAV_SENTINEL_LOG_LEVEL": "debug",
        }
    )

    assert settings.reasoning_enabled is True
    assert settings.reasoning_model == "claude-test"
    assert settings.reasoning_timeout_seconds == 30.0
    assert settings.reasoning_max_tokens == 800
    assert settings.enable_history is False
    assert settings.history_dir == tmp_path
    assert settings.log_level == "DEBUG"

    service = build_reasoning_service(settings)
    assert isinstance(service, AnthropicReasoningService)
    assert service.model == "claude-test"


def test_unknown_log_level_falls_back_to_info():
    assert load_settings(environ={"NAV_SENTINEL_LOG_LEVEL": "verbose"}).log_level == "INFO"
    assert load_settings(environ={"NAV_SENTINEL_LOG_LEVEL": " warning "}).log_level == "WARNING"
