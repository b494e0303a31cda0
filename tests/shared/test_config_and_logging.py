import json
import logging

from shared import config
from shared.logging import JsonFormatter, get_trace_id, set_trace_id
from shared.redaction import redact_config_value, sanitize_text


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", " abcd ")
    monkeypatch.setenv("SHEETS_CACHE_TTL_SEC", "30")
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://example.org/")
    monkeypatch.setenv("PORT", "8080")

    settings = config.load_settings()

    assert settings.discord_public_key == "abcd"
    assert settings.cache_ttl_sec == 30
    assert settings.public_base_url == "https://example.org"
    assert settings.port == 8080
    assert settings.website_data_spreadsheet_id == "test-sheet"


def test_settings_defaults(monkeypatch):
    for name in ("SHEETS_CACHE_TTL_SEC", "PUBLIC_BASE_URL", "SHEETS_PROJECTS_RANGE", "DISCORD_PUBLIC_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = config.load_settings()

    assert settings.cache_ttl_sec == config.DEFAULT_CACHE_TTL_SEC == 5
    assert settings.public_base_url == "https://vvgo.org"
    assert settings.projects_range == "Projects"
    assert settings.discord_public_key == ""


def test_invalid_ttl_falls_back_and_clamps(monkeypatch):
    monkeypatch.setenv("SHEETS_CACHE_TTL_SEC", "soon")
    assert config.get_cache_ttl_sec() == 5

    monkeypatch.setenv("SHEETS_CACHE_TTL_SEC", "0")
    assert config.get_cache_ttl_sec() == 1


def test_config_snapshot_masks_secrets():
    settings = config.Settings(
        discord_token="super-secret-token",
        gspread_credentials='{"type": "service_account", "private_key": "x"}',
        redis_url="redis://:hunter2@cache:6379/0",
    )

    snapshot = config.get_config_snapshot(settings)

    assert snapshot["discord_token"].startswith("***")
    assert snapshot["gspread_credentials"].startswith("***sa-json")
    assert "hunter2" not in snapshot["redis_url"]
    assert snapshot["discord_application_id"] == "—"
    assert snapshot["env_name"] == "dev"


def test_sanitize_text_masks_inline_secrets():
    assert "abc123" not in sanitize_text("token=abc123 ok")
    assert sanitize_text(None) is None
    assert redact_config_value("BOT_NAME", "vvgo") == "vvgo"


def test_json_formatter_includes_trace_and_extras():
    trace = set_trace_id("trace-1")
    formatter = JsonFormatter(static={"env": "test"})
    record = logging.LogRecord("vvgo.test", logging.INFO, __file__, 1, "cache %s", ("miss",), None)
    record.key = "sheets:abc:Projects"
    record.config = {"env": "test", "nested": {"skip": True}}

    payload = json.loads(formatter.format(record))

    assert get_trace_id() == trace
    assert payload["msg"] == "cache miss"
    assert payload["trace"] == "trace-1"
    assert payload["env"] == "test"
    assert payload["key"] == "sheets:abc:Projects"
    assert payload["config"] == {"env": "test"}
    assert "lineno" not in payload
