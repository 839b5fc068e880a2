from __future__ import annotations

from settings import get_settings
from storage.sql_gateway import build_default_gateway


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    database = tmp_path / "data" / "climate.db"

    monkeypatch.setenv("BIRD_API_KEY", "  s3cret  ")
    monkeypatch.setenv("BIRDROOM_API_KEY_HEADER", "X-Bird-Key")
    monkeypatch.setenv("BIRDROOM_PATH_PREFIX", "aviary/")
    monkeypatch.setenv("BIRDROOM_DATABASE_PATH", str(database))
    monkeypatch.setenv("LOG_LEVEL", "debug")

    get_settings.cache_clear()
    build_default_gateway.cache_clear()

    try:
        settings = get_settings()
        assert settings.api_key == "s3cret"
        assert settings.api_key_header == "x-bird-key"
        assert settings.path_prefix == "/aviary"
        assert settings.log_level == "DEBUG"

        gateway = build_default_gateway()
        assert gateway.database == str(database)
        assert database.exists()
        gateway.close()
    finally:
        build_default_gateway.cache_clear()
        get_settings.cache_clear()


def test_blank_prefix_disables_stripping(monkeypatch) -> None:
    monkeypatch.setenv("BIRDROOM_PATH_PREFIX", "   ")
    monkeypatch.delenv("BIRD_API_KEY", raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.path_prefix is None
        assert settings.api_key == ""
        assert settings.api_key_header == "x-api-key"
    finally:
        get_settings.cache_clear()
