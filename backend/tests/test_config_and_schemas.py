"""
Happy Thoughts Backend — Settings and Schema Validation Tests
==============================================================

What:  Environment overrides for Settings; message rules on the request schemas;
       table defaults on the Thought model.
"""

import pydantic
import pytest

from happy_thoughts.config import Settings
from happy_thoughts.models.thought import Thought
from happy_thoughts.schemas.thought import ThoughtCreate, ThoughtPatch, ThoughtReplace, ThoughtResponse


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("PORT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.cors_origins_list == ["*"]

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://db:5432/thoughts")

        settings = Settings(_env_file=None)

        assert settings.port == 9090
        assert settings.database_url == "postgresql+asyncpg://db:5432/thoughts"
        assert settings.is_sqlite is False

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestThoughtSchemas:

    @pytest.mark.parametrize("message", ["abcde", "Hello world", "x" * 140, "Ünïcödé ok"])
    def test_create_valid(self, message):
        assert ThoughtCreate(message=message).message == message

    @pytest.mark.parametrize("message", ["abcd", "x" * 141, "year 2024", "9 lives"])
    def test_create_invalid(self, message):
        with pytest.raises(pydantic.ValidationError):
            ThoughtCreate(message=message)

    def test_patch_tracks_sent_fields(self):
        patch = ThoughtPatch.model_validate({"hearts": 5})

        assert patch.model_dump(exclude_unset=True) == {"hearts": 5}

    def test_patch_accepts_camel_case(self):
        patch = ThoughtPatch.model_validate({"createdAt": "2021-06-01T12:00:00Z"})

        assert list(patch.model_dump(exclude_unset=True)) == ["created_at"]

    @pytest.mark.parametrize("body", [{"hearts": -3}, {"message": None}, {"createdAt": None}])
    def test_patch_invalid(self, body):
        with pytest.raises(pydantic.ValidationError):
            ThoughtPatch.model_validate(body)

    def test_replace_defaults_hearts(self):
        replacement = ThoughtReplace(message="Fresh start")

        assert replacement.hearts == 0
        assert replacement.created_at is None

    def test_response_uses_camel_case(self):
        response = ThoughtResponse.model_validate(
            {
                "id": "6f1c6a44-0000-4000-8000-000000000000",
                "message": "Serialized",
                "hearts": 1,
                "created_at": "2021-06-01T12:00:00Z",
            }
        )

        dumped = response.model_dump(by_alias=True)
        assert "createdAt" in dumped
        assert "created_at" not in dumped


class TestThoughtModel:

    def test_server_defaults_match_migration(self):
        columns = Thought.__table__.c

        assert columns.hearts.server_default.arg.text == "0"
        assert columns.created_at.server_default.arg.text == "CURRENT_TIMESTAMP"

    def test_created_at_is_timezone_aware(self):
        assert Thought.__table__.c.created_at.type.timezone is True
