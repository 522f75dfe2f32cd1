"""Unit tests for settings validation."""

import pytest
from pydantic import ValidationError

from advisor_docs.config.settings import MEGABYTE, Settings

pytestmark = pytest.mark.unit


class TestDefaults:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.max_upload_bytes == 50 * MEGABYTE
        assert settings.chunk_size == 1000
        assert settings.chunk_overlap == 100
        assert settings.max_context_tokens == 8000
        assert settings.min_relevance_score == 0.1
        assert settings.min_truncation_tokens == 100
        assert settings.suggestion_threshold == 0.3
        assert settings.max_upload_megabytes == 50

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CHUNK_SIZE", "500")
        monkeypatch.setenv("LOG_LEVEL", " debug ")

        settings = Settings(_env_file=None)

        assert settings.chunk_size == 500
        assert settings.log_level == "DEBUG"


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"chunk_size": 0},
            {"max_upload_bytes": -1},
            {"max_context_tokens": 0},
            {"chunk_overlap": -5},
            {"min_relevance_score": 1.5},
            {"suggestion_threshold": -0.1},
            {"extraction_timeout_seconds": 0},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)

    def test_overlap_must_be_below_chunk_size(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, chunk_size=100, chunk_overlap=100)

        assert Settings(_env_file=None, chunk_size=100, chunk_overlap=99).chunk_overlap == 99
