"""Settings groups read from the environment."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from questboard.config.app_config_model import GameSettings, RemoteSettings, ApplicationSettings


class TestSettings:
    def test_game_rules_follow_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GAME_DAILY_BONUS", "250")
        monkeypatch.setenv("GAME_HABIT_PENALTY", "15")

        settings = GameSettings()

        assert settings.daily_bonus == 250
        assert settings.habit_penalty == 15
        assert settings.journal_bonus == 50

    def test_blank_token_means_anonymous(self) -> None:
        assert RemoteSettings(api_token="   ").api_token is None

    def test_base_url_must_be_http(self) -> None:
        with pytest.raises(ValidationError):
            RemoteSettings(base_url="ftp://state.test")

    def test_summary_hides_the_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REMOTE_API_TOKEN", "s3cret")

        summary = ApplicationSettings().get_configuration_summary()

        assert summary["remote_authenticated"] is True
        assert "s3cret" not in str(summary)
