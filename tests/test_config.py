"""Tests for GameSettings and YAML loading."""

import pydantic
import pytest

from werewolf_party.config import GameSettings, load_settings


class TestGameSettings:

    def test_defaults(self) -> None:
        settings = GameSettings()
        assert settings.night_seconds == 120
        assert settings.day_seconds == 180
        assert settings.hunter_seconds == 30
        assert settings.chemist_seconds == 45
        assert settings.gunner_bullets == 2

    def test_hunter_chance_grows_with_pack(self) -> None:
        settings = GameSettings()
        assert settings.hunter_success_chance(1) == pytest.approx(0.3)
        assert settings.hunter_success_chance(3) == pytest.approx(0.7)
        assert settings.hunter_success_chance(10) == 1.0

    def test_scaled_only_touches_deadlines(self) -> None:
        scaled = GameSettings().scaled(0.5)
        assert scaled.night_seconds == 60
        assert scaled.chemist_seconds == 22.5
        assert scaled.gunner_bullets == 2


class TestLoadSettings:

    def test_none_gives_defaults(self) -> None:
        assert load_settings() == GameSettings()

    def test_yaml_overrides(self, tmp_path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("night_seconds: 10\nalpha_bite_chance: 0.5\n", encoding="utf-8")

        settings = load_settings(path)

        assert settings.night_seconds == 10
        assert settings.alpha_bite_chance == 0.5
        assert settings.day_seconds == 180

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == GameSettings()

    def test_invalid_value(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("guardian_death_chance: 2\n", encoding="utf-8")
        with pytest.raises(pydantic.ValidationError):
            load_settings(path)
