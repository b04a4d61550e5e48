"""Tests for configuration loading."""

import pytest

from labyrinth.config import BotConfig, Config, load_config


class TestBotConfig:
    """Tests for BotConfig dataclass."""

    def test_default_values(self):
        """Test default bot settings."""
        config = BotConfig()
        assert config.window_size == 5
        assert config.observe_interval == 5
        assert config.max_random_attempts == 100
        assert config.obstacle_weight == 99999

    @pytest.mark.parametrize("kwargs", [
        {"window_size": 4},
        {"window_size": 1},
        {"observe_interval": 0},
        {"max_random_attempts": 0},
    ])
    def test_invalid_values(self, kwargs):
        """Test settings the bot cannot work with."""
        with pytest.raises(ValueError):
            BotConfig(**kwargs)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """Test a path that does not exist."""
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config == Config()

    def test_yaml_sections(self, tmp_path):
        """Test values are read from every section."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "bot:\n"
            "  window_size: 7\n"
            "  observe_interval: 3\n"
            "game:\n"
            "  map_file: maps/cave\n"
            "  seed: 42\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        config = load_config(str(path))
        assert config.bot.window_size == 7
        assert config.bot.observe_interval == 3
        assert config.bot.max_random_attempts == 100
        assert config.game.map_file == "maps/cave"
        assert config.game.seed == 42
        assert config.logging.level == "DEBUG"

    def test_empty_file(self, tmp_path):
        """Test an empty YAML file."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == Config()

    def test_environment_overrides(self, tmp_path, monkeypatch):
        """Test environment variables win over the file."""
        path = tmp_path / "config.yaml"
        path.write_text("game:\n  seed: 1\n")
        monkeypatch.setenv("LABYRINTH_MAP", "maps/cave.txt")
        monkeypatch.setenv("LABYRINTH_SEED", "9")
        monkeypatch.setenv("LABYRINTH_MAX_TURNS", "50")
        monkeypatch.setenv("LABYRINTH_LOG_LEVEL", "WARNING")

        config = load_config(str(path))

        assert config.game.map_file == "maps/cave.txt"
        assert config.game.seed == 9
        assert config.game.max_turns == 50
        assert config.logging.level == "WARNING"

    def test_invalid_bot_section(self, tmp_path):
        """Test bad bot settings in a file are rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("bot:\n  window_size: 6\n")
        with pytest.raises(ValueError):
            load_config(str(path))
