import pytest
import yaml

from render_monitor.config import (
    DEFAULT_BLENDER_COMMAND,
    AppConfig,
    ConfigError,
    RunnerOptions,
    load_config,
)


class TestLoadConfig:
    def test_loads_valid_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({
            "blender": {"command": "/usr/bin/blender"},
            "display": {"grace_period_seconds": 1.5, "bar_width": 40},
            "render": {"strict_correlation": False},
            "debug": {"enabled": True},
        }))
        config = load_config(str(config_file))
        assert config.blender.command == "/usr/bin/blender"
        assert config.display.grace_period_seconds == 1.5
        assert config.display.bar_width == 40
        assert config.render.strict_correlation is False
        assert config.debug.enabled is True

    def test_missing_file_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("/nonexistent/config.yaml")

    def test_empty_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        config = load_config(str(config_file))
        assert config == AppConfig()
        assert config.blender.command == DEFAULT_BLENDER_COMMAND
        assert config.display.grace_period_seconds == 3.0
        assert config.display.bar_width == 30
        assert config.render.strict_correlation is True

    def test_null_sections_use_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("blender:\ndisplay:\n")
        config = load_config(str(config_file))
        assert config.blender.command == DEFAULT_BLENDER_COMMAND

    def test_non_mapping_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(config_file))

    def test_section_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("display: 3\n")
        with pytest.raises(ConfigError, match="display"):
            load_config(str(config_file))

    def test_invalid_yaml_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("blender: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(config_file))

    def test_negative_grace_period_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"display": {"grace_period_seconds": -1}}))
        with pytest.raises(ConfigError, match="grace_period_seconds"):
            load_config(str(config_file))

    def test_zero_bar_width_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"display": {"bar_width": 0}}))
        with pytest.raises(ConfigError, match="bar_width"):
            load_config(str(config_file))

    def test_non_numeric_bar_width_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"display": {"bar_width": "wide"}}))
        with pytest.raises(ConfigError):
            load_config(str(config_file))

    def test_empty_command_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"blender": {"command": ""}}))
        with pytest.raises(ConfigError, match="command"):
            load_config(str(config_file))

    def test_expands_tilde_in_command(self, tmp_path):
        import os
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"blender": {"command": "~/bin/blender"}}))
        config = load_config(str(config_file))
        assert config.blender.command == os.path.expanduser("~/bin/blender")


class TestRunnerOptions:
    def test_immutable(self):
        options = RunnerOptions("in.blend", "out", frame_start=1, frame_end=2)
        with pytest.raises(AttributeError):
            options.frame_end = 5
