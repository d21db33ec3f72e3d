"""Tests for palette configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from cmdwin.config.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_DOWN_KEYS,
    DEFAULT_TOGGLE_KEY,
    DEFAULT_UP_KEYS,
    get_default_config_path,
)
from cmdwin.config.settings import (
    EXAMPLE_CONFIG,
    BorderStyle,
    PaletteConfig,
    WindowOptions,
    WindowPosition,
    load_config,
    load_default_config,
    parse_config,
    write_example_config,
)
from cmdwin.exceptions import ConfigurationError
from cmdwin.palette.engine import PaletteStyle


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data))
    return path


class TestParseConfig:
    """Test turning raw YAML data into a PaletteConfig."""

    def test_empty_config_uses_defaults(self):
        config = parse_config(None)

        assert isinstance(config, PaletteConfig)
        assert len(config.registry) == 0
        assert config.keymap.toggle == DEFAULT_TOGGLE_KEY
        assert config.keymap.up == DEFAULT_UP_KEYS
        assert config.keymap.down == DEFAULT_DOWN_KEYS
        assert config.style == PaletteStyle()
        assert config.window == WindowOptions()
        assert config.source is None

    def test_commands(self):
        config = parse_config({"commands": {"Build": "make", "Test": "make test"}})

        assert config.registry.names == ("Build", "Test")
        assert config.registry.lookup("Test") == "make test"

    def test_commands_must_be_strings(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"commands": {"Build": 3}})

        assert exc_info.value.context["setting"] == "commands"
        assert "command_name" in exc_info.value.message

    def test_commands_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            parse_config({"commands": ["make", "make test"]})

    @pytest.mark.parametrize("value", [[], "", 0, False])
    def test_empty_non_mapping_commands_rejected(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"commands": value})
        assert exc_info.value.context["setting"] == "commands"

    def test_null_commands_is_empty_palette(self):
        assert len(parse_config({"commands": None}).registry) == 0

    def test_config_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            parse_config(["commands"])

    def test_unknown_section_is_ignored(self, caplog):
        config = parse_config({"colours": "blue", "commands": {"A": "a"}})

        assert len(config.registry) == 1
        assert "colours" in caplog.text


class TestKeymapConfig:
    """Test toggle and navigation key settings."""

    @pytest.mark.parametrize("spec", ["ctrl+o", "<C-o>", "\x0f", "Ctrl+O"])
    def test_toggle_forms(self, spec):
        config = parse_config({"keymap": spec})
        assert config.keymap.toggle == "ctrl+o"

    def test_navigation_single_key(self):
        config = parse_config({"navigation": {"up": "<C-p>", "down": "<C-n>"}, "keymap": "f2"})

        assert config.keymap.up == ("ctrl+p",)
        assert config.keymap.down == ("ctrl+n",)
        assert config.keymap.toggle == "f2"

    def test_navigation_key_lists(self):
        config = parse_config({"navigation": {"up": ["<Up>", "ctrl+k"], "down": ["<Down>", "\n"]}})

        assert config.keymap.up == ("up", "ctrl+k")
        assert config.keymap.down == ("down", "ctrl+j")

    def test_partial_navigation_keeps_other_default(self):
        config = parse_config({"navigation": {"up": "ctrl+u"}})

        assert config.keymap.up == ("ctrl+u",)
        assert config.keymap.down == DEFAULT_DOWN_KEYS

    def test_toggle_must_be_single_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"keymap": ["ctrl+p", "ctrl+o"]})
        assert exc_info.value.context["setting"] == "keymap"

    @pytest.mark.parametrize("spec", ["", "<C-Q-x>", "hyper+x", 7])
    def test_invalid_toggle(self, spec):
        with pytest.raises(ConfigurationError):
            parse_config({"keymap": spec})

    @pytest.mark.parametrize("spec", ["enter", "<Esc>", "\x7f"])
    def test_toggle_cannot_be_reserved(self, spec):
        with pytest.raises(ConfigurationError):
            parse_config({"keymap": spec})

    def test_navigation_cannot_use_toggle(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"navigation": {"down": "ctrl+p"}})
        assert exc_info.value.context["setting"] == "navigation.down"

    def test_navigation_cannot_use_commit_key(self):
        with pytest.raises(ConfigurationError):
            parse_config({"navigation": {"up": "\r"}})

    def test_up_and_down_must_differ(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"navigation": {"up": "ctrl+n", "down": ["ctrl+n", "down"]}})
        assert exc_info.value.context["keys"] == ["ctrl+n"]

    def test_navigation_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            parse_config({"navigation": ["ctrl+k", "ctrl+j"]})


class TestStyleConfig:
    def test_style_strings(self):
        config = parse_config(
            {"style": {"prompt": ": ", "separator": "====", "selected": "* ", "unselected": "- "}}
        )

        assert config.style == PaletteStyle(
            prompt=": ", separator="====", selected_marker="* ", unselected_marker="- "
        )

    def test_partial_style(self):
        config = parse_config({"style": {"prompt": "cmd> "}})

        assert config.style.prompt == "cmd> "
        assert config.style.separator == PaletteStyle().separator

    def test_style_values_must_be_strings(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"style": {"separator": 30}})
        assert exc_info.value.context["setting"] == "style.separator"

    def test_unknown_style_option_warns(self, caplog):
        config = parse_config({"style": {"colour": "red"}})

        assert config.style == PaletteStyle()
        assert "colour" in caplog.text


class TestWindowConfig:
    def test_window_options(self):
        config = parse_config(
            {
                "window": {
                    "position": "top",
                    "width": 80,
                    "height": 12,
                    "padding": [1, 2, 3, 4],
                    "border": "double",
                }
            }
        )

        assert config.window == WindowOptions(
            position=WindowPosition.TOP,
            width=80,
            height=12,
            padding=(1, 2, 3, 4),
            border=BorderStyle.DOUBLE,
        )

    def test_enum_values_are_case_insensitive(self):
        config = parse_config({"window": {"position": "Bottom", "border": "NONE"}})

        assert config.window.position is WindowPosition.BOTTOM
        assert config.window.border is BorderStyle.NONE

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (2, (2, 2, 2, 2)),
            ([1, 3], (1, 3, 1, 3)),
            ([0, 1, 2, 3], (0, 1, 2, 3)),
            ({"left": 2, "top": 1}, (1, 0, 0, 2)),
        ],
    )
    def test_padding_forms(self, raw, expected):
        config = parse_config({"window": {"padding": raw}})
        assert config.window.padding == expected

    @pytest.mark.parametrize("raw", [-1, [1, 2, 3], "1", [1, -2], {"middle": 1}, True])
    def test_invalid_padding(self, raw):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"window": {"padding": raw}})
        assert exc_info.value.context["setting"] == "window.padding"

    @pytest.mark.parametrize("value", [0, -5, "wide", 2.5, True])
    def test_invalid_width(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"window": {"width": value}})
        assert exc_info.value.context["setting"] == "window.width"

    def test_invalid_position(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"window": {"position": "left"}})

        assert "center, top, bottom" in exc_info.value.message

    def test_invalid_border(self):
        with pytest.raises(ConfigurationError):
            parse_config({"window": {"border": "dotted"}})


class TestLoadConfig:
    """Test reading config files from disk."""

    def test_load_file(self, tmp_path):
        path = write_yaml(tmp_path / "palette.yaml", {"commands": {"Build": "make"}})

        config = load_config(path)

        assert config.registry.lookup("Build") == "make"
        assert config.source == path

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "missing.yaml")
        assert "not found" in exc_info.value.message

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "palette.yaml"
        path.write_text("commands: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert exc_info.value.context["path"] == str(path)

    def test_empty_file_is_default_config(self, tmp_path):
        path = tmp_path / "palette.yaml"
        path.write_text("")

        config = load_config(path)
        assert len(config.registry) == 0

    def test_default_path_honours_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert get_default_config_path() == path

    def test_load_default_without_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "none.yaml"))

        config = load_default_config()
        assert len(config.registry) == 0
        assert config.keymap.toggle == DEFAULT_TOGGLE_KEY

    def test_load_default_with_file(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path / "palette.yaml", {"keymap": "ctrl+o"})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_default_config().keymap.toggle == "ctrl+o"


class TestExampleConfig:
    def test_example_config_is_valid(self):
        config = parse_config(yaml.safe_load(EXAMPLE_CONFIG))

        assert config.registry.names == ("Disk Usage", "Git Status", "List Files")
        assert config.keymap.toggle == DEFAULT_TOGGLE_KEY
        assert config.window.padding == (0, 1, 0, 1)

    def test_write_example_config(self, tmp_path):
        path = tmp_path / "nested" / "palette.yaml"

        assert write_example_config(path) is True
        assert path.read_text() == EXAMPLE_CONFIG
        assert load_config(path).registry.lookup("Git Status") == "git status"

    def test_write_does_not_overwrite(self, tmp_path):
        path = tmp_path / "palette.yaml"
        path.write_text("commands: {}\n")

        assert write_example_config(path) is False
        assert path.read_text() == "commands: {}\n"

    def test_write_with_force(self, tmp_path):
        path = tmp_path / "palette.yaml"
        path.write_text("commands: {}\n")

        assert write_example_config(path, force=True) is True
        assert path.read_text() == EXAMPLE_CONFIG

    def test_write_to_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert write_example_config() is True
        assert path.exists()
