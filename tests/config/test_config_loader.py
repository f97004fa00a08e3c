import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from gitscribe.config.loader import ConfigError, load_config, parse_config
from gitscribe.config.settings import Provider, Settings


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def test_load_config_success(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_dir = Path(tmp)
            config = {
                "provider": "cloud",
                "request_timeout": 30,
                "ollama": {"url": "http://gpu:11434/api/chat", "model": "mistral", "max_retries": 4},
                "gemini": {"model": "gemini-2.0-flash", "initial_backoff": 0.5},
            }
            (config_dir / "config.json").write_text(json.dumps(config))

            with patch("gitscribe.config.loader.get_config_directory", return_value=config_dir):
                settings = load_config()

        self.assertIs(settings.provider, Provider.GEMINI)
        self.assertEqual(settings.request_timeout, 30.0)
        self.assertEqual(settings.ollama.url, "http://gpu:11434/api/chat")
        self.assertEqual(settings.ollama.model, "mistral")
        self.assertEqual(settings.ollama.max_retries, 4)
        self.assertEqual(settings.ollama.temperature, 0.2)
        self.assertEqual(settings.gemini.model, "gemini-2.0-flash")
        self.assertEqual(settings.gemini.initial_backoff, 0.5)
        self.assertEqual(settings.gemini.max_retries, 5)

    def test_load_config_missing_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch("gitscribe.config.loader.get_config_directory", return_value=Path(tmp)):
                self.assertEqual(load_config(), Settings())

    def test_load_config_explicit_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.json"
            path.write_text(json.dumps({"provider": "ollama"}))
            self.assertIs(load_config(path).provider, Provider.OLLAMA)

    def test_load_config_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{invalid}")
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_default_location_is_under_home(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch("gitscribe.config.loader.Path.home", return_value=Path(tmp)):
                (Path(tmp) / ".gitscribe").mkdir()
                (Path(tmp) / ".gitscribe" / "config.json").write_text('{"provider": "gemini"}')
                self.assertIs(load_config().provider, Provider.GEMINI)


class TestParseConfig(unittest.TestCase):
    def test_empty_object(self) -> None:
        self.assertEqual(parse_config({}), Settings())

    def test_not_an_object(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config(["ollama"])

    def test_unknown_provider(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config({"provider": "openai"})

    def test_wrong_types(self) -> None:
        bad = [
            {"request_timeout": "fast"},
            {"request_timeout": True},
            {"ollama": "http://localhost"},
            {"ollama": {"max_retries": "3"}},
            {"ollama": {"max_retries": True}},
            {"gemini": {"model": 5}},
            {"gemini": {"initial_backoff": "1s"}},
        ]
        for data in bad:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    parse_config(data)

    def test_value_ranges(self) -> None:
        for data in (
            {"ollama": {"max_retries": 0}},
            {"gemini": {"initial_backoff": -1}},
            {"ollama": {"context_window_min": 8192, "context_window_max": 4096}},
        ):
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    parse_config(data)

    def test_unknown_keys_are_ignored(self) -> None:
        with self.assertLogs("gitscribe.config.loader", level="WARNING") as logs:
            settings = parse_config({"ollama": {"colour": "blue", "model": "phi3"}})
        self.assertEqual(settings.ollama.model, "phi3")
        self.assertIn("ollama.colour", logs.output[0])

    def test_integer_backoff_is_accepted(self) -> None:
        self.assertEqual(parse_config({"ollama": {"initial_backoff": 2}}).ollama.initial_backoff, 2)


if __name__ == "__main__":
    unittest.main()
