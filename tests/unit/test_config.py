"""Unit tests for configuration files."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from pygant.config import (
    PROJECT_CONFIG_FILE,
    ConfigError,
    GantConfig,
    find_project_config,
    get_machine_config_path,
    get_user_config_path,
    load_config,
    parse_config_file,
)
from pygant.state import Verbosity


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, content):
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path


class TestParseConfigFile(ConfigTestCase):
    def test_missing_file_is_empty(self):
        self.assertEqual(parse_config_file(self.root / "missing.yml"), GantConfig())

    def test_empty_file_is_empty(self):
        self.assertEqual(parse_config_file(self.write("c.yml", "\n")), GantConfig())

    def test_all_keys(self):
        path = self.write(
            "c.yml",
            """
verbosity: verbose
dry_run: true
file: other.gant
definitions:
  version: 1.2
  release: false
  empty:
""",
        )
        config = parse_config_file(path)
        self.assertEqual(config.verbosity, Verbosity.VERBOSE)
        self.assertTrue(config.dry_run)
        self.assertEqual(config.file, "other.gant")
        self.assertEqual(config.definitions, {"version": "1.2", "release": "false", "empty": ""})

    def test_unknown_key(self):
        with self.assertRaises(ConfigError) as cm:
            parse_config_file(self.write("c.yml", "colour: red\n"))
        self.assertIn("colour", str(cm.exception))

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "verbosity: [unclosed\n"))

    def test_top_level_must_be_mapping(self):
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "- a\n- b\n"))

    def test_bad_verbosity(self):
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "verbosity: loud\n"))
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "verbosity: 3\n"))

    def test_bad_types(self):
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "dry_run: maybe\n"))
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "file: ''\n"))
        with self.assertRaises(ConfigError):
            parse_config_file(self.write("c.yml", "definitions: [a]\n"))


class TestGantConfigMerge(unittest.TestCase):
    def test_later_values_win(self):
        base = GantConfig(verbosity=Verbosity.DEBUG, dry_run=True, definitions={"a": "1", "b": "2"})
        override = GantConfig(verbosity=Verbosity.SILENT, file="x.gant", definitions={"b": "3"})
        merged = base.merge(override)
        self.assertEqual(merged.verbosity, Verbosity.SILENT)
        self.assertTrue(merged.dry_run)
        self.assertEqual(merged.file, "x.gant")
        self.assertEqual(merged.definitions, {"a": "1", "b": "3"})


class TestConfigLocations(ConfigTestCase):
    def test_config_paths_are_named_config_yml(self):
        self.assertEqual(get_machine_config_path().name, "config.yml")
        self.assertEqual(get_user_config_path().name, "config.yml")

    def test_find_project_config_walks_up(self):
        path = self.write(PROJECT_CONFIG_FILE, "")
        nested = self.root / "a" / "b"
        nested.mkdir(parents=True)
        self.assertEqual(find_project_config(nested), path)

    def test_load_config_merges_layers(self):
        machine = self.write("machine/config.yml", "verbosity: debug\ndefinitions:\n  a: machine\n")
        user = self.write("user/config.yml", "dry_run: true\ndefinitions:\n  a: user\n  b: user\n")
        self.write(f"project/{PROJECT_CONFIG_FILE}", "verbosity: quiet\ndefinitions:\n  b: project\n")

        with patch("pygant.config.get_machine_config_path", return_value=machine), patch(
            "pygant.config.get_user_config_path", return_value=user
        ):
            config = load_config(self.root / "project")

        self.assertEqual(config.verbosity, Verbosity.WARNINGS_AND_ERRORS)
        self.assertTrue(config.dry_run)
        self.assertEqual(config.definitions, {"a": "user", "b": "project"})
