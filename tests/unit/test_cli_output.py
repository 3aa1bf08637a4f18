"""Unit tests for the closing build line marker."""

import unittest
from types import SimpleNamespace
from unittest.mock import patch

from pygant.cli import _result_marker


class TestResultMarker(unittest.TestCase):
    def marker(self, success, encoding):
        with patch("pygant.cli.sys.stdout", SimpleNamespace(encoding=encoding)):
            return _result_marker(success)

    def test_symbols_on_utf8(self):
        self.assertEqual(self.marker(True, "utf-8"), "✓")
        self.assertEqual(self.marker(False, "utf-8"), "✗")

    def test_ascii_fallback(self):
        self.assertEqual(self.marker(True, "ascii"), "[ OK ]")
        self.assertEqual(self.marker(False, "ascii"), "[ FAIL ]")

    def test_unknown_or_missing_encoding(self):
        self.assertEqual(self.marker(False, None), "[ FAIL ]")
        self.assertEqual(self.marker(True, "no-such-codec"), "[ OK ]")
