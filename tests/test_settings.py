# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path
from unittest.mock import patch

from src.config import settings as settings_module
from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_limits_are_consistent(self) -> None:
        """DEFAULT_LIMIT lies within MIN_LIMIT..MAX_LIMIT."""
        self.assertEqual(Settings.MIN_LIMIT, 1)
        self.assertEqual(Settings.MAX_LIMIT, 50)
        self.assertGreaterEqual(Settings.DEFAULT_LIMIT, Settings.MIN_LIMIT)
        self.assertLessEqual(Settings.DEFAULT_LIMIT, Settings.MAX_LIMIT)

    def test_candidate_multiplier_positive(self) -> None:
        """CANDIDATE_MULTIPLIER must be >= 1."""
        self.assertGreaterEqual(Settings.CANDIDATE_MULTIPLIER, 1)

    def test_row_cap_non_negative(self) -> None:
        """FEED_ROW_CAP is 0 (unlimited) or positive."""
        self.assertGreaterEqual(Settings.FEED_ROW_CAP, 0)

    def test_timeout_positive(self) -> None:
        """FEED_TIMEOUT must be > 0."""
        self.assertGreater(Settings.FEED_TIMEOUT, 0)

    def test_feed_constants(self) -> None:
        """Currency and text suffix match the feed format."""
        self.assertEqual(Settings.FEED_CURRENCY, "BRL")
        self.assertTrue(Settings.FEED_TEXT_SUFFIX.startswith("."))

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.RESULTS_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)

    def test_default_headers_identity(self) -> None:
        """DEFAULT_HEADERS carries a fixed browser identity."""
        self.assertIn("User-Agent", Settings.DEFAULT_HEADERS)
        self.assertIn("Accept-Language", Settings.DEFAULT_HEADERS)
        self.assertIn("pt-BR", Settings.DEFAULT_HEADERS["Accept-Language"])


class TestEnvHelpers(unittest.TestCase):
    """Environment parsing fallbacks."""

    def test_env_int_valid(self) -> None:
        """Integers are read from the environment."""
        with patch.dict("os.environ", {"X_TEST_INT": "42"}):
            self.assertEqual(settings_module._env_int("X_TEST_INT", 7), 42)

    def test_env_int_invalid_falls_back(self) -> None:
        """Garbage and blanks fall back to the default."""
        for raw in ("abc", "", "  "):
            with self.subTest(raw=raw):
                with patch.dict("os.environ", {"X_TEST_INT": raw}):
                    self.assertEqual(
                        settings_module._env_int("X_TEST_INT", 7), 7
                    )

    def test_env_int_min_value(self) -> None:
        """Values below the minimum are raised to it."""
        with patch.dict("os.environ", {"X_TEST_INT": "-5"}):
            self.assertEqual(
                settings_module._env_int("X_TEST_INT", 7, min_value=1), 1
            )

    def test_env_float(self) -> None:
        """Floats parse, garbage falls back."""
        with patch.dict("os.environ", {"X_TEST_FLOAT": "2.5"}):
            self.assertEqual(
                settings_module._env_float("X_TEST_FLOAT", 1.0), 2.5
            )
        with patch.dict("os.environ", {"X_TEST_FLOAT": "soon"}):
            self.assertEqual(
                settings_module._env_float("X_TEST_FLOAT", 1.0), 1.0
            )

    def test_env_missing(self) -> None:
        """Unset variables use the default."""
        with patch.dict("os.environ", {}, clear=False):
            self.assertEqual(
                settings_module._env_int("X_TEST_NOT_SET_ANYWHERE", 3), 3
            )


if __name__ == "__main__":
    unittest.main()
