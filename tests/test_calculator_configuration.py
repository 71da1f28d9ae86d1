"""Tests for calculator configuration and environment loading."""

import dataclasses
import os
import unittest
from unittest.mock import patch

from calculator.configuration import CalculatorConfiguration
from calculator.shared import DEFAULT_CONTEXT_WINDOW_TOKENS, ModelVersion, ResolutionTier, TokenBreakdown
from utils import env
from utils.gemini_validators import GeminiValidationError


class TestCalculatorConfiguration(unittest.TestCase):
    def test_defaults(self):
        configuration = CalculatorConfiguration()
        self.assertIs(configuration.model_version, ModelVersion.GEMINI_3_0)
        self.assertIs(configuration.default_resolution_tier, ResolutionTier.MEDIUM)
        self.assertEqual(configuration.video_fps, 1.0)

    def test_string_values_normalized(self):
        configuration = CalculatorConfiguration(
            model_version="Gemini-2.5", default_resolution_tier="HIGH", video_fps="0.5"
        )
        self.assertIs(configuration.model_version, ModelVersion.GEMINI_2_5)
        self.assertIs(configuration.default_resolution_tier, ResolutionTier.HIGH)
        self.assertEqual(configuration.video_fps, 0.5)

    def test_invalid_values_rejected(self):
        with self.assertRaises(GeminiValidationError):
            CalculatorConfiguration(model_version="gpt-4")
        with self.assertRaises(GeminiValidationError):
            CalculatorConfiguration(default_resolution_tier="ultra")
        with self.assertRaises(GeminiValidationError):
            CalculatorConfiguration(video_fps=0)

    def test_immutable(self):
        configuration = CalculatorConfiguration()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            configuration.video_fps = 2.0

    def test_with_changes_validates_and_copies(self):
        original = CalculatorConfiguration()
        changed = original.with_changes(model_version="gemini-2.5", video_fps=3)

        self.assertIs(changed.model_version, ModelVersion.GEMINI_2_5)
        self.assertEqual(changed.video_fps, 3.0)
        self.assertIs(original.model_version, ModelVersion.GEMINI_3_0)

        with self.assertRaises(GeminiValidationError):
            original.with_changes(video_fps=-1)

    def test_to_dict(self):
        configuration = CalculatorConfiguration(model_version="gemini-2.5", default_resolution_tier="low")
        self.assertEqual(
            configuration.to_dict(),
            {"model_version": "gemini-2.5", "default_resolution_tier": "low", "video_fps": 1.0},
        )

    def test_equality(self):
        self.assertEqual(CalculatorConfiguration(video_fps="1"), CalculatorConfiguration())


class TestConfigurationFromEnv(unittest.TestCase):
    def test_from_env_reads_config_values(self):
        with (
            patch("config.DEFAULT_MODEL_VERSION", "gemini-2.5"),
            patch("config.GEMINI_MEDIA_RESOLUTION", "MEDIA_RESOLUTION_LOW"),
            patch("config.DEFAULT_VIDEO_FPS", "2"),
        ):
            configuration = CalculatorConfiguration.from_env()

        self.assertIs(configuration.model_version, ModelVersion.GEMINI_2_5)
        self.assertIs(configuration.default_resolution_tier, ResolutionTier.LOW)
        self.assertEqual(configuration.video_fps, 2.0)

    def test_from_env_rejects_invalid_values(self):
        with patch("config.DEFAULT_VIDEO_FPS", "fast"):
            with self.assertRaises(GeminiValidationError):
                CalculatorConfiguration.from_env()


class TestIntegerSettings(unittest.TestCase):
    def test_valid_value(self):
        import config

        with patch("config.get_env", return_value="1000000"):
            self.assertEqual(config._int_from_env("GEMINI_CONTEXT_WINDOW", 128000), 1000000)

    def test_unset_value_uses_default(self):
        import config

        with patch("config.get_env", return_value=None):
            self.assertEqual(config._int_from_env("GEMINI_CONTEXT_WINDOW", 128000), 128000)

    def test_malformed_value_is_logged_and_ignored(self):
        import config

        with patch("config.get_env", return_value="lots"):
            with self.assertLogs("config", level="WARNING") as cm:
                self.assertEqual(config._int_from_env("GEMINI_CONTEXT_WINDOW", 128000), 128000)
        self.assertIn("Invalid GEMINI_CONTEXT_WINDOW value 'lots'; ignoring.", cm.output[0])


class TestEnvLoading(unittest.TestCase):
    def tearDown(self):
        env.reload_env()

    def test_process_environment_wins_by_default(self):
        env.reload_env({"GEMINI_VIDEO_FPS": "4"})
        with patch.dict(os.environ, {"GEMINI_VIDEO_FPS": "2"}):
            self.assertEqual(env.get_env("GEMINI_VIDEO_FPS"), "2")

    def test_dotenv_used_when_environment_unset(self):
        env.reload_env({"GEMINI_VIDEO_FPS": "4"})
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(env.get_env("GEMINI_VIDEO_FPS"), "4")
            self.assertEqual(env.get_env("GEMINI_MODEL_VERSION", "gemini-3.0"), "gemini-3.0")
            self.assertIsNone(env.get_env("GEMINI_MODEL_VERSION"))

    def test_force_override(self):
        env.reload_env({"GEMINI_VIDEO_FPS": "4", "TOKEN_CALCULATOR_FORCE_ENV_OVERRIDE": "true"})
        with patch.dict(os.environ, {"GEMINI_VIDEO_FPS": "2"}):
            self.assertEqual(env.get_env("GEMINI_VIDEO_FPS"), "4")

    def test_empty_dotenv_value_falls_back_to_default(self):
        env.reload_env({"GEMINI_MEDIA_RESOLUTION": None, "TOKEN_CALCULATOR_FORCE_ENV_OVERRIDE": "true"})
        self.assertEqual(env.get_env("GEMINI_MEDIA_RESOLUTION", "medium"), "medium")


class TestTokenBreakdown(unittest.TestCase):
    def test_context_usage_percent(self):
        breakdown = TokenBreakdown.from_buckets({})
        self.assertEqual(breakdown.total, 0)

        breakdown = TokenBreakdown(total=1280, per_category={})
        self.assertAlmostEqual(breakdown.context_usage_percent(), 1.0)
        self.assertAlmostEqual(breakdown.context_usage_percent(2560), 50.0)
        self.assertEqual(DEFAULT_CONTEXT_WINDOW_TOKENS, 128000)

    def test_context_window_must_be_positive(self):
        with self.assertRaises(ValueError):
            TokenBreakdown(total=10, per_category={}).context_usage_percent(0)

    def test_to_dict(self):
        breakdown = TokenBreakdown(total=10, per_category={"overhead": 10})
        self.assertEqual(breakdown.to_dict(), {"total": 10, "breakdown": {"overhead": 10}})

    def test_per_category_is_read_only(self):
        source = {"text": 4, "overhead": 10}
        breakdown = TokenBreakdown(total=14, per_category=source)

        with self.assertRaises(TypeError):
            breakdown.per_category["text"] = 999
        source["text"] = 999
        self.assertEqual(breakdown.per_category["text"], 4)
        self.assertEqual(breakdown.per_category, {"text": 4, "overhead": 10})

    def test_to_dict_returns_independent_copy(self):
        breakdown = TokenBreakdown.from_buckets({})
        report = breakdown.to_dict()
        report["breakdown"]["overhead"] = 1
        self.assertEqual(breakdown["overhead"], 0)


if __name__ == "__main__":
    unittest.main()
