"""Tests for config validation."""

import pytest

from resumemate.config import QualityConfig, load_config


class TestConfigValidation:
    def test_valid_defaults(self):
        """Default config passes validation without raising."""
        config = load_config(None)
        assert config.llm.timeout == 60
        assert config.gateway.timeout_seconds == 30.0

    def test_invalid_failure_threshold(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("gateway:\n  failure_threshold: 0\n")
        with pytest.raises(ValueError, match="failure_threshold"):
            load_config(yaml)

    def test_invalid_max_concurrent(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("gateway:\n  max_concurrent: 0\n")
        with pytest.raises(ValueError, match="max_concurrent"):
            load_config(yaml)

    def test_invalid_max_attempts(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("gateway:\n  max_attempts: 9\n")
        with pytest.raises(ValueError, match="max_attempts"):
            load_config(yaml)

    def test_invalid_window(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("gateway:\n  failure_window_seconds: 0\n")
        with pytest.raises(ValueError, match="failure_window_seconds"):
            load_config(yaml)

    def test_invalid_timeout(self, tmp_path):
        """timeout of 0 (below minimum of 1) raises ValueError."""
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("llm:\n  timeout: 0\n")
        with pytest.raises(ValueError, match="timeout"):
            load_config(yaml)

    def test_invalid_jaccard_threshold(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("quality:\n  jaccard_threshold: 1.5\n")
        with pytest.raises(ValueError, match="jaccard_threshold"):
            load_config(yaml)

    def test_invalid_score_floor(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("booster:\n  score_floor: 101\n")
        with pytest.raises(ValueError, match="score_floor"):
            load_config(yaml)

    def test_invalid_max_passes(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("booster:\n  max_passes: 4\n")
        with pytest.raises(ValueError, match="max_passes"):
            load_config(yaml)

    def test_min_paragraphs_above_max(self):
        with pytest.raises(ValueError, match="min_paragraphs"):
            QualityConfig(min_paragraphs=6, max_paragraphs=5)
