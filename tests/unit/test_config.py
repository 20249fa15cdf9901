"""Tests for VerifyConfig: env-driven settings."""

from __future__ import annotations

from pathlib import Path

from bootverify.config import VerifyConfig


class TestVerifyConfig:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        config = VerifyConfig()
        assert config.namespace == "kubevirt"
        assert config.timeout_seconds == 600
        assert config.poll_interval_seconds == 1.0
        assert config.verify_username == "verify"
        assert config.workers == 1
        assert config.results_file == Path("results.json")
        assert config.registry == "quay.io/containerdisks"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BOOTVERIFY_NAMESPACE", "verify")
        monkeypatch.setenv("BOOTVERIFY_TIMEOUT_SECONDS", "30")
        config = VerifyConfig()
        assert config.namespace == "verify"
        assert config.timeout_seconds == 30

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("BOOTVERIFY_WORKERS=4\n")
        assert VerifyConfig().workers == 4
