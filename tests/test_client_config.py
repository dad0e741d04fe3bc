"""Tests for loading and saving client configuration."""

import json

import pytest
from pydantic import ValidationError

from contextforge.client import ClientConfig


class TestClientConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ClientConfig.load(tmp_path / "absent.json")
        assert config.api_url == "http://localhost:8000"
        assert config.default_format == "table"
        assert config.batch_size == 50
        assert config.auto_optimize is False

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        ClientConfig(api_url="https://forge.example.com/", api_key="k", batch_size=10).save(path)

        loaded = ClientConfig.load(path)
        assert loaded.api_url == "https://forge.example.com"
        assert loaded.api_key == "k"
        assert loaded.batch_size == 10

    def test_partial_file_fills_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"default_format": "json"}))
        config = ClientConfig.load(path)
        assert config.default_format == "json"
        assert config.timeout == 30.0

    def test_invalid_format_rejected(self):
        with pytest.raises(ValidationError):
            ClientConfig(default_format="xml")

    def test_problems(self):
        assert ClientConfig().problems() == []
        assert ClientConfig(api_url="").problems() == ["api_url is not set"]
        assert "must start with http" in ClientConfig(api_url="forge.local").problems()[0]
