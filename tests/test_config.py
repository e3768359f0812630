"""config モジュールのテスト"""

import pytest

from shinsho.config import DEFAULT_CONFIG_PATH, DEFAULT_LABELS, load_settings, settings_from_dict
from shinsho.errors import ConfigError


class TestLoadSettings:
    """設定読み込みのテスト"""

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "none.yaml")

        assert settings.labels == DEFAULT_LABELS
        assert settings.recency_policy == "none"
        assert settings.affiliate_tag == "shinshofinder-22"

    def test_defaults_match_bundled_settings(self):
        """既定のレーベルが同梱の設定ファイルと一致すること"""
        bundled = load_settings(DEFAULT_CONFIG_PATH)

        assert DEFAULT_LABELS == bundled.labels
        assert "朝日新書" in DEFAULT_LABELS
        assert "ハヤカワ新書" in DEFAULT_LABELS

    def test_missing_social_section_keeps_affiliate_tag(self):
        assert settings_from_dict({}).affiliate_tag == "shinshofinder-22"

    def test_bundled_settings(self):
        settings = load_settings(DEFAULT_CONFIG_PATH)

        assert "岩波新書" in settings.labels
        assert settings.batch_size == 1000
        assert settings.affiliate_tag == "shinshofinder-22"
        assert settings.catalog_path.name == "shinsho-database.json"

    def test_yaml_file(self, tmp_path):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        path = config_dir / "settings.yaml"
        path.write_text(
            "labels: [中公新書]\n"
            "openbd: {batch_size: 50}\n"
            "recency: {policy: upcoming}\n"
            "paths: {data_dir: out/data}\n",
            encoding="utf-8",
        )

        settings = load_settings(path)

        assert settings.labels == ["中公新書"]
        assert settings.batch_size == 50
        assert settings.recency_policy == "upcoming"
        assert settings.data_dir == tmp_path.resolve() / "out" / "data"

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("labels: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_settings(path)


class TestSettingsFromDict:
    """設定値検証のテスト"""

    def test_invalid_labels(self):
        with pytest.raises(ConfigError):
            settings_from_dict({"labels": "岩波新書"})

    def test_invalid_number(self):
        with pytest.raises(ConfigError):
            settings_from_dict({"openbd": {"batch_size": "many"}})

    def test_zero_batch_size(self):
        with pytest.raises(ConfigError):
            settings_from_dict({"openbd": {"batch_size": 0}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            settings_from_dict({"feed": ["title"]})
