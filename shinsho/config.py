"""
設定の読み込み

config/settings.yaml を Settings に展開する。ファイルがなければ既定値を使う。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from shinsho.errors import ConfigError

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = BASE_DIR / "config" / "settings.yaml"

DEFAULT_LABELS = [
    "岩波新書",
    "中公新書",
    "ちくま新書",
    "講談社現代新書",
    "文春新書",
    "新潮新書",
    "集英社新書",
    "光文社新書",
    "幻冬舎新書",
    "PHP新書",
    "平凡社新書",
    "小学館新書",
    "ベスト新書",
    "角川新書",
    "ちくまプリマー新書",
    "中公新書ラクレ",
    "講談社＋α新書",
    "講談社+α新書",
    "SB新書",
    "ブルーバックス",
    "岩波ジュニア新書",
    "朝日新書",
    "祥伝社新書",
    "扶桑社新書",
    "宝島社新書",
    "NHK出版新書",
    "サイエンス・アイ新書",
    "星海社新書",
    "PHPビジネス新書",
    "ハヤカワ新書",
]


@dataclass
class Settings:
    """実行設定"""

    labels: list[str] = field(default_factory=lambda: list(DEFAULT_LABELS))

    # openBD
    api_base_url: str = "https://api.openbd.jp/v1"
    batch_size: int = 1000
    request_interval: float = 1.0
    timeout: float = 60.0

    # 発売日フィルタ
    recency_policy: str = "none"
    recency_max_days: int = 3

    # RSS
    feed_title: str = "新書ファインダー"
    feed_description: str = "openBD APIを使用した新書の新刊情報フィード"
    site_url: str = "https://analekt.github.io/shinsho-finder/"
    feed_url: str = "https://analekt.github.io/shinsho-finder/index.xml"
    max_feed_entries: int = 100

    # X
    affiliate_tag: str = "shinshofinder-22"
    post_interval: float = 1.0

    data_dir: Path = BASE_DIR / "data"
    docs_dir: Path = BASE_DIR / "docs"

    @property
    def isbn_list_path(self) -> Path:
        return self.data_dir / "isbn-list.json"

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / "shinsho-database.json"

    @property
    def posted_path(self) -> Path:
        return self.data_dir / "posted-isbns.json"

    @property
    def feed_path(self) -> Path:
        return self.docs_dir / "index.xml"


def _section(data: dict, name: str) -> dict:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' はマッピングで指定してください")
    return value


def _resolve(path_value: str, base_dir: Path) -> Path:
    path = Path(path_value)
    return path if path.is_absolute() else base_dir / path


def settings_from_dict(data: dict, base_dir: Path = BASE_DIR) -> Settings:
    """YAML から読み込んだ辞書を Settings に変換"""
    if not isinstance(data, dict):
        raise ConfigError("設定ファイルのトップレベルはマッピングである必要があります")

    settings = Settings(data_dir=base_dir / "data", docs_dir=base_dir / "docs")

    labels = data.get("labels")
    if labels is not None:
        if not isinstance(labels, list) or not all(isinstance(x, str) and x for x in labels):
            raise ConfigError("'labels' は空でない文字列のリストで指定してください")
        settings.labels = list(labels)

    openbd = _section(data, "openbd")
    recency = _section(data, "recency")
    feed = _section(data, "feed")
    social = _section(data, "social")
    paths = _section(data, "paths")

    try:
        settings.api_base_url = str(openbd.get("base_url", settings.api_base_url)).rstrip("/")
        settings.batch_size = int(openbd.get("batch_size", settings.batch_size))
        settings.request_interval = float(openbd.get("request_interval", settings.request_interval))
        settings.timeout = float(openbd.get("timeout", settings.timeout))

        settings.recency_policy = str(recency.get("policy", settings.recency_policy))
        settings.recency_max_days = int(recency.get("max_days", settings.recency_max_days))

        settings.feed_title = str(feed.get("title", settings.feed_title))
        settings.feed_description = str(feed.get("description", settings.feed_description))
        settings.site_url = str(feed.get("site_url", settings.site_url))
        settings.feed_url = str(feed.get("feed_url", settings.feed_url))
        settings.max_feed_entries = int(feed.get("max_entries", settings.max_feed_entries))

        settings.affiliate_tag = str(social.get("affiliate_tag", settings.affiliate_tag) or "")
        settings.post_interval = float(social.get("post_interval", settings.post_interval))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"設定値が不正です: {e}") from e

    if settings.batch_size < 1:
        raise ConfigError("'openbd.batch_size' は1以上で指定してください")

    if "data_dir" in paths:
        settings.data_dir = _resolve(paths["data_dir"], base_dir)
    if "docs_dir" in paths:
        settings.docs_dir = _resolve(paths["docs_dir"], base_dir)

    return settings


def load_settings(path: Optional[Path] = None) -> Settings:
    """settings.yaml を読み込み（存在しなければ既定値）"""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    path = Path(path)

    if not path.exists():
        return Settings()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"設定ファイルを解析できません: {path}: {e}") from e

    # 相対パスは config/ の親（リポジトリルート）基準
    config_dir = path.resolve().parent
    base_dir = config_dir.parent if config_dir.name == "config" else config_dir
    return settings_from_dict(data, base_dir=base_dir)
