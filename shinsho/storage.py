"""
JSON ファイルの永続化

ISBN スナップショット・新書カタログ・投稿済み ISBN をそれぞれ1ファイルとして
丸ごと読み書きする。
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonStore:
    """1つの JSON ドキュメントの load / save"""

    def __init__(self, path: Path, default: Any = None):
        self.path = Path(path)
        self.default = [] if default is None else default

    def load(self) -> Any:
        """読み込み（ファイルがなければ既定値のコピー）"""
        if not self.path.exists():
            logger.info(f"ファイルが見つかりません: {self.path}（既定値を使用）")
            return copy.deepcopy(self.default)

        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, data: Any) -> None:
        """ファイル全体を上書き保存"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
