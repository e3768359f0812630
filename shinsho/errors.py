"""
例外定義
"""


class ShinshoError(Exception):
    """shinsho の基底例外"""


class ConfigError(ShinshoError):
    """設定ファイルの読み込み・検証エラー"""


class PostError(ShinshoError):
    """X への投稿失敗"""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"X API error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body
