"""
X（旧Twitter）への新刊投稿
"""

import base64
import hashlib
import hmac
import logging
import os
import re
import secrets
import time
from typing import Callable, Iterable, Optional
from urllib.parse import quote

import requests

from shinsho.classifier import matched_label, normalize_label
from shinsho.config import Settings
from shinsho.errors import PostError
from shinsho.models import NOT_AVAILABLE, NormalizedBook

logger = logging.getLogger(__name__)

TWEET_URL = "https://api.twitter.com/2/tweets"

# ハッシュタグから除去する記号（ASCII と全角）
_HASHTAG_PUNCTUATION = (
    "!\"#$%&'()*+,-./:;<=>?@[\\]^`{|}~"
    "、。，．・：；？！´｀¨＾￣―‐／＼～∥｜…‥"
    "‘’“”（）〔〕［］｛｝〈〉《》「」『』【】＋－±×÷＝≠＜＞"
    "￥＄￠￡％＃＆＊＠§☆★○●◎◇◆□■△▲▽▼※〒→←↑↓〓〜"
)
_HASHTAG_STRIP = re.compile(r"\s|[" + re.escape(_HASHTAG_PUNCTUATION) + "]")


def hashtag(text: str) -> str:
    """空白と記号を取り除いたハッシュタグ（空なら空文字）"""
    tag = _HASHTAG_STRIP.sub("", text or "")
    return f"#{tag}" if tag else ""


def _series_tag(book: NormalizedBook, labels: Iterable[str]) -> str:
    label = matched_label(book.series, list(labels)) or normalize_label(book.series)
    return hashtag(label)


def format_post(book: NormalizedBook, settings: Settings) -> str:
    """投稿本文"""
    url = book.amazon_url(settings.affiliate_tag or None)

    tags = ["#新書", "#新刊", _series_tag(book, settings.labels)]
    if book.author != NOT_AVAILABLE:
        tags.append(hashtag(book.author))
    # 重複・空を除く
    tags = list(dict.fromkeys(t for t in tags if t))

    return (
        "📚 新書新刊\n"
        "\n"
        f"『{book.title}』\n"
        f"著者: {book.author}\n"
        f"シリーズ: {book.series}\n"
        f"発売: {book.published_date}\n"
        "\n"
        f"{url}\n"
        "\n"
        f"{' '.join(tags)}"
    )


def _percent(value: str) -> str:
    return quote(value, safe="~-._")


def oauth_signature(
    method: str, url: str, params: dict, consumer_secret: str, token_secret: str
) -> str:
    """OAuth 1.0a HMAC-SHA1 署名"""
    sorted_params = "&".join(
        f"{_percent(k)}={_percent(v)}" for k, v in sorted(params.items())
    )
    base_string = "&".join([method.upper(), _percent(url), _percent(sorted_params)])
    signing_key = f"{_percent(consumer_secret)}&{_percent(token_secret)}"

    digest = hmac.new(signing_key.encode(), base_string.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()


class XPoster:
    """X API v2 でツイートを投稿"""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        access_token: str,
        access_token_secret: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.access_token = access_token
        self.access_token_secret = access_token_secret
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> Optional["XPoster"]:
        """環境変数から生成（未設定なら None）"""
        keys = ("X_API_KEY", "X_API_SECRET", "X_ACCESS_TOKEN", "X_ACCESS_TOKEN_SECRET")
        values = [os.environ.get(key) for key in keys]
        if not all(values):
            return None
        return cls(*values)

    def _authorization_header(self, method: str, url: str) -> str:
        oauth_params = {
            "oauth_consumer_key": self.api_key,
            "oauth_nonce": secrets.token_hex(16),
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": str(int(time.time())),
            "oauth_token": self.access_token,
            "oauth_version": "1.0",
        }
        oauth_params["oauth_signature"] = oauth_signature(
            method, url, oauth_params, self.api_secret, self.access_token_secret
        )
        return "OAuth " + ", ".join(
            f'{_percent(k)}="{_percent(v)}"' for k, v in sorted(oauth_params.items())
        )

    def post(self, text: str) -> dict:
        """ツイートを投稿"""
        response = self.session.post(
            TWEET_URL,
            json={"text": text},
            headers={"Authorization": self._authorization_header("POST", TWEET_URL)},
            timeout=self.timeout,
        )
        if not response.ok:
            raise PostError(response.status_code, response.text)
        return response.json()


def post_new_books(
    books: Iterable[NormalizedBook],
    posted: set[str],
    poster: XPoster,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    未投稿の新書を順に投稿

    成功した ISBN は posted に追加する。投稿に失敗した本はログを出して次へ進む。

    Returns:
        投稿した件数
    """
    posted_count = 0
    for book in books:
        if book.isbn13 in posted:
            logger.info(f"投稿済みのためスキップ: {book.isbn13}")
            continue

        if posted_count > 0 and settings.post_interval > 0:
            sleep(settings.post_interval)

        try:
            logger.info(f"Xに投稿中: {book.title}")
            poster.post(format_post(book, settings))
        except (PostError, requests.RequestException) as e:
            logger.error(f"投稿エラー ({book.title}): {e}")
            continue

        posted.add(book.isbn13)
        posted_count += 1
        logger.info(f"投稿完了: {book.title}")

    logger.info(f"Xに{posted_count}件投稿しました")
    return posted_count
