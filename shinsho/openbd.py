"""
openBD API クライアント
"""

import logging
import time
from typing import Callable, Iterator, Optional, Sequence

import requests

from shinsho.config import Settings

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.openbd.jp/v1"
BATCH_SIZE = 1000


def japanese_only(isbns: Sequence[str]) -> list[str]:
    """日本の書籍（978-4 で始まる ISBN）のみ"""
    return [isbn for isbn in isbns if isbn.startswith("9784") or isbn.startswith("978-4")]


class OpenBDClient:
    """openBD の coverage / get を呼ぶ"""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        batch_size: int = BATCH_SIZE,
        request_interval: float = 1.0,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.batch_size = batch_size
        self.request_interval = request_interval
        self.timeout = timeout
        self.session = session or requests.Session()
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "OpenBDClient":
        return cls(
            base_url=settings.api_base_url,
            batch_size=settings.batch_size,
            request_interval=settings.request_interval,
            timeout=settings.timeout,
            **kwargs,
        )

    def get_coverage(self) -> list[str]:
        """openBD に収録されている全 ISBN"""
        logger.info("全ISBNリストを取得中...")
        response = self.session.get(f"{self.base_url}/coverage", timeout=self.timeout)
        response.raise_for_status()

        isbn_list = response.json()
        logger.info(f"総ISBN数: {len(isbn_list)}")
        return isbn_list

    def fetch_batch(self, isbns: Sequence[str]) -> list[Optional[dict]]:
        """1バッチ分の書誌を取得（未収録の ISBN は None、順序はリクエストと同じ）"""
        response = self.session.get(
            f"{self.base_url}/get",
            params={"isbn": ",".join(isbns)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def iter_records(self, isbns: Sequence[str]) -> Iterator[Optional[dict]]:
        """ISBN をバッチに分けて順に取得し、1件ずつ返す"""
        total_batches = (len(isbns) + self.batch_size - 1) // self.batch_size
        for i in range(0, len(isbns), self.batch_size):
            if i > 0 and self.request_interval > 0:
                self._sleep(self.request_interval)

            batch = isbns[i:i + self.batch_size]
            batch_num = i // self.batch_size + 1
            logger.info(f"バッチ {batch_num}/{total_batches}: {len(batch)}件の書誌を取得中...")

            books = self.fetch_batch(batch)
            logger.info(f"有効な書誌: {sum(1 for b in books if b is not None)}件")
            yield from books

    def get_records(self, isbns: Sequence[str]) -> list[Optional[dict]]:
        """ISBN の順に書誌を取得（未収録は None）"""
        return list(self.iter_records(isbns))
