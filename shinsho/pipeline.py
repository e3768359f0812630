"""
新刊検出パイプライン

coverage 取得 → 前回スナップショットとの差分 → 新規 ISBN の書誌取得 →
正規化・レーベル判定・新刊判定 → カタログ追加 → X 投稿 → スナップショット保存
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Protocol, Sequence

from shinsho.classifier import is_tracked_imprint
from shinsho.config import Settings
from shinsho.isbn import diff_isbns
from shinsho.models import NormalizedBook
from shinsho.normalizer import normalize
from shinsho.onix import decode_record
from shinsho.recency import NoFilterPolicy, ReleasePolicy
from shinsho.social import XPoster, post_new_books
from shinsho.storage import JsonStore

logger = logging.getLogger(__name__)


class BookSource(Protocol):
    def get_coverage(self) -> list[str]: ...

    def get_records(self, isbns: Sequence[str]) -> list[Optional[dict]]: ...


@dataclass
class RunResult:
    """1回の実行結果"""

    current_count: int = 0
    new_isbns: list[str] = field(default_factory=list)
    fetched_count: int = 0
    added: list[NormalizedBook] = field(default_factory=list)
    posted_count: int = 0
    skipped_count: int = 0
    first_run: bool = False
    catalog: list[NormalizedBook] = field(default_factory=list)


def extract_shinsho(
    raw_records: Iterable[Optional[dict]],
    labels: Sequence[str],
    policy: ReleasePolicy,
    now: datetime,
    isbns: Optional[Sequence[str]] = None,
) -> tuple[list[NormalizedBook], int]:
    """
    書誌レコードから追跡対象の新書を抽出

    未収録（None）のレコードは無視し、形の不正なレコードはログを出してスキップする。
    isbns を渡すとレコードと同じ位置の ISBN を ISBN-13 の代替に使う。

    Returns:
        (抽出した新書, スキップしたレコード数)
    """
    books: list[NormalizedBook] = []
    skipped = 0
    discovered_at = now.isoformat()

    for i, raw in enumerate(raw_records):
        if raw is None:
            continue
        fetch_isbn = isbns[i] if isbns is not None and i < len(isbns) else None
        try:
            record = decode_record(raw)
            book = normalize(record, isbn=fetch_isbn, discovered_at=discovered_at)
            if book is None:
                continue
            if not is_tracked_imprint(book.series, labels):
                continue
            if not policy(record, now):
                logger.debug(f"新刊判定で除外: {book.title} ({book.isbn13})")
                continue
        except (ValueError, TypeError) as e:
            skipped += 1
            logger.warning(f"レコード処理エラー: {e}")
            continue

        books.append(book)
        logger.info(f"新規新書発見: {book.title} (ISBN: {book.isbn13})")

    logger.info(f"新書 {len(books)}件を検出")
    return books, skipped


class ShinshoPipeline:
    """新刊検出の1回分の実行"""

    def __init__(
        self,
        source: BookSource,
        snapshot_store: JsonStore,
        catalog_store: JsonStore,
        posted_store: JsonStore,
        settings: Settings,
        policy: Optional[ReleasePolicy] = None,
        poster: Optional[XPoster] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.source = source
        self.snapshot_store = snapshot_store
        self.catalog_store = catalog_store
        self.posted_store = posted_store
        self.settings = settings
        self.policy = policy or NoFilterPolicy()
        self.poster = poster
        self.clock = clock
        self.sleep = sleep

    def load_catalog(self) -> list[NormalizedBook]:
        return [NormalizedBook.from_dict(d) for d in self.catalog_store.load()]

    def run(self, isbn_filter: Optional[Callable[[list[str]], list[str]]] = None) -> RunResult:
        """
        パイプラインを実行

        外部 API のエラーはそのまま送出する。その場合スナップショット・カタログは
        実行前の状態のまま残る。

        Args:
            isbn_filter: 差分対象の絞り込み（日本の書籍のみ、件数制限など）。
                保存する ISBN リストには適用しない。
        """
        result = RunResult()

        current = self.source.get_coverage()
        result.current_count = len(current)
        targets = isbn_filter(current) if isbn_filter is not None else current

        previous = self.snapshot_store.load()
        logger.info(f"前回のISBN数: {len(previous)}")

        result.new_isbns = diff_isbns(set(previous), targets)
        logger.info(f"新規ISBN数: {len(result.new_isbns)}")

        result.first_run = len(previous) == 0
        catalog = self.load_catalog()

        if result.first_run:
            # 全件の書誌取得を避け、次回以降の差分の基準だけ作る
            logger.warning("初回実行のため書誌取得をスキップし、ISBNリストのみ保存します")
        elif result.new_isbns:
            records = self.source.get_records(result.new_isbns)
            result.fetched_count = sum(1 for r in records if r is not None)
            result.added, result.skipped_count = extract_shinsho(
                records, self.settings.labels, self.policy, self.clock(), isbns=result.new_isbns
            )

            if result.added:
                catalog.extend(result.added)
                self.catalog_store.save([book.to_dict() for book in catalog])
                logger.info(f"新書データベースを更新しました（合計{len(catalog)}冊）")
                result.posted_count = self._post(result.added)
            else:
                logger.info("新しい新書は見つかりませんでした")
        else:
            logger.info("新規ISBNはありません")

        self.snapshot_store.save(current)
        logger.info(f"ISBNリストを保存しました（{len(current)}件）")

        result.catalog = catalog
        return result

    def _post(self, books: list[NormalizedBook]) -> int:
        if self.poster is None:
            logger.info("X APIが設定されていないため投稿をスキップします")
            return 0

        posted = set(self.posted_store.load())
        count = post_new_books(books, posted, self.poster, self.settings, sleep=self.sleep)
        self.posted_store.save(sorted(posted))
        return count
