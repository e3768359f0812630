"""
新書カタログから RSS フィードを生成
"""

import html
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from dateutil import parser as date_parser
from feedgen.feed import FeedGenerator

from shinsho.classifier import matched_label
from shinsho.config import Settings
from shinsho.models import NormalizedBook

logger = logging.getLogger(__name__)

MAX_FEED_ENTRIES = 100
FEED_TTL_MINUTES = 1440
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _discovered_at(book: NormalizedBook) -> datetime:
    """発見日時（不正・未設定は最古扱い）"""
    try:
        value = date_parser.parse(book.discovered_at)
    except (ValueError, OverflowError, TypeError):
        return EPOCH
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def select_feed_books(books: Sequence[NormalizedBook], limit: int = MAX_FEED_ENTRIES) -> list[NormalizedBook]:
    """発見日時の新しい順に最大 limit 件"""
    return sorted(books, key=_discovered_at, reverse=True)[:limit]


def create_description(book: NormalizedBook) -> str:
    """RSS 用の HTML 説明文"""
    e = html.escape
    parts = []

    if book.cover_image_url:
        parts.append(
            f'<img src="{e(book.cover_image_url)}" alt="{e(book.title)}" '
            'style="max-width: 200px; float: left; margin-right: 15px;"/>\n'
        )

    parts.append(f"<p><strong>著者:</strong> {e(book.author)}</p>")
    parts.append(f"<p><strong>出版社:</strong> {e(book.publisher)}</p>")
    parts.append(f"<p><strong>シリーズ:</strong> {e(book.series)}</p>")
    parts.append(f"<p><strong>ISBN:</strong> {e(book.isbn13)}</p>")
    parts.append(f"<p><strong>発売日:</strong> {e(book.published_date)}</p>")

    if book.page_count:
        parts.append(f"<p><strong>ページ数:</strong> {e(book.page_count)}ページ</p>")
    if book.description:
        parts.append(f"<h4>内容紹介</h4>\n<p>{e(book.description)}</p>")
    if book.table_of_contents:
        parts.append(f"<h4>目次</h4>\n<pre>{e(book.table_of_contents)}</pre>")
    if book.author_bio:
        parts.append(f"<h4>著者略歴</h4>\n<p>{e(book.author_bio)}</p>")

    parts.append('<div style="clear: both;"></div>')
    return "\n".join(parts)


def build_feed(
    books: Sequence[NormalizedBook],
    settings: Settings,
    now: Optional[datetime] = None,
) -> FeedGenerator:
    """RSS フィードを組み立てる"""
    fg = FeedGenerator()
    fg.id(settings.feed_url)
    fg.title(settings.feed_title)
    fg.link(href=settings.site_url, rel="alternate")
    fg.link(href=settings.feed_url, rel="self")
    fg.description(settings.feed_description)
    fg.language("ja")
    fg.ttl(FEED_TTL_MINUTES)
    fg.lastBuildDate(now or datetime.now(timezone.utc))

    for book in select_feed_books(books, settings.max_feed_entries):
        fe = fg.add_entry(order="append")
        fe.guid(book.isbn13, permalink=False)
        fe.title(book.title)
        fe.link(href=book.amazon_url())
        fe.description(create_description(book))
        fe.published(_discovered_at(book))

        fe.category(term="新書", label="新書")
        label = matched_label(book.series, settings.labels)
        if label:
            fe.category(term=label, label=label)
        if book.series and book.series != label:
            fe.category(term=book.series, label=book.series)

    return fg


def write_feed(
    books: Sequence[NormalizedBook],
    path: Path,
    settings: Settings,
    now: Optional[datetime] = None,
) -> int:
    """RSS ファイルを書き出し、エントリー数を返す"""
    fg = build_feed(books, settings, now=now)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fg.rss_file(str(path), pretty=True)

    count = len(fg.entry())
    logger.info(f"RSSフィードを生成しました: {path}（{count}件）")
    return count
