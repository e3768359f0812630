"""
openBD レコードの正規化

デコード済みの OpenBDRecord から NormalizedBook を組み立てる。
任意フィールドが欠けていても例外にはせず、空文字か既定値に落とす。
"""

from datetime import datetime, timezone
from typing import Optional

from shinsho.isbn import to_isbn10
from shinsho.models import NOT_AVAILABLE, UNDETERMINED_DATE, NormalizedBook
from shinsho.onix import DescriptiveDetail, OpenBDRecord, PublishingDetail

MAIN_AUTHOR_ROLE = "A01"
PAGE_COUNT_TYPES = ("00", "11")
DESCRIPTION_TYPES = ("02", "03")  # 短い内容紹介 / 長い内容紹介
TOC_TYPE = "04"
FRONT_COVER_TYPE = "01"


def format_pubdate(pubdate: Optional[str]) -> str:
    """
    YYYYMM... 形式の発売日を「YYYY年M月」に変換

    6文字未満や数字でない場合は「発売日未定」。
    """
    value = (pubdate or "").replace("-", "")
    if len(value) < 6 or not (value[:6].isascii() and value[:6].isdigit()):
        return UNDETERMINED_DATE

    year, month = value[:4], int(value[4:6])
    return f"{year}年{month}月"


def series_name(detail: DescriptiveDetail) -> str:
    """Collection の最初の空でないタイトル"""
    collection = detail.collection
    if collection is None or collection.title_detail is None:
        return ""
    return collection.title_detail.first_text()


def _main_author(detail: DescriptiveDetail) -> tuple[str, str]:
    if not detail.contributors:
        return NOT_AVAILABLE, ""

    chosen = next(
        (c for c in detail.contributors if MAIN_AUTHOR_ROLE in c.roles),
        detail.contributors[0],
    )
    return chosen.name or NOT_AVAILABLE, chosen.biographical_note


def _publisher(publishing: PublishingDetail) -> str:
    if publishing.imprint and publishing.imprint.imprint_name:
        return publishing.imprint.imprint_name
    for publisher in publishing.publishers:
        if publisher.publisher_name:
            return publisher.publisher_name
    return NOT_AVAILABLE


def _page_count(detail: DescriptiveDetail) -> str:
    for extent in detail.extents:
        if extent.extent_type in PAGE_COUNT_TYPES:
            return extent.extent_value
    return ""


def normalize(
    record: OpenBDRecord,
    isbn: Optional[str] = None,
    discovered_at: Optional[str] = None,
) -> Optional[NormalizedBook]:
    """
    レコードを NormalizedBook に変換

    Args:
        record: デコード済みの openBD レコード
        isbn: 取得に使った ISBN（レコードに ISBN がない場合の代替）
        discovered_at: 処理時刻（省略時は現在時刻）

    Returns:
        onix / DescriptiveDetail がないレコードは None
    """
    onix = record.onix
    if onix is None or onix.descriptive_detail is None:
        return None

    detail = onix.descriptive_detail
    collateral = onix.collateral_detail

    isbn13 = (
        (onix.product_identifier.id_value if onix.product_identifier else "")
        or record.summary.isbn
        or isbn
        or NOT_AVAILABLE
    )

    title = detail.title_detail.first_text() if detail.title_detail else ""
    author, author_bio = _main_author(detail)

    # 内容紹介は後勝ち、目次は最初のものを使う
    description = ""
    table_of_contents = ""
    for text_content in collateral.text_contents:
        if text_content.text_type in DESCRIPTION_TYPES:
            description = text_content.text
        elif text_content.text_type == TOC_TYPE and not table_of_contents:
            table_of_contents = text_content.text

    cover_image_url = ""
    for resource in collateral.supporting_resources:
        if resource.content_type == FRONT_COVER_TYPE and resource.versions:
            cover_image_url = resource.versions[0].resource_link
            break

    return NormalizedBook(
        isbn13=isbn13,
        isbn10=to_isbn10(isbn13),
        title=title or NOT_AVAILABLE,
        author=author,
        author_bio=author_bio,
        publisher=_publisher(onix.publishing_detail),
        series=series_name(detail),
        published_date=format_pubdate(record.summary.pubdate),
        page_count=_page_count(detail),
        description=description,
        table_of_contents=table_of_contents,
        cover_image_url=cover_image_url,
        discovered_at=discovered_at or datetime.now(timezone.utc).isoformat(),
    )
