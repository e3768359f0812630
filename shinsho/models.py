"""
共通データモデル
"""

from dataclasses import asdict, dataclass, fields
from typing import Optional

NOT_AVAILABLE = "N/A"
UNDETERMINED_DATE = "発売日未定"

AMAZON_BASE_URL = "https://www.amazon.co.jp"


@dataclass
class NormalizedBook:
    """正規化された新書1冊分の情報（カタログ・RSS・投稿の単位）"""

    isbn13: str
    isbn10: str = ""
    title: str = NOT_AVAILABLE
    author: str = NOT_AVAILABLE
    author_bio: str = ""
    publisher: str = NOT_AVAILABLE
    series: str = ""
    published_date: str = UNDETERMINED_DATE
    page_count: str = ""
    description: str = ""
    table_of_contents: str = ""
    cover_image_url: str = ""
    discovered_at: str = ""

    def to_dict(self) -> dict:
        """辞書に変換"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "NormalizedBook":
        """保存済みの辞書から復元（欠けたキーは既定値）"""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        values.setdefault("isbn13", NOT_AVAILABLE)
        return cls(**values)

    def amazon_url(self, affiliate_tag: Optional[str] = None) -> str:
        """Amazon の商品URL（ISBN-10 がなければ ISBN-13 で検索）"""
        if self.isbn10:
            url = f"{AMAZON_BASE_URL}/dp/{self.isbn10}/"
            return f"{url}?tag={affiliate_tag}" if affiliate_tag else url

        url = f"{AMAZON_BASE_URL}/s?k={self.isbn13}"
        return f"{url}&tag={affiliate_tag}" if affiliate_tag else url
