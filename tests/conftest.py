"""テスト共通のフィクスチャ"""

from datetime import datetime, timezone
from typing import Optional

import pytest

from shinsho.config import Settings
from shinsho.errors import PostError


def make_record(
    isbn: str = "9784004320975",
    title: str = "テスト書名",
    series: Optional[str] = "岩波新書 ； 新赤版 2097",
    pubdate: str = "202507",
    contributors: Optional[list] = None,
    datekoukai: str = "",
    datemodified: str = "",
) -> dict:
    """openBD 形式の書誌レコード"""
    if contributors is None:
        contributors = [
            {
                "PersonName": {"content": "山田 太郎", "collationkey": "ヤマダ タロウ"},
                "ContributorRole": ["A01"],
                "BiographicalNote": "1970年生まれ。",
            }
        ]

    descriptive = {
        "TitleDetail": {
            "TitleType": "01",
            "TitleElement": {"TitleElementLevel": "01", "TitleText": {"content": title}},
        },
        "Contributor": contributors,
        "Extent": [{"ExtentType": "11", "ExtentValue": "240", "ExtentUnit": "03"}],
    }
    if series is not None:
        descriptive["Collection"] = {
            "CollectionType": "10",
            "TitleDetail": {
                "TitleType": "01",
                "TitleElement": [{"TitleElementLevel": "02", "TitleText": {"content": series}}],
            },
        }

    return {
        "onix": {
            "RecordReference": isbn,
            "ProductIdentifier": {"ProductIDType": "15", "IDValue": isbn},
            "DescriptiveDetail": descriptive,
            "CollateralDetail": {
                "TextContent": [
                    {"TextType": "02", "ContentAudience": "00", "Text": "短い紹介"},
                    {"TextType": "03", "ContentAudience": "00", "Text": "長い紹介"},
                    {"TextType": "04", "ContentAudience": "00", "Text": "第1章\n第2章"},
                ],
                "SupportingResource": [
                    {
                        "ResourceContentType": "01",
                        "ContentAudience": "01",
                        "ResourceMode": "03",
                        "ResourceVersion": [
                            {"ResourceForm": "02", "ResourceLink": f"https://cover.openbd.jp/{isbn}.jpg"}
                        ],
                    }
                ],
            },
            "PublishingDetail": {
                "Imprint": {"ImprintName": "岩波書店"},
                "Publisher": {"PublishingRole": "01", "PublisherName": "岩波書店"},
            },
        },
        "summary": {"isbn": isbn, "title": title, "series": series or "", "pubdate": pubdate},
        "hanmoto": {"datekoukai": datekoukai, "datemodified": datemodified},
    }


class MemoryStore:
    """JsonStore のインメモリ版"""

    def __init__(self, data=None, fail_on_save: bool = False):
        self.data = data
        self.saved = []
        self.fail_on_save = fail_on_save

    def load(self):
        return list(self.data) if self.data is not None else []

    def save(self, data):
        if self.fail_on_save:
            raise OSError("disk full")
        self.data = data
        self.saved.append(data)


class FakeSource:
    """openBD クライアントの代わり"""

    def __init__(self, coverage, records=None, error: Optional[Exception] = None):
        self.coverage = coverage
        self.records = records or {}
        self.error = error
        self.requested = []

    def get_coverage(self):
        return list(self.coverage)

    def get_records(self, isbns):
        self.requested.append(list(isbns))
        if self.error is not None:
            raise self.error
        return [self.records.get(isbn) for isbn in isbns]


class FakePoster:
    """XPoster の代わり"""

    def __init__(self, fail_titles=()):
        self.texts = []
        self.fail_titles = set(fail_titles)

    def post(self, text):
        for title in self.fail_titles:
            if title in text:
                raise PostError(500, "error")
        self.texts.append(text)
        return {"data": {"id": str(len(self.texts))}}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        labels=["岩波新書", "中公新書", "講談社現代新書"],
        affiliate_tag="shinshofinder-22",
        post_interval=0,
        data_dir=tmp_path / "data",
        docs_dir=tmp_path / "docs",
    )


@pytest.fixture
def now():
    return datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
