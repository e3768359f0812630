"""
新刊判定ポリシー

新書レーベルと判定された本のうち、どれを新刊として扱うかを決める。
判定方法は設定（recency.policy）で切り替える:

- none: すべて通す
- upcoming: 発売月が今月以降、または発売日未定で最近3か月以内に登録された本
- recent_registration: openBD 公開日が今月以降で、公開日と更新日の差が max_days 日以内の本

現在時刻は常に呼び出し側から渡す。
"""

from datetime import date, datetime
from typing import Callable, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from shinsho.errors import ConfigError
from shinsho.onix import OpenBDRecord

RECENT_REGISTRATION_MONTHS = 3

# 欠けた日付要素を埋める基準（実行時の今日に依存させない）
PARSE_DEFAULT = datetime(1970, 1, 1)


def parse_year_month(pubdate: Optional[str]) -> Optional[tuple[int, int]]:
    """YYYYMM... から (年, 月) を取り出す。不正なら None"""
    value = (pubdate or "").replace("-", "")
    head = value[:6]
    if len(head) < 6 or not (head.isascii() and head.isdigit()):
        return None

    year, month = int(head[:4]), int(head[4:6])
    if not 1 <= month <= 12:
        return None
    return year, month


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    日付文字列をパース（タイムゾーン情報は捨てる）。不正なら None

    "2025-05" のように日が欠けていれば1日として扱う。
    """
    if not value:
        return None
    try:
        return date_parser.parse(value, default=PARSE_DEFAULT).replace(tzinfo=None)
    except (ValueError, OverflowError, TypeError):
        return None


def is_new_release(pubdate: Optional[str], registered: Optional[str], now: datetime) -> bool:
    """
    新刊（今月以降の発売、または発売日未定の最近の登録）かどうか

    Args:
        pubdate: summary.pubdate（YYYYMM...）
        registered: openBD への登録日（hanmoto.datekoukai, YYYY-MM-DD）
        now: 現在時刻
    """
    year_month = parse_year_month(pubdate)
    if year_month is not None:
        year, month = year_month
        return year > now.year or (year == now.year and month >= now.month)

    if pubdate:
        return False

    registered_at = parse_datetime(registered)
    if registered_at is None:
        return False

    threshold = now.date() - relativedelta(months=RECENT_REGISTRATION_MONTHS)
    return registered_at.date() >= threshold


def is_current_month_or_later(datekoukai: Optional[str], now: datetime) -> bool:
    """openBD 公開日が今月1日以降か"""
    published = parse_datetime(datekoukai)
    if published is None:
        return False
    return published.date() >= date(now.year, now.month, 1)


def is_recently_registered(
    datekoukai: Optional[str], datemodified: Optional[str], max_days: int = 3
) -> bool:
    """
    更新日が公開日から max_days 日以内か

    以前に登録され、後から ISBN リストに現れただけの本を除外するため。
    """
    published = parse_datetime(datekoukai)
    modified = parse_datetime(datemodified)
    if published is None or modified is None:
        return False

    diff_days = (modified - published).total_seconds() / 86400
    return 0 <= diff_days <= max_days


class NoFilterPolicy:
    """すべての新書を新刊として扱う"""

    name = "none"

    def __call__(self, record: OpenBDRecord, now: datetime) -> bool:
        return True


class UpcomingReleasePolicy:
    """発売月が今月以降、または発売日未定で最近登録された本"""

    name = "upcoming"

    def __call__(self, record: OpenBDRecord, now: datetime) -> bool:
        return is_new_release(record.summary.pubdate, record.hanmoto.datekoukai, now)


class RecentRegistrationPolicy:
    """今月 openBD に公開され、公開直後から更新されていない本"""

    name = "recent_registration"

    def __init__(self, max_days: int = 3):
        self.max_days = max_days

    def __call__(self, record: OpenBDRecord, now: datetime) -> bool:
        hanmoto = record.hanmoto
        return is_current_month_or_later(hanmoto.datekoukai, now) and is_recently_registered(
            hanmoto.datekoukai, hanmoto.datemodified, self.max_days
        )


ReleasePolicy = Callable[[OpenBDRecord, datetime], bool]

POLICIES = {
    NoFilterPolicy.name: NoFilterPolicy,
    UpcomingReleasePolicy.name: UpcomingReleasePolicy,
    RecentRegistrationPolicy.name: RecentRegistrationPolicy,
}


def get_policy(name: str, max_days: int = 3) -> ReleasePolicy:
    """名前からポリシーを生成"""
    if name not in POLICIES:
        raise ConfigError(f"未知の新刊判定ポリシー: {name}（{', '.join(POLICIES)} から選択）")
    if name == RecentRegistrationPolicy.name:
        return RecentRegistrationPolicy(max_days=max_days)
    return POLICIES[name]()
