"""recency モジュールのテスト"""

from datetime import datetime, timezone

import pytest

from conftest import make_record
from shinsho.errors import ConfigError
from shinsho.onix import decode_record
from shinsho.recency import (
    NoFilterPolicy,
    RecentRegistrationPolicy,
    UpcomingReleasePolicy,
    get_policy,
    is_current_month_or_later,
    is_new_release,
    is_recently_registered,
    parse_datetime,
    parse_year_month,
)

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


class TestIsNewRelease:
    """新刊判定のテスト"""

    def test_future_month(self):
        assert is_new_release("202507", "2020-01-01", NOW) is True

    def test_current_month(self):
        assert is_new_release("202506", "", NOW) is True

    def test_next_year(self):
        assert is_new_release("202601", "", NOW) is True

    def test_past_month(self):
        assert is_new_release("202501", "2025-05-20", NOW) is False

    def test_no_pubdate_recently_registered(self):
        assert is_new_release("", "2025-05-20", NOW) is True

    def test_no_pubdate_old_registration(self):
        assert is_new_release("", "2024-01-01", NOW) is False

    def test_no_pubdate_no_registration(self):
        assert is_new_release("", "", NOW) is False
        assert is_new_release(None, "不正な日付", NOW) is False

    def test_three_month_boundary(self):
        assert is_new_release("", "2025-03-01", NOW) is True
        assert is_new_release("", "2025-02-28", NOW) is False

    def test_invalid_pubdate_does_not_fall_back(self):
        """不正な発売日は登録日で救済しない"""
        assert is_new_release("2025", "2025-05-20", NOW) is False

    def test_parse_year_month(self):
        assert parse_year_month("20250310") == (2025, 3)
        assert parse_year_month("202513") is None
        assert parse_year_month("") is None

    def test_partial_datetime_is_fixed(self):
        """日の欠けた日付は実行日に関係なく1日になること"""
        assert parse_datetime("2025-05") == datetime(2025, 5, 1)
        assert parse_datetime("2025-06-15T10:00:00+09:00") == datetime(2025, 6, 15, 10, 0)
        assert parse_datetime(None) is None
        assert parse_datetime("not a date") is None


class TestRegistrationHelpers:
    """登録日判定のテスト"""

    def test_current_month_or_later(self):
        assert is_current_month_or_later("2025-06-01", NOW) is True
        assert is_current_month_or_later("2025-05-31", NOW) is False
        assert is_current_month_or_later("", NOW) is False

    def test_recently_registered(self):
        assert is_recently_registered("2025-06-01", "2025-06-03 10:00:00") is True
        assert is_recently_registered("2025-06-01", "2025-06-10 10:00:00") is False
        assert is_recently_registered("2025-06-05", "2025-06-01 10:00:00") is False
        assert is_recently_registered("2025-06-01", "") is False


class TestPolicies:
    """ポリシー切り替えのテスト"""

    def test_get_policy(self):
        assert isinstance(get_policy("none"), NoFilterPolicy)
        assert isinstance(get_policy("upcoming"), UpcomingReleasePolicy)
        policy = get_policy("recent_registration", max_days=5)
        assert isinstance(policy, RecentRegistrationPolicy)
        assert policy.max_days == 5

    def test_unknown_policy(self):
        with pytest.raises(ConfigError):
            get_policy("latest")

    def test_no_filter(self):
        record = decode_record(make_record(pubdate="199001"))

        assert NoFilterPolicy()(record, NOW) is True

    def test_upcoming(self):
        assert UpcomingReleasePolicy()(decode_record(make_record(pubdate="202507")), NOW) is True
        assert UpcomingReleasePolicy()(decode_record(make_record(pubdate="202401")), NOW) is False

    def test_recent_registration(self):
        fresh = make_record(datekoukai="2025-06-01", datemodified="2025-06-02 08:00:00")
        stale = make_record(datekoukai="2025-06-01", datemodified="2025-06-20 08:00:00")

        policy = RecentRegistrationPolicy()
        assert policy(decode_record(fresh), NOW) is True
        assert policy(decode_record(stale), NOW) is False
