#!/usr/bin/env python3
"""
openBD APIから新書の新刊を検出し、データベース・RSS・Xを更新するスクリプト
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

import requests

from shinsho.config import load_settings
from shinsho.errors import ConfigError
from shinsho.feed import write_feed
from shinsho.openbd import OpenBDClient, japanese_only
from shinsho.pipeline import ShinshoPipeline
from shinsho.recency import get_policy
from shinsho.social import XPoster
from shinsho.storage import JsonStore


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='openBD APIから新書の新刊を検出するスクリプト')
    parser.add_argument('--config', type=Path, default=None, help='設定ファイル（既定: config/settings.yaml）')
    parser.add_argument('--debug', action='store_true', help='デバッグログを出力する')
    parser.add_argument('--limit', type=int, default=None, help='処理するISBN数を制限する（デバッグ用）')
    parser.add_argument('--jp-only', action='store_true', help='日本の書籍のみを処理する')
    parser.add_argument('--no-post', action='store_true', help='Xへの投稿を行わない')
    parser.add_argument('--policy', default=None, help='新刊判定ポリシー（none / upcoming / recent_registration）')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    メイン処理
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=== 新書ファインダー 開始 ===")
    start_time = datetime.now()

    try:
        settings = load_settings(args.config)
        policy = get_policy(args.policy or settings.recency_policy, max_days=settings.recency_max_days)
    except ConfigError as e:
        print(f"設定エラー: {e}", file=sys.stderr)
        return 1

    def isbn_filter(isbns):
        if args.jp_only:
            isbns = japanese_only(isbns)
        if args.limit:
            print(f"指定された上限({args.limit}件)までのISBNのみ処理します")
            isbns = isbns[:args.limit]
        return isbns

    pipeline = ShinshoPipeline(
        source=OpenBDClient.from_settings(settings),
        snapshot_store=JsonStore(settings.isbn_list_path, default=[]),
        catalog_store=JsonStore(settings.catalog_path, default=[]),
        posted_store=JsonStore(settings.posted_path, default=[]),
        settings=settings,
        policy=policy,
        poster=None if args.no_post else XPoster.from_env(),
    )

    try:
        result = pipeline.run(isbn_filter=isbn_filter)
        feed_count = write_feed(result.catalog, settings.feed_path, settings)
    except (requests.RequestException, OSError) as e:
        print(f"\nエラー: {e}", file=sys.stderr)
        return 1

    elapsed_minutes = (datetime.now() - start_time).total_seconds() / 60

    print("\n処理完了:")
    print(f"- 処理時間: {elapsed_minutes:.1f}分")
    print(f"- 現在のISBN数: {result.current_count}")
    if result.first_run:
        print("- 初回実行: ISBNリストのみ保存しました（次回から新刊を検出します）")
    else:
        print(f"- 新規ISBN数: {len(result.new_isbns)}")
        print(f"- 取得した書誌数: {result.fetched_count}")
        print(f"- 新規新書数: {len(result.added)}")
        print(f"- スキップしたレコード数: {result.skipped_count}")
        print(f"- X投稿数: {result.posted_count}")
    print(f"- 新書総数: {len(result.catalog)}")
    print(f"- RSSエントリー数: {feed_count}")
    print("=== 新書ファインダー 完了 ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
