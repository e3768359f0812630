#!/usr/bin/env python3
"""
openBD に登録されている「新書」を含むシリーズ名をすべて洗い出すスクリプト

設定済みレーベルでカバーできているものとできていないものに分けて表示し、
data/shinsho-labels-analysis.json に保存する。
"""
import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import requests

from shinsho.classifier import summarize_labels
from shinsho.config import load_settings
from shinsho.errors import ConfigError
from shinsho.normalizer import series_name
from shinsho.onix import decode_record
from shinsho.openbd import OpenBDClient, japanese_only
from shinsho.storage import JsonStore

BATCH_SIZE = 100
REQUEST_INTERVAL = 0.03
PROGRESS_EVERY = 50000


def iter_series_names(client: OpenBDClient, isbns):
    """ISBN を順に取得してシリーズ名を返す"""
    processed = 0
    for record in client.iter_records(isbns):
        processed += 1
        if processed % PROGRESS_EVERY == 0:
            print(f"  進捗: {processed:,} / {len(isbns):,} ISBN")
        if record is None:
            continue
        try:
            onix = decode_record(record).onix
        except ValueError:
            continue
        if onix is not None and onix.descriptive_detail is not None:
            yield series_name(onix.descriptive_detail)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='openBDの新書レーベルを調査するスクリプト')
    parser.add_argument('--config', type=Path, default=None, help='設定ファイル（既定: config/settings.yaml）')
    parser.add_argument('--limit', type=int, default=None, help='調査するISBN数を制限する')
    parser.add_argument('--jp-only', action='store_true', help='日本の書籍のみを調査する')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"設定エラー: {e}", file=sys.stderr)
        return 1

    client = OpenBDClient(
        base_url=settings.api_base_url,
        batch_size=BATCH_SIZE,
        request_interval=REQUEST_INTERVAL,
        timeout=settings.timeout,
    )

    try:
        isbns = client.get_coverage()
        if args.jp_only:
            isbns = japanese_only(isbns)
        if args.limit:
            isbns = isbns[:args.limit]

        print(f"{len(isbns):,}件のISBNから新書シリーズを調査します...")
        report = summarize_labels(iter_series_names(client, isbns), settings.labels)
    except requests.RequestException as e:
        print(f"エラー: {e}", file=sys.stderr)
        return 1

    print("=" * 70)
    print('openBD に登録されている「新書」を含むシリーズ')
    print("=" * 70)

    print(f"\n対応済み ({len(report.covered)}レーベル):")
    for label, count in report.covered:
        print(f"  {label:<30} ({count:,}冊)")

    print(f"\n未対応 ({len(report.not_covered)}レーベル):")
    for label, count in report.not_covered:
        print(f"  {label:<30} ({count:,}冊)")

    print(f"\n新書総数: {report.total_books:,} / レーベル数: {report.total_labels}")

    output = settings.data_dir / "shinsho-labels-analysis.json"
    JsonStore(output, default={}).save(
        {"timestamp": datetime.now(timezone.utc).isoformat(), **report.to_dict()}
    )
    print(f"結果を保存しました: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
