#!/usr/bin/env python3
"""
新書データベースからRSSフィードだけを再生成するスクリプト
"""
import argparse
import logging
import sys
from pathlib import Path

from shinsho.config import load_settings
from shinsho.errors import ConfigError
from shinsho.feed import write_feed
from shinsho.models import NormalizedBook
from shinsho.storage import JsonStore


def main(argv=None) -> int:
    """
    メイン処理
    """
    parser = argparse.ArgumentParser(description='新書データベースからRSSフィードを生成するスクリプト')
    parser.add_argument('--config', type=Path, default=None, help='設定ファイル（既定: config/settings.yaml）')
    parser.add_argument('--output', type=Path, default=None, help='出力先（既定: docs/index.xml）')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"設定エラー: {e}", file=sys.stderr)
        return 1

    print("RSSフィード生成を開始します...")
    books = [NormalizedBook.from_dict(d) for d in JsonStore(settings.catalog_path, default=[]).load()]
    print(f"新書データベース: {len(books)}冊")

    output = args.output or settings.feed_path
    count = write_feed(books, output, settings)
    print(f"RSSフィードを生成しました: {output}（{count}件）")
    return 0


if __name__ == "__main__":
    sys.exit(main())
