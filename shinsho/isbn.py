"""
ISBN ユーティリティ

前回スナップショットとの差分検出と ISBN-13 → ISBN-10 変換。
"""

from typing import Iterable, Sequence


def diff_isbns(previous: Iterable[str], current: Sequence[str]) -> list[str]:
    """
    current のうち previous に含まれない ISBN を current の順序で返す

    previous が空（初回実行）の場合は current をそのまま返す。
    初回かどうかの判定は呼び出し側で行う。
    """
    seen = previous if isinstance(previous, (set, frozenset)) else set(previous)
    return [isbn for isbn in current if isbn not in seen]


def to_isbn10(isbn13: str) -> str:
    """
    ISBN-13 を ISBN-10 に変換

    978 で始まる13桁のみ変換可能。それ以外は空文字を返す。
    """
    clean = (isbn13 or "").replace("-", "")
    if len(clean) != 13 or not (clean.isascii() and clean.isdigit()) or not clean.startswith("978"):
        return ""

    base = clean[3:12]
    total = sum(int(digit) * (10 - i) for i, digit in enumerate(base))
    check = (11 - total % 11) % 11
    return base + ("X" if check == 10 else str(check))
