"""
新書レーベル判定

シリーズ名に既知レーベル名が部分文字列として含まれるかで判定する。
大文字小文字・全角半角・空白の正規化は行わない。
レーベル調査（find_shinsho_labels）も同じ向きの包含判定を使う。
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

SHINSHO_KEYWORD = "新書"

_AFTER_SEMICOLON = re.compile(r"\s*[;；].*$")
_TRAILING_NUMBER = re.compile(r"\s*\d+$")


def matched_label(series: str, labels: Sequence[str]) -> Optional[str]:
    """シリーズ名に含まれる最初のレーベル名"""
    if not series:
        return None
    for label in labels:
        if label and label in series:
            return label
    return None


def is_tracked_imprint(series: str, labels: Sequence[str]) -> bool:
    """追跡対象の新書レーベルかどうか"""
    return matched_label(series, labels) is not None


def normalize_label(series: str) -> str:
    """巻号・版表記を除いたレーベル名（「岩波新書 ； 新赤版 2097」→「岩波新書」）"""
    name = _AFTER_SEMICOLON.sub("", series)
    name = _TRAILING_NUMBER.sub("", name)
    return name.strip()


@dataclass
class LabelReport:
    """レーベル調査結果"""

    total_books: int = 0
    covered: list[tuple[str, int]] = field(default_factory=list)
    not_covered: list[tuple[str, int]] = field(default_factory=list)

    @property
    def total_labels(self) -> int:
        return len(self.covered) + len(self.not_covered)

    def to_dict(self) -> dict:
        """辞書に変換"""
        return {
            "totalShinshoBooks": self.total_books,
            "totalUniqueLabels": self.total_labels,
            "covered": [{"label": label, "count": count} for label, count in self.covered],
            "notCovered": [{"label": label, "count": count} for label, count in self.not_covered],
        }


def summarize_labels(series_names: Iterable[str], labels: Sequence[str]) -> LabelReport:
    """
    「新書」を含むシリーズ名を集計し、既知レーベルでカバー済みかを分類

    件数の多い順に並べる。
    """
    counts: Counter[str] = Counter()
    for series in series_names:
        if series and SHINSHO_KEYWORD in series:
            counts[normalize_label(series)] += 1

    report = LabelReport(total_books=sum(counts.values()))
    for name, count in counts.most_common():
        if is_tracked_imprint(name, labels):
            report.covered.append((name, count))
        else:
            report.not_covered.append((name, count))
    return report
