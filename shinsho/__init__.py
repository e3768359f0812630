# 新書ファインダー
"""
openBD から新書の新刊を検出し、RSS と X に配信する
"""

from shinsho.classifier import is_tracked_imprint
from shinsho.config import Settings, load_settings
from shinsho.isbn import diff_isbns, to_isbn10
from shinsho.models import NormalizedBook
from shinsho.normalizer import format_pubdate, normalize
from shinsho.onix import OpenBDRecord, decode_record
from shinsho.pipeline import RunResult, ShinshoPipeline, extract_shinsho
from shinsho.recency import get_policy, is_new_release

__all__ = [
    "NormalizedBook",
    "OpenBDRecord",
    "RunResult",
    "Settings",
    "ShinshoPipeline",
    "decode_record",
    "diff_isbns",
    "extract_shinsho",
    "format_pubdate",
    "get_policy",
    "is_new_release",
    "is_tracked_imprint",
    "load_settings",
    "normalize",
    "to_isbn10",
]
