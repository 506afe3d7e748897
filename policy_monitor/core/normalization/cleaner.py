from __future__ import annotations
import re
from typing import Iterable

from policy_monitor.core.normalization.base import TextCleaner
from policy_monitor.core.normalization.config import CleaningConfig

_CJK = r"\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"


def _alternation(words: Iterable[str]) -> str:
    return "|".join(re.escape(w) for w in words if w)


class ChineseTextCleaner(TextCleaner):
    """
    Rule-based cleanup of space-joined segmented policy text.
    Rules run in a fixed order; the program-name collapse must precede the
    year rules so that "中国制造2025" keeps its year.
    """

    _re_program = re.compile(r"中国\s*制造\s*2025")
    _re_numeral = re.compile(r"\b(?:[一二三四五六七八九]|十[一二三四五六七八九]?)\b")
    _re_latin_letter = re.compile(r"(?<=\s)[A-Za-z](?=\s)")
    _re_multi_ws = re.compile(r"\s+")

    def __init__(self, config: CleaningConfig | None = None):
        self.cfg = config or CleaningConfig()
        temporal = _alternation(self.cfg.temporal_tokens)
        self._re_temporal = re.compile(temporal) if temporal else None
        self._re_bare_year = re.compile(
            rf"(?<![{_CJK}]){re.escape(self.cfg.protected_year)}"
        )
        admin = _alternation(self.cfg.admin_markers)
        self._re_admin = re.compile(rf"\b(?:{admin})\b") if admin else None
        self._places = tuple(p for p in self.cfg.places if p)

    def collapse_program_name(self, s: str) -> str:
        return self._re_program.sub("中国制造2025", s)

    def remove_temporal(self, s: str) -> str:
        if self._re_temporal is not None:
            s = self._re_temporal.sub("", s)
        return self._re_bare_year.sub("", s)

    def remove_places(self, s: str) -> str:
        for place in self._places:
            s = s.replace(place, "")
        return s

    def remove_numerals(self, s: str) -> str:
        return self._re_numeral.sub("", s)

    def remove_admin_markers(self, s: str) -> str:
        if self._re_admin is None:
            return s
        return self._re_admin.sub("", s)

    def remove_latin_letters(self, s: str) -> str:
        return self._re_latin_letter.sub("", s)

    def clean(self, text: str) -> str:
        s = text or ""
        s = self.collapse_program_name(s)
        s = self.remove_temporal(s)
        s = self.remove_places(s)
        s = self.remove_numerals(s)
        s = self.remove_admin_markers(s)
        s = self.remove_latin_letters(s)
        if self.cfg.collapse_whitespace:
            s = self._re_multi_ws.sub(" ", s).strip()
        return s
