"""数値入力の整形ヘルパー（桁区切り付き表示 ⇔ 素の整数文字列）"""
from __future__ import annotations
import re
from typing import Any

from iqvote.errors import ValidationError

_NON_DIGITS = re.compile(r"[^\d]")


def only_digits(value: Any) -> str:
    """数字以外の文字をすべて取り除く（None → 空文字）"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value) if value >= 0 else ""
    return _NON_DIGITS.sub("", str(value))


def format_digits(digits: str) -> str:
    """"12345" → "12,345"。空文字は空文字のまま返す"""
    if digits == "":
        return ""
    return f"{int(digits):,}"


def format_count(value: Any) -> str:
    """DB の整数値を入力欄用の桁区切り文字列にする（None は 0 扱い）"""
    return format_digits(only_digits(value) or "0")


def strip_grouping(text: Any) -> str:
    """送信前に桁区切りのカンマを外す"""
    return str(text if text is not None else "").replace(",", "").strip()


def parse_count(value: Any, field: str, blank_as_zero: bool = True) -> int:
    """非負整数として解釈する。

    空欄は ``blank_as_zero`` が True のとき 0、False のとき入力エラー。
    負数・小数・数字以外を含む値は入力エラー。
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} は数値で指定してください: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"{field} に負の値は指定できません: {value}")
        return value
    text = "" if value is None else str(value).strip()
    if text == "":
        if blank_as_zero:
            return 0
        raise ValidationError(f"{field} が未入力です")
    if not text.isdecimal():
        raise ValidationError(f"{field} は 0 以上の整数で指定してください: {text!r}")
    return int(text)
