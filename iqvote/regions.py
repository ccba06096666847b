"""県コードの表記ゆれ（ハイフン / アンダースコア）を吸収するユーティリティ。

DB に保存するのはアンダースコア形式（``IQ_AR``）のみ。UI からは ``IQ-AR`` の
形で届くこともあるため、書き込み前に必ず ``canonical_region_code`` を通し、
読み込みでは ``region_variants`` の全候補で検索する。
"""
from typing import List

from iqvote.db.models.enums import RegionCode
from iqvote.errors import ValidationError


def to_underscore(code: str) -> str:
    return code.replace("-", "_")


def to_hyphen(code: str) -> str:
    return code.replace("_", "-")


def canonical_region_code(code) -> str:
    """正規形（アンダースコア）に変換し、固定カタログに含まれるか検証する"""
    if isinstance(code, RegionCode):
        return code.value
    text = str(code or "").strip()
    if not text:
        raise ValidationError("県コードが指定されていません")
    canonical = to_underscore(text).upper()
    if canonical not in RegionCode._value2member_map_:
        raise ValidationError(f"未知の県コードです: {text}")
    return canonical


def region_variants(code: str) -> List[str]:
    """検索用の候補（重複なし）。

    入力そのまま・ハイフン形式・アンダースコア形式に加え、それぞれの大文字形も含める。
    書き込み側は大文字に正規化するため、小文字で届いたコードでも同じ行に当たる。
    """
    text = str(code).strip()
    upper = text.upper()
    variants: List[str] = []
    for v in (text, to_hyphen(text), to_underscore(text), to_underscore(upper), to_hyphen(upper)):
        if v not in variants:
            variants.append(v)
    return variants
