"""ダッシュボードから呼ばれる読み取り・更新操作。

すべての操作は第 1 引数に ``Store`` を受け取り、1 回の呼び出しにつき
1 つのセッション（トランザクション）で完結する。

* 参照系（get_*）はプレーンな dict / list を返し、DB 障害は
  ``StoreUnavailable`` として送出する。
* 更新系（edit_*）と県別ロード（load_party_region）は例外を送出せず、
  ``{"ok": True, ...}`` または ``{"ok": False, "error": ..., "kind": ...}`` を返す。
"""
from __future__ import annotations
import functools
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from iqvote.config import settings
from iqvote.db.base import Store
from iqvote.db.models import Location, Party
from iqvote.db.upsert import upsert_row
from iqvote.errors import IqvoteError, NotFoundError, StoreUnavailable, ValidationError
from iqvote.numbers import parse_count
from iqvote.regions import canonical_region_code, region_variants

logger = logging.getLogger(__name__)

TOP_N = 6

# 上位表示で必要な列だけを射影する
TOP_PARTY_COLUMNS = (
    "id",
    "arabic_name",
    "abbr",
    "number_of_voting",
    "color",
    "this_elec_chairs",
    "last_elec_chairs",
)

SERVER_ERROR_MESSAGE = "サーバーエラーが発生しました。時間をおいて再度お試しください"


def row_to_dict(obj) -> Dict[str, Any]:
    """モデルインスタンス -> 辞書（テーブル列のみ）"""
    cols = obj.__table__.columns.keys()
    return {c: getattr(obj, c) for c in cols}


def party_to_dict(party: Party, locations: Optional[List[Location]] = None) -> Dict[str, Any]:
    d = row_to_dict(party)
    if locations is not None:
        d["locations"] = [row_to_dict(loc) for loc in locations]
    return d


def _store_errors_as_unavailable(func):
    """参照系: SQLAlchemy の例外を StoreUnavailable に変換して送出する"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("%s failed", func.__name__)
            raise StoreUnavailable(SERVER_ERROR_MESSAGE) from e

    return wrapper


def _result_boundary(func):
    """更新系: 例外を送出せず {"ok": False, ...} に変換して返す"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IqvoteError as e:
            logger.warning("%s rejected: %s", func.__name__, e)
            return e.to_result()
        except SQLAlchemyError:
            logger.exception("%s failed", func.__name__)
            return StoreUnavailable(SERVER_ERROR_MESSAGE).to_result()

    return wrapper


def _require_id(form: Mapping[str, Any], key: str) -> int:
    raw = form.get(key)
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise ValidationError(f"{key} が指定されていません")
    if not text.isdecimal():
        raise ValidationError(f"{key} は整数で指定してください: {text!r}")
    return int(text)


def _blank_as_zero(blank_as_zero: Optional[bool]) -> bool:
    return settings.blank_as_zero if blank_as_zero is None else blank_as_zero


# ==============================================================
# 参照系
# ==============================================================

@_store_errors_as_unavailable
def get_all_parties(store: Store) -> List[Dict[str, Any]]:
    """全政党（id 昇順）"""
    with store.session() as db:
        parties = db.execute(select(Party).order_by(Party.id)).scalars().all()
        return [party_to_dict(p) for p in parties]


@_store_errors_as_unavailable
def get_parties(store: Store) -> List[Dict[str, Any]]:
    """全政党と、それぞれの県別レコード"""
    with store.session() as db:
        stmt = select(Party).options(selectinload(Party.locations)).order_by(Party.id)
        parties = db.execute(stmt).scalars().all()
        return [party_to_dict(p, p.locations) for p in parties]


@_store_errors_as_unavailable
def get_top_parties(store: Store) -> List[Dict[str, Any]]:
    """全国得票数の上位 6 政党（降順）。同数の並びは DB 依存"""
    cols = [getattr(Party, c) for c in TOP_PARTY_COLUMNS]
    stmt = select(*cols).order_by(Party.number_of_voting.desc()).limit(TOP_N)
    with store.session() as db:
        return [dict(row._mapping) for row in db.execute(stmt)]


@_store_errors_as_unavailable
def get_parties_by_region(store: Store, region_code: str) -> List[Dict[str, Any]]:
    """
    指定県の得票数で上位 6 政党（降順）。
    その県の Location を持たない政党は 0 票扱いではなく結果から除外する。
    """
    code = canonical_region_code(region_code)
    stmt = (
        select(Party, Location)
        .join(Location, Location.party_id == Party.id)
        .where(Location.region_code.in_(region_variants(code)))
        .order_by(Location.number_of_voting.desc(), Location.id)
    )
    result: List[Dict[str, Any]] = []
    seen = set()
    with store.session() as db:
        for party, loc in db.execute(stmt).all():
            # 旧形式（ハイフン）の行が残っていても 1 政党 1 行にする
            if party.id in seen:
                continue
            seen.add(party.id)
            result.append(party_to_dict(party, [loc]))
            if len(result) == TOP_N:
                break
    return result


# ==============================================================
# 更新系
# ==============================================================

@_result_boundary
def edit_party(store: Store, form: Mapping[str, Any], blank_as_zero: Optional[bool] = None) -> Dict[str, Any]:
    """政党の全国得票数と今回議席数を上書きする（他の列は変更しない）"""
    blank = _blank_as_zero(blank_as_zero)
    party_id = _require_id(form, "id")
    number_of_voting = parse_count(form.get("number_of_voting"), "number_of_voting", blank)
    this_elec_chairs = parse_count(form.get("this_elec_chairs"), "this_elec_chairs", blank)

    with store.session() as db:
        party = db.get(Party, party_id)
        if party is None:
            raise NotFoundError(f"政党が見つかりません: id={party_id}")
        party.number_of_voting = number_of_voting
        party.this_elec_chairs = this_elec_chairs

    logger.info(
        "party %s updated: number_of_voting=%d this_elec_chairs=%d",
        party_id, number_of_voting, this_elec_chairs,
    )
    return {
        "ok": True,
        "id": party_id,
        "number_of_voting": number_of_voting,
        "this_elec_chairs": this_elec_chairs,
    }


@_result_boundary
def edit_party_region(store: Store, form: Mapping[str, Any], blank_as_zero: Optional[bool] = None) -> Dict[str, Any]:
    """
    政党 × 県 のレコードを UPSERT する。
    県コードはアンダースコア形式に正規化してから DB に渡す。
    検索と作成/更新は 1 つのトランザクション内の原子的な UPSERT で行い、
    同時作成による一意制約違反は update として解決される。
    旧形式（ハイフン等）の行が既にある場合はその行を更新して正規形に付け替え、
    同じ県を指す重複行は削除する。
    """
    blank = _blank_as_zero(blank_as_zero)
    party_id = _require_id(form, "id")
    region_code = canonical_region_code(form.get("region_code"))
    number_of_voting = parse_count(form.get("number_of_voting"), "number_of_voting", blank)
    this_elec_chairs = parse_count(form.get("this_elec_chairs"), "this_elec_chairs", blank)

    with store.session() as db:
        if db.get(Party, party_id) is None:
            raise NotFoundError(f"政党が見つかりません: id={party_id}")
        existing = db.execute(
            select(Location)
            .where(Location.party_id == party_id, Location.region_code.in_(region_variants(region_code)))
            .order_by(Location.id)
        ).scalars().all()
        if existing:
            keep = next((loc for loc in existing if loc.region_code == region_code), existing[0])
            for dup in existing:
                if dup is not keep:
                    logger.info("removing duplicate location %s (%s)", dup.id, dup.region_code)
                    db.delete(dup)
            # 付け替え前に重複行を消しておかないと一意制約に掛かる
            db.flush()
            keep.region_code = region_code
            keep.number_of_voting = number_of_voting
            keep.this_elec_chairs = this_elec_chairs
            db.flush()
        else:
            upsert_row(
                db,
                Location,
                {
                    "party_id": party_id,
                    "region_code": region_code,
                    "number_of_voting": number_of_voting,
                    "this_elec_chairs": this_elec_chairs,
                },
                key_cols=["party_id", "region_code"],
            )

    logger.info(
        "party %s region %s updated: number_of_voting=%d this_elec_chairs=%d",
        party_id, region_code, number_of_voting, this_elec_chairs,
    )
    return {
        "ok": True,
        "id": party_id,
        "region_code": region_code,
        "number_of_voting": number_of_voting,
        "this_elec_chairs": this_elec_chairs,
    }


@_result_boundary
def load_party_region(store: Store, form: Mapping[str, Any]) -> Dict[str, Any]:
    """
    政党 × 県 の現在値を返す。県コードはハイフン形式・アンダースコア形式の
    どちらでもよい。レコードが無い場合は 0/0 と ``exists=False`` を返す。
    """
    party_id = _require_id(form, "party_id")
    raw_code = str(form.get("region_code") or "").strip()
    if not raw_code:
        raise ValidationError("region_code が指定されていません")

    stmt = (
        select(Location)
        .where(Location.party_id == party_id, Location.region_code.in_(region_variants(raw_code)))
        .order_by(Location.id)
        .limit(1)
    )
    with store.session() as db:
        loc = db.execute(stmt).scalar_one_or_none()
        if loc is None:
            logger.debug("no location for party %s region %s", party_id, raw_code)
            return {
                "ok": True,
                "exists": False,
                "party_id": party_id,
                "region_code": raw_code,
                "data": {"number_of_voting": 0, "this_elec_chairs": 0},
            }
        return {
            "ok": True,
            "exists": True,
            "party_id": party_id,
            "region_code": loc.region_code,
            "data": {
                "number_of_voting": loc.number_of_voting,
                "this_elec_chairs": loc.this_elec_chairs,
            },
        }
