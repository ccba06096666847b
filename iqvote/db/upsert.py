from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from iqvote.errors import ConflictError

logger = logging.getLogger(__name__)


def native_upsert_stmt(dialect: str, model, values: Dict[str, Any], key_cols: List[str]):
    """
    業務キー（key_cols）にユニーク制約がある前提で、DB ネイティブの
    「INSERT、衝突時は UPDATE」文を組み立てる（実行はしない）。
    対応していない方言では None を返す。
    """
    tbl = model.__table__
    update_names = [k for k in values if k not in key_cols and k != "id"]

    if dialect in ("mysql", "mariadb"):
        ins = mysql_insert(tbl).values(**values)
        # 競合時に更新する列（key_cols と id を除外）
        return ins.on_duplicate_key_update(**{k: ins.inserted[k] for k in update_names})

    if dialect in ("sqlite", "postgresql"):
        ins = (sqlite_insert if dialect == "sqlite" else pg_insert)(tbl).values(**values)
        return ins.on_conflict_do_update(
            index_elements=key_cols,
            set_={k: ins.excluded[k] for k in update_names},
        )

    return None


def _find(db: Session, model, values: Dict[str, Any], key_cols: List[str]):
    stmt = select(model).where(*(getattr(model, k) == values[k] for k in key_cols))
    return db.execute(stmt).scalar_one_or_none()


def upsert_row(db: Session, model, values: Dict[str, Any], key_cols: List[str]) -> None:
    """
    冪等 UPSERT。ネイティブ文が使えない方言では
    「検索 → 更新 or 作成」を同一トランザクション内で行い、
    作成時に一意制約違反（他の書き込みが先に作成した）になった場合は
    SAVEPOINT を戻して UPDATE として 1 回だけやり直す。
    """
    dialect = db.get_bind().dialect.name
    stmt = native_upsert_stmt(dialect, model, values, key_cols)
    if stmt is not None:
        db.execute(stmt)
        return

    row = _find(db, model, values, key_cols)
    if row is None:
        try:
            with db.begin_nested():
                db.add(model(**values))
            return
        except IntegrityError as e:
            logger.info(
                "concurrent create detected for %s %s; retrying as update",
                model.__name__,
                {k: values[k] for k in key_cols},
            )
            row = _find(db, model, values, key_cols)
            if row is None:
                raise ConflictError(f"{model.__name__} の一意制約違反を解決できませんでした") from e
    for k, v in values.items():
        if k not in key_cols:
            setattr(row, k, v)
    db.flush()


def lookup_id(db: Session, model, key_col: str, key: Any) -> Optional[int]:
    """業務キーから id を引く"""
    stmt = select(model.id).where(getattr(model, key_col) == key)
    return db.execute(stmt).scalar_one_or_none()
