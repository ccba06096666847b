from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Alembic と相性の良い命名規約（重要）
# 各制約における制約名の命名規則を厳密化することで、Alembicによるdb migration(スキーマ変更)を容易にする
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s__%(column_0_name)s",
    "ck": "ck_%(table_name)s__%(constraint_name)s",
    "fk": "fk_%(table_name)s__%(column_0_name)s__%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata_obj = MetaData(naming_convention=NAMING_CONVENTION)


# SQL Alchemyのデータベーステーブルオブジェクトの親クラス
# テーブルを定義したクラスを作成する際、Baseクラスを継承して作成する。
class Base(DeclarativeBase):
    metadata = metadata_obj


def make_engine(database_url: str, echo: bool = False) -> Engine:
    # engine: 物理的なコネクションの入口（接続プールの管理者）
    if database_url == "sqlite://" or (database_url.startswith("sqlite") and ":memory:" in database_url):
        # インメモリ SQLite は接続ごとに別DBになるため、単一接続を共有する
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,         # 切断検知を有効化
        pool_recycle=3600,          # MySQL の wait_timeout 対策（1時間ごとに再接続）
        echo=echo,                  # True にするとSQLログ出力
    )


class Store:
    """DB への窓口。

    プロセス全体のグローバル engine は持たず、呼び出し側（CLI・テスト）が
    一度だけ生成して各操作に渡し、終了時に ``dispose()`` で解放する。
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = make_engine(database_url, echo=echo)
        # SessionLocal: ORMを使ってDBと対話する窓口（呼び出すたびに新しい Session を生成）
        self.SessionLocal = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings) -> "Store":
        return cls(settings.database_url, echo=settings.sql_echo)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Iterator[Session]:
        """1 操作 = 1 トランザクション。例外時はロールバックして再送出する"""
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        logger.debug("disposing engine for %s", self.engine.url.render_as_string(hide_password=True))
        self.engine.dispose()
