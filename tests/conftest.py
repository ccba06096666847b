"""テスト共通フィクスチャ（インメモリ SQLite の Store）"""

import pytest

from iqvote.db.base import Store
from iqvote.db.models import Party
from iqvote.seed import seed_catalog

from sqlalchemy import select


@pytest.fixture
def store():
    """空のスキーマだけを作成した Store"""
    s = Store("sqlite://")
    s.create_all()
    yield s
    s.dispose()


@pytest.fixture
def seeded_store(store):
    """14 政党 × 18 県を投入済みの Store"""
    seed_catalog(store)
    return store


@pytest.fixture
def party_id_of(seeded_store):
    """略称 → id を引くヘルパー"""

    def _lookup(abbr):
        with seeded_store.session() as db:
            return db.execute(select(Party.id).where(Party.abbr == abbr)).scalar_one()

    return _lookup
