from iqvote.config import settings
from iqvote.db.base import Store
from iqvote.db.models import *  # noqa: F401,F403  モデルを読み込む


def init_db(store: Store):
    """iqvote の DB スキーマを作成（初回のみ使用）"""
    store.create_all()


def drop_db(store: Store):
    """iqvote の DB スキーマを全削除（開発用）"""
    store.drop_all()


if __name__ == "__main__":
    store = Store.from_settings(settings)
    try:
        init_db(store)
        print("✅ Database schema created")
    finally:
        store.dispose()
