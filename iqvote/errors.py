"""操作境界で使う例外の分類。

各操作はこれらを捕捉し ``{"ok": False, "error": ..., "kind": ...}`` に変換する。
"""


class IqvoteError(Exception):
    kind = "error"

    def to_result(self) -> dict:
        return {"ok": False, "error": str(self), "kind": self.kind}


class ValidationError(IqvoteError):
    """必須入力の欠落、または非負整数として解釈できない値"""

    kind = "validation"


class NotFoundError(IqvoteError):
    """指定 id の政党が存在しない"""

    kind = "not_found"


class ConflictError(IqvoteError):
    """(party_id, region_code) の一意制約違反（内部で update に切り替える）"""

    kind = "conflict"


class StoreUnavailable(IqvoteError):
    """DB に接続できない、またはクエリが予期せず失敗した"""

    kind = "unavailable"
