"""画面側の編集コンポーネント（全国集計エディタ・県別エディタ）のビューモデル。

描画は扱わず、入力欄の下書き（桁区切り付き文字列）、保存後の楽観的更新、
再描画要求、トースト通知だけを保持する。
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from iqvote.actions import edit_party, edit_party_region, get_all_parties, load_party_region
from iqvote.db.base import Store
from iqvote.errors import IqvoteError
from iqvote.numbers import format_count, format_digits, only_digits, strip_grouping

logger = logging.getLogger(__name__)

Notification = Tuple[str, str]  # (level, message)

MSG_LOAD_FAILED = "データの読み込みに失敗しました。もう一度お試しください"
MSG_SAVED = "保存しました"
MSG_SAVE_FAILED = "変更を保存できませんでした"


class _Notifier:
    def __init__(self, notifications: Optional[List[Notification]] = None):
        self.notifications: List[Notification] = [] if notifications is None else notifications

    def notify(self, level: str, message: str) -> None:
        logger.log(logging.ERROR if level == "error" else logging.INFO, message)
        self.notifications.append((level, message))


class GeneralPartyEditor(_Notifier):
    """全国得票数・議席数の編集（1 政党 1 カード）"""

    def __init__(
        self,
        store: Store,
        on_refresh: Optional[Callable[[], Any]] = None,
        blank_as_zero: Optional[bool] = None,
    ):
        super().__init__()
        self.store = store
        self.on_refresh = on_refresh
        self.blank_as_zero = blank_as_zero
        self.parties: List[Dict[str, Any]] = []
        # { id: {"votes": "123,456", "chairs": "12"} }
        self.drafts: Dict[int, Dict[str, str]] = {}
        self.loading = False
        self.saving_id = 0

    def load(self) -> None:
        self.loading = True
        try:
            self.parties = get_all_parties(self.store)
        except IqvoteError:
            self.notify("error", MSG_LOAD_FAILED)
            return
        finally:
            self.loading = False
        self.drafts = {
            p["id"]: {
                "votes": format_count(p["number_of_voting"]),
                "chairs": format_count(p["this_elec_chairs"]),
            }
            for p in self.parties
        }

    def type_votes(self, party_id: int, text: str) -> str:
        draft = self.drafts.setdefault(party_id, {})
        draft["votes"] = format_digits(only_digits(text))
        return draft["votes"]

    def type_chairs(self, party_id: int, text: str) -> str:
        draft = self.drafts.setdefault(party_id, {})
        draft["chairs"] = format_digits(only_digits(text))
        return draft["chairs"]

    def submit(self, party_id: int) -> Dict[str, Any]:
        draft = self.drafts.get(party_id, {})
        form = {
            "id": party_id,
            "number_of_voting": strip_grouping(draft.get("votes")),
            "this_elec_chairs": strip_grouping(draft.get("chairs")),
        }
        self.saving_id = party_id
        try:
            result = edit_party(self.store, form, blank_as_zero=self.blank_as_zero)
        finally:
            self.saving_id = 0

        if not result["ok"]:
            # 下書きはそのまま残して再送できるようにする
            self.notify("error", f"{MSG_SAVE_FAILED}: {result['error']}")
            return result

        # 楽観的更新（再読み込みを待たない）
        for p in self.parties:
            if p["id"] == party_id:
                p["number_of_voting"] = result["number_of_voting"]
                p["this_elec_chairs"] = result["this_elec_chairs"]
        self.drafts[party_id] = {
            "votes": format_count(result["number_of_voting"]),
            "chairs": format_count(result["this_elec_chairs"]),
        }
        self.notify("success", MSG_SAVED)
        if self.on_refresh is not None:
            self.on_refresh()
        return result

    def party(self, party_id: int) -> Optional[Dict[str, Any]]:
        return next((p for p in self.parties if p["id"] == party_id), None)


class RegionPartyEditor(_Notifier):
    """県別の得票数・議席数の編集（政党カード 1 枚分）"""

    def __init__(
        self,
        store: Store,
        party: Dict[str, Any],
        on_refresh: Optional[Callable[[], Any]] = None,
        notifications: Optional[List[Notification]] = None,
        blank_as_zero: Optional[bool] = None,
    ):
        super().__init__(notifications)
        self.store = store
        self.party = party
        self.on_refresh = on_refresh
        self.blank_as_zero = blank_as_zero
        self.region_code = ""
        self.votes = ""
        self.chairs = ""
        self.loading_region = False
        self.saving = False
        # 保存済みの値（県コード → (得票数, 議席数)）
        self.saved: Dict[str, Tuple[int, int]] = {}
        self.last_lookup: Optional[Dict[str, Any]] = None

    @property
    def inputs_disabled(self) -> bool:
        return not self.region_code or self.loading_region

    @property
    def can_submit(self) -> bool:
        return bool(self.region_code) and not self.saving and not self.loading_region

    def select_region(self, code: str) -> None:
        """県を切り替えたら入力欄を空にし、ロードが終わるまで無効化する"""
        self.region_code = code or ""
        self.votes = ""
        self.chairs = ""
        if not self.region_code:
            return

        self.loading_region = True
        try:
            result = load_party_region(
                self.store, {"party_id": self.party["id"], "region_code": self.region_code}
            )
        finally:
            self.loading_region = False
        self.last_lookup = result

        if not result["ok"]:
            self.notify("error", MSG_LOAD_FAILED)
            return
        if not result["exists"]:
            # レコード未作成は 0 ではなく空欄で表示する
            return
        data = result["data"]
        self.votes = format_digits(only_digits(data["number_of_voting"]))
        self.chairs = format_digits(only_digits(data["this_elec_chairs"]))

    def type_votes(self, text: str) -> str:
        self.votes = format_digits(only_digits(text))
        return self.votes

    def type_chairs(self, text: str) -> str:
        self.chairs = format_digits(only_digits(text))
        return self.chairs

    def submit(self) -> Dict[str, Any]:
        form = {
            "id": self.party["id"],
            "region_code": self.region_code,
            "number_of_voting": strip_grouping(self.votes),
            "this_elec_chairs": strip_grouping(self.chairs),
        }
        self.saving = True
        try:
            result = edit_party_region(self.store, form, blank_as_zero=self.blank_as_zero)
        finally:
            self.saving = False

        if not result["ok"]:
            self.notify("error", f"{MSG_SAVE_FAILED}: {result['error']}")
            return result

        self.saved[result["region_code"]] = (result["number_of_voting"], result["this_elec_chairs"])
        self.votes = format_count(result["number_of_voting"])
        self.chairs = format_count(result["this_elec_chairs"])
        self.notify("success", MSG_SAVED)
        if self.on_refresh is not None:
            self.on_refresh()
        return result


class RegionBoard(_Notifier):
    """県別エディタの一覧（全政党分のカードをまとめて持つ）"""

    def __init__(
        self,
        store: Store,
        on_refresh: Optional[Callable[[], Any]] = None,
        blank_as_zero: Optional[bool] = None,
    ):
        super().__init__()
        self.store = store
        self.on_refresh = on_refresh
        self.blank_as_zero = blank_as_zero
        self.rows: List[RegionPartyEditor] = []
        self.loading = False

    def load(self) -> None:
        self.loading = True
        try:
            parties = get_all_parties(self.store)
        except IqvoteError:
            self.notify("error", MSG_LOAD_FAILED)
            return
        finally:
            self.loading = False
        self.rows = [
            RegionPartyEditor(
                self.store,
                p,
                on_refresh=self.on_refresh,
                notifications=self.notifications,
                blank_as_zero=self.blank_as_zero,
            )
            for p in parties
        ]

    def row(self, party_id: int) -> Optional[RegionPartyEditor]:
        return next((r for r in self.rows if r.party["id"] == party_id), None)
