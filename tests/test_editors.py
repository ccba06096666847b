"""編集コンポーネント（ビューモデル）のテスト"""

from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError

from iqvote.actions import edit_party, get_all_parties, load_party_region
from iqvote.db.models import Location
from iqvote.editors import GeneralPartyEditor, RegionBoard, RegionPartyEditor


def _broken_session(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("unreachable"))


class TestGeneralPartyEditor:
    def test_load_builds_formatted_drafts(self, seeded_store, party_id_of):
        pdk = party_id_of("PDK")
        edit_party(seeded_store, {"id": pdk, "number_of_voting": "1234567", "this_elec_chairs": "12"})

        editor = GeneralPartyEditor(seeded_store)
        editor.load()

        assert len(editor.parties) == 14
        assert editor.drafts[pdk] == {"votes": "1,234,567", "chairs": "12"}
        assert editor.loading is False

    def test_typing_strips_non_digits(self, seeded_store, party_id_of):
        editor = GeneralPartyEditor(seeded_store)
        editor.load()
        pdk = party_id_of("PDK")

        assert editor.type_votes(pdk, "12a,34 5") == "12,345"
        assert editor.type_chairs(pdk, "x") == ""

    def test_submit_updates_local_copy_and_refreshes(self, seeded_store, party_id_of):
        refresh = MagicMock()
        editor = GeneralPartyEditor(seeded_store, on_refresh=refresh)
        editor.load()
        pdk = party_id_of("PDK")
        editor.type_votes(pdk, "50000")
        editor.type_chairs(pdk, "12")

        result = editor.submit(pdk)

        assert result["ok"] is True
        assert editor.party(pdk)["number_of_voting"] == 50000
        assert editor.party(pdk)["this_elec_chairs"] == 12
        assert editor.drafts[pdk] == {"votes": "50,000", "chairs": "12"}
        assert editor.notifications[-1][0] == "success"
        assert editor.saving_id == 0
        refresh.assert_called_once_with()
        stored = {p["id"]: p for p in get_all_parties(seeded_store)}
        assert stored[pdk]["number_of_voting"] == 50000

    def test_failed_submit_keeps_draft(self, seeded_store, party_id_of):
        refresh = MagicMock()
        editor = GeneralPartyEditor(seeded_store, on_refresh=refresh)
        editor.load()
        pdk = party_id_of("PDK")
        editor.type_votes(pdk, "777")

        with patch.object(seeded_store, "SessionLocal", side_effect=_broken_session):
            result = editor.submit(pdk)

        assert result["ok"] is False
        assert editor.drafts[pdk]["votes"] == "777"
        assert editor.party(pdk)["number_of_voting"] == 0
        assert editor.notifications[-1][0] == "error"
        refresh.assert_not_called()

    def test_load_failure_notifies(self, seeded_store):
        editor = GeneralPartyEditor(seeded_store)

        with patch.object(seeded_store, "SessionLocal", side_effect=_broken_session):
            editor.load()

        assert editor.parties == []
        assert editor.loading is False
        assert editor.notifications[-1][0] == "error"


class TestRegionPartyEditor:
    def _editor(self, store, abbr="PDK", **kwargs):
        party = next(p for p in get_all_parties(store) if p["abbr"] == abbr)
        return RegionPartyEditor(store, party, **kwargs)

    def test_inputs_disabled_until_region_selected(self, seeded_store):
        editor = self._editor(seeded_store)

        assert editor.inputs_disabled is True
        assert editor.can_submit is False

    def test_select_region_fills_existing_values(self, seeded_store):
        editor = self._editor(seeded_store)
        editor.select_region("IQ_AR")
        editor.type_votes("8000")
        editor.type_chairs("3")
        editor.submit()

        fresh = self._editor(seeded_store)
        fresh.select_region("IQ-AR")

        assert (fresh.votes, fresh.chairs) == ("8,000", "3")
        assert fresh.inputs_disabled is False
        assert fresh.can_submit is True

    def test_select_region_without_record_leaves_inputs_empty(self, seeded_store, party_id_of):
        pdk = party_id_of("PDK")
        with seeded_store.session() as db:
            db.query(Location).filter(Location.party_id == pdk, Location.region_code == "IQ_MU").delete()
        editor = self._editor(seeded_store)

        editor.select_region("IQ_MU")

        assert editor.last_lookup["exists"] is False
        assert (editor.votes, editor.chairs) == ("", "")

    def test_existing_zero_record_shows_zero(self, seeded_store):
        editor = self._editor(seeded_store)

        editor.select_region("IQ_MU")

        assert (editor.votes, editor.chairs) == ("0", "0")

    def test_clearing_region_resets_inputs(self, seeded_store):
        editor = self._editor(seeded_store)
        editor.select_region("IQ_AR")

        editor.select_region("")

        assert (editor.region_code, editor.votes, editor.chairs) == ("", "", "")
        assert editor.inputs_disabled is True

    def test_inputs_disabled_while_loading(self, seeded_store):
        editor = self._editor(seeded_store)
        seen = {}

        def spy(store, form):
            seen["disabled"] = editor.inputs_disabled
            return load_party_region(store, form)

        with patch("iqvote.editors.load_party_region", side_effect=spy):
            editor.select_region("IQ_AR")

        assert seen["disabled"] is True
        assert editor.inputs_disabled is False

    def test_submit_creates_missing_record(self, seeded_store, party_id_of):
        pdk = party_id_of("PDK")
        with seeded_store.session() as db:
            db.query(Location).filter(Location.party_id == pdk, Location.region_code == "IQ_MU").delete()
        refresh = MagicMock()
        editor = self._editor(seeded_store, on_refresh=refresh)
        editor.select_region("IQ_MU")
        editor.type_votes("1,200")

        result = editor.submit()

        assert result["ok"] is True
        assert editor.saved["IQ_MU"] == (1200, 0)
        assert (editor.votes, editor.chairs) == ("1,200", "0")
        refresh.assert_called_once_with()
        loaded = load_party_region(seeded_store, {"party_id": pdk, "region_code": "IQ_MU"})
        assert loaded["exists"] is True

    def test_submit_without_region_fails(self, seeded_store):
        editor = self._editor(seeded_store)

        result = editor.submit()

        assert result["kind"] == "validation"
        assert editor.notifications[-1][0] == "error"


class TestRegionBoard:
    def test_load_creates_row_per_party_sharing_notifications(self, seeded_store, party_id_of):
        board = RegionBoard(seeded_store)
        board.load()

        assert len(board.rows) == 14
        row = board.row(party_id_of("SOL"))
        row.submit()
        assert board.notifications[-1][0] == "error"
