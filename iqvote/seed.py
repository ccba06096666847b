"""固定カタログ（14 政党 × 18 県）の冪等投入"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from iqvote.catalog import PARTIES, REGION_CODES
from iqvote.db.base import Store
from iqvote.db.models import Location, Party
from iqvote.db.upsert import lookup_id, upsert_row

logger = logging.getLogger(__name__)


def seed_catalog(
    store: Store,
    parties: Optional[List[Dict[str, str]]] = None,
    region_codes: Optional[List[str]] = None,
    dry_run: bool = False,
) -> Dict[str, int]:
    """
    政党を略称（abbr）をキーに UPSERT し、各政党について全県の Location を
    (party_id, region_code) をキーに UPSERT する。数値列はすべて 0 に戻す。
    途中で失敗した場合は例外をそのまま送出して中断する（再実行すれば同じ状態になる）。
    """
    parties = PARTIES if parties is None else parties
    region_codes = REGION_CODES if region_codes is None else region_codes

    seeded = 0
    with store.session() as db:
        for p in parties:
            # 1) 政党を abbr で UPSERT
            party_values = {
                "arabic_name": p["arabic_name"],
                "abbr": p["abbr"],
                "color": p["color"],
                "number_of_voting": 0,
                "last_elec_chairs": 0,
                "this_elec_chairs": 0,
            }
            logger.info("→ UPSERT Party: {abbr=%s}", p["abbr"])
            if dry_run:
                continue
            upsert_row(db, Party, party_values, key_cols=["abbr"])
            party_id = lookup_id(db, Party, "abbr", p["abbr"])

            # 2) 全県の Location を 0 票で用意する
            for code in region_codes:
                upsert_row(
                    db,
                    Location,
                    {
                        "party_id": party_id,
                        "region_code": code,
                        "number_of_voting": 0,
                        "this_elec_chairs": 0,
                    },
                    key_cols=["party_id", "region_code"],
                )
            # 政党ごとに確定させる（途中失敗でもそれまでの分は残る）
            db.commit()
            seeded += 1
            logger.info("Seeded %s with %d locations", p["abbr"], len(region_codes))

    return {"parties": seeded, "locations_per_party": len(region_codes)}
