# iqvote/cli.py
import json
from typing import Any, Dict, List, Optional

import typer
from sqlalchemy import desc as sa_desc
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from iqvote.actions import (
    TOP_PARTY_COLUMNS,
    edit_party,
    edit_party_region,
    get_all_parties,
    get_parties,
    get_parties_by_region,
    get_top_parties,
    load_party_region,
    row_to_dict,
)
from iqvote.catalog import REGION_LABELS, region_label
from iqvote.config import settings
from iqvote.create_tables import drop_db as _drop_db
from iqvote.create_tables import init_db as _init_db
from iqvote.db.base import Store
from iqvote.db.models import Location, Party
from iqvote.errors import IqvoteError
from iqvote.logging_config import setup_logging
from iqvote.numbers import format_count, strip_grouping
from iqvote.seed import seed_catalog

cli = typer.Typer()


@cli.callback()
def main(
    ctx: typer.Context,
    database_url: str = typer.Option(
        settings.database_url, "--database-url", envvar="IQVOTE_DATABASE_URL", help="接続先DBのURL"
    ),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="ログレベル"),
):
    """イラク選挙結果ダッシュボードの管理CLI"""
    setup_logging(log_level)
    store = Store(database_url, echo=settings.sql_echo)
    ctx.obj = store
    # コマンド終了時にコネクションプールを解放する
    ctx.call_on_close(store.dispose)


def _store(ctx: typer.Context) -> Store:
    return ctx.obj


#################################################################
# スキーマ管理
#################################################################

@cli.command()
def init_db(ctx: typer.Context):
    """DBスキーマを作成（初回のみ使用）"""
    _init_db(_store(ctx))
    typer.echo("✅ Database schema created")


@cli.command()
def drop_db(ctx: typer.Context):
    """DBスキーマを全削除（開発用）"""
    _drop_db(_store(ctx))
    typer.echo("🗑️ Database schema dropped")


@cli.command()
def connect_db(ctx: typer.Context):
    """DBへの接続可否テスト"""
    store = _store(ctx)
    query = "SELECT sqlite_version()" if store.dialect == "sqlite" else "SELECT VERSION()"
    try:
        with store.engine.connect() as conn:
            version = conn.execute(text(query)).scalar_one()
            typer.echo(f"✅ 接続成功！{store.dialect} バージョン: {version}")
    except SQLAlchemyError as e:
        typer.echo(f"❌ 接続失敗: {e}")
        raise typer.Exit(code=1)


#################################################################
# 以下は、seedツール
#################################################################

# 例：iqvote seed --dry-run
@cli.command()
def seed(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, help="実行せずログのみ"),
):
    """
    14 政党 × 18 県を冪等投入する（数値はすべて 0 に戻る）。
    """
    summary = seed_catalog(_store(ctx), dry_run=dry_run)
    if dry_run:
        typer.echo("📝 dry-run のため投入していません")
        return
    typer.echo(
        f"✅ シード投入完了: {summary['parties']} 政党 × {summary['locations_per_party']} 県"
    )


#################################################################
# 出力ユーティリティ
#################################################################

def _echo_rows(rows: List[Dict[str, Any]], columns: List[str], output: str = "table") -> None:
    if output.lower() == "json":
        typer.echo(json.dumps(
            [{k: v for k, v in d.items() if k in columns} for d in rows],
            ensure_ascii=False, indent=2
        ))
        return

    # table 出力（簡易）
    widths = {c: max([len(c)] + [len(str(d.get(c, ""))) for d in rows]) for c in columns}
    header = " | ".join(c.ljust(widths[c]) for c in columns)
    sep = "-+-".join("-" * widths[c] for c in columns)
    typer.echo(header)
    typer.echo(sep)
    for d in rows:
        line = " | ".join(str(d.get(c, "")).ljust(widths[c]) for c in columns)
        typer.echo(line)


def _fail(result: Dict[str, Any]) -> None:
    typer.echo(f"❌ {result['error']} ({result['kind']})")
    raise typer.Exit(code=1)


def _query(func, *args):
    try:
        return func(*args)
    except IqvoteError as e:
        _fail(e.to_result())


PARTY_COLUMNS = ["id", "abbr", "arabic_name", "number_of_voting", "this_elec_chairs", "last_elec_chairs", "color"]


#################################################################
# ダッシュボード操作
#################################################################

@cli.command("regions")
def list_regions():
    """県コードと表示名の一覧"""
    for code, label in REGION_LABELS.items():
        typer.echo(f"{code.value}  {label}")


@cli.command("parties")
def list_parties(
    ctx: typer.Context,
    with_locations: bool = typer.Option(False, "--with-locations", help="県別の内訳も表示"),
    output: str = typer.Option("table", "--output", "-f", help="出力形式: table | json", case_sensitive=False),
):
    """全政党を id 順に表示"""
    store = _store(ctx)
    if not with_locations:
        _echo_rows(_query(get_all_parties, store), PARTY_COLUMNS, output)
        return

    parties = _query(get_parties, store)
    if output.lower() == "json":
        typer.echo(json.dumps(parties, ensure_ascii=False, indent=2))
        return
    for p in parties:
        typer.echo(f"■ {p['abbr']} {p['arabic_name']}: {format_count(p['number_of_voting'])}")
        for loc in p["locations"]:
            typer.echo(
                f"    {loc['region_code']} {region_label(loc['region_code'])}: {format_count(loc['number_of_voting'])}"
                f" / {loc['this_elec_chairs']}"
            )


@cli.command("top")
def top_parties(
    ctx: typer.Context,
    output: str = typer.Option("table", "--output", "-f", help="出力形式: table | json", case_sensitive=False),
):
    """全国得票数の上位 6 政党"""
    _echo_rows(_query(get_top_parties, _store(ctx)), list(TOP_PARTY_COLUMNS), output)


@cli.command("top-region")
def top_region(
    ctx: typer.Context,
    region_code: str = typer.Argument(..., help="県コード（例: IQ_AR / IQ-AR）"),
    output: str = typer.Option("table", "--output", "-f", help="出力形式: table | json", case_sensitive=False),
):
    """指定県の得票数で上位 6 政党"""
    parties = _query(get_parties_by_region, _store(ctx), region_code)
    rows = [
        {
            "id": p["id"],
            "abbr": p["abbr"],
            "arabic_name": p["arabic_name"],
            "region_code": p["locations"][0]["region_code"],
            "number_of_voting": p["locations"][0]["number_of_voting"],
            "this_elec_chairs": p["locations"][0]["this_elec_chairs"],
        }
        for p in parties
    ]
    _echo_rows(rows, ["id", "abbr", "arabic_name", "region_code", "number_of_voting", "this_elec_chairs"], output)


@cli.command("edit-party")
def edit_party_cmd(
    ctx: typer.Context,
    party_id: int = typer.Argument(..., help="政党 id"),
    votes: str = typer.Option("", "--votes", help="全国得票数（桁区切り可）"),
    chairs: str = typer.Option("", "--chairs", help="今回議席数"),
):
    """政党の全国得票数・議席数を更新"""
    result = edit_party(_store(ctx), {
        "id": party_id,
        "number_of_voting": strip_grouping(votes),
        "this_elec_chairs": strip_grouping(chairs),
    })
    if not result["ok"]:
        _fail(result)
    typer.echo(
        f"✅ id={result['id']} 得票数={format_count(result['number_of_voting'])}"
        f" 議席数={result['this_elec_chairs']}"
    )


@cli.command("edit-region")
def edit_region_cmd(
    ctx: typer.Context,
    party_id: int = typer.Argument(..., help="政党 id"),
    region_code: str = typer.Argument(..., help="県コード（例: IQ_AR / IQ-AR）"),
    votes: str = typer.Option("", "--votes", help="県内得票数（桁区切り可）"),
    chairs: str = typer.Option("", "--chairs", help="県内議席数"),
):
    """政党の県別得票数・議席数を更新（無ければ作成）"""
    result = edit_party_region(_store(ctx), {
        "id": party_id,
        "region_code": region_code,
        "number_of_voting": strip_grouping(votes),
        "this_elec_chairs": strip_grouping(chairs),
    })
    if not result["ok"]:
        _fail(result)
    typer.echo(
        f"✅ id={result['id']} {result['region_code']} 得票数={format_count(result['number_of_voting'])}"
        f" 議席数={result['this_elec_chairs']}"
    )


@cli.command("region")
def region_cmd(
    ctx: typer.Context,
    party_id: int = typer.Argument(..., help="政党 id"),
    region_code: str = typer.Argument(..., help="県コード（例: IQ_AR / IQ-AR）"),
):
    """政党 × 県 の現在値を表示"""
    result = load_party_region(_store(ctx), {"party_id": party_id, "region_code": region_code})
    if not result["ok"]:
        _fail(result)
    data = result["data"]
    marker = "" if result["exists"] else "（レコード未作成）"
    typer.echo(
        f"{result['region_code']}: 得票数={format_count(data['number_of_voting'])}"
        f" 議席数={data['this_elec_chairs']}{marker}"
    )


#################################################################
# 以下は、モデル名を指定してレコードを表示するユーティリティ
#################################################################
#
# モデル名 → クラス のレジストリ（明示的に）
MODEL_REGISTRY: Dict[str, Any] = {
    "Party": Party,
    "Location": Location,
}


def _parse_value(s: str) -> Any:
    """--where col=value の value を型推定（int/その他）"""
    s = s.strip()
    if s.isdigit() or (s.startswith("-") and s[1:].isdigit()):
        return int(s)
    return s  # 文字列


@cli.command("show")
def show_records(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="モデル名（例: Party / Location）"),
    limit: int = typer.Option(20, "--limit", "-n", help="最大取得件数"),
    columns: Optional[str] = typer.Option(None, "--columns", "-c", help="表示する列をカンマ区切りで指定（未指定は全列）"),
    order_by: str = typer.Option("id", "--order-by", "-o", help="並び替え列名（既定: id）"),
    desc: bool = typer.Option(False, "--desc", help="降順にする"),
    where: List[str] = typer.Option(None, "--where", "-w", help="等価条件（col=value）。複数指定可"),
    output: str = typer.Option("table", "--output", "-f", help="出力形式: table | json", case_sensitive=False),
):
    """
    指定モデルのレコードを表示する簡易ビューア。
    例:
      iqvote show Party -n 10
      iqvote show Location -w party_id=7 --order-by number_of_voting --desc
      iqvote show Party -w abbr=PDK -f json
    """
    Model = MODEL_REGISTRY.get(model)
    if Model is None:
        valid = ", ".join(MODEL_REGISTRY.keys())
        typer.echo(f"❌ 未知のモデル名です: {model} （候補: {valid}）")
        raise typer.Exit(code=1)

    # 列バリデーション
    all_cols = list(Model.__table__.columns.keys())
    if columns:
        selected_cols = [c.strip() for c in columns.split(",") if c.strip()]
        unknown = [c for c in selected_cols if c not in all_cols]
        if unknown:
            typer.echo(f"❌ 未知の列があります: {unknown}  （利用可能: {all_cols}）")
            raise typer.Exit(code=1)
    else:
        selected_cols = all_cols

    # order_by の列チェック
    if order_by not in all_cols:
        typer.echo(f"❌ order_by 列が不正です: {order_by} （利用可能: {all_cols}）")
        raise typer.Exit(code=1)

    # where 条件（等価のみ対応）
    where_clauses = []
    for expr in where or []:
        if "=" not in expr:
            typer.echo(f"⚠ 条件を無視しました（col=value 形式ではありません）: {expr}")
            continue
        k, v = expr.split("=", 1)
        k = k.strip()
        if k not in all_cols:
            typer.echo(f"⚠ 未知の列の条件を無視しました: {k}")
            continue
        where_clauses.append(getattr(Model, k) == _parse_value(v))

    # クエリ組み立て
    stmt = select(Model)
    if where_clauses:
        stmt = stmt.where(*where_clauses)
    order_col = getattr(Model, order_by)
    stmt = stmt.order_by(sa_desc(order_col) if desc else order_col)
    if limit:
        stmt = stmt.limit(limit)

    with _store(ctx).session() as db:
        rows = [row_to_dict(r) for r in db.execute(stmt).scalars().all()]

    _echo_rows(rows, selected_cols, output)


if __name__ == "__main__":
    cli()
