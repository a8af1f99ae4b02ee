from typing import Optional, Iterable
from persistence.db import Database
from utils.timeutil import now_iso
from domain.constants import RUN_CREATED

class PrefsRepo:
    """Key-value string store (stands in for the editor's preference storage)."""

    def __init__(self, db: Database): self.db = db

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        con = self.db.connect()
        try:
            row = con.execute("SELECT value FROM prefs WHERE key=?", (key,)).fetchone()
            return row["value"] if row else default
        finally:
            con.close()

    def set(self, key: str, value: str) -> None:
        con = self.db.connect()
        try:
            con.execute("""
              INSERT INTO prefs(key, value, updated_at) VALUES(?,?,?)
              ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """, (key, value, now_iso()))
            con.commit()
        finally:
            con.close()

    def all(self) -> dict:
        con = self.db.connect()
        try:
            rows = con.execute("SELECT key, value FROM prefs ORDER BY key").fetchall()
            return {r["key"]: r["value"] for r in rows}
        finally:
            con.close()

class RunRepo:
    def __init__(self, db: Database): self.db = db

    def create_run(self, run_id: str, run_name: str, root_path: str, extension: str, cfg: dict) -> None:
        con = self.db.connect()
        try:
            t = now_iso()
            con.execute("""
              INSERT INTO runs(run_id, run_name, created_at, updated_at, root_path, extension, filter_mode, filter_text,
                               border, alignment, custom_pivot, dry_run, status)
              VALUES(?,?,?,?,?,?,?,?,?,?,?,?,?)
            """, (
                run_id, run_name, t, t, root_path, extension, cfg["filter_mode"], cfg.get("filter_text"),
                cfg["border"], cfg["alignment"], cfg.get("custom_pivot"), 1 if cfg.get("dry_run") else 0, RUN_CREATED
            ))
            con.commit()
        finally:
            con.close()

    def update_status(self, run_id: str, status: str) -> None:
        con = self.db.connect()
        try:
            con.execute("UPDATE runs SET status=?, updated_at=? WHERE run_id=?", (status, now_iso(), run_id))
            con.commit()
        finally:
            con.close()

    def set_counts(self, run_id: str, scanned: int | None = None, matched: int | None = None,
                   updated: int | None = None) -> None:
        con = self.db.connect()
        try:
            con.execute("""
              UPDATE runs SET
                scanned_count=COALESCE(?, scanned_count),
                matched_count=COALESCE(?, matched_count),
                updated_count=COALESCE(?, updated_count),
                updated_at=?
              WHERE run_id=?
            """, (scanned, matched, updated, now_iso(), run_id))
            con.commit()
        finally:
            con.close()

    def get(self, run_id: str) -> Optional[dict]:
        con = self.db.connect()
        try:
            row = con.execute("SELECT * FROM runs WHERE run_id=?", (run_id,)).fetchone()
            return dict(row) if row else None
        finally:
            con.close()

    def latest(self) -> Optional[dict]:
        con = self.db.connect()
        try:
            row = con.execute("SELECT * FROM runs ORDER BY created_at DESC, rowid DESC LIMIT 1").fetchone()
            return dict(row) if row else None
        finally:
            con.close()

class ItemRepo:
    def __init__(self, db: Database): self.db = db

    def add_items(self, run_id: str, rows: Iterable[dict]) -> None:
        con = self.db.connect()
        try:
            t = now_iso()
            con.executemany("""
              INSERT INTO run_items(run_id, asset_path, sprite_name, status, reason, created_at)
              VALUES(?,?,?,?,?,?)
            """, [(run_id, r["asset_path"], r["sprite_name"], r["status"], r.get("reason"), t) for r in rows])
            con.commit()
        finally:
            con.close()

    def list(self, run_id: str) -> list[dict]:
        con = self.db.connect()
        try:
            rows = con.execute("SELECT * FROM run_items WHERE run_id=? ORDER BY item_id", (run_id,)).fetchall()
            return [dict(r) for r in rows]
        finally:
            con.close()

    def status_counts(self, run_id: str) -> dict:
        con = self.db.connect()
        try:
            rows = con.execute("""
              SELECT status, COUNT(*) AS n FROM run_items WHERE run_id=? GROUP BY status
            """, (run_id,)).fetchall()
            return {r["status"]: int(r["n"]) for r in rows}
        finally:
            con.close()

class ErrorRepo:
    def __init__(self, db: Database): self.db = db

    def add(self, run_id: str | None, phase: str, message: str, asset_path: str | None = None) -> None:
        con = self.db.connect()
        try:
            con.execute("""
              INSERT INTO errors(run_id, phase, message, asset_path, created_at)
              VALUES(?,?,?,?,?)
            """, (run_id, phase, message, asset_path, now_iso()))
            con.commit()
        finally:
            con.close()

    def list_latest(self, run_id: str, limit: int = 200) -> list[dict]:
        con = self.db.connect()
        try:
            rows = con.execute("""
              SELECT * FROM errors WHERE run_id=? ORDER BY error_id DESC LIMIT ?
            """, (run_id, limit)).fetchall()
            return [dict(r) for r in rows]
        finally:
            con.close()

    def count(self, run_id: str) -> int:
        con = self.db.connect()
        try:
            return int(con.execute("SELECT COUNT(*) AS n FROM errors WHERE run_id=?", (run_id,)).fetchone()["n"])
        finally:
            con.close()
