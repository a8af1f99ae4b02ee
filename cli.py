import argparse
import json
import sys
import time
from collections import Counter
from pathlib import Path
from typing import Dict, Any

import yaml
from tqdm import tqdm

from persistence.db import Database
from persistence.repos import PrefsRepo, RunRepo, ItemRepo, ErrorRepo
from domain.constants import SPRITE_EXT, PIVOT_UNIT_MODE, PHASE_SCAN, RUN_FAILED, RUN_SCANNED, RUN_COMPLETED
from domain.errors import ScanError
from domain.models import FilterConfig, FilterMode, ImportSettings, SpriteAlignment, SpriteBorder
from domain.rules import base_name
from services.preferences_service import PreferencesService, parse_floats
from services.run_service import RunService
from services.scan_service import ScanService
from services.border_service import BorderService
from services.report_service import ReportService
from utils.timeutil import log_stamp


# ---------------------------
# Helpers
# ---------------------------

def load_config(path: str | None) -> Dict[str, Any]:
    if not path:
        return {}

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    return json.loads(p.read_text(encoding="utf-8"))


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if v is not None:
            out[k] = v
    return out


def tqdm_enabled() -> bool:
    return sys.stderr.isatty()


def log(msg: str, logfile: Path | None):
    line = f"[{log_stamp()}] {msg}"
    tqdm.write(line)
    if logfile:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        with logfile.open("a", encoding="utf-8") as f:
            f.write(line + "\n")


def _flag(value) -> bool:
    """Config booleans: true/false, yes/no, on/off, 1/0. Anything else is rejected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "yes", "on", "1"):
            return True
        if s in ("false", "no", "off", "0", ""):
            return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def _floats(value, count: int) -> tuple[float, ...]:
    if isinstance(value, (list, tuple)):
        if len(value) != count:
            raise ValueError(f"Expected {count} numbers, got {value!r}")
        return tuple(float(v) for v in value)
    return parse_floats(value, count)


def resolve_filter(stored: FilterConfig, cfg: Dict[str, Any]) -> FilterConfig:
    """Stored filter, overridden by filter_mode/filter_text from config or CLI."""
    if "filter_mode" not in cfg:
        return stored

    mode = FilterMode(str(cfg["filter_mode"]).lower())
    if mode == FilterMode.NONE:
        return stored.toggle(stored.mode, False)

    out = stored
    if cfg.get("filter_text") is not None:
        out = out.with_text(mode, str(cfg["filter_text"]))
    return out.toggle(mode, True)


def resolve_settings(stored: ImportSettings, cfg: Dict[str, Any]) -> ImportSettings:
    border = stored.border
    alignment = stored.alignment
    pivot = stored.custom_pivot

    if cfg.get("border") is not None:
        border = SpriteBorder(*_floats(cfg["border"], 4))
    if cfg.get("pivot") is not None:
        alignment = SpriteAlignment.parse(cfg["pivot"])
    if cfg.get("custom_pivot") is not None:
        pivot = _floats(cfg["custom_pivot"], 2)
        if cfg.get("pivot") is None:
            alignment = SpriteAlignment.CUSTOM

    return ImportSettings(border=border, alignment=alignment, custom_pivot=pivot)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprite-border",
        description="Batch-edit sprite border and pivot import settings in a Unity project"
    )

    parser.add_argument("--config", help="Config file (json or yaml)")
    parser.add_argument("--folder", help="Sprites folder (remembered between runs)")

    flt = parser.add_mutually_exclusive_group()
    flt.add_argument("--prefix", help="Only sprites whose name starts with TEXT (case-insensitive)")
    flt.add_argument("--postfix", help="Only sprites whose name ends with TEXT (case-insensitive)")
    flt.add_argument("--regex", help="Only sprites whose name contains a match for PATTERN")
    flt.add_argument("--no-filter", action="store_true", help="Disable the active filter")

    parser.add_argument("--border", nargs=4, type=float, metavar=("LEFT", "BOTTOM", "RIGHT", "TOP"))
    parser.add_argument("--pivot", help="Center, TopLeft, ..., BottomRight, Custom")
    parser.add_argument("--custom-pivot", nargs=2, type=float, metavar=("X", "Y"),
                        help="Normalized pivot, used with --pivot Custom")
    parser.add_argument("--dry-run", action="store_true", default=None, help="List matches; write nothing")
    parser.add_argument("--check-border-fit", action="store_true", default=None,
                        help="Skip sprites whose image is smaller than the border")

    parser.add_argument("--log-file", help="Write logs to file")
    parser.add_argument("--db-path", default="sprite_border.db", help="SQLite DB path (preferences and runs)")
    parser.add_argument("--report-dir", help="Write CSV and summary for this run into DIR")
    parser.add_argument("--show-prefs", action="store_true", help="Print the stored preferences and exit")
    return parser


# ---------------------------
# CLI main
# ---------------------------

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logfile = Path(args.log_file) if args.log_file else None
    bars_on = tqdm_enabled()

    # ---------------------------
    # Load config
    # ---------------------------

    cfg_file = load_config(args.config)

    cli_cfg = {
        "folder": args.folder,
        "border": args.border,
        "pivot": args.pivot,
        "custom_pivot": args.custom_pivot,
        "dry_run": args.dry_run,
        "check_border_fit": args.check_border_fit,
    }
    if args.prefix is not None:
        cli_cfg.update(filter_mode="prefix", filter_text=args.prefix)
    elif args.postfix is not None:
        cli_cfg.update(filter_mode="postfix", filter_text=args.postfix)
    elif args.regex is not None:
        cli_cfg.update(filter_mode="regex", filter_text=args.regex)
    elif args.no_filter:
        cli_cfg.update(filter_mode="none")

    cfg = merge_config(cfg_file, cli_cfg)

    # DB + repos
    db = Database(args.db_path)
    db.init()

    prefs_repo = PrefsRepo(db)
    run_repo = RunRepo(db)
    item_repo = ItemRepo(db)
    error_repo = ErrorRepo(db)

    prefs = PreferencesService(prefs_repo)
    scan_service = ScanService(error_repo)
    border_service = BorderService(item_repo, error_repo)
    reporter = ReportService(run_repo, item_repo, error_repo)

    if args.show_prefs:
        for key, value in prefs_repo.all().items():
            log(f"{key} = {value}", logfile)
        return 0

    try:
        folder = cfg.get("folder") or prefs.folder_path()
        filter_cfg = resolve_filter(prefs.filter_config(), cfg)
        settings = resolve_settings(prefs.import_settings(), cfg)
        dry_run = _flag(cfg.get("dry_run", False))
        check_fit = _flag(cfg.get("check_border_fit", False))
    except ValueError as e:
        log(f"ERROR: {e}", logfile)
        return 1

    prefs.save_folder_path(folder)
    prefs.save_filter_config(filter_cfg)
    prefs.save_import_settings(settings)

    log(f"Folder: {folder} (extension {SPRITE_EXT}, pivot unit {PIVOT_UNIT_MODE})", logfile)
    log(f"Filter: {filter_cfg.mode.value} {filter_cfg.active_text!r}", logfile)
    log(f"Border: {settings.border.as_tuple()}  Pivot: {settings.alignment.name}"
        + (f" {settings.pivot_to_write()}" if settings.pivot_to_write() else ""), logfile)

    run_service = RunService(run_repo)
    run_name = time.strftime("CLI_Run_%Y%m%d_%H%M%S")
    run_id = run_service.create(run_name, folder, SPRITE_EXT, filter_cfg, settings, dry_run=dry_run)

    # ---------------------------
    # Scan + filter
    # ---------------------------

    log("Scanning sprites…", logfile)

    scan_pbar = tqdm(desc="Scan", unit="file", dynamic_ncols=True, disable=not bars_on)
    _last_scanned = 0

    def scan_progress(count, path):
        nonlocal _last_scanned
        delta = count - _last_scanned
        if delta > 0:
            scan_pbar.update(delta)
            _last_scanned = count

    def filter_diag(err):
        log(f"ERROR: {err}", logfile)

    try:
        candidates, matched = scan_service.scan(
            run_id,
            folder,
            filter_cfg,
            progress_cb=scan_progress,
            diag_cb=filter_diag,
        )
    except ScanError as e:
        scan_pbar.close()
        error_repo.add(run_id, PHASE_SCAN, str(e))
        run_repo.update_status(run_id, RUN_FAILED)
        log(f"ERROR: {e}", logfile)
        return 1

    scan_pbar.close()
    run_repo.set_counts(run_id, scanned=len(candidates), matched=len(matched))
    run_repo.update_status(run_id, RUN_SCANNED)
    log(f"Found {len(candidates)} sprites, {len(matched)} match the filter.", logfile)

    # ---------------------------
    # Update borders
    # ---------------------------

    skip_reasons = Counter()

    def skip(reason, path):
        skip_reasons[reason] += 1

    with tqdm(total=len(matched), desc="Update", unit="sprite", dynamic_ncols=True,
              disable=not bars_on) as upd_pbar:
        result = border_service.apply(
            run_id,
            matched,
            settings,
            dry_run=dry_run,
            check_fit=check_fit,
            progress_cb=lambda done, total, path: upd_pbar.update(1),
            skip_cb=skip,
        )

    run_repo.set_counts(run_id, updated=len(result.updated))
    run_repo.update_status(run_id, RUN_COMPLETED)

    if skip_reasons:
        log("Skipped:", logfile)
        for reason, cnt in skip_reasons.most_common():
            log(f"  - {reason}: {cnt}", logfile)

    if dry_run:
        log(f"Dry-run enabled. Would update {len(result.updated)} sprites.", logfile)
    else:
        log(f"Updated {len(result.updated)} sprites.", logfile)
    for path in result.updated:
        log(f"  {base_name(path)}", logfile)

    if args.report_dir:
        paths = reporter.produce(run_id, args.report_dir)
        log(f"Report written: {paths['summary']}", logfile)

    return 0


if __name__ == "__main__":
    sys.exit(main())
