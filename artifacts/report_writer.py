import csv

def write_items_csv(items: list[dict], csv_path: str) -> None:
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["sprite_name", "asset_path", "status", "reason"])
        for it in items:
            w.writerow([it["sprite_name"], it["asset_path"], it["status"], it.get("reason") or ""])


def write_summary(run: dict, counts: dict, errors: int, updated_names: list[str], summary_path: str) -> None:
    lines = []
    lines.append(f"Run: {run['run_name']} ({run['run_id']})")
    lines.append(f"Folder: {run['root_path']}")
    lines.append(f"Filter: {run['filter_mode']} {run['filter_text'] or ''}".rstrip())
    lines.append(f"Border (L,B,R,T): {run['border']}")
    lines.append(f"Alignment: {run['alignment']}")
    if run.get("custom_pivot"):
        lines.append(f"Custom pivot: {run['custom_pivot']}")
    if run.get("dry_run"):
        lines.append("Dry run: no .meta files written")
    lines.append("")
    lines.append("Summary")
    lines.append(f"- Sprites scanned: {run.get('scanned_count') or 0}")
    lines.append(f"- Sprites matched: {run.get('matched_count') or 0}")
    lines.append(f"- Updated: {counts.get('UPDATED', 0)}")
    lines.append(f"- Skipped: {counts.get('SKIPPED', 0)}")
    lines.append(f"- Errors: {errors}")
    lines.append("")
    lines.append("Updated sprites")
    for name in updated_names:
        lines.append(f"- {name}")

    with open(summary_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
