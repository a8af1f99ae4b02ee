import os
from artifacts.report_writer import write_items_csv, write_summary
from domain.constants import ITEM_UPDATED

class ReportService:
    def __init__(self, run_repo, item_repo, error_repo):
        self.run_repo = run_repo
        self.item_repo = item_repo
        self.error_repo = error_repo

    def produce(self, run_id: str, out_dir: str) -> dict:
        os.makedirs(out_dir, exist_ok=True)
        csv_path = os.path.join(out_dir, f"{run_id}_sprites.csv")
        summary_path = os.path.join(out_dir, f"{run_id}_summary.txt")

        run = self.run_repo.get(run_id)
        if run is None:
            raise KeyError(f"Unknown run: {run_id}")

        items = self.item_repo.list(run_id)
        counts = self.item_repo.status_counts(run_id)
        errors = self.error_repo.count(run_id)
        updated = [it["sprite_name"] for it in items if it["status"] == ITEM_UPDATED]

        write_items_csv(items, csv_path)
        write_summary(run, counts, errors, updated, summary_path)
        return {"csv": csv_path, "summary": summary_path}
