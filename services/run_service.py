import uuid
from persistence.repos import RunRepo
from domain.models import FilterConfig, ImportSettings
from services.preferences_service import format_floats

class RunService:
    def __init__(self, run_repo: RunRepo):
        self.run_repo = run_repo

    def create(self, run_name: str, root_path: str, extension: str, config: FilterConfig,
               settings: ImportSettings, dry_run: bool = False) -> str:
        run_id = str(uuid.uuid4())
        pivot = settings.pivot_to_write()
        cfg_dict = {
            "filter_mode": config.mode.value,
            "filter_text": config.active_text,
            "border": format_floats(settings.border.as_tuple()),
            "alignment": int(settings.alignment),
            "custom_pivot": format_floats(pivot) if pivot is not None else None,
            "dry_run": dry_run,
        }
        self.run_repo.create_run(run_id, run_name, root_path, extension, cfg_dict)
        return run_id
