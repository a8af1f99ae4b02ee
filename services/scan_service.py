# services/scan_service.py

from domain.constants import SPRITE_EXT, PHASE_FILTER
from domain.models import FilterConfig
from domain.rules import select
from sprite_io.fs_scanner import iter_sprite_files


class ScanService:
    def __init__(self, error_repo=None):
        self.error_repo = error_repo

    def scan(
        self,
        run_id: str | None,
        root: str,
        config: FilterConfig,
        extension: str = SPRITE_EXT,
        progress_cb=None,
        diag_cb=None,
        progress_every: int = 200,
    ) -> tuple[list[str], list[str]]:
        """Scan root fresh and filter it. Returns (candidates, matched).

        Notes:
        - ScanError propagates; there are no partial results.
        - progress_cb(count, path) every ~progress_every candidates, then once at the end.
        - diag_cb(error) receives filter diagnostics (e.g. InvalidPatternError);
          they are also stored in the error repo under phase FILTER.
        """
        candidates = []
        for path in iter_sprite_files(root, extension):
            candidates.append(path)
            if progress_cb and len(candidates) % progress_every == 0:
                progress_cb(len(candidates), path)

        if progress_cb:
            progress_cb(len(candidates), "")

        def _diag(err):
            if self.error_repo is not None:
                self.error_repo.add(run_id, PHASE_FILTER, str(err))
            if diag_cb:
                diag_cb(err)

        matched = select(root, extension, config, all_paths=candidates, diag_cb=_diag)
        return candidates, matched
