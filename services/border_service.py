import os

from domain.constants import (
    SPRITE_MODE_SINGLE,
    SKIP_MISSING_META,
    SKIP_META_ERROR,
    SKIP_NOT_SINGLE,
    SKIP_BORDER_TOO_LARGE,
    SKIP_IMAGE_ERROR,
    ITEM_UPDATED,
    ITEM_SKIPPED,
    PHASE_UPDATE,
)
from domain.errors import MetaFileError
from domain.models import ImportSettings, UpdateResult
from domain.rules import base_name
from sprite_io.image_size import image_size
from sprite_io.meta_file import meta_path_for, read_texture_importer, write_sprite_settings


class BorderService:
    def __init__(self, item_repo=None, error_repo=None):
        self.item_repo = item_repo
        self.error_repo = error_repo

    def _sprite_mode(self, importer: dict) -> int | None:
        try:
            return int(importer.get("spriteMode"))
        except (TypeError, ValueError):
            return None

    def apply(
        self,
        run_id: str | None,
        paths: list[str],
        settings: ImportSettings,
        dry_run: bool = False,
        check_fit: bool = False,
        progress_cb=None,
        skip_cb=None,
    ) -> UpdateResult:
        """Write border/alignment/pivot into each matched sprite's .meta.

        Only Single-mode sprites are touched; everything else is skipped with a reason.
        check_fit=True also skips sprites whose image is smaller than the border.
        Per-file failures are recorded and never stop the batch.
        progress_cb(done, total, path); skip_cb(reason, path).
        """
        result = UpdateResult()
        items = []
        total = len(paths)

        def _skip(path: str, reason: str, message: str | None = None):
            result.skipped.append((path, reason))
            items.append({"asset_path": path, "sprite_name": base_name(path), "status": ITEM_SKIPPED, "reason": reason})
            if message and self.error_repo is not None:
                self.error_repo.add(run_id, PHASE_UPDATE, message, asset_path=path)
            if skip_cb:
                skip_cb(reason, path)

        for done, path in enumerate(paths, start=1):
            meta = meta_path_for(path)

            if not os.path.exists(meta):
                _skip(path, SKIP_MISSING_META)
            else:
                try:
                    importer = read_texture_importer(meta)
                except MetaFileError as e:
                    _skip(path, SKIP_META_ERROR, str(e))
                    importer = None

                if importer is not None:
                    self._apply_one(path, meta, importer, settings, dry_run, check_fit, result, items, _skip)

            if progress_cb:
                progress_cb(done, total, path)

        if self.item_repo is not None and run_id is not None and items:
            self.item_repo.add_items(run_id, items)

        return result

    def _apply_one(self, path, meta, importer, settings, dry_run, check_fit, result, items, _skip):
        if self._sprite_mode(importer) != SPRITE_MODE_SINGLE:
            _skip(path, SKIP_NOT_SINGLE)
            return

        if check_fit and not self._border_fits(path, settings, _skip):
            return

        if not dry_run:
            try:
                write_sprite_settings(meta, settings)
            except (MetaFileError, OSError) as e:
                _skip(path, SKIP_META_ERROR, f"{type(e).__name__}: {e}")
                return

        result.updated.append(path)
        items.append({"asset_path": path, "sprite_name": base_name(path), "status": ITEM_UPDATED, "reason": None})

    def _border_fits(self, path, settings, _skip) -> bool:
        try:
            width, height = image_size(path)
        except OSError as e:
            _skip(path, SKIP_IMAGE_ERROR, f"{type(e).__name__}: {e}")
            return False

        b = settings.border
        if b.left + b.right > width or b.bottom + b.top > height:
            _skip(path, SKIP_BORDER_TOO_LARGE, f"Border {b.as_tuple()} does not fit {width}x{height}")
            return False
        return True
