from domain.constants import (
    FOLDER_PATH_KEY,
    PREFIX_FILTER_KEY,
    POSTFIX_FILTER_KEY,
    REGEX_FILTER_KEY,
    FILTER_MODE_KEY,
    BORDER_KEY,
    ALIGNMENT_KEY,
    CUSTOM_PIVOT_KEY,
    DEFAULT_FOLDER,
    DEFAULT_BORDER,
    DEFAULT_CUSTOM_PIVOT,
)
from domain.models import FilterConfig, FilterMode, ImportSettings, SpriteAlignment, SpriteBorder


def parse_floats(value: str, count: int) -> tuple[float, ...]:
    parts = [p for p in str(value).replace(",", " ").split() if p]
    if len(parts) != count:
        raise ValueError(f"Expected {count} numbers, got {value!r}")
    return tuple(float(p) for p in parts)


def format_floats(values) -> str:
    return ",".join(repr(float(v)) for v in values)


class PreferencesService:
    """Reads and writes tool settings through a key-value store (PrefsRepo-like: get/set)."""

    def __init__(self, prefs_repo):
        self.prefs = prefs_repo

    def _set_if_changed(self, key: str, value: str) -> bool:
        if self.prefs.get(key) == value:
            return False
        self.prefs.set(key, value)
        return True

    # ---- folder ----

    def folder_path(self) -> str:
        return self.prefs.get(FOLDER_PATH_KEY, DEFAULT_FOLDER)

    def save_folder_path(self, path: str) -> bool:
        return self._set_if_changed(FOLDER_PATH_KEY, path)

    # ---- filter ----

    def filter_config(self) -> FilterConfig:
        mode_raw = self.prefs.get(FILTER_MODE_KEY, FilterMode.NONE.value)
        try:
            mode = FilterMode(mode_raw)
        except ValueError:
            mode = FilterMode.NONE
        return FilterConfig(
            mode=mode,
            prefix_text=self.prefs.get(PREFIX_FILTER_KEY, ""),
            postfix_text=self.prefs.get(POSTFIX_FILTER_KEY, ""),
            regex_pattern=self.prefs.get(REGEX_FILTER_KEY, ""),
        )

    def save_filter_config(self, config: FilterConfig) -> bool:
        changed = False
        changed |= self._set_if_changed(FILTER_MODE_KEY, config.mode.value)
        changed |= self._set_if_changed(PREFIX_FILTER_KEY, config.prefix_text)
        changed |= self._set_if_changed(POSTFIX_FILTER_KEY, config.postfix_text)
        changed |= self._set_if_changed(REGEX_FILTER_KEY, config.regex_pattern)
        return changed

    # ---- import settings ----

    def import_settings(self) -> ImportSettings:
        raw_border = self.prefs.get(BORDER_KEY)
        raw_align = self.prefs.get(ALIGNMENT_KEY)
        raw_pivot = self.prefs.get(CUSTOM_PIVOT_KEY)

        try:
            border = parse_floats(raw_border, 4) if raw_border else DEFAULT_BORDER
        except ValueError:
            border = DEFAULT_BORDER
        try:
            alignment = SpriteAlignment.parse(raw_align) if raw_align else SpriteAlignment.CENTER
        except ValueError:
            alignment = SpriteAlignment.CENTER
        try:
            pivot = parse_floats(raw_pivot, 2) if raw_pivot else DEFAULT_CUSTOM_PIVOT
        except ValueError:
            pivot = DEFAULT_CUSTOM_PIVOT

        return ImportSettings(border=SpriteBorder(*border), alignment=alignment, custom_pivot=tuple(pivot))

    def save_import_settings(self, settings: ImportSettings) -> bool:
        changed = False
        changed |= self._set_if_changed(BORDER_KEY, format_floats(settings.border.as_tuple()))
        changed |= self._set_if_changed(ALIGNMENT_KEY, str(int(settings.alignment)))
        if settings.custom_pivot is not None:
            changed |= self._set_if_changed(CUSTOM_PIVOT_KEY, format_floats(settings.custom_pivot))
        return changed
