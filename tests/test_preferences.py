from __future__ import annotations

import pytest

from domain.constants import DEFAULT_FOLDER, FOLDER_PATH_KEY, REGEX_FILTER_KEY
from domain.models import FilterConfig, FilterMode, ImportSettings, SpriteAlignment, SpriteBorder
from persistence.db import Database
from persistence.repos import PrefsRepo
from services.preferences_service import PreferencesService, parse_floats


@pytest.fixture
def prefs_repo(tmp_path):
    db = Database(str(tmp_path / "prefs.db"))
    db.init()
    return PrefsRepo(db)


def test_defaults_when_store_is_empty(prefs_repo):
    prefs = PreferencesService(prefs_repo)

    assert prefs.folder_path() == DEFAULT_FOLDER
    assert prefs.filter_config() == FilterConfig()
    settings = prefs.import_settings()
    assert settings.border.as_tuple() == (25.0, 25.0, 25.0, 25.0)
    assert settings.alignment == SpriteAlignment.CENTER
    assert settings.custom_pivot == (0.0, 0.0)


def test_filter_round_trip(prefs_repo):
    prefs = PreferencesService(prefs_repo)
    cfg = FilterConfig(mode=FilterMode.REGEX, prefix_text="ui_", postfix_text="_bg", regex_pattern=r"^btn_\d+")

    assert prefs.save_filter_config(cfg) is True
    assert prefs.save_filter_config(cfg) is False
    assert prefs.filter_config() == cfg
    assert prefs_repo.get(REGEX_FILTER_KEY) == r"^btn_\d+"


def test_settings_round_trip(prefs_repo):
    prefs = PreferencesService(prefs_repo)
    settings = ImportSettings(border=SpriteBorder(1, 2.5, 3, 4), alignment=SpriteAlignment.CUSTOM,
                              custom_pivot=(0.25, 0.75))

    prefs.save_import_settings(settings)

    assert prefs.import_settings() == settings


def test_folder_written_only_on_change(prefs_repo):
    prefs = PreferencesService(prefs_repo)
    assert prefs.save_folder_path("Assets/Sprites") is True
    assert prefs.save_folder_path("Assets/Sprites") is False
    assert prefs_repo.get(FOLDER_PATH_KEY) == "Assets/Sprites"


def test_garbage_values_fall_back_to_defaults(prefs_repo):
    prefs_repo.set("filter_mode", "sideways")
    prefs_repo.set("border", "1,2")
    prefs_repo.set("sprite_alignment", "Diagonal")
    prefs = PreferencesService(prefs_repo)

    assert prefs.filter_config().mode == FilterMode.NONE
    assert prefs.import_settings().border.as_tuple() == (25.0, 25.0, 25.0, 25.0)
    assert prefs.import_settings().alignment == SpriteAlignment.CENTER


def test_prefs_repo_all_overwrites_by_key(prefs_repo):
    prefs_repo.set("b", "2")
    prefs_repo.set("a", "1")
    prefs_repo.set("a", "3")
    assert prefs_repo.all() == {"a": "3", "b": "2"}


def test_parse_floats():
    assert parse_floats("1, 2 3,4", 4) == (1.0, 2.0, 3.0, 4.0)
    with pytest.raises(ValueError):
        parse_floats("1,2,3", 4)


@pytest.mark.parametrize("raw,expected", [
    ("BottomLeft", SpriteAlignment.BOTTOM_LEFT),
    ("bottom_left", SpriteAlignment.BOTTOM_LEFT),
    ("custom", SpriteAlignment.CUSTOM),
    ("4", SpriteAlignment.LEFT_CENTER),
    (0, SpriteAlignment.CENTER),
])
def test_alignment_parse(raw, expected):
    assert SpriteAlignment.parse(raw) == expected
