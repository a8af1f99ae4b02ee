from __future__ import annotations

from pathlib import Path

from domain.constants import SKIP_BORDER_TOO_LARGE, SKIP_MISSING_META, SKIP_NOT_SINGLE, SKIP_META_ERROR
from domain.models import ImportSettings, SpriteAlignment, SpriteBorder
from persistence.db import Database
from persistence.repos import ErrorRepo, ItemRepo, RunRepo
from services.border_service import BorderService
import sprite_io.meta_file as meta_file
from sprite_io.meta_file import read_texture_importer
from tests.conftest import make_sprite


def _meta(path: Path) -> Path:
    return Path(str(path) + ".meta")


def test_updates_single_sprites(tmp_path):
    a = make_sprite(tmp_path, "a.png")
    b = make_sprite(tmp_path, "b.png")
    settings = ImportSettings(border=SpriteBorder(8, 8, 8, 8), alignment=SpriteAlignment.BOTTOM_CENTER)

    result = BorderService().apply(None, [str(a), str(b)], settings)

    assert result.updated == [str(a), str(b)]
    assert result.skipped == []
    importer = read_texture_importer(str(_meta(a)))
    assert importer["spriteBorder"] == {"x": 8, "y": 8, "z": 8, "w": 8}
    assert importer["alignment"] == 7


def test_skips_non_single_and_missing_meta(tmp_path):
    multi = make_sprite(tmp_path, "sheet.png", sprite_mode=2)
    bare = make_sprite(tmp_path, "bare.png", sprite_mode=None)
    ok = make_sprite(tmp_path, "ok.png")
    before = _meta(multi).read_text(encoding="utf-8")

    reasons = []
    result = BorderService().apply(None, [str(multi), str(bare), str(ok)], ImportSettings(),
                                   skip_cb=lambda reason, path: reasons.append(reason))

    assert result.updated == [str(ok)]
    assert result.skipped == [(str(multi), SKIP_NOT_SINGLE), (str(bare), SKIP_MISSING_META)]
    assert reasons == [SKIP_NOT_SINGLE, SKIP_MISSING_META]
    assert _meta(multi).read_text(encoding="utf-8") == before


def test_small_sprite_gets_default_border(tmp_path):
    icon = make_sprite(tmp_path, "icon.png", size=(32, 32))

    result = BorderService().apply(None, [str(icon)], ImportSettings())

    assert result.updated == [str(icon)]
    assert read_texture_importer(str(_meta(icon)))["spriteBorder"] == {"x": 25, "y": 25, "z": 25, "w": 25}


def test_check_fit_skips_border_larger_than_image(tmp_path):
    small = make_sprite(tmp_path, "small.png", size=(32, 32))
    wide = make_sprite(tmp_path, "wide.png", size=(64, 16))
    before = _meta(small).read_bytes()

    result = BorderService().apply(None, [str(small), str(wide)], ImportSettings(border=SpriteBorder(20, 0, 20, 0)),
                                   check_fit=True)

    assert result.skipped == [(str(small), SKIP_BORDER_TOO_LARGE)]
    assert result.updated == [str(wide)]
    assert _meta(small).read_bytes() == before


def test_dry_run_writes_nothing(tmp_path):
    a = make_sprite(tmp_path, "a.png")
    before = _meta(a).read_bytes()

    result = BorderService().apply(None, [str(a)], ImportSettings(), dry_run=True)

    assert result.updated == [str(a)]
    assert _meta(a).read_bytes() == before


def test_broken_meta_does_not_stop_batch(tmp_path):
    db = Database(str(tmp_path / "t.db"))
    db.init()
    run_repo, item_repo, error_repo = RunRepo(db), ItemRepo(db), ErrorRepo(db)
    run_repo.create_run("r1", "test", str(tmp_path), ".png",
                        {"filter_mode": "none", "border": "25,25,25,25", "alignment": 0})

    broken = make_sprite(tmp_path, "broken.png")
    _meta(broken).write_text("TextureImporter: [unclosed\n", encoding="utf-8")
    good = make_sprite(tmp_path, "good.png")

    service = BorderService(item_repo, error_repo)
    progress = []
    result = service.apply("r1", [str(broken), str(good)], ImportSettings(),
                           progress_cb=lambda done, total, path: progress.append((done, total)))

    assert result.updated == [str(good)]
    assert result.skipped == [(str(broken), SKIP_META_ERROR)]
    assert progress == [(1, 2), (2, 2)]
    assert error_repo.count("r1") == 1
    assert item_repo.status_counts("r1") == {"UPDATED": 1, "SKIPPED": 1}
    names = [it["sprite_name"] for it in item_repo.list("r1")]
    assert names == ["broken", "good"]


def test_negative_border_is_clamped():
    assert SpriteBorder(-5, 3, -0.5, 2).as_tuple() == (0.0, 3.0, 0.0, 2.0)


def _run_with_bad_meta(tmp_path, bad: Path) -> tuple:
    db = Database(str(tmp_path / "t.db"))
    db.init()
    run_repo, item_repo, error_repo = RunRepo(db), ItemRepo(db), ErrorRepo(db)
    run_repo.create_run("r1", "test", str(tmp_path), ".png",
                        {"filter_mode": "none", "border": "25,25,25,25", "alignment": 0})
    good = make_sprite(tmp_path, "good.png")

    result = BorderService(item_repo, error_repo).apply("r1", [str(bad), str(good)], ImportSettings())
    return result, good, item_repo, error_repo


def test_non_utf8_meta_does_not_stop_batch(tmp_path):
    bad = make_sprite(tmp_path, "latin.png", sprite_mode=None)
    _meta(bad).write_bytes(b"fileFormatVersion: 2\nTextureImporter:\n  spriteMode: 1\n  userData: caf\xe9\n")

    result, good, item_repo, error_repo = _run_with_bad_meta(tmp_path, bad)

    assert result.updated == [str(good)]
    assert result.skipped == [(str(bad), SKIP_META_ERROR)]
    assert item_repo.status_counts("r1") == {"UPDATED": 1, "SKIPPED": 1}
    assert "decode" in error_repo.list_latest("r1")[0]["message"]


def test_meta_that_is_a_directory_does_not_stop_batch(tmp_path):
    bad = make_sprite(tmp_path, "odd.png", sprite_mode=None)
    _meta(bad).mkdir()

    result, good, item_repo, error_repo = _run_with_bad_meta(tmp_path, bad)

    assert result.updated == [str(good)]
    assert result.skipped == [(str(bad), SKIP_META_ERROR)]
    assert error_repo.count("r1") == 1


def test_unreadable_meta_does_not_stop_batch(tmp_path, monkeypatch):
    bad = make_sprite(tmp_path, "locked.png")
    real_open = open

    def guarded_open(path, *args, **kwargs):
        if str(path) == str(_meta(bad)):
            raise PermissionError(13, "Permission denied", str(path))
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr(meta_file, "open", guarded_open, raising=False)

    result, good, item_repo, error_repo = _run_with_bad_meta(tmp_path, bad)

    assert result.updated == [str(good)]
    assert result.skipped == [(str(bad), SKIP_META_ERROR)]
    assert "PermissionError" in error_repo.list_latest("r1")[0]["message"]
