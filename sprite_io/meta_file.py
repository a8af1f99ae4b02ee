# sprite_io/meta_file.py
# Unity keeps TextureImporter settings in "<asset>.meta" (plain YAML).
# Reads go through PyYAML; writes patch only the lines we own so the rest
# of the file stays byte-for-byte what Unity wrote.

import os
import re

import yaml

from domain.constants import META_EXT
from domain.errors import MetaFileError
from domain.models import ImportSettings
from sprite_io.file_write import write_text_atomic

_IMPORTER_HEADER = re.compile(r"^TextureImporter:\s*$")
_KEY_LINE = re.compile(r"^(?P<indent>[ ]+)(?P<key>[A-Za-z_][A-Za-z0-9_]*):")


def meta_path_for(asset_path: str) -> str:
    return asset_path + META_EXT


def read_texture_importer(meta_path: str) -> dict:
    if not os.path.exists(meta_path):
        raise MetaFileError(meta_path, "meta file not found")

    try:
        with open(meta_path, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise MetaFileError(meta_path, f"invalid YAML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise MetaFileError(meta_path, f"{type(e).__name__}: {e}") from e

    importer = doc.get("TextureImporter") if isinstance(doc, dict) else None
    if not isinstance(importer, dict):
        raise MetaFileError(meta_path, "no TextureImporter section")
    return importer


def _num(v: float) -> str:
    v = float(v)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def sprite_setting_values(settings: ImportSettings) -> dict[str, str]:
    """YAML values for the importer keys this tool owns, in Unity's inline-map style."""
    b = settings.border
    values = {
        "alignment": str(int(settings.alignment)),
        "spriteBorder": f"{{x: {_num(b.left)}, y: {_num(b.bottom)}, z: {_num(b.right)}, w: {_num(b.top)}}}",
    }
    pivot = settings.pivot_to_write()
    if pivot is not None:
        values["spritePivot"] = f"{{x: {_num(pivot[0])}, y: {_num(pivot[1])}}}"
    return values


def patch_importer_text(text: str, values: dict[str, str]) -> str:
    """Replace (or append) direct children of TextureImporter: with the given values.

    Keys with the same name nested deeper (e.g. spriteSheet sprites) are left alone.
    """
    lines = text.splitlines(keepends=True)

    start = None
    for i, line in enumerate(lines):
        if _IMPORTER_HEADER.match(line):
            start = i
            break
    if start is None:
        raise ValueError("no TextureImporter section")

    end = len(lines)
    child_indent = None
    for j in range(start + 1, len(lines)):
        line = lines[j]
        if not line.strip():
            continue
        if not line[0].isspace():
            end = j
            break
        if child_indent is None:
            child_indent = len(line) - len(line.lstrip(" "))

    if child_indent is None:
        child_indent = 2

    newline = "\r\n" if lines[start].endswith("\r\n") else "\n"
    pending = dict(values)

    for j in range(start + 1, end):
        m = _KEY_LINE.match(lines[j])
        if not m or len(m.group("indent")) != child_indent:
            continue
        key = m.group("key")
        if key in pending:
            ending = newline if lines[j].endswith(("\n", "\r")) else ""
            lines[j] = f"{m.group('indent')}{key}: {pending.pop(key)}{ending}"

    if pending:
        insert_at = end
        while insert_at > start + 1 and not lines[insert_at - 1].strip():
            insert_at -= 1
        if insert_at > 0 and not lines[insert_at - 1].endswith(("\n", "\r")):
            lines[insert_at - 1] += newline
        extra = [f"{' ' * child_indent}{k}: {v}{newline}" for k, v in pending.items()]
        lines[insert_at:insert_at] = extra

    return "".join(lines)


def write_sprite_settings(meta_path: str, settings: ImportSettings) -> int:
    try:
        with open(meta_path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise MetaFileError(meta_path, f"{type(e).__name__}: {e}") from e

    try:
        patched = patch_importer_text(text, sprite_setting_values(settings))
    except ValueError as e:
        raise MetaFileError(meta_path, str(e)) from e

    return write_text_atomic(meta_path, patched)
