from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

META_TEMPLATE = """fileFormatVersion: 2
guid: 3f1c2a9b8d7e4f60a1b2c3d4e5f60718
TextureImporter:
  internalIDToNameTable: []
  externalObjects: {{}}
  serializedVersion: 12
  mipmaps:
    mipMapMode: 0
    enableMipMap: 0
  textureType: 8
  spriteMode: {sprite_mode}
  spriteExtrude: 1
  spriteMeshType: 1
  alignment: 0
  spritePivot: {{x: 0.5, y: 0.5}}
  spritePixelsToUnits: 100
  spriteBorder: {{x: 0, y: 0, z: 0, w: 0}}
  spriteGenerateFallbackPhysicsShape: 1
  platformSettings:
  - serializedVersion: 3
    buildTarget: DefaultTexturePlatform
    maxTextureSize: 2048
  spriteSheet:
    serializedVersion: 2
    sprites:
    - serializedVersion: 2
      name: sheet_0
      alignment: 4
      pivot: {{x: 0, y: 0.5}}
      border: {{x: 0, y: 0, z: 0, w: 0}}
    outline: []
  userData:
  assetBundleName:
  assetBundleVariant:
"""


def meta_text(sprite_mode: int = 1) -> str:
    return META_TEMPLATE.format(sprite_mode=sprite_mode)


def make_sprite(root: Path, rel: str, size=(128, 128), sprite_mode: int | None = 1) -> Path:
    """PNG plus .meta (sprite_mode=None writes no meta)."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, (255, 0, 0, 255)).save(path)
    if sprite_mode is not None:
        Path(str(path) + ".meta").write_text(meta_text(sprite_mode), encoding="utf-8")
    return path


@pytest.fixture
def assets(tmp_path: Path) -> Path:
    root = tmp_path / "Assets"
    make_sprite(root, "UI/a_1.png")
    make_sprite(root, "UI/a_2.png")
    make_sprite(root, "Chars/b_1.png")
    (root / "UI" / "notes.txt").write_text("not a sprite", encoding="utf-8")
    return root
