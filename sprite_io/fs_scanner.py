import os

from domain.constants import SPRITE_EXT
from domain.errors import ScanError


def is_ignored_dir(name: str) -> bool:
    # Unity never imports hidden folders or folders ending in "~"
    return name.startswith(".") or name.endswith("~")


def iter_sprite_files(root: str, extension: str = SPRITE_EXT):
    """Yield files under root whose extension matches (case-insensitive), in walk order."""
    if not os.path.exists(root):
        raise ScanError(root, "folder does not exist")
    if not os.path.isdir(root):
        raise ScanError(root, "not a directory")

    def _fail(err: OSError):
        raise ScanError(err.filename or root, err.strerror or str(err)) from err

    ext = extension.lower()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_fail):
        dirnames[:] = [d for d in dirnames if not is_ignored_dir(d)]
        for fn in filenames:
            if os.path.splitext(fn)[1].lower() == ext:
                yield os.path.join(dirpath, fn)
