import os
import shutil
import tempfile


def ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_text_atomic(path: str, text: str, encoding: str = "utf-8") -> int:
    """Write text next to the target, then swap it in. Returns bytes written.

    An existing target keeps its permission bits.
    """
    ensure_parent(path)
    data = text.encode(encoding)
    fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if os.path.exists(path):
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    return len(data)
