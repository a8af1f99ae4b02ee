import os
import re

from domain.errors import InvalidPatternError
from domain.models import FilterConfig, FilterMode


def base_name(path: str) -> str:
    """File name without directory and without its extension ("a/b/hero_1.png" -> "hero_1")."""
    return os.path.splitext(os.path.basename(path))[0]


def compile_pattern(pattern: str):
    """Returns a compiled regex, or raises InvalidPatternError."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def matches(name: str, config: FilterConfig, compiled=None) -> bool:
    """Decide whether one base name passes the active filter.

    Notes:
    - Regex uses search semantics (not anchored) and is case-sensitive.
    - Prefix/postfix compare case-insensitively.
    - Empty text in any mode matches everything.
    """
    if config.mode == FilterMode.REGEX and config.regex_pattern:
        if compiled is None:
            compiled = compile_pattern(config.regex_pattern)
        return compiled.search(name) is not None

    lowered = name.lower()

    prefix_ok = config.mode != FilterMode.PREFIX or lowered.startswith(config.prefix_text.lower())
    postfix_ok = config.mode != FilterMode.POSTFIX or lowered.endswith(config.postfix_text.lower())

    return prefix_ok and postfix_ok


def select(root_path: str, extension: str, config: FilterConfig, all_paths=None, diag_cb=None) -> list[str]:
    """Return the candidate paths that pass the filter, in input order.

    all_paths=None scans root_path for extension (ScanError propagates).
    A malformed regex is reported once through diag_cb(InvalidPatternError)
    and yields an empty result instead of failing the call.
    """
    if all_paths is None:
        from sprite_io.fs_scanner import iter_sprite_files

        all_paths = list(iter_sprite_files(root_path, extension))

    ext = (extension or "").lower()

    compiled = None
    if config.mode == FilterMode.REGEX and config.regex_pattern:
        try:
            compiled = compile_pattern(config.regex_pattern)
        except InvalidPatternError as e:
            if diag_cb:
                diag_cb(e)
            return []

    out = []
    for path in all_paths:
        if ext and os.path.splitext(path)[1].lower() != ext:
            continue
        if matches(base_name(path), config, compiled):
            out.append(path)
    return out
