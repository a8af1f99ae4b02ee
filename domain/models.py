from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Optional


class FilterMode(str, Enum):
    NONE = "none"
    PREFIX = "prefix"
    POSTFIX = "postfix"
    REGEX = "regex"


class SpriteAlignment(IntEnum):
    # Values match Unity's SpriteAlignment as stored in .meta files
    CENTER = 0
    TOP_LEFT = 1
    TOP_CENTER = 2
    TOP_RIGHT = 3
    LEFT_CENTER = 4
    RIGHT_CENTER = 5
    BOTTOM_LEFT = 6
    BOTTOM_CENTER = 7
    BOTTOM_RIGHT = 8
    CUSTOM = 9

    @classmethod
    def parse(cls, value) -> "SpriteAlignment":
        """Accepts an enum member, an int code, or a name like "BottomLeft" / "bottom_left"."""
        if isinstance(value, SpriteAlignment):
            return value
        if isinstance(value, int):
            return cls(value)
        s = str(value).strip()
        if s.isdigit():
            return cls(int(s))
        key = s.replace("-", "").replace("_", "").replace(" ", "").upper()
        for member in cls:
            if member.name.replace("_", "") == key:
                return member
        raise ValueError(f"Unknown sprite alignment: {value!r}")


@dataclass(frozen=True)
class FilterConfig:
    mode: FilterMode = FilterMode.NONE
    prefix_text: str = ""
    postfix_text: str = ""
    regex_pattern: str = ""

    @classmethod
    def from_mode(cls, mode: FilterMode, text: str = "") -> "FilterConfig":
        mode = FilterMode(mode)
        if mode == FilterMode.PREFIX:
            return cls(mode=mode, prefix_text=text)
        if mode == FilterMode.POSTFIX:
            return cls(mode=mode, postfix_text=text)
        if mode == FilterMode.REGEX:
            return cls(mode=mode, regex_pattern=text)
        return cls()

    @property
    def active_text(self) -> str:
        if self.mode == FilterMode.PREFIX:
            return self.prefix_text
        if self.mode == FilterMode.POSTFIX:
            return self.postfix_text
        if self.mode == FilterMode.REGEX:
            return self.regex_pattern
        return ""

    def toggle(self, mode: FilterMode, enabled: bool) -> "FilterConfig":
        """Turn a filter mode on or off. Turning one on turns the others off."""
        mode = FilterMode(mode)
        if enabled:
            return replace(self, mode=mode)
        if self.mode == mode:
            return replace(self, mode=FilterMode.NONE)
        return self

    def with_text(self, mode: FilterMode, text: str) -> "FilterConfig":
        mode = FilterMode(mode)
        if mode == FilterMode.PREFIX:
            return replace(self, prefix_text=text)
        if mode == FilterMode.POSTFIX:
            return replace(self, postfix_text=text)
        if mode == FilterMode.REGEX:
            return replace(self, regex_pattern=text)
        return self


@dataclass(frozen=True)
class SpriteBorder:
    # Unity order in spriteBorder: x=left, y=bottom, z=right, w=top
    left: float = 25.0
    bottom: float = 25.0
    right: float = 25.0
    top: float = 25.0

    def __post_init__(self):
        for name in ("left", "bottom", "right", "top"):
            v = float(getattr(self, name))
            object.__setattr__(self, name, v if v > 0 else 0.0)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.bottom, self.right, self.top)


@dataclass(frozen=True)
class ImportSettings:
    border: SpriteBorder = field(default_factory=SpriteBorder)
    alignment: SpriteAlignment = SpriteAlignment.CENTER
    custom_pivot: Optional[tuple[float, float]] = None  # only written for CUSTOM

    def pivot_to_write(self) -> Optional[tuple[float, float]]:
        if self.alignment != SpriteAlignment.CUSTOM:
            return None
        return self.custom_pivot or (0.0, 0.0)


@dataclass
class UpdateResult:
    updated: list[str] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
