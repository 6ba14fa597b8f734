"""
Tag configuration.

Frozen dataclasses describing one tag: the plate (``BaseOptions``), the
space reserved for the code payload (``CodeOptions``) and the two material
colours. ``TagConfig.from_dict`` accepts the nested camelCase option object
used by the web front end as well as snake_case keys.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple, Type

from keytag.contracts import Material

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for configurations the engine must not run on."""

    def __init__(self, issues):
        if isinstance(issues, str):
            issues = [issues]
        self.issues = list(issues)
        super().__init__("; ".join(self.issues))


class BaseShape(Enum):
    RECTANGLE = "rectangle"
    ROUNDED_RECTANGLE = "roundedRectangle"


class TextPlacement(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"

    @property
    def is_edge(self) -> bool:
        """True for placements whose lines run along the left/right edge."""
        return self in (TextPlacement.LEFT, TextPlacement.RIGHT)


class TextAlign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class NfcShape(Enum):
    ROUND = "round"
    SQUARE = "square"


class KeychainPlacement(Enum):
    LEFT = "left"
    TOP = "top"
    TOP_LEFT = "topLeft"


@dataclass(frozen=True)
class BaseOptions:
    """Dimensions (mm) and feature switches of the plate."""

    width: float = 60.0
    height: float = 40.0
    depth: float = 3.0
    shape: BaseShape = BaseShape.ROUNDED_RECTANGLE
    corner_radius: float = 4.0
    has_border: bool = True
    border_width: float = 1.5
    border_depth: float = 1.0
    text_placement: TextPlacement = TextPlacement.BOTTOM
    text_align: TextAlign = TextAlign.CENTER
    has_text: bool = False
    text_message: str = ""
    text_size: float = 4.0
    text_depth: float = 1.0
    text_margin: float = 2.0
    has_nfc_indentation: bool = False
    nfc_indentation_shape: NfcShape = NfcShape.ROUND
    nfc_indentation_size: float = 26.0
    nfc_indentation_depth: float = 1.0
    nfc_indentation_hidden: bool = False
    has_keychain_attachment: bool = False
    keychain_hole_diameter: float = 5.0
    keychain_placement: KeychainPlacement = KeychainPlacement.LEFT
    mirror_holes: bool = False
    font_family: str = "DejaVu Sans"


@dataclass(frozen=True)
class CodeOptions:
    """Space reserved around the code payload."""

    margin: float = 2.0
    invert: bool = False


@dataclass(frozen=True)
class TagConfig:
    base: BaseOptions = field(default_factory=BaseOptions)
    code: CodeOptions = field(default_factory=CodeOptions)
    base_color: int = 0xFFFFFF
    detail_color: int = 0x000000

    @property
    def material_colors(self) -> Dict[Material, Tuple[int, int, int, int]]:
        return {
            Material.BASE: _hex_to_rgba(self.base_color),
            Material.DETAIL: _hex_to_rgba(self.detail_color),
        }

    def with_text_message(self, message: str) -> "TagConfig":
        return replace(self, base=replace(self.base, text_message=message))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagConfig":
        """Build a config from a (possibly camelCase) nested mapping."""
        data = {_snake(k): v for k, v in data.items()}
        # the web front end calls the detail colour "qrcodeColor"
        if "qrcode_color" in data and "detail_color" not in data:
            data["detail_color"] = data.pop("qrcode_color")
        kwargs: Dict[str, Any] = {}
        if "base" in data:
            kwargs["base"] = _build(BaseOptions, data.pop("base"), "base")
        if "code" in data:
            kwargs["code"] = _build(CodeOptions, data.pop("code"), "code")
        for key in ("base_color", "detail_color"):
            if key in data:
                kwargs[key] = _parse_color(data.pop(key))
        data.pop("qrcode_color", None)
        for key in data:
            logger.warning("Ignoring unknown config key %r", key)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """camelCase dict accepted by ``from_dict``."""
        def convert(obj):
            return {_camel(k): (v.value if isinstance(v, Enum) else v) for k, v in asdict(obj).items()}
        return {
            "base": convert(self.base),
            "code": convert(self.code),
            "baseColor": self.base_color,
            "detailColor": self.detail_color,
        }


def load_config(path) -> TagConfig:
    """Read a JSON tag description."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    return TagConfig.from_dict(data)


def available_width(config: TagConfig) -> float:
    """Horizontal room left for label text inside margins and border."""
    base = config.base
    width = base.width - 2 * config.code.margin
    if base.has_border:
        width -= 2 * base.border_width
    return width


def validate_config(config: TagConfig) -> List[str]:
    """Check a config before generation.

    Returns list of issue strings (empty = ok).
    """
    base = config.base
    issues = []
    for name in ("width", "height", "depth"):
        if getattr(base, name) <= 0:
            issues.append(f"base.{name} must be positive, got {getattr(base, name)}")
    if config.code.margin < 0:
        issues.append(f"code.margin must not be negative, got {config.code.margin}")
    if base.corner_radius < 0:
        issues.append(f"base.corner_radius must not be negative, got {base.corner_radius}")

    if base.has_border:
        if base.border_width <= 0 or base.border_depth <= 0:
            issues.append("border width and depth must be positive")
        elif 2 * base.border_width >= min(base.width, base.height):
            issues.append(
                f"border width {base.border_width} leaves no room inside a "
                f"{base.width}x{base.height} plate"
            )

    if available_width(config) < 0:
        issues.append(f"available width is negative ({available_width(config):.2f})")

    if base.has_text:
        if base.text_size <= 0 or base.text_depth <= 0:
            issues.append("text size and depth must be positive")
        if base.text_margin < 0:
            issues.append(f"text margin must not be negative, got {base.text_margin}")
        if not base.text_message.strip():
            issues.append("text is enabled but the message is empty")

    if base.has_nfc_indentation:
        if base.nfc_indentation_size <= 0 or base.nfc_indentation_depth <= 0:
            issues.append("NFC indentation size and depth must be positive")
        if base.nfc_indentation_size >= min(base.width, base.height):
            issues.append(
                f"NFC indentation ({base.nfc_indentation_size}) does not fit "
                f"the plate ({base.width}x{base.height})"
            )
        if not base.nfc_indentation_hidden and base.nfc_indentation_depth >= base.depth:
            issues.append("NFC indentation would cut through the base")

    if base.has_keychain_attachment and base.keychain_hole_diameter <= 0:
        issues.append("keychain hole diameter must be positive")

    return issues


def check_config(config: TagConfig) -> TagConfig:
    """Raise ``ConfigError`` listing every issue found by ``validate_config``."""
    issues = validate_config(config)
    if issues:
        raise ConfigError(issues)
    return config


# ─── Internal helpers ────────────────────────────────────────────────────────

def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _hex_to_rgba(color: int) -> Tuple[int, int, int, int]:
    return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF, 255)


def _parse_color(value) -> int:
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if text.lower().startswith("0x"):
            text = text[2:]
        try:
            return int(text, 16)
        except ValueError as e:
            raise ConfigError(f"invalid colour {value!r}") from e
    return int(value)


def _build(cls: Type, data: Dict[str, Any], section: str):
    if not isinstance(data, dict):
        raise ConfigError(f"'{section}' must be an object")
    known = {f.name: f for f in fields(cls)}
    defaults = cls()
    kwargs = {}
    for key, value in data.items():
        name = _snake(key)
        if name not in known:
            logger.warning("Ignoring unknown option %s.%s", section, key)
            continue
        default = getattr(defaults, name)
        if isinstance(default, Enum):
            try:
                value = type(default)(value)
            except ValueError:
                allowed = ", ".join(m.value for m in type(default))
                raise ConfigError(
                    f"{section}.{key}: unknown value {value!r} (expected one of {allowed})"
                ) from None
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise ConfigError(f"{section}.{key}: expected true or false, got {value!r}")
        elif isinstance(default, float):
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{section}.{key}: expected a number, got {value!r}") from None
        kwargs[name] = value
    return cls(**kwargs)
