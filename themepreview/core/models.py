# themepreview/core/models.py
"""
Data model shared by the context generator, the render cache and the pipeline.

Schemas and presets are frozen: they are loaded once from a read-only content
source and never mutated by rendering.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
import structlog

log = structlog.get_logger(__name__)

STRUCTURAL_SETTING_TYPES = frozenset({"header", "paragraph"})


class Category(Enum):
    # component categories with dedicated mock data or generated templates.
    HERO = "hero"
    SLIDESHOW = "slideshow"
    IMAGE_BANNER = "image-banner"
    PRODUCT = "product"
    MAIN_PRODUCT = "main-product"
    COLLECTION = "collection"
    MAIN_COLLECTION = "main-collection"
    FEATURED_COLLECTION = "featured-collection"
    COLLECTION_LIST = "collection-list"
    HEADER = "header"
    FOOTER = "footer"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "Category":
        if not s:
            return cls.UNRECOGNIZED
        try:
            category = cls(s.lower())
        except ValueError:
            log.debug("unrecognized_component_category", input_string=s)
            return cls.UNRECOGNIZED
        return category


@dataclass(frozen=True)
class Setting:
    id: str
    type: str
    label: Optional[str] = None
    default: Any = None
    has_default: bool = False
    info: Optional[str] = None

    @property
    def is_structural(self) -> bool:
        """Header and paragraph settings only label the editor UI; they carry no value."""
        return self.type in STRUCTURAL_SETTING_TYPES

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Setting":
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "text")),
            label=data.get("label"),
            default=data.get("default"),
            has_default="default" in data,
            info=data.get("info"),
        )


@dataclass(frozen=True)
class BlockType:
    type: str
    name: str
    limit: Optional[int] = None
    settings: Tuple[Setting, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockType":
        return cls(
            type=str(data.get("type", "")),
            name=str(data.get("name", data.get("type", ""))),
            limit=data.get("limit"),
            settings=tuple(Setting.from_dict(s) for s in data.get("settings") or []),
        )


@dataclass(frozen=True)
class PresetBlock:
    type: str
    settings: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SchemaPreset:
    # a named starting configuration declared inside a component schema.
    name: str
    blocks: Optional[Tuple[PresetBlock, ...]] = None
    settings: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaPreset":
        raw_blocks = data.get("blocks")
        blocks = None
        if isinstance(raw_blocks, list):
            blocks = tuple(
                PresetBlock(type=str(b.get("type", "")), settings=dict(b.get("settings") or {}))
                for b in raw_blocks if isinstance(b, Mapping)
            )
        settings = data.get("settings")
        return cls(
            name=str(data.get("name", "")),
            blocks=blocks,
            settings=dict(settings) if isinstance(settings, Mapping) else None,
        )


@dataclass(frozen=True)
class ComponentSchema:
    slug: str
    name: str
    category: str
    settings: Tuple[Setting, ...] = ()
    blocks: Tuple[BlockType, ...] = ()
    max_blocks: int = 16
    presets: Tuple[SchemaPreset, ...] = ()
    description: Optional[str] = None

    @property
    def category_kind(self) -> Category:
        return Category.from_string(self.category)

    def block_type(self, type_name: str) -> Optional[BlockType]:
        return next((bt for bt in self.blocks if bt.type == type_name), None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], slug: Optional[str] = None) -> "ComponentSchema":
        """Builds a schema from its JSON document; `slug` fills in when the document omits one."""
        resolved_slug = data.get("slug") or slug
        if not resolved_slug:
            raise ValueError("component schema has no slug")
        return cls(
            slug=str(resolved_slug),
            name=str(data.get("name", resolved_slug)),
            category=str(data.get("category", "")),
            settings=tuple(Setting.from_dict(s) for s in data.get("settings") or [] if isinstance(s, Mapping)),
            blocks=tuple(BlockType.from_dict(b) for b in data.get("blocks") or [] if isinstance(b, Mapping)),
            max_blocks=int(data.get("maxBlocks", data.get("max_blocks", 16))),
            presets=tuple(SchemaPreset.from_dict(p) for p in data.get("presets") or [] if isinstance(p, Mapping)),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class PresetColors:
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    background: Optional[str] = None
    background_secondary: Optional[str] = None
    text: Optional[str] = None
    text_secondary: Optional[str] = None


@dataclass(frozen=True)
class PresetTypography:
    heading_font: Optional[str] = None
    body_font: Optional[str] = None
    heading_scale: Optional[int] = None
    body_scale: Optional[int] = None


@dataclass(frozen=True)
class PresetButtons:
    border_radius: Optional[int] = None
    padding_vertical: Optional[int] = None
    padding_horizontal: Optional[int] = None


def _known_fields(cls, data: Any) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        return {}
    names = cls.__dataclass_fields__.keys()
    return {k: v for k, v in data.items() if k in names}


@dataclass(frozen=True)
class StylePreset:
    # global color/typography/button values applied to theme settings.
    name: str = ""
    description: str = ""
    colors: Optional[PresetColors] = None
    typography: Optional[PresetTypography] = None
    buttons: Optional[PresetButtons] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StylePreset":
        # bundled presets are sometimes wrapped as {"default": {...}}
        if isinstance(data.get("default"), Mapping):
            data = data["default"]
        colors = data.get("colors")
        typography = data.get("typography")
        buttons = data.get("buttons")
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            colors=PresetColors(**_known_fields(PresetColors, colors)) if isinstance(colors, Mapping) else None,
            typography=PresetTypography(**_known_fields(PresetTypography, typography)) if isinstance(typography, Mapping) else None,
            buttons=PresetButtons(**_known_fields(PresetButtons, buttons)) if isinstance(buttons, Mapping) else None,
        )


@dataclass(frozen=True)
class CacheEntry:
    key: str
    component_slug: str
    preset_slug: Optional[str]
    html: str
    css: str
    render_time_ms: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def size_bytes(self) -> int:
        return len(self.html) + len(self.css or "")


@dataclass(frozen=True)
class CacheStats:
    total: int = 0
    expired: int = 0
    approx_size_kb: int = 0


@dataclass
class RenderResult:
    html: str
    css: str
    errors: List[str] = field(default_factory=list)
    render_time_ms: int = 0
    cached: bool = False

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "html": self.html,
            "css": self.css,
            "errors": list(self.errors),
            "renderTimeMs": self.render_time_ms,
            "cached": self.cached,
        }
