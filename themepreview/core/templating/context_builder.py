# themepreview/core/templating/context_builder.py
"""
Builds the context dictionary a component template is rendered against.

Everything comes from the component schema and the optional style preset:
setting defaults, sample blocks, theme settings and mock storefront entities.
No I/O happens here.
"""
import copy
from typing import Any, Dict, Iterable, List, Optional

import structlog

from themepreview.core.models import BlockType, Category, ComponentSchema, Setting, StylePreset

from .mock_data import mock_collection, mock_linklists, mock_product, mock_routes, mock_shop

log = structlog.get_logger(__name__)

MAX_SAMPLE_BLOCKS = 3
FEATURED_COLLECTION_COUNT = 4

SETTING_TYPE_DEFAULTS: Dict[str, Any] = {
    "text": "Sample text",
    "textarea": "Sample paragraph text with more details about this section.",
    "richtext": "<p>Sample rich text content with <strong>formatting</strong>.</p>",
    "inline_richtext": "Sample <strong>inline</strong> text",
    "html": '<div class="custom-html">Custom HTML content</div>',
    "liquid": "",
    "image_picker": None,
    "video": None,
    "video_url": None,
    "url": "#",
    "checkbox": False,
    "range": 50,
    "number": 1,
    "select": None,
    "radio": None,
    "color": "#000000",
    "color_background": "rgba(0,0,0,0)",
    "color_scheme": None,
    "font_picker": "sans-serif",
    "collection": None,
    "collection_list": [],
    "product": None,
    "product_list": [],
    "blog": None,
    "article": None,
    "page": None,
    "link_list": None,
    "metaobject": None,
    "metaobject_list": [],
}

BASE_THEME_SETTINGS: Dict[str, Any] = {
    "color_primary": "#2563eb",
    "color_secondary": "#64748b",
    "color_accent": "#f59e0b",
    "color_background": "#ffffff",
    "color_background_secondary": "#f8fafc",
    "color_text": "#1e293b",
    "color_text_secondary": "#64748b",
    "typography_heading_font": "Inter",
    "typography_body_font": "Inter",
    "typography_heading_scale": 100,
    "typography_body_scale": 100,
    "button_border_radius": 8,
    "button_padding_vertical": 12,
    "button_padding_horizontal": 24,
    "page_width": 1200,
    "spacing_sections": 48,
    "social_twitter_link": "",
    "social_facebook_link": "",
    "social_instagram_link": "",
}

PRODUCT_CATEGORIES = {Category.PRODUCT, Category.MAIN_PRODUCT}
COLLECTION_CATEGORIES = {Category.COLLECTION, Category.MAIN_COLLECTION}
COLLECTION_LIST_CATEGORIES = {Category.FEATURED_COLLECTION, Category.COLLECTION_LIST}
BANNER_CATEGORIES = {Category.HERO, Category.SLIDESHOW, Category.IMAGE_BANNER}


def default_setting_value(setting: Setting) -> Any:
    if setting.has_default:
        return copy.deepcopy(setting.default)
    return copy.deepcopy(SETTING_TYPE_DEFAULTS.get(setting.type))


def settings_defaults(settings: Iterable[Setting]) -> Dict[str, Any]:
    """Maps each value-carrying setting id to its default."""
    return {s.id: default_setting_value(s) for s in settings if not s.is_structural}


def _block_context(index: int, block_type: str, settings: Dict[str, Any]) -> Dict[str, Any]:
    block_id = f"block-{index}"
    return {
        "id": block_id,
        "type": block_type,
        "settings": settings,
        "shopify_attributes": f"data-shopify-editor-block='{{\"id\":\"{block_id}\",\"type\":\"{block_type}\"}}'",
    }


def build_blocks(schema: ComponentSchema) -> List[Dict[str, Any]]:
    first_preset = schema.presets[0] if schema.presets else None
    if first_preset is not None and first_preset.blocks is not None:
        blocks = []
        for index, preset_block in enumerate(first_preset.blocks):
            block_settings = copy.deepcopy(dict(preset_block.settings))
            block_type: Optional[BlockType] = schema.block_type(preset_block.type)
            if block_type is None:
                log.debug("preset_block_type_not_declared", component=schema.slug, block_type=preset_block.type)
            else:
                for setting in block_type.settings:
                    if not setting.is_structural and setting.id not in block_settings:
                        block_settings[setting.id] = default_setting_value(setting)
            blocks.append(_block_context(index, preset_block.type, block_settings))
        return blocks

    return [
        _block_context(index, block_type.type, settings_defaults(block_type.settings))
        for index, block_type in enumerate(schema.blocks[:MAX_SAMPLE_BLOCKS])
    ]


def build_theme_settings(preset: Optional[StylePreset] = None) -> Dict[str, Any]:
    theme = dict(BASE_THEME_SETTINGS)
    if preset is None:
        return theme
    overlays = (
        ("color_", preset.colors),
        ("typography_", preset.typography),
        ("button_", preset.buttons),
    )
    for prefix, group in overlays:
        if group is None:
            continue
        for field_name, value in vars(group).items():
            if value is not None:
                theme[f"{prefix}{field_name}"] = value
    return theme


def build_mock_entities(category: Category) -> Dict[str, Any]:
    if category in PRODUCT_CATEGORIES:
        return {"product": mock_product(0)}
    if category in COLLECTION_CATEGORIES:
        return {"collection": mock_collection(0)}
    if category in COLLECTION_LIST_CATEGORIES:
        collections = [mock_collection(i) for i in range(FEATURED_COLLECTION_COUNT)]
        return {"collections": collections, "collection": collections[0]}
    if category in BANNER_CATEGORIES:
        return {}
    # header, footer and unknown categories get both so any template has data
    return {"product": mock_product(0), "collection": mock_collection(0)}


def build_render_context(schema: ComponentSchema, preset: Optional[StylePreset] = None) -> Dict[str, Any]:
    """Assembles the full render context for `schema`; deterministic for a given schema and preset."""
    context: Dict[str, Any] = mock_shop()
    context["settings"] = build_theme_settings(preset)
    context["section"] = {
        "id": schema.slug,
        "settings": settings_defaults(schema.settings),
        "blocks": build_blocks(schema),
    }
    context.update(build_mock_entities(schema.category_kind))
    context["linklists"] = mock_linklists()
    context["routes"] = mock_routes()
    context["content_for_header"] = "<!-- header content -->"
    context["content_for_layout"] = "<!-- main content -->"
    log.debug(
        "render_context_built",
        component=schema.slug,
        category=schema.category_kind.value,
        block_count=len(context["section"]["blocks"]),
        preset=preset.name if preset else None,
    )
    return context
