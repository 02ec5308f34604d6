from themepreview.core.models import ComponentSchema, StylePreset
from themepreview.core.templating import build_render_context
from themepreview.core.templating.context_builder import (
    BASE_THEME_SETTINGS,
    MAX_SAMPLE_BLOCKS,
    build_blocks,
    build_theme_settings,
    settings_defaults,
)

from conftest import FEATURED_COLLECTION_SCHEMA, HEADER_SCHEMA, HERO_SCHEMA, PRODUCT_SCHEMA, SLATE_PRESET


def test_context_is_deterministic():
    schema = ComponentSchema.from_dict(PRODUCT_SCHEMA)
    preset = StylePreset.from_dict(SLATE_PRESET)
    assert build_render_context(schema, preset) == build_render_context(schema, preset)


def test_setting_defaults_use_declared_default_then_type_default():
    schema = ComponentSchema.from_dict(HERO_SCHEMA)
    defaults = settings_defaults(schema.settings)
    assert defaults["heading"] == "Welcome to our store"
    assert defaults["subheading"] == "Sample paragraph text with more details about this section."
    assert defaults["button_link"] == "#"
    assert defaults["image"] is None
    assert defaults["show_overlay"] is True


def test_structural_settings_are_skipped():
    schema = ComponentSchema.from_dict(HERO_SCHEMA)
    assert "" not in settings_defaults(schema.settings)
    assert len(settings_defaults(schema.settings)) == 6


def test_explicit_null_default_is_kept():
    schema = ComponentSchema.from_dict({
        "slug": "s", "category": "hero",
        "settings": [{"id": "heading", "type": "text", "default": None}],
    })
    assert settings_defaults(schema.settings) == {"heading": None}


def test_blocks_without_preset_blocks_take_first_three_types():
    schema = ComponentSchema.from_dict(PRODUCT_SCHEMA)
    blocks = build_blocks(schema)
    assert len(blocks) == MAX_SAMPLE_BLOCKS
    assert [b["type"] for b in blocks] == ["title", "price", "description"]
    assert blocks[2]["settings"] == {"collapsed": False}
    assert blocks[0]["id"] == "block-0"
    assert "data-shopify-editor-block" in blocks[0]["shopify_attributes"]


def test_preset_blocks_are_filled_with_missing_defaults():
    schema = ComponentSchema.from_dict({
        "slug": "slideshow",
        "category": "slideshow",
        "blocks": [{"type": "slide", "name": "Slide", "settings": [
            {"id": "heading", "type": "text", "default": "Slide heading"},
            {"id": "button_label", "type": "text"},
        ]}],
        "presets": [{"name": "Slideshow", "blocks": [{"type": "slide", "settings": {"heading": "First"}}, {"type": "slide"}]}],
    })
    blocks = build_blocks(schema)
    assert [b["settings"] for b in blocks] == [
        {"heading": "First", "button_label": "Sample text"},
        {"heading": "Slide heading", "button_label": "Sample text"},
    ]


def test_theme_settings_overlay_preset_values():
    theme = build_theme_settings(StylePreset.from_dict(SLATE_PRESET))
    assert theme["color_primary"] == "#111827"
    assert theme["color_accent"] == "#e11d48"
    assert theme["color_secondary"] == BASE_THEME_SETTINGS["color_secondary"]
    assert theme["typography_heading_font"] == "Playfair Display"
    assert theme["button_border_radius"] == 0
    assert build_theme_settings(None) == BASE_THEME_SETTINGS


def test_mock_entities_follow_category():
    product_ctx = build_render_context(ComponentSchema.from_dict(PRODUCT_SCHEMA))
    assert "product" in product_ctx and "collection" not in product_ctx
    assert len(product_ctx["product"]["variants"]) == 4

    featured_ctx = build_render_context(ComponentSchema.from_dict(FEATURED_COLLECTION_SCHEMA))
    assert len(featured_ctx["collections"]) == 4
    assert featured_ctx["collection"] == featured_ctx["collections"][0]
    assert len(featured_ctx["collection"]["products"]) == 8

    hero_ctx = build_render_context(ComponentSchema.from_dict(HERO_SCHEMA))
    assert "product" not in hero_ctx and "collection" not in hero_ctx

    header_ctx = build_render_context(ComponentSchema.from_dict(HEADER_SCHEMA))
    assert "product" in header_ctx and "collection" in header_ctx


def test_context_carries_shared_storefront_objects():
    ctx = build_render_context(ComponentSchema.from_dict(HERO_SCHEMA))
    assert ctx["shop"]["name"] == "Demo Store"
    assert ctx["section"]["id"] == "hero-banner"
    assert ctx["routes"]["cart_url"] == "/cart"
    assert [link["title"] for link in ctx["linklists"]["main-menu"]["links"]] == ["Home", "Catalog", "About", "Contact"]


def test_building_context_does_not_mutate_schema_defaults():
    schema = ComponentSchema.from_dict({
        "slug": "s", "category": "hero",
        "settings": [{"id": "items", "type": "product_list", "default": ["a"]}],
    })
    ctx = build_render_context(schema)
    ctx["section"]["settings"]["items"].append("b")
    assert schema.settings[0].default == ["a"]
