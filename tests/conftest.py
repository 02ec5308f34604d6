import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from themepreview.core.cache import MemoryCacheBackend, RenderCache
from themepreview.core.pipeline import RenderPipeline
from themepreview.core.source import InMemorySource
from themepreview.core.templating import TemplateEngine

HERO_SCHEMA = {
    "slug": "hero-banner",
    "name": "Hero Banner",
    "category": "hero",
    "settings": [
        {"type": "header", "content": "Content"},
        {"id": "heading", "type": "text", "label": "Heading", "default": "Welcome to our store"},
        {"id": "subheading", "type": "textarea", "label": "Subheading"},
        {"id": "button_label", "type": "text", "label": "Button label", "default": "Shop now"},
        {"id": "button_link", "type": "url", "label": "Button link"},
        {"id": "image", "type": "image_picker", "label": "Image"},
        {"id": "show_overlay", "type": "checkbox", "label": "Overlay", "default": True},
    ],
    "blocks": [],
    "presets": [{"name": "Hero Banner"}],
}

FEATURED_COLLECTION_SCHEMA = {
    "slug": "featured-collection",
    "name": "Featured Collection",
    "category": "featured-collection",
    "settings": [
        {"id": "title", "type": "text", "default": "Featured products"},
        {"id": "products_to_show", "type": "range", "default": 4},
    ],
}

PRODUCT_SCHEMA = {
    "slug": "main-product",
    "name": "Product Information",
    "category": "product",
    "settings": [{"id": "show_vendor", "type": "checkbox", "default": True}],
    "blocks": [
        {"type": "title", "name": "Title", "limit": 1},
        {"type": "price", "name": "Price", "limit": 1},
        {"type": "description", "name": "Description", "settings": [{"id": "collapsed", "type": "checkbox"}]},
        {"type": "buy_buttons", "name": "Buy buttons"},
    ],
}

HEADER_SCHEMA = {"slug": "site-header", "name": "Header", "category": "header", "settings": []}
FOOTER_SCHEMA = {"slug": "site-footer", "name": "Footer", "category": "footer", "settings": []}

SLATE_PRESET = {
    "name": "Slate",
    "description": "Dark neutral palette",
    "colors": {"primary": "#111827", "accent": "#e11d48"},
    "typography": {"heading_font": "Playfair Display"},
    "buttons": {"border_radius": 0},
}


class FakeClock:
    # manually advanced clock for expiry tests.
    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> RenderCache:
    return RenderCache(MemoryCacheBackend(), clock=clock)


@pytest.fixture
def source() -> InMemorySource:
    return InMemorySource(
        schemas={
            "hero-banner": HERO_SCHEMA,
            "featured-collection": FEATURED_COLLECTION_SCHEMA,
            "main-product": PRODUCT_SCHEMA,
            "site-header": HEADER_SCHEMA,
            "site-footer": FOOTER_SCHEMA,
        },
        presets={"slate": SLATE_PRESET},
    )


@pytest.fixture(scope="session")
def engine() -> TemplateEngine:
    return TemplateEngine()


@pytest.fixture
def pipeline(source: InMemorySource, memory_cache: RenderCache, engine: TemplateEngine) -> RenderPipeline:
    return RenderPipeline(source, memory_cache, engine=engine)


@pytest.fixture
def library_dir(tmp_path: Path) -> Path:
    """Creates an on-disk component library with schemas, a preset and one stored template."""
    root = tmp_path / "library"
    (root / "sections").mkdir(parents=True)
    (root / "presets").mkdir()
    (root / "templates").mkdir()

    (root / "sections" / "hero-banner.json").write_text(json.dumps(HERO_SCHEMA))
    (root / "sections" / "main-product.json").write_text(json.dumps(PRODUCT_SCHEMA))
    (root / "sections" / "broken.json").write_text("{ not json")
    (root / "presets" / "slate.json").write_text(json.dumps({"default": SLATE_PRESET}))
    (root / "templates" / "announcement-bar.liquid").write_text(
        "<div class=\"announcement\">{{ section.settings.text }}</div>\n"
        "{% schema %}\n"
        + json.dumps({
            "name": "Announcement bar",
            "category": "header",
            "settings": [{"id": "text", "type": "text", "default": "Free shipping over $50"}],
        })
        + "\n{% endschema %}\n"
    )
    return root


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path, monkeypatch):
    """Keeps a developer's ~/.config/themepreview/config.toml out of test runs."""
    monkeypatch.setattr("themepreview.config.loader.USER_CONFIG_FILE", tmp_path / "user-config" / "config.toml")
