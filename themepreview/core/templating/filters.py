# themepreview/core/templating/filters.py
"""
Storefront output filters registered on the template engine.

These are preview stand-ins: URLs point at placeholders, translations return
their fallback, and the color/font helpers only approximate the storefront
behavior. They never raise on odd input; a preview should still render.
"""
import json
import re
from datetime import date as date_type, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import quote

from liquid import Undefined
from markupsafe import escape

PLACEHOLDER_IMAGE_SIZE = 400
_ABSOLUTE_URL_PREFIX = "http"
_HANDLE_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


class Filter(Enum):
    # closed set of filters the engine knows how to register.
    IMAGE_URL = "image_url"
    IMAGE_TAG = "image_tag"
    ASSET_URL = "asset_url"
    ASSET_IMG_URL = "asset_img_url"
    STYLESHEET_TAG = "stylesheet_tag"
    SCRIPT_TAG = "script_tag"
    MONEY = "money"
    MONEY_WITH_CURRENCY = "money_with_currency"
    MONEY_WITHOUT_CURRENCY = "money_without_currency"
    MONEY_WITHOUT_TRAILING_ZEROS = "money_without_trailing_zeros"
    T = "t"
    HANDLE = "handle"
    HANDLEIZE = "handleize"
    LINK_TO = "link_to"
    LINK_TO_TAG = "link_to_tag"
    LINK_TO_VENDOR = "link_to_vendor"
    LINK_TO_TYPE = "link_to_type"
    WITHIN = "within"
    PRODUCT_URL = "product_url"
    COLLECTION_URL = "collection_url"
    FONT_FACE = "font_face"
    FONT_URL = "font_url"
    FONT_MODIFY = "font_modify"
    COLOR_TO_RGB = "color_to_rgb"
    COLOR_TO_HSL = "color_to_hsl"
    COLOR_MODIFY = "color_modify"
    COLOR_LIGHTEN = "color_lighten"
    COLOR_DARKEN = "color_darken"
    BRIGHTNESS_DIFFERENCE = "brightness_difference"
    COLOR_CONTRAST = "color_contrast"
    PLURALIZE = "pluralize"
    HIGHLIGHT = "highlight"
    JSON = "json"
    DATE = "date"
    WHERE = "where"
    MEDIA_TAG = "media_tag"
    METAFIELD_TAG = "metafield_tag"
    METAFIELD_TEXT = "metafield_text"
    EXTERNAL_VIDEO_TAG = "external_video_tag"
    EXTERNAL_VIDEO_URL = "external_video_url"


def placeholder_image(width: int = PLACEHOLDER_IMAGE_SIZE, height: Optional[int] = None, text: str = "Preview") -> str:
    """Deterministic placeholder image URL; height defaults to width."""
    height = height or width
    return f"https://placehold.co/{width}x{height}/e2e8f0/64748b?text={quote(text)}"


def _attr(value: Any) -> str:
    return str(escape(str(value)))


def _cents(value: Any) -> float:
    if isinstance(value, Undefined) or value is None:
        return 0.0
    try:
        return float(value) / 100
    except (TypeError, ValueError):
        return 0.0


# --- media ---

def image_url(src: Any, options: Optional[Mapping[str, Any]] = None, width: Optional[int] = None,
              height: Optional[int] = None) -> str:
    if isinstance(src, Mapping):
        src = src.get("src")
    if isinstance(src, str) and src.startswith(_ABSOLUTE_URL_PREFIX):
        return src
    options = options if isinstance(options, Mapping) else {}
    width = width or options.get("width") or PLACEHOLDER_IMAGE_SIZE
    height = height or options.get("height") or width
    return placeholder_image(int(width), int(height))


def image_tag(src: Any, alt: Optional[str] = None) -> str:
    url = src if isinstance(src, str) else placeholder_image()
    return f'<img src="{_attr(url)}" alt="{_attr(alt or "Image")}" loading="lazy" />'


def media_tag(media: Any) -> str:
    media = media if isinstance(media, Mapping) else {}
    preview = media.get("preview_image") or {}
    src = preview.get("src") if isinstance(preview, Mapping) else None
    return f'<img src="{_attr(src or placeholder_image())}" alt="{_attr(media.get("alt") or "Media")}" />'


def external_video_tag(video: Any) -> str:
    host = video.get("host") if isinstance(video, Mapping) else None
    return f'<div class="video-placeholder">Video: {escape(host or "external")}</div>'


def external_video_url(video: Any) -> str:
    if isinstance(video, Mapping) and video.get("host") == "youtube":
        return f"https://www.youtube.com/embed/{video.get('id')}"
    return "#"


# --- assets ---

def asset_url(filename: Any) -> str:
    return f"/assets/{filename}"


def asset_img_url(filename: Any, size: Optional[str] = None) -> str:
    return f"/assets/{filename}"


def stylesheet_tag(url: Any) -> str:
    return f'<link rel="stylesheet" href="{_attr(url)}" />'


def script_tag(url: Any) -> str:
    return f'<script src="{_attr(url)}"></script>'


# --- money ---

def money(cents: Any) -> str:
    return f"${_cents(cents):.2f}"


def money_with_currency(cents: Any) -> str:
    return f"${_cents(cents):.2f} USD"


def money_without_currency(cents: Any) -> str:
    return f"${_cents(cents):.2f}"


def money_without_trailing_zeros(cents: Any) -> str:
    dollars = _cents(cents)
    if dollars.is_integer():
        return f"${dollars:.0f}"
    return f"${dollars:.2f}"


# --- strings ---

def translate(key: Any, vars: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
    # no locale files in preview: the fallback text or the raw key.
    merged = dict(vars) if isinstance(vars, Mapping) else {}
    merged.update(kwargs)
    if merged.get("default"):
        return str(merged["default"])
    return str(key)


def handleize(value: Any) -> str:
    text = "" if value is None else str(value)
    return _HANDLE_SEPARATOR_RE.sub("-", text.lower()).strip("-")


def pluralize(count: Any, singular: Any = "", plural: Any = "s") -> Any:
    return singular if count == 1 else plural


def highlight(text: Any, term: Optional[str] = None) -> str:
    if not term:
        return text
    return re.sub(f"({re.escape(str(term))})", r"<mark>\1</mark>", str(text), flags=re.IGNORECASE)


def to_json(value: Any) -> str:
    return json.dumps(value, default=str)


def metafield_text(metafield: Any) -> str:
    if isinstance(metafield, Mapping):
        return metafield.get("value") or ""
    return ""


# --- links ---

def link_to(label: Any, url: Any = None, title: Optional[str] = None) -> str:
    title_attr = f' title="{_attr(title)}"' if title else ""
    return f'<a href="{_attr(url or "#")}"{title_attr}>{label}</a>'


def link_to_tag(label: Any, tag: Any) -> str:
    return f'<a href="/collections/all/{_attr(tag)}">{label}</a>'


def link_to_vendor(vendor: Any) -> str:
    return f'<a href="/collections/vendors?q={quote(str(vendor))}">{vendor}</a>'


def link_to_type(product_type: Any) -> str:
    return f'<a href="/collections/types?q={quote(str(product_type))}">{product_type}</a>'


def within(url: Any, collection: Any) -> Any:
    if isinstance(collection, Mapping) and collection.get("url"):
        return f"{collection['url']}{url}"
    return url


def product_url(product: Any) -> str:
    handle = product.get("handle") if isinstance(product, Mapping) else None
    return f"/products/{handle or 'product'}"


def collection_url(collection: Any) -> str:
    handle = collection.get("handle") if isinstance(collection, Mapping) else None
    return f"/collections/{handle or 'all'}"


# --- fonts and colors (approximate) ---

def font_face(font: Any) -> str:
    if not font:
        return ""
    family = font.get("family") if isinstance(font, Mapping) else None
    return f'@font-face {{ font-family: "{family or "sans-serif"}"; }}'


def font_url(font: Any) -> str:
    family = font.get("family") if isinstance(font, Mapping) else None
    return f"https://fonts.googleapis.com/css2?family={quote(family or 'Inter')}"


def font_modify(font: Any, prop: Any = None, value: Any = None) -> Any:
    return font


def color_passthrough(color: Any, *args: Any) -> Any:
    return color


def brightness_difference(color1: Any, color2: Any = None) -> int:
    return 100


def color_contrast(color1: Any, color2: Any = None) -> float:
    return 4.5


# --- data ---

def parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date_type):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value)
    if isinstance(value, str):
        text = value.strip()
        if text.lower() in ("now", "today"):
            return datetime.now()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def format_date(value: Any, fmt: Optional[str] = None) -> Any:
    parsed = parse_date(value)
    if parsed is None:
        return value
    if fmt:
        return parsed.strftime(fmt)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def where(array: Any, prop: str, value: Any = None) -> List[Any]:
    if not isinstance(array, (list, tuple)):
        return []
    matches = []
    for item in array:
        if not isinstance(item, Mapping) or prop not in item:
            continue
        candidate = item[prop]
        # strict equality: 1 and True or 1 and 1.0 are different values here
        if type(candidate) is type(value) and candidate == value:
            matches.append(item)
    return matches


DEFAULT_FILTERS: Dict[Filter, Callable[..., Any]] = {
    Filter.IMAGE_URL: image_url,
    Filter.IMAGE_TAG: image_tag,
    Filter.ASSET_URL: asset_url,
    Filter.ASSET_IMG_URL: asset_img_url,
    Filter.STYLESHEET_TAG: stylesheet_tag,
    Filter.SCRIPT_TAG: script_tag,
    Filter.MONEY: money,
    Filter.MONEY_WITH_CURRENCY: money_with_currency,
    Filter.MONEY_WITHOUT_CURRENCY: money_without_currency,
    Filter.MONEY_WITHOUT_TRAILING_ZEROS: money_without_trailing_zeros,
    Filter.T: translate,
    Filter.HANDLE: handleize,
    Filter.HANDLEIZE: handleize,
    Filter.LINK_TO: link_to,
    Filter.LINK_TO_TAG: link_to_tag,
    Filter.LINK_TO_VENDOR: link_to_vendor,
    Filter.LINK_TO_TYPE: link_to_type,
    Filter.WITHIN: within,
    Filter.PRODUCT_URL: product_url,
    Filter.COLLECTION_URL: collection_url,
    Filter.FONT_FACE: font_face,
    Filter.FONT_URL: font_url,
    Filter.FONT_MODIFY: font_modify,
    Filter.COLOR_TO_RGB: color_passthrough,
    Filter.COLOR_TO_HSL: color_passthrough,
    Filter.COLOR_MODIFY: color_passthrough,
    Filter.COLOR_LIGHTEN: color_passthrough,
    Filter.COLOR_DARKEN: color_passthrough,
    Filter.BRIGHTNESS_DIFFERENCE: brightness_difference,
    Filter.COLOR_CONTRAST: color_contrast,
    Filter.PLURALIZE: pluralize,
    Filter.HIGHLIGHT: highlight,
    Filter.JSON: to_json,
    Filter.DATE: format_date,
    Filter.WHERE: where,
    Filter.MEDIA_TAG: media_tag,
    Filter.METAFIELD_TAG: metafield_text,
    Filter.METAFIELD_TEXT: metafield_text,
    Filter.EXTERNAL_VIDEO_TAG: external_video_tag,
    Filter.EXTERNAL_VIDEO_URL: external_video_url,
}
