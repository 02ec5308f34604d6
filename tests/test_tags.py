import pytest

from themepreview.core.templating import TemplateEngine
from themepreview.core.templating.tags import Tag, first_argument
from themepreview.exceptions import TemplateRenderError


def test_schema_block_produces_no_output(engine):
    source = 'before{% schema %}{"name": "Hero", "settings": []}{% endschema %}after'
    assert engine.render(source, {}) == "beforeafter"


def test_schema_body_is_not_parsed_as_template(engine):
    source = (
        "{%- schema -%}"
        '{"name": "Promo", "settings": [{"id": "note", "default": "use {{ code }} or {% if %} here"}]}'
        "{%- endschema -%}ok"
    )
    assert engine.render(source, {"code": "SAVE10"}) == "ok"


def test_first_argument_strips_quotes_and_trailing_arguments():
    assert first_argument("'product-card', product: product") == "product-card"
    assert first_argument("\"header-group\"") == "header-group"
    assert first_argument("") == ""


def test_style_and_javascript_wrap_their_bodies(engine):
    assert engine.render("{% style %}.a { color: {{ c }}; }{% endstyle %}", {"c": "red"}) == "<style>.a { color: red; }</style>"
    assert engine.render("{% javascript %}init();{% endjavascript %}", {}) == "<script>init();</script>"


@pytest.mark.parametrize("source, expected", [
    ("{% render 'product-card', product: product %}", "<!-- snippet: product-card -->"),
    ('{% section "announcement-bar" %}', "<!-- section: announcement-bar -->"),
    ("{% sections 'header-group' %}", "<!-- sections group: header-group -->"),
])
def test_file_reference_tags_leave_placeholders(engine, source, expected):
    assert engine.render(source, {}) == expected


def test_form_wraps_body_with_form_type(engine):
    html = engine.render("{% form 'product', product %}<button>Buy</button>{% endform %}", {})
    assert html == '<form class="shopify-form" data-form-type="product"><button>Buy</button></form>'


def test_paginate_renders_body_unchanged(engine):
    source = "{% paginate items by 2 %}{% for i in items %}{{ i }}{% endfor %}{% endpaginate %}"
    assert engine.render(source, {"items": [1, 2, 3]}) == "123"


def test_layout_is_ignored(engine):
    assert engine.render("{% layout none %}body", {}) == "body"


def test_disabled_tag_is_a_render_error():
    engine = TemplateEngine(tags=[Tag.STYLE])
    with pytest.raises(TemplateRenderError):
        engine.render("{% schema %}{}{% endschema %}", {})


def test_unterminated_block_tag_is_a_render_error(engine):
    with pytest.raises(TemplateRenderError):
        engine.render("{% style %}.a {}", {})
