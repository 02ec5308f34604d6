# themepreview/core/templating/default_templates.py
"""
Fallback section templates and preview stylesheets, keyed by component category.

Used when the library has no stored template for a component. The templates
only read `section.settings` / `section.blocks` and the mock entities the
context builder provides for the same category.
"""
from typing import Dict

from themepreview.core.models import Category, ComponentSchema

HERO_TEMPLATE = r"""
    <div class="hero">
      {% if section.settings.heading %}
        <h1 class="hero__heading">{{ section.settings.heading }}</h1>
      {% endif %}
      {% if section.settings.subheading %}
        <p class="hero__subheading">{{ section.settings.subheading }}</p>
      {% endif %}
      {% if section.settings.button_label %}
        <a href="{{ section.settings.button_link | default: '#' }}" class="hero__button button">
          {{ section.settings.button_label }}
        </a>
      {% endif %}

      {% for block in section.blocks %}
        <div class="hero__block hero__block--{{ block.type }}" {{ block.shopify_attributes }}>
          {% case block.type %}
            {% when 'heading' %}
              <h2>{{ block.settings.heading | default: 'Heading' }}</h2>
            {% when 'text' %}
              <p>{{ block.settings.text | default: 'Text content' }}</p>
            {% when 'button' %}
              <a href="{{ block.settings.link | default: '#' }}" class="button">
                {{ block.settings.label | default: 'Button' }}
              </a>
            {% when 'image' %}
              {% if block.settings.image %}
                {{ block.settings.image | image_url: width: 800 | image_tag: block.settings.image.alt }}
              {% else %}
                <div class="placeholder-image">Image placeholder</div>
              {% endif %}
          {% endcase %}
        </div>
      {% endfor %}
    </div>
"""

COLLECTION_TEMPLATE = r"""
    <div class="collection-section">
      {% if section.settings.heading %}
        <h2 class="collection-section__heading">{{ section.settings.heading }}</h2>
      {% endif %}

      {% if collection %}
        <div class="collection-grid">
          {% for product in collection.products limit: 8 %}
            <div class="product-card">
              <a href="{{ product.url }}">
                {% if product.featured_image %}
                  {{ product.featured_image | image_url: width: 400 | image_tag: product.title }}
                {% else %}
                  <div class="product-card__placeholder">No image</div>
                {% endif %}
                <h3 class="product-card__title">{{ product.title }}</h3>
                <p class="product-card__price">{{ product.price | money }}</p>
              </a>
            </div>
          {% endfor %}
        </div>
      {% else %}
        <p class="collection-section__empty">No collection selected</p>
      {% endif %}
    </div>
"""

PRODUCT_TEMPLATE = r"""
    <div class="product-section">
      {% if product %}
        <div class="product-section__media">
          {% if product.featured_image %}
            {{ product.featured_image | image_url: width: 600 | image_tag: product.title }}
          {% endif %}
        </div>
        <div class="product-section__info">
          <h1 class="product-section__title">{{ product.title }}</h1>
          <p class="product-section__price">{{ product.price | money }}</p>
          <div class="product-section__description">{{ product.description }}</div>
          <button type="button" class="button product-section__button">Add to Cart</button>
        </div>
      {% else %}
        <p>No product selected</p>
      {% endif %}
    </div>
"""

HEADER_TEMPLATE = r"""
    <header class="header">
      <div class="header__logo">
        {% if section.settings.logo %}
          {{ section.settings.logo | image_url: width: 200 | image_tag: shop.name }}
        {% else %}
          <span class="header__logo-text">{{ shop.name }}</span>
        {% endif %}
      </div>
      <nav class="header__nav">
        {% if linklists['main-menu'] %}
          {% for link in linklists['main-menu'].links %}
            <a href="{{ link.url }}" class="header__nav-link{% if link.active %} header__nav-link--active{% endif %}">
              {{ link.title }}
            </a>
          {% endfor %}
        {% endif %}
      </nav>
      <div class="header__actions">
        <a href="{{ routes.search_url }}" class="header__icon">Search</a>
        <a href="{{ routes.cart_url }}" class="header__icon">Cart ({{ cart.item_count }})</a>
      </div>
    </header>
"""

FOOTER_TEMPLATE = r"""
    <footer class="footer">
      <div class="footer__content">
        {% for block in section.blocks %}
          <div class="footer__block footer__block--{{ block.type }}" {{ block.shopify_attributes }}>
            {% case block.type %}
              {% when 'menu' %}
                <h4>{{ block.settings.heading | default: 'Menu' }}</h4>
                {% if linklists['footer-menu'] %}
                  <ul class="footer__menu">
                    {% for link in linklists['footer-menu'].links %}
                      <li><a href="{{ link.url }}">{{ link.title }}</a></li>
                    {% endfor %}
                  </ul>
                {% endif %}
              {% when 'text' %}
                <h4>{{ block.settings.heading | default: 'About' }}</h4>
                <p>{{ block.settings.text | default: 'About text' }}</p>
            {% endcase %}
          </div>
        {% endfor %}
      </div>
      <div class="footer__copyright">
        <p>&copy; {{ 'now' | date: '%Y' }} {{ shop.name }}. All rights reserved.</p>
      </div>
    </footer>
"""

GENERIC_TEMPLATE = r"""
    <div class="generic-section">
      {% if section.settings.heading %}
        <h2 class="generic-section__heading">{{ section.settings.heading }}</h2>
      {% endif %}

      {% if section.settings.text or section.settings.content %}
        <div class="generic-section__content">
          {{ section.settings.text | default: section.settings.content }}
        </div>
      {% endif %}

      {% for block in section.blocks %}
        <div class="generic-section__block generic-section__block--{{ block.type }}" {{ block.shopify_attributes }}>
          {% case block.type %}
            {% when 'heading' %}
              <h3>{{ block.settings.heading | default: block.settings.text | default: 'Heading' }}</h3>
            {% when 'text' %}
              <p>{{ block.settings.text | default: 'Text content' }}</p>
            {% when 'button' %}
              <a href="{{ block.settings.link | default: '#' }}" class="button">
                {{ block.settings.label | default: block.settings.text | default: 'Button' }}
              </a>
            {% when 'image' %}
              {% if block.settings.image %}
                {{ block.settings.image | image_url: width: 600 | image_tag }}
              {% else %}
                <div class="placeholder-image">Image</div>
              {% endif %}
            {% else %}
              <div class="block-placeholder">{{ block.type }}</div>
          {% endcase %}
        </div>
      {% endfor %}
    </div>
"""

CATEGORY_TEMPLATES: Dict[Category, str] = {
    Category.HERO: HERO_TEMPLATE,
    Category.COLLECTION: COLLECTION_TEMPLATE,
    Category.FEATURED_COLLECTION: COLLECTION_TEMPLATE,
    Category.PRODUCT: PRODUCT_TEMPLATE,
    Category.HEADER: HEADER_TEMPLATE,
    Category.FOOTER: FOOTER_TEMPLATE,
}


def generate_template(schema: ComponentSchema) -> str:
    """Wraps the category body in the section/container markup every preview shares."""
    body = CATEGORY_TEMPLATES.get(schema.category_kind, GENERIC_TEMPLATE)
    return "\n".join([
        f'<section class="section section--{schema.slug}" data-section-id="{{{{ section.id }}}}">',
        '  <div class="section__container container">',
        body,
        "  </div>",
        "</section>",
    ])


BASE_CSS = """
    .section {
      padding: 2rem 0;
      font-family: system-ui, -apple-system, sans-serif;
    }

    .container {
      max-width: 1200px;
      margin: 0 auto;
      padding: 0 1rem;
    }

    .button {
      display: inline-block;
      padding: 0.75rem 1.5rem;
      background: #2563eb;
      color: white;
      text-decoration: none;
      border-radius: 0.375rem;
      font-weight: 500;
      transition: background 0.2s;
    }

    .button:hover {
      background: #1d4ed8;
    }

    .placeholder-image {
      background: #e2e8f0;
      padding: 2rem;
      text-align: center;
      color: #94a3b8;
      border-radius: 0.5rem;
    }

    .block-placeholder {
      background: #f1f5f9;
      padding: 1rem;
      border-radius: 0.25rem;
      color: #94a3b8;
      font-style: italic;
    }

    img {
      max-width: 100%;
      height: auto;
    }
"""

HERO_CSS = """
    .hero {
      text-align: center;
      padding: 4rem 2rem;
      background: linear-gradient(135deg, #f0f4f8 0%, #e2e8f0 100%);
      border-radius: 0.5rem;
    }

    .hero__heading {
      font-size: 2.5rem;
      font-weight: 700;
      margin-bottom: 1rem;
      color: #1e293b;
    }

    .hero__subheading {
      font-size: 1.25rem;
      color: #64748b;
      margin-bottom: 2rem;
    }
"""

COLLECTION_CSS = """
    .collection-grid {
      display: grid;
      grid-template-columns: repeat(auto-fill, minmax(200px, 1fr));
      gap: 1.5rem;
    }

    .product-card {
      border: 1px solid #e2e8f0;
      border-radius: 0.5rem;
      overflow: hidden;
      transition: box-shadow 0.2s;
    }

    .product-card:hover {
      box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1);
    }

    .product-card a {
      text-decoration: none;
      color: inherit;
    }

    .product-card img {
      width: 100%;
      height: auto;
      display: block;
    }

    .product-card__title {
      font-size: 1rem;
      padding: 0.75rem;
      margin: 0;
    }

    .product-card__price {
      padding: 0 0.75rem 0.75rem;
      color: #64748b;
      margin: 0;
    }
"""

PRODUCT_CSS = """
    .product-section {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 2rem;
    }

    .product-section__media img {
      width: 100%;
      height: auto;
      border-radius: 0.5rem;
    }

    .product-section__title {
      font-size: 2rem;
      margin-bottom: 0.5rem;
    }

    .product-section__price {
      font-size: 1.5rem;
      color: #2563eb;
      margin-bottom: 1rem;
    }
"""

HEADER_CSS = """
    .header {
      display: flex;
      align-items: center;
      justify-content: space-between;
      padding: 1rem 0;
      border-bottom: 1px solid #e2e8f0;
    }

    .header__logo-text {
      font-size: 1.5rem;
      font-weight: 700;
    }

    .header__nav {
      display: flex;
      gap: 1.5rem;
    }

    .header__nav-link {
      text-decoration: none;
      color: #64748b;
    }

    .header__nav-link:hover,
    .header__nav-link--active {
      color: #1e293b;
    }

    .header__actions {
      display: flex;
      gap: 1rem;
    }

    .header__icon {
      text-decoration: none;
      color: #64748b;
    }
"""

FOOTER_CSS = """
    .footer {
      background: #f8fafc;
      padding: 3rem 0 1.5rem;
      margin-top: 2rem;
    }

    .footer__content {
      display: grid;
      grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
      gap: 2rem;
      margin-bottom: 2rem;
    }

    .footer__menu {
      list-style: none;
      padding: 0;
      margin: 0;
    }

    .footer__menu a {
      color: #64748b;
      text-decoration: none;
    }

    .footer__copyright {
      text-align: center;
      color: #94a3b8;
      font-size: 0.875rem;
      border-top: 1px solid #e2e8f0;
      padding-top: 1.5rem;
    }
"""

GENERIC_CSS = """
    .generic-section__heading {
      font-size: 1.75rem;
      margin-bottom: 1rem;
    }

    .generic-section__content {
      color: #64748b;
      margin-bottom: 1.5rem;
    }

    .generic-section__block {
      margin-bottom: 1rem;
    }
"""

CATEGORY_CSS: Dict[Category, str] = {
    Category.HERO: HERO_CSS,
    Category.SLIDESHOW: HERO_CSS,
    Category.IMAGE_BANNER: HERO_CSS,
    Category.COLLECTION: COLLECTION_CSS,
    Category.MAIN_COLLECTION: COLLECTION_CSS,
    Category.FEATURED_COLLECTION: COLLECTION_CSS,
    Category.COLLECTION_LIST: COLLECTION_CSS,
    Category.PRODUCT: PRODUCT_CSS,
    Category.MAIN_PRODUCT: PRODUCT_CSS,
    Category.HEADER: HEADER_CSS,
    Category.FOOTER: FOOTER_CSS,
}


def preview_css(schema: ComponentSchema) -> str:
    """Fixed preview stylesheet for the schema's category; not user-customizable."""
    category_css = CATEGORY_CSS.get(schema.category_kind, GENERIC_CSS)
    return f"\n    /* Preview styles for {schema.name} */{BASE_CSS}{category_css}"
