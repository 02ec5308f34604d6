"""themepreview: render storefront theme sections against schema-generated mock data."""

__version__ = "0.3.0"
