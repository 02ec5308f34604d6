import pytest

from themepreview.core.source import InMemorySource, LibrarySource, extract_schema_block
from themepreview.exceptions import SourceError


def test_library_reads_json_schema(library_dir):
    schema = LibrarySource(library_dir).get_component_schema("hero-banner")
    assert schema.name == "Hero Banner"
    assert schema.category == "hero"


def test_library_missing_and_invalid_schemas_are_absent(library_dir):
    library = LibrarySource(library_dir)
    assert library.get_component_schema("does-not-exist") is None
    assert library.get_component_schema("broken") is None


def test_library_falls_back_to_embedded_schema_block(library_dir):
    library = LibrarySource(library_dir)
    schema = library.get_component_schema("announcement-bar")
    assert schema.slug == "announcement-bar"
    assert schema.category == "header"
    assert schema.settings[0].default == "Free shipping over $50"
    assert "{% schema %}" in library.get_stored_template("announcement-bar")


def test_library_unwraps_default_preset(library_dir):
    preset = LibrarySource(library_dir).get_preset("slate")
    assert preset.name == "Slate"
    assert preset.colors.primary == "#111827"
    assert LibrarySource(library_dir).get_preset("missing") is None


def test_library_rejects_path_like_slugs(library_dir):
    library = LibrarySource(library_dir)
    assert library.get_component_schema("../sections/hero-banner") is None
    assert library.get_stored_template("..") is None


def test_library_root_must_exist(tmp_path):
    with pytest.raises(SourceError):
        LibrarySource(tmp_path / "nope")


def test_extract_schema_block_handles_whitespace_control():
    assert extract_schema_block('x{%- schema -%}{"name": "A"}{%- endschema -%}') == {"name": "A"}
    assert extract_schema_block("no schema here") is None
    assert extract_schema_block("{% schema %}[1, 2]{% endschema %}") is None


def test_in_memory_source_accepts_documents():
    source = InMemorySource(schemas={"hero": {"category": "hero"}}, templates={"hero": "<h1></h1>"})
    assert source.get_component_schema("hero").slug == "hero"
    assert source.get_stored_template("hero") == "<h1></h1>"
    assert source.get_preset("anything") is None
