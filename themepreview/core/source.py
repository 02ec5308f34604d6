# themepreview/core/source.py
"""
Read-only access to component schemas, style presets and stored templates.

A component library on disk looks like:

    <root>/sections/<slug>.json     component schema documents
    <root>/presets/<slug>.json      style presets
    <root>/templates/<slug>.liquid  stored templates

A stored template may carry its own schema in a `{% schema %}` block; that
schema is used when no JSON document exists for the slug.
"""
import json
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, Union

import structlog

from themepreview.core.models import ComponentSchema, StylePreset
from themepreview.exceptions import SourceError

log = structlog.get_logger(__name__)

SECTIONS_DIR = "sections"
PRESETS_DIR = "presets"
TEMPLATES_DIR = "templates"
TEMPLATE_SUFFIX = ".liquid"

SCHEMA_BLOCK_RE = re.compile(r"{%-?\s*schema\s*-?%}(.*?){%-?\s*endschema\s*-?%}", re.DOTALL)
SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class ComponentSource(Protocol):
    def get_component_schema(self, slug: str) -> Optional[ComponentSchema]: ...

    def get_preset(self, slug: str) -> Optional[StylePreset]: ...

    def get_stored_template(self, slug: str) -> Optional[str]: ...


def extract_schema_block(template_source: str) -> Optional[Dict[str, Any]]:
    """Returns the JSON document inside a template's schema block, or None."""
    match = SCHEMA_BLOCK_RE.search(template_source)
    if not match:
        return None
    try:
        data = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        log.warning("invalid_schema_block_json", error=str(e))
        return None
    return data if isinstance(data, dict) else None


def _schema_from_document(data: Any, slug: str) -> Optional[ComponentSchema]:
    if not isinstance(data, Mapping):
        log.warning("component_schema_not_an_object", slug=slug)
        return None
    try:
        return ComponentSchema.from_dict(data, slug=slug)
    except (TypeError, ValueError) as e:
        log.warning("component_schema_invalid", slug=slug, error=str(e))
        return None


class LibrarySource:
    """Component library rooted at a directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        if not self.root.is_dir():
            raise SourceError(f"Component library directory not found: {self.root}")

    def _path_for(self, subdir: str, slug: str, suffix: str) -> Optional[Path]:
        # slugs are file stems; anything that could escape the library is rejected
        if not SLUG_RE.match(slug) or ".." in slug:
            log.warning("rejected_invalid_slug", slug=slug)
            return None
        return self.root / subdir / f"{slug}{suffix}"

    def _read_text(self, path: Path) -> Optional[str]:
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"Could not read {path}: {e}") from e

    def _read_json(self, path: Path) -> Optional[Any]:
        text = self._read_text(path)
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            log.warning("invalid_json_document", path=str(path), error=str(e))
            return None

    def get_component_schema(self, slug: str) -> Optional[ComponentSchema]:
        path = self._path_for(SECTIONS_DIR, slug, ".json")
        if path is None:
            return None
        data = self._read_json(path)
        if data is not None:
            return _schema_from_document(data, slug)

        template = self.get_stored_template(slug)
        if template is None:
            return None
        embedded = extract_schema_block(template)
        if embedded is None:
            return None
        log.debug("using_embedded_schema_block", slug=slug)
        return _schema_from_document(embedded, slug)

    def get_preset(self, slug: str) -> Optional[StylePreset]:
        path = self._path_for(PRESETS_DIR, slug, ".json")
        if path is None:
            return None
        data = self._read_json(path)
        if not isinstance(data, Mapping):
            return None
        preset = StylePreset.from_dict(data)
        return preset if preset.name else StylePreset(
            name=slug,
            description=preset.description,
            colors=preset.colors,
            typography=preset.typography,
            buttons=preset.buttons,
        )

    def get_stored_template(self, slug: str) -> Optional[str]:
        path = self._path_for(TEMPLATES_DIR, slug, TEMPLATE_SUFFIX)
        if path is None:
            return None
        return self._read_text(path)


class InMemorySource:
    # dictionary-backed source for embedding and tests.
    def __init__(
        self,
        schemas: Optional[Mapping[str, Union[ComponentSchema, Mapping[str, Any]]]] = None,
        presets: Optional[Mapping[str, Union[StylePreset, Mapping[str, Any]]]] = None,
        templates: Optional[Mapping[str, str]] = None,
    ):
        self.schemas: Dict[str, ComponentSchema] = {}
        for slug, schema in (schemas or {}).items():
            self.schemas[slug] = schema if isinstance(schema, ComponentSchema) else ComponentSchema.from_dict(schema, slug=slug)
        self.presets: Dict[str, StylePreset] = {}
        for slug, preset in (presets or {}).items():
            self.presets[slug] = preset if isinstance(preset, StylePreset) else StylePreset.from_dict(preset)
        self.templates: Dict[str, str] = dict(templates or {})

    def get_component_schema(self, slug: str) -> Optional[ComponentSchema]:
        return self.schemas.get(slug)

    def get_preset(self, slug: str) -> Optional[StylePreset]:
        return self.presets.get(slug)

    def get_stored_template(self, slug: str) -> Optional[str]:
        return self.templates.get(slug)
