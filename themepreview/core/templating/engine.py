# themepreview/core/templating/engine.py
"""
Contains the TemplateEngine class: a python-liquid environment with the
storefront tags and filters registered on it.

The engine is an explicit value. Build one per process and hand it to the
render pipeline; the tag and filter tables are fixed at construction.
"""
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import structlog
from liquid import Environment, Mode, Undefined

from themepreview.exceptions import EngineConfigError, TemplateRenderError

from .filters import DEFAULT_FILTERS, Filter
from .tags import TAG_CLASSES, Tag

log = structlog.get_logger(__name__)

ALL_TAGS = tuple(Tag)


def _coerce_tag(tag: Union[Tag, str]) -> Tag:
    if isinstance(tag, Tag):
        return tag
    try:
        return Tag(tag)
    except ValueError as e:
        raise EngineConfigError(f"Unsupported template tag '{tag}'") from e


def _coerce_filter(name: Union[Filter, str]) -> Filter:
    if isinstance(name, Filter):
        return name
    try:
        return Filter(name)
    except ValueError as e:
        raise EngineConfigError(f"Unsupported template filter '{name}'") from e


class TemplateEngine:
    """Liquid environment extended with the storefront tag and filter tables."""

    def __init__(
        self,
        tags: Iterable[Union[Tag, str]] = ALL_TAGS,
        filters: Optional[Mapping[Union[Filter, str], Callable[..., Any]]] = None,
    ):
        self.tags = tuple(dict.fromkeys(_coerce_tag(t) for t in tags))
        filter_table = DEFAULT_FILTERS if filters is None else filters
        self.filters: Dict[Filter, Callable[..., Any]] = {
            _coerce_filter(name): fn for name, fn in filter_table.items()
        }
        missing = [f.value for f in Filter if f not in self.filters]
        if filters is None and missing:
            raise EngineConfigError(f"Filters without an implementation: {', '.join(missing)}")
        not_callable = [f.value for f, fn in self.filters.items() if not callable(fn)]
        if not_callable:
            raise EngineConfigError(f"Filter implementations must be callable: {', '.join(not_callable)}")

        # missing variables render empty; unknown tags and filters are errors
        self.environment = Environment(
            tolerance=Mode.STRICT,
            undefined=Undefined,
            strict_filters=True,
            autoescape=False,
        )
        for tag in self.tags:
            self.environment.add_tag(TAG_CLASSES[tag])
        for name, fn in self.filters.items():
            self.environment.add_filter(name.value, fn)
        log.debug("template_engine_initialized", tags=[t.value for t in self.tags], filter_count=len(self.filters))

    def render(self, source: str, context: Mapping[str, Any], name: str = "<template>") -> str:
        """Parses and renders `source` against `context`; every failure surfaces as TemplateRenderError."""
        log.debug("rendering_template", template=name, context_keys=list(context.keys()))
        try:
            template = self.environment.from_string(source)
            return template.render(**context)
        except Exception as e:
            log.warning("template_rendering_error_occurred", template=name, error_type=type(e).__name__, error=str(e))
            raise TemplateRenderError(f"{type(e).__name__}: {e}") from e
