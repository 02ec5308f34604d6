# themepreview/core/pipeline.py
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import structlog
from markupsafe import escape

from themepreview.config.settings import PreviewConfig
from themepreview.core.cache import RenderCache, cache_key
from themepreview.core.models import ComponentSchema, RenderResult, StylePreset
from themepreview.core.source import ComponentSource
from themepreview.core.templating import TemplateEngine, build_render_context, generate_template, preview_css
from themepreview.exceptions import BatchSizeExceededError, SchemaNotFoundError, SourceError, TemplateRenderError

log = structlog.get_logger(__name__)

NOT_RENDERED_ERROR = "Section not rendered"


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))


def _error_result(html: str, message: str, started: float) -> RenderResult:
    return RenderResult(html=html, css="", errors=[message], render_time_ms=_elapsed_ms(started), cached=False)


class RenderPipeline:
    # renders one component preview at a time, consulting the cache first.
    def __init__(
        self,
        source: ComponentSource,
        cache: Optional[RenderCache] = None,
        engine: Optional[TemplateEngine] = None,
        config: Optional[PreviewConfig] = None,
    ):
        self.source = source
        self.cache = cache if cache is not None else RenderCache()
        self.engine = engine if engine is not None else TemplateEngine()
        self.config = config if config is not None else PreviewConfig()
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")

    def _load_preset(self, preset_slug: Optional[str]) -> Optional[StylePreset]:
        if not preset_slug:
            return None
        try:
            preset = self.source.get_preset(preset_slug)
        except SourceError as e:
            self.log.warning("style_preset_load_failed", preset=preset_slug, error=str(e))
            return None
        if preset is None:
            self.log.info("style_preset_not_found", preset=preset_slug)
        return preset

    def _template_for(self, schema: ComponentSchema) -> str:
        try:
            stored = self.source.get_stored_template(schema.slug)
        except SourceError as e:
            self.log.warning("stored_template_load_failed", component=schema.slug, error=str(e))
            stored = None
        if stored is not None:
            self.log.debug("using_stored_template", component=schema.slug)
            return stored
        self.log.debug("generating_template_from_category", component=schema.slug, category=schema.category)
        return generate_template(schema)

    def render(
        self,
        component_slug: str,
        preset_slug: Optional[str] = None,
        setting_overrides: Optional[Mapping[str, Any]] = None,
        skip_cache: bool = False,
    ) -> RenderResult:
        """
        Renders a single component preview.

        A live cache entry is returned as-is unless `skip_cache` is set. Every
        failure comes back as an uncached error result; this method does not raise.
        """
        started = time.perf_counter()
        try:
            return self._render(component_slug, preset_slug, setting_overrides, skip_cache, started)
        except Exception as e:
            self.log.error("unexpected_render_failure", component=component_slug, error=str(e), exc_info=True)
            return _error_result(f'<div class="error">Render error: {escape(str(e))}</div>', str(e), started)

    def _render(
        self,
        component_slug: str,
        preset_slug: Optional[str],
        setting_overrides: Optional[Mapping[str, Any]],
        skip_cache: bool,
        started: float,
    ) -> RenderResult:
        overrides = dict(setting_overrides) if setting_overrides else None
        key = cache_key(component_slug, preset_slug, overrides)

        if not skip_cache:
            entry = self.cache.get(key)
            if entry is not None:
                self.log.info("render_served_from_cache", component=component_slug, key=key)
                return RenderResult(
                    html=entry.html,
                    css=entry.css,
                    errors=[],
                    render_time_ms=entry.render_time_ms,
                    cached=True,
                )

        not_found_html = f'<div class="error">Section not found: {escape(component_slug)}</div>'
        try:
            schema = self.source.get_component_schema(component_slug)
        except SourceError as e:
            self.log.error("component_schema_load_failed", component=component_slug, error=str(e))
            return _error_result(not_found_html, str(e), started)
        if schema is None:
            self.log.warning("component_not_found", component=component_slug)
            return _error_result(not_found_html, str(SchemaNotFoundError(component_slug)), started)

        preset = self._load_preset(preset_slug)
        template_source = self._template_for(schema)

        context = build_render_context(schema, preset)
        if overrides:
            context["section"]["settings"].update(overrides)

        try:
            html = self.engine.render(template_source, context, name=component_slug)
        except TemplateRenderError as e:
            return _error_result(f'<div class="error">Render error: {escape(str(e))}</div>', str(e), started)

        css = preview_css(schema)
        render_time_ms = _elapsed_ms(started)

        if not skip_cache:
            self.cache.put(
                key,
                component_slug,
                preset_slug,
                html=html,
                css=css,
                render_time_ms=render_time_ms,
                ttl_minutes=self.config.cache_ttl_minutes,
            )

        self.log.info("component_rendered", component=component_slug, preset=preset_slug, render_time_ms=render_time_ms)
        return RenderResult(html=html, css=css, errors=[], render_time_ms=render_time_ms, cached=False)

    def _render_isolated(self, slug: str, preset_slug: Optional[str]) -> RenderResult:
        started = time.perf_counter()
        try:
            return self.render(slug, preset_slug)
        except Exception as e:
            self.log.error("unexpected_render_failure", component=slug, error=str(e), exc_info=True)
            return _error_result(f'<div class="error">Render error: {escape(str(e))}</div>', str(e), started)

    def render_batch(self, component_slugs: Sequence[str], preset_slug: Optional[str] = None) -> Dict[str, RenderResult]:
        """Renders up to `max_batch_size` components concurrently; extra slugs are dropped."""
        slugs = list(dict.fromkeys(component_slugs))
        if len(slugs) > self.config.max_batch_size:
            self.log.warning("batch_truncated", requested=len(slugs), limit=self.config.max_batch_size)
            slugs = slugs[: self.config.max_batch_size]
        if not slugs:
            return {}

        workers = min(self.config.batch_workers, len(slugs))
        self.log.info("batch_render_started", count=len(slugs), workers=workers, preset=preset_slug)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="preview-render") as executor:
            futures = {slug: executor.submit(self._render_isolated, slug, preset_slug) for slug in slugs}
            results = {slug: future.result() for slug, future in futures.items()}
        self.log.info("batch_render_finished", count=len(results))
        return results


@dataclass
class BatchItem:
    slug: str
    success: bool
    html: str = ""
    css: str = ""
    error: Optional[str] = None
    render_time_ms: int = 0
    cached: bool = False

    @classmethod
    def from_result(cls, slug: str, result: Optional[RenderResult]) -> "BatchItem":
        if result is None:
            return cls(slug=slug, success=False, error=NOT_RENDERED_ERROR)
        return cls(
            slug=slug,
            success=result.success,
            html=result.html,
            css=result.css,
            error=result.errors[0] if result.errors else None,
            render_time_ms=result.render_time_ms,
            cached=result.cached,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "success": self.success,
            "html": self.html,
            "css": self.css,
            "error": self.error,
            "renderTimeMs": self.render_time_ms,
            "cached": self.cached,
        }


@dataclass
class BatchReport:
    success: bool
    items: List[BatchItem] = field(default_factory=list)
    error: Optional[str] = None
    total_time_ms: int = 0

    @property
    def stats(self) -> Dict[str, int]:
        successful = sum(1 for item in self.items if item.success)
        return {
            "total": len(self.items),
            "successful": successful,
            "failed": len(self.items) - successful,
            "cached": sum(1 for item in self.items if item.cached),
            "total_time_ms": self.total_time_ms,
        }

    def to_dict(self) -> Dict[str, Any]:
        stats = self.stats
        payload: Dict[str, Any] = {
            "success": self.success,
            "results": [item.to_dict() for item in self.items],
            "stats": {
                "total": stats["total"],
                "successful": stats["successful"],
                "failed": stats["failed"],
                "cached": stats["cached"],
                "totalTimeMs": stats["total_time_ms"],
            },
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


def validate_batch(component_slugs: Sequence[str], limit: int) -> None:
    if len(component_slugs) > limit:
        raise BatchSizeExceededError(len(component_slugs), limit)


def run_batch(pipeline: RenderPipeline, component_slugs: Sequence[str], preset_slug: Optional[str] = None) -> BatchReport:
    """
    Validates a batch request, renders it and reports per-slug outcomes in input order.

    Empty or oversized batches are rejected before anything is rendered.
    """
    slugs = list(component_slugs)
    if not slugs:
        log.warning("batch_rejected_empty")
        return BatchReport(success=False, error="Missing or invalid parameter: sections (array of slugs required)")
    try:
        validate_batch(slugs, pipeline.config.max_batch_size)
    except BatchSizeExceededError as e:
        log.warning("batch_rejected_oversized", size=e.size, limit=e.limit)
        return BatchReport(success=False, error=str(e))

    started = time.perf_counter()
    results = pipeline.render_batch(slugs, preset_slug)
    total_time_ms = _elapsed_ms(started)

    items = [BatchItem.from_result(slug, results.get(slug)) for slug in slugs]
    report = BatchReport(success=True, items=items, total_time_ms=total_time_ms)
    log.info("batch_completed", **report.stats)
    return report
