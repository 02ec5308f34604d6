class ThemePreviewError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(ThemePreviewError):
    # errors related to configuration.
    pass

class EngineConfigError(ConfigError):
    # unsupported tag or filter names handed to the template engine at startup.
    pass

class SourceError(ThemePreviewError):
    # errors while reading component schemas, presets or templates.
    pass

class SchemaNotFoundError(SourceError):
    # the requested component schema does not exist.
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"{slug} not found")

class TemplateRenderError(ThemePreviewError):
    # errors related to template parsing or rendering.
    pass

class CacheBackendError(ThemePreviewError):
    # errors from the render cache storage.
    pass

class BatchSizeExceededError(ThemePreviewError):
    # batch request rejected before any rendering.
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Batch size {size} exceeds maximum of {limit}. Please split into smaller batches.")

class OutputError(ThemePreviewError):
    # errors during output operations.
    pass
