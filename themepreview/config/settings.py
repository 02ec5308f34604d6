from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import structlog

log = structlog.get_logger(__name__)

DEFAULT_CACHE_PATH = Path.home() / ".cache" / "themepreview" / "previews.db"


class CacheBackendKind(Enum):
    # where rendered previews are kept between renders.
    MEMORY = "memory"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "CacheBackendKind":
        if not s:
            return cls.MEMORY
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_cache_backend_string", input_string=s)
            return cls.MEMORY


@dataclass
class PreviewConfig:
    # holds all configuration parameters for a preview run.
    library_dir: Path = Path(".")
    cache_backend: CacheBackendKind = CacheBackendKind.MEMORY
    cache_path: Path = DEFAULT_CACHE_PATH
    cache_ttl_minutes: int = 60
    max_batch_size: int = 20
    batch_workers: int = 8

    def __post_init__(self):
        self.library_dir = Path(self.library_dir).expanduser()
        self.cache_path = Path(self.cache_path).expanduser()
        if not isinstance(self.cache_backend, CacheBackendKind):
            self.cache_backend = CacheBackendKind.from_string(self.cache_backend)
