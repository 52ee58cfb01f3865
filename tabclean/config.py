import os
from functools import lru_cache

from pydantic import BaseModel


class Settings(BaseModel):
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_bytes: int = 20 * 1024 * 1024
    # pause between streamed WebSocket events; 0 streams as fast as stages finish
    stream_delay: float = 0.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=os.getenv("TABCLEAN_LOG_LEVEL", "INFO"),
            host=os.getenv("TABCLEAN_HOST", "0.0.0.0"),
            port=int(os.getenv("TABCLEAN_PORT", "8000")),
            max_upload_bytes=int(os.getenv("TABCLEAN_MAX_UPLOAD_BYTES", str(20 * 1024 * 1024))),
            stream_delay=float(os.getenv("TABCLEAN_STREAM_DELAY", "0")),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
