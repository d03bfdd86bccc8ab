from pathlib import Path

from trivia.core.config import Settings


def ensure_storage_dirs(settings: Settings) -> None:
    Path(settings.data_root).mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "json":
        Path(settings.kv_dir).mkdir(parents=True, exist_ok=True)
