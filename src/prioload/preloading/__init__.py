"""Start-up sequencing and route prefetch."""

from prioload.preloading.models import (
    STAGE_PROGRESS,
    ManifestEntry,
    PreloadStage,
    ProgressListener,
    StartupManifest,
)
from prioload.preloading.preloader import CriticalResourcePreloader

__all__ = [
    "CriticalResourcePreloader",
    # Models
    "PreloadStage",
    "STAGE_PROGRESS",
    "ProgressListener",
    "ManifestEntry",
    "StartupManifest",
]
