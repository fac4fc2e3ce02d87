"""Discovery-driven adapters"""

from .scrape import Endpoint, ScrapeConfig, ScrapeTargetUpdater, StaticGroup, trim_and_sort

__all__ = [
    "Endpoint",
    "ScrapeConfig",
    "ScrapeTargetUpdater",
    "StaticGroup",
    "trim_and_sort",
]
