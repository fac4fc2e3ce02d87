"""Metrics scrape target updater driven by endpoint discovery"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

import yaml

from ..constants import SCRAPE_INTERVAL, SCRAPE_METRICS_PATH, SCRAPE_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """Discovered endpoint; url holds a JSON document or a bare address"""
    name: str = ""
    url: str = ""
    weight: int = 0

    @property
    def address(self) -> str:
        """The Addr field of the JSON url, or the url itself"""
        text = self.url.strip()
        if text.startswith('{'):
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                return ""
            if not isinstance(data, dict):
                return ""
            return str(data.get('Addr') or "").strip()
        return text


@dataclass
class StaticGroup:
    """Static target group with its labels"""
    targets: List[str] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'targets': list(self.targets), 'labels': dict(self.labels)}


@dataclass
class ScrapeConfig:
    """One scrape job in Prometheus configuration form"""
    job_name: str
    scrape_interval: str = SCRAPE_INTERVAL
    scrape_timeout: str = SCRAPE_TIMEOUT
    metrics_path: str = SCRAPE_METRICS_PATH
    honor_labels: bool = True
    static_configs: List[StaticGroup] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'job_name': self.job_name,
            'scrape_interval': self.scrape_interval,
            'scrape_timeout': self.scrape_timeout,
            'metrics_path': self.metrics_path,
            'honor_labels': self.honor_labels,
            'static_configs': [group.to_dict() for group in self.static_configs],
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)


def trim_and_sort(addresses: Iterable[str]) -> List[str]:
    """Strip, drop empties and duplicates, sort"""
    return sorted({a.strip() for a in addresses if a and a.strip()})


class ScrapeTargetUpdater:
    """Republishes a scrape job whenever the discovered targets change"""

    def __init__(self, name: str, publisher: Callable[[ScrapeConfig], None]):
        """
        Initialize scrape target updater

        Args:
            name: Job name, also used as service_name and component label
            publisher: Receives the new scrape configuration
        """
        self.name = name
        self.publisher = publisher
        self.sorted_endpoints: List[str] = []

    def update_endpoints(self, endpoints: Iterable[Endpoint]) -> Optional[ScrapeConfig]:
        """
        Handle a new set of discovered endpoints

        Args:
            endpoints: Discovered endpoints

        Returns:
            The published configuration, or None when targets are unchanged
        """
        addresses = trim_and_sort(endpoint.address for endpoint in endpoints)
        if addresses == self.sorted_endpoints:
            logger.debug(f"The endpoints is not modify: {self.name}")
            return None

        self.sorted_endpoints = addresses
        scrape = self.to_scrape()
        self.publisher(scrape)
        logger.info(f"Scrape targets of {self.name} updated: {len(addresses)} endpoints")
        return scrape

    def error(self, err: Exception) -> None:
        logger.error(f"Discovery of {self.name} failed: {err}")

    def to_scrape(self) -> ScrapeConfig:
        return ScrapeConfig(
            job_name=self.name,
            static_configs=[StaticGroup(
                targets=list(self.sorted_endpoints),
                labels={'service_name': self.name, 'component': self.name},
            )],
        )
