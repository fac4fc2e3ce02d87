"""Compose descriptor builder"""

import logging
from typing import Dict, Optional

from ..models.compose import ComposeDescriptor, ComposeService, LoggingPolicy
from ..models.config import ComposeConfig
from .dependency_resolver import Resolution, ResolvedComponent

logger = logging.getLogger(__name__)


class ComposeBuilder:
    """Turns resolved components into a compose descriptor"""

    def __init__(self, config: Optional[ComposeConfig] = None):
        self.config = config or ComposeConfig()

    @property
    def logging_policy(self) -> LoggingPolicy:
        return LoggingPolicy(
            driver=self.config.log_driver,
            max_size=self.config.log_max_size,
            max_file=self.config.log_max_file,
        )

    def build(self,
              resolution: Resolution,
              image_names: Dict[str, str]) -> ComposeDescriptor:
        """
        Build the descriptor

        Args:
            resolution: Resolved components in manifest order
            image_names: Flattened image reference keyed by share id

        Returns:
            Compose descriptor with one service per resolved component
        """
        descriptor = ComposeDescriptor(
            version=self.config.version,
            volumes=list(resolution.global_volumes),
        )

        for resolved in resolution:
            descriptor.services[resolved.name] = self.build_service(
                resolved, image_names.get(resolved.share_id))

        return descriptor

    def build_service(self,
                      resolved: ResolvedComponent,
                      image: Optional[str]) -> ComposeService:
        if not image:
            logger.warning(f"component {resolved.name} has no image, "
                           f"service is written without one")

        return ComposeService(
            image=image or None,
            container_name=resolved.name,
            restart=self.config.restart,
            network_mode=self.config.network_mode,
            volumes=list(resolved.volumes),
            command=resolved.component.command,
            environment=dict(resolved.environment),
            depends_on=list(resolved.depends_on),
            logging=self.logging_policy,
        )
