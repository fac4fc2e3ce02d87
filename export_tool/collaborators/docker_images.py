# export_tool/collaborators/docker_images.py
"""Image service driving the docker command line"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..api.exceptions import ImageOperationError
from ..models.config import ImageConfig
from ..models.manifest import ImageCredentials
from ..utils.async_utils import retry_async
from ..utils.file_utils import ensure_parent_dir
from .base import ImageService

logger = logging.getLogger(__name__)


def split_image_reference(image: str) -> Tuple[str, str]:
    """
    Split an image reference into repository and tag

    A colon only separates the tag when it follows the last slash, so a
    registry port is not mistaken for a tag. Digests are dropped.

    Args:
        image: Image reference

    Returns:
        Tuple of (repository, tag), tag empty when none is given
    """
    reference = image.strip().split('@', 1)[0]
    slash = reference.rfind('/')
    colon = reference.rfind(':')
    if colon > slash:
        return reference[:colon], reference[colon + 1:]
    return reference, ""


def flatten_image_name(image: str, registry_domain: str, default_tag: str) -> str:
    """<registry domain>/<last path segment>:<tag>"""
    repository, tag = split_image_reference(image)
    simple_name = repository.rstrip('/').split('/')[-1]
    return f"{registry_domain}/{simple_name}:{tag or default_tag}"


class DockerCliImageService(ImageService):
    """ImageService backed by `docker pull/tag/save`"""

    def __init__(self, config: Optional[ImageConfig] = None, timeout: Optional[float] = None):
        """
        Initialize docker image service

        Args:
            config: Image configuration
            timeout: Per-command timeout in seconds, unlimited when None
        """
        self.config = config or ImageConfig()
        self.timeout = timeout
        self._logged_in = set()

    def save_name(self, image: str) -> str:
        return flatten_image_name(image, self.config.registry_domain, self.config.default_tag)

    async def _run(self, operation: str, image: str, *args: str, stdin: Optional[bytes] = None) -> str:
        cmd = [self.config.docker_binary, *args]
        logger.debug(f"Running {' '.join(cmd[:3])} ...")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE if stdin is not None else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise ImageOperationError(operation, image, str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(input=stdin),
                timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ImageOperationError(operation, image, f"timed out after {self.timeout}s") from e

        if process.returncode != 0:
            raise ImageOperationError(operation, image, stderr.decode(errors='replace').strip())

        return stdout.decode(errors='replace')

    async def _login(self, image: str, credentials: ImageCredentials) -> None:
        repository, _ = split_image_reference(image)
        first = repository.split('/', 1)[0]
        # Docker Hub references have no registry host part
        if '/' not in repository or ('.' not in first and ':' not in first and first != 'localhost'):
            registry = ""
        else:
            registry = first

        key = (registry, credentials.user)
        if key in self._logged_in:
            return

        args = ['login', '--username', credentials.user, '--password-stdin']
        if registry:
            args.append(registry)
        await self._run('login', image, *args, stdin=credentials.password.encode())
        self._logged_in.add(key)

    async def pull(self,
                   image: str,
                   credentials: Optional[ImageCredentials] = None,
                   attempts: int = 1) -> None:
        if credentials is None or credentials.is_empty:
            if self.config.registry_user:
                credentials = ImageCredentials(self.config.registry_user, self.config.registry_password)

        if credentials is not None and not credentials.is_empty:
            await self._login(image, credentials)

        logger.info(f"Pulling image {image}")
        await retry_async(
            self._run, 'pull', image, 'pull', image,
            max_attempts=attempts,
            delay=self.config.retry_delay,
            backoff=1.0,
            exceptions=(ImageOperationError,),
        )

    async def tag(self, source: str, target: str, attempts: int = 1) -> None:
        logger.debug(f"Tagging image {source} as {target}")
        await retry_async(
            self._run, 'tag', source, 'tag', source, target,
            max_attempts=attempts,
            delay=self.config.retry_delay,
            backoff=1.0,
            exceptions=(ImageOperationError,),
        )

    async def save(self, image: str, destination: Path) -> None:
        ensure_parent_dir(destination)
        logger.info(f"Saving image {image} to {destination}")
        await self._run('save', image, 'save', '-o', str(destination), image)

    async def multi_save(self, images: List[str], destination: Path) -> None:
        if not images:
            return
        ensure_parent_dir(destination)
        logger.info(f"Saving {len(images)} images to {destination}")
        await self._run('save', ','.join(images), 'save', '-o', str(destination), *images)
