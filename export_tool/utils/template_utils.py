"""Template processing utilities"""

import re
import shutil
from pathlib import Path
from typing import Dict, Mapping

_REFERENCE = re.compile(r"\$\{([^}]+)\}")


def render_template(template: str, variables: Mapping[str, str]) -> str:
    """
    Replace ${KEY} references with values from a mapping

    Unknown keys are left untouched, bare $KEY is not a reference.

    Args:
        template: Template string
        variables: Variables to substitute

    Returns:
        Rendered string
    """
    def replace(match: 're.Match') -> str:
        key = match.group(1)
        if key in variables:
            return variables[key]
        return match.group(0)

    return _REFERENCE.sub(replace, template)


def substitute_variables(envs: Dict[str, str]) -> Dict[str, str]:
    """
    Render every value of a mapping against the mapping itself

    Every value is rendered against the same snapshot, so the result does
    not depend on iteration order.

    Args:
        envs: Ordered variable mapping

    Returns:
        New ordered mapping with rendered values
    """
    snapshot = dict(envs)
    return {key: render_template(value, snapshot) for key, value in envs.items()}


def copy_template(template_path: Path, destination: Path) -> Path:
    """
    Copy a template verbatim, keeping its permission bits

    Args:
        template_path: Template file
        destination: Target file

    Returns:
        Destination path
    """
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    shutil.copy2(template_path, destination)
    return destination
