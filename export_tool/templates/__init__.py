# export_tool/templates/__init__.py
"""Built-in templates for export-tool"""

from pathlib import Path
from typing import Optional

# Template directory path
TEMPLATES_DIR = Path(__file__).parent


def get_template_path(category: str, name: str) -> Optional[Path]:
    """
    Get path to a template file

    Args:
        category: Template category (compose)
        name: Template name

    Returns:
        Path to template file or None if not found
    """
    template_path = TEMPLATES_DIR / category / name

    if template_path.exists():
        return template_path

    return None


START_SCRIPT_TEMPLATE = "run.sh"

__all__ = [
    'TEMPLATES_DIR',
    'get_template_path',
    'START_SCRIPT_TEMPLATE',
]
