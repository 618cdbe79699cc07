"""Liquid rendering for entry pages and emails."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from liquid import Environment, FileSystemLoader

logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates"


class LiquidTemplateRenderer:
    """Renders `<name>.html` templates with site-wide values always available.

    Site-wide values (site_name, site_url, email_key) take precedence over
    per-call values with the same name.
    """

    def __init__(self, site_values: Mapping[str, Any], templates_dir: Path = TEMPLATES_DIR) -> None:
        self._site_values = dict(site_values)
        self._env = Environment(loader=FileSystemLoader(str(templates_dir)), autoescape=True)

    def render(self, template_name: str, values: Mapping[str, Any] | None = None) -> str:
        """Render a template by name.

        Raises:
            ValueError: If the template is missing or rendering fails
        """
        context = {key: value for key, value in (values or {}).items() if key not in self._site_values}
        context.update(self._site_values)
        try:
            template = self._env.get_template(f"{template_name}.html")
            return template.render(**context)
        except Exception as e:
            logger.exception("template_render_failed", template=template_name, error=str(e))
            raise ValueError(f"Failed to render template '{template_name}': {e}") from e
