"""HTML email templates.

Templates live as ``<name>.template.html`` files and use ``{{KEY}}``
placeholders. Jinja2 loaders locate and read the files; rendering is plain
text substitution, not Jinja evaluation. Each bound key is replaced by
``str(value)`` without escaping, and any other text (unbound placeholders,
stray ``{#`` or ``{%`` in CSS) is left exactly as written.
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Union

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateNotFound,
)

from .models import NotificationTemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".template.html"
PLACEHOLDER_FORMAT = "{{%s}}"


class TemplateRenderer:
    """Loads named HTML templates and substitutes placeholders.

    Templates are read from disk on every call so edits show up without a
    restart. By default templates come from the ``email_templates``
    directory bundled with this package.
    """

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        """Initialize template renderer.

        Args:
            template_dir: Directory holding ``*.template.html`` files. Uses the
                bundled templates when omitted.
        """
        loader: BaseLoader
        if template_dir is None:
            loader = PackageLoader("auth_starter.notifications", "email_templates")
            self.search_path = "auth_starter.notifications/email_templates"
        else:
            loader = FileSystemLoader(str(template_dir), encoding="utf-8")
            self.search_path = str(template_dir)

        self.env = Environment(loader=loader, autoescape=False, cache_size=0)

        logger.debug(f"Initialized TemplateRenderer with templates from {self.search_path}")

    def render(self, template_name: str, variables: Mapping[str, object]) -> str:
        """Render a template with the given placeholder values.

        Every occurrence of ``{{KEY}}`` for each bound KEY is replaced by
        ``str(value)``. Nothing else in the template is interpreted.

        Args:
            template_name: Template name without the ``.template.html`` suffix
            variables: Placeholder name -> value

        Returns:
            Rendered HTML

        Raises:
            TemplateNotFoundError: If no resource matches template_name
            NotificationTemplateError: If the template cannot be read
        """
        source = self._read_source(template_name)

        html = source
        for key, value in variables.items():
            html = html.replace(PLACEHOLDER_FORMAT % key, str(value))

        logger.debug(f"Rendered template {template_name}", extra={"template": template_name})
        return html

    def exists(self, template_name: str) -> bool:
        """Check whether a template resource exists."""
        try:
            self.env.loader.get_source(self.env, template_name + TEMPLATE_SUFFIX)
        except TemplateNotFound:
            return False
        return True

    def list_available(self) -> List[str]:
        """List template names (without suffix), sorted."""
        try:
            names = self.env.list_templates(filter_func=lambda name: name.endswith(TEMPLATE_SUFFIX))
        except (OSError, TypeError):
            return []
        return sorted(name[: -len(TEMPLATE_SUFFIX)] for name in names)

    def _read_source(self, template_name: str) -> str:
        try:
            source, _, _ = self.env.loader.get_source(self.env, template_name + TEMPLATE_SUFFIX)
        except TemplateNotFound as e:
            logger.error(
                f"Template not found: {template_name}",
                extra={"event": "template.not_found", "template": template_name},
            )
            raise TemplateNotFoundError(template_name, self.search_path) from e
        except (OSError, UnicodeDecodeError) as e:
            error_msg = f"Failed to read template {template_name}: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e
        return source
