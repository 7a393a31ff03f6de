"""Jinja2 template registry for generated server entry files.

Provides the TemplateRegistry class which holds one entry-file template per
language x category and renders it with project-specific values.  Each
language gets its own ``Environment`` whose ``Undefined`` turns leftover
placeholders into either nothing (optional sections) or a visible comment in
that language's syntax.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable, Optional

from jinja2 import DictLoader, Environment, Undefined, meta
from jinja2 import Template as JinjaTemplate

from mcp_builder.errors import TemplateNotFound
from mcp_builder.parser.models import Language
from mcp_builder.utils import print_warning

from .catalogue import (
    BASE_VARIABLES,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_VARIABLES,
    LANGUAGE_LABELS,
    OPTIONAL_VARIABLES,
    PLACEHOLDER_COMMENTS,
    template_bodies,
)
from .models import RenderResult, Template, TemplateCategory


# ---------------------------------------------------------------------------
# Placeholder handling
# ---------------------------------------------------------------------------

def _placeholder_undefined(comment: str) -> type[Undefined]:
    """Build an ``Undefined`` that renders unresolved names per *comment*."""

    class PlaceholderUndefined(Undefined):
        __slots__ = ()

        def __str__(self) -> str:
            name = self._undefined_name
            if name is None or name in OPTIONAL_VARIABLES:
                return ""
            return comment.format(name=name)

    return PlaceholderUndefined


def _make_environment(language: Language, sources: dict[str, str]) -> Environment:
    return Environment(
        loader=DictLoader(sources),
        undefined=_placeholder_undefined(PLACEHOLDER_COMMENTS[language]),
        autoescape=False,
        keep_trailing_newline=True,
    )


def _context(variables: dict[str, Any]) -> dict[str, str]:
    # None counts as "not supplied" so it falls through to the placeholder.
    return {key: str(value) for key, value in variables.items() if value is not None}


# ---------------------------------------------------------------------------
# TemplateRegistry
# ---------------------------------------------------------------------------


class TemplateRegistry:
    """Read-only lookup and rendering of entry-file templates.

    Built once; nothing mutates it afterwards, so a single instance can be
    shared by every builder.
    """

    def __init__(self, templates: Optional[Iterable[Template]] = None) -> None:
        if templates is None:
            templates = _default_templates()
        self._templates: dict[str, Template] = {t.name: t for t in templates}
        self._environments: dict[Language, Environment] = {
            language: _make_environment(
                language,
                {t.name: t.body for t in self._templates.values() if t.language == language},
            )
            for language in Language
        }

    # -- Lookup ------------------------------------------------------------

    @staticmethod
    def template_name(language: Language, category: TemplateCategory) -> str:
        """Return the registry key for *language* and *category*."""
        return f"{Language(language).value}-{TemplateCategory(category).value}"

    def get(self, name: str) -> Template:
        """Return the template registered as *name*.

        Raises:
            TemplateNotFound: If no template has that name.
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFound(name) from None

    def all(self) -> list[Template]:
        return list(self._templates.values())

    def by_language(self, language: Language) -> list[Template]:
        return [t for t in self._templates.values() if t.language == language]

    def by_category(self, category: TemplateCategory) -> list[Template]:
        return [t for t in self._templates.values() if t.category == category]

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    # -- Rendering ---------------------------------------------------------

    def render(self, name: str, variables: dict[str, Any]) -> str:
        """Render template *name* with *variables*.

        Values are converted with ``str()`` and inserted verbatim; markup
        inside a value is never interpreted.  Unresolved optional sections
        render empty, any other unresolved name becomes a ``TODO`` comment
        and a warning is printed.

        Raises:
            TemplateNotFound: If no template has that name.
        """
        return self.render_with_report(name, variables).content

    def render_with_report(self, name: str, variables: dict[str, Any]) -> RenderResult:
        """Like :meth:`render` but also return the unresolved placeholder names."""
        template = self.get(name)
        env = self._environments[template.language]
        return self._render(env, env.get_template(name), template.body, variables, label=name)

    def render_string(
        self,
        source: str,
        variables: dict[str, Any],
        language: Language = Language.TYPESCRIPT,
    ) -> str:
        """Render an inline template fragment with *language*'s placeholder rules."""
        env = self._environments[Language(language)]
        return self._render(env, env.from_string(source), source, variables, "inline fragment").content

    @staticmethod
    def _render(
        env: Environment,
        compiled: JinjaTemplate,
        source: str,
        variables: dict[str, Any],
        label: str,
    ) -> RenderResult:
        context = _context(variables)
        declared = meta.find_undeclared_variables(env.parse(source))
        missing = sorted(declared - context.keys())
        required_missing = [n for n in missing if n not in OPTIONAL_VARIABLES]
        if required_missing:
            print_warning(
                f"Template {label}: no value for {', '.join(required_missing)}; "
                "left a TODO comment in the output"
            )
        content = compiled.render(**context)
        return RenderResult(content=content, missing=missing)


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------

def _default_templates() -> list[Template]:
    templates: list[Template] = []
    for (language, category), body in template_bodies().items():
        templates.append(
            Template(
                name=TemplateRegistry.template_name(language, category),
                description=CATEGORY_DESCRIPTIONS[category].format(
                    language=LANGUAGE_LABELS[language]
                ),
                language=language,
                category=category,
                body=body,
                variables=BASE_VARIABLES + CATEGORY_VARIABLES[category],
            )
        )
    return templates


@lru_cache(maxsize=1)
def default_registry() -> TemplateRegistry:
    """Return the process-wide registry of built-in templates."""
    return TemplateRegistry()
