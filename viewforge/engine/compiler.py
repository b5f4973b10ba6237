"""View compiler.

Turns raw templates into compiled views by running the registered
directive and substitution handlers in three passes:

1. compile-phase directives (layouts),
2. compile-phase substitutions (comments, head blocks),
3. after-compile directives (partials, placeholders, bundles).

Rendering then substitutes runtime tag values into a compiled view.
"""

import logging
import re
from collections.abc import Mapping, Sequence

import markdown
from markupsafe import escape

from viewforge.core.exceptions import TemplateNotFoundError
from viewforge.engine.models import TemplateRecord
from viewforge.engine.registry import RegistryTransaction, ViewRegistry
from viewforge.interfaces.directive import BaseDirectiveHandler, DirectiveContext, ProcessPhase
from viewforge.interfaces.substitution import BaseSubstitutionHandler

logger = logging.getLogger(__name__)

DIRECTIVE_TOKEN_RE = re.compile(r"%%(?P<directive>[a-zA-Z0-9]+)=(?P<value>[^\s%]+)%%")
LEFTOVER_TAG_RE = re.compile(r"\{\{\w+\}\}|\{\|\w+\|\}|\{!\w+!\}")
BLANK_LINE_RE = re.compile(r"^\s*$\n", re.MULTILINE)

UNENCODED_TAG_HINT = "{{"
HTML_ENCODED_TAG_HINT = "{|"
MARKDOWN_TAG_HINT = "{!"

SHARED_PREFIX = "Shared/"


def tag_pattern(key: str) -> re.Pattern[str]:
    """Build the pattern matching the three bracket styles around a tag key."""
    k = re.escape(key)
    return re.compile(rf"\{{\{{{k}\}}\}}|\{{\|{k}\|\}}|\{{!{k}!\}}")


def encode_tag_value(tag: str, value: str) -> str:
    """Encode a tag value according to the bracket style of the matched tag."""
    value = value.strip()
    if tag.startswith(HTML_ENCODED_TAG_HINT):
        return str(escape(value))
    if tag.startswith(MARKDOWN_TAG_HINT):
        return markdown.markdown(value)
    return value


class ViewCompiler:
    """Compiles templates held by a ViewRegistry and renders compiled views.

    Handlers run in registration order. All mutations go through registry
    write transactions, so a failed compile leaves the previously published
    views untouched.
    """

    def __init__(
        self,
        registry: ViewRegistry,
        directive_handlers: Sequence[BaseDirectiveHandler],
        substitution_handlers: Sequence[BaseSubstitutionHandler],
    ) -> None:
        """Initialize the compiler.

        Args:
            registry: Registry holding templates, compiled views and dependencies.
            directive_handlers: ``%%Name=Value%%`` handlers in run order.
            substitution_handlers: Buffer-wide handlers in run order.
        """
        self._registry = registry
        self._directive_handlers = list(directive_handlers)
        self._substitution_handlers = list(substitution_handlers)

    @property
    def registry(self) -> ViewRegistry:
        return self._registry

    def compile_all(self) -> dict[str, TemplateRecord]:
        """Compile every template and copy fragments through unchanged.

        A template that fails to compile is logged and left out; the
        remaining templates are still compiled and published.

        Returns:
            Compiled views by logical name.
        """
        failed: list[str] = []

        with self._registry.write() as txn:
            for logical_name in sorted(txn.templates):
                previous_deps = list(txn.dependencies.get(logical_name, []))
                try:
                    self._compile(txn, logical_name)
                except TemplateNotFoundError as e:
                    txn.dependencies[logical_name] = previous_deps
                    failed.append(logical_name)
                    logger.error(f"Failed to compile {logical_name}: {e}")

            compiled = dict(txn.compiled)

        logger.info(f"Compiled {len(compiled)} views ({len(failed)} failed)")
        return compiled

    def compile(self, logical_name: str) -> TemplateRecord:
        """Compile one template and replace its compiled view.

        Args:
            logical_name: The template to compile.

        Returns:
            The new compiled record.

        Raises:
            TemplateNotFoundError: If the template, or a layout or partial it
                references, is unknown.
        """
        with self._registry.write() as txn:
            return self._compile(txn, logical_name)

    def recompile_dependencies(self, logical_name: str) -> list[str]:
        """Recompile every view that includes logical_name.

        When nothing includes it, the view itself is recompiled.

        Returns:
            The logical names that were recompiled.
        """
        with self._registry.write() as txn:
            targets = txn.dependents_of(logical_name) or [logical_name]
            recompiled: list[str] = []

            for name in targets:
                if name not in txn.templates:
                    logger.warning(f"Skipping recompile of unknown view {name}")
                    continue
                self._compile(txn, name)
                recompiled.append(name)

        logger.info(f"Recompiled {recompiled} after change to {logical_name}")
        return recompiled

    def pending_views(self) -> list[str]:
        """Return templates that have no compiled view, e.g. after a failed compile."""
        snapshot = self._registry.snapshot
        return sorted(name for name in snapshot.templates if name not in snapshot.compiled)

    def compile_pending(self) -> list[str]:
        """Retry every template that has no compiled view.

        Views whose layout or partial is still missing stay pending; their
        failure is logged and does not affect the others.

        Returns:
            The logical names that compiled.
        """
        compiled: list[str] = []

        with self._registry.write() as txn:
            for logical_name in sorted(txn.templates):
                if logical_name in txn.compiled:
                    continue
                previous_deps = list(txn.dependencies.get(logical_name, []))
                try:
                    self._compile(txn, logical_name)
                except TemplateNotFoundError as e:
                    txn.dependencies[logical_name] = previous_deps
                    logger.debug(f"View {logical_name} still pending: {e}")
                    continue
                compiled.append(logical_name)

        if compiled:
            logger.info(f"Compiled pending views {compiled}")
        return compiled

    def render(self, logical_name: str, tags: Mapping[str, str] | None = None) -> str | None:
        """Render a compiled view with tag values.

        ``{{key}}`` receives the raw value, ``{|key|}`` the HTML-escaped
        value and ``{!key!}`` the value rendered as Markdown. Tags without a
        value are removed from the output.

        Args:
            logical_name: The compiled view to render.
            tags: Tag values by key.

        Returns:
            The rendered page, or None if the view is not compiled.
        """
        view = self._registry.snapshot.compiled.get(logical_name)
        if view is None:
            logger.warning(f"Render requested for unknown view {logical_name}")
            return None

        content = view.compiled_content

        for handler in self._substitution_handlers:
            if handler.phase == ProcessPhase.RENDER:
                content = handler.process(content)

        for key, value in (tags or {}).items():
            text = "" if value is None else str(value)
            if not text:
                continue
            content = tag_pattern(key).sub(
                lambda match: encode_tag_value(match.group(0), text), content
            )

        content = LEFTOVER_TAG_RE.sub("", content)
        content = BLANK_LINE_RE.sub("", content)

        view.last_render_result = content
        return content

    def _compile(self, txn: RegistryTransaction, logical_name: str) -> TemplateRecord:
        template = txn.templates.get(logical_name)
        if template is None:
            raise TemplateNotFoundError(logical_name)

        if template.is_fragment:
            compiled_content = template.raw_content
        else:
            txn.reset_dependencies(logical_name)
            compiled_content = self._process_directives(txn, logical_name, template.raw_content)
            if not compiled_content:
                compiled_content = template.raw_content
            compiled_content = BLANK_LINE_RE.sub("", compiled_content)

        view = template.model_copy(
            update={"compiled_content": compiled_content, "last_render_result": ""}
        )
        txn.compiled[logical_name] = view

        logger.debug(f"Compiled view {logical_name}")
        return view

    def _process_directives(self, txn: RegistryTransaction, view_name: str, content: str) -> str:
        templates = txn.templates

        def resolve_name(value: str) -> str:
            suffix = SHARED_PREFIX + value
            for name in sorted(templates):
                if name.endswith(suffix):
                    return name
            raise TemplateNotFoundError(
                value, f"Cannot resolve shared template '{value}' referenced by {view_name}"
            )

        def add_dependency(name: str) -> None:
            txn.add_dependency(view_name, name)

        def run_pass(page: str, phase: ProcessPhase) -> str:
            handlers = [h for h in self._directive_handlers if h.phase == phase]
            if not handlers:
                return page

            for match in DIRECTIVE_TOKEN_RE.finditer(page):
                for handler in handlers:
                    page = handler.process(
                        DirectiveContext(
                            token=match.group(0),
                            directive=match.group("directive"),
                            value=match.group("value"),
                            content=page,
                            view_name=view_name,
                            templates=templates,
                            resolve_name=resolve_name,
                            add_dependency=add_dependency,
                        )
                    )
            return page

        content = run_pass(content, ProcessPhase.COMPILE)

        for handler in self._substitution_handlers:
            if handler.phase == ProcessPhase.COMPILE:
                content = handler.process(content)

        return run_pass(content, ProcessPhase.AFTER_COMPILE)
