"""View engine domain models.

Pydantic models for template records and the persisted cache document.
"""

import hashlib

from pydantic import BaseModel, Field

FRAGMENT_MARKER = "Fragment"


def fingerprint(content: str) -> str:
    """Return the MD5 hex digest of the UTF-8 encoded content."""
    return hashlib.md5(content.encode("utf-8")).hexdigest().upper()


def is_fragment_name(logical_name: str) -> bool:
    """Check whether any path segment of a logical name marks a fragment."""
    return any(FRAGMENT_MARKER in segment for segment in logical_name.split("/"))


class TemplateRecord(BaseModel):
    """One template, either as loaded from disk or after compilation."""

    logical_name: str = Field(description="Slash-delimited path relative to its view root, no extension")
    display_name: str = Field(description="File stem of the template")
    source_path: str = Field(default="", description="File the template was loaded from")
    raw_content: str = Field(default="", description="Template source as read from disk")
    content_fingerprint: str = Field(default="", description="MD5 of raw_content")
    compiled_content: str = Field(default="", description="Content after directive expansion")
    last_render_result: str = Field(
        default="",
        exclude=True,
        description="Output of the most recent render; never persisted",
    )

    @property
    def is_fragment(self) -> bool:
        """Fragments are served raw and never enter directive compilation."""
        return is_fragment_name(self.logical_name)


class ViewCache(BaseModel):
    """Persisted form of the registry: templates, compiled views and dependencies."""

    templates: list[TemplateRecord] = Field(default_factory=list)
    compiled_views: list[TemplateRecord] = Field(default_factory=list)
    dependencies: dict[str, list[str]] = Field(default_factory=dict)
