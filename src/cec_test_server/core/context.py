"""Per-request context and the session state a running server keeps between requests."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ContentLayoutItem:
    template: str = ""
    type: str = ""
    id: str = ""


@dataclass
class SessionState:
    """What the developer is currently previewing.

    One instance lives on the application; handlers read it to build a
    ``RequestContext`` and only the template and content-layout endpoints
    change it.
    """

    current_template: str = ""
    content_item: ContentLayoutItem = field(default_factory=ContentLayoutItem)
    content_types: list[str] = field(default_factory=list)

    def select_template(self, name: str) -> None:
        self.current_template = name
        self.content_item.template = ""

    def select_content_item(self, template: str, item_type: str, item_id: str, content_types: list[str]) -> None:
        self.current_template = ""
        self.content_item = ContentLayoutItem(template=template, type=item_type, id=item_id)
        self.content_types = content_types

    def clear_content_item(self) -> None:
        self.content_item = ContentLayoutItem()
        self.content_types = []


@dataclass(frozen=True)
class RequestContext:
    template: str

    @classmethod
    def build(cls, requested: str | None, session: SessionState, default_template: str) -> RequestContext:
        """Template precedence: request parameter, selected content item, current template, default."""
        return cls(
            template=requested
            or session.content_item.template
            or session.current_template
            or default_template
        )
