"""Content processor protocol and registry.

A content processor transforms the text of a block. It declares the
capability key it ``processes`` (``"markdown"``, ``"template"``...);
blocks name those keys in their pipeline.

The registry is an explicit object created per build run and handed to
the render pipeline. ``processors_by_capability()`` returns a fresh
snapshot on every call, so a render never sees a registry being changed.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from arbor.pages.types import RenderContext

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class ContentProcessor(Protocol):
    """Transforms ``context.content`` and returns the context."""

    processes: str

    def __call__(self, context: RenderContext) -> RenderContext: ...


def extension_name(cls: type) -> str:
    """Default registration name for a processor class.

    ``MarkdownProcessor`` -> ``"markdown"``, ``HTMLTidyProcessor`` -> ``"html_tidy"``.
    """
    name = cls.__name__
    if name.endswith("Processor") and name != "Processor":
        name = name[: -len("Processor")]
    return _CAMEL_RE.sub("_", name).lower()


class ProcessorRegistry:
    """Named content processors for one build run.

    Usage::

        registry = ProcessorRegistry()
        registry.register(MarkdownProcessor())
        registry.processors_by_capability()  # {"markdown": <MarkdownProcessor>}
    """

    __slots__ = ("_processors",)

    def __init__(self) -> None:
        self._processors: dict[str, ContentProcessor] = {}

    def register(
        self,
        processor: ContentProcessor,
        *,
        name: str | None = None,
        replace: bool = False,
    ) -> str:
        """Register *processor* under *name* (derived from its class by default).

        Returns:
            The name the processor was registered under.

        Raises:
            ValueError: The name is taken and *replace* is false.
        """
        name = name or extension_name(type(processor))
        if name in self._processors and not replace:
            msg = f"Duplicate content processor name: {name!r}"
            raise ValueError(msg)
        self._processors[name] = processor
        return name

    def get(self, name: str) -> ContentProcessor:
        """Return the processor registered as *name*.

        Raises:
            KeyError: Nothing is registered under *name*.
        """
        processor = self._processors.get(name)
        if processor is None:
            msg = f"No content processor called {name!r} registered"
            raise KeyError(msg)
        return processor

    def registered_names(self) -> list[str]:
        return sorted(self._processors)

    def processors_by_capability(self) -> dict[str, ContentProcessor]:
        """Map each processor's ``processes`` key to the processor.

        A new dict on every call; later registrations win on equal keys.
        """
        return {processor.processes: processor for processor in self._processors.values()}

    def __contains__(self, name: object) -> bool:
        return name in self._processors

    def __len__(self) -> int:
        return len(self._processors)
