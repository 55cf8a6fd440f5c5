"""Template content processor backed by kida.

A block with ``pipeline=("template",)`` is compiled as a kida template
and rendered with the page's meta information. Template blocks wrap the
page through the ``content`` variable, which holds the rendered block of
the next element of the template chain::

    <html><body><h1>{{ title }}</h1>{{ content }}</body></html>

Variables available to templates:

- every meta info key of the page being rendered
- ``node`` — the page node, ``ref_node`` — the node owning the block
- ``content`` — nested chain content (safe markup)
- ``block_name`` — the block being rendered
- ``relocatable(path)`` — route from the page to *path*
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kida import Environment
from kida.template import Markup

if TYPE_CHECKING:
    from arbor.config import SiteConfig
    from arbor.pages.types import RenderContext


def create_environment(config: SiteConfig) -> Environment:
    """Create the kida Environment used for block templates.

    Created once per build run and shared by every render call.
    """
    return Environment(
        autoescape=config.autoescape,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )


class TemplateProcessor:
    """Render block content as a kida template."""

    processes = "template"

    def __init__(self, env: Environment | None = None) -> None:
        self._env = env if env is not None else Environment(autoescape=False)

    @classmethod
    def from_config(cls, config: SiteConfig) -> TemplateProcessor:
        return cls(create_environment(config))

    @property
    def env(self) -> Environment:
        return self._env

    def __call__(self, context: RenderContext) -> RenderContext:
        inner = context.chain_content() if context.has_chain_content() else ""
        dest = context.dest_node
        variables = {
            **dest.meta_info,
            "node": dest,
            "ref_node": context.ref_node,
            "content": Markup(inner),
            "block_name": context.block_name,
            "relocatable": dest.route_to,
        }
        template = self._env.from_string(context.content)
        context.content = template.render(variables)
        return context
