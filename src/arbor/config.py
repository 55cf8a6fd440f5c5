"""Site configuration.

SiteConfig is a frozen dataclass — immutable for the length of a build
run, IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Configuration for one build run. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(root_path="out/", default_lang="de")
    """

    # Tree
    root_path: str = ""

    # Pages
    default_lang: str = "en"
    output_extension: str = "html"
    default_block: str = "content"

    # Templates
    default_template: str = "default.template"
    autoescape: bool = False  # Block content is already HTML
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Markdown
    markdown_plugins: tuple[str, ...] = ()  # Empty means all patitas plugins
    highlight: bool = False
