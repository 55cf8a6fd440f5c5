"""Tests for arbor.pages.chain — template lookup and chain ordering."""

import logging

import pytest

from arbor.pages.chain import MetaTemplateLookup, TemplateChainResolver
from arbor.pages.types import Block, Page
from arbor.tree.node import Node


def _template(parent: Node, path: str = "default.template") -> Node:
    node = Node(parent, path)
    node.render_info["page"] = Page.from_blocks(Block("content", "{content}"))
    return node


@pytest.fixture
def resolver() -> TemplateChainResolver:
    return TemplateChainResolver(MetaTemplateLookup())


class TestMetaTemplateLookup:
    def test_directory_default_template(self) -> None:
        root = Node(None, "")
        template = _template(root)
        assert MetaTemplateLookup().template_for(root) is template

    def test_file_has_no_default_template(self) -> None:
        root = Node(None, "")
        _template(root)
        page = Node(root, "page.html")
        assert MetaTemplateLookup().template_for(page) is None

    def test_explicit_none(self) -> None:
        root = Node(None, "", meta_info={"template": None})
        _template(root)
        assert MetaTemplateLookup().template_for(root) is None

    def test_string_declaration(self) -> None:
        root = Node(None, "")
        layouts = Node(root, "layouts/")
        alt = _template(layouts, "alt.template")
        docs = Node(root, "docs/", meta_info={"template": "../layouts/alt.template"})
        assert MetaTemplateLookup().template_for(docs) is alt

    def test_node_declaration(self) -> None:
        root = Node(None, "")
        alt = _template(root, "alt.template")
        docs = Node(root, "docs/", meta_info={"template": alt})
        assert MetaTemplateLookup().template_for(docs) is alt

    def test_unresolvable_declaration_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        root = Node(None, "", meta_info={"template": "missing.template"})
        with caplog.at_level(logging.WARNING, logger="arbor.templates"):
            assert MetaTemplateLookup().template_for(root) is None
        assert "missing.template" in caplog.text

    def test_custom_default_name(self) -> None:
        root = Node(None, "")
        layout = _template(root, "layout.html")
        assert MetaTemplateLookup("layout.html").template_for(root) is layout


class TestTemplateChainResolver:
    def test_no_templates(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        docs = Node(root, "docs/", meta_info={"orderInfo": 1})
        page = Node(docs, "page", meta_info={"title": "Page"})
        assert resolver.resolve(page) == (page,)
        assert resolver.templates_for(page) == ()

    def test_root_first_page_last(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        root_template = _template(root)
        docs = Node(root, "docs/")
        docs_template = _template(docs)
        page = Node(docs, "page.html")
        assert resolver.resolve(page) == (root_template, docs_template, page)

    def test_ancestors_without_template_skipped(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        root_template = _template(root)
        plain = Node(root, "plain/", meta_info={"template": None})
        deeper = Node(plain, "deeper/")
        page = Node(deeper, "page.html")
        assert resolver.resolve(page) == (root_template, page)

    def test_repeated_template_collapsed(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        root_template = _template(root)
        docs = Node(root, "docs/", meta_info={"template": root_template})
        page = Node(docs, "page.html")
        assert resolver.resolve(page) == (root_template, page)

    def test_template_not_wrapped_in_itself(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        root_template = _template(root)
        docs = Node(root, "docs/")
        docs_template = _template(docs)
        assert resolver.resolve(docs_template) == (root_template, docs_template)
        assert resolver.resolve(root_template) == (root_template,)

    def test_chain_recomputed_per_call(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        page = Node(root, "page.html")
        assert resolver.resolve(page) == (page,)
        template = _template(root)
        assert resolver.resolve(page) == (template, page)

    def test_custom_lookup(self) -> None:
        root = Node(None, "")
        docs = Node(root, "docs/")
        page = Node(docs, "page.html")
        layout = Node(root, "layout.html")

        class OnlyDocs:
            def template_for(self, node: Node) -> Node | None:
                return layout if node is docs else None

        assert TemplateChainResolver(OnlyDocs()).resolve(page) == (layout, page)

    def test_page_declares_own_template(self, resolver: TemplateChainResolver) -> None:
        root = Node(None, "")
        special = _template(root, "special.template")
        page = Node(root, "page.html", meta_info={"template": "special.template"})
        assert resolver.resolve(page) == (special, page)

    def test_own_template_replaces_inherited_chain(
        self, resolver: TemplateChainResolver
    ) -> None:
        root = Node(None, "")
        root_template = _template(root)
        docs = Node(root, "docs/")
        _template(docs)
        layouts = Node(root, "layouts/", meta_info={"template": None})
        special = _template(layouts, "special.template")
        page = Node(docs, "page.html", meta_info={"template": "/layouts/special.template"})
        assert resolver.resolve(page) == (root_template, special, page)

    def test_declared_template_follows_its_own_declaration(
        self, resolver: TemplateChainResolver
    ) -> None:
        root = Node(None, "", meta_info={"template": None})
        base = _template(root, "base.template")
        article = _template(root, "article.template")
        article["template"] = "base.template"
        page = Node(root, "page.html", meta_info={"template": "article.template"})
        assert resolver.resolve(page) == (base, article, page)

    def test_declaration_cycle_logged(
        self, resolver: TemplateChainResolver, caplog: pytest.LogCaptureFixture
    ) -> None:
        root = Node(None, "", meta_info={"template": None})
        first = _template(root, "first.template")
        second = _template(root, "second.template")
        first["template"] = "second.template"
        second["template"] = "first.template"
        page = Node(root, "page.html", meta_info={"template": "first.template"})
        with caplog.at_level(logging.WARNING, logger="arbor.templates"):
            assert resolver.resolve(page) == (second, first, page)
        assert "cycle" in caplog.text

    def test_directory_declaration_not_applied_to_itself(
        self, resolver: TemplateChainResolver
    ) -> None:
        root = Node(None, "")
        root_template = _template(root)
        docs = Node(root, "docs/")
        _template(docs)
        assert resolver.resolve(docs) == (root_template, docs)
