"""Unit tests for the template catalog helpers."""

import uuid

from app.db.models import Template, TemplateLanguage
from app.services.catalog import (
    collect_tags,
    exclude_hidden,
    filter_templates,
    main_content_language,
    normalize_shortcut,
    normalize_tags,
    order_by_pins,
    replace_main_content,
    resolve_main_content,
    set_template_content,
)


def make_template(title="Refund", content="Hi {name}", **kwargs) -> Template:
    template = Template(title=title, content="", **kwargs)
    set_template_content(template, content)
    return template


def test_normalize_tags():
    assert normalize_tags([" VIP", "refund", "vip", "", "  "]) == ["vip", "refund"]


def test_normalize_shortcut():
    assert normalize_shortcut("  /refund ") == "/refund"
    assert normalize_shortcut("   ") is None
    assert normalize_shortcut(None) is None


def test_resolve_main_content_prefers_language_order():
    assert resolve_main_content({"en": "Hello", "es": "Hola"}) == "Hola"
    assert resolve_main_content({"es": "  ", "fr": "Bonjour"}) == "Bonjour"
    assert resolve_main_content({}) == ""


class TestReplaceMainContent:
    """Replacing the canonical body leaves other languages alone."""

    def test_replaces_first_non_blank_language(self):
        template = make_template()
        set_template_content(template, "Hola", {"en": "Hello", "fr": "Bonjour", "es": "Hola"})

        assert main_content_language(template) == "es"
        assert replace_main_content(template, "Hola {x}") == {
            "es": "Hola {x}",
            "en": "Hello",
            "fr": "Bonjour",
        }

    def test_falls_back_to_template_language(self):
        template = make_template(language=TemplateLanguage.DE)

        assert main_content_language(template) == "de"
        assert replace_main_content(template, "Hallo {x}") == {"de": "Hallo {x}"}

    def test_does_not_mutate_stored_content(self):
        template = make_template()
        set_template_content(template, "Hello", {"en": "Hello"})

        replace_main_content(template, "Hi")

        assert template.localized_content == {"en": "Hello"}


class TestSetTemplateContent:
    """Variables always follow the content they were derived from."""

    def test_derives_variables(self):
        template = make_template(content="{order} for {name} ({order})")
        assert template.variables == ["order", "name"]

    def test_rederives_after_edit(self):
        template = make_template(content="Hi {name}")
        set_template_content(template, "Order {order}")
        assert template.variables == ["order"]

    def test_drops_blank_localized_entries(self):
        template = make_template()
        set_template_content(template, "Hola {x}", {"es": "Hola {x}", "en": ""})
        assert template.localized_content == {"es": "Hola {x}"}

    def test_localized_content_untouched_when_omitted(self):
        template = make_template()
        set_template_content(template, "Hola", {"es": "Hola"})
        set_template_content(template, "Hola {x}")
        assert template.localized_content == {"es": "Hola"}


class TestFilterTemplates:
    """Test suite for filter_templates."""

    def setup_method(self):
        self.category_id = uuid.uuid4()
        self.refund = make_template(
            title="Refund issued",
            content="Your refund for {order} is on its way",
            tags=["refund", "vip"],
            shortcut="/refund",
            language=TemplateLanguage.EN,
            category_id=self.category_id,
        )
        self.greeting = make_template(
            title="Saludo",
            content="Hola {nombre}",
            tags=["greeting"],
            language=TemplateLanguage.ES,
        )
        self.templates = [self.refund, self.greeting]

    def test_no_filters(self):
        assert filter_templates(self.templates) == self.templates

    def test_search_is_case_insensitive_over_title(self):
        assert filter_templates(self.templates, search="SALUDO") == [self.greeting]

    def test_search_matches_content_shortcut_and_tags(self):
        assert filter_templates(self.templates, search="on its way") == [self.refund]
        assert filter_templates(self.templates, search="/ref") == [self.refund]
        assert filter_templates(self.templates, search="greet") == [self.greeting]

    def test_language(self):
        assert filter_templates(self.templates, language="ES") == [self.greeting]

    def test_category(self):
        assert filter_templates(self.templates, category_id=self.category_id) == [self.refund]

    def test_all_tags_required(self):
        assert filter_templates(self.templates, tags=["refund", "vip"]) == [self.refund]
        assert filter_templates(self.templates, tags=["refund", "greeting"]) == []

    def test_tags_ignore_case(self):
        assert filter_templates(self.templates, tags=["VIP", " Refund "]) == [self.refund]

        legacy = make_template(title="Legacy", tags=["Shipping"])
        assert filter_templates([legacy], tags=["shipping"]) == [legacy]


def test_collect_tags():
    templates = [make_template(tags=["b", "a"]), make_template(tags=["a", "c"])]
    assert collect_tags(templates) == ["a", "b", "c"]


def test_order_by_pins_keeps_relative_order():
    first, second, third = make_template(), make_template(), make_template()
    ordered = order_by_pins([first, second, third], [str(third.id), str(second.id)])
    assert ordered == [second, third, first]


def test_exclude_hidden():
    visible, hidden = make_template(), make_template()
    assert exclude_hidden([visible, hidden], [str(hidden.id)]) == [visible]
