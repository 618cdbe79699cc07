"""Tests for Liquid page and email templates."""

import pytest

from passentry.core.modules.mail.rendering import LiquidTemplateRenderer

SITE_VALUES = {"site_name": "Example Site", "site_url": "https://example.com", "email_key": "ple_email"}


@pytest.fixture
def renderer():
    return LiquidTemplateRenderer(SITE_VALUES)


class TestLiquidTemplateRenderer:
    def test_email_template(self, renderer):
        html = renderer.render(
            "email",
            {"name": "Alice", "link": "https://auth.example.com/entry?ple_key=abc&ple=true", "minutes": 5},
        )
        assert "Hi Alice," in html
        assert "Example Site" in html
        assert "expires in 5 minutes" in html
        # The link lands inside an href, so the ampersand is escaped
        assert "https://auth.example.com/entry?ple_key=abc&amp;ple=true" in html

    def test_request_form_uses_email_parameter(self, renderer):
        html = renderer.render("request")
        assert 'name="ple_email"' in html
        assert 'method="post"' in html

    @pytest.mark.parametrize("view", ["request", "requested", "success"])
    def test_views_render_site_name(self, renderer, view):
        assert "Example Site" in renderer.render(view)

    def test_site_values_take_precedence(self, renderer):
        html = renderer.render("success", {"site_name": "Spoofed"})
        assert "Spoofed" not in html
        assert "Example Site" in html

    def test_values_are_escaped(self, renderer):
        html = renderer.render("email", {"name": "<script>x</script>", "link": "https://e.com", "minutes": 5})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_unknown_template_raises(self, renderer):
        with pytest.raises(ValueError, match="Failed to render template 'missing'"):
            renderer.render("missing")
