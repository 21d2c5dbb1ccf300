# src/court_radar/tests/test_outreach.py
"""
Unit tests for outreach email drafting.
"""
import pytest

from court_radar.outreach import compose_outreach_email, text_to_html
from court_radar.repository import InMemoryDataSource


@pytest.fixture
def miller():
    return InMemoryDataSource().get_prospect("501")


class TestComposeOutreachEmail:
    """Tests for compose_outreach_email."""

    @pytest.mark.unit
    def test_subject(self, miller):
        email = compose_outreach_email(miller)
        assert email.subject == (
            "Regarding Your Property's Tennis Court at "
            "6548 E Ironwood Dr, Paradise Valley, AZ"
        )

    @pytest.mark.unit
    def test_default_body(self, miller):
        email = compose_outreach_email(miller)
        text = email.text_content

        assert text.startswith("Dear Robert Miller,\n\n")
        assert "My name is Mike, and I represent Elite Sports Builders" in text
        assert "your beautiful Tennis court" in text
        assert text.endswith("Best regards,\nMike Woelfel\nElite Sports Builders")
        assert email.recipient == "Robert Miller"
        assert email.prospect_id == "501"

    @pytest.mark.unit
    def test_custom_sender(self, miller):
        email = compose_outreach_email(miller, sender_name="Dana Cruz", company="Desert Courts")
        assert "My name is Dana, and I represent Desert Courts" in email.text_content
        assert email.text_content.endswith("Dana Cruz\nDesert Courts")

    @pytest.mark.unit
    def test_html_uses_line_breaks(self, miller):
        email = compose_outreach_email(miller)
        assert "\n" not in email.html_content
        assert email.html_content.startswith("Dear Robert Miller,<br><br>")

    @pytest.mark.unit
    def test_non_residential_rejected(self):
        court = InMemoryDataSource().get_prospect("1")
        with pytest.raises(ValueError):
            compose_outreach_email(court)

    @pytest.mark.unit
    def test_to_dict(self, miller):
        data = compose_outreach_email(miller).to_dict()
        assert set(data) == {
            "prospect_id", "recipient", "subject",
            "text_content", "html_content", "generated_at",
        }


class TestTextToHtml:
    """Tests for text_to_html."""

    @pytest.mark.unit
    def test_escapes_markup(self):
        assert text_to_html("C&S <b>\nok") == "C&amp;S &lt;b&gt;<br>ok"
