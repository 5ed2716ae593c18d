"""Unit tests for status badges, date formatting and the idea card view."""
from datetime import datetime, timezone

import pytest

from ideahub.cache import QueryResult, QueryStatus
from ideahub.forms import NewIdeaForm
from ideahub.schemas import Idea
from ideahub.views import (
    DEFAULT_INTENTS, FALLBACK_STATUS_STYLE, CardIntents, format_date, render_idea_card, render_page, status_badge
)


def make_idea(**overrides):
    data = {
        "id": "idea-1",
        "title": "Better coffee",
        "description": "Upgrade the break room machine",
        "category": "employee-experience",
        "status": "pending",
        "votes": 7,
        "created_at": datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc),
        "user_id": "user-alice",
        "user": {
            "id": "user-alice", "email": "alice@company.com",
            "full_name": "Alice Johnson", "department": "Operations", "role": "admin",
        },
    }
    data.update(overrides)
    return Idea.model_validate(data)


class TestStatusBadge:
    """Test cases for status to badge mapping."""

    @pytest.mark.parametrize("status,style", [
        ("pending", "warning"),
        ("approved", "success"),
        ("rejected", "danger"),
        ("implemented", "info"),
    ])
    def test_known_statuses(self, status, style):
        badge = status_badge(status)

        assert badge.style == style
        assert badge.label == status
        assert badge.css_class == f"badge badge-{style}"

    def test_unknown_status_uses_fallback(self):
        badge = status_badge("archived")

        assert badge.style == FALLBACK_STATUS_STYLE
        assert badge.css_class == "badge badge-secondary"
        assert badge.label == "archived"


class TestFormatDate:
    """Test cases for the card date format."""

    def test_single_digit_day(self):
        assert format_date(datetime(2024, 3, 5)) == "Mar 5, 2024"

    def test_two_digit_day(self):
        assert format_date(datetime(2023, 12, 25, 23, 59)) == "Dec 25, 2023"

    def test_none(self):
        assert format_date(None) == ""


class TestIdeaCard:
    """Test cases for the rendered idea card."""

    def test_card_content(self):
        html = render_idea_card(make_idea())

        assert "Better coffee" in html
        assert "Upgrade the break room machine" in html
        assert "by Alice Johnson" in html
        assert "Mar 5, 2024" in html
        assert "7 votes" in html
        assert "0 comments" in html
        assert 'class="badge badge-warning">pending</span>' in html

    def test_implemented_badge(self):
        html = render_idea_card(make_idea(status="implemented"))

        assert '<span class="badge badge-info">implemented</span>' in html

    def test_unknown_status_badge(self):
        html = render_idea_card(make_idea(status="on-hold"))

        assert '<span class="badge badge-secondary">on-hold</span>' in html

    def test_missing_author(self):
        html = render_idea_card(make_idea(user=None))

        assert "by Unknown author" in html

    def test_attachment_links(self):
        html = render_idea_card(make_idea(attachments=[{
            "id": "att-1", "file_name": "plan.pdf", "file_url": "/files/user-alice/plan.pdf",
            "file_type": "application/pdf", "idea_id": "idea-1",
            "created_at": datetime(2024, 3, 5, tzinfo=timezone.utc),
        }]))

        assert "Attachments:" in html
        assert 'href="/files/user-alice/plan.pdf"' in html
        assert 'target="_blank"' in html
        assert ">plan.pdf</a>" in html

    def test_no_attachment_section_without_files(self):
        assert "Attachments:" not in render_idea_card(make_idea())

    def test_comment_count(self):
        comments = [
            {"id": f"c-{i}", "content": "hi", "created_at": datetime(2024, 3, 6, tzinfo=timezone.utc),
             "user_id": "user-bob", "idea_id": "idea-1"}
            for i in range(2)
        ]

        assert "2 comments" in render_idea_card(make_idea(comments=comments))

    def test_intents_target_the_idea(self):
        intents = CardIntents(vote=lambda i: f"/v/{i}", comment=lambda i: f"/c/{i}")

        html = render_idea_card(make_idea(), intents=intents)

        assert 'action="/v/idea-1"' in html
        assert 'action="/c/idea-1"' in html
        assert 'name="direction" value="up"' in html
        assert 'name="direction" value="down"' in html

    def test_voting_disabled(self):
        html = render_idea_card(make_idea(), voting_disabled=True)

        assert html.count(" disabled") == 2

    def test_content_is_escaped(self):
        html = render_idea_card(make_idea(title="<script>alert(1)</script>"))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestDashboardPage:
    """Test cases for the page template states."""

    def render(self, **overrides):
        context = {
            "user": None,
            "query": QueryResult(status=QueryStatus.SUCCESS, data=[]),
            "ideas": [],
            "modal_open": False,
            "form": NewIdeaForm(),
            "intents": DEFAULT_INTENTS,
            "voting_disabled": False,
            "comment_target": None,
            "comment_draft": "",
            "comment_errors": {},
            "is_commenting": False,
            "toasts": [],
        }
        context.update(overrides)
        return render_page("dashboard.html", **context)

    def test_empty_list(self):
        assert "No ideas yet" in self.render()

    def test_loading(self):
        html = self.render(query=QueryResult(status=QueryStatus.LOADING), ideas=None)

        assert "Loading..." in html

    def test_error_state(self):
        html = self.render(query=QueryResult(status=QueryStatus.ERROR, error=RuntimeError("x")), ideas=None)

        assert "Could not load ideas" in html
        assert "Loading..." not in html

    def test_modal_only_when_open(self):
        assert "Submit New Idea" not in self.render()
        html = self.render(modal_open=True)
        assert "Submit New Idea" in html
        assert 'enctype="multipart/form-data"' in html
        assert "Submit Idea" in html
