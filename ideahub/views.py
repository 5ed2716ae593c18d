"""Presentational views rendered with Jinja2. Views never talk to the store."""
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .forms import CATEGORY_LABELS
from .models import IdeaStatus
from .schemas import Idea

logger = logging.getLogger(__name__)

# Setup templates
TEMPLATES_DIR = Path(__file__).parent / "templates"

STATUS_STYLES = {
    IdeaStatus.PENDING.value: "warning",
    IdeaStatus.APPROVED.value: "success",
    IdeaStatus.REJECTED.value: "danger",
    IdeaStatus.IMPLEMENTED.value: "info",
}
FALLBACK_STATUS_STYLE = "secondary"


@dataclass(frozen=True)
class Badge:
    style: str
    label: str

    @property
    def css_class(self) -> str:
        return f"badge badge-{self.style}"


def status_badge(status: str) -> Badge:
    """Badge for an idea status; unknown statuses get the neutral style."""
    style = STATUS_STYLES.get(status)
    if style is None:
        logger.warning(f"No badge style for idea status '{status}'")
        style = FALLBACK_STATUS_STYLE
    return Badge(style=style, label=status)


def format_date(value: Optional[datetime]) -> str:
    """Format as ``MMM d, yyyy``, e.g. ``Mar 5, 2024``."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


@dataclass(frozen=True)
class CardIntents:
    """Form targets for the intents an idea card emits."""
    vote: Callable[[str], str]
    comment: Callable[[str], str]


DEFAULT_INTENTS = CardIntents(
    vote=lambda idea_id: f"/ideas/{idea_id}/vote",
    comment=lambda idea_id: f"/ideas/{idea_id}/comment",
)


def build_environment() -> Environment:
    environment = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True
    )
    environment.filters["format_date"] = format_date
    environment.globals["status_badge"] = status_badge
    environment.globals["category_labels"] = {
        category.value: label for category, label in CATEGORY_LABELS.items()
    }
    return environment


templates = build_environment()


def render_idea_card(idea: Idea, intents: CardIntents = DEFAULT_INTENTS, voting_disabled: bool = False) -> str:
    """Render one idea with its vote and comment intents."""
    template = templates.get_template("partials/idea_card.html")
    return template.render(idea=idea, intents=intents, voting_disabled=voting_disabled)


def render_page(template_name: str, **context) -> str:
    return templates.get_template(template_name).render(**context)
