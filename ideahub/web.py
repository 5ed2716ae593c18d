"""Web routes that turn form posts into dashboard intents."""
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import UploadFile

from .auth import get_current_user
from .backends import Backends
from .dashboard import Dashboard
from .models import VoteType
from .schemas import FileUpload, UserAuth

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


class DashboardSessions:
    """In-memory dashboard per user. A new access token starts a new session."""

    def __init__(self, backends: Backends):
        self.backends = backends
        self._sessions: Dict[str, Dashboard] = {}

    def get(self, user: UserAuth) -> Dashboard:
        dashboard = self._sessions.get(user.user_id)
        if dashboard is not None and dashboard.user.access_token == user.access_token:
            return dashboard
        if dashboard is not None:
            dashboard.close()
        dashboard = Dashboard(
            user=user,
            store=self.backends.store_for(user),
            storage=self.backends.storage_for(user)
        )
        self._sessions[user.user_id] = dashboard
        logger.info(f"Started dashboard session for user {user.user_id}")
        return dashboard

    def __len__(self):
        return len(self._sessions)


def get_dashboard(request: Request, user: UserAuth = Depends(get_current_user)) -> Dashboard:
    return request.app.state.sessions.get(user)


def back_to_dashboard(anchor: str = "") -> RedirectResponse:
    return RedirectResponse(url=f"/{anchor}", status_code=303)


async def read_uploads(files: List) -> List[FileUpload]:
    """Convert multipart parts to FileUpload, skipping empty file pickers."""
    uploads = []
    for item in files:
        if not isinstance(item, UploadFile) or not item.filename:
            continue
        uploads.append(FileUpload(
            filename=item.filename,
            content=await item.read(),
            content_type=item.content_type or "application/octet-stream"
        ))
    return uploads


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(dashboard: Dashboard = Depends(get_dashboard)):
    """Render the ideas dashboard."""
    await dashboard.load()
    return HTMLResponse(dashboard.render())


@router.post("/ideas/new")
async def open_new_idea_modal(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.open_new_idea_modal()
    return back_to_dashboard()


@router.post("/ideas/cancel")
async def close_new_idea_modal(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.close_new_idea_modal()
    return back_to_dashboard()


@router.post("/ideas")
async def submit_idea(request: Request, dashboard: Dashboard = Depends(get_dashboard)):
    """Submit the new idea form (multipart, attachments optional)."""
    form = await request.form()
    values = {name: form.get(name, "") for name in ("title", "category", "description")}
    attachments = await read_uploads(form.getlist("attachments"))
    await dashboard.submit_new_idea(values, attachments)
    return back_to_dashboard()


@router.post("/ideas/{idea_id}/vote")
async def vote_on_idea(
    idea_id: str,
    direction: VoteType = Form(...),
    dashboard: Dashboard = Depends(get_dashboard)
):
    await dashboard.handle_vote(idea_id, direction)
    return back_to_dashboard(f"#idea-{idea_id}")


@router.post("/ideas/{idea_id}/comment")
async def open_comment_composer(idea_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.handle_comment(idea_id)
    return back_to_dashboard(f"#idea-{idea_id}")


@router.post("/ideas/{idea_id}/comments")
async def submit_comment(
    idea_id: str,
    content: str = Form(""),
    dashboard: Dashboard = Depends(get_dashboard)
):
    await dashboard.submit_comment(idea_id, content)
    return back_to_dashboard(f"#idea-{idea_id}")
