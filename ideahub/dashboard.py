"""Dashboard orchestrator: owns UI state and wires view intents to commands."""
import logging
from typing import Any, List, Mapping, Optional

from .cache import QueryCache, QueryResult
from .commands import (
    AddCommentCommand, CommentIntent, CreateIdeaCommand, IdeaCreated,
    MutationResult, VoteCommand, VoteIntent
)
from .forms import NewIdeaForm, validate_comment
from .models import VoteType
from .notifications import Notifier
from .queries import IdeaListQuery
from .schemas import FileUpload, Idea, IdeaFormData, UserAuth
from .store import FileStorage, RemoteStore
from .views import DEFAULT_INTENTS, CardIntents, render_page

logger = logging.getLogger(__name__)

IDEA_SUBMITTED = "Idea submitted successfully!"
IDEA_FAILED = "Failed to submit idea. Please try again."
ATTACHMENTS_FAILED = "Your idea was submitted, but its attachments could not be saved."
VOTE_FAILED = "Failed to vote. Please try again."
COMMENT_ADDED = "Comment added."
COMMENT_FAILED = "Failed to add comment. Please try again."


class Dashboard:
    """
    Per-user dashboard session.

    Holds the modal flag, the new idea form, the comment composer, the
    toast queue and the observation of the idea list query. All server
    interaction goes through the query and command objects.
    """

    def __init__(
        self,
        user: UserAuth,
        store: RemoteStore,
        storage: FileStorage,
        cache: Optional[QueryCache] = None,
        notifier: Optional[Notifier] = None,
        intents: CardIntents = DEFAULT_INTENTS
    ):
        self.user = user
        self.store = store
        self.cache = cache or QueryCache()
        self.notifier = notifier or Notifier()
        self.intents = intents

        self.is_new_idea_modal_open = False
        self.form = NewIdeaForm()
        self.comment_target: Optional[str] = None
        self.comment_draft = ""
        self.comment_errors = {}

        self.ideas_query = IdeaListQuery(store, self.cache)
        self._unobserve = self.ideas_query.observe()

        self.create_idea = CreateIdeaCommand(
            store, self.cache, storage, user.user_id,
            on_success=self._on_idea_created,
            on_error=self._on_idea_failed
        )
        self.vote = VoteCommand(
            store, self.cache, user.user_id,
            on_error=self._on_vote_failed
        )
        self.add_comment = AddCommentCommand(
            store, self.cache, user.user_id,
            on_success=self._on_comment_added,
            on_error=self._on_comment_failed
        )

    # Query

    async def load(self, force: bool = False) -> QueryResult:
        """Fetch the idea list if it is stale (or always, with ``force``)."""
        return await self.ideas_query.load(force=force)

    @property
    def ideas(self) -> Optional[List[Idea]]:
        result = self.ideas_query.result
        return None if result.is_error else result.data

    # Modal

    def open_new_idea_modal(self):
        self.is_new_idea_modal_open = True

    def close_new_idea_modal(self):
        self.is_new_idea_modal_open = False

    # Idea submission

    def _on_idea_created(self, created: IdeaCreated, variables: IdeaFormData):
        self.close_new_idea_modal()
        self.notifier.success(IDEA_SUBMITTED)
        if created.attachments_failed:
            self.notifier.error(ATTACHMENTS_FAILED)

    def _on_idea_failed(self, error: Exception, variables: IdeaFormData):
        self.notifier.error(IDEA_FAILED)
        logger.error(f"Error creating idea: {error}")

    async def _dispatch_create(self, payload: IdeaFormData) -> bool:
        result = await self.create_idea.mutate(payload)
        return result.ok

    async def submit_new_idea(self, values: Mapping[str, Any], attachments: Optional[List[FileUpload]] = None) -> bool:
        """Validate the form input and create the idea. Returns True on success."""
        self.form.update(values, attachments)
        return await self.form.submit(self._dispatch_create)

    # Voting

    def _on_vote_failed(self, error: Exception, variables: VoteIntent):
        self.notifier.error(VOTE_FAILED)
        logger.error(f"Error voting: {error}")

    async def handle_vote(self, idea_id: str, direction: VoteType) -> MutationResult:
        return await self.vote.mutate(VoteIntent(idea_id=idea_id, type=VoteType(direction)))

    # Comments

    def handle_comment(self, idea_id: str):
        """Open the comment composer under ``idea_id``; a second click closes it."""
        if self.comment_target == idea_id:
            self.comment_target = None
        else:
            self.comment_target = idea_id
            self.comment_draft = ""
        self.comment_errors = {}
        logger.debug(f"Comment composer target: {self.comment_target}")

    def _on_comment_added(self, comment, variables: CommentIntent):
        self.comment_draft = ""
        self.comment_errors = {}
        self.notifier.success(COMMENT_ADDED)

    def _on_comment_failed(self, error: Exception, variables: CommentIntent):
        self.notifier.error(COMMENT_FAILED)
        logger.error(f"Error adding comment: {error}")

    async def submit_comment(self, idea_id: str, content: Optional[str]) -> bool:
        self.comment_target = idea_id
        self.comment_draft = content or ""
        self.comment_errors = validate_comment(content)
        if self.comment_errors:
            return False
        result = await self.add_comment.mutate(CommentIntent(idea_id=idea_id, content=content.strip()))
        return result.ok

    # Rendering

    def render(self) -> str:
        """
        Render the page and drain pending toasts.

        Form posts await their command before redirecting, so vote and
        comment buttons only render disabled for a page served while another
        request of the same session still has that command in flight.
        """
        return render_page(
            "dashboard.html",
            user=self.user,
            query=self.ideas_query.result,
            ideas=self.ideas,
            modal_open=self.is_new_idea_modal_open,
            form=self.form,
            intents=self.intents,
            voting_disabled=self.vote.is_pending,
            comment_target=self.comment_target,
            comment_draft=self.comment_draft,
            comment_errors=self.comment_errors,
            is_commenting=self.add_comment.is_pending,
            toasts=self.notifier.drain(),
        )

    def close(self):
        self._unobserve()
