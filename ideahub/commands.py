"""Write side: commands that insert rows and invalidate the idea list."""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import ValidationError as SchemaValidationError

from .cache import QueryCache
from .errors import RemoteStoreError, RemoteWriteError
from .models import VoteType
from .queries import IDEAS_QUERY_KEY
from .schemas import (
    Attachment, AttachmentCreate, Comment, CommentCreate, FileUpload, Idea,
    IdeaCreate, IdeaFormData, Vote, VoteCreate
)
from .store import FileStorage, RemoteStore, attachment_path

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class MutationResult:
    ok: bool
    data: Any = None
    error: Optional[Exception] = None


class Mutation(Generic[V]):
    """
    Base class for commands.

    ``mutate`` never raises for remote failures: a RemoteWriteError is logged,
    passed to ``on_error`` and returned in the result. On success the idea
    list query is invalidated before ``on_success`` runs. ``is_pending``
    stays true until every overlapping call has finished.
    """

    name = "mutation"

    def __init__(
        self,
        store: RemoteStore,
        cache: QueryCache,
        on_success: Optional[Callable[[Any, V], None]] = None,
        on_error: Optional[Callable[[Exception, V], None]] = None
    ):
        self.store = store
        self.cache = cache
        self.on_success = on_success
        self.on_error = on_error
        self._in_flight = 0
        self.last_error: Optional[Exception] = None

    @property
    def is_pending(self) -> bool:
        return self._in_flight > 0

    async def mutation_fn(self, variables: V) -> Any:
        raise NotImplementedError

    async def mutate(self, variables: V) -> MutationResult:
        self._in_flight += 1
        try:
            data = await self.mutation_fn(variables)
        except RemoteWriteError as e:
            logger.error(f"Error in {self.name}: {e}")
            self.last_error = e
            if self.on_error:
                self.on_error(e, variables)
            return MutationResult(ok=False, error=e)
        finally:
            self._in_flight -= 1

        self.last_error = None
        await self.cache.invalidate(IDEAS_QUERY_KEY)
        if self.on_success:
            self.on_success(data, variables)
        return MutationResult(ok=True, data=data)


@dataclass
class IdeaCreated:
    idea: Idea
    attachments: List[Attachment] = field(default_factory=list)
    attachments_failed: bool = False


class CreateIdeaCommand(Mutation[IdeaFormData]):
    """
    Insert a validated idea.

    Files are uploaded before the idea row is written, so a failed upload
    leaves no row behind. Attachment rows are written in one bulk insert
    after the idea; if that insert fails the idea is kept and the result
    reports ``attachments_failed``.
    """

    name = "create idea"

    def __init__(self, store: RemoteStore, cache: QueryCache, storage: FileStorage, user_id: str, **hooks):
        super().__init__(store, cache, **hooks)
        self.storage = storage
        self.user_id = user_id

    async def _upload(self, files: List[FileUpload]) -> List[dict]:
        uploaded = []
        for upload in files:
            path = attachment_path(self.user_id, upload.filename)
            try:
                url = await self.storage.upload(path, upload.content, upload.content_type)
            except RemoteStoreError as e:
                raise RemoteWriteError(f"Could not upload {upload.filename}") from e
            uploaded.append({
                "file_name": upload.filename,
                "file_url": url,
                "file_type": upload.content_type,
            })
        return uploaded

    async def mutation_fn(self, variables: IdeaFormData) -> IdeaCreated:
        uploaded = await self._upload(variables.attachments)

        row = IdeaCreate(
            title=variables.title,
            description=variables.description,
            category=variables.category,
            user_id=self.user_id
        ).to_row()
        try:
            created = await self.store.insert("ideas", row)
            idea = Idea.model_validate(created)
        except (RemoteStoreError, SchemaValidationError) as e:
            raise RemoteWriteError("Could not create idea") from e
        logger.info(f"Created idea {idea.id} by user {self.user_id}")

        result = IdeaCreated(idea=idea)
        if not uploaded:
            return result

        rows = [AttachmentCreate(idea_id=idea.id, **item).to_row() for item in uploaded]
        try:
            created_rows = await self.store.insert_many("attachments", rows)
            result.attachments = [Attachment.model_validate(item) for item in created_rows]
        except (RemoteStoreError, SchemaValidationError) as e:
            logger.error(f"Idea {idea.id} created but its attachments were not saved: {e}")
            result.attachments_failed = True
        return result


@dataclass(frozen=True)
class VoteIntent:
    idea_id: str
    type: VoteType = VoteType.UP


class VoteCommand(Mutation[VoteIntent]):
    """Insert one vote row per call. Repeat votes are not filtered out here."""

    name = "vote"

    def __init__(self, store: RemoteStore, cache: QueryCache, user_id: str, **hooks):
        super().__init__(store, cache, **hooks)
        self.user_id = user_id

    async def mutation_fn(self, variables: VoteIntent) -> Vote:
        try:
            row = VoteCreate(idea_id=variables.idea_id, user_id=self.user_id, type=variables.type).to_row()
            created = await self.store.insert("votes", row)
            vote = Vote.model_validate(created)
        except (RemoteStoreError, SchemaValidationError) as e:
            raise RemoteWriteError(f"Could not vote on idea {variables.idea_id}") from e
        logger.info(f"Vote {vote.type.value} cast by user {self.user_id} on idea {vote.idea_id}")
        return vote


@dataclass(frozen=True)
class CommentIntent:
    idea_id: str
    content: str


class AddCommentCommand(Mutation[CommentIntent]):
    """Append a comment to an idea."""

    name = "add comment"

    def __init__(self, store: RemoteStore, cache: QueryCache, user_id: str, **hooks):
        super().__init__(store, cache, **hooks)
        self.user_id = user_id

    async def mutation_fn(self, variables: CommentIntent) -> Comment:
        try:
            row = CommentCreate(
                idea_id=variables.idea_id,
                user_id=self.user_id,
                content=variables.content
            ).to_row()
            created = await self.store.insert("comments", row)
            comment = Comment.model_validate(created)
        except (RemoteStoreError, SchemaValidationError) as e:
            raise RemoteWriteError(f"Could not comment on idea {variables.idea_id}") from e
        logger.info(f"Comment {comment.id} added by user {self.user_id} on idea {comment.idea_id}")
        return comment
