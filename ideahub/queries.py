"""Read side: the idea list query."""
import logging
from typing import List

from pydantic import ValidationError as SchemaValidationError

from .cache import QueryCache, QueryResult
from .errors import RemoteReadError, RemoteStoreError
from .schemas import Idea
from .store import Embed, Order, RemoteStore, Select

logger = logging.getLogger(__name__)

IDEAS_QUERY_KEY = ("ideas",)

IDEA_LIST_SELECT = Select(
    table="ideas",
    embeds=(
        Embed("user", "users"),
        Embed("comments", "comments", embeds=(Embed("user", "users"),)),
        Embed("attachments", "attachments"),
    ),
    order=Order("created_at", ascending=False),
)


class IdeaListQuery:
    """All ideas with author, comments and attachments, newest first."""

    key = IDEAS_QUERY_KEY

    def __init__(self, store: RemoteStore, cache: QueryCache):
        self.store = store
        self.cache = cache

    async def fetch_ideas(self) -> List[Idea]:
        """Run the select against the store. Raises RemoteReadError; never returns partial data."""
        try:
            rows = await self.store.select(IDEA_LIST_SELECT)
        except RemoteStoreError as e:
            logger.error(f"Error fetching ideas: {e}")
            raise RemoteReadError("Could not load ideas") from e

        try:
            return [Idea.model_validate(row) for row in rows]
        except SchemaValidationError as e:
            logger.error(f"Malformed idea rows from store: {e}")
            raise RemoteReadError("Could not load ideas") from e

    def observe(self):
        """Keep the list re-fetching on invalidation; returns the unobserve callable."""
        return self.cache.observe(self.key, self.fetch_ideas)

    async def load(self, force: bool = False) -> QueryResult:
        return await self.cache.fetch(self.key, self.fetch_ideas, force=force)

    @property
    def result(self) -> QueryResult:
        return self.cache.get(self.key)
