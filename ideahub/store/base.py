"""Remote store interface consumed by queries and commands."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Embed:
    """A related table joined into each selected row under ``alias``."""
    alias: str
    table: str
    embeds: Tuple["Embed", ...] = ()

    def select_clause(self) -> str:
        return f"{self.alias}:{self.table}({select_clause(self.embeds)})"


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class Select:
    """Description of a read: table, embedded relations, equality filters, ordering."""
    table: str
    embeds: Tuple[Embed, ...] = ()
    filters: Dict[str, Any] = field(default_factory=dict)
    order: Optional[Order] = None

    def select_clause(self) -> str:
        return select_clause(self.embeds)


def select_clause(embeds: Tuple[Embed, ...]) -> str:
    """Render embeds in PostgREST syntax, e.g. ``*,user:users(*)``."""
    return ",".join(["*"] + [embed.select_clause() for embed in embeds])


class RemoteStore(ABC):
    """Table-style persistence provided by the hosted backend."""

    @abstractmethod
    async def select(self, query: Select) -> List[Dict[str, Any]]:
        """Read rows. Raises RemoteStoreError on failure."""

    @abstractmethod
    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows and return them as persisted. Raises RemoteStoreError on failure."""

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a single row and return it as persisted."""
        created = await self.insert_many(table, [row])
        return created[0]
