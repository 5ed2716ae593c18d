"""Remote store backed by a SQLAlchemy database, for development and tests."""
import logging
from typing import Any, Dict, List

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from ..errors import RemoteStoreError
from ..models import TABLES
from .base import RemoteStore, Select

logger = logging.getLogger(__name__)


def row_to_dict(instance, embeds=()) -> Dict[str, Any]:
    """Serialize a mapped instance's columns plus the requested relations."""
    data = {
        column.key: getattr(instance, column.key)
        for column in inspect(instance).mapper.column_attrs
    }
    for embed in embeds:
        related = getattr(instance, embed.alias)
        if related is None:
            data[embed.alias] = None
        elif isinstance(related, list):
            data[embed.alias] = [row_to_dict(item, embed.embeds) for item in related]
        else:
            data[embed.alias] = row_to_dict(related, embed.embeds)
    return data


class LocalStore(RemoteStore):
    """
    RemoteStore implementation over SQLAlchemy sessions.

    Embeds are resolved through the mapped relationship named like the
    embed alias, so ``Embed("user", "users")`` on ideas loads ``Idea.user``.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise RemoteStoreError(f"Unknown table '{table}'", status_code=404)

    def _column(self, model, name: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise RemoteStoreError(
                f"Column '{name}' does not exist on '{model.__tablename__}'", status_code=400
            )
        return getattr(model, name)

    def _loader_options(self, model, embeds, parent=None):
        options = []
        for embed in embeds:
            attribute = getattr(model, embed.alias, None)
            if attribute is None:
                raise RemoteStoreError(
                    f"Could not find a relationship '{embed.alias}' on '{model.__tablename__}'",
                    status_code=400
                )
            loader = parent.selectinload(attribute) if parent is not None else selectinload(attribute)
            options.append(loader)
            target = attribute.property.mapper.class_
            options.extend(self._loader_options(target, embed.embeds, loader))
        return options

    async def select(self, query: Select) -> List[Dict[str, Any]]:
        model = self._model(query.table)
        session: Session = self.session_factory()
        try:
            statement = session.query(model).options(*self._loader_options(model, query.embeds))
            for column, value in query.filters.items():
                statement = statement.filter(self._column(model, column) == value)
            if query.order is not None:
                column = self._column(model, query.order.column)
                statement = statement.order_by(column.asc() if query.order.ascending else column.desc())
            return [row_to_dict(instance, query.embeds) for instance in statement.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error selecting from {query.table}: {e}")
            raise RemoteStoreError(f"Error reading {query.table}") from e
        finally:
            session.close()

    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        model = self._model(table)
        session: Session = self.session_factory()
        try:
            instances = [model(**row) for row in rows]
            session.add_all(instances)
            session.commit()
            for instance in instances:
                session.refresh(instance)
            logger.info(f"Inserted {len(instances)} row(s) into {table}")
            return [row_to_dict(instance) for instance in instances]
        except IntegrityError as e:
            logger.error(f"Constraint violated inserting into {table}: {e.orig}")
            session.rollback()
            raise RemoteStoreError(f"Conflict writing {table}", status_code=409) from e
        except (SQLAlchemyError, TypeError) as e:
            logger.error(f"Error inserting into {table}: {e}")
            session.rollback()
            raise RemoteStoreError(f"Error writing {table}") from e
        finally:
            session.close()

