"""
Repository contracts.

Repositories are plain data access: CRUD plus entity-specific lookups, no
business rules. Managers depend on the Repository contract; the Django ORM
implementation lives in ModelRepository and its per-app subclasses.

Every repository is bound to one database alias. Inside a unit of work the
repositories come from the UnitOfWork handle (apps.core.transactions), which
binds them to the alias of the open transaction.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from django.db import DEFAULT_DB_ALIAS

from .exceptions import NotFoundError
from .pagination import validate_window


class Repository(ABC):
    """Contract shared by all entity repositories."""

    @abstractmethod
    def create(self, **fields) -> Any:
        """Insert a new row and return the entity."""

    @abstractmethod
    def get_by_id(self, entity_id) -> Any:
        """Return the entity or raise the repository's NotFoundError."""

    @abstractmethod
    def update(self, entity, **fields) -> Any:
        """Write the given fields of an existing entity."""

    @abstractmethod
    def delete(self, entity_id) -> None:
        """Delete the entity or raise the repository's NotFoundError."""

    @abstractmethod
    def list(self, *, offset: int, limit: int) -> List[Any]:
        """Return a window of entities in the repository's default order."""


class ModelRepository(Repository):
    """
    Django ORM implementation of the Repository contract.

    Subclasses set:
        model: Django model class
        entity_name: name used in error context ('pvz', 'reception', ...)
        not_found_error: NotFoundError subclass raised on misses
        ordering: default ordering for list()
    """

    model = None
    entity_name = ''
    not_found_error = NotFoundError
    ordering = ('pk',)

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    @property
    def queryset(self):
        return self.model._default_manager.using(self.using)

    def not_found(self, entity_id=None):
        return self.not_found_error(
            f"{self.entity_name.capitalize()} with ID {entity_id} not found",
            entity=self.entity_name,
            entity_id=entity_id,
        )

    def create(self, **fields):
        return self.queryset.create(**fields)

    def get_by_id(self, entity_id):
        try:
            return self.queryset.get(pk=entity_id)
        except self.model.DoesNotExist:
            raise self.not_found(entity_id)

    def get_by_id_for_update(self, entity_id):
        """Fetch and row-lock the entity. Must run inside a transaction."""
        try:
            return self.queryset.select_for_update().get(pk=entity_id)
        except self.model.DoesNotExist:
            raise self.not_found(entity_id)

    def update(self, entity, **fields):
        for name, value in fields.items():
            setattr(entity, name, value)
        entity.save(using=self.using, update_fields=list(fields))
        return entity

    def delete(self, entity_id):
        deleted, _ = self.queryset.filter(pk=entity_id).delete()
        if not deleted:
            raise self.not_found(entity_id)

    def list(self, *, offset, limit):
        validate_window(offset=offset, limit=limit)
        return list(self.queryset.order_by(*self.ordering)[offset:offset + limit])

    def all(self):
        return list(self.queryset.order_by(*self.ordering))
