"""
Read-through entity cache.

Lookup-or-miss by (kind, id), invalidated by the managers after every
committed write. The cache is an optimization only: it is backed by the
Django cache alias 'entities' (bounded LocMemCache by default) and can be
switched off with PVZ_CACHE_ENABLED=False, which installs DummyCache and
leaves behavior unchanged.

Entries are stored under a per-entity token. Invalidation replaces the
token, so a value loaded before a write commits but stored after its
invalidation lands under a dead key and is never served.
"""

import uuid

from django.core.cache import caches

from .transactions import in_unit_of_work

CACHE_ALIAS = 'entities'


class EntityCache:
    """Get-or-miss cache keyed by entity kind and id."""

    def __init__(self, alias: str = CACHE_ALIAS):
        self.alias = alias

    @property
    def backend(self):
        return caches[self.alias]

    @staticmethod
    def make_key(kind: str, entity_id, token) -> str:
        return f"{kind}:{entity_id}:{token}"

    @staticmethod
    def make_token_key(kind: str, entity_id) -> str:
        return f"{kind}:{entity_id}:token"

    def current_token(self, kind: str, entity_id):
        """Token the entity's value is stored under, created on first use."""
        token_key = self.make_token_key(kind, entity_id)
        token = self.backend.get(token_key)
        if token is None:
            # add() keeps whichever token a concurrent caller stored first
            self.backend.add(token_key, uuid.uuid4().hex, timeout=None)
            token = self.backend.get(token_key)
        return token

    def get(self, kind: str, entity_id):
        token = self.backend.get(self.make_token_key(kind, entity_id))
        if token is None:
            return None
        return self.backend.get(self.make_key(kind, entity_id, token))

    def set(self, kind: str, entity, token=None) -> None:
        """
        Store an entity.

        Pass the token read before loading the entity; without one the
        current token is used.
        """
        # Rows read inside an open transaction may still roll back
        if in_unit_of_work():
            return
        if token is None:
            token = self.current_token(kind, entity.pk)
        self.backend.set(self.make_key(kind, entity.pk, token), entity)

    def invalidate(self, kind: str, entity_id) -> None:
        self.backend.set(self.make_token_key(kind, entity_id), uuid.uuid4().hex, timeout=None)

    def get_or_load(self, kind: str, entity_id, loader):
        """Return the cached entity or call loader(entity_id) and cache its result."""
        token = self.current_token(kind, entity_id)
        entity = None
        if token is not None:
            entity = self.backend.get(self.make_key(kind, entity_id, token))
        if entity is None:
            entity = loader(entity_id)
            if token is not None:
                self.set(kind, entity, token=token)
        return entity

    def clear(self) -> None:
        self.backend.clear()


entity_cache = EntityCache()
