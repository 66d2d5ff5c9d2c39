"""User repository. Read-only from the point of view of the managers."""

from apps.core.repositories import ModelRepository

from .models import User
from .services.exceptions import UserNotFoundError


class UserRepository(ModelRepository):
    model = User
    entity_name = 'user'
    not_found_error = UserNotFoundError
    ordering = ('created_at', 'id')
