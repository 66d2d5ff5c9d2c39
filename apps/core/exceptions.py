"""
Service error taxonomy.

Every business rule violation raised by a manager is a ServiceError carrying
an ErrorKind. Apps subclass the kind-level classes for their own entities
(for example PVZNotFoundError(NotFoundError)), so callers can catch either
the specific case or the whole kind.

Exception Hierarchy:
    ServiceError (base)
    ├── NotFoundError
    ├── AlreadyExistsError
    ├── AlreadyOpenError
    ├── AlreadyClosedError
    ├── InvalidInputError
    ├── AccessDeniedError
    ├── OperationCancelledError
    └── InternalError

Usage:
    from apps.core.exceptions import NotFoundError

    raise NotFoundError("Reception not found", entity='reception', entity_id=reception_id)

The REST layer turns these into HTTP responses in apps.core.handlers.
"""

from django.db import models


class ErrorKind(models.TextChoices):
    NOT_FOUND = 'not_found', 'Not found'
    ALREADY_EXISTS = 'already_exists', 'Already exists'
    ALREADY_OPEN = 'already_open', 'Already open'
    ALREADY_CLOSED = 'already_closed', 'Already closed'
    INVALID_INPUT = 'invalid_input', 'Invalid input'
    ACCESS_DENIED = 'access_denied', 'Access denied'
    CANCELLED = 'cancelled', 'Cancelled'
    INTERNAL = 'internal', 'Internal error'


class ServiceError(Exception):
    """
    Base exception for all service errors.

    Attributes:
        kind: ErrorKind of the failure
        message: Human readable message, safe to show to the caller
            unless kind is INTERNAL
        entity: Name of the entity involved ('pvz', 'reception', ...)
        entity_id: Identifier of the entity involved, if known
        field: Input field that failed validation, if any
    """

    kind = ErrorKind.INTERNAL
    default_message = 'Service error'

    def __init__(self, message=None, *, entity=None, entity_id=None, field=None):
        self.message = message or self.default_message
        self.entity = entity
        self.entity_id = entity_id
        self.field = field
        super().__init__(self.message)

    def to_dict(self):
        data = {'error': self.message, 'code': self.kind.value}
        if self.entity:
            data['entity'] = self.entity
        if self.entity_id is not None:
            data['entity_id'] = str(self.entity_id)
        if self.field:
            data['field'] = self.field
        return data


class NotFoundError(ServiceError):
    """Raised when a referenced PVZ, reception, product or user does not exist."""
    kind = ErrorKind.NOT_FOUND
    default_message = 'Not found'


class AlreadyExistsError(ServiceError):
    """Raised when creating an entity that must be unique and already exists."""
    kind = ErrorKind.ALREADY_EXISTS
    default_message = 'Already exists'


class AlreadyOpenError(ServiceError):
    """Raised when a reception is opened while another one is in progress."""
    kind = ErrorKind.ALREADY_OPEN
    default_message = 'Reception already open'


class AlreadyClosedError(ServiceError):
    """Raised when a closed reception is modified."""
    kind = ErrorKind.ALREADY_CLOSED
    default_message = 'Reception already closed'


class InvalidInputError(ServiceError):
    """Raised on malformed input: city, product type, pagination, dates."""
    kind = ErrorKind.INVALID_INPUT
    default_message = 'Invalid input'


class AccessDeniedError(ServiceError):
    """Raised when the caller's role does not permit the operation."""
    kind = ErrorKind.ACCESS_DENIED
    default_message = 'Access denied'


class OperationCancelledError(ServiceError):
    """Raised when a unit of work is cancelled before it commits."""
    kind = ErrorKind.CANCELLED
    default_message = 'Operation cancelled'


class InternalError(ServiceError):
    """
    Raised when the store fails in a way not covered by the other kinds.

    The message is never shown to API clients; the chained cause is logged.
    """
    kind = ErrorKind.INTERNAL
    default_message = 'Internal error'
