import pytest
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from apps.core.exceptions import (
    AlreadyClosedError,
    AlreadyExistsError,
    AlreadyOpenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    OperationCancelledError,
    AccessDeniedError,
)
from apps.core.handlers import service_exception_handler


CONTEXT = {'view': None}


class TestServiceExceptionHandler:

    @pytest.mark.parametrize('exc, expected', [
        (NotFoundError(), status.HTTP_404_NOT_FOUND),
        (AlreadyExistsError(), status.HTTP_409_CONFLICT),
        (AlreadyOpenError(), status.HTTP_409_CONFLICT),
        (AlreadyClosedError(), status.HTTP_409_CONFLICT),
        (InvalidInputError(), status.HTTP_400_BAD_REQUEST),
        (AccessDeniedError(), status.HTTP_403_FORBIDDEN),
        (OperationCancelledError(), 499),
    ])
    def test_status_by_kind(self, exc, expected):
        response = service_exception_handler(exc, CONTEXT)

        assert response.status_code == expected
        assert response.data['code'] == exc.kind.value

    def test_context_is_included(self):
        exc = NotFoundError('PVZ missing', entity='pvz', entity_id='42', field='pvz_id')
        response = service_exception_handler(exc, CONTEXT)

        assert response.data == {
            'error': 'PVZ missing',
            'code': 'not_found',
            'entity': 'pvz',
            'entity_id': '42',
            'field': 'pvz_id',
        }

    def test_internal_error_message_is_hidden(self):
        response = service_exception_handler(InternalError('password=secret'), CONTEXT)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert 'secret' not in response.data['error']

    def test_other_exceptions_use_drf_default(self):
        response = service_exception_handler(NotAuthenticated(), CONTEXT)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
