from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    DummyLoginSerializer,
)
from .services import authenticate_user, dummy_login as dummy_login_service, issue_tokens, register_user


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = register_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
        role=serializer.validated_data['role'],
    )

    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    })


@extend_schema(
    request=DummyLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Get tokens for a shared test user of the given role. Disabled in production.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def dummy_login(request):
    """Issue tokens for a per-role test user."""
    serializer = DummyLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = dummy_login_service(role=serializer.validated_data['role'])

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)
