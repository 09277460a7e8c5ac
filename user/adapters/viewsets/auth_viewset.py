import logging

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated

from store import get_store
from user.services.user_service import UserService
from utils.responses import success_response
from ..serializers.user_serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def set_refresh_cookie(response, token):
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=token,
        max_age=settings.REFRESH_COOKIE_MAX_AGE,
        secure=settings.REFRESH_COOKIE_SECURE,
        httponly=True,  # Not accessible from JavaScript
        samesite='Strict',
        path=settings.REFRESH_COOKIE_PATH,
    )
    return response


def clear_refresh_cookie(response):
    response.delete_cookie(
        settings.REFRESH_COOKIE_NAME,
        path=settings.REFRESH_COOKIE_PATH,
        samesite='Strict',
    )
    return response


class AuthViewSet(viewsets.ViewSet):
    """
    Registration, login, logout and the caller's own profile.

    The access token is returned in the body; the refresh token travels only
    in an HttpOnly cookie scoped to the auth endpoints.
    """
    public_actions = ('register', 'login')

    def get_permissions(self):
        if self.action in self.public_actions:
            return [AllowAny()]
        return [IsAuthenticated()]

    @property
    def service(self) -> UserService:
        return UserService(get_store())

    def _session_response(self, user, tokens, message, status_code):
        response = success_response(
            {'user': UserSerializer(user).data, 'accessToken': tokens['access']},
            message=message,
            status=status_code,
        )
        return set_refresh_cookie(response, tokens['refresh'])

    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer})
    def register(self, request):
        user, tokens = self.service.register(request.data)
        return self._session_response(user, tokens, 'User registered successfully', status.HTTP_201_CREATED)

    @extend_schema(request=LoginSerializer, responses={200: UserSerializer})
    def login(self, request):
        user, tokens = self.service.login(request.data)
        return self._session_response(user, tokens, 'Login successful', status.HTTP_200_OK)

    @extend_schema(request=None)
    def logout(self, request):
        self.service.logout(request.COOKIES.get(settings.REFRESH_COOKIE_NAME))
        return clear_refresh_cookie(success_response(message='Logout successful'))

    @extend_schema(request=None)
    def logout_all(self, request):
        self.service.logout_all(request.user)
        return clear_refresh_cookie(success_response(message='Logged out from all devices successfully'))

    @extend_schema(responses={200: UserSerializer})
    def me(self, request):
        return success_response({'user': UserSerializer(request.user).data})

    @extend_schema(request=ProfileUpdateSerializer, responses={200: UserSerializer})
    def update_profile(self, request):
        user = self.service.update_profile(request.user, request.data)
        return success_response({'user': UserSerializer(user).data}, message='Profile updated successfully')
