"""
JWT authentication backed by the task store instead of Django's user table.
"""
from typing import Optional, Tuple

from django.http import HttpRequest
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from store import get_store
from user.models import User


class StoreJWTAuthentication(JWTAuthentication):
    """
    Reads the access token from the Authorization header and falls back to an
    ``access_token`` cookie. The user named by the token is loaded from the
    store and must still exist and be active.
    """

    def authenticate(self, request: HttpRequest) -> Optional[Tuple]:
        result = super().authenticate(request)
        if result is not None:
            return result

        access_token = request.COOKIES.get('access_token')
        if access_token is None:
            return None

        validated_token = self.get_validated_token(access_token)
        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token) -> User:
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        record = get_store().users.find_by_id(str(user_id))
        if record is None:
            raise AuthenticationFailed('Token is valid but user not found', code='user_not_found')

        user = User.from_document(record)
        if not user.is_active:
            raise AuthenticationFailed('User account is deactivated', code='user_inactive')
        return user

    def authenticate_header(self, request: HttpRequest) -> str:
        return 'Bearer'
