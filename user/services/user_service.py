import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from django.contrib.auth.hashers import check_password, make_password
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from store import ASCENDING, DuplicateRecord, Store
from user.adapters.serializers.user_serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserListQuerySerializer,
)
from user.models import User
from utils.custom_paginator import CustomPaginator
from utils.errors import AuthenticationFailed, NotFound, ValidationFailed
from utils.validation import validated_data

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = 'User with this email already exists'


def issue_tokens(user: User) -> Dict[str, str]:
    """Build a fresh access/refresh pair carrying the user's id."""
    refresh = RefreshToken()
    refresh[api_settings.USER_ID_CLAIM] = user.id
    return {
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }


def _is_live(token: str) -> bool:
    try:
        RefreshToken(token)
    except TokenError:
        return False
    return True


class UserService:

    def __init__(self, store: Store):
        self.store = store

    def _user(self, user_id: str) -> Optional[User]:
        record = self.store.users.find_by_id(user_id)
        return User.from_document(record) if record else None

    def _remember_token(self, user: User, token: str, revoke: Optional[str] = None) -> None:
        # expired or otherwise unusable tokens are dropped on every rewrite
        tokens = [
            existing for existing in user.refresh_tokens
            if existing != revoke and _is_live(existing)
        ]
        tokens.append(token)
        self.store.users.replace(user.id, {'refresh_tokens': tokens})
        user.refresh_tokens = tokens

    def _ensure_active(self, user: User) -> None:
        if not user.is_active:
            raise AuthenticationFailed('Account is deactivated')

    def get_user(self, user_id: str) -> User:
        user = self._user(user_id)
        if user is None:
            raise NotFound('User not found')
        return user

    def register(self, data: Mapping[str, Any]) -> Tuple[User, Dict[str, str]]:
        values = validated_data(RegisterSerializer(data=data))

        if self.store.users.find_one({'email': values['email']}) is not None:
            raise ValidationFailed.for_field('email', DUPLICATE_EMAIL)
        try:
            record = self.store.users.insert({
                'name': values['name'],
                'email': values['email'],
                'password': make_password(values['password']),
                'is_active': True,
                'avatar_url': None,
                'refresh_tokens': [],
            })
        except DuplicateRecord:
            # lost a race with a concurrent registration
            raise ValidationFailed.for_field('email', DUPLICATE_EMAIL)

        user = User.from_document(record)
        tokens = issue_tokens(user)
        self._remember_token(user, tokens['refresh'])
        logger.info("User registered id=%s", user.id)
        return user, tokens

    def login(self, data: Mapping[str, Any]) -> Tuple[User, Dict[str, str]]:
        values = validated_data(LoginSerializer(data=data))

        record = self.store.users.find_one({'email': values['email']})
        if record is None:
            raise AuthenticationFailed('Invalid credentials')
        user = User.from_document(record)
        self._ensure_active(user)
        if not check_password(values['password'], user.password):
            logger.info("Failed login for user id=%s", user.id)
            raise AuthenticationFailed('Invalid credentials')

        tokens = issue_tokens(user)
        self._remember_token(user, tokens['refresh'])
        logger.info("User logged in id=%s", user.id)
        return user, tokens

    def refresh(self, token: Optional[str]) -> Dict[str, str]:
        """
        Exchange a refresh token for a new pair.

        The presented token must verify and still be on record for its user;
        it is revoked and replaced by the new one.
        """
        if not token:
            raise AuthenticationFailed('Refresh token not provided')
        try:
            refresh = RefreshToken(token)
        except TokenError:
            raise AuthenticationFailed('Invalid or expired refresh token')

        user = self._user(str(refresh.payload.get(api_settings.USER_ID_CLAIM)))
        if user is None or token not in user.refresh_tokens:
            raise AuthenticationFailed('Invalid refresh token')
        self._ensure_active(user)

        tokens = issue_tokens(user)
        self._remember_token(user, tokens['refresh'], revoke=token)
        return tokens

    def logout(self, token: Optional[str]) -> None:
        if not token:
            return
        record = self.store.users.find_one({'refresh_tokens': token})
        if record is None:
            return
        user = User.from_document(record)
        remaining = [existing for existing in user.refresh_tokens if existing != token]
        self.store.users.replace(user.id, {'refresh_tokens': remaining})

    def logout_all(self, user: User) -> None:
        self.store.users.replace(user.id, {'refresh_tokens': []})
        logger.info("All sessions revoked for user id=%s", user.id)

    def update_profile(self, user: User, data: Mapping[str, Any]) -> User:
        values = validated_data(ProfileUpdateSerializer(data=data, partial=True))
        if 'avatar_url' in values and not values['avatar_url']:
            values['avatar_url'] = None
        if not values:
            return self.get_user(user.id)
        record = self.store.users.replace(user.id, values)
        if record is None:
            raise NotFound('User not found')
        return User.from_document(record)

    def list_users(self, params: Mapping[str, Any]) -> Tuple[List[User], Dict[str, Any]]:
        query = validated_data(UserListQuerySerializer(data=params))

        filter: Dict[str, Any] = {'is_active': True}
        search = (query.get('search') or '').strip()
        if search:
            pattern = {'$regex': re.escape(search), '$options': 'i'}
            filter['$or'] = [{'name': pattern}, {'email': pattern}]

        paginator = CustomPaginator(query['page'], query['limit'])
        records = self.store.users.find_many(
            filter,
            sort=[('name', ASCENDING)],
            skip=paginator.offset,
            limit=paginator.limit,
        )
        total = self.store.users.count(filter)
        return [User.from_document(record) for record in records], paginator.get_paginated_data(total, 'totalUsers')
