from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from store import get_store
from user.services.user_service import UserService
from utils.responses import success_response
from .auth_viewset import set_refresh_cookie


class CookieTokenRefreshView(APIView):
    """Rotate the refresh token held in the cookie and hand out a new access token."""
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=None)
    def post(self, request):
        refresh_cookie = request.COOKIES.get(settings.REFRESH_COOKIE_NAME)
        tokens = UserService(get_store()).refresh(refresh_cookie)

        res = success_response({'accessToken': tokens['access']}, message='Token refreshed successfully')
        return set_refresh_cookie(res, tokens['refresh'])
