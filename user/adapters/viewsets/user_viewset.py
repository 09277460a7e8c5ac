from drf_spectacular.utils import extend_schema
from rest_framework import viewsets

from store import get_store
from user.services.user_service import UserService
from utils.responses import success_response
from ..serializers.user_serializers import UserDetailSerializer, UserListQuerySerializer, UserSummarySerializer


class UserViewSet(viewsets.ViewSet):
    """Active users, e.g. to pick an assignee."""
    lookup_value_regex = '[^/]+'

    @property
    def service(self) -> UserService:
        return UserService(get_store())

    @extend_schema(parameters=[UserListQuerySerializer], responses={200: UserSummarySerializer(many=True)})
    def list(self, request):
        users, pagination = self.service.list_users(request.query_params)
        return success_response({
            'users': UserSummarySerializer(users, many=True).data,
            'pagination': pagination,
        })

    @extend_schema(responses={200: UserDetailSerializer})
    def retrieve(self, request, pk=None):
        user = self.service.get_user(pk)
        return success_response({'user': UserDetailSerializer(user).data})
