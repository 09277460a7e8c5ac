from django.urls import path
from rest_framework.routers import DefaultRouter

from .adapters.viewsets import auth_viewset
from .adapters.viewsets.auth_refresh import CookieTokenRefreshView
from .adapters.viewsets.user_viewset import UserViewSet

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')

auth_urlpatterns = [
    path('register/', auth_viewset.AuthViewSet.as_view({'post': 'register'}), name='register'),
    path('login/', auth_viewset.AuthViewSet.as_view({'post': 'login'}), name='login'),
    # refresh token is read from the HttpOnly cookie
    path('refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('logout/', auth_viewset.AuthViewSet.as_view({'post': 'logout'}), name='logout'),
    path('logout-all/', auth_viewset.AuthViewSet.as_view({'post': 'logout_all'}), name='logout_all'),
    path('me/', auth_viewset.AuthViewSet.as_view({'get': 'me', 'put': 'update_profile'}), name='me'),
]

urlpatterns = router.urls
