from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

from user.urls import auth_urlpatterns

urlpatterns = [
    path('api/auth/', include(auth_urlpatterns)),
    path('api/', include('user.urls')),
    path('api/', include('task.urls')),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
]
