"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/        - Create an account (POST)
    /api/v1/auth/login/           - Obtain JWT access/refresh pair (POST)
    /api/v1/auth/token/refresh/   - Refresh access token (POST)
    /api/v1/auth/user/            - Current user (GET)
    /api/v1/auth/users/           - Search other users (GET, ?search=)

The access token is also what the WebSocket client passes as
`?token=<jwt>` when opening the realtime connection.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.views import CurrentUserView, RegisterView, UserSearchView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", TokenObtainPairView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("user/", CurrentUserView.as_view(), name="user"),
    path("users/", UserSearchView.as_view(), name="user-search"),
]
