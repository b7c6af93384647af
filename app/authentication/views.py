"""
Authentication views.

Token issuance is handled by djangorestframework-simplejwt views wired in
urls.py. This module adds sign-up, the current-user endpoint clients call
after login to learn the id they pass to the realtime `setup` event, and
the user search used to start new chats.
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from authentication.serializers import (
    RegisterSerializer,
    UserSerializer,
    UserSummarySerializer,
)


class RegisterView(APIView):
    """
    POST /api/v1/auth/register/
        Create an account and return it with a JWT pair, so the client can
        open the realtime connection without a separate login.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="register",
        summary="Register",
        request=RegisterSerializer,
        responses={201: UserSerializer},
        tags=["Auth"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        refresh = RefreshToken.for_user(user)
        return Response(
            {
                "user": UserSerializer(user).data,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_201_CREATED,
        )


class CurrentUserView(APIView):
    """
    GET /api/v1/auth/user/
        Return the authenticated user.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_current_user",
        summary="Get current user",
        responses={200: UserSerializer},
        tags=["Auth"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)


@extend_schema(
    operation_id="search_users",
    summary="Search users",
    parameters=[
        OpenApiParameter(
            "search",
            str,
            description="Case-insensitive match on username or email",
        )
    ],
    tags=["Auth"],
)
class UserSearchView(generics.ListAPIView):
    """
    GET /api/v1/auth/users/?search=<term>
        Active users other than the requester whose username or email
        contains the term. Without a term every other active user is listed.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserSummarySerializer
    pagination_class = None

    def get_queryset(self):
        queryset = User.objects.filter(is_active=True).exclude(pk=self.request.user.pk)

        term = self.request.query_params.get("search", "").strip()
        if term:
            queryset = queryset.filter(
                Q(username__icontains=term) | Q(email__icontains=term)
            )
        return queryset.order_by("username", "email")
