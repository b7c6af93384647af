"""
Presence REST endpoint.

GET /api/v1/realtime/presence/ returns the same snapshot a socket gets for
get_online_users, for clients that need the picture over HTTP.
"""

from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from realtime.apps import get_controller


class PresenceView(APIView):
    """
    GET /api/v1/realtime/presence/
        Ids of currently online users.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_presence_snapshot",
        summary="Online users",
        responses={
            200: inline_serializer(
                name="PresenceSnapshot",
                fields={
                    "online_users": serializers.ListField(child=serializers.CharField()),
                    "count": serializers.IntegerField(),
                },
            )
        },
        tags=["Realtime"],
    )
    def get(self, request):
        snapshot = get_controller().presence.snapshot()
        return Response({"online_users": snapshot, "count": len(snapshot)})
