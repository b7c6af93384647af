"""
Core views providing infrastructure endpoints.

Views that are not part of the chat domain but are needed to run the
service, such as health checks.
"""

from django.db import connection
from django.http import JsonResponse

from realtime.apps import get_controller


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - realtime: number of open WebSocket connections in this process

    HTTP Status Codes:
        200: All systems operational
        503: Database unreachable

    Example Response:
        {
            "status": "healthy",
            "database": "connected",
            "realtime": {"connections": 12, "online_users": 9}
        }
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    controller = get_controller()
    health_status["realtime"] = {
        "connections": controller.connection_count(),
        "online_users": len(controller.presence.snapshot()),
    }

    status_code = 200 if is_healthy else 503

    return JsonResponse(health_status, status=status_code)
