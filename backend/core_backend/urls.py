from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    """Liveness probe for the load balancer; needs no authentication."""
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    # The router in orders.urls adds the "orders/" prefix
    path("api/", include("orders.urls")),
]
