from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from django.urls import include, path

urlpatterns = [
    path("", include("modules.core.urls")),
    # Domain modules
    path("api/", include("modules.products.urls")),
    path("api/", include("modules.orders.urls")),
    # OpenAPI schema & docs (public)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
