"""
URL configuration for procurement_analysis project.
"""
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # 采购分析API
    path('', include('procurement_analysis.urls')),

    # OpenAPI schema & Swagger 文档
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path(
        'api/docs/',
        SpectacularSwaggerView.as_view(url_name='schema'),
        name='api_docs',
    ),
]
