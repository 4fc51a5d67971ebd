"""
采购分析URL配置
"""
from django.urls import path

from . import views

app_name = 'procurement_analysis'

urlpatterns = [
    path('api/analysis/report/', views.api_analysis_report, name='api_analysis_report'),
]
