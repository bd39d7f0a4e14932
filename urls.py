"""
URLconf for the inventory endpoint.

    path('api/inventory/', include('storeman.urls')),
"""

from django.urls import path

from storeman.views import inventory_api

app_name = 'storeman'

urlpatterns = [
    path('', inventory_api, name='inventory'),
    path('<int:resource_id>/', inventory_api, name='inventory-detail'),
]
