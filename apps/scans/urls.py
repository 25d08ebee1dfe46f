from django.urls import path
from . import views

app_name = 'scans'

urlpatterns = [
    # POST /api/scans/       - Submit a scanned code
    # GET  /api/scans/mine/  - Units claimed by the caller
    path('', views.submit_scan, name='submit'),
    path('mine/', views.my_scans, name='mine'),
]
