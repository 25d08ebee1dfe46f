from django.urls import path
from . import views

app_name = 'badges'

urlpatterns = [
    path('', views.badge_list, name='badge-list'),
    path('<uuid:badge_id>/', views.badge_detail, name='badge-detail'),
]
