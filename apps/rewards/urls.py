from django.urls import path
from . import views

app_name = 'rewards'

urlpatterns = [
    # Catalogue
    path('', views.reward_list, name='reward-list'),
    path('redeem/', views.redeem_reward, name='redeem'),

    # Ledger
    path('transactions/', views.transaction_history, name='transactions'),
    path('balance/', views.balance, name='balance'),

    # Admin
    path('allocate/', views.allocate_points, name='allocate'),
]
