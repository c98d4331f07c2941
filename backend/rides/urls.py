from django.urls import path
from . import views

app_name = 'rides'

urlpatterns = [
    # Rider APIs
    path('rides', views.RideCreateView.as_view(), name='create-ride'),
    path('user/rides', views.MyRidesView.as_view(), name='my-rides'),

    # Driver APIs
    path('driver/rides/requests', views.PendingRidesView.as_view(), name='pending-rides'),
    path('driver/rides/<int:ride_id>/accept', views.AcceptRideView.as_view(), name='accept-ride'),

    # Rider or driver
    path('rides/<int:ride_id>/complete', views.CompleteRideView.as_view(), name='complete-ride'),
]
