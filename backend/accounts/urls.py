from django.urls import path

from .views import RegisterView, LoginView, RefreshTokenView

app_name = "accounts"

urlpatterns = [
    path("register", RegisterView.as_view(), name="register"),
    path("login", LoginView.as_view(), name="login"),
    path("refresh", RefreshTokenView.as_view(), name="refresh"),
]
