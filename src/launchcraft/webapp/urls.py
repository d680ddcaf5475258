"""URL configuration for API endpoints."""

from django.urls import path

from launchcraft.webapp import views

urlpatterns = [
    path("generate", views.GenerateView.as_view(), name="generate"),
    path("register", views.RegisterView.as_view(), name="register"),
]
