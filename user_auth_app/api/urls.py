from django.urls import path

from .views import AuthStatusView, LogoutView, MeView, ProfileView, UserProfileView

urlpatterns = [
    path("auth/profile/", ProfileView.as_view(), name="auth-profile"),
    path("auth/me/", MeView.as_view(), name="auth-me"),
    path("auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("auth/status/", AuthStatusView.as_view(), name="auth-status"),
    path("users/profile/", UserProfileView.as_view(), name="user-profile"),
]
