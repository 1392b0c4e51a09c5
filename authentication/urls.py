from django.urls import path

from authentication.api.views.user_views import IssueTokenView, UserRoleView, UserUpsertView

urlpatterns = [
    path("users/", UserUpsertView.as_view(), name="user-upsert"),
    path("users/<str:email>/role/", UserRoleView.as_view(), name="user-role"),
    path("auth/token/", IssueTokenView.as_view(), name="issue-token"),
]
