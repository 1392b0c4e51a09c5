from django.urls import path

from payment_system.api.views import payment_views

app_name = "payment_system"

urlpatterns = [
    path("intent/", payment_views.create_payment_intent, name="create_payment_intent"),
    path("", payment_views.record_payment, name="record_payment"),
]
