from django.urls import include, path
from rest_framework.routers import DefaultRouter

from marketplace.booking.api.views.booking_views import BookingViewSet
from marketplace.catalog.api.views.category_views import CategoryViewSet
from marketplace.catalog.api.views.product_views import ProductViewSet
from marketplace.moderation.api.views import moderation_views

# Create the main router
router = DefaultRouter()
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"products", ProductViewSet, basename="product")
router.register(r"bookings", BookingViewSet, basename="booking")

app_name = "marketplace"

urlpatterns = [
    # Main API routes
    path("", include(router.urls)),
    # Moderation
    path("reports/", moderation_views.reports, name="reports"),
    # Admin account management
    path("admin/sellers/", moderation_views.list_sellers, name="admin-sellers"),
    path("admin/buyers/", moderation_views.list_buyers, name="admin-buyers"),
    path("admin/sellers/<uuid:seller_id>/verify/", moderation_views.verify_seller, name="admin-verify-seller"),
    path("admin/buyers/<uuid:user_id>/", moderation_views.remove_buyer, name="admin-remove-buyer"),
    path("admin/sellers/<str:email>/", moderation_views.remove_seller, name="admin-remove-seller"),
]
