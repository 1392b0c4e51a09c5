from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Read-only view of recorded payments; payments are append-only."""

    list_display = ["transaction_id", "email", "product_id", "booking", "amount", "created_at"]
    search_fields = ["transaction_id", "email"]
    readonly_fields = ["id", "email", "product_id", "booking", "amount", "transaction_id", "created_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
