from django.contrib import admin

from .models import BookerEntry, Booking, Category, Product, ReportedProduct


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('id', 'name')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'seller_email', 'category', 'resale_price', 'condition', 'is_advertised', 'created_at')
    list_filter = ('category', 'condition', 'is_advertised')
    search_fields = ('name', 'seller_email')
    readonly_fields = ('id', 'created_at')


@admin.register(ReportedProduct)
class ReportedProductAdmin(admin.ModelAdmin):
    list_display = ('reported_product_id', 'reported_by', 'created_at')
    readonly_fields = ('created_at',)


class BookerEntryInline(admin.TabularInline):
    model = BookerEntry
    extra = 0
    fields = ('booker_name', 'booker_email', 'booker_location', 'booker_number', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('product_name', 'seller_email', 'price', 'is_paid', 'bought_by', 'seller_removed', 'created_at')
    list_filter = ('is_paid', 'seller_removed')
    search_fields = ('product_name', 'seller_email', 'bought_by')
    readonly_fields = ('product_id', 'created_at', 'updated_at')
    inlines = [BookerEntryInline]
