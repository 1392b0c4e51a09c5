from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("email", "name", "role", "is_verified", "is_active", "date_joined")
    list_filter = ("role", "is_verified", "is_active")
    search_fields = ("email", "name")
    ordering = ("email",)
    fieldsets = UserAdmin.fieldsets + (("Marketplace", {"fields": ("name", "photo_url", "role", "is_verified")}),)
