from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "first_name", "last_name",
                    "role", "ward", "is_active")
    search_fields = ("username", "email", "phone_number")
    list_filter = ("is_active", "is_staff", "role", "ward")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Civic Role", {"fields": ("phone_number", "role", "ward")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Civic Role", {"fields": ("email", "first_name", "last_name",
                                   "role", "ward")}),
    )
