# users/admin.py

"""
USERS ADMIN REGISTRATION

Registers the staff account model so it appears in Django Admin.
Only accounts with the admin role can sign in there.
"""

from __future__ import annotations

from django.contrib import admin

from users.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    ordering = ("created_at",)
    list_display = ("id", "email", "name", "role", "created_at")
    list_filter = ("role",)
    search_fields = ("email", "name")
    readonly_fields = ("id", "created_at", "last_login")

    fieldsets = (
        (None, {"fields": ("id", "email", "password")}),
        ("Profile", {"fields": ("name", "role")}),
        ("Timestamps", {"fields": ("created_at", "last_login")}),
    )
