"""
PATH: pos/urls.py

POS URLS

Purpose:
- Operator cart lifecycle
- Cart line operations (addressed by index)
- Cart checkout (finalizes to Sale via checkout orchestrator)
"""

from django.urls import path

from pos.views.api import (
    CartLineDetailView,
    CartLinesView,
    CartView,
    CheckoutView,
)

app_name = "pos"

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/lines/", CartLinesView.as_view(), name="cart-lines"),
    path("cart/lines/<int:index>/", CartLineDetailView.as_view(), name="cart-line-detail"),

    path("checkout/", CheckoutView.as_view(), name="checkout"),
]
