# pos/views/api.py

"""
POS API VIEWS

Purpose:
- Operator-scoped in-memory cart (one per authenticated account)
- Add/update/remove/clear lines (server-owned pricing)
- Checkout endpoint that finalizes the cart into a Sale via the checkout orchestrator

Hard rules:
- Money is server-owned: product + addon prices are snapshotted from the catalog on add.
- Lines are addressed by their position in the cart (index).
- Out-of-range indexes are a silent no-op; the response is the unchanged cart.
"""

from __future__ import annotations

from django.apps import apps
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import domain_error_response, error_response
from permissions.roles import CAP_POS_SELL, HasAnyCapability
from pos.cart import AddonSnapshot, ProductSnapshot
from pos.serializers import (
    AddCartLineInputSerializer,
    CartSerializer,
    CheckoutInputSerializer,
    UpdateCartLineInputSerializer,
)
from products.models import Addon, Product
from sales.serializers import SaleSerializer
from sales.services.checkout_orchestrator import (
    CheckoutError,
    CheckoutInProgressError,
    SalePersistenceError,
    checkout_cart,
)


def _cart_for(request):
    return apps.get_app_config("pos").carts.cart_for(str(request.user.pk))


def _cart_response(cart, *, http_status=status.HTTP_200_OK):
    return Response(CartSerializer(cart).data, status=http_status)


class _POSView(APIView):
    required_any_capabilities = {CAP_POS_SELL}

    def get_permissions(self):
        return [IsAuthenticated(), HasAnyCapability()]


# =====================================================
# CART
# =====================================================

class CartView(_POSView):
    @extend_schema(responses={200: CartSerializer})
    def get(self, request):
        return _cart_response(_cart_for(request))

    @extend_schema(request=None, responses={200: CartSerializer})
    def delete(self, request):
        cart = _cart_for(request)
        cart.clear()
        return _cart_response(cart)


class CartLinesView(_POSView):
    @extend_schema(
        request=AddCartLineInputSerializer,
        responses={201: CartSerializer},
        examples=[
            OpenApiExample(
                "Açaí with granola",
                value={"product_id": 1, "quantity": 2, "addon_ids": [1]},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        ser = AddCartLineInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        product = get_object_or_404(Product, pk=data["product_id"])

        addon_ids = list(dict.fromkeys(data.get("addon_ids") or []))
        addons_by_id = {a.id: a for a in Addon.objects.filter(product=product, id__in=addon_ids)}
        missing = [i for i in addon_ids if i not in addons_by_id]
        if missing:
            return error_response(
                code="INVALID_ADDON",
                message=f"Adicionais inválidos para {product.name}: {missing}",
            )

        cart = _cart_for(request)
        cart.add_line(
            ProductSnapshot.from_product(product),
            data["quantity"],
            [AddonSnapshot.from_addon(addons_by_id[i]) for i in addon_ids],
        )
        return _cart_response(cart, http_status=status.HTTP_201_CREATED)


class CartLineDetailView(_POSView):
    @extend_schema(request=UpdateCartLineInputSerializer, responses={200: CartSerializer})
    def patch(self, request, index: int):
        ser = UpdateCartLineInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        cart = _cart_for(request)
        cart.set_line_quantity(index, ser.validated_data["quantity"])
        return _cart_response(cart)

    @extend_schema(request=None, responses={200: CartSerializer})
    def delete(self, request, index: int):
        cart = _cart_for(request)
        cart.remove_line(index)
        return _cart_response(cart)


# =====================================================
# CHECKOUT
# =====================================================

class CheckoutView(_POSView):
    """
    POST /api/pos/checkout/

    201 -> {"sale", "receipt": {"plain_text", "html", "print_html"}, "kitchen_text",
            "change", "printed", "kitchen_printed"}
    400 -> {"error": {...}}  cart kept as-is
    409 -> checkout already running for this operator
    500 -> persistence failure, cart kept for retry
    """

    @extend_schema(
        request=CheckoutInputSerializer,
        responses={201: SaleSerializer},
        examples=[
            OpenApiExample(
                "Cash",
                value={"payment_method": "cash", "cash_received": "40.00", "customer_name": ""},
                request_only=True,
            ),
            OpenApiExample("PIX", value={"payment_method": "pix"}, request_only=True),
        ],
    )
    def post(self, request):
        ser = CheckoutInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        cart = _cart_for(request)

        try:
            result = checkout_cart(
                operator=request.user,
                cart=cart,
                payment_method=data["payment_method"],
                cash_received=data.get("cash_received"),
                customer_name=data.get("customer_name"),
            )
        except CheckoutInProgressError as exc:
            return domain_error_response(exc, http_status=status.HTTP_409_CONFLICT)
        except SalePersistenceError as exc:
            return domain_error_response(exc, http_status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except CheckoutError as exc:
            return domain_error_response(exc)

        sale = result.sale
        sale.refresh_from_db()

        return Response(
            {
                "sale": SaleSerializer(sale).data,
                "receipt": {
                    "plain_text": result.receipt.plain_text,
                    "html": result.receipt.html,
                    "print_html": result.receipt.print_html,
                },
                "kitchen_text": result.kitchen_receipt,
                "change": None if result.change is None else f"{result.change:.2f}",
                "printed": result.printed,
                "kitchen_printed": result.kitchen_printed,
            },
            status=status.HTTP_201_CREATED,
        )
