"""Product URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import SimpleRouter

from modules.products.views import ProductViewSet, catalogue, insert_product

router = SimpleRouter(trailing_slash=False)
router.register("products", ProductViewSet, basename="product")

urlpatterns = [
    path("", catalogue, name="product-catalogue"),
    path("insert", insert_product, name="product-insert"),
    *router.urls,
]
