from django.urls import path

from .views import (
    CategoryListAPIView,
    DeliveryConfigAPIView,
    ProductDetailAPIView,
    ProductListAPIView,
    ProductSearchAPIView,
)

urlpatterns = [
    path("products/", ProductListAPIView.as_view(), name="product-list"),
    path("products/<int:pk>/", ProductDetailAPIView.as_view(), name="product-detail"),
    path("products/categories/list/", CategoryListAPIView.as_view(), name="product-categories"),
    path("products/search/<str:term>/", ProductSearchAPIView.as_view(), name="product-search"),
    path("products/config/delivery/", DeliveryConfigAPIView.as_view(), name="delivery-config"),
]
