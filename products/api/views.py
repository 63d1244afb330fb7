"""Products API views.

Public, read-only endpoints over the static catalog: a paginated and
filterable list, single product lookup, category list, term search and the
delivery configuration used by the order form.
"""

from rest_framework import generics, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pipeline import PipelineMixin
from products import catalog
from .serializers import ProductSerializer


def _positive_int(params, name, default):
    raw = params.get(name)
    if raw is None or raw == "":
        return default
    if not raw.isdigit() or int(raw) < 1:
        raise ValidationError({name: "Must be a positive integer."})
    return int(raw)


class ProductsPagination(PageNumberPagination):
    """Catalog pagination; ``limit`` sets the page size (default 12)."""

    page_size = 12
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response(
            {
                "products": data,
                "categories": catalog.categories(),
                "pagination": {
                    "current_page": self.page.number,
                    "total_pages": paginator.num_pages,
                    "total_products": paginator.count,
                    "limit": paginator.per_page,
                },
            }
        )


class PublicCatalogView(PipelineMixin):
    authentication_classes = []
    permission_classes = [AllowAny]


class ProductListAPIView(PublicCatalogView, generics.ListAPIView):
    """GET /api/products/?category=&search=&page=&limit= -> paginated catalog."""

    serializer_class = ProductSerializer
    pagination_class = ProductsPagination

    def get_queryset(self):
        params = self.request.query_params
        return catalog.filter_products(params.get("category"), params.get("search"))


class ProductDetailAPIView(PublicCatalogView, APIView):
    """GET /api/products/{id}/ -> a single product or 404."""

    def get(self, request, pk: int):
        product = catalog.get_product(pk)
        if product is None:
            raise NotFound("Product not found.")
        return Response({"product": ProductSerializer(product).data}, status=status.HTTP_200_OK)


class CategoryListAPIView(PublicCatalogView, APIView):
    """GET /api/products/categories/list/ -> distinct category names."""

    def get(self, request):
        return Response({"categories": catalog.categories()}, status=status.HTTP_200_OK)


class ProductSearchAPIView(PublicCatalogView, APIView):
    """GET /api/products/search/{term}/?limit= -> substring search over name, description, category."""

    def get(self, request, term: str):
        limit = _positive_int(request.query_params, "limit", 10)
        results = catalog.search_products(term)[:limit]
        data = {
            "products": ProductSerializer(results, many=True).data,
            "search_term": term,
            "total_results": len(results),
        }
        return Response(data, status=status.HTTP_200_OK)


class DeliveryConfigAPIView(PublicCatalogView, APIView):
    """GET /api/products/config/delivery/ -> allowed delivery locations and times."""

    def get(self, request):
        data = {
            "locations": list(catalog.DELIVERY_LOCATIONS),
            "times": list(catalog.DELIVERY_TIMES),
        }
        return Response(data, status=status.HTTP_200_OK)
