"""
URL configuration for the donation ledger service.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints (simplejwt)
        token/                     - Obtain access/refresh token pair
        token/refresh/             - Refresh access token
    /api/v1/donations/             - Donation ledger endpoints
        (root)                     - Page of donation totals (GET)
        count/                     - Number of donor accounts (GET)
        accounts/{account_id}/     - Total of one account (GET)
        donate/                    - Record a donation (POST)
        beneficiary/               - Read/change beneficiary (GET/PUT)
        init/                      - Initialize the ledger (POST)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (simplejwt)
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # Donations
    path("donations/", include("donations.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Donation Ledger Admin"
admin.site.site_title = "Donation Ledger"
admin.site.index_title = "Ledger state and transfers"
