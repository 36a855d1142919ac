"""
URL configuration for the donations app.

Routes:
    - GET  /                       - Page of donation totals
    - GET  /count/                 - Number of donor accounts
    - GET  /accounts/<account_id>/ - Total of one account
    - POST /donate/                - Record a donation
    - GET/PUT /beneficiary/        - Read or change the beneficiary
    - POST /init/                  - Initialize the ledger

All routes are prefixed with /api/v1/donations/ when included in the main URLconf.
"""

from django.urls import path

from donations import views

app_name = "donations"

urlpatterns = [
    path("", views.DonationListView.as_view(), name="list"),
    path("count/", views.DonationCountView.as_view(), name="count"),
    path(
        "accounts/<str:account_id>/",
        views.DonationAccountView.as_view(),
        name="account",
    ),
    path("donate/", views.DonateView.as_view(), name="donate"),
    path("beneficiary/", views.BeneficiaryView.as_view(), name="beneficiary"),
    path("init/", views.InitializeLedgerView.as_view(), name="init"),
]
