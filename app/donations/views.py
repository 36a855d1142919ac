"""
DRF views for the donation ledger.

The API plays the host's part for the ledger: it authenticates the
caller, supplies the attached deposit and the ledger's own identity
through a CallContext, and turns ledger errors into JSON responses.

Endpoints:
    GET  /api/v1/donations/                      - Page of donation totals
    GET  /api/v1/donations/count/                - Number of donor accounts
    GET  /api/v1/donations/accounts/<account>/   - Total of one account
    POST /api/v1/donations/donate/               - Record a donation
    GET  /api/v1/donations/beneficiary/          - Current beneficiary
    PUT  /api/v1/donations/beneficiary/          - Change beneficiary (ledger only)
    POST /api/v1/donations/init/                 - Initialize (ledger only)

Security:
    - Read endpoints are public
    - donate requires authentication; the username is the donor account
    - init and beneficiary changes require the ledger's own account
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)

from .conf import get_ledger_settings
from .exceptions import InvalidAccountId
from .permissions import IsLedgerOwner
from .serializers import (
    BeneficiarySerializer,
    DonateSerializer,
    DonationPageQuerySerializer,
    DonationReceiptSerializer,
    DonationRecordSerializer,
)
from .services import get_ledger
from .types import CallContext
from .validators import is_valid_account_id


def error_response(error: BaseApplicationError) -> Response:
    """Render a domain error with the HTTP status of its category."""
    if isinstance(error, PermissionDeniedError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ConflictError):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return Response(error.to_dict(), status=status_code)


def call_context(request, attached_deposit: int = 0) -> CallContext:
    """
    Build the CallContext of an authenticated request.

    Raises:
        InvalidAccountId: Username is not a valid account identity
    """
    caller = request.user.get_username()
    if not is_valid_account_id(caller):
        raise InvalidAccountId(caller)
    return CallContext(
        predecessor_account_id=caller,
        current_account_id=get_ledger_settings().contract_account_id,
        attached_deposit=attached_deposit,
    )


class DonationListView(APIView):
    """
    Page through donation totals in first-donation order.

    GET /api/v1/donations/?from_index=0&limit=50

    Returns:
        {"from_index": "0", "limit": 50, "results": [{"account_id", "total_amount"}]}
    """

    permission_classes = [AllowAny]

    def get(self, request):
        query = DonationPageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            page = get_ledger().get_donations(
                from_index=query.validated_data.get("from_index"),
                limit=query.validated_data.get("limit"),
            )
            records = list(page)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            {
                "from_index": str(page.from_index),
                "limit": page.limit,
                "results": DonationRecordSerializer(records, many=True).data,
            }
        )


class DonationCountView(APIView):
    """
    Number of distinct donor accounts.

    GET /api/v1/donations/count/
    """

    permission_classes = [AllowAny]

    def get(self, request):
        try:
            total = get_ledger().total_donations()
        except BaseApplicationError as e:
            return error_response(e)
        return Response({"total_donations": total})


class DonationAccountView(APIView):
    """
    Accumulated donations of one account ("0" if it never donated).

    GET /api/v1/donations/accounts/<account_id>/
    """

    permission_classes = [AllowAny]

    def get(self, request, account_id):
        try:
            total = get_ledger().get_donation_for_account(account_id)
        except BaseApplicationError as e:
            return error_response(e)
        return Response(
            DonationRecordSerializer(
                {"account_id": account_id, "total_amount": total}
            ).data
        )


class DonateView(APIView):
    """
    Record a donation from the authenticated account.

    POST /api/v1/donations/donate/

    Request body:
        {"attached_deposit": "1000000000000000000000000"}

    Returns:
        201 with {"donor", "amount", "total", "transfer"}
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = DonateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            context = call_context(
                request, serializer.validated_data["attached_deposit"]
            )
            receipt = get_ledger().donate(context)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            DonationReceiptSerializer(receipt).data,
            status=status.HTTP_201_CREATED,
        )


class BeneficiaryView(APIView):
    """
    Read or change the beneficiary.

    GET /api/v1/donations/beneficiary/
    PUT /api/v1/donations/beneficiary/

    Request body (PUT):
        {"beneficiary": "new-beneficiary.testnet"}
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), IsLedgerOwner()]

    def get(self, request):
        try:
            beneficiary = get_ledger().beneficiary()
        except BaseApplicationError as e:
            return error_response(e)
        return Response({"beneficiary": beneficiary})

    def put(self, request):
        serializer = BeneficiarySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        beneficiary = serializer.validated_data["beneficiary"]

        try:
            get_ledger().change_beneficiary(call_context(request), beneficiary)
        except BaseApplicationError as e:
            return error_response(e)

        return Response({"beneficiary": beneficiary})


class InitializeLedgerView(APIView):
    """
    Initialize the ledger with its beneficiary.

    POST /api/v1/donations/init/

    Request body:
        {"beneficiary": "beneficiary.testnet"}

    Returns:
        201 on success, 409 if already initialized
    """

    permission_classes = [IsAuthenticated, IsLedgerOwner]

    def post(self, request):
        serializer = BeneficiarySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        beneficiary = serializer.validated_data["beneficiary"]

        try:
            get_ledger().initialize(call_context(request), beneficiary)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            {"beneficiary": beneficiary},
            status=status.HTTP_201_CREATED,
        )
