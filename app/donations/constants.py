"""
Constants for the donation ledger.

Amounts are unsigned integers in the smallest unit of the host's native
token (1 NEAR = 10**24 yoctoNEAR), so they are kept as Python ints end to
end and never pass through floats.
"""

# One whole token in minor units
ONE_TOKEN = 10**24

# Fee kept back from every donation to pay for the storage its record uses
STORAGE_COST = 10**21

# Largest amount a ledger entry can hold (u128)
MAX_AMOUNT = 2**128 - 1

# Decimal digits needed to write MAX_AMOUNT
AMOUNT_DIGITS = len(str(MAX_AMOUNT))

# Page size used by get_donations when the caller gives no limit
DEFAULT_PAGE_LIMIT = 50

# Account identity bounds
ACCOUNT_ID_MIN_LENGTH = 2
ACCOUNT_ID_MAX_LENGTH = 64

DEFAULT_CONTRACT_ACCOUNT_ID = "donations.testnet"
DEFAULT_TRANSFER_BACKEND = "donations.transfers.LoggingTransferBackend"
DEFAULT_TRANSFER_MAX_RETRIES = 3
