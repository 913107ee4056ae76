"""Exchange client layer -- Swyftx REST integration."""

from swyftx.exchange.client import ExchangeClient
from swyftx.exchange.session import CredentialManager
from swyftx.exchange.signer import RequestSigner, SignedRequest
from swyftx.exchange.swyftx_client import SwyftxClient
from swyftx.exchange.transport import HttpTransport, Transport

__all__ = [
    "CredentialManager",
    "ExchangeClient",
    "HttpTransport",
    "RequestSigner",
    "SignedRequest",
    "SwyftxClient",
    "Transport",
]
