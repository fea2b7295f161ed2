# Invoice Provider Integrations Package
from .base import InvoiceProvider, InvoiceSubmission, InvoiceConfirmation, DocumentStatus
from .electronic_invoice import ElectronicInvoiceClient

__all__ = [
    "InvoiceProvider",
    "InvoiceSubmission",
    "InvoiceConfirmation",
    "DocumentStatus",
    "ElectronicInvoiceClient",
]
