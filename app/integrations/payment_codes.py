"""
Payment means codes for the electronic invoice ("medios de pago")

Only the codes the POS can actually receive are mapped. The rest of the
national table (ACH, cheques, promissory notes, ...) is never produced here.
"""
from app.schemas.invoice import PaymentCode, TaxCode

CASH = "10"
TRANSFER_CREDIT_BANK = "45"
TRANSFER_DEBIT_INTERBANK = "46"
TRANSFER_DEBIT_BANK = "47"
CREDIT_CARD = "48"
DEBIT_CARD = "49"

PAYMENT_CODE_MAP = {
    PaymentCode.CREDIT_CARD: CREDIT_CARD,
    PaymentCode.DEBIT_CARD: DEBIT_CARD,
    PaymentCode.CASH: CASH,
    PaymentCode.TRANSFER_CREDIT_BANK: TRANSFER_CREDIT_BANK,
    PaymentCode.TRANSFER_DEBIT_INTERBANK: TRANSFER_DEBIT_INTERBANK,
    PaymentCode.TRANSFER_DEBIT_BANK: TRANSFER_DEBIT_BANK,
}

TAX_CODE_MAP = {
    TaxCode.VAT: "01",
    TaxCode.ICO: "04",
}


def payment_code_to_provider(payment_code) -> str:
    """Unknown payment methods are reported as cash"""
    try:
        return PAYMENT_CODE_MAP.get(PaymentCode(payment_code), CASH)
    except ValueError:
        return CASH


def tax_code_to_provider(tax_code) -> str:
    try:
        return TAX_CODE_MAP[TaxCode(tax_code)]
    except (ValueError, KeyError):
        return str(tax_code)
