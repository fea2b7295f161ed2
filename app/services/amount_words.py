"""
Amount in words (Spanish) for the fiscal note of an electronic invoice
"""

ONES = ["", "uno", "dos", "tres", "cuatro", "cinco", "seis", "siete", "ocho", "nueve"]
TENS = ["", "diez", "veinte", "treinta", "cuarenta", "cincuenta", "sesenta", "setenta", "ochenta", "noventa"]
SPECIAL = {
    11: "once", 12: "doce", 13: "trece", 14: "catorce", 15: "quince",
    16: "dieciséis", 17: "diecisiete", 18: "dieciocho", 19: "diecinueve",
    21: "veintiuno", 22: "veintidós", 23: "veintitrés", 24: "veinticuatro",
    25: "veinticinco", 26: "veintiséis", 27: "veintisiete", 28: "veintiocho", 29: "veintinueve",
}
CURRENCY = " pesos"


def _parse_integer(num: str):
    text = str(num).strip()
    # Decimal amounts ("1234.50") are spelled by their integer part
    if "." in text:
        text = text.split(".", 1)[0]
    digits = text[1:] if text[:1] in "+-" else text
    # ASCII digits only: int() would also take "1_000" and non-Latin numerals
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(text)


def _strip_currency(words: str) -> str:
    if words.endswith(CURRENCY):
        return words[: -len(CURRENCY)]
    return words


def number_to_words(num: str) -> str:
    """
    Spell an amount in Spanish followed by "pesos".

    >>> number_to_words("100")
    'cien pesos'
    >>> number_to_words("1250")
    'mil doscientos cincuenta pesos'

    Amounts of a million or more fall back to digits ("1500000 pesos").
    Returns an empty string for non-numeric input.
    """
    value = _parse_integer(num)
    if value is None:
        return ""

    if value == 0:
        return "cero" + CURRENCY

    if value in SPECIAL:
        return SPECIAL[value] + CURRENCY

    if 0 < value < 10:
        return ONES[value] + CURRENCY

    if 0 < value < 100:
        tens_digit, ones_digit = divmod(value, 10)
        if ones_digit == 0:
            return TENS[tens_digit] + CURRENCY
        return TENS[tens_digit] + " y " + ONES[ones_digit] + CURRENCY

    if 0 < value < 1000:
        hundreds_digit, remainder = divmod(value, 100)
        hundreds_word = "cien"
        if hundreds_digit == 1 and remainder > 0:
            hundreds_word = "ciento"
        elif hundreds_digit > 1:
            hundreds_word = ONES[hundreds_digit] + "cientos"
        if remainder == 0:
            return hundreds_word + CURRENCY
        return hundreds_word + " " + _strip_currency(number_to_words(str(remainder))) + CURRENCY

    if 0 < value < 1000000:
        thousands, remainder = divmod(value, 1000)
        thousands_word = "mil"
        if thousands > 1:
            thousands_word = _strip_currency(number_to_words(str(thousands))) + " mil"
        if remainder == 0:
            return thousands_word + CURRENCY
        return thousands_word + " " + _strip_currency(number_to_words(str(remainder))) + CURRENCY

    return f"{value}{CURRENCY}"
