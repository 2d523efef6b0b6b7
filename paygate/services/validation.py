"""
Validation Primitives

Tagged check results and the input normalizers shared by the validators.

A check takes a value and returns either Ok(new_value) or Err(...). run_checks
threads the value through an ordered list of checks and stops at the first
Err, so later checks can rely on earlier ones (e.g. "is positive" only ever
sees a parsed Decimal).
"""
import html
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar, Union

from email_validator import EmailNotValidError, validate_email

T = TypeVar("T")

TWO_PLACES = Decimal("0.01")

# Largest value the Numeric(12, 2) ledger column holds
MAX_AMOUNT = Decimal("9999999999.99")

# C0 controls except tab/newline/carriage return, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Providers that ignore dots and +tags in the local part
_GMAIL_DOMAINS = {"gmail.com", "googlemail.com"}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    code: str
    message: str
    field: Optional[str] = None


Result = Union[Ok, Err]
Check = Callable[[Any], Result]


def run_checks(value: Any, checks: Iterable[Check]) -> Result:
    """Apply checks in order, short-circuiting on the first Err."""
    result: Result = Ok(value)
    for check in checks:
        result = check(result.value)
        if isinstance(result, Err):
            return result
    return result


# ============================================================================
# Normalizers
# ============================================================================

def sanitize_text(value: str) -> str:
    """
    Neutralize control characters and markup in free text.

    Idempotent: existing entities are decoded before escaping, so
    sanitize_text(sanitize_text(x)) == sanitize_text(x).
    """
    decoded = html.unescape(value)
    cleaned = _CONTROL_CHARS.sub("", decoded).strip()
    return html.escape(cleaned, quote=True)


def normalize_email(value: str) -> Optional[str]:
    """
    Validate email syntax and return its canonical form, or None if invalid.

    The whole address is lower-cased. Gmail addresses drop dots and any
    +tag from the local part and use the gmail.com domain.
    """
    try:
        normalized = validate_email(value.strip(), check_deliverability=False).normalized
    except EmailNotValidError:
        return None

    local, _, domain = normalized.lower().rpartition("@")
    if domain in _GMAIL_DOMAINS:
        local = local.split("+", 1)[0].replace(".", "")
        domain = "gmail.com"
        if not local:
            return None
    return f"{local}@{domain}"


def parse_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse an int, float, Decimal or numeric string into a finite Decimal.

    A comma is accepted as the decimal separator. Booleans are rejected even
    though they are ints.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        raw = value.strip().replace(",", ".")
        if not raw:
            return None
        try:
            number = Decimal(raw)
        except InvalidOperation:
            return None
    else:
        return None

    if not number.is_finite():
        return None
    return number


def to_two_places(amount: Decimal) -> Decimal:
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


# ============================================================================
# Reusable checks
# ============================================================================

def required_text(field: str, message: str, max_length: Optional[int] = None) -> Check:
    """Value must be a string that is non-empty after sanitizing."""
    def check(value: Any) -> Result:
        if not isinstance(value, str):
            return Err("VALIDATION_ERROR", message, field)
        cleaned = sanitize_text(value)
        if not cleaned:
            return Err("VALIDATION_ERROR", message, field)
        return _within_length(field, cleaned, max_length)
    return check


def optional_text(field: str, message: str, max_length: Optional[int] = None) -> Check:
    """None/empty passes as None; anything else must be a string."""
    def check(value: Any) -> Result:
        if value is None:
            return Ok(None)
        if not isinstance(value, str):
            return Err("VALIDATION_ERROR", message, field)
        cleaned = sanitize_text(value)
        if not cleaned:
            return Ok(None)
        return _within_length(field, cleaned, max_length)
    return check


def _within_length(field: str, cleaned: str, max_length: Optional[int]) -> Result:
    # Measured after escaping, since that is what gets stored
    if max_length is not None and len(cleaned) > max_length:
        return Err("VALIDATION_ERROR", f"{field} must be at most {max_length} characters.", field)
    return Ok(cleaned)


def numeric(field: str, message: str) -> Check:
    def check(value: Any) -> Result:
        number = parse_decimal(value)
        if (
            number is None
            or abs(number) > MAX_AMOUNT
            or abs(to_two_places(number)) > MAX_AMOUNT
        ):
            return Err("VALIDATION_ERROR", message, field)
        return Ok(number)
    return check


def positive(field: str, message: str) -> Check:
    def check(value: Decimal) -> Result:
        if value <= 0 or to_two_places(value) <= 0:
            return Err("VALIDATION_ERROR", message, field)
        return Ok(value)
    return check


def valid_email(field: str, message: str, max_length: Optional[int] = None) -> Check:
    def check(value: Any) -> Result:
        if not isinstance(value, str):
            return Err("VALIDATION_ERROR", message, field)
        normalized = normalize_email(value)
        if normalized is None:
            return Err("VALIDATION_ERROR", message, field)
        return _within_length(field, sanitize_text(normalized), max_length)
    return check
