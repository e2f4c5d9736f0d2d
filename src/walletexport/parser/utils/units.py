"""Minor-unit to display conversion and denomination symbols. Integer/Decimal math only."""

from decimal import Decimal

from walletexport.domain.models import ChainProfile

# Well-known Cosmos micro denoms
DENOM_SYMBOLS: dict[str, str] = {
    "uosmo": "OSMO",
    "uatom": "ATOM",
    "uusdc": "USDC",
    "uion": "ION",
    "utia": "TIA",
    "uusd": "UST",
    "uluna": "LUNA",
    "microtez": "XTZ",
    "mutez": "XTZ",
    "near": "NEAR",
    "yoctonear": "NEAR",
}

# 18-decimal Cosmos denoms
ATTO_DENOMS = frozenset({"aevmos", "inj", "adym", "acanto"})

# Look like micro denoms but are plain tickers
_NOT_MICRO = frozenset({"usdc", "usdt", "usd", "ust"})


def format_units(raw: int | str, decimals: int) -> str:
    """Render ``raw`` minor units with exactly ``decimals`` fractional digits.

    >>> format_units(12345678, 6)
    '12.345678'
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    value = int(raw)
    if decimals == 0:
        return str(value)
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10**decimals)
    return f"{sign}{whole}.{frac:0{decimals}d}"


def to_decimal(raw: int | str, decimals: int) -> Decimal:
    return Decimal(format_units(raw, decimals))


def parse_raw_amount(value: object) -> int | None:
    """Integer minor units from a provider field, or None when it isn't an integer."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    except ValueError:
        return None


def denom_to_symbol(denom: str, profile: ChainProfile | None = None) -> str:
    """Display symbol for an on-chain denomination."""
    if not denom:
        return ""
    if profile is not None and denom in profile.native_denoms:
        return profile.native_symbol
    lowered = denom.lower()
    if lowered in DENOM_SYMBOLS:
        return DENOM_SYMBOLS[lowered]
    if lowered.startswith("ibc/"):
        # Same trace hash always yields the same short symbol
        return "IBC/" + denom[4:10].upper()
    if lowered.startswith("factory/"):
        return denom.rsplit("/", 1)[-1].upper()
    if _is_micro(lowered):
        return denom[1:].upper()
    return denom.upper()


def denom_decimals(denom: str, default: int) -> int:
    """Decimals implied by a denomination prefix, else ``default``."""
    lowered = denom.lower()
    if lowered in ("wei", "native"):
        return 18 if lowered == "wei" else default
    if lowered in ("near", "yoctonear"):
        return 24
    if lowered in ("microtez", "mutez"):
        return 6
    if lowered.startswith(("ibc/", "factory/")):
        return default
    if _is_micro(lowered):
        return 6
    if lowered in ATTO_DENOMS:
        return 18
    return default


def _is_micro(lowered: str) -> bool:
    return lowered.startswith("u") and len(lowered) > 2 and lowered[1:].isalpha() and lowered not in _NOT_MICRO
