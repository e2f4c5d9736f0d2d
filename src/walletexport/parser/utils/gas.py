"""Network fee calculation for EVM-style providers. Integer math in wei."""

from walletexport.parser.utils.units import parse_raw_amount


def calculate_gas_fee_wei(gas_used: object, gas_price: object, l1_fee: object = None) -> int:
    """gasUsed x gasPrice, plus the L1 data fee some L2 explorers report. Hex or decimal strings."""
    fee = (parse_raw_amount(gas_used) or 0) * (parse_raw_amount(gas_price) or 0)
    fee += parse_raw_amount(l1_fee) or 0
    return fee


def etherscan_fee_wei(tx_data: dict) -> int:
    return calculate_gas_fee_wei(tx_data.get("gasUsed"), tx_data.get("gasPrice"), tx_data.get("l1Fee"))


def covalent_fee_wei(item: dict) -> int:
    # fees_paid is exact when present; gas_spent x gas_price otherwise
    paid = parse_raw_amount(item.get("fees_paid"))
    if paid is not None:
        return paid
    return calculate_gas_fee_wei(item.get("gas_spent"), item.get("gas_price"))
