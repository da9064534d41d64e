"""
Display formatting for cash flow output.

Numbers stay numeric in every result; this module only builds the
human-readable labels shown next to one-off cash events.
"""

from typing import Dict, List

from app.calculations.cashflow import CashEvent, CashEventKind, MonthlyRow

CURRENCY_SYMBOL = "₹"

EVENT_LABELS = {
    CashEventKind.down_payment: "down payment",
    CashEventKind.builder_upfront: "builder's remaining amount",
    CashEventKind.possession: "possession amount",
    CashEventKind.stamp_duty: "stamp duty & registration charges",
    CashEventKind.transfer_fees: "transfer fees",
    CashEventKind.sale: "selling price",
    CashEventKind.loan_repayment: "loan repayment at sale",
    CashEventKind.undisbursed_loan: "remaining loan disbursed amount",
}


def _group_indian(digits: str) -> str:
    """Group digits as 12,34,56,789 (last three, then pairs)."""
    if len(digits) <= 3:
        return digits
    head, last_three = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + last_three


def format_inr(amount) -> str:
    """
    Format an amount in rupees with Indian digit grouping.

    Whole numbers print without decimals; fractional amounts keep two.

    >>> format_inr(12345678)
    '₹1,23,45,678'
    >>> format_inr(-1500.5)
    '-₹1,500.50'
    """
    negative = amount < 0
    amount = abs(amount)

    if float(amount).is_integer():
        integer_part, decimal_part = str(int(amount)), ""
    else:
        integer_part, decimal_part = f"{amount:.2f}".split(".")

    formatted = CURRENCY_SYMBOL + _group_indian(integer_part)
    if decimal_part:
        formatted += "." + decimal_part
    if negative:
        formatted = "-" + formatted
    return formatted


def describe_event(event: CashEvent) -> str:
    """Label an event, e.g. 'down payment (-₹5,00,000)'."""
    sign = "+" if event.amount > 0 else "-"
    return f"{EVENT_LABELS[event.kind]} ({sign}{format_inr(int(abs(event.amount)))})"


def row_to_dict(row: MonthlyRow) -> Dict:
    """Serialize a monthly row with two-decimal amounts and event labels."""
    return {
        "month": row.label,
        "opening_balance": round(row.opening_balance, 2),
        "other_cash_flow": {
            "value": round(row.other_cash_flow, 2),
            "components": [describe_event(event) for event in row.events],
        },
        "emi": round(row.emi, 2),
        "interest": round(row.interest, 2),
        "principal": round(row.principal, 2),
        "closing_balance": round(row.closing_balance, 2),
        "builder_amount": round(row.builder_amount, 2),
        "net_cash_flow": round(row.net_cash_flow, 2),
    }


def rows_to_dicts(rows) -> List[Dict]:
    return [row_to_dict(row) for row in rows]
