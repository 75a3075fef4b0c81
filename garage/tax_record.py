"""TaxRecord class for vehicle tax due dates."""
from typing import Any, Optional

TAX_TYPES = ("annual", "five-year")


class TaxRecord:
    """A vehicle tax payment, due on a date and optionally already paid."""

    def __init__(
            self,
            id: str,
            vehicle_id: Optional[str],
            user_id: str,
            tax_type: str,
            due_date: Any = None,
            amount: Optional[float] = None,
            is_paid: bool = False,
            paid_date: Any = None,
            notes: Optional[str] = None,
            created_at: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.user_id = user_id
        self.tax_type = tax_type
        self.due_date = due_date
        self.amount = amount
        self.is_paid = bool(is_paid)
        self.paid_date = paid_date
        self.notes = notes
        self.created_at = created_at
