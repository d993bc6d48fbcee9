# order_recon/models/records.py

from typing import NamedTuple, Optional
from pydantic import BaseModel


# ============================================
# Column names
# ============================================

EOM_ORDER_DATE = "Order Date"
EOM_ORDER_NUMBER = "Order Number"
EOM_UPC = "Upc"
EOM_PRODUCT_OPTION_VALUE = "Product Option Value"

RADIAL_ORDER_NUMBER = "Client Web Order Number (Alternative)"
RADIAL_UPC = "Item UPC"

# Radial order numbers carry a fixed-length client prefix
DEFAULT_ORDER_PREFIX_LENGTH = 5


def _present(value: Optional[str]) -> Optional[str]:
    return value if value else None


class MatchKey(NamedTuple):
    order_number: str
    upc: str


# ============================================
# EOM (primary) rows
# ============================================

class EomRecord(BaseModel):
    """A row of the EOM order export."""

    order_date: Optional[str] = None
    order_number: Optional[str] = None
    upc: Optional[str] = None
    product_option_value: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "EomRecord":
        return cls(
            order_date=_present(row.get(EOM_ORDER_DATE)),
            order_number=_present(row.get(EOM_ORDER_NUMBER)),
            upc=_present(row.get(EOM_UPC)),
            product_option_value=row.get(EOM_PRODUCT_OPTION_VALUE),
        )

    def match_key(self) -> Optional[MatchKey]:
        if not self.order_number or not self.upc:
            return None
        return MatchKey(self.order_number, self.upc)


# ============================================
# Radial (secondary) rows
# ============================================

class RadialRecord(BaseModel):
    """A row of the Radial fulfillment export."""

    order_number: Optional[str] = None
    upc: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "RadialRecord":
        return cls(
            order_number=_present(row.get(RADIAL_ORDER_NUMBER)),
            upc=_present(row.get(RADIAL_UPC)),
        )

    def match_key(self, prefix_length: int = DEFAULT_ORDER_PREFIX_LENGTH) -> Optional[MatchKey]:
        """
        Key used to look up EOM rows.

        The client prefix is dropped from the order number. Returns None
        when either field is absent or nothing is left after the prefix.
        """
        if not self.order_number or not self.upc:
            return None
        stripped = self.order_number[prefix_length:]
        if not stripped:
            return None
        return MatchKey(stripped, self.upc)
