"""
Record types passed between the pipeline stages.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

ORDER_STATUSES = ('Food Processing', 'Out for Delivery', 'Delivered')


@dataclass
class LineItem:
    """One food entry within an order."""
    item_id: Optional[str]
    name: Optional[str]
    unit_price: Optional[float]
    quantity: Optional[int] = 1


@dataclass
class Order:
    """One customer purchase."""
    order_id: str
    customer_id: Optional[str]
    items: List[LineItem]
    amount: float
    payment: bool
    status: str
    placed_at: datetime
    address: Dict = field(default_factory=dict)


@dataclass
class FoodItem:
    """Menu catalog entry."""
    item_id: str
    name: str
    category: Optional[str] = None
    price: Optional[float] = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    special_offer: Optional[Dict] = None


@dataclass
class SummaryRow:
    """Ranked per-item popularity statistics."""
    item_id: str
    name: str
    quantity: int
    revenue: float
    avg_price: float


@dataclass
class MonthlyRevenue:
    """Paid order amount for one calendar month."""
    label: str
    year: int
    month: int
    amount: float


@dataclass
class CustomerSummary:
    """Order count and spend for one customer."""
    customer_id: Optional[str]
    name: str
    orders: int
    amount: float


@dataclass
class Report:
    """Popularity rows together with their totals."""
    rows: List[SummaryRow]
    total_quantity: int
    total_revenue: float
    top_item: Optional[SummaryRow]


@dataclass
class OrderSummary:
    """Headline counts for an order listing."""
    total_orders: int
    paid_orders: int
    revenue: float
