from pydantic import BaseModel, Field
from typing import Dict, List


class EntityCount(BaseModel):
    """All-time totals shown on the dashboard cards."""
    user: int = Field(ge=0)
    product: int = Field(ge=0)
    order: int = Field(ge=0)
    revenue: float


class PercentChange(BaseModel):
    """Current calendar month vs. previous calendar month, in percent."""
    revenue: float
    product: float
    user: float
    order: float


class OrderChart(BaseModel):
    """Six-month order count and revenue series, oldest month first."""
    order: List[int]
    revenue: List[float]


class UserRatio(BaseModel):
    male: int = Field(ge=0)
    female: int = Field(ge=0)


class LatestTransaction(BaseModel):
    """Trimmed order view; the full order payload is never exposed here."""
    id: str
    discount: float
    amount: float
    quantity: int = Field(ge=0, description="Number of order items")
    status: str


class DashboardStats(BaseModel):
    count: EntityCount
    category_count: Dict[str, int]
    percent_change: PercentChange
    chart: OrderChart
    user_ratio: UserRatio
    latest_transactions: List[LatestTransaction]


class OrderFulfillment(BaseModel):
    processing: int = Field(ge=0)
    shipped: int = Field(ge=0)
    delivered: int = Field(ge=0)


class StockAvailability(BaseModel):
    in_stock: int = Field(ge=0)
    out_of_stock: int = Field(ge=0)


class RevenueDistribution(BaseModel):
    net_margin: float
    discount: float
    production_cost: float = Field(description="Sum of shipping charges")
    burnt: float = Field(description="Sum of tax")
    marketing_cost: float


class UserAgeGroup(BaseModel):
    teen: int = Field(ge=0, description="Younger than 20")
    adult: int = Field(ge=0, description="20 to 39")
    old: int = Field(ge=0, description="40 and older")


class AdminCustomer(BaseModel):
    admin: int = Field(ge=0)
    customer: int = Field(ge=0)


class PieCharts(BaseModel):
    order_fulfillment: OrderFulfillment
    product_categories: Dict[str, int]
    stock_availability: StockAvailability
    revenue_distribution: RevenueDistribution
    admin_customer: AdminCustomer
    user_age_group: UserAgeGroup


class BarCharts(BaseModel):
    users: List[int]
    products: List[int]
    orders: List[int]


class LineCharts(BaseModel):
    products: List[int]
    users: List[int]
    discount: List[float]
    revenue: List[float]


class DashboardStatsResponse(BaseModel):
    success: bool = True
    stats: DashboardStats


class PieChartsResponse(BaseModel):
    success: bool = True
    charts: PieCharts


class BarChartsResponse(BaseModel):
    success: bool = True
    charts: BarCharts


class LineChartsResponse(BaseModel):
    success: bool = True
    charts: LineCharts
