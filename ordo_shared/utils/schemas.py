"""
Pydantic schemas for every procedure input and output.

JSON field names are snake_case; money is always integer cents.
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from ordo_shared.utils.clock import restaurant_today
from ordo_shared.utils.validators import SLUG_PATTERN, TIME_PATTERN, validate_image_url, validate_phone


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["CUSTOMER", "ADMIN", "KITCHEN", "WAITER", "CASHIER"]
StaffRole = Literal["ADMIN", "KITCHEN", "WAITER", "CASHIER"]
OrderTypeLiteral = Literal["DINE_IN", "TAKEOUT", "DELIVERY"]
OrderStatusLiteral = Literal[
    "PENDING", "CONFIRMED", "PREPARING", "READY",
    "OUT_FOR_DELIVERY", "DELIVERED", "COMPLETED", "CANCELLED",
]
PaymentStatusLiteral = Literal["PENDING", "PAID"]
PaymentMethodLiteral = Literal["cash", "card", "transfer"]
ReservationStatusLiteral = Literal[
    "PENDING", "CONFIRMED", "SEATED", "COMPLETED", "CANCELLED", "NO_SHOW",
]

HHMM = Annotated[str, StringConstraints(pattern=TIME_PATTERN.pattern)]
Phone = Annotated[str, StringConstraints(max_length=20), AfterValidator(validate_phone)]


def _clean_image_urls(value: list[str]) -> list[str]:
    return [url for url in (validate_image_url(u) for u in value) if url]


ImageUrls = Annotated[list[str], AfterValidator(_clean_image_urls)]


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Auth
# =============================================================================


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    email: EmailStr
    name: str = Field(min_length=2, max_length=120)
    phone: Optional[Phone] = None
    password: str = Field(min_length=6, max_length=128)


class UserInfo(OrmModel):
    """Public view of a user, used in auth responses and staff listings."""

    id: int
    email: str
    name: str
    role: Role
    phone: Optional[str] = None
    is_active: bool = True


class StaffOutput(UserInfo):
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserInfo


class LogoutResponse(BaseModel):
    success: bool
    message: str


class StaffCreateRequest(BaseModel):
    email: EmailStr
    name: str = Field(min_length=2, max_length=120)
    role: StaffRole
    phone: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(min_length=6, max_length=128)


class StaffUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)
    role: Optional[StaffRole] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    is_active: Optional[bool] = None


# =============================================================================
# Restaurant
# =============================================================================


class DaySchedule(BaseModel):
    open: HHMM
    close: HHMM
    is_closed: bool = False


class OpeningHours(BaseModel):
    monday: DaySchedule
    tuesday: DaySchedule
    wednesday: DaySchedule
    thursday: DaySchedule
    friday: DaySchedule
    saturday: DaySchedule
    sunday: DaySchedule


class ServicesConfig(BaseModel):
    dine_in: bool = True
    takeout: bool = True
    delivery: bool = False
    reservations: bool = False


class DeliveryConfig(BaseModel):
    fee_cents: int = Field(default=0, ge=0)
    minimum_order_cents: int = Field(default=0, ge=0)
    radius_km: float = Field(default=5.0, gt=0)
    estimated_time_minutes: int = Field(default=45, ge=1)
    free_over_cents: Optional[int] = Field(default=None, ge=0)


class RestaurantConfigCreate(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    slug: str = Field(min_length=2, max_length=80, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    contact_info: dict[str, Any] = Field(default_factory=dict)
    address: dict[str, Any] = Field(default_factory=dict)
    opening_hours: OpeningHours
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    delivery_config: DeliveryConfig = Field(default_factory=DeliveryConfig)
    branding: dict[str, Any] = Field(default_factory=dict)


class RestaurantConfigUpdate(BaseModel):
    """Partial update. The slug is fixed at creation."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=120)
    description: Optional[str] = None
    contact_info: Optional[dict[str, Any]] = None
    address: Optional[dict[str, Any]] = None
    opening_hours: Optional[OpeningHours] = None
    services: Optional[ServicesConfig] = None
    delivery_config: Optional[DeliveryConfig] = None
    branding: Optional[dict[str, Any]] = None


class RestaurantConfigOutput(OrmModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    contact_info: dict[str, Any]
    address: dict[str, Any]
    opening_hours: OpeningHours
    services: ServicesConfig
    delivery_config: DeliveryConfig
    branding: dict[str, Any]
    is_active: bool


class IsOpenOutput(BaseModel):
    is_open: bool
    reason: Optional[str] = None
    restaurant_name: Optional[str] = None
    opening_hours: Optional[DaySchedule] = None
    current_time: str


class RestaurantStats(BaseModel):
    today_orders: int
    today_reservations: int
    total_customers: int
    today_sales_cents: int


class DiningTableCreate(BaseModel):
    number: int = Field(ge=1)
    seats: int = Field(ge=1, le=20)
    label: Optional[str] = Field(default=None, max_length=60)


class DiningTableUpdate(BaseModel):
    seats: Optional[int] = Field(default=None, ge=1, le=20)
    label: Optional[str] = Field(default=None, max_length=60)
    is_active: Optional[bool] = None


class DiningTableOutput(OrmModel):
    id: int
    number: int
    seats: int
    label: Optional[str] = None
    is_active: bool


# =============================================================================
# Menu
# =============================================================================


class CategoryCreate(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    description: Optional[str] = None
    sort_order: int = 0


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)
    description: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryOutput(OrmModel):
    id: int
    name: str
    description: Optional[str] = None
    sort_order: int
    is_active: bool


class DietaryInfo(BaseModel):
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    spicy_level: int = Field(default=0, ge=0, le=5)


class ModifierOption(BaseModel):
    name: str = Field(min_length=1, max_length=80)


class ModifierCreate(BaseModel):
    menu_item_id: int
    name: str = Field(min_length=1, max_length=120)
    price_adjustment_cents: int = 0
    is_required: bool = False
    options: list[ModifierOption] = Field(default_factory=list)


class ModifierUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    price_adjustment_cents: Optional[int] = None
    is_required: Optional[bool] = None
    options: Optional[list[ModifierOption]] = None


class ModifierOutput(OrmModel):
    id: int
    menu_item_id: int
    name: str
    price_adjustment_cents: int
    is_required: bool
    options: list[ModifierOption]


class MenuItemCreate(BaseModel):
    category_id: int
    name: str = Field(min_length=2, max_length=160)
    description: Optional[str] = None
    price_cents: int = Field(gt=0)
    image_urls: ImageUrls = Field(default_factory=list)
    preparation_time_minutes: Optional[int] = Field(default=None, ge=1, le=600)
    is_available: bool = True
    is_featured: bool = False
    ingredients: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    dietary_info: DietaryInfo = Field(default_factory=DietaryInfo)


class MenuItemUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=2, max_length=160)
    description: Optional[str] = None
    price_cents: Optional[int] = Field(default=None, gt=0)
    image_urls: Optional[ImageUrls] = None
    preparation_time_minutes: Optional[int] = Field(default=None, ge=1, le=600)
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    ingredients: Optional[list[str]] = None
    allergens: Optional[list[str]] = None
    dietary_info: Optional[DietaryInfo] = None


class MenuItemOutput(OrmModel):
    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    price_cents: int
    image_urls: list[str]
    preparation_time_minutes: Optional[int] = None
    is_available: bool
    is_featured: bool
    ingredients: list[str]
    allergens: list[str]
    dietary_info: DietaryInfo
    modifiers: list[ModifierOutput] = Field(default_factory=list)


class MenuItemPreview(OrmModel):
    id: int
    name: str
    price_cents: int
    image_urls: list[str]


class CategoryPreviewOutput(CategoryOutput):
    preview_items: list[MenuItemPreview]
    item_count: int


class CategoryWithItemsOutput(CategoryOutput):
    items: list[MenuItemOutput]


class ToggleAvailabilityRequest(BaseModel):
    is_available: bool


# =============================================================================
# Orders
# =============================================================================


class SelectedModifier(BaseModel):
    modifier_id: int
    selected_options: list[str] = Field(default_factory=list)


class OrderItemInput(BaseModel):
    menu_item_id: int
    quantity: int = Field(ge=1, le=99)
    special_instructions: Optional[str] = Field(default=None, max_length=500)
    modifiers: list[SelectedModifier] = Field(default_factory=list)


class CustomerInfo(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    phone: Phone
    email: Optional[EmailStr] = None


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class DeliveryAddress(BaseModel):
    street: str = Field(min_length=1)
    neighborhood: str = Field(min_length=1)
    city: str = Field(min_length=1)
    references: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class OrderQuoteRequest(BaseModel):
    order_type: OrderTypeLiteral
    items: list[OrderItemInput] = Field(min_length=1)


class OrderCreate(OrderQuoteRequest):
    customer_info: CustomerInfo
    delivery_address: Optional[DeliveryAddress] = None
    table_number: Optional[str] = Field(default=None, max_length=20)
    special_instructions: Optional[str] = Field(default=None, max_length=1000)
    payment_method: PaymentMethodLiteral

    @model_validator(mode="after")
    def _delivery_needs_address(self) -> "OrderCreate":
        if self.order_type == "DELIVERY" and self.delivery_address is None:
            raise ValueError("delivery_address is required for DELIVERY orders")
        return self


class ModifierSnapshot(BaseModel):
    id: int
    name: str
    price_adjustment_cents: int
    selected_options: list[str] = Field(default_factory=list)


class QuoteLine(BaseModel):
    menu_item_id: int
    name: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int
    modifiers: list[ModifierSnapshot]
    special_instructions: Optional[str] = None


class QuoteOutput(BaseModel):
    order_type: OrderTypeLiteral
    lines: list[QuoteLine]
    subtotal_cents: int
    tax_amount_cents: int
    delivery_fee_cents: int
    total_cents: int


class OrderItemOutput(OrmModel):
    id: int
    menu_item_id: int
    menu_item_name: Optional[str] = None
    quantity: int
    unit_price_cents: int
    total_price_cents: int
    modifiers: list[ModifierSnapshot]
    special_instructions: Optional[str] = None


class CustomerOutput(OrmModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None


class OrderOutput(OrmModel):
    id: int
    order_number: str
    order_type: OrderTypeLiteral
    status: OrderStatusLiteral
    subtotal_cents: int
    tax_amount_cents: int
    delivery_fee_cents: int
    tip_amount_cents: int
    discount_amount_cents: int
    total_cents: int
    payment_status: PaymentStatusLiteral
    payment_method: PaymentMethodLiteral
    payment_reference: Optional[str] = None
    customer_name: str
    customer_phone: str
    delivery_address: Optional[dict[str, Any]] = None
    table_number: Optional[str] = None
    special_instructions: Optional[str] = None
    estimated_ready_time: Optional[datetime] = None
    ready_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: list[OrderItemOutput]
    customer: Optional[CustomerOutput] = None


class KitchenOrderOutput(OrderOutput):
    elapsed_minutes: int


class OrderStatusUpdate(BaseModel):
    status: OrderStatusLiteral
    estimated_ready_time: Optional[datetime] = None


class ConfirmPaymentRequest(BaseModel):
    payment_reference: Optional[str] = Field(default=None, max_length=120)
    tip_amount_cents: int = Field(default=0, ge=0)


class PopularItem(BaseModel):
    menu_item_id: int
    name: str
    quantity: int
    revenue_cents: int


class SalesStats(BaseModel):
    total_orders: int
    total_revenue_cents: int
    average_order_value_cents: int
    orders_by_type: dict[str, int]
    popular_items: list[PopularItem]


# =============================================================================
# Reservations
# =============================================================================


class ReservationCreate(BaseModel):
    customer_name: str = Field(min_length=2, max_length=120)
    customer_phone: Phone
    reservation_date: date
    reservation_time: HHMM
    party_size: int = Field(ge=1, le=20)
    table_preferences: Optional[str] = Field(default=None, max_length=500)
    special_requests: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("reservation_date")
    @classmethod
    def _not_in_past(cls, value: date) -> date:
        if value < restaurant_today():
            raise ValueError("reservation_date cannot be in the past")
        return value


class ReservationUpdate(BaseModel):
    status: Optional[ReservationStatusLiteral] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    table_preferences: Optional[str] = Field(default=None, max_length=500)
    special_requests: Optional[str] = Field(default=None, max_length=1000)
    dining_table_id: Optional[int] = None


class ReservationCancelRequest(BaseModel):
    customer_phone: Optional[str] = None
    reason: Optional[str] = Field(default=None, max_length=500)


class ReservationOutput(OrmModel):
    id: int
    customer_id: int
    customer_name: str
    customer_phone: str
    reservation_date: date
    reservation_time: str
    party_size: int
    table_preferences: Optional[str] = None
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    dining_table_id: Optional[int] = None
    status: ReservationStatusLiteral
    created_at: Optional[datetime] = None


class AvailableTimesOutput(BaseModel):
    available_times: list[str]
    message: Optional[str] = None


class PeakTime(BaseModel):
    hour: str
    count: int


class ReservationStats(BaseModel):
    total: int
    by_status: dict[str, int]
    average_party_size: float
    peak_times: list[PeakTime]


# =============================================================================
# Health
# =============================================================================


class HealthOutput(BaseModel):
    status: str
    timestamp: datetime
    service: str
