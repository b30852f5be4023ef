from datetime import UTC, date, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
RoleType = Literal["customer", "admin"]
UserStatus = Literal["active", "disabled"]
ShopType = Literal["product", "menu", "service", "office"]
ItemType = Literal["product", "menu", "service"]
BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]
FeedbackType = Literal["bug", "feature", "complaint", "suggestion", "general"]
FeedbackStatus = Literal["pending", "in_progress", "resolved", "closed"]
Priority = Literal["low", "medium", "high"]
AssetType = Literal[
    "banner", "poster", "overlay", "video", "decoration", "template", "audio", "sticker"
]
AssetCategory = Literal["festival", "template", "common", "seasonal"]
AssetStatus = Literal["active", "archived", "processing"]
LayoutPosition = Literal["hero", "navbar", "footer", "sidebar", "background", "overlay"]
BannerPosition = Literal["hero", "navbar", "footer", "sidebar", "popup", "overlay"]
FestivalStatus = Literal["draft", "active", "scheduled", "expired"]
StockStatus = Literal["in_stock", "low_stock", "out_of_stock", "untracked"]
StockAlertStatus = Literal["active", "notified", "cancelled"]


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- User & Auth ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    display_name: str
    phone: str | None = None
    password_hash: str
    roles: list[RoleType] = Field(default_factory=lambda: ["customer"])
    status: UserStatus = "active"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles

# --- Shops & Catalog ---

class GeoPoint(BaseModel):
    lat: float
    lng: float

class Shop(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    reference_id: str | None = None
    shop_name: str
    owner_name: str
    type: str
    shop_type: ShopType = "product"
    district: str
    address: str
    phone: str
    opening_time: str | None = None
    closing_time: str | None = None
    map_link: str | None = None
    is_featured: bool = False
    is_verified: bool = False
    is_hidden: bool = False
    location: GeoPoint | None = None
    image_url: str | None = None
    average_rating: float | None = None
    total_reviews: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Variation(BaseModel):
    size: str
    price: float | None = None
    availability: bool = True

class CompanyVariation(BaseModel):
    company_name: str
    variations: list[Variation] = Field(default_factory=list)

class Item(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    reference_id: str | None = None
    shop_id: UUID
    type: ItemType
    name: str | None = None
    description: str | None = None
    price: float | None = None
    availability: bool = True
    category: str | None = None
    brand_name: list[str] = Field(default_factory=list)
    variety: list[str] = Field(default_factory=list)
    packs: list[str] = Field(default_factory=list)
    price_range: tuple[float, float] | None = None
    in_stock: float | None = None
    low_stock_threshold: float | None = None
    unit: str | None = None
    highlights: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    companies: list[CompanyVariation] = Field(default_factory=list)
    primary_company: str | None = None
    is_popular: bool = False
    is_featured: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Review(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    shop_id: UUID
    user_id: str
    user_name: str
    rating: int
    comment: str = ""
    helpful_count: int = 0
    is_verified: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Category(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    hindi_name: str = ""
    icon: str = ""
    description: str = ""
    is_active: bool = True
    sort_order: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class TrendingItem(BaseModel):
    """An item an admin has pinned to the trending list."""

    id: UUID = Field(default_factory=uuid4)
    item_id: UUID
    shop_id: UUID
    item_name: str
    shop_name: str
    category: str | None = None
    image_url: str | None = None
    priority: int = 1
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

# --- Inventory ---

class StockMovement(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    item_id: UUID
    shop_id: UUID
    old_stock: float | None = None
    new_stock: float
    reason: str = "manual"
    updated_by: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

class StockAlert(BaseModel):
    """A customer waiting for an out-of-stock item to come back."""

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    item_id: UUID
    shop_id: UUID
    item_name: str
    search_query: str | None = None
    status: StockAlertStatus = "active"
    created_at: datetime = Field(default_factory=utc_now)
    notified_at: datetime | None = None

# --- Bag & Bookings ---

class BagItem(BaseModel):
    item_id: str
    item_name: str
    shop_id: str
    shop_name: str
    quantity: int = 1
    unit: str = "piece"
    price: float | None = None
    added_at: datetime = Field(default_factory=utc_now)

class Bag(BaseModel):
    user_id: str
    items: list[BagItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class BookingLine(BaseModel):
    item_id: str | None = None
    item_name: str
    quantity: int
    unit: str
    price: float | None = None

class BookingShop(BaseModel):
    shop_id: str
    shop_name: str
    shop_phone: str | None = None
    items: list[BookingLine] = Field(default_factory=list)
    status: BookingStatus = "pending"
    confirmed_via: str = "WhatsAppDeepLink"
    whatsapp_link: str | None = None

class Booking(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: str
    user_name: str
    user_phone: str | None = None
    shops: list[BookingShop] = Field(default_factory=list)
    total_shops: int = 0
    total_items: int = 0
    status: BookingStatus = "pending"
    source: str = "SamanKhojo"
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

# --- Feedback ---

class Feedback(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: str | None = None
    user_name: str = "Anonymous"
    user_email: str | None = None
    type: FeedbackType
    category: str
    subject: str
    message: str
    rating: int | None = None
    status: FeedbackStatus = "pending"
    priority: Priority = "medium"
    admin_notes: str | None = None
    user_agent: str | None = None
    url: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

# --- Festivals, Assets & Banners ---

class Asset(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    original_name: str
    type: AssetType
    category: AssetCategory
    mime_type: str
    size: int
    storage_path: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    festival_ids: list[str] = Field(default_factory=list)
    usage_count: int = 0
    is_public: bool = False
    status: AssetStatus = "active"
    layout_position: LayoutPosition | None = None
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Festival(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    display_name: str
    description: str = ""
    start_date: date
    end_date: date
    is_active: bool = False
    style: dict[str, Any] = Field(default_factory=dict)
    asset_ids: list[str] = Field(default_factory=list)
    priority: int = 1
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def status_on(self, today: date) -> FestivalStatus:
        """Derive the lifecycle status for a given (UTC) day."""
        if today > self.end_date:
            return "expired"
        if not self.is_active:
            return "draft"
        if today < self.start_date:
            return "scheduled"
        return "active"

    def in_window(self, today: date) -> bool:
        return self.start_date <= today <= self.end_date

class Banner(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    banner_asset_id: str | None = None
    video_asset_id: str | None = None
    sticker_asset_ids: list[str] = Field(default_factory=list)
    is_active: bool = False
    style: dict[str, Any] = Field(default_factory=dict)
    position: BannerPosition = "hero"
    priority: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

# --- Search ---

class SearchLog(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    query: str
    result_count: int
    user_id: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
