from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class AuthRules(BaseModel):
    token_ttl_minutes: int = 1440
    password_min_length: int = 8

class CatalogRules(BaseModel):
    shop_name_max: int = 120
    item_name_max: int = 100
    description_max: int = 500
    item_types: list[str]
    shop_types: list[str]

class SearchRules(BaseModel):
    relevance_threshold: float = 0.3
    default_limit: int = 10
    min_query_length: int = 2
    item_suggestions: int = 4
    shop_suggestions: int = 2
    max_suggestions: int = 6
    did_you_mean_limit: int = 5
    popular_window: int = 100

class BookingRules(BaseModel):
    source: str = "SamanKhojo"
    default_customer_name: str = "Customer"
    default_unit: str = "piece"
    transitions: dict[str, list[str]]

class RatingRules(BaseModel):
    min: int = 1
    max: int = 5

class FeedbackRules(BaseModel):
    subject_min_length: int = 5
    message_min_length: int = 10
    types: list[str]
    statuses: list[str]
    priority_by_type: dict[str, str] = Field(default_factory=dict)
    default_priority: str = "medium"

class InventoryRules(BaseModel):
    low_stock_threshold: float = 10
    high_priority_stock: float = 5
    restock_minimum: float = 50
    restock_multiplier: float = 3
    movements_limit: int = 50

class TrendingRules(BaseModel):
    default_limit: int = 10
    max_limit: int = 50
    default_priority: int = 1

class DefaultCategory(BaseModel):
    name: str
    hindi_name: str = ""
    icon: str = ""

class CategoryRules(BaseModel):
    name_max: int = 100
    description_max: int = 500
    defaults: list[DefaultCategory] = Field(default_factory=list)

class FestivalRules(BaseModel):
    name_pattern: str = "^[a-z0-9-]+$"
    max_duration_days: int = 60
    expiry_job_enabled: bool = True
    expiry_poll_seconds: int = 300

class UploadRules(BaseModel):
    max_upload_bytes: int
    allowed_mime_prefixes: list[str]
    storage_root: str = "festival-assets"

class RateLimitWindow(BaseModel):
    window_seconds: int
    max_requests: int

class RateLimitRules(BaseModel):
    admin: RateLimitWindow
    admin_heavy: RateLimitWindow

class Rules(BaseModel):
    project: ProjectRules
    auth: AuthRules
    catalog: CatalogRules
    search: SearchRules
    bookings: BookingRules
    ratings: RatingRules
    feedback: FeedbackRules
    inventory: InventoryRules = Field(default_factory=InventoryRules)
    categories: CategoryRules = Field(default_factory=CategoryRules)
    trending: TrendingRules = Field(default_factory=TrendingRules)
    festivals: FestivalRules
    uploads: UploadRules
    rate_limits: RateLimitRules
