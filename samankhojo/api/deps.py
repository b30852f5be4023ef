import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from samankhojo.adapters.auth.crypto import PasslibPasswordHasher
from samankhojo.adapters.clock import SystemClock
from samankhojo.adapters.fs.filestore import FileSystemStore
from samankhojo.adapters.sqlite.repos import (
    SQLiteAssetRepo,
    SQLiteBagRepo,
    SQLiteBannerRepo,
    SQLiteBookingRepo,
    SQLiteCategoryRepo,
    SQLiteFeedbackRepo,
    SQLiteFestivalRepo,
    SQLiteItemRepo,
    SQLiteReviewRepo,
    SQLiteSearchLogRepo,
    SQLiteShopRepo,
    SQLiteStockAlertRepo,
    SQLiteStockMovementRepo,
    SQLiteTrendingRepo,
    SQLiteUserRepo,
)
from samankhojo.api.auth_utils import decode_access_token
from samankhojo.app_shell.rate_limit import RateLimiter
from samankhojo.components.analytics import AnalyticsService
from samankhojo.components.assets import AssetService
from samankhojo.components.auth import AuthService
from samankhojo.components.bag import BagService
from samankhojo.components.banners import BannerService
from samankhojo.components.bookings import BookingService
from samankhojo.components.categories import CategoryService
from samankhojo.components.feedback import FeedbackService
from samankhojo.components.festivals import FestivalService
from samankhojo.components.inventory import InventoryService
from samankhojo.components.items import ItemService
from samankhojo.components.ratings import RatingService
from samankhojo.components.search import SearchService
from samankhojo.components.shops import ShopService
from samankhojo.components.trending import TrendingService
from samankhojo.domain.entities import Booking, Item, Review, SearchLog, Shop, User
from samankhojo.rules.loader import load_rules
from samankhojo.rules.models import Rules

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.data_dir = Path(os.environ.get("SAMANKHOJO_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "samankhojo.db")
        self.assets_dir = self.data_dir / "assets"
        self.rules_path = Path(os.environ.get("SAMANKHOJO_RULES_PATH", PROJECT_ROOT / "rules.yaml"))
        self.migrations_dir = PROJECT_ROOT / "migrations"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Adapters ---
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(base_path=str(settings.assets_dir))


def get_password_hasher() -> PasslibPasswordHasher:
    return PasslibPasswordHasher()


_rate_limiter_instance: RateLimiter | None = None


def get_rate_limiter(rules: Rules = Depends(get_rules)) -> RateLimiter:
    """Get rate limiter singleton. History lives in process memory."""
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        _rate_limiter_instance = RateLimiter(rules.rate_limits)
    return _rate_limiter_instance


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_shop_repo(settings: Settings = Depends(get_settings)) -> SQLiteShopRepo:
    return SQLiteShopRepo(settings.db_path)


def get_item_repo(settings: Settings = Depends(get_settings)) -> SQLiteItemRepo:
    return SQLiteItemRepo(settings.db_path)


def get_review_repo(settings: Settings = Depends(get_settings)) -> SQLiteReviewRepo:
    return SQLiteReviewRepo(settings.db_path)


def get_bag_repo(settings: Settings = Depends(get_settings)) -> SQLiteBagRepo:
    return SQLiteBagRepo(settings.db_path)


def get_booking_repo(settings: Settings = Depends(get_settings)) -> SQLiteBookingRepo:
    return SQLiteBookingRepo(settings.db_path)


def get_feedback_repo(settings: Settings = Depends(get_settings)) -> SQLiteFeedbackRepo:
    return SQLiteFeedbackRepo(settings.db_path)


def get_asset_repo(settings: Settings = Depends(get_settings)) -> SQLiteAssetRepo:
    return SQLiteAssetRepo(settings.db_path)


def get_festival_repo(settings: Settings = Depends(get_settings)) -> SQLiteFestivalRepo:
    return SQLiteFestivalRepo(settings.db_path)


def get_banner_repo(settings: Settings = Depends(get_settings)) -> SQLiteBannerRepo:
    return SQLiteBannerRepo(settings.db_path)


def get_search_log_repo(settings: Settings = Depends(get_settings)) -> SQLiteSearchLogRepo:
    return SQLiteSearchLogRepo(settings.db_path)


def get_category_repo(settings: Settings = Depends(get_settings)) -> SQLiteCategoryRepo:
    return SQLiteCategoryRepo(settings.db_path)


def get_trending_repo(settings: Settings = Depends(get_settings)) -> SQLiteTrendingRepo:
    return SQLiteTrendingRepo(settings.db_path)


def get_stock_movement_repo(settings: Settings = Depends(get_settings)) -> SQLiteStockMovementRepo:
    return SQLiteStockMovementRepo(settings.db_path)


def get_stock_alert_repo(settings: Settings = Depends(get_settings)) -> SQLiteStockAlertRepo:
    return SQLiteStockAlertRepo(settings.db_path)


# --- Read-side adapters for components that scan several collections ---
class RepoSearchCatalog:
    """SearchCatalogPort over the shop and item tables."""

    def __init__(self, shop_repo: SQLiteShopRepo, item_repo: SQLiteItemRepo):
        self._shops = shop_repo
        self._items = item_repo

    def shops(self) -> list[Shop]:
        return self._shops.get_all()

    def items(self) -> list[Item]:
        return self._items.get_all()


class RepoAnalyticsSource:
    """AnalyticsSourcePort over every collection the dashboard reads."""

    def __init__(
        self,
        shop_repo: SQLiteShopRepo,
        item_repo: SQLiteItemRepo,
        booking_repo: SQLiteBookingRepo,
        review_repo: SQLiteReviewRepo,
        user_repo: SQLiteUserRepo,
        search_log_repo: SQLiteSearchLogRepo,
    ):
        self._shop_repo = shop_repo
        self._item_repo = item_repo
        self._booking_repo = booking_repo
        self._review_repo = review_repo
        self._user_repo = user_repo
        self._search_log_repo = search_log_repo

    def shops(self) -> list[Shop]:
        return self._shop_repo.get_all()

    def items(self) -> list[Item]:
        return self._item_repo.get_all()

    def bookings(self) -> list[Booking]:
        return self._booking_repo.get_all()

    def reviews(self) -> list[Review]:
        return self._review_repo.get_all()

    def users(self) -> list[User]:
        return self._user_repo.list_all()

    def search_logs(self) -> list[SearchLog]:
        return self._search_log_repo.get_all()


# --- Component Services ---
def get_auth_service(
    repo: SQLiteUserRepo = Depends(get_user_repo),
    hasher: PasslibPasswordHasher = Depends(get_password_hasher),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> AuthService:
    return AuthService(repo=repo, hasher=hasher, clock=clock, rules=rules.auth)


def get_shop_service(
    repo: SQLiteShopRepo = Depends(get_shop_repo),
    item_repo: SQLiteItemRepo = Depends(get_item_repo),
    review_repo: SQLiteReviewRepo = Depends(get_review_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ShopService:
    return ShopService(repo=repo, items=item_repo, reviews=review_repo, clock=clock, rules=rules.catalog)


def get_item_service(
    repo: SQLiteItemRepo = Depends(get_item_repo),
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ItemService:
    return ItemService(repo=repo, shops=shop_repo, clock=clock, rules=rules.catalog)


def get_inventory_service(
    item_repo: SQLiteItemRepo = Depends(get_item_repo),
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    movement_repo: SQLiteStockMovementRepo = Depends(get_stock_movement_repo),
    alert_repo: SQLiteStockAlertRepo = Depends(get_stock_alert_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> InventoryService:
    return InventoryService(
        items=item_repo,
        shops=shop_repo,
        movements=movement_repo,
        alerts=alert_repo,
        clock=clock,
        rules=rules.inventory,
    )


def get_category_service(
    repo: SQLiteCategoryRepo = Depends(get_category_repo),
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> CategoryService:
    return CategoryService(repo=repo, shops=shop_repo, clock=clock, rules=rules.categories)


def get_trending_service(
    repo: SQLiteTrendingRepo = Depends(get_trending_repo),
    item_repo: SQLiteItemRepo = Depends(get_item_repo),
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> TrendingService:
    return TrendingService(repo=repo, items=item_repo, shops=shop_repo, clock=clock, rules=rules.trending)


def get_search_service(
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    item_repo: SQLiteItemRepo = Depends(get_item_repo),
    log_repo: SQLiteSearchLogRepo = Depends(get_search_log_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> SearchService:
    return SearchService(
        catalog=RepoSearchCatalog(shop_repo, item_repo),
        logs=log_repo,
        clock=clock,
        rules=rules.search,
    )


def get_bag_service(
    repo: SQLiteBagRepo = Depends(get_bag_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> BagService:
    return BagService(repo=repo, clock=clock, default_unit=rules.bookings.default_unit)


def get_booking_service(
    repo: SQLiteBookingRepo = Depends(get_booking_repo),
    bag_repo: SQLiteBagRepo = Depends(get_bag_repo),
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> BookingService:
    return BookingService(repo=repo, bags=bag_repo, shops=shop_repo, clock=clock, rules=rules.bookings)


def get_asset_service(
    repo: SQLiteAssetRepo = Depends(get_asset_repo),
    store: FileSystemStore = Depends(get_file_store),
    festival_repo: SQLiteFestivalRepo = Depends(get_festival_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> AssetService:
    return AssetService(
        repo=repo, store=store, clock=clock, rules=rules.uploads, festivals=festival_repo
    )


def get_festival_service(
    repo: SQLiteFestivalRepo = Depends(get_festival_repo),
    assets: AssetService = Depends(get_asset_service),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> FestivalService:
    return FestivalService(repo=repo, linker=assets, clock=clock, rules=rules.festivals)


def get_banner_service(
    repo: SQLiteBannerRepo = Depends(get_banner_repo),
    clock: SystemClock = Depends(get_clock),
) -> BannerService:
    return BannerService(repo=repo, clock=clock)


def get_rating_service(
    repo: SQLiteReviewRepo = Depends(get_review_repo),
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    booking_repo: SQLiteBookingRepo = Depends(get_booking_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> RatingService:
    return RatingService(
        repo=repo, shops=shop_repo, bookings=booking_repo, clock=clock, rules=rules.ratings
    )


def get_feedback_service(
    repo: SQLiteFeedbackRepo = Depends(get_feedback_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> FeedbackService:
    return FeedbackService(repo=repo, clock=clock, rules=rules.feedback)


def get_analytics_service(
    shop_repo: SQLiteShopRepo = Depends(get_shop_repo),
    item_repo: SQLiteItemRepo = Depends(get_item_repo),
    booking_repo: SQLiteBookingRepo = Depends(get_booking_repo),
    review_repo: SQLiteReviewRepo = Depends(get_review_repo),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    log_repo: SQLiteSearchLogRepo = Depends(get_search_log_repo),
    clock: SystemClock = Depends(get_clock),
) -> AnalyticsService:
    source = RepoAnalyticsSource(shop_repo, item_repo, booking_repo, review_repo, user_repo, log_repo)
    return AnalyticsService(source=source, clock=clock)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User:
    # 1. Cookie first (HttpOnly)
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ")[1]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 2. Decode
    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    # 3. Fetch user
    try:
        user = user_repo.get_by_id(UUID(user_id))
    except ValueError:
        user = None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if user.status != "active":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def require_admin_budget(
    admin: User = Depends(get_current_admin),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> User:
    """Admin user, counted against the admin request budget."""
    if not limiter.check_admin(str(admin.id)):
        logger.warning("Admin rate limit exceeded for %s", admin.id)
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Rate limit exceeded")
    return admin


def require_admin_heavy_budget(
    admin: User = Depends(get_current_admin),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> User:
    """Admin user, counted against the budget for uploads and bulk imports."""
    if not limiter.check_admin_heavy(str(admin.id)):
        logger.warning("Admin heavy rate limit exceeded for %s", admin.id)
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Rate limit exceeded")
    return admin


async def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User | None:
    """The signed-in user for public routes that personalize, or None."""
    try:
        return await get_current_user(request, token, user_repo)
    except HTTPException:
        return None
