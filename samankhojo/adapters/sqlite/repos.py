import json
import sqlite3
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from samankhojo.domain.entities import (
    Asset,
    Bag,
    Banner,
    Booking,
    Category,
    Feedback,
    Festival,
    GeoPoint,
    Item,
    Review,
    SearchLog,
    Shop,
    StockAlert,
    StockMovement,
    TrendingItem,
    User,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        conn = self._get_conn()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor.rowcount
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        conn = self._get_conn()
        try:
            row: dict[str, Any] | None = conn.execute(sql, params).fetchone()
            return row
        finally:
            conn.close()

    def _fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            rows: list[dict[str, Any]] = conn.execute(sql, params).fetchall()
            return rows
        finally:
            conn.close()

    def _max_reference_sequence(self, table: str, prefix: str) -> int:
        # Highest NNN among reference IDs starting with e.g. "SHP-MAN-"
        rows = self._fetch_all(
            f"SELECT reference_id FROM {table} WHERE reference_id LIKE ?",  # noqa: S608
            (f"{prefix}%",),
        )
        highest = 0
        for row in rows:
            tail = row["reference_id"][len(prefix):]
            if tail.isdigit():
                highest = max(highest, int(tail))
        return highest


# --- Users ---


class SQLiteUserRepo(_SQLiteRepo):
    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, display_name, phone, password_hash, status,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    display_name=excluded.display_name,
                    phone=excluded.phone,
                    password_hash=excluded.password_hash,
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.display_name,
                    user.phone,
                    user.password_hash,
                    user.status,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )

            conn.execute("DELETE FROM role_assignments WHERE user_id = ?", (str(user.id),))
            for role in user.roles:
                conn.execute(
                    "INSERT INTO role_assignments (id, user_id, role, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (str(uuid4()), str(user.id), role, user.updated_at.isoformat()),
                )

            conn.commit()
            return user
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _hydrate(self, row: dict[str, Any]) -> User:
        roles = self._fetch_all(
            "SELECT role FROM role_assignments WHERE user_id = ?", (row["id"],)
        )
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            display_name=row["display_name"],
            phone=row["phone"],
            password_hash=row["password_hash"],
            roles=[r["role"] for r in roles],
            status=row["status"],
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )

    def get_by_id(self, user_id: UUID) -> User | None:
        row = self._fetch_one("SELECT * FROM users WHERE id = ?", (str(user_id),))
        return self._hydrate(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self._fetch_one("SELECT * FROM users WHERE email = ?", (email.lower(),))
        return self._hydrate(row) if row else None

    def list_all(self) -> list[User]:
        rows = self._fetch_all("SELECT * FROM users ORDER BY created_at DESC")
        return [self._hydrate(r) for r in rows]


# --- Shops ---


class SQLiteShopRepo(_SQLiteRepo):
    def save(self, shop: Shop) -> Shop:
        self._execute(
            """
            INSERT INTO shops (
                id, reference_id, shop_name, owner_name, type, shop_type, district,
                address, phone, opening_time, closing_time, map_link,
                is_featured, is_verified, is_hidden, lat, lng, image_url,
                average_rating, total_reviews, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                reference_id=excluded.reference_id,
                shop_name=excluded.shop_name,
                owner_name=excluded.owner_name,
                type=excluded.type,
                shop_type=excluded.shop_type,
                district=excluded.district,
                address=excluded.address,
                phone=excluded.phone,
                opening_time=excluded.opening_time,
                closing_time=excluded.closing_time,
                map_link=excluded.map_link,
                is_featured=excluded.is_featured,
                is_verified=excluded.is_verified,
                is_hidden=excluded.is_hidden,
                lat=excluded.lat,
                lng=excluded.lng,
                image_url=excluded.image_url,
                average_rating=excluded.average_rating,
                total_reviews=excluded.total_reviews,
                updated_at=excluded.updated_at
        """,
            (
                str(shop.id),
                shop.reference_id,
                shop.shop_name,
                shop.owner_name,
                shop.type,
                shop.shop_type,
                shop.district,
                shop.address,
                shop.phone,
                shop.opening_time,
                shop.closing_time,
                shop.map_link,
                int(shop.is_featured),
                int(shop.is_verified),
                int(shop.is_hidden),
                shop.location.lat if shop.location else None,
                shop.location.lng if shop.location else None,
                shop.image_url,
                shop.average_rating,
                shop.total_reviews,
                shop.created_at.isoformat(),
                shop.updated_at.isoformat(),
            ),
        )
        return shop

    def _hydrate(self, row: dict[str, Any]) -> Shop:
        location = None
        if row["lat"] is not None and row["lng"] is not None:
            location = GeoPoint(lat=row["lat"], lng=row["lng"])
        return Shop(
            id=UUID(row["id"]),
            reference_id=row["reference_id"],
            shop_name=row["shop_name"],
            owner_name=row["owner_name"],
            type=row["type"],
            shop_type=row["shop_type"],
            district=row["district"],
            address=row["address"],
            phone=row["phone"],
            opening_time=row["opening_time"],
            closing_time=row["closing_time"],
            map_link=row["map_link"],
            is_featured=bool(row["is_featured"]),
            is_verified=bool(row["is_verified"]),
            is_hidden=bool(row["is_hidden"]),
            location=location,
            image_url=row["image_url"],
            average_rating=row["average_rating"],
            total_reviews=row["total_reviews"],
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )

    def get_by_id(self, shop_id: UUID) -> Shop | None:
        row = self._fetch_one("SELECT * FROM shops WHERE id = ?", (str(shop_id),))
        return self._hydrate(row) if row else None

    def get_all(self) -> list[Shop]:
        rows = self._fetch_all("SELECT * FROM shops ORDER BY shop_name ASC")
        return [self._hydrate(r) for r in rows]

    def delete(self, shop_id: UUID) -> None:
        self._execute("DELETE FROM shops WHERE id = ?", (str(shop_id),))

    def max_reference_sequence(self, prefix: str) -> int:
        return self._max_reference_sequence("shops", prefix)


# --- Items ---


class SQLiteItemRepo(_SQLiteRepo):
    def save(self, item: Item) -> Item:
        self._execute(
            """
            INSERT INTO items (
                id, reference_id, shop_id, type, name, description, category,
                availability, data_json, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                reference_id=excluded.reference_id,
                type=excluded.type,
                name=excluded.name,
                description=excluded.description,
                category=excluded.category,
                availability=excluded.availability,
                data_json=excluded.data_json,
                updated_at=excluded.updated_at
        """,
            (
                str(item.id),
                item.reference_id,
                str(item.shop_id),
                item.type,
                item.name,
                item.description,
                item.category,
                int(item.availability),
                item.model_dump_json(),
                item.created_at.isoformat(),
                item.updated_at.isoformat(),
            ),
        )
        return item

    def _hydrate(self, row: dict[str, Any]) -> Item:
        return Item.model_validate_json(row["data_json"])

    def get_by_id(self, item_id: UUID) -> Item | None:
        row = self._fetch_one("SELECT * FROM items WHERE id = ?", (str(item_id),))
        return self._hydrate(row) if row else None

    def list_by_shop(self, shop_id: UUID) -> list[Item]:
        rows = self._fetch_all(
            "SELECT * FROM items WHERE shop_id = ? ORDER BY created_at ASC", (str(shop_id),)
        )
        return [self._hydrate(r) for r in rows]

    def get_all(self) -> list[Item]:
        rows = self._fetch_all("SELECT * FROM items ORDER BY created_at ASC")
        return [self._hydrate(r) for r in rows]

    def delete(self, item_id: UUID) -> None:
        self._execute("DELETE FROM items WHERE id = ?", (str(item_id),))

    def max_reference_sequence(self, prefix: str) -> int:
        return self._max_reference_sequence("items", prefix)


# --- Reviews ---


class SQLiteReviewRepo(_SQLiteRepo):
    def save(self, review: Review) -> Review:
        self._execute(
            """
            INSERT INTO reviews (
                id, shop_id, user_id, user_name, rating, comment,
                helpful_count, is_verified, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                user_name=excluded.user_name,
                rating=excluded.rating,
                comment=excluded.comment,
                helpful_count=excluded.helpful_count,
                is_verified=excluded.is_verified,
                updated_at=excluded.updated_at
        """,
            (
                str(review.id),
                str(review.shop_id),
                review.user_id,
                review.user_name,
                review.rating,
                review.comment,
                review.helpful_count,
                int(review.is_verified),
                review.created_at.isoformat(),
                review.updated_at.isoformat(),
            ),
        )
        return review

    def _hydrate(self, row: dict[str, Any]) -> Review:
        return Review(
            id=UUID(row["id"]),
            shop_id=UUID(row["shop_id"]),
            user_id=row["user_id"],
            user_name=row["user_name"],
            rating=row["rating"],
            comment=row["comment"],
            helpful_count=row["helpful_count"],
            is_verified=bool(row["is_verified"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )

    def get_by_id(self, review_id: UUID) -> Review | None:
        row = self._fetch_one("SELECT * FROM reviews WHERE id = ?", (str(review_id),))
        return self._hydrate(row) if row else None

    def get_by_shop_and_user(self, shop_id: UUID, user_id: str) -> Review | None:
        row = self._fetch_one(
            "SELECT * FROM reviews WHERE shop_id = ? AND user_id = ?", (str(shop_id), user_id)
        )
        return self._hydrate(row) if row else None

    def list_by_shop(self, shop_id: UUID) -> list[Review]:
        rows = self._fetch_all(
            "SELECT * FROM reviews WHERE shop_id = ? ORDER BY created_at DESC", (str(shop_id),)
        )
        return [self._hydrate(r) for r in rows]

    def list_by_user(self, user_id: str) -> list[Review]:
        rows = self._fetch_all(
            "SELECT * FROM reviews WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        )
        return [self._hydrate(r) for r in rows]

    def get_all(self) -> list[Review]:
        rows = self._fetch_all("SELECT * FROM reviews ORDER BY created_at DESC")
        return [self._hydrate(r) for r in rows]

    def delete(self, review_id: UUID) -> None:
        self._execute("DELETE FROM reviews WHERE id = ?", (str(review_id),))


# --- Bags ---


class SQLiteBagRepo(_SQLiteRepo):
    def get(self, user_id: str) -> Bag | None:
        row = self._fetch_one("SELECT * FROM bags WHERE user_id = ?", (user_id,))
        if not row:
            return None
        return Bag.model_validate(
            {
                "user_id": row["user_id"],
                "items": json.loads(row["items_json"]),
                "created_at": row["created_at"],
                "updated_at": row["updated_at"],
            }
        )

    def save(self, bag: Bag) -> Bag:
        items_json = json.dumps([i.model_dump(mode="json") for i in bag.items])
        self._execute(
            """
            INSERT INTO bags (user_id, items_json, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                items_json=excluded.items_json,
                updated_at=excluded.updated_at
        """,
            (bag.user_id, items_json, bag.created_at.isoformat(), bag.updated_at.isoformat()),
        )
        return bag

    def delete(self, user_id: str) -> None:
        self._execute("DELETE FROM bags WHERE user_id = ?", (user_id,))


# --- Bookings ---


class SQLiteBookingRepo(_SQLiteRepo):
    def save(self, booking: Booking) -> Booking:
        shops_json = json.dumps([s.model_dump(mode="json") for s in booking.shops])
        self._execute(
            """
            INSERT INTO bookings (
                id, user_id, user_name, user_phone, shops_json, total_shops,
                total_items, status, source, user_agent, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                shops_json=excluded.shops_json,
                total_shops=excluded.total_shops,
                total_items=excluded.total_items,
                status=excluded.status,
                updated_at=excluded.updated_at
        """,
            (
                str(booking.id),
                booking.user_id,
                booking.user_name,
                booking.user_phone,
                shops_json,
                booking.total_shops,
                booking.total_items,
                booking.status,
                booking.source,
                booking.user_agent,
                booking.created_at.isoformat(),
                booking.updated_at.isoformat(),
            ),
        )
        return booking

    def _hydrate(self, row: dict[str, Any]) -> Booking:
        return Booking.model_validate(
            {
                "id": row["id"],
                "user_id": row["user_id"],
                "user_name": row["user_name"],
                "user_phone": row["user_phone"],
                "shops": json.loads(row["shops_json"]),
                "total_shops": row["total_shops"],
                "total_items": row["total_items"],
                "status": row["status"],
                "source": row["source"],
                "user_agent": row["user_agent"],
                "created_at": row["created_at"],
                "updated_at": row["updated_at"],
            }
        )

    def get_by_id(self, booking_id: UUID) -> Booking | None:
        row = self._fetch_one("SELECT * FROM bookings WHERE id = ?", (str(booking_id),))
        return self._hydrate(row) if row else None

    def list_by_user(self, user_id: str) -> list[Booking]:
        rows = self._fetch_all(
            "SELECT * FROM bookings WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        )
        return [self._hydrate(r) for r in rows]

    def get_all(self) -> list[Booking]:
        rows = self._fetch_all("SELECT * FROM bookings ORDER BY created_at DESC")
        return [self._hydrate(r) for r in rows]


# --- Feedback ---


class SQLiteFeedbackRepo(_SQLiteRepo):
    def save(self, feedback: Feedback) -> Feedback:
        self._execute(
            """
            INSERT INTO feedback (
                id, user_id, user_name, user_email, type, category, subject,
                message, rating, status, priority, admin_notes, user_agent, url,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                status=excluded.status,
                priority=excluded.priority,
                admin_notes=excluded.admin_notes,
                updated_at=excluded.updated_at
        """,
            (
                str(feedback.id),
                feedback.user_id,
                feedback.user_name,
                feedback.user_email,
                feedback.type,
                feedback.category,
                feedback.subject,
                feedback.message,
                feedback.rating,
                feedback.status,
                feedback.priority,
                feedback.admin_notes,
                feedback.user_agent,
                feedback.url,
                feedback.created_at.isoformat(),
                feedback.updated_at.isoformat(),
            ),
        )
        return feedback

    def _hydrate(self, row: dict[str, Any]) -> Feedback:
        return Feedback.model_validate(row)

    def get_by_id(self, feedback_id: UUID) -> Feedback | None:
        row = self._fetch_one("SELECT * FROM feedback WHERE id = ?", (str(feedback_id),))
        return self._hydrate(row) if row else None

    def list_by_user(self, user_id: str) -> list[Feedback]:
        rows = self._fetch_all(
            "SELECT * FROM feedback WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        )
        return [self._hydrate(r) for r in rows]

    def get_all(self) -> list[Feedback]:
        rows = self._fetch_all("SELECT * FROM feedback ORDER BY created_at DESC")
        return [self._hydrate(r) for r in rows]


# --- Assets ---


class SQLiteAssetRepo(_SQLiteRepo):
    def save(self, asset: Asset) -> Asset:
        self._execute(
            """
            INSERT INTO assets (
                id, name, original_name, type, category, mime_type, size,
                storage_path, description, tags_json, festival_ids_json,
                usage_count, is_public, status, layout_position, created_by,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                type=excluded.type,
                category=excluded.category,
                description=excluded.description,
                tags_json=excluded.tags_json,
                festival_ids_json=excluded.festival_ids_json,
                usage_count=excluded.usage_count,
                is_public=excluded.is_public,
                status=excluded.status,
                layout_position=excluded.layout_position,
                updated_at=excluded.updated_at
        """,
            (
                str(asset.id),
                asset.name,
                asset.original_name,
                asset.type,
                asset.category,
                asset.mime_type,
                asset.size,
                asset.storage_path,
                asset.description,
                json.dumps(asset.tags),
                json.dumps(asset.festival_ids),
                asset.usage_count,
                int(asset.is_public),
                asset.status,
                asset.layout_position,
                asset.created_by,
                asset.created_at.isoformat(),
                asset.updated_at.isoformat(),
            ),
        )
        return asset

    def _hydrate(self, row: dict[str, Any]) -> Asset:
        data = dict(row)
        data["tags"] = json.loads(data.pop("tags_json"))
        data["festival_ids"] = json.loads(data.pop("festival_ids_json"))
        data["is_public"] = bool(data["is_public"])
        return Asset.model_validate(data)

    def get_by_id(self, asset_id: UUID) -> Asset | None:
        row = self._fetch_one("SELECT * FROM assets WHERE id = ?", (str(asset_id),))
        return self._hydrate(row) if row else None

    def get_all(self) -> list[Asset]:
        rows = self._fetch_all("SELECT * FROM assets ORDER BY created_at DESC")
        return [self._hydrate(r) for r in rows]

    def delete(self, asset_id: UUID) -> None:
        self._execute("DELETE FROM assets WHERE id = ?", (str(asset_id),))


# --- Festivals ---


class SQLiteFestivalRepo(_SQLiteRepo):
    def save(self, festival: Festival) -> Festival:
        self._execute(
            """
            INSERT INTO festivals (
                id, name, display_name, description, start_date, end_date,
                is_active, style_json, asset_ids_json, priority, created_by,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                display_name=excluded.display_name,
                description=excluded.description,
                start_date=excluded.start_date,
                end_date=excluded.end_date,
                style_json=excluded.style_json,
                asset_ids_json=excluded.asset_ids_json,
                priority=excluded.priority,
                updated_at=excluded.updated_at
        """,
            (
                str(festival.id),
                festival.name,
                festival.display_name,
                festival.description,
                festival.start_date.isoformat(),
                festival.end_date.isoformat(),
                int(festival.is_active),
                json.dumps(festival.style),
                json.dumps(festival.asset_ids),
                festival.priority,
                festival.created_by,
                festival.created_at.isoformat(),
                festival.updated_at.isoformat(),
            ),
        )
        return festival

    def _hydrate(self, row: dict[str, Any]) -> Festival:
        return Festival(
            id=UUID(row["id"]),
            name=row["name"],
            display_name=row["display_name"],
            description=row["description"],
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            is_active=bool(row["is_active"]),
            style=json.loads(row["style_json"]),
            asset_ids=json.loads(row["asset_ids_json"]),
            priority=row["priority"],
            created_by=row["created_by"],
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )

    def get_by_id(self, festival_id: UUID) -> Festival | None:
        row = self._fetch_one("SELECT * FROM festivals WHERE id = ?", (str(festival_id),))
        return self._hydrate(row) if row else None

    def get_by_name(self, name: str) -> Festival | None:
        row = self._fetch_one("SELECT * FROM festivals WHERE name = ?", (name,))
        return self._hydrate(row) if row else None

    def get_all(self) -> list[Festival]:
        rows = self._fetch_all("SELECT * FROM festivals ORDER BY created_at DESC")
        return [self._hydrate(r) for r in rows]

    def delete(self, festival_id: UUID) -> None:
        self._execute("DELETE FROM festivals WHERE id = ?", (str(festival_id),))

    def activate(self, festival_id: UUID, now: datetime) -> int:
        """Switch festival_id on and every other festival off in one write transaction."""
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            cursor = conn.execute(
                "UPDATE festivals SET is_active = 0, updated_at = ? WHERE is_active = 1 AND id != ?",
                (now.isoformat(), str(festival_id)),
            )
            changed = cursor.rowcount
            conn.execute(
                "UPDATE festivals SET is_active = 1, updated_at = ? WHERE id = ?",
                (now.isoformat(), str(festival_id)),
            )
            conn.commit()
            return changed
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def deactivate(self, festival_id: UUID, now: datetime) -> None:
        self._execute(
            "UPDATE festivals SET is_active = 0, updated_at = ? WHERE id = ?",
            (now.isoformat(), str(festival_id)),
        )

    def deactivate_expired(self, today: date, now: datetime) -> int:
        # ISO dates compare correctly as text
        return self._execute(
            "UPDATE festivals SET is_active = 0, updated_at = ? WHERE is_active = 1 AND end_date < ?",
            (now.isoformat(), today.isoformat()),
        )


# --- Banners ---


class SQLiteBannerRepo(_SQLiteRepo):
    def save(self, banner: Banner) -> Banner:
        self._execute(
            """
            INSERT INTO banners (
                id, name, description, banner_asset_id, video_asset_id,
                sticker_asset_ids_json, is_active, style_json, position, priority,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                description=excluded.description,
                banner_asset_id=excluded.banner_asset_id,
                video_asset_id=excluded.video_asset_id,
                sticker_asset_ids_json=excluded.sticker_asset_ids_json,
                is_active=excluded.is_active,
                style_json=excluded.style_json,
                position=excluded.position,
                priority=excluded.priority,
                updated_at=excluded.updated_at
        """,
            (
                str(banner.id),
                banner.name,
                banner.description,
                banner.banner_asset_id,
                banner.video_asset_id,
                json.dumps(banner.sticker_asset_ids),
                int(banner.is_active),
                json.dumps(banner.style),
                banner.position,
                banner.priority,
                banner.created_at.isoformat(),
                banner.updated_at.isoformat(),
            ),
        )
        return banner

    def _hydrate(self, row: dict[str, Any]) -> Banner:
        data = dict(row)
        data["sticker_asset_ids"] = json.loads(data.pop("sticker_asset_ids_json"))
        data["style"] = json.loads(data.pop("style_json"))
        data["is_active"] = bool(data["is_active"])
        return Banner.model_validate(data)

    def get_by_id(self, banner_id: UUID) -> Banner | None:
        row = self._fetch_one("SELECT * FROM banners WHERE id = ?", (str(banner_id),))
        return self._hydrate(row) if row else None

    def get_all(self) -> list[Banner]:
        rows = self._fetch_all("SELECT * FROM banners ORDER BY created_at ASC")
        return [self._hydrate(r) for r in rows]

    def delete(self, banner_id: UUID) -> None:
        self._execute("DELETE FROM banners WHERE id = ?", (str(banner_id),))


# --- Categories ---


class SQLiteCategoryRepo(_SQLiteRepo):
    def save(self, category: Category) -> Category:
        self._execute(
            """
            INSERT INTO categories (
                id, name, hindi_name, icon, description, is_active, sort_order,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                hindi_name=excluded.hindi_name,
                icon=excluded.icon,
                description=excluded.description,
                is_active=excluded.is_active,
                sort_order=excluded.sort_order,
                updated_at=excluded.updated_at
        """,
            (
                str(category.id),
                category.name,
                category.hindi_name,
                category.icon,
                category.description,
                int(category.is_active),
                category.sort_order,
                category.created_at.isoformat(),
                category.updated_at.isoformat(),
            ),
        )
        return category

    def _hydrate(self, row: dict[str, Any]) -> Category:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        return Category.model_validate(data)

    def get_by_id(self, category_id: UUID) -> Category | None:
        row = self._fetch_one("SELECT * FROM categories WHERE id = ?", (str(category_id),))
        return self._hydrate(row) if row else None

    def get_by_name(self, name: str) -> Category | None:
        row = self._fetch_one("SELECT * FROM categories WHERE name = ? COLLATE NOCASE", (name,))
        return self._hydrate(row) if row else None

    def get_all(self) -> list[Category]:
        rows = self._fetch_all("SELECT * FROM categories ORDER BY sort_order ASC, name ASC")
        return [self._hydrate(r) for r in rows]

    def delete(self, category_id: UUID) -> None:
        self._execute("DELETE FROM categories WHERE id = ?", (str(category_id),))

    def reorder(self, ordered_ids: list[UUID], now: datetime) -> None:
        """Renumber sort_order 1..n following ordered_ids, in one transaction."""
        conn = self._get_conn()
        try:
            for position, category_id in enumerate(ordered_ids, start=1):
                conn.execute(
                    "UPDATE categories SET sort_order = ?, updated_at = ? WHERE id = ?",
                    (position, now.isoformat(), str(category_id)),
                )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


# --- Trending ---


class SQLiteTrendingRepo(_SQLiteRepo):
    def save(self, entry: TrendingItem) -> TrendingItem:
        self._execute(
            """
            INSERT INTO trending_items (
                id, item_id, shop_id, item_name, shop_name, category, image_url,
                priority, is_active, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                item_name=excluded.item_name,
                shop_name=excluded.shop_name,
                category=excluded.category,
                image_url=excluded.image_url,
                priority=excluded.priority,
                is_active=excluded.is_active,
                updated_at=excluded.updated_at
        """,
            (
                str(entry.id),
                str(entry.item_id),
                str(entry.shop_id),
                entry.item_name,
                entry.shop_name,
                entry.category,
                entry.image_url,
                entry.priority,
                int(entry.is_active),
                entry.created_at.isoformat(),
                entry.updated_at.isoformat(),
            ),
        )
        return entry

    def _hydrate(self, row: dict[str, Any]) -> TrendingItem:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        return TrendingItem.model_validate(data)

    def get_by_id(self, entry_id: UUID) -> TrendingItem | None:
        row = self._fetch_one("SELECT * FROM trending_items WHERE id = ?", (str(entry_id),))
        return self._hydrate(row) if row else None

    def get_by_item(self, item_id: UUID) -> TrendingItem | None:
        row = self._fetch_one("SELECT * FROM trending_items WHERE item_id = ?", (str(item_id),))
        return self._hydrate(row) if row else None

    def get_all(self) -> list[TrendingItem]:
        rows = self._fetch_all(
            "SELECT * FROM trending_items ORDER BY priority DESC, created_at DESC"
        )
        return [self._hydrate(r) for r in rows]

    def delete(self, entry_id: UUID) -> None:
        self._execute("DELETE FROM trending_items WHERE id = ?", (str(entry_id),))


# --- Inventory ---


class SQLiteStockMovementRepo(_SQLiteRepo):
    def save(self, movement: StockMovement) -> StockMovement:
        self._execute(
            """
            INSERT INTO stock_movements (
                id, item_id, shop_id, old_stock, new_stock, reason, updated_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                str(movement.id),
                str(movement.item_id),
                str(movement.shop_id),
                movement.old_stock,
                movement.new_stock,
                movement.reason,
                movement.updated_by,
                movement.created_at.isoformat(),
            ),
        )
        return movement

    def recent(
        self, limit: int, item_id: UUID | None = None, shop_id: UUID | None = None
    ) -> list[StockMovement]:
        # item_id wins over shop_id when both are given
        if item_id is not None:
            where, params = "WHERE item_id = ?", (str(item_id),)
        elif shop_id is not None:
            where, params = "WHERE shop_id = ?", (str(shop_id),)
        else:
            where, params = "", ()
        rows = self._fetch_all(
            f"SELECT * FROM stock_movements {where} ORDER BY created_at DESC LIMIT ?",  # noqa: S608
            (*params, limit),
        )
        return [StockMovement.model_validate(r) for r in rows]


class SQLiteStockAlertRepo(_SQLiteRepo):
    def save(self, alert: StockAlert) -> StockAlert:
        self._execute(
            """
            INSERT INTO stock_alerts (
                id, user_id, item_id, shop_id, item_name, search_query, status,
                created_at, notified_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                status=excluded.status,
                notified_at=excluded.notified_at
        """,
            (
                str(alert.id),
                alert.user_id,
                str(alert.item_id),
                str(alert.shop_id),
                alert.item_name,
                alert.search_query,
                alert.status,
                alert.created_at.isoformat(),
                alert.notified_at.isoformat() if alert.notified_at else None,
            ),
        )
        return alert

    def get_by_id(self, alert_id: UUID) -> StockAlert | None:
        row = self._fetch_one("SELECT * FROM stock_alerts WHERE id = ?", (str(alert_id),))
        return StockAlert.model_validate(row) if row else None

    def list_by_user(self, user_id: str) -> list[StockAlert]:
        rows = self._fetch_all(
            "SELECT * FROM stock_alerts WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        )
        return [StockAlert.model_validate(r) for r in rows]

    def list_active_for_item(self, item_id: UUID) -> list[StockAlert]:
        rows = self._fetch_all(
            "SELECT * FROM stock_alerts WHERE item_id = ? AND status = 'active' ORDER BY created_at ASC",
            (str(item_id),),
        )
        return [StockAlert.model_validate(r) for r in rows]

    def mark_notified(self, item_id: UUID, now: datetime) -> int:
        """Flip every active alert for item_id to notified. Returns the number changed."""
        return self._execute(
            "UPDATE stock_alerts SET status = 'notified', notified_at = ? "
            "WHERE item_id = ? AND status = 'active'",
            (now.isoformat(), str(item_id)),
        )


# --- Search Logs ---


class SQLiteSearchLogRepo(_SQLiteRepo):
    def save(self, log: SearchLog) -> SearchLog:
        self._execute(
            "INSERT INTO search_logs (id, query, result_count, user_id, created_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (str(log.id), log.query, log.result_count, log.user_id, log.created_at.isoformat()),
        )
        return log

    def recent(self, limit: int) -> list[SearchLog]:
        rows = self._fetch_all(
            "SELECT * FROM search_logs ORDER BY created_at DESC LIMIT ?", (limit,)
        )
        return [SearchLog.model_validate(r) for r in rows]

    def get_all(self) -> list[SearchLog]:
        rows = self._fetch_all("SELECT * FROM search_logs ORDER BY created_at DESC")
        return [SearchLog.model_validate(r) for r in rows]
