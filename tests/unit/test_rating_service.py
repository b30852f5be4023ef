"""
Tests for RatingService.

Reviews are one per user per shop, and the shop's rating aggregates are
recomputed on every change.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from samankhojo.adapters.clock import FixedClock
from samankhojo.components.ratings import RatingService, SubmitReviewInput, rating_summary
from samankhojo.domain.entities import Booking, BookingShop, Review, Shop
from samankhojo.rules.models import RatingRules


class MockReviewRepo:
    def __init__(self) -> None:
        self.reviews: dict[UUID, Review] = {}

    def save(self, review: Review) -> Review:
        self.reviews[review.id] = review
        return review

    def get_by_id(self, review_id: UUID) -> Review | None:
        return self.reviews.get(review_id)

    def get_by_shop_and_user(self, shop_id: UUID, user_id: str) -> Review | None:
        return next(
            (r for r in self.reviews.values() if r.shop_id == shop_id and r.user_id == user_id), None
        )

    def list_by_shop(self, shop_id: UUID) -> list[Review]:
        return [r for r in self.reviews.values() if r.shop_id == shop_id]

    def list_by_user(self, user_id: str) -> list[Review]:
        return [r for r in self.reviews.values() if r.user_id == user_id]

    def delete(self, review_id: UUID) -> None:
        self.reviews.pop(review_id, None)


class MockShopRepo:
    def __init__(self) -> None:
        self.shops: dict[UUID, Shop] = {}

    def get_by_id(self, shop_id: UUID) -> Shop | None:
        return self.shops.get(shop_id)

    def save(self, shop: Shop) -> Shop:
        self.shops[shop.id] = shop
        return shop


class MockBookings:
    def __init__(self) -> None:
        self.bookings: list[Booking] = []

    def list_by_user(self, user_id: str) -> list[Booking]:
        return [b for b in self.bookings if b.user_id == user_id]


@pytest.fixture
def shops() -> MockShopRepo:
    repo = MockShopRepo()
    repo.save(
        Shop(
            shop_name="Alpha Store",
            owner_name="Karma",
            type="Grocery",
            district="Mangan",
            address="Main Road",
            phone="9800011111",
        )
    )
    return repo


@pytest.fixture
def shop(shops: MockShopRepo) -> Shop:
    return next(iter(shops.shops.values()))


@pytest.fixture
def repo() -> MockReviewRepo:
    return MockReviewRepo()


@pytest.fixture
def bookings() -> MockBookings:
    return MockBookings()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 11, 1, 6, 30, tzinfo=UTC))


@pytest.fixture
def service(repo, shops, bookings, clock) -> RatingService:
    return RatingService(repo=repo, shops=shops, bookings=bookings, clock=clock, rules=RatingRules())


def _review(shop: Shop, user_id: str = "u1", rating: int = 4, **kw) -> SubmitReviewInput:
    return SubmitReviewInput(
        shop_id=str(shop.id), user_id=user_id, user_name=kw.pop("user_name", "Sita"), rating=rating, **kw
    )


def test_rating_summary_distribution():
    shop_id = uuid4()
    reviews = [Review(shop_id=shop_id, user_id=str(i), user_name="x", rating=r) for i, r in enumerate([5, 4, 4])]

    summary = rating_summary(reviews)

    assert summary.average_rating == 4.3
    assert summary.total_reviews == 3
    assert summary.distribution == {5: 1, 4: 2, 3: 0, 2: 0, 1: 0}
    assert list(summary.distribution) == [5, 4, 3, 2, 1]


def test_rating_summary_empty():
    summary = rating_summary([])
    assert summary.average_rating == 0.0
    assert summary.total_reviews == 0


def test_submit_updates_shop_aggregates(service: RatingService, shop: Shop, shops: MockShopRepo):
    service.submit(_review(shop, "u1", 5))
    service.submit(_review(shop, "u2", 2))

    stored = shops.get_by_id(shop.id)
    assert stored.average_rating == 3.5
    assert stored.total_reviews == 2


def test_submit_again_replaces_review(service: RatingService, shop: Shop, repo: MockReviewRepo):
    first, _ = service.submit(_review(shop, rating=2, comment="meh"))
    second, errors = service.submit(_review(shop, rating=5, comment="Much better now"))

    assert errors == []
    assert second.id == first.id
    assert len(repo.reviews) == 1
    assert second.rating == 5
    assert second.comment == "Much better now"


def test_submit_validation(service: RatingService, shop: Shop):
    review, errors = service.submit(_review(shop, rating=6, user_name=" "))
    assert review is None
    assert {e.code for e in errors} == {"rating_out_of_range", "user_name_required"}


def test_submit_unknown_shop(service: RatingService):
    _, errors = service.submit(SubmitReviewInput(shop_id="nope", user_id="u1", user_name="Sita", rating=3))
    assert errors[0].code == "shop_not_found"

    _, errors = service.submit(SubmitReviewInput(shop_id=str(uuid4()), user_id="u1", user_name="Sita", rating=3))
    assert errors[0].code == "shop_not_found"


def test_for_shop_pages_newest_first(service: RatingService, shop: Shop, clock: FixedClock):
    for i in range(3):
        service.submit(_review(shop, f"u{i}", 3 + i % 3))
        clock.advance(timedelta(minutes=1))

    output, errors = service.for_shop(shop.id, limit=2, offset=0)

    assert errors == []
    assert [r.user_id for r in output.reviews] == ["u2", "u1"]
    assert output.total == 3
    assert output.has_more is True
    assert output.summary.total_reviews == 3


def test_mark_helpful(service: RatingService, shop: Shop):
    review, _ = service.submit(_review(shop))
    service.mark_helpful(review.id)
    updated, errors = service.mark_helpful(review.id)

    assert errors == []
    assert updated.helpful_count == 2
    assert service.mark_helpful(uuid4())[1][0].code == "review_not_found"


def test_delete_only_by_author(service: RatingService, shop: Shop, shops: MockShopRepo):
    review, _ = service.submit(_review(shop, "u1", 4))

    success, errors = service.delete(review.id, "u2")
    assert success is False
    assert errors[0].code == "forbidden"

    success, errors = service.delete(review.id, "u1")
    assert success is True
    stored = shops.get_by_id(shop.id)
    assert stored.average_rating is None
    assert stored.total_reviews == 0


def test_user_stats(service: RatingService, shop: Shop, bookings: MockBookings):
    service.submit(_review(shop, "u1", 4))
    bookings.bookings.append(
        Booking(
            user_id="u1",
            user_name="Sita",
            shops=[BookingShop(shop_id="other-shop", shop_name="Other")],
        )
    )

    stats = service.user_stats("u1")

    assert stats.total_reviews == 1
    assert stats.average_rating_given == 4.0
    assert stats.total_bookings == 1
    assert stats.shops_visited == 2
    assert [r.user_id for r in service.by_user("u1")] == ["u1"]
