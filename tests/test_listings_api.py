"""Tests for product, service and training listing endpoints and the approval workflow."""

import math

import pytest

from artisan_admin.models.category import CategoryType
from artisan_admin.models.listing import ListingKind, ListingStatus
from conftest import bearer_for


@pytest.fixture
def product_category(make_category):
    return make_category("Carvings", CategoryType.PRODUCT)


@pytest.fixture
def service_category(make_category):
    return make_category("Repairs", CategoryType.SERVICE)


@pytest.fixture
def training_category(make_category):
    return make_category("Workshops", CategoryType.TRAINING)


PRODUCT_PAYLOAD = {
    "title": "  Ebony mask ",
    "description": "Hand-carved ebony mask",
    "price": 350,
    "images": ["https://cdn.example.com/mask.jpg"],
    "stockQuantity": 3,
    "materials": ["ebony"],
}


class TestCreateListing:
    def test_product_starts_pending_and_owner_comes_from_token(
        self, client, artisan, other_artisan, artisan_headers, product_category
    ):
        payload = {**PRODUCT_PAYLOAD, "categoryId": product_category.id, "artisanId": other_artisan.id}

        response = client.post("/api/products", json=payload, headers=artisan_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Ebony mask"
        assert body["status"] == "PENDING_APPROVAL"
        assert body["rejectionReason"] is None
        assert body["currency"] == "GHS"
        assert body["artisanId"] == artisan.id
        assert body["artisan"] == {"id": artisan.id, "name": "Kofi Mensah", "email": artisan.email}
        assert body["category"] == {"id": product_category.id, "name": "Carvings", "slug": "carvings"}

    def test_draft_on_request(self, client, artisan_headers, product_category):
        payload = {**PRODUCT_PAYLOAD, "categoryId": product_category.id, "status": "draft"}

        response = client.post("/api/products", json=payload, headers=artisan_headers)

        assert response.json()["status"] == "DRAFT"

    def test_cannot_self_approve(self, client, artisan_headers, product_category):
        payload = {**PRODUCT_PAYLOAD, "categoryId": product_category.id, "status": "ACTIVE"}

        response = client.post("/api/products", json=payload, headers=artisan_headers)

        assert response.status_code == 400

    def test_category_type_must_match(self, client, artisan_headers, service_category):
        payload = {**PRODUCT_PAYLOAD, "categoryId": service_category.id}

        response = client.post("/api/products", json=payload, headers=artisan_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or non-PRODUCT category ID."}

    def test_requires_artisan_token(self, client, admin_client, product_category):
        payload = {**PRODUCT_PAYLOAD, "categoryId": product_category.id}

        assert client.post("/api/products", json=payload).status_code == 401
        assert admin_client.post("/api/products", json=payload).status_code == 401

    def test_duplicate_sku_conflicts(self, client, artisan_headers, product_category):
        payload = {**PRODUCT_PAYLOAD, "categoryId": product_category.id, "sku": "MASK-001"}
        client.post("/api/products", json=payload, headers=artisan_headers)

        response = client.post("/api/products", json=payload, headers=artisan_headers)

        assert response.status_code == 409

    def test_service_quote_needs_no_price(self, client, artisan_headers, service_category):
        payload = {
            "title": "Furniture repair",
            "description": "On-site repairs",
            "categoryId": service_category.id,
            "priceType": "QUOTE",
            "locationType": "ON_SITE",
        }

        response = client.post("/api/services", json=payload, headers=artisan_headers)

        assert response.status_code == 201
        assert response.json()["price"] is None
        assert response.json()["locationType"] == "ON_SITE"

    def test_service_fixed_price_required(self, client, artisan_headers, service_category):
        payload = {"title": "Repair", "description": "Fixing", "categoryId": service_category.id}

        assert client.post("/api/services", json=payload, headers=artisan_headers).status_code == 400

    def test_free_training_drops_price(self, client, artisan_headers, training_category):
        payload = {
            "title": "Kente weaving basics",
            "description": "Two-day introduction",
            "categoryId": training_category.id,
            "isFree": True,
            "price": 100,
            "duration": "2 days",
            "location": "Bonwire",
            "capacity": 12,
            "whatYouWillLearn": ["Loom setup", "Basic patterns"],
        }

        response = client.post("/api/training", json=payload, headers=artisan_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["price"] is None
        assert body["currency"] is None
        assert body["whatYouWillLearn"] == ["Loom setup", "Basic patterns"]

    def test_training_capacity_must_be_positive(self, client, artisan_headers, training_category):
        payload = {
            "title": "Beading",
            "description": "Beads",
            "categoryId": training_category.id,
            "isFree": True,
            "duration": "1 day",
            "location": "Accra",
            "capacity": 0,
        }

        assert client.post("/api/training", json=payload, headers=artisan_headers).status_code == 400


class TestListListings:
    def test_public_list_shows_only_active(self, client, artisan, product_category, make_listing):
        make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.ACTIVE, title="Live")
        make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL, title="Waiting")
        make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.REJECTED, title="Nope")

        response = client.get("/api/products")

        assert response.status_code == 200
        body = response.json()
        assert [p["title"] for p in body["products"]] == ["Live"]
        assert body["totalItems"] == 1
        assert body["currentPage"] == 1
        assert body["limit"] == 10

    def test_non_active_filter_needs_admin(self, client, admin_client, artisan, product_category, make_listing):
        make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL)

        assert client.get("/api/products", params={"status": "PENDING_APPROVAL"}).status_code == 403
        response = admin_client.get("/api/products", params={"status": "pending_approval"})
        assert response.status_code == 200
        assert response.json()["totalItems"] == 1

    def test_artisan_sees_own_listings_in_any_status(
        self, client, artisan, other_artisan, artisan_headers, product_category, make_listing
    ):
        make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.DRAFT)
        make_listing(ListingKind.PRODUCT, other_artisan, product_category, ListingStatus.DRAFT)

        own = client.get(
            "/api/products", params={"status": "ALL", "artisanId": artisan.id}, headers=artisan_headers
        )
        others = client.get(
            "/api/products", params={"status": "ALL", "artisanId": other_artisan.id}, headers=artisan_headers
        )

        assert own.status_code == 200
        assert own.json()["totalItems"] == 1
        assert others.status_code == 403

    def test_all_removes_status_filter(self, admin_client, artisan, service_category, make_listing):
        for status in ListingStatus:
            make_listing(ListingKind.SERVICE, artisan, service_category, status)

        response = admin_client.get("/api/services", params={"status": "ALL"})

        assert response.json()["totalItems"] == len(ListingStatus)

    def test_unknown_status_is_bad_request(self, admin_client):
        response = admin_client.get("/api/products", params={"status": "PUBLISHED"})

        assert response.status_code == 400

    def test_training_items_key(self, client, artisan, training_category, make_listing):
        make_listing(ListingKind.TRAINING, artisan, training_category)

        body = client.get("/api/training").json()

        assert len(body["trainingOffers"]) == 1

    def test_search_sort_and_category_filter(self, client, artisan, make_category, make_listing):
        masks = make_category("Masks")
        stools = make_category("Stools")
        make_listing(ListingKind.PRODUCT, artisan, masks, title="Ebony mask", price=300.0)
        make_listing(ListingKind.PRODUCT, artisan, masks, title="Cedar mask", price=100.0)
        make_listing(ListingKind.PRODUCT, artisan, stools, title="Ashanti stool", price=200.0)

        by_price = client.get("/api/products", params={"sortBy": "price", "sortOrder": "asc"}).json()
        searched = client.get("/api/products", params={"search": "mask"}).json()
        filtered = client.get("/api/products", params={"categoryId": stools.id}).json()

        assert [p["price"] for p in by_price["products"]] == [100.0, 200.0, 300.0]
        assert {p["title"] for p in searched["products"]} == {"Ebony mask", "Cedar mask"}
        assert [p["title"] for p in filtered["products"]] == ["Ashanti stool"]

    @pytest.mark.parametrize(
        "params, expected",
        [
            ({}, ["Newer", "Older"]),
            ({"sortOrder": "asc"}, ["Older", "Newer"]),
            ({"sortOrder": "desc"}, ["Newer", "Older"]),
            ({"sortBy": "unknown", "sortOrder": "asc"}, ["Newer", "Older"]),
        ],
    )
    def test_sort_order_applies_to_default_column(
        self, client, artisan, product_category, make_listing, params, expected
    ):
        make_listing(
            ListingKind.PRODUCT, artisan, product_category, title="Older",
            created_at="2024-01-01T09:00:00+00:00",
        )
        make_listing(
            ListingKind.PRODUCT, artisan, product_category, title="Newer",
            created_at="2024-02-01T09:00:00+00:00",
        )

        body = client.get("/api/products", params=params).json()

        assert [p["title"] for p in body["products"]] == expected

    @pytest.mark.parametrize("limit", [1, 4, 10, 23, 100])
    def test_pagination_invariants(self, client, artisan, product_category, make_listing, limit):
        for i in range(23):
            make_listing(ListingKind.PRODUCT, artisan, product_category, title=f"Item {i}")

        first = client.get("/api/products", params={"limit": limit}).json()
        total_pages = first["totalPages"]

        assert first["totalItems"] == 23
        assert total_pages == math.ceil(23 / limit)
        seen = []
        for page in range(1, total_pages + 1):
            body = client.get("/api/products", params={"limit": limit, "page": page}).json()
            assert (page - 1) * limit < body["totalItems"]
            seen.extend(p["id"] for p in body["products"])
        assert len(seen) == len(set(seen)) == 23

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
    def test_invalid_paging(self, client, params):
        assert client.get("/api/products", params=params).status_code == 400


class TestGetListing:
    def test_public_cannot_see_pending(self, client, artisan, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL)

        response = client.get(f"/api/products/{listing.id}")

        assert response.status_code == 404

    def test_owner_and_admin_see_pending(
        self, client, admin_client, artisan, artisan_headers, product_category, make_listing
    ):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL)

        assert client.get(f"/api/products/{listing.id}", headers=artisan_headers).status_code == 200
        assert admin_client.get(f"/api/products/{listing.id}").status_code == 200


class TestUpdateListing:
    def test_owner_updates_fields(self, client, artisan, artisan_headers, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category)

        response = client.put(
            f"/api/products/{listing.id}", json={"price": 99.5, "dimensions": "30x20cm"}, headers=artisan_headers
        )

        assert response.status_code == 200
        assert response.json()["price"] == 99.5
        assert response.json()["dimensions"] == "30x20cm"
        assert response.json()["status"] == "ACTIVE"

    def test_other_artisan_is_forbidden(self, client, artisan, other_artisan, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category)

        response = client.put(
            f"/api/products/{listing.id}", json={"price": 1}, headers=bearer_for(other_artisan)
        )

        assert response.status_code == 403

    def test_resubmit_rejected_listing(self, client, artisan, artisan_headers, product_category, make_listing):
        listing = make_listing(
            ListingKind.PRODUCT, artisan, product_category, ListingStatus.REJECTED, rejection_reason="blurry"
        )

        response = client.put(
            f"/api/products/{listing.id}",
            json={"images": ["https://cdn.example.com/sharp.jpg"], "submitForApproval": True},
            headers=artisan_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_APPROVAL"
        assert response.json()["rejectionReason"] is None

    def test_resubmit_active_listing_is_rejected(
        self, client, artisan, artisan_headers, product_category, make_listing
    ):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category)

        response = client.put(
            f"/api/products/{listing.id}", json={"submitForApproval": True}, headers=artisan_headers
        )

        assert response.status_code == 400

    def test_null_required_field(self, client, artisan, artisan_headers, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category)

        response = client.put(f"/api/products/{listing.id}", json={"title": None}, headers=artisan_headers)

        assert response.status_code == 400

    def test_switch_to_paid_training_needs_price(
        self, client, artisan, artisan_headers, training_category, make_listing
    ):
        listing = make_listing(
            ListingKind.TRAINING, artisan, training_category, is_free=True, price=None, currency=None
        )

        response = client.put(f"/api/training/{listing.id}", json={"isFree": False}, headers=artisan_headers)

        assert response.status_code == 400


class TestDeleteListing:
    def test_admin_deletes(self, admin_client, artisan, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category)

        assert admin_client.delete(f"/api/products/{listing.id}").status_code == 204
        assert admin_client.get(f"/api/products/{listing.id}").status_code == 404

    def test_anonymous_cannot_delete(self, client, artisan, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category)

        assert client.delete(f"/api/products/{listing.id}").status_code == 401


class TestStatusTransitions:
    def test_reject_then_approve_clears_reason(self, admin_client, artisan, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL)

        rejected = admin_client.put(
            f"/api/products/{listing.id}/status",
            json={"status": "REJECTED", "rejectionReason": "blurry photos"},
        )
        assert rejected.status_code == 200
        assert rejected.json()["status"] == "REJECTED"
        assert rejected.json()["rejectionReason"] == "blurry photos"

        approved = admin_client.put(f"/api/products/{listing.id}/status", json={"status": "ACTIVE"})
        assert approved.status_code == 200
        assert approved.json()["status"] == "ACTIVE"
        assert approved.json()["rejectionReason"] is None
        assert approved.json()["artisan"]["email"] == artisan.email
        assert approved.json()["category"]["slug"] == "carvings"

    @pytest.mark.parametrize(
        "segment, kind, category_fixture",
        [
            ("products", ListingKind.PRODUCT, "product_category"),
            ("services", ListingKind.SERVICE, "service_category"),
            ("training", ListingKind.TRAINING, "training_category"),
        ],
    )
    def test_admin_prefixed_routes(self, request, admin_client, artisan, make_listing, segment, kind, category_fixture):
        category = request.getfixturevalue(category_fixture)
        listing = make_listing(kind, artisan, category, ListingStatus.PENDING_APPROVAL)

        response = admin_client.put(f"/api/admin/{segment}/{listing.id}/status", json={"status": "inactive"})

        assert response.status_code == 200
        assert response.json()["status"] == "INACTIVE"

    def test_invalid_target_status(self, admin_client, artisan, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL)

        response = admin_client.put(f"/api/products/{listing.id}/status", json={"status": "ARCHIVED"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid status. Must be ACTIVE, REJECTED, or INACTIVE."}

    def test_missing_listing(self, admin_client):
        response = admin_client.put("/api/services/999/status", json={"status": "ACTIVE"})

        assert response.status_code == 404
        assert response.json() == {"error": "Service not found."}

    def test_artisan_cannot_change_status(self, client, artisan, artisan_headers, product_category, make_listing):
        listing = make_listing(ListingKind.PRODUCT, artisan, product_category, ListingStatus.PENDING_APPROVAL)

        response = client.put(
            f"/api/products/{listing.id}/status", json={"status": "ACTIVE"}, headers=artisan_headers
        )

        assert response.status_code == 403
