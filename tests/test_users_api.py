"""Tests for admin user management and dashboard statistics."""

import pytest

from artisan_admin.models.category import CategoryType
from artisan_admin.models.listing import ListingKind, ListingStatus
from artisan_admin.models.user import UserRole


class TestListUsers:
    def test_paginates_and_counts(self, admin_client, make_user):
        for i in range(12):
            make_user(f"customer{i}@example.com")

        first = admin_client.get("/api/users", params={"limit": 5}).json()
        last = admin_client.get("/api/users", params={"limit": 5, "page": 3}).json()

        assert first["totalItems"] == 13
        assert first["totalPages"] == 3
        assert len(first["users"]) == 5
        assert len(last["users"]) == 3
        assert "hashedPassword" not in first["users"][0]

    def test_filters_by_role_and_active_flag(self, admin_client, artisan, make_user):
        make_user("idle@example.com", role=UserRole.ARTISAN, is_active=False)
        make_user("buyer@example.com")

        artisans = admin_client.get("/api/users", params={"role": "ARTISAN"}).json()
        active_artisans = admin_client.get(
            "/api/users", params={"role": "ARTISAN", "isActive": "true"}
        ).json()

        assert artisans["totalItems"] == 2
        assert [u["email"] for u in active_artisans["users"]] == [artisan.email]

    def test_search_matches_name_or_email(self, admin_client, artisan, other_artisan):
        by_name = admin_client.get("/api/users", params={"search": "mensah"}).json()
        by_email = admin_client.get("/api/users", params={"search": "ama@"}).json()

        assert [u["id"] for u in by_name["users"]] == [artisan.id]
        assert [u["id"] for u in by_email["users"]] == [other_artisan.id]

    def test_sort_by_name(self, admin_client, artisan, other_artisan):
        body = admin_client.get("/api/users", params={"sortBy": "name", "sortOrder": "asc"}).json()

        assert [u["name"] for u in body["users"]] == ["Ada Admin", "Ama Owusu", "Kofi Mensah"]

    def test_requires_admin(self, client, artisan_headers):
        assert client.get("/api/users").status_code == 401
        assert client.get("/api/users", headers=artisan_headers).status_code == 403


class TestGetUser:
    def test_found(self, admin_client, artisan):
        response = admin_client.get(f"/api/users/{artisan.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Kofi Mensah"
        assert response.json()["role"] == "ARTISAN"

    def test_missing(self, admin_client):
        response = admin_client.get("/api/users/999")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found."}


class TestUpdateUser:
    def test_partial_update(self, admin_client, artisan):
        response = admin_client.put(
            f"/api/users/{artisan.id}", json={"name": "Kofi A. Mensah", "email": "KOFI.M@Example.com"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Kofi A. Mensah"
        assert body["email"] == "kofi.m@example.com"
        assert body["role"] == "ARTISAN"

    def test_change_role(self, admin_client, make_user):
        user = make_user("buyer@example.com")

        response = admin_client.put(f"/api/users/{user.id}", json={"role": "ARTISAN"})

        assert response.json()["role"] == "ARTISAN"

    def test_email_taken_by_someone_else(self, admin_client, artisan, other_artisan):
        response = admin_client.put(f"/api/users/{artisan.id}", json={"email": other_artisan.email})

        assert response.status_code == 409

    def test_keeping_own_email_is_fine(self, admin_client, artisan):
        response = admin_client.put(f"/api/users/{artisan.id}", json={"email": artisan.email})

        assert response.status_code == 200

    def test_invalid_email(self, admin_client, artisan):
        assert admin_client.put(f"/api/users/{artisan.id}", json={"email": "not-an-email"}).status_code == 400

    def test_admin_cannot_deactivate_self_via_update(self, admin_client, admin):
        response = admin_client.put(f"/api/users/{admin.id}", json={"isActive": False})

        assert response.status_code == 403


class TestUserStatus:
    def test_deactivate_and_reactivate(self, admin_client, artisan):
        off = admin_client.put(f"/api/users/{artisan.id}/status", json={"isActive": False})
        on = admin_client.put(f"/api/users/{artisan.id}/status", json={"isActive": True})

        assert off.status_code == 200
        assert off.json()["isActive"] is False
        assert on.json()["isActive"] is True

    def test_deactivated_artisan_token_stops_working(self, client, admin_client, artisan, artisan_headers):
        admin_client.put(f"/api/users/{artisan.id}/status", json={"isActive": False})

        response = client.post(
            "/api/products",
            json={"title": "Mask", "description": "Carved", "categoryId": 1, "price": 10},
            headers=artisan_headers,
        )

        assert response.status_code == 401

    @pytest.mark.parametrize("value", ["false", 0, None, "no"])
    def test_is_active_must_be_boolean(self, admin_client, artisan, value):
        response = admin_client.put(f"/api/users/{artisan.id}/status", json={"isActive": value})

        assert response.status_code == 400

    def test_cannot_deactivate_self(self, admin_client, admin):
        response = admin_client.put(f"/api/users/{admin.id}/status", json={"isActive": False})

        assert response.status_code == 403
        assert response.json() == {"error": "You cannot deactivate your own account."}

    def test_missing_user(self, admin_client):
        assert admin_client.put("/api/users/999/status", json={"isActive": True}).status_code == 404


class TestDashboardStats:
    def test_counts(self, admin_client, artisan, other_artisan, make_user, make_category, make_listing):
        make_user("buyer@example.com")
        products = make_category("Carvings", CategoryType.PRODUCT)
        trainings = make_category("Workshops", CategoryType.TRAINING)
        make_listing(ListingKind.PRODUCT, artisan, products, ListingStatus.PENDING_APPROVAL)
        make_listing(ListingKind.PRODUCT, other_artisan, products, ListingStatus.PENDING_APPROVAL)
        make_listing(ListingKind.PRODUCT, artisan, products, ListingStatus.ACTIVE)
        make_listing(ListingKind.TRAINING, artisan, trainings, ListingStatus.PENDING_APPROVAL)

        response = admin_client.get("/api/admin/dashboard/stats")

        assert response.status_code == 200
        assert response.json() == {
            "totalArtisans": 2,
            "totalCustomers": 1,
            "totalCategories": 2,
            "pendingApprovals": {"products": 2, "services": 0, "trainingOffers": 1, "total": 3},
        }

    def test_requires_admin(self, client, artisan_headers):
        assert client.get("/api/admin/dashboard/stats", headers=artisan_headers).status_code == 403
