# =============================================================================
# tests/test_profile.py - Profile Tests
# =============================================================================
# Tests for ProfileService and the /api/profile endpoints.
# =============================================================================

import pytest

from app.exceptions import NoFieldsToUpdateError
from core.services.profile_service import ProfileService
from core.services.storage_service import ImageUpload
from tests.conftest import USER_ID, make_query, make_response


# =============================================================================
# Service
# =============================================================================

class TestProfileService:
    """Test ProfileService."""

    def test_existing_profile_is_returned(self, supabase, sample_profile):
        query = make_query(make_response(data=[sample_profile]))
        supabase.table.return_value = query

        assert ProfileService.get_or_create_profile(USER_ID) == sample_profile
        query.insert.assert_not_called()

    def test_missing_profile_is_created(self, supabase):
        created = {"id": str(USER_ID), "display_name": None, "avatar_url": None}
        query = make_query(make_response(data=[]), make_response(data=[created]))
        supabase.table.return_value = query

        profile = ProfileService.get_or_create_profile(USER_ID)

        assert profile == created
        assert query.insert.call_args[0][0]["id"] == str(USER_ID)

    def test_update_upserts_on_id(self, supabase, sample_profile):
        query = make_query(make_response(data=[sample_profile]))
        supabase.table.return_value = query

        ProfileService.update_profile(USER_ID, {"display_name": "Crate Digger"})

        query.upsert.assert_called_once_with(
            {"id": str(USER_ID), "display_name": "Crate Digger"},
            on_conflict="id",
        )

    def test_update_with_nothing(self, supabase):
        with pytest.raises(NoFieldsToUpdateError):
            ProfileService.update_profile(USER_ID, {})

    def test_upload_avatar_replaces_old_photo(self, supabase, sample_profile):
        new_profile = {**sample_profile, "avatar_url": "ignored"}
        query = make_query(make_response(data=[sample_profile]), make_response(data=[new_profile]))
        supabase.table.return_value = query
        bucket = supabase.storage.from_.return_value
        image = ImageUpload(filename="Me.PNG", content=b"\x89PNG", content_type="image/png")

        ProfileService.upload_avatar(USER_ID, image)

        supabase.storage.from_.assert_any_call("profile-photos")
        upload = bucket.upload.call_args.kwargs
        assert upload["path"].startswith(f"{USER_ID}/")
        assert upload["path"].endswith(".png")
        assert upload["file_options"]["upsert"] == "true"

        written = query.upsert.call_args[0][0]
        assert written["avatar_url"].endswith(upload["path"])
        bucket.remove.assert_called_once_with([f"{USER_ID}/1700000000000.png"])

    def test_remove_avatar(self, supabase, sample_profile):
        cleared = {**sample_profile, "avatar_url": None}
        query = make_query(make_response(data=[sample_profile]), make_response(data=[cleared]))
        supabase.table.return_value = query
        bucket = supabase.storage.from_.return_value

        profile = ProfileService.remove_avatar(USER_ID)

        assert profile["avatar_url"] is None
        bucket.remove.assert_called_once_with([f"{USER_ID}/1700000000000.png"])
        assert query.upsert.call_args[0][0] == {"id": str(USER_ID), "avatar_url": None}


# =============================================================================
# Endpoints
# =============================================================================

class TestProfileEndpoints:
    """Test /api/profile."""

    def test_get(self, client, supabase, sample_profile):
        supabase.table.return_value = make_query(make_response(data=[sample_profile]))

        response = client.get("/api/profile")

        assert response.status_code == 200
        assert response.json()["display_name"] == "Crate Digger"

    def test_patch_display_name(self, client, supabase, sample_profile):
        query = make_query(make_response(data=[{**sample_profile, "display_name": "DJ"}]))
        supabase.table.return_value = query

        response = client.patch("/api/profile", json={"display_name": "DJ"})

        assert response.status_code == 200
        assert response.json()["display_name"] == "DJ"
        assert "avatar_url" not in query.upsert.call_args[0][0]

    def test_patch_null_avatar_clears_it(self, client, supabase, sample_profile):
        query = make_query(make_response(data=[{**sample_profile, "avatar_url": None}]))
        supabase.table.return_value = query

        response = client.patch("/api/profile", json={"avatar_url": None})

        assert response.status_code == 200
        assert query.upsert.call_args[0][0] == {"id": str(USER_ID), "avatar_url": None}

    def test_patch_empty_body(self, client, supabase):
        response = client.patch("/api/profile", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "No valid fields to update"

    def test_avatar_upload(self, client, supabase, sample_profile):
        supabase.table.return_value = make_query(
            make_response(data=[sample_profile]),
            make_response(data=[sample_profile]),
        )

        response = client.post(
            "/api/profile/avatar",
            files={"file": ("me.jpg", b"\xff\xd8\xff", "image/jpeg")},
        )

        assert response.status_code == 200
        supabase.storage.from_.return_value.upload.assert_called_once()

    def test_avatar_upload_wrong_type(self, client, supabase):
        response = client.post(
            "/api/profile/avatar",
            files={"file": ("me.bmp", b"BM", "image/bmp")},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_IMAGE_TYPE"

    def test_avatar_delete(self, client, supabase, sample_profile):
        supabase.table.return_value = make_query(
            make_response(data=[sample_profile]),
            make_response(data=[{**sample_profile, "avatar_url": None}]),
        )

        response = client.delete("/api/profile/avatar")

        assert response.status_code == 200
        assert response.json()["avatar_url"] is None
