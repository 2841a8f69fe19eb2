"""API tests for users, categories, audit, stats, preferences and translation."""

from unittest.mock import AsyncMock, patch

from app.interfaces.translator import TranslationError


class TestUsers:
    """Test suite for the /users routes."""

    def test_me(self, client, editor_headers):
        body = client.get("/users/me", headers=editor_headers).json()
        assert body["email"] == "editor@example.com"
        assert body["role"] == "editor"

    def test_list_requires_admin(self, client, editor_headers, admin_headers):
        assert client.get("/users", headers=editor_headers).status_code == 403
        assert client.get("/users", headers=admin_headers).json()["total"] == 4

    def test_create_and_duplicate(self, client, admin_headers):
        payload = {"email": "New@Example.com", "role": "editor"}

        created = client.post("/users", json=payload, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["email"] == "new@example.com"

        assert client.post("/users", json=payload, headers=admin_headers).status_code == 409

    def test_role_change(self, client, admin_headers, editor_headers, ids):
        response = client.patch(
            f"/users/{ids['editor']}/role", json={"role": "viewer"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["role"] == "viewer"
        assert (
            client.post("/templates", json={"title": "T", "content": "x"}, headers=editor_headers).status_code
            == 403
        )

        entries = client.get("/audit", headers=admin_headers).json()["entries"]
        assert entries[0]["action"] == "ROLE_CHANGE"
        assert entries[0]["entity_title"] == "editor@example.com: editor -> viewer"

    def test_cannot_change_own_role(self, client, admin_headers, ids):
        response = client.patch(
            f"/users/{ids['admin']}/role", json={"role": "viewer"}, headers=admin_headers
        )
        assert response.status_code == 400


class TestCategories:
    """Test suite for the /categories routes."""

    def test_list_sorted_by_name(self, client, viewer_headers):
        names = [c["name"] for c in client.get("/categories", headers=viewer_headers).json()]
        assert names == ["General", "Orders", "Refunds"]

    def test_create(self, client, admin_headers, editor_headers):
        assert (
            client.post("/categories", json={"name": "Shipping"}, headers=editor_headers).status_code
            == 403
        )
        assert client.post("/categories", json={"name": "Shipping"}, headers=admin_headers).status_code == 201
        assert client.post("/categories", json={"name": "Shipping"}, headers=admin_headers).status_code == 409


class TestAuditAndStats:
    """Audit trail and dashboard counters."""

    def test_audit_and_stats(self, client, create_template, viewer_headers, admin_headers):
        template = create_template()
        client.post(f"/templates/{template['id']}/copy", json={"values": {}}, headers=viewer_headers)

        entries = client.get("/audit", headers=admin_headers).json()["entries"]
        assert {e["action"] for e in entries} == {"CREATE", "COPY"}
        assert all(e["entity_id"] == template["id"] for e in entries)

        assert client.get("/admin/stats", headers=admin_headers).json() == {
            "templates": 1,
            "users": 4,
            "copies": 1,
        }

    def test_audit_limit(self, client, create_template, admin_headers):
        for i in range(3):
            create_template(title=f"T{i}")

        body = client.get("/audit", params={"limit": 2}, headers=admin_headers).json()
        assert body["total"] == 2

    def test_admin_only(self, client, viewer_headers):
        assert client.get("/audit", headers=viewer_headers).status_code == 403
        assert client.get("/admin/stats", headers=viewer_headers).status_code == 403


class TestPreferences:
    """Test suite for the /preferences routes."""

    def test_defaults(self, client, viewer_headers):
        assert client.get("/preferences", headers=viewer_headers).json() == {
            "pinned_template_ids": [],
            "hidden_template_ids": [],
            "tag_colors": {},
            "dark_mode": False,
        }

    def test_pins_come_first(self, client, create_template, viewer_headers):
        first = create_template(title="First")
        second = create_template(title="Second")

        prefs = client.post(f"/preferences/pins/{first['id']}", headers=viewer_headers).json()
        assert prefs["pinned_template_ids"] == [first["id"]]

        templates = client.get("/templates", headers=viewer_headers).json()["templates"]
        assert templates[0]["id"] == first["id"]
        assert templates[0]["is_pinned"] is True
        assert {t["id"] for t in templates} == {first["id"], second["id"]}

        prefs = client.post(f"/preferences/pins/{first['id']}", headers=viewer_headers).json()
        assert prefs["pinned_template_ids"] == []

    def test_hidden_excluded_unless_requested(self, client, create_template, viewer_headers):
        template = create_template()
        client.post(f"/preferences/hidden/{template['id']}", headers=viewer_headers)

        assert client.get("/templates", headers=viewer_headers).json()["total"] == 0
        shown = client.get("/templates", params={"include_hidden": True}, headers=viewer_headers)
        assert shown.json()["total"] == 1

    def test_tag_color_and_dark_mode(self, client, viewer_headers):
        client.put("/preferences/tag-colors/VIP", json={"color": "#ff0000"}, headers=viewer_headers)
        prefs = client.put("/preferences/dark-mode", json={"dark_mode": True}, headers=viewer_headers).json()

        assert prefs["tag_colors"] == {"vip": "#ff0000"}
        assert prefs["dark_mode"] is True


class TestTranslate:
    """Test suite for POST /translate."""

    def test_translate(self, client, factory, create_template, viewer_headers, admin_headers):
        template = create_template()
        translator = factory.get_translator()

        with patch.object(translator, "translate", AsyncMock(return_value="Hello Ana")) as translate:
            response = client.post(
                "/translate",
                json={"text": "Hola Ana", "targetLang": "EN", "templateId": template["id"]},
                headers=viewer_headers,
            )

        assert response.status_code == 200
        assert response.json() == {"translations": [{"text": "Hello Ana"}]}
        translate.assert_awaited_once_with("Hola Ana", "EN")

        actions = [e["action"] for e in client.get("/audit", headers=admin_headers).json()["entries"]]
        assert "TRANSLATE" in actions

    def test_translation_failure_is_502(self, client, factory, viewer_headers):
        translator = factory.get_translator()

        with patch.object(translator, "translate", AsyncMock(side_effect=TranslationError("down"))):
            response = client.post(
                "/translate", json={"text": "Hola", "target_lang": "EN"}, headers=viewer_headers
            )

        assert response.status_code == 502
        assert response.json()["detail"] == "Translation unavailable"

    def test_unsupported_target_is_422(self, client, viewer_headers):
        response = client.post(
            "/translate", json={"text": "Hola", "targetLang": "JA"}, headers=viewer_headers
        )
        assert response.status_code == 422
