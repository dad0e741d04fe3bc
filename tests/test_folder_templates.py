"""Tests for folder templates: creation, visibility and ordering."""

from contextforge.models import FolderTemplate
from contextforge.schemas.template import FolderTemplateCreate
from contextforge.services.template_service import FolderTemplateService


def _template(db, name, created_by, is_public=False, usage_count=0, category=None):
    template = FolderTemplate(
        id=f"tpl-{name.lower()}",
        name=name,
        structure={"folders": []},
        created_by=created_by,
        is_public=is_public,
        usage_count=usage_count,
        category=category,
    )
    db.add(template)
    db.commit()
    return template


class TestTemplateService:

    def test_create_stores_owner_and_defaults(self, db, owner):
        created = FolderTemplateService(db).create_template(
            owner, FolderTemplateCreate(name="  Project  ", structure={"folders": ["Docs", "Notes"]})
        )
        assert created.id.startswith("tpl-")
        assert created.name == "Project"
        assert created.created_by == owner
        assert created.rules == {}
        assert created.is_public is False
        assert created.usage_count == 0

    def test_lists_own_and_public_most_used_first(self, db, owner, other_owner):
        _template(db, "Mine", owner, usage_count=1)
        _template(db, "Shared", other_owner, is_public=True, usage_count=5)
        _template(db, "Private", other_owner)

        names = [t.name for t in FolderTemplateService(db).list_templates(owner)]
        assert names == ["Shared", "Mine"]

    def test_exclude_public(self, db, owner, other_owner):
        _template(db, "Mine", owner)
        _template(db, "Shared", other_owner, is_public=True)
        names = [t.name for t in FolderTemplateService(db).list_templates(owner, include_public=False)]
        assert names == ["Mine"]

    def test_category_filter(self, db, owner):
        _template(db, "Coding", owner, category="dev")
        _template(db, "Writing", owner, category="docs")
        names = [t.name for t in FolderTemplateService(db).list_templates(owner, category="dev")]
        assert names == ["Coding"]


class TestTemplateEndpoints:

    def test_create_and_list(self, client):
        resp = client.post(
            "/api/folders/templates",
            json={"name": "Project", "structure": {"folders": ["Docs"]}, "category": "dev"},
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["structure"] == {"folders": ["Docs"]}

        listed = client.get("/api/folders/templates").json()
        assert [t["name"] for t in listed] == ["Project"]

    def test_missing_structure_is_400(self, client):
        resp = client.post("/api/folders/templates", json={"name": "Project"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"

    def test_empty_name_is_400(self, client):
        resp = client.post("/api/folders/templates", json={"name": "   ", "structure": {}})
        assert resp.status_code == 400
