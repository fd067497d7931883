"""
Unit tests for locally stored interests.
"""

import json

import pytest

from learnerdash.controllers.interests import INTERESTS_KEY, InterestsController, load_interests
from learnerdash.storage.local_store import LocalStore


class TestLoadInterests:
    """Tests for reading the stored interest list."""

    def test_missing(self, tmp_path):
        assert load_interests(LocalStore(tmp_path / "storage.json")) == []

    def test_deduplicates(self, tmp_path):
        store = LocalStore(tmp_path / "storage.json")
        store.set(INTERESTS_KEY, json.dumps(["Design", "Design", 3, "DevOps"]))

        assert load_interests(store) == ["Design", "DevOps"]

    def test_unreadable_value(self, tmp_path):
        store = LocalStore(tmp_path / "storage.json")
        store.set(INTERESTS_KEY, "[Design")

        assert load_interests(store) == []


class TestInterestsController:
    """Tests for InterestsController."""

    @pytest.mark.asyncio
    async def test_add_persists_across_reload(self, screen, context, settings, fake_lms):
        controller = screen.interests()

        assert controller.add("Design") is True
        assert controller.add("Design") is False

        reloaded = InterestsController(screen.guard, context.api, LocalStore(settings.storage_path))

        assert reloaded.interests == ["Design"]
        assert json.loads(LocalStore(settings.storage_path).get(INTERESTS_KEY)) == ["Design"]
        assert fake_lms.requests == []

    @pytest.mark.asyncio
    async def test_remove(self, screen, settings):
        controller = screen.interests()
        controller.add("Design")
        controller.add("DevOps")

        assert controller.remove("Design") is True
        assert controller.remove("Design") is False
        assert json.loads(LocalStore(settings.storage_path).get(INTERESTS_KEY)) == ["DevOps"]

    @pytest.mark.asyncio
    async def test_categories_exclude_chosen_and_sort(self, screen):
        controller = screen.interests()
        controller.add("Design")
        await controller.load()

        assert controller.categories == ["Data Science", "DevOps", "Marketing", "Programming"]

    @pytest.mark.asyncio
    async def test_search(self, screen):
        controller = screen.interests()
        await controller.load()

        controller.search = "de"
        assert controller.categories == ["Design", "DevOps"]

        controller.search = "zzz"
        assert controller.no_matches

    @pytest.mark.asyncio
    async def test_toggle_view(self, screen, fake_lms):
        fake_lms.courses["c6"] = {"_id": "c6", "title": "Film", "category": "Arts"}
        controller = screen.interests()
        await controller.load()

        assert len(controller.visible_categories) == 5
        controller.toggle_view()
        assert len(controller.visible_categories) == 6
        controller.toggle_view()
        assert len(controller.visible_categories) == 5

    @pytest.mark.asyncio
    async def test_associated_courses(self, screen, context):
        context.credentials.clear()
        controller = screen.interests()
        controller.add("Design")
        controller.add("Marketing")

        await controller.load()

        assert [c.id for c in controller.associated_courses] == ["c3", "c5"]
