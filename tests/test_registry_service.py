# ============================================================================
# REGISTRY SERVICE TESTS
# ============================================================================
# STATUS: Tests - Target registration validation
# PURPOSE: Verify input validation and pass-through of store errors
# CREATED: 17 OCT 2026
# ============================================================================
"""
Registry Service Tests

Run with:
    pytest tests/test_registry_service.py -v
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from core.errors import DuplicateError, NotFoundError, ValidationError
from core.models import MAX_NAME_LENGTH, MAX_URL_LENGTH, Target
from services.registry_service import RegistryService


def _build_service():
    """RegistryService with its repository replaced by an AsyncMock."""
    repo = AsyncMock()
    repo.add = AsyncMock(side_effect=lambda name, url: Target(name=name, url=url))
    return RegistryService(repo), repo


@pytest.mark.parametrize("name,url", [
    (None, "http://web/"),
    ("web", None),
    ("", "http://web/"),
    ("web", "   "),
])
def test_add_requires_name_and_url(name, url):
    service, repo = _build_service()

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(service.add(name, url))

    assert str(exc_info.value) == "Name and URL are required"
    repo.add.assert_not_awaited()


@pytest.mark.parametrize("name,url,field", [
    ("n" * (MAX_NAME_LENGTH + 1), "http://web/", "name"),
    ("web", "http://web/" + "a" * MAX_URL_LENGTH, "url"),
])
def test_add_rejects_overlong_input(name, url, field):
    service, repo = _build_service()

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(service.add(name, url))

    assert exc_info.value.field == field
    repo.add.assert_not_awaited()


def test_add_accepts_name_at_length_limit():
    service, repo = _build_service()
    name = "n" * MAX_NAME_LENGTH

    target = asyncio.run(service.add(name, "http://web/"))

    assert target.name == name


@pytest.mark.parametrize("name", ["web/1", "/web", "eu/west/api"])
def test_add_rejects_slash_in_name(name):
    service, repo = _build_service()

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(service.add(name, "http://web/"))

    assert exc_info.value.field == "name"
    repo.add.assert_not_awaited()


def test_add_strips_whitespace():
    service, repo = _build_service()

    target = asyncio.run(service.add("  web ", " http://web/ "))

    assert target.name == "web"
    repo.add.assert_awaited_once_with("web", "http://web/")


def test_duplicate_passes_through():
    service, repo = _build_service()
    repo.add = AsyncMock(side_effect=DuplicateError("web"))

    with pytest.raises(DuplicateError):
        asyncio.run(service.add("web", "http://web/"))


def test_remove_unknown_passes_through():
    service, repo = _build_service()
    repo.remove = AsyncMock(side_effect=NotFoundError("ghost"))

    with pytest.raises(NotFoundError) as exc_info:
        asyncio.run(service.remove("ghost"))

    assert str(exc_info.value) == "Server not found: ghost"
