# ============================================================================
# REGISTRY SERVICE
# ============================================================================
# STATUS: Core - Target registration
# PURPOSE: Validate caller input and manage the monitored target set
# CREATED: 16 OCT 2026
# ============================================================================
"""
Registry Service

Thin layer over TargetRepository that validates caller input before it
reaches the store. Duplicate and not-found errors come from the store
unchanged.
"""

import logging
from typing import List, Optional

from core.errors import ValidationError
from core.models import MAX_NAME_LENGTH, MAX_URL_LENGTH, Target
from repositories import TargetRepository

logger = logging.getLogger(__name__)


class RegistryService:
    """Service for registering and removing monitored targets."""

    def __init__(self, target_repo: TargetRepository):
        self.target_repo = target_repo

    async def add(self, name: Optional[str], url: Optional[str]) -> Target:
        """
        Register a new target.

        Raises:
            ValidationError: If name or url is missing, blank or too long,
                or name contains "/"
            DuplicateError: If a target with this name already exists
        """
        name = (name or "").strip()
        url = (url or "").strip()
        if not name or not url:
            logger.debug(f"Rejected target registration: name={name!r} url={url!r}")
            raise ValidationError(
                "Name and URL are required",
                field="name" if not name else "url",
            )
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at most {MAX_NAME_LENGTH} characters", field="name"
            )
        if len(url) > MAX_URL_LENGTH:
            raise ValidationError(
                f"URL must be at most {MAX_URL_LENGTH} characters", field="url"
            )
        # Names are addressed as a single path segment on removal
        if "/" in name:
            raise ValidationError("Name must not contain '/'", field="name")

        return await self.target_repo.add(name, url)

    async def remove(self, name: str) -> Target:
        """
        Remove a target by name.

        Raises:
            NotFoundError: If no such target exists
        """
        return await self.target_repo.remove(name)

    async def list_all(self) -> List[Target]:
        return await self.target_repo.list_all()


__all__ = ["RegistryService"]
