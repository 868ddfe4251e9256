"""
Read-through cache of the catalog lookups.

A ``LookupCache`` is created by whoever needs it and passed down; there is
no module-level instance. It loads everything on first access and keeps the
snapshot until ``refresh()`` is called.
"""

import logging
from typing import Dict, List, Optional

from ..models import Category, CropType, PaymentGroup, WorkType
from .category_chain import CategoryChain

logger = logging.getLogger(__name__)


class LookupCache:
    """Snapshot of categories, payment groups, crop types and work types."""

    def __init__(self):
        self._categories: Optional[List[Category]] = None
        self._categories_by_id: Dict[str, Category] = {}
        self._payment_groups = None
        self._crop_types = None
        self._work_types = None

    def refresh(self) -> 'LookupCache':
        """Reload every collection from the database."""
        self._categories = list(
            Category.objects.prefetch_related('rates').order_by('order', 'name')
        )
        self._categories_by_id = {str(c.id): c for c in self._categories}
        self._payment_groups = list(PaymentGroup.objects.all())
        self._crop_types = list(CropType.objects.all())
        self._work_types = list(WorkType.objects.all())
        logger.debug(
            "Lookup cache refreshed: %d categories, %d payment groups, "
            "%d crop types, %d work types",
            len(self._categories),
            len(self._payment_groups),
            len(self._crop_types),
            len(self._work_types),
        )
        return self

    def _ensure_loaded(self):
        if self._categories is None:
            self.refresh()

    @property
    def categories(self) -> List[Category]:
        self._ensure_loaded()
        return self._categories

    @property
    def payment_groups(self) -> List[PaymentGroup]:
        self._ensure_loaded()
        return self._payment_groups

    @property
    def crop_types(self) -> List[CropType]:
        self._ensure_loaded()
        return self._crop_types

    @property
    def work_types(self) -> List[WorkType]:
        self._ensure_loaded()
        return self._work_types

    def get_category(self, category_id) -> Optional[Category]:
        self._ensure_loaded()
        return self._categories_by_id.get(str(category_id))

    def chain_from(self, start_id) -> CategoryChain:
        """Walk the category chain over the cached snapshot."""
        return CategoryChain(start_id, self.get_category)
