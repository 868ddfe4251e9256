"""
Category chain service.

Categories form singly-linked pipelines through ``next_category``. Nothing
prevents an operator from linking a category back into its own pipeline, so
readers walk the chain with a visited set instead of trusting it to end.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Max

from apps.core.store import get_or_not_found, translate_store_errors

from ..models import Category
from .exceptions import CategoryNotFoundError, InvalidCategoryError

logger = logging.getLogger(__name__)

UP = 'up'
DOWN = 'down'


class CategoryChain:
    """
    Lazy, restartable walk along ``next_category`` pointers.

    Each iteration starts again from ``start_id`` and stops at a null
    pointer, at a pointer to a category that no longer exists, or at the
    first id seen twice. A chain over N categories therefore yields at most
    N items.

    Args:
        start_id: Id of the first category
        resolve: Callable returning the Category for an id, or None
    """

    def __init__(self, start_id, resolve: Callable[[UUID], Optional[Category]]):
        self.start_id = start_id
        self.resolve = resolve

    def __iter__(self) -> Iterator[Category]:
        visited = set()
        current_id = self.start_id
        while current_id and str(current_id) not in visited:
            category = self.resolve(current_id)
            if category is None:
                break
            visited.add(str(current_id))
            yield category
            current_id = category.next_category_id


def _resolve_from_store(category_id) -> Optional[Category]:
    return Category.objects.filter(pk=category_id).first()


def get_chain_from(*, start_id: UUID) -> CategoryChain:
    """Return the chain of categories starting at ``start_id``."""
    return CategoryChain(start_id, _resolve_from_store)


def list_categories():
    """Return all categories in display order with their rates."""
    return Category.objects.prefetch_related('rates').order_by('order', 'name')


def get_category_by_id(*, category_id: UUID) -> Category:
    """
    Get a category by ID.

    Raises:
        CategoryNotFoundError: If category doesn't exist
    """
    return get_or_not_found(
        Category.objects.prefetch_related('rates'),
        CategoryNotFoundError,
        f"Category {category_id} not found",
        pk=category_id,
    )


@translate_store_errors
@transaction.atomic
def create_category(
    *,
    name: str,
    description: str = '',
    next_category_id: Optional[UUID] = None,
    created_by: str = 'anonymous'
) -> Category:
    """
    Create a category at the end of the current ordering.

    Args:
        name: Category name (must not be blank)
        description: Optional description
        next_category_id: Optional id of the following stage
        created_by: Actor id stamped on the record

    Returns:
        Created Category with an empty rate list

    Raises:
        InvalidCategoryError: If name is blank
        CategoryNotFoundError: If next_category_id doesn't exist
    """
    name = (name or '').strip()
    if not name:
        raise InvalidCategoryError("Category name is required")

    next_category = None
    if next_category_id:
        next_category = get_or_not_found(
            Category.objects,
            CategoryNotFoundError,
            f"Category {next_category_id} not found",
            pk=next_category_id,
        )

    max_order = Category.objects.aggregate(max_order=Max('order'))['max_order']
    category = Category.objects.create(
        name=name,
        description=description,
        next_category=next_category,
        order=0 if max_order is None else max_order + 1,
        created_by=created_by,
    )
    logger.info("Created category %s (%s)", category.id, category.name)
    return category


@translate_store_errors
@transaction.atomic
def update_category(
    *,
    category_id: UUID,
    name: Optional[str] = None,
    description: Optional[str] = None
) -> Category:
    """
    Update category name and/or description.

    Raises:
        CategoryNotFoundError: If category doesn't exist
        InvalidCategoryError: If the new name is blank
    """
    category = get_or_not_found(
        Category.objects.select_for_update(),
        CategoryNotFoundError,
        f"Category {category_id} not found",
        pk=category_id,
    )

    update_fields = ['updated_at']

    if name is not None:
        name = name.strip()
        if not name:
            raise InvalidCategoryError("Category name is required")
        category.name = name
        update_fields.append('name')

    if description is not None:
        category.description = description
        update_fields.append('description')

    category.save(update_fields=update_fields)
    return category


@translate_store_errors
@transaction.atomic
def set_next_category(*, category_id: UUID, next_category_id: Optional[UUID]) -> Category:
    """
    Point a category at the next stage of its pipeline, or clear the pointer.

    Cycles are not rejected here; ``CategoryChain`` stops on them.

    Raises:
        CategoryNotFoundError: If either category doesn't exist
    """
    category = get_or_not_found(
        Category.objects.select_for_update(),
        CategoryNotFoundError,
        f"Category {category_id} not found",
        pk=category_id,
    )

    if next_category_id:
        category.next_category = get_or_not_found(
            Category.objects,
            CategoryNotFoundError,
            f"Category {next_category_id} not found",
            pk=next_category_id,
        )
    else:
        category.next_category = None

    category.save(update_fields=['next_category', 'updated_at'])
    logger.info("Category %s next -> %s", category.id, category.next_category_id)
    return category


@translate_store_errors
@transaction.atomic
def delete_category(*, category_id: UUID) -> None:
    """
    Delete a category after unlinking every category that points at it.

    Both steps run in one transaction: if either fails, nothing changes.

    Raises:
        CategoryNotFoundError: If category doesn't exist
    """
    category = get_or_not_found(
        Category.objects.select_for_update(),
        CategoryNotFoundError,
        f"Category {category_id} not found",
        pk=category_id,
    )

    unlinked = (
        Category.objects
        .filter(next_category_id=category.id)
        .exclude(pk=category.id)
        .update(next_category=None)
    )
    category.delete()
    logger.info("Deleted category %s, unlinked %d predecessor(s)", category_id, unlinked)


@translate_store_errors
@transaction.atomic
def reorder_categories(*, ordered_ids: Iterable[UUID]) -> List[Category]:
    """
    Assign ``order = index`` following ``ordered_ids``.

    Raises:
        CategoryNotFoundError: If any id doesn't exist (nothing is written)
    """
    ordered_ids = [str(category_id) for category_id in ordered_ids]
    categories = {
        str(category.id): category
        for category in Category.objects.select_for_update().filter(pk__in=ordered_ids)
    }

    missing = [category_id for category_id in ordered_ids if category_id not in categories]
    if missing:
        raise CategoryNotFoundError(f"Categories not found: {', '.join(missing)}")

    reordered = []
    for index, category_id in enumerate(ordered_ids):
        category = categories[category_id]
        category.order = index
        category.save(update_fields=['order', 'updated_at'])
        reordered.append(category)

    return reordered


@translate_store_errors
@transaction.atomic
def move_category(*, category_id: UUID, direction: str) -> None:
    """
    Swap a category with its neighbour in the current ordering.

    Moving the first category up or the last one down does nothing.

    Args:
        category_id: Category to move
        direction: ``'up'`` or ``'down'``

    Raises:
        InvalidCategoryError: If direction is not up/down
        CategoryNotFoundError: If category doesn't exist
    """
    if direction not in (UP, DOWN):
        raise InvalidCategoryError(f"Invalid direction: {direction}")

    ordering = Category.objects.select_for_update().order_by('order', 'name')
    ordered_ids = [str(pk) for pk in ordering.values_list('id', flat=True)]

    try:
        current_index = ordered_ids.index(str(category_id))
    except ValueError:
        raise CategoryNotFoundError(f"Category {category_id} not found")

    new_index = current_index - 1 if direction == UP else current_index + 1
    if new_index < 0 or new_index >= len(ordered_ids):
        return

    ordered_ids[current_index], ordered_ids[new_index] = (
        ordered_ids[new_index],
        ordered_ids[current_index],
    )
    reorder_categories(ordered_ids=ordered_ids)
