"""Category repository for the category catalogue."""
from typing import Optional, Iterable, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.article import CategoryModel


class CategoryRepository:
    """Repository for Category lookups and seeding."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.categories

    async def get_category_by_slug(self, slug: str) -> Optional[CategoryModel]:
        """Get a category by slug."""
        doc = await self.collection.find_one({"slug": slug})
        return CategoryModel(**doc) if doc else None

    async def ensure_categories(self, categories: Iterable[Tuple[str, str]]) -> int:
        """Upsert (slug, name) pairs. Returns the number of newly created categories."""
        created = 0
        for slug, name in categories:
            result = await self.collection.update_one(
                {"slug": slug},
                {
                    "$set": {"name": name},
                    "$setOnInsert": {"_id": f"cat_{slug}"}
                },
                upsert=True
            )
            if result.upserted_id is not None:
                created += 1
        return created
