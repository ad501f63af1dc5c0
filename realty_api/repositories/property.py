"""
Property repository with listing, featured and search queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_, desc, false
from realty_api.repositories.base import BaseRepository
from realty_api.models.property import Property, PropertyType
from realty_api.schemas.property import PropertySearchFilters
from typing import Optional, List, Tuple
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Search results and pages are ordered newest first.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def list_all(self) -> List[Property]:
        """Every property, in insertion order."""
        return await self.get_multi(order_by="created_at")

    async def list_featured(self) -> List[Property]:
        """Properties flagged as featured."""
        return await self.get_multi(filters={"featured": True}, order_by="created_at")

    async def get_by_property_id(self, property_id: str) -> Optional[Property]:
        """Look up a property by its business identifier."""
        return await self.get_by_field("property_id", property_id)

    async def property_id_taken(self, property_id: str, exclude_id=None) -> bool:
        """Whether another property already uses this business identifier."""
        existing = await self.get_by_property_id(property_id)
        return existing is not None and existing.id != exclude_id

    async def search(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = select(func.count(Property.id))
            query = select(Property)
            if conditions:
                count_query = count_query.where(and_(*conditions))
                query = query.where(and_(*conditions))

            total_count = (await self.db.execute(count_query)).scalar_one()

            query = query.order_by(desc(Property.created_at)).offset(skip).limit(limit)
            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return properties, total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def search_all(self, filters: PropertySearchFilters) -> List[Property]:
        """Every property matching the filters, in insertion order."""
        try:
            query = select(Property)
            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))

            result = await self.db.execute(query.order_by(Property.created_at))
            properties = list(result.scalars().all())
            logger.debug(f"Property search returned {len(properties)} results")
            return properties
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.
        Bedroom and bathroom values are minimums; price bounds are inclusive.
        """
        conditions = []

        # Location filter (case-insensitive partial match)
        if filters.location:
            conditions.append(Property.location.icontains(filters.location, autoescape=True))

        # Unknown property types match nothing
        if filters.property_type:
            try:
                conditions.append(Property.property_type == PropertyType(filters.property_type))
            except ValueError:
                conditions.append(false())

        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.bedrooms)
        if filters.bathrooms is not None:
            conditions.append(Property.bathrooms >= filters.bathrooms)

        # Price range filters
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        return conditions
