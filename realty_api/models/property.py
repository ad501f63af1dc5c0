"""
Property model for real-estate listings.
Handles the business identifier, pricing, specifications and attached image paths.
"""

from sqlalchemy import String, Text, Integer, Float, Boolean, JSON, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from realty_api.database import Base
import enum
from typing import List


class PropertyType(str, enum.Enum):
    """Kinds of property that can be listed."""
    HOUSE = "house"
    APARTMENT = "apartment"
    FARMHOUSE = "farmhouse"
    COMMERCIAL = "commercial"


class Property(Base):
    """
    Property listing managed by staff.
    `property_id` is the external business identifier and is unique across listings.
    """

    __tablename__ = "properties"

    property_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        comment="External business identifier"
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        index=True,
        comment="Asking price"
    )

    # Location information
    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    house_number: Mapped[str] = mapped_column(String(50), nullable=False)

    block_number: Mapped[str] = mapped_column(String(50), nullable=False)

    # Ordered list of public image paths
    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType),
        nullable=False,
        index=True,
    )

    # Specifications
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)

    garage: Mapped[int] = mapped_column(Integer, nullable=False)

    area_size: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Free-form area description, e.g. '10 Marla'"
    )

    year_built: Mapped[int] = mapped_column(Integer, nullable=False)

    featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )

    features: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, property_id={self.property_id}, price={self.price})>"


# Composite index for the search filters
search_index = Index(
    'idx_properties_search',
    Property.location,
    Property.price,
    Property.bedrooms,
    Property.property_type,
)
