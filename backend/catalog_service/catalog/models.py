# backend/catalog_service/catalog/models.py

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from .db import Base


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    brand = Column(String(255), nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    category = Column(String(255), nullable=True)
    release_date = Column(Date, nullable=True)
    product_available = Column(Boolean, nullable=False, default=False)
    stock_quantity = Column(Integer, nullable=False, default=0)

    # Written together from a single uploaded file.
    image_name = Column(String(255), nullable=True)
    image_type = Column(String(255), nullable=True)
    image_data = Column(LargeBinary, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        size = len(self.image_data) if self.image_data is not None else 0
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock_quantity}, image='{self.image_name}' ({size} bytes))>"
