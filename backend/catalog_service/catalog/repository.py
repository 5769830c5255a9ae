# backend/catalog_service/catalog/repository.py

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Product

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    Data access for Product rows over a single SQLAlchemy session.
    Every write commits; a failed write rolls the session back and re-raises.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def save(self, product: Product) -> Product:
        """
        Insert-or-update keyed on `product.id`.
        An id that matches no row is discarded and a fresh one is assigned.
        """
        if product.id is not None and self.find_by_id(product.id) is None:
            logger.info(
                f"Catalog Service: No product with ID {product.id}; inserting as a new product."
            )
            product.id = None

        try:
            stored = self.db.merge(product)
            self.db.commit()
            self.db.refresh(stored)
            return stored
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete_by_id(self, product_id: int) -> None:
        product = self.find_by_id(product_id)
        if product is None:
            return
        try:
            self.db.delete(product)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def search(self, keyword: str) -> List[Product]:
        # Literal substring: LIKE wildcards in the keyword are escaped.
        escaped = (
            keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        )
        search_pattern = f"%{escaped}%"
        return (
            self.db.query(Product)
            .filter(
                or_(
                    Product.name.ilike(search_pattern, escape="\\"),
                    Product.description.ilike(search_pattern, escape="\\"),
                    Product.brand.ilike(search_pattern, escape="\\"),
                    Product.category.ilike(search_pattern, escape="\\"),
                )
            )
            .order_by(Product.id)
            .all()
        )
