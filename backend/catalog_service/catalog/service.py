# backend/catalog_service/catalog/service.py

import logging
from typing import List, Optional

from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate

logger = logging.getLogger(__name__)


class UploadReadError(Exception):
    """Raised when the bytes of an uploaded image cannot be read."""
    pass


class ProductService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def list_all(self) -> List[Product]:
        return self.repository.find_all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.repository.find_by_id(product_id)

    def create_or_update(self, product: ProductCreate, upload) -> Product:
        """
        Saves `product` with its image fields taken from `upload`.

        `upload` is anything shaped like a FastAPI UploadFile: `filename`,
        `content_type` and a readable binary `file`. All three image fields
        are replaced, even when the file is empty.
        """
        try:
            image_data = upload.file.read()
        except (OSError, ValueError) as e:
            logger.error(
                f"Catalog Service: Could not read uploaded image '{upload.filename}': {e}"
            )
            raise UploadReadError(str(e)) from e

        db_product = Product(**product.model_dump())
        db_product.image_name = upload.filename
        db_product.image_type = upload.content_type
        db_product.image_data = image_data

        stored = self.repository.save(db_product)
        logger.info(
            f"Catalog Service: Product '{stored.name}' (ID: {stored.id}) saved with image '{stored.image_name}' ({len(image_data)} bytes)."
        )
        return stored

    def delete_by_id(self, product_id: int) -> None:
        self.repository.delete_by_id(product_id)

    def search(self, keyword: str) -> List[Product]:
        return self.repository.search(keyword)
