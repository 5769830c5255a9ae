# backend/catalog_service/catalog/main.py

import logging
import os
import sys
import time
from typing import List

from fastapi import (
    APIRouter,
    Depends,
    FastAPI,
    File,
    HTTPException,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from .db import Base, engine, get_db
from .repository import ProductRepository
from .schemas import ProductCreate, ProductResponse
from .service import ProductService, UploadReadError

# --- Standard Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

API_PREFIX = os.getenv("API_PREFIX", "/api")
DB_CONNECT_MAX_RETRIES = int(os.getenv("DB_CONNECT_MAX_RETRIES", "10"))
DB_CONNECT_RETRY_DELAY_SECONDS = int(os.getenv("DB_CONNECT_RETRY_DELAY_SECONDS", "5"))

PRODUCT_NOT_FOUND = "Product not found"

# --- FastAPI Application Setup ---
app = FastAPI(
    title="Catalog Service API",
    description="Manages catalog products and their images for the e-commerce storefront.",
    version="1.0.0",
)

# Enable CORS (the storefront is served from another origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Use specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix=API_PREFIX, tags=["products"])


# --- FastAPI Event Handlers ---
@app.on_event("startup")
async def startup_event():
    for i in range(DB_CONNECT_MAX_RETRIES):
        try:
            logger.info(
                f"Catalog Service: Attempting to connect to the database and create tables (attempt {i+1}/{DB_CONNECT_MAX_RETRIES})..."
            )
            Base.metadata.create_all(bind=engine)
            logger.info(
                "Catalog Service: Successfully connected to the database and ensured tables exist."
            )
            break
        except OperationalError as e:
            logger.warning(f"Catalog Service: Failed to connect to the database: {e}")
            if i < DB_CONNECT_MAX_RETRIES - 1:
                logger.info(
                    f"Catalog Service: Retrying in {DB_CONNECT_RETRY_DELAY_SECONDS} seconds..."
                )
                time.sleep(DB_CONNECT_RETRY_DELAY_SECONDS)
            else:
                logger.critical(
                    f"Catalog Service: Failed to connect to the database after {DB_CONNECT_MAX_RETRIES} attempts. Exiting application."
                )
                sys.exit(1)
        except Exception as e:
            logger.critical(
                f"Catalog Service: An unexpected error occurred during database startup: {e}",
                exc_info=True,
            )
            sys.exit(1)


# --- Dependencies ---
def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(ProductRepository(db))


async def read_product_part(request: Request) -> ProductCreate:
    """
    Parses the `product` part of a multipart request as JSON.
    Browsers append it as a Blob, which arrives as a file part rather than a
    plain form field, so both shapes are accepted.
    """
    form = await request.form()
    raw = form.get("product")
    if raw is None:
        raise RequestValidationError(
            [
                {
                    "type": "missing",
                    "loc": ("body", "product"),
                    "msg": "Field required",
                    "input": None,
                }
            ]
        )
    if isinstance(raw, StarletteUploadFile):
        raw = await raw.read()
    try:
        return ProductCreate.model_validate_json(raw)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        for error in errors:
            error["loc"] = ("body", "product", *error["loc"])
        raise RequestValidationError(errors) from e


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Catalog Service!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    return {"status": "ok", "service": "catalog-service"}


@router.get(
    "/products",
    response_model=List[ProductResponse],
    summary="Retrieve a list of all products",
)
def list_products(service: ProductService = Depends(get_product_service)):
    products = service.list_all()
    logger.info(f"Catalog Service: Retrieved {len(products)} products.")
    return products


@router.get(
    "/products/search",
    response_model=List[ProductResponse],
    summary="Search products by keyword",
)
def search_products(
    keyword: str = Query(..., max_length=255),
    service: ProductService = Depends(get_product_service),
):
    """
    Case-insensitive match of `keyword` against name, description, brand and category.
    No match is an empty list, never a 404.
    """
    logger.info(f"Catalog Service: Searching products for keyword: '{keyword}'")
    products = service.search(keyword)
    logger.info(
        f"Catalog Service: Search for '{keyword}' matched {len(products)} products."
    )
    return products


@router.get(
    "/product/{product_id}",
    response_model=ProductResponse,
    summary="Retrieve a single product by ID",
)
def get_product(
    product_id: int, service: ProductService = Depends(get_product_service)
):
    logger.info(f"Catalog Service: Fetching product with ID: {product_id}")
    product = service.get_by_id(product_id)
    if not product:
        logger.warning(f"Catalog Service: Product with ID {product_id} not found.")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND
        )
    return product


@router.get(
    "/product/{product_id}/image",
    response_class=Response,
    summary="Download the stored image of a product",
)
def get_product_image(
    product_id: int, service: ProductService = Depends(get_product_service)
):
    """
    Returns the raw image bytes with the stored content type.
    A product that never had an image yields an empty 200 response.
    """
    product = service.get_by_id(product_id)
    if not product:
        logger.warning(
            f"Catalog Service: Product with ID {product_id} not found for image download."
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND
        )
    return Response(content=product.image_data or b"", media_type=product.image_type)


@router.post(
    "/product",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product with its image",
)
def create_product(
    product: ProductCreate = Depends(read_product_part),
    imageFile: UploadFile = File(...),
    service: ProductService = Depends(get_product_service),
):
    logger.info(
        f"Catalog Service: Creating product '{product.name}' with image '{imageFile.filename}'"
    )
    try:
        return service.create_or_update(product, imageFile)
    except UploadReadError as e:
        return PlainTextResponse(
            str(e), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.put(
    "/product/{product_id}",
    response_class=PlainTextResponse,
    summary="Replace an existing product and its image",
)
def update_product(
    product_id: int,
    product: ProductCreate = Depends(read_product_part),
    imageFile: UploadFile = File(...),
    service: ProductService = Depends(get_product_service),
):
    """
    The path ID decides which product is written.
    A body `id` that names a different product is rejected.
    """
    logger.info(f"Catalog Service: Updating product with ID: {product_id}")
    if product.id is not None and product.id != product_id:
        logger.warning(
            f"Catalog Service: Update rejected, body ID {product.id} does not match path ID {product_id}."
        )
        return PlainTextResponse(
            f"Product ID in body ({product.id}) does not match path ({product_id})",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if not service.get_by_id(product_id):
        logger.warning(
            f"Catalog Service: Attempted to update non-existent product with ID {product_id}."
        )
        return PlainTextResponse(
            PRODUCT_NOT_FOUND, status_code=status.HTTP_404_NOT_FOUND
        )

    try:
        service.create_or_update(product.model_copy(update={"id": product_id}), imageFile)
    except UploadReadError as e:
        return PlainTextResponse(
            str(e), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    logger.info(f"Catalog Service: Product {product_id} updated successfully.")
    return PlainTextResponse("Updated")


@router.delete(
    "/product/{product_id}",
    response_class=PlainTextResponse,
    summary="Delete a product by ID",
)
def delete_product(
    product_id: int, service: ProductService = Depends(get_product_service)
):
    logger.info(f"Catalog Service: Attempting to delete product with ID: {product_id}")
    if not service.get_by_id(product_id):
        logger.warning(
            f"Catalog Service: Attempted to delete non-existent product with ID {product_id}."
        )
        return PlainTextResponse(
            PRODUCT_NOT_FOUND, status_code=status.HTTP_404_NOT_FOUND
        )
    service.delete_by_id(product_id)
    logger.info(f"Catalog Service: Product {product_id} deleted successfully.")
    return PlainTextResponse("Deleted")


app.include_router(router)
