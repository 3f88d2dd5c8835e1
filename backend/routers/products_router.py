# backend/routers/products_router.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, UploadFile, File
from sqlalchemy import true
from sqlalchemy.orm import Session, selectinload

from database.session import get_db
from models.product_model import Product, ProductImage
from schemas.products import ProductOut, ProductCreate, ProductUpdate, ProductImageOut, ImageDeleteResponse
from services.auth_service import require_admin
from services.cloudinary_service import CloudinaryService, get_cloudinary_service, validate_image_file
from services.errors import InternalError, NotFoundError
from services.order_access import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def _get_active(db: Session, product_id: int) -> Product:
    p = (
        db.query(Product)
        .options(selectinload(Product.images))
        .filter(Product.id == product_id, Product.is_active == true())
        .first()
    )
    if not p:
        raise NotFoundError("Product not found")
    return p


def _get_image(db: Session, product_id: int, image_id: int) -> ProductImage:
    img = (
        db.query(ProductImage)
        .filter(ProductImage.id == image_id, ProductImage.product_id == product_id)
        .first()
    )
    if not img:
        raise NotFoundError("Image not found")
    return img


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error {action}: {e}")
        raise InternalError(f"Failed {action}")


@router.get("", response_model=List[ProductOut])
def list_products(
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    q = db.query(Product).options(selectinload(Product.images)).filter(Product.is_active == true())
    if search:
        q = q.filter(Product.name.ilike(f"%{search.strip()}%"))
    return q.order_by(Product.id.desc()).all()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_active(db, product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    body: ProductCreate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    p = Product(
        name=body.name,
        description=body.description,
        price=body.price,
        stock=body.stock,
        is_active=True,
    )
    db.add(p)
    _commit(db, "creating product")
    db.refresh(p)
    logger.info(f"Product {p.id} created by user {admin.id}")
    return p


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    body: ProductUpdate,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    p = _get_active(db, product_id)

    # only the fields that were sent
    if body.name is not None:
        p.name = body.name
    if body.description is not None:
        p.description = body.description
    if body.price is not None:
        p.price = body.price
    if body.stock is not None:
        p.stock = body.stock

    _commit(db, "updating product")
    db.refresh(p)
    return p


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    p = db.query(Product).filter(Product.id == product_id).first()
    if not p or not p.is_active:
        # already gone, nothing to do
        return

    # soft delete: order items keep pointing at the product
    p.is_active = False
    _commit(db, "deleting product")
    logger.info(f"Product {product_id} deactivated by user {admin.id}")


# ---------- images ----------

@router.post("/{product_id}/images", response_model=ProductImageOut, status_code=201)
def upload_product_image(
    product_id: int,
    image: UploadFile = File(...),
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    images: CloudinaryService = Depends(get_cloudinary_service),
):
    p = _get_active(db, product_id)

    # sync route: the Cloudinary upload and the session both block
    content = image.file.read()
    validate_image_file(content, image.filename)
    uploaded = images.upload_product_image(content, product_id=p.id)

    img = ProductImage(
        product_id=p.id,
        image_url=uploaded["url"],
        public_id=uploaded["public_id"],
        # the first image becomes the primary one
        is_primary=not p.images,
    )
    db.add(img)
    _commit(db, "saving product image")
    db.refresh(img)
    return img


@router.delete("/{product_id}/images/{image_id}", response_model=ImageDeleteResponse)
def delete_product_image(
    product_id: int,
    image_id: int,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    images: CloudinaryService = Depends(get_cloudinary_service),
):
    img = _get_image(db, product_id, image_id)
    public_id = img.public_id

    was_primary = img.is_primary
    db.delete(img)
    db.flush()

    if was_primary:
        successor = (
            db.query(ProductImage)
            .filter(ProductImage.product_id == product_id)
            .order_by(ProductImage.id)
            .first()
        )
        if successor:
            successor.is_primary = True

    _commit(db, "deleting product image")

    # the asset goes only once the row is gone; an orphaned asset is only storage
    if public_id and not images.delete_image(public_id):
        logger.warning(f"Could not delete Cloudinary asset {public_id}")

    return ImageDeleteResponse(success=True, message="Image deleted successfully")


@router.put("/{product_id}/images/{image_id}/primary", response_model=ProductImageOut)
def set_primary_image(
    product_id: int,
    image_id: int,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    img = _get_image(db, product_id, image_id)
    (
        db.query(ProductImage)
        .filter(ProductImage.product_id == product_id, ProductImage.id != image_id)
        .update({ProductImage.is_primary: False}, synchronize_session=False)
    )
    img.is_primary = True
    _commit(db, "setting primary image")
    db.refresh(img)
    return img
