# backend/models/product_model.py
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Numeric, func
from sqlalchemy.types import Unicode, UnicodeText
from sqlalchemy.orm import relationship

from database.session import Base

class Product(Base):
    __tablename__ = "products"

    id          = Column(Integer, primary_key=True, index=True)
    name        = Column(Unicode(255), nullable=False)
    description = Column(UnicodeText)
    price       = Column(Numeric(10, 2), nullable=False)
    stock       = Column(Integer, nullable=False, default=0)
    is_active   = Column(Boolean, nullable=False, default=True)
    created_at  = Column(DateTime, server_default=func.now())
    updated_at  = Column(DateTime, server_default=func.now(), onupdate=func.now())

    images = relationship(
        "ProductImage",
        cascade="all, delete-orphan",
        back_populates="product",
        order_by="ProductImage.id",
    )


class ProductImage(Base):
    __tablename__ = "product_images"

    id         = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url  = Column(Unicode(500), nullable=False)
    public_id  = Column(Unicode(255))  # Cloudinary public_id, needed to destroy the asset
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    product = relationship("Product", back_populates="images")
