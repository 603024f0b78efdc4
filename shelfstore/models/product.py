# shelfstore/models/product.py
from sqlalchemy import Column, String, Float, DateTime, CheckConstraint, func
from shelfstore.database import Base

# Catalog entry keyed by SKU.
# Volume and weight are per unit; shelf capacity accounting multiplies
# the volume by the quantity stored on a shelf.
class Product(Base):
    __tablename__ = "products"

    sku = Column(String(50), primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

    volume = Column(Float, CheckConstraint("volume > 0"), nullable=False)
    weight = Column(Float, CheckConstraint("weight > 0"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
