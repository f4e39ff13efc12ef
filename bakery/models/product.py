import math
from datetime import datetime, timezone
from decimal import Decimal
from bakery.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, default="")
    price = db.Column(db.Numeric(10, 2), nullable=False)
    offer_price = db.Column(db.Numeric(10, 2), nullable=True)
    is_offer = db.Column(db.Boolean, nullable=False, default=False, index=True)
    offer_end_date = db.Column(db.DateTime(timezone=True), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    stock = db.Column(db.Integer, nullable=False, default=0)
    preparation_time = db.Column(db.Integer, nullable=False, default=0)  # minutes
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    category = db.relationship("Category", back_populates="products")
    size_options = db.relationship(
        "ProductSizeOption",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    images = db.relationship(
        "ProductImage",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="ProductImage.image_order",
    )

    __table_args__ = (
        db.CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )

    @property
    def discount_percent(self):
        """Whole-number discount shown on offer badges."""
        if not self.is_offer or not self.offer_price:
            return 0
        if self.offer_price >= self.price:
            return 0
        return round((self.price - self.offer_price) / self.price * 100)

    def offer_days_remaining(self, now=None):
        if not self.offer_end_date:
            return None
        now = now or datetime.now(timezone.utc)
        end = self.offer_end_date
        if end.tzinfo is None:
            # SQLite drops tzinfo
            end = end.replace(tzinfo=timezone.utc)
        seconds = (end - now).total_seconds()
        return max(0, math.ceil(seconds / 86400))

    @property
    def cover_image(self):
        return self.images[0] if self.images else None

    def __repr__(self):
        return f"<Product {self.slug}: {self.price or Decimal('0')}>"
