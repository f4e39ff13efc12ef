from datetime import datetime, timezone
from bakery.extensions import db


class ProductSize(db.Model):
    """Catalog-level size template (e.g. "Medium", serves 12)."""

    __tablename__ = "product_sizes"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    person_capacity = db.Column(db.Integer, nullable=False)
    additional_price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    description = db.Column(db.Text, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    options = db.relationship("ProductSizeOption", back_populates="size", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint("person_capacity > 0", name="ck_size_capacity_positive"),
        db.CheckConstraint("additional_price >= 0", name="ck_size_price_non_negative"),
    )

    def __repr__(self):
        return f"<ProductSize {self.name} ({self.person_capacity} people)>"
