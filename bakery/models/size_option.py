from datetime import datetime, timezone
from bakery.extensions import db


class ProductSizeOption(db.Model):
    """A size attached to a product; at most one per product is the default."""

    __tablename__ = "product_size_options"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size_id = db.Column(
        db.Integer,
        db.ForeignKey("product_sizes.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    is_default = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    size = db.relationship("ProductSize", back_populates="options", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("product_id", "size_id", name="uq_product_size"),
        db.Index(
            "uq_product_single_default",
            "product_id",
            unique=True,
            sqlite_where=db.text("is_default"),
            postgresql_where=db.text("is_default"),
        ),
    )

    def __repr__(self):
        flag = " default" if self.is_default else ""
        return f"<ProductSizeOption product={self.product_id} size={self.size_id}{flag}>"
