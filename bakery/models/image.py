from datetime import datetime, timezone
from bakery.extensions import db


class ProductImage(db.Model):
    __tablename__ = "product_images"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    storage_key = db.Column(db.String(512), nullable=False)
    thumbnail_key = db.Column(db.String(512))
    url = db.Column(db.String(1024), nullable=False)
    thumbnail_url = db.Column(db.String(1024))
    image_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "url": self.url,
            "thumbnail_url": self.thumbnail_url,
            "image_order": self.image_order,
        }

    def __repr__(self):
        return f"<ProductImage {self.storage_key} #{self.image_order}>"
