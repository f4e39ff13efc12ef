from datetime import datetime, timezone
from decimal import Decimal
from bakery.extensions import db


class Cart(db.Model):
    __tablename__ = "carts"

    id = db.Column(db.Integer, primary_key=True)
    session_key = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    items = db.relationship(
        "CartItem",
        backref="cart",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )

    @property
    def total(self):
        return sum((item.line_total for item in self.items), Decimal("0"))

    def __repr__(self):
        return f"<Cart {self.session_key}>"


class CartItem(db.Model):
    __tablename__ = "cart_items"

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(
        db.Integer,
        db.ForeignKey("carts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    size_id = db.Column(
        db.Integer,
        db.ForeignKey("product_sizes.id", ondelete="SET NULL"),
        nullable=True,
    )
    quantity = db.Column(db.Integer, nullable=False, default=1)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    product = db.relationship("Product")
    size = db.relationship("ProductSize")

    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_cart_item_quantity_positive"),
    )

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    def __repr__(self):
        return f"<CartItem product={self.product_id} size={self.size_id} x{self.quantity}>"
