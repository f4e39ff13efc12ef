"""Flask CLI commands for admin operations."""
from decimal import Decimal
import click

DEFAULT_SIZES = [
    # name, person_capacity, additional_price, display_order
    ("Small", 8, Decimal("0.00"), 0),
    ("Medium", 15, Decimal("25.00"), 1),
    ("Large", 25, Decimal("45.00"), 2),
]


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables and seed the default size catalog."""
        from bakery.extensions import db
        from bakery.models.size import ProductSize

        db.create_all()

        if not ProductSize.query.first():
            for name, capacity, extra, order in DEFAULT_SIZES:
                db.session.add(
                    ProductSize(
                        name=name,
                        person_capacity=capacity,
                        additional_price=extra,
                        display_order=order,
                    )
                )
            db.session.commit()
            click.echo(f"Seeded {len(DEFAULT_SIZES)} default sizes.")

        click.echo("Database initialized.")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Seed demo categories and cakes with sizes (idempotent)."""
        from bakery.models.product import Product
        from bakery.models.size import ProductSize
        from bakery.services import product_service, size_option_service

        # Only seed if no products exist yet
        if Product.query.first():
            click.echo("Products already exist, skipping demo seed.")
            return

        sizes = ProductSize.query.order_by(ProductSize.display_order).all()
        if not sizes:
            click.echo("No sizes found. Run `flask init-db` first.")
            return

        result = product_service.create_category({"name": "Cakes"})
        if not result.ok:
            raise click.ClickException(result.error.message)
        category_id = result.data["id"]

        demo_products = [
            ("Chocolate Fudge Cake", "60.00", None),
            ("Tres Leches", "55.00", "45.00"),
            ("Carrot Cake", "50.00", None),
            ("Lemon Pie", "40.00", "35.00"),
        ]
        for name, price, offer in demo_products:
            result = product_service.create_product(
                {
                    "name": name,
                    "price": price,
                    "offer_price": offer,
                    "is_offer": offer is not None,
                    "category_id": category_id,
                    "stock": 10,
                    "preparation_time": 120,
                }
            )
            if not result.ok:
                raise click.ClickException(result.error.message)
            size_ids = [s.id for s in sizes]
            size_option_service.replace_all_sizes(result.data.id, size_ids, size_ids[0])
        click.echo(f"Seeded {len(demo_products)} demo products.")

    @app.cli.command("create-size")
    @click.option("--name", required=True)
    @click.option("--people", required=True, type=int, help="Person capacity")
    @click.option("--extra", default="0", help="Additional price")
    @click.option("--order", default=0, type=int, help="Display order")
    def create_size(name, people, extra, order):
        """Add a size to the catalog."""
        from bakery.services import size_service

        result = size_service.create_size(
            {
                "name": name,
                "person_capacity": people,
                "additional_price": extra,
                "display_order": order,
            }
        )
        if not result.ok:
            raise click.ClickException(result.error.message)
        click.echo(f"Created size {result.data['id']}: {name} ({people} people, +{extra})")

    @app.cli.command("set-default-size")
    @click.argument("product_id", type=int)
    @click.argument("size_id", type=int)
    def set_default_size(product_id, size_id):
        """Make SIZE_ID the default size of PRODUCT_ID."""
        from bakery.services import size_option_service

        result = size_option_service.set_default_size(product_id, size_id)
        if not result.ok:
            raise click.ClickException(result.error.message)
        click.echo(f"Default size of product {product_id} is now {result.data.size.label}")

    @app.cli.command("stats")
    def stats():
        """Show product statistics."""
        from bakery.services.product_service import get_stats

        s = get_stats()
        click.echo(f"Total products: {s['total']}")
        for key in ("active", "inactive", "on_offer"):
            click.echo(f"  {key}: {s[key]}")
