import click
from flask import current_app
from flask.cli import with_appcontext

from goshop.models.coupon import COUPONS, PERCENTAGE
from goshop.services.pricing import format_cents


@click.command("catalog")
@click.option("--market", default=None, help="Only list products from this market slug")
@with_appcontext
def catalog(market):
    """Print the product catalog held by the running store."""
    store = current_app.extensions["goshop"].store
    products = store.list_products(market)
    if not products:
        raise click.ClickException(f"No products for market '{market}'")
    symbol = current_app.config.get("CURRENCY_SYMBOL", "")
    for p in products:
        click.echo(f"{p.id}  {p.name:<20} {symbol}{format_cents(p.price_cents):>8}  {p.market_slug}")


@click.command("coupons")
def coupons():
    """List the promotion codes checkout accepts."""
    for code, coupon in sorted(COUPONS.items()):
        if coupon.kind == PERCENTAGE:
            amount = f"{int(coupon.value * 100)}% off"
        else:
            amount = f"{format_cents(int(coupon.value))} off"
        click.echo(f"{code:<8} {amount:<12} min order {format_cents(coupon.min_order_cents)}")


def register_cli(app):
    app.cli.add_command(catalog)
    app.cli.add_command(coupons)
