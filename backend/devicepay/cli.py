# Overview: Flask CLI command groups for setup, inspection and export.

# backend/devicepay/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System:
# - python -m flask system init-db
#   Create the snapshot table (idempotent).
# - python -m flask system reset --yes
#   Delete the stored snapshot and clear the in-memory ledger.
#
# Ledger:
# - python -m flask ledger summary
#   Print dashboard analytics.
# - python -m flask ledger add-product --name "iPhone 15" --category Smartphone --price 850000 --stock 4
#   Add a device to the catalog.
# - python -m flask ledger low-stock [--threshold 5]
#   List products below the stock threshold.
# - python -m flask ledger export [--output Sales_Report.csv]
#   Write the sales history as CSV.

import click
from flask import current_app
from flask.cli import with_appcontext

from .entities import CATEGORIES
from .extensions import db, ledger
from .services import catalog_service, export_service, reporting_service
from .services.export_service import ExportError
from .time_utils import today_iso


@click.group('system')
def system_group():
    """Snapshot store setup and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db_command():
    """Create the snapshot table if it does not exist."""
    db.create_all()
    click.echo("Snapshot store ready.")


@system_group.command('reset')
@click.option('--yes', is_flag=True, help='Confirm deleting all catalog, sales and shrinkage data.')
@with_appcontext
def reset_command(yes):
    """Delete the stored snapshot and clear the in-memory ledger."""
    if not yes:
        raise click.UsageError("Refusing to reset without --yes")
    ledger.state.clear()
    ledger.persistence.store.delete()
    click.echo("Ledger reset.")


@click.group('ledger')
def ledger_group():
    """Catalog, analytics and export commands."""


@ledger_group.command('summary')
@with_appcontext
def summary_command():
    """Print dashboard analytics."""
    result = reporting_service.compute_analytics(
        ledger.state,
        low_stock_threshold=current_app.config["LOW_STOCK_THRESHOLD"],
    )
    click.echo(f"Total revenue:   {result['total_revenue']}")
    click.echo(f"Damage loss:     {result['damage_loss']}")
    click.echo(f"Stock value:     {result['stock_value']}")
    click.echo(f"Sales count:     {result['total_sales_count']}")
    click.echo(f"Outstanding:     {result['outstanding_balance']}")
    click.echo(f"Low stock items: {result['low_stock_count']}")
    for label, value in result["category_distribution"].items():
        click.echo(f"  {label}: {value}")


@ledger_group.command('add-product')
@click.option('--name', prompt=True)
@click.option('--category', type=click.Choice(CATEGORIES), default="Other", show_default=True)
@click.option('--price', type=float, default=0)
@click.option('--stock', type=int, default=0)
@with_appcontext
def add_product_command(name, category, price, stock):
    """Add a device to the catalog."""
    product = catalog_service.add_product(ledger.state, name, category, price, stock)
    click.echo(f"Added {product.name} ({product.id}) with {product.stock_quantity} in stock.")


@ledger_group.command('low-stock')
@click.option('--threshold', type=int, default=None)
@with_appcontext
def low_stock_command(threshold):
    """List products below the stock threshold."""
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    products = catalog_service.low_stock_products(ledger.state, threshold)
    if not products:
        click.echo("No low stock items.")
        return
    for p in products:
        click.echo(f"{p.id}  {p.name:<30} {p.category:<10} {p.stock_quantity:>5} units")


@ledger_group.command('export')
@click.option('--output', type=click.Path(dir_okay=False, writable=True), default=None)
@with_appcontext
def export_command(output):
    """Write the sales history as CSV."""
    tz_name = current_app.config["DISPLAY_TIMEZONE"]
    try:
        csv_text = export_service.sales_csv(ledger.state.sales, tz_name)
    except ExportError as e:
        raise click.ClickException(str(e))

    output = output or export_service.export_filename(today_iso(tz_name))
    with open(output, "w", encoding="utf-8", newline="") as fh:
        fh.write(csv_text)
    click.echo(f"Exported {len(ledger.state.sales)} sale(s) to {output}")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(ledger_group)
