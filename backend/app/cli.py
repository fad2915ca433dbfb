# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/app/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables and seed demo categories, products, supplier, rental and an admin user.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users create --username admin --name "Admin" --email admin@example.com --password "Password123!"
#
# Inventory ledger:
# - python -m flask inventory low-stock
#   List products at or below their minimum stock.
# - python -m flask inventory reconcile
#   Check quantity == initial quantity + sum of movements for every product (exit 1 on mismatch).

from datetime import datetime
from decimal import Decimal

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Category, Product, Supplier, Rental
from .services import inventory_service, user_service
from .validation import ConflictError, ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--admin-password', default='Password123!', help='Password for the seeded admin user')
@with_appcontext
def init_system(admin_password):
    """
    Create tables and seed demo data (idempotent).

    Seeds two categories, a drill and M8 screws, one supplier with one
    active rental, and an "admin" user.
    """
    click.echo("START Initializing database...")
    db.create_all()

    if db.session.query(Category).first() is None:
        tools = Category(id="cat-tools", name="Tools", description="Tools and assorted equipment")
        fixing = Category(id="cat-fixing", name="Fasteners", description="Screws, nuts and fixing hardware")
        db.session.add_all([tools, fixing])
        db.session.add_all([
            Product(
                id="prod-drill", code="FI-001", name="Industrial Drill", description="Makita 18V",
                category_id=tools.id, unit_price=Decimal("450.00"),
                quantity=15, initial_quantity=15, min_stock=5, is_rentable=True,
            ),
            Product(
                id="prod-screws", code="PF-M8-001", name="M8 Screws", description="Stainless steel 30mm",
                category_id=fixing.id, unit_price=Decimal("2.50"),
                quantity=12, initial_quantity=12, min_stock=50, is_rentable=False,
            ),
        ])
        click.echo("PASS Seeded categories and products")
    else:
        click.echo("WARN  Catalog already present, skipping...")

    if db.session.query(Supplier).first() is None:
        supplier = Supplier(
            id="supp-001", name="ABC Equipment Rentals", email="contact@abc-rentals.example",
            phone="(11) 3333-4444", address="500 Industrial Ave", document="12.345.678/0001-90",
        )
        db.session.add(supplier)
        db.session.add(Rental(
            id="rent-001", supplier_id=supplier.id,
            equipment_name="Hydraulic Excavator", equipment_type="Heavy Machinery",
            quantity=1, start_date=datetime(2024, 1, 15), end_date=datetime(2024, 1, 20),
            rental_period="daily", daily_rate=Decimal("350.00"), total_amount=Decimal("1750.00"),
            status="active", notes="Earthworks site",
        ))
        click.echo("PASS Seeded supplier and rental")
    else:
        click.echo("WARN  Suppliers already present, skipping...")

    db.session.commit()

    if user_service.get_user_by_username("admin") is None:
        try:
            user_service.create_user(
                username="admin", password=admin_password, name="Administrator",
                email="admin@example.com", role="admin",
            )
            click.echo("PASS Created user: admin")
        except ValidationError as e:
            click.echo(f"FAIL Could not create admin user: {e}")

    click.echo("DONE Database initialized")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD  Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('users')
def users_group():
    """User management commands."""


@users_group.command('create')
@click.option('--username', prompt=True)
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', default='user', show_default=True)
@with_appcontext
def create_user_command(username, name, email, password, role):
    """Create a user (prompts if options are omitted)."""
    try:
        user = user_service.create_user(
            username=username, password=password, name=name, email=email, role=role,
        )
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user: {user.username} (ID: {user.id})")


@click.group('inventory')
def inventory_group():
    """Inventory ledger inspection commands."""


@inventory_group.command('low-stock')
@with_appcontext
def low_stock_command():
    """List products at or below their minimum stock."""
    products = inventory_service.list_low_stock()
    if not products:
        click.echo("No low stock products")
        return
    for p in products:
        click.echo(f"{p.code:<16} {p.name:<32} qty={p.quantity:<6} min={p.min_stock:<6} {p.stock_status}")


@inventory_group.command('reconcile')
@with_appcontext
def reconcile_command():
    """Verify every product's quantity against its movement history."""
    rows = inventory_service.reconcile_all()
    bad = [r for r in rows if not r["consistent"]]
    for r in rows:
        flag = "PASS" if r["consistent"] else "FAIL"
        click.echo(f"{flag} {r['code']}: quantity={r['quantity']} expected={r['expectedQuantity']}")
    click.echo(f"{len(rows) - len(bad)}/{len(rows)} products consistent")
    if bad:
        raise click.exceptions.Exit(1)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(inventory_group)
