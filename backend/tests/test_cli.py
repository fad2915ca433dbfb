# Overview: Pytest coverage for the flask CLI commands.

from app.models import Category, Product, Rental, Supplier, User
from app.services.inventory_service import record_movement
from app.services.user_service import verify_password


class TestSystemInit:

    def test_init_seeds_demo_data(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["system", "init"])

        assert result.exit_code == 0, result.output
        assert db_session.query(Category).count() == 2
        assert {p.code for p in db_session.query(Product)} == {"FI-001", "PF-M8-001"}
        assert db_session.query(Supplier).count() == 1
        assert db_session.query(Rental).filter_by(status="active").count() == 1

        admin = db_session.query(User).filter_by(username="admin").one()
        assert verify_password("Password123!", admin.password)

    def test_init_is_idempotent(self, app, db_session):
        runner = app.test_cli_runner()
        runner.invoke(args=["system", "init"])

        result = runner.invoke(args=["system", "init"])

        assert result.exit_code == 0
        assert db_session.query(Product).count() == 2
        assert db_session.query(User).count() == 1


class TestInventoryCommands:

    def test_low_stock(self, app, db_session, make_product):
        make_product(code="LOW-1", quantity=1, min_stock=5)
        make_product(code="OK-1", quantity=9, min_stock=5)

        result = app.test_cli_runner().invoke(args=["inventory", "low-stock"])

        assert "LOW-1" in result.output
        assert "OK-1" not in result.output

    def test_reconcile_passes(self, app, db_session, product):
        record_movement(product_id=product.id, type="in", quantity=3, reason="x")

        result = app.test_cli_runner().invoke(args=["inventory", "reconcile"])

        assert result.exit_code == 0
        assert "1/1 products consistent" in result.output

    def test_reconcile_fails_on_drift(self, app, db_session, product):
        product.quantity = 42
        db_session.commit()

        result = app.test_cli_runner().invoke(args=["inventory", "reconcile"])

        assert result.exit_code == 1
        assert "FAIL FI-001" in result.output


class TestUserCommands:

    def test_create_user(self, app, db_session):
        result = app.test_cli_runner().invoke(args=[
            "users", "create", "--username", "maria", "--name", "Maria",
            "--email", "Maria@Example.com", "--password", "s3cret-pass",
        ])

        assert result.exit_code == 0, result.output
        user = db_session.query(User).filter_by(username="maria").one()
        assert user.email == "maria@example.com"
        assert user.password != "s3cret-pass"

    def test_short_password_rejected(self, app, db_session):
        result = app.test_cli_runner().invoke(args=[
            "users", "create", "--username", "x", "--name", "X",
            "--email", "x@example.com", "--password", "short",
        ])

        assert result.exit_code != 0
        assert db_session.query(User).count() == 0
