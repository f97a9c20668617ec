"""
Test configuration and fixtures for the Greyn Eco cart service
"""

import os
from decimal import Decimal
from unittest.mock import patch

import pytest

from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.entities.project_entity import Project
from greyn_cart.domain.value_objects.money import Money
from greyn_cart.domain.value_objects.project_id import ProjectId
from greyn_cart.infrastructure.configuration.config import Settings, reset_config
from greyn_cart.infrastructure.container.dependency_injection import reset_container
from greyn_cart.infrastructure.database.operations import DatabaseManager, init_db


# Mock environment variables for testing
@pytest.fixture(autouse=True)
def mock_env():
    """Mock environment variables for testing"""
    test_env = {
        "DATABASE_URL": "sqlite:///:memory:",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "ENABLE_FILE_LOGGING": "false",
    }

    reset_config()
    with patch.dict(os.environ, test_env, clear=True):
        yield test_env
    reset_config()
    reset_container()


@pytest.fixture
def test_settings(tmp_path):
    """Settings for an isolated in-memory database"""
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        environment="test",
        enable_file_logging=False,
        cart_storage_dir=str(tmp_path / "carts"),
    )


@pytest.fixture
def db_manager(test_settings):
    """In-memory database with tables and the default catalog"""
    manager = DatabaseManager(test_settings)
    init_db(manager)
    yield manager
    manager.close()


def make_project(
    project_id="1",
    name="Amazon Rainforest Conservation",
    price="15.50",
    available_credits=125000,
    category="Forest Conservation",
    location="Amazon Basin, Brazil",
    is_active=True,
    currency="USD",
):
    """Build a catalog project"""
    return Project(
        id=ProjectId(project_id),
        name=name,
        price_per_unit=Money(Decimal(price), currency),
        category=category,
        location=location,
        ngo_name="Rainforest Alliance",
        carbon_impact="125,000 tonnes CO2e",
        impact_type=category,
        available_credits=available_credits,
        is_verified=True,
        is_active=is_active,
    )


def make_item(project_id="1", price="10", quantity=1, available_supply=None, name=None):
    """Build a cart line item"""
    project = make_project(
        project_id=project_id,
        name=name or f"Project {project_id}",
        price=price,
        available_credits=available_supply,
    )
    return CartLineItem.from_project(project, quantity=quantity)


@pytest.fixture
def sample_project():
    return make_project()


@pytest.fixture
def sample_items():
    """The two-line cart used in the totals scenarios"""
    return [
        make_item("a", price="10", quantity=2),
        make_item("b", price="5", quantity=3),
    ]
