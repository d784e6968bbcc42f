"""Pytest configuration and fixtures."""

import pytest

from dbmodel.links.builder import LinksManager
from dbmodel.links.updater import LinksUpdater
from dbmodel.rules import DefaultModelRules
from tests.utils import add_fk, make_entity, make_model


@pytest.fixture
def rules():
    return DefaultModelRules()


@pytest.fixture
def links_manager(rules):
    return LinksManager(rules)


@pytest.fixture
def updater(rules, links_manager):
    return LinksUpdater(rules, links_manager)


@pytest.fixture
def shop_model():
    """Customers(ID) <- Orders(ID, CUSTOMER_ID), no links generated yet."""
    customers = make_entity("Customers", ["ID"])
    orders = make_entity("Orders", ["ID", "CUSTOMER_ID"])
    add_fk(orders, "FK_ORDERS_CUSTOMERS", "Customers", [("CUSTOMER_ID", "ID")])
    return make_model(customers, orders)


@pytest.fixture
def join_table_model():
    """A(ID), B(ID) and the join table A_B(A_ID, B_ID), no links generated yet."""
    a = make_entity("A", ["ID"])
    b = make_entity("B", ["ID"])
    a_b = make_entity("A_B", ["A_ID", "B_ID"], primary_key=["A_ID", "B_ID"])
    add_fk(a_b, "FK_A_B_A", "A", [("A_ID", "ID")])
    add_fk(a_b, "FK_A_B_B", "B", [("B_ID", "ID")])
    return make_model(a, b, a_b)
