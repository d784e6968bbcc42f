"""Test incremental link updates driven by a change log."""

import pytest

from dbmodel.changelog import ChangeLog, ChangeOnEntity, ChangeOnForeignKey, ChangeType
from dbmodel.core.link import Cardinality
from dbmodel.errors import ReferencedEntityNotFound
from tests.utils import add_fk, link_signature, make_entity, make_fk, make_model


def _orders_with_fk(referenced_table: str = "Customers"):
    orders = make_entity("Orders", ["ID", "CUSTOMER_ID"])
    fk = add_fk(orders, "FK_ORDERS_CUSTOMERS", referenced_table, [("CUSTOMER_ID", "ID")])
    return orders, fk


def test_incremental_matches_full_pass(shop_model, links_manager, updater):
    """Test that a created foreign key yields the same links as the full pass."""
    links_manager.rebuild_all_links(shop_model)
    expected = link_signature(shop_model)

    customers = make_entity("Customers", ["ID"])
    orders = make_entity("Orders", ["ID", "CUSTOMER_ID"])
    model = make_model(customers, orders)
    assert links_manager.rebuild_all_links(model) == 0

    orders_after, fk = _orders_with_fk()
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=orders_after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.CREATED, after=fk)],
    )

    assert updater.update_links(model, ChangeLog([change])) == 2
    assert link_signature(model) == expected

    assert [link.cardinality for link in model.get_entity("Orders").links] == [Cardinality.MANY_TO_ONE]
    assert [link.cardinality for link in model.get_entity("Customers").links] == [Cardinality.ONE_TO_MANY]
    # The model's entity now carries the foreign key and its flags
    assert model.get_entity("Orders").get_foreign_key("FK_ORDERS_CUSTOMERS") is not None
    assert model.get_entity("Orders").get_attribute("CUSTOMER_ID").is_fk


def test_foreign_key_update_replaces_relation(shop_model, links_manager, updater):
    """Test retargeting a foreign key to another table."""
    shop_model.store_entity(make_entity("Clients", ["ID"]))
    links_manager.rebuild_all_links(shop_model)
    orders = shop_model.get_entity("Orders")
    before_fk = orders.get_foreign_key("FK_ORDERS_CUSTOMERS")

    orders_after, after_fk = _orders_with_fk("Clients")
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=orders_after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.UPDATED, before=before_fk, after=after_fk)],
    )

    assert updater.update_links(shop_model, ChangeLog([change])) == 4

    assert shop_model.get_entity("Customers").links == []
    assert all(not link.uses_table("Customers") for link in shop_model.links)

    own = shop_model.get_entity("Orders").get_link("LINK_FK_Orders.FK_ORDERS_CUSTOMERS_O")
    assert own.target_table_name == "Clients"
    assert own.field_name == "clients"
    inv = shop_model.get_entity("Clients").get_link("LINK_FK_Orders.FK_ORDERS_CUSTOMERS_I")
    assert inv.cardinality == Cardinality.ONE_TO_MANY
    assert inv.mapped_by == "clients"
    assert len(shop_model.links) == 2


def test_foreign_key_deleted(shop_model, links_manager, updater):
    links_manager.rebuild_all_links(shop_model)
    orders = shop_model.get_entity("Orders")
    fk = orders.get_foreign_key("FK_ORDERS_CUSTOMERS")

    after = make_entity("Orders", ["ID", "CUSTOMER_ID"])
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.DELETED, before=fk)],
    )

    assert updater.update_links(shop_model, ChangeLog([change])) == 2
    assert shop_model.links == []
    assert not shop_model.get_entity("Orders").get_attribute("CUSTOMER_ID").is_fk


def test_update_without_foreign_key_change_keeps_links(shop_model, links_manager, updater):
    links_manager.rebuild_all_links(shop_model)
    expected = link_signature(shop_model)
    orders = shop_model.get_entity("Orders")

    after, _ = _orders_with_fk()
    after.comment = "all the orders"
    change = ChangeOnEntity(ChangeType.UPDATED, before=orders.model_copy(deep=True), after=after)
    change.database_comment_changed = True

    assert updater.update_links(shop_model, ChangeLog([change])) == 0
    assert link_signature(shop_model) == expected
    assert shop_model.get_entity("Orders").comment == "all the orders"


def test_entity_created(updater):
    """Test a created entity with a foreign key to an existing entity."""
    model = make_model(make_entity("Customers", ["ID"]))
    orders, _ = _orders_with_fk()

    assert updater.update_links(model, ChangeLog([ChangeOnEntity(ChangeType.CREATED, after=orders)])) == 2
    assert model.get_entity("Orders") is orders
    assert [link.field_name for link in orders.links] == ["customers"]
    assert [link.field_name for link in model.get_entity("Customers").links] == ["listOfOrders"]


def test_join_table_created(updater):
    model = make_model(make_entity("A", ["ID"]), make_entity("B", ["ID"]))
    a_b = make_entity("A_B", ["A_ID", "B_ID"], primary_key=["A_ID", "B_ID"])
    add_fk(a_b, "FK_A_B_A", "A", [("A_ID", "ID")])
    add_fk(a_b, "FK_A_B_B", "B", [("B_ID", "ID")])

    assert updater.update_links(model, ChangeLog([ChangeOnEntity(ChangeType.CREATED, after=a_b)])) == 2
    assert [link.id for link in model.links] == ["LINK_JT_A_B_I", "LINK_JT_A_B_O"]
    assert all(link.cardinality == Cardinality.MANY_TO_MANY for link in model.links)


def test_entity_deleted_cascades(links_manager, updater):
    """Test that deleting an entity removes every link using it."""
    customers = make_entity("Customers", ["ID"])
    products = make_entity("Products", ["ID"])
    orders = make_entity("Orders", ["ID", "CUSTOMER_ID", "PRODUCT_ID"])
    add_fk(orders, "FK_ORDERS_CUSTOMERS", "Customers", [("CUSTOMER_ID", "ID")])
    add_fk(orders, "FK_ORDERS_PRODUCTS", "Products", [("PRODUCT_ID", "ID")])
    model = make_model(customers, products, orders)
    assert links_manager.rebuild_all_links(model) == 4

    change = ChangeOnEntity(ChangeType.DELETED, before=customers)
    assert updater.update_links(model, ChangeLog([change])) == 2

    assert model.find_entity("Customers") is None
    assert all(not link.uses_table("Customers") for link in model.links)
    assert len(model.links) == 2
    assert [link.target_table_name for link in orders.links] == ["Products"]


def test_join_table_deleted(join_table_model, links_manager, updater):
    links_manager.rebuild_all_links(join_table_model)
    a_b = join_table_model.get_entity("A_B")

    assert updater.update_links(join_table_model, ChangeLog([ChangeOnEntity(ChangeType.DELETED, before=a_b)])) == 2
    assert join_table_model.links == []
    assert join_table_model.find_entity("A_B") is None


def test_join_table_foreign_key_change_rebuilds_relation(join_table_model, links_manager, updater):
    """Test that any foreign key change on a join table rebuilds both sides."""
    join_table_model.store_entity(make_entity("C", ["ID"]))
    links_manager.rebuild_all_links(join_table_model)
    a_b = join_table_model.get_entity("A_B")
    before_fk = a_b.get_foreign_key("FK_A_B_B")

    after = make_entity("A_B", ["A_ID", "B_ID"], primary_key=["A_ID", "B_ID"])
    add_fk(after, "FK_A_B_A", "A", [("A_ID", "ID")])
    after_fk = add_fk(after, "FK_A_B_B", "C", [("B_ID", "ID")])
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=a_b.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.UPDATED, before=before_fk, after=after_fk)],
    )

    assert updater.update_links(join_table_model, ChangeLog([change])) == 4
    assert join_table_model.get_entity("B").links == []
    own = join_table_model.get_entity("A").get_link("LINK_JT_A_B_O")
    assert own.target_table_name == "C"
    assert own.field_name == "listOfC"
    inv = join_table_model.get_entity("C").get_link("LINK_JT_A_B_I")
    assert inv.mapped_by == "listOfC"


def test_join_table_becoming_standard_entity(join_table_model, links_manager, updater):
    """Test that many-to-many links go away when the entity stops being a join table."""
    links_manager.rebuild_all_links(join_table_model)
    a_b = join_table_model.get_entity("A_B")

    after = make_entity("A_B", ["A_ID", "B_ID", "QTY"], primary_key=["A_ID", "B_ID"])
    add_fk(after, "FK_A_B_A", "A", [("A_ID", "ID")])
    fk_b = add_fk(after, "FK_A_B_B", "B", [("B_ID", "ID")])
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=a_b.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.UPDATED, before=a_b.get_foreign_key("FK_A_B_B"), after=fk_b)],
    )

    updater.update_links(join_table_model, ChangeLog([change]))

    assert all(link.cardinality != Cardinality.MANY_TO_MANY for link in join_table_model.links)
    assert [link.id for link in join_table_model.get_entity("A_B").links] == ["LINK_FK_A_B.FK_A_B_B_O"]


def test_created_entity_with_missing_reference(updater):
    model = make_model()
    orders, _ = _orders_with_fk()
    with pytest.raises(ReferencedEntityNotFound):
        updater.update_links(model, ChangeLog([ChangeOnEntity(ChangeType.CREATED, after=orders)]))


def test_changes_applied_in_order(links_manager, updater):
    """Test a change log creating a table, then a foreign key pointing to it."""
    orders = make_entity("Orders", ["ID", "CUSTOMER_ID"])
    model = make_model(orders)
    links_manager.rebuild_all_links(model)

    orders_after, fk = _orders_with_fk()
    change_log = ChangeLog()
    change_log.add(ChangeOnEntity(ChangeType.CREATED, after=make_entity("Customers", ["ID"])))
    change_log.add(
        ChangeOnEntity(
            ChangeType.UPDATED,
            before=orders.model_copy(deep=True),
            after=orders_after,
            changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.CREATED, after=fk)],
        )
    )

    assert updater.update_links(model, change_log) == 2
    assert len(model.links) == 2


def test_removal_by_unknown_foreign_key_is_noop(shop_model, links_manager, updater):
    links_manager.rebuild_all_links(shop_model)
    orders = shop_model.get_entity("Orders")
    ghost = make_fk("Orders", "FK_GHOST", "Customers", [("CUSTOMER_ID", "ID")])

    after, _ = _orders_with_fk()
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.DELETED, before=ghost)],
    )
    assert updater.update_links(shop_model, ChangeLog([change])) == 0
    assert len(shop_model.links) == 2


@pytest.fixture
def two_keys_model(links_manager):
    """Orders with FK_A and FK_B both referencing Customers, links generated."""
    customers = make_entity("Customers", ["ID"])
    orders = make_entity("Orders", ["ID", "BILLING_ID", "SHIPPING_ID"])
    add_fk(orders, "FK_A", "Customers", [("BILLING_ID", "ID")])
    add_fk(orders, "FK_B", "Customers", [("SHIPPING_ID", "ID")])
    model = make_model(customers, orders)
    links_manager.rebuild_all_links(model)
    return model


def _field_names(entity):
    return sorted(link.field_name for link in entity.links)


def test_update_keeps_field_names_with_two_keys_to_same_table(two_keys_model, updater):
    """Test that regenerating one of two relations to the same table matches the full pass."""
    expected = link_signature(two_keys_model)
    orders = two_keys_model.get_entity("Orders")
    fk_a = orders.get_foreign_key("FK_A")

    after = make_entity("Orders", ["ID", "BILLING_ID", "SHIPPING_ID"])
    after_fk_a = add_fk(after, "FK_A", "Customers", [("BILLING_ID", "ID")])
    add_fk(after, "FK_B", "Customers", [("SHIPPING_ID", "ID")])
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[ChangeOnForeignKey(ChangeType.UPDATED, before=fk_a, after=after_fk_a)],
    )

    assert updater.update_links(two_keys_model, ChangeLog([change])) == 4
    assert link_signature(two_keys_model) == expected
    assert orders.get_link("LINK_FK_Orders.FK_A_O").field_name == "customers"
    assert orders.get_link("LINK_FK_Orders.FK_B_O").field_name == "customers2"


def test_replacing_one_of_two_keys_to_same_table(two_keys_model, updater):
    """Test that a deleted then created key never reuses a field name still in use."""
    orders = two_keys_model.get_entity("Orders")
    customers = two_keys_model.get_entity("Customers")
    fk_a = orders.get_foreign_key("FK_A")

    after = make_entity("Orders", ["ID", "BILLING_ID", "SHIPPING_ID"])
    add_fk(after, "FK_B", "Customers", [("SHIPPING_ID", "ID")])
    fk_c = add_fk(after, "FK_C", "Customers", [("BILLING_ID", "ID")])
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[
            ChangeOnForeignKey(ChangeType.DELETED, before=fk_a),
            ChangeOnForeignKey(ChangeType.CREATED, after=fk_c),
        ],
    )

    assert updater.update_links(two_keys_model, ChangeLog([change])) == 4

    assert _field_names(orders) == ["customers", "customers2"]
    assert _field_names(customers) == ["listOfOrders", "listOfOrders2"]
    assert orders.get_link("LINK_FK_Orders.FK_C_O").field_name == "customers"
    assert orders.get_link("LINK_FK_Orders.FK_B_O").field_name == "customers2"
    # Each inverse side is mapped by its own owning side field
    for link in customers.links:
        owning = orders.get_link(link.mirror_link_id)
        assert link.mapped_by == owning.field_name
    assert sorted(link.mapped_by for link in customers.links) == ["customers", "customers2"]


def test_update_does_not_touch_change_log_snapshots(shop_model, links_manager, updater):
    """Test that the model entity gets its own copies of the 'after' attributes and foreign keys."""
    links_manager.rebuild_all_links(shop_model)
    orders = shop_model.get_entity("Orders")
    fk = orders.get_foreign_key("FK_ORDERS_CUSTOMERS")

    after = make_entity("Orders", ["ID", "CUSTOMER_ID"])
    after.store_foreign_key(make_fk("Orders", "FK_ORDERS_CUSTOMERS", "Customers", [("CUSTOMER_ID", "ID")]))
    change = ChangeOnEntity(
        ChangeType.UPDATED,
        before=orders.model_copy(deep=True),
        after=after,
        changes_on_foreign_keys=[
            ChangeOnForeignKey(ChangeType.UPDATED, before=fk, after=after.get_foreign_key("FK_ORDERS_CUSTOMERS"))
        ],
    )

    updater.update_links(shop_model, ChangeLog([change]))

    assert orders.get_attribute("CUSTOMER_ID").is_fk
    assert orders.get_attribute("CUSTOMER_ID") is not after.get_attribute("CUSTOMER_ID")
    assert orders.get_foreign_key("FK_ORDERS_CUSTOMERS") is not after.get_foreign_key("FK_ORDERS_CUSTOMERS")
    # The snapshot keeps the flags it was built with
    assert not after.get_attribute("CUSTOMER_ID").is_fk
    assert after.link_index == {}
