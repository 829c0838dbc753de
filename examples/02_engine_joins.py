"""
Example 02: Joined Queries Through the Engine

This example demonstrates running joined SQL through the Engine and a
Repository, with the rows folded into a graph of entities.
"""

from dataclasses import dataclass

from row_graph import ConnectionConfig, Engine, Repository, column, primary_key, relationship


@dataclass
class Order:
    """Order entity"""
    order_id: int | None = primary_key("order_id")
    total: float | None = column("total")
    status: str | None = column("status")


@dataclass
class Customer:
    """Customer aggregate root with orders collection"""
    customer_id: int | None = primary_key("customer_id")
    name: str | None = column("name")
    orders: list[Order] = relationship(default_factory=list)


CUSTOMERS_WITH_ORDERS = """
    SELECT c.customer_id, c.name, o.order_id, o.total, o.status
    FROM customers c
    LEFT JOIN orders o ON o.customer_id = c.customer_id
"""


class CustomerRepository(Repository[Customer]):
    def __init__(self, executor):
        super().__init__(executor, Customer)

    def get(self, customer_id):
        return self.find_one(
            CUSTOMERS_WITH_ORDERS + " WHERE c.customer_id = :id ORDER BY o.order_id",
            {"id": customer_id},
        )

    def list_all(self):
        return self.find_all(CUSTOMERS_WITH_ORDERS + " ORDER BY c.customer_id, o.order_id")


def main():
    # A single pooled connection keeps the in-memory database alive
    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)
    engine = Engine.from_config(config)

    engine.execute("CREATE TABLE customers (customer_id INTEGER PRIMARY KEY, name TEXT)")
    engine.execute("""
        CREATE TABLE orders (
            order_id INTEGER PRIMARY KEY,
            customer_id INTEGER NOT NULL REFERENCES customers(customer_id),
            total REAL NOT NULL,
            status TEXT NOT NULL
        )
    """)

    # Seed inside a transaction: committed on success, rolled back on error
    with engine.transaction() as tx:
        tx.execute("INSERT INTO customers VALUES (1, 'Alice'), (2, 'Bob'), (3, 'Carol')")
        tx.execute("INSERT INTO orders VALUES (10, 1, 100.50, 'completed')")
        tx.execute("INSERT INTO orders VALUES (11, 1, 50.25, 'pending')")
        tx.execute("INSERT INTO orders VALUES (12, 2, 200.00, 'completed')")

    print("=== Joined Queries ===\n")

    # query_one: fold the join rows of one customer
    alice = engine.query_one(
        CUSTOMERS_WITH_ORDERS + " WHERE c.customer_id = :id", Customer(), {"id": 1}
    )
    print(f"query_one: {alice.name} has {len(alice.orders)} orders\n")

    # Repository over the same engine
    repo = CustomerRepository(engine)
    for customer in repo.list_all():
        totals = ", ".join(f"{order.total:.2f}" for order in customer.orders) or "no orders"
        print(f"  - {customer.name}: {totals}")
    print()

    print(f"Missing customer: {repo.get(99)}")

    engine.close()


if __name__ == "__main__":
    main()
