"""
Example 01: Basic Mapping

This example demonstrates folding plain rows into entities with map_one and
map_many, without a database.
"""

from dataclasses import dataclass

from row_graph import NoRowsError, column, map_many, map_one, primary_key, relationship


@dataclass
class User:
    """User entity"""
    user_id: int | None = primary_key("user_id", unsigned=True)
    name: str | None = column("name")


@dataclass
class Address:
    """Address entity with its owners collection"""
    address_id: int | None = primary_key("address_id")
    street: str | None = column("street")
    owners: list[User] = relationship(default_factory=list)


def main():
    print("=== Basic Mapping ===\n")

    # map_one: a single row into a single entity
    user = map_one([{"user_id": 1, "name": "John"}], User())
    print(f"map_one result: {user}\n")

    # map_one: join rows repeating the root key fold into one entity
    rows = [
        {"address_id": 1, "street": "Main St", "user_id": 1, "name": "John"},
        {"address_id": 1, "street": "Main St", "user_id": 2, "name": "Jane"},
    ]
    address = map_one(rows, Address())
    print(f"Address {address.street} owned by {[owner.name for owner in address.owners]}\n")

    # map_many: distinct roots in first-seen order
    users = map_many(
        [
            {"user_id": 2, "name": "Jane"},
            {"user_id": 1, "name": "John"},
            {"user_id": 2, "name": "Jane"},
        ],
        [],
        User,
    )
    print(f"map_many result ({len(users)} users):")
    for user in users:
        print(f"  - {user.user_id}: {user.name}")
    print()

    # Empty results raise NoRowsError and leave the destination untouched
    empty = User()
    try:
        map_one([], empty)
    except NoRowsError as e:
        print(f"NoRowsError: {e} (destination still {empty})")


if __name__ == "__main__":
    main()
