"""ReadReach: library marketplace backend.

Catalogue, user roles, orders and payments, with a declarative
authorization layer in front of every protected operation.
"""
