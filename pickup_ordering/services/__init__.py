"""
                        Services Module

Business logic behind the HTTP layer.

Services:
    - catalog: menu reads, price lookup and default menu seeding
    - orders: order validation, pricing and persistence
"""
