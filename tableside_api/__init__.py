"""
Tableside REST API: menu browsing, dish customization, carts, orders and
the staff order board.
"""
