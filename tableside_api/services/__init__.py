"""
Application services.

- pricing: pure price composition (unit price, line subtotal, order total)
- selection: pure option selection rules for single/multiple groups
- cart: pure cart aggregate (add, update_line, remove_line, totals)
- domain: DB-backed services (catalog, customization, cart, orders, sessions)
- events: transactional outbox, Redis publisher, staff change feed
"""
