"""
API routers.

- auth: staff login (/api/auth)
- admin: catalog and order management (/api/admin)
- public: menu and health (/api/public, /api/health)
- diner: table sessions, cart and orders (/api/diner)
"""
