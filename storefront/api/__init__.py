# storefront/api/__init__.py
from storefront.api.routers import health, auth, catalog, cart, orders, admin

ROUTERS = (
    health.router,
    auth.router,
    catalog.router,
    cart.router,
    orders.router,
    admin.router,
)
