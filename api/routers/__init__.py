"""API Routers"""

from api.routers import health, inventory, reports, sales

__all__ = ["health", "inventory", "reports", "sales"]
