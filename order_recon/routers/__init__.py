# order_recon/routers/__init__.py

from order_recon.routers import health
from order_recon.routers import reconcile

__all__ = ["health", "reconcile"]
