"""
# `storefront/main.py` — Application entry point

Creates the FastAPI app, configures logging and CORS, and mounts the routers.

**Public routers:** `/products`, `/cart`, `/orders`, `/users`

**Admin routers (prefix `/admin`):** `/products`, `/orders`, `/dashboard`
All admin routers are protected with `require_admin` in their modules.

Run locally with `uvicorn storefront.main:app --reload`.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import settings
from storefront.routers import admin_dashboard, carts, orders, products, users

logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Storefront API",
    description="Backend API for a storefront: catalog, cart, checkout, order history and admin panel.",
    version="1.0.0",
    redirect_slashes=False,
)

# Configure CORS (allow front-end domain or all origins as configured)
allow_origins = [origin.strip() for origin in settings.allowed_origins.split(",")] if settings.allowed_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include public routers
app.include_router(products.router)
app.include_router(carts.router)
app.include_router(orders.router)
app.include_router(users.router)

# Include admin routers (with prefix /admin)
app.include_router(products.admin_router, prefix="/admin")
app.include_router(orders.admin_router, prefix="/admin")
app.include_router(admin_dashboard.router, prefix="/admin")


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=True)
