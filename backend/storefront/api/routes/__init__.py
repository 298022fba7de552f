from fastapi import APIRouter

from storefront.api.routes import analytics, auth, blog, categories, delivery, health, orders, products, uploads

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(blog.router, prefix="/blog", tags=["blog"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(analytics.router, tags=["analytics"])
api_router.include_router(delivery.router, prefix="/delivery", tags=["delivery"])
