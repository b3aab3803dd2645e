"""API v1 routes aggregation"""

from fastapi import APIRouter

from .auth.router import router as auth_router
from .products.router import router as products_router
from .reviews.router import router as reviews_router
from .wishlist.router import router as wishlist_router
from .profile.router import router as profile_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(reviews_router, prefix="/products", tags=["Reviews"])
api_router.include_router(wishlist_router, prefix="/wishlist", tags=["Wishlist"])
api_router.include_router(profile_router, prefix="/profile", tags=["Profile"])

# Export router
router = api_router
