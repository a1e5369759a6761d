from fastapi import APIRouter

from stockroom.app.api.v1.endpoints.health import router as health_router
from stockroom.app.api.v1.endpoints.initialize import router as initialize_router
from stockroom.app.api.v1.endpoints.auth import router as auth_router
from stockroom.app.api.v1.endpoints.users import router as users_router
from stockroom.app.api.v1.endpoints.areas import router as areas_router
from stockroom.app.api.v1.endpoints.warehouses import router as warehouses_router
from stockroom.app.api.v1.endpoints.suppliers import router as suppliers_router
from stockroom.app.api.v1.endpoints.categories import router as categories_router
from stockroom.app.api.v1.endpoints.products import router as products_router
from stockroom.app.api.v1.endpoints.movements import router as movements_router
from stockroom.app.api.v1.endpoints.purchase_requests import router as purchase_requests_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(initialize_router, tags=["initialize"])
router.include_router(auth_router, tags=["auth"])
router.include_router(users_router, tags=["users"])
router.include_router(areas_router, tags=["areas"])
router.include_router(warehouses_router, tags=["warehouses"])
router.include_router(suppliers_router, tags=["suppliers"])
router.include_router(categories_router, tags=["categories"])
router.include_router(products_router, tags=["products"])
router.include_router(movements_router, tags=["movements"])
router.include_router(purchase_requests_router, tags=["purchase_requests"])
