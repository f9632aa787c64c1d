from fastapi import APIRouter

from .features.lookup.router import router as lookup_router
from .features.submit.router import router as submit_router

router = APIRouter()

router.include_router(lookup_router)
router.include_router(submit_router)
