from fastapi import APIRouter

from rokthona.api.routers import blogs, donation_requests, funding, geo, users

router = APIRouter()
router.include_router(users.router)
router.include_router(donation_requests.router)
router.include_router(blogs.router)
router.include_router(funding.router)
router.include_router(geo.router)
