from fastapi import APIRouter

from helpdesk.views.auth import router as auth_router
from helpdesk.views.dashboard import router as dashboard_router
from helpdesk.views.submission import router as submission_router

router = APIRouter(include_in_schema=False)
router.include_router(submission_router)
router.include_router(auth_router)
router.include_router(dashboard_router)
