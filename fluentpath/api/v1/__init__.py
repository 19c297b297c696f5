"""
API v1 routes.
"""

from fastapi import APIRouter

from fluentpath.api.v1 import admin, ai, progress, settings, syllabus, videos

router = APIRouter()

router.include_router(progress.router, tags=["Progress"])
router.include_router(syllabus.router, prefix="/syllabus", tags=["Syllabus"])
router.include_router(videos.router, prefix="/videos", tags=["Videos"])
router.include_router(ai.router, prefix="/ai", tags=["AI Practice"])
router.include_router(settings.router, prefix="/settings", tags=["Settings"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
