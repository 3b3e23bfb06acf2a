from fastapi import APIRouter
from jobboard.api import auth, jobs, members, poster, review, submit

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(submit.router, prefix="/submit", tags=["submit"])
api_router.include_router(poster.router, prefix="/poster", tags=["poster"])
api_router.include_router(review.router, prefix="/review", tags=["review"])
api_router.include_router(members.router, tags=["members"])
