from fastapi import APIRouter
from studyhub.api.routes import (
    users,
    institutions,
    courses,
    materials,
    quizzes,
    bookmarks,
    reviews,
    student,
    instructor,
    institution,
    admin,
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(users.auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(institutions.router, prefix="/institutions", tags=["catalogue"])
api_router.include_router(institutions.programmes_router, prefix="/programmes", tags=["catalogue"])
api_router.include_router(courses.router, prefix="/courses", tags=["catalogue"])
api_router.include_router(materials.router, prefix="/materials", tags=["materials"])
api_router.include_router(reviews.router, tags=["engagement"])
api_router.include_router(bookmarks.router, prefix="/bookmarks", tags=["engagement"])
api_router.include_router(quizzes.router, prefix="/quizzes", tags=["quizzes"])
api_router.include_router(quizzes.attempts_router, prefix="/quiz-attempts", tags=["quizzes"])
api_router.include_router(student.router, prefix="/student", tags=["student"])
api_router.include_router(instructor.router, prefix="/instructor", tags=["instructor"])
api_router.include_router(institution.router, prefix="/institution", tags=["institution"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
