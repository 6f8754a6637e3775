import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Depends, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from courses_api.api.auth import authenticate_user
from courses_api.api.core import (
    CurrentUserRead, CourseRead,
    current_user_summary, create_user,
    get_courses, get_course, create_course, update_course, delete_course,
)
from courses_api.api.errors import ApiError, AuthenticationError
from courses_api.api.middleware import RequestLoggingMiddleware
from courses_api.api.validation import FieldCheck, USER_BODY, CREATE_COURSE_BODY, UPDATE_COURSE_BODY
from courses_api.db.db import get_db, init_db
from courses_api.db.models import User
from courses_api.logger import configure_logging, get_logger

# Load .env for DB/logging settings
load_dotenv()

logger = get_logger(__name__)

CORS_ORIGINS = [origin.strip() for origin in os.environ.get("CORS_ORIGINS", "*").split(",") if origin.strip()]

openapi_tags = [
    {"name": "users", "description": "Register users and read the authenticated user"},
    {"name": "courses", "description": "Create, update, view, and delete courses"}
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    logger.info("Application startup: tables ready")
    yield


app = FastAPI(
    title="Courses REST API",
    description="FastAPI backend for users and courses (HTTP Basic auth on writes).",
    version="1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error responders ---

@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError):
    if not isinstance(exc, AuthenticationError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=exc.headers)

@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

@app.get("/", tags=["health"])
def health_check():
    """Health check root."""
    return {"message": "Welcome to the Courses REST API"}

# --- User Endpoints ---

# PUBLIC_INTERFACE
@app.get("/users", response_model=CurrentUserRead, tags=["users"], summary="Get current user info")
def read_current_user(current_user: User = Depends(authenticate_user)):
    """Get Id, Name and Email of the authenticated user."""
    return current_user_summary(current_user)

# PUBLIC_INTERFACE
@app.post("/users", status_code=201, tags=["users"], summary="Register a new user")
def signup(check: FieldCheck = Depends(USER_BODY), db=Depends(get_db)):
    """Register a new user. Email must be unique; the password is stored hashed."""
    check.raise_for_errors()
    create_user(db, check.payload)
    return Response(status_code=201, headers={"Location": "/"})

# --- Course Endpoints ---

# PUBLIC_INTERFACE
@app.get("/courses", response_model=List[CourseRead], tags=["courses"], summary="List courses")
def list_courses(db=Depends(get_db)):
    """List every course, including the user that owns it."""
    return get_courses(db)

# PUBLIC_INTERFACE
@app.get("/courses/{course_id}", response_model=CourseRead, tags=["courses"], summary="Get specific course")
def read_course(course_id: str, db=Depends(get_db)):
    """Get a single course by ID, including the user that owns it."""
    return get_course(db, course_id)

# PUBLIC_INTERFACE
@app.post("/courses", status_code=201, tags=["courses"], summary="Create a new course")
def add_course(
    check: FieldCheck = Depends(CREATE_COURSE_BODY),
    current_user: User = Depends(authenticate_user),
    db=Depends(get_db),
):
    """Create a course; the Location header points at it."""
    check.raise_for_errors()
    course = create_course(db, check.payload)
    logger.info("Course %s created by user %s", course.id, current_user.id)
    return Response(status_code=201, headers={"Location": f"/courses/{course.id}"})

# PUBLIC_INTERFACE
@app.put("/courses/{course_id}", status_code=204, tags=["courses"], summary="Update a course")
def edit_course(
    course_id: str,
    check: FieldCheck = Depends(UPDATE_COURSE_BODY),
    current_user: User = Depends(authenticate_user),
    db=Depends(get_db),
):
    """Edit an existing course. Invalid payloads never reach the database."""
    check.raise_for_errors()
    update_course(db, course_id, check.payload)
    return Response(status_code=204)

# PUBLIC_INTERFACE
@app.delete("/courses/{course_id}", status_code=204, tags=["courses"], summary="Delete a course")
def remove_course(course_id: str, current_user: User = Depends(authenticate_user), db=Depends(get_db)):
    """Delete a course."""
    delete_course(db, course_id)
    return Response(status_code=204)
