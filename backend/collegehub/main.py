"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints used by the College Hub backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON or HTML responses.

Endpoints implemented:
- POST /auth/register
- POST /auth/login
- GET  /api/colleges
- POST /api/colleges
- POST /api/colleges/{college_id}/join
- POST /api/colleges/leave
- GET  /api/colleges/{college_id}/courses
- POST /api/courses
- GET  /colleges/{college_id}/courses
- GET  /course/{course_id}
"""

from typing import Optional
from fastapi import FastAPI, Depends, HTTPException, Request, Security
from fastapi.responses import JSONResponse, HTMLResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials
from sqlmodel import Session
import html
import json
import logging
import time
import uuid
from .database import engine, create_db_and_tables, get_session
from . import services, repositories, models
from .auth import bearer_scheme, get_current_user, resolve_user
from .components.course_list import CourseList
from .schemas import RegisterIn, TokenOut, CollegeIn, CollegeOut, CourseIn, CourseOut
from .utils.relative_time import format_distance_to_now
from .config import settings

app = FastAPI(title="College Hub API")
logger = logging.getLogger("collegehub.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps local frontends working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        if request.url.path.startswith("/api"):
            logger.exception(
                "request_failed %s",
                json.dumps(
                    {
                        "request_id": req_id,
                        "path": request.url.path,
                        "method": request.method,
                        "duration_ms": elapsed_ms,
                        "client": request.client.host if request.client else "unknown",
                    },
                    ensure_ascii=True,
                ),
            )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith("/api"):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


def _load_courses(college_id: int):
    """Default `CourseList` loader backed by its own database session."""
    with Session(engine) as session:
        return repositories.CourseRepository(session).list_for_college(college_id)


@app.post('/auth/register')
def register(payload: RegisterIn, db: Session = Depends(get_session)):
    """Register a new user (idempotent).

    Returns the existing user if the username is already taken, which
    keeps automation and tests simple.
    """
    existing = repositories.UserRepository(db).get_by_username(payload.username)
    if existing:
        return {'id': existing.id, 'username': existing.username}
    try:
        user = services.AuthService(db).register(payload.username, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except repositories.RepositoryError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {'id': user.id, 'username': user.username}


@app.post('/auth/login', response_model=TokenOut)
def login(payload: RegisterIn, db: Session = Depends(get_session)):
    """Authenticate a user and return a short-lived JWT token.

    The returned token contains `user_id` and `username` and is signed
    using the configured JWT secret.
    """
    token = services.AuthService(db).authenticate(payload.username, payload.password)
    if not token:
        raise HTTPException(status_code=401, detail='invalid credentials')
    return {'access_token': token}


@app.get('/api/colleges', response_model=list[CollegeOut])
def list_colleges(db: Session = Depends(get_session)):
    return [{'id': c.id, 'name': c.name} for c in repositories.CollegeRepository(db).list_all()]


@app.post('/api/colleges', status_code=201, response_model=CollegeOut)
def create_college(payload: CollegeIn, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Create a new college. Any authenticated user may do so."""
    try:
        college = services.MembershipService(db).create_college(payload.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except repositories.RepositoryError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {'id': college.id, 'name': college.name}


@app.post('/api/colleges/leave')
def leave_college(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
):
    """Remove the authenticated user from their college.

    Responds 401 without a session, 400 with the backend's message when
    the update fails and 200 `{"success": true}` otherwise. Leaving when
    not a member is a successful no-op.
    """
    try:
        user = resolve_user(db, credentials)
        if user is None:
            return _error(401, 'Unauthorized')
        try:
            services.MembershipService(db).leave(user.id)
        except repositories.RepositoryError as e:
            return _error(400, e.message)
        return JSONResponse(status_code=200, content={'success': True})
    except Exception:
        logger.exception("Error leaving college")
        return _error(500, 'Internal server error')


@app.post('/api/colleges/{college_id}/join')
def join_college(
    college_id: int,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
):
    """Make the authenticated user a member of `college_id`.

    Uses the same response shape as the leave endpoint; an unknown
    college yields 404.
    """
    try:
        user = resolve_user(db, credentials)
        if user is None:
            return _error(401, 'Unauthorized')
        try:
            joined = services.MembershipService(db).join(user.id, college_id)
        except repositories.RepositoryError as e:
            return _error(400, e.message)
        if not joined:
            return _error(404, 'College not found')
        return JSONResponse(status_code=200, content={'success': True})
    except Exception:
        logger.exception("Error joining college")
        return _error(500, 'Internal server error')


@app.get('/api/colleges/{college_id}/courses', response_model=list[CourseOut])
def list_courses(college_id: int, db: Session = Depends(get_session)):
    """List the courses of a college, newest first."""
    try:
        return services.CourseService(db).list_for_college(college_id)
    except repositories.RepositoryError as e:
        raise HTTPException(status_code=400, detail=e.message)


@app.post('/api/courses', status_code=201, response_model=CourseOut)
def create_course(payload: CourseIn, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Publish a course in the caller's college.

    Only members of the target college may publish there.
    """
    svc = services.CourseService(db)
    try:
        return svc.create_course(user, payload.college_id, payload.title, payload.description)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except repositories.RepositoryError as e:
        raise HTTPException(status_code=400, detail=e.message)


@app.get('/colleges/{college_id}/courses', response_class=HTMLResponse)
async def course_list_fragment(college_id: int, refresh: int = 0):
    """Render the course list of a college as an HTML fragment.

    `refresh` is the change counter clients bump after publishing a
    course to force a fresh read.
    """
    view = CourseList(_load_courses, college_id, refresh_trigger=refresh)
    await view.mount()
    return view.render()


@app.get('/course/{course_id}', response_class=HTMLResponse)
def course_detail(course_id: int, db: Session = Depends(get_session)):
    """Per-course detail page; the target of course card links."""
    course = repositories.CourseRepository(db).get(course_id)
    if not course:
        raise HTTPException(status_code=404, detail='course not found')
    created = format_distance_to_now(course.created_at)
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>{html.escape(course.title)}</title>
    </head>
    <body>
      <article class="course" data-course-id="{course.id}">
        <h1>{html.escape(course.title)}</h1>
        <p>{html.escape(course.description or '')}</p>
        <p class="meta">Created {html.escape(created)}</p>
        <a href="/colleges/{course.college_id}/courses">All courses</a>
      </article>
    </body>
    </html>
    """


@app.get("/", response_class=HTMLResponse)
def home():
    """Minimal homepage for quick manual testing."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>College Hub API</title>
      <style>
        body { font-family: Arial, sans-serif; margin: 32px; }
        a { color: #0a6; }
        .card { max-width: 640px; padding: 16px; border: 1px solid #ddd; border-radius: 8px; }
      </style>
    </head>
    <body>
      <div class="card">
        <h1>College Hub API</h1>
        <p>Quick links for local testing:</p>
        <ul>
          <li><a href="/docs">Swagger UI</a></li>
          <li><a href="/api/colleges">Colleges</a></li>
        </ul>
        <p>Use <code>/auth/register</code> + <code>/auth/login</code> to get a token, then try <code>/api/colleges/{id}/join</code> or <code>/api/colleges/leave</code>.</p>
      </div>
    </body>
    </html>
    """


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
