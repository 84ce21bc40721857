"""Server-side course list component.

`CourseList` holds the state of one rendered list of courses for a
college: the last loaded courses and a loading flag. It reads through a
`loader(college_id)` callable, which may be sync (run in the threadpool)
or async (awaited).

Each read carries a sequence token. Only the most recent read may
replace the displayed courses or clear the loading flag; a read that
finishes after a newer one started is discarded.
"""

from __future__ import annotations

import html
import inspect
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from fastapi.concurrency import run_in_threadpool

from ..utils.relative_time import format_distance_to_now

logger = logging.getLogger("collegehub.courses")

SKELETON_COUNT = 6
EMPTY_MESSAGE = "No courses available yet. Be the first to create one!"

CourseLoader = Callable[[int], Union[Sequence[Any], Awaitable[Sequence[Any]]]]


def course_href(course_id: int) -> str:
    """Path of the per-course detail view."""
    return f"/course/{course_id}"


class CourseList:
    """Fetch and render the courses of one college."""

    def __init__(self, loader: CourseLoader, college_id: int, refresh_trigger: int = 0,
                 now: Optional[Callable[[], datetime]] = None):
        self.loader = loader
        self.college_id = college_id
        self.refresh_trigger = refresh_trigger
        self.courses: List[Any] = []
        self.loading = True
        self._mounted = False
        self._seq = 0
        self._now = now

    async def mount(self) -> None:
        """Perform the initial read."""
        self._mounted = True
        await self._fetch()

    async def update(self, college_id: int, refresh_trigger: int) -> bool:
        """Apply new inputs; re-read once if either changed.

        Returns True when a read was performed.
        """
        if not self._mounted:
            self.college_id = college_id
            self.refresh_trigger = refresh_trigger
            await self.mount()
            return True
        if college_id == self.college_id and refresh_trigger == self.refresh_trigger:
            return False
        self.college_id = college_id
        self.refresh_trigger = refresh_trigger
        await self._fetch()
        return True

    async def _load(self, college_id: int):
        if inspect.iscoroutinefunction(self.loader):
            return await self.loader(college_id)
        result = await run_in_threadpool(self.loader, college_id)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _fetch(self) -> None:
        self._seq += 1
        token = self._seq
        college_id = self.college_id
        self.loading = True
        try:
            courses = await self._load(college_id)
            if token != self._seq:
                logger.debug("discarding stale course read for college %s (token %s < %s)", college_id, token, self._seq)
                return
            self.courses = list(courses or [])
        except Exception:
            logger.exception("Error fetching courses for college %s", college_id)
        finally:
            if token == self._seq:
                self.loading = False

    def render(self) -> str:
        """Render the current state as an HTML fragment."""
        if self.loading:
            return self._render_skeleton()
        if not self.courses:
            return (
                '<div class="text-center py-12 text-zinc-400">'
                f'<p>{html.escape(EMPTY_MESSAGE)}</p>'
                '</div>'
            )
        cards = "".join(self._render_card(c) for c in self.courses)
        return f'<div class="course-list grid gap-4 sm:grid-cols-2 lg:grid-cols-3">{cards}</div>'

    def _render_skeleton(self) -> str:
        block = (
            '<div class="course-skeleton p-6 rounded-xl bg-black/30 border border-zinc-800 animate-pulse">'
            '<div class="h-6 bg-zinc-800 rounded w-3/4 mb-4"></div>'
            '<div class="h-4 bg-zinc-800 rounded w-full mb-2"></div>'
            '<div class="h-4 bg-zinc-800 rounded w-2/3"></div>'
            '</div>'
        )
        return (
            '<div class="grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-3 gap-4">'
            + block * SKELETON_COUNT
            + '</div>'
        )

    def _render_card(self, course) -> str:
        now = self._now() if self._now else None
        created = format_distance_to_now(course.created_at, now=now)
        return (
            f'<a class="course-card block p-6 rounded-xl bg-black/30 border border-zinc-800 '
            f'hover:border-purple-500/50 transition-all duration-300 cursor-pointer group" '
            f'href="{html.escape(course_href(course.id))}" data-course-id="{course.id}">'
            f'<h3 class="text-xl font-semibold mb-2 text-white group-hover:text-purple-400 transition-colors">'
            f'{html.escape(course.title)}</h3>'
            f'<p class="text-zinc-400 line-clamp-2 mb-2">{html.escape(course.description or "")}</p>'
            f'<p class="text-sm text-zinc-500">Created {html.escape(created)}</p>'
            '</a>'
        )
