import asyncio
from datetime import datetime, timedelta, timezone

from collegehub.components.course_list import CourseList, EMPTY_MESSAGE, SKELETON_COUNT
from collegehub.models import Course

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _course(course_id, title, college_id=1, age=timedelta(hours=1), description='desc'):
    return Course(id=course_id, title=title, description=description, college_id=college_id,
                  created_at=NOW - age, created_by=1)


class RecordingLoader:
    def __init__(self, data):
        self.data = data
        self.calls = []

    def __call__(self, college_id):
        self.calls.append(college_id)
        return self.data.get(college_id, [])


def test_pending_read_renders_skeletons():
    view = CourseList(RecordingLoader({}), 1)
    out = view.render()
    assert view.loading is True
    assert out.count('course-skeleton') == SKELETON_COUNT
    assert EMPTY_MESSAGE not in out


def test_empty_result_shows_message_and_no_cards():
    view = CourseList(RecordingLoader({}), 1)
    asyncio.run(view.mount())
    out = view.render()
    assert EMPTY_MESSAGE in out
    assert 'course-card' not in out


def test_cards_follow_loader_order_and_link_to_detail():
    courses = [_course(3, 'Newest', age=timedelta(minutes=5)),
               _course(2, 'Middle', age=timedelta(days=3)),
               _course(1, 'Oldest', age=timedelta(days=400))]
    view = CourseList(RecordingLoader({1: courses}), 1, now=lambda: NOW)
    asyncio.run(view.mount())
    out = view.render()
    assert out.count('course-card') == 3
    assert out.index('Newest') < out.index('Middle') < out.index('Oldest')
    assert 'href="/course/3"' in out
    assert 'Created 5 minutes ago' in out
    assert 'Created 3 days ago' in out
    assert 'Created about 1 year ago' in out
    assert 'line-clamp-2' in out


def test_card_text_is_escaped():
    view = CourseList(RecordingLoader({1: [_course(1, '<script>x</script>')]}), 1, now=lambda: NOW)
    asyncio.run(view.mount())
    out = view.render()
    assert '<script>' not in out
    assert '&lt;script&gt;' in out


def test_update_reads_once_per_input_change():
    loader = RecordingLoader({1: [_course(1, 'A')], 2: [_course(2, 'B', college_id=2)]})
    view = CourseList(loader, 1)

    async def scenario():
        await view.mount()
        assert await view.update(1, 0) is False
        assert await view.update(2, 0) is True
        assert await view.update(2, 0) is False
        assert await view.update(2, 1) is True

    asyncio.run(scenario())
    assert loader.calls == [1, 2, 2]
    assert [c.title for c in view.courses] == ['B']


def test_update_before_mount_mounts():
    loader = RecordingLoader({5: [_course(1, 'A', college_id=5)]})
    view = CourseList(loader, 1)
    assert asyncio.run(view.update(5, 0)) is True
    assert loader.calls == [5]


def test_failed_read_is_logged_and_keeps_previous_courses(caplog):
    state = {'fail': False}

    def loader(college_id):
        if state['fail']:
            raise RuntimeError('backend down')
        return [_course(1, 'Kept')]

    view = CourseList(loader, 1)
    asyncio.run(view.mount())
    state['fail'] = True
    with caplog.at_level('ERROR', logger='collegehub.courses'):
        asyncio.run(view.update(1, 1))
    assert view.loading is False
    assert [c.title for c in view.courses] == ['Kept']
    assert 'Error fetching courses' in caplog.text


def test_stale_read_cannot_overwrite_newer_one():
    async def scenario():
        gates = {1: asyncio.Event(), 2: asyncio.Event()}
        data = {1: [_course(1, 'Old college')], 2: [_course(2, 'New college', college_id=2)]}

        async def loader(college_id):
            await gates[college_id].wait()
            return data[college_id]

        view = CourseList(loader, 1)
        first = asyncio.create_task(view.mount())
        await asyncio.sleep(0)
        second = asyncio.create_task(view.update(2, 0))
        await asyncio.sleep(0)
        gates[2].set()
        await second
        assert view.loading is False
        gates[1].set()
        await first
        return view

    view = asyncio.run(scenario())
    assert [c.title for c in view.courses] == ['New college']
    assert view.loading is False
