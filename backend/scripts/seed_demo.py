"""CLI script to seed a demo college, user and courses into the backend DB.
Usage: python scripts/seed_demo.py [--college NAME] [--username NAME] [--password PW] [--courses N]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `collegehub` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from collegehub.database import engine, create_db_and_tables
from collegehub import repositories, services


def main(college: str = 'Demo College', username: str = 'demo', password: str = 'demo', courses: int = 3):
    """Create (or reuse) the demo college and user, then publish demo courses.

    The user joins the college so the courses can be published in its
    name. Results are printed to stdout for a quick CLI feedback loop.
    """
    create_db_and_tables()
    with Session(engine) as session:
        membership = services.MembershipService(session)
        existing = repositories.CollegeRepository(session).get_by_name(college)
        c = existing or membership.create_college(college)
        print(f'College: {c.name} (id {c.id})')

        user = repositories.UserRepository(session).get_by_username(username)
        if not user:
            user = services.AuthService(session).register(username, password)
        membership.join(user.id, c.id)
        session.refresh(user)
        print(f'User: {user.username} (id {user.id}) joined college {c.id}')

        course_svc = services.CourseService(session)
        for i in range(1, courses + 1):
            course = course_svc.create_course(user, c.id, f'Demo course {i}', f'Sample description for demo course {i}.')
            print(f'Created course {course.id}: {course.title}')
        print(f'Total courses in {c.name}: {len(course_svc.list_for_college(c.id))}')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--college', default='Demo College', help='College name to create or reuse')
    parser.add_argument('--username', default='demo', help='Demo user name')
    parser.add_argument('--password', default='demo', help='Demo user password')
    parser.add_argument('--courses', type=int, default=3, help='Number of demo courses to publish')
    args = parser.parse_args()
    main(college=args.college, username=args.username, password=args.password, courses=args.courses)
