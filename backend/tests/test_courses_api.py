from fastapi.testclient import TestClient

from collegehub.components.course_list import EMPTY_MESSAGE
from collegehub.main import app

client = TestClient(app)


def _login(username: str) -> dict:
    client.post('/auth/register', json={'username': username, 'password': 'pw'})
    token = client.post('/auth/login', json={'username': username, 'password': 'pw'}).json()['access_token']
    return {'Authorization': f'Bearer {token}'}


def _college(headers: dict, name: str) -> int:
    return client.post('/api/colleges', json={'name': name}, headers=headers).json()['id']


def _publish(headers, college_id, title, description='about it'):
    r = client.post('/api/courses', json={'title': title, 'description': description, 'college_id': college_id},
                    headers=headers)
    assert r.status_code == 201
    return r.json()


def test_only_members_can_publish():
    headers = _login('ivy')
    college_id = _college(headers, 'Magdalen')
    r = client.post('/api/courses', json={'title': 'Logic', 'college_id': college_id}, headers=headers)
    assert r.status_code == 403
    client.post(f'/api/colleges/{college_id}/join', headers=headers)
    course = _publish(headers, college_id, 'Logic')
    assert course['college_id'] == college_id
    assert course['title'] == 'Logic'


def test_publish_to_unknown_college_is_not_found():
    headers = _login('ivy')
    r = client.post('/api/courses', json={'title': 'Logic', 'college_id': 42}, headers=headers)
    assert r.status_code == 404


def test_json_listing_is_newest_first_and_scoped_to_college():
    headers = _login('jack')
    first = _college(headers, 'Kings')
    other = _college(headers, 'Queens')
    client.post(f'/api/colleges/{first}/join', headers=headers)
    titles = ['One', 'Two', 'Three']
    for t in titles:
        _publish(headers, first, t)
    client.post(f'/api/colleges/{other}/join', headers=headers)
    _publish(headers, other, 'Elsewhere')

    listed = client.get(f'/api/colleges/{first}/courses').json()
    assert [c['title'] for c in listed] == ['Three', 'Two', 'One']
    assert client.get(f'/api/colleges/{other}/courses').json()[0]['title'] == 'Elsewhere'


def test_html_fragment_renders_empty_state():
    headers = _login('kate')
    college_id = _college(headers, 'Oriel')
    r = client.get(f'/colleges/{college_id}/courses')
    assert r.status_code == 200
    assert EMPTY_MESSAGE in r.text
    assert 'course-card' not in r.text


def test_html_fragment_reflects_new_courses_after_refresh():
    headers = _login('liam')
    college_id = _college(headers, 'Exeter')
    client.post(f'/api/colleges/{college_id}/join', headers=headers)
    _publish(headers, college_id, 'Ethics')
    r = client.get(f'/colleges/{college_id}/courses', params={'refresh': 0})
    assert r.text.count('course-card') == 1
    _publish(headers, college_id, 'Poetry')
    r2 = client.get(f'/colleges/{college_id}/courses', params={'refresh': 1})
    assert r2.text.count('course-card') == 2
    assert r2.text.index('Poetry') < r2.text.index('Ethics')
    assert 'Created less than a minute ago' in r2.text


def test_course_detail_page():
    headers = _login('mia')
    college_id = _college(headers, 'Jesus')
    client.post(f'/api/colleges/{college_id}/join', headers=headers)
    course = _publish(headers, college_id, 'Astronomy', 'Stars & planets')
    r = client.get(f'/course/{course["id"]}')
    assert r.status_code == 200
    assert 'Astronomy' in r.text
    assert 'Stars &amp; planets' in r.text
    assert client.get('/course/9999').status_code == 404
