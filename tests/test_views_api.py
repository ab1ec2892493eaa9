from datetime import date, timedelta

from src.planner.settings import Settings, get_settings
from src.planner.main import app


def add_todo(client, title, start, end, content="Body", user_id=None):
    payload = {"title": title, "content": content, "start_date": start, "end_date": end}
    if user_id is not None:
        payload["user_id"] = user_id
    res = client.post("/api/v1/todos/", json=payload)
    assert res.status_code == 201
    return res.json()


def add_schedule(client, weekday, start, end, title):
    res = client.post(
        "/api/v1/schedules/",
        json={"weekday": weekday, "start_time": start, "end_time": end, "title": title},
    )
    assert res.status_code == 201
    return res.json()


class TestCalendarView:
    def test_month_grid_with_day_counts(self, client):
        add_todo(client, "Lab report", "2024-01-30", "2024-02-02")
        add_todo(client, "Quiz", "2024-02-01", "2024-02-01")

        res = client.get("/api/v1/views/calendar?year=2024&month=2")
        assert res.status_code == 200
        view = res.json()
        assert view["year"] == 2024 and view["month"] == 2
        assert view["week_start"] == "sunday"
        assert view["weekday_labels"][0] == "SUN"

        cells = [c for week in view["weeks"] for c in week]
        assert len(cells) % 7 == 0
        days = {c["day"]: c for c in cells if c["day"] is not None}
        assert sorted(days) == list(range(1, 30))
        assert days[1]["count"] == 2 and days[1]["titles"] == ["Lab report", "Quiz"]
        assert days[2]["count"] == 1
        assert days[3]["count"] == 0

        january = client.get("/api/v1/views/calendar?year=2024&month=1").json()
        jan_days = {c["day"]: c for week in january["weeks"] for c in week if c["day"]}
        assert jan_days[30]["titles"] == ["Lab report"]
        assert jan_days[29]["count"] == 0

    def test_monday_first_override(self, client):
        view = client.get("/api/v1/views/calendar?year=2024&month=3&week_start=monday").json()
        assert view["weekday_labels"][0] == "MON"
        assert [c["day"] for c in view["weeks"][0]] == [None, None, None, None, 1, 2, 3]

    def test_defaults_to_current_month_and_marks_today(self, client):
        today = date.today()
        view = client.get("/api/v1/views/calendar").json()
        assert (view["year"], view["month"]) == (today.year, today.month)
        marked = [c["day"] for week in view["weeks"] for c in week if c["is_today"]]
        assert marked == [today.day]

    def test_owner_filter(self, client):
        add_todo(client, "Mine", "2024-02-10", "2024-02-10", user_id=1)
        add_todo(client, "Theirs", "2024-02-10", "2024-02-10", user_id=2)
        view = client.get("/api/v1/views/calendar?year=2024&month=2&owner_id=2").json()
        day = [c for week in view["weeks"] for c in week if c["day"] == 10][0]
        assert day["titles"] == ["Theirs"]

    def test_invalid_month_rejected(self, client):
        assert client.get("/api/v1/views/calendar?year=2024&month=13").status_code == 422

    def test_stored_span_over_limit_reported(self, client):
        add_todo(client, "Semester", "2024-02-01", "2024-06-30")
        limited = Settings(**{**get_settings().__dict__, "max_span_days": 30})
        app.dependency_overrides[get_settings] = lambda: limited
        res = client.get("/api/v1/views/calendar?year=2024&month=2")
        assert res.status_code == 422
        assert res.json()["error"] == "SpanTooLarge"


class TestTaskCards:
    def test_cards_carry_period_placeholder_and_d_day(self, client):
        today = date.today()
        add_todo(client, "Due today", (today - timedelta(days=2)).isoformat(), today.isoformat())
        add_todo(client, "Due tomorrow", today.isoformat(), (today + timedelta(days=1)).isoformat(), content=None)
        add_todo(client, "Overdue", (today - timedelta(days=5)).isoformat(), (today - timedelta(days=1)).isoformat())

        cards = client.get("/api/v1/views/tasks").json()
        assert [c["title"] for c in cards] == ["Due today", "Due tomorrow", "Overdue"]
        assert [c["d_day"] for c in cards] == ["D-Day", "D-1", "D+1"]
        assert cards[0]["period"] == f"{(today - timedelta(days=2)).isoformat()} ~ {today.isoformat()}"
        assert cards[1]["content"] == "No content."
        assert cards[0]["content"] == "Body"


class TestTimetableView:
    def test_grid_and_blocks(self, client):
        first = add_schedule(client, "MON", 9, 11, "Algorithms")
        add_schedule(client, "MON", 10, 12, "Overlap")
        add_schedule(client, "FRI", 18, 20, "Seminar")

        view = client.get("/api/v1/views/timetable").json()
        assert view["week_start"] == "monday"
        assert view["weekdays"] == ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]
        assert view["hours"] == list(range(9, 21))
        assert len(view["rows"]) == 12 and all(len(r) == 7 for r in view["rows"])

        mon = [row[0] for row in view["rows"]]
        assert mon[0]["schedule"]["id"] == first["id"]
        assert mon[0]["is_start"] and mon[0]["span"] == 2
        # 10:00 is covered by both; the first one created wins
        assert mon[1]["schedule"]["title"] == "Algorithms"
        assert not mon[1]["is_start"]
        assert mon[2]["schedule"]["title"] == "Overlap"
        assert mon[3]["schedule"] is None

        fri = [row[4] for row in view["rows"]]
        assert fri[9]["schedule"]["title"] == "Seminar" and fri[9]["span"] == 2
        assert fri[11]["schedule"] is None

    def test_sunday_first_override(self, client):
        add_schedule(client, "SUN", 9, 10, "Church choir")
        view = client.get("/api/v1/views/timetable?week_start=sunday").json()
        assert view["weekdays"][0] == "SUN"
        assert view["rows"][0][0]["schedule"]["title"] == "Church choir"


def test_calendar_survives_todo_ending_on_last_supported_day(client):
    add_todo(client, "Far future", "9999-12-30", "9999-12-31")

    res = client.get("/api/v1/views/calendar?year=9999&month=12")
    assert res.status_code == 200
    days = {c["day"]: c for week in res.json()["weeks"] for c in week if c["day"]}
    assert days[31]["titles"] == ["Far future"]

    assert client.get("/api/v1/views/calendar?year=2024&month=2").status_code == 200
