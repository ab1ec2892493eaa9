"""
Planner backend package.

``src.planner.core`` holds the pure calendar/timetable engine; the rest of the
package is the FastAPI service that stores todos and schedules and serves the
views built from them. The FastAPI app lives in ``src.planner.main``.
"""
