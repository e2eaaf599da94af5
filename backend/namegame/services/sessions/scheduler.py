import time
from typing import Set, Tuple

from namegame import db, socketio
from namegame.models import GameSession


# (session id, deadline) pairs with a pending timer
_scheduled_sessions: Set[Tuple[int, float]] = set()


def clear_scheduled_sessions() -> None:
    _scheduled_sessions.clear()


def complete_session(session: GameSession) -> bool:
    """Mark a session completed and notify clients. Returns False if it already was."""
    if session.completed:
        return False
    session.completed = True
    db.session.add(session)
    db.session.commit()
    socketio.emit('session_ended', {'session_id': session.id}, namespace='/ws')
    return True


def schedule_session_end(app, session_id: int) -> None:
    """Close the session automatically once its duration elapses.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Ensures a single timer per (session, deadline)
    - The timer only fires for the session it was set for: a session ended
      by hand, or a new session that reused the id after a reset, is left untouched
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    with app.app_context():
        session = db.session.get(GameSession, session_id)
        if not session or session.completed:
            return
        key = (session_id, session.end_time)
        if key in _scheduled_sessions:
            app.logger.info(f"[timer-skip] session={session_id} already scheduled")
            return
        _scheduled_sessions.add(key)
        expected_end = session.end_time
        delay = max(0.0, expected_end - time.time())
        app.logger.info(f"[timer-set] session={session_id} duration={session.duration}s deadline={expected_end}")

    def _worker(sid: int, expected_end: float, delay: float):
        try:
            hb = int(app.config.get('SESSION_HEARTBEAT_SEC', 0))
        except (TypeError, ValueError):
            hb = 0
        if hb > 0:
            slept = 0.0
            while slept < delay:
                step = min(hb, delay - slept)
                time.sleep(step)
                slept += step
                app.logger.info(f"[timer-heartbeat] session={sid} remaining={max(0.0, delay - slept):.0f}s")
        elif delay:
            time.sleep(delay)

        with app.app_context():
            _scheduled_sessions.discard((sid, expected_end))
            current = db.session.get(GameSession, sid)
            if not current:
                app.logger.info(f"[timer-abort] session={sid} no longer exists")
                return
            if current.end_time != expected_end:
                app.logger.info(
                    f"[timer-abort] session={sid} deadline mismatch expected={expected_end} actual={current.end_time}"
                )
                return
            if complete_session(current):
                app.logger.info(f"[timer-fire] session={sid} completed")
            else:
                app.logger.info(f"[timer-abort] session={sid} already completed")

    if app.config.get('TESTING'):
        _worker(session_id, expected_end, delay)
    else:
        socketio.start_background_task(_worker, session_id, expected_end, delay)
