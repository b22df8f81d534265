from datetime import datetime, timezone

from core.utils.time import utc_now_iso, utc_now_millis


def test_utc_now_iso_is_utc() -> None:
    parsed = datetime.fromisoformat(utc_now_iso())

    assert parsed.tzinfo is not None
    assert parsed.utcoffset().total_seconds() == 0


def test_utc_now_millis_close_to_now() -> None:
    now = datetime.now(timezone.utc).timestamp() * 1000

    assert abs(utc_now_millis() - now) < 5000
    assert len(str(utc_now_millis())) == 13
