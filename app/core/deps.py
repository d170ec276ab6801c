from collections.abc import Iterator

from sqlalchemy.orm import Session

from app.db.session import SessionLocal


# one session per request, always closed; late policy actions commit or roll back on it themselves
def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
