"""
Database initialization script.

Creates all tables and, with --seed, inserts the default group roster
when the users table is empty.
"""
import sys
from sqlalchemy.orm import Session
from ezsplit.db.session import SessionLocal, init_db
from ezsplit.models import User

DEFAULT_USERS = [
    ("Tiến Lê", "0041000382078", "VCB"),
    ("Trà Nguyễn", "152748566", "VPB"),
    ("Tuấn Hoàng", "142451433", "VPB"),
    ("Yên Nguyễn", "137146843", "VPB"),
    ("Karin", "257357201", "VPB"),
    ("Duy Trần", "29091998", "VPB"),
    ("Minh Lê", None, None),
]


def seed_users(db: Session) -> int:
    """Insert DEFAULT_USERS if no user exists yet. Returns number of rows inserted."""
    if db.query(User).first():
        return 0
    for name, bank_account, bank_name in DEFAULT_USERS:
        db.add(User(name=name, bank_account=bank_account, bank_name=bank_name))
    db.commit()
    return len(DEFAULT_USERS)


if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    if "--seed" in sys.argv:
        db = SessionLocal()
        try:
            inserted = seed_users(db)
            print(f"Seeded {inserted} users")
        finally:
            db.close()
    print("Database initialized successfully!")
