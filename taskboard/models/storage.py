from taskboard import db
from datetime import datetime, timezone


def _utcnow():
    return datetime.now(timezone.utc)


class StoredValue(db.Model):
    """One entry of the local key-value store; the whole board collection lives in a single row."""
    __tablename__ = 'local_storage'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f'<StoredValue {self.key}>'
