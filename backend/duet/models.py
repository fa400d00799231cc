from datetime import datetime, timezone

from duet import db


def _utcnow():
    return datetime.now(timezone.utc)


class TurnTally(db.Model):
    __tablename__ = 'turn_tally'
    id = db.Column(db.Integer, primary_key=True)
    user_profile_id = db.Column(db.String(128), unique=True, nullable=False, index=True)
    turn_count = db.Column(db.Integer, default=0, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'user_id': self.user_profile_id,
            'turn_count': self.turn_count,
        }
