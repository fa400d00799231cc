from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from duet import db
from duet.models import TurnTally
from duet.services.session.errors import PersistenceFailed


class SqlTurnRecorder:
    """Records completed turns as a per-user tally in the database.

    May be called from a background task, so it pushes its own app context.
    """

    def __init__(self, app):
        self.app = app

    def record_turn(self, identity: str) -> int:
        with self.app.app_context():
            return increment_turn_count(identity)

    def turn_count(self, identity: str) -> int:
        with self.app.app_context():
            tally = TurnTally.query.filter_by(user_profile_id=identity).first()
            return tally.turn_count if tally else 0


def increment_turn_count(user_profile_id: str, attempts: int = 2) -> int:
    """Add one completed turn to the user's tally and return the new count.

    The increment runs in the database so overlapping recording tasks for the
    same user never overwrite each other. If another task inserts the first
    row between our update and insert, the update is retried.
    """
    matches = TurnTally.user_profile_id == user_profile_id
    bump = (
        update(TurnTally)
        .where(matches)
        .values(turn_count=TurnTally.turn_count + 1)
        .execution_options(synchronize_session=False)
    )
    try:
        for _ in range(attempts):
            if db.session.execute(bump).rowcount:
                count = db.session.execute(select(TurnTally.turn_count).where(matches)).scalar_one()
                db.session.commit()
                return count
            db.session.add(TurnTally(user_profile_id=user_profile_id, turn_count=1))
            try:
                db.session.commit()
                return 1
            except IntegrityError:
                # Lost the insert race; bump the row the other task created
                db.session.rollback()
        raise PersistenceFailed(f'could not create turn tally for {user_profile_id!r}')
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceFailed(str(getattr(exc, 'orig', None) or exc)) from exc
