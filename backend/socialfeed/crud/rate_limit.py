from datetime import datetime
from uuid import uuid4

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, col, select

from socialfeed.models.rate_limit import RateLimiterState


def get_state(
    *,
    session: Session,
    name: str,
    key: str,
    for_update: bool = False,
) -> RateLimiterState | None:
    """
    Get the limiter state for a (limiter, key) pair.

    Parameters:
        session (Session): The database session.
        name (str): The limiter name.
        key (str): The key being limited, usually a user id.
        for_update (bool): Lock the row until the transaction ends.
    Returns:
        RateLimiterState | None: The stored state, or None if the key was never limited.
    """
    statement = select(RateLimiterState).where(
        RateLimiterState.name == name,
        RateLimiterState.key == key,
    )
    if for_update:
        statement = statement.with_for_update()
    return session.exec(statement).one_or_none()


def insert_state_if_missing(
    *,
    session: Session,
    name: str,
    key: str,
    value: int,
    window_start: datetime,
) -> None:
    """
    Insert a state row for a (limiter, key) pair unless one already exists.
    When two transactions race on the first call for a pair, the later insert
    waits for the earlier one and then does nothing.
    """
    if session.get_bind().dialect.name == "sqlite":
        insert = sqlite_insert
    else:
        insert = postgresql_insert
    statement = (
        insert(RateLimiterState)
        .values(
            id=uuid4(),
            name=name,
            key=key,
            value=value,
            window_start=window_start,
        )
        .on_conflict_do_nothing(index_elements=["name", "key"])
    )
    session.execute(statement)


def update_state(
    *,
    session: Session,
    state: RateLimiterState,
    value: int,
    window_start: datetime,
) -> RateLimiterState:
    state.value = value
    state.window_start = window_start
    session.add(state)
    session.flush()
    return state


def delete_states_before(
    *,
    session: Session,
    name: str,
    window_start_before: datetime,
) -> int:
    """
    Delete every state of limiter ``name`` whose window started before the cutoff.

    Returns:
        int: The number of deleted rows.
    """
    statement = delete(RateLimiterState).where(
        col(RateLimiterState.name) == name,
        col(RateLimiterState.window_start) < window_start_before,
    )
    result = session.execute(statement)
    return result.rowcount or 0
