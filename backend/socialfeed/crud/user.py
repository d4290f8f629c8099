from uuid import UUID

from sqlmodel import Session, col, select

from socialfeed.core.security import get_password_hash, verify_password
from socialfeed.models.user import User, UserCreate, UserUpdateMe


def get_user_by_id(*, session: Session, user_id: UUID) -> User | None:
    """
    Get a user by their ID.

    Parameters:
        session (Session): The database session.
        user_id (UUID): The ID of the user to retrieve.
    Returns:
        User | None: The user object if found, otherwise None.
    """
    return session.get(User, user_id)


def get_user_by_username(*, session: Session, username: str) -> User | None:
    statement = select(User).where(User.username == username)
    return session.exec(statement).one_or_none()


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    return session.exec(statement).one_or_none()


def get_users_by_ids(*, session: Session, user_ids: list[UUID]) -> list[User]:
    """
    Get all users whose ID is in ``user_ids`` in a single query.
    Missing IDs are silently skipped.
    """
    if not user_ids:
        return []
    statement = select(User).where(col(User.id).in_(set(user_ids)))
    return list(session.exec(statement).all())


def create_user(
    *,
    session: Session,
    user_create: UserCreate,
) -> User:
    """
    Create a new user in the database.
    Parameters:
        session (Session): The database session.
        user_create (UserCreate): The user creation data.
    Returns:
        User: The created user object.
    Raises:
        IntegrityError: If a user with the same email or username already exists.
    """
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.flush()  # Check for unique constraints
    return db_obj


def update_user(
    *,
    session: Session,
    db_user: User,
    user_in: UserUpdateMe,
) -> User:
    user_data = user_in.model_dump(exclude_unset=True)
    db_user.sqlmodel_update(user_data)
    session.add(db_user)
    session.flush()
    return db_user


def set_rss_keys(*, session: Session, db_user: User, rss_keys: list[str]) -> User:
    # Assign a new list so the JSON column is marked dirty
    db_user.rss_keys = list(rss_keys)
    session.add(db_user)
    session.flush()
    return db_user


def authenticate(*, session: Session, username: str, password: str) -> User | None:
    """
    Authenticate a user by username (or email) and password.

    Returns:
        User | None: The authenticated user object if credentials are valid, otherwise None.
    """
    db_user = get_user_by_username(session=session, username=username)
    if db_user is None:
        db_user = get_user_by_email(session=session, email=username)
    if not db_user:
        return None
    if not verify_password(password, db_user.hashed_password):
        return None
    return db_user
