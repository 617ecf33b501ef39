import logging
from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db  # type: ignore
from models.language_model import Language

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("pt", "en", "es")
DEFAULT_LANGUAGE = "pt"

DEFAULT_LANGUAGE_ROWS = (
    ("pt", "Português"),
    ("en", "English"),
    ("es", "Español"),
)


def resolve_language(
    query: Optional[str],
    cookie: Optional[str],
    header: Optional[str],
    *,
    supported: Iterable[str] = SUPPORTED_LANGUAGES,
    default: str = DEFAULT_LANGUAGE,
) -> str:
    """
    Pick the response language for a request.

    First match wins: explicit query value, preference cookie, the first two
    characters of ``Accept-Language``, then the default. Unsupported values
    at any level are skipped, never rejected.
    """
    supported = tuple(supported)
    if query in supported:
        return query  # type: ignore[return-value]
    if cookie in supported:
        return cookie  # type: ignore[return-value]
    if header:
        prefix = header[:2].lower()
        if prefix in supported:
            return prefix
    return default


def resolve_request_language(request) -> str:
    """``resolve_language`` wired to a Flask request and the app config."""
    config = current_app.config
    return resolve_language(
        request.args.get("lang"),
        request.cookies.get(config["LANGUAGE_COOKIE_NAME"]),
        request.headers.get("Accept-Language"),
        supported=config["SUPPORTED_LANGUAGES"],
        default=config["DEFAULT_LANGUAGE"],
    )


def seed_languages() -> int:
    """
    Insert the default language rows that are missing.

    Safe to run at every startup and from concurrent processes: the unique
    constraint on ``code`` turns a duplicate insert into a no-op.
    """
    existing = {code for (code,) in db.session.query(Language.code).all()}
    inserted = 0
    for code, name in DEFAULT_LANGUAGE_ROWS:
        if code in existing:
            continue
        db.session.add(Language(code=code, name=name))
        try:
            db.session.commit()
            inserted += 1
        except IntegrityError:
            db.session.rollback()
            logger.info("Language %s was seeded concurrently; skipping.", code)
    if inserted:
        logger.info("Seeded %d default languages.", inserted)
    return inserted


def list_languages() -> List[Language]:
    return Language.query.order_by(Language.id.asc()).all()
