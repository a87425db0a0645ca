"""
Connection descriptor helpers.

Two descriptor forms are accepted:
- attribute form: `Host=db;Port=5432;Database=app;Username=app;SSL Mode=Require`
- URL form:       `postgresql://app:secret@db:5432/app?sslmode=require`

URL form is normalized to attribute form once at startup. asyncpg only speaks
DSNs and keyword arguments, so the attribute form is turned into `connect()`
keyword arguments by `connect_kwargs()`.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote, urlsplit

DEFAULT_PORT = 5432
DEFAULT_SSL_MODE = "Require"
URL_SCHEMES = ("postgresql://", "postgres://")

logger = logging.getLogger(__name__)


class ConnectionStringError(ValueError):
    pass


def is_url_form(raw: str) -> bool:
    return raw.lower().startswith(URL_SCHEMES)


def _ssl_mode_from_query(query: str) -> str:
    if not query:
        return DEFAULT_SSL_MODE
    for param in query.split("&"):
        parts = param.split("=")
        if len(parts) == 2 and parts[0].lower() == "sslmode":
            return unquote(parts[1])
    return DEFAULT_SSL_MODE


def _url_to_attributes(raw: str) -> str:
    parts = urlsplit(raw)

    host = parts.hostname or ""
    port = parts.port
    if port is None or port <= 0:
        port = DEFAULT_PORT
    database = parts.path.lstrip("/")

    user_info = parts.netloc.rpartition("@")[0] if "@" in parts.netloc else ""
    raw_user, sep, raw_password = user_info.partition(":")
    username = unquote(raw_user)
    password = unquote(raw_password) if sep else ""

    attributes = (
        f"Host={_quote(host)};Port={port};Database={_quote(database)};Username={_quote(username)}"
    )
    if password:
        attributes += f";Password={_quote(password)}"
    attributes += f";SSL Mode={_quote(_ssl_mode_from_query(parts.query))}"
    return attributes


def _quote(value: str) -> str:
    # Values that would break `;` splitting are double-quoted, inner quotes doubled.
    if ";" not in value and '"' not in value:
        return value
    return '"' + value.replace('"', '""') + '"'


def normalize_connection_string(raw: str) -> str:
    """
    Rewrite a `postgres://` / `postgresql://` URL into attribute form.

    Anything else is assumed to already be in attribute form and is returned
    as-is. A URL that cannot be parsed is also returned as-is.
    """
    if not is_url_form(raw):
        return raw

    try:
        return _url_to_attributes(raw)
    except ValueError:
        # Never log the raw value: it usually carries a password.
        logger.warning("Could not parse database URL; using it unchanged.")
        return raw


# Attribute keys are matched case-insensitively, ignoring spaces.
_KEY_ALIASES = {
    "host": "host",
    "server": "host",
    "port": "port",
    "database": "database",
    "db": "database",
    "initialcatalog": "database",
    "username": "user",
    "user": "user",
    "userid": "user",
    "uid": "user",
    "password": "password",
    "pwd": "password",
    "sslmode": "sslmode",
}

_SSL_MODES = {
    "disable": "disable",
    "allow": "allow",
    "prefer": "prefer",
    "require": "require",
    "verifyca": "verify-ca",
    "verify-ca": "verify-ca",
    "verifyfull": "verify-full",
    "verify-full": "verify-full",
}


def _split_segments(text: str) -> list[str]:
    """
    Split on `;` outside double quotes. Quotes are removed, `""` becomes `"`.
    """
    segments: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            if in_quotes and text[i + 1 : i + 2] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == ";" and not in_quotes:
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    if in_quotes:
        raise ConnectionStringError("Connection string has an unterminated quoted value.")
    segments.append("".join(current))
    return segments


def parse_attribute_string(text: str) -> dict[str, str]:
    """
    Split `Key=Value;Key=Value` into a dict with canonical keys.

    Values may be double-quoted to carry `;`. Unknown keys are kept
    (lowercased, spaces removed) so callers can decide what to do with them.
    Error messages name the segment position only; segments can hold secrets.
    """
    attributes: dict[str, str] = {}
    for index, segment in enumerate(_split_segments(text or ""), start=1):
        if not segment.strip():
            continue
        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConnectionStringError(f"Invalid connection string segment #{index}.")
        normalized_key = key.replace(" ", "").lower()
        attributes[_KEY_ALIASES.get(normalized_key, normalized_key)] = value.strip()
    return attributes


def connect_kwargs(text: str) -> dict[str, Any]:
    """
    Build asyncpg `connect()` / `create_pool()` keyword arguments.
    """
    attributes = parse_attribute_string(text)
    if not attributes.get("host"):
        raise ConnectionStringError("Connection string has no Host.")

    kwargs: dict[str, Any] = {"host": attributes["host"]}

    raw_port = attributes.get("port", "").strip()
    if raw_port:
        try:
            kwargs["port"] = int(raw_port)
        except ValueError as exc:
            raise ConnectionStringError(f"Invalid Port: {raw_port!r}.") from exc
    else:
        kwargs["port"] = DEFAULT_PORT

    for key in ("database", "user", "password"):
        if attributes.get(key):
            kwargs[key] = attributes[key]

    raw_ssl = attributes.get("sslmode", "").strip()
    if raw_ssl:
        ssl_mode = _SSL_MODES.get(raw_ssl.lower())
        if ssl_mode is None:
            raise ConnectionStringError(f"Unsupported SSL Mode: {raw_ssl!r}.")
        kwargs["ssl"] = ssl_mode

    return kwargs
