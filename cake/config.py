from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import dotenv_values, load_dotenv

load_dotenv()

DEFAULT_CONFIG_PATH = str(Path.home() / ".config" / "cake.conf")
DEFAULT_URL_TEMPLATE = "http://%s/rest/api/content/%s"
DEFAULT_LISTEN = ":8080"
DEFAULT_TIMEZONE = "Europe/Moscow"
DEFAULT_LOCALE = "ru"

ENV_KEYS = (
    "CAKE_LOGIN",
    "CAKE_PASSWORD",
    "CAKE_URL_HOST",
    "CAKE_URL_TEMPLATE",
    "CAKE_LISTEN",
    "CAKE_LOCALE",
    "TIMEZONE",
)


class ConfigError(Exception):
    pass


@dataclass
class Settings:
    login: str
    password: str
    timezone: ZoneInfo
    url_host: str = ""
    url_template: str = DEFAULT_URL_TEMPLATE
    listen: str = DEFAULT_LISTEN
    locale: str = DEFAULT_LOCALE

    @property
    def months(self) -> dict[str, int]:
        return MONTH_TABLES[self.locale]

    def page_url(self, page_id: str) -> str:
        if not self.url_host:
            raise ConfigError("url host is not configured, pass --url or set CAKE_URL_HOST")
        return self.url_template % (self.url_host, page_id)


MONTHS_RU = {
    "январь": 1,
    "февраль": 2,
    "март": 3,
    "апрель": 4,
    "май": 5,
    "июнь": 6,
    "июль": 7,
    "август": 8,
    "сентябрь": 9,
    "октябрь": 10,
    "ноябрь": 11,
    "декабрь": 12,
}

MONTHS_EN = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

MONTH_TABLES = {"ru": MONTHS_RU, "en": MONTHS_EN}


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    tz_name = tz_name or os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(tz_name)
    except (ValueError, KeyError):
        logging.warning("Invalid TIMEZONE %s, falling back to %s", tz_name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def _read_config_file(config_path: Optional[str]) -> dict[str, str]:
    if config_path is None:
        path = Path(DEFAULT_CONFIG_PATH)
        if not path.exists():
            return {}
    else:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigError(f"can't load config: {path} does not exist")
    logging.debug("Loading config from %s", path)
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def load_settings(
    config_path: Optional[str] = None,
    login: Optional[str] = None,
    password: Optional[str] = None,
    require_credentials: bool = True,
) -> Settings:
    """Merge the config file, the environment and explicit credentials.

    Later sources win: file values are overridden by environment
    variables, which are overridden by the ``login``/``password``
    arguments.
    """
    values = _read_config_file(config_path)
    for key in ENV_KEYS:
        if os.getenv(key):
            values[key] = os.environ[key]

    settings = Settings(
        login=login or values.get("CAKE_LOGIN", ""),
        password=password or values.get("CAKE_PASSWORD", ""),
        timezone=get_timezone(values.get("TIMEZONE")),
        url_host=values.get("CAKE_URL_HOST", ""),
        url_template=values.get("CAKE_URL_TEMPLATE", DEFAULT_URL_TEMPLATE),
        listen=values.get("CAKE_LISTEN", DEFAULT_LISTEN),
        locale=values.get("CAKE_LOCALE", DEFAULT_LOCALE).lower(),
    )
    if settings.locale not in MONTH_TABLES:
        raise ConfigError(f"unknown locale {settings.locale!r}, expected one of {sorted(MONTH_TABLES)}")
    if not require_credentials:
        return settings
    if not settings.login:
        raise ConfigError("login is not set, pass --login or set CAKE_LOGIN")
    if not settings.password:
        raise ConfigError("password is not set, pass --password or set CAKE_PASSWORD")
    return settings
