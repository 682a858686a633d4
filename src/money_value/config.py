"""
Parser configuration for Money.parse().

The active parser lives in a MoneyConfig. It is resolved in this order:

1. a scoped override installed with ``using_parser()`` (a ContextVar, so
   it is local to the current thread / asyncio task);
2. the process-wide configuration installed with ``configure()`` at
   start-up;
3. a configuration built lazily from ``MoneySettings`` (env prefix
   ``MONEY_``), i.e. ``MONEY_PARSER=mypackage.parsers.EuroParser``.

``configure()`` is meant to be called once during initialization. Changing
the process-wide parser while other threads are parsing needs external
synchronization; prefer ``using_parser()`` for temporary overrides.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Protocol, runtime_checkable

from pydantic import Field, ImportString
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from .core import Money


logger = logging.getLogger(__name__)


@runtime_checkable
class Parser(Protocol):
    """Anything that turns free text into Money."""

    def parse(self, text: str) -> Money: ...


class MoneySettings(BaseSettings):
    """Settings loaded from environment variables (prefix ``MONEY_``)."""

    model_config = SettingsConfigDict(
        env_prefix="MONEY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Class or zero-argument factory returning a Parser
    parser: ImportString[Callable[[], Any]] = Field(
        default="money_value.parser.MoneyParser",
        validate_default=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> MoneySettings:
    """Return cached settings for the current process."""
    settings = MoneySettings()
    logger.debug("Loaded money settings: parser=%r", settings.parser)
    return settings


@dataclass(frozen=True)
class MoneyConfig:
    """Explicit configuration handed to Money.parse()."""

    parser: Parser

    def __post_init__(self) -> None:
        if isinstance(self.parser, type):
            raise TypeError(
                f"parser must be an instance, got the class {self.parser.__name__}; "
                f"pass {self.parser.__name__}() instead"
            )
        if not isinstance(self.parser, Parser):
            raise TypeError(
                f"parser must provide parse(text) -> Money, "
                f"got {type(self.parser).__name__}"
            )

    @classmethod
    def from_settings(cls, settings: Optional[MoneySettings] = None) -> MoneyConfig:
        settings = settings if settings is not None else get_settings()
        return cls(parser=settings.parser())


_process_config: Optional[MoneyConfig] = None
_scoped_config: ContextVar[Optional[MoneyConfig]] = ContextVar(
    "money_value_scoped_config", default=None
)


def get_config() -> MoneyConfig:
    """Return the configuration Money.parse() should use right now."""
    global _process_config

    scoped = _scoped_config.get()
    if scoped is not None:
        return scoped
    if _process_config is None:
        _process_config = MoneyConfig.from_settings()
    return _process_config


def configure(
    parser: Optional[Parser] = None,
    settings: Optional[MoneySettings] = None,
) -> MoneyConfig:
    """
    Install the process-wide configuration.

    With ``parser`` the given instance is used as is; otherwise the parser
    factory named by ``settings`` (or the environment) is instantiated.
    """
    global _process_config

    config = MoneyConfig(parser) if parser is not None else MoneyConfig.from_settings(settings)
    if _process_config is not None and _process_config.parser is not config.parser:
        logger.warning(
            "Replacing money parser %s with %s",
            type(_process_config.parser).__name__,
            type(config.parser).__name__,
        )
    _process_config = config
    logger.info("Money parser configured: %s", type(config.parser).__name__)
    return config


def reset_config() -> None:
    """Forget the process-wide configuration; the next lookup reloads settings."""
    global _process_config
    _process_config = None


@contextmanager
def using_parser(parser: Parser) -> Iterator[MoneyConfig]:
    """Use ``parser`` for Money.parse() inside the ``with`` block only."""
    config = MoneyConfig(parser)
    token = _scoped_config.set(config)
    try:
        yield config
    finally:
        _scoped_config.reset(token)
