"""Tests for parser configuration: settings, process-wide and scoped overrides."""

import logging
import sys
import types

import pytest
from pydantic import ValidationError

from money_value import (
    Money,
    MoneyConfig,
    MoneyParser,
    MoneySettings,
    configure,
    get_config,
    get_settings,
    reset_config,
    using_parser,
)

pytestmark = pytest.mark.usefixtures("fresh_config")


class FixedParser:
    """Parser that ignores its input."""

    def __init__(self, amount="1.00"):
        self.amount = amount

    def parse(self, text):
        return Money(self.amount)


class TestSettings:

    def test_default_parser_factory(self):
        assert get_settings().parser is MoneyParser

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_parser_from_environment(self, monkeypatch):
        module = types.ModuleType("money_test_parsers")
        module.FixedParser = FixedParser
        monkeypatch.setitem(sys.modules, "money_test_parsers", module)
        monkeypatch.setenv("MONEY_PARSER", "money_test_parsers.FixedParser")
        get_settings.cache_clear()

        assert isinstance(get_config().parser, FixedParser)
        assert Money.parse("$500") == Money("1.00")

    def test_invalid_import_path(self, monkeypatch):
        monkeypatch.setenv("MONEY_PARSER", "money_value.does_not_exist.Parser")
        with pytest.raises(ValidationError):
            MoneySettings()


class TestMoneyConfig:

    def test_rejects_objects_without_parse(self):
        with pytest.raises(TypeError):
            MoneyConfig(object())

    def test_rejects_parser_class(self):
        with pytest.raises(TypeError, match="instance"):
            MoneyConfig(MoneyParser)

    def test_configure_rejects_parser_class(self):
        with pytest.raises(TypeError, match=r"MoneyParser\(\)"):
            configure(parser=MoneyParser)

    def test_from_settings(self):
        config = MoneyConfig.from_settings(MoneySettings())
        assert isinstance(config.parser, MoneyParser)


class TestConfigure:

    def test_lazy_default(self):
        assert isinstance(get_config().parser, MoneyParser)
        assert get_config() is get_config()

    def test_configure_installs_parser(self):
        parser = FixedParser("3.00")
        config = configure(parser=parser)

        assert get_config() is config
        assert Money.parse("whatever") == Money("3.00")

    def test_configure_from_settings(self):
        config = configure(settings=MoneySettings())
        assert isinstance(config.parser, MoneyParser)

    def test_configure_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger="money_value.config"):
            configure(parser=FixedParser())
        assert "FixedParser" in caplog.text

    def test_replacing_parser_warns(self, caplog):
        configure(parser=FixedParser())
        with caplog.at_level(logging.WARNING, logger="money_value.config"):
            configure(parser=MoneyParser())
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_reset_config(self):
        configure(parser=FixedParser())
        reset_config()
        assert isinstance(get_config().parser, MoneyParser)


class TestUsingParser:

    def test_scoped_override(self):
        with using_parser(FixedParser("7.00")) as config:
            assert get_config() is config
            assert Money.parse("$1") == Money("7.00")
        assert Money.parse("$1") == Money("1.00")

    def test_scoped_override_beats_process_config(self):
        configure(parser=FixedParser("2.00"))
        with using_parser(FixedParser("8.00")):
            assert Money.parse("x") == Money("8.00")
        assert Money.parse("x") == Money("2.00")

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with using_parser(FixedParser("7.00")):
                raise RuntimeError("boom")
        assert isinstance(get_config().parser, MoneyParser)
