import pytest

from optbind import (
    BooleanOption,
    DoubleOption,
    IllegalOptionValueError,
    IntegerOption,
    LongOption,
    NotFlagError,
    Parser,
    SetupError,
    StringOption,
    UnknownOptionError,
    UnknownSuboptionError,
)
from optbind.validators import Interval


def test_parse_fills_options(parser):
    size = parser.add_option(IntegerOption("size", "size", short="s"))
    assert parser.value(size) is None
    parser.parse(["--size=100"], "en_US")
    assert parser.value(size) == 100


def test_standard_options(parser):
    verbose = parser.add_option(BooleanOption("verbose", "forces verbose execution", short="v"))
    size = parser.add_option(IntegerOption("size", short="s"))
    name = parser.add_option(StringOption("name", short="n"))
    fraction = parser.add_option(DoubleOption("fraction", short="f"))
    missing = parser.add_option(BooleanOption("missing", short="m"))
    careful = parser.add_option(BooleanOption("careful"))
    bignum = parser.add_option(LongOption("bignum", short="b"))

    big = (1 << 31) + 1
    remaining = parser.parse(
        ["-v", "--size=100", "-b", str(big), "-n", "foo", "-f", "0.1", "rest"],
        "en_US",
    )

    assert parser.value(verbose) is True
    assert parser.value(size) == 100
    assert parser.value(name) == "foo"
    assert parser.value(fraction) == 0.1
    assert parser.value(missing) is None
    assert parser.value(careful) is None
    assert parser.value(bignum) == big
    assert remaining == ["rest"]
    assert parser.remaining == ["rest"]


def test_long_option_separate_value(parser):
    size = parser.add_option(IntegerOption("size", short="s"))
    parser.parse(["--size", "7"])
    assert parser.value(size) == 7
    assert parser.remaining == []


def test_long_option_empty_attached_value(parser):
    name = parser.add_option(StringOption("name"))
    parser.parse(["--name=", "rest"])
    assert parser.value(name) == ""
    assert parser.remaining == ["rest"]


def test_long_option_value_containing_equals(parser):
    define = parser.add_option(StringOption("define"))
    parser.parse(["--define=key=value"])
    assert parser.value(define) == "key=value"


def test_flag_ignores_attached_value(parser):
    verbose = parser.add_option(BooleanOption("verbose"))
    parser.parse(["--verbose=no", "rest"])
    assert parser.value(verbose) is True
    assert parser.remaining == ["rest"]


def test_value_option_consumes_option_like_token(parser):
    name = parser.add_option(StringOption("name", short="n"))
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    parser.parse(["-n", "-v"])
    assert parser.value(name) == "-v"
    assert parser.value(verbose) is None


def test_defaults(parser):
    boolean1 = parser.add_option(BooleanOption("boolean1"))
    boolean2 = parser.add_option(BooleanOption("boolean2"))
    boolean3 = parser.add_option(BooleanOption("boolean3"))
    boolean4 = parser.add_option(BooleanOption("boolean4"))
    int1 = parser.add_option(IntegerOption("int1"))
    int2 = parser.add_option(IntegerOption("int2"))
    int3 = parser.add_option(IntegerOption("int3"))
    string1 = parser.add_option(StringOption("string1"))
    string2 = parser.add_option(StringOption("string2"))

    parser.parse(["--boolean1", "--boolean2", "--int1=42", "--int2=42", "--string1=Hello"])

    assert parser.value(boolean1) is True
    assert parser.value(boolean2, False) is True
    assert parser.value(boolean3) is None
    assert parser.value(boolean4, False) is False
    assert parser.value(int1) == 42
    assert parser.value(int2, 36) == 42
    assert parser.value(int3, 36) == 36
    assert parser.value(string1, "Goodbye") == "Hello"
    assert parser.value(string2, "Goodbye") == "Goodbye"


def test_multiple_uses(parser):
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    parser.add_option(BooleanOption("foo", short="f"))
    parser.add_option(BooleanOption("bar", short="b"))
    parser.parse(["--foo", "-v", "-v", "--verbose", "-v", "-b", "rest"])

    assert parser.values(verbose) == [True, True, True, True]
    assert parser.remaining == ["rest"]


def test_multiple_uses_five_flags(parser):
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    parser.parse(["-v"] * 5)
    assert len(parser.values(verbose)) == 5


def test_multiple_values_keep_order(parser):
    include = parser.add_option(StringOption("include", short="I"))
    parser.parse(["-I", "a", "--include=b", "--include", "c"])
    assert parser.values(include) == ["a", "b", "c"]
    assert parser.value(include) == "a"


def test_values_empty(parser):
    include = parser.add_option(StringOption("include"))
    parser.parse([])
    assert parser.values(include) == []
    assert not parser.has_values(include)


def test_combined_flags(parser):
    alt = parser.add_option(BooleanOption("alt", short="a"))
    debug = parser.add_option(BooleanOption("debug", short="d"))
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    parser.parse(["-dv"])

    assert parser.value(alt) is None
    assert parser.value(debug) is True
    assert parser.value(verbose) is True


def test_combined_flags_repeated(parser):
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    parser.parse(["-vvv", "-v"])
    assert len(parser.values(verbose)) == 4


def test_combined_flags_not_a_flag(parser):
    parser.add_option(BooleanOption("verbose", short="v"))
    parser.add_option(IntegerOption("debug", short="d"))

    with pytest.raises(NotFlagError) as e:
        parser.parse(["-vd", "2"])
    assert e.value.token == "-vd"
    assert e.value.suboption == "d"
    assert isinstance(e.value, UnknownOptionError)


def test_combined_flags_unknown_suboption(parser):
    parser.add_option(BooleanOption("debug", short="d"))
    parser.add_option(BooleanOption("verbose", short="v"))

    with pytest.raises(UnknownSuboptionError) as e:
        parser.parse(["-dxv"])
    assert e.value.token == "-dxv"
    assert e.value.suboption == "x"
    assert isinstance(e.value, UnknownOptionError)


def test_explicitly_terminated_options(parser):
    alt = parser.add_option(BooleanOption("alt", short="a"))
    debug = parser.add_option(BooleanOption("debug", short="d"))
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    fraction = parser.add_option(DoubleOption("fraction", short="f"))
    parser.parse(["-a", "hello", "-d", "-f", "10", "--", "goodbye", "-v", "welcome", "-f", "-10"])

    assert parser.value(alt) is True
    assert parser.value(debug) is True
    assert parser.value(verbose) is None
    assert parser.value(fraction) == 10.0
    assert parser.remaining == ["hello", "goodbye", "-v", "welcome", "-f", "-10"]


def test_delimiter_after_delimiter_is_leftover(parser):
    parser.parse(["--", "--", "--unknown", "-x"])
    assert parser.remaining == ["--", "--unknown", "-x"]


def test_bad_format(parser):
    parser.add_option(IntegerOption("size", short="s"))
    with pytest.raises(IllegalOptionValueError) as e:
        parser.parse(["--size=blah"])
    assert e.value.value == "blah"


def test_reset_between_parse(parser):
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    size = parser.add_option(IntegerOption("size", short="s"))
    parser.parse(["-v", "-s", "3", "rest"])
    assert parser.value(verbose) is True

    parser.parse(["--size=4"])
    assert parser.value(verbose) is None
    assert parser.values(size) == [4]
    assert parser.remaining == []


def test_failed_parse_retains_nothing(parser):
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    parser.add_option(IntegerOption("size", short="s"))
    parser.parse(["-v", "rest"])

    with pytest.raises(IllegalOptionValueError):
        parser.parse(["-v", "leftover", "-s", "blah"])

    assert not parser.has_values(verbose)
    assert parser.remaining == []


def test_locale(parser):
    fraction = parser.add_option(DoubleOption("fraction", short="f"))
    parser.parse(["--fraction=0.2"], "en_US")
    assert parser.value(fraction) == 0.2
    parser.parse(["--fraction=0,2"], "de_DE")
    assert parser.value(fraction) == 0.2


def test_locale_attribute(console):
    parser = Parser(locale="de_DE", console=console)
    fraction = parser.add_option(DoubleOption("fraction"))
    parser.parse(["--fraction=0,2"])
    assert parser.value(fraction) == 0.2
    assert str(parser.locale) == "de_DE"


def test_unknown_locale():
    with pytest.raises(SetupError):
        Parser(locale="xx_NOT_A_LOCALE")


def test_detached_option(parser):
    detached = BooleanOption("verbose", "forces verbose execution", short="v")
    assert parser.value(detached) is None
    with pytest.raises(UnknownOptionError) as e:
        parser.parse(["-v"])
    assert e.value.token == "-v"


def test_unknown_short_option(parser):
    parser.add_option(BooleanOption("verbose", short="v"))
    with pytest.raises(UnknownOptionError) as e:
        parser.parse(["-x"])
    assert e.value.token == "-x"
    assert type(e.value) is UnknownOptionError


def test_unknown_long_option_reports_full_token(parser):
    parser.add_option(IntegerOption("size"))
    with pytest.raises(UnknownOptionError) as e:
        parser.parse(["--sise=3"])
    assert e.value.token == "--sise=3"


def test_lone_hyphen_is_unknown(parser):
    with pytest.raises(UnknownOptionError):
        parser.parse(["-"])


def test_missing_value_for_string_option(parser):
    parser.add_option(BooleanOption("verbose", "forces verbose execution", short="v"))
    config = parser.add_option(StringOption("config", "configuration", short="c"))
    with pytest.raises(IllegalOptionValueError) as e:
        parser.parse(["-v", "-c"])
    assert e.value.option is config
    assert e.value.missing


def test_missing_value_for_long_option(parser):
    parser.add_option(StringOption("config"))
    with pytest.raises(IllegalOptionValueError):
        parser.parse(["--config"])


def test_whitespace_value_for_string_option(parser):
    option = parser.add_option(StringOption("option", "option", short="o"))
    parser.parse(["-o", " "])
    assert parser.value(option) == " "


def test_add_validator(parser):
    size = parser.add_option(IntegerOption("size", "size of something", short="s")).add_validator(Interval(0, 100))
    parser.parse(["--size=50"])
    assert parser.value(size) == 50

    with pytest.raises(IllegalOptionValueError) as e:
        parser.parse(["-s", "1000"])
    assert e.value.value == "1000"
    assert e.value.option is size

    parser.parse(["-s", "50"])
    assert parser.value(size) == 50


def test_add_option_duplicate_names(parser):
    parser.add_option(BooleanOption("verbose", short="v"))
    with pytest.raises(SetupError):
        parser.add_option(BooleanOption("verbose"))
    with pytest.raises(SetupError):
        parser.add_option(BooleanOption("version", short="v"))
    assert [x.long for x in parser.options] == ["verbose"]


def test_parse_string_tokens(parser):
    name = parser.add_option(StringOption("name", short="n"))
    assert parser.parse('-n "Hello World" rest') == ["rest"]
    assert parser.value(name) == "Hello World"


def test_parse_default_argv(parser, monkeypatch):
    verbose = parser.add_option(BooleanOption("verbose", short="v"))
    monkeypatch.setattr("sys.argv", ["my-script", "-v", "rest"])
    assert parser.parse() == ["rest"]
    assert parser.value(verbose) is True


def test_remaining_is_a_copy(parser):
    parser.parse(["rest"])
    parser.remaining.append("modified")
    assert parser.remaining == ["rest"]
