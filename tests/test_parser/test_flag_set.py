import io

import pytest

from cmdtree.exceptions import ConfigurationError, ParseError
from cmdtree.parser.flag_set import Flag, FlagSet, ValueSource
from cmdtree.values import Bool, Int64, String, StringArray


def build_flags(output=None):
    flags = FlagSet("test", output)
    flags.add_flag(Flag(name="all", value=Bool(), shorthand="a", no_opt_default="true"))
    flags.add_flag(Flag(name="brief", value=Bool(), shorthand="b", no_opt_default="true"))
    flags.add_flag(Flag(name="count", value=Int64(), shorthand="c"))
    flags.add_flag(Flag(name="name", value=String(), shorthand="n"))
    flags.add_flag(Flag(name="tag", value=StringArray(), shorthand="t"))
    return flags


def test_long_forms():
    flags = build_flags()
    positionals = flags.parse(["--name", "alice", "--count=3", "--all", "file"])
    assert positionals == ["file"]
    assert str(flags.value_of("name")) == "alice"
    assert flags.value_of("count").value == 3
    assert flags.get_bool("all")
    assert flags.lookup("name").source is ValueSource.FLAG


def test_short_forms_and_bundling():
    flags = build_flags()
    flags.parse(["-ab", "-c", "5", "-n=bob"])
    assert flags.get_bool("all")
    assert flags.get_bool("brief")
    assert flags.value_of("count").value == 5
    assert str(flags.value_of("name")) == "bob"


def test_bundle_takes_the_rest_of_the_token_as_operand():
    flags = build_flags()
    flags.parse(["-abc7"])
    assert flags.get_bool("all")
    assert flags.get_bool("brief")
    assert flags.value_of("count").value == 7


def test_bundle_takes_the_next_token_when_the_last_flag_needs_an_operand():
    flags = build_flags()
    assert flags.parse(["-abn", "carol", "rest"]) == ["rest"]
    assert str(flags.value_of("name")) == "carol"


def test_explicit_false_for_bool():
    flags = build_flags()
    flags.parse(["--all=false"])
    assert not flags.get_bool("all")
    assert flags.changed("all")


def test_terminator_and_single_dash():
    flags = build_flags()
    positionals = flags.parse(["-", "--all", "--", "--name", "-x"])
    assert positionals == ["-", "--name", "-x"]
    assert flags.get_bool("all")
    assert not flags.changed("name")


def test_repeated_list_flag_accumulates():
    flags = build_flags()
    flags.parse(["-t", "a", "--tag", "b,c"])
    assert flags.value_of("tag").value == ["a", "b", "c"]


def test_unknown_flag():
    flags = build_flags()
    with pytest.raises(ParseError, match="unknown flag: --nope"):
        flags.parse(["first", "--nope"])
    assert flags.args == ["first"]


def test_unknown_shorthand():
    flags = build_flags()
    with pytest.raises(ParseError, match="unknown shorthand flag: 'z' in -az"):
        flags.parse(["-az"])


def test_missing_operand():
    flags = build_flags()
    with pytest.raises(ParseError, match="flag needs an argument: --name"):
        flags.parse(["--name"])


def test_conversion_error_names_the_flag():
    flags = build_flags()
    with pytest.raises(ParseError) as excinfo:
        flags.parse(["--count=abc"])
    assert 'invalid argument "abc" for "-c, --count" flag' in str(excinfo.value)
    assert excinfo.value.name == "count"
    assert isinstance(excinfo.value.__cause__, ParseError)


def test_split_does_not_set_values():
    flags = build_flags()
    positionals = flags.split(["--name", "x", "pos", "--unknown", "-c", "4", "more"])
    assert positionals == ["pos", "more"]
    assert str(flags.value_of("name")) == ""
    assert not flags.changed("name")
    assert not flags.changed("count")


def test_re_adding_a_name_replaces_the_flag():
    flags = build_flags()
    replacement = Flag(name="name", value=String("override"))
    flags.add_flag(replacement)
    assert flags.lookup("name") is replacement
    assert flags.shorthand_lookup("n") is None
    assert len(flags) == 5


def test_later_flag_steals_shorthand():
    flags = FlagSet("test")
    flags.add_flag(Flag(name="version", value=Bool(), shorthand="v", no_opt_default="true"))
    flags.add_flag(Flag(name="verbose", value=Bool(), shorthand="v", no_opt_default="true"))
    flags.parse(["-v"])
    assert flags.shorthand_lookup("v").name == "verbose"
    assert flags.get_bool("verbose")
    assert not flags.get_bool("version")
    assert "version" in flags


def test_multi_character_shorthand_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        FlagSet("test").add_flag(Flag(name="name", value=String(), shorthand="nm"))


def test_deprecated_flag_writes_a_notice():
    output = io.StringIO()
    flags = FlagSet("test", output)
    flags.add_flag(Flag(name="old", value=String(), deprecated="use --new instead"))
    flags.parse(["--old", "x"])
    assert output.getvalue() == "Flag --old has been deprecated, use --new instead\n"


def test_visible_skips_hidden_flags():
    flags = FlagSet("test")
    flags.add_flag(Flag(name="shown", value=String()))
    flags.add_flag(Flag(name="secret", value=String(), hidden=True))
    assert [flag.name for flag in flags.visible()] == ["shown"]
