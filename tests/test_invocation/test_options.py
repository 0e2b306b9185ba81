import io

import pytest

from cmdtree import (
    Bool,
    Command,
    ConfigurationError,
    Int64,
    Option,
    ParseError,
    String,
    StringArray,
    ValidationError,
)


async def run(command, *args):
    err = io.StringIO()
    invocation = command.invoke(*args).model_copy(update={"stderr": err})
    await invocation.run()
    return invocation, err.getvalue()


def noop(inv):
    return None


def counted(**option_kwargs):
    value = Int64()
    option = Option(flag="count", shorthand="c", value=value, **option_kwargs)
    return Command(use="app", options=[option], handler=noop), value


@pytest.mark.asyncio
async def test_default_applies_when_nothing_else_does():
    root, value = counted(default="5")
    invocation, _ = await run(root)
    assert value.value == 5
    assert not invocation.flags.changed("count")


@pytest.mark.asyncio
async def test_first_non_empty_env_wins(monkeypatch):
    monkeypatch.setenv("APP_COUNT_A", "")
    monkeypatch.setenv("APP_COUNT_B", "9")
    monkeypatch.setenv("APP_COUNT_C", "12")
    root, value = counted(default="5", envs=["APP_COUNT_A", "APP_COUNT_B", "APP_COUNT_C"])
    invocation, _ = await run(root)
    assert value.value == 9
    assert invocation.flags.changed("count")


@pytest.mark.asyncio
async def test_invalid_env_value_falls_through_to_the_next(monkeypatch):
    monkeypatch.setenv("APP_COUNT_A", "many")
    monkeypatch.setenv("APP_COUNT_B", "3")
    root, value = counted(envs=["APP_COUNT_A", "APP_COUNT_B"])
    await run(root)
    assert value.value == 3


@pytest.mark.asyncio
async def test_command_line_beats_env(monkeypatch):
    monkeypatch.setenv("APP_COUNT", "9")
    root, value = counted(default="5", envs=["APP_COUNT"])
    await run(root, "-c", "2")
    assert value.value == 2


@pytest.mark.asyncio
async def test_list_default_is_replaced_by_explicit_values():
    tags = StringArray()
    root = Command(
        use="app",
        options=[Option(flag="tag", value=tags, default="a,b")],
        handler=noop,
    )
    await run(root, "--tag", "x", "--tag", "y")
    assert tags.value == ["x", "y"]


@pytest.mark.asyncio
async def test_invalid_default_is_a_configuration_error():
    root, _ = counted(default="five")
    with pytest.raises(ConfigurationError, match="invalid default 'five'"):
        await run(root)


@pytest.mark.asyncio
async def test_env_only_option_gets_its_value(monkeypatch):
    monkeypatch.setenv("APP_TOKEN", "secret")
    token = String()
    root = Command(
        use="app",
        options=[Option(envs=["APP_TOKEN"], value=token)],
        handler=noop,
    )
    invocation, _ = await run(root)
    assert token.value == "secret"
    assert "APP_TOKEN" not in invocation.flags


@pytest.mark.asyncio
async def test_required_options_are_reported_together(monkeypatch):
    monkeypatch.delenv("APP_REGION", raising=False)
    root = Command(
        use="app",
        options=[
            Option(flag="user", value=String(), required=True),
            Option(flag="password", value=String(), required=True),
            Option(flag="region", value=String(), required=True, envs=["APP_REGION"]),
            Option(flag="zone", value=String(), required=True, default="a"),
        ],
        handler=noop,
    )
    with pytest.raises(ValidationError) as excinfo:
        await run(root)
    assert excinfo.value.missing == ["password", "user"]
    assert "missing values for the required flags: password, user" in str(excinfo.value)


@pytest.mark.asyncio
async def test_required_option_satisfied_on_the_command_line():
    user = String()
    root = Command(
        use="app",
        options=[Option(flag="user", value=user, required=True)],
        handler=noop,
    )
    await run(root, "--user", "ann")
    assert user.value == "ann"


@pytest.mark.asyncio
async def test_required_options_are_not_checked_for_help():
    root = Command(
        use="app",
        options=[Option(flag="user", value=String(), required=True)],
        handler=noop,
    )
    await run(root, "--help")


@pytest.mark.asyncio
async def test_child_inherits_parent_flags():
    def make_tree(seen):
        verbose = Bool()
        child = Command(use="child", handler=lambda inv: seen.append(verbose.value))
        return Command(
            use="app",
            options=[Option(flag="verbose", shorthand="V", value=verbose)],
            children=[child],
        )

    seen = []
    await run(make_tree(seen), "child", "-V")
    await run(make_tree(seen), "--verbose", "child")
    await run(make_tree(seen), "child")
    assert seen == [True, True, False]


@pytest.mark.asyncio
async def test_child_flag_overrides_parent_flag():
    parent_name = String()
    child_name = String()
    seen = []
    child = Command(
        use="child",
        options=[Option(flag="name", value=child_name, default="child")],
        handler=lambda inv: seen.append(("child", child_name.value, parent_name.value)),
    )
    root = Command(
        use="app",
        options=[Option(flag="name", value=parent_name, default="root")],
        children=[child],
        handler=lambda inv: seen.append(("root", parent_name.value)),
    )
    await run(root, "child", "--name", "x")
    await run(root, "--name", "y")
    assert seen == [("child", "x", "root"), ("root", "y")]


@pytest.mark.asyncio
async def test_shorthand_moves_to_the_deeper_flag():
    force = Bool()
    child = Command(
        use="child",
        options=[Option(flag="force", shorthand="v", value=force)],
        handler=noop,
    )
    root = Command(use="app", children=[child])
    invocation, _ = await run(root, "child", "-v")
    assert force.value is True
    assert not invocation.flags.get_bool("version")


@pytest.mark.asyncio
async def test_deprecated_flag_writes_a_notice():
    root = Command(
        use="app",
        options=[Option(flag="old", value=String(), deprecated="use --new")],
        handler=noop,
    )
    _, err = await run(root, "--old", "x")
    assert "Flag --old has been deprecated, use --new" in err


@pytest.mark.asyncio
async def test_actions_run_for_changed_flags_only():
    calls = []
    root = Command(
        use="app",
        options=[
            Option(flag="mode", value=String(), action=lambda value: calls.append(("mode", str(value)))),
            Option(flag="level", value=String(), default="1", action=lambda value: calls.append(("level", str(value)))),
        ],
        handler=noop,
    )
    await run(root, "--mode", "fast")
    assert calls == [("mode", "fast")]


@pytest.mark.asyncio
async def test_most_specific_action_wins():
    calls = []
    child = Command(
        use="child",
        options=[Option(flag="mode", value=String(), action=lambda value: calls.append("child"))],
        handler=noop,
    )
    root = Command(
        use="app",
        options=[Option(flag="mode", value=String(), action=lambda value: calls.append("root"))],
        children=[child],
    )
    await run(root, "child", "--mode", "x")
    assert calls == ["child"]


@pytest.mark.asyncio
async def test_failing_action_is_a_validation_error():
    async def reject(value):
        raise RuntimeError("not allowed")

    root = Command(
        use="app",
        options=[Option(flag="mode", value=String(), action=reject)],
        handler=noop,
    )
    with pytest.raises(ValidationError, match="not allowed"):
        await run(root, "--mode", "x")


@pytest.mark.asyncio
async def test_bad_flag_value_is_a_parse_error():
    root, _ = counted()
    with pytest.raises(ParseError, match='invalid argument "many"'):
        await run(root, "--count", "many")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "option_kwargs, args",
    [
        ({"default": "anon"}, []),
        ({"envs": ["APP_USER"]}, []),
        ({}, ["--user", "cli"]),
    ],
)
async def test_any_source_satisfies_a_required_option(monkeypatch, option_kwargs, args):
    monkeypatch.setenv("APP_USER", "env")
    user = String()
    root = Command(
        use="app",
        options=[Option(flag="user", value=user, required=True, **option_kwargs)],
        handler=noop,
    )
    await run(root, *args)
    assert user.value in {"anon", "env", "cli"}
