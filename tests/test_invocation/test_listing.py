import io

import pytest

from cmdtree import Arg, Command, Enum, Int64, Option, String


async def output_of(command, *args, argv0=""):
    out = io.StringIO()
    invocation = command.invoke(*args).model_copy(update={"stdout": out, "argv0": argv0})
    await invocation.run()
    return out.getvalue()


def build_app(calls=None):
    calls = calls if calls is not None else []

    def record(inv):
        calls.append((inv.command.name, list(inv.args)))

    add = Command(
        use="add",
        short="add a user",
        args=[
            Arg(name="name", value=String(), required=True, description="user name"),
            Arg(name="age", value=Int64(), default="18"),
        ],
        options=[Option(flag="role", value=Enum(["admin", "member"]), default="member")],
        handler=record,
    )
    user = Command(use="user", aliases=["u"], short="manage users", children=[add])
    secret = Command(use="secret", hidden=True, handler=record)
    echo = Command(use="echo", aliases=["e"], handler=record)
    return Command(
        use="app",
        version="1.2.3",
        options=[Option(flag="config", shorthand="c", value=String(), description="config path")],
        children=[user, secret, echo],
    )


@pytest.mark.asyncio
async def test_list_commands_prints_paths_and_args():
    out = await output_of(build_app(), "--list-commands")
    assert "app:user" in out
    assert "app:user:add" in out
    assert "manage users" in out
    assert "name string (required)" in out
    assert "age int64 (default: 18)" in out
    assert "secret" not in out


@pytest.mark.asyncio
async def test_list_commands_does_not_run_handlers():
    calls = []
    await output_of(build_app(calls), "user", "add", "bob", "--list-commands")
    assert calls == []


@pytest.mark.asyncio
async def test_list_flags_prints_global_and_command_options():
    out = await output_of(build_app(), "--list-flags")
    assert "GLOBAL OPTIONS:" in out
    assert "--list-commands" in out
    assert "--config" in out
    assert "COMMAND-SPECIFIC OPTIONS:" in out
    assert "user:add" in out
    assert "--role" in out
    assert "admin|member" in out


@pytest.mark.asyncio
async def test_version_flag():
    out = await output_of(build_app(), "--version")
    assert out.strip() == "app 1.2.3"


@pytest.mark.asyncio
async def test_version_without_version_string():
    out = await output_of(Command(use="tool"), "-v")
    assert out.strip() == "tool unknown"


@pytest.mark.asyncio
async def test_help_lists_sections():
    out = await output_of(build_app(), "user", "add", "--help")
    assert "USAGE:" in out
    assert "app user add" in out
    assert "ARGUMENTS:" in out
    assert "name string (required)" in out
    assert "GLOBAL OPTIONS:" in out
    assert "ADD OPTIONS:" in out
    assert "admin|member" in out
    assert "(default: member)" in out


@pytest.mark.asyncio
async def test_help_lists_visible_subcommands_and_aliases():
    out = await output_of(build_app(), "user", "--help")
    assert "SUBCOMMANDS:" in out
    assert "add" in out
    assert "ALIASES:" in out
    assert "Run 'app user <subcommand> --help' for more information." in out

    root_help = await output_of(build_app())
    assert "secret" not in root_help


@pytest.mark.asyncio
async def test_argv0_dispatches_to_a_top_level_command():
    calls = []
    await output_of(build_app(calls), "hello", argv0="echo")
    await output_of(build_app(calls), argv0="e")
    assert calls == [("echo", ["hello"]), ("echo", [])]


@pytest.mark.asyncio
async def test_explicit_command_beats_argv0():
    calls = []
    await output_of(build_app(calls), "user", "add", "bob", argv0="echo")
    assert calls == [("add", ["bob"])]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "args, expected",
    [
        (["user:add", "bob"], ("add", ["bob"])),
        (["app:user:add", "bob"], ("add", ["bob"])),
        (["u", "add", "bob"], ("add", ["bob"])),
        (["--debug", "user", "add", "bob"], ("add", ["bob"])),
        (["--config", "app.toml", "secret"], ("secret", [])),
    ],
)
async def test_explicit_command_beats_argv0_in_every_form(args, expected):
    calls = []
    await output_of(build_app(calls), *args, argv0="echo")
    assert calls == [expected]


@pytest.mark.asyncio
async def test_argv0_applies_after_leading_flags():
    calls = []
    await output_of(build_app(calls), "--config", "app.toml", "hi", argv0="echo")
    assert calls == [("echo", ["hi"])]


@pytest.mark.asyncio
async def test_with_argv0_uses_the_basename():
    calls = []
    invocation = build_app(calls).invoke("x").with_argv0("/usr/local/bin/echo")
    assert invocation.argv0 == "echo"
    await invocation.run()
    assert calls == [("echo", ["x"])]
