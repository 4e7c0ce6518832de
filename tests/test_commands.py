"""Tests for the command layer."""

import asyncio
import json

import pytest

from message_variables.commands import (
    ArgumentTypeError,
    CommandResult,
    MissingArgumentError,
    UnknownCommandError,
    format_help,
    get_all_command_schemas,
    get_command_schema,
)
from message_variables.exceptions import MessageNotFoundError
from message_variables.predicates import FieldMatchPredicate


def run(session, name, args=None, value=None):
    return asyncio.run(session.dispatcher.execute(name, args, value))


class TestSchemas:
    def test_four_commands(self):
        names = [schema["name"] for schema in get_all_command_schemas()]
        assert names == [
            "set-message-variable",
            "get-message-variable",
            "get-all-message-variables",
            "delete-message-variable",
        ]

    def test_alias_lookup(self):
        assert get_command_schema("flushmesvar")["name"] == "delete-message-variable"

    def test_unknown_lookup(self):
        assert get_command_schema("nope") is None

    def test_help_marks_required(self):
        text = format_help(get_command_schema("setmesvar"))
        assert "key=<variable_name>" in text
        assert "[mes=<number>]" in text
        assert "setmesvar" in text


class TestSetCommand:
    def test_returns_value(self, session):
        assert run(session, "set-message-variable", {"key": "hp", "mes": 1}, "10") == "10"

    def test_then_get_all(self, session, conversation):
        before = dict(conversation.messages[2].variables[0])
        run(session, "setmesvar", {"key": "hp", "mes": 2}, "10")
        result = json.loads(run(session, "getmesvars", {"mes": 2}))
        assert result == {**before, "hp": "10"}

    def test_default_targets_last_non_system(self, session, conversation):
        run(session, "setmesvar", {"key": "hp"}, "10")
        assert conversation.messages[3].variables == [{"hp": "10"}]

    def test_missing_key(self, session, conversation, scheduler):
        with pytest.raises(MissingArgumentError) as exc_info:
            run(session, "setmesvar", {"mes": 1}, "10")
        assert exc_info.value.argument == "key"
        assert conversation.messages[1].variables is None
        assert scheduler.chat_saves == 0

    def test_missing_value(self, session, conversation, scheduler):
        with pytest.raises(MissingArgumentError) as exc_info:
            run(session, "setmesvar", {"key": "hp", "mes": 1})
        assert exc_info.value.argument == "value"
        assert conversation.messages[1].variables is None
        assert "hp" not in conversation.metadata.get("variables", {})
        assert scheduler.chat_saves == 0
        assert scheduler.metadata_saves == 0

    def test_missing_message(self, session, scheduler):
        with pytest.raises(MessageNotFoundError) as exc_info:
            run(session, "setmesvar", {"key": "hp", "mes": 42}, "10")
        assert "42" in str(exc_info.value)
        assert scheduler.chat_saves == 0

    def test_message_id_as_string(self, session, conversation):
        run(session, "setmesvar", {"key": "hp", "mes": "1"}, "10")
        assert conversation.messages[1].variables == [{"hp": "10"}]

    def test_bad_message_id(self, session):
        with pytest.raises(ArgumentTypeError):
            run(session, "setmesvar", {"key": "hp", "mes": "last"}, "10")

    def test_bad_filter(self, session):
        with pytest.raises(ArgumentTypeError):
            run(session, "setmesvar", {"key": "hp", "filter": "is_user=true"}, "10")

    def test_with_filter(self, session, conversation):
        predicate = FieldMatchPredicate({"is_user": "true"})
        run(session, "setmesvar", {"key": "hp", "mes": 0, "filter": predicate}, "10")
        assert conversation.messages[1].variables == [{"hp": "10"}]

    def test_composite_value_stored_as_json(self, session, conversation):
        run(session, "setmesvar", {"key": "inv", "mes": 1}, ["sword"])
        assert conversation.messages[1].variables == [{"inv": '["sword"]'}]

    def test_composite_keeps_shape_after_indexed_write(self, session):
        run(session, "setmesvar", {"key": "inv", "mes": 1}, ["sword"])
        plain = json.loads(run(session, "getmesvars", {"mes": 1}))
        run(session, "setmesvar", {"key": "inv", "index": 1, "mes": 1}, "shield")
        indexed = json.loads(run(session, "getmesvars", {"mes": 1}))
        assert plain == {"inv": '["sword"]'}
        assert indexed == {"inv": '["sword","shield"]'}


class TestGetCommand:
    def test_numeric_coercion(self, session):
        run(session, "setmesvar", {"key": "n", "mes": 1}, "5")
        assert run(session, "getmesvar", {"key": "n", "mes": 1}) == 5

    def test_empty_string_preserved(self, session):
        run(session, "setmesvar", {"key": "n", "mes": 1}, "")
        assert run(session, "getmesvar", {"key": "n", "mes": 1}) == ""

    def test_missing_variable_is_empty_string(self, session):
        assert run(session, "getmesvar", {"key": "nope", "mes": 1}) == ""

    def test_key_from_unnamed_value(self, session):
        assert run(session, "getmesvar", {"mes": 2}, "score") == 1

    def test_missing_key(self, session):
        with pytest.raises(MissingArgumentError):
            run(session, "getmesvar", {"mes": 2})

    def test_missing_message(self, session):
        with pytest.raises(MessageNotFoundError):
            run(session, "getmesvar", {"key": "score", "mes": 10})

    def test_indexed_round_trip_scalar(self, session):
        run(session, "setmesvar", {"key": "stats", "index": "str", "mes": 1}, "strong")
        assert run(session, "getmesvar", {"key": "stats", "index": "str", "mes": 1}) == "strong"

    def test_indexed_round_trip_composite(self, session):
        run(session, "setmesvar", {"key": "stats", "index": "inv", "mes": 1}, {"slots": [1, 2]})
        result = run(session, "getmesvar", {"key": "stats", "index": "inv", "mes": 1})
        assert json.loads(result) == {"slots": [1, 2]}

    def test_numeric_index_builds_list(self, session, conversation):
        run(session, "setmesvar", {"key": "k", "index": "0", "mes": 1}, "x")
        assert conversation.messages[1].variables[0]["k"] == '["x"]'

    def test_whole_float_index_is_position(self, session, conversation):
        run(session, "setmesvar", {"key": "k", "index": 1.0, "mes": 1}, "x")
        assert conversation.messages[1].variables[0]["k"] == '[null,"x"]'
        assert run(session, "getmesvar", {"key": "k", "index": 1.0, "mes": 1}) == "x"

    def test_non_scalar_index_rejected(self, session):
        with pytest.raises(ArgumentTypeError):
            run(session, "setmesvar", {"key": "k", "index": [1], "mes": 1}, "x")

    def test_key_index_builds_object(self, session, conversation):
        run(session, "setmesvar", {"key": "k", "index": "a", "mes": 1}, "x")
        assert conversation.messages[1].variables[0]["k"] == '{"a":"x"}'

    def test_indexed_read_of_plain_text(self, session):
        run(session, "setmesvar", {"key": "k", "mes": 1}, "plain")
        assert run(session, "getmesvar", {"key": "k", "index": 0, "mes": 1}) == "plain"

    def test_negative_ref_with_filter(self, session, conversation):
        conversation.messages[1].variables = [{"who": "first"}]
        conversation.messages[3].variables = [{"who": "second"}]
        predicate = FieldMatchPredicate({"is_user": "true"})
        assert run(session, "getmesvar", {"key": "who", "mes": -1, "filter": predicate}) == "second"
        assert run(session, "getmesvar", {"key": "who", "mes": -2, "filter": predicate}) == "first"


class TestGetAllCommand:
    def test_empty_table(self, session):
        assert run(session, "getmesvars", {"mes": 1}) == "{}"

    def test_message_from_unnamed_value(self, session):
        assert json.loads(run(session, "getmesvars", {}, "2")) == {"score": "1"}

    def test_empty_unnamed_value_is_default(self, session):
        run(session, "setmesvar", {"key": "hp"}, "3")
        assert json.loads(run(session, "getmesvars", {}, "")) == {"hp": "3"}

    def test_negative_ref_without_filter(self, session, conversation):
        conversation.messages[-1].variables = [{"note": "sys"}]
        assert json.loads(run(session, "getmesvars", {"mes": -1})) == {"note": "sys"}


class TestDeleteCommand:
    def test_returns_empty_string(self, session):
        assert run(session, "flushmesvar", {"key": "score", "mes": 2}) == ""

    def test_twice_is_noop(self, session, conversation):
        run(session, "flushmesvar", {"key": "score", "mes": 2})
        run(session, "flushmesvar", {"key": "score", "mes": 2})
        assert conversation.messages[2].variables == [{}]

    def test_key_from_unnamed_value(self, session, conversation):
        run(session, "delete-message-variable", {"mes": 2}, "score")
        assert conversation.messages[2].variables == [{}]

    def test_missing_key(self, session):
        with pytest.raises(MissingArgumentError):
            run(session, "flushmesvar", {"mes": 2})

    def test_message_without_variables(self, session, conversation):
        run(session, "flushmesvar", {"key": "score", "mes": 1})
        assert conversation.messages[1].variables is None


class TestDispatch:
    def test_success_result(self, session):
        result = asyncio.run(session.run_command("getmesvar", {"key": "score", "mes": 2}))
        assert result == CommandResult(command="getmesvar", success=True, result=1)

    def test_failure_result(self, session):
        result = asyncio.run(session.run_command("getmesvar", {"key": "score", "mes": 9}))
        assert result.success is False
        assert result.error == "message 9 does not exist"

    def test_unknown_command_result(self, session):
        result = asyncio.run(session.run_command("nope"))
        assert result.success is False
        assert "Unknown command" in result.error

    def test_execute_unknown_raises(self, session):
        with pytest.raises(UnknownCommandError):
            run(session, "nope")

    def test_definitions(self, session):
        assert len(session.dispatcher.get_command_definitions()) == 4
