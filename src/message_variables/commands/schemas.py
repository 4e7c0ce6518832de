"""Command declarations for the message variable commands."""

from __future__ import annotations

_MES_ARGUMENT: dict = {
    "name": "mes",
    "description": "message id, negative numbers count back from the last message",
    "types": ["number"],
    "default": "last non-system message",
}

_FILTER_ARGUMENT: dict = {
    "name": "filter",
    "description": "predicate to filter the chat history with, must return true or false",
    "types": ["predicate"],
}

_INDEX_ARGUMENT: dict = {
    "name": "index",
    "description": "list index or object key inside the stored value",
    "types": ["number", "string"],
}

SET_MESSAGE_VARIABLE_SCHEMA: dict = {
    "name": "set-message-variable",
    "aliases": ["setmesvar"],
    "description": "Set a message bound variable.",
    "returns": "the value that was set",
    "named_arguments": [
        {
            "name": "key",
            "description": "variable name",
            "types": ["variable_name"],
            "required": True,
        },
        _INDEX_ARGUMENT,
        _MES_ARGUMENT,
        _FILTER_ARGUMENT,
    ],
    "unnamed_arguments": [
        {
            "description": "value",
            "types": ["string", "number", "boolean", "list", "dictionary"],
            "required": True,
        },
    ],
}

GET_MESSAGE_VARIABLE_SCHEMA: dict = {
    "name": "get-message-variable",
    "aliases": ["getmesvar"],
    "description": "Get a message bound variable value and pass it down the pipe.",
    "returns": "message bound variable value",
    "named_arguments": [
        {
            "name": "key",
            "description": "variable name",
            "types": ["variable_name"],
        },
        _INDEX_ARGUMENT,
        _MES_ARGUMENT,
        _FILTER_ARGUMENT,
    ],
    "unnamed_arguments": [
        {
            "description": "variable name",
            "types": ["variable_name"],
        },
    ],
}

GET_ALL_MESSAGE_VARIABLES_SCHEMA: dict = {
    "name": "get-all-message-variables",
    "aliases": ["getmesvars"],
    "description": "Get a dictionary with all the message bound variables.",
    "returns": "JSON object of variable names to values",
    "named_arguments": [
        _MES_ARGUMENT,
        _FILTER_ARGUMENT,
    ],
    "unnamed_arguments": [
        {
            "description": "message id, negative numbers count back from the last message",
            "types": ["number"],
            "default": "last non-system message",
        },
    ],
}

DELETE_MESSAGE_VARIABLE_SCHEMA: dict = {
    "name": "delete-message-variable",
    "aliases": ["flushmesvar"],
    "description": "Delete a message variable.",
    "returns": "empty string",
    "named_arguments": [
        {
            "name": "key",
            "description": "variable name",
            "types": ["variable_name"],
        },
        _MES_ARGUMENT,
        _FILTER_ARGUMENT,
    ],
    "unnamed_arguments": [
        {
            "description": "variable name",
            "types": ["variable_name"],
        },
    ],
}

ALL_COMMAND_SCHEMAS: list[dict] = [
    SET_MESSAGE_VARIABLE_SCHEMA,
    GET_MESSAGE_VARIABLE_SCHEMA,
    GET_ALL_MESSAGE_VARIABLES_SCHEMA,
    DELETE_MESSAGE_VARIABLE_SCHEMA,
]


def get_all_command_schemas() -> list[dict]:
    """Return every command declaration."""
    return list(ALL_COMMAND_SCHEMAS)


def get_command_schema(name: str) -> dict | None:
    """Look up a declaration by command name or alias."""
    for schema in ALL_COMMAND_SCHEMAS:
        if name == schema["name"] or name in schema["aliases"]:
            return schema
    return None


def format_help(schema: dict) -> str:
    """One-paragraph usage text for a command."""
    parts = [schema["name"]]
    for arg in schema["named_arguments"]:
        token = f"{arg['name']}=<{'|'.join(arg['types'])}>"
        parts.append(token if arg.get("required") else f"[{token}]")
    for arg in schema["unnamed_arguments"]:
        token = f"<{arg['description']}>"
        parts.append(token if arg.get("required") else f"[{token}]")
    aliases = ", ".join(schema["aliases"])
    return f"{' '.join(parts)}\n    {schema['description']} (aliases: {aliases})"
