import pytest
from pathlib import Path
from unittest.mock import MagicMock

from shardcache.core.command_handler import CommandHandler
from shardcache.domain.exceptions import DeleteFailed, ReadFailed, UnsupportedSerializer
from shardcache.domain.interfaces.user_interface import UserInterface
from shardcache.infrastructure.cache.file_store import FileCacheStore


@pytest.fixture
def mock_store():
    return MagicMock(spec=FileCacheStore)


@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)


@pytest.fixture
def command_handler(mock_store, mock_ui):
    """Fixture to create CommandHandler with a mocked store."""
    return CommandHandler(store=mock_store, ui=mock_ui)


def test_handle_put(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    """Test that handle_put stores the raw string value."""
    assert command_handler.handle_put("greeting", "hello", ttl=60, serializer="json") is True
    mock_store.add.assert_called_once_with("greeting", "hello", ttl=60, serializer="json")
    mock_ui.display_info.assert_called_once_with("Stored key 'greeting'.")


def test_handle_put_parses_json(command_handler: CommandHandler, mock_store: MagicMock):
    command_handler.handle_put("cfg", '{"debug": true}', parse_json=True)
    mock_store.add.assert_called_once_with("cfg", {"debug": True}, ttl=None, serializer=None)


def test_handle_put_invalid_json(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    assert command_handler.handle_put("cfg", "{oops", parse_json=True) is False
    mock_store.add.assert_not_called()
    mock_ui.display_error.assert_called_once()
    assert mock_ui.display_error.call_args.args[0].startswith("Value is not valid JSON")


def test_handle_put_error(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    """Test that store errors during put are displayed."""
    mock_store.add.side_effect = UnsupportedSerializer("nope")
    assert command_handler.handle_put("k", "v", serializer="nope") is False
    mock_ui.display_error.assert_called_once_with("Put failed: Unsupported serializer: 'nope'")


def test_handle_get_hit(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    mock_store.get.return_value = {"a": 1}
    assert command_handler.handle_get("k") is True
    mock_ui.display_output.assert_called_once_with({"a": 1})


def test_handle_get_miss(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    mock_store.get.side_effect = lambda key, default: default
    assert command_handler.handle_get("k") is False
    mock_ui.display_info.assert_called_once_with("No cached value for key 'k'.")
    mock_ui.display_output.assert_not_called()


def test_handle_get_cached_none_is_a_hit(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    mock_store.get.return_value = None
    assert command_handler.handle_get("k") is True
    mock_ui.display_output.assert_called_once_with(None)


def test_handle_get_error(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    mock_store.get.side_effect = ReadFailed("/cache/ab/cd/abcd.cache")
    assert command_handler.handle_get("k") is False
    mock_ui.display_error.assert_called_once_with("Get failed: Failed to read cache file: /cache/ab/cd/abcd.cache")


@pytest.mark.parametrize("present, message", [
    (True, "All 2 key(s) are cached."),
    (False, "Not all keys are cached."),
])
def test_handle_has(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock, present, message):
    mock_store.has.return_value = present
    assert command_handler.handle_has(["a", "b"]) is present
    mock_store.has.assert_called_once_with(["a", "b"])
    mock_ui.display_info.assert_called_once_with(message)


def test_handle_invalidate(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    assert command_handler.handle_invalidate(["a", "b"]) is True
    mock_store.invalidate.assert_called_once_with(["a", "b"])
    mock_ui.display_info.assert_called_once_with("Invalidated 2 key(s).")


def test_handle_invalidate_error(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    mock_store.invalidate.side_effect = DeleteFailed("/cache/x")
    assert command_handler.handle_invalidate(["a"]) is False
    mock_ui.display_error.assert_called_once_with("Invalidate failed: Failed to delete cache path: /cache/x")


def test_handle_clear(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    assert command_handler.handle_clear() is True
    mock_store.clear.assert_called_once_with()
    mock_ui.display_info.assert_called_once()


def test_handle_path(command_handler: CommandHandler, mock_store: MagicMock, mock_ui: MagicMock):
    mock_store.path_for.return_value = Path("/cache/ab/cd/abcd.cache")
    assert command_handler.handle_path("k") is True
    mock_ui.display_output.assert_called_once_with("/cache/ab/cd/abcd.cache")


def test_handle_info_summarizes_real_store(store: FileCacheStore, cache_root: Path, mock_ui: MagicMock):
    store.add("a", "x" * 10)
    store.add("b", "y" * 10)
    expected_bytes = sum(p.stat().st_size for p in store.entry_paths())
    handler = CommandHandler(store=store, ui=mock_ui)

    assert handler.handle_info() is True

    title, columns, rows = mock_ui.display_table.call_args.args
    assert title == "Cache"
    assert columns == ["Setting", "Value"]
    rows = dict(rows)
    assert rows["Root"] == cache_root
    assert rows["Entries"] == 2
    assert rows["Size (bytes)"] == expected_bytes
    assert rows["Default serializer"] == "serialize"
