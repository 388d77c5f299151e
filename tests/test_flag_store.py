"""tests for the directory-backed flag store"""

import os
from unittest import mock

import pytest

from app.core.flag_store import FlagStore


def test_touch_creates_directory(tmp_path):
    """test touching a record creates the runtime directory"""
    store = FlagStore(tmp_path / "var" / "nested")
    assert store.exists(".flag") is False
    assert store.touch(".flag") is True
    assert store.exists(".flag") is True
    assert (tmp_path / "var" / "nested" / ".flag").read_text() == ""


def test_touch_keeps_content(store):
    """test touching an existing record leaves it alone"""
    store.write_file("record", "content")
    assert store.touch("record") is True
    assert store.read_file("record") == "content"


def test_delete(store):
    """test deleting present and absent records"""
    store.touch(".flag")
    assert store.delete(".flag") is True
    assert store.exists(".flag") is False
    assert store.delete(".flag") is True


def test_write_and_read(store, var_dir):
    """test written content is read back verbatim and no temp files remain"""
    assert store.write_file(".ip", "10.0.0.1,10.0.0.2") is True
    assert store.read_file(".ip") == "10.0.0.1,10.0.0.2"
    assert store.write_file(".ip", "10.0.0.3") is True
    assert store.read_file(".ip") == "10.0.0.3"
    assert sorted(os.listdir(var_dir)) == [".ip"]


def test_read_missing_raises(store):
    """test reading an absent record raises FileNotFoundError"""
    with pytest.raises(FileNotFoundError):
        store.read_file(".ip")


def test_write_failure_returns_false(store, var_dir):
    """test an OS error during write is reported as False and cleaned up"""
    with mock.patch("app.core.flag_store.os.replace", side_effect=PermissionError("denied")):
        assert store.write_file(".ip", "10.0.0.1") is False
    assert store.exists(".ip") is False
    assert os.listdir(var_dir) == []


def test_touch_failure_returns_false(store):
    """test an OS error during touch is reported as False"""
    with mock.patch("pathlib.Path.touch", side_effect=PermissionError("denied")):
        assert store.touch(".flag") is False


@pytest.mark.parametrize("name", ["", ".", "..", "../escape", "a/b"])
def test_invalid_record_names(store, name):
    """test record names cannot leave the runtime directory"""
    with pytest.raises(ValueError):
        store.exists(name)
