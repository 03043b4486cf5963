import pytest

from errors import InvalidTargetError
from targets import (
    BuiltinTarget,
    UploadedTarget,
    classify,
    normalize_builtin_id,
    split_targets,
    target_from_query,
)

SONG_ID = "0B8C3C1E-5B0F-4B8E-9D55-0F6A1C2D3E4F"


def test_classify_uuid_is_uploaded_and_lowercased():
    assert classify(SONG_ID) == UploadedTarget(SONG_ID.lower())


def test_classify_plain_key_is_builtin():
    assert classify("song-42") == BuiltinTarget("song-42")


def test_classify_near_uuid_is_builtin():
    # right shape, but "g" is not hex
    assert isinstance(classify("0b8c3c1e-5b0f-4b8e-9d55-0f6a1c2d3e4g"), BuiltinTarget)
    # missing a character in the last group
    assert isinstance(classify("0b8c3c1e-5b0f-4b8e-9d55-0f6a1c2d3e4"), BuiltinTarget)


def test_classify_blank_rejected():
    with pytest.raises(InvalidTargetError):
        classify("   ")


def test_split_targets_keeps_caller_spelling():
    keys = split_targets([SONG_ID, "song-1", "", SONG_ID.lower(), "song-1"])
    assert keys == {UploadedTarget(SONG_ID.lower()): SONG_ID, BuiltinTarget("song-1"): "song-1"}


def test_target_from_query():
    assert target_from_query(None, None) is None
    assert target_from_query(None, "song-1") == BuiltinTarget("song-1")
    assert target_from_query(SONG_ID, None) == UploadedTarget(SONG_ID.lower())
    with pytest.raises(InvalidTargetError):
        target_from_query(SONG_ID, "song-1")
    with pytest.raises(InvalidTargetError):
        target_from_query("not-a-uuid", None)
    with pytest.raises(InvalidTargetError):
        target_from_query(None, SONG_ID)
    assert target_from_query(None, " song-1 ") == BuiltinTarget("song-1")


def test_normalize_builtin_id():
    assert normalize_builtin_id("  song-1\t") == "song-1"
    with pytest.raises(ValueError, match="builtinSongId"):
        normalize_builtin_id(SONG_ID)
    with pytest.raises(ValueError, match="blank"):
        normalize_builtin_id("  ")
