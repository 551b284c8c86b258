"""Tests for the scene payload validator."""

import sys
import pathlib
import json

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from services.validation import parse_scene, strip_code_fences


VALID = {
    "sceneDescription": "A",
    "imagePrompt": "B",
    "choices": ["Go north"],
}


def test_fenced_payload_is_parsed():
    raw = '```json\n{"sceneDescription":"A","imagePrompt":"B","choices":["Go north"]}\n```'
    scene = parse_scene(raw)
    assert scene is not None
    assert scene.model_dump(by_alias=True) == VALID


def test_bare_payload_is_returned_unmodified():
    data = {
        "sceneDescription": "  The cave is dark.\n\nWater drips.  ",
        "imagePrompt": "A dark cave, dripping water, torchlight",
        "choices": ["Light a torch", "Listen carefully", "Turn back"],
    }
    scene = parse_scene(json.dumps(data))
    assert scene is not None
    assert scene.model_dump(by_alias=True) == data


def test_extra_keys_are_kept():
    data = dict(VALID, mood="dark")
    scene = parse_scene(json.dumps(data))
    assert scene is not None
    assert scene.model_dump(by_alias=True) == data


def test_non_json_returns_none(caplog):
    with caplog.at_level("ERROR"):
        assert parse_scene("not json") is None
    assert "Failed to parse JSON response" in caplog.text
    assert "not json" in caplog.text


def test_missing_text_returns_none():
    assert parse_scene(None) is None


def test_empty_choices_returns_none(caplog):
    raw = '{"sceneDescription":"A","imagePrompt":"B","choices":[]}'
    with caplog.at_level("ERROR"):
        assert parse_scene(raw) is None
    assert "does not match the scene structure" in caplog.text


@pytest.mark.parametrize(
    "payload",
    [
        {"imagePrompt": "B", "choices": ["C"]},
        {"sceneDescription": "A", "choices": ["C"]},
        {"sceneDescription": "A", "imagePrompt": "B"},
        {"sceneDescription": "", "imagePrompt": "B", "choices": ["C"]},
        {"sceneDescription": "A", "imagePrompt": "", "choices": ["C"]},
        {"sceneDescription": "A", "imagePrompt": "B", "choices": "C"},
        {"scene_description": "A", "image_prompt": "B", "choices": ["C"]},
        ["A", "B", ["C"]],
        "just a string",
        None,
    ],
)
def test_structural_mismatch_returns_none(payload):
    assert parse_scene(json.dumps(payload)) is None


def test_choice_count_other_than_three_is_accepted_with_warning(caplog):
    with caplog.at_level("WARNING"):
        scene = parse_scene(json.dumps(VALID))
    assert scene is not None
    assert scene.choices == ["Go north"]
    assert "Expected 3 choices, model returned 1" in caplog.text


def test_three_choices_do_not_warn(caplog):
    data = dict(VALID, choices=["Go north", "Go south", "Wait"])
    with caplog.at_level("WARNING"):
        assert parse_scene(json.dumps(data)) is not None
    assert caplog.text == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('```json\n{"a": 1}\n```', '{"a": 1}'),
        ('```JSON{"a": 1}```', '{"a": 1}'),
        ('```\n[1, 2]\n```', '[1, 2]'),
        ('  {"a": 1}  \n', '{"a": 1}'),
        ('```json\n```json\n{"a": 1}\n```\n```', '{"a": 1}'),
        ('{"text": "use ``` here"}', '{"text": "use ``` here"}'),
    ],
)
def test_strip_code_fences(raw, expected):
    assert strip_code_fences(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '```json\n```\n{"a": 1}',
        "```",
        "",
        "not json",
    ],
)
def test_strip_code_fences_is_idempotent(raw):
    once = strip_code_fences(raw)
    assert strip_code_fences(once) == once


def test_fence_free_text_is_unchanged():
    text = '{"sceneDescription": "A"}'
    assert strip_code_fences(text) == text
