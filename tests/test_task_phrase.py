"""Tests for turning spoken add-requests into task name, deadline and priority."""

import pytest
from datetime import datetime

from voicetasks.models.task import TaskPriority
from voicetasks.voice.task_phrase import clean_task_name, parse_task_from_speech, strip_priority_words
from voicetasks.voice.types import Confidence


class TestParseTaskFromSpeech:
    """Test parse_task_from_speech()."""

    def test_add_task_with_date_and_time(self, now):
        parsed = parse_task_from_speech("Add task call John tomorrow at 5 PM", now=now)
        assert parsed.task_name == "call John"
        assert parsed.deadline == datetime(2026, 10, 15, 17, 0)
        assert parsed.priority == TaskPriority.MEDIUM
        assert parsed.confidence == Confidence.HIGH

    def test_priority_prefix_and_weekday_noon(self, now):
        parsed = parse_task_from_speech("urgent: submit report by Monday noon", now=now)
        assert parsed.priority == TaskPriority.HIGH
        assert parsed.deadline == datetime(2026, 10, 19, 12, 0)
        assert parsed.task_name == "submit report"

    @pytest.mark.parametrize("speech,name", [
        ("Remind me to water the plants", "water the plants"),
        ("Don't forget to buy eggs", "buy eggs"),
        ("Add buy milk to my task list", "buy milk"),
        ("Create a todo renew passport", "renew passport"),
        ("I need to email Sarah later", "email Sarah"),
    ])
    def test_command_words_are_stripped(self, now, speech, name):
        assert parse_task_from_speech(speech, now=now).task_name == name

    def test_no_date(self, now):
        parsed = parse_task_from_speech("Buy milk", now=now)
        assert parsed.task_name == "Buy milk"
        assert parsed.deadline is None
        assert parsed.confidence == Confidence.LOW

    def test_word_containing_date_word_is_kept(self, now):
        parsed = parse_task_from_speech("Add update todays report today", now=now)
        assert parsed.task_name == "update todays report"
        assert parsed.deadline == datetime(2026, 10, 14, 23, 59, 59, 999000)

    def test_second_date_phrase_is_stripped_but_first_sets_deadline(self, now):
        parsed = parse_task_from_speech("Add meeting monday and friday", now=now)
        assert parsed.task_name == "meeting and"
        assert parsed.deadline.date() == datetime(2026, 10, 19).date()

    def test_short_name_falls_back_to_speech(self, now):
        parsed = parse_task_from_speech("Make a task urgent", now=now)
        # Cleaning leaves "a", so the raw phrase minus the verb is kept
        assert parsed.task_name == "a task urgent"
        assert parsed.priority == TaskPriority.HIGH


class TestCleanTaskName:
    """Test clean_task_name() and strip_priority_words()."""

    @pytest.mark.parametrize("speech", [
        "Add task call John tomorrow at 5 PM",
        "urgent: submit report by Monday noon",
        "Remind me to water the plants",
        "Add buy milk to my task list",
        "new item pick up dry cleaning",
        "Add meeting monday and friday",
        "Add update todays report today",
        "Call the plumber tomorrow morning or friday at 3pm",
    ])
    def test_reparsing_is_idempotent(self, now, speech):
        first = parse_task_from_speech(speech, now=now).task_name
        second = parse_task_from_speech(first, now=now).task_name
        assert second == first

    def test_strips_edge_punctuation(self):
        assert clean_task_name(": submit report by") == "submit report"
        assert clean_task_name("call John.") == "call John"

    def test_collapses_whitespace(self):
        assert clean_task_name("buy   fresh    bread") == "buy fresh bread"

    def test_strip_priority_words_longest_first(self):
        assert strip_priority_words("file taxes low priority") == "file taxes"
        assert strip_priority_words("ASAP fix login bug") == "fix login bug"
