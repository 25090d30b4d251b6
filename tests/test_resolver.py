"""Tests for resolving spoken task references to tasks."""

from voicetasks.voice.resolver import find_task_by_identifier


class TestFindTaskByIdentifier:
    """Test find_task_by_identifier() matching stages."""

    def test_exact_match_case_insensitive(self, make_task):
        laundry = make_task("Laundry")
        assert find_task_by_identifier([laundry], "laundry") is laundry

    def test_exact_match_beats_earlier_substring_match(self, make_task):
        cleanup = make_task("Laundry room cleanup")
        laundry = make_task("Laundry")
        assert find_task_by_identifier([cleanup, laundry], "laundry") is laundry

    def test_punctuation_insensitive_match(self, make_task):
        task = make_task("Call mom!")
        other = make_task("Call mom and dad")
        assert find_task_by_identifier([other, task], "call mom") is task

    def test_title_contains_identifier(self, make_task):
        task = make_task("Submit quarterly report")
        assert find_task_by_identifier([task], "quarterly report") is task

    def test_identifier_contains_title(self, make_task):
        task = make_task("Dentist")
        assert find_task_by_identifier([task], "the dentist appointment") is task

    def test_first_task_wins_within_stage(self, make_task):
        first = make_task("Buy milk and eggs")
        second = make_task("Buy milk for the cat")
        assert find_task_by_identifier([first, second], "buy milk") is first

    def test_whitespace_normalized(self, make_task):
        task = make_task("Pay   rent")
        assert find_task_by_identifier([task], "  pay rent ") is task

    def test_no_match(self, make_task):
        assert find_task_by_identifier([make_task("Laundry")], "Old Project") is None

    def test_blank_identifier(self, make_task):
        assert find_task_by_identifier([make_task("Laundry")], "   ") is None
        assert find_task_by_identifier([make_task("Laundry")], "") is None

    def test_empty_task_list(self):
        assert find_task_by_identifier([], "laundry") is None

    def test_fuzzy_disabled_by_default(self, make_task):
        task = make_task("Laundry")
        assert find_task_by_identifier([task], "laundary") is None

    def test_fuzzy_word_overlap(self, make_task):
        task = make_task("Finish quarterly reports")
        unrelated = make_task("Walk the dog")
        assert find_task_by_identifier([unrelated, task], "quarterly reprt", fuzzy=True) is task
        assert find_task_by_identifier([unrelated, task], "laundary", fuzzy=True) is None

    def test_tasks_not_mutated(self, make_task):
        tasks = [make_task("B task"), make_task("A task")]
        snapshot = [task.model_copy() for task in tasks]
        find_task_by_identifier(tasks, "a task", fuzzy=True)
        assert tasks == snapshot
