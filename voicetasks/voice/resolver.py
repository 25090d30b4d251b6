"""Resolve a spoken task reference ("the laundry one") to an existing task."""

import re
from typing import Optional, Sequence

from voicetasks.models.constants import FUZZY_MIN_OVERLAP_RATIO
from voicetasks.models.task import Task
from voicetasks.voice.similarity import word_overlap_ratio

_NON_WORD = re.compile(r"[^\w\s]")


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", text.lower()).strip()


def _strip_punctuation(text: str) -> str:
    return re.sub(r"\s+", " ", _NON_WORD.sub("", text)).strip()


def find_task_by_identifier(
    tasks: Sequence[Task],
    identifier: str,
    *,
    fuzzy: bool = False,
) -> Optional[Task]:
    """Find the task best matching a free-text identifier.

    Stages are tried in order and the first task (in list order) satisfying
    a stage is returned:

    1. case-insensitive exact title match
    2. exact match ignoring punctuation
    3. title contains the identifier
    4. identifier contains the title
    5. (fuzzy only) at least half of the identifier's words resemble a
       title word (containment or edit distance <= 1)

    Args:
        tasks: Candidate tasks (not modified)
        identifier: Spoken reference to a task
        fuzzy: Enable the word-overlap stage

    Returns:
        Matching task, or None if every stage fails or the identifier is blank
    """
    name = _normalize(identifier or "")
    if not name:
        return None
    bare_name = _strip_punctuation(name)

    titles = [(task, _normalize(task.title)) for task in tasks]

    for task, title in titles:
        if title == name:
            return task

    if bare_name:
        for task, title in titles:
            if _strip_punctuation(title) == bare_name:
                return task

    for task, title in titles:
        if name in title:
            return task

    for task, title in titles:
        if title and title in name:
            return task

    if fuzzy:
        for task, title in titles:
            if word_overlap_ratio(bare_name, _strip_punctuation(title)) >= FUZZY_MIN_OVERLAP_RATIO:
                return task

    return None
