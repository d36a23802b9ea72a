"""Review Cursor - read-only traversal of a submitted attempt."""

from collections.abc import Iterator

from ..models.schemas import Question, ReviewItem


class ReviewCursor:
    """Fixed-order, restartable walk over the reviewed questions.

    Items are built lazily on access from a snapshot of the answers taken at
    construction, so moving the cursor or iterating it never touches the
    attempt it came from.
    """

    def __init__(self, questions: list[Question], answers: list[int]):
        self._questions = tuple(questions)
        self._answers = tuple(answers)
        self.position = 0

    def _item(self, index: int) -> ReviewItem:
        question = self._questions[index]
        answer = self._answers[index]
        return ReviewItem(
            index=index,
            question=question.question,
            options=list(question.options),
            selected=answer,
            correct_answer=question.correct_answer,
            is_correct=answer == question.correct_answer,
            explanation=question.explanation,
        )

    def __len__(self) -> int:
        return min(len(self._questions), len(self._answers))

    def __iter__(self) -> Iterator[ReviewItem]:
        return (self._item(index) for index in range(len(self)))

    def __getitem__(self, index: int) -> ReviewItem:
        return self._item(range(len(self))[index])

    @property
    def current(self) -> ReviewItem | None:
        if not len(self):
            return None
        return self._item(self.position)

    @property
    def has_next(self) -> bool:
        return self.position < len(self) - 1

    @property
    def has_previous(self) -> bool:
        return self.position > 0

    def next(self) -> ReviewItem | None:
        if self.has_next:
            self.position += 1
        return self.current

    def previous(self) -> ReviewItem | None:
        if self.has_previous:
            self.position -= 1
        return self.current

    def go_to(self, index: int) -> ReviewItem:
        if not 0 <= index < len(self):
            raise IndexError(f"Question {index} out of range (0-{len(self) - 1})")
        self.position = index
        return self._item(index)

    def restart(self) -> ReviewItem | None:
        self.position = 0
        return self.current
