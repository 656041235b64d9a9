import pytest

from ai_pr_review.review_models import ReviewComment, ReviewResponse, ReviewSuggestion


def test_suggestion_coerces_integer_line_number():
    suggestion = ReviewSuggestion(lineNumber=12, reviewComment="Use a constant")
    assert suggestion.line_number == "12"


def test_suggestion_requires_comment():
    with pytest.raises(ValueError):
        ReviewSuggestion(lineNumber="3")


def test_response_requires_reviews():
    with pytest.raises(ValueError):
        ReviewResponse.model_validate_json('{"summary": "ok"}')


def test_response_accepts_empty_reviews():
    assert ReviewResponse.model_validate_json('{"reviews": []}').reviews == []


def test_review_comment_payload_shape():
    comment = ReviewComment(body="Nit", path="a.py", line=4)
    assert comment.model_dump() == {"body": "Nit", "path": "a.py", "line": 4}
