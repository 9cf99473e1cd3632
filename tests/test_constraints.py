import pytest

from catalog2traefik.core.constraints import match_tags
from catalog2traefik.pacts.errors import ConstraintError


@pytest.mark.parametrize("expression,expected", [
    ("", True),
    ("   ", True),
    ("tag==env=prod", True),
    ("tag==env=staging", False),
    ("tag!=env=staging", True),
    ("Tag(`web`)", True),
    ("Tag(`db`)", False),
    ("!Tag(`db`)", True),
    ("Tag(`web`) && tag==env=prod", True),
    ("Tag(`db`) || tag==env=prod", True),
    ("Tag(`db`) || (Tag(`web`) && !tag==env=staging)", True),
    ("TagRegex(`env=.*`)", True),
    ("TagRegex(`env=stag.*`)", False),
])
def test_match_tags(expression, expected):
    assert match_tags(["web", "env=prod"], expression) is expected


@pytest.mark.parametrize("expression", [
    "Tag(`web`",
    "Tag(`web`) &&",
    "(Tag(`web`)",
    "Tag(`web`) Tag(`db`)",
    "Label(`a`)",
    "TagRegex(`[`)",
])
def test_malformed_expression_raises(expression):
    with pytest.raises(ConstraintError):
        match_tags(["web"], expression)


def test_and_binds_tighter_than_or():
    # false && false || true  →  (false && false) || true
    assert match_tags(["c"], "Tag(`a`) && Tag(`b`) || Tag(`c`)") is True
    assert match_tags(["a"], "Tag(`a`) || Tag(`b`) && Tag(`c`)") is True
