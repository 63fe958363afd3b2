import pytest

from rbacore.util import escape_assertion, escape_eval, parse_csv_line, remove_comment


def test_remove_comment_only_hash():
    assert remove_comment("#") == ""


def test_remove_comment_keeps_expression():
    assert (
        remove_comment(
            'g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act || r.sub == "root" # root is the super user'
        )
        == 'g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act || r.sub == "root"'
    )


def test_remove_comment_without_hash_trims_end():
    assert remove_comment("  a == b   ") == "  a == b"


def test_escape_assertion():
    s = "g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act"
    assert escape_assertion(s) == "g(r_sub, p_sub) && r_obj == p_obj && r_act == p_act"


def test_escape_assertion_numbered():
    s = "g(r2.sub, p2.sub) && r2.obj == p2.obj && r2.act == p2.act"
    assert escape_assertion(s) == "g(r2_sub, p2_sub) && r2_obj == p2_obj && r2_act == p2_act"


def test_escape_assertion_leaves_other_dots():
    assert escape_assertion("r.sub.Status == x.y") == "r_sub.Status == x.y"


def test_escape_eval():
    assert escape_eval("eval(p.sub_rule) && x") == "eval(escape_assertion(p.sub_rule)) && x"


def test_escape_eval_without_eval():
    assert escape_eval("r.sub == p.sub") == "r.sub == p.sub"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("alice, domain1, data1, action1", ["alice", "domain1", "data1", "action1"]),
        (
            'alice, "domain1, domain2", data1 , action1',
            ["alice", "domain1, domain2", "data1", "action1"],
        ),
        (",", ["", ""]),
        (
            'alice, "domain1, domain2", "data1, data2", action1',
            ["alice", "domain1, domain2", "data1, data2", "action1"],
        ),
        ('" ', ['"']),
        ('" alice', ['" alice']),
        ('alice, "domain1, domain2', ["alice", '"domain1, domain2']),
        ('""', [""]),
        (
            'r.sub.Status == "ACTIVE", /data1, read',
            ['r.sub.Status == "ACTIVE"', "/data1", "read"],
        ),
    ],
)
def test_parse_csv_line(line, expected):
    assert parse_csv_line(line) == expected


@pytest.mark.parametrize("line", [" ", "#", " #", ""])
def test_parse_csv_line_skips_blank_and_comments(line):
    assert parse_csv_line(line) is None