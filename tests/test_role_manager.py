import pytest

from rbacore.function_map import key_match, key_match2
from rbacore.role_manager import DefaultRoleManager, RbacError, RoleManager


def _sample_manager():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "g1", None)
    rm.add_link("u2", "g1", None)
    rm.add_link("u3", "g2", None)
    rm.add_link("u4", "g2", None)
    rm.add_link("u4", "g3", None)
    rm.add_link("g1", "g3", None)
    return rm


def test_is_role_manager():
    rm = DefaultRoleManager(3)
    assert isinstance(rm, RoleManager)
    assert rm.get_roles("nobody") == []


def test_role():
    rm = _sample_manager()

    assert rm.has_link("u1", "g1", None) is True
    assert rm.has_link("u1", "g2", None) is False
    assert rm.has_link("u1", "g3", None) is True
    assert rm.has_link("u2", "g1", None) is True
    assert rm.has_link("u2", "g2", None) is False
    assert rm.has_link("u2", "g3", None) is True
    assert rm.has_link("u3", "g1", None) is False
    assert rm.has_link("u3", "g2", None) is True
    assert rm.has_link("u3", "g3", None) is False
    assert rm.has_link("u4", "g1", None) is False
    assert rm.has_link("u4", "g2", None) is True
    assert rm.has_link("u4", "g3", None) is True

    assert rm.get_roles("u1", None) == ["g1"]
    assert rm.get_roles("u2", None) == ["g1"]
    assert rm.get_roles("u3", None) == ["g2"]
    assert sorted(rm.get_roles("u4", None)) == ["g2", "g3"]
    assert rm.get_roles("g1", None) == ["g3"]
    assert rm.get_roles("g2", None) == []
    assert rm.get_roles("g3", None) == []

    rm.delete_link("g1", "g3", None)
    rm.delete_link("u4", "g2", None)
    assert rm.has_link("u1", "g1", None) is True
    assert rm.has_link("u1", "g2", None) is False
    assert rm.has_link("u1", "g3", None) is False
    assert rm.has_link("u2", "g1", None) is True
    assert rm.has_link("u2", "g2", None) is False
    assert rm.has_link("u2", "g3", None) is False
    assert rm.has_link("u3", "g1", None) is False
    assert rm.has_link("u3", "g2", None) is True
    assert rm.has_link("u3", "g3", None) is False
    assert rm.has_link("u4", "g1", None) is False
    assert rm.has_link("u4", "g2", None) is False
    assert rm.has_link("u4", "g3", None) is True
    assert rm.get_roles("u1", None) == ["g1"]
    assert rm.get_roles("u2", None) == ["g1"]
    assert rm.get_roles("u3", None) == ["g2"]
    assert rm.get_roles("u4", None) == ["g3"]
    assert rm.get_roles("g1", None) == []
    assert rm.get_roles("g2", None) == []
    assert rm.get_roles("g3", None) == []


def test_clear():
    rm = _sample_manager()
    rm.clear()
    for user in ("u1", "u2", "u3", "u4"):
        for group in ("g1", "g2", "g3"):
            assert rm.has_link(user, group, None) is False


def test_domain_role():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "g1", "domain1")
    rm.add_link("u2", "g1", "domain1")
    rm.add_link("u3", "admin", "domain2")
    rm.add_link("u4", "admin", "domain2")
    rm.add_link("u4", "admin", "domain1")
    rm.add_link("g1", "admin", "domain1")

    assert rm.has_link("u1", "g1", "domain1") is True
    assert rm.has_link("u1", "g1", "domain2") is False
    assert rm.has_link("u1", "admin", "domain1") is True
    assert rm.has_link("u1", "admin", "domain2") is False

    assert rm.has_link("u2", "g1", "domain1") is True
    assert rm.has_link("u2", "g1", "domain2") is False
    assert rm.has_link("u2", "admin", "domain1") is True
    assert rm.has_link("u2", "admin", "domain2") is False

    assert rm.has_link("u3", "g1", "domain1") is False
    assert rm.has_link("u3", "g1", "domain2") is False
    assert rm.has_link("u3", "admin", "domain1") is False
    assert rm.has_link("u3", "admin", "domain2") is True

    assert rm.has_link("u4", "g1", "domain1") is False
    assert rm.has_link("u4", "g1", "domain2") is False
    assert rm.has_link("u4", "admin", "domain1") is True
    assert rm.has_link("u4", "admin", "domain2") is True

    rm.delete_link("g1", "admin", "domain1")
    rm.delete_link("u4", "admin", "domain2")

    assert rm.has_link("u1", "g1", "domain1") is True
    assert rm.has_link("u1", "g1", "domain2") is False
    assert rm.has_link("u1", "admin", "domain1") is False
    assert rm.has_link("u1", "admin", "domain2") is False

    assert rm.has_link("u2", "g1", "domain1") is True
    assert rm.has_link("u2", "g1", "domain2") is False
    assert rm.has_link("u2", "admin", "domain1") is False
    assert rm.has_link("u2", "admin", "domain2") is False

    assert rm.has_link("u3", "g1", "domain1") is False
    assert rm.has_link("u3", "g1", "domain2") is False
    assert rm.has_link("u3", "admin", "domain1") is False
    assert rm.has_link("u3", "admin", "domain2") is True

    assert rm.has_link("u4", "g1", "domain1") is False
    assert rm.has_link("u4", "g1", "domain2") is False
    assert rm.has_link("u4", "admin", "domain1") is True
    assert rm.has_link("u4", "admin", "domain2") is False


def test_users():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "g1", "domain1")
    rm.add_link("u2", "g1", "domain1")
    rm.add_link("u3", "g2", "domain2")
    rm.add_link("u4", "g2", "domain2")
    rm.add_link("u5", "g3", None)

    assert sorted(rm.get_users("g1", "domain1")) == ["u1", "u2"]
    assert sorted(rm.get_users("g2", "domain2")) == ["u3", "u4"]
    assert rm.get_users("g3", None) == ["u5"]


def test_pattern_domain():
    rm = DefaultRoleManager(3)
    rm.matching_fn(None, key_match)
    rm.add_link("u1", "g1", "*")
    assert rm.has_role("u1", "domain2") is True


def test_pattern_domain_link_and_roles():
    rm = DefaultRoleManager(3)
    rm.matching_fn(None, key_match)
    rm.add_link("u1", "g1", "*")
    assert rm.has_link("u1", "g1", "domain2") is True
    assert rm.get_roles("u1", "domain2") == ["g1"]


def test_role_pattern_matching():
    rm = DefaultRoleManager(3)
    rm.matching_fn(key_match2, None)
    rm.add_link("/book/:id", "book_group", None)
    assert rm.has_link("/book/1", "book_group", None) is True
    assert rm.get_roles("/book/1", None) == ["/book/:id"]
    assert rm.has_link("/pen/1", "book_group", None) is False


def test_delete_unknown_link_raises():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "g1", None)
    with pytest.raises(RbacError, match="u1 OR g9"):
        rm.delete_link("u1", "g9", None)


def test_delete_link_in_unknown_domain_raises():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "g1", "domain1")
    with pytest.raises(RbacError):
        rm.delete_link("u1", "g1", "domain2")


def test_self_link_is_ignored_but_true():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "u1", None)
    assert rm.get_roles("u1", None) == []
    assert rm.has_link("u1", "u1", None) is True


def test_duplicate_links_are_stored_once():
    rm = DefaultRoleManager(3)
    rm.add_link("u1", "g1", None)
    rm.add_link("u1", "g1", None)
    assert rm.get_roles("u1", None) == ["g1"]


@pytest.mark.parametrize("level, expected", [(1, False), (2, True)])
def test_hierarchy_level_limits_depth(level, expected):
    rm = DefaultRoleManager(level)
    rm.add_link("u1", "g1", None)
    rm.add_link("g1", "g2", None)
    assert rm.has_link("u1", "g2", None) is expected


def test_unknown_names_have_no_link():
    rm = _sample_manager()
    assert rm.has_link("ghost", "g1", None) is False
    assert rm.get_users("ghost", None) == []