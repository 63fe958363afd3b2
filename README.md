# rbacore

Building blocks for role-based access control:

- **Role manager** (`rbacore.role_manager`): `DefaultRoleManager` keeps role
  inheritance links, either globally or per domain. It follows links up to a
  fixed depth and can match role and domain names by pattern.
- **Model** (`rbacore.default_model`, `rbacore.assertion`,
  `rbacore.policy_store`): `DefaultModel` holds request, policy, role, effect
  and matcher definitions as `Assertion` objects. Its base class `PolicyStore`
  adds, queries, filters and removes policy rules.
- **Matching functions** (`rbacore.function_map`): `key_match`, `key_match2`,
  `key_match3`, `regex_match`, `ip_match` and `glob_match`, collected in a
  `FunctionMap`.
- **Utilities** (`rbacore.util`): `parse_csv_line`, `remove_comment`,
  `escape_assertion` and `escape_eval` read policy lines and matcher text.

## Installation

```
pip install rbacore
```

## Role hierarchies

```python
from rbacore.role_manager import DefaultRoleManager

rm = DefaultRoleManager(3)
rm.add_link("u1", "g1", None)
rm.add_link("g1", "g3", None)

rm.has_link("u1", "g3", None)   # True: u1 -> g1 -> g3
rm.get_roles("u1", None)        # ["g1"]   (direct roles only)
rm.get_users("g1", None)        # ["u1"]   (direct members only)

rm.delete_link("g1", "g3", None)
rm.has_link("u1", "g3", None)   # False
```

The number passed to `DefaultRoleManager` is the maximum number of links
that `has_link` follows.

Domains keep links apart:

```python
rm.add_link("alice", "admin", "domain1")
rm.has_link("alice", "admin", "domain1")  # True
rm.has_link("alice", "admin", "domain2")  # False
```

Pattern matching on role or domain names:

```python
from rbacore.function_map import key_match

rm = DefaultRoleManager(3)
rm.matching_fn(None, key_match)   # (role_matching_fn, domain_matching_fn)
rm.add_link("u1", "g1", "*")
rm.has_role("u1", "domain2")      # True
```

`delete_link` raises `RbacError` when either name is unknown. `clear` removes
every role and link. `RoleManager` is the abstract base class for other
implementations.

## Matching functions

```python
from rbacore.function_map import FunctionMap, ip_match, key_match2, key_match3

key_match2("/foo/baz", "/foo/:bar")             # True
key_match3("/foo/baz", "/foo/{bar}")            # True
ip_match("192.168.2.123", "192.168.2.0/24")     # True

functions = FunctionMap()
functions.add_function("myMatch", lambda a, b: a.lower() == b.lower())
functions["keyMatch"]("/bar", "/ba*")           # True
dict(functions.get_functions())["myMatch"]("A", "a")  # True
```

A new `FunctionMap` holds `keyMatch`, `keyMatch2`, `keyMatch3`, `regexMatch`,
`globMatch` and `ipMatch`. `ip_match` and `glob_match` raise `ValueError` for
malformed addresses, networks or glob patterns.

## Reading policy lines

```python
from rbacore.util import escape_assertion, parse_csv_line, remove_comment

parse_csv_line('alice, "domain1, domain2", data1, action1')
# ['alice', 'domain1, domain2', 'data1', 'action1']
parse_csv_line("# a comment")   # None

remove_comment("r.sub == p.sub # note")     # 'r.sub == p.sub'
escape_assertion("r.sub == p2.sub")         # 'r_sub == p2_sub'
```

## Models and policies

```python
from rbacore.default_model import DefaultModel
from rbacore.role_manager import DefaultRoleManager

model = DefaultModel()
model.add_def("r", "r", "sub, obj, act")
model.add_def("p", "p", "sub, obj, act")
model.add_def("g", "g", "_, _")
model.add_def("m", "m", "g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act")

model.add_policy("p", "p", ["data2_admin", "data2", "read"])
model.add_policy("g", "g", ["alice", "data2_admin"])

rm = DefaultRoleManager(10)
model.build_role_links(rm)
rm.has_link("alice", "data2_admin", None)  # True

model.get_filtered_policy("p", "p", 1, ["data2"])
# [['data2_admin', 'data2', 'read']]
model.remove_filtered_policy("p", "p", 1, ["data2"])
# (True, [['data2_admin', 'data2', 'read']])
```

`build_role_links` raises `ModelError` when a role definition has fewer than
two `_` placeholders or more than one domain, and `PolicyError` when a rule has
fewer fields than its definition.

## What this package does not do

There is no enforcer. Matcher expressions are stored and escaped, but never
evaluated, so the package does not answer "may this subject do this action".
Models are built with `add_def` only; there is no reader for model
configuration files, and no adapter that loads or saves policies from files or
databases. `parse_csv_line` splits single lines for you to feed in yourself.

## Running the tests

```
pip install -e ".[test]"
pytest
```