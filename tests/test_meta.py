import pytest

from argcompose.meta import (
    And,
    Decorated,
    Empty,
    Identity,
    Item,
    ItemKind,
    ItemMeta,
    Many,
    Optional,
    Or,
    Required,
)


def flag(short=None, long=None, metavar=None, help=None):
    return Item(ItemKind.FLAG, short=short, long=long, metavar=metavar, help=help)


def cmd(name, help=None):
    return Item(ItemKind.COMMAND, long=name, help=help)


def positional(metavar):
    return Item(ItemKind.POSITIONAL, metavar=metavar)


def test_item_display():
    assert str(flag(short="a", long="AAAAA")) == "-a"
    assert str(flag(long="all")) == "--all"
    assert str(flag(short="a", metavar="ARG")) == "-a ARG"
    assert str(cmd("bar")) == "COMMAND ..."
    assert str(positional("FILE")) == "<FILE>"
    assert str(Item(ItemKind.POSITIONAL)) == "<FILE>"
    assert str(Item.decoration("x")) == ""


def test_flag_without_names_cannot_display():
    with pytest.raises(ValueError):
        str(flag())


def test_item_required_wrapping():
    item = flag(short="a")
    assert item.required(True) == Required(ItemMeta(item))
    assert item.required(False) == Optional(ItemMeta(item))


def test_item_kinds():
    assert cmd("x").is_command()
    assert not flag(short="a").is_command()
    assert flag(short="a").is_flag()
    assert Item.decoration(None).is_flag()
    assert not positional("F").is_flag()


def test_name_len_grows_with_long_and_metavar():
    assert flag(short="a").name_len() == 0
    assert flag(long="help").name_len() == len("--help") + 1
    base = flag(long="help").name_len()
    assert flag(long="help", metavar="ARG").name_len() > base


def test_required_or_of_flags():
    metas = [flag(short=c).required(True) for c in "abc"]
    combined = metas[0].or_(metas[1]).or_(metas[2])
    assert str(combined) == "(-a | -b | -c)"
    assert combined.is_required()


def test_or_with_optional_member():
    a = flag(short="a").required(True)
    b = flag(short="b").required(True)
    c = flag(short="c").required(False)
    combined = a.or_(b).or_(c)
    assert str(combined) == "[-a | -b | [-c]]"
    assert not combined.is_required()


def test_optional_flags_in_sequence():
    metas = And(tuple(flag(short=c).required(False) for c in "abc"))
    assert str(metas) == "[-a] [-b] [-c]"
    assert not metas.is_required()


def test_argument_and_fallback():
    arg = flag(short="a", metavar="ARG").required(True)
    assert str(arg) == "-a ARG"
    assert str(arg.optional()) == "[-a ARG]"


def test_positional_many_and_optional():
    add = And(
        (
            flag(short="i").required(False),
            flag(long="all").required(False),
            Many(positional("FILE").required(True)),
        )
    )
    assert str(add) == "[-i] [--all] <FILE>..."
    fetch = And(
        (
            flag(long="dry_run").required(False),
            flag(long="all").required(False),
            positional("SRC").required(True).optional(),
        )
    )
    assert str(fetch) == "[--dry_run] [--all] [<SRC>]"


def test_commands_deduplicated_in_usage():
    combined = ItemMeta(cmd("fetch")).or_(ItemMeta(cmd("add")))
    assert str(combined) == "COMMAND ..."
    assert [c.long for c in combined.commands()] == ["fetch", "add"]


def test_required_complex_is_parenthesised():
    inner = And((flag(short="a").required(True), flag(short="b").required(True)))
    assert str(Required(inner)) == f"({inner})"
    assert not Required(inner).is_simple()


def test_or_identity_and_empty():
    a = flag(short="a").required(True)
    assert Identity().or_(a) == a
    assert a.or_(Empty()) == a
    assert Empty().or_(a) == a


def test_or_flattening():
    a, b, c = (flag(short=x).required(True) for x in "abc")
    assert Or((a, b)).or_(Or((c,))) == Or((a, b, c))
    assert a.or_(Or((b, c))) == Or((b, c, a))


def test_and_identity_and_flattening():
    a, b, c = (flag(short=x).required(False) for x in "abc")
    assert Identity().and_(a) == a
    assert a.and_(Identity()) == a
    assert And((a, b)).and_(And((c,))) == And((a, b, c))
    assert And((a, b)).and_(c) == And((a, b, c))
    assert a.and_(And((b, c))) == And((b, c, a))
    assert a.and_(b) == And((a, b))
    assert Empty().and_(a) == And((Empty(), a))


def test_optional_required_many_decorate():
    a = ItemMeta(flag(short="a"))
    assert Required(a).optional() == Optional(a)
    assert a.optional() == Optional(a)
    assert a.required() == Required(a)
    assert a.many() == Many(a)
    assert a.decorate("msg") == Decorated(a, "msg")


def test_is_empty():
    assert Empty().is_empty()
    assert Identity().is_empty()
    assert And((Identity(), Empty())).is_empty()
    assert not And((Identity(), ItemMeta(cmd("x")))).is_empty()
    assert not Optional(ItemMeta(flag(short="a"))).is_empty()


def test_bare_flag_is_required_raises():
    with pytest.raises(ValueError):
        ItemMeta(flag(short="a")).is_required()


def test_hidden_part_dropped_by_and():
    a = flag(short="a", long="AAAAA").required(False)
    assert str(a.and_(Identity())) == "[-a]"


def test_flags_collect_with_decoration():
    a = flag(short="a", help="flag A, related to B")
    b = flag(short="b", help="flag B, related to A")
    c = flag(short="c", help="flag C, unrelated")
    group = And((a.required(False), b.required(False))).decorate(
        "Explanation applicable for both A and B"
    )
    meta = And((group, c.required(False)))
    assert str(meta) == "[-a] [-b] [-c]"
    assert meta.flags() == [
        Item.decoration("Explanation applicable for both A and B"),
        a,
        b,
        Item.decoration(None),
        c,
    ]


def test_decoration_without_matches_is_dropped():
    group = Decorated(positional("FILE").required(True), "File to process")
    assert group.flags() == []
    assert str(group) == "<FILE>"


def test_flags_and_commands_are_separated():
    bar = cmd("bar", help="do bar")
    meta = And((flag(short="h", long="help").required(False), ItemMeta(bar)))
    assert meta.commands() == [bar]
    assert [i.short for i in meta.flags()] == ["h"]