from nitrofile.namers import UniqueNamer


def test_unique_namer():
    un = UniqueNamer()
    assert un.get_fresh_name("A") == "A"
    assert un.get_fresh_name("A") == "A1"
    assert un.get_fresh_name("A") == "A2"
    assert un.get_fresh_name("B") == "B"
    assert un.get_fresh_name("A") == "A3"


def test_names_never_repeat():
    un = UniqueNamer()
    names = [un.get_fresh_name(n) for n in ["x", "x1", "x", "x", "x1"]]
    assert len(set(names)) == len(names)