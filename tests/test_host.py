from conftest import CONFIGS, ImageBlock, TextBlock
from mcr.events import SUBMIT
from mcr.host import build_form
from mcr.reconciler import discriminator


def _form(**kw):
    return build_form(CONFIGS, {TextBlock: "text", ImageBlock: "image"}, discriminator("type"), name="blocks", **kw)


def test_end_to_end_cycle_adds_new_row_and_drops_empty_existing_one():
    form, _ = _form(allow_add=True, allow_delete=True, delete_empty=True)

    form.set_data({"x": TextBlock("hello")})
    assert form.container.keys() == ["x"]
    assert form.container["x"].prototype_name == "text"
    assert form.container["x"].data == TextBlock("hello")

    # Client keeps "x" but blanks it, and adds "y".
    image = {"type": "image", "src": "y.png"}
    data = form.submit({"x": "", "y": image})

    assert form.container.keys() == ["y"]
    assert form.container["y"].prototype_name == "image"
    assert data == {"y": image}
    assert form.get_data() == {"y": image}
    assert ("add", "y") in form.container.effects
    assert form.container.effects[-1] == ("remove", "x")


def test_cycle_without_delete_keeps_rows_and_nulls_their_data():
    form, _ = _form(allow_add=False, allow_delete=False)
    form.set_data({"a": TextBlock("a"), "b": TextBlock("b")})

    data = form.submit({"a": {"body": "changed"}, "c": {"type": "text"}})

    assert form.container.keys() == ["a", "b"]
    assert data == {"a": {"body": "changed"}, "b": None}


def test_cycle_with_delete_drops_rows_missing_from_submission():
    form, _ = _form(allow_delete=True)
    form.set_data({"a": TextBlock("a"), "b": TextBlock("b")})

    data = form.submit({"b": {"body": "kept"}})

    assert form.container.keys() == ["b"]
    assert data == {"b": {"body": "kept"}}


def test_sibling_submit_listeners_see_mapped_but_unpruned_data():
    form, _ = _form(allow_add=True, allow_delete=True, delete_empty=True)
    seen = []
    form.dispatcher.add_listener(SUBMIT, lambda event: seen.append(dict(event.get_data())))

    form.set_data({"x": TextBlock("hello")})
    data = form.submit({"x": "", "y": {"type": "text", "body": "new"}})

    assert seen == [{"x": "", "y": {"type": "text", "body": "new"}}]
    assert data == {"y": {"type": "text", "body": "new"}}


def test_set_data_resets_previous_rows():
    form, _ = _form()
    form.set_data({"a": TextBlock(), "b": ImageBlock()})
    form.set_data(None)
    assert form.container.keys() == []
    assert form.get_data() is None
