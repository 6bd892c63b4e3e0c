"""Tests for FormFieldController."""

import pytest

from pyqt_formbuilder import (
    AutovalidateMode,
    FieldDecoration,
    FocusHandle,
    FormAggregator,
    FormFieldController,
    Validators,
)


def test_standalone_field_uses_local_initial_value():
    """A field without a form keeps its own initial value."""
    field = FormFieldController("name", initial_value="Ada")

    assert field.form is None
    assert field.value == "Ada"
    assert field.initial_value == "Ada"
    assert not field.is_dirty


def test_initial_value_precedence():
    """Local initial_value wins over the form's, which wins over nothing."""
    form = FormAggregator(initial_value={"a": "form-a", "b": "form-b"})
    a = FormFieldController("a", form=form, initial_value="local-a")
    b = FormFieldController("b", form=form)
    c = FormFieldController("c", form=form)

    assert a.value == "local-a"
    assert b.value == "form-b"
    assert c.value is None
    assert form.instant_value == {"a": "local-a", "b": "form-b", "c": None}


def test_registration_does_not_mark_dirty():
    form = FormAggregator(initial_value={"age": "18"})
    field = FormFieldController("age", form=form)

    assert not field.is_dirty
    assert not form.is_dirty


def test_last_set_value_wins():
    """After any sequence of set_value calls, value equals the last argument."""
    form = FormAggregator()
    field = FormFieldController("x", form=form)

    for value in ["a", None, 3, "final"]:
        field.set_value(value)

    assert field.value == "final"
    assert form.instant_value["x"] == "final"


def test_set_value_without_notify_leaves_snapshot():
    form = FormAggregator()
    field = FormFieldController("x", form=form, initial_value="before")

    field.set_value("after", notify_form=False)

    assert field.value == "after"
    assert form.instant_value["x"] == "before"


def test_set_value_stores_untransformed_value():
    form = FormAggregator()
    field = FormFieldController("age", form=form, transform=int)

    field.set_value("42")

    assert field.value == "42"
    assert field.transformed_value == 42
    assert form.fields["age"].value == "42"


def test_did_change_calls_on_changed_and_marks_dirty():
    received = []
    field = FormFieldController("x", on_changed=received.append)

    field.did_change("typed")

    assert received == ["typed"]
    assert field.is_dirty


def test_value_changed_signal():
    field = FormFieldController("x")
    received = []
    field.signals.value_changed.connect(received.append)

    field.set_value(1)
    field.did_change(2)

    assert received == [1, 2]


def test_touched_set_once_on_first_focus():
    field = FormFieldController("x")
    emitted = []
    field.signals.touched_changed.connect(emitted.append)

    assert not field.touched
    for _ in range(3):
        field.focus_handle.set_focus(True)
        field.focus_handle.set_focus(False)

    assert field.touched
    assert emitted == [True]


def test_unfocus_before_focus_does_not_touch():
    field = FormFieldController("x")
    field.on_focus_change(False)
    assert not field.touched


def test_validate_first_failure_wins():
    calls = []

    def first(value, context):
        calls.append("first")
        return "first failed"

    def second(value, context):
        calls.append("second")
        return "second failed"

    field = FormFieldController("x", validators=[first, second])

    assert field.validate() is False
    assert field.error_text == "first failed"
    assert calls == ["first"]


def test_validators_receive_context():
    seen = []

    def spy(value, context):
        seen.append((value, context.field_name, context.form))
        return None

    form = FormAggregator()
    field = FormFieldController("email", form=form, initial_value="a@b.c", validators=[spy])

    assert field.validate() is True
    assert seen == [("a@b.c", "email", form)]


def test_validate_clears_custom_error_by_default():
    field = FormFieldController("x")
    field.invalidate("server says no")

    assert field.validate() is True
    assert field.custom_error is None
    assert not field.has_error


def test_validate_can_keep_custom_error():
    field = FormFieldController("x")
    field.invalidate("server says no")

    assert field.validate(clear_custom_error=False) is False
    assert field.error_text == "server says no"


def test_invalidate_sets_error_and_requests_focus_once():
    field = FormFieldController("x")
    requests = []
    field.focus_handle.focus_requested.connect(lambda: requests.append(1))

    field.invalidate("X")

    assert field.has_error
    assert field.error_text == "X"
    assert field.effective_error == "X"
    assert requests == [1]
    assert field.focus_handle.has_focus


def test_validate_does_not_request_focus():
    field = FormFieldController("x", validators=[Validators.required()])
    requests = []
    field.focus_handle.focus_requested.connect(lambda: requests.append(1))

    assert field.validate() is False
    assert requests == []


def test_validator_error_takes_precedence_over_custom_error():
    field = FormFieldController("x", validators=[Validators.required("required")])
    field.invalidate("custom")
    assert field.error_text == "required"


def test_decoration_error_is_overlaid():
    field = FormFieldController("x", decoration=FieldDecoration(label="X", error_text="static"))

    assert field.error_text is None
    assert field.effective_error == "static"
    assert field.validate() is False

    field.set_decoration(field.decoration.with_error(None))
    assert field.is_valid


def test_internal_error_preferred_over_decoration_error():
    field = FormFieldController("x", decoration=FieldDecoration(error_text="static"))
    field.invalidate("internal")
    assert field.effective_error == "internal"


def test_error_changed_signal_reports_effective_error():
    field = FormFieldController("x", validators=[Validators.required("required")])
    received = []
    field.signals.error_changed.connect(received.append)

    field.validate()
    field.set_value("ok")
    field.validate()

    assert received == ["required", None]


def test_autovalidate_on_user_interaction():
    field = FormFieldController(
        "x",
        validators=[Validators.required("required")],
        autovalidate_mode=AutovalidateMode.ON_USER_INTERACTION,
    )
    assert not field.has_error

    field.set_value("")
    assert not field.has_error  # programmatic, user has not interacted

    field.did_change("")
    assert field.error_text == "required"

    field.did_change("filled")
    assert not field.has_error


def test_autovalidate_always_validates_at_registration():
    field = FormFieldController(
        "x",
        validators=[Validators.required("required")],
        autovalidate_mode=AutovalidateMode.ALWAYS,
    )
    assert field.error_text == "required"


def test_autovalidate_disabled():
    field = FormFieldController(
        "x",
        validators=[Validators.required("required")],
        autovalidate_mode=AutovalidateMode.DISABLED,
    )
    field.did_change("")
    assert not field.has_error
    assert field.validate() is False


def test_reset_restores_initial_value_and_clears_custom_error():
    resets = []
    form = FormAggregator()
    field = FormFieldController("age", form=form, initial_value="18", on_reset=lambda: resets.append(1))

    field.did_change("21")
    field.did_change("99")
    field.invalidate("too old")
    field.reset()

    assert field.value == "18"
    assert field.custom_error is None
    assert not field.has_error
    assert not field.is_dirty
    assert form.instant_value["age"] == "18"
    assert resets == [1]


def test_reset_keeps_touched_unless_asked():
    field = FormFieldController("x")
    field.on_focus_change(True)

    field.reset()
    assert field.touched

    field.reset(clear_touched=True)
    assert not field.touched


def test_save_calls_on_saved_with_current_value():
    saved = []
    field = FormFieldController("x", initial_value="v", on_saved=saved.append)
    field.save()
    assert saved == ["v"]


def test_save_commits_unnotified_value():
    form = FormAggregator()
    field = FormFieldController("x", form=form)
    field.set_value("quiet", notify_form=False)

    assert form.save() == {"x": "quiet"}


def test_enabled_combines_local_and_form_flags():
    form = FormAggregator()
    field = FormFieldController("x", form=form, enabled=True)
    emitted = []
    field.signals.enabled_changed.connect(emitted.append)

    form.set_enabled(False)
    assert not field.enabled

    form.set_enabled(True)
    assert field.enabled

    field.set_enabled(False)
    assert not field.enabled
    assert emitted == [False, True, False]


def test_dispose_unregisters_and_releases_owned_focus_handle():
    form = FormAggregator()
    field = FormFieldController("x", form=form)
    handle = field.focus_handle

    assert field.owns_focus_handle
    field.dispose()

    assert "x" not in form
    assert handle.is_disposed
    assert field.is_disposed


def test_dispose_never_releases_borrowed_focus_handle():
    handle = FocusHandle(debug_label="shared")
    field = FormFieldController("x", focus_handle=handle)

    assert field.focus_handle is handle
    assert not field.owns_focus_handle
    field.dispose()

    assert not handle.is_disposed
    handle.request_focus()  # still usable by its owner
    assert handle.has_focus
    assert not field.touched  # listener was disconnected


def test_dispose_is_idempotent():
    disposed = []
    form = FormAggregator()
    field = FormFieldController("x", form=form)
    field.signals.disposed.connect(lambda: disposed.append(1))

    field.dispose()
    field.dispose()

    assert disposed == [1]


def test_set_value_after_dispose_does_not_reach_form():
    form = FormAggregator()
    field = FormFieldController("x", form=form, initial_value="a")
    field.dispose()

    field.set_value("b")
    assert form.instant_value == {"x": "a"}


def test_set_focus_handle_disposes_owned_previous_handle():
    field = FormFieldController("x")
    owned = field.focus_handle
    borrowed = FocusHandle()

    field.set_focus_handle(borrowed)
    assert owned.is_disposed
    assert field.focus_handle is borrowed
    assert not field.owns_focus_handle

    borrowed.set_focus(True)
    assert field.touched


def test_set_focus_handle_keeps_borrowed_previous_handle():
    borrowed = FocusHandle()
    field = FormFieldController("x", focus_handle=borrowed)

    field.set_focus_handle(None)

    assert not borrowed.is_disposed
    assert field.owns_focus_handle
    assert field.focus_handle is not borrowed

    borrowed.set_focus(True)
    assert not field.touched


def test_set_focus_handle_after_dispose_is_noop():
    field = FormFieldController("x")
    handle = field.focus_handle
    received = []
    field.signals.focus_handle_changed.connect(received.append)
    field.dispose()

    field.set_focus_handle(None)
    field.set_focus_handle(FocusHandle())

    assert field.focus_handle is handle
    assert received == []


def test_focus_handle_changed_signal():
    field = FormFieldController("x")
    received = []
    field.signals.focus_handle_changed.connect(received.append)

    new_handle = FocusHandle()
    field.set_focus_handle(new_handle)
    field.set_focus_handle(new_handle)  # same handle, no-op

    assert received == [new_handle]


def test_register_again_overwrites_snapshot():
    form = FormAggregator(initial_value={"x": "form"})
    field = FormFieldController("x", form=form)
    field.set_value("edited")

    field.register()

    assert field.value == "form"
    assert form.instant_value["x"] == "form"
    assert form.fields["x"] is field


@pytest.mark.parametrize("transform, expected", [(None, "7"), (int, 7), (lambda v: [v], ["7"])])
def test_transformed_value(transform, expected):
    field = FormFieldController("x", initial_value="7", transform=transform)
    assert field.transformed_value == expected
    assert field.value == "7"
