"""Tests for FieldBinding."""

import pytest
from PyQt6.QtCore import QEvent
from PyQt6.QtGui import QFocusEvent
from PyQt6.QtWidgets import QApplication, QLabel

from pyqt_formbuilder import FieldBinding, FocusHandle, FormAggregator, FormFieldController, Validators
from pyqt_formbuilder.protocols import CheckBoxAdapter, LineEditAdapter


def test_binding_requires_protocols(qapp):
    field = FormFieldController("x")
    with pytest.raises(TypeError):
        FieldBinding(field, QLabel())


def test_widget_shows_initial_value(qapp):
    form = FormAggregator(initial_value={"name": "Ada"})
    field = FormFieldController("name", form=form)
    binding = FieldBinding(field, LineEditAdapter())

    assert binding.widget.text() == "Ada"
    assert not field.is_dirty


def test_widget_edit_becomes_did_change(qapp):
    changes = []
    form = FormAggregator()
    field = FormFieldController("name", form=form, on_changed=changes.append)
    widget = LineEditAdapter()
    FieldBinding(field, widget)

    widget.setText("Grace")

    assert field.value == "Grace"
    assert field.is_dirty
    assert form.instant_value == {"name": "Grace"}
    assert changes == ["Grace"]


def test_reset_and_patch_reach_widget_without_feedback(qapp):
    changes = []
    form = FormAggregator(initial_value={"name": "Ada"})
    field = FormFieldController("name", form=form, on_changed=changes.append)
    widget = LineEditAdapter()
    FieldBinding(field, widget)

    form.patch_value({"name": "Linus"})
    assert widget.text() == "Linus"

    form.reset()
    assert widget.text() == "Ada"
    # Only the patch counted as a change; pushing into the widget did not echo back
    assert changes == ["Linus"]


def test_errors_are_displayed(qapp):
    form = FormAggregator()
    field = FormFieldController("name", form=form, validators=[Validators.required("Required")])
    widget = LineEditAdapter()
    FieldBinding(field, widget)

    form.validate()
    assert widget.toolTip() == "Required"

    widget.setText("ok")
    assert widget.toolTip() == ""


def test_enabled_state_is_mirrored(qapp):
    form = FormAggregator()
    field = FormFieldController("agree", form=form)
    widget = CheckBoxAdapter()
    FieldBinding(field, widget)

    form.set_enabled(False)
    assert not widget.isEnabled()

    form.set_enabled(True)
    assert widget.isEnabled()


def test_widget_focus_marks_field_touched(qapp):
    field = FormFieldController("name")
    widget = LineEditAdapter()
    FieldBinding(field, widget)

    QApplication.sendEvent(widget, QFocusEvent(QEvent.Type.FocusIn))

    assert field.touched


def test_unbind_detaches_borrowed_handle_but_keeps_it_alive(qapp):
    handle = FocusHandle()
    field = FormFieldController("name", focus_handle=handle)
    widget = LineEditAdapter()
    binding = FieldBinding(field, widget)
    assert handle.widget is widget

    binding.unbind()

    assert handle.widget is None
    assert not handle.is_disposed
    widget.setText("ignored")
    assert field.value is None


def test_dispose_unbinds(qapp):
    form = FormAggregator()
    field = FormFieldController("name", form=form)
    widget = LineEditAdapter()
    binding = FieldBinding(field, widget)

    field.dispose()

    assert not binding.is_bound
    widget.setText("after dispose")
    assert form.instant_value == {"name": None}


def test_focus_handle_swap_moves_attachment(qapp):
    field = FormFieldController("name")
    widget = LineEditAdapter()
    FieldBinding(field, widget)
    old_handle = field.focus_handle

    new_handle = FocusHandle()
    field.set_focus_handle(new_handle)

    assert old_handle.is_disposed
    assert new_handle.widget is widget
    QApplication.sendEvent(widget, QFocusEvent(QEvent.Type.FocusIn))
    assert field.touched
