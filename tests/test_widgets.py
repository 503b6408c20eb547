"""
Unit tests for mapping logical values onto checkbox and radio on-states.
"""

import pytest

from claimform.errors import WidgetStateError
from claimform.widgets import WidgetKind, apply_state, classify, select_state


class RecordingDocument:
    """Minimal document: fixed on-states per field, records applied states."""

    def __init__(self, on_states):
        self.on_states = on_states
        self.applied = {}

    def get_on_states(self, name):
        return list(self.on_states[name])

    def set_discrete_state(self, name, state):
        self.applied[name] = state


class TestClassify:

    def test_yes_no(self):
        assert classify(["Yes", "No"]) is WidgetKind.YES_NO
        assert classify(["No", "Yes"]) is WidgetKind.YES_NO

    def test_multi(self):
        assert classify(["Received", "Claimed"]) is WidgetKind.MULTI
        assert classify(["Yes", "No", "Maybe"]) is WidgetKind.MULTI

    def test_single(self):
        assert classify(["On"]) is WidgetKind.SINGLE
        assert classify([]) is WidgetKind.SINGLE


class TestSelectState:

    @pytest.mark.parametrize("value,expected", [(True, "Yes"), (False, "No"), (None, "No"), ("Yes", "Yes"), ("No", "No")])
    def test_yes_no(self, value, expected):
        assert select_state(["Yes", "No"], value) == expected

    def test_yes_no_unknown_label_raises(self):
        with pytest.raises(WidgetStateError):
            select_state(["Yes", "No"], "anything")

    def test_multi_named_state(self):
        assert select_state(["Male", "Female", "X"], "Female") == "Female"

    def test_multi_true_selects_first(self):
        assert select_state(["Employee", "Employer"], True) == "Employee"

    @pytest.mark.parametrize("value", [False, None])
    def test_multi_falsy_turns_off(self, value):
        assert select_state(["Received", "Claimed"], value) is None

    def test_multi_unknown_label_raises(self):
        with pytest.raises(WidgetStateError):
            select_state(["Received", "Claimed"], "Denied")

    def test_single(self):
        assert select_state(["On"], True) == "On"
        assert select_state(["On"], False) is None
        assert select_state(["On"], None) is None
        assert select_state([], True) is None


class TestApplyState:

    def test_yes_no_false_applies_no(self):
        doc = RecordingDocument({"25 - Did you work that day?": ["Yes", "No"]})
        label = apply_state(doc, "25 - Did you work that day?", False)
        assert doc.applied == {"25 - Did you work that day?": "No"}
        assert label == "No"

    def test_single_labels(self):
        doc = RecordingDocument({"EOBs": ["On"]})
        assert apply_state(doc, "EOBs", True) == "checked"
        assert doc.applied["EOBs"] == "On"
        assert apply_state(doc, "EOBs", False) == "unchecked"
        assert doc.applied["EOBs"] is None

    def test_multi_label(self):
        doc = RecordingDocument({"17 - Gender": ["Male", "Female", "X"]})
        assert apply_state(doc, "17 - Gender", "X") == "X"
        assert doc.applied["17 - Gender"] == "X"

    def test_multi_unknown_label_applies_nothing(self):
        doc = RecordingDocument({"17 - Gender": ["Male", "Female", "X"]})
        with pytest.raises(WidgetStateError):
            apply_state(doc, "17 - Gender", "Other")
        assert doc.applied == {}
