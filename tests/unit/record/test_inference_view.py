"""
Unit tests for the read-only Inference view.
"""

import pytest

from htm_inference.record.inference import Inference, InferenceView


def test_view_satisfies_protocol(record):
    assert isinstance(record.as_inference(), Inference)


def test_record_satisfies_protocol(record):
    assert isinstance(record, Inference)


def test_view_of_fresh_record(record):
    view = record.as_inference()

    assert view.sequence_number == 0
    assert view.layer_input is None
    assert view.classifier_input is None
    assert view.classifiers is None
    assert view.sdr is None
    assert view.classification is None
    assert view.anomaly_score is None
    assert view.get_classification("temp") is None


def test_view_reads_through(record, temp_input, result_a):
    view = record.as_inference()
    record.set_sequence_number(4).set_layer_input("foo").set_classifier_input({"temp": temp_input})
    record.set_sdr([1, 2]).set_classification("temp", result_a).set_anomaly_score(0.3)

    assert view.sequence_number == 4
    assert view.layer_input == "foo"
    assert view.classifier_input["temp"] is temp_input
    assert view.sdr == (1, 2)
    assert view.get_classification("temp") is result_a
    assert view.has_classification("temp")
    assert view.anomaly_score == 0.3
    assert view.to_dict() == record.to_dict()


def test_view_has_no_mutators(record):
    view = record.as_inference()

    assert not hasattr(view, "set_sdr")
    assert not hasattr(view, "copy")
    with pytest.raises(AttributeError):
        view.sdr = [1]


def test_view_mappings_are_read_only(record, temp_input, result_a):
    record.set_classifier_input({"temp": temp_input}).set_classifiers({"temp": object()})
    record.set_classification("temp", result_a)
    view = record.as_inference()

    with pytest.raises(TypeError):
        view.classifier_input["humidity"] = temp_input
    with pytest.raises(TypeError):
        view.classification["temp"] = None
    with pytest.raises(TypeError):
        del view.classifiers["temp"]


def test_view_sdr_is_a_snapshot(record):
    sdr = [1, 2]
    record.set_sdr(sdr)
    view_sdr = record.as_inference().sdr
    sdr.append(3)

    assert view_sdr == (1, 2)


def test_repr(record):
    assert repr(record.as_inference()).startswith("InferenceView(InferenceRecord(")


def test_view_type(record):
    assert type(record.as_inference()) is InferenceView
