"""Tests for the decoded payload buffer."""

from prt7_decoder.models.payload import PayloadSequence


def test_render_empty():
    """Rendering before any append yields an empty message."""
    assert PayloadSequence().render() == ""


def test_append_order():
    payload = PayloadSequence()
    for c in "HELLO WORLD":
        payload.append(c)
    assert payload.render() == "HELLO WORLD"
    assert len(payload) == 11


def test_render_does_not_consume():
    """Rendering can be repeated and further appends extend the message."""
    payload = PayloadSequence()
    payload.append("A")
    assert payload.render() == "A"
    assert payload.render() == "A"
    payload.append("B")
    assert payload.render() == "AB"
