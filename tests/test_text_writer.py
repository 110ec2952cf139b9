"""
Tests for the .lab writer.
"""

from statelabel.config import LabelConfig
from statelabel.labels import Label, StateLabelProvider, StateLabelText
from statelabel.providers import End, Initial


class FixedLabels(StateLabelProvider):
    """Labels state n with the labels given for n."""

    def __init__(self, by_state):
        self.by_state = by_state

    def get_state_labels(self, search):
        return self.by_state.get(search.state_id)


def _writer(tmp_path, providers):
    return StateLabelText(LabelConfig.from_dict({"label": {"output_dir": str(tmp_path)}}), providers)


def test_empty_run_writes_header_only(tmp_path, search):
    writer = _writer(tmp_path, [])
    writer.search_started(search)
    writer.search_finished(search)

    assert (tmp_path / "sut.lab").read_text() == "\n"


def test_initial_only(tmp_path, search):
    """init on the initial state: header 0="init" and the single line -1: 0."""
    writer = _writer(tmp_path, [Initial()])
    writer.search_started(search)
    search.advance(writer, 0)
    search.advance(writer, 1, end=True)
    writer.search_finished(search)

    assert (tmp_path / "sut.lab").read_text() == '0="init" \n-1: 0\n'


def test_states_list_indices_ascending(tmp_path, search):
    a, b, c = Label("a", "A"), Label("b", "B"), Label("c", "C")
    writer = _writer(tmp_path, [FixedLabels({0: {c}, 1: {a}, 2: {b, a, c}})])
    writer.search_started(search)
    search.advance(writer, 0)
    search.advance(writer, 1)
    search.advance(writer, 2)
    writer.search_finished(search)

    lines = (tmp_path / "sut.lab").read_text().splitlines()
    assert lines[0] == '0="c" 1="a" 2="b" '
    assert lines[1:] == ["0: 0", "1: 1", "2: 0 1 2"]


def test_revisited_state_is_not_relabeled(tmp_path, search):
    writer = _writer(tmp_path, [Initial(), End()])
    writer.search_started(search)
    search.advance(writer, 0, end=True)
    search.backtrack(writer, -1)
    search.advance(writer, 0, new=False, end=True)
    writer.search_finished(search)

    assert (tmp_path / "sut.lab").read_text() == '0="init" 1="end" \n-1: 0\n0: 1\n'


def test_constraint_hit_names_file_after_constraint(tmp_path, search):
    writer = _writer(tmp_path, [Initial()])
    writer.search_started(search)
    search.search_constraint = "depth"
    writer.search_constraint_hit(search)

    assert (tmp_path / "sut_depth.lab").read_text() == '0="init" \n-1: 0\n'
    assert not (tmp_path / "sut.lab").exists()


def test_unwritable_output_terminates_search(tmp_path, search):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    writer = StateLabelText(
        LabelConfig.from_dict({"label.output_dir": str(blocker / "out")}), [Initial()]
    )
    writer.search_started(search)
    writer.search_finished(search)

    assert search.terminated


def test_header_renders_label_names_not_descriptions(tmp_path, search):
    writer = _writer(tmp_path, [FixedLabels({-1: {Label("short", "A long description")}})])
    writer.search_started(search)
    writer.search_finished(search)

    assert (tmp_path / "sut.lab").read_text().splitlines()[0] == '0="short" '
