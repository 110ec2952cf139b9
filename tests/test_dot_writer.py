"""
Tests for the Graphviz writer and the legend.
"""

from statelabel.config import LabelConfig
from statelabel.labels import Label, StateLabelDot, StateLabelProvider, color_of
from statelabel.providers import AllDifferent, End, Initial


class FixedLabels(StateLabelProvider):
    def __init__(self, by_state):
        self.by_state = by_state

    def get_state_labels(self, search):
        return self.by_state.get(search.state_id)


def _writer(tmp_path, providers):
    return StateLabelDot(LabelConfig.from_dict({"label": {"output_dir": str(tmp_path)}}), providers)


def test_edges_follow_cursor_through_backtracking(tmp_path, search):
    writer = _writer(tmp_path, [])
    writer.search_started(search)
    search.advance(writer, 0)
    search.advance(writer, 1, end=True)
    search.backtrack(writer, 0)
    search.advance(writer, 2)
    search.advance(writer, 1, new=False, end=True)
    writer.search_finished(search)

    assert (tmp_path / "sut.dot").read_text() == (
        "digraph statespace {\n"
        'node [colorscheme="set312" style=wedged]\n'
        "-1 -> 0\n"
        "0 -> 1\n"
        "0 -> 2\n"
        "2 -> 1\n"
        "}\n"
    )


def test_restored_moves_cursor_without_edge(tmp_path, search):
    writer = _writer(tmp_path, [])
    writer.search_started(search)
    search.advance(writer, 0)
    search.advance(writer, 1)
    search.state_id = 0
    writer.state_restored(search)
    search.advance(writer, 2)

    assert writer._edges == ["-1 -> 0\n", "0 -> 1\n", "0 -> 2\n"]


def test_single_and_multi_label_nodes(tmp_path, search):
    a, b = Label("a", "A"), Label("b", "B")
    writer = _writer(tmp_path, [FixedLabels({-1: {a}, 0: {b, a}})])
    writer.search_started(search)
    search.advance(writer, 0)
    writer.search_finished(search)

    lines = (tmp_path / "sut.dot").read_text().splitlines()
    assert "-1 [style=filled fillcolor=1]" in lines
    assert '0 [fillcolor="1:2"]' in lines
    # Nodes come before edges
    assert lines.index('0 [fillcolor="1:2"]') < lines.index("-1 -> 0")


def test_computed_colors_past_palette(tmp_path, search):
    writer = _writer(tmp_path, [AllDifferent()])
    writer.search_started(search)
    for state_id in range(13):
        search.advance(writer, state_id)
    writer.search_finished(search)

    text = (tmp_path / "sut.dot").read_text()
    # Label _12 (index 12) is the first with a computed color
    assert f"11 [style=filled fillcolor={color_of(12)}]" in text


def test_legend_written_on_finish(tmp_path, search):
    writer = _writer(tmp_path, [Initial(), End()])
    writer.search_started(search)
    search.advance(writer, 0, end=True)
    writer.search_finished(search)

    assert (tmp_path / "sut_legend.dot").read_text() == (
        "digraph legend {\n"
        'node [colorscheme="set312" shape=plaintext]\n'
        "{ legend_node [\n"
        "label=<\n"
        '<table border="0" cellborder="0" cellspacing="0">\n'
        '<tr><td colspan="2">Legend</td></tr>\n'
        '<tr><td width="35" bgcolor="1"></td><td align="left">initial</td></tr>\n'
        '<tr><td width="35" bgcolor="2"></td><td align="left">end</td></tr>\n'
        "</table>>\n"
        "];}\n"
        "}\n"
    )


def test_legend_escapes_descriptions(tmp_path, search):
    """Qualified names like outer.<locals>.inner must not break the HTML-like label."""
    nested = Label("true__prog_outer__locals__inner__flag", "prog.outer.<locals>.inner:flag = True & more")
    writer = _writer(tmp_path, [FixedLabels({-1: {nested}})])
    writer.search_started(search)
    writer.search_finished(search)

    legend = (tmp_path / "sut_legend.dot").read_text(encoding="utf-8")
    assert '<td align="left">prog.outer.&lt;locals&gt;.inner:flag = True &amp; more</td>' in legend
    assert "<locals>" not in legend


def test_outputs_are_utf8(tmp_path, search):
    writer = _writer(tmp_path, [FixedLabels({-1: {Label("true__prog_gr__e", "prog.größe = True")}})])
    writer.search_started(search)
    writer.search_finished(search)

    raw = (tmp_path / "sut_legend.dot").read_bytes()
    assert "prog.größe = True".encode("utf-8") in raw


def test_no_legend_on_constraint_hit(tmp_path, search):
    writer = _writer(tmp_path, [Initial()])
    writer.search_started(search)
    search.search_constraint = "states"
    writer.search_constraint_hit(search)

    assert (tmp_path / "sut_states.dot").exists()
    assert not (tmp_path / "sut_legend.dot").exists()


def test_output_is_identical_across_runs(tmp_path, search):
    labels = {i: {Label(f"l{j}", f"L{j}") for j in range(i % 4 + 1)} for i in range(10)}
    outputs = []
    for run in range(2):
        out = tmp_path / f"run{run}"
        writer = StateLabelDot(
            LabelConfig.from_dict({"label.output_dir": str(out)}), [FixedLabels(labels)]
        )
        fake = type(search)()
        writer.search_started(fake)
        for state_id in range(10):
            fake.advance(writer, state_id)
        writer.search_finished(fake)
        outputs.append((out / "sut.dot").read_text())
    assert outputs[0] == outputs[1]
