"""GridRenderer 预览测试"""

from termlayout.layout.models import Pane, Template
from termlayout.layout.preview import (
    EMPTY_COMMAND,
    SELECTED_MARKER,
    GridRenderer,
    PreviewBox,
    layout_extents,
    map_box,
    render_preview,
)
from termlayout.layout.splitter import split_pane


class TestMapBox:
    def test_full_grid(self):
        pane = Pane(id=1, width=100, height=100)
        assert map_box(pane, 100, 100) == PreviewBox(pane_id=1, r0=0, r1=12, c0=0, c1=48)

    def test_degenerate_box_expanded(self):
        pane = Pane(id=3, width=1, height=1)
        assert map_box(pane, 100, 100) == PreviewBox(pane_id=3, r0=0, r1=3, c0=0, c1=6)

    def test_expansion_clipped_to_canvas(self):
        pane = Pane(id=2, row=99, col=99, width=1, height=1)
        box = map_box(pane, 100, 100)
        assert box.r1 <= 12
        assert box.c1 <= 48

    def test_extents_scale_to_used_area(self):
        panes = [Pane(id=1, width=10, height=10)]
        assert layout_extents(panes) == (10, 10)
        assert map_box(panes[0], 10, 10) == PreviewBox(pane_id=1, r0=0, r1=12, c0=0, c1=48)


class TestGridRenderer:
    """画布绘制测试"""

    def test_single_pane(self):
        preview = render_preview(Template.new_root("t").panes)
        lines = preview.to_text().split("\n")

        assert len(lines) == 12
        assert all(len(line) == 48 for line in lines)
        assert lines[0] == "┌" + "─" * 46 + "┐"
        assert lines[11] == "└" + "─" * 46 + "┘"
        assert lines[1].startswith("│" + EMPTY_COMMAND)
        assert lines[1].endswith("│")

    def test_selected_pane_heavy_with_marker(self):
        preview = render_preview(Template.new_root("t").panes, selected_id=1)
        lines = preview.to_text().split("\n")

        assert lines[0] == "╔" + "═" * 46 + "╗"
        assert lines[1][45] == SELECTED_MARKER
        assert lines[5][0] == "║"

    def test_side_by_side(self):
        template = Template.new_root("t")
        split_pane(template, 0, "right")
        template.panes[1].command = "htop"

        lines = render_preview(template.panes).to_text().split("\n")

        box = "┌" + "─" * 22 + "┐"
        assert lines[0] == box + box
        assert lines[1][25:29] == "htop"

    def test_label_truncated_to_interior(self):
        template = Template.new_root("t")
        template.panes[0].command = "x" * 60

        line = render_preview(template.panes).to_text().split("\n")[1]

        assert line == "│" + "x" * 46 + "│"

    def test_owners_track_last_writer(self):
        template = Template.new_root("t")
        split_pane(template, 0, "down")

        preview = render_preview(template.panes)

        assert preview.owners[0][0] == 1
        assert preview.owners[11][0] == 2
        assert preview.owners[3][10] == 0

    def test_empty_panes(self):
        preview = GridRenderer(rows=4, cols=10).render([])
        assert preview.to_text() == "\n".join([" " * 10] * 4)
        assert preview.boxes == []

    def test_rich_text_matches_plain(self):
        template = Template.new_root("t")
        split_pane(template, 0, "right")

        preview = render_preview(template.panes, selected_id=2)

        assert preview.to_rich().plain == preview.to_text()
