from __future__ import annotations

import io
import json

from dirdrift.compare import compare_trees
from dirdrift.config import CompareConfig
from dirdrift.render import RichProgress, build_console, render_json, render_report


def test_plain_report_lists_both_sides(make_tree) -> None:
    a = make_tree("a", {"x.txt": "hello", "[brackets].txt": "a"})
    b = make_tree("b", {"x.txt": "hello"})
    report = compare_trees(a, b, CompareConfig(diff_enabled=True, hashing_enabled=True))
    stream = io.StringIO()

    render_report(report, build_console(stream, color=False))

    assert stream.getvalue() == "only in A:\n[brackets].txt\n\nonly in B:\n\n"


def test_listings_hidden_without_diff_flag(make_tree) -> None:
    a = make_tree("a", {"only-a.txt": "a"})
    b = make_tree("b", {})
    report = compare_trees(a, b, CompareConfig(hashing_enabled=True))
    stream = io.StringIO()

    render_report(report, build_console(stream, color=False))

    assert stream.getvalue() == ""


def test_render_json_is_sorted(make_tree) -> None:
    a = make_tree("a", {"x.txt": "hello"})
    b = make_tree("b", {"x.txt": "hello"})
    stream = io.StringIO()

    render_json(compare_trees(a, b, CompareConfig()), stream)

    payload = json.loads(stream.getvalue())
    assert list(payload.keys()) == sorted(payload.keys())


def test_progress_tracks_each_tree(make_tree) -> None:
    a = make_tree("a", {"1.txt": "1", "2.txt": "2"})
    b = make_tree("b", {"1.txt": "1"})
    console = build_console(io.StringIO(), color=False)

    with RichProgress(console) as progress:
        compare_trees(a, b, CompareConfig(hashing_enabled=True), progress=progress)
        tasks = {task.description: task for task in progress.progress.tasks}

    assert tasks["hashing A"].completed == 2
    assert tasks["hashing B"].completed == 1


def test_emoji_codes_in_names_are_printed_verbatim(make_tree) -> None:
    a = make_tree("a", {"notes:smile:.txt": "a"})
    b = make_tree("b", {})
    report = compare_trees(a, b, CompareConfig(diff_enabled=True))
    stream = io.StringIO()

    render_report(report, build_console(stream, color=False))

    assert stream.getvalue() == "only in A:\nnotes:smile:.txt\n\nonly in B:\n\n"
