# tests/test_main.py

from unittest.mock import patch

from main import main
from problem_finder.domain.models import ProblemRecord
from problem_finder.infrastructure.problem_table import write_problem_records


def _write_raw_table(data_dir):
    write_problem_records(data_dir / "codeforce" / "problems.csv", [
        ProblemRecord(name="Two Sum", url="https://example.com/two-sum", text="array hashmap lookup"),
        ProblemRecord(name="Binary Search", url="https://example.com/binary-search", text="sorted array search"),
    ])


def test_interactive_loop_runs_each_query_until_stopped(tmp_path):
    _write_raw_table(tmp_path)
    assert main(["--data-dir", str(tmp_path), "index"]) == 0

    with patch("main.prompt_for_query", side_effect=["binary search", "dijkstra"]), \
            patch("main.ask_continue", side_effect=[True, False]), \
            patch("main.display_welcome_banner"), \
            patch("main.display_statuses"), \
            patch("main.display_results") as display_results:
        assert main(["--data-dir", str(tmp_path)]) == 0

    assert display_results.call_count == 2
    first_query, first_results = display_results.call_args_list[0].args
    assert first_query == "binary search"
    assert first_results[0].name == "Binary Search"
    assert display_results.call_args_list[1].args == ("dijkstra", [])


def test_search_command_limits_results(tmp_path):
    _write_raw_table(tmp_path)
    main(["--data-dir", str(tmp_path), "index"])

    with patch("main.display_results") as display_results:
        assert main(["--data-dir", str(tmp_path), "search", "sum search", "-n", "1"]) == 0

    query, results = display_results.call_args.args
    assert query == "sum search"
    assert len(results) == 1


def test_index_without_data_fails(tmp_path):
    with patch("main.display_error") as display_error:
        assert main(["--data-dir", str(tmp_path), "index"]) == 1

    display_error.assert_called_once()
