# tests/test_indexing_service.py

import pytest
from problem_finder.application.indexing_service import IndexingService
from problem_finder.domain.models import ProblemRecord
from problem_finder.infrastructure.artifact_store import PlatformArtifactStore
from problem_finder.infrastructure.problem_table import read_problem_records, write_problem_records


RAW_CSV = (
    "Name,URL,Tag,Difficulty,Text\n"
    "Graph Coloring,https://cf/1,graphs,1200,\"Colour the $n$ vertices\n of a graph\"\n"
    "Binary Search,https://cf/2,search,800,Locate a value in a sorted array\n"
)


@pytest.fixture
def store(tmp_path):
    return PlatformArtifactStore(tmp_path / "codeforce")


def test_run_cleans_and_trains(store):
    store.platform_dir.mkdir(parents=True)
    store.raw_problem_table_path.write_text(RAW_CSV, encoding="utf-8")

    result = IndexingService("Codeforces", store).run()

    assert result.success
    assert result.error is None
    assert result.steps["cleaning"].success
    assert result.steps["cleaning"].stats.valid_problems == 2
    assert result.steps["tfidf"].stats.matrix_rows == 2
    assert store.check().all_ready

    cleaned = read_problem_records(store.problem_table_path)
    assert cleaned[0].text == "Colour the n vertices of a graph"


def test_run_without_raw_table_trains_existing_cleaned_table(store):
    write_problem_records(store.problem_table_path, [
        ProblemRecord(name="Heap Queue", url="u1", text="priority queue"),
        ProblemRecord(name="Tree Paths", url="u2", text="count paths"),
    ])

    result = IndexingService("Codeforces", store).run()

    assert result.success
    assert not result.steps["cleaning"].success
    assert result.steps["cleaning"].error == "Input file not found"
    assert result.steps["tfidf"].success


def test_run_with_cleaning_disabled(store):
    write_problem_records(store.problem_table_path, [ProblemRecord(name="Heap", url="u", text="heap")])

    result = IndexingService("Codeforces", store).run(clean=False)

    assert result.success
    assert "cleaning" not in result.steps


def test_run_reports_missing_input(store):
    result = IndexingService("Codeforces", store).run()

    assert not result.success
    assert "not found" in result.error
    assert "tfidf" not in result.steps


def test_train_empty_table_raises(store):
    write_problem_records(store.problem_table_path, [])
    with pytest.raises(ValueError, match="No problems"):
        IndexingService("Codeforces", store).train()


def test_train_matrix_rows_match_problem_rows(store):
    records = [ProblemRecord(name=f"Problem {i}", url=f"u{i}", text="graph") for i in range(7)]
    write_problem_records(store.problem_table_path, records)

    stats = IndexingService("Codeforces", store, title_weight=2).train()

    _, matrix = store.load()
    assert stats.problem_count == 7
    assert stats.documents_processed == 7
    assert matrix.shape[0] == 7
    assert matrix.shape[1] == stats.vocabulary_size
