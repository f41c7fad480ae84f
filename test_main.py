"""
Tests for the loaders, title resolution, configuration and the command line driver
"""

import io
import json

import pytest
from rich.console import Console

from MovieSearch.config import DEFAULT_CONFIG, load_config
from MovieSearch.loader import load_queries, load_summaries
from MovieSearch.main import MovieSearchCLI, main
from MovieSearch.metadata import IdentityTitleResolver, MetadataTitleResolver


def make_console():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def data_files(tmp_path):
    summaries = tmp_path / "plot_summaries.txt"
    summaries.write_text(
        "doc1\tThe cat sat on the mat\n"
        "doc2\tThe dog sat on the log\n"
        "this line has no separator\n"
        "\n"
        "doc3\tA bird with no metadata row\n",
        encoding="utf-8",
    )
    metadata = tmp_path / "movie_metadata.tsv"
    metadata.write_text(
        "doc1\t/m/01\tThe Cat Movie\t2001\n"
        "doc2\t/m/02\tThe Dog Movie\t2002\n"
        "doc1\t/m/03\tDuplicate Row\t2003\n"
        "short\trow\n",
        encoding="utf-8",
    )
    queries = tmp_path / "search.txt"
    queries.write_text("cat\n\nsat\ncat sat\nzebra\n", encoding="utf-8")
    return summaries, metadata, queries


def test_load_summaries_skips_malformed_lines(data_files):
    summaries, _, _ = data_files
    assert list(load_summaries(str(summaries))) == [
        ("doc1", "The cat sat on the mat"),
        ("doc2", "The dog sat on the log"),
        ("doc3", "A bird with no metadata row"),
    ]


def test_load_queries_skips_blank_lines(data_files):
    _, _, queries = data_files
    assert load_queries(str(queries)) == ["cat", "sat", "cat sat", "zebra"]


def test_metadata_resolver(data_files):
    _, metadata, _ = data_files
    resolver = MetadataTitleResolver.from_tsv(str(metadata))
    assert len(resolver) == 2
    assert resolver.resolve_title("doc1") == "The Cat Movie"
    assert resolver.resolve_title("doc3") is None
    assert resolver.resolve_titles(["doc2", "doc3", "doc1"]) == ["The Dog Movie", "The Cat Movie"]


def test_identity_resolver():
    assert IdentityTitleResolver().resolve_titles(["a", "b"]) == ["a", "b"]


def test_load_config_defaults():
    assert load_config() == DEFAULT_CONFIG


def test_load_config_merges_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"search": {"top_k": 3}, "indexing": {"workers": 2}}), encoding="utf-8")
    config = load_config(str(path))
    assert config["search"]["top_k"] == 3
    assert config["indexing"]["workers"] == 2
    assert config["preprocessing"] == DEFAULT_CONFIG["preprocessing"]


def test_load_config_falls_back_on_bad_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_config(str(broken)) == DEFAULT_CONFIG
    assert load_config(str(tmp_path / "missing.json")) == DEFAULT_CONFIG


def test_main_plain_batch(data_files):
    summaries, metadata, queries = data_files
    console = make_console()
    status = main([
        "--summaries", str(summaries),
        "--metadata", str(metadata),
        "--queries", str(queries),
        "--plain",
    ], console=console)
    output = console.file.getvalue()

    assert status == 0
    assert "cat: The Cat Movie\n" in output
    assert "sat: The Cat Movie, The Dog Movie\n" in output
    # doc3 has no metadata row and is left out of the title list
    assert "cat sat: The Cat Movie, The Dog Movie\n" in output
    assert "zebra:" in output


def test_main_table_output(data_files):
    summaries, metadata, _ = data_files
    console = make_console()
    status = main([
        "--summaries", str(summaries),
        "--metadata", str(metadata),
        "--query", "dog",
        "--query", "unicorn",
    ], console=console)
    output = console.file.getvalue()

    assert status == 0
    assert "The Dog Movie" in output
    assert "No results found for 'unicorn'" in output


def test_main_missing_summaries(tmp_path):
    console = make_console()
    assert main(["--summaries", str(tmp_path / "nope.txt"), "--query", "cat"], console=console) == 1
    assert "Error loading summaries" in console.file.getvalue()


def test_main_missing_queries_file(data_files, tmp_path):
    summaries, _, _ = data_files
    console = make_console()
    assert main(["--summaries", str(summaries), "--queries", str(tmp_path / "nope.txt")], console=console) == 1


def test_cli_requires_engine():
    cli = MovieSearchCLI(config=load_config(), console=make_console())
    assert cli.search("cat") == []
    assert not cli.init_engine()


def test_batch_continues_after_failing_query(data_files, monkeypatch):
    summaries, _, _ = data_files
    cli = MovieSearchCLI(config=load_config(), console=make_console())
    assert cli.load_documents(str(summaries))
    assert cli.init_engine()

    original_rank = cli.engine.rank

    def flaky_rank(query, top_k=None):
        if query == "boom":
            raise RuntimeError("scoring failed")
        return original_rank(query, top_k)

    monkeypatch.setattr(cli.engine, "rank", flaky_rank)
    outcomes = cli.run_batch(["boom", "cat"], plain=True)
    assert outcomes[0] == ("boom", [])
    assert [doc_id for doc_id, _ in outcomes[1][1]] == ["doc1"]


def test_interactive_mode(data_files, monkeypatch):
    summaries, _, _ = data_files
    console = make_console()
    cli = MovieSearchCLI(config=load_config(), console=console)
    cli.load_documents(str(summaries))
    cli.init_engine()

    answers = iter(["cat", "   ", "quit"])
    monkeypatch.setattr(console, "input", lambda prompt="": next(answers))
    cli.interactive_mode()

    output = console.file.getvalue()
    assert "doc1" in output
    assert "Empty query" in output


def test_load_queries_replaces_undecodable_bytes(tmp_path):
    queries = tmp_path / "latin1.txt"
    queries.write_bytes(b"caf\xe9\ncat\n")
    loaded = load_queries(str(queries))
    assert len(loaded) == 2
    assert loaded[0].startswith("caf")
    assert loaded[1] == "cat"


def test_main_table_output_shows_queries_literally(data_files, tmp_path):
    summaries, metadata, _ = data_files
    queries = tmp_path / "markup.txt"
    queries.write_text("[/x]\n[bold]cat\ncat\n", encoding="utf-8")
    console = make_console()
    status = main([
        "--summaries", str(summaries),
        "--metadata", str(metadata),
        "--queries", str(queries),
    ], console=console)
    output = console.file.getvalue()

    assert status == 0
    assert "No results found for '[/x]'" in output
    assert "[bold]cat" in output
    assert "The Cat Movie" in output


def test_main_empty_queries_file_does_not_prompt(data_files, tmp_path, monkeypatch):
    summaries, _, _ = data_files
    queries = tmp_path / "blank.txt"
    queries.write_text("\n   \n", encoding="utf-8")
    console = make_console()

    def no_input(prompt=""):
        raise AssertionError("interactive prompt should not open")

    monkeypatch.setattr(console, "input", no_input)
    assert main(["--summaries", str(summaries), "--queries", str(queries), "--plain"], console=console) == 0
