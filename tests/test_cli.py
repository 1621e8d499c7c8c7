import json

import pytest
from typer.testing import CliRunner
from unittest.mock import patch

from main import app
from config import settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def seeded_settings(monkeypatch):
    monkeypatch.setattr(settings, "seed_sample_data", True)
    monkeypatch.setattr(settings, "removal_policy", "reject")


def test_books_lists_seeded_catalogue_sorted():
    result = runner.invoke(app, ["books"])
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines == [
        "[B002] Clean Code by Robert C. Martin (Available: 2/2)",
        "[B003] Effective Java by Joshua Bloch (Available: 1/1)",
        "[B001] Introduction to Algorithms by Cormen (Available: 3/3)",
    ]

def test_books_empty_library(monkeypatch):
    monkeypatch.setattr(settings, "seed_sample_data", False)
    result = runner.invoke(app, ["books"])
    assert result.exit_code == 0
    assert "No books in library." in result.stdout

def test_books_json_output():
    result = runner.invoke(app, ["--output", "json", "books"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [b["id"] for b in payload] == ["B002", "B003", "B001"]
    assert payload[0]["available_copies"] == 2

def test_members_lists_sorted_by_name():
    result = runner.invoke(app, ["members"])
    assert result.exit_code == 0
    assert result.stdout.strip().splitlines() == [
        "Anjali (M002) - Borrowed: 0",
        "Rishi (M001) - Borrowed: 0",
    ]

def test_search_by_title():
    result = runner.invoke(app, ["search", "clean", "--title"])
    assert result.exit_code == 0
    assert "Clean Code" in result.stdout
    assert "Effective Java" not in result.stdout

def test_search_by_author_no_results():
    result = runner.invoke(app, ["search", "clean", "--author"])
    assert result.exit_code == 0
    assert "No books matched the query." in result.stdout

def test_search_limit():
    result = runner.invoke(app, ["search", "", "--limit", "1"])
    assert result.exit_code == 0
    assert len(result.stdout.strip().splitlines()) == 1

def test_stats():
    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "Total Books: 3" in result.stdout
    assert "Total Copies: 6" in result.stdout
    assert "Members: 2" in result.stdout

def test_menu_borrow_and_return():
    user_input = "\n".join([
        "6", "M001", "B003",   # borrow the only copy
        "6", "M002", "B003",   # nothing left
        "7", "M002", "B003",   # never borrowed it
        "7", "M001", "B003",
        "0",
    ]) + "\n"
    result = runner.invoke(app, [], input=user_input)
    assert result.exit_code == 0
    out = result.stdout
    assert out.index("Borrowed successfully") < out.index("No copies available")
    assert out.index("No copies available") < out.index("Member did not borrow this book")
    assert out.index("Member did not borrow this book") < out.index("Returned successfully")
    assert "Goodbye!" in out

def test_menu_add_book_retries_invalid_copies():
    user_input = "\n".join([
        "1", "B010", "Fluent Python", "Luciano Ramalho", "many", "-1", "2",
        "1", "B010", "Duplicate", "Someone", "1",
        "0",
    ]) + "\n"
    result = runner.invoke(app, [], input=user_input)
    assert result.exit_code == 0
    assert "Book added" in result.stdout
    assert "Enter a valid number (>= 0)." in result.stdout
    assert "Book ID B010 already exists" in result.stdout

def test_menu_remove_member_with_loans_is_refused():
    user_input = "\n".join([
        "6", "M001", "B001",
        "9", "M001",
        "9", "M002",
        "0",
    ]) + "\n"
    result = runner.invoke(app, [], input=user_input)
    assert result.exit_code == 0
    assert "Cannot remove: member still holds B001" in result.stdout
    assert "Removed" in result.stdout

@patch('subprocess.run')
@patch('webbrowser.open')
def test_serve_command(mock_webbrowser_open, mock_subprocess_run):
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 0
    assert "Starting API on" in result.stdout
    mock_webbrowser_open.assert_called_once()
    mock_subprocess_run.assert_called_once()
    args = mock_subprocess_run.call_args[0][0]
    assert "uvicorn" in args
    assert "api:app" in args
    assert "--host" in args
    assert "--port" in args

def test_menu_remove_book_after_confirmation():
    user_input = "\n".join(["8", "B003", "y", "2", "0"]) + "\n"
    result = runner.invoke(app, [], input=user_input)
    assert result.exit_code == 0
    assert "Removed" in result.stdout
    assert "Effective Java" not in result.stdout.split("Removed", 1)[1]

def test_menu_search_and_statistics():
    user_input = "\n".join(["3", "1", "clean", "12", "0"]) + "\n"
    result = runner.invoke(app, [], input=user_input)
    assert result.exit_code == 0
    assert "Clean Code" in result.stdout
    assert "Statistics" in result.stdout
    assert "Active loans:" in result.stdout

def test_search_rejects_non_positive_limit():
    result = runner.invoke(app, ["search", "", "--limit", "-1"])
    assert result.exit_code == 2
    result = runner.invoke(app, ["search", "", "--limit", "0"])
    assert result.exit_code == 2
