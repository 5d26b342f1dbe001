import pytest

import config
from quiz_shell import QuizShell, render_tokens


def run_shell(engine, make_console, lines):
    io = make_console(lines)
    QuizShell(engine, io).run()
    return io


def test_help_and_credits(engine, make_console):
    io = run_shell(engine, make_console, ["help", "credits", "q"])
    assert "show <id>" in io.text
    for name in config.CREDITS:
        assert name in io.text
    assert io.output[-1] == "👋 Bye!"


def test_list_and_show(engine, capitals, make_console):
    io = run_shell(engine, make_console, ["list", f"show {capitals[1].id}", "quit"])
    assert f"[{capitals[0].id}]: Capital of Italy" in io.output
    assert f"[{capitals[1].id}]: Capital of France => Paris" in io.output


def test_unknown_command_is_reported(engine, make_console):
    io = run_shell(engine, make_console, ["", "fly away", "q"])
    assert "Error: Unknown command: 'fly'" in io.output
    assert "Use 'help' to see all available commands." in io.output
    assert io.output[-1] == "👋 Bye!"


@pytest.mark.parametrize("line, message", [
    ("show", "Missing parameter <id>."),
    ("delete abc", "is not a number"),
    ("test 99", "There is no quiz with id=99."),
    ("edit 99", "There is no quiz with id=99."),
])
def test_errors_keep_the_loop_alive(engine, make_console, line, message):
    io = run_shell(engine, make_console, [line, "credits", "q"])
    errors = [o for o in io.output if o.startswith("Error: ")]
    assert len(errors) == 1 and message in errors[0]
    assert " Authors:" in io.output


def test_add_and_edit(engine, make_console):
    io = run_shell(engine, make_console, [
        "add", "Capital of Peru", "Lima",
        "edit 1", "Capital of Chile", "Santiago",
        "show 1", "q",
    ])
    assert "[1]: Capital of Chile => Santiago" in io.output
    assert any("current: Capital of Peru" in p for p in io.prompts)


def test_add_blank_answer(engine, make_console):
    io = run_shell(engine, make_console, ["add", "Capital of Peru", "  ", "q"])
    assert "The answer must not be empty." in io.text
    assert engine.list() == []


def test_delete(engine, capitals, make_console):
    io = run_shell(engine, make_console, [f"delete {capitals[0].id}", "q"])
    assert f"🗑️ Deleted quiz {capitals[0].id}." in io.output
    assert len(engine.list()) == 2


def test_test_command(engine, capitals, make_console):
    io = run_shell(engine, make_console, [
        f"test {capitals[1].id}", "  paris ",
        f"test {capitals[1].id}", "Lyon",
        "q",
    ])
    assert "Question: Capital of France" in io.output
    assert "✅ correct" in io.output
    assert "❌ incorrect" in io.output


def test_play_win(engine, make_console):
    for q in ("Q1", "Q2", "Q3"):
        engine.add(q, "yes")
    io = run_shell(engine, make_console, ["play", "yes", "YES", " yes ", "q"])
    asked = [o for o in io.output if o.startswith("Question: ")]
    assert sorted(asked) == ["Question: Q1", "Question: Q2", "Question: Q3"]
    assert "🎯 All questions answered. End of the game. Score: 3" in io.output


def test_play_loss(engine, make_console):
    for q in ("Q1", "Q2", "Q3"):
        engine.add(q, "yes")
    io = run_shell(engine, make_console, ["p", "yes", "no", "q"])
    assert len([o for o in io.output if o.startswith("Question: ")]) == 2
    assert "✅ Correct answer. Score: 1" in io.output
    assert "❌ Wrong answer. End of the game. Score: 1" in io.output


def test_play_empty(engine, make_console):
    io = run_shell(engine, make_console, ["play", "q"])
    assert "❌ There are no quizzes to play." in io.output
    assert not any(o.startswith("Question: ") for o in io.output)


def test_closing_input_mid_play_ends_the_session(engine, capitals, make_console):
    io = make_console(["play"])
    shell = QuizShell(engine, io)
    shell.run()
    assert shell.running is False
    assert len([o for o in io.output if o.startswith("Question: ")]) == 1


def test_render_tokens(monkeypatch):
    assert render_tokens("a\\nb") == "a\nb"
    assert render_tokens("{RED}hot{RESET}") == "hot"
    assert render_tokens("{NOT_A_COLOR}") == "{NOT_A_COLOR}"
    monkeypatch.setattr(config, "COLOR", True)
    assert render_tokens("{RED}hot") == config.RED + "hot"
