"""
Interactive quiz shell
- Line-oriented command loop shared by the terminal and the TCP server
- Consoles hide where lines come from (stdin or a socket)
- {TOKEN} color tokens in quiz text are rendered on display only
- Every failure is reported at the prompt, the loop never dies on one
"""

import re
import socket
import logging

from sqlalchemy.exc import SQLAlchemyError

import config
from config import *  # color constants
from quiz_engine import Outcome, validate_id
from quiz_errors import QuizError
from quiz_log import log_action

logger = logging.getLogger("quiz")

_COLOR_TOKEN_RE = re.compile(r"\{[A-Z0-9_]+\}")


def _build_color_map():
    return {
        f"{{{k}}}": v
        for k, v in vars(config).items()
        if k.isupper() and isinstance(v, str) and v.startswith("\033")
    }


_COLOR_MAP = _build_color_map()


def colorize(msg, color=None):
    if color is None or not config.COLOR:
        return str(msg)
    return f"{color}{BOLD}{msg}{RESET}"


def render_tokens(text):
    """Replace {TOKEN} -> ANSI and escaped \\n, \\t in stored quiz text."""
    if not text:
        return text
    text = text.replace("\\n", "\n").replace("\\t", "\t")

    def swap(m):
        token = m.group(0)
        if token not in _COLOR_MAP:
            return token
        return _COLOR_MAP[token] if config.COLOR else ""

    return _COLOR_TOKEN_RE.sub(swap, text)


class SessionClosed(Exception):
    """The user went away (EOF, Ctrl-C or dropped connection)."""


# ----------------- Consoles -----------------
class BaseConsole:
    """Presentation contract: subclasses provide _read() and _emit()."""

    def __init__(self, prompt_text=None):
        self.prompt_text = prompt_text or config.PROMPT

    def _read(self, text):
        raise NotImplementedError

    def _emit(self, text):
        raise NotImplementedError

    def prompt(self):
        return self._read(colorize(self.prompt_text, BRIGHT_GREEN))

    def ask(self, text):
        return self._read(colorize(text, RED))

    def write(self, text="", color=None):
        self._emit(colorize(text, color))

    def error(self, text):
        self._emit(f"{colorize('Error', RED)}: {colorize(text, RED)}")

    def banner(self, text):
        self._emit(f"{colorize('=====', BRIGHT_CYAN)} {colorize(text, BRIGHT_GREEN)} {colorize('=====', BRIGHT_CYAN)}")

    def close(self):
        pass


class Console(BaseConsole):
    """Local terminal."""

    def _read(self, text):
        try:
            return input(text)
        except (KeyboardInterrupt, EOFError):
            return None

    def _emit(self, text):
        print(text)


class SocketConsole(BaseConsole):
    """One connected client; UTF-8 text lines in both directions."""

    def __init__(self, conn, prompt_text=None):
        super().__init__(prompt_text)
        self.conn = conn
        # one file per direction; a shared "rw" text file drops buffered input on write
        self._rfile = conn.makefile("r", encoding="utf-8", newline="")
        self._wfile = conn.makefile("w", encoding="utf-8", newline="")

    def _read(self, text):
        try:
            self._wfile.write(text)
            self._wfile.flush()
            line = self._rfile.readline()
        except (OSError, ValueError, UnicodeDecodeError) as e:
            logger.debug("read failed: %s", e)
            return None
        if not line:
            return None
        return line.rstrip("\r\n")

    def _emit(self, text):
        try:
            self._wfile.write(text + "\n")
            self._wfile.flush()
        except (OSError, ValueError) as e:
            # the next read sees the closed connection and ends the session
            logger.debug("write failed: %s", e)

    def disconnect(self):
        """Wake a blocked read from another thread; the session then ends on EOF."""
        try:
            self.conn.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug("disconnect failed: %s", e)

    def close(self):
        for f in (self._wfile, self._rfile):
            try:
                f.close()
            except OSError as e:
                logger.debug("close failed: %s", e)
        self.disconnect()
        self.conn.close()


# ----------------- Shell -----------------
class QuizShell:
    def __init__(self, engine, io, user=None):
        self.engine = engine
        self.io = io
        self.user = user
        self.running = False
        # name -> (handler, takes <id>)
        self.commands = {
            "h": (self.help_cmd, False),
            "help": (self.help_cmd, False),
            "list": (self.list_cmd, False),
            "show": (self.show_cmd, True),
            "add": (self.add_cmd, False),
            "delete": (self.delete_cmd, True),
            "edit": (self.edit_cmd, True),
            "test": (self.test_cmd, True),
            "p": (self.play_cmd, False),
            "play": (self.play_cmd, False),
            "credits": (self.credits_cmd, False),
            "q": (self.quit_cmd, False),
            "quit": (self.quit_cmd, False),
        }

    # ----------------- Loop -----------------
    def run(self):
        self.running = True
        self.io.banner("CORE Quiz")
        while self.running:
            line = self.io.prompt()
            if line is None:
                break
            self.execute(line)
        self.running = False

    def execute(self, line):
        words = line.split()
        if not words:
            return
        cmd = words[0].lower()
        entry = self.commands.get(cmd)
        if entry is None:
            self.io.error(f"Unknown command: '{words[0]}'")
            self.io.write("Use 'help' to see all available commands.")
            return
        handler, takes_id = entry
        try:
            if takes_id:
                handler(words[1] if len(words) > 1 else None)
            else:
                handler()
        except QuizError as e:
            self.io.error(str(e))
            log_action("ERROR", f"{cmd}: {e}", self.user)
        except (SQLAlchemyError, OSError) as e:
            logger.exception("storage failure on '%s'", cmd)
            self.io.error(f"Storage failure: {e}")
        except SessionClosed:
            log_action("QUIT", f"closed during '{cmd}'", self.user)
            self.running = False

    def _ask(self, text):
        answer = self.io.ask(text)
        if answer is None:
            raise SessionClosed()
        return answer

    def _format(self, record, with_answer=False):
        line = f"[{colorize(record.id, MAGENTA)}]: {render_tokens(record.question)}"
        if with_answer:
            line += f" {colorize('=>', MAGENTA)} {render_tokens(record.answer)}"
        return line

    # ----------------- Commands -----------------
    def help_cmd(self):
        self.io.write(" Commands:")
        self.io.write(" h|help - Show this help.")
        self.io.write(" list - List all quizzes.")
        self.io.write(" show <id> - Show the question and answer of a quiz.")
        self.io.write(" add - Add a new quiz interactively.")
        self.io.write(" delete <id> - Delete a quiz.")
        self.io.write(" edit <id> - Edit a quiz.")
        self.io.write(" test <id> - Try one quiz.")
        self.io.write(" p|play - Play: answer every quiz in random order.")
        self.io.write(" credits - Credits.")
        self.io.write(" q|quit - Quit.")

    def list_cmd(self):
        records = self.engine.list()
        if not records:
            self.io.write("❌ No quizzes yet. Use 'add' to create one.")
        for record in records:
            self.io.write(self._format(record))

    def show_cmd(self, raw_id):
        record = self.engine.show(validate_id(raw_id))
        self.io.write(self._format(record, with_answer=True))

    def add_cmd(self):
        question = self._ask(" Enter a question: ")
        answer = self._ask(" Enter an answer: ")
        record = self.engine.add(question, answer)
        log_action("ADD", f"[{record.id}] Q: {record.question}", self.user)
        self.io.write(f"➕ {colorize('Added', MAGENTA)}: {self._format(record, with_answer=True)}")

    def delete_cmd(self, raw_id):
        quiz_id = validate_id(raw_id)
        self.engine.delete(quiz_id)
        log_action("DELETE", f"[{quiz_id}]", self.user)
        self.io.write(f"🗑️ Deleted quiz {colorize(quiz_id, MAGENTA)}.")

    def edit_cmd(self, raw_id):
        quiz_id = validate_id(raw_id)
        record = self.engine.show(quiz_id)
        question = self._ask(f" Enter the question (current: {record.question}): ")
        answer = self._ask(f" Enter the answer (current: {record.answer}): ")
        record = self.engine.edit(quiz_id, question, answer)
        log_action("EDIT", f"[{quiz_id}] Q: {record.question}", self.user)
        self.io.write(f"✅ Quiz {colorize(quiz_id, MAGENTA)} changed to: {self._format(record, with_answer=True)}")

    def test_cmd(self, raw_id):
        quiz_id = validate_id(raw_id)
        record = self.engine.show(quiz_id)
        self.io.write(f"{colorize('Question:', CYAN)} {render_tokens(record.question)}")
        ok = self.engine.test(quiz_id, self._ask("Answer: "))
        log_action("TEST", f"[{quiz_id}] {'correct' if ok else 'incorrect'}", self.user)
        if ok:
            self.io.write("✅ correct", GREEN)
        else:
            self.io.write("❌ incorrect", RED)

    def play_cmd(self):
        def ask(record):
            self.io.write(f"{colorize('Question:', CYAN)} {render_tokens(record.question)}")
            return self._ask("Answer: ")

        def on_correct(score):
            self.io.write(f"✅ Correct answer. Score: {score}", GREEN)

        result = self.engine.play(ask, on_correct)
        if result.outcome is Outcome.EMPTY:
            self.io.write("❌ There are no quizzes to play.")
        elif result.outcome is Outcome.LOSS:
            self.io.write(f"❌ Wrong answer. End of the game. Score: {result.score}", RED)
        else:
            self.io.write(f"🎯 All questions answered. End of the game. Score: {result.score}", GREEN)
        log_action("PLAY", f"{result.outcome.value} | score={result.score} | asked={len(result.asked)}", self.user)

    def credits_cmd(self):
        self.io.write(" Authors:")
        for name in config.CREDITS:
            self.io.write(f" {name}", GREEN)

    def quit_cmd(self):
        log_action("QUIT", "", self.user)
        self.io.write("👋 Bye!")
        self.running = False
