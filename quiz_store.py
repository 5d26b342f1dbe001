"""
Storage providers for quiz records.

Three interchangeable backends share one small interface:
- MemoryStore: records live in a dict for the life of the process
- CsvStore: one CSV file, rewritten on every change
- SqlStore: a SQLAlchemy table (sqlite by default)

Every provider serializes its own operations with a lock (or a session per
call for SQL) so a served quiz can share one store between connections.
"""

import os
import csv
import threading
from dataclasses import dataclass

from sqlalchemy import Column, Integer, Text, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool


@dataclass
class QuizRecord:
    id: int
    question: str
    answer: str


class QuizStore:
    """Interface consumed by the engine. Returned records are copies."""

    def find_all(self):
        raise NotImplementedError

    def find_by_id(self, quiz_id):
        raise NotImplementedError

    def create(self, question, answer):
        raise NotImplementedError

    def delete_by_id(self, quiz_id):
        raise NotImplementedError

    def update(self, record):
        raise NotImplementedError

    def count(self):
        return len(self.find_all())

    def seed(self, pairs):
        """Load default quizzes, only if the store is still empty."""
        if self.count():
            return 0
        for question, answer in pairs:
            self.create(question, answer)
        return len(pairs)

    def close(self):
        pass


# ----------------- In memory -----------------
class MemoryStore(QuizStore):
    def __init__(self):
        self._records = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def find_all(self):
        with self._lock:
            return [QuizRecord(r.id, r.question, r.answer) for r in self._records.values()]

    def find_by_id(self, quiz_id):
        with self._lock:
            r = self._records.get(quiz_id)
            return QuizRecord(r.id, r.question, r.answer) if r else None

    def create(self, question, answer):
        with self._lock:
            record = QuizRecord(self._next_id, question, answer)
            self._records[record.id] = record
            self._next_id += 1
            return QuizRecord(record.id, question, answer)

    def delete_by_id(self, quiz_id):
        with self._lock:
            return self._records.pop(quiz_id, None) is not None

    def update(self, record):
        with self._lock:
            stored = self._records.get(record.id)
            if stored is None:
                return None
            stored.question = record.question
            stored.answer = record.answer
            return QuizRecord(stored.id, stored.question, stored.answer)

    def count(self):
        with self._lock:
            return len(self._records)


# ----------------- CSV file -----------------
class CsvStore(QuizStore):
    FIELDS = ["id", "question", "answer"]

    def __init__(self, path):
        self.path = path
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        self._lock = threading.Lock()
        self._cache = None  # list of QuizRecord, invalidated on save
        self._last_id = 0  # highest id ever handed out; deleted ids are not reused

    def _load(self):
        if self._cache is not None:
            return self._cache
        data = []
        if os.path.exists(self.path):
            with open(self.path, encoding="utf-8-sig") as f:
                pending = []
                for r in csv.DictReader(f):
                    question = (r.get("question") or "").strip()
                    answer = (r.get("answer") or "").strip()
                    qid = (r.get("id") or "").strip()
                    if qid.isdecimal():
                        data.append(QuizRecord(int(qid), question, answer))
                    else:
                        pending.append((question, answer))
                # rows without an id get the next free one
                next_id = max((r.id for r in data), default=0) + 1
                for question, answer in pending:
                    data.append(QuizRecord(next_id, question, answer))
                    next_id += 1
        self._last_id = max([self._last_id] + [r.id for r in data])
        self._cache = data
        return data

    def _save(self, data):
        data_sorted = sorted(data, key=lambda r: r.id)
        with open(self.path, "w", encoding="utf-8-sig", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(self.FIELDS)
            for r in data_sorted:
                writer.writerow([r.id, r.question, r.answer])
        self._cache = None

    def find_all(self):
        with self._lock:
            return [QuizRecord(r.id, r.question, r.answer) for r in self._load()]

    def find_by_id(self, quiz_id):
        with self._lock:
            for r in self._load():
                if r.id == quiz_id:
                    return QuizRecord(r.id, r.question, r.answer)
            return None

    def create(self, question, answer):
        with self._lock:
            data = list(self._load())
            self._last_id += 1
            record = QuizRecord(self._last_id, question, answer)
            data.append(record)
            self._save(data)
            return QuizRecord(record.id, question, answer)

    def delete_by_id(self, quiz_id):
        with self._lock:
            data = list(self._load())
            kept = [r for r in data if r.id != quiz_id]
            if len(kept) == len(data):
                return False
            self._save(kept)
            return True

    def update(self, record):
        with self._lock:
            data = [QuizRecord(r.id, r.question, r.answer) for r in self._load()]
            for r in data:
                if r.id == record.id:
                    r.question = record.question
                    r.answer = record.answer
                    self._save(data)
                    return QuizRecord(r.id, r.question, r.answer)
            return None


# ----------------- SQL table -----------------
Base = declarative_base()


class Quiz(Base):
    __tablename__ = "quizzes"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)

    def to_record(self):
        return QuizRecord(self.id, self.question, self.answer)


class SqlStore(QuizStore):
    def __init__(self, url):
        options = {}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            options["connect_args"] = {"check_same_thread": False}
            if parsed.database in (None, "", ":memory:"):
                # every thread shares the one in-memory connection
                options["poolclass"] = StaticPool
            else:
                folder = os.path.dirname(parsed.database)
                if folder:
                    os.makedirs(folder, exist_ok=True)
        self.engine = create_engine(url, echo=False, **options)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def find_all(self):
        with self.SessionLocal() as db:
            return [q.to_record() for q in db.query(Quiz).order_by(Quiz.id).all()]

    def find_by_id(self, quiz_id):
        with self.SessionLocal() as db:
            quiz = db.get(Quiz, quiz_id)
            return quiz.to_record() if quiz else None

    def create(self, question, answer):
        with self.SessionLocal() as db:
            quiz = Quiz(question=question, answer=answer)
            db.add(quiz)
            db.commit()
            db.refresh(quiz)
            return quiz.to_record()

    def delete_by_id(self, quiz_id):
        with self.SessionLocal() as db:
            removed = db.query(Quiz).filter(Quiz.id == quiz_id).delete()
            db.commit()
            return removed > 0

    def update(self, record):
        with self.SessionLocal() as db:
            quiz = db.get(Quiz, record.id)
            if quiz is None:
                return None
            quiz.question = record.question
            quiz.answer = record.answer
            db.commit()
            db.refresh(quiz)
            return quiz.to_record()

    def count(self):
        with self.SessionLocal() as db:
            return db.query(Quiz).count()

    def close(self):
        self.engine.dispose()
