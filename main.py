import sys
import argparse

import config
from quiz_engine import QuizEngine
from quiz_log import log_action, setup_logging
from quiz_server import QuizServer
from quiz_shell import Console, QuizShell
from quiz_store import CsvStore, MemoryStore, SqlStore


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive quiz trainer.")
    parser.add_argument("--store", choices=["memory", "csv", "sql"], default="sql",
                        help="where quizzes are kept (default: sql)")
    parser.add_argument("--csv", default=config.CSV_FILE, help="CSV file for --store csv")
    parser.add_argument("--db", default=config.DB_URL, help="SQLAlchemy URL for --store sql")
    parser.add_argument("--serve", action="store_true", help="serve the quiz over TCP instead of the terminal")
    parser.add_argument("--host", default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    parser.add_argument("--log-dir", default=config.LOG_DIR)
    parser.add_argument("--no-seed", action="store_true", help="do not load the default quizzes into an empty store")
    return parser.parse_args(argv)


def build_store(args):
    if args.store == "memory":
        return MemoryStore()
    if args.store == "csv":
        return CsvStore(args.csv)
    return SqlStore(args.db)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_dir)
    store = build_store(args)
    try:
        if not args.no_seed:
            store.seed(config.SEED_QUIZZES)
        engine = QuizEngine(store)
        log_action("START", f"store={args.store} serve={args.serve}")

        if args.serve:
            server = QuizServer(engine, args.host, args.port)
            host, port = server.bind()
            print(f"Quiz server listening on {host}:{port} (Ctrl-C to stop)")
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                print("\nStopping.")
            finally:
                server.shutdown()
        else:
            QuizShell(engine, Console()).run()
    finally:
        store.close()
    return 0


# Entry
if __name__ == "__main__":
    sys.exit(main())
