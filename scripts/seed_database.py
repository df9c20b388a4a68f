import logging
import sys
from pathlib import Path

# Run as a plain script from the repository root or from scripts/.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config import Settings  # noqa: E402
from exceptions import DatabaseUnavailableError, SeedDataError  # noqa: E402
from log_config import setup_logging  # noqa: E402
from audit_log import write_audit_log  # noqa: E402
import store  # noqa: E402


logger = logging.getLogger("seed_database")


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    settings = Settings.load()
    setup_logging("seed", settings=settings)

    data_dir = argv[0] if argv else store.seed_dir_default(settings)
    if not settings.mongodb_uri:
        raise SystemExit("MONGODB_URI is required.")

    try:
        data = store.load_seed_dir(data_dir) if Path(data_dir).is_dir() else {}
        if not data:
            logger.info("No seed files in %s, seeding defaults only", data_dir)
        db = store.get_database(settings)
        counts = store.seed_database(db, data)
    except (SeedDataError, DatabaseUnavailableError) as exc:
        raise SystemExit(str(exc))

    write_audit_log(user="cli", module="settings", action="seed", reference=str(data_dir), after=counts)

    print("Seeding completed.")
    for name in sorted(counts):
        print(f"{name}={db[name].count_documents({})}")
    return counts


if __name__ == "__main__":
    main()
