import argparse
import logging

from rasoi.db.engine import get_engine
from rasoi.db.schema import metadata

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Create the database schema.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="drop every table first (destroys all data)",
    )
    args = parser.parse_args()

    engine = get_engine()
    if args.reset:
        metadata.drop_all(engine)
        logger.warning("Dropped all tables.")
    metadata.create_all(engine)
    logger.info("DB schema created at %s", engine.url.render_as_string(hide_password=True))

if __name__ == "__main__":
    main()
