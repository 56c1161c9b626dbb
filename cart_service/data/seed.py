# cart_service/data/seed.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from cart_service.data.database import Base, create_db_engine, create_session_factory
from cart_service.data.models.product import ProductModel
from cart_service.utils.logging import configure_logging, get_logger
from cart_service.utils.settings import load_settings

logger = get_logger(__name__)

#dev catalog, prices in cents
PRODUCTS = [
    {"id": "keyboard", "name": "Keyboard", "price_cents": 19999},
    {"id": "mouse", "name": "Mouse", "price_cents": 4950},
    {"id": "monitor", "name": "Monitor", "price_cents": 89900},
]


def seed_products(db: Session) -> int:
    # not forcing: only seed if empty
    if db.execute(select(ProductModel.id).limit(1)).first():
        return 0

    db.add_all(ProductModel(**p) for p in PRODUCTS)
    db.commit()
    logger.info(f"Seeded {len(PRODUCTS)} products")
    return len(PRODUCTS)


def main():
    settings = load_settings()
    configure_logging(settings.log_level)

    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)

    db = create_session_factory(engine)()
    try:
        seed_products(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
