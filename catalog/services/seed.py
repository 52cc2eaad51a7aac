import logging

from sqlalchemy.orm import Session

from catalog.services.product_service import ProductService

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Laptop",
        "description": "High-performance laptop with Intel Core i7, 16GB RAM, and 512GB SSD",
        "price": "1299.99",
        "stock": 15,
        "imageUrl": "https://images.unsplash.com/photo-1496181133206-80ce9b88a853?q=80&w=2071&auto=format&fit=crop",
    },
    {
        "name": "Smartphone",
        "description": "Latest model with 6.7-inch OLED display, 128GB storage, and dual camera",
        "price": "899.99",
        "stock": 25,
        "imageUrl": "https://images.unsplash.com/photo-1598327105666-5b89351aff97?q=80&w=2127&auto=format&fit=crop",
    },
    {
        "name": "Wireless Headphones",
        "description": "Noise-canceling headphones with 30-hour battery life",
        "price": "199.99",
        "stock": 40,
        "imageUrl": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?q=80&w=2070&auto=format&fit=crop",
    },
]


def seed_sample_data(db: Session) -> int:
    """
    Insert the sample products when the catalog is empty.

    Returns:
        Number of products created (0 if the table already had rows)
    """
    service = ProductService(db)
    if service.count() > 0:
        logger.info("Products table is not empty, skipping sample data")
        return 0

    for data in SAMPLE_PRODUCTS:
        service.create(data)

    logger.info(f"Sample data created: {len(SAMPLE_PRODUCTS)} products")
    return len(SAMPLE_PRODUCTS)
