from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import func
from typing import Any, List, Mapping, Optional
import logging

from catalog.models.product import Product
from catalog.schemas.product import ProductCandidate, validate_product

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations.

    This service is the only writer of the products table. It handles:
    - Validating submitted fields before any write
    - Creating new products
    - Reading products
    - Replacing all mutable fields of a product
    - Deleting products

    Every mutation is committed before the method returns; on a database
    error the session is rolled back and the error propagates.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Product]:
        """Get every product in creation order."""
        return self.db.query(Product).order_by(Product.id.asc()).all()

    def count(self) -> int:
        return self.db.query(Product).count()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """
        Get a product by ID.

        Args:
            product_id: Product ID to look up

        Returns:
            Product instance or None if not found
        """
        return self.db.query(Product).filter(Product.id == product_id).first()

    def create(self, data: Mapping[str, Any]) -> Product:
        """
        Create a new product.

        Args:
            data: Submitted product fields

        Returns:
            Created product instance

        Raises:
            ProductValidationError: If any field is invalid; nothing is written
        """
        candidate = validate_product(data)
        product = Product(**self._column_values(candidate))

        try:
            self.db.add(product)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating product: {e}")
            raise

        self.db.refresh(product)
        logger.info(f"Product #{product.id} created")
        return product

    def update(self, product_id: int, data: Mapping[str, Any]) -> Optional[Product]:
        """
        Replace every mutable field of an existing product.

        Args:
            product_id: ID of product to update
            data: Submitted product fields (full replacement, not a patch)

        Returns:
            Updated product or None if not found

        Raises:
            ProductValidationError: If any field is invalid; the row is unchanged
        """
        product = self.get_by_id(product_id)

        if not product:
            return None

        candidate = validate_product(data)

        try:
            for field, value in self._column_values(candidate).items():
                setattr(product, field, value)
            # Always touch updated_at, even when no submitted value changed
            product.updated_at = func.now()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating product #{product_id}: {e}")
            raise

        self.db.refresh(product)
        logger.info(f"Product #{product_id} updated")
        return product

    def delete(self, product_id: int) -> bool:
        """
        Delete a product.

        Args:
            product_id: ID of product to delete

        Returns:
            True if deleted, False if not found
        """
        product = self.get_by_id(product_id)

        if not product:
            return False

        try:
            self.db.delete(product)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting product #{product_id}: {e}")
            raise

        logger.info(f"Product #{product_id} deleted")
        return True

    @staticmethod
    def _column_values(candidate: ProductCandidate) -> dict:
        return {
            "name": candidate.name,
            "description": candidate.description,
            "price": candidate.price,
            "stock": candidate.stock,
            "image_url": candidate.image_url,
        }
